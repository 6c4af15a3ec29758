"""
Main goal planning engine.

Owns the read-modify-write cycle around the pure planning functions: loads a
user's plan and goals, runs allocation or redistribution, and persists the
goals whose values changed.
"""

import threading
import uuid
from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from .config.defaults import GoalDefaults
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .data.normalizer import GoalNormalizer
from .errors import (
    GoalNotFoundError,
    InvalidPlanError,
    MalformedGoalError,
    RecordNotFoundError,
)
from .logging.config import get_planning_logger, log_allocation, log_redistribution
from .models.goals import FinancialPlan, Goal
from .models.recurring import GenerationBatch, RecurringTransaction
from .models.results import NoopReason, PlanningResult
from .persistence.planner_store import PlannerStore
from .planning.allocator import allocate_with_result
from .planning.contributions import apply_contribution
from .planning.redistributor import redistribute_with_result
from .recurring.schedule import next_occurrences, plan_generation, validate_schedule

logger = structlog.get_logger(__name__)
planning_logger = get_planning_logger(__name__)

PLAN_FIELDS = ("monthly_income", "savings_percentage", "auto_distribute")


class GoalPlanningEngine:
    """
    Coordinator for a user's financial plan and savings goals.

    Re-allocates monthly contributions whenever the plan or the goal set
    changes while auto-distribution is on, and redistributes surplus when a
    goal completes. A lock serializes every read-modify-write cycle.
    """

    def __init__(
        self,
        store: Optional[PlannerStore] = None,
        config_dir: Optional[Union[str, Path]] = None
    ) -> None:
        self.logger = logger
        self.planning_logger = planning_logger

        self.config_loader = ConfigLoader.create(config_dir)
        defaults = self.config_loader.defaults
        self.store = store or PlannerStore(defaults.store.db_path)
        self._lock = threading.RLock()

        self.logger.info("Goal planning engine initialized", db_path=str(self.store.db_path))

    def user_config(self, user_id: str) -> dict[str, Any]:
        """
        Merged configuration for a user.

        Raises:
            InvalidPlanError: If the configuration file holds invalid values
        """
        config = self.config_loader.merge_config(user_id)
        errors = ConfigValidator.validate_config(config)
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            self.logger.error("Configuration validation failed", user_id=user_id, errors=error_msgs)
            raise InvalidPlanError("Invalid planner configuration", errors=errors)
        return config

    def _normalizer(self, config: dict[str, Any]) -> GoalNormalizer:
        return GoalNormalizer(GoalDefaults(**config["goal"]))

    # Financial plan

    def get_plan(self, user_id: str) -> FinancialPlan:
        """Get the user's saved plan or the configured default plan."""
        default = FinancialPlan(**self.user_config(user_id)["plan"])
        return self.store.get_plan(user_id, default=default)

    def update_plan(
        self,
        user_id: str,
        today: Optional[date] = None,
        **changes: Any
    ) -> tuple[FinancialPlan, PlanningResult]:
        """
        Update the financial plan and re-allocate when auto-distribution is on.

        Args:
            user_id: Plan owner
            today: Reference date for deadline math
            **changes: Any of monthly_income, savings_percentage, auto_distribute

        Returns:
            Tuple of (saved plan, allocation result)

        Raises:
            InvalidPlanError: If a change is unknown or out of range
        """
        unknown = sorted(set(changes) - set(PLAN_FIELDS))
        if unknown:
            raise InvalidPlanError(f"Unknown plan fields: {', '.join(unknown)}", context={"fields": unknown})

        errors = ConfigValidator.validate_plan(changes)
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            self.logger.warning("Plan update rejected", user_id=user_id, errors=error_msgs)
            raise InvalidPlanError("Invalid financial plan: " + "; ".join(error_msgs), errors=errors)

        with self._lock:
            current = self.get_plan(user_id)
            plan = FinancialPlan(**{**{f: getattr(current, f) for f in PLAN_FIELDS}, **changes})
            self.store.save_plan(user_id, plan)

            self.logger.info(
                "Financial plan updated",
                user_id=user_id,
                monthly_income=plan.monthly_income,
                savings_percentage=plan.savings_percentage,
                auto_distribute=plan.auto_distribute
            )

            result = self._recalculate(user_id, plan, today=today, force=False)

        return plan, result

    # Allocation and redistribution

    def recalculate_contributions(
        self,
        user_id: str,
        today: Optional[date] = None,
        force: bool = False
    ) -> PlanningResult:
        """
        Re-allocate monthly contributions across the user's active goals.

        Args:
            user_id: Goal owner
            today: Reference date for deadline math
            force: Allocate even when the plan has auto-distribution off
        """
        with self._lock:
            return self._recalculate(user_id, self.get_plan(user_id), today=today, force=force)

    def _recalculate(
        self,
        user_id: str,
        plan: FinancialPlan,
        today: Optional[date],
        force: bool
    ) -> PlanningResult:
        if not plan.auto_distribute and not force:
            return PlanningResult.noop(NoopReason.AUTO_DISTRIBUTE_DISABLED)

        goals = self.store.list_goals(user_id)
        if not goals:
            return PlanningResult.noop(NoopReason.NO_GOALS)

        places = self.user_config(user_id)["rounding"]["currency_places"]
        result = allocate_with_result(goals, plan, today=today, places=places)
        if result.is_noop:
            self.logger.debug("Allocation skipped", user_id=user_id, reason=result.reason.value)
            return result

        changed_ids = set(result.changed_ids)
        changed = [goal for goal in result.goals if goal.id in changed_ids]
        self.store.save_goals(user_id, changed)

        log_allocation(
            self.planning_logger,
            user_id=user_id,
            total_available=plan.savings_pool,
            contributions={g.id: g.monthly_contribution for g in result.goals if g.is_active},
            context={"changed": len(changed), "forced": force}
        )
        return result

    def handle_goal_completion(self, user_id: str, goal_id: str) -> PlanningResult:
        """
        Redistribute a completed goal's surplus across the other active goals.

        Nothing happens when the goal is missing, not completed, opted out of
        redistribution, has no surplus, or there is no recipient.
        """
        with self._lock:
            goals = self.store.list_goals(user_id)
            completed = next((goal for goal in goals if goal.id == goal_id), None)
            if completed is not None and not completed.is_completed:
                return PlanningResult.noop(NoopReason.NOT_COMPLETED, goals)

            result = redistribute_with_result(goals, goal_id)
            if result.is_noop:
                self.logger.info(
                    "Redistribution skipped",
                    user_id=user_id,
                    goal_id=goal_id,
                    reason=result.reason.value
                )
                return result

            changed_ids = set(result.changed_ids)
            recipients = [goal for goal in result.goals if goal.id in changed_ids]
            self.store.save_goals(user_id, recipients)

            before = {goal.id: goal.current_amount for goal in goals}
            log_redistribution(
                self.planning_logger,
                user_id=user_id,
                completed_goal_id=goal_id,
                excess=completed.excess_amount,
                shares={g.id: g.current_amount - before[g.id] for g in recipients}
            )
            return result

    # Goals

    def list_goals(self, user_id: str) -> list[Goal]:
        return self.store.list_goals(user_id)

    def get_goal(self, user_id: str, goal_id: str) -> Goal:
        """
        Raises:
            GoalNotFoundError: If the user has no goal with this id
        """
        goal = self.store.get_goal(user_id, goal_id)
        if goal is None:
            raise GoalNotFoundError(f"Goal not found: {goal_id}", goal_id=goal_id)
        return goal

    def create_goal(self, user_id: str, raw: dict[str, Any], today: Optional[date] = None) -> Goal:
        """
        Create a goal from a raw record and re-allocate when auto-distribution is on.

        A record without an id receives a generated one.

        Raises:
            PlanningInputError: If the record is malformed or the id is taken
        """
        record = dict(raw)
        if record.get("_id") is None and record.get("id") is None:
            record["_id"] = uuid.uuid4().hex

        goal = self._normalizer(self.user_config(user_id)).normalize_goal(record)

        with self._lock:
            # Goal ids are unique across all users
            if self.store.goal_owner(goal.id) is not None:
                raise MalformedGoalError(f"Goal id already exists: {goal.id}", field="id", value=goal.id)

            self.store.save_goal(user_id, goal)
            self.logger.info("Goal created", user_id=user_id, goal_id=goal.id, priority=goal.priority)

            self._recalculate(user_id, self.get_plan(user_id), today=today, force=False)
            return self.get_goal(user_id, goal.id)

    def update_goal(
        self,
        user_id: str,
        goal_id: str,
        changes: dict[str, Any],
        today: Optional[date] = None
    ) -> Goal:
        """
        Apply raw field changes to a goal.

        Re-allocates when auto-distribution is on, unless the change is only a
        manual monthlyContribution override, which is kept as given. Marking
        an active goal completed redistributes its surplus first.

        Raises:
            GoalNotFoundError: If the user has no goal with this id
            PlanningInputError: If the merged record is malformed
        """
        with self._lock:
            existing = self.get_goal(user_id, goal_id)
            normalizer = self._normalizer(self.user_config(user_id))

            record = normalizer.goal_to_record(existing)
            record.update(changes)
            record.pop("id", None)
            record["_id"] = goal_id
            goal = normalizer.normalize_goal(record)

            self.store.save_goal(user_id, goal)
            self.logger.info("Goal updated", user_id=user_id, goal_id=goal_id, fields=sorted(changes))

            if goal.is_completed and not existing.is_completed:
                self.handle_goal_completion(user_id, goal_id)

            if set(changes) != {"monthlyContribution"}:
                self._recalculate(user_id, self.get_plan(user_id), today=today, force=False)
            return self.get_goal(user_id, goal_id)

    def delete_goal(self, user_id: str, goal_id: str, today: Optional[date] = None) -> PlanningResult:
        """
        Delete a goal and re-allocate the remaining ones.

        Raises:
            GoalNotFoundError: If the user has no goal with this id
        """
        with self._lock:
            if not self.store.delete_goal(user_id, goal_id):
                raise GoalNotFoundError(f"Goal not found: {goal_id}", goal_id=goal_id)

            self.logger.info("Goal deleted", user_id=user_id, goal_id=goal_id)
            return self._recalculate(user_id, self.get_plan(user_id), today=today, force=False)

    def add_amount(
        self,
        user_id: str,
        goal_id: str,
        amount: Any,
        today: Optional[date] = None
    ) -> tuple[Goal, PlanningResult]:
        """
        Deposit an amount into a goal.

        When the deposit completes the goal, its surplus is redistributed and
        contributions are re-allocated among the goals still active.

        Returns:
            Tuple of (updated goal, redistribution result); the result is a
            NOT_COMPLETED no-op when the deposit did not complete the goal

        Raises:
            GoalNotFoundError: If the user has no goal with this id
            InvalidAmountError: If amount is not a positive number
        """
        with self._lock:
            goal = self.get_goal(user_id, goal_id)
            updated = apply_contribution(goal, amount)
            self.store.save_goal(user_id, updated)

            self.logger.info(
                "Amount added to goal",
                user_id=user_id,
                goal_id=goal_id,
                amount=amount,
                current_amount=updated.current_amount,
                completed=updated.is_completed
            )

            if goal.is_completed or not updated.is_completed:
                return updated, PlanningResult.noop(NoopReason.NOT_COMPLETED)

            result = self.handle_goal_completion(user_id, goal_id)
            self._recalculate(user_id, self.get_plan(user_id), today=today, force=False)
            return self.get_goal(user_id, goal_id), result

    # Recurring transactions

    def add_recurring(self, user_id: str, raw: dict[str, Any]) -> RecurringTransaction:
        """
        Store a recurring transaction from a raw record.

        Saving under an id the user already has replaces that template.

        Raises:
            PlanningInputError: If the record or its schedule is invalid, or
                the id belongs to another user
        """
        record = dict(raw)
        if record.get("_id") is None and record.get("id") is None:
            record["_id"] = uuid.uuid4().hex

        recurring = self._normalizer(self.user_config(user_id)).normalize_recurring(record)
        validate_schedule(recurring)

        with self._lock:
            owner = self.store.recurring_owner(recurring.id)
            if owner is not None and owner != user_id:
                raise MalformedGoalError(
                    f"Recurring transaction id already exists: {recurring.id}",
                    field="id",
                    value=recurring.id
                )
            self.store.save_recurring(user_id, recurring)

        self.logger.info(
            "Recurring transaction saved",
            user_id=user_id,
            recurring_id=recurring.id,
            frequency=recurring.frequency.value
        )
        return recurring

    def upcoming_occurrences(
        self,
        user_id: str,
        recurring_id: str,
        count: Optional[int] = None,
        from_date: Optional[date] = None
    ) -> list[date]:
        """
        Project the next dates of one of the user's recurring transactions.

        The count defaults to the configured occurrence count and is capped
        at the configured maximum.

        Raises:
            RecordNotFoundError: If the user has no such recurring transaction
        """
        recurring = next(
            (rt for _, rt in self.store.list_recurring(user_id) if rt.id == recurring_id),
            None
        )
        if recurring is None:
            raise RecordNotFoundError(
                f"Recurring transaction not found: {recurring_id}",
                record_type="recurring_transaction",
                record_id=recurring_id
            )

        params = self.user_config(user_id)["recurring"]
        if count is None or count <= 0:
            count = params["default_occurrence_count"]
        count = min(count, params["max_occurrence_count"])

        return next_occurrences(recurring, count=count, from_date=from_date)

    def process_recurring(self, today: Optional[date] = None) -> GenerationBatch:
        """Run the daily generation pass over every user's recurring transactions."""
        with self._lock:
            pairs = self.store.list_recurring()
            owners = {recurring.id: user_id for user_id, recurring in pairs}

            batch = plan_generation([recurring for _, recurring in pairs], today=today)
            for recurring in batch.updated:
                self.store.save_recurring(owners[recurring.id], recurring)

        return batch
