"""
Record normalization for goals, financial plans and recurring transactions.

Raw records use the API's field names and JavaScript calendar conventions
(dayOfWeek 0 = Sunday, month 0-11). Normalized models use Python ones.
"""

import math
from typing import Any, Optional

from ..config.defaults import GoalDefaults
from ..errors import MalformedGoalError, MissingFieldError
from ..models.goals import MAX_PRIORITY, MIN_PRIORITY, FinancialPlan, Goal
from ..models.recurring import Frequency, RecurringTransaction, TransactionType
from ..utils.dates import format_date, parse_date


def _record_id(raw: dict[str, Any]) -> Optional[str]:
    value = raw.get("_id", raw.get("id"))
    return str(value) if value is not None else None


def _reference_id(value: Any) -> Optional[str]:
    """A reference stored either as an id or as an embedded document."""
    if value is None:
        return None
    if isinstance(value, dict):
        return _record_id(value)
    return str(value)


def _to_float(raw: dict[str, Any], key: str, default: Optional[float] = None) -> float:
    value = raw.get(key)
    if value is None:
        if default is None:
            raise MissingFieldError(f"Missing required field: {key}", field=key)
        return default
    if isinstance(value, bool):
        raise MalformedGoalError(f"Invalid {key}: expected a number", field=key, value=value)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise MalformedGoalError(f"Invalid {key}: {e}", field=key, value=value) from e
    if not math.isfinite(number):
        raise MalformedGoalError(f"Invalid {key}: must be finite", field=key, value=value)
    return number


def _to_int(raw: dict[str, Any], key: str, default: Optional[int] = None) -> Optional[int]:
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise MalformedGoalError(f"Invalid {key}: expected an integer", field=key, value=value)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise MalformedGoalError(f"Invalid {key}: {e}", field=key, value=value) from e
    if not number.is_integer():
        raise MalformedGoalError(f"Invalid {key}: expected an integer", field=key, value=value)
    return int(number)


def _to_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise MalformedGoalError(f"Invalid {key}: expected a boolean", field=key, value=value)
    return value


class GoalNormalizer:
    """
    Record normalization pipeline.

    Every normalize_* method validates the record at the boundary and raises
    a PlanningInputError subclass describing the first problem found.
    """

    def __init__(self, goal_defaults: Optional[GoalDefaults] = None):
        self.goal_defaults = goal_defaults or GoalDefaults()

    def normalize_goal(self, raw: dict[str, Any]) -> Goal:
        """
        Normalize a raw goal record.

        Raises:
            MissingFieldError: If id, title or targetAmount is missing
            MalformedGoalError: If a field has the wrong type or range
            MalformedDateError: If the deadline cannot be parsed
        """
        goal_id = _record_id(raw)
        if goal_id is None:
            raise MissingFieldError("Missing required field: id", field="id")

        title = raw.get("title")
        if title is None:
            raise MissingFieldError("Missing required field: title", field="title")
        if not isinstance(title, str) or not title.strip():
            raise MalformedGoalError("Goal title must be a non-empty string", field="title", value=title)

        target_amount = _to_float(raw, "targetAmount")
        if target_amount <= 0:
            raise MalformedGoalError("targetAmount must be positive", field="targetAmount", value=target_amount)

        current_amount = _to_float(raw, "currentAmount", default=0.0)
        if current_amount < 0:
            raise MalformedGoalError("currentAmount must not be negative", field="currentAmount", value=current_amount)

        monthly_contribution = _to_float(raw, "monthlyContribution", default=0.0)
        if monthly_contribution < 0:
            raise MalformedGoalError(
                "monthlyContribution must not be negative",
                field="monthlyContribution",
                value=monthly_contribution
            )

        priority = _to_int(raw, "priority", default=self.goal_defaults.default_priority)
        if not MIN_PRIORITY <= priority <= MAX_PRIORITY:
            raise MalformedGoalError(
                f"priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}",
                field="priority",
                value=priority
            )

        return Goal(
            id=goal_id,
            title=title.strip(),
            target_amount=target_amount,
            current_amount=current_amount,
            deadline=parse_date(raw.get("deadline")),
            priority=priority,
            monthly_contribution=monthly_contribution,
            auto_redistribute=_to_bool(raw, "autoRedistribute", self.goal_defaults.auto_redistribute),
            is_completed=_to_bool(raw, "isCompleted", False),
            category_id=_reference_id(raw.get("category")),
            color=raw.get("color") or self.goal_defaults.default_color,
        )

    def goal_to_record(self, goal: Goal) -> dict[str, Any]:
        """Convert a goal back into an API record."""
        return {
            "_id": goal.id,
            "title": goal.title,
            "targetAmount": goal.target_amount,
            "currentAmount": goal.current_amount,
            "deadline": format_date(goal.deadline),
            "priority": goal.priority,
            "monthlyContribution": goal.monthly_contribution,
            "autoRedistribute": goal.auto_redistribute,
            "isCompleted": goal.is_completed,
            "category": goal.category_id,
            "color": goal.color,
        }

    def normalize_plan(self, raw: dict[str, Any], base: Optional[FinancialPlan] = None) -> FinancialPlan:
        """
        Normalize a raw financial plan record, filling gaps from base.

        Range checks are left to ConfigValidator.validate_plan.
        """
        base = base or FinancialPlan()
        return FinancialPlan(
            monthly_income=_to_float(raw, "monthlyIncome", default=base.monthly_income),
            savings_percentage=_to_float(raw, "savingsPercentage", default=base.savings_percentage),
            auto_distribute=_to_bool(raw, "autoDistribute", base.auto_distribute),
        )

    def normalize_recurring(self, raw: dict[str, Any]) -> RecurringTransaction:
        """
        Normalize a raw recurring transaction record.

        Raises:
            MissingFieldError: If id, amount, type or category is missing
            MalformedGoalError: If a field has the wrong type or range
            MalformedDateError: If a date field cannot be parsed
        """
        recurring_id = _record_id(raw)
        if recurring_id is None:
            raise MissingFieldError("Missing required field: id", field="id")

        amount = _to_float(raw, "amount")
        if amount <= 0:
            raise MalformedGoalError("amount must be positive", field="amount", value=amount)

        try:
            transaction_type = TransactionType(raw.get("type"))
        except ValueError as e:
            raise MalformedGoalError(f"Invalid type: {raw.get('type')!r}", field="type", value=raw.get("type")) from e

        try:
            frequency = Frequency(raw.get("frequency") or Frequency.MONTHLY.value)
        except ValueError as e:
            raise MalformedGoalError(
                f"Invalid frequency: {raw.get('frequency')!r}",
                field="frequency",
                value=raw.get("frequency")
            ) from e

        category_id = _reference_id(raw.get("category"))
        if category_id is None:
            raise MissingFieldError("Missing required field: category", field="category")

        # JavaScript weekday (0 = Sunday) to Python weekday (0 = Monday)
        js_day_of_week = _to_int(raw, "dayOfWeek")
        if js_day_of_week is not None and not 0 <= js_day_of_week <= 6:
            raise MalformedGoalError("dayOfWeek must be 0-6", field="dayOfWeek", value=js_day_of_week)
        day_of_week = (js_day_of_week - 1) % 7 if js_day_of_week is not None else None

        # JavaScript month (0-11) to calendar month (1-12)
        js_month = _to_int(raw, "month")
        if js_month is not None and not 0 <= js_month <= 11:
            raise MalformedGoalError("month must be 0-11", field="month", value=js_month)
        month = js_month + 1 if js_month is not None else None

        return RecurringTransaction(
            id=recurring_id,
            amount=amount,
            type=transaction_type,
            category_id=category_id,
            frequency=frequency,
            description=raw.get("description"),
            day_of_week=day_of_week,
            day_of_month=_to_int(raw, "dayOfMonth"),
            month=month,
            start_date=parse_date(raw.get("startDate")),
            end_date=parse_date(raw.get("endDate")),
            last_processed=parse_date(raw.get("lastProcessed")),
            auto_generate=_to_bool(raw, "autoGenerate", True),
            require_confirmation=_to_bool(raw, "requireConfirmation", False),
            active=_to_bool(raw, "active", True),
        )
