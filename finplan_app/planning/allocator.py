"""
Monthly contribution allocation.

Splits the savings pool of a financial plan across active goals in
proportion to their priority score, then raises each goal with a future
deadline to the monthly amount it needs to finish on time.
"""

from dataclasses import replace
from datetime import date
from typing import Optional

from ..models.goals import FinancialPlan, Goal
from ..models.results import NoopReason, PlanningResult
from ..utils.dates import get_today, months_between
from ..utils.money import round_currency
from .priority import priority_weights


def required_monthly(goal: Goal, today: date) -> Optional[float]:
    """
    Monthly amount needed to reach the target by the deadline.

    Returns None when the goal has no deadline or the deadline is not
    strictly after today. At least one month is always assumed.
    """
    if not goal.has_future_deadline(today):
        return None
    months_left = max(1, months_between(today, goal.deadline))
    return goal.remaining_amount / months_left


def suggest_contribution(
    goal: Goal,
    priority_share: float,
    today: date,
    places: int = 2
) -> float:
    """Larger of the priority share and the deadline requirement, rounded."""
    suggested = priority_share
    required = required_monthly(goal, today)
    if required is not None:
        suggested = max(suggested, required)
    return max(0.0, round_currency(suggested, places))


def allocate(
    goals: list[Goal],
    plan: FinancialPlan,
    today: Optional[date] = None,
    places: int = 2
) -> list[Goal]:
    """
    Compute the suggested monthly contribution of every active goal.

    Args:
        goals: All of a user's goals, completed ones included
        plan: Validated financial plan
        today: Reference date for deadline math, defaults to today
        places: Currency rounding precision

    Returns:
        New list with each goal exactly once in input order; active goals
        carry a fresh monthly_contribution, completed goals are unchanged
    """
    active = [goal for goal in goals if goal.is_active]
    if not active:
        return list(goals)

    today = get_today(today)
    total_available = plan.savings_pool

    suggestions = {
        goal.id: suggest_contribution(goal, fraction * total_available, today, places)
        for goal, fraction in priority_weights(active)
    }

    return [
        replace(goal, monthly_contribution=suggestions[goal.id])
        if goal.is_active else goal
        for goal in goals
    ]


def allocate_with_result(
    goals: list[Goal],
    plan: FinancialPlan,
    today: Optional[date] = None,
    places: int = 2
) -> PlanningResult:
    """Run allocate and report which goals changed, or why nothing did."""
    if not any(goal.is_active for goal in goals):
        return PlanningResult.noop(NoopReason.NO_ACTIVE_GOALS, goals)

    updated = allocate(goals, plan, today=today, places=places)
    changed_ids = [
        new.id for old, new in zip(goals, updated)
        if old.monthly_contribution != new.monthly_contribution
    ]
    return PlanningResult.updated(updated, changed_ids)
