"""Surplus redistribution when a goal completes"""

from dataclasses import replace
from typing import Optional

from ..models.goals import Goal
from ..models.results import NoopReason, PlanningResult
from .priority import priority_weights


def _find_goal(goals: list[Goal], goal_id: str) -> Optional[Goal]:
    return next((goal for goal in goals if goal.id == goal_id), None)


def redistribution_shares(goals: list[Goal], completed_goal_id: str) -> tuple[dict[str, float], Optional[NoopReason]]:
    """
    Amount each recipient receives from a completed goal's surplus.

    Returns:
        Tuple of (shares by goal id, reason). Shares are empty and reason
        explains why whenever nothing is redistributed.
    """
    completed = _find_goal(goals, completed_goal_id)
    if completed is None:
        return {}, NoopReason.GOAL_NOT_FOUND
    if not completed.auto_redistribute:
        return {}, NoopReason.AUTO_REDISTRIBUTE_DISABLED

    excess = completed.current_amount - completed.target_amount
    if excess <= 0:
        return {}, NoopReason.NO_EXCESS

    recipients = [
        goal for goal in goals
        if goal.is_active and goal.id != completed_goal_id
    ]
    if not recipients:
        return {}, NoopReason.NO_RECIPIENTS

    return {goal.id: fraction * excess for goal, fraction in priority_weights(recipients)}, None


def redistribute_on_completion(goals: list[Goal], completed_goal_id: str) -> list[Goal]:
    """
    Spread the surplus of a completed goal across the remaining active goals.

    The completed goal keeps its own current_amount; recipients receive
    priority-weighted shares of the amount above its target. Any situation
    with nothing to redistribute returns an unchanged copy of goals.

    Args:
        goals: All of a user's goals
        completed_goal_id: Id of the goal that just completed

    Returns:
        New list with each goal exactly once in input order
    """
    return redistribute_with_result(goals, completed_goal_id).goals


def redistribute_with_result(goals: list[Goal], completed_goal_id: str) -> PlanningResult:
    """Run the redistribution and report which goals received a share."""
    shares, reason = redistribution_shares(goals, completed_goal_id)
    if reason is not None:
        return PlanningResult.noop(reason, goals)

    updated = [
        replace(goal, current_amount=goal.current_amount + shares[goal.id])
        if goal.id in shares else goal
        for goal in goals
    ]
    return PlanningResult.updated(updated, list(shares))
