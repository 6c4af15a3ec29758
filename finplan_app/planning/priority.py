"""Priority weighting shared by allocation and redistribution"""

import math
from typing import Any, Iterable

from ..models.goals import DEFAULT_PRIORITY, MAX_PRIORITY, MIN_PRIORITY, Goal


def clamp_priority(priority: Any) -> int:
    """
    Coerce a priority into the supported range.

    Values that are not finite numbers fall back to the default priority so
    that weighting never produces NaN or infinite shares.
    """
    if isinstance(priority, bool) or not isinstance(priority, (int, float)):
        return DEFAULT_PRIORITY
    if not math.isfinite(priority):
        return DEFAULT_PRIORITY
    return int(min(max(round(priority), MIN_PRIORITY), MAX_PRIORITY))


def priority_score(priority: Any) -> int:
    """
    Weight of a priority level.

    Priority 1 scores 5 and priority 5 scores 1, so more urgent goals
    receive proportionally more of a pool.
    """
    return MAX_PRIORITY + 1 - clamp_priority(priority)


def priority_weights(goals: Iterable[Goal]) -> list[tuple[Goal, float]]:
    """
    Fraction of a pool each goal is entitled to.

    Args:
        goals: Goals sharing the pool

    Returns:
        (goal, fraction) pairs in input order; fractions sum to 1, empty
        list when there are no goals
    """
    goals = list(goals)
    score_sum = sum(priority_score(goal.priority) for goal in goals)
    if score_sum <= 0:
        return []
    return [(goal, priority_score(goal.priority) / score_sum) for goal in goals]
