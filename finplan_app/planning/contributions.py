"""Deposits into a goal"""

import math
from dataclasses import replace
from typing import Any

from ..errors import InvalidAmountError
from ..models.goals import Goal


def apply_contribution(goal: Goal, amount: Any) -> Goal:
    """
    Add a deposit to a goal, completing it once the target is reached.

    Args:
        goal: Goal receiving the deposit
        amount: Positive amount to add

    Returns:
        New goal with the updated balance and completion flag

    Raises:
        InvalidAmountError: If amount is not a positive finite number
    """
    if (isinstance(amount, bool) or not isinstance(amount, (int, float))
            or not math.isfinite(amount) or amount <= 0):
        raise InvalidAmountError(
            f"Contribution must be a positive number, got {amount!r}",
            amount=amount,
            context={"goal_id": goal.id}
        )

    current_amount = goal.current_amount + amount
    is_completed = goal.is_completed or current_amount >= goal.target_amount
    return replace(goal, current_amount=current_amount, is_completed=is_completed)
