"""
Error classification for the goal planning system.

Input errors are problems the caller should report back to the user.
System failures are infrastructure problems. Situations where there is simply
nothing to do are not errors; they surface as no-op planning results.
"""

from .input_errors import (
    PlanningInputError,
    MissingFieldError,
    MalformedGoalError,
    MalformedDateError,
    InvalidPlanError,
    InvalidAmountError,
    RecordNotFoundError,
    GoalNotFoundError,
    ScheduleError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
)

__all__ = [
    # Input Errors
    "PlanningInputError",
    "MissingFieldError",
    "MalformedGoalError",
    "MalformedDateError",
    "InvalidPlanError",
    "InvalidAmountError",
    "RecordNotFoundError",
    "GoalNotFoundError",
    "ScheduleError",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
]
