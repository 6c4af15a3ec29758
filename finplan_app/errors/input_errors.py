"""
Input error classifications for goal and plan data.

These exceptions mark bad input coming from the caller: malformed records,
out-of-range plan values and references to goals that do not exist.
"""

from typing import Any, Optional, Dict


class PlanningInputError(Exception):
    """Base class for bad input that the caller can report and correct."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MissingFieldError(PlanningInputError):
    """A required field is absent from a raw record."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field


class MalformedGoalError(PlanningInputError):
    """A goal field is present but has the wrong type or range."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class MalformedDateError(PlanningInputError):
    """A date value could not be parsed."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = "ISO 8601", **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format


class InvalidPlanError(PlanningInputError):
    """Financial plan values outside their allowed range."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []


class InvalidAmountError(PlanningInputError):
    """A contribution amount that is not a positive number."""

    def __init__(self, message: str, amount: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.amount = amount


class RecordNotFoundError(PlanningInputError):
    """An operation referenced a record the user does not own."""

    def __init__(self, message: str, record_type: Optional[str] = None,
                 record_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.record_type = record_type
        self.record_id = record_id


class GoalNotFoundError(RecordNotFoundError):
    """An operation referenced a goal id the user does not own."""

    def __init__(self, message: str, goal_id: Optional[str] = None, **kwargs):
        super().__init__(message, record_type="goal", record_id=goal_id, **kwargs)
        self.goal_id = goal_id


class ScheduleError(PlanningInputError):
    """A recurring transaction lacks the fields its frequency requires."""

    def __init__(self, message: str, recurring_id: Optional[str] = None,
                 frequency: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.recurring_id = recurring_id
        self.frequency = frequency
