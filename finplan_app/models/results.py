"""Planning operation results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .goals import Goal


class PlanningStatus(str, Enum):
    UPDATED = "updated"
    NOOP = "noop"


class NoopReason(str, Enum):
    """Why a planning operation left the goals untouched."""
    NO_GOALS = "no_goals"
    NO_ACTIVE_GOALS = "no_active_goals"
    AUTO_DISTRIBUTE_DISABLED = "auto_distribute_disabled"
    GOAL_NOT_FOUND = "goal_not_found"
    NOT_COMPLETED = "not_completed"
    AUTO_REDISTRIBUTE_DISABLED = "auto_redistribute_disabled"
    NO_EXCESS = "no_excess"
    NO_RECIPIENTS = "no_recipients"


@dataclass(frozen=True)
class PlanningResult:
    """Result of a planning operation over a user's goals."""

    goals: list[Goal] = field(default_factory=list)
    status: PlanningStatus = PlanningStatus.UPDATED
    changed_ids: list[str] = field(default_factory=list)
    reason: Optional[NoopReason] = None

    @property
    def is_noop(self) -> bool:
        return self.status is PlanningStatus.NOOP

    @classmethod
    def updated(cls, goals: list[Goal], changed_ids: list[str]):
        """Create result for an operation that produced new goal values."""
        return cls(
            goals=goals,
            status=PlanningStatus.UPDATED,
            changed_ids=changed_ids
        )

    @classmethod
    def noop(cls, reason: NoopReason, goals: Optional[list[Goal]] = None):
        """Create result for an operation with nothing to do."""
        return cls(
            goals=list(goals or []),
            status=PlanningStatus.NOOP,
            reason=reason
        )
