"""
Goal and financial plan data models.

Goals are frozen: the allocator and redistributor return new instances
instead of mutating the ones they were given.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

MIN_PRIORITY = 1      # Highest urgency
MAX_PRIORITY = 5      # Lowest urgency
DEFAULT_PRIORITY = 3


@dataclass(frozen=True)
class Goal:
    """A user-defined savings target."""
    id: str
    title: str
    target_amount: float
    current_amount: float = 0.0
    deadline: Optional[date] = None
    priority: int = DEFAULT_PRIORITY
    monthly_contribution: float = 0.0                # Suggested monthly amount
    auto_redistribute: bool = True                   # Spread surplus on completion
    is_completed: bool = False
    category_id: Optional[str] = None
    color: str = "#00FF00"

    @property
    def is_active(self) -> bool:
        return not self.is_completed

    @property
    def remaining_amount(self) -> float:
        """Amount still missing to reach the target, never negative."""
        return max(0.0, self.target_amount - self.current_amount)

    @property
    def excess_amount(self) -> float:
        """Amount accumulated beyond the target, never negative."""
        return max(0.0, self.current_amount - self.target_amount)

    @property
    def progress_pct(self) -> float:
        """Progress towards the target as a percentage capped at 100."""
        if self.target_amount <= 0:
            return 100.0
        return min(self.current_amount / self.target_amount * 100, 100.0)

    def has_future_deadline(self, today: date) -> bool:
        """True when the deadline falls strictly after today."""
        return self.deadline is not None and self.deadline > today


@dataclass(frozen=True)
class FinancialPlan:
    """A user's income and savings configuration driving allocation."""
    monthly_income: float = 0.0
    savings_percentage: float = 20.0                 # Share of income for all goals, 0-100
    auto_distribute: bool = True

    @property
    def savings_pool(self) -> float:
        """Monthly amount earmarked for all goals combined."""
        return self.monthly_income * (self.savings_percentage / 100)
