"""Recurring transaction models and generation results."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class Frequency(str, Enum):
    """How often a recurring transaction repeats."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class RecurringTransaction:
    """
    Template for a transaction that repeats on a schedule.

    Schedule fields use Python calendar conventions: day_of_week follows
    date.weekday() (Monday = 0) and month runs 1-12.
    """
    id: str
    amount: float
    type: TransactionType
    category_id: str
    frequency: Frequency = Frequency.MONTHLY
    description: Optional[str] = None
    day_of_week: Optional[int] = None                # Required for weekly
    day_of_month: Optional[int] = None               # Required for monthly/yearly
    month: Optional[int] = None                      # Required for yearly
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    last_processed: Optional[date] = None
    auto_generate: bool = True
    require_confirmation: bool = False               # Hold for user approval
    active: bool = True


@dataclass(frozen=True)
class GeneratedTransaction:
    """A concrete transaction produced from a recurring template."""
    recurring_id: str
    amount: float
    type: TransactionType
    category_id: str
    transaction_date: date
    description: str = "Recurring transaction"


@dataclass(frozen=True)
class GenerationFailure:
    recurring_id: str
    error: str


@dataclass
class GenerationBatch:
    """Outcome of processing all recurring transactions for one day."""
    run_date: date
    generated: list[GeneratedTransaction] = field(default_factory=list)
    updated: list[RecurringTransaction] = field(default_factory=list)
    pending_confirmation: list[str] = field(default_factory=list)
    errors: list[GenerationFailure] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.generated)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
