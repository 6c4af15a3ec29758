"""Recurring transaction scheduling and daily generation."""

from .schedule import (
    generate_transaction,
    is_due,
    next_occurrences,
    plan_generation,
    processed_on,
)

__all__ = [
    "generate_transaction",
    "is_due",
    "next_occurrences",
    "plan_generation",
    "processed_on",
]
