"""
Recurring transaction date projection and generation.

Monthly and yearly schedules clamp their day of month to the length of the
target month, so a schedule on the 31st fires on the last day of shorter
months instead of skipping them.
"""

from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable, Optional

import structlog
from dateutil.relativedelta import relativedelta

from ..config.defaults import RecurringParams
from ..errors import ScheduleError
from ..models.recurring import (
    Frequency,
    GeneratedTransaction,
    GenerationBatch,
    GenerationFailure,
    RecurringTransaction,
)
from ..utils.dates import get_today

logger = structlog.get_logger(__name__)


def validate_schedule(recurring: RecurringTransaction) -> None:
    """
    Check that a recurring transaction carries the fields its frequency needs.

    Raises:
        ScheduleError: If a required schedule field is missing or out of range
    """
    problems = []
    frequency = recurring.frequency

    if frequency is Frequency.WEEKLY:
        if recurring.day_of_week is None or not 0 <= recurring.day_of_week <= 6:
            problems.append(f"day_of_week must be 0-6, got {recurring.day_of_week!r}")

    if frequency in (Frequency.MONTHLY, Frequency.YEARLY):
        if recurring.day_of_month is None or not 1 <= recurring.day_of_month <= 31:
            problems.append(f"day_of_month must be 1-31, got {recurring.day_of_month!r}")

    if frequency is Frequency.YEARLY:
        if recurring.month is None or not 1 <= recurring.month <= 12:
            problems.append(f"month must be 1-12, got {recurring.month!r}")

    if problems:
        raise ScheduleError(
            f"Invalid {frequency.value} schedule: {'; '.join(problems)}",
            recurring_id=recurring.id,
            frequency=frequency.value
        )


def _next_after(recurring: RecurringTransaction, current: date) -> date:
    """First scheduled date strictly after current."""
    frequency = recurring.frequency

    if frequency is Frequency.DAILY:
        return current + timedelta(days=1)

    if frequency is Frequency.WEEKLY:
        days_ahead = (recurring.day_of_week - current.weekday()) % 7
        return current + timedelta(days=days_ahead or 7)

    # relativedelta clamps day to the length of the target month
    if frequency is Frequency.MONTHLY:
        candidate = current + relativedelta(day=recurring.day_of_month)
        if candidate <= current:
            candidate = current + relativedelta(months=+1, day=recurring.day_of_month)
        return candidate

    candidate = current + relativedelta(month=recurring.month, day=recurring.day_of_month)
    if candidate <= current:
        candidate = current + relativedelta(years=+1, month=recurring.month, day=recurring.day_of_month)
    return candidate


def next_occurrences(
    recurring: RecurringTransaction,
    count: Optional[int] = None,
    from_date: Optional[date] = None
) -> list[date]:
    """
    Project the upcoming dates of a recurring transaction.

    Args:
        recurring: Recurring transaction template
        count: Maximum number of dates to return, defaults to
            RecurringParams.default_occurrence_count
        from_date: Dates strictly after this day are projected, defaults to today

    Returns:
        Ascending list of at most count dates, empty once end_date has passed

    Raises:
        ScheduleError: If the template lacks fields its frequency requires
    """
    validate_schedule(recurring)
    current = get_today(from_date)
    if count is None:
        count = RecurringParams().default_occurrence_count

    if recurring.end_date is not None and recurring.end_date < current:
        return []

    # Let the start date itself be the first occurrence
    if recurring.start_date is not None and recurring.start_date > current:
        current = recurring.start_date - timedelta(days=1)

    occurrences: list[date] = []
    while len(occurrences) < count:
        next_date = _next_after(recurring, current)
        if recurring.end_date is not None and next_date > recurring.end_date:
            break
        occurrences.append(next_date)
        current = next_date

    return occurrences


def is_due(recurring: RecurringTransaction, on_date: date) -> bool:
    """Whether the schedule fires on the given date."""
    validate_schedule(recurring)
    frequency = recurring.frequency

    if frequency is Frequency.DAILY:
        return True
    if frequency is Frequency.WEEKLY:
        return on_date.weekday() == recurring.day_of_week
    if frequency is Frequency.MONTHLY:
        return on_date == on_date + relativedelta(day=recurring.day_of_month)
    return on_date == on_date + relativedelta(month=recurring.month, day=recurring.day_of_month)


def processed_on(recurring: RecurringTransaction, on_date: date) -> bool:
    return recurring.last_processed == on_date


def is_eligible(recurring: RecurringTransaction, on_date: date) -> bool:
    """Active, auto-generating and within its start/end window."""
    if not recurring.active or not recurring.auto_generate:
        return False
    if recurring.start_date is not None and recurring.start_date > on_date:
        return False
    if recurring.end_date is not None and recurring.end_date < on_date:
        return False
    return True


def generate_transaction(recurring: RecurringTransaction, on_date: date) -> GeneratedTransaction:
    """Build the concrete transaction a template produces on a date."""
    return GeneratedTransaction(
        recurring_id=recurring.id,
        amount=recurring.amount,
        type=recurring.type,
        category_id=recurring.category_id,
        transaction_date=on_date,
        description=recurring.description or "Recurring transaction",
    )


def plan_generation(
    recurrings: Iterable[RecurringTransaction],
    today: Optional[date] = None
) -> GenerationBatch:
    """
    Decide which recurring transactions produce a transaction today.

    Templates that require confirmation are listed as pending instead of
    generated. A template with a broken schedule is recorded in the batch
    errors and does not stop the rest of the batch.

    Args:
        recurrings: Recurring transaction templates, any state
        today: Processing date, defaults to today

    Returns:
        GenerationBatch with generated transactions and the templates whose
        last_processed date must be persisted
    """
    run_date = get_today(today)
    batch = GenerationBatch(run_date=run_date)

    for recurring in recurrings:
        if not is_eligible(recurring, run_date):
            continue

        try:
            due = is_due(recurring, run_date)
        except ScheduleError as e:
            logger.warning(
                "Skipping recurring transaction with invalid schedule",
                recurring_id=recurring.id,
                error=str(e)
            )
            batch.errors.append(GenerationFailure(recurring_id=recurring.id, error=str(e)))
            continue

        if not due or processed_on(recurring, run_date):
            continue

        if recurring.require_confirmation:
            logger.info("Recurring transaction awaiting confirmation", recurring_id=recurring.id)
            batch.pending_confirmation.append(recurring.id)
            continue

        batch.generated.append(generate_transaction(recurring, run_date))
        batch.updated.append(replace(recurring, last_processed=run_date))

    logger.info(
        "Recurring transactions processed",
        run_date=run_date.isoformat(),
        generated=batch.processed,
        pending=len(batch.pending_confirmation),
        errors=len(batch.errors)
    )
    return batch
