"""Recurring payment patterns.

A pattern groups the recurring transactions of one (owner, category, alias)
and tracks when the next one is due. Its status is derived on read.
"""

from datetime import datetime, timedelta
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from finkeep.database.base import Database
from finkeep.domain.effects import PatternChange, PatternDelta
from finkeep.domain.entities import (
    Frequency,
    PatternStatus,
    RecurringPattern,
    Transaction,
)
from finkeep.domain.errors import NotFoundError, ValidationError, pattern_not_found
from finkeep.logging_setup import get_logger
from finkeep.utils.date_parser import utcnow

logger = get_logger(__name__)


def parse_frequency(frequency: Union[Frequency, str]) -> Frequency:
    """Coerce a frequency name, rejecting unknown values."""
    if isinstance(frequency, Frequency):
        return frequency
    try:
        return Frequency(str(frequency).upper())
    except ValueError:
        raise ValidationError(f"Unknown recurring frequency: {frequency}")


def validate_custom_days(custom_days: Optional[int]) -> int:
    if isinstance(custom_days, bool) or not isinstance(custom_days, int) or custom_days <= 0:
        raise ValidationError("CUSTOM frequency requires a positive number of days")
    return custom_days


def next_due_date(
    base: datetime,
    frequency: Union[Frequency, str],
    from_date: Optional[datetime] = None,
    custom_days: Optional[int] = None,
) -> datetime:
    """Compute the next due date after ``from_date``.

    ``base`` is the pattern's start date and anchors the day of month (and
    month of year) that MONTHLY and YEARLY keep, clamped to the last day of
    shorter months. ``from_date`` defaults to ``base``.

    Raises:
        ValidationError: For an unknown frequency or a bad CUSTOM interval
    """
    frequency = parse_frequency(frequency)
    cursor = from_date if from_date is not None else base

    if frequency is Frequency.DAILY:
        return cursor + timedelta(days=1)
    if frequency is Frequency.WEEKLY:
        return cursor + timedelta(days=7)
    if frequency is Frequency.MONTHLY:
        return cursor + relativedelta(months=1, day=base.day)
    if frequency is Frequency.YEARLY:
        return cursor + relativedelta(years=1, month=base.month, day=base.day)
    return cursor + timedelta(days=validate_custom_days(custom_days))


def derive_status(pattern: RecurringPattern, now: Optional[datetime] = None) -> PatternStatus:
    """PAID, OVERDUE or UPCOMING, from the pattern's dates."""
    if now is None:
        now = utcnow()
    if pattern.last_generated_date is not None and pattern.last_generated_date >= pattern.next_due_date:
        return PatternStatus.PAID
    if pattern.next_due_date < now:
        return PatternStatus.OVERDUE
    return PatternStatus.UPCOMING


class RecurringPatternEngine:
    """Link recurring transactions to patterns and maintain their bookkeeping."""

    def __init__(self, db: Database):
        self.db = db

    def link_or_create(
        self,
        owner_id: str,
        transaction: Transaction,
        frequency: Union[Frequency, str],
        custom_days: Optional[int] = None,
    ) -> PatternDelta:
        """Attach a recurring transaction to its pattern, creating one if needed."""
        frequency = parse_frequency(frequency)
        if frequency is Frequency.CUSTOM:
            validate_custom_days(custom_days)
        when = transaction.transaction_datetime

        pattern = self.db.find_active_pattern(owner_id, transaction.category_id, transaction.alias_id)
        if pattern is not None:
            changes: dict = {"generated_count": pattern.generated_count + 1}
            start = pattern.start_date
            if when < start:
                start = when
                changes["start_date"] = start
            if pattern.last_generated_date is None or when >= pattern.last_generated_date:
                changes["last_generated_date"] = when
                changes["next_due_date"] = next_due_date(
                    start, pattern.frequency, from_date=when, custom_days=pattern.custom_frequency_days
                )
            self.db.update_pattern(pattern.id, changes)
            kind = PatternChange.LINKED
            pattern_id = pattern.id
        else:
            pattern_id = self.db.create_pattern(
                {
                    "owner_id": owner_id,
                    "account_id": transaction.account_id,
                    "category_id": transaction.category_id,
                    "alias_id": transaction.alias_id,
                    "amount": transaction.amount,
                    "transaction_type": transaction.transaction_type,
                    "description": transaction.description,
                    "location": transaction.location,
                    "payment_method": transaction.payment_method,
                    "frequency": frequency,
                    "custom_frequency_days": custom_days if frequency is Frequency.CUSTOM else None,
                    "start_date": when,
                    "next_due_date": next_due_date(when, frequency, custom_days=custom_days),
                    "last_generated_date": when,
                    "generated_count": 1,
                }
            )
            kind = PatternChange.CREATED

        self.db.update_transaction(
            transaction.id, {"is_recurring": True, "recurring_pattern_id": pattern_id}
        )
        logger.debug("Transaction %s %s pattern %s", transaction.id, kind.value.lower(), pattern_id)
        return PatternDelta(pattern_id=pattern_id, transaction_id=transaction.id, kind=kind)

    def unlink(self, owner_id: str, transaction: Transaction) -> Optional[PatternDelta]:
        """Detach a transaction from its pattern.

        The pattern is deleted when this was its only transaction. Otherwise
        its count drops and its date bounds are recomputed if this
        transaction was on one of them.
        """
        pattern_id = transaction.recurring_pattern_id
        if pattern_id is None:
            return None

        self.db.update_transaction(transaction.id, {"is_recurring": False, "recurring_pattern_id": None})
        pattern = self.db.get_pattern(pattern_id)
        if pattern is None:
            return None

        remaining = self.db.list_pattern_transactions(owner_id, pattern_id)
        if not remaining:
            self.db.delete_pattern(pattern_id)
            logger.debug("Pattern %s retired", pattern_id)
            return PatternDelta(pattern_id=pattern_id, transaction_id=transaction.id, kind=PatternChange.RETIRED)

        when = transaction.transaction_datetime
        changes: dict = {"generated_count": len(remaining)}
        start = pattern.start_date
        if when <= pattern.start_date:
            start = remaining[0].transaction_datetime
            changes["start_date"] = start
        if pattern.last_generated_date is None or when >= pattern.last_generated_date:
            newest = max(t.transaction_datetime for t in remaining)
            changes["last_generated_date"] = newest
            changes["next_due_date"] = next_due_date(
                start, pattern.frequency, from_date=newest, custom_days=pattern.custom_frequency_days
            )
        self.db.update_pattern(pattern_id, changes)
        return PatternDelta(pattern_id=pattern_id, transaction_id=transaction.id, kind=PatternChange.UNLINKED)

    def get_pattern(self, owner_id: str, pattern_id: int) -> RecurringPattern:
        pattern = self.db.get_pattern(pattern_id)
        if pattern is None or pattern.owner_id != owner_id:
            raise NotFoundError(pattern_not_found(pattern_id))
        return pattern

    def list_patterns(
        self, owner_id: str, now: Optional[datetime] = None
    ) -> list[tuple[RecurringPattern, PatternStatus]]:
        """List patterns with their derived status."""
        return [(p, derive_status(p, now)) for p in self.db.list_patterns(owner_id)]

    def pause(self, owner_id: str, pattern_id: int) -> RecurringPattern:
        self.get_pattern(owner_id, pattern_id)
        self.db.update_pattern(pattern_id, {"is_paused": True})
        return self.get_pattern(owner_id, pattern_id)

    def resume(self, owner_id: str, pattern_id: int) -> RecurringPattern:
        self.get_pattern(owner_id, pattern_id)
        self.db.update_pattern(pattern_id, {"is_paused": False})
        return self.get_pattern(owner_id, pattern_id)

    def deactivate(self, owner_id: str, pattern_id: int) -> RecurringPattern:
        """Stop the pattern from collecting new recurring transactions."""
        self.get_pattern(owner_id, pattern_id)
        self.db.update_pattern(pattern_id, {"is_active": False, "is_paused": False})
        return self.get_pattern(owner_id, pattern_id)
