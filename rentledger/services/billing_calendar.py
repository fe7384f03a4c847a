"""Billing calendar: which months a lease is billed for and when each is due.

Pure date arithmetic, no database access. A rent period is identified by a
PeriodKey(year, month); tuples compare chronologically, so sorting keys sorts
periods oldest-first.
"""

import calendar
from datetime import date
from typing import NamedTuple

from rentledger.models.lease import BillingMode


class PeriodKey(NamedTuple):
    """Calendar month a rent period covers."""

    year: int
    month: int

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @classmethod
    def of(cls, day: date) -> "PeriodKey":
        """Return the key of the month containing day."""
        return cls(day.year, day.month)

    def shift(self, months: int) -> "PeriodKey":
        """Return the key months later (or earlier when negative)."""
        index = self.year * 12 + (self.month - 1) + months
        return PeriodKey(index // 12, index % 12 + 1)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month length."""
    key = PeriodKey.of(day).shift(months)
    return date(key.year, key.month, min(day.day, days_in_month(key.year, key.month)))


def month_count(start: date, end: date) -> int:
    """Number of calendar months touched by [start, end] (0 if start > end)."""
    if start > end:
        return 0
    return (end.year - start.year) * 12 + (end.month - start.month) + 1


def periods_between(start: date, end: date, today: date | None = None) -> list[PeriodKey]:
    """List every calendar month from start through min(end, today), oldest first.

    Args:
        start: First day covered (only its month matters)
        end: Last day covered, typically the lease end
        today: Upper clamp (default: date.today())

    Returns:
        Chronologically ordered PeriodKeys; empty when start falls after the clamp
    """
    today = today or date.today()
    last = min(end, today)
    if start > last:
        return []

    first = PeriodKey.of(start)
    return [first.shift(i) for i in range(month_count(start, last))]


def due_date_of(
    month: int,
    year: int,
    due_day: int,
    billing_mode: BillingMode | str,
    postpaid_offset_months: int = 1,
) -> date:
    """Compute the due date of the rent period for (month, year).

    The due date is day min(due_day, days in month) of the billing month.
    Prepaid leases are billed in the service month itself; postpaid leases are
    billed postpaid_offset_months after it.

    Examples:
        due_date_of(1, 2024, 5, "prepaid")   -> 2024-01-05
        due_date_of(1, 2024, 31, "postpaid") -> 2024-02-29
    """
    billing = PeriodKey(year, month)
    if BillingMode(billing_mode) == BillingMode.POSTPAID:
        billing = billing.shift(postpaid_offset_months)

    day = min(max(due_day, 1), days_in_month(billing.year, billing.month))
    return date(billing.year, billing.month, day)


__all__ = [
    "PeriodKey",
    "add_months",
    "days_in_month",
    "due_date_of",
    "month_count",
    "periods_between",
]
