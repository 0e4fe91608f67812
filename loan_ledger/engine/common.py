"""Shared accrual, allocation and calendar helpers for the engine."""

from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from dateutil.relativedelta import relativedelta

CENT = Decimal("0.01")


def monthly_rate(annual_rate_pct: Any) -> float:
    """Convert an annual percentage (12 for 12%) to a monthly fraction."""
    return float(annual_rate_pct) / 100.0 / 12.0


def add_months(start: date, months: int) -> date:
    """Offset ``start`` by whole calendar months.

    The day of month is kept where it exists and clamped to the last day of
    shorter months (Jan 31 + 1 month is Feb 28/29).
    """
    return start + relativedelta(months=months)


def month_index(d: date) -> int:
    """Absolute month number, used to compare and count calendar months."""
    return d.year * 12 + (d.month - 1)


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def months_between(start: date, end: date) -> int:
    """Number of calendar months from ``start``'s month to ``end``'s, inclusive.

    Returns 0 when ``end`` falls in a month before ``start``.
    """
    return max(0, month_index(end) - month_index(start) + 1)


def sum_in_month(events: Iterable[Any], year: int, month: int) -> float:
    """Sum ``amount`` of every event whose ``date`` falls in the given month."""
    return sum(
        (float(event.amount) for event in events
         if event.date.year == year and event.date.month == month),
        0.0,
    )


def allocate_interest_first(amount: float, accumulated_interest: float) -> tuple[float, float]:
    """Split a payment into the part that retires interest and the rest.

    Parameters
    ----------
    amount : float
        Payment or prepayment total.
    accumulated_interest : float
        Unpaid interest before this allocation.

    Returns
    -------
    tuple[float, float]
        ``(interest_portion, principal_portion)``; they always add up to
        ``amount``.
    """
    if amount <= 0:
        return 0.0, 0.0
    if accumulated_interest <= 0:
        return 0.0, amount
    interest_portion = min(amount, accumulated_interest)
    return interest_portion, amount - interest_portion


def round_money(value: Any) -> Decimal:
    """Round to the currency's minor unit for presentation."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
