"""
Billing cycle resolution.

A client is billed monthly from their start date: a client who started
on Nov 15 has cycles Nov 15 - Dec 14, Dec 15 - Jan 14, and so on. Given
the start date and any reference date, the resolver finds the cycle
that contains the reference date.

Cycles are recomputed from the start date on every call and never
stored. The only cached trace of them is the `month`/`year` written onto
a payment when it is recorded.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator

from ..dates import DateLike, add_months, end_of_day, months_between, truncate_to_day
from ..errors import InvalidBillingCycle, InvalidDate


@dataclass(frozen=True)
class CycleBounds:
    """Accepted year range for a resolved cycle."""
    min_year: int = 1900
    max_year: int = 2100


DEFAULT_BOUNDS = CycleBounds()


@dataclass(frozen=True)
class BillingCycle:
    """
    One monthly billing cycle, inclusive on both ends.

    `month` and `year` are those of `start` (month is 1-indexed) and are
    what a payment made inside this cycle gets attributed to.
    """
    start: date
    end: date
    month: int
    year: int

    def contains(self, value: DateLike) -> bool:
        """True if the calendar day of `value` falls inside the cycle."""
        day = truncate_to_day(value)
        return self.start <= day <= self.end

    @property
    def expires_at(self) -> datetime:
        """The last instant of the cycle's final day."""
        return end_of_day(self.end)

    @property
    def length_days(self) -> int:
        return (self.end - self.start).days + 1


def _cycle_at_offset(start: date, offset: int, bounds: CycleBounds) -> BillingCycle:
    # Bounds first: add_months overflows past year 9999.
    month_index = start.month - 1 + offset
    year, month = start.year + month_index // 12, month_index % 12 + 1
    if not 1 <= month <= 12:
        raise InvalidBillingCycle(f"Resolved billing month {month} is out of range")
    if not bounds.min_year <= year <= bounds.max_year:
        raise InvalidBillingCycle(
            f"Resolved billing year {year} is outside {bounds.min_year}-{bounds.max_year}"
        )

    try:
        cycle_start = add_months(start, offset)
        cycle_end = add_months(start, offset + 1) - timedelta(days=1)
    except InvalidDate as e:
        raise InvalidBillingCycle(f"Billing cycle {year}-{month:02d} leaves the supported calendar") from e

    return BillingCycle(start=cycle_start, end=cycle_end, month=month, year=year)


def resolve_billing_cycle(
    start_date: DateLike,
    reference: DateLike,
    bounds: CycleBounds = DEFAULT_BOUNDS,
) -> BillingCycle:
    """
    Find the billing cycle anchored on `start_date` that contains `reference`.

    Both inputs are truncated to calendar days first. If the reference
    day of month is before the anchor day, the reference belongs to the
    cycle that started the previous month.

    When the anchor day does not exist in a month (start on the 31st,
    target month has 30 days) the cycle starts on that month's last day;
    see `add_months`. Raises InvalidBillingCycle when the resolved cycle
    falls outside `bounds`.
    """
    start = truncate_to_day(start_date)
    ref = truncate_to_day(reference)

    offset = months_between(start, ref)
    if ref.day < start.day:
        offset -= 1

    cycle = _cycle_at_offset(start, offset, bounds)

    # Clamping can move a boundary by a few days: with anchor 31, Feb 29
    # belongs to the cycle starting on the clamped Feb 29, not Jan 31's.
    if ref < cycle.start:
        cycle = _cycle_at_offset(start, offset - 1, bounds)
    elif ref > cycle.end:
        cycle = _cycle_at_offset(start, offset + 1, bounds)

    return cycle


def next_cycle(start_date: DateLike, cycle: BillingCycle, bounds: CycleBounds = DEFAULT_BOUNDS) -> BillingCycle:
    """The cycle immediately after `cycle` for the same anchor."""
    return resolve_billing_cycle(start_date, cycle.end + timedelta(days=1), bounds)


def iter_cycles(
    start_date: DateLike,
    until: DateLike,
    bounds: CycleBounds = DEFAULT_BOUNDS,
) -> Iterator[BillingCycle]:
    """Yield consecutive cycles from the first one through the one containing `until`."""
    start = truncate_to_day(start_date)
    last = truncate_to_day(until)
    if last < start:
        return

    cycle = resolve_billing_cycle(start, start, bounds)
    while cycle.start <= last:
        yield cycle
        cycle = next_cycle(start, cycle, bounds)
