"""
Payment attribution and aggregation.

Two operations live here:
- record_payment: build a Payment with its billing cycle resolved from
  the client's start date (the cached `month`/`year`).
- summarize_cycle: total the payments that fall inside a cycle and
  classify the client as Paid, Partially paid or Not paid.

A payment belongs to a cycle when its `paid_on` day lies inside the
cycle's date range. The cached `month`/`year` fields are not used for
matching, so backdated entries are counted where their date puts them.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from ..clients.models import AmountInput, Client, Payment, positive_decimal
from ..dates import DateLike, ceil_days, truncate_to_day
from .cycles import DEFAULT_BOUNDS, BillingCycle, CycleBounds, resolve_billing_cycle

ZERO = Decimal("0")


class PaymentStatus(Enum):
    """Where a client stands for one billing cycle."""
    PAID = "Paid"
    PARTIALLY_PAID = "Partially paid"
    NOT_PAID = "Not paid"


@dataclass(frozen=True)
class PaymentSummary:
    """
    Aggregate payment state for one client and one cycle.

    The expiry fields are only set when the cycle is fully paid.
    """
    cycle: BillingCycle
    monthly_fee: Decimal
    total_paid: Decimal
    payment_count: int
    status: PaymentStatus
    remaining_balance: Decimal
    expires_at: Optional[datetime] = None
    days_remaining: Optional[int] = None
    is_expired: Optional[bool] = None

    @property
    def is_paid(self) -> bool:
        return self.status is PaymentStatus.PAID


def classify(total_paid: Decimal, monthly_fee: Decimal) -> PaymentStatus:
    """Status for a cycle given what was paid against the fee."""
    if total_paid >= monthly_fee:
        return PaymentStatus.PAID
    if total_paid > ZERO:
        return PaymentStatus.PARTIALLY_PAID
    return PaymentStatus.NOT_PAID


def payments_in_cycle(payments: Iterable[Payment], cycle: BillingCycle) -> list[Payment]:
    """Payments whose `paid_on` day lies within the cycle, inclusive."""
    return [p for p in payments if cycle.contains(p.paid_on)]


def summarize_cycle(
    monthly_fee: Decimal,
    payments: Iterable[Payment],
    cycle: BillingCycle,
    now: datetime,
) -> PaymentSummary:
    """
    Aggregate a client's payments for `cycle`.

    `payments` may be the client's full history; only those dated inside
    the cycle are counted. `now` drives the days-remaining countdown for
    a paid cycle: `days_remaining` is rounded up to whole days and never
    negative, while `is_expired` reflects the unclamped value.
    """
    matched = payments_in_cycle(payments, cycle)
    total_paid = sum((p.amount for p in matched), ZERO)
    status = classify(total_paid, monthly_fee)
    remaining = max(ZERO, monthly_fee - total_paid)

    if status is not PaymentStatus.PAID:
        return PaymentSummary(
            cycle=cycle,
            monthly_fee=monthly_fee,
            total_paid=total_paid,
            payment_count=len(matched),
            status=status,
            remaining_balance=remaining,
        )

    expires_at = cycle.expires_at
    raw_days = ceil_days(expires_at - now)

    return PaymentSummary(
        cycle=cycle,
        monthly_fee=monthly_fee,
        total_paid=total_paid,
        payment_count=len(matched),
        status=status,
        remaining_balance=remaining,
        expires_at=expires_at,
        days_remaining=max(0, raw_days),
        is_expired=raw_days < 0,
    )


def current_payment_status(
    client: Client,
    payments: Iterable[Payment],
    now: datetime,
    bounds: CycleBounds = DEFAULT_BOUNDS,
) -> PaymentSummary:
    """Summary for the cycle containing `now`."""
    cycle = resolve_billing_cycle(client.start_date, now, bounds)
    return summarize_cycle(client.monthly_fee, payments, cycle, now)


def record_payment(
    client: Client,
    amount: AmountInput,
    paid_on: DateLike,
    bounds: CycleBounds = DEFAULT_BOUNDS,
) -> Payment:
    """
    Build a new Payment attributed to the cycle containing `paid_on`.

    The amount is validated before anything is resolved.
    """
    value = positive_decimal(amount, "amount")
    day: date = truncate_to_day(paid_on)
    cycle = resolve_billing_cycle(client.start_date, day, bounds)
    return Payment(
        client_id=client.id,
        amount=value,
        paid_on=day,
        month=cycle.month,
        year=cycle.year,
    )
