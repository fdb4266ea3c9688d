"""
Trainer-wide earnings reporting.

Rolls payments up across all of a trainer's clients: all-time total,
per-cycle breakdown, and who still owes money for their current cycle.

Payments are bucketed by the cycle their `paid_on` falls in for the
client's current start date, the same rule the per-client status uses.
The `month`/`year` stored on a payment are not consulted.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from ..clients.models import Client, Payment
from .cycles import DEFAULT_BOUNDS, CycleBounds, resolve_billing_cycle
from .payments import ZERO, PaymentStatus, current_payment_status


@dataclass(frozen=True)
class MonthlyEarnings:
    """Payments attributed to one billing month."""
    year: int
    month: int
    total: Decimal
    payment_count: int


@dataclass(frozen=True)
class PendingBalance:
    """An active client who has not fully paid their current cycle."""
    client: Client
    status: PaymentStatus
    total_paid: Decimal
    outstanding: Decimal


def total_earnings(payments: Iterable[Payment]) -> Decimal:
    return sum((p.amount for p in payments), ZERO)


def _billing_month(
    payment: Payment,
    start_dates: Mapping[UUID, date],
    bounds: CycleBounds,
) -> tuple[int, int]:
    cycle = resolve_billing_cycle(start_dates[payment.client_id], payment.paid_on, bounds)
    return cycle.year, cycle.month


def monthly_breakdown(
    payments: Iterable[Payment],
    start_dates: Mapping[UUID, date],
    bounds: CycleBounds = DEFAULT_BOUNDS,
) -> list[MonthlyEarnings]:
    """
    Totals per billing month, newest first.

    `start_dates` maps each client id to that client's start date and
    must cover every payment passed in.
    """
    buckets: dict[tuple[int, int], list[Decimal]] = {}
    for payment in payments:
        buckets.setdefault(_billing_month(payment, start_dates, bounds), []).append(payment.amount)

    return [
        MonthlyEarnings(year=year, month=month, total=sum(amounts, ZERO), payment_count=len(amounts))
        for (year, month), amounts in sorted(buckets.items(), reverse=True)
    ]


def earnings_for_month(
    payments: Iterable[Payment],
    start_dates: Mapping[UUID, date],
    year: int,
    month: int,
    bounds: CycleBounds = DEFAULT_BOUNDS,
) -> Decimal:
    return sum(
        (p.amount for p in payments if _billing_month(p, start_dates, bounds) == (year, month)),
        ZERO,
    )


def pending_balances(
    clients: Iterable[Client],
    payments_by_client: Mapping[UUID, list[Payment]],
    now: datetime,
    bounds: CycleBounds = DEFAULT_BOUNDS,
) -> list[PendingBalance]:
    """
    Active clients whose current cycle is not fully paid.

    Uses the same date-range aggregation as the per-client status, so a
    client shown as Paid on their own page never shows up here.
    """
    pending = []
    for client in clients:
        if not client.is_active:
            continue
        summary = current_payment_status(client, payments_by_client.get(client.id, []), now, bounds)
        if summary.is_paid:
            continue
        pending.append(PendingBalance(
            client=client,
            status=summary.status,
            total_paid=summary.total_paid,
            outstanding=summary.remaining_balance,
        ))
    return pending
