"""
Billing engine.

Resolves monthly billing cycles anchored on a client's start date and
aggregates payments into a per-cycle status.
"""

from .cycles import (
    DEFAULT_BOUNDS,
    BillingCycle,
    CycleBounds,
    iter_cycles,
    next_cycle,
    resolve_billing_cycle,
)
from .earnings import (
    MonthlyEarnings,
    PendingBalance,
    earnings_for_month,
    monthly_breakdown,
    pending_balances,
    total_earnings,
)
from .payments import (
    PaymentStatus,
    PaymentSummary,
    classify,
    current_payment_status,
    payments_in_cycle,
    record_payment,
    summarize_cycle,
)

__all__ = [
    "DEFAULT_BOUNDS",
    "BillingCycle",
    "CycleBounds",
    "iter_cycles",
    "next_cycle",
    "resolve_billing_cycle",
    "MonthlyEarnings",
    "PendingBalance",
    "earnings_for_month",
    "monthly_breakdown",
    "pending_balances",
    "total_earnings",
    "PaymentStatus",
    "PaymentSummary",
    "classify",
    "current_payment_status",
    "payments_in_cycle",
    "record_payment",
    "summarize_cycle",
]
