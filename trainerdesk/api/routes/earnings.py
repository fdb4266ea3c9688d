"""
Earnings summary endpoint.
"""

import logging
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ...core.billing.earnings import (
    earnings_for_month,
    monthly_breakdown,
    pending_balances,
    total_earnings,
)
from ...core.billing.payments import ZERO
from ...core.errors import TrainerDeskError
from ..dependencies import CurrentTrainer, NowDep, RepositoryDep, SettingsDep
from ..errors import to_http_error

logger = logging.getLogger(__name__)

router = APIRouter()


class MonthlyEarningsModel(BaseModel):
    year: int
    month: int
    total: Decimal
    payment_count: int


class PendingClientModel(BaseModel):
    client_id: UUID
    name: str
    status: str
    monthly_fee: Decimal
    total_paid: Decimal
    outstanding: Decimal


class EarningsResponse(BaseModel):
    total_earnings: Decimal = Field(description="All payments ever recorded")
    current_month_earnings: Decimal = Field(
        description="Payments whose billing cycle starts in the current calendar month"
    )
    monthly_breakdown: list[MonthlyEarningsModel] = Field(description="Newest billing month first")
    pending_clients: list[PendingClientModel]
    total_pending: Decimal


@router.get(
    "",
    response_model=EarningsResponse,
    summary="Earnings summary",
)
async def get_earnings(
    trainer: CurrentTrainer,
    repository: RepositoryDep,
    settings: SettingsDep,
    now: NowDep,
) -> EarningsResponse:
    """
    Totals across all of the trainer's clients.

    Monthly figures group payments by the billing cycle their date falls
    in. The pending list covers active clients whose current cycle is not
    fully paid.
    """
    clients = repository.list_clients(trainer)
    payments = repository.list_payments(trainer)

    payments_by_client: dict[UUID, list] = {}
    for payment in payments:
        payments_by_client.setdefault(payment.client_id, []).append(payment)

    start_dates = {c.id: c.start_date for c in clients}
    bounds = settings.cycle_bounds

    try:
        pending = pending_balances(clients, payments_by_client, now, bounds)
        breakdown = monthly_breakdown(payments, start_dates, bounds)
        current_month = earnings_for_month(payments, start_dates, now.year, now.month, bounds)
    except TrainerDeskError as e:
        raise to_http_error(e) from e

    logger.debug(
        "Computed earnings",
        extra={"user_id": trainer, "payments": len(payments), "pending": len(pending)}
    )

    return EarningsResponse(
        total_earnings=total_earnings(payments),
        current_month_earnings=current_month,
        monthly_breakdown=[
            MonthlyEarningsModel(
                year=m.year,
                month=m.month,
                total=m.total,
                payment_count=m.payment_count,
            )
            for m in breakdown
        ],
        pending_clients=[
            PendingClientModel(
                client_id=p.client.id,
                name=p.client.name,
                status=p.status.value,
                monthly_fee=p.client.monthly_fee,
                total_paid=p.total_paid,
                outstanding=p.outstanding,
            )
            for p in pending
        ],
        total_pending=sum((p.outstanding for p in pending), ZERO),
    )
