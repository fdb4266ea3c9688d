"""
Payment API endpoints.

Recording a payment resolves which billing cycle it belongs to from the
client's start date and the date it was paid. That month/year is stored
with the payment and is never accepted from the request. Several
payments can land in the same cycle, which is how partial payments add up.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.billing.payments import record_payment
from ...core.dates import parse_calendar_date
from ...core.errors import TrainerDeskError
from ...infrastructure.repository import NotFoundError
from ..dependencies import CurrentTrainer, RepositoryDep, SettingsDep
from ..errors import to_http_error
from ..schemas import AmountInput, PaymentItem

logger = logging.getLogger(__name__)

router = APIRouter()


class PaymentRequest(BaseModel):
    """Record a payment against a client."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    client_id: UUID
    amount: AmountInput = Field(None, description="Amount paid, must be greater than zero")
    paid_on: str = Field(description="Date the payment was made (YYYY-MM-DD)")


@router.post(
    "",
    response_model=PaymentItem,
    status_code=status.HTTP_201_CREATED,
    summary="Record payment",
)
async def create_payment(
    request: PaymentRequest,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
    settings: SettingsDep,
) -> PaymentItem:
    """
    Record a payment.

    `paid_on` is read as a literal calendar date, so "2024-02-10" is the
    10th of February regardless of server timezone. The amount is
    validated before the billing cycle is resolved.
    """
    try:
        client = repository.get_client(trainer, request.client_id)
        paid_on = parse_calendar_date(request.paid_on)
        payment = record_payment(client, request.amount, paid_on, settings.cycle_bounds)
    except (TrainerDeskError, NotFoundError) as e:
        raise to_http_error(e) from e

    repository.add_payment(payment)

    logger.info(
        "Payment recorded",
        extra={
            "payment_id": str(payment.id),
            "client_id": str(client.id),
            "cycle": f"{payment.year}-{payment.month:02d}",
        }
    )

    return PaymentItem.from_domain(payment)


@router.delete(
    "/{payment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete payment",
)
async def delete_payment(
    payment_id: UUID,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
) -> None:
    try:
        repository.delete_payment(trainer, payment_id)
    except NotFoundError as e:
        raise to_http_error(e) from e

    logger.info("Payment deleted", extra={"payment_id": str(payment_id)})
