"""
Client API endpoints.

Clients are the trainer's customers. Each client owns payments, workout
schedules and progress entries; deleting a client removes all of them.

The list and detail views carry the client's payment status for the
current billing cycle, computed fresh on every request from the client's
start date and full payment history.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.billing.payments import current_payment_status
from ...core.clients.models import Client, ClientDefaults, positive_decimal
from ...core.clients.progress import weight_change
from ...core.dates import parse_calendar_date
from ...core.errors import TrainerDeskError
from ...core.scheduling.schedules import next_workout
from ...infrastructure.repository import NotFoundError
from ..dependencies import CurrentTrainer, NowDep, RepositoryDep, SettingsDep
from ..errors import to_http_error
from ..schemas import (
    AmountInput,
    ClientItem,
    PaymentItem,
    PaymentStatusModel,
    ProgressItem,
    ScheduleItem,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class ClientRequest(BaseModel):
    """Create or replace a client's details."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255, description="Client's name")
    start_date: str = Field(description="Start date (YYYY-MM-DD); anchors billing cycles")
    monthly_fee: AmountInput = Field(None, description="Monthly fee, must be greater than zero")
    starting_weight_kg: AmountInput = Field(None, description="Weight at sign-up, optional")
    is_active: Optional[bool] = Field(None, description="Defaults to the configured value when omitted")
    notes: Optional[str] = Field(None, max_length=2000)


class ClientCreatedResponse(BaseModel):
    id: UUID


class NextWorkoutModel(BaseModel):
    day_of_week: int
    day_name: str
    start_time: str
    end_time: str
    location: Optional[str] = None


class ClientSummaryItem(ClientItem):
    """A client row on the dashboard."""
    payment_status: PaymentStatusModel
    next_workout: Optional[NextWorkoutModel] = None


class ClientListResponse(BaseModel):
    clients: list[ClientSummaryItem]
    total: int


class ClientDetailResponse(ClientItem):
    """Everything the client page shows."""
    payment_status: PaymentStatusModel
    next_workout: Optional[NextWorkoutModel] = None
    schedules: list[ScheduleItem]
    payments: list[PaymentItem]
    progress_entries: list[ProgressItem]
    weight_change_kg: Optional[Decimal] = Field(
        None, description="Latest progress weight minus starting weight"
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _client_from_request(
    request: ClientRequest,
    trainer: str,
    defaults: ClientDefaults,
    client_id: Optional[UUID] = None,
) -> Client:
    """Validate a request into a Client, applying configured defaults."""
    starting_weight = (
        positive_decimal(request.starting_weight_kg, "starting_weight_kg")
        if request.starting_weight_kg not in (None, "")
        else None
    )
    fields = dict(
        user_id=trainer,
        name=request.name,
        start_date=parse_calendar_date(request.start_date),
        monthly_fee=positive_decimal(request.monthly_fee, "monthly_fee"),
        is_active=defaults.resolve_is_active(request.is_active),
        starting_weight_kg=starting_weight,
        notes=request.notes or None,
    )
    if client_id is not None:
        fields["id"] = client_id
    return Client(**fields)


def _next_workout_model(schedules, today: date) -> Optional[NextWorkoutModel]:
    upcoming = next_workout(schedules, today)
    if upcoming is None:
        return None
    s = upcoming.schedule
    return NextWorkoutModel(
        day_of_week=s.day_of_week,
        day_name=s.day_name,
        start_time=s.start_time,
        end_time=s.end_time,
        location=s.location,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=ClientCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create client",
)
async def create_client(
    request: ClientRequest,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
    settings: SettingsDep,
) -> ClientCreatedResponse:
    """Create a client owned by the requesting trainer."""
    try:
        client = _client_from_request(request, trainer, settings.client_defaults)
    except TrainerDeskError as e:
        raise to_http_error(e) from e

    repository.add_client(client)

    logger.info(
        "Client created",
        extra={"client_id": str(client.id), "user_id": trainer}
    )

    return ClientCreatedResponse(id=client.id)


@router.get(
    "",
    response_model=ClientListResponse,
    summary="List clients",
    description="All of the trainer's clients by name, with current payment status and next workout",
)
async def list_clients(
    trainer: CurrentTrainer,
    repository: RepositoryDep,
    settings: SettingsDep,
    now: NowDep,
) -> ClientListResponse:
    clients = repository.list_clients(trainer)
    payments = repository.list_payments(trainer)
    schedules = repository.list_schedules(trainer)

    items = []
    try:
        for client in clients:
            summary = current_payment_status(
                client,
                [p for p in payments if p.client_id == client.id],
                now,
                settings.cycle_bounds,
            )
            items.append(ClientSummaryItem(
                **ClientItem.from_domain(client).model_dump(),
                payment_status=PaymentStatusModel.from_summary(summary),
                next_workout=_next_workout_model(
                    [s for s in schedules if s.client_id == client.id], now.date()
                ),
            ))
    except TrainerDeskError as e:
        raise to_http_error(e) from e

    return ClientListResponse(clients=items, total=len(items))


@router.get(
    "/{client_id}",
    response_model=ClientDetailResponse,
    summary="Get client details",
)
async def get_client(
    client_id: UUID,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
    settings: SettingsDep,
    now: NowDep,
) -> ClientDetailResponse:
    """
    Full client view: details, schedules, payments (newest first),
    progress (newest first), current payment status and weight change.
    """
    try:
        client = repository.get_client(trainer, client_id)
        payments = repository.list_payments(trainer, client_id)
        schedules = repository.list_schedules(trainer, client_id)
        entries = repository.list_progress_entries(trainer, client_id)
        summary = current_payment_status(client, payments, now, settings.cycle_bounds)
    except (TrainerDeskError, NotFoundError) as e:
        raise to_http_error(e) from e

    return ClientDetailResponse(
        **ClientItem.from_domain(client).model_dump(),
        payment_status=PaymentStatusModel.from_summary(summary),
        next_workout=_next_workout_model(schedules, now.date()),
        schedules=[ScheduleItem.from_domain(s) for s in schedules],
        payments=[PaymentItem.from_domain(p) for p in payments],
        progress_entries=[ProgressItem.from_domain(e) for e in entries],
        weight_change_kg=weight_change(client.starting_weight_kg, entries),
    )


@router.put(
    "/{client_id}",
    response_model=ClientCreatedResponse,
    summary="Update client",
    description="Replace a client's details. Payment status is recomputed from the new start date.",
)
async def update_client(
    client_id: UUID,
    request: ClientRequest,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
    settings: SettingsDep,
) -> ClientCreatedResponse:
    try:
        existing = repository.get_client(trainer, client_id)
        client = _client_from_request(request, trainer, settings.client_defaults, client_id=existing.id)
        client.created_at = existing.created_at
        repository.update_client(client)
    except (TrainerDeskError, NotFoundError) as e:
        raise to_http_error(e) from e

    logger.info(
        "Client updated",
        extra={"client_id": str(client_id), "user_id": trainer}
    )

    return ClientCreatedResponse(id=client.id)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete client",
    description="Delete a client along with their payments, schedules and progress entries",
)
async def delete_client(
    client_id: UUID,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
) -> None:
    try:
        repository.delete_client(trainer, client_id)
    except NotFoundError as e:
        raise to_http_error(e) from e

    logger.info(
        "Client deleted",
        extra={"client_id": str(client_id), "user_id": trainer}
    )


@router.get(
    "/{client_id}/payment-status",
    response_model=PaymentStatusModel,
    summary="Current payment status",
    description="Aggregate payments for the billing cycle containing today",
)
async def get_payment_status(
    client_id: UUID,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
    settings: SettingsDep,
    now: NowDep,
) -> PaymentStatusModel:
    try:
        client = repository.get_client(trainer, client_id)
        payments = repository.list_payments(trainer, client_id)
        summary = current_payment_status(client, payments, now, settings.cycle_bounds)
    except (TrainerDeskError, NotFoundError) as e:
        raise to_http_error(e) from e

    return PaymentStatusModel.from_summary(summary)
