"""
Weight progress API endpoints.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.clients.models import ProgressEntry, positive_decimal
from ...core.dates import parse_calendar_date
from ...core.errors import TrainerDeskError
from ...infrastructure.repository import NotFoundError
from ..dependencies import CurrentTrainer, RepositoryDep
from ..errors import to_http_error
from ..schemas import AmountInput, ProgressItem

logger = logging.getLogger(__name__)

router = APIRouter()


class ProgressRequest(BaseModel):
    """Record a weight measurement."""
    model_config = ConfigDict(str_strip_whitespace=True)

    client_id: UUID
    date: str = Field(description="Measurement date (YYYY-MM-DD)")
    weight_kg: AmountInput = Field(None, description="Body weight in kilograms")
    notes: Optional[str] = Field(None, max_length=2000)


@router.post(
    "",
    response_model=ProgressItem,
    status_code=status.HTTP_201_CREATED,
    summary="Record progress entry",
)
async def create_progress_entry(
    request: ProgressRequest,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
) -> ProgressItem:
    try:
        client = repository.get_client(trainer, request.client_id)
        entry = ProgressEntry(
            client_id=client.id,
            measured_on=parse_calendar_date(request.date),
            weight_kg=positive_decimal(request.weight_kg, "weight_kg"),
            notes=request.notes or None,
        )
    except (TrainerDeskError, NotFoundError) as e:
        raise to_http_error(e) from e

    repository.add_progress_entry(entry)

    logger.info(
        "Progress entry recorded",
        extra={"entry_id": str(entry.id), "client_id": str(client.id)}
    )

    return ProgressItem.from_domain(entry)


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete progress entry",
)
async def delete_progress_entry(
    entry_id: UUID,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
) -> None:
    try:
        repository.delete_progress_entry(trainer, entry_id)
    except NotFoundError as e:
        raise to_http_error(e) from e
