"""
Workout schedule API endpoints.

A schedule entry is one weekly recurring block for one client. Creating
a schedule takes a list of weekdays and produces one entry per day, all
with the same times. Overlaps with other bookings are allowed; the
availability calendar accounts for them.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.clients.models import WorkoutSchedule
from ...core.errors import TrainerDeskError
from ...core.scheduling.schedules import build_schedules
from ...infrastructure.repository import NotFoundError
from ..dependencies import CurrentTrainer, RepositoryDep
from ..errors import to_http_error
from ..schemas import ScheduleItem

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class ScheduleCreateRequest(BaseModel):
    """Create the same time block on one or more weekdays."""
    model_config = ConfigDict(str_strip_whitespace=True)

    client_id: UUID
    days_of_week: list[int] = Field(description="Weekdays, 0=Sunday .. 6=Saturday; at least one")
    start_time: str = Field(description="HH:MM, 24-hour")
    end_time: str = Field(description="HH:MM, 24-hour, after start_time")
    location: Optional[str] = Field(None, max_length=255)


class ScheduleUpdateRequest(BaseModel):
    """Replace one schedule entry's day, times and location."""
    model_config = ConfigDict(str_strip_whitespace=True)

    day_of_week: int = Field(description="0=Sunday .. 6=Saturday")
    start_time: str
    end_time: str
    location: Optional[str] = Field(None, max_length=255)


class ScheduleListResponse(BaseModel):
    schedules: list[ScheduleItem]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=ScheduleListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create schedules",
)
async def create_schedules(
    request: ScheduleCreateRequest,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
) -> ScheduleListResponse:
    """
    Create one schedule entry per selected weekday.

    Always returns a list, even for a single day. An empty
    `days_of_week` is rejected with 400.
    """
    try:
        client = repository.get_client(trainer, request.client_id)
        schedules = build_schedules(
            client_id=client.id,
            days_of_week=request.days_of_week,
            start_time=request.start_time,
            end_time=request.end_time,
            location=request.location,
        )
    except (TrainerDeskError, NotFoundError) as e:
        raise to_http_error(e) from e

    repository.add_schedules(schedules)

    logger.info(
        "Schedules created",
        extra={"client_id": str(client.id), "count": len(schedules)}
    )

    return ScheduleListResponse(schedules=[ScheduleItem.from_domain(s) for s in schedules])


@router.put(
    "/{schedule_id}",
    response_model=ScheduleItem,
    summary="Update schedule",
)
async def update_schedule(
    schedule_id: UUID,
    request: ScheduleUpdateRequest,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
) -> ScheduleItem:
    try:
        existing = repository.get_schedule(trainer, schedule_id)
        updated = WorkoutSchedule(
            id=existing.id,
            client_id=existing.client_id,
            day_of_week=request.day_of_week,
            start_time=request.start_time,
            end_time=request.end_time,
            location=request.location or None,
        )
        repository.update_schedule(updated)
    except (TrainerDeskError, NotFoundError) as e:
        raise to_http_error(e) from e

    return ScheduleItem.from_domain(updated)


@router.delete(
    "/{schedule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete schedule",
)
async def delete_schedule(
    schedule_id: UUID,
    trainer: CurrentTrainer,
    repository: RepositoryDep,
) -> None:
    try:
        repository.delete_schedule(trainer, schedule_id)
    except NotFoundError as e:
        raise to_http_error(e) from e

    logger.info("Schedule deleted", extra={"schedule_id": str(schedule_id)})
