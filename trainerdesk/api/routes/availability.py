"""
Availability calendar endpoint.

Collects every weekly booking across the trainer's clients and returns
them alongside the free slots left in the working window, grouped by
day of week.
"""

import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ...core.clients.models import DAY_NAMES
from ...core.errors import TrainerDeskError
from ...core.scheduling.availability import (
    DAYS_PER_WEEK,
    bookings_for_day,
    bookings_from_clients,
    calculate_free_slots,
)
from ..dependencies import CurrentTrainer, RepositoryDep, SettingsDep
from ..errors import to_http_error

logger = logging.getLogger(__name__)

router = APIRouter()


class BookedSlotModel(BaseModel):
    start_time: str
    end_time: str
    client_name: str
    location: Optional[str] = None


class FreeSlotModel(BaseModel):
    start_time: str
    end_time: str
    duration_minutes: int


class DayAvailability(BaseModel):
    day_of_week: int = Field(description="0=Sunday .. 6=Saturday")
    day_name: str
    booked: list[BookedSlotModel]
    free: list[FreeSlotModel]


class AvailabilityResponse(BaseModel):
    working_day_start: str
    working_day_end: str
    min_free_slot_minutes: int
    days: list[DayAvailability]


@router.get(
    "",
    response_model=AvailabilityResponse,
    summary="Weekly availability",
    description="Booked sessions and free slots for each day of the week",
)
async def get_availability(
    trainer: CurrentTrainer,
    repository: RepositoryDep,
    settings: SettingsDep,
) -> AvailabilityResponse:
    window = settings.working_window

    clients = repository.list_clients(trainer)
    schedules = repository.list_schedules(trainer)

    try:
        bookings = bookings_from_clients(clients, schedules)
        free_slots = calculate_free_slots(bookings, window)
    except TrainerDeskError as e:
        raise to_http_error(e) from e

    days = []
    for day in range(DAYS_PER_WEEK):
        days.append(DayAvailability(
            day_of_week=day,
            day_name=DAY_NAMES[day],
            booked=[
                BookedSlotModel(
                    start_time=b.start_time,
                    end_time=b.end_time,
                    client_name=b.client_name,
                    location=b.location,
                )
                for b in bookings_for_day(bookings, day)
            ],
            free=[
                FreeSlotModel(
                    start_time=f.start_time,
                    end_time=f.end_time,
                    duration_minutes=f.duration_minutes,
                )
                for f in free_slots
                if f.day_of_week == day
            ],
        ))

    logger.debug(
        "Computed availability",
        extra={"user_id": trainer, "bookings": len(bookings), "free_slots": len(free_slots)}
    )

    return AvailabilityResponse(
        working_day_start=window.start,
        working_day_end=window.end,
        min_free_slot_minutes=window.min_slot_minutes,
        days=days,
    )
