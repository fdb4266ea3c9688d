"""
Weekly schedules and the trainer's free-slot calendar.
"""

from .availability import (
    DEFAULT_WINDOW,
    Booking,
    FreeSlot,
    WorkingWindow,
    bookings_for_day,
    bookings_from_clients,
    calculate_free_slots,
    free_slots_for_day,
)
from .schedules import NextWorkout, build_schedules, next_workout

__all__ = [
    "DEFAULT_WINDOW",
    "Booking",
    "FreeSlot",
    "WorkingWindow",
    "bookings_for_day",
    "bookings_from_clients",
    "calculate_free_slots",
    "free_slots_for_day",
    "NextWorkout",
    "build_schedules",
    "next_workout",
]
