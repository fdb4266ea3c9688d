"""
Weekly availability calculation.

Takes every recurring booking a trainer has across all clients and works
out which parts of the working day are still free, per day of week.

The sweep walks each day's bookings in start order with a cursor that
only moves forward. Overlapping or nested bookings therefore need no
merging step: they simply fail to move the cursor, and no gap with a
negative length can ever be produced.
"""

from dataclasses import dataclass
from itertools import groupby
from typing import Iterable, Optional, Sequence

from ..clients.models import DAY_NAMES, Client, WorkoutSchedule
from ..dates import minutes_to_time, time_to_minutes
from ..errors import InvalidFormat, InvalidSchedule

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class WorkingWindow:
    """The daily span free slots are computed within, plus the shortest slot worth showing."""
    start: str = "06:00"
    end: str = "22:00"
    min_slot_minutes: int = 30

    def __post_init__(self) -> None:
        if self.end_minute <= self.start_minute:
            raise InvalidFormat(f"Working window end {self.end} must be after start {self.start}")
        if self.min_slot_minutes < 0:
            raise ValueError("min_slot_minutes cannot be negative")

    @property
    def start_minute(self) -> int:
        return time_to_minutes(self.start)

    @property
    def end_minute(self) -> int:
        return time_to_minutes(self.end)

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute


DEFAULT_WINDOW = WorkingWindow()


@dataclass(frozen=True)
class Booking:
    """
    A booked weekly block, as seen by the availability calendar.

    `client_name` and `location` are labels for display; the sweep only
    looks at the day and times.
    """
    day_of_week: int
    start_time: str
    end_time: str
    client_name: str = ""
    location: Optional[str] = None

    def __post_init__(self) -> None:
        if not 0 <= self.day_of_week < DAYS_PER_WEEK:
            raise InvalidSchedule(f"day_of_week must be between 0 and 6, got {self.day_of_week}")
        if self.end_minute <= self.start_minute:
            raise InvalidSchedule(f"Booking end {self.end_time} must be after start {self.start_time}")

    @property
    def start_minute(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minute(self) -> int:
        return time_to_minutes(self.end_time)


@dataclass(frozen=True)
class FreeSlot:
    """An uncommitted span within the working window."""
    day_of_week: int
    start_time: str
    end_time: str
    duration_minutes: int

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]


def bookings_from_clients(
    clients: Iterable[Client],
    schedules: Iterable[WorkoutSchedule],
) -> list[Booking]:
    """Label each schedule with its client's name."""
    names = {client.id: client.name for client in clients}
    return [
        Booking(
            day_of_week=s.day_of_week,
            start_time=s.start_time,
            end_time=s.end_time,
            client_name=names.get(s.client_id, ""),
            location=s.location,
        )
        for s in schedules
    ]


def bookings_for_day(bookings: Iterable[Booking], day_of_week: int) -> list[Booking]:
    """One day's bookings sorted by start time."""
    return sorted(
        (b for b in bookings if b.day_of_week == day_of_week),
        key=lambda b: b.start_minute,
    )


def free_slots_for_day(
    day_of_week: int,
    day_bookings: Sequence[Booking],
    window: WorkingWindow = DEFAULT_WINDOW,
) -> list[FreeSlot]:
    """Sweep one day's bookings (any order) and return its free slots."""
    slots: list[FreeSlot] = []
    window_start, window_end = window.start_minute, window.end_minute

    def emit(start: int, end: int) -> None:
        duration = end - start
        if duration >= window.min_slot_minutes:
            slots.append(FreeSlot(
                day_of_week=day_of_week,
                start_time=minutes_to_time(start),
                end_time=minutes_to_time(end),
                duration_minutes=duration,
            ))

    cursor = window_start
    for booking in sorted(day_bookings, key=lambda b: b.start_minute):
        # Clip to the window so early or late sessions only block what is inside it
        start = min(max(booking.start_minute, window_start), window_end)
        end = min(max(booking.end_minute, window_start), window_end)
        if cursor < start:
            emit(cursor, start)
        cursor = max(cursor, end)

    if cursor < window_end:
        emit(cursor, window_end)

    return slots


def calculate_free_slots(
    bookings: Iterable[Booking],
    window: WorkingWindow = DEFAULT_WINDOW,
) -> list[FreeSlot]:
    """
    Free slots for the whole week, ordered by day then start time.

    A day with no bookings yields a single slot covering the full window.
    Gaps shorter than `window.min_slot_minutes` are dropped.
    """
    by_day = {
        day: list(group)
        for day, group in groupby(
            sorted(bookings, key=lambda b: (b.day_of_week, b.start_minute)),
            key=lambda b: b.day_of_week,
        )
    }

    slots: list[FreeSlot] = []
    for day in range(DAYS_PER_WEEK):
        slots.extend(free_slots_for_day(day, by_day.get(day, []), window))
    return slots
