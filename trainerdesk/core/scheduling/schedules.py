"""
Workout schedule helpers: building schedule entries from a request and
finding a client's next session.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence
from uuid import UUID

from ..clients.models import WorkoutSchedule
from ..errors import MissingSelection


def python_weekday_to_day_of_week(value: date) -> int:
    """Map `date.weekday()` (Monday=0) onto the schedule convention (Sunday=0)."""
    return (value.weekday() + 1) % 7


def build_schedules(
    client_id: UUID,
    days_of_week: Sequence[int],
    start_time: str,
    end_time: str,
    location: Optional[str] = None,
) -> list[WorkoutSchedule]:
    """
    One WorkoutSchedule per selected day, all sharing the same times.

    Raises MissingSelection when no day is selected. Repeated days are
    collapsed so a request cannot double-book its own client.
    """
    if not days_of_week:
        raise MissingSelection("At least one day must be selected")

    unique_days = list(dict.fromkeys(days_of_week))
    return [
        WorkoutSchedule(
            client_id=client_id,
            day_of_week=day,
            start_time=start_time,
            end_time=end_time,
            location=location or None,
        )
        for day in unique_days
    ]


@dataclass(frozen=True)
class NextWorkout:
    schedule: WorkoutSchedule

    @property
    def day_name(self) -> str:
        return self.schedule.day_name


def next_workout(schedules: Iterable[WorkoutSchedule], today: date) -> Optional[NextWorkout]:
    """
    The client's next session after today.

    Looks for the first schedule on a weekday strictly later this week;
    failing that, wraps around to the earliest weekday (next week).
    Sessions on the same weekday are ordered by start time.
    """
    ordered = sorted(schedules, key=lambda s: (s.day_of_week, s.start_minute))
    if not ordered:
        return None

    current_day = python_weekday_to_day_of_week(today)
    for schedule in ordered:
        if schedule.day_of_week > current_day:
            return NextWorkout(schedule)

    return NextWorkout(ordered[0])
