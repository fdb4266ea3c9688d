"""
Client records and their owned data: payments, schedules, progress.
"""

from .models import (
    DAY_NAMES,
    Client,
    ClientDefaults,
    Payment,
    ProgressEntry,
    WorkoutSchedule,
    positive_decimal,
)
from .progress import latest_entry, weight_change

__all__ = [
    "DAY_NAMES",
    "Client",
    "ClientDefaults",
    "Payment",
    "ProgressEntry",
    "WorkoutSchedule",
    "positive_decimal",
    "latest_entry",
    "weight_change",
]
