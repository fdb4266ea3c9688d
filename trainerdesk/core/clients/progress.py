"""Weight progress for a client."""

from decimal import Decimal
from typing import Iterable, Optional

from .models import ProgressEntry


def latest_entry(entries: Iterable[ProgressEntry]) -> Optional[ProgressEntry]:
    return max(entries, key=lambda e: e.measured_on, default=None)


def weight_change(
    starting_weight_kg: Optional[Decimal],
    entries: Iterable[ProgressEntry],
) -> Optional[Decimal]:
    """
    Latest recorded weight minus the starting weight.

    Negative means weight lost. None when there is no starting weight or
    no entries yet.
    """
    latest = latest_entry(entries)
    if starting_weight_kg is None or latest is None:
        return None
    return latest.weight_kg - starting_weight_kg
