"""
Domain models for a trainer's clients.

A Client is the aggregate root: payments, workout schedules and progress
entries all belong to exactly one client and go away with it. These
models carry no persistence or HTTP concerns; repositories and routes
translate to and from them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Union
from uuid import UUID, uuid4

from ..dates import time_to_minutes
from ..errors import InvalidAmount, InvalidSchedule

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

AmountInput = Union[Decimal, int, float, str, None]

# Amounts and weights are stored as NUMBER(p, 2)
CENT = Decimal("0.01")


def positive_decimal(value: AmountInput, field_name: str = "amount") -> Decimal:
    """
    Coerce an incoming amount to a Decimal and require it to be > 0.

    Floats go through `str()` first so 0.1 stays 0.1 rather than its
    binary approximation. Raises InvalidAmount for missing, non-numeric,
    non-finite, zero and negative values, and for values with more than
    two decimal places.
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmount(f"{field_name} is required")

    try:
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidAmount(f"{field_name} must be a number, got {value!r}") from e

    if not amount.is_finite():
        raise InvalidAmount(f"{field_name} must be a finite number, got {value!r}")
    try:
        exact_to_cent = amount == amount.quantize(CENT)
    except InvalidOperation as e:
        raise InvalidAmount(f"{field_name} is out of range, got {value!r}") from e
    if not exact_to_cent:
        raise InvalidAmount(f"{field_name} allows at most two decimal places, got {value!r}")
    if amount <= 0:
        raise InvalidAmount(f"{field_name} must be greater than zero, got {amount}")

    return amount


@dataclass(frozen=True)
class ClientDefaults:
    """
    Named defaults applied when a client is created or edited.

    Populated from settings so the defaults live in one place instead of
    being re-derived wherever a field happens to be absent.
    """
    is_active: bool = True

    def resolve_is_active(self, value: Optional[bool]) -> bool:
        return self.is_active if value is None else value


@dataclass
class Client:
    """A trainer's client. `start_date` anchors every billing cycle."""
    user_id: str
    name: str
    start_date: date
    monthly_fee: Decimal
    id: UUID = field(default_factory=uuid4)
    is_active: bool = True
    starting_weight_kg: Optional[Decimal] = None
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Client name cannot be empty")
        self.monthly_fee = positive_decimal(self.monthly_fee, "monthly_fee")
        if self.starting_weight_kg is not None:
            self.starting_weight_kg = positive_decimal(self.starting_weight_kg, "starting_weight_kg")


@dataclass(frozen=True)
class Payment:
    """
    A single payment against a client.

    `month`/`year` name the billing cycle the payment was attributed to
    when it was recorded. They are a cached derivation of `paid_on` and
    the client's start date; build payments with
    `billing.payments.record_payment` rather than setting them by hand.
    """
    client_id: UUID
    amount: Decimal
    paid_on: date
    month: int
    year: int
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise InvalidAmount(f"amount must be greater than zero, got {self.amount}")
        if not 1 <= self.month <= 12:
            raise ValueError(f"Payment month must be between 1 and 12, got {self.month}")


@dataclass
class WorkoutSchedule:
    """One weekly recurring training block (0=Sunday .. 6=Saturday)."""
    client_id: UUID
    day_of_week: int
    start_time: str
    end_time: str
    location: Optional[str] = None
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if not isinstance(self.day_of_week, int) or not 0 <= self.day_of_week <= 6:
            raise InvalidSchedule(f"day_of_week must be between 0 and 6, got {self.day_of_week!r}")
        if self.end_minute <= self.start_minute:
            raise InvalidSchedule(
                f"end_time {self.end_time} must be after start_time {self.start_time}"
            )

    @property
    def start_minute(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minute(self) -> int:
        return time_to_minutes(self.end_time)

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]


@dataclass
class ProgressEntry:
    """A dated body-weight measurement."""
    client_id: UUID
    measured_on: date
    weight_kg: Decimal
    notes: Optional[str] = None
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        self.weight_kg = positive_decimal(self.weight_kg, "weight_kg")
