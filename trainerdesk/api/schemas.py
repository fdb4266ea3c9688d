"""
Response models shared across routers.

Each maps one domain object to the JSON shape the frontend consumes.
Dates go out as ISO strings and money as decimal strings; no display
formatting is applied here.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from ..core.billing.payments import PaymentSummary
from ..core.clients.models import Client, Payment, ProgressEntry, WorkoutSchedule

# Amounts arrive as JSON numbers or strings and are validated by the core
# so that bad values surface as InvalidAmount rather than a schema error.
AmountInput = Optional[Union[int, float, str]]


class PaymentStatusModel(BaseModel):
    """Payment state of one client for one billing cycle."""
    status: str = Field(description="Paid, Partially paid or Not paid")
    cycle_start: date = Field(description="First day of the billing cycle")
    cycle_end: date = Field(description="Last day of the billing cycle")
    cycle_month: int = Field(description="Billing month (1-12) the cycle is attributed to")
    cycle_year: int = Field(description="Billing year the cycle is attributed to")
    monthly_fee: Decimal
    total_paid: Decimal
    remaining_balance: Decimal
    payment_count: int
    expires_at: Optional[datetime] = Field(None, description="End of the paid cycle (Paid only)")
    days_remaining: Optional[int] = Field(None, description="Whole days until expiry (Paid only)")
    is_expired: Optional[bool] = Field(None, description="Whether the paid cycle has ended (Paid only)")

    @classmethod
    def from_summary(cls, summary: PaymentSummary) -> "PaymentStatusModel":
        return cls(
            status=summary.status.value,
            cycle_start=summary.cycle.start,
            cycle_end=summary.cycle.end,
            cycle_month=summary.cycle.month,
            cycle_year=summary.cycle.year,
            monthly_fee=summary.monthly_fee,
            total_paid=summary.total_paid,
            remaining_balance=summary.remaining_balance,
            payment_count=summary.payment_count,
            expires_at=summary.expires_at,
            days_remaining=summary.days_remaining,
            is_expired=summary.is_expired,
        )


class PaymentItem(BaseModel):
    id: UUID
    client_id: UUID
    amount: Decimal
    paid_on: date
    month: int = Field(description="Billing month this payment is attributed to")
    year: int = Field(description="Billing year this payment is attributed to")

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentItem":
        return cls(
            id=payment.id,
            client_id=payment.client_id,
            amount=payment.amount,
            paid_on=payment.paid_on,
            month=payment.month,
            year=payment.year,
        )


class ScheduleItem(BaseModel):
    id: UUID
    client_id: UUID
    day_of_week: int = Field(description="0=Sunday .. 6=Saturday")
    day_name: str
    start_time: str
    end_time: str
    location: Optional[str] = None

    @classmethod
    def from_domain(cls, schedule: WorkoutSchedule) -> "ScheduleItem":
        return cls(
            id=schedule.id,
            client_id=schedule.client_id,
            day_of_week=schedule.day_of_week,
            day_name=schedule.day_name,
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            location=schedule.location,
        )


class ProgressItem(BaseModel):
    id: UUID
    client_id: UUID
    measured_on: date
    weight_kg: Decimal
    notes: Optional[str] = None

    @classmethod
    def from_domain(cls, entry: ProgressEntry) -> "ProgressItem":
        return cls(
            id=entry.id,
            client_id=entry.client_id,
            measured_on=entry.measured_on,
            weight_kg=entry.weight_kg,
            notes=entry.notes,
        )


class ClientItem(BaseModel):
    id: UUID
    name: str
    start_date: date
    monthly_fee: Decimal
    is_active: bool
    starting_weight_kg: Optional[Decimal] = None
    notes: Optional[str] = None

    @classmethod
    def from_domain(cls, client: Client) -> "ClientItem":
        return cls(
            id=client.id,
            name=client.name,
            start_date=client.start_date,
            monthly_fee=client.monthly_fee,
            is_active=client.is_active,
            starting_weight_kg=client.starting_weight_kg,
            notes=client.notes,
        )
