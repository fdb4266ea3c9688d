"""
Data access for a trainer's clients and everything they own.

TrainerRepository is the interface the API layer depends on. Every query
is scoped to the owning trainer (`user_id`): asking for another trainer's
record behaves exactly like asking for one that doesn't exist.

InMemoryTrainerRepository backs mock mode and the test suite. The
Snowflake implementation lives in `snowflake/repositories/trainer.py`.
"""

import logging
from typing import Optional, Protocol
from uuid import UUID

from ..core.clients.models import Client, Payment, ProgressEntry, WorkoutSchedule

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Base for lookups that found nothing for this trainer."""
    pass


class ClientNotFoundError(NotFoundError):
    pass


class PaymentNotFoundError(NotFoundError):
    pass


class ScheduleNotFoundError(NotFoundError):
    pass


class ProgressEntryNotFoundError(NotFoundError):
    pass


class TrainerRepository(Protocol):
    """
    Persistence operations the application needs, in domain terms.

    Deleting a client removes its payments, schedules and progress
    entries with it.
    """

    # Clients
    def add_client(self, client: Client) -> None: ...
    def update_client(self, client: Client) -> None: ...
    def get_client(self, user_id: str, client_id: UUID) -> Client: ...
    def list_clients(self, user_id: str, active_only: bool = False) -> list[Client]: ...
    def delete_client(self, user_id: str, client_id: UUID) -> None: ...

    # Payments
    def add_payment(self, payment: Payment) -> None: ...
    def get_payment(self, user_id: str, payment_id: UUID) -> Payment: ...
    def list_payments(self, user_id: str, client_id: Optional[UUID] = None) -> list[Payment]: ...
    def delete_payment(self, user_id: str, payment_id: UUID) -> None: ...

    # Workout schedules
    def add_schedules(self, schedules: list[WorkoutSchedule]) -> None: ...
    def get_schedule(self, user_id: str, schedule_id: UUID) -> WorkoutSchedule: ...
    def update_schedule(self, schedule: WorkoutSchedule) -> None: ...
    def list_schedules(self, user_id: str, client_id: Optional[UUID] = None) -> list[WorkoutSchedule]: ...
    def delete_schedule(self, user_id: str, schedule_id: UUID) -> None: ...

    # Progress
    def add_progress_entry(self, entry: ProgressEntry) -> None: ...
    def get_progress_entry(self, user_id: str, entry_id: UUID) -> ProgressEntry: ...
    def list_progress_entries(self, user_id: str, client_id: UUID) -> list[ProgressEntry]: ...
    def delete_progress_entry(self, user_id: str, entry_id: UUID) -> None: ...

    def ping(self) -> None: ...


class InMemoryTrainerRepository:
    """
    Dictionary-backed TrainerRepository.

    Not suitable for production, but enough for:
    - Local development (SNOWFLAKE_MOCK_MODE=true)
    - API tests
    """

    def __init__(self) -> None:
        self._clients: dict[UUID, Client] = {}
        self._payments: dict[UUID, Payment] = {}
        self._schedules: dict[UUID, WorkoutSchedule] = {}
        self._progress: dict[UUID, ProgressEntry] = {}

        logger.info("Initialized in-memory trainer repository")

    # -----------------------------------------------------------------------
    # Clients
    # -----------------------------------------------------------------------

    def add_client(self, client: Client) -> None:
        self._clients[client.id] = client

    def update_client(self, client: Client) -> None:
        existing = self.get_client(client.user_id, client.id)
        self._clients[existing.id] = client

    def get_client(self, user_id: str, client_id: UUID) -> Client:
        client = self._clients.get(client_id)
        if client is None or client.user_id != user_id:
            raise ClientNotFoundError(f"Client {client_id} not found")
        return client

    def list_clients(self, user_id: str, active_only: bool = False) -> list[Client]:
        clients = [
            c for c in self._clients.values()
            if c.user_id == user_id and (c.is_active or not active_only)
        ]
        return sorted(clients, key=lambda c: c.name.lower())

    def delete_client(self, user_id: str, client_id: UUID) -> None:
        self.get_client(user_id, client_id)

        for store in (self._payments, self._schedules, self._progress):
            owned = [key for key, item in store.items() if item.client_id == client_id]
            for key in owned:
                del store[key]
        del self._clients[client_id]

    def _owned_client_ids(self, user_id: str) -> set[UUID]:
        return {c.id for c in self._clients.values() if c.user_id == user_id}

    # -----------------------------------------------------------------------
    # Payments
    # -----------------------------------------------------------------------

    def add_payment(self, payment: Payment) -> None:
        self._payments[payment.id] = payment

    def get_payment(self, user_id: str, payment_id: UUID) -> Payment:
        payment = self._payments.get(payment_id)
        if payment is None or payment.client_id not in self._owned_client_ids(user_id):
            raise PaymentNotFoundError(f"Payment {payment_id} not found")
        return payment

    def list_payments(self, user_id: str, client_id: Optional[UUID] = None) -> list[Payment]:
        owned = self._owned_client_ids(user_id)
        payments = [
            p for p in self._payments.values()
            if p.client_id in owned and (client_id is None or p.client_id == client_id)
        ]
        return sorted(payments, key=lambda p: (p.paid_on, p.created_at), reverse=True)

    def delete_payment(self, user_id: str, payment_id: UUID) -> None:
        self.get_payment(user_id, payment_id)
        del self._payments[payment_id]

    # -----------------------------------------------------------------------
    # Workout schedules
    # -----------------------------------------------------------------------

    def add_schedules(self, schedules: list[WorkoutSchedule]) -> None:
        for schedule in schedules:
            self._schedules[schedule.id] = schedule

    def get_schedule(self, user_id: str, schedule_id: UUID) -> WorkoutSchedule:
        schedule = self._schedules.get(schedule_id)
        if schedule is None or schedule.client_id not in self._owned_client_ids(user_id):
            raise ScheduleNotFoundError(f"Schedule {schedule_id} not found")
        return schedule

    def update_schedule(self, schedule: WorkoutSchedule) -> None:
        if schedule.id not in self._schedules:
            raise ScheduleNotFoundError(f"Schedule {schedule.id} not found")
        self._schedules[schedule.id] = schedule

    def list_schedules(self, user_id: str, client_id: Optional[UUID] = None) -> list[WorkoutSchedule]:
        owned = self._owned_client_ids(user_id)
        schedules = [
            s for s in self._schedules.values()
            if s.client_id in owned and (client_id is None or s.client_id == client_id)
        ]
        return sorted(schedules, key=lambda s: (s.day_of_week, s.start_minute))

    def delete_schedule(self, user_id: str, schedule_id: UUID) -> None:
        self.get_schedule(user_id, schedule_id)
        del self._schedules[schedule_id]

    # -----------------------------------------------------------------------
    # Progress
    # -----------------------------------------------------------------------

    def add_progress_entry(self, entry: ProgressEntry) -> None:
        self._progress[entry.id] = entry

    def get_progress_entry(self, user_id: str, entry_id: UUID) -> ProgressEntry:
        entry = self._progress.get(entry_id)
        if entry is None or entry.client_id not in self._owned_client_ids(user_id):
            raise ProgressEntryNotFoundError(f"Progress entry {entry_id} not found")
        return entry

    def list_progress_entries(self, user_id: str, client_id: UUID) -> list[ProgressEntry]:
        self.get_client(user_id, client_id)
        entries = [e for e in self._progress.values() if e.client_id == client_id]
        return sorted(entries, key=lambda e: e.measured_on, reverse=True)

    def delete_progress_entry(self, user_id: str, entry_id: UUID) -> None:
        self.get_progress_entry(user_id, entry_id)
        del self._progress[entry_id]

    def ping(self) -> None:
        pass
