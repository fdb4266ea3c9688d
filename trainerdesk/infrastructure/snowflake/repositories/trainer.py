"""
Snowflake repository for clients, payments, schedules and progress.

This module implements the repository pattern for trainer data access.
The repository:
1. Translates between domain models and database rows
2. Encapsulates all SQL queries
3. Scopes every query to the owning trainer

The application code never writes SQL directly - it asks the repository
for what it needs in domain terms.
"""

import logging
from typing import Optional
from uuid import UUID

from trainerdesk.core.clients.models import Client, Payment, ProgressEntry, WorkoutSchedule
from trainerdesk.infrastructure.repository import (
    ClientNotFoundError,
    PaymentNotFoundError,
    ProgressEntryNotFoundError,
    ScheduleNotFoundError,
)
from trainerdesk.infrastructure.snowflake.client import SnowflakeConnection

logger = logging.getLogger(__name__)


# Snowflake does not enforce foreign keys, so child rows are removed
# explicitly in delete_client.
SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS clients (
        client_id VARCHAR(36) PRIMARY KEY,
        user_id VARCHAR(255) NOT NULL,
        name VARCHAR(255) NOT NULL,
        start_date DATE NOT NULL,
        monthly_fee NUMBER(12, 2) NOT NULL,
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        starting_weight_kg NUMBER(6, 2),
        notes VARCHAR,
        created_at TIMESTAMP_NTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS payments (
        payment_id VARCHAR(36) PRIMARY KEY,
        client_id VARCHAR(36) NOT NULL REFERENCES clients (client_id),
        amount NUMBER(12, 2) NOT NULL,
        paid_on DATE NOT NULL,
        month INTEGER NOT NULL,
        year INTEGER NOT NULL,
        created_at TIMESTAMP_NTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS workout_schedules (
        schedule_id VARCHAR(36) PRIMARY KEY,
        client_id VARCHAR(36) NOT NULL REFERENCES clients (client_id),
        day_of_week INTEGER NOT NULL,
        start_time VARCHAR(5) NOT NULL,
        end_time VARCHAR(5) NOT NULL,
        location VARCHAR(255)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS progress_entries (
        entry_id VARCHAR(36) PRIMARY KEY,
        client_id VARCHAR(36) NOT NULL REFERENCES clients (client_id),
        measured_on DATE NOT NULL,
        weight_kg NUMBER(6, 2) NOT NULL,
        notes VARCHAR
    )
    """,
)

_CLIENT_COLUMNS = """
    c.client_id, c.user_id, c.name, c.start_date, c.monthly_fee,
    c.is_active, c.starting_weight_kg, c.notes, c.created_at
"""


class SnowflakeTrainerRepository:
    """
    TrainerRepository backed by Snowflake.

    Child tables are joined to `clients` on every read so that ownership
    is checked in the same query that fetches the row.
    """

    def __init__(self, connection: SnowflakeConnection) -> None:
        self._conn = connection

    def ensure_schema(self) -> None:
        """Create the tables if they don't exist yet."""
        self._execute_all([(statement, None) for statement in SCHEMA_STATEMENTS])
        logger.info("Ensured Snowflake schema")

    # -----------------------------------------------------------------------
    # Clients
    # -----------------------------------------------------------------------

    def add_client(self, client: Client) -> None:
        self._execute_all([("""
            INSERT INTO clients (
                client_id, user_id, name, start_date, monthly_fee,
                is_active, starting_weight_kg, notes, created_at
            ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """, (
            str(client.id), client.user_id, client.name, client.start_date,
            client.monthly_fee, client.is_active, client.starting_weight_kg,
            client.notes, client.created_at,
        ))])

    def update_client(self, client: Client) -> None:
        rowcount = self._execute_all([("""
            UPDATE clients SET
                name = %s,
                start_date = %s,
                monthly_fee = %s,
                is_active = %s,
                starting_weight_kg = %s,
                notes = %s
            WHERE client_id = %s AND user_id = %s
        """, (
            client.name, client.start_date, client.monthly_fee, client.is_active,
            client.starting_weight_kg, client.notes,
            str(client.id), client.user_id,
        ))])
        if not rowcount:
            raise ClientNotFoundError(f"Client {client.id} not found")

    def get_client(self, user_id: str, client_id: UUID) -> Client:
        row = self._fetch_one(f"""
            SELECT {_CLIENT_COLUMNS}
            FROM clients c
            WHERE c.client_id = %s AND c.user_id = %s
        """, (str(client_id), user_id))
        if not row:
            raise ClientNotFoundError(f"Client {client_id} not found")
        return self._build_client(row)

    def list_clients(self, user_id: str, active_only: bool = False) -> list[Client]:
        active_filter = "AND c.is_active = TRUE" if active_only else ""
        rows = self._fetch_all(f"""
            SELECT {_CLIENT_COLUMNS}
            FROM clients c
            WHERE c.user_id = %s
            {active_filter}
            ORDER BY LOWER(c.name)
        """, (user_id,))
        return [self._build_client(row) for row in rows]

    def delete_client(self, user_id: str, client_id: UUID) -> None:
        self.get_client(user_id, client_id)

        params = (str(client_id),)
        self._execute_all([
            ("DELETE FROM payments WHERE client_id = %s", params),
            ("DELETE FROM workout_schedules WHERE client_id = %s", params),
            ("DELETE FROM progress_entries WHERE client_id = %s", params),
            ("DELETE FROM clients WHERE client_id = %s", params),
        ])
        logger.info("Deleted client and owned records", extra={"client_id": str(client_id)})

    # -----------------------------------------------------------------------
    # Payments
    # -----------------------------------------------------------------------

    def add_payment(self, payment: Payment) -> None:
        self._execute_all([("""
            INSERT INTO payments (
                payment_id, client_id, amount, paid_on, month, year, created_at
            ) VALUES (%s, %s, %s, %s, %s, %s, %s)
        """, (
            str(payment.id), str(payment.client_id), payment.amount,
            payment.paid_on, payment.month, payment.year, payment.created_at,
        ))])

    def get_payment(self, user_id: str, payment_id: UUID) -> Payment:
        row = self._fetch_one("""
            SELECT p.payment_id, p.client_id, p.amount, p.paid_on, p.month, p.year, p.created_at
            FROM payments p
            JOIN clients c ON c.client_id = p.client_id
            WHERE p.payment_id = %s AND c.user_id = %s
        """, (str(payment_id), user_id))
        if not row:
            raise PaymentNotFoundError(f"Payment {payment_id} not found")
        return self._build_payment(row)

    def list_payments(self, user_id: str, client_id: Optional[UUID] = None) -> list[Payment]:
        client_filter = "AND p.client_id = %s" if client_id else ""
        params = (user_id, str(client_id)) if client_id else (user_id,)
        rows = self._fetch_all(f"""
            SELECT p.payment_id, p.client_id, p.amount, p.paid_on, p.month, p.year, p.created_at
            FROM payments p
            JOIN clients c ON c.client_id = p.client_id
            WHERE c.user_id = %s
            {client_filter}
            ORDER BY p.paid_on DESC, p.created_at DESC
        """, params)
        return [self._build_payment(row) for row in rows]

    def delete_payment(self, user_id: str, payment_id: UUID) -> None:
        self.get_payment(user_id, payment_id)
        self._execute_all([("DELETE FROM payments WHERE payment_id = %s", (str(payment_id),))])

    # -----------------------------------------------------------------------
    # Workout schedules
    # -----------------------------------------------------------------------

    def add_schedules(self, schedules: list[WorkoutSchedule]) -> None:
        self._execute_all([
            ("""
                INSERT INTO workout_schedules (
                    schedule_id, client_id, day_of_week, start_time, end_time, location
                ) VALUES (%s, %s, %s, %s, %s, %s)
            """, (
                str(s.id), str(s.client_id), s.day_of_week,
                s.start_time, s.end_time, s.location,
            ))
            for s in schedules
        ])

    def get_schedule(self, user_id: str, schedule_id: UUID) -> WorkoutSchedule:
        row = self._fetch_one("""
            SELECT s.schedule_id, s.client_id, s.day_of_week, s.start_time, s.end_time, s.location
            FROM workout_schedules s
            JOIN clients c ON c.client_id = s.client_id
            WHERE s.schedule_id = %s AND c.user_id = %s
        """, (str(schedule_id), user_id))
        if not row:
            raise ScheduleNotFoundError(f"Schedule {schedule_id} not found")
        return self._build_schedule(row)

    def update_schedule(self, schedule: WorkoutSchedule) -> None:
        rowcount = self._execute_all([("""
            UPDATE workout_schedules SET
                day_of_week = %s,
                start_time = %s,
                end_time = %s,
                location = %s
            WHERE schedule_id = %s
        """, (
            schedule.day_of_week, schedule.start_time, schedule.end_time,
            schedule.location, str(schedule.id),
        ))])
        if not rowcount:
            raise ScheduleNotFoundError(f"Schedule {schedule.id} not found")

    def list_schedules(self, user_id: str, client_id: Optional[UUID] = None) -> list[WorkoutSchedule]:
        client_filter = "AND s.client_id = %s" if client_id else ""
        params = (user_id, str(client_id)) if client_id else (user_id,)
        rows = self._fetch_all(f"""
            SELECT s.schedule_id, s.client_id, s.day_of_week, s.start_time, s.end_time, s.location
            FROM workout_schedules s
            JOIN clients c ON c.client_id = s.client_id
            WHERE c.user_id = %s
            {client_filter}
            ORDER BY s.day_of_week, s.start_time
        """, params)
        return [self._build_schedule(row) for row in rows]

    def delete_schedule(self, user_id: str, schedule_id: UUID) -> None:
        self.get_schedule(user_id, schedule_id)
        self._execute_all([("DELETE FROM workout_schedules WHERE schedule_id = %s", (str(schedule_id),))])

    # -----------------------------------------------------------------------
    # Progress
    # -----------------------------------------------------------------------

    def add_progress_entry(self, entry: ProgressEntry) -> None:
        self._execute_all([("""
            INSERT INTO progress_entries (entry_id, client_id, measured_on, weight_kg, notes)
            VALUES (%s, %s, %s, %s, %s)
        """, (
            str(entry.id), str(entry.client_id), entry.measured_on,
            entry.weight_kg, entry.notes,
        ))])

    def get_progress_entry(self, user_id: str, entry_id: UUID) -> ProgressEntry:
        row = self._fetch_one("""
            SELECT e.entry_id, e.client_id, e.measured_on, e.weight_kg, e.notes
            FROM progress_entries e
            JOIN clients c ON c.client_id = e.client_id
            WHERE e.entry_id = %s AND c.user_id = %s
        """, (str(entry_id), user_id))
        if not row:
            raise ProgressEntryNotFoundError(f"Progress entry {entry_id} not found")
        return self._build_progress_entry(row)

    def list_progress_entries(self, user_id: str, client_id: UUID) -> list[ProgressEntry]:
        self.get_client(user_id, client_id)
        rows = self._fetch_all("""
            SELECT e.entry_id, e.client_id, e.measured_on, e.weight_kg, e.notes
            FROM progress_entries e
            WHERE e.client_id = %s
            ORDER BY e.measured_on DESC
        """, (str(client_id),))
        return [self._build_progress_entry(row) for row in rows]

    def delete_progress_entry(self, user_id: str, entry_id: UUID) -> None:
        self.get_progress_entry(user_id, entry_id)
        self._execute_all([("DELETE FROM progress_entries WHERE entry_id = %s", (str(entry_id),))])

    def ping(self) -> None:
        """Round-trip a trivial query; raises if the connection is unusable."""
        self._fetch_one("SELECT 1", ())

    # -----------------------------------------------------------------------
    # Private Methods
    # -----------------------------------------------------------------------

    def _execute_all(self, statements: list[tuple[str, Optional[tuple]]]) -> int:
        """Run statements in one transaction; return rows affected by the last one."""
        cursor = self._conn.cursor()
        rowcount = 0

        try:
            for sql, params in statements:
                cursor.execute(sql, params)
                rowcount = cursor.rowcount or 0
            self._conn.commit()
            return rowcount

        except Exception as e:
            logger.error("Snowflake write failed", extra={"error": str(e)})
            self._conn.rollback()
            raise
        finally:
            cursor.close()

    def _fetch_one(self, sql: str, params: tuple):
        cursor = self._conn.cursor()
        try:
            cursor.execute(sql, params)
            return cursor.fetchone()
        finally:
            cursor.close()

    def _fetch_all(self, sql: str, params: tuple) -> list:
        cursor = self._conn.cursor()
        try:
            cursor.execute(sql, params)
            return cursor.fetchall()
        finally:
            cursor.close()

    def _build_client(self, row) -> Client:
        return Client(
            id=UUID(row[0]),
            user_id=row[1],
            name=row[2],
            start_date=row[3],
            monthly_fee=row[4],
            is_active=bool(row[5]),
            starting_weight_kg=row[6],
            notes=row[7],
            created_at=row[8],
        )

    def _build_payment(self, row) -> Payment:
        return Payment(
            id=UUID(row[0]),
            client_id=UUID(row[1]),
            amount=row[2],
            paid_on=row[3],
            month=row[4],
            year=row[5],
            created_at=row[6],
        )

    def _build_schedule(self, row) -> WorkoutSchedule:
        return WorkoutSchedule(
            id=UUID(row[0]),
            client_id=UUID(row[1]),
            day_of_week=row[2],
            start_time=row[3],
            end_time=row[4],
            location=row[5],
        )

    def _build_progress_entry(self, row) -> ProgressEntry:
        return ProgressEntry(
            id=UUID(row[0]),
            client_id=UUID(row[1]),
            measured_on=row[2],
            weight_kg=row[3],
            notes=row[4],
        )
