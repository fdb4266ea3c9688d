#!/usr/bin/env python3
"""
Seed Snowflake with demo clients, schedules, payments and progress.

Creates the tables if they don't exist, then inserts a handful of clients
for one trainer. Payments go through the same billing cycle resolution as
the API, so their month/year match what the app would have recorded.

Usage:
    python scripts/seed_demo_data.py --user-id demo-trainer
    python scripts/seed_demo_data.py --dry-run

Requires:
    - .env file with Snowflake credentials
"""

import argparse
import os
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from trainerdesk.core.billing.payments import record_payment
from trainerdesk.core.clients.models import Client, ProgressEntry
from trainerdesk.core.scheduling.schedules import build_schedules
from trainerdesk.infrastructure.repository import InMemoryTrainerRepository
from trainerdesk.infrastructure.snowflake.client import (
    SnowflakeConfig,
    SnowflakeConnectionError,
    get_snowflake_connection,
)
from trainerdesk.infrastructure.snowflake.repositories.trainer import SnowflakeTrainerRepository


# name, start date, fee, starting weight, weekdays, start, end, location, payments
DEMO_CLIENTS = [
    (
        "Ana Morales", date(2024, 1, 15), "120.00", "72.5",
        [1, 3, 5], "07:00", "08:00", "Main gym",
        [("120.00", date(2024, 1, 15)), ("120.00", date(2024, 2, 14)), ("60.00", date(2024, 3, 20))],
    ),
    (
        "Ben Carter", date(2024, 1, 31), "90.00", None,
        [2, 4], "18:00", "19:00", "Park",
        [("90.00", date(2024, 2, 29)), ("90.00", date(2024, 3, 30))],
    ),
    (
        "Chloe Park", date(2024, 3, 1), "150.00", "64.0",
        [1, 4], "12:00", "13:30", None,
        [],
    ),
]


def build_demo_data(user_id: str, repository) -> int:
    """Add the demo records to `repository`; returns how many clients were added."""
    for name, start, fee, weight, days, start_time, end_time, location, payments in DEMO_CLIENTS:
        client = Client(
            user_id=user_id,
            name=name,
            start_date=start,
            monthly_fee=Decimal(fee),
            starting_weight_kg=Decimal(weight) if weight else None,
        )
        repository.add_client(client)

        repository.add_schedules(build_schedules(client.id, days, start_time, end_time, location))

        for amount, paid_on in payments:
            payment = record_payment(client, amount, paid_on)
            repository.add_payment(payment)
            print(f"  {name}: {amount} on {paid_on} -> cycle {payment.year}-{payment.month:02d}")

        if client.starting_weight_kg is not None:
            repository.add_progress_entry(ProgressEntry(
                client_id=client.id,
                measured_on=date(2024, 3, 1),
                weight_kg=client.starting_weight_kg - Decimal("1.5"),
                notes="Four week check-in",
            ))

    return len(DEMO_CLIENTS)


def main():
    parser = argparse.ArgumentParser(description="Seed TrainerDesk demo data")
    parser.add_argument("--user-id", default="demo-trainer", help="Trainer the demo clients belong to")
    parser.add_argument("--dry-run", action="store_true", help="Build the data in memory only")
    args = parser.parse_args()

    if args.dry_run:
        print("\n=== DRY RUN - No data will be inserted ===\n")
        count = build_demo_data(args.user_id, InMemoryTrainerRepository())
        print(f"\nWould insert {count} clients")
        sys.exit(0)

    account = os.getenv("SNOWFLAKE_ACCOUNT")
    user = os.getenv("SNOWFLAKE_USER")
    if not account or not user:
        print("ERROR: Missing SNOWFLAKE_ACCOUNT or SNOWFLAKE_USER")
        sys.exit(1)

    config = SnowflakeConfig(
        account=account,
        user=user,
        password=os.getenv("SNOWFLAKE_PASSWORD") or None,
        private_key_path=os.getenv("SNOWFLAKE_PRIVATE_KEY_PATH") or None,
        database=os.getenv("SNOWFLAKE_DATABASE", "TRAINERDESK"),
        schema=os.getenv("SNOWFLAKE_SCHEMA", "CLIENTS"),
        warehouse=os.getenv("SNOWFLAKE_WAREHOUSE", "COMPUTE_WH"),
        role=os.getenv("SNOWFLAKE_ROLE") or None,
    )

    print(f"Connecting to Snowflake account: {account}")
    try:
        with get_snowflake_connection(config) as conn:
            repository = SnowflakeTrainerRepository(conn)
            repository.ensure_schema()
            print(f"Using database {config.database}, schema {config.schema}")
            count = build_demo_data(args.user_id, repository)
    except SnowflakeConnectionError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"\nInserted {count} clients for {args.user_id}")


if __name__ == "__main__":
    main()
