"""
Shared fixtures.

API tests run against the real application with three dependencies
swapped out: settings (mock mode, a known API key), the repository (a
fresh in-memory one per test) and the clock (pinned to FIXED_NOW).
"""

from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from trainerdesk.api.dependencies import get_now, get_repository
from trainerdesk.config.settings import Settings, get_settings
from trainerdesk.core.clients.models import Client
from trainerdesk.infrastructure.repository import InMemoryTrainerRepository
from trainerdesk.main import create_app

API_KEY = "test-key"
TRAINER_ID = "trainer-1"

# A Sunday
FIXED_NOW = datetime(2024, 3, 10, 9, 0)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_keys=API_KEY,
        snowflake_mock_mode=True,
        working_day_start="06:00",
        working_day_end="22:00",
        min_free_slot_minutes=30,
    )


@pytest.fixture
def repository() -> InMemoryTrainerRepository:
    return InMemoryTrainerRepository()


@pytest.fixture
def client(settings, repository):
    """TestClient wired to the in-memory repository and a pinned clock."""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_now] = lambda: FIXED_NOW

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def headers() -> dict[str, str]:
    return {"X-API-Key": API_KEY, "X-User-Id": TRAINER_ID}


@pytest.fixture
def make_client():
    """Build a domain Client with sensible defaults."""

    def _make(**overrides) -> Client:
        fields = dict(
            user_id=TRAINER_ID,
            name="Ana Morales",
            start_date=date(2024, 1, 15),
            monthly_fee=Decimal("100.00"),
        )
        fields.update(overrides)
        return Client(**fields)

    return _make


@pytest.fixture
def new_client(client, headers):
    """Create a client through the API and return its id."""

    def _create(**overrides) -> str:
        body = {"name": "Ana Morales", "start_date": "2024-01-15", "monthly_fee": 100}
        body.update(overrides)
        response = client.post("/api/v1/clients", json=body, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _create
