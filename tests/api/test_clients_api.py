"""
API tests for client endpoints.

The clock is pinned to Sunday 2024-03-10 09:00 (see conftest).
"""

from decimal import Decimal

import pytest

API_KEY = "test-key"


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

class TestAuthentication:

    def test_missing_api_key_is_forbidden(self, client):
        response = client.get("/api/v1/clients", headers={"X-User-Id": "trainer-1"})

        assert response.status_code == 403

    def test_wrong_api_key_is_forbidden(self, client):
        response = client.get("/api/v1/clients", headers={"X-API-Key": "nope", "X-User-Id": "trainer-1"})

        assert response.status_code == 403

    def test_missing_user_is_unauthorized(self, client):
        response = client.get("/api/v1/clients", headers={"X-API-Key": API_KEY})

        assert response.status_code == 401

    def test_blank_user_is_unauthorized(self, client):
        response = client.get("/api/v1/clients", headers={"X-API-Key": API_KEY, "X-User-Id": "  "})

        assert response.status_code == 401


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

class TestCreateClient:

    def test_create_and_fetch(self, client, headers, new_client):
        client_id = new_client(starting_weight_kg="82.5", notes="Knee injury in 2022")

        response = client.get(f"/api/v1/clients/{client_id}", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Ana Morales"
        assert data["start_date"] == "2024-01-15"
        assert Decimal(data["monthly_fee"]) == Decimal("100")
        assert Decimal(data["starting_weight_kg"]) == Decimal("82.5")
        assert data["is_active"] is True
        assert data["payments"] == []
        assert data["weight_change_kg"] is None

    def test_is_active_defaults_from_settings(self, client, headers, settings, new_client):
        settings.client_default_is_active = False

        client_id = new_client()

        assert client.get(f"/api/v1/clients/{client_id}", headers=headers).json()["is_active"] is False

    def test_explicit_is_active_wins(self, client, headers, new_client):
        client_id = new_client(is_active=False)

        assert client.get(f"/api/v1/clients/{client_id}", headers=headers).json()["is_active"] is False

    @pytest.mark.parametrize("fee", [0, -10, "abc", None])
    def test_invalid_fee_is_bad_request(self, client, headers, fee):
        response = client.post(
            "/api/v1/clients",
            json={"name": "Ana", "start_date": "2024-01-15", "monthly_fee": fee},
            headers=headers,
        )

        assert response.status_code == 400

    @pytest.mark.parametrize("start_date", ["2024-02-30", "15/01/2024", "yesterday"])
    def test_invalid_start_date_is_bad_request(self, client, headers, start_date):
        response = client.post(
            "/api/v1/clients",
            json={"name": "Ana", "start_date": start_date, "monthly_fee": 100},
            headers=headers,
        )

        assert response.status_code == 400

    def test_blank_name_is_rejected(self, client, headers):
        response = client.post(
            "/api/v1/clients",
            json={"name": "   ", "start_date": "2024-01-15", "monthly_fee": 100},
            headers=headers,
        )

        assert response.status_code == 422


class TestListClients:

    def test_lists_by_name_with_status_and_next_workout(self, client, headers, new_client):
        ben = new_client(name="Ben")
        ana = new_client(name="ana")
        client.post("/api/v1/payments", json={"client_id": ben, "amount": 100, "paid_on": "2024-02-20"}, headers=headers)
        client.post(
            "/api/v1/schedules",
            json={"client_id": ana, "days_of_week": [3, 1], "start_time": "07:00", "end_time": "08:00"},
            headers=headers,
        )

        data = client.get("/api/v1/clients", headers=headers).json()

        assert data["total"] == 2
        assert [c["name"] for c in data["clients"]] == ["ana", "Ben"]
        ana_row, ben_row = data["clients"]
        assert ana_row["payment_status"]["status"] == "Not paid"
        assert ana_row["next_workout"]["day_name"] == "Monday"
        assert ben_row["payment_status"]["status"] == "Paid"
        assert ben_row["next_workout"] is None

    def test_other_trainers_clients_are_hidden(self, client, headers, new_client):
        new_client()

        response = client.get("/api/v1/clients", headers={**headers, "X-User-Id": "trainer-2"})

        assert response.json()["clients"] == []


class TestUpdateAndDelete:

    def test_update_replaces_details(self, client, headers, new_client):
        client_id = new_client()

        response = client.put(
            f"/api/v1/clients/{client_id}",
            json={"name": "Ana M.", "start_date": "2024-01-20", "monthly_fee": "120.50"},
            headers=headers,
        )

        assert response.status_code == 200
        data = client.get(f"/api/v1/clients/{client_id}", headers=headers).json()
        assert data["name"] == "Ana M."
        assert Decimal(data["monthly_fee"]) == Decimal("120.50")
        assert data["payment_status"]["cycle_start"] == "2024-02-20"

    def test_update_foreign_client_is_not_found(self, client, headers, new_client):
        client_id = new_client()

        response = client.put(
            f"/api/v1/clients/{client_id}",
            json={"name": "X", "start_date": "2024-01-20", "monthly_fee": 1},
            headers={**headers, "X-User-Id": "trainer-2"},
        )

        assert response.status_code == 404

    def test_delete_cascades(self, client, headers, repository, new_client):
        client_id = new_client()
        client.post("/api/v1/payments", json={"client_id": client_id, "amount": 50, "paid_on": "2024-02-20"}, headers=headers)

        response = client.delete(f"/api/v1/clients/{client_id}", headers=headers)

        assert response.status_code == 204
        assert client.get(f"/api/v1/clients/{client_id}", headers=headers).status_code == 404
        assert repository.list_payments("trainer-1") == []

    def test_unknown_client_is_not_found(self, client, headers):
        response = client.get("/api/v1/clients/00000000-0000-0000-0000-000000000000", headers=headers)

        assert response.status_code == 404


# ---------------------------------------------------------------------------
# Detail view
# ---------------------------------------------------------------------------

class TestClientDetail:

    def test_includes_history_and_weight_change(self, client, headers, new_client):
        client_id = new_client(starting_weight_kg=80)
        for paid_on in ["2024-01-20", "2024-02-20"]:
            client.post("/api/v1/payments", json={"client_id": client_id, "amount": 100, "paid_on": paid_on}, headers=headers)
        for day, weight in [("2024-02-01", 79), ("2024-03-01", 77.5)]:
            client.post("/api/v1/progress", json={"client_id": client_id, "date": day, "weight_kg": weight}, headers=headers)

        data = client.get(f"/api/v1/clients/{client_id}", headers=headers).json()

        assert [p["paid_on"] for p in data["payments"]] == ["2024-02-20", "2024-01-20"]
        assert [e["measured_on"] for e in data["progress_entries"]] == ["2024-03-01", "2024-02-01"]
        assert Decimal(data["weight_change_kg"]) == Decimal("-2.5")
        assert data["payment_status"]["status"] == "Paid"
        assert data["payment_status"]["days_remaining"] == 5


class TestPaymentStatusEndpoint:

    def test_partially_paid(self, client, headers, new_client):
        client_id = new_client(monthly_fee=150)
        client.post("/api/v1/payments", json={"client_id": client_id, "amount": 100, "paid_on": "2024-02-16"}, headers=headers)

        data = client.get(f"/api/v1/clients/{client_id}/payment-status", headers=headers).json()

        assert data["status"] == "Partially paid"
        assert Decimal(data["remaining_balance"]) == Decimal("50")
        assert data["cycle_start"] == "2024-02-15"
        assert data["cycle_end"] == "2024-03-14"
        assert (data["cycle_month"], data["cycle_year"]) == (2, 2024)
        assert data["expires_at"] is None
        assert data["days_remaining"] is None
        assert data["is_expired"] is None

    def test_not_paid_when_only_previous_cycle_paid(self, client, headers, new_client):
        client_id = new_client()
        client.post("/api/v1/payments", json={"client_id": client_id, "amount": 100, "paid_on": "2024-02-14"}, headers=headers)

        data = client.get(f"/api/v1/clients/{client_id}/payment-status", headers=headers).json()

        assert data["status"] == "Not paid"
        assert data["payment_count"] == 0
