"""
API tests for recording and deleting payments.
"""

from decimal import Decimal

import pytest


class TestCreatePayment:

    def test_attributes_to_previous_cycle_before_anchor(self, client, headers, new_client):
        client_id = new_client(start_date="2024-01-15")

        response = client.post(
            "/api/v1/payments",
            json={"client_id": client_id, "amount": 100, "paid_on": "2024-02-10"},
            headers=headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert (data["month"], data["year"]) == (1, 2024)
        assert data["paid_on"] == "2024-02-10"
        assert Decimal(data["amount"]) == Decimal("100")

    def test_attributes_to_current_cycle_after_anchor(self, client, headers, new_client):
        client_id = new_client(start_date="2024-01-15")

        data = client.post(
            "/api/v1/payments",
            json={"client_id": client_id, "amount": "100.00", "paid_on": "2024-02-20"},
            headers=headers,
        ).json()

        assert (data["month"], data["year"]) == (2, 2024)

    def test_month_and_year_in_request_are_ignored(self, client, headers, new_client):
        client_id = new_client(start_date="2024-01-15")

        data = client.post(
            "/api/v1/payments",
            json={"client_id": client_id, "amount": 10, "paid_on": "2024-02-20", "month": 7, "year": 1999},
            headers=headers,
        ).json()

        assert (data["month"], data["year"]) == (2, 2024)

    def test_clamped_anchor(self, client, headers, new_client):
        client_id = new_client(start_date="2024-01-31")

        data = client.post(
            "/api/v1/payments",
            json={"client_id": client_id, "amount": 10, "paid_on": "2024-02-29"},
            headers=headers,
        ).json()

        assert (data["month"], data["year"]) == (2, 2024)

    @pytest.mark.parametrize("amount", [0, -1, "abc", None, "", "0.004"])
    def test_invalid_amount_is_bad_request(self, client, headers, new_client, amount):
        client_id = new_client()

        response = client.post(
            "/api/v1/payments",
            json={"client_id": client_id, "amount": amount, "paid_on": "2024-02-20"},
            headers=headers,
        )

        assert response.status_code == 400
        assert "amount" in response.json()["detail"]

    @pytest.mark.parametrize("paid_on", ["2024-02-30", "2024/02/20", "20-02-2024"])
    def test_invalid_date_is_bad_request(self, client, headers, new_client, paid_on):
        client_id = new_client()

        response = client.post(
            "/api/v1/payments",
            json={"client_id": client_id, "amount": 10, "paid_on": paid_on},
            headers=headers,
        )

        assert response.status_code == 400

    def test_out_of_bounds_cycle_is_unprocessable(self, client, headers, new_client):
        client_id = new_client(start_date="1899-12-15")

        response = client.post(
            "/api/v1/payments",
            json={"client_id": client_id, "amount": 10, "paid_on": "1900-01-01"},
            headers=headers,
        )

        assert response.status_code == 422

    def test_far_future_payment_is_unprocessable(self, client, headers, new_client):
        client_id = new_client()

        response = client.post(
            "/api/v1/payments",
            json={"client_id": client_id, "amount": 10, "paid_on": "9999-12-20"},
            headers=headers,
        )

        assert response.status_code == 422

    def test_unknown_client_is_not_found(self, client, headers):
        response = client.post(
            "/api/v1/payments",
            json={"client_id": "00000000-0000-0000-0000-000000000000", "amount": 10, "paid_on": "2024-02-20"},
            headers=headers,
        )

        assert response.status_code == 404

    def test_other_trainers_client_is_not_found(self, client, headers, new_client):
        client_id = new_client()

        response = client.post(
            "/api/v1/payments",
            json={"client_id": client_id, "amount": 10, "paid_on": "2024-02-20"},
            headers={**headers, "X-User-Id": "trainer-2"},
        )

        assert response.status_code == 404


class TestPartialPayments:

    def test_partial_payments_combine_into_paid(self, client, headers, new_client):
        client_id = new_client(monthly_fee=150)

        for amount, expected in [(50, "Partially paid"), (60, "Partially paid"), (40, "Paid")]:
            client.post(
                "/api/v1/payments",
                json={"client_id": client_id, "amount": amount, "paid_on": "2024-03-01"},
                headers=headers,
            )
            status = client.get(f"/api/v1/clients/{client_id}/payment-status", headers=headers).json()
            assert status["status"] == expected

        assert status["payment_count"] == 3
        assert Decimal(status["total_paid"]) == Decimal("150")


class TestDeletePayment:

    def test_delete(self, client, headers, new_client):
        client_id = new_client()
        payment_id = client.post(
            "/api/v1/payments",
            json={"client_id": client_id, "amount": 100, "paid_on": "2024-02-20"},
            headers=headers,
        ).json()["id"]

        response = client.delete(f"/api/v1/payments/{payment_id}", headers=headers)

        assert response.status_code == 204
        status = client.get(f"/api/v1/clients/{client_id}/payment-status", headers=headers).json()
        assert status["status"] == "Not paid"

    def test_delete_unknown_is_not_found(self, client, headers):
        response = client.delete("/api/v1/payments/00000000-0000-0000-0000-000000000000", headers=headers)

        assert response.status_code == 404
