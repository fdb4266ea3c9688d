"""
Unit tests for payment attribution and aggregation.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from trainerdesk.core.billing.cycles import CycleBounds, resolve_billing_cycle
from trainerdesk.core.billing.payments import (
    PaymentStatus,
    classify,
    current_payment_status,
    payments_in_cycle,
    record_payment,
    summarize_cycle,
)
from trainerdesk.core.clients.models import Payment
from trainerdesk.core.errors import InvalidAmount


@pytest.fixture
def march_cycle():
    """Mar 15 - Apr 14 2024 for a client who started Jan 15."""
    return resolve_billing_cycle(date(2024, 1, 15), date(2024, 3, 20))


def _payment(client_id, amount, paid_on, month=None, year=None):
    return Payment(
        client_id=client_id,
        amount=Decimal(amount),
        paid_on=paid_on,
        month=month or paid_on.month,
        year=year or paid_on.year,
    )


# ---------------------------------------------------------------------------
# Recording
# ---------------------------------------------------------------------------

class TestRecordPayment:

    def test_attributes_to_previous_cycle_before_anchor_day(self, make_client):
        client = make_client(start_date=date(2024, 1, 15))

        payment = record_payment(client, "100", date(2024, 2, 10))

        assert (payment.month, payment.year) == (1, 2024)
        assert payment.client_id == client.id
        assert payment.paid_on == date(2024, 2, 10)

    def test_attributes_to_current_cycle_after_anchor_day(self, make_client):
        client = make_client(start_date=date(2024, 1, 15))

        payment = record_payment(client, "100", date(2024, 2, 20))

        assert (payment.month, payment.year) == (2, 2024)

    def test_datetime_is_truncated_to_day(self, make_client):
        client = make_client()

        payment = record_payment(client, 50, datetime(2024, 2, 20, 23, 30))

        assert payment.paid_on == date(2024, 2, 20)

    def test_float_amounts_keep_decimal_value(self, make_client):
        payment = record_payment(make_client(), 0.1, date(2024, 2, 20))

        assert payment.amount == Decimal("0.1")

    @pytest.mark.parametrize("amount", [None, 0, -5, "0", "abc", "", "NaN", "Infinity", True])
    def test_rejects_invalid_amounts(self, make_client, amount):
        with pytest.raises(InvalidAmount):
            record_payment(make_client(), amount, date(2024, 2, 20))

    def test_amount_is_checked_before_cycle(self, make_client):
        """A bad amount reports as InvalidAmount even if the date is out of bounds too."""
        client = make_client()

        with pytest.raises(InvalidAmount):
            record_payment(client, 0, date(2024, 2, 20), CycleBounds(min_year=2030, max_year=2040))


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestClassify:

    @pytest.mark.parametrize("total,expected", [
        ("0", PaymentStatus.NOT_PAID),
        ("0.01", PaymentStatus.PARTIALLY_PAID),
        ("149.99", PaymentStatus.PARTIALLY_PAID),
        ("150", PaymentStatus.PAID),
        ("200", PaymentStatus.PAID),
    ])
    def test_thresholds(self, total, expected):
        assert classify(Decimal(total), Decimal("150")) is expected


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

class TestSummarizeCycle:

    def test_partial_payment(self, make_client, march_cycle):
        client = make_client(monthly_fee=Decimal("150"))
        payments = [_payment(client.id, "100", date(2024, 3, 20))]

        summary = summarize_cycle(client.monthly_fee, payments, march_cycle, datetime(2024, 3, 21))

        assert summary.status is PaymentStatus.PARTIALLY_PAID
        assert summary.total_paid == Decimal("100")
        assert summary.remaining_balance == Decimal("50")
        assert summary.payment_count == 1
        assert summary.expires_at is None
        assert summary.days_remaining is None
        assert summary.is_expired is None

    def test_no_payments_is_not_paid(self, march_cycle):
        summary = summarize_cycle(Decimal("150"), [], march_cycle, datetime(2024, 3, 21))

        assert summary.status is PaymentStatus.NOT_PAID
        assert summary.total_paid == Decimal("0")
        assert summary.remaining_balance == Decimal("150")

    def test_partial_payments_add_up_to_paid(self, make_client, march_cycle):
        client = make_client(monthly_fee=Decimal("150"))
        payments = [
            _payment(client.id, "50", date(2024, 3, 15)),
            _payment(client.id, "100", date(2024, 4, 14)),
        ]

        summary = summarize_cycle(client.monthly_fee, payments, march_cycle, datetime(2024, 4, 10, 12))

        assert summary.status is PaymentStatus.PAID
        assert summary.payment_count == 2
        assert summary.remaining_balance == Decimal("0")

    def test_overpayment_has_no_negative_balance(self, make_client, march_cycle):
        client = make_client(monthly_fee=Decimal("100"))
        payments = [_payment(client.id, "250", date(2024, 3, 20))]

        summary = summarize_cycle(client.monthly_fee, payments, march_cycle, datetime(2024, 3, 21))

        assert summary.remaining_balance == Decimal("0")
        assert summary.is_paid

    def test_matches_by_date_not_stored_month(self, make_client, march_cycle):
        """A payment labelled March but dated before the cycle isn't counted."""
        client = make_client(monthly_fee=Decimal("100"))
        mislabelled = _payment(client.id, "100", date(2024, 3, 10), month=3, year=2024)
        backdated = _payment(client.id, "40", date(2024, 3, 16), month=1, year=2024)

        summary = summarize_cycle(client.monthly_fee, [mislabelled, backdated], march_cycle, datetime(2024, 3, 21))

        assert summary.total_paid == Decimal("40")
        assert summary.status is PaymentStatus.PARTIALLY_PAID

    def test_status_only_moves_forward_as_payments_are_added(self, make_client, march_cycle):
        client = make_client(monthly_fee=Decimal("100"))
        order = [PaymentStatus.NOT_PAID, PaymentStatus.PARTIALLY_PAID, PaymentStatus.PAID]
        payments = []
        previous_total = Decimal("0")
        previous_rank = 0

        for amount in ["0.01", "30", "30", "39.99", "10"]:
            payments.append(_payment(client.id, amount, date(2024, 3, 25)))
            summary = summarize_cycle(client.monthly_fee, payments, march_cycle, datetime(2024, 3, 26))

            assert summary.total_paid >= previous_total
            assert order.index(summary.status) >= previous_rank
            previous_total = summary.total_paid
            previous_rank = order.index(summary.status)

        assert summary.status is PaymentStatus.PAID


class TestExpiry:

    def test_days_remaining_rounds_up(self, make_client, march_cycle):
        client = make_client(monthly_fee=Decimal("100"))
        payments = [_payment(client.id, "100", date(2024, 3, 20))]

        summary = summarize_cycle(client.monthly_fee, payments, march_cycle, datetime(2024, 4, 10, 12))

        assert summary.expires_at.date() == date(2024, 4, 14)
        assert summary.days_remaining == 5
        assert summary.is_expired is False

    def test_last_day_still_has_a_day_remaining(self, make_client, march_cycle):
        client = make_client(monthly_fee=Decimal("100"))
        payments = [_payment(client.id, "100", date(2024, 3, 20))]

        summary = summarize_cycle(client.monthly_fee, payments, march_cycle, datetime(2024, 4, 14, 8))

        assert summary.days_remaining == 1
        assert summary.is_expired is False

    def test_past_cycle_is_expired_and_clamped(self, make_client, march_cycle):
        client = make_client(monthly_fee=Decimal("100"))
        payments = [_payment(client.id, "100", date(2024, 3, 20))]

        summary = summarize_cycle(client.monthly_fee, payments, march_cycle, datetime(2024, 4, 20))

        assert summary.days_remaining == 0
        assert summary.is_expired is True


class TestCurrentPaymentStatus:

    def test_uses_cycle_containing_now(self, make_client):
        client = make_client(start_date=date(2024, 1, 15), monthly_fee=Decimal("100"))
        payments = [
            record_payment(client, "100", date(2024, 1, 20)),
            record_payment(client, "100", date(2024, 2, 20)),
        ]

        summary = current_payment_status(client, payments, datetime(2024, 3, 10, 9))

        assert summary.cycle.start == date(2024, 2, 15)
        assert summary.status is PaymentStatus.PAID
        assert summary.payment_count == 1
        assert summary.days_remaining == 5

    def test_payments_from_earlier_cycles_do_not_count(self, make_client):
        client = make_client(start_date=date(2024, 1, 15))
        payments = [record_payment(client, "100", date(2024, 1, 20))]

        summary = current_payment_status(client, payments, datetime(2024, 3, 10))

        assert summary.status is PaymentStatus.NOT_PAID


def test_payments_in_cycle_filters_by_range(make_client, march_cycle):
    client = make_client()
    inside = _payment(client.id, "10", date(2024, 4, 14))
    outside = _payment(client.id, "10", date(2024, 4, 15))

    assert payments_in_cycle([inside, outside], march_cycle) == [inside]
