"""Unit tests for the balance engine (pure, no database)."""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from feeledger.api.v1.fees.balance import apply_payment, compute_balance, validate_payment_request
from feeledger.api.v1.fees.schemas import PaymentResponse
from feeledger.core.exceptions import ExceedsDueError, InvalidAmountError


def _payment(amount, status="success", days_ago=0) -> PaymentResponse:
    when = datetime(2025, 1, 31) - timedelta(days=days_ago)
    return PaymentResponse(
        id=uuid.uuid4(),
        student_id=uuid.uuid4(),
        amount=Decimal(str(amount)),
        payment_method="mock",
        transaction_id="TXN" + uuid.uuid4().hex.upper(),
        status=status,
        payment_date=when,
        description="College fees payment - Asha Rao",
        created_at=when,
    )


def test_no_payments_due_equals_total() -> None:
    balance = compute_balance(Decimal("1000"), [])
    assert balance.amount_paid == 0
    assert balance.amount_due == Decimal("1000")
    assert balance.payment_history == []


def test_only_success_records_are_counted() -> None:
    payments = [
        _payment(100, "success", days_ago=0),
        _payment(250, "pending", days_ago=1),
        _payment(300, "failed", days_ago=2),
        _payment(50, "success", days_ago=3),
    ]
    balance = compute_balance(1000, payments)
    assert balance.amount_paid == Decimal("150")
    assert balance.amount_due == Decimal("850")


def test_history_is_passed_through_in_order() -> None:
    payments = [_payment(10, days_ago=0), _payment(20, days_ago=5)]
    balance = compute_balance(100, payments)
    assert [p.id for p in balance.payment_history] == [p.id for p in payments]


def test_negative_due_is_not_clamped() -> None:
    balance = compute_balance(Decimal("300"), [_payment(600)])
    assert balance.amount_due == Decimal("-300")


def test_fractional_amounts_have_no_float_drift() -> None:
    balance = compute_balance("1.00", [_payment("0.10"), _payment("0.20")])
    assert balance.amount_due == Decimal("0.70")


@pytest.mark.parametrize("amount", [None, 0, -1, "-0.01", "abc", float("nan"), float("inf"), True])
def test_invalid_amounts_rejected(amount) -> None:
    with pytest.raises(InvalidAmountError):
        validate_payment_request(amount, Decimal("1000"))


def test_amount_above_due_rejected_with_due_in_message() -> None:
    with pytest.raises(ExceedsDueError) as exc:
        validate_payment_request(700, Decimal("600"))
    assert exc.value.current_due == Decimal("600")
    assert "600" in exc.value.message
    assert exc.value.status_code == 400


def test_amount_equal_to_due_accepted() -> None:
    assert validate_payment_request(600, Decimal("600.00")) == Decimal("600")


def test_any_positive_amount_rejected_when_nothing_due() -> None:
    with pytest.raises(ExceedsDueError):
        validate_payment_request(1, Decimal("0"))
    with pytest.raises(ExceedsDueError):
        validate_payment_request(1, Decimal("-300"))


def test_apply_payment_projects_new_balance() -> None:
    before = compute_balance(1000, [_payment(400)])
    after = apply_payment(before, Decimal("600"))
    assert after.amount_paid == Decimal("1000")
    assert after.amount_due == 0
    assert after.total_fees == before.total_fees


@pytest.mark.parametrize("amount", ["0.004", "1.001", "10000000000", "1E+12"])
def test_amounts_that_would_be_rounded_or_overflow_rejected(amount) -> None:
    with pytest.raises(InvalidAmountError):
        validate_payment_request(Decimal(amount), Decimal("99999999999"))


def test_trailing_zeros_beyond_cents_accepted() -> None:
    assert validate_payment_request(Decimal("1.500"), Decimal("10")) == Decimal("1.5")
