"""
Balance engine.

A student's balance is never stored; it is projected from the ledger on every
read. Everything here is pure: inputs are snapshots, outputs are new values.
"""

from decimal import Decimal, InvalidOperation
from typing import Sequence

from feeledger.core.enums import PaymentStatus
from feeledger.core.exceptions import ExceedsDueError, InvalidAmountError
from feeledger.core.schemas import fits_money_column, to_decimal

from .schemas import FeeBalance, PaymentResponse


def compute_balance(total_fees, payments: Sequence[PaymentResponse]) -> FeeBalance:
    """
    Project total/paid/due from a student's payments.

    Only `success` entries count, even if the caller already filtered.
    amount_due is not clamped: it goes negative when total_fees was lowered
    below what had already been paid.
    """
    total = to_decimal(total_fees)
    amount_paid = sum(
        (to_decimal(p.amount) for p in payments if p.status == PaymentStatus.success),
        Decimal("0"),
    )
    return FeeBalance(
        total_fees=total,
        amount_paid=amount_paid,
        amount_due=total - amount_paid,
        payment_history=list(payments),
    )


def validate_payment_request(amount, current_amount_due) -> Decimal:
    """Return the amount as Decimal, or raise InvalidAmountError / ExceedsDueError."""
    if amount is None or isinstance(amount, bool):
        raise InvalidAmountError()
    try:
        value = to_decimal(amount)
    except (InvalidOperation, ValueError):
        raise InvalidAmountError()
    if not value.is_finite() or value <= 0:
        raise InvalidAmountError()
    # The validated value is the stored value: no sub-cent rounding, no column overflow
    if not fits_money_column(value):
        raise InvalidAmountError()

    due = to_decimal(current_amount_due)
    # Paying exactly the due is allowed and brings it to zero
    if value > due:
        raise ExceedsDueError(due)
    return value


def apply_payment(balance: FeeBalance, amount: Decimal) -> FeeBalance:
    """Balance after one more successful payment of `amount`."""
    return FeeBalance(
        total_fees=balance.total_fees,
        amount_paid=balance.amount_paid + amount,
        amount_due=balance.amount_due - amount,
        payment_history=balance.payment_history,
    )
