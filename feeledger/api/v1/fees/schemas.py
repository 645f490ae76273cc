"""Fees schemas: ledger entries, balances, payment requests."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from feeledger.core.enums import PaymentMethod, PaymentStatus
from feeledger.core.schemas import Envelope, Money


class PaymentCreate(BaseModel):
    # Left unconstrained so the balance engine reports InvalidAmount itself
    amount: Optional[Decimal] = None
    payment_method: PaymentMethod = PaymentMethod.mock


class PaymentResponse(BaseModel):
    """Snapshot of one ledger entry. Frozen: the balance engine works on these, never on ORM rows."""

    id: UUID
    student_id: UUID
    amount: Money
    payment_method: PaymentMethod
    transaction_id: str
    status: PaymentStatus
    payment_date: datetime
    description: str
    created_at: datetime

    class Config:
        from_attributes = True
        frozen = True


class PaymentStudentSummary(BaseModel):
    id: UUID
    name: str
    email: str
    registration_number: Optional[str] = None
    department: Optional[str] = None
    year: Optional[int] = None

    class Config:
        from_attributes = True


class PaymentDetail(PaymentResponse):
    student: PaymentStudentSummary


class BalanceSummary(BaseModel):
    total_fees: Money
    amount_paid: Money
    amount_due: Money


class FeeBalance(BalanceSummary):
    """Balance projection of a student's ledger; payment_history is newest first."""

    payment_history: List[PaymentResponse] = Field(default_factory=list)

    def summary(self) -> BalanceSummary:
        return BalanceSummary(
            total_fees=self.total_fees,
            amount_paid=self.amount_paid,
            amount_due=self.amount_due,
        )


# --- Envelopes ---
class FeeDetailsEnvelope(Envelope):
    fees_details: FeeBalance


class PaymentReceiptEnvelope(Envelope):
    payment: PaymentResponse
    updated_balance: BalanceSummary


class PaymentHistoryEnvelope(Envelope):
    count: int
    payments: List[PaymentResponse]


class PaymentDetailEnvelope(Envelope):
    payment: PaymentDetail
