"""Student account schemas (admin-facing)."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from feeledger.api.v1.fees.schemas import PaymentResponse
from feeledger.core.schemas import MONEY_DECIMAL_PLACES, MONEY_MAX_DIGITS, Envelope, Money


class StudentCreate(BaseModel):
    # Presence is checked by the service so a missing field is a ValidationError, not a schema error
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    name: Optional[str] = None
    registration_number: Optional[str] = Field(None, max_length=50)
    department: Optional[str] = Field(None, max_length=100)
    year: Optional[int] = Field(None, ge=1, le=4)
    semester: Optional[int] = Field(None, ge=1, le=8)
    total_fees: Optional[Decimal] = Field(
        None, ge=0, max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES
    )


class StudentUpdate(BaseModel):
    """Every field optional; total_fees may be lowered below what was already paid."""

    total_fees: Optional[Decimal] = Field(
        None, ge=0, max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES
    )
    name: Optional[str] = None
    department: Optional[str] = Field(None, max_length=100)
    year: Optional[int] = Field(None, ge=1, le=4)
    semester: Optional[int] = Field(None, ge=1, le=8)


class StudentResponse(BaseModel):
    id: UUID
    email: str
    name: str
    registration_number: str
    department: str
    year: int
    semester: int
    total_fees: Money
    created_at: datetime

    class Config:
        from_attributes = True


class StudentWithBalance(StudentResponse):
    amount_paid: Money
    amount_due: Money
    payment_history: List[PaymentResponse] = Field(default_factory=list)


# --- Envelopes ---
class StudentCreatedEnvelope(Envelope):
    student: StudentResponse


class StudentEnvelope(Envelope):
    student: StudentWithBalance


class StudentListEnvelope(Envelope):
    count: int
    students: List[StudentWithBalance]
