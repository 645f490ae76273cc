from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from feeledger.core.enums import AccountRole
from feeledger.core.schemas import Envelope, Money


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class AccountInfo(BaseModel):
    """Account as returned to its owner; never includes the credential."""

    id: UUID
    email: str
    name: str
    role: AccountRole
    registration_number: Optional[str] = None
    department: Optional[str] = None
    year: Optional[int] = None
    semester: Optional[int] = None
    total_fees: Optional[Money] = Decimal("0")
    created_at: datetime

    class Config:
        from_attributes = True


class LoginResponse(Envelope):
    access_token: str
    token_type: str = "bearer"
    user: AccountInfo


class AccountEnvelope(Envelope):
    user: AccountInfo


class CurrentUser(BaseModel):
    """Identity supplied to the core per request: who is calling and in which capacity."""

    id: UUID
    role: AccountRole
    email: str
    name: str
