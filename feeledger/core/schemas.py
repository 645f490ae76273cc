from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, PlainSerializer

# Storage is Numeric(12, 2): at most 10 integer digits and 2 decimal places.
MONEY_MAX_DIGITS = 12
MONEY_DECIMAL_PLACES = 2
MONEY_QUANTUM = Decimal("0.01")
MONEY_LIMIT = Decimal(10) ** (MONEY_MAX_DIGITS - MONEY_DECIMAL_PLACES)

# Whole currency units. Kept as Decimal in the service, emitted as a plain JSON number.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def to_decimal(val) -> Decimal:
    if val is None:
        return Decimal("0")
    return val if isinstance(val, Decimal) else Decimal(str(val))


def fits_money_column(value: Decimal) -> bool:
    """True when `value` is stored without rounding or overflow."""
    if abs(value) >= MONEY_LIMIT:
        return False
    return value == value.quantize(MONEY_QUANTUM)


class Envelope(BaseModel):
    """Common response envelope: {success, message?, ...payload}."""

    success: bool = True
    message: Optional[str] = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None  # Only populated when DEBUG is on
