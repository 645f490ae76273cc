"""Service layer errors. Routers map these to HTTP responses via status_code."""

from decimal import Decimal

from fastapi import status


def _display_amount(value: Decimal) -> str:
    if value == value.to_integral_value():
        return str(value.quantize(Decimal("1")))
    return f"{value:f}"


class ServiceError(Exception):
    """Base exception for service layer errors."""

    error_code = "SERVICE_ERROR"
    is_business_rule = False

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(ServiceError):
    """Missing or malformed input."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Please provide all required fields") -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class DomainMismatchError(ServiceError):
    error_code = "DOMAIN_MISMATCH"
    is_business_rule = True

    def __init__(self, domain: str) -> None:
        super().__init__(f"Student email must end with {domain}", status.HTTP_400_BAD_REQUEST)
        self.domain = domain


class DuplicateEmailError(ServiceError):
    error_code = "DUPLICATE_EMAIL"
    is_business_rule = True

    def __init__(self) -> None:
        super().__init__("User with this email already exists", status.HTTP_400_BAD_REQUEST)


class DuplicateRegistrationNumberError(ServiceError):
    error_code = "DUPLICATE_REGISTRATION_NUMBER"
    is_business_rule = True

    def __init__(self) -> None:
        super().__init__("Student with this registration number already exists", status.HTTP_400_BAD_REQUEST)


class NotFoundError(ServiceError):
    error_code = "NOT_FOUND"

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class InvalidAmountError(ServiceError):
    error_code = "INVALID_AMOUNT"
    is_business_rule = True

    def __init__(self) -> None:
        super().__init__("Please provide a valid amount", status.HTTP_400_BAD_REQUEST)


class ExceedsDueError(ServiceError):
    """Payment larger than the current due. The message carries the due so the client can show it."""

    error_code = "EXCEEDS_DUE"
    is_business_rule = True

    def __init__(self, current_due: Decimal) -> None:
        super().__init__(
            f"Payment amount cannot exceed pending amount of {_display_amount(current_due)}",
            status.HTTP_400_BAD_REQUEST,
        )
        self.current_due = current_due


class WriteError(ServiceError):
    """Store unavailable or constraint violation at persistence time."""

    error_code = "WRITE_ERROR"

    def __init__(self, message: str = "Could not save changes, please try again") -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
