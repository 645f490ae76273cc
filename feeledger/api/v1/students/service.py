"""Student accounts: provisioning, roster and single views with balances, fee updates, cascade delete."""

import logging
from typing import List
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.api.v1.fees.balance import compute_balance
from feeledger.api.v1.fees.service import balance_for, snapshot
from feeledger.auth.models import Account
from feeledger.auth.security import hash_password
from feeledger.core.config import settings
from feeledger.core.enums import AccountRole, PaymentStatus
from feeledger.core.exceptions import (
    DomainMismatchError,
    DuplicateEmailError,
    DuplicateRegistrationNumberError,
    NotFoundError,
    ValidationError,
    WriteError,
)
from feeledger.db.stores import AccountStore, LedgerStore

from .schemas import StudentCreate, StudentResponse, StudentUpdate, StudentWithBalance

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
REQUIRED_FIELDS = (
    "email",
    "password",
    "name",
    "registration_number",
    "department",
    "year",
    "semester",
    "total_fees",
)


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _with_balance(student: Account, balance) -> StudentWithBalance:
    return StudentWithBalance(
        **StudentResponse.model_validate(student).model_dump(),
        amount_paid=balance.amount_paid,
        amount_due=balance.amount_due,
        payment_history=balance.payment_history,
    )


async def _get_student(accounts: AccountStore, student_id: UUID) -> Account:
    student = await accounts.find_by_id(student_id)
    if not student or student.role != AccountRole.student.value:
        raise NotFoundError("Student not found")
    return student


async def create_student(db: AsyncSession, payload: StudentCreate) -> StudentResponse:
    """
    Create a student account.

    Checks run before any write: required fields, institutional email suffix,
    then email / registration number uniqueness. A unique-constraint violation at
    commit (concurrent create) is reported as the matching duplicate error.
    """
    if any(_is_blank(getattr(payload, f)) for f in REQUIRED_FIELDS):
        raise ValidationError()
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    email = payload.email.strip().lower()
    domain = settings.student_email_domain.lower()
    if not email.endswith(domain):
        raise DomainMismatchError(settings.student_email_domain)
    registration_number = payload.registration_number.strip().upper()

    accounts = AccountStore(db)
    if await accounts.find_by_email(email):
        raise DuplicateEmailError()
    if await accounts.find_by_registration_number(registration_number):
        raise DuplicateRegistrationNumberError()

    try:
        student = await accounts.create(
            email=email,
            password_hash=hash_password(payload.password),
            role=AccountRole.student.value,
            name=payload.name.strip(),
            registration_number=registration_number,
            department=payload.department.strip(),
            year=payload.year,
            semester=payload.semester,
            total_fees=payload.total_fees,
        )
        await db.commit()
        await db.refresh(student)
    except IntegrityError:
        await db.rollback()
        if await accounts.find_by_email(email):
            raise DuplicateEmailError()
        if await accounts.find_by_registration_number(registration_number):
            raise DuplicateRegistrationNumberError()
        logger.exception("Integrity error while creating student %s", email)
        raise WriteError("Server error while creating student")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Could not create student %s", email)
        raise WriteError("Server error while creating student")

    logger.info("Student %s created (%s)", student.id, registration_number)
    return StudentResponse.model_validate(student)


async def list_students(db: AsyncSession) -> List[StudentWithBalance]:
    """Roster, newest account first; one batched ledger read for all students."""
    students = await AccountStore(db).find_all_by_role(AccountRole.student)
    ledgers = await LedgerStore(db).find_by_students_and_status(
        [s.id for s in students], PaymentStatus.success
    )
    return [
        _with_balance(s, compute_balance(s.total_fees, snapshot(ledgers.get(s.id, []))))
        for s in students
    ]


async def get_student(db: AsyncSession, student_id: UUID) -> StudentWithBalance:
    student = await _get_student(AccountStore(db), student_id)
    return _with_balance(student, await balance_for(db, student))


async def update_student(db: AsyncSession, student_id: UUID, payload: StudentUpdate) -> StudentWithBalance:
    """Update fees/profile. No check against the paid amount: due may become negative."""
    accounts = AccountStore(db)
    student = await _get_student(accounts, student_id)

    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    for key in ("name", "department"):
        if key in fields:
            fields[key] = fields[key].strip()
            if not fields[key]:
                raise ValidationError(f"{key.capitalize()} cannot be empty")

    old_total = student.total_fees
    try:
        await accounts.update_fields(student, fields)
        await db.commit()
        await db.refresh(student)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Could not update student %s", student_id)
        raise WriteError("Server error while updating student")

    if "total_fees" in fields:
        logger.info("Student %s total fees changed %s -> %s", student_id, old_total, student.total_fees)
    balance = await balance_for(db, student)
    if balance.amount_due < 0:
        logger.warning("Student %s has negative due %s after update", student_id, balance.amount_due)
    return _with_balance(student, balance)


async def delete_student(db: AsyncSession, student_id: UUID) -> None:
    """Delete the account and its whole ledger in one transaction."""
    accounts = AccountStore(db)
    await _get_student(accounts, student_id)
    try:
        removed = await LedgerStore(db).delete_all_by_student(student_id)
        await accounts.delete_by_id(student_id)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Could not delete student %s", student_id)
        raise WriteError("Server error while deleting student")
    logger.info("Student %s deleted with %s payment record(s)", student_id, removed)
