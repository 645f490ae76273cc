"""Fees service: student balance views and the ledger writer (the only path that creates payment records)."""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.auth.models import Account
from feeledger.core.config import settings
from feeledger.core.enums import AccountRole, PaymentMethod, PaymentStatus
from feeledger.core.exceptions import NotFoundError, ServiceError, WriteError
from feeledger.core.locks import student_payment_locks
from feeledger.core.models import PaymentRecord
from feeledger.db.stores import AccountStore, LedgerStore

from .balance import apply_payment, compute_balance, validate_payment_request
from .schemas import (
    BalanceSummary,
    FeeBalance,
    PaymentDetail,
    PaymentResponse,
    PaymentStudentSummary,
)

logger = logging.getLogger(__name__)

STUDENT_NOT_FOUND = "Student not found"
PAYMENT_NOT_FOUND = "Payment not found"


def generate_transaction_id() -> str:
    """128-bit random id, e.g. TXN3F2A...; unique per record and never reused."""
    return "TXN" + uuid.uuid4().hex.upper()


def snapshot(records: List[PaymentRecord]) -> List[PaymentResponse]:
    return [PaymentResponse.model_validate(r) for r in records]


async def _get_student(accounts: AccountStore, student_id: UUID, for_update: bool = False) -> Account:
    if for_update:
        student = await accounts.lock_for_update(student_id)
    else:
        student = await accounts.find_by_id(student_id)
    if not student or student.role != AccountRole.student.value:
        raise NotFoundError(STUDENT_NOT_FOUND)
    return student


async def balance_for(db: AsyncSession, student: Account) -> FeeBalance:
    """Current balance of one student, recomputed from the ledger."""
    records = await LedgerStore(db).find_by_student_and_status(student.id, PaymentStatus.success)
    return compute_balance(student.total_fees, snapshot(records))


async def get_fee_details(db: AsyncSession, student_id: UUID) -> FeeBalance:
    student = await _get_student(AccountStore(db), student_id)
    return await balance_for(db, student)


async def record_payment(
    db: AsyncSession,
    student_id: UUID,
    amount,
    payment_method: PaymentMethod = PaymentMethod.mock,
) -> Tuple[PaymentResponse, BalanceSummary]:
    """
    Validate `amount` against the student's current due and append one success record.

    Reads, validation and the insert happen under a per-student lock and a row
    lock on the account, so two concurrent payments for the same student cannot
    both validate against the same due. On any failure nothing is written.
    """
    async with student_payment_locks.hold(student_id):
        try:
            student = await _get_student(AccountStore(db), student_id, for_update=True)
            current = await balance_for(db, student)
            value = validate_payment_request(amount, current.amount_due)
        except ServiceError as e:
            await db.rollback()
            logger.warning(
                "Payment rejected for student %s: %s (amount=%s)", student_id, e.error_code, amount
            )
            raise

        try:
            record = await LedgerStore(db).create(
                student_id=student.id,
                amount=value,
                payment_method=payment_method.value,
                transaction_id=generate_transaction_id(),
                status=PaymentStatus.success.value,
                payment_date=datetime.now(timezone.utc),
                description=f"{settings.payment_description_prefix} - {student.name}",
            )
            await db.commit()
            await db.refresh(record)
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Could not persist payment for student %s", student_id)
            raise WriteError("Payment could not be recorded, please try again")

    payment = PaymentResponse.model_validate(record)
    updated = apply_payment(current, value)
    logger.info(
        "Payment %s recorded for student %s: amount=%s due=%s",
        payment.transaction_id, student_id, value, updated.amount_due,
    )
    return payment, updated.summary()


async def get_payment_history(db: AsyncSession, student_id: UUID) -> List[PaymentResponse]:
    """Every record of the student (any status), newest first."""
    await _get_student(AccountStore(db), student_id)
    return snapshot(await LedgerStore(db).find_by_student(student_id))


async def get_payment_details(
    db: AsyncSession, student_id: UUID, payment_id: UUID
) -> PaymentDetail:
    """One of the student's own records; another student's record is reported as not found."""
    student = await _get_student(AccountStore(db), student_id)
    record = await LedgerStore(db).find_by_id_and_student(payment_id, student_id)
    if not record:
        raise NotFoundError(PAYMENT_NOT_FOUND)
    return PaymentDetail(
        **PaymentResponse.model_validate(record).model_dump(),
        student=PaymentStudentSummary.model_validate(student),
    )
