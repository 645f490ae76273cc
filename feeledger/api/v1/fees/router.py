"""Student-scoped fees router: own balance, pay, payment history, payment receipt."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.auth.dependencies import get_current_user
from feeledger.auth.rbac import require_role
from feeledger.auth.schemas import CurrentUser
from feeledger.core.enums import AccountRole
from feeledger.core.exceptions import ServiceError
from feeledger.db.session import get_db

from .schemas import (
    FeeDetailsEnvelope,
    PaymentCreate,
    PaymentDetailEnvelope,
    PaymentHistoryEnvelope,
    PaymentReceiptEnvelope,
)
from . import service

router = APIRouter(
    prefix="/api/v1/student",
    tags=["student"],
    dependencies=[Depends(require_role(AccountRole.student))],
)


@router.get("/fees", response_model=FeeDetailsEnvelope)
async def get_fees_details(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> FeeDetailsEnvelope:
    try:
        balance = await service.get_fee_details(db, current_user.id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return FeeDetailsEnvelope(fees_details=balance)


@router.post(
    "/pay",
    response_model=PaymentReceiptEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def make_payment(
    payload: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> PaymentReceiptEnvelope:
    try:
        payment, updated_balance = await service.record_payment(
            db,
            current_user.id,
            payload.amount,
            payment_method=payload.payment_method,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return PaymentReceiptEnvelope(
        message="Payment successful",
        payment=payment,
        updated_balance=updated_balance,
    )


@router.get("/payment-history", response_model=PaymentHistoryEnvelope)
async def get_payment_history(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> PaymentHistoryEnvelope:
    try:
        payments = await service.get_payment_history(db, current_user.id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return PaymentHistoryEnvelope(count=len(payments), payments=payments)


@router.get("/payment/{payment_id}", response_model=PaymentDetailEnvelope)
async def get_payment_details(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> PaymentDetailEnvelope:
    try:
        payment = await service.get_payment_details(db, current_user.id, payment_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return PaymentDetailEnvelope(payment=payment)
