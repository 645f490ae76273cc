"""Admin-scoped student router: provisioning, roster, single view, fee updates, delete."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.auth.rbac import require_role
from feeledger.core.enums import AccountRole
from feeledger.core.exceptions import ServiceError
from feeledger.core.schemas import Envelope
from feeledger.db.session import get_db

from .schemas import (
    StudentCreate,
    StudentCreatedEnvelope,
    StudentEnvelope,
    StudentListEnvelope,
    StudentUpdate,
)
from . import service

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin"],
    dependencies=[Depends(require_role(AccountRole.admin))],
)


@router.post(
    "/add-student",
    response_model=StudentCreatedEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def add_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
) -> StudentCreatedEnvelope:
    try:
        student = await service.create_student(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return StudentCreatedEnvelope(
        message="Student account created successfully",
        student=student,
    )


@router.get("/students", response_model=StudentListEnvelope)
async def list_students(
    db: AsyncSession = Depends(get_db),
) -> StudentListEnvelope:
    students = await service.list_students(db)
    return StudentListEnvelope(count=len(students), students=students)


@router.get("/students/{student_id}", response_model=StudentEnvelope)
async def get_student(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> StudentEnvelope:
    try:
        student = await service.get_student(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return StudentEnvelope(student=student)


@router.patch("/update-fees/{student_id}", response_model=StudentEnvelope)
async def update_student_fees(
    student_id: UUID,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db),
) -> StudentEnvelope:
    try:
        student = await service.update_student(db, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return StudentEnvelope(
        message="Student information updated successfully",
        student=student,
    )


@router.delete("/students/{student_id}", response_model=Envelope)
async def delete_student(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> Envelope:
    try:
        await service.delete_student(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Envelope(message="Student account deleted successfully")
