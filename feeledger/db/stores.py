"""
Account and ledger store boundaries.

Stores stage reads and writes on the caller's AsyncSession and never commit:
the calling service owns the transaction, so a cascade delete or a
lock-validate-insert sequence commits once.
"""

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.auth.models import Account
from feeledger.core.enums import AccountRole, PaymentStatus
from feeledger.core.models import PaymentRecord
from feeledger.core.schemas import to_decimal


class AccountStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_by_id(self, account_id: UUID) -> Optional[Account]:
        return await self.db.get(Account, account_id)

    async def lock_for_update(self, account_id: UUID) -> Optional[Account]:
        """Load the account holding a row lock until the transaction ends (ignored by SQLite)."""
        result = await self.db.execute(
            select(Account)
            .where(Account.id == account_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[Account]:
        result = await self.db.execute(
            select(Account).where(func.lower(Account.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def find_by_registration_number(self, registration_number: str) -> Optional[Account]:
        result = await self.db.execute(
            select(Account).where(Account.registration_number == registration_number.strip().upper())
        )
        return result.scalar_one_or_none()

    async def find_all_by_role(self, role: AccountRole) -> List[Account]:
        result = await self.db.execute(
            select(Account)
            .where(Account.role == role.value)
            .order_by(Account.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_by_role(self, role: AccountRole) -> int:
        result = await self.db.execute(
            select(func.count(Account.id)).where(Account.role == role.value)
        )
        return result.scalar() or 0

    async def sum_total_fees(self, role: AccountRole = AccountRole.student) -> Decimal:
        result = await self.db.execute(
            select(func.coalesce(func.sum(Account.total_fees), 0)).where(Account.role == role.value)
        )
        return to_decimal(result.scalar())

    async def create(self, **fields: Any) -> Account:
        account = Account(**fields)
        self.db.add(account)
        await self.db.flush()
        return account

    async def update_fields(self, account: Account, fields: Dict[str, Any]) -> Account:
        for key, value in fields.items():
            setattr(account, key, value)
        await self.db.flush()
        return account

    async def delete_by_id(self, account_id: UUID) -> None:
        await self.db.execute(delete(Account).where(Account.id == account_id))


class LedgerStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_by_student_and_status(
        self, student_id: UUID, status: PaymentStatus
    ) -> List[PaymentRecord]:
        """Records newest first."""
        result = await self.db.execute(
            select(PaymentRecord)
            .where(
                PaymentRecord.student_id == student_id,
                PaymentRecord.status == status.value,
            )
            .order_by(PaymentRecord.payment_date.desc(), PaymentRecord.created_at.desc())
        )
        return list(result.scalars().all())

    async def find_by_students_and_status(
        self, student_ids: Iterable[UUID], status: PaymentStatus
    ) -> Dict[UUID, List[PaymentRecord]]:
        """Batch read for the roster: student id -> records newest first."""
        ids = list(student_ids)
        grouped: Dict[UUID, List[PaymentRecord]] = {sid: [] for sid in ids}
        if not ids:
            return grouped
        result = await self.db.execute(
            select(PaymentRecord)
            .where(
                PaymentRecord.student_id.in_(ids),
                PaymentRecord.status == status.value,
            )
            .order_by(PaymentRecord.payment_date.desc(), PaymentRecord.created_at.desc())
        )
        for record in result.scalars().all():
            grouped.setdefault(record.student_id, []).append(record)
        return grouped

    async def find_by_student(self, student_id: UUID) -> List[PaymentRecord]:
        """Every record of the student regardless of status, newest first."""
        result = await self.db.execute(
            select(PaymentRecord)
            .where(PaymentRecord.student_id == student_id)
            .order_by(PaymentRecord.payment_date.desc(), PaymentRecord.created_at.desc())
        )
        return list(result.scalars().all())

    async def find_by_id_and_student(self, payment_id: UUID, student_id: UUID) -> Optional[PaymentRecord]:
        result = await self.db.execute(
            select(PaymentRecord).where(
                PaymentRecord.id == payment_id,
                PaymentRecord.student_id == student_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, **fields: Any) -> PaymentRecord:
        record = PaymentRecord(**fields)
        self.db.add(record)
        await self.db.flush()
        return record

    async def delete_all_by_student(self, student_id: UUID) -> int:
        result = await self.db.execute(
            delete(PaymentRecord).where(PaymentRecord.student_id == student_id)
        )
        return result.rowcount or 0

    async def count_by_status(self, status: PaymentStatus) -> int:
        result = await self.db.execute(
            select(func.count(PaymentRecord.id)).where(PaymentRecord.status == status.value)
        )
        return result.scalar() or 0

    async def sum_by_status(self, status: PaymentStatus) -> Decimal:
        result = await self.db.execute(
            select(func.coalesce(func.sum(PaymentRecord.amount), 0)).where(
                PaymentRecord.status == status.value
            )
        )
        return to_decimal(result.scalar())
