import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from feeledger.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(Base):
    """Admin or student account. Student-only columns are null for admins."""

    __tablename__ = "accounts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Stored lowercased; unique across all roles
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    # admin | student; never changed after creation
    role = Column(String(20), nullable=False, default="student")
    name = Column(String(255), nullable=False)

    # Student profile
    # Stored uppercased; NULL for admins so the unique constraint only binds students
    registration_number = Column(String(50), nullable=True, unique=True)
    department = Column(String(100), nullable=True)
    year = Column(Integer, nullable=True)  # 1-4
    semester = Column(Integer, nullable=True)  # 1-8
    total_fees = Column(Numeric(12, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    payments = relationship(
        "PaymentRecord",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
