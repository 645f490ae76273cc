"""Payment record: one immutable ledger entry against a student account."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from feeledger.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaymentRecord(Base):
    """Ledger entry. Never updated; removed only together with its student account."""

    __tablename__ = "payment_records"
    __table_args__ = (
        Index("ix_payment_records_student_date", "student_id", "payment_date"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )
    amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(30), nullable=False, default="mock")  # mock, cash, bank_transfer, razorpay, stripe
    transaction_id = Column(String(64), nullable=False, unique=True)
    status = Column(String(20), nullable=False, default="success")  # pending, success, failed
    payment_date = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    description = Column(String(255), nullable=False, default="College fees payment")
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    student = relationship("Account", back_populates="payments")
