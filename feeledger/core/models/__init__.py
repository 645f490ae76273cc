from feeledger.core.models.payment_record import PaymentRecord

__all__ = [
    "PaymentRecord",
]
