from enum import Enum


class AccountRole(str, Enum):
    admin = "admin"
    student = "student"


class PaymentMethod(str, Enum):
    mock = "mock"
    cash = "cash"
    bank_transfer = "bank_transfer"
    razorpay = "razorpay"
    stripe = "stripe"


class PaymentStatus(str, Enum):
    pending = "pending"
    success = "success"
    failed = "failed"
