"""Enumeration types for ledger entities."""

from enum import Enum


class LoanType(str, Enum):
    PERSONAL = "personal"
    GOLD = "gold"
    CREDIT_CARD = "creditCard"


class LoanStatus(str, Enum):
    ACTIVE = "active"
    PAID = "paid"
    DEFAULTED = "defaulted"


class PaymentStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"


class EventKind(str, Enum):
    """Kinds of revolving credit-card events."""

    SPENT = "spent"
    PAYMENT = "payment"
