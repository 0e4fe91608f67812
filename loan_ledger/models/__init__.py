"""Ledger entities and engine result models."""

from loan_ledger.models.enums import EventKind, LoanStatus, LoanType, PaymentStatus
from loan_ledger.models.loan import Loan, LoanInput, Payment, Prepayment, Spent
from loan_ledger.models.schedule import (
    FixedTermRow,
    FixedTermSchedule,
    InterestSummary,
    LedgerTransaction,
    LoanMonthEntry,
    MonthlyBucket,
    OpenEndedRow,
)

__all__ = [
    "EventKind",
    "FixedTermRow",
    "FixedTermSchedule",
    "InterestSummary",
    "LedgerTransaction",
    "Loan",
    "LoanInput",
    "LoanMonthEntry",
    "LoanStatus",
    "LoanType",
    "MonthlyBucket",
    "OpenEndedRow",
    "Payment",
    "PaymentStatus",
    "Prepayment",
    "Spent",
]
