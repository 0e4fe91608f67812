"""Loan aggregate and its owned event records."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from loan_ledger.models.enums import LoanStatus, LoanType, PaymentStatus


@dataclass
class Payment:
    """Regular repayment recorded against a loan or card."""

    payment_id: str
    amount: Decimal
    date: date
    status: PaymentStatus = PaymentStatus.COMPLETED


@dataclass
class Prepayment:
    """Out-of-schedule payment on a personal or gold loan."""

    prepayment_id: str
    amount: Decimal
    date: date


@dataclass
class Spent:
    """Credit card spend entry."""

    spent_id: str
    amount: Decimal
    date: date
    description: str = ""


@dataclass
class Loan:
    """Loan document with its embedded event histories.

    ``amount`` is the original principal for personal and gold loans and
    the seed balance for credit cards. ``outstanding`` is only maintained
    for credit cards; loan outstandings are derived by the engine.
    """

    loan_id: str
    borrower_name: str
    loan_type: LoanType
    amount: Decimal
    interest_rate: Decimal  # Annual percent (e.g., 12 for 12%)
    start_date: date
    term: int | None = None  # Months, personal loans only
    status: LoanStatus = LoanStatus.ACTIVE
    credit_limit: Decimal | None = None
    card_number: str | None = None
    outstanding: Decimal | None = None
    payments: list[Payment] = field(default_factory=list)
    prepayments: list[Prepayment] = field(default_factory=list)
    spent_history: list[Spent] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_credit_card(self) -> bool:
        return self.loan_type == LoanType.CREDIT_CARD


@dataclass
class LoanInput:
    """Fields accepted when creating a loan (before an id is assigned)."""

    borrower_name: str
    loan_type: LoanType
    amount: Decimal
    start_date: date
    interest_rate: Decimal | None = None
    term: int | None = None
    card_number: str | None = None
