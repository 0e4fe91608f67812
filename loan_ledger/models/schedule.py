"""Derived rows produced by the amortization engine.

All money values are unrounded floats; round with
:func:`loan_ledger.engine.common.round_money` for display only.
"""

from dataclasses import dataclass, field
from datetime import date

from loan_ledger.models.enums import EventKind


@dataclass
class FixedTermRow:
    """One month of a personal-loan EMI schedule."""

    month: int  # 1-based
    date: date
    emi: float  # Actual amount paid this month (truncated on the last row)
    principal: float
    interest: float
    prepayment_applied: float
    remaining_principal: float


@dataclass
class FixedTermSchedule:
    """Level EMI plus the month-by-month amortization table."""

    emi: float
    rows: list[FixedTermRow] = field(default_factory=list)

    @property
    def total_principal(self) -> float:
        return sum(row.principal for row in self.rows)

    @property
    def total_interest(self) -> float:
        return sum(row.interest for row in self.rows)

    @property
    def total_prepayment(self) -> float:
        return sum(row.prepayment_applied for row in self.rows)

    @property
    def payoff_date(self) -> date | None:
        """Date of the row that retires the principal, if any."""
        if self.rows and self.rows[-1].remaining_principal == 0:
            return self.rows[-1].date
        return None


@dataclass
class InterestSummary:
    """Planned vs. actual interest of a personal loan."""

    total_interest: float  # emi * term - principal, without prepayments
    interest_paid: float  # Interest across the computed schedule
    interest_saved: float


@dataclass
class OpenEndedRow:
    """One month of a gold-loan interest accrual schedule."""

    month: int  # 1-based
    date: date
    monthly_interest: float
    accumulated_interest: float  # After this month's allocations
    total_payment: float
    total_prepayment: float
    interest_paid_by_prepayment: float
    principal_paid_by_prepayment: float
    interest_paid_by_payment: float
    principal_paid_by_payment: float
    outstanding_principal: float
    total_outstanding: float
    is_current_month: bool = False


@dataclass
class LedgerTransaction:
    """Credit card audit row with its point-in-time balance."""

    event_id: str
    kind: EventKind
    date: date
    description: str
    spent: float
    payment: float
    outstanding: float

    @property
    def net(self) -> float:
        return self.spent - self.payment


@dataclass
class LoanMonthEntry:
    """A single loan's contribution to a monthly bucket."""

    loan_id: str
    borrower_name: str
    outstanding_principal: float
    total_outstanding: float
    interest: float
    accumulated_interest: float = 0.0
    emi: float = 0.0
    principal: float = 0.0
    payment: float = 0.0
    prepayment: float = 0.0
    interest_paid_by_prepayment: float = 0.0
    principal_paid_by_prepayment: float = 0.0
    previous_outstanding: float = 0.0


@dataclass
class MonthlyBucket:
    """Outstandings of several loans folded into one calendar month."""

    year: int
    month: int  # 1-12
    outstanding_principal: float = 0.0
    total_outstanding: float = 0.0
    total_interest: float = 0.0
    accumulated_interest: float = 0.0
    total_emi: float = 0.0
    total_principal: float = 0.0
    total_payment: float = 0.0
    total_prepayment: float = 0.0
    interest_paid_by_prepayment: float = 0.0
    principal_paid_by_prepayment: float = 0.0
    is_current_month: bool = False
    entries: dict[str, LoanMonthEntry] = field(default_factory=dict)

    @property
    def key(self) -> tuple[int, int]:
        return (self.year, self.month)

    @property
    def month_key(self) -> str:
        return f"{self.year}-{self.month:02d}"

    @property
    def active_loans(self) -> int:
        """Loans that still owe something at the end of this month."""
        return sum(1 for entry in self.entries.values() if entry.total_outstanding > 0)
