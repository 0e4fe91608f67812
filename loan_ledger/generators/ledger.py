"""Sample personal loans, gold loans and credit cards with event histories."""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from loan_ledger.engine import calculate_emi
from loan_ledger.engine.common import add_months, months_between
from loan_ledger.generators.base import BaseGenerator
from loan_ledger.models import Loan, LoanInput, LoanStatus, LoanType
from loan_ledger.store.base import LoanStore

SPEND_CATEGORIES = {
    "Groceries": (500, 6000),
    "Fuel": (1000, 4000),
    "Dining": (300, 3500),
    "Pharmacy": (200, 2500),
    "Electronics": (2000, 60000),
    "Travel": (1500, 25000),
    "Utilities": (800, 5000),
    "Shopping": (700, 15000),
}


@dataclass
class PortfolioSize:
    """How many loans of each type to generate."""

    personal: int = 3
    gold: int = 2
    credit_cards: int = 2


class LedgerGenerator(BaseGenerator):
    """Populate a store with realistic loans through its public API.

    Loans go through the same validation and status recomputation as
    user-entered ones.
    """

    PERSONAL_RATES = (10.5, 11.25, 12.0, 13.5, 14.0, 16.0)
    GOLD_RATES = (7.5, 9.0, 10.0, 12.0, 18.0, 24.0)
    TERMS = (12, 18, 24, 36, 48, 60)

    def personal_input(self, as_of: date) -> LoanInput:
        """Personal loan that started up to two years before ``as_of``."""
        return LoanInput(
            borrower_name=self.fake.name(),
            loan_type=LoanType.PERSONAL,
            amount=Decimal(self.rng.randint(5, 150) * 10000),
            interest_rate=Decimal(str(self.rng.choice(self.PERSONAL_RATES))),
            term=self.rng.choice(self.TERMS),
            start_date=self._start_date(as_of, max_months=24),
        )

    def gold_input(self, as_of: date) -> LoanInput:
        return LoanInput(
            borrower_name=self.fake.name(),
            loan_type=LoanType.GOLD,
            amount=Decimal(self.rng.randint(2, 50) * 5000),
            interest_rate=Decimal(str(self.rng.choice(self.GOLD_RATES))),
            start_date=self._start_date(as_of, max_months=18),
        )

    def credit_card_input(self, as_of: date) -> LoanInput:
        card_number = self.fake.credit_card_number()
        return LoanInput(
            borrower_name=f"{self.fake.company()} Card",
            loan_type=LoanType.CREDIT_CARD,
            amount=Decimal(self.rng.randint(0, 20) * 1000 + 1000),
            card_number=f"****-****-****-{card_number[-4:]}",
            start_date=self._start_date(as_of, max_months=12),
        )

    def populate(self, store: LoanStore, as_of: date, size: PortfolioSize | None = None) -> list[Loan]:
        """Create loans with histories up to ``as_of``.

        Returns
        -------
        list[Loan]
            Final state of every created loan.
        """
        size = size or PortfolioSize()
        loans: list[Loan] = []

        for _ in range(size.personal):
            loan = store.create(self.personal_input(as_of))
            loans.append(self._add_personal_prepayments(store, loan, as_of))

        for _ in range(size.gold):
            loan = store.create(self.gold_input(as_of))
            loans.append(self._add_gold_history(store, loan, as_of))

        for _ in range(size.credit_cards):
            loan = store.create(self.credit_card_input(as_of))
            loans.append(self._add_card_history(store, loan, as_of))

        return loans

    def _start_date(self, as_of: date, max_months: int) -> date:
        months_back = self.rng.randint(1, max_months)
        return add_months(as_of, -months_back).replace(day=self.rng.randint(1, 28))

    def _month_dates(self, start: date, as_of: date) -> list[date]:
        dates = (add_months(start, offset) for offset in range(months_between(start, as_of)))
        return [when for when in dates if when <= as_of]

    def _add_personal_prepayments(self, store: LoanStore, loan: Loan, as_of: date) -> Loan:
        emi = calculate_emi(loan.amount, loan.interest_rate, loan.term)
        for when in self._month_dates(loan.start_date, as_of)[1:]:
            if self.rng.random() < 0.15 and loan.status == LoanStatus.ACTIVE:
                extra = Decimal(round(float(emi) * self.rng.uniform(0.5, 3.0), -2) or 100)
                loan = store.append_prepayment(loan.loan_id, extra, when)
        return loan

    def _add_gold_history(self, store: LoanStore, loan: Loan, as_of: date) -> Loan:
        monthly_interest = float(loan.amount) * float(loan.interest_rate) / 1200
        for when in self._month_dates(loan.start_date, as_of):
            roll = self.rng.random()
            if roll < 0.35:
                # Interest-only servicing
                amount = Decimal(max(100, round(monthly_interest, -2)))
                loan = store.append_payment(loan.loan_id, amount, when)
            elif roll < 0.45 and loan.status == LoanStatus.ACTIVE:
                amount = Decimal(max(1000, round(float(loan.amount) * self.rng.uniform(0.1, 0.3), -3)))
                loan = store.append_prepayment(loan.loan_id, amount, when)
        return loan

    def _add_card_history(self, store: LoanStore, loan: Loan, as_of: date) -> Loan:
        day = loan.start_date
        while day <= as_of:
            category = self.rng.choice(list(SPEND_CATEGORIES))
            low, high = SPEND_CATEGORIES[category]
            amount = Decimal(self.rng.randint(low, high))
            description = f"{category} - {self.fake.company()}"
            loan = store.append_spent(loan.loan_id, amount, day, description)

            paid_on = day + timedelta(days=1)
            if self.rng.random() < 0.3 and paid_on <= as_of:
                # Whole hundreds, never more than the balance
                payment = int(float(loan.outstanding) * self.rng.uniform(0.2, 1.0)) // 100 * 100
                if payment > 0:
                    loan = store.append_payment(loan.loan_id, Decimal(payment), paid_on)

            day += timedelta(days=self.rng.randint(5, 25))
        return loan
