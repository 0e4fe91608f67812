"""Tests for the central status rule."""

from datetime import date
from decimal import Decimal

import pytest

from loan_ledger.engine import determine_status, outstanding_for
from loan_ledger.models import Loan, LoanStatus, LoanType, Payment, Prepayment


def _personal(**kwargs) -> Loan:
    return Loan(
        loan_id="p1",
        borrower_name="Asha",
        loan_type=LoanType.PERSONAL,
        amount=Decimal("120000"),
        interest_rate=Decimal("12"),
        start_date=date(2024, 1, 5),
        term=12,
        **kwargs,
    )


def _gold(**kwargs) -> Loan:
    return Loan(
        loan_id="g1",
        borrower_name="Ravi",
        loan_type=LoanType.GOLD,
        amount=Decimal("50000"),
        interest_rate=Decimal("24"),
        start_date=date(2024, 1, 1),
        **kwargs,
    )


def _card(outstanding: str) -> Loan:
    return Loan(
        loan_id="c1",
        borrower_name="Card",
        loan_type=LoanType.CREDIT_CARD,
        amount=Decimal("1000"),
        interest_rate=Decimal("0"),
        start_date=date(2024, 1, 1),
        outstanding=Decimal(outstanding),
    )


class TestPersonalStatus:
    """Tests for personal loan status."""

    def test_active_during_term(self) -> None:
        assert determine_status(_personal(), date(2024, 6, 1)) == LoanStatus.ACTIVE

    def test_paid_in_payoff_month(self) -> None:
        assert determine_status(_personal(), date(2024, 12, 1)) == LoanStatus.PAID

    def test_prepayment_brings_payoff_forward(self) -> None:
        loan = _personal(prepayments=[Prepayment("pre-1", Decimal("200000"), date(2024, 2, 1))])

        assert determine_status(loan, date(2024, 2, 28)) == LoanStatus.PAID
        assert determine_status(loan, date(2024, 1, 31)) == LoanStatus.ACTIVE

    def test_defaulted_is_sticky(self) -> None:
        loan = _personal(status=LoanStatus.DEFAULTED)
        assert determine_status(loan, date(2025, 6, 1)) == LoanStatus.DEFAULTED

    def test_outstanding_for(self) -> None:
        assert outstanding_for(_personal(), date(2023, 12, 1)) == 120000.0
        assert outstanding_for(_personal(), date(2024, 1, 31)) == pytest.approx(110538.15, abs=0.01)
        assert outstanding_for(_personal(), date(2025, 1, 1)) == 0.0


class TestGoldStatus:
    """Tests for gold loan status."""

    def test_active_while_interest_owed(self) -> None:
        assert determine_status(_gold(), date(2024, 4, 1)) == LoanStatus.ACTIVE

    def test_paid_when_nothing_left(self) -> None:
        loan = _gold(prepayments=[Prepayment("pre-1", Decimal("51000"), date(2024, 1, 20))])

        assert determine_status(loan, date(2024, 4, 1)) == LoanStatus.PAID

    def test_interest_only_payments_keep_it_active(self) -> None:
        loan = _gold(payments=[Payment("pay-1", Decimal("1000"), date(2024, 1, 31))])

        assert determine_status(loan, date(2024, 1, 31)) == LoanStatus.ACTIVE

    def test_as_of_before_start_is_active(self) -> None:
        assert determine_status(_gold(), date(2023, 6, 1)) == LoanStatus.ACTIVE

    def test_outstanding_for(self) -> None:
        assert outstanding_for(_gold(), date(2024, 4, 1)) == pytest.approx(54000.0)
        assert outstanding_for(_gold(), date(2023, 6, 1)) == 50000.0


class TestCardStatus:
    """Tests for credit card status."""

    def test_paid_at_zero_balance(self) -> None:
        assert determine_status(_card("0"), date(2024, 4, 1)) == LoanStatus.PAID

    def test_active_with_balance(self) -> None:
        assert determine_status(_card("250.75"), date(2024, 4, 1)) == LoanStatus.ACTIVE

    def test_outstanding_for(self) -> None:
        assert outstanding_for(_card("250.75"), date(2024, 4, 1)) == 250.75
