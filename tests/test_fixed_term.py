"""Tests for personal loan EMI schedules."""

from datetime import date
from decimal import Decimal

import pytest

from loan_ledger.engine import (
    calculate_emi,
    compute_fixed_term_schedule,
    compute_interest_summary,
    fixed_term_schedule_for,
)
from loan_ledger.engine.fixed_term import remaining_principal_as_of
from loan_ledger.exceptions import TypeMismatchError
from loan_ledger.models import Loan, LoanType, Prepayment

START = date(2024, 1, 5)


class TestCalculateEmi:
    """Tests for calculate_emi."""

    def test_standard_emi(self) -> None:
        assert calculate_emi(120000, 12, 12) == pytest.approx(10661.85, abs=0.01)

    def test_accepts_decimal(self) -> None:
        assert calculate_emi(Decimal("120000"), Decimal("12"), 12) == pytest.approx(10661.85, abs=0.01)

    def test_zero_rate_divides_evenly(self) -> None:
        assert calculate_emi(1200, 0, 12) == 100.0

    def test_single_month(self) -> None:
        assert calculate_emi(1000, 12, 1) == pytest.approx(1010.0)

    @pytest.mark.parametrize(
        "principal,rate,term",
        [(0, 12, 12), (-100, 12, 12), (1000, 12, 0), (1000, -1, 12)],
    )
    def test_invalid_input(self, principal: float, rate: float, term: int) -> None:
        with pytest.raises(ValueError):
            calculate_emi(principal, rate, term)


class TestComputeFixedTermSchedule:
    """Tests for compute_fixed_term_schedule."""

    def test_first_month_split(self) -> None:
        schedule = compute_fixed_term_schedule(120000, 12, 12, START)
        first = schedule.rows[0]

        assert first.month == 1
        assert first.date == START
        assert first.interest == pytest.approx(1200.0)
        assert first.principal == pytest.approx(9461.85, abs=0.01)
        assert first.remaining_principal == pytest.approx(110538.15, abs=0.01)

    def test_closes_at_term(self) -> None:
        schedule = compute_fixed_term_schedule(120000, 12, 12, START)

        assert len(schedule.rows) == 12
        assert schedule.rows[-1].remaining_principal == 0
        assert schedule.rows[-1].date == date(2024, 12, 5)
        assert schedule.total_principal == pytest.approx(120000.0)
        assert schedule.rows[-1].emi == pytest.approx(schedule.emi, abs=0.01)

    def test_rows_follow_calendar(self) -> None:
        schedule = compute_fixed_term_schedule(60000, 10, 6, date(2024, 1, 31))

        assert [row.date for row in schedule.rows[:3]] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
        ]

    def test_zero_rate(self) -> None:
        schedule = compute_fixed_term_schedule(1200, 0, 12, START)

        assert len(schedule.rows) == 12
        assert all(row.interest == 0 for row in schedule.rows)
        assert all(row.principal == pytest.approx(100.0) for row in schedule.rows)
        assert schedule.rows[-1].remaining_principal == 0

    def test_remaining_never_negative(self) -> None:
        schedule = compute_fixed_term_schedule(100000, 18, 36, START)

        assert all(row.remaining_principal >= 0 for row in schedule.rows)
        assert schedule.rows[-1].remaining_principal == 0

    def test_prepayment_pays_off_early(self) -> None:
        prepayments = [Prepayment("pre-1", Decimal("50000"), date(2024, 1, 20))]

        schedule = compute_fixed_term_schedule(120000, 12, 12, START, prepayments)

        assert schedule.rows[0].prepayment_applied == 50000.0
        assert schedule.rows[0].remaining_principal == pytest.approx(60538.15, abs=0.01)
        assert len(schedule.rows) < 12
        assert schedule.rows[-1].remaining_principal == 0
        assert schedule.rows[-1].emi <= schedule.emi
        assert schedule.total_principal + schedule.total_prepayment == pytest.approx(120000.0)

    def test_prepayment_matched_by_month_not_day(self) -> None:
        """A prepayment dated before the row's day still applies to that month."""
        prepayments = [Prepayment("pre-1", Decimal("1000"), date(2024, 3, 1))]

        schedule = compute_fixed_term_schedule(120000, 12, 12, START, prepayments)

        assert schedule.rows[2].prepayment_applied == 1000.0
        assert schedule.rows[1].prepayment_applied == 0.0

    def test_prepaying_the_balance_ends_that_month(self) -> None:
        plain = compute_fixed_term_schedule(120000, 12, 12, START)
        balance = plain.rows[1].remaining_principal
        prepayments = [Prepayment("pre-1", Decimal(str(balance)), date(2024, 3, 5))]

        schedule = compute_fixed_term_schedule(120000, 12, 12, START, prepayments)

        assert len(schedule.rows) == 3
        assert schedule.rows[-1].remaining_principal == 0
        assert schedule.payoff_date == date(2024, 3, 5)

    def test_prepayment_larger_than_balance(self) -> None:
        prepayments = [Prepayment("pre-1", Decimal("500000"), date(2024, 1, 5))]

        schedule = compute_fixed_term_schedule(120000, 12, 12, START, prepayments)

        assert len(schedule.rows) == 1
        assert schedule.rows[0].remaining_principal == 0
        assert schedule.payoff_date == START


class TestInterestSummary:
    """Tests for compute_interest_summary."""

    def test_nothing_saved_without_prepayments(self) -> None:
        schedule = compute_fixed_term_schedule(120000, 12, 12, START)

        summary = compute_interest_summary(120000, 12, 12, schedule)

        assert summary.total_interest == pytest.approx(7942.20, abs=0.05)
        assert summary.interest_paid == pytest.approx(summary.total_interest, abs=0.01)
        assert summary.interest_saved == pytest.approx(0.0, abs=0.01)

    def test_prepayment_saves_interest(self) -> None:
        prepayments = [Prepayment("pre-1", Decimal("50000"), date(2024, 2, 10))]
        schedule = compute_fixed_term_schedule(120000, 12, 12, START, prepayments)

        summary = compute_interest_summary(120000, 12, 12, schedule)

        assert summary.interest_saved > 0
        assert summary.interest_paid + summary.interest_saved == pytest.approx(summary.total_interest)


class TestStoredLoanSchedules:
    """Tests for schedules derived from stored loans."""

    def _loan(self, loan_type: LoanType = LoanType.PERSONAL) -> Loan:
        return Loan(
            loan_id="loan-001",
            borrower_name="Test Borrower",
            loan_type=loan_type,
            amount=Decimal("120000"),
            interest_rate=Decimal("12"),
            start_date=START,
            term=12,
            prepayments=[Prepayment("pre-1", Decimal("10000"), date(2024, 2, 1))],
        )

    def test_fixed_term_schedule_for(self) -> None:
        schedule = fixed_term_schedule_for(self._loan())

        assert schedule.emi == pytest.approx(10661.85, abs=0.01)
        assert schedule.rows[1].prepayment_applied == 10000.0

    def test_rejects_other_loan_types(self) -> None:
        with pytest.raises(TypeMismatchError):
            fixed_term_schedule_for(self._loan(LoanType.GOLD))

    def test_remaining_principal_as_of(self) -> None:
        schedule = compute_fixed_term_schedule(120000, 12, 12, START)

        assert remaining_principal_as_of(schedule, 120000, date(2023, 12, 31)) == 120000.0
        assert remaining_principal_as_of(schedule, 120000, date(2024, 1, 1)) == pytest.approx(110538.15, abs=0.01)
        assert remaining_principal_as_of(schedule, 120000, date(2025, 6, 1)) == 0.0
