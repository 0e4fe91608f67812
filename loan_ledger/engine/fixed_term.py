"""Fixed-term amortization for personal loans."""

from collections.abc import Sequence
from datetime import date
from typing import Any

from loan_ledger.engine.common import add_months, monthly_rate, sum_in_month
from loan_ledger.exceptions import TypeMismatchError
from loan_ledger.models import (
    FixedTermRow,
    FixedTermSchedule,
    InterestSummary,
    Loan,
    LoanType,
    Prepayment,
)


def calculate_emi(principal: Any, annual_rate_pct: Any, term_months: int) -> float:
    """Level monthly installment that amortizes ``principal`` over the term.

    Formula: EMI = P * [r(1+r)^n] / [(1+r)^n - 1], or P / n when r is 0.
    """
    principal = float(principal)
    if principal <= 0:
        raise ValueError(f"principal must be positive, got {principal}")
    if term_months < 1:
        raise ValueError(f"term must be at least one month, got {term_months}")

    r = monthly_rate(annual_rate_pct)
    if r < 0:
        raise ValueError(f"interest rate must not be negative, got {annual_rate_pct}")
    if r == 0:
        return principal / term_months

    growth = (1 + r) ** term_months
    return principal * r * growth / (growth - 1)


def compute_fixed_term_schedule(
    principal: Any,
    annual_rate_pct: Any,
    term_months: int,
    start_date: date,
    prepayments: Sequence[Prepayment] = (),
) -> FixedTermSchedule:
    """Build the month-by-month EMI table.

    Parameters
    ----------
    principal : Decimal | float
        Amount borrowed.
    annual_rate_pct : Decimal | float
        Annual interest rate in percent.
    term_months : int
        Number of installments.
    start_date : date
        Date of the first installment; later rows fall on the same day of
        subsequent months.
    prepayments : Sequence[Prepayment]
        Extra payments. Every prepayment dated in a row's calendar month is
        applied to that row, whatever its day.

    Returns
    -------
    FixedTermSchedule
        The level EMI and one row per month until the principal is retired.
        The row that closes the loan pays only what is left, so the table
        stops early when rounding or prepayments retire the loan ahead of
        the term.
    """
    emi = calculate_emi(principal, annual_rate_pct, term_months)
    r = monthly_rate(annual_rate_pct)
    remaining = float(principal)
    schedule = FixedTermSchedule(emi=emi)

    for month in range(1, term_months + 1):
        row_date = add_months(start_date, month - 1)
        interest = remaining * r

        # The last month always closes out, so float residue never survives the term
        if remaining + interest <= emi or month == term_months:
            schedule.rows.append(FixedTermRow(
                month=month,
                date=row_date,
                emi=remaining + interest,
                principal=remaining,
                interest=interest,
                prepayment_applied=0.0,
                remaining_principal=0.0,
            ))
            break

        principal_portion = emi - interest
        prepayment = sum_in_month(prepayments, row_date.year, row_date.month)
        remaining = max(0.0, remaining - principal_portion - prepayment)

        schedule.rows.append(FixedTermRow(
            month=month,
            date=row_date,
            emi=emi,
            principal=principal_portion,
            interest=interest,
            prepayment_applied=prepayment,
            remaining_principal=remaining,
        ))

        if remaining == 0:
            break

    return schedule


def compute_interest_summary(
    principal: Any,
    annual_rate_pct: Any,
    term_months: int,
    schedule: FixedTermSchedule,
) -> InterestSummary:
    """Compare the plan's total interest with what ``schedule`` charges."""
    emi = calculate_emi(principal, annual_rate_pct, term_months)
    total_interest = emi * term_months - float(principal)
    interest_paid = schedule.total_interest
    return InterestSummary(
        total_interest=total_interest,
        interest_paid=interest_paid,
        interest_saved=total_interest - interest_paid,
    )


def fixed_term_schedule_for(loan: Loan) -> FixedTermSchedule:
    """Schedule for a stored personal loan."""
    if loan.loan_type != LoanType.PERSONAL:
        raise TypeMismatchError(
            f"Loan {loan.loan_id} is a {loan.loan_type.value} loan; "
            "fixed-term schedules apply to personal loans only"
        )
    return compute_fixed_term_schedule(
        loan.amount,
        loan.interest_rate,
        loan.term,
        loan.start_date,
        loan.prepayments,
    )


def remaining_principal_as_of(schedule: FixedTermSchedule, principal: Any, as_of: date) -> float:
    """Remaining principal after the last row dated in or before ``as_of``'s month."""
    remaining = float(principal)
    for row in schedule.rows:
        if (row.date.year, row.date.month) > (as_of.year, as_of.month):
            break
        remaining = row.remaining_principal
    return remaining
