"""Open-ended interest accrual for gold loans.

Interest accrues monthly on the outstanding principal and piles up until a
payment or prepayment retires it. Nothing is ever force-amortized: the
schedule simply runs from the start month to the evaluation month.
"""

from collections.abc import Sequence
from datetime import date
from typing import Any

from loan_ledger.engine.common import (
    add_months,
    allocate_interest_first,
    monthly_rate,
    months_between,
    same_month,
    sum_in_month,
)
from loan_ledger.exceptions import TypeMismatchError
from loan_ledger.models import Loan, LoanType, OpenEndedRow, Payment, Prepayment


def compute_open_ended_schedule(
    principal: Any,
    annual_rate_pct: Any,
    start_date: date,
    as_of: date,
    payments: Sequence[Payment] = (),
    prepayments: Sequence[Prepayment] = (),
) -> list[OpenEndedRow]:
    """Accrue interest month by month and allocate payments interest-first.

    Parameters
    ----------
    principal : Decimal | float
        Amount borrowed.
    annual_rate_pct : Decimal | float
        Annual interest rate in percent.
    start_date : date
        Loan start; its calendar month is the first row.
    as_of : date
        Evaluation date; its calendar month is the last row and the one
        flagged ``is_current_month``.
    payments, prepayments : Sequence
        Event histories in any order. Within a month, prepayments are
        allocated before payments.

    Returns
    -------
    list[OpenEndedRow]
        One row per calendar month, empty when ``as_of`` precedes the start
        month. Rows keep coming after the principal is retired.
    """
    principal = float(principal)
    if principal <= 0:
        raise ValueError(f"principal must be positive, got {principal}")
    r = monthly_rate(annual_rate_pct)
    if r < 0:
        raise ValueError(f"interest rate must not be negative, got {annual_rate_pct}")

    outstanding = principal
    accumulated_interest = 0.0
    rows: list[OpenEndedRow] = []

    for offset in range(months_between(start_date, as_of)):
        row_date = add_months(start_date, offset)

        interest = outstanding * r
        accumulated_interest += interest

        total_prepayment = sum_in_month(prepayments, row_date.year, row_date.month)
        total_payment = sum_in_month(payments, row_date.year, row_date.month)

        prepay_interest, prepay_principal = allocate_interest_first(
            total_prepayment, accumulated_interest
        )
        accumulated_interest -= prepay_interest
        outstanding = max(0.0, outstanding - prepay_principal)

        pay_interest, pay_principal = allocate_interest_first(total_payment, accumulated_interest)
        accumulated_interest -= pay_interest
        outstanding = max(0.0, outstanding - pay_principal)

        rows.append(OpenEndedRow(
            month=offset + 1,
            date=row_date,
            monthly_interest=interest,
            accumulated_interest=accumulated_interest,
            total_payment=total_payment,
            total_prepayment=total_prepayment,
            interest_paid_by_prepayment=prepay_interest,
            principal_paid_by_prepayment=prepay_principal,
            interest_paid_by_payment=pay_interest,
            principal_paid_by_payment=pay_principal,
            outstanding_principal=outstanding,
            total_outstanding=outstanding + accumulated_interest,
            is_current_month=same_month(row_date, as_of),
        ))

    return rows


def open_ended_schedule_for(loan: Loan, as_of: date) -> list[OpenEndedRow]:
    """Schedule for a stored gold loan evaluated at ``as_of``."""
    if loan.loan_type != LoanType.GOLD:
        raise TypeMismatchError(
            f"Loan {loan.loan_id} is a {loan.loan_type.value} loan; "
            "interest accrual schedules apply to gold loans only"
        )
    return compute_open_ended_schedule(
        loan.amount,
        loan.interest_rate,
        loan.start_date,
        as_of,
        loan.payments,
        loan.prepayments,
    )
