"""Single authoritative rule for a loan's status and current outstanding."""

from datetime import date

from loan_ledger.engine.common import month_index
from loan_ledger.engine.fixed_term import fixed_term_schedule_for, remaining_principal_as_of
from loan_ledger.engine.open_ended import open_ended_schedule_for
from loan_ledger.models import Loan, LoanStatus, LoanType


def outstanding_for(loan: Loan, as_of: date) -> float:
    """What the loan owes at ``as_of``.

    Personal loans report the scheduled remaining principal after
    ``as_of``'s month, gold loans principal plus unpaid interest, credit
    cards their revolving balance.
    """
    if loan.loan_type == LoanType.PERSONAL:
        schedule = fixed_term_schedule_for(loan)
        return remaining_principal_as_of(schedule, loan.amount, as_of)
    if loan.loan_type == LoanType.GOLD:
        rows = open_ended_schedule_for(loan, as_of)
        return rows[-1].total_outstanding if rows else float(loan.amount)
    return float(loan.outstanding if loan.outstanding is not None else loan.amount)


def determine_status(loan: Loan, as_of: date) -> LoanStatus:
    """Recompute status from the loan's current fields and events.

    ``defaulted`` is only ever set by hand and is kept as is. Otherwise a
    loan is ``paid`` exactly when the engine brings what it owes to zero:
    a personal loan whose schedule retires the principal no later than
    ``as_of``'s month, a gold loan with nothing left at ``as_of``, or a
    card with a zero balance.
    """
    if loan.status == LoanStatus.DEFAULTED:
        return LoanStatus.DEFAULTED

    if loan.loan_type == LoanType.PERSONAL:
        payoff = fixed_term_schedule_for(loan).payoff_date
        paid = payoff is not None and month_index(payoff) <= month_index(as_of)
    elif loan.loan_type == LoanType.GOLD:
        rows = open_ended_schedule_for(loan, as_of)
        paid = bool(rows) and rows[-1].total_outstanding == 0
    else:
        paid = outstanding_for(loan, as_of) == 0

    return LoanStatus.PAID if paid else LoanStatus.ACTIVE
