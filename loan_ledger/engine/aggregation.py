"""Month-by-month outstandings across several loans of one type."""

from collections.abc import Iterable, Sequence
from datetime import date

from loan_ledger.engine.fixed_term import fixed_term_schedule_for
from loan_ledger.engine.open_ended import open_ended_schedule_for
from loan_ledger.exceptions import TypeMismatchError
from loan_ledger.models import Loan, LoanMonthEntry, LoanType, MonthlyBucket


def _bucket(buckets: dict[tuple[int, int], MonthlyBucket], when: date) -> MonthlyBucket:
    key = (when.year, when.month)
    if key not in buckets:
        buckets[key] = MonthlyBucket(year=when.year, month=when.month)
    return buckets[key]


def _fold_personal(loan: Loan, buckets: dict[tuple[int, int], MonthlyBucket]) -> None:
    schedule = fixed_term_schedule_for(loan)
    previous = float(loan.amount)
    for row in schedule.rows:
        bucket = _bucket(buckets, row.date)
        bucket.entries[loan.loan_id] = LoanMonthEntry(
            loan_id=loan.loan_id,
            borrower_name=loan.borrower_name,
            outstanding_principal=row.remaining_principal,
            total_outstanding=row.remaining_principal,
            interest=row.interest,
            emi=row.emi,
            principal=row.principal,
            prepayment=row.prepayment_applied,
            previous_outstanding=previous,
        )
        bucket.outstanding_principal += row.remaining_principal
        bucket.total_outstanding += row.remaining_principal
        bucket.total_interest += row.interest
        bucket.total_emi += row.emi
        bucket.total_principal += row.principal
        bucket.total_prepayment += row.prepayment_applied
        previous = row.remaining_principal


def _fold_gold(loan: Loan, as_of: date, buckets: dict[tuple[int, int], MonthlyBucket]) -> None:
    previous = float(loan.amount)
    for row in open_ended_schedule_for(loan, as_of):
        bucket = _bucket(buckets, row.date)
        bucket.entries[loan.loan_id] = LoanMonthEntry(
            loan_id=loan.loan_id,
            borrower_name=loan.borrower_name,
            outstanding_principal=row.outstanding_principal,
            total_outstanding=row.total_outstanding,
            interest=row.monthly_interest,
            accumulated_interest=row.accumulated_interest,
            principal=row.principal_paid_by_prepayment + row.principal_paid_by_payment,
            payment=row.total_payment,
            prepayment=row.total_prepayment,
            interest_paid_by_prepayment=row.interest_paid_by_prepayment,
            principal_paid_by_prepayment=row.principal_paid_by_prepayment,
            previous_outstanding=previous,
        )
        bucket.outstanding_principal += row.outstanding_principal
        bucket.total_outstanding += row.total_outstanding
        bucket.total_interest += row.monthly_interest
        bucket.accumulated_interest += row.accumulated_interest
        bucket.total_principal += row.principal_paid_by_prepayment + row.principal_paid_by_payment
        bucket.total_payment += row.total_payment
        bucket.total_prepayment += row.total_prepayment
        bucket.interest_paid_by_prepayment += row.interest_paid_by_prepayment
        bucket.principal_paid_by_prepayment += row.principal_paid_by_prepayment
        previous = row.outstanding_principal


def aggregate_monthly(
    loans: Iterable[Loan],
    loan_type: LoanType,
    as_of: date,
) -> list[MonthlyBucket]:
    """Fold every loan of ``loan_type`` into per-month buckets.

    Parameters
    ----------
    loans : Iterable[Loan]
        Any mix of loans; those of another type are skipped.
    loan_type : LoanType
        PERSONAL or GOLD. Credit cards have no schedule to fold.
    as_of : date
        Evaluation date. Gold schedules run up to its month, and the bucket
        for its month is flagged ``is_current_month``.

    Returns
    -------
    list[MonthlyBucket]
        Buckets sorted by (year, month). Personal loans contribute their
        projected rows up to payoff, gold loans from their start month.
    """
    if loan_type == LoanType.CREDIT_CARD:
        raise TypeMismatchError("Credit cards have no monthly schedule to aggregate")

    buckets: dict[tuple[int, int], MonthlyBucket] = {}
    for loan in loans:
        if loan.loan_type != loan_type:
            continue
        if loan_type == LoanType.PERSONAL:
            _fold_personal(loan, buckets)
        else:
            _fold_gold(loan, as_of, buckets)

    current = (as_of.year, as_of.month)
    ordered = [buckets[key] for key in sorted(buckets)]
    for bucket in ordered:
        bucket.is_current_month = bucket.key == current
    return ordered


def current_bucket(buckets: Sequence[MonthlyBucket]) -> MonthlyBucket | None:
    """The bucket flagged as current, else the latest one."""
    for bucket in buckets:
        if bucket.is_current_month:
            return bucket
    return buckets[-1] if buckets else None
