"""Input validation performed at the store boundary.

The engine assumes validated input; everything a caller can get wrong is
rejected here with the offending field name.
"""

import re
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from loan_ledger.exceptions import InvalidEntityStateError, TypeMismatchError, ValidationError
from loan_ledger.models import Loan, LoanInput, LoanStatus, LoanType

ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
UPDATABLE_FIELDS = frozenset({
    "borrower_name",
    "amount",
    "interest_rate",
    "term",
    "start_date",
    "status",
    "card_number",
    "credit_limit",
    "loan_type",
})


def validate_id(value: Any, field: str = "loan_id") -> str:
    """Reject empty, placeholder or malformed ids."""
    if not isinstance(value, str) or value in ("null", "undefined") or not ID_PATTERN.match(value):
        raise ValidationError(field, f"invalid id {value!r}")
    return value


def _to_decimal(value: Any, field: str) -> Decimal:
    if value is None or value == "":
        raise ValidationError(field, "is required")
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(field, f"must be a number, got {value!r}") from None
    if not number.is_finite():
        raise ValidationError(field, "must be a finite number")
    return number


def validate_amount(value: Any, field: str = "amount") -> Decimal:
    """Amounts are required and strictly positive."""
    number = _to_decimal(value, field)
    if number <= 0:
        raise ValidationError(field, "must be a positive number")
    return number


def validate_rate(value: Any, field: str = "interest_rate") -> Decimal:
    """Annual percentage rate; zero is allowed."""
    number = _to_decimal(value, field)
    if number < 0:
        raise ValidationError(field, "must not be negative")
    return number


def validate_term(value: Any, field: str = "term") -> int:
    """Whole number of months, at least one."""
    if value is None or value == "":
        raise ValidationError(field, "is required for personal loans")
    if isinstance(value, bool):
        raise ValidationError(field, "must be a whole number of months")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(field, f"must be a whole number of months, got {value!r}") from None
    if not number.is_finite() or number != number.to_integral_value() or number < 1:
        raise ValidationError(field, "must be a whole number of months, at least 1")
    return int(number)


def validate_date(value: Any, field: str = "date") -> date:
    """Accept a date, a datetime or an ISO-8601 string."""
    if value is None or value == "":
        raise ValidationError(field, "is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
        except ValueError:
            raise ValidationError(field, f"must be an ISO date, got {value!r}") from None
    raise ValidationError(field, f"must be a date, got {type(value).__name__}")


def validate_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "is required")
    return value.strip()


def validate_loan_input(data: LoanInput) -> LoanInput:
    """Check required fields for the loan's type and coerce their types.

    Returns
    -------
    LoanInput
        A copy with normalized values. Credit cards get a zero rate and no
        term; gold loans drop any term.
    """
    try:
        loan_type = LoanType(data.loan_type)
    except ValueError:
        raise ValidationError("loan_type", f"unknown loan type {data.loan_type!r}") from None

    name = validate_text(data.borrower_name, "borrower_name")
    amount = validate_amount(data.amount)
    start_date = validate_date(data.start_date, "start_date")

    if loan_type == LoanType.CREDIT_CARD:
        return replace(
            data,
            loan_type=loan_type,
            borrower_name=name,
            amount=amount,
            start_date=start_date,
            interest_rate=Decimal("0"),
            term=None,
            card_number=validate_text(data.card_number, "card_number"),
        )

    rate = validate_rate(data.interest_rate)
    term = validate_term(data.term) if loan_type == LoanType.PERSONAL else None
    return replace(
        data,
        loan_type=loan_type,
        borrower_name=name,
        amount=amount,
        start_date=start_date,
        interest_rate=rate,
        term=term,
        card_number=None,
    )


def validate_loan_update(loan: Loan, fields: dict[str, Any]) -> dict[str, Any]:
    """Validate a partial update against the stored loan.

    Returns
    -------
    dict[str, Any]
        Normalized field values ready to assign.
    """
    unknown = sorted(set(fields) - UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(unknown[0], "is not an updatable field")

    changes: dict[str, Any] = {}
    for name, value in fields.items():
        if name == "loan_type":
            if value != loan.loan_type and value != loan.loan_type.value:
                raise ValidationError("loan_type", "cannot change after creation")
        elif name == "borrower_name":
            changes[name] = validate_text(value, name)
        elif name == "amount":
            changes[name] = validate_amount(value)
        elif name == "start_date":
            changes[name] = validate_date(value, name)
        elif name == "status":
            try:
                changes[name] = LoanStatus(value)
            except ValueError:
                raise ValidationError("status", f"unknown status {value!r}") from None
        elif name == "interest_rate":
            rate = validate_rate(value)
            if loan.is_credit_card and rate != 0:
                raise TypeMismatchError("Credit cards do not carry an interest rate")
            changes[name] = rate
        elif name == "term":
            if loan.loan_type != LoanType.PERSONAL:
                raise TypeMismatchError("Only personal loans have a term")
            changes[name] = validate_term(value)
        elif name in ("card_number", "credit_limit"):
            if not loan.is_credit_card:
                raise TypeMismatchError(f"{name} applies to credit cards only")
            changes[name] = (
                validate_text(value, name) if name == "card_number" else validate_amount(value, name)
            )
    return changes


def ensure_accepts(loan: Loan, event: str) -> None:
    """Reject events that make no sense for the loan's type or state.

    Parameters
    ----------
    loan : Loan
        Target loan.
    event : str
        ``"payment"``, ``"prepayment"`` or ``"spent"``.
    """
    if event == "spent" and not loan.is_credit_card:
        raise TypeMismatchError(
            f"Loan {loan.loan_id} is a {loan.loan_type.value} loan; spends apply to credit cards only"
        )
    if event == "prepayment" and loan.is_credit_card:
        raise TypeMismatchError(
            f"Loan {loan.loan_id} is a credit card; prepayments apply to personal and gold loans only"
        )


def ensure_open_for_prepayment(loan: Loan) -> None:
    if loan.status == LoanStatus.PAID:
        raise InvalidEntityStateError(f"Cannot make a prepayment on paid loan {loan.loan_id}")
