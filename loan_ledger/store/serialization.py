"""Loan document serialization for the file and database stores."""

from dataclasses import asdict
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from loan_ledger.exceptions import StorageError
from loan_ledger.models import (
    Loan,
    LoanStatus,
    LoanType,
    Payment,
    PaymentStatus,
    Prepayment,
    Spent,
)


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def loan_to_dict(loan: Loan) -> dict[str, Any]:
    """One JSON-ready document per loan, events embedded."""
    return dataclass_to_dict(loan)


def _decimal(value: Any) -> Decimal | None:
    return None if value is None else Decimal(str(value))


def _date(value: Any) -> date:
    return value if isinstance(value, date) else date.fromisoformat(value)


def _datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def loan_from_dict(data: dict[str, Any]) -> Loan:
    """Rebuild a :class:`Loan` from a stored document.

    Raises
    ------
    StorageError
        If the document is missing fields or holds malformed values.
    """
    try:
        return Loan(
            loan_id=data["loan_id"],
            borrower_name=data["borrower_name"],
            loan_type=LoanType(data["loan_type"]),
            amount=Decimal(str(data["amount"])),
            interest_rate=Decimal(str(data.get("interest_rate") or 0)),
            start_date=_date(data["start_date"]),
            term=data.get("term"),
            status=LoanStatus(data.get("status", LoanStatus.ACTIVE.value)),
            credit_limit=_decimal(data.get("credit_limit")),
            card_number=data.get("card_number"),
            outstanding=_decimal(data.get("outstanding")),
            payments=[
                Payment(
                    payment_id=item["payment_id"],
                    amount=Decimal(str(item["amount"])),
                    date=_date(item["date"]),
                    status=PaymentStatus(item.get("status", PaymentStatus.COMPLETED.value)),
                )
                for item in data.get("payments", [])
            ],
            prepayments=[
                Prepayment(
                    prepayment_id=item["prepayment_id"],
                    amount=Decimal(str(item["amount"])),
                    date=_date(item["date"]),
                )
                for item in data.get("prepayments", [])
            ],
            spent_history=[
                Spent(
                    spent_id=item["spent_id"],
                    amount=Decimal(str(item["amount"])),
                    date=_date(item["date"]),
                    description=item.get("description", ""),
                )
                for item in data.get("spent_history", [])
            ],
            created_at=_datetime(data.get("created_at")),
            updated_at=_datetime(data.get("updated_at")),
        )
    except (KeyError, ValueError, ArithmeticError) as e:
        raise StorageError(f"Malformed loan document {data.get('loan_id')!r}: {e}") from e
