"""Tests for input validation at the store boundary."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from loan_ledger.exceptions import InvalidEntityStateError, TypeMismatchError, ValidationError
from loan_ledger.models import Loan, LoanInput, LoanStatus, LoanType
from loan_ledger.store.validation import (
    ensure_accepts,
    ensure_open_for_prepayment,
    validate_amount,
    validate_date,
    validate_id,
    validate_loan_input,
    validate_loan_update,
    validate_rate,
    validate_term,
)


def _loan(loan_type: LoanType, **kwargs) -> Loan:
    return Loan(
        loan_id="loan-001",
        borrower_name="Test Borrower",
        loan_type=loan_type,
        amount=Decimal("1000"),
        interest_rate=Decimal("0") if loan_type == LoanType.CREDIT_CARD else Decimal("12"),
        start_date=date(2024, 1, 1),
        **kwargs,
    )


class TestFieldValidators:
    """Tests for single-field validators."""

    @pytest.mark.parametrize("value", ["abc123", "loan-001", "a_b", "f" * 32])
    def test_valid_ids(self, value: str) -> None:
        assert validate_id(value) == value

    @pytest.mark.parametrize("value", ["", "null", "undefined", "has space", "../etc", None, 42, "x" * 65])
    def test_invalid_ids(self, value: object) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_id(value, "payment_id")
        assert exc_info.value.field == "payment_id"

    def test_amount_coerced_to_decimal(self) -> None:
        assert validate_amount("1500.50") == Decimal("1500.50")
        assert validate_amount(250) == Decimal("250")
        assert validate_amount(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("value", [0, -5, "abc", None, "", "NaN", "Infinity", True])
    def test_invalid_amounts(self, value: object) -> None:
        with pytest.raises(ValidationError):
            validate_amount(value)

    def test_rate_allows_zero(self) -> None:
        assert validate_rate(0) == Decimal("0")

    def test_negative_rate(self) -> None:
        with pytest.raises(ValidationError, match="interest_rate"):
            validate_rate(-1)

    def test_term(self) -> None:
        assert validate_term(12) == 12
        assert validate_term("24") == 24

    @pytest.mark.parametrize("value", [0, -1, 1.5, "abc", None])
    def test_invalid_terms(self, value: object) -> None:
        with pytest.raises(ValidationError):
            validate_term(value)

    def test_dates(self) -> None:
        assert validate_date(date(2024, 3, 1)) == date(2024, 3, 1)
        assert validate_date(datetime(2024, 3, 1, 10, 30)) == date(2024, 3, 1)
        assert validate_date("2024-03-01") == date(2024, 3, 1)
        assert validate_date("2024-03-01T00:00:00.000Z") == date(2024, 3, 1)

    @pytest.mark.parametrize("value", ["", None, "03/01/2024", 20240301])
    def test_invalid_dates(self, value: object) -> None:
        with pytest.raises(ValidationError):
            validate_date(value)


class TestValidateLoanInput:
    """Tests for validate_loan_input."""

    def test_personal(self) -> None:
        data = LoanInput("  Asha  ", "personal", "120000", "2024-01-05", interest_rate="12", term="12")

        result = validate_loan_input(data)

        assert result.borrower_name == "Asha"
        assert result.loan_type == LoanType.PERSONAL
        assert result.amount == Decimal("120000")
        assert result.interest_rate == Decimal("12")
        assert result.term == 12
        assert result.start_date == date(2024, 1, 5)

    def test_personal_requires_term(self) -> None:
        data = LoanInput("Asha", LoanType.PERSONAL, 1000, date(2024, 1, 1), interest_rate=12)

        with pytest.raises(ValidationError) as exc_info:
            validate_loan_input(data)
        assert exc_info.value.field == "term"

    def test_gold_requires_rate_and_drops_term(self) -> None:
        with pytest.raises(ValidationError, match="interest_rate"):
            validate_loan_input(LoanInput("Ravi", LoanType.GOLD, 1000, date(2024, 1, 1)))

        result = validate_loan_input(
            LoanInput("Ravi", LoanType.GOLD, 1000, date(2024, 1, 1), interest_rate=24, term=12)
        )
        assert result.term is None

    def test_credit_card(self) -> None:
        data = LoanInput(
            "Travel Card", LoanType.CREDIT_CARD, 1000, date(2024, 1, 1), interest_rate=36, term=6,
            card_number="****4242",
        )

        result = validate_loan_input(data)

        assert result.interest_rate == Decimal("0")
        assert result.term is None
        assert result.card_number == "****4242"

    def test_credit_card_requires_card_number(self) -> None:
        with pytest.raises(ValidationError, match="card_number"):
            validate_loan_input(LoanInput("Card", LoanType.CREDIT_CARD, 1000, date(2024, 1, 1)))

    def test_unknown_loan_type(self) -> None:
        with pytest.raises(ValidationError, match="loan_type"):
            validate_loan_input(LoanInput("X", "mortgage", 1000, date(2024, 1, 1), interest_rate=5))

    def test_missing_name(self) -> None:
        with pytest.raises(ValidationError, match="borrower_name"):
            validate_loan_input(LoanInput("  ", LoanType.GOLD, 1000, date(2024, 1, 1), interest_rate=5))


class TestValidateLoanUpdate:
    """Tests for validate_loan_update."""

    def test_normalizes_values(self) -> None:
        changes = validate_loan_update(
            _loan(LoanType.PERSONAL, term=12),
            {"amount": "2000", "term": "24", "start_date": "2024-02-01", "status": "defaulted"},
        )

        assert changes == {
            "amount": Decimal("2000"),
            "term": 24,
            "start_date": date(2024, 2, 1),
            "status": LoanStatus.DEFAULTED,
        }

    def test_unknown_field(self) -> None:
        with pytest.raises(ValidationError, match="payments"):
            validate_loan_update(_loan(LoanType.GOLD), {"payments": []})

    def test_loan_type_is_immutable(self) -> None:
        with pytest.raises(ValidationError, match="loan_type"):
            validate_loan_update(_loan(LoanType.GOLD), {"loan_type": "personal"})

    def test_same_loan_type_is_ignored(self) -> None:
        assert validate_loan_update(_loan(LoanType.GOLD), {"loan_type": "gold"}) == {}

    def test_unknown_status(self) -> None:
        with pytest.raises(ValidationError, match="status"):
            validate_loan_update(_loan(LoanType.GOLD), {"status": "closed"})

    def test_term_on_gold_loan(self) -> None:
        with pytest.raises(TypeMismatchError):
            validate_loan_update(_loan(LoanType.GOLD), {"term": 12})

    def test_rate_on_credit_card(self) -> None:
        with pytest.raises(TypeMismatchError):
            validate_loan_update(_loan(LoanType.CREDIT_CARD), {"interest_rate": 18})

    def test_card_fields_on_loan(self) -> None:
        with pytest.raises(TypeMismatchError):
            validate_loan_update(_loan(LoanType.PERSONAL, term=12), {"card_number": "1234"})


class TestEventGuards:
    """Tests for ensure_accepts and ensure_open_for_prepayment."""

    def test_spent_only_on_cards(self) -> None:
        ensure_accepts(_loan(LoanType.CREDIT_CARD), "spent")
        with pytest.raises(TypeMismatchError):
            ensure_accepts(_loan(LoanType.GOLD), "spent")

    def test_no_prepayments_on_cards(self) -> None:
        ensure_accepts(_loan(LoanType.GOLD), "prepayment")
        with pytest.raises(TypeMismatchError):
            ensure_accepts(_loan(LoanType.CREDIT_CARD), "prepayment")

    def test_payments_on_every_type(self) -> None:
        for loan_type in LoanType:
            ensure_accepts(_loan(loan_type), "payment")

    def test_no_prepayment_on_paid_loan(self) -> None:
        ensure_open_for_prepayment(_loan(LoanType.GOLD))
        with pytest.raises(InvalidEntityStateError):
            ensure_open_for_prepayment(_loan(LoanType.GOLD, status=LoanStatus.PAID))
