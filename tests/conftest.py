"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from loan_ledger.models import LoanInput, LoanType
from loan_ledger.store import InMemoryLoanStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def as_of() -> date:
    """Fixed evaluation date."""
    return date(2024, 6, 15)


@pytest.fixture
def store(as_of: date) -> InMemoryLoanStore:
    """Fresh in-memory store whose clock is pinned to ``as_of``."""
    return InMemoryLoanStore(clock=lambda: as_of)


@pytest.fixture
def personal_input() -> LoanInput:
    """120000 at 12% over 12 months."""
    return LoanInput(
        borrower_name="Asha Verma",
        loan_type=LoanType.PERSONAL,
        amount=Decimal("120000"),
        interest_rate=Decimal("12"),
        term=12,
        start_date=date(2024, 1, 5),
    )


@pytest.fixture
def gold_input() -> LoanInput:
    """50000 at 24% from January 2024."""
    return LoanInput(
        borrower_name="Ravi Kumar",
        loan_type=LoanType.GOLD,
        amount=Decimal("50000"),
        interest_rate=Decimal("24"),
        start_date=date(2024, 1, 1),
    )


@pytest.fixture
def card_input() -> LoanInput:
    """Credit card seeded with a 1000 balance."""
    return LoanInput(
        borrower_name="Travel Card",
        loan_type=LoanType.CREDIT_CARD,
        amount=Decimal("1000"),
        card_number="****-****-****-4242",
        start_date=date(2024, 1, 1),
    )
