"""Loan document stores."""

from loan_ledger.store.base import LoanStore
from loan_ledger.store.factory import create_store
from loan_ledger.store.json_file import JsonFileLoanStore
from loan_ledger.store.memory import InMemoryLoanStore
from loan_ledger.store.postgres import PostgresLoanStore

__all__ = [
    "InMemoryLoanStore",
    "JsonFileLoanStore",
    "LoanStore",
    "PostgresLoanStore",
    "create_store",
]
