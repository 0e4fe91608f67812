"""Amortization ledger for personal loans, gold loans and credit cards."""

__version__ = "0.1.0"
