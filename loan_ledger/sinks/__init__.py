"""Output sinks for inspecting ledger data."""

from loan_ledger.sinks.console import ConsoleSink

__all__ = ["ConsoleSink"]
