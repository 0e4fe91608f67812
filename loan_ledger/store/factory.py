"""Build the configured store backend."""

from collections.abc import Callable
from datetime import date

from loan_ledger.config import LedgerConfig
from loan_ledger.exceptions import ConfigurationError
from loan_ledger.store.base import LoanStore
from loan_ledger.store.json_file import JsonFileLoanStore
from loan_ledger.store.memory import InMemoryLoanStore
from loan_ledger.store.postgres import PostgresLoanStore


def create_store(config: LedgerConfig, clock: Callable[[], date] | None = None) -> LoanStore:
    """Instantiate the backend named by ``config.storage.backend``."""
    backend = config.storage.backend
    if backend == "memory":
        return InMemoryLoanStore(clock=clock)
    if backend == "json":
        return JsonFileLoanStore(config.storage.data_dir, pretty=config.output.pretty_json, clock=clock)
    if backend == "postgres":
        store = PostgresLoanStore(
            config.postgres.connection_string,
            table=config.postgres.table,
            clock=clock,
        )
        store.create_table()
        return store
    raise ConfigurationError(f"Unknown storage backend {backend!r}")
