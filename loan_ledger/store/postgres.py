"""PostgreSQL store: one JSONB document per loan.

Every mutation runs in its own transaction and takes a row lock
(``SELECT ... FOR UPDATE``) before rewriting the document, so concurrent
appends to the same loan never lose each other's events.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import date

import psycopg
from psycopg import sql
from psycopg.types.json import Jsonb

from loan_ledger.exceptions import LoanNotFoundError, StorageError
from loan_ledger.models import Loan
from loan_ledger.store.base import LoanStore
from loan_ledger.store.serialization import loan_from_dict, loan_to_dict

logger = logging.getLogger(__name__)

CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS {table} (
    loan_id     TEXT PRIMARY KEY,
    loan_type   TEXT NOT NULL,
    document    JSONB NOT NULL,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""
SELECT_ONE = "SELECT document FROM {table} WHERE loan_id = %s"
SELECT_FOR_UPDATE = "SELECT document FROM {table} WHERE loan_id = %s FOR UPDATE"
SELECT_ALL = "SELECT document FROM {table} ORDER BY created_at, loan_id"
INSERT = "INSERT INTO {table} (loan_id, loan_type, document) VALUES (%s, %s, %s)"
UPDATE = "UPDATE {table} SET document = %s, updated_at = now() WHERE loan_id = %s"
DELETE = "DELETE FROM {table} WHERE loan_id = %s"


class PostgresLoanStore(LoanStore):
    """Loan documents in a PostgreSQL table.

    Parameters
    ----------
    connection_string : str
        libpq connection string or URL.
    table : str
        Table name (default ``loans``).
    clock : Callable[[], date] | None
        Source of "today" for status recomputation.
    """

    def __init__(
        self,
        connection_string: str,
        table: str = "loans",
        clock: Callable[[], date] | None = None,
    ) -> None:
        super().__init__(clock)
        self.connection_string = connection_string
        self.table = table

    def _sql(self, statement: str) -> sql.Composed:
        return sql.SQL(statement).format(table=sql.Identifier(self.table))

    def _connect(self) -> psycopg.Connection:
        return psycopg.connect(self.connection_string)

    def create_table(self) -> None:
        """Create the loans table if it does not exist."""
        try:
            with self._connect() as conn:
                conn.execute(self._sql(CREATE_TABLE))
        except psycopg.Error as e:
            raise StorageError(f"Cannot create table {self.table}: {e}") from e
        logger.info("Ensured table %s exists", self.table)

    def _fetch(self, loan_id: str) -> Loan:
        try:
            with self._connect() as conn:
                row = conn.execute(self._sql(SELECT_ONE), (loan_id,)).fetchone()
        except psycopg.Error as e:
            raise StorageError(f"Cannot read loan {loan_id}: {e}") from e
        if row is None:
            raise LoanNotFoundError(f"Loan {loan_id} not found")
        return loan_from_dict(row[0])

    def _fetch_all(self) -> list[Loan]:
        try:
            with self._connect() as conn:
                rows = conn.execute(self._sql(SELECT_ALL)).fetchall()
        except psycopg.Error as e:
            raise StorageError(f"Cannot list loans: {e}") from e
        return [loan_from_dict(row[0]) for row in rows]

    def _insert(self, loan: Loan) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    self._sql(INSERT),
                    (loan.loan_id, loan.loan_type.value, Jsonb(loan_to_dict(loan))),
                )
        except psycopg.Error as e:
            raise StorageError(f"Cannot insert loan {loan.loan_id}: {e}") from e

    def _remove(self, loan_id: str) -> None:
        try:
            with self._connect() as conn:
                deleted = conn.execute(self._sql(DELETE), (loan_id,)).rowcount
        except psycopg.Error as e:
            raise StorageError(f"Cannot delete loan {loan_id}: {e}") from e
        if deleted == 0:
            raise LoanNotFoundError(f"Loan {loan_id} not found")

    @contextmanager
    def _mutate(self, loan_id: str) -> Iterator[Loan]:
        try:
            with self._connect() as conn, conn.transaction():
                row = conn.execute(self._sql(SELECT_FOR_UPDATE), (loan_id,)).fetchone()
                if row is None:
                    raise LoanNotFoundError(f"Loan {loan_id} not found")
                loan = loan_from_dict(row[0])
                yield loan
                conn.execute(self._sql(UPDATE), (Jsonb(loan_to_dict(loan)), loan_id))
        except psycopg.Error as e:
            raise StorageError(f"Cannot update loan {loan_id}: {e}") from e

