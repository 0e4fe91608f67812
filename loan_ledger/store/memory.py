"""In-memory loan document store."""

import copy
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date

from loan_ledger.exceptions import LoanNotFoundError
from loan_ledger.models import Loan
from loan_ledger.store.base import LoanStore


@dataclass
class _Documents:
    """Loan documents plus one lock per document."""

    loans: dict[str, Loan] = field(default_factory=dict)
    locks: dict[str, threading.Lock] = field(default_factory=dict)
    registry_lock: threading.Lock = field(default_factory=threading.Lock)

    def lock_for(self, loan_id: str) -> threading.Lock:
        with self.registry_lock:
            return self.locks.setdefault(loan_id, threading.Lock())


class InMemoryLoanStore(LoanStore):
    """Keep loan documents in a dict.

    Readers always get deep copies, and writers work on a copy that only
    replaces the stored document once the whole mutation succeeded, so a
    failed update never leaves a half-applied change behind. Mutations of
    one loan are serialized by that loan's lock.
    """

    def __init__(self, clock: Callable[[], date] | None = None) -> None:
        super().__init__(clock)
        self._docs = _Documents()

    def _fetch(self, loan_id: str) -> Loan:
        try:
            return copy.deepcopy(self._docs.loans[loan_id])
        except KeyError:
            raise LoanNotFoundError(f"Loan {loan_id} not found") from None

    def _fetch_all(self) -> list[Loan]:
        return [copy.deepcopy(loan) for loan in self._docs.loans.values()]

    def _insert(self, loan: Loan) -> None:
        with self._docs.lock_for(loan.loan_id):
            self._persist(loan)
            self._docs.loans[loan.loan_id] = copy.deepcopy(loan)

    def _remove(self, loan_id: str) -> None:
        with self._docs.lock_for(loan_id):
            if loan_id not in self._docs.loans:
                raise LoanNotFoundError(f"Loan {loan_id} not found")
            self._discard(loan_id)
            del self._docs.loans[loan_id]
        with self._docs.registry_lock:
            self._docs.locks.pop(loan_id, None)

    @contextmanager
    def _mutate(self, loan_id: str) -> Iterator[Loan]:
        with self._docs.lock_for(loan_id):
            working = self._fetch(loan_id)
            yield working
            self._persist(working)
            self._docs.loans[loan_id] = copy.deepcopy(working)

    def _persist(self, loan: Loan) -> None:
        """Write-through hook for subclasses backed by durable storage."""

    def _discard(self, loan_id: str) -> None:
        """Delete hook for subclasses backed by durable storage."""
