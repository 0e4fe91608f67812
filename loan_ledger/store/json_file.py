"""JSON file store: one document per loan on disk."""

import json
import logging
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path

from loan_ledger.exceptions import StorageError
from loan_ledger.models import Loan
from loan_ledger.store.memory import InMemoryLoanStore
from loan_ledger.store.serialization import loan_from_dict, loan_to_dict

logger = logging.getLogger(__name__)


class JsonFileLoanStore(InMemoryLoanStore):
    """Keep every loan as ``<data_dir>/<loan_id>.json``.

    Documents are loaded once at startup and rewritten on every mutation
    through a temporary file, so a crash mid-write leaves the previous
    version in place.
    """

    def __init__(
        self,
        data_dir: str | Path,
        pretty: bool = False,
        clock: Callable[[], date] | None = None,
    ) -> None:
        """Initialize JSON file store.

        Parameters
        ----------
        data_dir : str | Path
            Directory holding the loan documents; created if missing.
        pretty : bool
            Pretty-print JSON output.
        clock : Callable[[], date] | None
            Source of "today" for status recomputation.
        """
        super().__init__(clock)
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty
        self._load_existing()

    def _path(self, loan_id: str) -> Path:
        return self.data_dir / f"{loan_id}.json"

    def _load_existing(self) -> None:
        loans: list[Loan] = []
        for path in self.data_dir.glob("*.json"):
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise StorageError(f"Cannot read loan document {path}: {e}") from e
            loans.append(loan_from_dict(data))

        loans.sort(key=lambda loan: (loan.created_at or datetime.min, loan.loan_id))
        for loan in loans:
            self._docs.loans[loan.loan_id] = loan
        logger.info("Loaded %d loan documents from %s", len(loans), self.data_dir)

    def _persist(self, loan: Loan) -> None:
        path = self._path(loan.loan_id)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(loan_to_dict(loan), f, indent=2, ensure_ascii=False)
                else:
                    json.dump(loan_to_dict(loan), f, ensure_ascii=False)
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Cannot write loan document {path}: {e}") from e
        logger.debug("Wrote %s", path)

    def _discard(self, loan_id: str) -> None:
        path = self._path(loan_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot delete loan document {path}: {e}") from e
