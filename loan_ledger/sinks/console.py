"""Console sink for inspecting loans and engine output."""

import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from loan_ledger.engine import round_money


class ConsoleSink:
    """Print loans, schedules, histories and monthly buckets to stdout.

    Money is rounded to cents on the way out; the engine values themselves
    stay unrounded.
    """

    def __init__(self, pretty: bool = True, max_records: int | None = None) -> None:
        """Initialize console sink.

        Parameters
        ----------
        pretty : bool
            Pretty-print JSON output.
        max_records : int | None
            Maximum records to print per batch (None for all).
        """
        self.pretty = pretty
        self.max_records = max_records
        self._counts: dict[str, int] = {}

    def write_batch(self, title: str, records: list[Any]) -> None:
        """Print a titled batch of records."""
        print(f"\n{'='*60}")
        print(f"{title} ({len(records)} records)")
        print("=" * 60)

        display_records = records[: self.max_records] if self.max_records else records

        for record in display_records:
            data = self._to_dict(record)
            if self.pretty:
                print(json.dumps(data, indent=2, ensure_ascii=False, default=str))
            else:
                print(json.dumps(data, ensure_ascii=False, default=str))

        if self.max_records and len(records) > self.max_records:
            print(f"... and {len(records) - self.max_records} more records")

        self._counts[title] = self._counts.get(title, 0) + len(records)

    def write_table(self, title: str, rows: list[Any], columns: list[str]) -> None:
        """Print rows as a fixed-width table of the given attributes."""
        print(f"\n{title}")
        widths = [max(len(column), 14) for column in columns]
        print("  ".join(column.rjust(width) for column, width in zip(columns, widths)))

        display_rows = rows[: self.max_records] if self.max_records else rows
        for row in display_rows:
            cells = [self._cell(getattr(row, column)) for column in columns]
            print("  ".join(cell.rjust(width) for cell, width in zip(cells, widths)))

        if self.max_records and len(rows) > self.max_records:
            print(f"... and {len(rows) - self.max_records} more rows")

        self._counts[title] = self._counts.get(title, 0) + len(rows)

    def close(self) -> None:
        """Print summary and close."""
        print(f"\n{'='*60}")
        print("Console Sink Summary")
        print("=" * 60)
        for title, count in self._counts.items():
            print(f"  {title}: {count} records")

    def _cell(self, value: Any) -> str:
        value = self._serialize_value(value)
        if isinstance(value, bool):
            return "*" if value else ""
        return str(value)

    def _to_dict(self, obj: Any) -> dict:
        """Convert object to dictionary."""
        if is_dataclass(obj):
            return self._serialize_value(asdict(obj))
        elif isinstance(obj, dict):
            return self._serialize_value(obj)
        else:
            return {"value": str(obj)}

    def _serialize_value(self, value: Any) -> Any:
        """Serialize a value for display, money rounded to cents."""
        if isinstance(value, bool):
            return value
        elif isinstance(value, (float, Decimal)):
            return float(round_money(value))
        elif isinstance(value, Enum):
            return value.value
        elif isinstance(value, (datetime, date)):
            return value.isoformat()
        elif isinstance(value, dict):
            return {k: self._serialize_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [self._serialize_value(v) for v in value]
        return value
