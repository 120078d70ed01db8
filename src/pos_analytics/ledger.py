"""Ledger collaborators: where raw sale records come from.

The engine only needs two queries from the ledger, both returning records
newest-first by ``created_at``:

- ``fetch_all(limit=None)``
- ``fetch_by_location(location_id, limit=None)``

Aggregations never rely on that ordering (except first-seen tie-breaking in
product rankings), but keeping the conventional order makes "last sales"
listings a simple slice.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from pos_analytics.exceptions import DataQualityError
from pos_analytics.records import SaleRecord, parse_sales

logger = logging.getLogger(__name__)


class Ledger(Protocol):
    """Capability interface of the sales ledger."""

    def fetch_all(self, limit: int | None = None) -> list[SaleRecord]: ...

    def fetch_by_location(self, location_id: int, limit: int | None = None) -> list[SaleRecord]: ...


class InMemoryLedger:
    """Ledger over an in-memory snapshot of records."""

    def __init__(self, records: Iterable[SaleRecord]) -> None:
        self._records = sorted(records, key=lambda r: r.created_at, reverse=True)

    def fetch_all(self, limit: int | None = None) -> list[SaleRecord]:
        return self._records[:limit] if limit is not None else list(self._records)

    def fetch_by_location(self, location_id: int, limit: int | None = None) -> list[SaleRecord]:
        matching = [r for r in self._records if r.location_id == location_id]
        return matching[:limit] if limit is not None else matching

    def __len__(self) -> int:
        return len(self._records)


class JsonFileLedger(InMemoryLedger):
    """Ledger loaded from a JSON file holding an array of sale rows.

    Rows use the ledger's export shape (see ``pos_analytics.records.parse_sale``).
    """

    def __init__(self, path: str | Path) -> None:
        """Load and parse the file.

        Args:
            path: Path to the JSON export.

        Raises:
            DataQualityError: If the file is missing or not a JSON array.
            RecordContractError: If any row violates the record contract.

        """
        if isinstance(path, str):
            path = Path(path)
        if not path.exists():
            raise DataQualityError(f"Sales data not found at {path}")

        try:
            rows = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise DataQualityError(f"Sales file {path} is not valid JSON: {e}") from e
        if not isinstance(rows, list):
            raise DataQualityError(f"Sales file {path} must hold a JSON array of sales")

        super().__init__(parse_sales(rows))
        self.path = path
        logger.info("Loaded %d sales from %s", len(self), path)
