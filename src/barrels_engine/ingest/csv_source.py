import csv
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class CsvSource:
    """Rows of a launch-monitor export, keyed by trimmed header names."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def source_type(self) -> str:
        return "csv"

    @property
    def source_detail(self) -> str:
        return str(self._path)

    def fetch(self, **params: Any) -> list[dict[str, str]]:
        logger.debug("Reading CSV %s", self._path)
        # Spreadsheet exports often carry a BOM
        encoding = params.pop("encoding", "utf-8-sig")
        delimiter = params.pop("delimiter", ",")
        rows: list[dict[str, str]] = []
        with open(self._path, encoding=encoding, newline="") as f:
            reader = csv.DictReader(f, delimiter=delimiter)
            for raw in reader:
                row = {k.strip(): (v or "").strip() for k, v in raw.items() if k is not None}
                if any(row.values()):
                    rows.append(row)
        logger.debug("Read %d rows from %s", len(rows), self._path)
        return rows
