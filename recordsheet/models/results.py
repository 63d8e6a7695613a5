from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""Result models returned by the import and export services."""

__all__ = [
    "RejectReason",
    "ImportResult",
    "ExportResult",
]


class RejectReason(Enum):
    """Validation failures that make an import return False.

    - SHEET_COUNT: the workbook has zero or several worksheets
    - MISSING_HEADER: the worksheet has no header row
    - UNKNOWN_COLUMN: a header cell does not name a field of the record type
    """
    SHEET_COUNT = "sheet_count"
    MISSING_HEADER = "missing_header"
    UNKNOWN_COLUMN = "unknown_column"


@dataclass(frozen=True)
class ImportResult:
    success: bool
    table: str
    inserted_rows: int = 0
    records: list[Any] = field(default_factory=list)
    reason: RejectReason | None = None
    detail: str | None = None  # e.g. offending header text

    @staticmethod
    def rejected(table: str, reason: RejectReason, detail: str | None = None) -> ImportResult:
        return ImportResult(success=False, table=table, reason=reason, detail=detail)


@dataclass(frozen=True)
class ExportResult:
    sheet_name: str
    exported_rows: int
    content: bytes
