from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the CLI error log.

One record is written per rejected or failed command. ``row`` and ``column``
are 1-based sheet positions; -1 marks errors that are not tied to a cell
(sheet count, database failures).
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: workbook file name
        table: target database table
        row: 1-based row number, -1 when unknown
        column: 1-based column number, -1 when unknown
        error_type: classification in UPPER_SNAKE_CASE
        message: human readable description
    """
    timestamp: str
    source: str
    table: str
    row: int
    column: int
    error_type: str
    message: str

    @staticmethod
    def create(
        source: str,
        table: str,
        error_type: str,
        message: str,
        row: int = -1,
        column: int = -1,
    ) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            source=source,
            table=table,
            row=row,
            column=column,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
