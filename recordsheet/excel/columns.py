from __future__ import annotations

import re
from collections.abc import Sequence

"""Header <-> field name helpers shared by the reader and the writer.

Export headers are field names split at camel-case boundaries
("OrderDate" -> "Order Date"); import removes the spaces again, so a header
written by the exporter always maps back onto its field.
"""

__all__ = [
    "humanize_field_name",
    "normalize_header",
    "count_columns",
    "build_column_mapping",
]

_CAMEL_BOUNDARY = re.compile(r"(\B[A-Z])")


def humanize_field_name(name: str) -> str:
    """Insert a space before every capital letter that does not start a word."""
    return _CAMEL_BOUNDARY.sub(r" \1", name)


def normalize_header(text: str) -> str:
    return text.replace(" ", "").strip()


def count_columns(header: Sequence[str]) -> int:
    """Count header cells from column 1 up to the first empty cell.

    Anything right of the first empty header cell is ignored.
    """
    count = 0
    for cell in header:
        if cell == "":
            break
        count += 1
    return count


def build_column_mapping(header: Sequence[str]) -> dict[int, str]:
    """Map 1-based column positions to normalized header names."""
    count = count_columns(header)
    return {col: normalize_header(header[col - 1]) for col in range(1, count + 1)}
