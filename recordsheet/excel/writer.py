from __future__ import annotations

import io
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import openpyxl
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

"""Single-sheet workbook writer for the exporter.

Values arrive already converted to display text (``None`` = empty cell);
this module only lays them out, styles the header row and sizes the columns.
"""

__all__ = [
    "HeaderStyle",
    "write_sheet",
]

# padding added to the longest text of a column
_WIDTH_PADDING = 2
# bold header text is wider than body text of the same length
_HEADER_WIDTH_FACTOR = 1.2


@dataclass(frozen=True)
class HeaderStyle:
    """Header row appearance: bold, centered, solid light-gray fill."""
    font_size: int = 12
    fill_color: str = "D3D3D3"  # LightGray


def _write_header(ws, headers: Sequence[str], style: HeaderStyle) -> None:
    font = Font(bold=True, size=style.font_size)
    fill = PatternFill(fill_type="solid", start_color=style.fill_color, end_color=style.fill_color)
    alignment = Alignment(horizontal="center")
    for col, text in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col, value=text)
        cell.font = font
        cell.fill = fill
        cell.alignment = alignment


def _autosize_columns(ws, widths: list[float]) -> None:
    for col, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col)].width = width + _WIDTH_PADDING


def write_sheet(
    sheet_name: str,
    headers: Sequence[str],
    rows: Iterable[Sequence[str | None]],
    style: HeaderStyle | None = None,
) -> tuple[bytes, int]:
    """Write one worksheet and return ``(xlsx_bytes, data_row_count)``.

    Row 1 holds ``headers``; each item of ``rows`` is written from row 2 on,
    with ``None`` cells left empty.
    """
    style = style or HeaderStyle()
    wb = openpyxl.Workbook()
    try:
        ws = wb.active
        ws.title = sheet_name
        _write_header(ws, headers, style)

        widths = [len(h) * _HEADER_WIDTH_FACTOR for h in headers]
        row_count = 0
        for row_idx, values in enumerate(rows, start=2):
            for col, text in enumerate(values, start=1):
                if text is None:
                    continue
                # control characters are not allowed in worksheet XML
                text = ILLEGAL_CHARACTERS_RE.sub("", text)
                cell = ws.cell(row=row_idx, column=col, value=text)
                # text starting with "=" must not turn into a formula
                cell.data_type = "s"
                widths[col - 1] = max(widths[col - 1], len(text))
            row_count += 1
        _autosize_columns(ws, widths)

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue(), row_count
    finally:
        wb.close()
