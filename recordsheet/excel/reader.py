from __future__ import annotations

import io
from dataclasses import dataclass

import pandas as pd

"""Workbook reader for the importer.

Row 1 is the header row, rows 2.. are data rows. Every cell is read as its
display text (empty cells become ""), so type conversion happens against the
record type and not against whatever pandas would infer.
"""

__all__ = [
    "SheetCountError",
    "SheetHeaderError",
    "SheetRow",
    "SheetData",
    "read_single_sheet",
]


class SheetCountError(Exception):
    """Raised when a workbook does not contain exactly one worksheet."""

    def __init__(self, sheet_names: list[str]) -> None:
        self.sheet_names = sheet_names
        super().__init__(f"expected exactly one worksheet, found {len(sheet_names)}: {sheet_names}")


class SheetHeaderError(Exception):
    """Raised when the worksheet has no header row."""


@dataclass(frozen=True)
class SheetRow:
    row_number: int  # 1-based sheet row (first data row = 2)
    cells: list[str]

    def cell(self, column: int) -> str:
        """Display text of a 1-based column, "" beyond the row's width."""
        if column > len(self.cells):
            return ""
        return self.cells[column - 1]


@dataclass
class SheetData:
    sheet_name: str
    header: list[str]
    rows: list[SheetRow]


def _cell_text(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value)


def read_single_sheet(content: bytes) -> SheetData:
    """Parse ``content`` as an .xlsx workbook holding exactly one worksheet.

    Raises:
        SheetCountError: zero or several worksheets
        SheetHeaderError: the worksheet is empty
    """
    with pd.ExcelFile(io.BytesIO(content)) as xls:
        sheet_names = [str(n) for n in xls.sheet_names]
        if len(sheet_names) != 1:
            raise SheetCountError(sheet_names)
        # keep_default_na=False: "NA"/"null" etc. stay text, empty cells stay ""
        df = xls.parse(sheet_names[0], header=None, dtype=str, keep_default_na=False)

    if df.shape[0] < 1:
        raise SheetHeaderError(f"sheet '{sheet_names[0]}' has no header row")

    header = [_cell_text(v) for v in df.iloc[0].tolist()]
    rows: list[SheetRow] = []
    for offset, raw in enumerate(df.iloc[1:].itertuples(index=False, name=None)):
        cells = [_cell_text(v) for v in raw]
        # fully empty rows inside the used range carry no record
        if all(c == "" for c in cells):
            continue
        rows.append(SheetRow(row_number=offset + 2, cells=cells))
    return SheetData(sheet_name=sheet_names[0], header=header, rows=rows)
