from __future__ import annotations

import pytest
from conftest import make_xlsx

from recordsheet.excel.reader import SheetCountError, SheetHeaderError, read_single_sheet


def test_read_single_sheet_cells_as_text():
    content = make_xlsx(
        {
            "Data": [
                ["Order Id", "Note", "Paid", "Value"],
                [1, "NA", True, 2.5],
                [2, None, False, 3],
            ]
        }
    )
    sheet = read_single_sheet(content)
    assert sheet.sheet_name == "Data"
    assert sheet.header == ["Order Id", "Note", "Paid", "Value"]
    assert [r.cells for r in sheet.rows] == [
        ["1", "NA", "True", "2.5"],
        ["2", "", "False", "3"],
    ]
    assert sheet.rows[0].row_number == 2


def test_cell_beyond_row_width_is_empty():
    sheet = read_single_sheet(make_xlsx({"Data": [["a", "b"], ["x", "y"]]}))
    assert sheet.rows[0].cell(2) == "y"
    assert sheet.rows[0].cell(5) == ""


def test_blank_rows_are_skipped():
    content = make_xlsx({"Data": [["a"], ["x"], [None], ["z"]]})
    sheet = read_single_sheet(content)
    assert [r.cells for r in sheet.rows] == [["x"], ["z"]]


def test_multiple_sheets_rejected():
    content = make_xlsx({"One": [["a"]], "Two": [["a"]]})
    with pytest.raises(SheetCountError) as e:
        read_single_sheet(content)
    assert e.value.sheet_names == ["One", "Two"]


def test_empty_sheet_has_no_header():
    with pytest.raises(SheetHeaderError):
        read_single_sheet(make_xlsx({"Empty": []}))
