from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from ..excel.columns import humanize_field_name
from ..excel.writer import HeaderStyle, write_sheet
from ..models.conversion import format_value
from ..models.record_schema import RecordSchema, describe_record
from ..models.results import ExportResult

"""Export a sequence of records to a one-sheet workbook.

Columns follow the record type's field order; the header row holds the
humanized field names and each following row one record's display text.
"""

logger = logging.getLogger(__name__)


def _display_rows(schema: RecordSchema, records: Iterable[Any]) -> Iterator[list[str | None]]:
    for record in records:
        yield [format_value(f.get(record)) for f in schema.fields]


def export_workbook(
    record_type: type,
    sheet_name: str,
    records: Iterable[Any],
    style: HeaderStyle | None = None,
) -> ExportResult:
    schema = describe_record(record_type)
    headers = [humanize_field_name(name) for name in schema.field_names]
    content, row_count = write_sheet(sheet_name, headers, _display_rows(schema, records), style)
    logger.debug(f"exported sheet={sheet_name} columns={len(headers)} rows={row_count}")
    return ExportResult(sheet_name=sheet_name, exported_rows=row_count, content=content)


def export_to_excel(
    record_type: type,
    sheet_name: str,
    records: Iterable[Any],
    style: HeaderStyle | None = None,
) -> bytes:
    """Return .xlsx bytes with one sheet holding ``records``.

    An empty ``records`` gives a header-only sheet.
    """
    return export_workbook(record_type, sheet_name, records, style).content


def export_records_to_file(
    path: Path,
    record_type: type,
    sheet_name: str,
    records: Iterable[Any],
    style: HeaderStyle | None = None,
) -> ExportResult:
    result = export_workbook(record_type, sheet_name, records, style)
    path.write_bytes(result.content)
    logger.info(f"wrote {result.exported_rows} rows to {path}")
    return result
