from __future__ import annotations

import logging
from typing import Any

from ..db.batch_insert import insert_all
from ..db.connection import ConnectionFactory, open_connection
from ..excel.columns import build_column_mapping
from ..excel.reader import SheetCountError, SheetData, SheetHeaderError, read_single_sheet
from ..models.conversion import ConversionError
from ..models.record_schema import RecordBuilder, RecordSchema, describe_record
from ..models.results import ImportResult, RejectReason
from .progress import RowProgress

"""Import a one-sheet workbook into the record type's database table.

Steps:
1. Parse the workbook; reject unless it has exactly one worksheet
2. Map header cells (row 1, up to the first empty cell) to field names;
   reject if any header is not a field of the record type
3. Convert every data row into a record (conversion errors are fatal)
4. Bulk insert all records in one transaction

Rejections are returned as ``ImportResult(success=False)`` before any
database connection is opened. Everything else propagates.
"""

logger = logging.getLogger(__name__)


def _build_records(schema: RecordSchema, sheet: SheetData, mapping: dict[int, str]) -> list[Any]:
    records: list[Any] = []
    with RowProgress(len(sheet.rows)) as progress:
        for row in sheet.rows:
            builder = RecordBuilder(schema)
            # a column listed twice in the header: the rightmost one wins
            for column, field_name in mapping.items():
                try:
                    builder.set(field_name, row.cell(column))
                except ConversionError as e:
                    raise e.at(row.row_number, column)
            records.append(builder.build())
            progress.advance()
    return records


def import_workbook(record_type: type, connection_factory: ConnectionFactory, content: bytes) -> ImportResult:
    """Parse ``content`` and insert its rows as ``record_type`` records.

    Raises:
        ConversionError: a cell could not be parsed into its field type
        BatchInsertError: the database rejected the insert
    """
    schema = describe_record(record_type)
    table = schema.table_name

    try:
        sheet = read_single_sheet(content)
    except SheetCountError as e:
        logger.warning(f"import rejected table={table}: {e}")
        return ImportResult.rejected(table, RejectReason.SHEET_COUNT, str(len(e.sheet_names)))
    except SheetHeaderError as e:
        logger.warning(f"import rejected table={table}: {e}")
        return ImportResult.rejected(table, RejectReason.MISSING_HEADER)

    mapping = build_column_mapping(sheet.header)
    for column, name in mapping.items():
        if not schema.has_field(name):
            logger.warning(f"import rejected table={table}: column {column} '{name}' is not a field of {record_type.__name__}")
            return ImportResult.rejected(table, RejectReason.UNKNOWN_COLUMN, name)

    missing = [n for n in schema.field_names if n not in mapping.values()]
    if missing:
        logger.debug(f"fields without a column (default/NULL): {missing}")

    records = _build_records(schema, sheet, mapping)
    logger.debug(f"sheet={sheet.sheet_name} columns={len(mapping)} records={len(records)}")

    with open_connection(connection_factory) as conn:
        inserted = insert_all(conn, schema, records)

    logger.info(f"imported {inserted} rows into {table}")
    return ImportResult(success=True, table=table, inserted_rows=inserted, records=records)


def import_excel_to_db(record_type: type, connection_factory: ConnectionFactory, content: bytes) -> bool:
    """Import ``content`` into the database; False if the file was rejected."""
    return import_workbook(record_type, connection_factory, content).success
