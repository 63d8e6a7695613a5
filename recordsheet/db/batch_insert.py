from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

import psycopg2
from psycopg2.extras import execute_values

from ..models.record_schema import RecordSchema

"""Bulk insert / select of records.

``batch_insert`` is a single ``INSERT ... VALUES %s`` through
psycopg2.extras.execute_values. ``insert_all`` runs it for a list of records
inside one transaction: commit on success, rollback and re-raise otherwise.
"""

logger = logging.getLogger(__name__)


class BatchInsertError(Exception):
    pass


@dataclass(frozen=True)
class BatchMetrics:
    """Timing of one execute_values call."""
    batch_size: int
    elapsed_seconds: float
    start_time: float  # time.time()
    end_time: float


@dataclass(frozen=True)
class InsertResult:
    inserted_rows: int


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def batch_insert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    page_size: int = 1000,
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
) -> InsertResult:
    """Insert ``rows`` into ``table`` with one execute_values call.

    Parameters
    ----------
    cursor: psycopg2 cursor
    table: target table (unquoted, may be schema-qualified)
    columns: column names, quoted in the generated SQL
    rows: value sequences in ``columns`` order
    page_size: execute_values page size
    metrics_callback: receives a BatchMetrics after the call. Not invoked
        when ``rows`` is empty (nothing is executed).
    """
    rows_list = list(rows)
    if not rows_list:
        return InsertResult(inserted_rows=0)

    cols_sql = ",".join(_quote(c) for c in columns)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"

    start_time = time.time()
    try:
        execute_values(cursor, sql, rows_list, page_size=page_size)
    except psycopg2.Error as e:
        raise BatchInsertError(str(e)) from e
    finally:
        end_time = time.time()
        if metrics_callback is not None:
            metrics_callback(
                BatchMetrics(
                    batch_size=len(rows_list),
                    elapsed_seconds=end_time - start_time,
                    start_time=start_time,
                    end_time=end_time,
                )
            )
    return InsertResult(inserted_rows=len(rows_list))


def insert_all(connection: Any, schema: RecordSchema, records: Sequence[Any]) -> int:
    """Insert every record into ``schema.table_name`` in one transaction.

    Returns the number of inserted rows.
    """
    def _log_metrics(m: BatchMetrics) -> None:
        logger.debug(f"insert table={schema.table_name} rows={m.batch_size} elapsed_sec={m.elapsed_seconds:.3f}")

    cursor = connection.cursor()
    try:
        result = batch_insert(
            cursor,
            schema.table_name,
            schema.field_names,
            (schema.row_values(r) for r in records),
            metrics_callback=_log_metrics,
        )
        connection.commit()
    except Exception:
        connection.rollback()
        raise
    finally:
        cursor.close()
    return result.inserted_rows


def fetch_all(connection: Any, schema: RecordSchema) -> list[Any]:
    """Read every row of ``schema.table_name`` back into records."""
    cols_sql = ",".join(_quote(c) for c in schema.field_names)
    cursor = connection.cursor()
    try:
        cursor.execute(f"SELECT {cols_sql} FROM {schema.table_name}")
        rows = cursor.fetchall()
    finally:
        cursor.close()
    return [schema.from_row(row) for row in rows]
