from __future__ import annotations

import argparse
import importlib
import sys
import time
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from recordsheet.config.loader import AppConfig, ConfigError, load_config
from recordsheet.db.batch_insert import BatchInsertError, fetch_all
from recordsheet.db.connection import ConnectionFactory, PostgresConnectionFactory, open_connection
from recordsheet.excel.writer import HeaderStyle
from recordsheet.logging.error_log import ErrorLogBuffer
from recordsheet.logging.init import log_summary, set_debug, setup_logging
from recordsheet.models.conversion import ConversionError, UnsupportedFieldTypeError
from recordsheet.models.error_record import ErrorRecord
from recordsheet.models.record_schema import describe_record
from recordsheet.services.exporter import export_records_to_file
from recordsheet.services.importer import import_workbook
from recordsheet.services.summary import render_summary_line

"""CLI entrypoint.

    recordsheet [--config PATH] [--debug] export --record-type MOD:CLS --output FILE [--sheet-name NAME]
    recordsheet [--config PATH] [--debug] import --record-type MOD:CLS FILE

Exit codes: 0 success, 1 fatal error, 2 import rejected by validation.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_REJECTED = 2


class RecordTypeError(Exception):
    pass


def resolve_record_type(spec: str) -> type:
    """Import ``package.module:ClassName`` and check it describes a record."""
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise RecordTypeError(f"record type must look like 'module:ClassName', got {spec!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise RecordTypeError(f"cannot import {module_name}: {e}") from e
    try:
        record_type = getattr(module, attr)
    except AttributeError:
        raise RecordTypeError(f"{module_name} has no attribute {attr}") from None
    try:
        describe_record(record_type)
    except (TypeError, UnsupportedFieldTypeError) as e:
        raise RecordTypeError(str(e)) from e
    return record_type


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so that its connection settings take precedence."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="recordsheet", description="Spreadsheet <-> PostgreSQL record bridge")
    p.add_argument("--config", type=Path, default=None, help="YAML config file (default: config/recordsheet.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    exp = sub.add_parser("export", help="Write every row of a table to an .xlsx file")
    exp.add_argument("--record-type", required=True, help="Record dataclass as module:ClassName")
    exp.add_argument("--output", required=True, type=Path, help="Target .xlsx file")
    exp.add_argument("--sheet-name", default=None, help="Worksheet name (default from config)")

    imp = sub.add_parser("import", help="Insert the rows of an .xlsx file into a table")
    imp.add_argument("--record-type", required=True, help="Record dataclass as module:ClassName")
    imp.add_argument("file", type=Path, help="Source .xlsx file")
    return p.parse_args(argv)


def _run_export(args: argparse.Namespace, cfg: AppConfig, factory: ConnectionFactory) -> int:
    record_type = resolve_record_type(args.record_type)
    schema = describe_record(record_type)
    sheet_name = args.sheet_name or cfg.export.sheet_name
    style = HeaderStyle(font_size=cfg.export.header_font_size, fill_color=cfg.export.header_fill)

    started = time.monotonic()
    with open_connection(factory) as conn:
        records = fetch_all(conn, schema)
    result = export_records_to_file(args.output, record_type, sheet_name, records, style)
    log_summary(
        render_summary_line("export", schema.table_name, result.exported_rows, time.monotonic() - started, "success")[8:]
    )
    return EXIT_SUCCESS


def _run_import(args: argparse.Namespace, factory: ConnectionFactory, logger, error_log: ErrorLogBuffer) -> int:
    record_type = resolve_record_type(args.record_type)
    table = describe_record(record_type).table_name
    source = args.file.name
    if not args.file.exists():
        logger.error(f"file not found: {args.file}")
        return EXIT_FATAL

    started = time.monotonic()
    try:
        result = import_workbook(record_type, factory, args.file.read_bytes())
    except ConversionError as e:
        error_log.append(
            ErrorRecord.create(source, table, "CONVERSION_ERROR", str(e), row=e.row or -1, column=e.column or -1)
        )
        logger.error(f"import: {e}")
        return EXIT_FATAL
    except BatchInsertError as e:
        error_log.append(ErrorRecord.create(source, table, "INSERT_ERROR", str(e)))
        logger.error(f"import: {e}")
        return EXIT_FATAL

    elapsed = time.monotonic() - started
    if not result.success:
        reason = result.reason.value.upper() if result.reason else "REJECTED"
        error_log.append(ErrorRecord.create(source, table, reason, result.detail or ""))
        log_summary(render_summary_line("import", table, 0, elapsed, "rejected")[8:])
        return EXIT_REJECTED

    log_summary(render_summary_line("import", table, result.inserted_rows, elapsed, "success")[8:])
    return EXIT_SUCCESS


def main(argv: list[str] | None = None, connection_factory: ConnectionFactory | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not pick up pytest's own argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_debug()
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    factory = connection_factory or PostgresConnectionFactory(cfg.database)
    error_log = ErrorLogBuffer()
    try:
        if args.command == "export":
            return _run_export(args, cfg, factory)
        return _run_import(args, factory, logger, error_log)
    except RecordTypeError as e:
        logger.error(f"record type: {e}")
        return EXIT_FATAL
    except psycopg2.Error as e:
        logger.error(f"database: {e}")
        return EXIT_FATAL
    finally:
        path = error_log.flush()
        if path is not None:
            logger.info(f"error log written to {path}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
