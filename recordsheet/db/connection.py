from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2

from ..config.loader import DatabaseConfig

"""PostgreSQL connection factory and scoped connection helper.

Connection parameters are resolved in this order:
    1. DATABASE_URL / PGDSN environment variables (full DSN)
    2. ``database.dsn`` from the config file
    3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, each falling back
       to the matching ``database`` config key and then to a libpq default
"""

__all__ = [
    "ConnectionFactory",
    "PostgresConnectionFactory",
    "resolve_dsn",
    "open_connection",
]

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[], Any]


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


class PostgresConnectionFactory:
    """Opens a new psycopg2 connection per call (explicit transactions)."""

    def __init__(self, db_cfg: DatabaseConfig) -> None:
        self.db_cfg = db_cfg

    def __call__(self) -> Any:
        conn = psycopg2.connect(resolve_dsn(self.db_cfg))
        conn.autocommit = False
        return conn


@contextmanager
def open_connection(factory: ConnectionFactory) -> Iterator[Any]:
    """Acquire a connection from ``factory`` and always close it."""
    conn = factory()
    try:
        yield conn
    finally:
        try:
            conn.close()
        except Exception as e:  # pragma: no cover
            logger.warning(f"failed to close database connection: {e}")
