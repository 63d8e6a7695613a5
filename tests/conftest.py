# Shared pytest fixtures
from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Any

import openpyxl
import pytest

sys.path.insert(0, str(Path(__file__).parent))


class FakeCursor:
    def __init__(self, conn: FakeConnection) -> None:
        self.conn = conn
        self.closed = False

    def execute(self, sql: str, params: Any = None) -> None:
        self.conn.executed.append(sql)

    def fetchall(self) -> list[tuple]:
        return list(self.conn.select_rows)

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    def __init__(self, select_rows: list[tuple] | None = None) -> None:
        self.select_rows = select_rows or []
        self.executed: list[str] = []
        self.inserted: list[tuple] = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1

    def close(self) -> None:
        self.closed = True


class FakeConnectionFactory:
    """Zero-argument connection factory that remembers every connection."""

    def __init__(self, select_rows: list[tuple] | None = None) -> None:
        self.select_rows = select_rows
        self.connections: list[FakeConnection] = []

    def __call__(self) -> FakeConnection:
        conn = FakeConnection(self.select_rows)
        self.connections.append(conn)
        return conn

    @property
    def calls(self) -> int:
        return len(self.connections)

    @property
    def inserted(self) -> list[tuple]:
        return [row for c in self.connections for row in c.inserted]


@pytest.fixture()
def fake_db(monkeypatch) -> FakeConnectionFactory:
    """Connection factory backed by fakes; execute_values is patched out."""
    import recordsheet.db.batch_insert as bi

    def fake_execute_values(cursor, sql, rows, page_size=1000):
        cursor.conn.executed.append(sql)
        cursor.conn.inserted.extend(tuple(r) for r in rows)

    monkeypatch.setattr(bi, "execute_values", fake_execute_values)
    return FakeConnectionFactory()


def make_xlsx(sheets: dict[str, list[list[object]]]) -> bytes:
    """Build an .xlsx in memory, one worksheet per entry, rows appended as given."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for r in rows:
            ws.append(r)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture()
def temp_workdir(monkeypatch, tmp_path: Path) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)
    # keep connection settings of the developer's shell out of the tests
    for var in ("DATABASE_URL", "PGDSN", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture()
def sample_config_yaml() -> str:
    return """database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
export:
  sheet_name: Orders
  header_font_size: 14
  header_fill: ffff00
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "recordsheet.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
