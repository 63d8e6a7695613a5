from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

"""Text <-> value conversion tables for spreadsheet cells.

Import reads every cell as its display text and parses it into the target
field type; export writes every value as display text. Both directions are
plain lookup tables keyed by the (non-nullable) field type so that a new
type only needs one parser and one formatter.
"""

__all__ = [
    "ConversionError",
    "UnsupportedFieldTypeError",
    "PARSERS",
    "FORMATTERS",
    "parser_for",
    "format_value",
]


class ConversionError(ValueError):
    """Raised when a cell's text cannot be parsed into the field type."""

    def __init__(self, field: str, text: str, target: type, detail: str | None = None) -> None:
        self.field = field
        self.text = text
        self.target = target
        self.row: int | None = None
        self.column: int | None = None
        msg = f"cannot convert {text!r} to {target.__name__} for field '{field}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)

    def at(self, row: int, column: int) -> ConversionError:
        """Attach the sheet position (1-based) of the failing cell."""
        self.row = row
        self.column = column
        self.args = (f"{self.args[0]} (row={row} column={column})",)
        return self


class UnsupportedFieldTypeError(TypeError):
    """Raised when a record field has a type with no registered parser."""


def _parse_str(text: str) -> str:
    return text


def _parse_int(text: str) -> int:
    stripped = text.strip()
    try:
        return int(stripped)
    except ValueError:
        # numeric cells may come back as "12.0"
        number = Decimal(stripped)
        if number != number.to_integral_value():
            raise
        return int(number)


def _parse_float(text: str) -> float:
    return float(text.strip())


def _parse_decimal(text: str) -> Decimal:
    return Decimal(text.strip())


_TRUE = {"true", "1"}
_FALSE = {"false", "0"}


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError("expected true/false")


def _parse_datetime(text: str) -> datetime:
    return datetime.fromisoformat(text.strip())


def _parse_date(text: str) -> date:
    stripped = text.strip()
    try:
        return date.fromisoformat(stripped)
    except ValueError:
        # date cells are read back as "YYYY-MM-DD 00:00:00"
        return datetime.fromisoformat(stripped).date()


def _parse_time(text: str) -> time:
    return time.fromisoformat(text.strip())


PARSERS: dict[type, Callable[[str], Any]] = {
    str: _parse_str,
    int: _parse_int,
    float: _parse_float,
    Decimal: _parse_decimal,
    bool: _parse_bool,
    datetime: _parse_datetime,
    date: _parse_date,
    time: _parse_time,
}

FORMATTERS: dict[type, Callable[[Any], str]] = {
    datetime: lambda v: v.isoformat(sep=" "),
    date: lambda v: v.isoformat(),
    time: lambda v: v.isoformat(),
}


def parser_for(field: str, value_type: type, nullable: bool) -> Callable[[str], Any]:
    """Build the text parser for one field.

    Nullable fields map the empty string to ``None``; everything else goes
    through the parser registered for ``value_type``. Parse failures are
    re-raised as :class:`ConversionError`.
    """
    try:
        base = PARSERS[value_type]
    except KeyError:
        raise UnsupportedFieldTypeError(
            f"field '{field}' has unsupported type {value_type!r}"
        ) from None

    def parse(text: str) -> Any:
        if nullable and text == "":
            return None
        try:
            return base(text)
        except (ValueError, ArithmeticError) as e:
            raise ConversionError(field, text, value_type, str(e) or None) from e

    return parse


def format_value(value: Any) -> str | None:
    """Return the display text of a value, or None for an empty cell."""
    if value is None:
        return None
    # datetime is a date subclass, so look up the exact type first
    formatter = FORMATTERS.get(type(value))
    if formatter is None:
        for kind, fmt in FORMATTERS.items():
            if isinstance(value, kind):
                formatter = fmt
                break
    if formatter is not None:
        return formatter(value)
    return str(value)
