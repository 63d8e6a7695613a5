from __future__ import annotations

import dataclasses
import re
import types
import typing
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from .conversion import parser_for

"""Record type introspection.

A record type is any dataclass whose fields are primitive (str, int, float,
Decimal, bool, date, datetime, time) or nullable primitives (``X | None``).
``describe_record`` turns it into a :class:`RecordSchema`: the ordered list
of :class:`FieldDescriptor` objects used by both the exporter and the
importer, plus the database table the records belong to.
"""

__all__ = [
    "FieldDescriptor",
    "RecordSchema",
    "RecordBuilder",
    "describe_record",
]

_SNAKE_RE = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class FieldDescriptor:
    """Name, type and accessors for one field of a record type."""
    name: str
    value_type: type  # underlying type (Optional stripped)
    nullable: bool
    default: Any  # dataclasses.MISSING when the field has none
    default_factory: Any  # dataclasses.MISSING, or a zero-argument callable
    parse: Callable[[str], Any]

    @property
    def has_default(self) -> bool:
        return self.default is not dataclasses.MISSING or self.default_factory is not dataclasses.MISSING

    def make_default(self) -> Any:
        """Declared default; a factory is called anew on every use."""
        if self.default_factory is not dataclasses.MISSING:
            return self.default_factory()
        return self.default

    def get(self, record: Any) -> Any:
        return getattr(record, self.name)


@dataclass(frozen=True)
class RecordSchema:
    record_type: type
    fields: tuple[FieldDescriptor, ...]
    table_name: str

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def field(self, name: str) -> FieldDescriptor:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(f"{self.record_type.__name__} has no field '{name}'")

    def has_field(self, name: str) -> bool:
        return any(f.name == name for f in self.fields)

    def row_values(self, record: Any) -> tuple[Any, ...]:
        """Field values of ``record`` in declaration order."""
        return tuple(f.get(record) for f in self.fields)

    def from_row(self, values: Sequence[Any]) -> Any:
        return self.record_type(**dict(zip(self.field_names, values, strict=True)))


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Return (underlying_type, nullable) for ``X | None`` / ``Optional[X]``."""
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1 and len(typing.get_args(annotation)) == 2:
            return args[0], True
    return annotation, False


def _default_table_name(record_type: type) -> str:
    explicit = getattr(record_type, "__tablename__", None)
    if explicit:
        return str(explicit)
    return _SNAKE_RE.sub("_", record_type.__name__).lower()


@lru_cache(maxsize=None)
def describe_record(record_type: type) -> RecordSchema:
    """Build (and cache) the schema of a dataclass record type.

    Raises:
        TypeError: ``record_type`` is not a dataclass.
        UnsupportedFieldTypeError: a field type has no parser.
    """
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise TypeError(f"record type must be a dataclass, got {record_type!r}")

    hints = typing.get_type_hints(record_type)
    descriptors: list[FieldDescriptor] = []
    for f in dataclasses.fields(record_type):
        if not f.init:
            continue
        value_type, nullable = _unwrap_optional(hints[f.name])
        descriptors.append(
            FieldDescriptor(
                name=f.name,
                value_type=value_type,
                nullable=nullable,
                default=f.default,
                default_factory=f.default_factory,
                parse=parser_for(f.name, value_type, nullable),
            )
        )
    return RecordSchema(
        record_type=record_type,
        fields=tuple(descriptors),
        table_name=_default_table_name(record_type),
    )


class RecordBuilder:
    """Accumulates parsed field values for one row, then builds the record.

    Fields that were never set fall back to their declared default, or to
    ``None`` so that the database decides whether a missing column is
    acceptable.
    """

    def __init__(self, schema: RecordSchema) -> None:
        self.schema = schema
        self._values: dict[str, Any] = {}

    def set(self, field_name: str, text: str) -> None:
        descriptor = self.schema.field(field_name)
        self._values[field_name] = descriptor.parse(text)

    def build(self) -> Any:
        values: dict[str, Any] = {}
        for f in self.schema.fields:
            if f.name in self._values:
                values[f.name] = self._values[f.name]
            elif f.has_default:
                values[f.name] = f.make_default()
            else:
                values[f.name] = None
        return self.schema.record_type(**values)
