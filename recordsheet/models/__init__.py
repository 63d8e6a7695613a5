"""Domain models for the spreadsheet <-> record bridge.

Record introspection (schema, field descriptors, builder), the text
conversion tables, and the result/error models shared by the services.
"""

from .conversion import ConversionError, UnsupportedFieldTypeError
from .error_record import ErrorRecord
from .record_schema import FieldDescriptor, RecordBuilder, RecordSchema, describe_record
from .results import ExportResult, ImportResult, RejectReason

__all__ = [
    # Record introspection
    "FieldDescriptor",
    "RecordBuilder",
    "RecordSchema",
    "describe_record",
    # Conversion errors
    "ConversionError",
    "UnsupportedFieldTypeError",
    # Results
    "ErrorRecord",
    "ExportResult",
    "ImportResult",
    "RejectReason",
]
