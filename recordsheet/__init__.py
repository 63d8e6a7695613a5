"""Two-way bridge between .xlsx spreadsheets and dataclass records.

- ``export_to_excel``: records -> one-sheet workbook bytes
- ``import_excel_to_db``: workbook bytes -> rows bulk-inserted into the
  record type's table
"""

from .models.record_schema import describe_record
from .services.exporter import export_to_excel
from .services.importer import import_excel_to_db

__all__ = [
    "describe_record",
    "export_to_excel",
    "import_excel_to_db",
]
