"""Spreadsheet file access: workbook reader, writer and header helpers."""
