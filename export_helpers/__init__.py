"""
Export helpers package.

Provides value formatting and the encoders that turn flattened BCF rows into
a delimited text document or an XLSX workbook, plus FastAPI response
factories for both.

This package is organized into the following modules:
- base: Shared value formatting (coordinates, dates, references)
- csv_export: Delimited text encoding
- xlsx_export: Spreadsheet layout, styling and encoding
- responses: FastAPI StreamingResponse factory functions

The encoders depend on the flattening engine in ``exports.services``; import
them from their modules directly.
"""

# Base utilities
from .base import (
    clean_list,
    clean_text,
    format_coordinate,
    format_display_date,
    format_document_reference,
    format_header_file,
    format_iso_date,
    join_values,
)

# HTTP responses
from .responses import (
    export_csv_response,
    export_xlsx_response,
    stream_csv_response,
)

__all__ = [
    "clean_list",
    "clean_text",
    "export_csv_response",
    "export_xlsx_response",
    "format_coordinate",
    "format_display_date",
    "format_document_reference",
    "format_header_file",
    "format_iso_date",
    "join_values",
    "stream_csv_response",
]
