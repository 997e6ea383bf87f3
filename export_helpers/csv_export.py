"""
CSV export utilities.

Encodes flattened BCF rows as a delimited text document: one header line,
then one line per row, each prefixed by the row type and its hierarchical
number. Dates render as ISO calendar dates and list fields join with "; ".
Records are written through ``csv.writer`` with minimal quoting.
"""

import csv
import logging
from collections.abc import Iterable, Iterator, Sequence
from io import StringIO
from typing import Any

from exports.constants import DELIMITED_PREFIX_HEADERS
from exports.fields import resolve_selection
from exports.models import FieldDescriptor, FieldKind, FlatRow
from exports.services.row_flattener import ensure_exportable, iter_rows

from .base import format_iso_date, join_values

logger = logging.getLogger(__name__)

LIST_SEPARATOR = "; "
LINE_SEPARATOR = "\n"
# Both CR and LF in the terminator so fields holding either get quoted.
RECORD_TERMINATOR = "\r\n"


def format_delimited_value(descriptor: FieldDescriptor, value: Any) -> str:
    """Render one cell value for delimited output."""
    if value is None or value == "":
        return ""
    if descriptor.kind == FieldKind.DATE:
        return format_iso_date(value)
    if descriptor.kind == FieldKind.LIST:
        return join_values(value, LIST_SEPARATOR)
    return str(value)


def build_delimited_header(selection: Sequence[FieldDescriptor]) -> list[str]:
    return [*DELIMITED_PREFIX_HEADERS, *(descriptor.label for descriptor in selection)]


def build_delimited_record(
    row: FlatRow,
    selection: Sequence[FieldDescriptor],
) -> list[str]:
    """Row type label, number, then one value per selected field."""
    return [
        row.row_type.label,
        row.number,
        *(format_delimited_value(d, row.value(d.id)) for d in selection),
    ]


class DelimitedLineWriter:
    """Encode one record at a time over a reused buffer, without terminator."""

    def __init__(self) -> None:
        self._buf = StringIO()
        self._writer = csv.writer(self._buf, lineterminator=RECORD_TERMINATOR)

    def encode(self, fields: Iterable[Any]) -> str:
        self._writer.writerow(["" if field is None else field for field in fields])
        line = self._buf.getvalue()
        self._buf.seek(0)
        self._buf.truncate(0)
        return line.removesuffix(RECORD_TERMINATOR)


def iter_delimited_lines(
    rows: Iterable[FlatRow],
    selection: Sequence[FieldDescriptor],
) -> Iterator[str]:
    """Yield the encoded header line followed by one encoded line per row."""
    writer = DelimitedLineWriter()
    yield writer.encode(build_delimited_header(selection))
    for row in rows:
        yield writer.encode(build_delimited_record(row, selection))


def serialize_delimited(
    rows: Iterable[FlatRow],
    selection: Sequence[FieldDescriptor],
) -> str:
    """
    Convert flattened rows to a delimited text document.

    Args:
        rows: Flat rows in output order
        selection: Resolved field descriptors; header and values share it

    Returns:
        str: Newline-joined lines, header first, no trailing newline
    """
    return LINE_SEPARATOR.join(iter_delimited_lines(rows, selection))


def export_delimited(project_files, field_ids: Iterable[str] | None = None) -> str:
    """Flatten project files and encode them; raises before building output."""
    topic_count = ensure_exportable(project_files)
    selection = resolve_selection(field_ids)
    document = serialize_delimited(iter_rows(project_files, selection), selection)
    logger.info(
        "Created delimited export for %d topics (%d fields)",
        topic_count,
        len(selection),
    )
    return document
