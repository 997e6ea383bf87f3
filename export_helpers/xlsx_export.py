"""
Spreadsheet (XLSX) export utilities.

Builds a single-sheet workbook named "BCF Report" from the same topic blocks
the delimited export uses, interleaved with a title, a metadata block and
per-topic viewpoint/comment sections. Dates use the configured display
format and list fields join with line breaks for in-cell readability.
"""

import logging
import warnings
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from bcf.discovery import summarize_project_files
from bcf.models import ExportSummary
from config import WORKSHEET_NAME, get_report_title, get_spreadsheet_date_format
from core.exceptions import FieldFormatWarning
from date_utils import get_current_utc_time
from exports.constants import (
    COLUMN_WIDTHS,
    COMMENT_SECTION_HEADERS,
    NUMBER_COLUMN_WIDTH,
    SPREADSHEET_BORDER_COLOR,
    SPREADSHEET_HEADER_FILL,
    SPREADSHEET_NUMBER_HEADER,
    SPREADSHEET_TITLE_FONT_SIZE,
    VIEWPOINT_SECTION_HEADERS,
)
from exports.fields import resolve_selection
from exports.models import FieldDescriptor, FieldKind, FlatRow, TopicBlock
from exports.services.row_flattener import ensure_exportable, iter_topic_blocks

from .base import format_display_date, join_values

logger = logging.getLogger(__name__)

LIST_SEPARATOR = "\n"
COMMENT_SECTION_TRIGGER = "commentNumber"

Cell = str | int | None


def sanitize_cell_text(value: Cell) -> Cell:
    """Drop control characters that cannot be stored in worksheet XML."""
    if not isinstance(value, str):
        return value
    cleaned = ILLEGAL_CHARACTERS_RE.sub("", value)
    if cleaned != value:
        warnings.warn(
            f"Removed control characters from cell value {value!r}",
            FieldFormatWarning,
            stacklevel=2,
        )
    return cleaned


@dataclass
class WorksheetLayout:
    """Cell values row by row plus the 1-based indices of styled rows."""

    rows: list[list[Cell]] = field(default_factory=list)
    title_row: int = 0
    metadata_rows: list[int] = field(default_factory=list)
    header_row: int = 0
    section_header_rows: list[int] = field(default_factory=list)
    data_rows: list[int] = field(default_factory=list)

    def append(self, values: Iterable[Any] = ()) -> int:
        cells = (sanitize_cell_text(value) for value in values)
        self.rows.append([None if cell == "" else cell for cell in cells])
        return len(self.rows)


def format_spreadsheet_value(
    descriptor: FieldDescriptor,
    value: Any,
    date_format: str,
) -> Cell:
    """Render one cell value for spreadsheet output; empty values become None."""
    if value is None or value == "" or value == ():
        return None
    if descriptor.kind == FieldKind.DATE:
        return format_display_date(value, date_format)
    if descriptor.kind == FieldKind.LIST:
        return join_values(value, LIST_SEPARATOR) or None
    if isinstance(value, int):
        return value
    return str(value)


def _data_row(
    row: FlatRow,
    selection: Sequence[FieldDescriptor],
    date_format: str,
) -> list[Cell]:
    return [
        row.number,
        *(format_spreadsheet_value(d, row.value(d.id), date_format) for d in selection),
    ]


def _section_header(labels: Sequence[str], width: int) -> list[Cell]:
    padding = max(0, width - len(labels))
    return [*labels, *([None] * padding)]


def build_worksheet_layout(
    blocks: Iterable[TopicBlock],
    summary: ExportSummary,
    selection: Sequence[FieldDescriptor],
    *,
    today: date | None = None,
    title: str | None = None,
    date_format: str | None = None,
) -> WorksheetLayout:
    """
    Lay out the report: title, metadata block, header, then one block per topic.

    Each topic block is its data row, an optional viewpoint section (when the
    block has viewpoint rows), an optional comment section (when the comment
    number field is selected and the topic has comments) and a blank spacer.
    """
    date_format = date_format or get_spreadsheet_date_format()
    today = today or get_current_utc_time().date()
    title = title or get_report_title()
    width = len(selection) + 1
    show_comments = any(d.id == COMMENT_SECTION_TRIGGER for d in selection)

    layout = WorksheetLayout()
    layout.title_row = layout.append([f"{title} {today.strftime(date_format)}"])
    layout.append()

    for label, value in (
        ("Files processed:", summary.files_processed),
        ("Project(s):", summary.project_label),
        ("BCF Version(s):", summary.versions_label),
        ("Total Topics:", summary.topic_count),
        ("Total Comments:", summary.comment_count),
    ):
        layout.metadata_rows.append(layout.append([label, value]))
    layout.append()

    layout.header_row = layout.append(
        [SPREADSHEET_NUMBER_HEADER, *(d.label for d in selection)],
    )

    for block in blocks:
        layout.data_rows.append(
            layout.append(_data_row(block.topic_row, selection, date_format)),
        )

        if block.viewpoint_rows:
            layout.section_header_rows.append(
                layout.append(_section_header(VIEWPOINT_SECTION_HEADERS, width)),
            )
            for row in block.viewpoint_rows:
                layout.data_rows.append(
                    layout.append(_data_row(row, selection, date_format)),
                )

        if show_comments and block.comment_rows:
            layout.section_header_rows.append(
                layout.append(_section_header(COMMENT_SECTION_HEADERS, width)),
            )
            for row in block.comment_rows:
                layout.data_rows.append(
                    layout.append(_data_row(row, selection, date_format)),
                )

        layout.append()

    return layout


def _apply_styles(ws, layout: WorksheetLayout, selection: Sequence[FieldDescriptor]) -> None:
    width = len(selection) + 1

    ws.cell(row=layout.title_row, column=1).font = Font(
        bold=True,
        size=SPREADSHEET_TITLE_FONT_SIZE,
    )

    for row_idx in layout.metadata_rows:
        ws.cell(row=row_idx, column=1).font = Font(bold=True)

    thin = Side(style="thin", color=SPREADSHEET_BORDER_COLOR)
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    fill = PatternFill(
        fill_type="solid",
        start_color=SPREADSHEET_HEADER_FILL,
        end_color=SPREADSHEET_HEADER_FILL,
    )
    for col_idx in range(1, width + 1):
        cell = ws.cell(row=layout.header_row, column=col_idx)
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.fill = fill
        cell.border = border

    for row_idx in layout.section_header_rows:
        for col_idx in range(1, width + 1):
            ws.cell(row=row_idx, column=col_idx).font = Font(bold=True, italic=True)

    list_columns = [
        col_idx
        for col_idx, descriptor in enumerate(selection, start=2)
        if descriptor.kind == FieldKind.LIST
    ]
    for row_idx in layout.data_rows:
        ws.cell(row=row_idx, column=1).alignment = Alignment(horizontal="left")
        for col_idx in list_columns:
            ws.cell(row=row_idx, column=col_idx).alignment = Alignment(
                wrap_text=True,
                vertical="top",
            )

    ws.column_dimensions[get_column_letter(1)].width = NUMBER_COLUMN_WIDTH
    for col_idx, descriptor in enumerate(selection, start=2):
        ws.column_dimensions[get_column_letter(col_idx)].width = COLUMN_WIDTHS.get(
            descriptor.width,
            COLUMN_WIDTHS["default"],
        )


def render_workbook(layout: WorksheetLayout, selection: Sequence[FieldDescriptor]) -> bytes:
    """Write a laid-out report into a workbook and return the file bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = WORKSHEET_NAME

    for row_idx, values in enumerate(layout.rows, start=1):
        for col_idx, value in enumerate(values, start=1):
            if value is None:
                continue
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            # Text is always stored as a string, never as a formula.
            if isinstance(value, str):
                cell.data_type = "s"

    _apply_styles(ws, layout, selection)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def serialize_blocks(
    blocks: Sequence[TopicBlock],
    summary: ExportSummary,
    selection: Sequence[FieldDescriptor],
    *,
    today: date | None = None,
    title: str | None = None,
    date_format: str | None = None,
) -> bytes:
    layout = build_worksheet_layout(
        blocks,
        summary,
        selection,
        today=today,
        title=title,
        date_format=date_format,
    )
    return render_workbook(layout, selection)


def serialize_spreadsheet(
    project_files,
    field_ids: Iterable[str] | None = None,
    *,
    today: date | None = None,
    title: str | None = None,
    date_format: str | None = None,
) -> bytes:
    """
    Convert project files to an XLSX workbook.

    Args:
        project_files: Parsed BCF files in input order
        field_ids: Selected field ids; empty or None selects every field
        today: Date shown in the title row (defaults to the current UTC date)
        title: Title prefix (defaults to the configured report title)
        date_format: strftime pattern for date cells (defaults to config)

    Returns:
        bytes: The workbook file contents

    Raises:
        NoDataError: No project files were supplied.
        EmptyResultError: The project files contain no topics.
    """
    topic_count = ensure_exportable(project_files)
    selection = resolve_selection(field_ids)
    blocks = list(iter_topic_blocks(project_files, selection))
    content = serialize_blocks(
        blocks,
        summarize_project_files(project_files),
        selection,
        today=today,
        title=title,
        date_format=date_format,
    )
    logger.info(
        "Created spreadsheet export for %d topics (%d bytes)",
        topic_count,
        len(content),
    )
    return content
