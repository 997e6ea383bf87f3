from __future__ import annotations

from typing import Final

EXPORT_FORMATS: Final[set[str]] = {"csv", "xlsx"}

EXPORT_MEDIA_TYPES: Final[dict[str, str]] = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}

EXPORT_DEFAULT_FILENAME: Final[str] = "bcf_export"

UNKNOWN_VALUE: Final[str] = "Unknown"

ROW_TYPE_LABELS: Final[dict[str, str]] = {
    "topic": "Topic",
    "comment": "Comment",
    "viewpoint": "Viewpoint",
}

DELIMITED_PREFIX_HEADERS: Final[list[str]] = ["Row Type", "Topic #"]

SPREADSHEET_NUMBER_HEADER: Final[str] = "Topic #"

VIEWPOINT_SECTION_HEADERS: Final[list[str]] = [
    "Viewpoint #",
    "Coordinates",
    "Camera Position",
    "Camera Target",
    "GUID",
]

COMMENT_SECTION_HEADERS: Final[list[str]] = [
    "Comment #",
    "Comments",
    "Author",
    "Date",
    "Comment Text",
]

# Column widths (characters) per semantic width class.
COLUMN_WIDTHS: Final[dict[str, int]] = {
    "wide": 50,
    "medium": 25,
    "short": 15,
    "location": 30,
    "guid": 40,
    "coordinate": 18,
    "default": 12,
}

NUMBER_COLUMN_WIDTH: Final[int] = 12

SPREADSHEET_HEADER_FILL: Final[str] = "E6E6FA"
SPREADSHEET_BORDER_COLOR: Final[str] = "000000"
SPREADSHEET_TITLE_FONT_SIZE: Final[int] = 14
