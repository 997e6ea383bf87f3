"""Centralized configuration for environment variables and report constants.

This module is the single source of truth for configuration used across the
application. Import constants from here rather than calling os.getenv directly
in multiple places. Getters read the environment at call time so a changed
variable takes effect without re-importing.
"""

from __future__ import annotations

import os
from typing import Final

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()


# --- Report constants ---
WORKSHEET_NAME: Final[str] = "BCF Report"
COORDINATE_PRECISION: Final[int] = 3
DEFAULT_REPORT_TITLE: Final[str] = "BCF Analysis Report"
DEFAULT_SPREADSHEET_DATE_FORMAT: Final[str] = "%d %b %Y"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"


def get_report_title() -> str:
    """Title prefix for the first spreadsheet row."""
    return os.getenv("BCF_REPORT_TITLE", "").strip() or DEFAULT_REPORT_TITLE


def get_spreadsheet_date_format() -> str:
    """strftime pattern used for dates in spreadsheet output."""
    return (
        os.getenv("BCF_SPREADSHEET_DATE_FORMAT", "").strip()
        or DEFAULT_SPREADSHEET_DATE_FORMAT
    )


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL


__all__ = [
    "COORDINATE_PRECISION",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_REPORT_TITLE",
    "DEFAULT_SPREADSHEET_DATE_FORMAT",
    "WORKSHEET_NAME",
    "get_log_level",
    "get_report_title",
    "get_spreadsheet_date_format",
]
