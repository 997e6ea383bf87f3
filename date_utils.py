"""
Centralized date and time utilities for the application.

This module provides a focused set of functions for handling dates, times,
and timestamps in a consistent and timezone-aware manner. BCF containers carry
ISO 8601 timestamps with or without offsets; everything parsed here is
normalized to UTC so that ordering and calendar-date extraction agree no matter
which authoring tool wrote the file.

Key Features:
-   **Timezone-Aware Parsing**: All timestamps are handled as timezone-aware
    datetime objects, defaulting to UTC to prevent common timezone-related bugs.
-   **Consistent Formatting**: Standardized conversions to calendar-date and
    display strings.
-   **Dependency Abstraction**: Wraps `dateutil` to provide a stable, internal
    API for the rest of the application.
"""

import logging
from datetime import UTC, date, datetime

from dateutil import parser

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def get_current_utc_time() -> datetime:
    """Return the current time as a timezone-aware datetime object in UTC."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Return the datetime as an explicit UTC-aware value."""

    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_timestamp(ts: str | datetime | date | None) -> datetime | None:
    """
    Parse a timestamp string (or date/datetime object) into a UTC-aware datetime.

    Args:
        ts: The timestamp to parse, either as an ISO 8601 string or a
            date/datetime object.

    Returns:
        A timezone-aware datetime object in UTC, or None if parsing fails.
    """
    if ts is None or ts == "":
        return None

    if isinstance(ts, datetime):
        return ensure_utc(ts)

    if isinstance(ts, date):
        return datetime.combine(ts, datetime.min.time(), tzinfo=UTC)

    if not isinstance(ts, str):
        logger.debug("Unsupported timestamp type '%s'", type(ts))
        return None

    try:
        return ensure_utc(parser.isoparse(ts.strip()))
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug("Failed to parse timestamp '%s': %s", ts, e)
        return None


def to_iso_date(value: str | datetime | date | None) -> str | None:
    """Normalize a date-like input to a YYYY-MM-DD string (UTC calendar date)."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.date().isoformat()


def to_display_date(value: str | datetime | date | None, fmt: str) -> str | None:
    """Format a date-like input with an strftime pattern."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.strftime(fmt)


def chronological_key(value: str | datetime | date | None) -> datetime:
    """Sort key that places missing or unparseable dates at the epoch."""
    return parse_timestamp(value) or EPOCH
