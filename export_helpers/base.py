"""
Base utilities for export helpers.

Value normalization shared by the delimited and spreadsheet writers:
coordinate formatting, date rendering, text cleanup and BCF reference
compounds. Nothing in here raises for bad input; values that cannot be
coerced fall back to "" (numbers) or the raw string (dates) and a
FieldFormatWarning is issued.
"""

import logging
import re
import warnings
from collections.abc import Iterable
from typing import Any

from bcf.models import DocumentReference, HeaderFile
from config import COORDINATE_PRECISION
from core.casting import is_blank, safe_float
from core.exceptions import FieldFormatWarning
from date_utils import to_display_date, to_iso_date

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")


def format_coordinate(value: Any) -> str:
    """
    Format a raw coordinate scalar with fixed precision.

    Args:
        value: Number, numeric string, None or anything else

    Returns:
        str: The value with exactly three decimals, or "" when it is missing
        or not a finite number
    """
    if is_blank(value):
        return ""

    number = safe_float(value)
    if number is None:
        warnings.warn(
            f"Non-numeric coordinate value {value!r} exported as empty",
            FieldFormatWarning,
            stacklevel=2,
        )
        return ""

    return f"{number:.{COORDINATE_PRECISION}f}"


def _unparseable_date(value: Any) -> str:
    warnings.warn(
        f"Unparseable date {value!r} exported unchanged",
        FieldFormatWarning,
        stacklevel=3,
    )
    return str(value)


def format_iso_date(value: Any) -> str:
    """Render a date as YYYY-MM-DD; unparseable input passes through unchanged."""
    if is_blank(value):
        return ""
    formatted = to_iso_date(value)
    if formatted is None:
        return _unparseable_date(value)
    return formatted


def format_display_date(value: Any, fmt: str) -> str:
    """Render a date with a display pattern; unparseable input passes through."""
    if is_blank(value):
        return ""
    formatted = to_display_date(value, fmt)
    if formatted is None:
        return _unparseable_date(value)
    return formatted


def clean_text(value: Any) -> str:
    """Collapse line breaks and whitespace runs into single spaces."""
    if value is None:
        return ""
    return _WHITESPACE_RUN.sub(" ", str(value)).strip()


def clean_list(items: Iterable[Any] | None) -> list[str]:
    """Strip entries and drop blank ones."""
    if not items:
        return []
    return [str(item).strip() for item in items if not is_blank(item)]


def format_header_file(header_file: HeaderFile) -> str | None:
    """Render a header file entry as ``filename (reference)``."""
    if not header_file.filename and not header_file.reference:
        return None
    filename = header_file.filename or "Unknown"
    if header_file.reference:
        return f"{filename} ({header_file.reference})"
    return filename


def format_document_reference(reference: DocumentReference) -> str | None:
    """Render a BCF 3.0 document reference as a `` | `` joined compound."""
    if not (reference.guid or reference.documentGuid or reference.url):
        return None

    parts = []
    if reference.documentGuid:
        parts.append(f"Doc: {reference.documentGuid}")
    elif reference.url:
        parts.append(f"URL: {reference.url}")

    if reference.description:
        parts.append(f"Desc: {reference.description}")

    if reference.guid and reference.guid != reference.documentGuid:
        parts.append(f"ID: {reference.guid}")

    return " | ".join(parts)


def join_values(value: Any, separator: str) -> str:
    """Join a list-valued field; scalars are returned as strings."""
    if value is None:
        return ""
    if isinstance(value, list | tuple):
        return separator.join(str(item) for item in value)
    return str(value)

