"""
HTTP response utilities for export.

Provides functions to create StreamingResponse objects for the BCF report
formats.
"""

import io
from collections.abc import AsyncIterator

from fastapi.responses import StreamingResponse

from exports.constants import EXPORT_MEDIA_TYPES


def _attachment_headers(filename: str, extension: str) -> dict[str, str]:
    return {
        "Content-Disposition": f'attachment; filename="{filename}.{extension}"',
    }


async def export_csv_response(content: str, filename: str) -> StreamingResponse:
    """
    Create a StreamingResponse with delimited text content.

    Args:
        content: The complete delimited document
        filename: Filename for the download, without extension

    Returns:
        StreamingResponse: Formatted response with CSV content
    """
    return StreamingResponse(
        io.BytesIO(content.encode("utf-8")),
        media_type=EXPORT_MEDIA_TYPES["csv"],
        headers=_attachment_headers(filename, "csv"),
    )


def stream_csv_response(lines: AsyncIterator[str], filename: str) -> StreamingResponse:
    """Create a StreamingResponse that encodes delimited lines as they arrive."""

    async def body():
        first = True
        async for line in lines:
            chunk = line if first else "\n" + line
            first = False
            yield chunk.encode("utf-8")

    return StreamingResponse(
        body(),
        media_type=EXPORT_MEDIA_TYPES["csv"],
        headers=_attachment_headers(filename, "csv"),
    )


async def export_xlsx_response(content: bytes, filename: str) -> StreamingResponse:
    """
    Create a StreamingResponse with workbook content.

    Args:
        content: The workbook file bytes
        filename: Filename for the download, without extension

    Returns:
        StreamingResponse: Formatted response with XLSX content
    """
    return StreamingResponse(
        io.BytesIO(content),
        media_type=EXPORT_MEDIA_TYPES["xlsx"],
        headers=_attachment_headers(filename, "xlsx"),
    )
