"""BCF report route handlers."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from core.api import api_route
from export_helpers.responses import export_xlsx_response, stream_csv_response
from exports.models import ExportRequest, FieldDiscoveryResponse
from exports.services.export_service import ExportService, stream_delimited
from exports.services.row_flattener import ensure_exportable

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/api/bcf/fields",
    response_model=FieldDiscoveryResponse,
    summary="Discover Export Fields",
    description="List the fields that carry data, custom fields and totals.",
)
@api_route(logger)
async def discover_fields(request: ExportRequest) -> FieldDiscoveryResponse:
    ensure_exportable(request.project_files)
    return ExportService.describe_fields(request.project_files)


@router.post("/api/bcf/export/csv")
@api_route(logger)
async def export_csv(request: ExportRequest) -> StreamingResponse:
    """Stream the selected fields as a delimited text attachment."""
    ensure_exportable(request.project_files)
    lines = stream_delimited(request.project_files, request.fields)
    return stream_csv_response(lines, request.filename_base)


@router.post("/api/bcf/export/xlsx")
@api_route(logger)
async def export_xlsx(request: ExportRequest) -> StreamingResponse:
    """Return the selected fields as an XLSX report attachment."""
    content = await ExportService.export_xlsx(request.project_files, request.fields)
    return await export_xlsx_response(content, request.filename_base)
