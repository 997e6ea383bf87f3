from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable, Sequence
from datetime import date

from bcf.discovery import (
    analyze_value_usage,
    discover_available_fields,
    discover_custom_fields,
    summarize_project_files,
)
from bcf.models import ProjectFile
from core.exceptions import BCFSleuthError
from export_helpers.csv_export import (
    DelimitedLineWriter,
    build_delimited_header,
    build_delimited_record,
    serialize_delimited,
)
from export_helpers.xlsx_export import serialize_blocks
from exports.constants import EXPORT_FORMATS
from exports.fields import FIELD_DESCRIPTORS, resolve_selection
from exports.models import ExportResult, FieldDiscoveryResponse
from exports.services.row_flattener import ensure_exportable, flatten_topic, iter_topic_blocks

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], Awaitable[None]]


class ExportService:
    @staticmethod
    def _normalize_formats(formats: Iterable[str]) -> list[str]:
        normalized: list[str] = []
        for fmt in formats:
            key = str(fmt).strip().lower()
            if key not in EXPORT_FORMATS:
                msg = f"Unsupported export format '{fmt}'."
                raise BCFSleuthError(msg, {"supported": sorted(EXPORT_FORMATS)})
            if key not in normalized:
                normalized.append(key)
        return normalized

    @staticmethod
    def describe_fields(project_files: Sequence[ProjectFile]) -> FieldDiscoveryResponse:
        """Field menu, custom field registry and totals for the input set."""
        return FieldDiscoveryResponse(
            available=discover_available_fields(project_files),
            custom_fields=discover_custom_fields(project_files),
            value_usage=analyze_value_usage(project_files),
            summary=summarize_project_files(project_files),
            fields=list(FIELD_DESCRIPTORS),
        )

    @classmethod
    async def export_formats(
        cls,
        project_files: Sequence[ProjectFile] | None,
        field_ids: Iterable[str] | None = None,
        formats: Iterable[str] = ("csv", "xlsx"),
        *,
        today: date | None = None,
    ) -> ExportResult:
        """
        Flatten once and encode the requested formats concurrently.

        Both encoders read the same immutable block snapshot from worker
        threads. Structural errors are raised before any encoding starts.
        """
        requested = cls._normalize_formats(formats)
        topic_count = ensure_exportable(project_files)
        selection = resolve_selection(field_ids)

        blocks = await asyncio.to_thread(
            lambda: list(iter_topic_blocks(project_files, selection)),
        )
        rows = [row for block in blocks for row in block.rows()]

        jobs: dict[str, Awaitable[object]] = {}
        if "csv" in requested:
            jobs["csv"] = asyncio.to_thread(serialize_delimited, rows, selection)
        if "xlsx" in requested:
            summary = summarize_project_files(project_files)
            jobs["xlsx"] = asyncio.to_thread(
                serialize_blocks,
                blocks,
                summary,
                selection,
                today=today,
            )

        outputs = dict(zip(jobs, await asyncio.gather(*jobs.values()), strict=True))

        result = ExportResult(
            csv=outputs.get("csv"),
            xlsx=outputs.get("xlsx"),
            records={
                "files": len(project_files),
                "topics": topic_count,
                "rows": len(rows),
                "fields": len(selection),
            },
        )
        logger.info(
            "Exported %d topics as %s (%d rows)",
            topic_count,
            ", ".join(requested),
            len(rows),
        )
        return result

    @classmethod
    async def export_csv(
        cls,
        project_files: Sequence[ProjectFile] | None,
        field_ids: Iterable[str] | None = None,
    ) -> str:
        result = await cls.export_formats(project_files, field_ids, ("csv",))
        return result.csv or ""

    @classmethod
    async def export_xlsx(
        cls,
        project_files: Sequence[ProjectFile] | None,
        field_ids: Iterable[str] | None = None,
        *,
        today: date | None = None,
    ) -> bytes:
        result = await cls.export_formats(
            project_files,
            field_ids,
            ("xlsx",),
            today=today,
        )
        return result.xlsx or b""


async def stream_delimited(
    project_files: Sequence[ProjectFile] | None,
    field_ids: Iterable[str] | None = None,
    progress: ProgressCallback | None = None,
) -> AsyncIterator[str]:
    """
    Yield encoded delimited lines, handing control back after each file.

    Structural errors surface on the first iteration, before the header is
    produced. ``progress`` is awaited with (files_done, files_total).
    Cancelling the consuming task stops the stream at the next yield.
    """
    ensure_exportable(project_files)
    selection = resolve_selection(field_ids)
    total_files = len(project_files)
    writer = DelimitedLineWriter()

    yield writer.encode(build_delimited_header(selection))

    topic_number = 1
    for file_index, project_file in enumerate(project_files, start=1):
        for topic in project_file.topics:
            block = flatten_topic(project_file, topic, topic_number, selection)
            for row in block.rows():
                yield writer.encode(build_delimited_record(row, selection))
            topic_number += 1

        if progress is not None:
            await progress(file_index, total_files)
        await asyncio.sleep(0)
