"""
Row flattening engine.

Turns the ProjectFile -> Topic -> Comment/Viewpoint graph into FlatRows for a
resolved field selection. Field applicability per row type comes from the
vocabulary table; a field that does not apply to a row is present as "".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from bcf.models import ProjectFile, Topic
from bcf.viewpoints import coordinate_viewpoints, resolve_primary_viewpoint
from core.exceptions import EmptyResultError, NoDataError
from date_utils import chronological_key
from exports.fields import has_coordinate_fields, resolve_selection
from exports.models import FieldDescriptor, FlatRow, RowType, TopicBlock
from exports.serializers import (
    build_camera_values,
    build_comment_values,
    build_topic_values,
    build_viewpoint_values,
)

logger = logging.getLogger(__name__)


def ensure_exportable(project_files: Sequence[ProjectFile] | None) -> int:
    """
    Check the structural preconditions of an export.

    Raises:
        NoDataError: The collection is missing or empty.
        EmptyResultError: Every project file has zero topics.

    Returns:
        int: Total number of topics across all files.
    """
    if not project_files:
        raise NoDataError("No BCF data to export. Select at least one BCF file.")

    topic_count = sum(len(project_file.topics) for project_file in project_files)
    if topic_count == 0:
        raise EmptyResultError(
            "The selected BCF files contain no topics to export.",
            {"files": len(project_files)},
        )
    return topic_count


def _project(
    row_type: RowType,
    number: str,
    selection: Sequence[FieldDescriptor],
    source: dict[str, Any],
) -> FlatRow:
    values = {
        descriptor.id: source.get(descriptor.id, "") if descriptor.applies(row_type) else ""
        for descriptor in selection
    }
    return FlatRow.build(row_type, number, values)


def sorted_comments(topic: Topic):
    """Comments in ascending date order; missing dates sort first, ties keep order."""
    return sorted(topic.comments, key=lambda comment: chronological_key(comment.date))


def flatten_topic(
    project_file: ProjectFile,
    topic: Topic,
    topic_number: int,
    selection: Sequence[FieldDescriptor],
    *,
    include_viewpoints: bool | None = None,
) -> TopicBlock:
    """Build the topic row, its comment rows and its viewpoint rows."""
    if include_viewpoints is None:
        include_viewpoints = has_coordinate_fields(selection)

    topic_values = build_topic_values(project_file, topic)
    if include_viewpoints:
        topic_values.update(build_camera_values(resolve_primary_viewpoint(topic)))

    topic_row = _project(RowType.TOPIC, str(topic_number), selection, topic_values)

    comment_rows = []
    for index, comment in enumerate(sorted_comments(topic), start=1):
        values = build_comment_values(comment, index)
        values["topicGuid"] = topic.guid or ""
        comment_rows.append(
            _project(RowType.COMMENT, f"{topic_number}.{index}", selection, values),
        )

    viewpoint_rows = []
    if include_viewpoints:
        qualifying = coordinate_viewpoints(topic)
        logger.debug(
            "Topic %s: %d of %d viewpoints carry coordinate data",
            topic.guid,
            len(qualifying),
            len(topic.viewpoints),
        )
        for index, viewpoint in enumerate(qualifying, start=1):
            values = build_viewpoint_values(project_file, topic, viewpoint)
            viewpoint_rows.append(
                _project(RowType.VIEWPOINT, f"{topic_number}.V{index}", selection, values),
            )

    return TopicBlock(
        topic_row=topic_row,
        comment_rows=tuple(comment_rows),
        viewpoint_rows=tuple(viewpoint_rows),
    )


def iter_topic_blocks(
    project_files: Iterable[ProjectFile],
    selection: Sequence[FieldDescriptor],
) -> Iterator[TopicBlock]:
    """Yield one TopicBlock per topic, numbered 1..N across every file."""
    include_viewpoints = has_coordinate_fields(selection)
    topic_number = 1
    for project_file in project_files:
        for topic in project_file.topics:
            yield flatten_topic(
                project_file,
                topic,
                topic_number,
                selection,
                include_viewpoints=include_viewpoints,
            )
            topic_number += 1


def iter_rows(
    project_files: Iterable[ProjectFile],
    selection: Sequence[FieldDescriptor],
) -> Iterator[FlatRow]:
    for block in iter_topic_blocks(project_files, selection):
        yield from block.rows()


def flatten_to_rows(
    project_files: Sequence[ProjectFile] | None,
    field_ids: Iterable[str] | None,
) -> list[FlatRow]:
    """
    Flatten every topic of every project file into rows.

    Args:
        project_files: Parsed BCF files in input order
        field_ids: Selected field ids; empty or None selects every field

    Returns:
        list[FlatRow]: Per topic, its topic row, then comment rows by date,
        then viewpoint rows when a coordinate field is selected
    """
    topic_count = ensure_exportable(project_files)
    selection = resolve_selection(field_ids)
    rows = list(iter_rows(project_files, selection))
    logger.info(
        "Flattened %d topics into %d rows (%d fields)",
        topic_count,
        len(rows),
        len(selection),
    )
    return rows
