"""
Per-entity value builders for export rows.

Each builder returns a dict keyed by field id holding the normalized value
for that entity. Dates stay as their source strings and list fields stay as
lists; the serializers render those two kinds in their own format. Every
other kind (text, counts, coordinates) is final here, so both output formats
report identical values.
"""

from __future__ import annotations

from typing import Any

from bcf.models import Comment, ProjectFile, Topic, Viewpoint
from export_helpers.base import (
    clean_list,
    clean_text,
    format_coordinate,
    format_document_reference,
    format_header_file,
)
from exports.constants import UNKNOWN_VALUE


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _formatted_entries(formatter, items) -> list[str]:
    entries = (formatter(item) for item in items)
    return [entry for entry in entries if entry]


def build_metadata_values(project_file: ProjectFile, topic: Topic) -> dict[str, Any]:
    return {
        "sourceFile": _text(project_file.filename),
        "projectName": project_file.project.name or UNKNOWN_VALUE,
        "bcfVersion": project_file.version or UNKNOWN_VALUE,
        "topicGuid": _text(topic.guid),
        "commentsCount": len(topic.comments),
        "viewpointsCount": len(topic.viewpoints),
    }


def build_topic_values(project_file: ProjectFile, topic: Topic) -> dict[str, Any]:
    values = {
        "title": _text(topic.title),
        "description": clean_text(topic.description),
        "status": _text(topic.status),
        "type": _text(topic.type),
        "priority": _text(topic.priority),
        "stage": _text(topic.stage),
        "topicIndex": topic.index if topic.index is not None else "",
        "labels": clean_list(topic.labels),
        "assignedTo": _text(topic.assignedTo),
        "creationDate": _text(topic.creationDate),
        "creationAuthor": _text(topic.creationAuthor),
        "modifiedDate": _text(topic.modifiedDate),
        "modifiedAuthor": _text(topic.modifiedAuthor),
        "dueDate": _text(topic.dueDate),
        "serverAssignedId": _text(topic.serverAssignedId),
        "referenceLinks": clean_list(topic.referenceLinks),
        "documentReferences": _formatted_entries(
            format_document_reference,
            topic.documentReferences,
        ),
        "headerFiles": _formatted_entries(format_header_file, topic.headerFiles),
    }
    values.update(build_metadata_values(project_file, topic))
    return values


def build_comment_values(comment: Comment, number: int) -> dict[str, Any]:
    return {
        "commentNumber": number,
        "commentDate": _text(comment.date),
        "commentAuthor": _text(comment.author),
        "commentText": clean_text(comment.comment),
        "commentStatus": _text(comment.status),
    }


def build_camera_values(viewpoint: Viewpoint | None) -> dict[str, Any]:
    """Camera and legacy coordinate values; all empty when there is no viewpoint."""
    if viewpoint is None:
        return {}

    values: dict[str, Any] = {"cameraType": _text(viewpoint.cameraType)}

    for name in ("CameraViewPoint", "CameraDirection", "CameraUpVector"):
        vector = getattr(viewpoint, name)
        for axis in ("X", "Y", "Z"):
            raw = getattr(vector, axis) if vector is not None else None
            values[f"{name}{axis}"] = format_coordinate(raw)

    values["FieldOfView"] = format_coordinate(viewpoint.FieldOfView)
    values["ViewToWorldScale"] = format_coordinate(viewpoint.ViewToWorldScale)

    for prefix, vector in (
        ("cameraPos", viewpoint.cameraPosition),
        ("cameraTarget", viewpoint.cameraTarget),
    ):
        for axis in ("x", "y", "z"):
            raw = getattr(vector, axis) if vector is not None else None
            values[f"{prefix}{axis.upper()}"] = format_coordinate(raw)

    return values


def build_viewpoint_values(
    project_file: ProjectFile,
    topic: Topic,
    viewpoint: Viewpoint,
) -> dict[str, Any]:
    values = build_camera_values(viewpoint)
    values["viewpointIndex"] = viewpoint.index if viewpoint.index is not None else ""
    values["viewpointGuid"] = _text(viewpoint.guid)
    values.update(build_metadata_values(project_file, topic))
    return values
