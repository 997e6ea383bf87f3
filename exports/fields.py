"""
Closed export field vocabulary.

Every selectable column is declared once here with its display label, value
kind, the row types it is populated on, and its spreadsheet width class. Both
serializers and the flattening engine read this table, so header labels, value
placement and column widths cannot drift between output formats.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Final

from exports.models import FieldDescriptor, FieldGroup, FieldKind, RowType

logger = logging.getLogger(__name__)

TOPIC_ROWS: Final = frozenset({RowType.TOPIC})
COMMENT_ROWS: Final = frozenset({RowType.COMMENT})
VIEWPOINT_ROWS: Final = frozenset({RowType.VIEWPOINT})
TOPIC_AND_VIEWPOINT_ROWS: Final = frozenset({RowType.TOPIC, RowType.VIEWPOINT})
ALL_ROWS: Final = frozenset(RowType)


def _topic(field_id, label, kind=FieldKind.TEXT, width="default", source=""):
    return FieldDescriptor(
        id=field_id,
        label=label,
        kind=kind,
        group=FieldGroup.TOPIC,
        applies_to=TOPIC_ROWS,
        width=width,
        source=source or f"topic.{field_id}",
    )


def _comment(field_id, label, kind=FieldKind.TEXT, width="default", source=""):
    return FieldDescriptor(
        id=field_id,
        label=label,
        kind=kind,
        group=FieldGroup.COMMENT,
        applies_to=COMMENT_ROWS,
        width=width,
        source=source,
    )


def _vector(prefix: str, label_prefix: str, source: str) -> list[FieldDescriptor]:
    return [
        FieldDescriptor(
            id=f"{prefix}{axis}",
            label=f"{label_prefix} {axis}",
            kind=FieldKind.COORDINATE,
            group=FieldGroup.CAMERA,
            applies_to=TOPIC_AND_VIEWPOINT_ROWS,
            width="coordinate",
            source=f"viewpoint.{source}.{axis}",
            sortable=False,
        )
        for axis in ("X", "Y", "Z")
    ]


def _legacy(prefix: str, label_prefix: str, source: str) -> list[FieldDescriptor]:
    return [
        FieldDescriptor(
            id=f"{prefix}{axis}",
            label=f"{label_prefix} {axis} (Legacy)",
            kind=FieldKind.COORDINATE,
            group=FieldGroup.LEGACY,
            applies_to=TOPIC_AND_VIEWPOINT_ROWS,
            width="coordinate",
            source=f"viewpoint.{source}.{axis.lower()}",
            sortable=False,
        )
        for axis in ("X", "Y", "Z")
    ]


FIELD_DESCRIPTORS: Final[tuple[FieldDescriptor, ...]] = (
    # Topic information (BCF 2.x and 3.0)
    _topic("title", "Title", width="wide"),
    _topic("description", "Description", width="wide"),
    _topic("status", "Status", width="short"),
    _topic("type", "Type", width="short"),
    _topic("priority", "Priority", width="short"),
    _topic("stage", "Stage", width="short"),
    _topic("topicIndex", "Topic Index (BCF 2.x)", FieldKind.COUNT, source="topic.index"),
    _topic("labels", "Labels", FieldKind.LIST, width="location"),
    _topic("assignedTo", "Assigned To", width="medium"),
    _topic("creationDate", "Creation Date", FieldKind.DATE, width="short"),
    _topic("creationAuthor", "Creation Author", width="medium"),
    _topic("modifiedDate", "Modified Date", FieldKind.DATE, width="short"),
    _topic("modifiedAuthor", "Modified Author", width="medium"),
    _topic("dueDate", "Due Date", FieldKind.DATE, width="short"),
    # Comments
    _comment("commentNumber", "Comment Number", FieldKind.COUNT, source="comment position"),
    _comment("commentDate", "Comment Date", FieldKind.DATE, "short", "comment.date"),
    _comment("commentAuthor", "Comment Author", width="medium", source="comment.author"),
    _comment("commentText", "Comment Text", width="wide", source="comment.comment"),
    _comment("commentStatus", "Comment Status", width="short", source="comment.status"),
    # File and topic metadata
    FieldDescriptor(
        id="sourceFile",
        label="Source File",
        group=FieldGroup.METADATA,
        applies_to=TOPIC_AND_VIEWPOINT_ROWS,
        width="location",
        source="file.filename",
    ),
    FieldDescriptor(
        id="projectName",
        label="Project Name",
        group=FieldGroup.METADATA,
        applies_to=TOPIC_AND_VIEWPOINT_ROWS,
        width="location",
        source="file.project.name",
    ),
    FieldDescriptor(
        id="bcfVersion",
        label="BCF Version",
        group=FieldGroup.METADATA,
        applies_to=TOPIC_AND_VIEWPOINT_ROWS,
        source="file.version",
    ),
    FieldDescriptor(
        id="topicGuid",
        label="Topic GUID",
        group=FieldGroup.METADATA,
        applies_to=ALL_ROWS,
        width="guid",
        source="topic.guid",
    ),
    FieldDescriptor(
        id="commentsCount",
        label="Comments Count",
        kind=FieldKind.COUNT,
        group=FieldGroup.METADATA,
        applies_to=TOPIC_ROWS,
        source="len(topic.comments)",
    ),
    FieldDescriptor(
        id="viewpointsCount",
        label="Viewpoints Count",
        kind=FieldKind.COUNT,
        group=FieldGroup.METADATA,
        applies_to=TOPIC_AND_VIEWPOINT_ROWS,
        source="len(topic.viewpoints)",
    ),
    # BCF 3.0 extensions
    FieldDescriptor(
        id="serverAssignedId",
        label="Server Assigned ID",
        group=FieldGroup.BCF30,
        applies_to=TOPIC_ROWS,
        width="short",
        source="topic.serverAssignedId",
    ),
    FieldDescriptor(
        id="referenceLinks",
        label="Reference Links",
        kind=FieldKind.LIST,
        group=FieldGroup.BCF30,
        applies_to=TOPIC_ROWS,
        width="guid",
        source="topic.referenceLinks",
        sortable=False,
    ),
    FieldDescriptor(
        id="documentReferences",
        label="Document References",
        kind=FieldKind.LIST,
        group=FieldGroup.BCF30,
        applies_to=TOPIC_ROWS,
        width="wide",
        source="topic.documentReferences",
        sortable=False,
    ),
    FieldDescriptor(
        id="headerFiles",
        label="Header Files",
        kind=FieldKind.LIST,
        group=FieldGroup.BCF30,
        applies_to=TOPIC_ROWS,
        width="guid",
        source="topic.headerFiles",
        sortable=False,
    ),
    FieldDescriptor(
        id="viewpointIndex",
        label="Viewpoint Index",
        kind=FieldKind.COUNT,
        group=FieldGroup.BCF30,
        applies_to=VIEWPOINT_ROWS,
        source="viewpoint.index",
    ),
    FieldDescriptor(
        id="viewpointGuid",
        label="Viewpoint GUID",
        group=FieldGroup.BCF30,
        applies_to=VIEWPOINT_ROWS,
        width="guid",
        source="viewpoint.guid",
    ),
    # Camera (all BCF versions)
    FieldDescriptor(
        id="cameraType",
        label="Camera Type",
        group=FieldGroup.CAMERA,
        applies_to=TOPIC_AND_VIEWPOINT_ROWS,
        width="short",
        source="viewpoint.cameraType",
    ),
    *_vector("CameraViewPoint", "CameraViewPoint", "CameraViewPoint"),
    *_vector("CameraDirection", "CameraDirection", "CameraDirection"),
    *_vector("CameraUpVector", "CameraUpVector", "CameraUpVector"),
    FieldDescriptor(
        id="FieldOfView",
        label="FieldOfView",
        kind=FieldKind.COORDINATE,
        group=FieldGroup.CAMERA,
        applies_to=TOPIC_AND_VIEWPOINT_ROWS,
        width="short",
        source="viewpoint.FieldOfView",
        sortable=False,
    ),
    FieldDescriptor(
        id="ViewToWorldScale",
        label="ViewToWorldScale",
        kind=FieldKind.COORDINATE,
        group=FieldGroup.CAMERA,
        applies_to=TOPIC_AND_VIEWPOINT_ROWS,
        width="short",
        source="viewpoint.ViewToWorldScale",
        sortable=False,
    ),
    # Legacy lower-case camera vectors
    *_legacy("cameraPos", "Camera Position", "cameraPosition"),
    *_legacy("cameraTarget", "Camera Target", "cameraTarget"),
)

FIELDS_BY_ID: Final[dict[str, FieldDescriptor]] = {
    descriptor.id: descriptor for descriptor in FIELD_DESCRIPTORS
}

ALL_FIELD_IDS: Final[tuple[str, ...]] = tuple(FIELDS_BY_ID)

COORDINATE_FIELD_IDS: Final[frozenset[str]] = frozenset(
    descriptor.id for descriptor in FIELD_DESCRIPTORS if descriptor.is_coordinate
)

FIELD_LABELS: Final[dict[str, str]] = {
    descriptor.id: descriptor.label for descriptor in FIELD_DESCRIPTORS
}


def field_ids_for_group(group: FieldGroup) -> list[str]:
    return [d.id for d in FIELD_DESCRIPTORS if d.group == group]


def resolve_selection(field_ids: Iterable[str] | None) -> list[FieldDescriptor]:
    """
    Turn a caller's field ids into the ordered descriptor list used for output.

    An empty or missing selection means every field. Unknown ids are dropped
    and duplicates keep their first position, so the header and every row are
    built from the same list.
    """
    if not field_ids:
        return list(FIELD_DESCRIPTORS)

    selected: list[FieldDescriptor] = []
    seen: set[str] = set()
    for field_id in field_ids:
        if field_id in seen:
            continue
        descriptor = FIELDS_BY_ID.get(field_id)
        if descriptor is None:
            logger.warning("Skipping unknown export field '%s'", field_id)
            continue
        seen.add(field_id)
        selected.append(descriptor)
    return selected


def has_coordinate_fields(selection: Iterable[FieldDescriptor]) -> bool:
    return any(descriptor.is_coordinate for descriptor in selection)
