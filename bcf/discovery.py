"""
Field discovery over a parsed project file collection.

Two structurally separate paths:

- ``discover_available_fields`` checks the closed export vocabulary and
  reports which ids actually carry data somewhere in the input.
- ``discover_custom_fields`` catalogs the open set of vendor/custom
  ``_customFields`` entries found at runtime. The registry is informational
  and not consumed by the serializers.

``summarize_project_files`` and ``analyze_value_usage`` produce the totals and
enumeration overviews shown next to the field menu and in the spreadsheet
metadata block.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from bcf.models import (
    AvailableFields,
    CustomFieldEntry,
    CustomFieldRegistry,
    ExportSummary,
    ProjectFile,
    ValueUsage,
)
from bcf.viewpoints import has_coordinate_data
from core.casting import is_blank
from exports.fields import ALL_FIELD_IDS, field_ids_for_group
from exports.models import FieldGroup

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
BCF30 = "3.0"
LEGACY_INDEX_VERSIONS = frozenset({"2.0", "2.1"})

ALWAYS_AVAILABLE = ("sourceFile", "projectName", "bcfVersion")

# Topic field id -> Topic attribute for plain "non-empty" checks.
TOPIC_ATTRIBUTES = {
    "title": "title",
    "description": "description",
    "status": "status",
    "type": "type",
    "priority": "priority",
    "stage": "stage",
    "labels": "labels",
    "assignedTo": "assignedTo",
    "creationDate": "creationDate",
    "creationAuthor": "creationAuthor",
    "modifiedDate": "modifiedDate",
    "modifiedAuthor": "modifiedAuthor",
    "dueDate": "dueDate",
}

COMMENT_ATTRIBUTES = {
    "commentDate": "date",
    "commentAuthor": "author",
    "commentText": "comment",
}

BCF30_TOPIC_ATTRIBUTES = {
    "serverAssignedId": "serverAssignedId",
    "referenceLinks": "referenceLinks",
    "documentReferences": "documentReferences",
    "headerFiles": "headerFiles",
}

_PREFIX = re.compile(r"^(topic|comment)_")
_MARKER = re.compile(r"_(attr|element)_")
_WORD_START = re.compile(r"\b\w")


def _has_value(value: Any) -> bool:
    if isinstance(value, list | tuple | set | dict):
        return len(value) > 0
    return not is_blank(value)


def _in_vocabulary_order(found: set[str]) -> list[str]:
    return [field_id for field_id in ALL_FIELD_IDS if field_id in found]


def discover_available_fields(project_files: Iterable[ProjectFile]) -> AvailableFields:
    """
    Determine which vocabulary fields carry data anywhere in the input.

    A field is available when at least one record has a non-empty value for
    it. Source file, project name and BCF version are always available. BCF
    3.0 extension fields are only looked for in 3.0 files, and comment status
    only in files older than 3.0.

    Returns:
        AvailableFields: Field ids per group, each in vocabulary order, plus
        the distinct format versions seen in first-seen order.
    """
    topic_found: set[str] = set()
    comment_found: set[str] = set()
    metadata_found: set[str] = set(ALWAYS_AVAILABLE)
    bcf30_found: set[str] = set()
    has_coordinates = False
    versions: dict[str, None] = {}

    for project_file in project_files:
        bcf_format = project_file.format_version or "2.1"
        versions.setdefault(bcf_format, None)
        is_bcf30 = bcf_format == BCF30

        if bcf_format in LEGACY_INDEX_VERSIONS:
            topic_found.add("topicIndex")

        for topic in project_file.topics:
            for field_id, attribute in TOPIC_ATTRIBUTES.items():
                if field_id not in topic_found and _has_value(getattr(topic, attribute)):
                    topic_found.add(field_id)
            if topic.index is not None:
                topic_found.add("topicIndex")
            if topic.guid:
                metadata_found.add("topicGuid")

            if is_bcf30:
                for field_id, attribute in BCF30_TOPIC_ATTRIBUTES.items():
                    if _has_value(getattr(topic, attribute)):
                        bcf30_found.add(field_id)

            if topic.viewpoints:
                metadata_found.add("viewpointsCount")
                if any(has_coordinate_data(vp) for vp in topic.viewpoints):
                    has_coordinates = True
                if is_bcf30:
                    if any(vp.index is not None for vp in topic.viewpoints):
                        bcf30_found.add("viewpointIndex")
                    if any(vp.guid for vp in topic.viewpoints):
                        bcf30_found.add("viewpointGuid")

            if topic.comments:
                metadata_found.add("commentsCount")
                comment_found.add("commentNumber")
                for comment in topic.comments:
                    for field_id, attribute in COMMENT_ATTRIBUTES.items():
                        if _has_value(getattr(comment, attribute)):
                            comment_found.add(field_id)
                    # BCF 3.0 removed comment status
                    if not is_bcf30 and _has_value(comment.status):
                        comment_found.add("commentStatus")

    camera_ids: list[str] = []
    if has_coordinates:
        camera_ids = [
            *field_ids_for_group(FieldGroup.CAMERA),
            *field_ids_for_group(FieldGroup.LEGACY),
        ]

    available = AvailableFields(
        topic=_in_vocabulary_order(topic_found),
        comment=_in_vocabulary_order(comment_found),
        metadata=_in_vocabulary_order(metadata_found),
        bcf30=_in_vocabulary_order(bcf30_found),
        camera=camera_ids,
        bcf_versions=list(versions),
    )
    logger.info(
        "Field discovery complete: %d fields available across versions %s",
        available.total,
        available.bcf_versions,
    )
    return available


def make_display_name(field_name: str) -> str:
    """Turn a raw custom field key into a readable label.

    >>> make_display_name("topic_vendor_attr_zone_code")
    'Vendor Zone Code'
    """
    name = _PREFIX.sub("", field_name)
    name = _MARKER.sub(" ", name, count=1)
    name = name.replace("_", " ")
    return _WORD_START.sub(lambda match: match.group(0).upper(), name)


def categorize_custom_field(field_name: str) -> str:
    if "attr" in field_name:
        return "Attributes"
    if "namespace" in field_name:
        return "Vendor Extensions"
    if "element" in field_name:
        return "Custom Elements"
    if "comment" in field_name:
        return "Comment Extensions"
    return "Other Custom Fields"


def _accumulate(
    registry: dict[str, dict[str, Any]],
    custom_fields: Mapping[str, Any],
) -> None:
    for field_name, raw_value in custom_fields.items():
        if raw_value is None:
            continue
        value = str(raw_value).strip()
        if not value:
            continue
        entry = registry.setdefault(
            field_name,
            {"values": {}, "count": 0},
        )
        entry["values"].setdefault(value, None)
        entry["count"] += 1


def _to_entries(registry: dict[str, dict[str, Any]]) -> list[CustomFieldEntry]:
    return [
        CustomFieldEntry(
            field_name=field_name,
            display_name=make_display_name(field_name),
            category=categorize_custom_field(field_name),
            values=list(data["values"]),
            count=data["count"],
        )
        for field_name, data in registry.items()
    ]


def discover_custom_fields(project_files: Iterable[ProjectFile]) -> CustomFieldRegistry:
    """Catalog non-empty custom field entries on topics and comments."""
    topic_fields: dict[str, dict[str, Any]] = {}
    comment_fields: dict[str, dict[str, Any]] = {}

    for project_file in project_files:
        for topic in project_file.topics:
            _accumulate(topic_fields, topic.customFields)
            for comment in topic.comments:
                _accumulate(comment_fields, comment.customFields)

    registry = CustomFieldRegistry(
        topic_custom_fields=_to_entries(topic_fields),
        comment_custom_fields=_to_entries(comment_fields),
    )
    logger.info(
        "Discovered %d custom fields (%d topic, %d comment)",
        registry.total_custom_fields,
        len(registry.topic_custom_fields),
        len(registry.comment_custom_fields),
    )
    return registry


def summarize_project_files(project_files: Iterable[ProjectFile]) -> ExportSummary:
    """Count files, topics, comments and viewpoints and collect breakdowns."""
    files = 0
    topics = 0
    comments = 0
    viewpoints = 0
    names: dict[str, None] = {}
    versions: dict[str, None] = {}
    statuses: Counter[str] = Counter()
    priorities: Counter[str] = Counter()
    authors: Counter[str] = Counter()

    for project_file in project_files:
        files += 1
        if project_file.project.name:
            names.setdefault(project_file.project.name, None)
        if project_file.version:
            versions.setdefault(project_file.version, None)

        for topic in project_file.topics:
            topics += 1
            comments += len(topic.comments)
            viewpoints += len(topic.viewpoints)
            statuses[topic.status or UNKNOWN] += 1
            priorities[topic.priority or UNKNOWN] += 1
            authors[topic.creationAuthor or UNKNOWN] += 1

    return ExportSummary(
        files_processed=files,
        topic_count=topics,
        comment_count=comments,
        viewpoint_count=viewpoints,
        project_names=list(names),
        bcf_versions=list(versions),
        status_counts=dict(statuses),
        priority_counts=dict(priorities),
        author_counts=dict(authors),
    )


def analyze_value_usage(project_files: Iterable[ProjectFile]) -> ValueUsage:
    """Collect distinct status/type/priority/label/stage values."""
    status: dict[str, None] = {}
    topic_type: dict[str, None] = {}
    priority: dict[str, None] = {}
    labels: dict[str, None] = {}
    stage: dict[str, None] = {}
    has_extensions = False

    def add(target: dict[str, None], values: Iterable[Any]) -> None:
        for value in values:
            if not is_blank(value):
                target.setdefault(str(value).strip(), None)

    for project_file in project_files:
        extensions = project_file.extensions
        if extensions is not None:
            has_extensions = True
            add(status, extensions.topicStatus)
            add(topic_type, extensions.topicType)
            add(priority, extensions.priority)
            add(labels, extensions.topicLabel)
            add(stage, extensions.stage)

        for topic in project_file.topics:
            add(status, [topic.status])
            add(topic_type, [topic.type])
            add(priority, [topic.priority])
            add(stage, [topic.stage])
            add(labels, topic.labels)

    return ValueUsage(
        status=list(status),
        type=list(topic_type),
        priority=list(priority),
        labels=list(labels),
        stage=list(stage),
        has_extensions=has_extensions,
    )
