from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from bcf.models import (
    AvailableFields,
    CustomFieldRegistry,
    ExportSummary,
    ProjectFile,
    ValueUsage,
)
from exports.constants import EXPORT_DEFAULT_FILENAME, ROW_TYPE_LABELS

FieldValue = str | int | tuple[str, ...]


class RowType(str, Enum):
    TOPIC = "topic"
    COMMENT = "comment"
    VIEWPOINT = "viewpoint"

    @property
    def label(self) -> str:
        return ROW_TYPE_LABELS[self.value]


class FieldKind(str, Enum):
    TEXT = "text"
    DATE = "date"
    LIST = "list"
    COUNT = "count"
    COORDINATE = "coordinate"


class FieldGroup(str, Enum):
    TOPIC = "topic"
    COMMENT = "comment"
    METADATA = "metadata"
    BCF30 = "bcf30"
    CAMERA = "camera"
    LEGACY = "legacy"


class FieldDescriptor(BaseModel):
    """One selectable export column, shared by both output formats."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    group: FieldGroup
    applies_to: frozenset[RowType]
    width: str = "default"
    source: str = ""
    sortable: bool = True

    def applies(self, row_type: RowType) -> bool:
        return row_type in self.applies_to

    @property
    def is_coordinate(self) -> bool:
        return self.group in (FieldGroup.CAMERA, FieldGroup.LEGACY)


def _freeze(value: Any) -> FieldValue:
    if value is None:
        return ""
    if isinstance(value, list | tuple):
        return tuple(str(item) for item in value)
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int | str):
        return value
    return str(value)


@dataclass(frozen=True, slots=True)
class FlatRow:
    """Immutable snapshot of one exported row.

    ``values`` holds an entry for every selected field, in selection order;
    fields that do not apply to the row type are present as "".
    """

    row_type: RowType
    number: str
    values: Mapping[str, FieldValue]

    @classmethod
    def build(
        cls,
        row_type: RowType,
        number: str,
        values: Mapping[str, Any],
    ) -> FlatRow:
        frozen = {field_id: _freeze(value) for field_id, value in values.items()}
        return cls(row_type, number, MappingProxyType(frozen))

    @property
    def field_ids(self) -> tuple[str, ...]:
        return tuple(self.values)

    def value(self, field_id: str) -> FieldValue:
        return self.values.get(field_id, "")


@dataclass(frozen=True, slots=True)
class TopicBlock:
    """Rows produced for one topic: its own row, then comments and viewpoints."""

    topic_row: FlatRow
    comment_rows: tuple[FlatRow, ...] = ()
    viewpoint_rows: tuple[FlatRow, ...] = ()

    def rows(self) -> list[FlatRow]:
        return [self.topic_row, *self.comment_rows, *self.viewpoint_rows]


_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


class ExportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_files: list[ProjectFile] = Field(
        default_factory=list,
        validation_alias=AliasChoices("projectFiles", "project_files"),
    )
    fields: list[str] | None = None
    filename: str | None = None

    @field_validator("fields", mode="before")
    @classmethod
    def _normalize_fields(cls, value: Any) -> list[str] | None:
        if value is None:
            return None
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list):
            return [str(item).strip() for item in value if item and str(item).strip()]
        return None

    @field_validator("filename", mode="before")
    @classmethod
    def _sanitize_filename(cls, value: Any) -> str | None:
        if not value:
            return None
        cleaned = _UNSAFE_FILENAME.sub("_", str(value)).strip("._")
        return cleaned or None

    @property
    def filename_base(self) -> str:
        return self.filename or EXPORT_DEFAULT_FILENAME


class ExportResult(BaseModel):
    csv: str | None = None
    xlsx: bytes | None = None
    records: dict[str, int] = Field(default_factory=dict)


class FieldDiscoveryResponse(BaseModel):
    """Field menu, custom field registry and totals for one input set."""

    available: AvailableFields
    custom_fields: CustomFieldRegistry
    value_usage: ValueUsage
    summary: ExportSummary
    fields: list[FieldDescriptor]
