"""Pydantic models for the parsed BCF object graph.

The container parser hands over one dict per BCF file. These models validate
that shape into immutable objects the export engine reads from. Field names
follow the BCF schema spelling (camelCase, upper-case camera vectors) so the
collaborator's output can be passed through unchanged.

Usage:
    from bcf.models import ProjectFile

    project_file = ProjectFile.model_validate(parsed_dict)
    for topic in project_file.topics:
        ...
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from exports.constants import UNKNOWN_VALUE

RawScalar = float | int | str | None


class BCFModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Vector3(BCFModel):
    """BCF camera vector; every component is independently nullable."""

    X: RawScalar = None
    Y: RawScalar = None
    Z: RawScalar = None

    def has_data(self) -> bool:
        return any(component is not None for component in (self.X, self.Y, self.Z))


class LegacyVector3(BCFModel):
    """Lower-case vector kept for files written by older parser versions."""

    x: RawScalar = None
    y: RawScalar = None
    z: RawScalar = None

    def has_data(self) -> bool:
        return any(component is not None for component in (self.x, self.y, self.z))


class Viewpoint(BCFModel):
    guid: str | None = None
    viewpointFile: str | None = None
    cameraType: str | None = None
    CameraViewPoint: Vector3 | None = None
    CameraDirection: Vector3 | None = None
    CameraUpVector: Vector3 | None = None
    FieldOfView: RawScalar = None
    ViewToWorldScale: RawScalar = None
    cameraPosition: LegacyVector3 | None = None
    cameraTarget: LegacyVector3 | None = None
    index: int | None = None


def _coerce_date(value: Any) -> Any:
    if isinstance(value, datetime | date):
        return value.isoformat()
    return value


class Comment(BCFModel):
    guid: str | None = None
    date: str | None = None
    author: str | None = None
    comment: str | None = None
    status: str | None = None
    viewpointGuid: str | None = None
    customFields: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("_customFields", "customFields"),
    )

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_string(cls, v: Any) -> Any:
        return _coerce_date(v)


class DocumentReference(BCFModel):
    guid: str | None = None
    documentGuid: str | None = None
    url: str | None = None
    description: str | None = None


class HeaderFile(BCFModel):
    filename: str | None = None
    reference: str | None = None
    ifcProject: str | None = None
    date: str | None = None


class Topic(BCFModel):
    """One BCF issue with its comments and viewpoints in container order."""

    guid: str | None = None
    title: str | None = None
    description: str | None = None
    status: str | None = Field(
        default=None,
        validation_alias=AliasChoices("status", "topicStatus"),
    )
    type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("type", "topicType"),
    )
    priority: str | None = None
    stage: str | None = None
    index: int | None = None
    labels: list[str] = Field(default_factory=list)
    assignedTo: str | None = None
    creationDate: str | None = None
    creationAuthor: str | None = None
    modifiedDate: str | None = None
    modifiedAuthor: str | None = None
    dueDate: str | None = None
    serverAssignedId: str | None = None
    comments: list[Comment] = Field(default_factory=list)
    viewpoints: list[Viewpoint] = Field(default_factory=list)
    referenceLinks: list[str] = Field(default_factory=list)
    documentReferences: list[DocumentReference] = Field(default_factory=list)
    headerFiles: list[HeaderFile] = Field(default_factory=list)
    customFields: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("_customFields", "customFields"),
    )

    @field_validator(
        "creationDate",
        "modifiedDate",
        "dueDate",
        mode="before",
    )
    @classmethod
    def _dates_to_string(cls, v: Any) -> Any:
        return _coerce_date(v)

    @field_validator(
        "labels",
        "referenceLinks",
        "comments",
        "viewpoints",
        "documentReferences",
        "headerFiles",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("referenceLinks", mode="before")
    @classmethod
    def _single_link_to_list(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v


class Project(BCFModel):
    name: str | None = None
    projectId: str | None = None


class ProjectExtensions(BCFModel):
    """Values declared by the container's extension schema."""

    topicStatus: list[str] = Field(default_factory=list)
    topicType: list[str] = Field(default_factory=list)
    priority: list[str] = Field(default_factory=list)
    topicLabel: list[str] = Field(default_factory=list)
    stage: list[str] = Field(default_factory=list)


class ProjectFile(BCFModel):
    """One parsed BCF source file."""

    filename: str | None = None
    project: Project = Field(default_factory=Project)
    version: str | None = None
    topics: list[Topic] = Field(default_factory=list)
    extensions: ProjectExtensions | None = None

    @field_validator("project", mode="before")
    @classmethod
    def _project_defaults(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("topics", mode="before")
    @classmethod
    def _topics_default(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("extensions", mode="before")
    @classmethod
    def _unwrap_custom_fields(cls, v: Any) -> Any:
        # Parser output nests declared values under "customFields".
        if isinstance(v, dict) and isinstance(v.get("customFields"), dict):
            return v["customFields"]
        return v

    @property
    def format_version(self) -> str:
        """Major.minor schema revision, e.g. "2.1" or "3.0"."""
        return (self.version or "")[:3]


def load_project_files(payload: list[Any] | None) -> list[ProjectFile]:
    """Validate raw parser output (dicts or models) into ProjectFile objects."""
    if not payload:
        return []
    return [
        item if isinstance(item, ProjectFile) else ProjectFile.model_validate(item)
        for item in payload
    ]


# --- Discovery results ---


class CustomFieldEntry(BaseModel):
    """A vendor/custom field observed in ``_customFields`` mappings."""

    field_name: str
    display_name: str
    category: str
    values: list[str] = Field(default_factory=list)
    count: int = 0


class CustomFieldRegistry(BaseModel):
    topic_custom_fields: list[CustomFieldEntry] = Field(default_factory=list)
    comment_custom_fields: list[CustomFieldEntry] = Field(default_factory=list)

    @property
    def total_custom_fields(self) -> int:
        return len(self.topic_custom_fields) + len(self.comment_custom_fields)


class AvailableFields(BaseModel):
    """Selectable field ids that carry data somewhere in the input set."""

    topic: list[str] = Field(default_factory=list)
    comment: list[str] = Field(default_factory=list)
    metadata: list[str] = Field(default_factory=list)
    bcf30: list[str] = Field(default_factory=list)
    camera: list[str] = Field(default_factory=list)
    bcf_versions: list[str] = Field(default_factory=list)

    @property
    def has_bcf30_content(self) -> bool:
        return "3.0" in self.bcf_versions

    @property
    def total(self) -> int:
        return (
            len(self.topic)
            + len(self.comment)
            + len(self.metadata)
            + len(self.bcf30)
            + len(self.camera)
        )

    def all_ids(self) -> list[str]:
        return [
            *self.topic,
            *self.comment,
            *self.metadata,
            *self.bcf30,
            *self.camera,
        ]


class ExportSummary(BaseModel):
    """Totals over a project file collection."""

    files_processed: int = 0
    topic_count: int = 0
    comment_count: int = 0
    viewpoint_count: int = 0
    project_names: list[str] = Field(default_factory=list)
    bcf_versions: list[str] = Field(default_factory=list)
    status_counts: dict[str, int] = Field(default_factory=dict)
    priority_counts: dict[str, int] = Field(default_factory=dict)
    author_counts: dict[str, int] = Field(default_factory=dict)

    @property
    def project_label(self) -> str:
        if not self.project_names:
            return UNKNOWN_VALUE
        if len(self.project_names) == 1:
            return self.project_names[0]
        return f"{len(self.project_names)} projects"

    @property
    def versions_label(self) -> str:
        return ", ".join(self.bcf_versions) or UNKNOWN_VALUE


class ValueUsage(BaseModel):
    """Distinct enumeration values seen in topics or declared by extensions."""

    status: list[str] = Field(default_factory=list)
    type: list[str] = Field(default_factory=list)
    priority: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    stage: list[str] = Field(default_factory=list)
    has_extensions: bool = False
