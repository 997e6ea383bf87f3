import pytest
from pydantic import ValidationError

from bcf.models import ProjectFile, Topic, load_project_files
from exports.fields import (
    ALL_FIELD_IDS,
    COORDINATE_FIELD_IDS,
    FIELD_LABELS,
    field_ids_for_group,
    has_coordinate_fields,
    resolve_selection,
)
from exports.models import ExportRequest, FieldGroup, FlatRow, RowType


def test_vocabulary_is_closed_and_labelled() -> None:
    assert len(ALL_FIELD_IDS) == len(set(ALL_FIELD_IDS))
    assert all(FIELD_LABELS[field_id] for field_id in ALL_FIELD_IDS)
    assert FIELD_LABELS["commentNumber"] == "Comment Number"
    assert FIELD_LABELS["cameraPosX"] == "Camera Position X (Legacy)"


def test_coordinate_fields_are_camera_and_legacy_groups() -> None:
    expected = set(field_ids_for_group(FieldGroup.CAMERA)) | set(
        field_ids_for_group(FieldGroup.LEGACY),
    )
    assert COORDINATE_FIELD_IDS == expected
    assert len(COORDINATE_FIELD_IDS) == 18


def test_resolve_selection_drops_unknown_and_duplicates() -> None:
    selection = resolve_selection(["status", "nope", "title", "status"])
    assert [d.id for d in selection] == ["status", "title"]
    assert not has_coordinate_fields(selection)
    assert has_coordinate_fields(resolve_selection(["cameraTargetY"]))


def test_resolve_selection_empty_means_everything() -> None:
    assert [d.id for d in resolve_selection(None)] == list(ALL_FIELD_IDS)
    assert [d.id for d in resolve_selection([])] == list(ALL_FIELD_IDS)


def test_flat_row_freezes_values() -> None:
    row = FlatRow.build(RowType.TOPIC, "1", {"labels": ["a"], "title": None, "flag": True})

    assert row.value("labels") == ("a",)
    assert row.value("title") == ""
    assert row.value("flag") == "True"
    assert row.value("missing") == ""
    assert row.row_type.label == "Topic"


def test_export_request_normalizes_fields_and_filename() -> None:
    request = ExportRequest.model_validate(
        {"projectFiles": [], "fields": "title, ,status", "filename": "../my report?"},
    )
    assert request.fields == ["title", "status"]
    assert request.filename_base == "my_report"

    assert ExportRequest().filename_base == "bcf_export"


def test_topic_accepts_parser_aliases() -> None:
    topic = Topic.model_validate(
        {
            "topicStatus": "Open",
            "topicType": "Issue",
            "labels": None,
            "referenceLinks": "https://example.com",
            "_customFields": {"k": "v"},
        },
    )
    assert topic.status == "Open"
    assert topic.type == "Issue"
    assert topic.labels == []
    assert topic.referenceLinks == ["https://example.com"]
    assert topic.customFields == {"k": "v"}


def test_project_file_defaults_and_format_version() -> None:
    project_file = ProjectFile.model_validate({"version": "3.0.1", "project": None, "topics": None})

    assert project_file.format_version == "3.0"
    assert project_file.project.name is None
    assert project_file.topics == []


def test_models_are_frozen() -> None:
    topic = Topic(title="x")
    with pytest.raises(ValidationError):
        topic.title = "y"


def test_load_project_files_passes_models_through() -> None:
    existing = ProjectFile(filename="a.bcf")
    loaded = load_project_files([existing, {"filename": "b.bcf"}])

    assert loaded[0] is existing
    assert loaded[1].filename == "b.bcf"
    assert load_project_files(None) == []
