import pytest

from bcf.models import load_project_files
from core.exceptions import EmptyResultError, NoDataError
from exports.fields import ALL_FIELD_IDS, FIELDS_BY_ID, resolve_selection
from exports.models import RowType
from exports.services.row_flattener import (
    ensure_exportable,
    flatten_to_rows,
    flatten_topic,
    iter_topic_blocks,
)

SCENARIO_FIELDS = ["title", "status", "commentText", "CameraViewPointX"]


def test_roof_leak_scenario_rows(roof_leak_files) -> None:
    rows = flatten_to_rows(roof_leak_files, SCENARIO_FIELDS)

    assert [row.row_type for row in rows] == [
        RowType.TOPIC,
        RowType.COMMENT,
        RowType.COMMENT,
        RowType.VIEWPOINT,
    ]
    assert [row.number for row in rows] == ["1", "1.1", "1.2", "1.V1"]

    topic, first, second, viewpoint = rows
    assert topic.value("title") == "Leak in roof"
    assert topic.value("status") == "Open"
    assert topic.value("commentText") == ""
    assert topic.value("CameraViewPointX") == "1.235"

    assert first.value("commentText") == "First"
    assert second.value("commentText") == "Second"
    assert first.value("CameraViewPointX") == ""
    assert second.value("title") == ""

    assert viewpoint.value("CameraViewPointX") == "1.235"
    assert viewpoint.value("title") == ""


def test_every_row_carries_every_selected_field(mixed_files) -> None:
    rows = flatten_to_rows(mixed_files, None)

    for row in rows:
        assert row.field_ids == ALL_FIELD_IDS


def test_non_applicable_fields_are_empty(mixed_files) -> None:
    rows = flatten_to_rows(mixed_files, None)

    for row in rows:
        for field_id in ALL_FIELD_IDS:
            if not FIELDS_BY_ID[field_id].applies(row.row_type):
                assert row.value(field_id) == "", (row.number, field_id)


def test_comments_sorted_by_date_with_missing_dates_first(mixed_files) -> None:
    rows = flatten_to_rows(mixed_files, ["commentText", "commentDate"])
    comments = [row for row in rows if row.row_type is RowType.COMMENT]

    assert [row.number for row in comments] == ["1.1", "1.2"]
    assert [row.value("commentText") for row in comments] == ["No date here", "On it"]


def test_comment_sort_is_stable_for_ties() -> None:
    files = load_project_files(
        [
            {
                "topics": [
                    {
                        "comments": [
                            {"comment": "a", "date": "2024-01-01"},
                            {"comment": "b"},
                            {"comment": "c", "date": "2024-01-01"},
                            {"comment": "d"},
                        ],
                    },
                ],
            },
        ],
    )
    rows = flatten_to_rows(files, ["commentText"])
    assert [row.value("commentText") for row in rows[1:]] == ["b", "d", "a", "c"]


def test_no_viewpoint_rows_without_coordinate_selection(mixed_files) -> None:
    rows = flatten_to_rows(mixed_files, ["title", "viewpointsCount"])

    assert all(row.row_type is not RowType.VIEWPOINT for row in rows)
    assert rows[0].value("viewpointsCount") == 3


def test_viewpoint_rows_only_for_coordinate_viewpoints(mixed_files) -> None:
    rows = flatten_to_rows(mixed_files, ["cameraType", "viewpointGuid", "sourceFile"])
    viewpoints = [row for row in rows if row.row_type is RowType.VIEWPOINT]

    assert [row.number for row in viewpoints] == ["1.V1", "1.V2"]
    assert [row.value("viewpointGuid") for row in viewpoints] == ["vp-extra", "vp-main"]
    assert [row.value("cameraType") for row in viewpoints] == ["orthogonal", "perspective"]
    assert all(row.value("sourceFile") == "site.bcf" for row in viewpoints)


def test_topic_row_camera_comes_from_primary_viewpoint(mixed_files) -> None:
    fields = ["CameraViewPointX", "CameraViewPointZ", "FieldOfView", "cameraPosY", "ViewToWorldScale"]
    topic_row = flatten_to_rows(mixed_files, fields)[0]

    assert topic_row.value("CameraViewPointX") == "10.500"
    assert topic_row.value("CameraViewPointZ") == "3.142"
    assert topic_row.value("FieldOfView") == "60.000"
    assert topic_row.value("cameraPosY") == "2.000"
    assert topic_row.value("ViewToWorldScale") == ""


def test_topic_numbers_continue_across_files(mixed_files) -> None:
    rows = flatten_to_rows(mixed_files, ["title"])
    topic_rows = [row for row in rows if row.row_type is RowType.TOPIC]

    assert [row.number for row in topic_rows] == ["1", "2"]
    assert topic_rows[1].value("title") == "Missing door"


def test_topic_values_are_normalized(mixed_files) -> None:
    fields = [
        "description",
        "labels",
        "topicIndex",
        "commentsCount",
        "documentReferences",
        "headerFiles",
        "referenceLinks",
        "projectName",
        "bcfVersion",
    ]
    rows = flatten_to_rows(mixed_files, fields)
    first = rows[0]
    second = next(row for row in rows if row.number == "2")

    assert first.value("description") == "Duct hits beam on grid C"
    assert first.value("labels") == ("MEP", "Structure")
    assert first.value("topicIndex") == 4
    assert first.value("commentsCount") == 2
    assert second.value("commentsCount") == 0
    assert second.value("documentReferences") == (
        "Doc: doc-9 | Desc: Spec sheet | ID: ref-1",
        "URL: https://example.com/plan.pdf",
    )
    assert second.value("headerFiles") == ("arch.ifc (model/arch.ifc)", "Unknown (mep.ifc)")
    assert second.value("referenceLinks") == ("https://example.com/a", "https://example.com/b")
    assert second.value("bcfVersion") == "3.0"


def test_missing_project_name_and_version_fall_back_to_unknown() -> None:
    files = load_project_files([{"topics": [{"title": "x"}]}])
    row = flatten_to_rows(files, ["projectName", "bcfVersion", "sourceFile"])[0]

    assert row.value("projectName") == "Unknown"
    assert row.value("bcfVersion") == "Unknown"
    assert row.value("sourceFile") == ""


def test_topic_guid_appears_on_comment_rows(roof_leak_files) -> None:
    rows = flatten_to_rows(roof_leak_files, ["topicGuid", "commentNumber"])

    assert [row.value("topicGuid") for row in rows] == ["topic-1"] * 3
    assert rows[0].value("commentNumber") == ""
    assert rows[1].value("commentNumber") == 1
    assert rows[2].value("commentNumber") == 2


def test_rows_are_immutable_snapshots(roof_leak_files) -> None:
    row = flatten_to_rows(roof_leak_files, ["title"])[0]

    with pytest.raises(TypeError):
        row.values["title"] = "changed"  # type: ignore[index]


def test_ensure_exportable_errors(empty_topic_files) -> None:
    with pytest.raises(NoDataError):
        ensure_exportable([])
    with pytest.raises(NoDataError):
        ensure_exportable(None)
    with pytest.raises(EmptyResultError):
        ensure_exportable(empty_topic_files)


def test_flatten_to_rows_raises_before_output(empty_topic_files) -> None:
    with pytest.raises(NoDataError):
        flatten_to_rows([], ["title"])
    with pytest.raises(EmptyResultError):
        flatten_to_rows(empty_topic_files, ["title"])


def test_iter_topic_blocks_groups_rows(mixed_files) -> None:
    selection = resolve_selection(["title", "CameraViewPointX"])
    blocks = list(iter_topic_blocks(mixed_files, selection))

    assert len(blocks) == 2
    assert len(blocks[0].comment_rows) == 2
    assert len(blocks[0].viewpoint_rows) == 2
    assert blocks[1].rows() == [blocks[1].topic_row]


def test_flatten_topic_can_skip_viewpoints(roof_leak_files) -> None:
    selection = resolve_selection(SCENARIO_FIELDS)
    project_file = roof_leak_files[0]
    block = flatten_topic(
        project_file,
        project_file.topics[0],
        7,
        selection,
        include_viewpoints=False,
    )

    assert block.topic_row.number == "7"
    assert block.viewpoint_rows == ()
    assert block.topic_row.value("CameraViewPointX") == ""
