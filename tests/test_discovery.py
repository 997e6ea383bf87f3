from bcf.discovery import (
    analyze_value_usage,
    categorize_custom_field,
    discover_available_fields,
    discover_custom_fields,
    make_display_name,
    summarize_project_files,
)
from bcf.models import load_project_files


def test_discover_available_fields_on_mixed_versions(mixed_files) -> None:
    available = discover_available_fields(mixed_files)

    assert available.bcf_versions == ["2.1", "3.0"]
    assert available.has_bcf30_content
    assert available.topic == [
        "title",
        "description",
        "status",
        "type",
        "priority",
        "topicIndex",
        "labels",
        "assignedTo",
        "creationDate",
        "creationAuthor",
    ]
    assert available.comment == [
        "commentNumber",
        "commentDate",
        "commentAuthor",
        "commentText",
        "commentStatus",
    ]
    assert available.metadata == [
        "sourceFile",
        "projectName",
        "bcfVersion",
        "topicGuid",
        "commentsCount",
        "viewpointsCount",
    ]
    assert available.bcf30 == [
        "serverAssignedId",
        "referenceLinks",
        "documentReferences",
        "headerFiles",
    ]
    assert "CameraViewPointX" in available.camera
    assert "cameraTargetZ" in available.camera


def test_metadata_is_always_available_and_camera_needs_coordinates() -> None:
    files = load_project_files(
        [{"version": "3.0", "topics": [{"title": "t", "viewpoints": [{"guid": "v"}]}]}],
    )
    available = discover_available_fields(files)

    assert available.metadata == ["sourceFile", "projectName", "bcfVersion", "viewpointsCount"]
    assert available.camera == []
    assert available.bcf30 == ["viewpointGuid"]
    assert "topicIndex" not in available.topic


def test_comment_status_is_ignored_in_bcf30_files() -> None:
    files = load_project_files(
        [
            {
                "version": "3.0",
                "topics": [{"comments": [{"comment": "x", "status": "Active"}]}],
            },
        ],
    )
    assert "commentStatus" not in discover_available_fields(files).comment


def test_make_display_name() -> None:
    assert make_display_name("topic_vendor_attr_zone_code") == "Vendor Zone Code"
    assert make_display_name("comment_review_element_state") == "Review State"
    assert make_display_name("plain") == "Plain"


def test_categorize_custom_field() -> None:
    assert categorize_custom_field("topic_vendor_attr_zone") == "Attributes"
    assert categorize_custom_field("x_namespace_y") == "Vendor Extensions"
    assert categorize_custom_field("topic_element_y") == "Custom Elements"
    assert categorize_custom_field("comment_extra") == "Comment Extensions"
    assert categorize_custom_field("misc") == "Other Custom Fields"


def test_discover_custom_fields_tracks_values_and_counts() -> None:
    files = load_project_files(
        [
            {
                "topics": [
                    {"_customFields": {"topic_vendor_attr_zone": "Z1", "blank": "  "}},
                    {
                        "_customFields": {"topic_vendor_attr_zone": " Z1 "},
                        "comments": [{"_customFields": {"comment_mood": "ok"}}],
                    },
                    {"_customFields": {"topic_vendor_attr_zone": "Z2"}},
                ],
            },
        ],
    )
    registry = discover_custom_fields(files)

    assert registry.total_custom_fields == 2
    zone = registry.topic_custom_fields[0]
    assert zone.field_name == "topic_vendor_attr_zone"
    assert zone.display_name == "Vendor Zone"
    assert zone.category == "Attributes"
    assert zone.values == ["Z1", "Z2"]
    assert zone.count == 3

    mood = registry.comment_custom_fields[0]
    assert mood.display_name == "Mood"
    assert mood.category == "Comment Extensions"


def test_summarize_project_files(mixed_files) -> None:
    summary = summarize_project_files(mixed_files)

    assert summary.files_processed == 2
    assert summary.topic_count == 2
    assert summary.comment_count == 2
    assert summary.viewpoint_count == 3
    assert summary.project_names == ["Site", "Hospital"]
    assert summary.project_label == "2 projects"
    assert summary.versions_label == "2.1, 3.0"
    assert summary.status_counts == {"Open": 1, "Closed": 1}
    assert summary.priority_counts == {"High": 1, "Unknown": 1}


def test_single_project_label(roof_leak_files) -> None:
    assert summarize_project_files(roof_leak_files).project_label == "Tower A"


def test_analyze_value_usage_merges_extensions() -> None:
    files = load_project_files(
        [
            {
                "extensions": {"customFields": {"topicStatus": ["Open", "Parked"], "topicLabel": ["MEP"]}},
                "topics": [{"status": "Open", "type": "Clash", "labels": ["Arch"]}],
            },
        ],
    )
    usage = analyze_value_usage(files)

    assert usage.has_extensions
    assert usage.status == ["Open", "Parked"]
    assert usage.type == ["Clash"]
    assert usage.labels == ["MEP", "Arch"]
    assert usage.stage == []
