import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from bcf.models import ProjectFile, load_project_files  # noqa: E402


def roof_leak_payload() -> dict:
    """One file, one topic, two out-of-order comments, one standard viewpoint."""
    return {
        "filename": "roof.bcfzip",
        "project": {"name": "Tower A", "projectId": "p-1"},
        "version": "2.1",
        "topics": [
            {
                "guid": "topic-1",
                "title": "Leak in roof",
                "status": "Open",
                "comments": [
                    {"guid": "c-2", "date": "2024-01-02T09:00:00Z", "author": "bob", "comment": "Second"},
                    {"guid": "c-1", "date": "2024-01-01T09:00:00Z", "author": "amy", "comment": "First"},
                ],
                "viewpoints": [
                    {
                        "guid": "vp-1",
                        "viewpointFile": "viewpoint.bcfv",
                        "CameraViewPoint": {"X": 1.23456, "Y": 0, "Z": None},
                    },
                ],
            },
        ],
    }


def mixed_payload() -> list[dict]:
    """A 2.1 file and a 3.0 file exercising every value kind."""
    return [
        {
            "filename": "site.bcf",
            "project": {"name": "Site"},
            "version": "2.1",
            "topics": [
                {
                    "guid": "t-a",
                    "title": "Clash, level 2",
                    "description": "Duct hits\nbeam   on grid C",
                    "topicStatus": "Open",
                    "topicType": "Clash",
                    "priority": "High",
                    "index": 4,
                    "labels": ["MEP", "  ", "Structure "],
                    "assignedTo": "amy@example.com",
                    "creationDate": "2024-03-05T10:00:00+00:00",
                    "creationAuthor": "amy",
                    "comments": [
                        {"date": "2024-03-06T08:00:00Z", "author": "bob", "comment": "On it", "status": "Active"},
                        {"author": "amy", "comment": "No date here"},
                    ],
                    "viewpoints": [
                        {
                            "guid": "vp-extra",
                            "viewpointFile": "alt.bcfv",
                            "cameraType": "orthogonal",
                            "CameraViewPoint": {"X": 9, "Y": 9, "Z": 9},
                            "ViewToWorldScale": 2,
                        },
                        {
                            "guid": "vp-main",
                            "viewpointFile": "Viewpoint.bcfv",
                            "cameraType": "perspective",
                            "CameraViewPoint": {"X": "10.5", "Y": -2, "Z": 3.14159},
                            "CameraDirection": {"X": 0, "Y": 1, "Z": 0},
                            "CameraUpVector": {"X": 0, "Y": 0, "Z": 1},
                            "FieldOfView": 60,
                            "cameraPosition": {"x": 1, "y": 2, "z": 3},
                        },
                        {"guid": "vp-empty", "viewpointFile": "snap.bcfv"},
                    ],
                    "_customFields": {"topic_vendor_attr_zone": "Z1"},
                },
            ],
        },
        {
            "filename": "hospital.bcfzip",
            "project": {"name": "Hospital"},
            "version": "3.0",
            "topics": [
                {
                    "guid": "t-b",
                    "title": "Missing door",
                    "status": "Closed",
                    "serverAssignedId": "ISSUE-7",
                    "referenceLinks": ["https://example.com/a", "https://example.com/b"],
                    "documentReferences": [
                        {"guid": "ref-1", "documentGuid": "doc-9", "description": "Spec sheet"},
                        {"url": "https://example.com/plan.pdf"},
                        {"description": "orphan"},
                    ],
                    "headerFiles": [
                        {"filename": "arch.ifc", "reference": "model/arch.ifc"},
                        {"reference": "mep.ifc"},
                    ],
                    "comments": [],
                    "viewpoints": [],
                },
            ],
        },
    ]


@pytest.fixture
def roof_leak_files() -> list[ProjectFile]:
    return load_project_files([roof_leak_payload()])


@pytest.fixture
def mixed_files() -> list[ProjectFile]:
    return load_project_files(mixed_payload())


@pytest.fixture
def empty_topic_files() -> list[ProjectFile]:
    return load_project_files([{"filename": "empty.bcf", "version": "2.1", "topics": []}])
