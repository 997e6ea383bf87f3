"""Primary viewpoint selection and coordinate-data checks for BCF topics."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bcf.models import Topic, Viewpoint

logger = logging.getLogger(__name__)

STANDARD_VIEWPOINT_FILE = "viewpoint.bcfv"
GENERIC_VIEWPOINT_GUID = "viewpoint-generic"


def is_standard_viewpoint(viewpoint: Viewpoint) -> bool:
    """True for the container's main ``viewpoint.bcfv`` (or the generic sentinel)."""
    if viewpoint.guid == GENERIC_VIEWPOINT_GUID:
        return True
    filename = viewpoint.viewpointFile or ""
    return STANDARD_VIEWPOINT_FILE in filename.lower()


def has_camera_data(viewpoint: Viewpoint) -> bool:
    """Camera markers used when ranking viewpoints for the primary slot."""
    if viewpoint.cameraType:
        return True
    if viewpoint.CameraViewPoint is not None and viewpoint.CameraViewPoint.has_data():
        return True
    for legacy in (viewpoint.cameraPosition, viewpoint.cameraTarget):
        if legacy is not None and legacy.has_data():
            return True
    return False


def has_coordinate_data(viewpoint: Viewpoint) -> bool:
    """Broad check over every coordinate-bearing property of a viewpoint."""
    if viewpoint.cameraType:
        return True
    for vector in (
        viewpoint.CameraViewPoint,
        viewpoint.CameraDirection,
        viewpoint.CameraUpVector,
        viewpoint.cameraPosition,
        viewpoint.cameraTarget,
    ):
        if vector is not None and vector.has_data():
            return True
    return viewpoint.FieldOfView is not None or viewpoint.ViewToWorldScale is not None


def resolve_primary_viewpoint(topic: Topic) -> Viewpoint | None:
    """
    Pick the single viewpoint whose camera represents the topic.

    Priority, first match wins:
    1. the standard ``viewpoint.bcfv`` file (or the ``viewpoint-generic`` GUID)
    2. the first viewpoint carrying any camera data
    3. the first viewpoint in container order

    Returns None only when the topic has no viewpoints.
    """
    viewpoints = topic.viewpoints
    if not viewpoints:
        return None

    for viewpoint in viewpoints:
        if is_standard_viewpoint(viewpoint):
            logger.debug(
                "Primary viewpoint for topic %s: standard file (%s)",
                topic.guid,
                viewpoint.guid,
            )
            return viewpoint

    for viewpoint in viewpoints:
        if has_camera_data(viewpoint):
            logger.debug(
                "Primary viewpoint for topic %s: first with camera data (%s)",
                topic.guid,
                viewpoint.guid,
            )
            return viewpoint

    logger.debug(
        "Primary viewpoint for topic %s: fallback to first of %d",
        topic.guid,
        len(viewpoints),
    )
    return viewpoints[0]


def coordinate_viewpoints(topic: Topic) -> list[Viewpoint]:
    """Viewpoints that qualify for their own export rows, in container order."""
    return [vp for vp in topic.viewpoints if has_coordinate_data(vp)]
