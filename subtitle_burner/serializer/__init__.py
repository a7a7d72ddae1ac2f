"""Project persistence formats: the bare state document and .sbp files."""

from subtitle_burner.serializer.project_serializer import (
    CURRENT_PROJECT_VERSION,
    ProjectFormatError,
    ProjectSerializer,
    UnsupportedProjectVersionError,
    VideoMetadata,
    collect_errors,
    project_state_from_dict,
    project_state_to_dict,
)

__all__ = [
    "CURRENT_PROJECT_VERSION",
    "ProjectFormatError",
    "ProjectSerializer",
    "UnsupportedProjectVersionError",
    "VideoMetadata",
    "collect_errors",
    "project_state_from_dict",
    "project_state_to_dict",
]
