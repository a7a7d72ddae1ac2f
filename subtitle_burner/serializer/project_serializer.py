"""Read and write .sbp project files and the bare project-state document.

WHY: A project leaves the editor in two shapes. The persistence layer
stores the bare ``{cues, style, activeTemplateId}`` document that the
editor loads on start-up. Exported .sbp files wrap the same cues and style
with metadata about the source video, so a project can be re-opened
elsewhere or rendered through the API. Files come from users, so their
shape is checked before anything in them reaches the engine.

HOW: .sbp documents are plain dicts checked against a bundled JSON Schema
(schemas/sbp_project.schema.json) with jsonschema's Draft 7 validator.
Every violation is collected, not only the first, and the failing paths are
reported in one ProjectFormatError. Loading a state goes through
SubtitleEngine.set_cues and sanitize_style, which apply the editor's own
normalization.

RULES:
- Only version 1 exists; any other version raises
  UnsupportedProjectVersionError
- Serialized JSON is indented by two spaces; keys are camelCase
- Optional .sbp sections (template, renderSettings and optional metadata
  fields) are omitted when empty, never written as null
- project_state_from_dict() does no schema validation: values in the bare
  document are normalized, not rejected. Only a wrong shape raises
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import jsonschema

from subtitle_burner import __version__
from subtitle_burner.core.models import ProjectState, SubtitleCue, SubtitleStyle
from subtitle_burner.core.style import sanitize_style
from subtitle_burner.core.subtitle_engine import SubtitleEngine

logger = logging.getLogger(__name__)

CURRENT_PROJECT_VERSION = 1

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "sbp_project.schema.json"

_CACHED_VALIDATOR: Optional[jsonschema.Draft7Validator] = None


def _get_validator() -> jsonschema.Draft7Validator:
    """Load the .sbp schema once and cache a validator for it."""
    global _CACHED_VALIDATOR
    if _CACHED_VALIDATOR is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_VALIDATOR = jsonschema.Draft7Validator(json.load(f))
    return _CACHED_VALIDATOR


class ProjectFormatError(ValueError):
    """Raised when a project document does not have the expected shape.

    WHY: A broken file must fail loudly at the boundary instead of leaking
    half-parsed cues into the editor.

    HOW: Raised by ProjectSerializer.validate/deserialize/migrate and by
    project_state_from_dict for documents it cannot rehydrate.

    RULES:
    - errors lists every problem as "<path>: <message>"
    - <root> stands for the document itself
    """

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Invalid project document: {', '.join(self.errors)}")


class UnsupportedProjectVersionError(ValueError):
    """Raised when a project file declares a format version we cannot read."""

    def __init__(self, version: Any) -> None:
        self.version = version
        super().__init__(f"Unsupported .sbp version: {version}")


def _format_path(error: jsonschema.ValidationError) -> str:
    return "/".join(str(part) for part in error.absolute_path) or "<root>"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class VideoMetadata:
    """The source video a project was made for."""

    filename: str
    duration: float
    width: int
    height: int
    mime_type: str
    file_size: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "filename": self.filename,
            "duration": self.duration,
            "width": self.width,
            "height": self.height,
            "mimeType": self.mime_type,
        }
        if self.file_size is not None:
            data["fileSize"] = self.file_size
        return data


# ---------------------------------------------------------------------------
# Bare project-state document
# ---------------------------------------------------------------------------


def project_state_to_dict(state: ProjectState) -> Dict[str, Any]:
    """The ``{cues, style, activeTemplateId}`` document for a state."""
    return state.to_dict()


def project_state_from_dict(
    document: Mapping[str, Any],
    engine: Optional[SubtitleEngine] = None,
) -> ProjectState:
    """Rehydrate a ProjectState from a persisted document.

    Cue text is re-sanitized and the style passes through sanitize_style.
    Values are normalized, but a document whose sections have the wrong
    shape (cues that are not a list of objects, a cue without an id,
    a non-numeric time) cannot be rehydrated.

    Raises:
        ProjectFormatError: Naming the first section or cue that could not
            be read.
    """
    if not isinstance(document, Mapping):
        raise ProjectFormatError(["<root>: expected an object"])
    engine = engine or SubtitleEngine()

    raw_cues = document.get("cues") or ()
    if isinstance(raw_cues, (str, bytes, Mapping)) or not isinstance(raw_cues, Iterable):
        raise ProjectFormatError(["cues: expected an array"])
    cues: List[SubtitleCue] = []
    for index, raw in enumerate(raw_cues):
        if isinstance(raw, SubtitleCue):
            cues.append(raw)
            continue
        if not isinstance(raw, Mapping):
            raise ProjectFormatError([f"cues/{index}: expected an object"])
        try:
            cues.append(SubtitleCue.from_dict(raw))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ProjectFormatError([f"cues/{index}: {_describe(exc)}"]) from exc

    style = document.get("style")
    if style is not None and not isinstance(style, (Mapping, SubtitleStyle)):
        raise ProjectFormatError(["style: expected an object"])

    template_id = document.get("activeTemplateId", document.get("active_template_id"))
    return ProjectState(
        cues=engine.set_cues(cues),
        style=sanitize_style(style),
        active_template_id=template_id,
    )


def _describe(exc: Exception) -> str:
    if isinstance(exc, KeyError):
        return f"missing field {exc.args[0]!r}"
    return str(exc)


# ---------------------------------------------------------------------------
# .sbp files
# ---------------------------------------------------------------------------


class ProjectSerializer:
    """Serialize, parse and validate .sbp project documents."""

    def serialize(self, project: Mapping[str, Any]) -> str:
        return json.dumps(project, indent=2)

    def deserialize(self, content: str) -> Dict[str, Any]:
        """Parse JSON text and validate it as an .sbp document."""
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ProjectFormatError([f"<root>: not valid JSON ({exc.msg})"]) from exc
        return self.validate(parsed)

    def from_bytes(self, data: bytes) -> Dict[str, Any]:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ProjectFormatError(["<root>: not UTF-8 text"]) from exc
        return self.deserialize(text)

    def validate(self, data: Any) -> Dict[str, Any]:
        """Return ``data`` unchanged if it is a valid .sbp document.

        Raises:
            ProjectFormatError: With one entry per schema violation.
        """
        messages = collect_errors(data)
        if messages:
            logger.warning("Rejected .sbp document: %d problem(s)", len(messages))
            raise ProjectFormatError(messages)
        return data

    def is_valid(self, data: Any) -> bool:
        return _get_validator().is_valid(data)

    def migrate(self, data: Any) -> Dict[str, Any]:
        """Bring an older document up to the current version.

        Version 1 is the only version so far; it is validated and returned.
        """
        if not isinstance(data, Mapping):
            raise ProjectFormatError(["<root>: expected an object"])
        version = data.get("version")
        if version == CURRENT_PROJECT_VERSION and not isinstance(version, bool):
            return self.validate(dict(data))
        raise UnsupportedProjectVersionError(version)

    def create_project(
        self,
        name: str,
        video: VideoMetadata,
        cues: Sequence[SubtitleCue],
        style: SubtitleStyle,
        generated_by: str = "ui",
        template_id: Optional[str] = None,
        template_name: Optional[str] = None,
        render_preset: Optional[str] = None,
        source_video_hash: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build a version-1 .sbp document for the given cues and style.

        The template section is written only when both its id and name are
        known; renderSettings only when a preset is given.
        """
        now = _now_iso()
        metadata: Dict[str, Any] = {
            "name": name,
            "createdAt": now,
            "updatedAt": now,
            "appVersion": __version__,
            "generatedBy": generated_by,
            "sourceVideoFilename": video.filename,
        }
        if source_video_hash is not None:
            metadata["sourceVideoHash"] = source_video_hash

        project: Dict[str, Any] = {
            "version": CURRENT_PROJECT_VERSION,
            "metadata": metadata,
            "video": video.to_dict(),
            "cues": [cue.to_dict() for cue in cues],
            "style": style.to_dict(),
        }
        if template_id and template_name:
            project["template"] = {"id": template_id, "name": template_name}
        if render_preset:
            project["renderSettings"] = {"preset": render_preset}
        return project

    def create_project_from_state(
        self,
        name: str,
        video: VideoMetadata,
        state: ProjectState,
        template_name: Optional[str] = None,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        return self.create_project(
            name,
            video,
            state.cues,
            state.style,
            template_id=state.active_template_id,
            template_name=template_name,
            **kwargs,
        )

    def to_state(
        self,
        project: Mapping[str, Any],
        engine: Optional[SubtitleEngine] = None,
    ) -> ProjectState:
        """Open a validated .sbp document as an editing state."""
        template: Union[Mapping[str, Any], None] = project.get("template")
        return project_state_from_dict(
            {
                "cues": project.get("cues") or [],
                "style": project.get("style"),
                "activeTemplateId": template.get("id") if template else None,
            },
            engine=engine,
        )


def collect_errors(data: Any) -> List[str]:
    """Every schema violation in ``data`` as "<path>: <message>", no raising."""
    return [f"{_format_path(e)}: {e.message}" for e in _get_validator().iter_errors(data)]
