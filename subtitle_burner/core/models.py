"""Immutable data model for cues, words, styles and project state.

WHY: Undo/redo only works if a state that was handed out can never change
afterwards. Every engine, action and renderer in this package consumes and
produces the records defined here, so they are the stable contract of the
editing engine.

HOW: Frozen dataclasses with tuple collections. Edits build new records with
dataclasses.replace and share every untouched cue with the previous state.
Each record converts to and from the camelCase dict shape of the persisted
project document (to_dict / from_dict).

RULES:
- Records are frozen; collections are tuples, never lists
- All times are float seconds
- SubtitleCue.id is assigned once (by the engine) and never changes
- Cues built by the engine satisfy end_time >= start_time + 0.1
- to_dict() omits optional fields that are None
- from_dict() accepts both camelCase and snake_case keys
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

_CAMEL_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")


def to_camel(name: str) -> str:
    """Convert a snake_case field name to the document's camelCase key."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_snake(name: str) -> str:
    """Convert a camelCase document key to a snake_case field name."""
    return _CAMEL_BOUNDARY_RE.sub("_", name).lower()


def normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``data`` with every key in snake_case."""
    return {to_snake(key): value for key, value in data.items()}


class AnimationStyle(str, Enum):
    """Per-word caption animation styles.

    Inherits from str so values compare equal to, and serialize as, the
    plain strings used in project documents.
    """

    NONE = "none"
    WORD_HIGHLIGHT = "word-highlight"
    WORD_BY_WORD = "word-by-word"
    KARAOKE = "karaoke"
    BOUNCE = "bounce"
    TYPEWRITER = "typewriter"

    @classmethod
    def parse(cls, value: Any) -> Optional["AnimationStyle"]:
        """Return the matching style, or None for absent/unknown values."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class SubtitleWord:
    """One spoken word with its timing inside a cue."""

    text: str
    start_time: float
    end_time: float

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "startTime": self.start_time, "endTime": self.end_time}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SubtitleWord":
        d = normalize_keys(data)
        return cls(
            text=str(d.get("text", "")),
            start_time=float(d.get("start_time", 0.0)),
            end_time=float(d.get("end_time", 0.0)),
        )


@dataclass(frozen=True)
class SubtitleCue:
    """A single subtitle entry: a time range, its text, optional word timing.

    WHY: The cue is the unit every editing operation works on. Word timing is
    optional because manually typed cues have none, while transcribed cues
    carry one SubtitleWord per spoken word.

    RULES:
    - id: unique within a project, immutable
    - start_time / end_time: float seconds, start inclusive, end exclusive
    - text: at most 500 characters, HTML and script stripped
    - words: None when the cue has no per-word timing
    - animation_style: None means static rendering
    """

    id: str
    start_time: float
    end_time: float
    text: str
    words: Optional[Tuple[SubtitleWord, ...]] = None
    animation_style: Optional[AnimationStyle] = None

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "text": self.text,
        }
        if self.words is not None:
            data["words"] = [w.to_dict() for w in self.words]
        if self.animation_style is not None:
            data["animationStyle"] = self.animation_style.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SubtitleCue":
        d = normalize_keys(data)
        words = d.get("words")
        return cls(
            id=str(d["id"]),
            start_time=float(d.get("start_time", 0.0)),
            end_time=float(d.get("end_time", 0.0)),
            text=str(d.get("text", "")),
            words=tuple(SubtitleWord.from_dict(w) for w in words) if words is not None else None,
            animation_style=AnimationStyle.parse(d.get("animation_style")),
        )


@dataclass(frozen=True)
class SubtitleStyle:
    """Visual style applied to every cue of a project.

    RULES:
    - Always produced through style.sanitize_style(), which guarantees the
      ranges and allow-lists documented there
    - position is a percentage from the top of the frame (0-100)
    - highlight_color / upcoming_color are only used by animated cues
    """

    font_family: str = "Arial"
    font_size: float = 24
    font_color: str = "#FFFFFF"
    font_weight: str = "normal"
    font_style: str = "normal"
    background_color: str = "#000000"
    background_opacity: float = 0.7
    outline_color: str = "#000000"
    outline_width: float = 2
    shadow_color: str = "#000000"
    shadow_blur: float = 4
    position: float = 90
    alignment: str = "center"
    line_height: float = 1.4
    padding: float = 8
    highlight_color: Optional[str] = None
    upcoming_color: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            data[to_camel(f.name)] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SubtitleStyle":
        """Read a persisted style; same as style.sanitize_style(data)."""
        from subtitle_burner.core.style import sanitize_style  # imports this module

        return sanitize_style(data)


DEFAULT_SUBTITLE_STYLE = SubtitleStyle()
"""The fallback for every style field that is absent or invalid."""

STYLE_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(SubtitleStyle))


@dataclass(frozen=True)
class ProjectState:
    """Everything an editing session owns: the cues, the style, the template.

    WHY: Actions transform one ProjectState into the next. Keeping the whole
    editable document in one frozen value lets the undo system hold on to
    snapshots and lets the persistence layer save exactly what is shown.

    RULES:
    - cues: tuple in display order (no implied sort)
    - active_template_id: the template last applied, or None
    """

    cues: Tuple[SubtitleCue, ...] = ()
    style: SubtitleStyle = field(default_factory=SubtitleStyle)
    active_template_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cues": [c.to_dict() for c in self.cues],
            "style": self.style.to_dict(),
            "activeTemplateId": self.active_template_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectState":
        """Read a persisted state document.

        Delegates to serializer.project_state_from_dict, which normalizes
        values and raises ProjectFormatError for a document of the wrong shape.
        """
        from subtitle_burner.serializer.project_serializer import project_state_from_dict

        return project_state_from_dict(data)
