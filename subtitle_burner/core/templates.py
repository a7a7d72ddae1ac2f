"""Built-in style presets and user template management.

WHY: Most users start from a preset ("Classic", "Neon", ...) rather than
styling from scratch, and save their own tweaks as reusable templates.
Templates travel between users, so their styles go through the sanitizer
on every way in and out.

HOW: Built-ins are DEFAULT_SUBTITLE_STYLE plus a few overrides, frozen at
import time. TemplateEngine offers stateless CRUD over a tuple of user
templates; lookups fall back to the built-ins.

RULES:
- Built-in templates can be looked up and applied but never updated or
  removed through the engine
- name is truncated to 100 characters, description to 500
- Every style stored or returned is sanitized
"""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Tuple

from subtitle_burner.core.models import DEFAULT_SUBTITLE_STYLE, SubtitleStyle
from subtitle_burner.core.style import merge_style, sanitize_style

MAX_TEMPLATE_NAME_LENGTH = 100
MAX_TEMPLATE_DESCRIPTION_LENGTH = 500

_BUILT_IN_TIMESTAMP = "2026-01-01T00:00:00Z"


class TemplateCategory(str, Enum):
    MINIMAL = "minimal"
    CINEMATIC = "cinematic"
    BOLD = "bold"
    MODERN = "modern"
    CUSTOM = "custom"


@dataclass(frozen=True)
class SubtitleTemplate:
    """A named, shareable style preset."""

    id: str
    name: str
    description: str
    style: SubtitleStyle
    category: TemplateCategory
    is_built_in: bool = False
    is_public: bool = False
    usage_count: int = 0
    created_at: str = _BUILT_IN_TIMESTAMP
    updated_at: str = _BUILT_IN_TIMESTAMP


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _built_in(
    template_id: str,
    name: str,
    description: str,
    category: TemplateCategory,
    **overrides: Any,
) -> SubtitleTemplate:
    return SubtitleTemplate(
        id=template_id,
        name=name,
        description=description,
        style=dataclasses.replace(DEFAULT_SUBTITLE_STYLE, **overrides),
        category=category,
        is_built_in=True,
        is_public=True,
    )


BUILT_IN_TEMPLATES: Tuple[SubtitleTemplate, ...] = (
    _built_in(
        "builtin-classic", "Classic", "White text with black outline", TemplateCategory.MINIMAL,
        font_family="Arial", font_size=24, font_color="#FFFFFF", outline_color="#000000",
        outline_width=2, background_color="#000000", background_opacity=0,
    ),
    _built_in(
        "builtin-cinematic", "Cinematic", "Large bold text with shadow", TemplateCategory.CINEMATIC,
        font_family="Montserrat", font_size=32, font_weight="bold", font_color="#FFFFFF",
        outline_width=0, shadow_blur=8, shadow_color="#000000", background_color="#000000",
        background_opacity=0, position=85,
    ),
    _built_in(
        "builtin-bold-box", "Bold Box", "Bold text in a solid box", TemplateCategory.BOLD,
        font_family="Inter", font_size=28, font_weight="bold", font_color="#FFFFFF",
        background_color="#000000", background_opacity=0.85, outline_width=0, padding=12,
    ),
    _built_in(
        "builtin-modern", "Modern", "Clean modern look", TemplateCategory.MODERN,
        font_family="Inter", font_size=26, font_color="#FFFFFF", background_color="#1a1a1a",
        background_opacity=0.6, outline_width=0, shadow_blur=4, padding=10, line_height=1.5,
    ),
    _built_in(
        "builtin-minimal-top", "Minimal Top", "Small text at the top", TemplateCategory.MINIMAL,
        font_family="Helvetica", font_size=20, font_color="#FFFFFF", background_color="#000000",
        background_opacity=0.5, outline_width=0, position=10, padding=6,
    ),
    _built_in(
        "builtin-neon", "Neon", "Bright colored text with glow", TemplateCategory.MODERN,
        font_family="Poppins", font_size=30, font_weight="bold", font_color="#00FF88",
        outline_color="#00FF88", outline_width=1, shadow_color="#00FF88", shadow_blur=12,
        background_color="#000000", background_opacity=0,
    ),
    _built_in(
        "builtin-yellow-box", "Yellow Box", "Yellow text on dark background", TemplateCategory.BOLD,
        font_family="Roboto", font_size=28, font_weight="bold", font_color="#FFD700",
        background_color="#1a1a1a", background_opacity=0.9, outline_width=0, padding=14,
    ),
    _built_in(
        "builtin-typewriter", "Typewriter", "Monospace retro look", TemplateCategory.CINEMATIC,
        font_family="Ubuntu", font_size=22, font_color="#E0E0E0", background_color="#000000",
        background_opacity=0.7, outline_width=0, line_height=1.6, padding=10,
    ),
)


class TemplateEngine:
    """Stateless template management over a tuple of user templates."""

    def __init__(self, id_factory=None) -> None:
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    @staticmethod
    def get_built_in_templates() -> Tuple[SubtitleTemplate, ...]:
        return BUILT_IN_TEMPLATES

    def create_template(
        self,
        name: str,
        style: Optional[Mapping[str, Any]] = None,
        description: str = "",
        category: TemplateCategory = TemplateCategory.CUSTOM,
    ) -> SubtitleTemplate:
        now = _now_iso()
        return SubtitleTemplate(
            id=self._id_factory(),
            name=name[:MAX_TEMPLATE_NAME_LENGTH],
            description=description[:MAX_TEMPLATE_DESCRIPTION_LENGTH],
            style=sanitize_style(style),
            category=TemplateCategory(category),
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def update_template(
        templates: Sequence[SubtitleTemplate],
        template_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        category: Optional[TemplateCategory] = None,
        is_public: Optional[bool] = None,
        style: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[SubtitleTemplate, ...]:
        """Patch a user template; built-ins and unknown ids are left alone."""
        result = []
        for template in templates:
            if template.id != template_id or template.is_built_in:
                result.append(template)
                continue
            changes: dict = {"updated_at": _now_iso()}
            if name is not None:
                changes["name"] = name[:MAX_TEMPLATE_NAME_LENGTH]
            if description is not None:
                changes["description"] = description[:MAX_TEMPLATE_DESCRIPTION_LENGTH]
            if category is not None:
                changes["category"] = TemplateCategory(category)
            if is_public is not None:
                changes["is_public"] = is_public
            if style is not None:
                changes["style"] = merge_style(template.style, style)
            result.append(dataclasses.replace(template, **changes))
        return tuple(result)

    @staticmethod
    def remove_template(
        templates: Sequence[SubtitleTemplate], template_id: str
    ) -> Tuple[SubtitleTemplate, ...]:
        return tuple(t for t in templates if t.id != template_id or t.is_built_in)

    @staticmethod
    def apply_template(template: SubtitleTemplate) -> SubtitleStyle:
        return sanitize_style(template.style)

    @staticmethod
    def merge_style_overrides(base: SubtitleStyle, overrides: Mapping[str, Any]) -> SubtitleStyle:
        return merge_style(base, overrides)

    @staticmethod
    def get_template_by_id(
        templates: Sequence[SubtitleTemplate], template_id: str
    ) -> Optional[SubtitleTemplate]:
        for template in list(templates) + list(BUILT_IN_TEMPLATES):
            if template.id == template_id:
                return template
        return None
