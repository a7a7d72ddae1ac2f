"""Style validation: whitelist, clamp, or fall back to defaults.

WHY: Styles arrive from user input, templates shared by other users and
persisted project files, and end up in CSS previews and burned-in renders.
A bad value must never reach those consumers, and a bad value must never
freeze the editor either. So nothing here raises: each field is either
accepted, clamped into range, or replaced by its default.

HOW: sanitize_style() walks the known fields of SubtitleStyle. Numbers are
clamped, enums and fonts are checked against fixed sets, colors must pass
both the hex regex and the CSS-injection denylist.

RULES:
- Input may be a mapping (snake_case or camelCase keys), a SubtitleStyle,
  or None; unknown keys are dropped
- Numeric fields: non-numbers, booleans and NaN fall back to the default;
  everything else is clamped into its range
- Colors: #RGB, #RRGGBB or #RRGGBBAA and no denylisted pattern
- highlight_color / upcoming_color fall back to None
- sanitize_style(sanitize_style(x)) == sanitize_style(x)
"""

from __future__ import annotations

import dataclasses
import math
import re
from typing import Any, Dict, Mapping, Optional, Union

from subtitle_burner.core.models import (
    DEFAULT_SUBTITLE_STYLE,
    STYLE_FIELDS,
    SubtitleStyle,
    normalize_keys,
)

ALLOWED_FONT_FAMILIES = (
    "Arial",
    "Helvetica",
    "Inter",
    "Roboto",
    "Open Sans",
    "Montserrat",
    "Lato",
    "Oswald",
    "Poppins",
    "Source Sans Pro",
    "Noto Sans",
    "Ubuntu",
)

FONT_WEIGHTS = ("normal", "bold")
FONT_STYLES = ("normal", "italic")
ALIGNMENTS = ("left", "center", "right")

_HEX_COLOR_RE = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

# CSS/style injection vectors rejected in any color value.
_DANGEROUS_CSS_PATTERNS = (
    re.compile(r"expression\s*\(", re.IGNORECASE),
    re.compile(r"url\s*\(", re.IGNORECASE),
    re.compile(r"@import", re.IGNORECASE),
    re.compile(r"-moz-binding", re.IGNORECASE),
    re.compile(r"behavior\s*:", re.IGNORECASE),
    re.compile(r"javascript\s*:", re.IGNORECASE),
    re.compile(r"\\u[0-9a-f]", re.IGNORECASE),
    re.compile(r"[;{}]"),
)

# field -> (min, max)
NUMERIC_RANGES: Dict[str, tuple] = {
    "font_size": (8, 120),
    "background_opacity": (0, 1),
    "outline_width": (0, 20),
    "shadow_blur": (0, 50),
    "position": (0, 100),
    "line_height": (0.8, 3),
    "padding": (0, 50),
}

_COLOR_FIELDS = ("font_color", "background_color", "outline_color", "shadow_color")
_OPTIONAL_COLOR_FIELDS = ("highlight_color", "upcoming_color")

StyleInput = Union[SubtitleStyle, Mapping[str, Any], None]


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def is_valid_hex_color(value: Any) -> bool:
    return isinstance(value, str) and _HEX_COLOR_RE.match(value) is not None


def has_dangerous_css(value: str) -> bool:
    return any(pattern.search(value) for pattern in _DANGEROUS_CSS_PATTERNS)


def is_safe_color(value: Any) -> bool:
    """True when ``value`` is a hex color free of injection patterns."""
    return is_valid_hex_color(value) and not has_dangerous_css(value)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _as_mapping(style: StyleInput) -> Dict[str, Any]:
    if style is None:
        return {}
    if isinstance(style, SubtitleStyle):
        return dataclasses.asdict(style)
    return normalize_keys(style)


def sanitize_style(style: StyleInput = None) -> SubtitleStyle:
    """Validate and sanitize a (partial) style, returning a clean SubtitleStyle.

    Args:
        style: A partial style mapping, a full SubtitleStyle, or None.

    Returns:
        A SubtitleStyle where every field is within its documented range or
        allow-list. Absent and invalid fields take DEFAULT_SUBTITLE_STYLE's
        value.
    """
    raw = _as_mapping(style)
    base = DEFAULT_SUBTITLE_STYLE
    clean: Dict[str, Any] = {}

    font_family = raw.get("font_family")
    clean["font_family"] = font_family if font_family in ALLOWED_FONT_FAMILIES else base.font_family

    for name, (low, high) in NUMERIC_RANGES.items():
        value = raw.get(name)
        clean[name] = clamp(value, low, high) if _is_number(value) else getattr(base, name)

    for name in _COLOR_FIELDS:
        value = raw.get(name)
        clean[name] = value if is_safe_color(value) else getattr(base, name)

    for name in _OPTIONAL_COLOR_FIELDS:
        value = raw.get(name)
        clean[name] = value if is_safe_color(value) else None

    font_weight = raw.get("font_weight")
    clean["font_weight"] = font_weight if font_weight in FONT_WEIGHTS else base.font_weight
    font_style = raw.get("font_style")
    clean["font_style"] = font_style if font_style in FONT_STYLES else base.font_style
    alignment = raw.get("alignment")
    clean["alignment"] = alignment if alignment in ALIGNMENTS else base.alignment

    return SubtitleStyle(**{name: clean[name] for name in STYLE_FIELDS})


def merge_style(base: SubtitleStyle, patch: Optional[Mapping[str, Any]]) -> SubtitleStyle:
    """Apply a partial patch on top of ``base`` and sanitize the result."""
    merged = dataclasses.asdict(base)
    merged.update(normalize_keys(patch or {}))
    return sanitize_style(merged)
