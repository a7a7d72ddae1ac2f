"""Pre-flight checks a render worker runs before burning subtitles in.

WHY: The engine normalizes silently while editing, but a render is an
expensive, user-visible job. Before one is queued the worker wants a plain
list of reasons the input cannot produce a sensible video.

HOW: validate_render_input() collects human-readable error strings for the
cues and the style and reports them together with a validity flag.

RULES:
- Never raises; an empty error list means valid
- Checks: at least one cue, no negative start, end after start, non-empty
  text, positive font size, position within 0-100
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from subtitle_burner.core.models import SubtitleCue, SubtitleStyle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderValidation:
    valid: bool
    errors: List[str] = field(default_factory=list)


def validate_render_input(cues: Sequence[SubtitleCue], style: SubtitleStyle) -> RenderValidation:
    """Check cues and style for problems that would spoil a render."""
    errors: List[str] = []

    if not cues:
        errors.append("No subtitle cues provided")

    for cue in cues:
        if cue.start_time < 0:
            errors.append(f"Cue {cue.id}: negative start time")
        if cue.end_time <= cue.start_time:
            errors.append(f"Cue {cue.id}: end time must be after start time")
        if not cue.text.strip():
            errors.append(f"Cue {cue.id}: empty text")

    if style.font_size <= 0:
        errors.append("Font size must be positive")
    if not 0 <= style.position <= 100:
        errors.append("Position must be between 0 and 100")

    if errors:
        logger.warning("Render input rejected with %d problem(s): %s", len(errors), "; ".join(errors))
    return RenderValidation(valid=not errors, errors=errors)
