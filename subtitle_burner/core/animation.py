"""Per-word caption animation: what each word looks like at a given instant.

WHY: Animated captions (karaoke fill, bouncing words, typewriter reveal)
are drawn by the preview player on every tick and by the burn-in renderer
on every frame. Both need the same answer to "how does this cue look at
time t", so the answer is computed here, once, as plain data.

HOW: render_frame() checks that the cue is on screen, then dispatches on
the cue's animation style to a small per-style function. Each function maps
(word.start_time, word.end_time, current_time) to a WordSegment with
opacity, scale, vertical offset, color and a coarse state label.

RULES:
- Pure: no state, no I/O, only the returned frame is allocated
- Visible iff start_time <= t < end_time (same interval as get_cue_at_time)
- No words, or animation style none/absent: one static segment with the
  full cue text
- Word activity is half-open too: active iff word.start <= t < word.end
- Colors default to config.DEFAULT_HIGHLIGHT_COLOR / DEFAULT_UPCOMING_COLOR
  and can be overridden per call (usually from the project style)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Sequence, Tuple

from subtitle_burner import config
from subtitle_burner.core.models import AnimationStyle, SubtitleCue, SubtitleStyle, SubtitleWord

HIGHLIGHT_SCALE = 1.15
HIGHLIGHT_OFFSET_Y = -2.0
KARAOKE_ACTIVE_SCALE = 1.05
BOUNCE_DURATION = 0.3
BOUNCE_HIDDEN_OFFSET_Y = 20.0
TYPEWRITER_FADE_DURATION = 0.1


class SegmentState(str, Enum):
    """Coarse render state of a segment, for CSS classes and tests."""

    NORMAL = "normal"
    HIGHLIGHTED = "highlighted"
    HIDDEN = "hidden"
    ACTIVE = "active"


@dataclass(frozen=True)
class WordSegment:
    """One drawable piece of a caption (a word, or the whole static text)."""

    text: str
    style: SegmentState
    opacity: float = 1.0
    scale: float = 1.0
    offset_y: float = 0.0
    color: Optional[str] = None


@dataclass(frozen=True)
class AnimatedCaptionFrame:
    """Everything needed to draw one cue at one instant. Never persisted."""

    visible: bool
    segments: Tuple[WordSegment, ...] = ()


EMPTY_FRAME = AnimatedCaptionFrame(visible=False, segments=())

CAPTION_ANIMATION_STYLES: Tuple[AnimationStyle, ...] = tuple(AnimationStyle)

_DISPLAY_NAMES = {
    AnimationStyle.NONE: "Static",
    AnimationStyle.WORD_HIGHLIGHT: "Word Highlight",
    AnimationStyle.WORD_BY_WORD: "Word by Word",
    AnimationStyle.KARAOKE: "Karaoke",
    AnimationStyle.BOUNCE: "Bounce",
    AnimationStyle.TYPEWRITER: "Typewriter",
}


def get_animation_style_display_name(style: str) -> str:
    """Human-readable label for an animation style; unknown values echo back."""
    parsed = AnimationStyle.parse(style)
    return _DISPLAY_NAMES[parsed] if parsed is not None else str(style)


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def ease_out_bounce(t: float) -> float:
    """Standard four-segment ease-out-bounce curve for t in [0, 1]."""
    n1 = 7.5625
    d1 = 2.75
    if t < 1 / d1:
        return n1 * t * t
    if t < 2 / d1:
        t -= 1.5 / d1
        return n1 * t * t + 0.75
    if t < 2.5 / d1:
        t -= 2.25 / d1
        return n1 * t * t + 0.9375
    t -= 2.625 / d1
    return n1 * t * t + 0.984375


def _is_active(word: SubtitleWord, t: float) -> bool:
    return word.start_time <= t < word.end_time


def _render_static(cue: SubtitleCue) -> AnimatedCaptionFrame:
    return AnimatedCaptionFrame(
        visible=True,
        segments=(WordSegment(text=cue.text, style=SegmentState.NORMAL),),
    )


def _render_word_highlight(
    words: Sequence[SubtitleWord], t: float, highlight: str, upcoming: Optional[str]
) -> AnimatedCaptionFrame:
    segments = []
    for word in words:
        if _is_active(word, t):
            segments.append(WordSegment(
                text=word.text,
                style=SegmentState.HIGHLIGHTED,
                scale=HIGHLIGHT_SCALE,
                offset_y=HIGHLIGHT_OFFSET_Y,
                color=highlight,
            ))
        else:
            segments.append(WordSegment(
                text=word.text,
                style=SegmentState.NORMAL,
                color=upcoming if t < word.start_time else None,
            ))
    return AnimatedCaptionFrame(visible=True, segments=tuple(segments))


def _render_word_by_word(words: Sequence[SubtitleWord], t: float) -> AnimatedCaptionFrame:
    for word in words:
        if _is_active(word, t):
            return AnimatedCaptionFrame(
                visible=True,
                segments=(WordSegment(text=word.text, style=SegmentState.ACTIVE),),
            )
    last = words[-1]
    if t >= last.end_time:
        # Hold the final word instead of blanking before the cue ends.
        return AnimatedCaptionFrame(
            visible=True,
            segments=(WordSegment(text=last.text, style=SegmentState.NORMAL),),
        )
    return EMPTY_FRAME


def _render_karaoke(
    words: Sequence[SubtitleWord], t: float, highlight: str, upcoming: str
) -> AnimatedCaptionFrame:
    segments = []
    for word in words:
        if t < word.start_time:
            segments.append(WordSegment(text=word.text, style=SegmentState.NORMAL, color=upcoming))
        elif t >= word.end_time:
            segments.append(WordSegment(text=word.text, style=SegmentState.HIGHLIGHTED, color=highlight))
        else:
            duration = word.end_time - word.start_time
            progress = clamp((t - word.start_time) / duration if duration > 0 else 1.0, 0.0, 1.0)
            pct = f"{progress * 100:g}%"
            segments.append(WordSegment(
                text=word.text,
                style=SegmentState.ACTIVE,
                scale=KARAOKE_ACTIVE_SCALE,
                color=f"linear-gradient(90deg, {highlight} {pct}, {upcoming} {pct})",
            ))
    return AnimatedCaptionFrame(visible=True, segments=tuple(segments))


def _render_bounce(words: Sequence[SubtitleWord], t: float) -> AnimatedCaptionFrame:
    segments = []
    for word in words:
        if t < word.start_time:
            segments.append(WordSegment(
                text=word.text,
                style=SegmentState.HIDDEN,
                opacity=0.0,
                scale=0.0,
                offset_y=BOUNCE_HIDDEN_OFFSET_Y,
            ))
            continue
        eased = ease_out_bounce(clamp((t - word.start_time) / BOUNCE_DURATION, 0.0, 1.0))
        segments.append(WordSegment(
            text=word.text,
            style=SegmentState.ACTIVE if _is_active(word, t) else SegmentState.NORMAL,
            opacity=eased,
            scale=0.5 + eased * 0.5,
            offset_y=BOUNCE_HIDDEN_OFFSET_Y * (1 - eased),
        ))
    return AnimatedCaptionFrame(visible=True, segments=tuple(segments))


def _render_typewriter(words: Sequence[SubtitleWord], t: float) -> AnimatedCaptionFrame:
    shown = [w for w in words if t >= w.start_time]
    if not shown:
        return EMPTY_FRAME
    last_index = len(shown) - 1
    segments = tuple(
        WordSegment(
            text=word.text,
            style=SegmentState.NORMAL,
            opacity=(
                clamp((t - word.start_time) / TYPEWRITER_FADE_DURATION, 0.0, 1.0)
                if index == last_index
                else 1.0
            ),
        )
        for index, word in enumerate(shown)
    )
    return AnimatedCaptionFrame(visible=True, segments=segments)


def color_overrides_from_style(style: SubtitleStyle) -> dict:
    """Pick the animation colors a project style sets, if any."""
    return {"highlight_color": style.highlight_color, "upcoming_color": style.upcoming_color}


def render_frame(
    cue: SubtitleCue,
    current_time: float,
    color_overrides: Optional[Mapping[str, Optional[str]]] = None,
) -> AnimatedCaptionFrame:
    """Render ``cue`` at ``current_time``.

    Args:
        cue: The cue to draw.
        current_time: Playback position in seconds.
        color_overrides: Optional ``highlight_color`` / ``upcoming_color``;
            None values fall back to the configured defaults.

    Returns:
        The frame: visibility plus one segment per drawn word (or a single
        static segment).
    """
    if not cue.start_time <= current_time < cue.end_time:
        return EMPTY_FRAME

    style = cue.animation_style or AnimationStyle.NONE
    if not cue.words or style == AnimationStyle.NONE:
        return _render_static(cue)

    overrides = color_overrides or {}
    highlight = overrides.get("highlight_color") or config.DEFAULT_HIGHLIGHT_COLOR
    upcoming = overrides.get("upcoming_color") or config.DEFAULT_UPCOMING_COLOR

    if style == AnimationStyle.WORD_HIGHLIGHT:
        return _render_word_highlight(cue.words, current_time, highlight, upcoming)
    if style == AnimationStyle.WORD_BY_WORD:
        return _render_word_by_word(cue.words, current_time)
    if style == AnimationStyle.KARAOKE:
        return _render_karaoke(cue.words, current_time, highlight, upcoming)
    if style == AnimationStyle.BOUNCE:
        return _render_bounce(cue.words, current_time)
    if style == AnimationStyle.TYPEWRITER:
        return _render_typewriter(cue.words, current_time)
    return _render_static(cue)
