"""Stateless cue management: add, update, split, merge, shift and query.

WHY: Every edit the user makes to the subtitle timeline ends up here. The
undo system needs the previous cue collection to stay valid after an edit,
so nothing in this module mutates its input: each operation returns a new
tuple and shares the untouched cue records with the old one.

HOW: SubtitleEngine is a small class whose only state is the injected id
factory. Its methods take the current cue collection and return the next.
Intervals are half-open: a cue covers [start_time, end_time).

RULES:
- Inputs are never mutated; outputs are tuples
- New cues: start_time clamped to >= 0, end_time forced to >= start + 0.1,
  text sanitized (script blocks, then tags, then 500-char truncation)
- add_cue appends; nothing auto-sorts except sort_cues/get_overlaps/get_gaps
- Touching cues (start == previous end) do not overlap
- Invalid requests (unknown id, split outside the cue, fewer than two
  mergeable ids) return the input unchanged and log a DEBUG diagnostic
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from subtitle_burner.core.models import AnimationStyle, SubtitleCue, SubtitleWord, normalize_keys

logger = logging.getLogger(__name__)

MAX_CUE_TEXT_LENGTH = 500
MIN_CUE_DURATION = 0.1

_SCRIPT_BLOCK_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")

# Fields a cue patch may touch; "id" is deliberately absent.
PATCHABLE_FIELDS = ("start_time", "end_time", "text", "words", "animation_style")

Cues = Tuple[SubtitleCue, ...]


def sanitize_text(text: str) -> str:
    """Strip script blocks and HTML tags, then truncate to 500 characters."""
    if not isinstance(text, str):
        text = "" if text is None else str(text)
    cleaned = _SCRIPT_BLOCK_RE.sub("", text)
    cleaned = _TAG_RE.sub("", cleaned)
    return cleaned[:MAX_CUE_TEXT_LENGTH]


def _new_id() -> str:
    return str(uuid.uuid4())


def _coerce_words(words: Optional[Iterable[Any]]) -> Optional[Tuple[SubtitleWord, ...]]:
    if words is None:
        return None
    return tuple(w if isinstance(w, SubtitleWord) else SubtitleWord.from_dict(w) for w in words)


@dataclass(frozen=True)
class CueGap:
    """A silence between two adjacent cues (in start-time order)."""

    after_cue_id: str
    gap_seconds: float


class SubtitleEngine:
    """Pure operations over an ordered collection of SubtitleCue records.

    Args:
        id_factory: Callable returning a fresh unique cue id. Defaults to
            UUID4 strings; tests inject a deterministic counter.
    """

    def __init__(self, id_factory: Optional[Callable[[], str]] = None) -> None:
        self._id_factory = id_factory or _new_id

    def new_id(self) -> str:
        return self._id_factory()

    # ------------------------------------------------------------------
    # Creation / removal / update
    # ------------------------------------------------------------------

    def add_cue(
        self,
        cues: Sequence[SubtitleCue],
        start_time: float,
        end_time: float,
        text: str,
        words: Optional[Iterable[Any]] = None,
        animation_style: Optional[AnimationStyle] = None,
        cue_id: Optional[str] = None,
    ) -> Cues:
        """Append a new cue built from the given fields.

        ``cue_id`` pins the id instead of drawing one from the factory; the
        action layer uses it so that redoing an add recreates the same cue.
        """
        start = max(0.0, start_time)
        cue = SubtitleCue(
            id=cue_id or self._id_factory(),
            start_time=start,
            end_time=max(start + MIN_CUE_DURATION, end_time),
            text=sanitize_text(text),
            words=_coerce_words(words),
            animation_style=AnimationStyle.parse(animation_style),
        )
        return tuple(cues) + (cue,)

    def remove_cue(self, cues: Sequence[SubtitleCue], cue_id: str) -> Cues:
        remaining = tuple(c for c in cues if c.id != cue_id)
        if len(remaining) == len(cues):
            logger.debug("remove_cue: no cue with id %s; nothing removed", cue_id)
        return remaining

    def update_cue(
        self,
        cues: Sequence[SubtitleCue],
        cue_id: str,
        patch: Mapping[str, Any],
    ) -> Cues:
        """Merge ``patch`` into the cue with ``cue_id``.

        RULES:
        - Keys may be snake_case or camelCase; unknown keys and "id" are ignored
        - text is re-sanitized
        - start_time is clamped to >= 0
        - end_time is kept >= start + 0.1 relative to the (new) start, even
          when the patch only moves the start
        """
        changes = {k: v for k, v in normalize_keys(patch).items() if k in PATCHABLE_FIELDS}
        found = False
        result: List[SubtitleCue] = []
        for cue in cues:
            if cue.id != cue_id:
                result.append(cue)
                continue
            found = True
            result.append(self._apply_patch(cue, changes))
        if not found:
            logger.debug("update_cue: no cue with id %s; nothing updated", cue_id)
        return tuple(result)

    @staticmethod
    def _apply_patch(cue: SubtitleCue, changes: Mapping[str, Any]) -> SubtitleCue:
        updates = dict(changes)
        if "text" in updates:
            updates["text"] = sanitize_text(updates["text"])
        if "words" in updates:
            updates["words"] = _coerce_words(updates["words"])
        if "animation_style" in updates:
            updates["animation_style"] = AnimationStyle.parse(updates["animation_style"])
        start = max(0.0, updates.get("start_time", cue.start_time))
        end = updates.get("end_time", cue.end_time)
        if "start_time" in updates or "end_time" in updates:
            updates["start_time"] = start
            updates["end_time"] = max(start + MIN_CUE_DURATION, end)
        return replace(cue, **updates)

    def set_cues(self, cues: Iterable[Any]) -> Cues:
        """Rehydrate cues handed over by the persistence layer.

        Accepts SubtitleCue records or document dicts; only the text is
        re-sanitized, timing is taken as stored.
        """
        result = []
        for cue in cues:
            if not isinstance(cue, SubtitleCue):
                cue = SubtitleCue.from_dict(cue)
            result.append(replace(cue, text=sanitize_text(cue.text)))
        return tuple(result)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def sort_cues(cues: Sequence[SubtitleCue]) -> Cues:
        """Stable sort by start_time ascending."""
        return tuple(sorted(cues, key=lambda c: c.start_time))

    @staticmethod
    def get_cue_by_id(cues: Sequence[SubtitleCue], cue_id: str) -> Optional[SubtitleCue]:
        for cue in cues:
            if cue.id == cue_id:
                return cue
        return None

    @staticmethod
    def get_cue_at_time(cues: Sequence[SubtitleCue], time: float) -> Cues:
        """All cues active at ``time`` (start inclusive, end exclusive)."""
        return tuple(c for c in cues if c.start_time <= time < c.end_time)

    def get_overlaps(self, cues: Sequence[SubtitleCue]) -> List[Tuple[str, str]]:
        """Id pairs of overlapping cues, earlier-starting cue first.

        Sweeps the start-sorted list; for each cue, every later cue that
        starts before it ends is an overlap. Touching cues are not.
        """
        ordered = self.sort_cues(cues)
        overlaps: List[Tuple[str, str]] = []
        for i, earlier in enumerate(ordered):
            for later in ordered[i + 1:]:
                if later.start_time >= earlier.end_time:
                    break
                overlaps.append((earlier.id, later.id))
        return overlaps

    def get_gaps(self, cues: Sequence[SubtitleCue], min_gap: float) -> List[CueGap]:
        """Gaps of at least ``min_gap`` seconds between start-adjacent cues."""
        ordered = self.sort_cues(cues)
        gaps: List[CueGap] = []
        for current, following in zip(ordered, ordered[1:]):
            gap = following.start_time - current.end_time
            if gap >= min_gap:
                gaps.append(CueGap(after_cue_id=current.id, gap_seconds=gap))
        return gaps

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------

    def split_cue(
        self,
        cues: Sequence[SubtitleCue],
        cue_id: str,
        at_time: float,
        new_id: Optional[str] = None,
    ) -> Cues:
        """Split a cue in two at ``at_time``.

        RULES:
        - No-op unless start_time < at_time < end_time
        - First half keeps the id and covers [start, at_time); it stays in
          place. Second half gets a fresh id (or ``new_id``), covers
          [at_time, end), and is appended at the end
        - With word timing: words ending at or before at_time go first,
          words starting at or after at_time go second, and each half's
          text is rebuilt from its words. A half with no words keeps the
          original text; a word straddling at_time is dropped
        - Without word timing both halves keep the original text
        """
        cue = self.get_cue_by_id(cues, cue_id)
        if cue is None:
            logger.debug("split_cue: no cue with id %s; nothing split", cue_id)
            return tuple(cues)
        if not cue.start_time < at_time < cue.end_time:
            logger.debug(
                "split_cue: %.3fs is outside cue %s [%.3f, %.3f); nothing split",
                at_time, cue_id, cue.start_time, cue.end_time,
            )
            return tuple(cues)

        first_words = second_words = None
        if cue.words is not None:
            first_words = tuple(w for w in cue.words if w.end_time <= at_time) or None
            second_words = tuple(w for w in cue.words if w.start_time >= at_time) or None

        first = SubtitleCue(
            id=cue.id,
            start_time=cue.start_time,
            end_time=at_time,
            text=" ".join(w.text for w in first_words) if first_words else cue.text,
            words=first_words,
            animation_style=cue.animation_style,
        )
        second = SubtitleCue(
            id=new_id or self._id_factory(),
            start_time=at_time,
            end_time=cue.end_time,
            text=" ".join(w.text for w in second_words) if second_words else cue.text,
            words=second_words,
            animation_style=cue.animation_style,
        )
        return tuple(first if c.id == cue_id else c for c in cues) + (second,)

    def merge_cues(self, cues: Sequence[SubtitleCue], cue_ids: Sequence[str]) -> Cues:
        """Merge the named cues into one, kept under the first listed id.

        RULES:
        - No-op when fewer than two ids resolve to existing cues
        - start = min, end = max over the merged cues
        - text: sanitized space-join in start-time order (not list order)
        - words: concatenation in start-time order; None if no cue had any
        - animation_style from the earliest cue
        - The kept cue stays at its position, the others are removed,
          untouched cues keep their places
        """
        wanted = set(cue_ids)
        to_merge = [c for c in cues if c.id in wanted]
        if len(cue_ids) < 2 or len(to_merge) < 2:
            logger.debug("merge_cues: fewer than two existing cues in %s; nothing merged", list(cue_ids))
            return tuple(cues)

        ordered = self.sort_cues(to_merge)
        all_words = [w for c in ordered for w in (c.words or ())]
        keep_id = cue_ids[0]
        if keep_id not in {c.id for c in to_merge}:
            keep_id = ordered[0].id
        merged = SubtitleCue(
            id=keep_id,
            start_time=min(c.start_time for c in ordered),
            end_time=max(c.end_time for c in ordered),
            text=sanitize_text(" ".join(c.text for c in ordered)),
            words=tuple(all_words) if all_words else None,
            animation_style=ordered[0].animation_style,
        )

        result = []
        for cue in cues:
            if cue.id == keep_id:
                result.append(merged)
            elif cue.id not in wanted:
                result.append(cue)
        return tuple(result)

    @staticmethod
    def shift_cues(
        cues: Sequence[SubtitleCue],
        cue_ids: Iterable[str],
        delta_seconds: float,
    ) -> Cues:
        """Move the named cues by ``delta_seconds``.

        start is clamped to >= 0 and end to >= 0.1 independently, so a large
        negative shift squeezes a cue down to [0, 0.1] instead of going
        negative.
        """
        targets = set(cue_ids)
        return tuple(
            replace(
                c,
                start_time=max(0.0, c.start_time + delta_seconds),
                end_time=max(MIN_CUE_DURATION, c.end_time + delta_seconds),
            )
            if c.id in targets
            else c
            for c in cues
        )
