"""Adapter: transcription word timestamps to initial subtitle cues.

WHY: A speech-to-text service returns one long stream of timed words. The
editor works in cues, each short enough to read at a glance. This adapter
cuts the stream into cues once, right after transcription; from then on
the user edits the cues through the action layer.

HOW: A single pass over the words accumulates a group and flushes it into
a cue when adding the next word would break a limit, or right after a
sentence-ending word. Each cue keeps its words as per-word timing so the
animated caption styles work out of the box.

RULES:
- A group is flushed before a word when it already holds max_words_per_cue
  words, or when the word would stretch it past max_duration_per_cue
  seconds; that word then starts the next group
- With break_on_punctuation, a word ending in . ! or ? closes its group,
  but only once the group holds at least two words
- Cue text is the words joined by single spaces; start is the first
  word's start, end the last word's end
- Input words are never modified; empty input gives no cues
- Grouping does not go through the undo history
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from subtitle_burner import config
from subtitle_burner.core.models import AnimationStyle, SubtitleCue, SubtitleWord
from subtitle_burner.core.subtitle_engine import SubtitleEngine, sanitize_text

logger = logging.getLogger(__name__)

_SENTENCE_END_RE = re.compile(r"[.!?]$")


@dataclass(frozen=True)
class WordGroupingConfig:
    """Limits for cutting a word stream into cues.

    Defaults come from config.py and can be set through the environment.
    """

    max_words_per_cue: int = config.DEFAULT_MAX_WORDS_PER_CUE
    max_duration_per_cue: float = config.DEFAULT_MAX_CUE_DURATION
    break_on_punctuation: bool = config.DEFAULT_BREAK_ON_PUNCTUATION


def _as_word(word: Any) -> SubtitleWord:
    if isinstance(word, SubtitleWord):
        return word
    return SubtitleWord.from_dict(word)


def _cue_from_words(
    words: List[SubtitleWord],
    animation_style: Optional[AnimationStyle],
    engine: SubtitleEngine,
) -> SubtitleCue:
    return SubtitleCue(
        id=engine.new_id(),
        start_time=words[0].start_time,
        end_time=words[-1].end_time,
        text=sanitize_text(" ".join(w.text for w in words).strip()),
        words=tuple(words),
        animation_style=animation_style,
    )


def group_words_into_cues(
    words: Iterable[Any],
    grouping: Optional[WordGroupingConfig] = None,
    default_animation_style: Optional[AnimationStyle] = AnimationStyle.KARAOKE,
    engine: Optional[SubtitleEngine] = None,
) -> Tuple[SubtitleCue, ...]:
    """Group timed words into cues.

    Args:
        words: SubtitleWord records or dicts with text/startTime/endTime.
        grouping: Cut limits; defaults to WordGroupingConfig().
        default_animation_style: Style assigned to every produced cue.
        engine: Supplies cue ids; pass one with a deterministic id factory
            for reproducible output.

    Returns:
        The cues in transcript order.
    """
    grouping = grouping or WordGroupingConfig()
    engine = engine or SubtitleEngine()

    cues: List[SubtitleCue] = []
    current: List[SubtitleWord] = []
    group_start = 0.0

    for word in map(_as_word, words):
        if not current:
            group_start = word.start_time

        too_many = len(current) >= grouping.max_words_per_cue
        too_long = word.end_time - group_start > grouping.max_duration_per_cue

        if current and (too_many or too_long):
            cues.append(_cue_from_words(current, default_animation_style, engine))
            current = [word]
            group_start = word.start_time
            continue

        current.append(word)
        ends_sentence = grouping.break_on_punctuation and _SENTENCE_END_RE.search(word.text)
        if ends_sentence and len(current) >= 2:
            cues.append(_cue_from_words(current, default_animation_style, engine))
            current = []

    if current:
        cues.append(_cue_from_words(current, default_animation_style, engine))

    logger.debug("Grouped words into %d cue(s)", len(cues))
    return tuple(cues)
