"""Adapter modules for bringing external data into the editing model.

WHY: Transcription services and imported files speak their own shapes.
Adapters turn them into SubtitleCue records so the core never has to know
where a cue came from.

RULES:
- Adapters are pure data transformations: no I/O, no side effects
- Adapters must not modify their input
"""

from subtitle_burner.adapters.word_grouper import WordGroupingConfig, group_words_into_cues

__all__ = ["WordGroupingConfig", "group_words_into_cues"]
