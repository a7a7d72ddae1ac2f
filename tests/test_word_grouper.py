"""Unit tests for grouping transcription words into cues.

WHY: The grouper decides the first cut of every transcribed project. Off
-by-one limits produce cues that are too long to read or split mid-phrase.

HOW: Synthetic word streams with evenly spaced timing exercise each flush
rule separately: word count, duration, and sentence punctuation.

RULES:
- words() builds words 0.5 s long, one every 0.5 s
- Ids come from the conftest engine (cue-1, cue-2, ...)
"""

import pytest

from subtitle_burner.adapters import WordGroupingConfig, group_words_into_cues
from subtitle_burner.core.models import AnimationStyle, SubtitleWord


def words(*texts, step=0.5):
    return [SubtitleWord(text, i * step, (i + 1) * step) for i, text in enumerate(texts)]


NO_PUNCTUATION = WordGroupingConfig(max_words_per_cue=10, max_duration_per_cue=5.0, break_on_punctuation=False)


class TestBasics:

    def test_empty_input(self, engine):
        assert group_words_into_cues([], engine=engine) == ()

    def test_single_group(self, engine):
        (cue,) = group_words_into_cues(words("Hello", "there", "friend"), engine=engine)
        assert cue.id == "cue-1"
        assert cue.text == "Hello there friend"
        assert cue.start_time == 0.0
        assert cue.end_time == pytest.approx(1.5)
        assert len(cue.words) == 3
        assert cue.animation_style is AnimationStyle.KARAOKE

    def test_accepts_word_dicts(self, engine):
        raw = [{"text": "Hi", "startTime": 1.0, "endTime": 1.4}]
        (cue,) = group_words_into_cues(raw, engine=engine)
        assert cue.words == (SubtitleWord("Hi", 1.0, 1.4),)

    def test_animation_style_parameter(self, engine):
        (cue,) = group_words_into_cues(words("a"), default_animation_style=AnimationStyle.BOUNCE, engine=engine)
        assert cue.animation_style is AnimationStyle.BOUNCE


class TestLimits:

    def test_word_limit(self, engine):
        grouping = WordGroupingConfig(max_words_per_cue=3, max_duration_per_cue=60, break_on_punctuation=False)
        cues = group_words_into_cues(words(*"abcdefg"), grouping, engine=engine)
        assert [c.text for c in cues] == ["a b c", "d e f", "g"]

    def test_duration_limit(self, engine):
        grouping = WordGroupingConfig(max_words_per_cue=50, max_duration_per_cue=1.0, break_on_punctuation=False)
        cues = group_words_into_cues(words(*"abcde"), grouping, engine=engine)
        # a+b span exactly 1.0 s; c would stretch the group to 1.5 s.
        assert [c.text for c in cues] == ["a b", "c d", "e"]

    def test_remainder_forms_last_cue(self, engine):
        cues = group_words_into_cues(words(*[f"w{i}" for i in range(12)], step=0.1), NO_PUNCTUATION, engine=engine)
        assert [len(c.words) for c in cues] == [10, 2]


class TestPunctuation:

    def test_sentence_end_closes_group(self, engine):
        cues = group_words_into_cues(words("Hi", "there.", "How", "are", "you?"), engine=engine)
        assert [c.text for c in cues] == ["Hi there.", "How are you?"]

    def test_single_word_sentence_is_not_split_off(self, engine):
        cues = group_words_into_cues(words("Yes.", "I", "agree."), engine=engine)
        assert [c.text for c in cues] == ["Yes. I agree."]

    def test_punctuation_ignored_when_disabled(self, engine):
        cues = group_words_into_cues(words("Hi", "there.", "Bye"), NO_PUNCTUATION, engine=engine)
        assert [c.text for c in cues] == ["Hi there. Bye"]

    def test_input_not_modified(self, engine):
        stream = words("One", "two.")
        snapshot = list(stream)
        group_words_into_cues(stream, engine=engine)
        assert stream == snapshot
