"""Unit tests for SubtitleEngine cue operations.

WHY: Every timeline edit runs through the engine. Wrong clamping or a
mutated input would corrupt cues or the undo history.

HOW: Each operation is tested against the fixed sample timeline from
conftest, including the boundary cases of half-open intervals and the
silent no-op paths.

RULES:
- Floating-point comparisons use pytest.approx
- Ids drawn from the engine are cue-1, cue-2, ... (conftest id factory)
"""

import logging

import pytest

from subtitle_burner.core.models import AnimationStyle, SubtitleCue, SubtitleWord
from subtitle_burner.core.subtitle_engine import (
    MAX_CUE_TEXT_LENGTH,
    CueGap,
    SubtitleEngine,
    sanitize_text,
)

ENGINE_LOGGER = "subtitle_burner.core.subtitle_engine"


class TestSanitizeText:

    def test_strips_tags(self):
        assert sanitize_text("<b>Hi</b> there") == "Hi there"

    def test_strips_script_block_with_contents(self):
        assert sanitize_text("Hi<script>alert('x')</script>!") == "Hi!"

    def test_truncates_to_limit(self):
        assert len(sanitize_text("x" * 600)) == MAX_CUE_TEXT_LENGTH

    def test_keeps_plain_comparison_signs(self):
        assert sanitize_text("a < b") == "a < b"

    def test_non_string_becomes_string(self):
        assert sanitize_text(None) == ""
        assert sanitize_text(42) == "42"


class TestAddCue:

    def test_appends_with_generated_id(self, engine, sample_cues):
        cues = engine.add_cue(sample_cues, 1.0, 1.5, "New")
        assert len(cues) == 4
        assert cues[-1].id == "cue-1"
        assert cues[-1].text == "New"

    def test_does_not_sort(self, engine, sample_cues):
        cues = engine.add_cue(sample_cues, 0.5, 1.0, "Early")
        assert [c.id for c in cues] == ["a", "b", "c", "cue-1"]

    def test_clamps_negative_start(self, engine):
        (cue,) = engine.add_cue((), -3.0, 2.0, "x")
        assert cue.start_time == 0.0
        assert cue.end_time == pytest.approx(2.0)

    def test_enforces_minimum_duration(self, engine):
        (cue,) = engine.add_cue((), 4.0, 3.0, "x")
        assert cue.end_time == pytest.approx(4.1)

    def test_minimum_duration_after_start_clamp(self, engine):
        (cue,) = engine.add_cue((), -1.0, 0.05, "x")
        assert cue.start_time == 0.0
        assert cue.end_time == pytest.approx(0.1)

    def test_sanitizes_text(self, engine):
        (cue,) = engine.add_cue((), 0, 1, "<i>Hi</i><script>evil()</script>")
        assert cue.text == "Hi"

    def test_keeps_words_and_style(self, engine):
        words = [{"text": "Hi", "startTime": 0.0, "endTime": 0.5}]
        (cue,) = engine.add_cue((), 0, 1, "Hi", words=words, animation_style="karaoke")
        assert cue.words == (SubtitleWord("Hi", 0.0, 0.5),)
        assert cue.animation_style is AnimationStyle.KARAOKE

    def test_pinned_id(self, engine):
        (cue,) = engine.add_cue((), 0, 1, "x", cue_id="fixed")
        assert cue.id == "fixed"

    def test_input_untouched(self, engine, sample_cues):
        before = tuple(sample_cues)
        engine.add_cue(sample_cues, 0, 1, "x")
        assert sample_cues == before


class TestRemoveCue:

    def test_removes_by_id(self, engine, sample_cues):
        cues = engine.remove_cue(sample_cues, "b")
        assert [c.id for c in cues] == ["a", "c"]

    def test_unknown_id_is_noop_with_diagnostic(self, engine, sample_cues, caplog):
        caplog.set_level(logging.DEBUG, logger=ENGINE_LOGGER)
        cues = engine.remove_cue(sample_cues, "missing")
        assert cues == sample_cues
        assert "missing" in caplog.text


class TestUpdateCue:

    def test_patches_text(self, engine, sample_cues):
        cues = engine.update_cue(sample_cues, "a", {"text": "<b>Edited</b>"})
        assert cues[0].text == "Edited"
        assert cues[1] is sample_cues[1]

    def test_accepts_camel_case_keys(self, engine, sample_cues):
        cues = engine.update_cue(sample_cues, "a", {"endTime": 3.0})
        assert cues[0].end_time == pytest.approx(3.0)

    def test_moving_start_past_end_pushes_end(self, engine, sample_cues):
        cues = engine.update_cue(sample_cues, "a", {"start_time": 3.0})
        assert cues[0].start_time == pytest.approx(3.0)
        assert cues[0].end_time == pytest.approx(3.1)

    def test_negative_start_clamped(self, engine, sample_cues):
        cues = engine.update_cue(sample_cues, "b", {"start_time": -5})
        assert cues[1].start_time == 0.0

    def test_id_cannot_be_patched(self, engine, sample_cues):
        cues = engine.update_cue(sample_cues, "a", {"id": "z", "text": "x"})
        assert cues[0].id == "a"

    def test_unknown_id_is_noop(self, engine, sample_cues):
        assert engine.update_cue(sample_cues, "missing", {"text": "x"}) == sample_cues


class TestQueries:

    def test_cue_at_start_is_active(self, engine):
        cues = (SubtitleCue(id="x", start_time=5.0, end_time=10.0, text="t"),)
        assert engine.get_cue_at_time(cues, 5.0) == cues

    def test_cue_at_end_is_not_active(self, engine):
        cues = (SubtitleCue(id="x", start_time=5.0, end_time=10.0, text="t"),)
        assert engine.get_cue_at_time(cues, 10.0) == ()

    def test_get_cue_by_id(self, engine, sample_cues):
        assert engine.get_cue_by_id(sample_cues, "c") is sample_cues[2]
        assert engine.get_cue_by_id(sample_cues, "nope") is None

    def test_sort_is_stable(self, engine):
        cues = (
            SubtitleCue(id="late", start_time=3, end_time=4, text=""),
            SubtitleCue(id="tie1", start_time=1, end_time=2, text=""),
            SubtitleCue(id="tie2", start_time=1, end_time=3, text=""),
        )
        assert [c.id for c in engine.sort_cues(cues)] == ["tie1", "tie2", "late"]

    def test_touching_cues_do_not_overlap(self, engine):
        cues = (
            SubtitleCue(id="x", start_time=0, end_time=5, text=""),
            SubtitleCue(id="y", start_time=5, end_time=10, text=""),
        )
        assert engine.get_overlaps(cues) == []

    def test_overlaps_reported_earlier_first(self, engine):
        cues = (
            SubtitleCue(id="late", start_time=3, end_time=8, text=""),
            SubtitleCue(id="early", start_time=0, end_time=5, text=""),
            SubtitleCue(id="inner", start_time=1, end_time=2, text=""),
        )
        assert engine.get_overlaps(cues) == [("early", "inner"), ("early", "late")]

    def test_gaps_at_least_min_gap(self, engine, sample_cues):
        assert engine.get_gaps(sample_cues, 0.5) == [CueGap(after_cue_id="b", gap_seconds=1.0)]

    def test_gap_equal_to_min_is_reported(self, engine, sample_cues):
        assert len(engine.get_gaps(sample_cues, 1.0)) == 1
        assert engine.get_gaps(sample_cues, 1.5) == []


class TestSplitCue:

    def test_split_with_words_partitions_them(self, engine, karaoke_cue):
        cues = engine.split_cue((karaoke_cue,), "k", 2.0)
        first, second = cues
        assert first.id == "k"
        assert second.id == "cue-1"
        assert (first.start_time, first.end_time) == (0.0, 2.0)
        assert (second.start_time, second.end_time) == (2.0, 3.0)
        assert first.text == "Hello beautiful"
        assert second.text == "world"
        assert [w.text for w in second.words] == ["world"]
        assert second.animation_style is AnimationStyle.KARAOKE

    def test_straddling_word_is_dropped(self, engine, karaoke_cue):
        first, second = engine.split_cue((karaoke_cue,), "k", 1.5)
        assert first.text == "Hello"
        assert second.text == "world"

    def test_split_without_words_duplicates_text(self, engine, sample_cues):
        cues = engine.split_cue(sample_cues, "c", 6.0)
        assert cues[2].text == "Third"
        assert cues[3].text == "Third"
        assert cues[2].end_time == 6.0
        assert cues[3].start_time == 6.0

    def test_second_half_is_appended(self, engine, sample_cues):
        cues = engine.split_cue(sample_cues, "a", 1.0)
        assert [c.id for c in cues] == ["a", "b", "c", "cue-1"]

    @pytest.mark.parametrize("at_time", [0.0, 2.0, -1.0, 9.0])
    def test_split_at_or_outside_bounds_is_noop(self, engine, sample_cues, at_time):
        assert engine.split_cue(sample_cues, "a", at_time) == sample_cues

    def test_split_then_merge_restores_cue(self, engine, karaoke_cue):
        split = engine.split_cue((karaoke_cue,), "k", 2.0)
        (merged,) = engine.merge_cues(split, ["k", "cue-1"])
        assert merged.start_time == karaoke_cue.start_time
        assert merged.end_time == karaoke_cue.end_time
        assert merged.text == karaoke_cue.text
        assert merged.words == karaoke_cue.words


class TestMergeCues:

    def test_keeps_first_listed_id_at_its_position(self, engine, sample_cues):
        cues = engine.merge_cues(sample_cues, ["b", "a"])
        assert [c.id for c in cues] == ["b", "c"]
        merged = cues[0]
        assert merged.text == "First Second"
        assert (merged.start_time, merged.end_time) == (0.0, 4.0)

    def test_missing_first_id_falls_back_to_earliest(self, engine, sample_cues):
        cues = engine.merge_cues(sample_cues, ["ghost", "c", "b"])
        assert [c.id for c in cues] == ["a", "b"]
        assert cues[1].text == "Second Third"

    def test_fewer_than_two_existing_is_noop(self, engine, sample_cues, caplog):
        caplog.set_level(logging.DEBUG, logger=ENGINE_LOGGER)
        assert engine.merge_cues(sample_cues, ["a"]) == sample_cues
        assert engine.merge_cues(sample_cues, ["a", "ghost"]) == sample_cues
        assert "nothing merged" in caplog.text

    def test_words_none_when_no_cue_has_words(self, engine, sample_cues):
        cues = engine.merge_cues(sample_cues, ["a", "b"])
        assert cues[0].words is None


class TestShiftCues:

    def test_shifts_only_named_cues(self, engine, sample_cues):
        cues = engine.shift_cues(sample_cues, ["b"], 1.5)
        assert cues[0] is sample_cues[0]
        assert cues[1].start_time == pytest.approx(3.5)
        assert cues[1].end_time == pytest.approx(5.5)

    def test_large_negative_shift_squeezes_to_origin(self, engine, sample_cues):
        cues = engine.shift_cues(sample_cues, ["c"], -100)
        assert cues[2].start_time == 0.0
        assert cues[2].end_time == pytest.approx(0.1)


class TestSetCues:

    def test_rehydrates_documents_and_sanitizes_text(self):
        cues = SubtitleEngine().set_cues([
            {"id": "x", "startTime": 1, "endTime": 2, "text": "<b>Hi</b>", "animationStyle": "bounce"},
        ])
        assert cues[0].id == "x"
        assert cues[0].text == "Hi"
        assert cues[0].animation_style is AnimationStyle.BOUNCE

    def test_unknown_animation_style_becomes_none(self):
        cues = SubtitleEngine().set_cues([
            {"id": "x", "startTime": 1, "endTime": 2, "text": "t", "animationStyle": "spin"},
        ])
        assert cues[0].animation_style is None


class TestDefaultIds:

    def test_default_ids_are_unique(self):
        engine = SubtitleEngine()
        cues = engine.add_cue(engine.add_cue((), 0, 1, "a"), 1, 2, "b")
        assert cues[0].id != cues[1].id
