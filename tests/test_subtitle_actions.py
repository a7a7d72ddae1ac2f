"""Tests for undoable cue edits through the ActionSystem.

WHY: The editor's promise is that undo puts the timeline back exactly:
same ids, same order, same text and word timing. These tests drive each
edit kind through ActionSystem and compare whole states.

HOW: For every action kind: execute, undo, compare with the start state
(undo law); redo, compare with the executed state (redo idempotence).
Engines use the conftest id factory so assigned ids are known.

RULES:
- State comparisons are whole-value equality of frozen ProjectState
- An action that was a no-op inverts to a NO_OP action
"""

import pytest

from subtitle_burner.actions import (
    ActionKind,
    ActionSystem,
    add_cue_action,
    merge_cues_action,
    remove_cue_action,
    split_cue_action,
    update_cue_action,
)
from subtitle_burner.core.models import ProjectState


def undo_redo_round_trip(action, state):
    """Execute, undo and redo ``action``; return the three states."""
    system = ActionSystem()
    executed = system.execute(state, action)
    undone = system.undo(executed).state
    redone = system.redo(undone).state
    return executed, undone, redone


class TestAddCue:

    def test_undo_and_redo(self, engine, project_state):
        action = add_cue_action(1.0, 1.5, "Hello there", engine=engine)
        executed, undone, redone = undo_redo_round_trip(action, project_state)
        assert [c.id for c in executed.cues] == ["a", "b", "c", "cue-1"]
        assert undone == project_state
        assert redone == executed

    def test_redo_reuses_assigned_id(self, engine, project_state):
        action = add_cue_action(1.0, 1.5, "x", engine=engine)
        _, _, redone = undo_redo_round_trip(action, project_state)
        assert redone.cues[-1].id == "cue-1"

    def test_description_truncates_text(self):
        action = add_cue_action(0, 1, "A" * 40)
        assert action.description == f'Add subtitle "{"A" * 30}"'
        assert action.type == "ADD_CUE"

    def test_inverse_before_execute_is_no_op(self):
        assert add_cue_action(0, 1, "x").inverse().kind is ActionKind.NO_OP


class TestRemoveCue:

    def test_undo_restores_original_position(self, project_state):
        executed, undone, redone = undo_redo_round_trip(remove_cue_action("b"), project_state)
        assert [c.id for c in executed.cues] == ["a", "c"]
        assert undone == project_state
        assert redone == executed

    def test_unknown_id_is_noop(self, project_state):
        action = remove_cue_action("ghost")
        system = ActionSystem()
        assert system.execute(project_state, action) is project_state
        assert action.inverse().kind is ActionKind.NO_OP
        assert system.undo(project_state).state == project_state


class TestUpdateCue:

    def test_text_update_round_trip(self, project_state):
        executed, undone, redone = undo_redo_round_trip(
            update_cue_action("a", {"text": "Changed"}), project_state,
        )
        assert executed.cues[0].text == "Changed"
        assert undone == project_state
        assert redone == executed

    def test_start_move_that_pushes_end_is_undone_exactly(self, project_state):
        executed, undone, _ = undo_redo_round_trip(
            update_cue_action("a", {"startTime": 3.0}), project_state,
        )
        assert executed.cues[0].end_time == pytest.approx(3.1)
        assert undone == project_state

    def test_words_and_style_round_trip(self, karaoke_cue):
        state = ProjectState(cues=(karaoke_cue,))
        _, undone, _ = undo_redo_round_trip(
            update_cue_action("k", {"words": None, "animationStyle": "bounce"}), state,
        )
        assert undone == state

    @pytest.mark.parametrize("patch", [{"text": "Longer"}, {"startTime": 0.5}, {"endTime": 2.0}])
    def test_short_stored_cue_undone_exactly(self, engine, patch):
        # set_cues keeps stored timing even below the 0.1 s minimum.
        state = ProjectState(cues=engine.set_cues([{"id": "t", "startTime": 1.0, "endTime": 1.02, "text": "tiny"}]))
        executed, undone, redone = undo_redo_round_trip(update_cue_action("t", patch), state)
        assert undone == state
        assert undone.cues[0].end_time == 1.02
        assert redone == executed

    def test_inverse_of_inverse_reapplies_update(self, project_state):
        action = update_cue_action("a", {"startTime": 3.0})
        executed = action.execute(project_state)
        revert = action.inverse()
        assert revert.description == "Revert subtitle update"
        reverted = revert.execute(executed)
        assert reverted == project_state
        assert revert.inverse().execute(reverted) == executed

    def test_unknown_keys_dropped(self):
        action = update_cue_action("a", {"id": "z", "colour": "red", "text": "t"})
        assert action.payload["patch"] == {"text": "t"}


class TestSplitCue:

    def test_split_with_straddling_word_undoes_exactly(self, engine, karaoke_cue):
        state = ProjectState(cues=(karaoke_cue,))
        executed, undone, redone = undo_redo_round_trip(split_cue_action("k", 1.5, engine=engine), state)
        assert [c.text for c in executed.cues] == ["Hello", "world"]
        assert undone == state
        assert redone == executed
        assert redone.cues[1].id == "cue-1"

    def test_split_without_words_undoes_exactly(self, engine, project_state):
        executed, undone, _ = undo_redo_round_trip(split_cue_action("c", 6.0, engine=engine), project_state)
        assert len(executed.cues) == 4
        assert undone == project_state

    def test_invalid_split_is_noop(self, project_state):
        action = split_cue_action("a", 5.0)
        assert ActionSystem().execute(project_state, action) is project_state
        assert action.inverse().kind is ActionKind.NO_OP


class TestMergeCues:

    def test_undo_restores_originals_in_place(self, project_state):
        executed, undone, redone = undo_redo_round_trip(merge_cues_action(["a", "c"]), project_state)
        assert [c.id for c in executed.cues] == ["a", "b"]
        assert executed.cues[0].text == "First Third"
        assert undone == project_state
        assert redone == executed

    def test_undo_when_kept_id_is_not_first_in_list(self, project_state):
        _, undone, _ = undo_redo_round_trip(merge_cues_action(["c", "a", "b"]), project_state)
        assert undone == project_state

    def test_merge_of_one_cue_is_noop(self, project_state):
        action = merge_cues_action(["a"])
        assert ActionSystem().execute(project_state, action) is project_state
        assert action.inverse().kind is ActionKind.NO_OP


class TestSequences:

    def test_many_edits_undo_back_to_start(self, engine, karaoke_cue, project_state):
        start = ProjectState(cues=project_state.cues + (karaoke_cue,))
        system = ActionSystem()
        state = start
        for action in (
            add_cue_action(9.0, 10.0, "Tail", engine=engine),
            split_cue_action("k", 1.0, engine=engine),
            update_cue_action("b", {"text": "Middle"}),
            merge_cues_action(["a", "b"]),
            remove_cue_action("c"),
        ):
            state = system.execute(state, action)
        end = state
        while system.can_undo():
            state = system.undo(state).state
        assert state == start
        while system.can_redo():
            state = system.redo(state).state
        assert state == end

    def test_descriptions(self):
        assert remove_cue_action("a").description == "Remove subtitle"
        assert update_cue_action("a", {}).description == "Update subtitle"
        assert split_cue_action("a", 1).description == "Split subtitle"
        assert merge_cues_action(["a", "b"]).description == "Merge subtitles"
