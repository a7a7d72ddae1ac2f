"""Undoable edit actions and the undo/redo history.

Importing this package registers every edit kind's handlers with the
dispatch tables in base.py.
"""

from subtitle_burner.actions.action_system import MAX_HISTORY_SIZE, ActionSystem, UndoResult
from subtitle_burner.actions.base import Action, ActionKind, EditAction, no_op_action
from subtitle_burner.actions.style_actions import apply_template_action, update_style_action
from subtitle_burner.actions.subtitle_actions import (
    add_cue_action,
    merge_cues_action,
    remove_cue_action,
    split_cue_action,
    update_cue_action,
)

__all__ = [
    "MAX_HISTORY_SIZE",
    "Action",
    "ActionKind",
    "ActionSystem",
    "EditAction",
    "UndoResult",
    "add_cue_action",
    "apply_template_action",
    "merge_cues_action",
    "no_op_action",
    "remove_cue_action",
    "split_cue_action",
    "update_cue_action",
    "update_style_action",
]
