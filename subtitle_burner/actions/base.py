"""Action contract, edit-action records, and the kind -> handler tables.

WHY: Undo/redo needs every edit to know how to reverse itself exactly. An
edit is therefore a small record (what kind of edit, with which payload)
that captures, when executed, just the values it overwrote. Behaviour is
looked up in two tables keyed by kind: one that executes, one that builds
the inverse. Adding an edit kind means registering two functions, not
growing a class hierarchy.

HOW: EditAction carries kind, payload, description, timestamp and a
``captured`` dict. execute() dispatches to EXECUTORS[kind], inverse() to
INVERSE_BUILDERS[kind]. subtitle_actions.py and style_actions.py register
their handlers with the @executor / @inverse_builder decorators when the
``subtitle_burner.actions`` package is imported.

RULES:
- Action is a structural protocol: ActionSystem accepts anything with
  type, description, timestamp, execute() and inverse()
- execute() returns a new state; it never mutates the state passed in
- execute() overwrites ``captured`` each time it runs, so inverse() always
  reflects the most recent execution
- inverse() of an action that has never run (or ran as a no-op) is a NO_OP
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Protocol, TypeVar

if TYPE_CHECKING:
    from subtitle_burner.core.models import ProjectState

TState = TypeVar("TState")


class Action(Protocol[TState]):
    """Anything the ActionSystem can execute and undo."""

    @property
    def type(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def timestamp(self) -> float: ...

    def execute(self, state: TState) -> TState: ...

    def inverse(self) -> "Action[TState]": ...


class ActionKind(str, Enum):
    ADD_CUE = "ADD_CUE"
    REMOVE_CUE = "REMOVE_CUE"
    RESTORE_CUE = "RESTORE_CUE"
    UPDATE_CUE = "UPDATE_CUE"
    SPLIT_CUE = "SPLIT_CUE"
    MERGE_CUES = "MERGE_CUES"
    RESTORE_CUES = "RESTORE_CUES"
    UPDATE_STYLE = "UPDATE_STYLE"
    APPLY_TEMPLATE = "APPLY_TEMPLATE"
    RESTORE_STYLE = "RESTORE_STYLE"
    NO_OP = "NO_OP"


@dataclass(eq=False)
class EditAction:
    """One invertible edit of a ProjectState.

    Attributes:
        kind: Which handler pair executes and inverts this edit.
        payload: The edit's arguments (ids, patches, times, ...).
        description: Label for undo/redo menus, e.g. "Update fontSize".
        timestamp: Creation time (epoch seconds).
        captured: Prior values recorded by the last execute().
    """

    kind: ActionKind
    payload: Dict[str, Any]
    description: str
    timestamp: float = field(default_factory=time.time)
    captured: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def type(self) -> str:
        return self.kind.value

    def execute(self, state: "ProjectState") -> "ProjectState":
        return EXECUTORS[self.kind](state, self)

    def inverse(self) -> "EditAction":
        return INVERSE_BUILDERS[self.kind](self)


Executor = Callable[["ProjectState", EditAction], "ProjectState"]
InverseBuilder = Callable[[EditAction], EditAction]

EXECUTORS: Dict[ActionKind, Executor] = {}
INVERSE_BUILDERS: Dict[ActionKind, InverseBuilder] = {}


def executor(kind: ActionKind) -> Callable[[Executor], Executor]:
    """Register the function that applies actions of ``kind``."""

    def register(func: Executor) -> Executor:
        EXECUTORS[kind] = func
        return func

    return register


def inverse_builder(kind: ActionKind) -> Callable[[InverseBuilder], InverseBuilder]:
    """Register the function that builds the inverse of actions of ``kind``."""

    def register(func: InverseBuilder) -> InverseBuilder:
        INVERSE_BUILDERS[kind] = func
        return func

    return register


def no_op_action(description: str) -> EditAction:
    return EditAction(kind=ActionKind.NO_OP, payload={}, description=description)


@executor(ActionKind.NO_OP)
def _execute_no_op(state: "ProjectState", action: EditAction) -> "ProjectState":
    return state


@inverse_builder(ActionKind.NO_OP)
def _invert_no_op(action: EditAction) -> EditAction:
    return no_op_action(action.description)
