"""Bounded undo/redo history over immutable states.

WHY: The editor offers unlimited-feeling undo without unbounded memory. The
history keeps actions rather than state snapshots; every state is frozen,
so an action plus its captured prior values is enough to go back.

HOW: ActionSystem owns two stacks. execute() runs an action, pushes it
onto the undo stack (a deque with maxlen, so the oldest entry falls off
once the cap is exceeded) and clears the redo stack. undo() pops, applies
the action's inverse and moves the action to the redo stack; redo()
re-executes it and moves it back.

RULES:
- Undo stack holds at most MAX_HISTORY_SIZE (100) actions
- Executing a new action discards the redo branch
- undo()/redo() on an empty stack return None and leave the stacks alone
- The system never holds the state; callers pass the current one in
- Works with any Action implementation, not just EditAction
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Generic, List, Optional

from subtitle_burner.actions.base import Action, TState

logger = logging.getLogger(__name__)

MAX_HISTORY_SIZE = 100


@dataclass(frozen=True)
class UndoResult(Generic[TState]):
    """The state after an undo/redo and the label of the action involved."""

    state: TState
    description: str


class ActionSystem(Generic[TState]):
    """Undo/redo stacks for one editing session."""

    def __init__(self) -> None:
        self._undo_stack: Deque[Action[TState]] = deque(maxlen=MAX_HISTORY_SIZE)
        self._redo_stack: List[Action[TState]] = []

    def execute(self, state: TState, action: Action[TState]) -> TState:
        new_state = action.execute(state)
        self._undo_stack.append(action)
        self._redo_stack.clear()
        logger.debug("Executed %s (%s); undo depth %d", action.type, action.description, len(self._undo_stack))
        return new_state

    def undo(self, state: TState) -> Optional[UndoResult[TState]]:
        if not self._undo_stack:
            return None
        action = self._undo_stack.pop()
        new_state = action.inverse().execute(state)
        self._redo_stack.append(action)
        logger.debug("Undid %s (%s)", action.type, action.description)
        return UndoResult(state=new_state, description=action.description)

    def redo(self, state: TState) -> Optional[UndoResult[TState]]:
        if not self._redo_stack:
            return None
        action = self._redo_stack.pop()
        new_state = action.execute(state)
        self._undo_stack.append(action)
        logger.debug("Redid %s (%s)", action.type, action.description)
        return UndoResult(state=new_state, description=action.description)

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def get_undo_description(self) -> Optional[str]:
        return self._undo_stack[-1].description if self._undo_stack else None

    def get_redo_description(self) -> Optional[str]:
        return self._redo_stack[-1].description if self._redo_stack else None

    def get_undo_count(self) -> int:
        return len(self._undo_stack)

    def get_redo_count(self) -> int:
        return len(self._redo_stack)

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()
