"""Undoable cue edits: add, remove, update, split, merge.

WHY: Each cue edit must be reversible exactly, including ids, positions in
the cue list and word partitioning, or undo would quietly reorder or
rename the user's subtitles.

HOW: Public constructors build EditAction records. The executors below
delegate the actual edit to SubtitleEngine and record in
``action.captured`` what they replaced; the inverse builders turn that
record into the reverse edit. Helper kinds RESTORE_CUE and RESTORE_CUES
exist only as inverses.

RULES:
- add: inverse removes the assigned id; re-running reuses that id
- remove: inverse reinserts the identical cue at its original index
- update: inverse patch holds the previous values of the patched keys,
  plus end_time when moving the start clamped it. It is applied verbatim,
  so stored timing shorter than the minimum duration comes back as it was
- split: inverse merges the halves back into the exact original cue;
  re-running reuses the second half's id
- merge: inverse removes the merged cue and reinserts the originals at
  their original indices
- An edit that turned out to be a no-op inverts to NO_OP
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from subtitle_burner.actions.base import (
    ActionKind,
    EditAction,
    executor,
    inverse_builder,
    no_op_action,
)
from subtitle_burner.core.models import AnimationStyle, ProjectState, SubtitleCue, normalize_keys
from subtitle_burner.core.subtitle_engine import PATCHABLE_FIELDS, SubtitleEngine

logger = logging.getLogger(__name__)

DEFAULT_ENGINE = SubtitleEngine()


def _engine(action: EditAction) -> SubtitleEngine:
    return action.payload.get("engine") or DEFAULT_ENGINE


def _index_of(cues: Sequence[SubtitleCue], cue_id: str) -> Optional[int]:
    for index, cue in enumerate(cues):
        if cue.id == cue_id:
            return index
    return None


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def add_cue_action(
    start_time: float,
    end_time: float,
    text: str,
    words: Optional[Iterable[Any]] = None,
    animation_style: Optional[AnimationStyle] = None,
    engine: Optional[SubtitleEngine] = None,
) -> EditAction:
    return EditAction(
        kind=ActionKind.ADD_CUE,
        payload={
            "start_time": start_time,
            "end_time": end_time,
            "text": text,
            "words": tuple(words) if words is not None else None,
            "animation_style": animation_style,
            "engine": engine,
        },
        description=f'Add subtitle "{text[:30]}"',
    )


def remove_cue_action(cue_id: str) -> EditAction:
    return EditAction(kind=ActionKind.REMOVE_CUE, payload={"cue_id": cue_id}, description="Remove subtitle")


def update_cue_action(cue_id: str, patch: Mapping[str, Any]) -> EditAction:
    clean = {k: v for k, v in normalize_keys(patch).items() if k in PATCHABLE_FIELDS}
    return EditAction(
        kind=ActionKind.UPDATE_CUE,
        payload={"cue_id": cue_id, "patch": clean},
        description="Update subtitle",
    )


def _revert_update_action(cue_id: str, previous: Mapping[str, Any]) -> EditAction:
    return EditAction(
        kind=ActionKind.UPDATE_CUE,
        payload={"cue_id": cue_id, "patch": dict(previous), "verbatim": True},
        description="Revert subtitle update",
    )


def split_cue_action(cue_id: str, at_time: float, engine: Optional[SubtitleEngine] = None) -> EditAction:
    return EditAction(
        kind=ActionKind.SPLIT_CUE,
        payload={"cue_id": cue_id, "at_time": at_time, "engine": engine},
        description="Split subtitle",
    )


def merge_cues_action(
    cue_ids: Sequence[str],
    restore: Optional[SubtitleCue] = None,
) -> EditAction:
    """Merge the named cues; ``restore`` replaces the merged result verbatim.

    ``restore`` is how a split is undone: merging the halves alone would
    lose words that straddled the split point and double the text of cues
    without word timing.
    """
    return EditAction(
        kind=ActionKind.MERGE_CUES,
        payload={"cue_ids": tuple(cue_ids), "restore": restore},
        description="Merge subtitles",
    )


def _restore_cue_action(cue: SubtitleCue, index: int) -> EditAction:
    return EditAction(
        kind=ActionKind.RESTORE_CUE,
        payload={"cue": cue, "index": index},
        description="Restore subtitle",
    )


def _restore_cues_action(originals: Sequence[Tuple[int, SubtitleCue]], merged_id: str) -> EditAction:
    return EditAction(
        kind=ActionKind.RESTORE_CUES,
        payload={"originals": tuple(sorted(originals, key=lambda pair: pair[0])), "merged_id": merged_id},
        description="Restore merged subtitles",
    )


# ---------------------------------------------------------------------------
# Add / remove / restore
# ---------------------------------------------------------------------------


@executor(ActionKind.ADD_CUE)
def _execute_add(state: ProjectState, action: EditAction) -> ProjectState:
    engine = _engine(action)
    p = action.payload
    cue_id = action.captured.get("cue_id") or engine.new_id()
    cues = engine.add_cue(
        state.cues,
        start_time=p["start_time"],
        end_time=p["end_time"],
        text=p["text"],
        words=p["words"],
        animation_style=p["animation_style"],
        cue_id=cue_id,
    )
    action.captured["cue_id"] = cue_id
    return dataclasses.replace(state, cues=cues)


@inverse_builder(ActionKind.ADD_CUE)
def _invert_add(action: EditAction) -> EditAction:
    cue_id = action.captured.get("cue_id")
    if cue_id is None:
        return no_op_action("Remove added subtitle")
    return remove_cue_action(cue_id)


@executor(ActionKind.REMOVE_CUE)
def _execute_remove(state: ProjectState, action: EditAction) -> ProjectState:
    cue_id = action.payload["cue_id"]
    index = _index_of(state.cues, cue_id)
    action.captured.clear()
    if index is None:
        logger.debug("Remove skipped: cue %s not in state", cue_id)
        return state
    action.captured.update(cue=state.cues[index], index=index)
    return dataclasses.replace(state, cues=_engine(action).remove_cue(state.cues, cue_id))


@inverse_builder(ActionKind.REMOVE_CUE)
def _invert_remove(action: EditAction) -> EditAction:
    if "cue" not in action.captured:
        return no_op_action("Restore removed subtitle")
    return _restore_cue_action(action.captured["cue"], action.captured["index"])


@executor(ActionKind.RESTORE_CUE)
def _execute_restore(state: ProjectState, action: EditAction) -> ProjectState:
    cues = list(state.cues)
    cues.insert(min(action.payload["index"], len(cues)), action.payload["cue"])
    return dataclasses.replace(state, cues=tuple(cues))


@inverse_builder(ActionKind.RESTORE_CUE)
def _invert_restore(action: EditAction) -> EditAction:
    return remove_cue_action(action.payload["cue"].id)


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


@executor(ActionKind.UPDATE_CUE)
def _execute_update(state: ProjectState, action: EditAction) -> ProjectState:
    cue_id = action.payload["cue_id"]
    patch = action.payload["patch"]
    engine = _engine(action)
    action.captured.clear()
    existing = engine.get_cue_by_id(state.cues, cue_id)
    if existing is None:
        logger.debug("Update skipped: cue %s not in state", cue_id)
        return state

    previous = {key: getattr(existing, key) for key in patch}
    if action.payload.get("verbatim"):
        # Field values as recorded; stored timing is not re-clamped.
        cues = tuple(dataclasses.replace(c, **patch) if c.id == cue_id else c for c in state.cues)
    else:
        cues = engine.update_cue(state.cues, cue_id, patch)
        updated = engine.get_cue_by_id(cues, cue_id)
        if updated is not None and "end_time" not in previous and updated.end_time != existing.end_time:
            previous["end_time"] = existing.end_time
    action.captured["previous"] = previous
    return dataclasses.replace(state, cues=cues)


@inverse_builder(ActionKind.UPDATE_CUE)
def _invert_update(action: EditAction) -> EditAction:
    if "previous" not in action.captured:
        return no_op_action("Revert subtitle update")
    return _revert_update_action(action.payload["cue_id"], action.captured["previous"])


# ---------------------------------------------------------------------------
# Split / merge
# ---------------------------------------------------------------------------


@executor(ActionKind.SPLIT_CUE)
def _execute_split(state: ProjectState, action: EditAction) -> ProjectState:
    cue_id = action.payload["cue_id"]
    at_time = action.payload["at_time"]
    engine = _engine(action)
    original = engine.get_cue_by_id(state.cues, cue_id)
    if original is None or not original.start_time < at_time < original.end_time:
        action.captured.pop("original", None)
        logger.debug("Split skipped: cue %s cannot be split at %.3fs", cue_id, at_time)
        return state

    new_id = action.captured.get("new_id") or engine.new_id()
    cues = engine.split_cue(state.cues, cue_id, at_time, new_id=new_id)
    action.captured.update(original=original, new_id=new_id)
    return dataclasses.replace(state, cues=cues)


@inverse_builder(ActionKind.SPLIT_CUE)
def _invert_split(action: EditAction) -> EditAction:
    original = action.captured.get("original")
    if original is None:
        return no_op_action("Unsplit subtitle")
    return merge_cues_action([original.id, action.captured["new_id"]], restore=original)


@executor(ActionKind.MERGE_CUES)
def _execute_merge(state: ProjectState, action: EditAction) -> ProjectState:
    cue_ids = action.payload["cue_ids"]
    wanted = set(cue_ids)
    originals: List[Tuple[int, SubtitleCue]] = [
        (index, cue) for index, cue in enumerate(state.cues) if cue.id in wanted
    ]
    action.captured.clear()
    if len(cue_ids) < 2 or len(originals) < 2:
        logger.debug("Merge skipped: fewer than two of %s in state", list(cue_ids))
        return state

    cues = _engine(action).merge_cues(state.cues, cue_ids)
    kept_id = next(c.id for c in cues if c.id in wanted)
    restore = action.payload.get("restore")
    if restore is not None:
        cues = tuple(restore if c.id == kept_id else c for c in cues)
        kept_id = restore.id
    action.captured.update(originals=originals, kept_id=kept_id)
    return dataclasses.replace(state, cues=cues)


@inverse_builder(ActionKind.MERGE_CUES)
def _invert_merge(action: EditAction) -> EditAction:
    if "originals" not in action.captured:
        return no_op_action("Unmerge subtitles")
    return _restore_cues_action(action.captured["originals"], action.captured["kept_id"])


@executor(ActionKind.RESTORE_CUES)
def _execute_restore_many(state: ProjectState, action: EditAction) -> ProjectState:
    merged_id = action.payload["merged_id"]
    cues = [c for c in state.cues if c.id != merged_id]
    # Ascending original indices rebuild the pre-merge order exactly.
    for index, cue in action.payload["originals"]:
        cues.insert(min(index, len(cues)), cue)
    return dataclasses.replace(state, cues=tuple(cues))


@inverse_builder(ActionKind.RESTORE_CUES)
def _invert_restore_many(action: EditAction) -> EditAction:
    merged_id = action.payload["merged_id"]
    others = [cue.id for _, cue in action.payload["originals"] if cue.id != merged_id]
    return merge_cues_action([merged_id] + others)
