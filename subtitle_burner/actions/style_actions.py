"""Undoable style edits: property patches and template application.

HOW: Same shape as subtitle_actions.py. UPDATE_STYLE records the previous
values of the keys it patched; APPLY_TEMPLATE records the whole previous
style plus the previously active template id so undo restores both.

RULES:
- Patch keys may be camelCase or snake_case; keys that are not style
  fields are dropped
- Every resulting style passes through the sanitizer
- Description: "Update <camelCaseKey>" for a single key, otherwise
  "Update <n> style properties"
"""

from __future__ import annotations

import dataclasses
from typing import Any, Mapping, Optional, Union

from subtitle_burner.actions.base import (
    ActionKind,
    EditAction,
    executor,
    inverse_builder,
    no_op_action,
)
from subtitle_burner.core.models import STYLE_FIELDS, ProjectState, SubtitleStyle, normalize_keys, to_camel
from subtitle_burner.core.style import merge_style, sanitize_style
from subtitle_burner.core.templates import SubtitleTemplate


def update_style_action(patch: Mapping[str, Any]) -> EditAction:
    style_patch = {k: v for k, v in normalize_keys(patch).items() if k in STYLE_FIELDS}
    if len(style_patch) == 1:
        description = f"Update {to_camel(next(iter(style_patch)))}"
    else:
        description = f"Update {len(style_patch)} style properties"
    return EditAction(
        kind=ActionKind.UPDATE_STYLE,
        payload={"patch": style_patch},
        description=description,
    )


def apply_template_action(
    template: Union[SubtitleTemplate, str],
    style: Optional[Union[SubtitleStyle, Mapping[str, Any]]] = None,
) -> EditAction:
    """Replace the style with a template's.

    Accepts a SubtitleTemplate, or a template id plus its style.
    """
    if isinstance(template, SubtitleTemplate):
        template_id, style = template.id, template.style
    else:
        template_id = template
    return EditAction(
        kind=ActionKind.APPLY_TEMPLATE,
        payload={"template_id": template_id, "style": sanitize_style(style)},
        description="Apply template",
    )


def _restore_style_action(style: SubtitleStyle, template_id: Optional[str]) -> EditAction:
    return EditAction(
        kind=ActionKind.RESTORE_STYLE,
        payload={"style": style, "template_id": template_id},
        description="Restore previous style",
    )


@executor(ActionKind.UPDATE_STYLE)
def _execute_update_style(state: ProjectState, action: EditAction) -> ProjectState:
    patch = action.payload["patch"]
    action.captured["previous"] = {key: getattr(state.style, key) for key in patch}
    return dataclasses.replace(state, style=merge_style(state.style, patch))


@inverse_builder(ActionKind.UPDATE_STYLE)
def _invert_update_style(action: EditAction) -> EditAction:
    if "previous" not in action.captured:
        return no_op_action("Revert style update")
    return update_style_action(action.captured["previous"])


def _swap_style(state: ProjectState, action: EditAction) -> ProjectState:
    action.captured.update(style=state.style, template_id=state.active_template_id)
    return dataclasses.replace(
        state,
        style=action.payload["style"],
        active_template_id=action.payload["template_id"],
    )


def _invert_swap(action: EditAction) -> EditAction:
    if "style" not in action.captured:
        return no_op_action("Restore previous style")
    return _restore_style_action(action.captured["style"], action.captured["template_id"])


executor(ActionKind.APPLY_TEMPLATE)(_swap_style)
executor(ActionKind.RESTORE_STYLE)(_swap_style)
inverse_builder(ActionKind.APPLY_TEMPLATE)(_invert_swap)
inverse_builder(ActionKind.RESTORE_STYLE)(_invert_swap)
