"""Construction of actions from their type and a config mapping."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from autopipe.action import (
    Action,
    CommandAction,
    DoNothingAction,
    StartAppAction,
    StopAppAction,
    StopTaskAction,
)
from autopipe.common import ActionType, VariableStore, action_type_from_string
from autopipe.input_actions import ClickAction, KeyAction, SwipeAction, TextAction

_ACTION_CLASSES: dict[ActionType, type[Action]] = {
    ActionType.DO_NOTHING: DoNothingAction,
    ActionType.CLICK: ClickAction,
    ActionType.SWIPE: SwipeAction,
    ActionType.KEY: KeyAction,
    ActionType.TEXT: TextAction,
    ActionType.START_APP: StartAppAction,
    ActionType.STOP_APP: StopAppAction,
    ActionType.STOP_TASK: StopTaskAction,
    ActionType.COMMAND: CommandAction,
}


def create_action(
    kind: ActionType | str,
    config: Mapping[str, Any] | None = None,
    variables: VariableStore | None = None,
) -> Action:
    """Build the action for ``kind`` and read ``config`` into it if it is not empty.

    ``kind`` may be an ActionType or its pipeline name; unknown kinds give a
    DoNothing action.
    """
    if isinstance(kind, str):
        kind = action_type_from_string(kind)
    action_class = _ACTION_CLASSES.get(kind, DoNothingAction)
    action = action_class(variables)
    if config:
        action.parse_config(config)
    return action