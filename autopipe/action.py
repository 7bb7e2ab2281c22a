"""Actions a pipeline node performs after recognition."""

from __future__ import annotations

import abc
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from autopipe.common import ActionType, RecognitionResult, VariableStore

_EXPRESSION_MARKS = ("%", "[", "{")

STOP_TASK_REASON = "Task stopped by StopTaskAction"


def _string_field(config: Mapping[str, Any], key: str) -> str:
    value = config[key]
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _bool_field(config: Mapping[str, Any], key: str) -> bool:
    value = config[key]
    if not isinstance(value, bool):
        raise TypeError(f"'{key}' must be a boolean, got {type(value).__name__}")
    return value


def _string_list_field(config: Mapping[str, Any], key: str) -> list[str]:
    value = config[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise TypeError(f"'{key}' must be a list of strings")
    return list(value)


class Action(abc.ABC):
    """Base of all actions; holds the variable store used for expansion."""

    kind: ClassVar[ActionType]

    def __init__(self, variables: VariableStore | None = None) -> None:
        self.variables = variables

    def parse_config(self, config: Mapping[str, Any]) -> None:
        """Read this action's settings from a config mapping."""

    @abc.abstractmethod
    def execute(self, result: RecognitionResult) -> bool:
        """Perform the action; return whether it succeeded."""

    def _expand(self, text: str) -> str:
        """Run ``text`` through the variable store if it holds an expression."""
        if self.variables is not None and any(mark in text for mark in _EXPRESSION_MARKS):
            return self.variables.process_string(text)
        return text


class DoNothingAction(Action):
    """An action that always succeeds without doing anything."""

    kind = ActionType.DO_NOTHING

    def execute(self, result: RecognitionResult) -> bool:
        return True


class StopTaskAction(Action):
    """Stops the running task through a callback."""

    kind = ActionType.STOP_TASK

    def __init__(
        self,
        variables: VariableStore | None = None,
        on_stop: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__(variables)
        self.on_stop = on_stop

    def execute(self, result: RecognitionResult) -> bool:
        if self.on_stop is not None:
            self.on_stop(STOP_TASK_REASON)
        return True


class _PackageAction(Action):
    verb: ClassVar[str]
    package: str = ""

    def parse_config(self, config: Mapping[str, Any]) -> None:
        if "package" in config:
            self.package = _string_field(config, "package")

    def execute(self, result: RecognitionResult) -> bool:
        if not self.package:
            return False
        print(f"{self.verb} app: {self._expand(self.package)}")
        return True


class StartAppAction(_PackageAction):
    """Starts an application by package name."""

    kind = ActionType.START_APP
    verb = "Starting"

    def parse_config(self, config: Mapping[str, Any]) -> None:
        super().parse_config(config)

    def execute(self, result: RecognitionResult) -> bool:
        return super().execute(result)


class StopAppAction(_PackageAction):
    """Stops an application by package name."""

    kind = ActionType.STOP_APP
    verb = "Stopping"

    def parse_config(self, config: Mapping[str, Any]) -> None:
        super().parse_config(config)

    def execute(self, result: RecognitionResult) -> bool:
        return super().execute(result)


class CommandAction(Action):
    """Announces a command line built from the config."""

    kind = ActionType.COMMAND
    executable: str = ""
    args: tuple[str, ...] = ()
    detach: bool = False

    def parse_config(self, config: Mapping[str, Any]) -> None:
        if "exec" in config:
            self.executable = _string_field(config, "exec")
        if "args" in config:
            self.args = tuple(_string_list_field(config, "args"))
        if "detach" in config:
            self.detach = _bool_field(config, "detach")

    def execute(self, result: RecognitionResult) -> bool:
        if not self.executable:
            return False
        words = [self._expand(self.executable), *(self._expand(arg) for arg in self.args)]
        suffix = " (detached)" if self.detach else ""
        print(f"Executing command: {' '.join(words)}{suffix}")
        return True