"""A single pipeline node: its recognition settings, action, links and logs."""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

from autopipe.action import Action
from autopipe.common import (
    ActionType,
    RecognitionType,
    VariableStore,
    action_type_from_string,
    recognition_type_from_string,
)
from autopipe.factory import create_action

_TRUE = "true"
_FALSE = "false"


def _branch_key(flag: bool) -> str:
    return _TRUE if flag else _FALSE


def _name_list(value: Any, key: str) -> list[str] | None:
    """Read a node-name list given as one string or a list of strings.

    Values of any other type are ignored and give None.
    """
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        if not all(isinstance(item, str) for item in value):
            raise TypeError(f"'{key}' must be a string or a list of strings")
        return list(value)
    return None


def _bool_value(config: Mapping[str, Any], key: str) -> bool:
    value = config[key]
    if not isinstance(value, bool):
        raise TypeError(f"'{key}' must be a boolean, got {type(value).__name__}")
    return value


def _string_value(config: Mapping[str, Any], key: str) -> str:
    value = config[key]
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _millis_value(config: Mapping[str, Any], key: str) -> int:
    value = config[key]
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise TypeError(f"'{key}' must be a non-negative integer")
    return value


class Node:
    """One named step of a pipeline, configured from a JSON-like mapping."""

    def __init__(self, name: str, variables: VariableStore | None = None) -> None:
        self.name = name
        self.variables = variables
        self.recognition_type: RecognitionType = RecognitionType.DIRECT_HIT
        self.recognition_config: dict[str, Any] = {}
        self.action_type: ActionType = ActionType.DO_NOTHING
        self.action: Action | None = None
        self.next_nodes: list[str] = []
        self.interrupt_nodes: list[str] = []
        self.on_error_nodes: list[str] = []
        self.variable_definitions: list[str] = []
        self.condition: str = ""
        self.condition_process: dict[str, Any] = {}
        self.override_next_nodes: list[str] = []
        self.override_interrupt_nodes: list[str] = []
        self.var_operations: dict[str, str] = {}
        self.condition_logs: dict[str, str] = {}
        self.logs: dict[str, str] = {}
        self.enabled: bool = True
        self.inverse: bool = False
        self.timeout: int = 0
        self.pre_delay: int = 0
        self.post_delay: int = 0
        self.focus: bool = False

    def initialize(self, config: Mapping[str, Any]) -> None:
        """Read the node's settings from its config mapping."""
        self._parse_recognition(config)
        self._parse_action(config)

        for key, attribute in (
            ("next", "next_nodes"),
            ("interrupt", "interrupt_nodes"),
            ("on_error", "on_error_nodes"),
            ("var", "variable_definitions"),
        ):
            if key in config:
                names = _name_list(config[key], key)
                if names is not None:
                    setattr(self, attribute, names)

        if "condition" in config:
            self.condition = _string_value(config, "condition")

        process = config.get("condition_process")
        if isinstance(process, Mapping):
            self._parse_condition_process(process)

        log = config.get("log")
        if isinstance(log, Mapping):
            for key in log:
                self.logs[key] = _string_value(log, key)

        if "enabled" in config:
            self.enabled = _bool_value(config, "enabled")
        if "inverse" in config:
            self.inverse = _bool_value(config, "inverse")
        if "timeout" in config:
            self.timeout = _millis_value(config, "timeout")
        if "pre_delay" in config:
            self.pre_delay = _millis_value(config, "pre_delay")
        if "post_delay" in config:
            self.post_delay = _millis_value(config, "post_delay")
        if "focus" in config:
            self.focus = _bool_value(config, "focus")

    def _parse_recognition(self, config: Mapping[str, Any]) -> None:
        spec = config.get("recognition")
        if isinstance(spec, str):
            self.recognition_type = recognition_type_from_string(spec)
            self.recognition_config = dict(config)
        elif isinstance(spec, Mapping) and "type" in spec:
            self.recognition_type = recognition_type_from_string(_string_value(spec, "type"))
            self.recognition_config = dict(spec)

    def _parse_action(self, config: Mapping[str, Any]) -> None:
        spec = config.get("action")
        action_config: Mapping[str, Any] = {}
        kind = ActionType.DO_NOTHING
        if isinstance(spec, str):
            kind = action_type_from_string(spec)
            action_config = config
        elif isinstance(spec, Mapping) and "type" in spec:
            kind = action_type_from_string(_string_value(spec, "type"))
            action_config = spec
        self.action_type = kind
        self.action = create_action(kind, action_config, self.variables)

    def _parse_condition_process(self, process: Mapping[str, Any]) -> None:
        self.condition_process = dict(process)
        for flag in (True, False):
            key = _branch_key(flag)
            branch = process.get(key)
            if not isinstance(branch, Mapping):
                continue
            if flag:
                self._apply_overrides(branch)
            if "var_operation" in branch:
                self.var_operations[key] = _string_value(branch, "var_operation")
            if "condition_log" in branch:
                self.condition_logs[key] = _string_value(branch, "condition_log")

    def _apply_overrides(self, branch: Mapping[str, Any]) -> None:
        if "override_next" in branch:
            names = _name_list(branch["override_next"], "override_next")
            if names is not None:
                self.override_next_nodes = names
        if "override_interrupt" in branch:
            names = _name_list(branch["override_interrupt"], "override_interrupt")
            if names is not None:
                self.override_interrupt_nodes = names

    def execute_action(self, result) -> bool:
        """Run the node's action, then wait out the post delay."""
        if not self.enabled or self.action is None:
            return False
        success = self.action.execute(result)
        if self.post_delay > 0:
            time.sleep(self.post_delay / 1000)
        return success

    def check_condition(self, variables: VariableStore) -> bool:
        """Whether the node's condition holds; no condition always holds."""
        if not self.condition:
            return True
        return variables.evaluate_condition(self.condition)

    def process_condition(self, variables: VariableStore, condition_result: bool) -> None:
        """Apply the branch of condition_process chosen by ``condition_result``."""
        if not self.condition_process:
            return
        self.override_next_nodes = []
        self.override_interrupt_nodes = []
        branch = self.condition_process.get(_branch_key(condition_result))
        if isinstance(branch, Mapping):
            self._apply_overrides(branch)
        self.execute_var_operation(variables, condition_result)
        self.process_condition_log(variables, condition_result)

    def process_condition_log(
        self, variables: VariableStore, condition_result: bool
    ) -> str | None:
        """Print the condition log for the branch taken and return the line."""
        key = _branch_key(condition_result)
        template = self.condition_logs.get(key)
        if template is None:
            return None
        line = f"[{self.name}] Condition {key}: {variables.process_string(template)}"
        print(line)
        return line

    def execute_var_operation(
        self, variables: VariableStore, condition_result: bool
    ) -> None:
        """Run the variable operations of the branch taken."""
        operation = self.var_operations.get(_branch_key(condition_result))
        if operation is not None:
            variables.process_string(operation)

    def process_log(self, variables: VariableStore, success: bool) -> str | None:
        """Print the log for the given outcome and return the line."""
        template = self.logs.get(_branch_key(success))
        if template is None:
            return None
        line = f"[{self.name}] {variables.process_string(template)}"
        print(line)
        return line