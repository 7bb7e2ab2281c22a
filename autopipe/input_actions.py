"""Input actions: clicking, swiping, key presses and text entry."""

from __future__ import annotations

import random
import re
from collections.abc import Mapping, Sequence
from typing import Any, Union

from autopipe.action import Action, _string_field
from autopipe.common import ActionType, Point, RecognitionResult, Rect

Target = Union[bool, str, tuple[int, ...]]

_COORDINATE = re.compile(r"\s*(\d+)\s*,\s*(\d+)\s*")
_POINT_VARIABLE = re.compile(r"%p[a-zA-Z0-9_]+")
_RECT_VARIABLE = re.compile(r"%r[a-zA-Z0-9_]+")
_EXPRESSION_MARKS = ("%", "[", "{")

DEFAULT_OFFSET: tuple[int, ...] = (0, 0, 0, 0)
DEFAULT_DURATION = 200


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _int_list(config: Mapping[str, Any], key: str) -> tuple[int, ...]:
    value = config[key]
    if not isinstance(value, list) or not all(_is_int(item) for item in value):
        raise TypeError(f"'{key}' must be a list of integers")
    return tuple(value)


def _target_field(config: Mapping[str, Any], key: str, current: Target) -> Target:
    """Read a target spec: a boolean, a string or a list of integers."""
    if key not in config:
        return current
    value = config[key]
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return _int_list(config, key)
    return current


def _random_below(limit: int) -> int:
    return random.randrange(limit) if limit > 0 else 0


def _point_in_region(coords: Sequence[int]) -> Point | None:
    if len(coords) >= 4:
        x, y, width, height = coords[:4]
        if width == 0 and height == 0:
            return Point(x, y)
        return Point(x + _random_below(width), y + _random_below(height))
    if len(coords) >= 2:
        return Point(coords[0], coords[1])
    return None


def _apply_offset(point: Point, offset: Sequence[int]) -> Point:
    if len(offset) < 2:
        return point
    x = point.x + offset[0]
    y = point.y + offset[1]
    if len(offset) >= 4:
        x += _random_below(offset[2])
        y += _random_below(offset[3])
    return Point(x, y)


class _PositionedAction(Action):
    """Resolves target specs to screen points."""

    def _has_expression(self, text: str) -> bool:
        return self.variables is not None and any(mark in text for mark in _EXPRESSION_MARKS)

    def _variable_of_type(self, text: str, pattern: re.Pattern[str], kind: type) -> Any:
        match = pattern.search(text)
        if match is None or self.variables is None:
            return None
        value = self.variables.get_variable(match.group(0))
        return value if isinstance(value, kind) else None

    def _resolve(
        self, target: Target, result: RecognitionResult, allow_rect: bool = False
    ) -> Point | None:
        if isinstance(target, bool):
            if target and result.success:
                return result.box.center()
            return None
        if isinstance(target, str):
            if not self._has_expression(target):
                return result.box.center() if result.success else None
            assert self.variables is not None
            processed = self.variables.process_string(target)
            match = _COORDINATE.search(processed)
            if match is not None:
                return Point(int(match.group(1)), int(match.group(2)))
            if "%p" in target:
                point = self._variable_of_type(target, _POINT_VARIABLE, Point)
                if point is not None:
                    return point
            if allow_rect and "%r" in target:
                rect = self._variable_of_type(target, _RECT_VARIABLE, Rect)
                if rect is not None:
                    return Point(rect.x2, rect.y2)
            return None
        return _point_in_region(target)


class ClickAction(_PositionedAction):
    """Clicks at a recognised box, a fixed point, a region or a variable."""

    kind = ActionType.CLICK

    def __init__(self, variables=None) -> None:
        super().__init__(variables)
        self.target: Target = True
        self.target_offset: tuple[int, ...] = DEFAULT_OFFSET
        self.last_position: Point | None = None

    def parse_config(self, config: Mapping[str, Any]) -> None:
        self.target = _target_field(config, "target", self.target)
        if "target_offset" in config:
            self.target_offset = _int_list(config, "target_offset")

    def execute(self, result: RecognitionResult) -> bool:
        point = self._resolve(self.target, result)
        if point is None or len(self.target_offset) < 2:
            return False
        point = _apply_offset(point, self.target_offset)
        self.last_position = point
        print(f"Clicking at: {point.x}, {point.y}")
        return True


class SwipeAction(_PositionedAction):
    """Swipes between two resolved points and records them as variables."""

    kind = ActionType.SWIPE

    def __init__(self, variables=None) -> None:
        super().__init__(variables)
        self.begin: Target = True
        self.begin_offset: tuple[int, ...] = DEFAULT_OFFSET
        self.end: Target = True
        self.end_offset: tuple[int, ...] = DEFAULT_OFFSET
        self.duration: int = DEFAULT_DURATION
        self.last_path: tuple[Point, Point] | None = None

    def parse_config(self, config: Mapping[str, Any]) -> None:
        self.begin = _target_field(config, "begin", self.begin)
        if "begin_offset" in config:
            self.begin_offset = _int_list(config, "begin_offset")
        self.end = _target_field(config, "end", self.end)
        if "end_offset" in config:
            self.end_offset = _int_list(config, "end_offset")
        if "duration" in config:
            duration = config["duration"]
            if not _is_int(duration) or duration < 0:
                raise TypeError("'duration' must be a non-negative integer")
            self.duration = duration

    def execute(self, result: RecognitionResult) -> bool:
        begin = self._resolve(self.begin, result)
        end = self._resolve(self.end, result, allow_rect=True)
        if begin is None or end is None:
            return False
        begin = _apply_offset(begin, self.begin_offset)
        end = _apply_offset(end, self.end_offset)
        self.last_path = (begin, end)
        print(
            f"Swiping from: ({begin.x}, {begin.y}) to ({end.x}, {end.y}) "
            f"with duration: {self.duration}ms"
        )
        if self.variables is not None:
            area = Rect(
                min(begin.x, end.x),
                min(begin.y, end.y),
                max(begin.x, end.x),
                max(begin.y, end.y),
            )
            self.variables.set_variable("%pLastSwipeBegin", begin)
            self.variables.set_variable("%pLastSwipeEnd", end)
            self.variables.set_variable("%rLastSwipeArea", area)
        return True


class KeyAction(Action):
    """Presses one or more key codes in order."""

    kind = ActionType.KEY

    def __init__(self, variables=None) -> None:
        super().__init__(variables)
        self.keys: list[int] = []

    def parse_config(self, config: Mapping[str, Any]) -> None:
        if "key" not in config:
            return
        value = config["key"]
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            self.keys.append(int(value))
        elif isinstance(value, list):
            self.keys = list(_int_list(config, "key"))

    def execute(self, result: RecognitionResult) -> bool:
        if not self.keys:
            return False
        for key in self.keys:
            print(f"Pressing key: {key}")
        return True


class TextAction(Action):
    """Types a string, expanding variable expressions first."""

    kind = ActionType.TEXT

    def __init__(self, variables=None) -> None:
        super().__init__(variables)
        self.input_text: str = ""

    def parse_config(self, config: Mapping[str, Any]) -> None:
        if "input_text" in config:
            self.input_text = _string_field(config, "input_text")

    def execute(self, result: RecognitionResult) -> bool:
        if not self.input_text:
            return False
        print(f"Inputting text: {self._expand(self.input_text)}")
        return True