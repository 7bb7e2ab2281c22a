"""Shared types: recognition and action kinds, geometry, results and variables."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


class RecognitionType(enum.Enum):
    """Recognition algorithms a node can use, valued by their pipeline names."""

    DIRECT_HIT = "DirectHit"
    TEMPLATE_MATCH = "TemplateMatch"
    FIND_COLOR = "findcolor"
    OCR = "OCR"
    FIND_MULTI_COLOR = "findMultiColor"
    FIND_COLOR_LIST = "findcolorlist"
    FIND_MULTI_COLOR_LIST = "findMultiColorlist"


class ActionType(enum.Enum):
    """Actions a node can perform, valued by their pipeline names."""

    DO_NOTHING = "DoNothing"
    CLICK = "Click"
    SWIPE = "Swipe"
    KEY = "Key"
    TEXT = "Text"
    START_APP = "StartApp"
    STOP_APP = "StopApp"
    STOP_TASK = "StopTask"
    COMMAND = "Command"


def recognition_type_from_string(text: str) -> RecognitionType:
    """Look up a recognition type by name; unknown names give DirectHit."""
    try:
        return RecognitionType(text)
    except ValueError:
        return RecognitionType.DIRECT_HIT


def recognition_type_to_string(kind: RecognitionType) -> str:
    """Return the pipeline name of a recognition type."""
    return kind.value


def action_type_from_string(text: str) -> ActionType:
    """Look up an action type by name; unknown names give DoNothing."""
    try:
        return ActionType(text)
    except ValueError:
        return ActionType.DO_NOTHING


def action_type_to_string(kind: ActionType) -> str:
    """Return the pipeline name of an action type."""
    return kind.value


def _half(value: int) -> int:
    """Integer half, truncated toward zero."""
    return value // 2 if value >= 0 else -((-value) // 2)


@dataclass(frozen=True)
class Point:
    """A screen coordinate."""

    x: int
    y: int


@dataclass(frozen=True)
class Rect:
    """A rectangle given by its top-left and bottom-right corners."""

    x1: int
    y1: int
    x2: int
    y2: int


@dataclass(frozen=True)
class Box:
    """A rectangle given by its origin and size."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def center(self) -> Point:
        """The middle of the box."""
        return Point(self.x + _half(self.width), self.y + _half(self.height))


@dataclass
class RecognitionResult:
    """What a recognition step found."""

    success: bool = False
    box: Box = field(default_factory=Box)
    score: float = 0.0
    text: str = ""


@runtime_checkable
class VariableStore(Protocol):
    """The variable interface that actions and nodes rely on."""

    def process_string(self, text: str) -> str:
        """Substitute variables and run embedded operations in ``text``."""

    def get_variable(self, name: str) -> object | None:
        """Return the value of a variable, or None if it is unset."""

    def set_variable(self, name: str, value: object) -> None:
        """Assign a value to a variable."""

    def evaluate_condition(self, expression: str) -> bool:
        """Evaluate a condition expression."""