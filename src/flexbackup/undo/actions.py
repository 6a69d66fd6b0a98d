"""Actions and action classification for undoable transitions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from flexbackup.config import (
    DEFAULT_APPLY_TYPE,
    DEFAULT_MOMENT_MARKER,
    DEFAULT_REDO_TYPE,
    DEFAULT_UNDO_TYPE,
    UndoSettings,
)


@dataclass(frozen=True)
class Action:
    """An action passed to a transition function.

    Attributes:
        type: Action tag. Tags containing the moment marker record a moment.
        payload: Arbitrary data for the transition. For undo/redo an ``int``
            payload is the number of steps.
        undoable: Records a moment regardless of the tag.
    """

    type: str
    payload: Any = None
    undoable: bool = False

    @classmethod
    def of(cls, value: Action | str | Mapping[str, Any]) -> Action:
        """Coerce a tag string or ``{"type": ...}`` mapping into an Action."""
        if isinstance(value, Action):
            return value
        if isinstance(value, str):
            return cls(type=value)
        if isinstance(value, Mapping) and "type" in value:
            return cls(
                type=value["type"],
                payload=value.get("payload"),
                undoable=bool(value.get("undoable", False)),
            )
        raise TypeError(f"Cannot interpret {value!r} as an action")


class ActionKind(Enum):
    """How an undoable transition treats an action."""

    INIT = "init"
    UNDO = "undo"
    REDO = "redo"
    APPLY = "apply"
    UNDOABLE = "undoable"
    OTHER = "other"


def undoable_action_type(feature: str, name: str, marker: str = DEFAULT_MOMENT_MARKER) -> str:
    """Build the tag for an undoable action, e.g. ``"editor/undoable/insert"``."""
    return f"{feature}{marker}{name}"


class ActionCreator:
    """Callable that builds actions sharing one tag."""

    def __init__(self, type: str) -> None:
        self.type = type

    def __call__(self, payload: Any = None) -> Action:
        return Action(type=self.type, payload=payload)

    def match(self, action: Action | str | Mapping[str, Any]) -> bool:
        return Action.of(action).type == self.type

    def __repr__(self) -> str:
        return f"ActionCreator({self.type!r})"


def create_undoable_action(
    feature: str, name: str, marker: str = DEFAULT_MOMENT_MARKER
) -> ActionCreator:
    """Create an action creator whose actions record a moment."""
    return ActionCreator(undoable_action_type(feature, name, marker))


UNDO = Action(type=DEFAULT_UNDO_TYPE)
REDO = Action(type=DEFAULT_REDO_TYPE)
APPLY = Action(type=DEFAULT_APPLY_TYPE)


def undo(steps: int = 1) -> Action:
    """Undo action stepping back ``steps`` moments."""
    return Action(type=DEFAULT_UNDO_TYPE, payload=steps)


def redo(steps: int = 1) -> Action:
    """Redo action stepping forward ``steps`` moments."""
    return Action(type=DEFAULT_REDO_TYPE, payload=steps)


def classify_action(action: Action, settings: UndoSettings, is_init: bool = False) -> ActionKind:
    """Decide how an undoable transition handles ``action``.

    Control tags match exactly; the moment marker matches anywhere in the tag.
    """
    if is_init:
        return ActionKind.INIT
    if action.type == settings.undo_type:
        return ActionKind.UNDO
    if action.type == settings.redo_type:
        return ActionKind.REDO
    if action.type == settings.apply_type:
        return ActionKind.APPLY
    if action.undoable or settings.moment_marker in action.type:
        return ActionKind.UNDOABLE
    return ActionKind.OTHER


def rewind_steps(action: Action) -> int:
    """Number of steps requested by an undo/redo action (default 1)."""
    payload = action.payload
    if isinstance(payload, int) and not isinstance(payload, bool):
        return payload
    return 1
