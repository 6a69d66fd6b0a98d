"""Undo/redo for pure transition functions."""

from flexbackup.undo.actions import (
    APPLY,
    REDO,
    UNDO,
    Action,
    ActionCreator,
    ActionKind,
    classify_action,
    create_undoable_action,
    redo,
    undo,
    undoable_action_type,
)
from flexbackup.undo.envelope import Outcome, UndoableState
from flexbackup.undo.reducer import (
    Transition,
    UndoableTransition,
    create_undoable_transition,
    iterate_undo_history,
)

__all__ = [
    "APPLY",
    "REDO",
    "UNDO",
    "Action",
    "ActionCreator",
    "ActionKind",
    "Outcome",
    "Transition",
    "UndoableState",
    "UndoableTransition",
    "classify_action",
    "create_undoable_action",
    "create_undoable_transition",
    "iterate_undo_history",
    "redo",
    "undo",
    "undoable_action_type",
]
