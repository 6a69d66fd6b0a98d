"""flexbackup - flexible state backup/restore and diff-based undo/redo.

Declare how each slice of a state tree is saved and loaded, then snapshot,
restore, persist or time-travel through it.

Quick Start:
    from flexbackup import COPY, Codec, CodecTree, UndoableTransition, UNDO

    tree = CodecTree({"doc": COPY})
    undoable = UndoableTransition(transition, tree, history_limit=100)

    env = undoable(None, "init")
    env = undoable(env, "editor/undoable/type")
    env = undoable(env, UNDO)
"""

from __future__ import annotations

from flexbackup.backup import COPY, Codec, CodecNode, CodecTree, DependencyLoader, create_backup, load_backup
from flexbackup.config import UndoSettings, load_settings
from flexbackup.errors import (
    CircularDependencyError,
    CodecTreeError,
    ConfigurationError,
    ConfigValidationError,
    DuplicateLoadError,
    ErrorCode,
    ErrorContext,
    FlexBackupError,
    HistoryError,
    LoadError,
    StorageError,
    UnknownSliceError,
)
from flexbackup.history import (
    DeltaStrategy,
    HistoryWalk,
    JsonPatchDelta,
    JsonPatchStrategy,
    Rewind,
    create_history,
    iterate_history,
    restore,
    restore_with_rewind,
)
from flexbackup.storage import (
    InMemoryStorage,
    KeyValueStorage,
    PersistingTransition,
    load_from_storage,
    save_to_storage,
)
from flexbackup.undo import (
    APPLY,
    REDO,
    UNDO,
    Action,
    ActionCreator,
    ActionKind,
    Outcome,
    UndoableState,
    UndoableTransition,
    classify_action,
    create_undoable_action,
    create_undoable_transition,
    iterate_undo_history,
    redo,
    undo,
    undoable_action_type,
)

__version__ = "0.4.0"

__all__ = [
    # Backup
    "COPY",
    "Codec",
    "CodecNode",
    "CodecTree",
    "DependencyLoader",
    "create_backup",
    "load_backup",
    # History
    "DeltaStrategy",
    "HistoryWalk",
    "JsonPatchDelta",
    "JsonPatchStrategy",
    "Rewind",
    "create_history",
    "iterate_history",
    "restore",
    "restore_with_rewind",
    # Undo
    "APPLY",
    "REDO",
    "UNDO",
    "Action",
    "ActionCreator",
    "ActionKind",
    "Outcome",
    "UndoableState",
    "UndoableTransition",
    "classify_action",
    "create_undoable_action",
    "create_undoable_transition",
    "iterate_undo_history",
    "redo",
    "undo",
    "undoable_action_type",
    # Storage
    "InMemoryStorage",
    "KeyValueStorage",
    "PersistingTransition",
    "load_from_storage",
    "save_to_storage",
    # Config
    "UndoSettings",
    "load_settings",
    # Errors
    "CircularDependencyError",
    "CodecTreeError",
    "ConfigurationError",
    "ConfigValidationError",
    "DuplicateLoadError",
    "ErrorCode",
    "ErrorContext",
    "FlexBackupError",
    "HistoryError",
    "LoadError",
    "StorageError",
    "UnknownSliceError",
]
