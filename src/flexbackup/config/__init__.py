"""Settings for undoable transitions."""

from flexbackup.config.settings import (
    DEFAULT_APPLY_TYPE,
    DEFAULT_MOMENT_MARKER,
    DEFAULT_REDO_TYPE,
    DEFAULT_UNDO_TYPE,
    UndoSettings,
    load_settings,
)

__all__ = [
    "DEFAULT_APPLY_TYPE",
    "DEFAULT_MOMENT_MARKER",
    "DEFAULT_REDO_TYPE",
    "DEFAULT_UNDO_TYPE",
    "UndoSettings",
    "load_settings",
]
