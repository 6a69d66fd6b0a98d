"""Compact, invertible diff history."""

from flexbackup.history.diff import (
    HistoryWalk,
    Rewind,
    create_history,
    iterate_history,
    restore,
    restore_with_rewind,
)
from flexbackup.history.strategy import (
    DEFAULT_STRATEGY,
    DeltaStrategy,
    JsonPatchDelta,
    JsonPatchStrategy,
)

__all__ = [
    "DEFAULT_STRATEGY",
    "DeltaStrategy",
    "HistoryWalk",
    "JsonPatchDelta",
    "JsonPatchStrategy",
    "Rewind",
    "create_history",
    "iterate_history",
    "restore",
    "restore_with_rewind",
]
