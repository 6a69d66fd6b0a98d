"""The undoable envelope: host state plus present/history/future."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

ENVELOPE_KEYS = ("history", "present", "future")


class Outcome(Enum):
    """What the last undoable transition did."""

    INITIALIZED = "initialized"
    MOMENT_RECORDED = "moment_recorded"
    UNDONE = "undone"
    REDONE = "redone"
    RESYNCED = "resynced"
    PASSED_THROUGH = "passed_through"
    NOTHING_TO_UNDO = "nothing_to_undo"
    NOTHING_TO_REDO = "nothing_to_redo"
    ZERO_DISTANCE = "zero_distance"

    @property
    def changed(self) -> bool:
        """False when the transition was a reported no-op."""
        return self not in (Outcome.NOTHING_TO_UNDO, Outcome.NOTHING_TO_REDO, Outcome.ZERO_DISTANCE)


@dataclass(frozen=True)
class UndoableState:
    """Immutable envelope around a host state.

    Every undoable transition returns a new instance; existing instances are
    never modified, so callers may keep old envelopes for comparison.

    Attributes:
        state: The host application's state.
        history: Deltas stepping back from ``present``, newest first.
        present: Snapshot of the most recent moment, ``None`` before the first.
        future: Deltas stepping forward again, most recently undone first.
        outcome: What the transition that produced this envelope did.
    """

    state: Mapping[str, Any]
    history: tuple[Any, ...] = ()
    present: dict[str, Any] | None = None
    future: tuple[Any, ...] = ()
    outcome: Outcome = Outcome.PASSED_THROUGH

    @property
    def can_undo(self) -> bool:
        return len(self.history) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.future) > 0

    def evolve(self, **changes: Any) -> UndoableState:
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Flatten into the host state extended with history/present/future."""
        return {
            **self.state,
            "history": list(self.history),
            "present": self.present,
            "future": list(self.future),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UndoableState:
        """Rebuild an envelope from ``to_dict`` output."""
        state = {k: v for k, v in data.items() if k not in ENVELOPE_KEYS}
        return cls(
            state=state,
            history=tuple(data.get("history") or ()),
            present=data.get("present"),
            future=tuple(data.get("future") or ()),
        )
