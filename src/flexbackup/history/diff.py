"""Diff-based history records.

History is a list of deltas, newest first. Applying ``history[0]`` to the
present snapshot yields the previous moment, applying ``history[1]`` to that
yields the one before, and so on.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, Generic, NamedTuple, TypeVar

from flexbackup.history.strategy import DEFAULT_STRATEGY, DeltaStrategy

S = TypeVar("S")


class Rewind(NamedTuple):
    """Result of ``restore_with_rewind``."""

    restored: Any
    reverse_delta: Any


def create_history(next: S, prev: S, *, strategy: DeltaStrategy | None = None) -> Any:
    """Create a history record.

    The record turns ``next`` back into ``prev``; argument order matters
    because asymmetric delta encodings express additions and removals
    relative to the "new" side.

    Args:
        next: New moment.
        prev: Previous moment.
    """
    return (strategy or DEFAULT_STRATEGY).diff(next, prev)


def restore(current: S, record: Any, *, strategy: DeltaStrategy | None = None) -> S:
    """Restore a previous state from a delta record.

    ``current`` is cloned first and never modified.
    """
    strategy = strategy or DEFAULT_STRATEGY
    return strategy.patch(strategy.clone(current), record)


def restore_with_rewind(
    current: S, record: Any, *, strategy: DeltaStrategy | None = None
) -> Rewind:
    """Restore a state and return the delta that steps back again.

    The reverse delta comes from the strategy's inverse rather than a fresh
    diff, so stepping back reproduces ``current`` exactly.
    """
    strategy = strategy or DEFAULT_STRATEGY
    restored = strategy.patch(strategy.clone(current), record)
    return Rewind(restored, strategy.reverse(record))


class HistoryWalk(Generic[S]):
    """Lazy, restartable walk through a delta history.

    Each iteration starts again from ``current`` and yields the state after
    each delta is applied in turn. Nothing is computed until iterated, and
    stopping early leaves the rest of the history untouched.
    """

    def __init__(
        self,
        current: S | None,
        history: Sequence[Any],
        strategy: DeltaStrategy | None = None,
    ) -> None:
        self.current = current
        self.history = history
        self.strategy = strategy

    def __iter__(self) -> Iterator[S]:
        if self.current is None:
            return
        state = self.current
        for record in self.history:
            state = restore(state, record, strategy=self.strategy)
            yield state

    def __len__(self) -> int:
        return 0 if self.current is None else len(self.history)


def iterate_history(
    current: S | None, history: Sequence[Any], *, strategy: DeltaStrategy | None = None
) -> HistoryWalk[S]:
    """Iterate over the states recorded in ``history``, newest first.

    Args:
        current: State the history is relative to (usually the present
            snapshot). ``None`` gives an empty walk.
        history: Delta list, newest first.
    """
    return HistoryWalk(current, history, strategy)
