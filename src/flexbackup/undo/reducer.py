"""Undo/redo support for pure transition functions.

``UndoableTransition`` wraps a ``(state, action) -> state`` function. After
the wrapped function runs, the action is classified:

- the first call (no envelope yet) and actions whose tag contains the moment
  marker record a moment: the state is backed up as the new present and the
  old present is kept as a delta in history;
- undo/redo step the present through history/future and rebuild the state
  from the stepped snapshot;
- apply re-expresses the latest history delta against the live state;
- anything else passes through with history, present and future untouched.

Example:
    >>> undoable = UndoableTransition(transition, tree, history_limit=50)
    >>> env = undoable(None, Action("init"))
    >>> env = undoable(env, Action("editor/undoable/insert", payload="x"))
    >>> env = undoable(env, UNDO)
    >>> env.outcome
    <Outcome.UNDONE: 'undone'>
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from flexbackup.backup import CodecTree, create_backup, load_backup
from flexbackup.config import UndoSettings
from flexbackup.history import (
    DeltaStrategy,
    HistoryWalk,
    create_history,
    iterate_history,
    restore,
    restore_with_rewind,
)
from flexbackup.undo.actions import Action, ActionKind, classify_action, rewind_steps
from flexbackup.undo.envelope import ENVELOPE_KEYS, Outcome, UndoableState

logger = logging.getLogger(__name__)

Transition = Callable[[Any, Action], Mapping[str, Any]]


class UndoableTransition:
    """Transition function wrapper maintaining present/history/future.

    Attributes:
        transition: The wrapped transition function. On the first call it
            receives ``None`` (or the stripped initial mapping) as state.
        codec_tree: Codec tree used to snapshot and rebuild state.
        history_limit: Maximum history length, ``None`` for unbounded.
        settings: Moment marker and control action tags.
        strategy: Delta strategy, ``None`` for the default JSON Patch one.
    """

    def __init__(
        self,
        transition: Transition,
        codec_tree: CodecTree,
        history_limit: int | None = None,
        *,
        settings: UndoSettings | None = None,
        strategy: DeltaStrategy | None = None,
    ) -> None:
        self.transition = transition
        self.codec_tree = codec_tree
        self.settings = settings or UndoSettings()
        self.history_limit = history_limit if history_limit is not None else self.settings.history_limit
        self.strategy = strategy

    def __call__(
        self,
        state: UndoableState | Mapping[str, Any] | None,
        action: Action | str | Mapping[str, Any],
    ) -> UndoableState:
        action = Action.of(action)

        is_init = not isinstance(state, UndoableState)
        if is_init:
            base = None if state is None else {k: v for k, v in state.items() if k not in ENVELOPE_KEYS}
            envelope = UndoableState(state=self.transition(base, action))
        else:
            envelope = state.evolve(state=self.transition(state.state, action))
        kind = classify_action(action, self.settings, is_init=is_init)

        if kind is ActionKind.INIT:
            return self._record_moment(envelope, Outcome.INITIALIZED)
        if kind is ActionKind.UNDOABLE:
            return self._record_moment(envelope, Outcome.MOMENT_RECORDED)
        if kind is ActionKind.UNDO:
            return self._rewind(envelope, rewind_steps(action))
        if kind is ActionKind.REDO:
            return self._rewind(envelope, -rewind_steps(action))
        if kind is ActionKind.APPLY:
            return self._resync(envelope)
        return envelope.evolve(outcome=Outcome.PASSED_THROUGH)

    def iterate_history(self, envelope: UndoableState) -> HistoryWalk[dict[str, Any]]:
        """Walk the snapshots in ``envelope``'s history, newest first."""
        return iterate_history(envelope.present, envelope.history, strategy=self.strategy)

    def _record_moment(self, envelope: UndoableState, outcome: Outcome) -> UndoableState:
        present = create_backup(envelope.state, self.codec_tree)

        history = envelope.history
        if envelope.present is not None:
            history = (create_history(present, envelope.present, strategy=self.strategy),) + history
        if self.history_limit is not None:
            history = history[: self.history_limit]

        logger.debug(f"Recorded moment ({len(history)} in history, {len(envelope.future)} future dropped)")
        return envelope.evolve(present=present, history=history, future=(), outcome=outcome)

    def _rewind(self, envelope: UndoableState, distance: int) -> UndoableState:
        if distance == 0:
            logger.warning("Rewind by 0 moments requested; nothing to do")
            return envelope.evolve(outcome=Outcome.ZERO_DISTANCE)

        undoing = distance > 0
        source = envelope.history if undoing else envelope.future
        steps = abs(distance)

        if envelope.present is None or steps > len(source):
            logger.error(
                f"Cannot {'undo' if undoing else 'redo'} {steps} moment(s): "
                f"there are {len(envelope.history)} moments in history "
                f"and {len(envelope.future)} in future"
            )
            return envelope.evolve(outcome=Outcome.NOTHING_TO_UNDO if undoing else Outcome.NOTHING_TO_REDO)

        present = envelope.present
        rewinds: list[Any] = []
        for record in source[:steps]:
            present, reverse_delta = restore_with_rewind(present, record, strategy=self.strategy)
            rewinds.append(reverse_delta)
        rewinds.reverse()

        state = load_backup(envelope.state, self.codec_tree, present)
        remaining = source[steps:]

        if undoing:
            logger.debug(f"Undid {steps} moment(s)")
            return envelope.evolve(
                state=state,
                present=present,
                history=remaining,
                future=tuple(rewinds) + envelope.future,
                outcome=Outcome.UNDONE,
            )

        logger.debug(f"Redid {steps} moment(s)")
        return envelope.evolve(
            state=state,
            present=present,
            history=tuple(rewinds) + envelope.history,
            future=remaining,
            outcome=Outcome.REDONE,
        )

    def _resync(self, envelope: UndoableState) -> UndoableState:
        present = create_backup(envelope.state, self.codec_tree)

        if not envelope.history or envelope.present is None:
            return envelope.evolve(present=present, history=(), future=(), outcome=Outcome.RESYNCED)

        # history[0] must step back from the new present to the same prior moment
        previous = restore(envelope.present, envelope.history[0], strategy=self.strategy)
        head = create_history(present, previous, strategy=self.strategy)

        logger.debug("Resynced present moment with live state")
        return envelope.evolve(
            present=present,
            history=(head,) + envelope.history[1:],
            future=(),
            outcome=Outcome.RESYNCED,
        )


def create_undoable_transition(
    transition: Transition,
    codec_tree: CodecTree,
    history_limit: int | None = None,
    *,
    settings: UndoSettings | None = None,
    strategy: DeltaStrategy | None = None,
) -> UndoableTransition:
    """Add undo/redo support to a transition function.

    Args:
        transition: Transition function to wrap.
        codec_tree: Codec tree used to store and restore moments.
        history_limit: History limit (``None`` means unbounded, or the
            settings' limit when settings are given).
        settings: Moment marker and control tags; defaults to ``UndoSettings()``.
        strategy: Delta strategy; defaults to JSON Patch.
    """
    return UndoableTransition(
        transition,
        codec_tree,
        history_limit,
        settings=settings,
        strategy=strategy,
    )


def iterate_undo_history(
    envelope: UndoableState, *, strategy: DeltaStrategy | None = None
) -> HistoryWalk[dict[str, Any]]:
    """Iterate the history of an undoable state, unpacking deltas as you go."""
    return iterate_history(envelope.present, envelope.history, strategy=strategy)
