"""Tests for diff history records."""

from __future__ import annotations

import copy
import json
from itertools import islice
from typing import Any

import pytest

from flexbackup import (
    HistoryError,
    JsonPatchDelta,
    JsonPatchStrategy,
    create_history,
    iterate_history,
    restore,
    restore_with_rewind,
)
from flexbackup.history import DeltaStrategy


def deterministic_transition(state: list[int] | None) -> list[int]:
    if not state:
        return [1]
    return [*state, state[-1] + 1]


class CountingStrategy(JsonPatchStrategy):
    """JSON Patch strategy that counts patch applications."""

    def __init__(self) -> None:
        self.patches = 0

    def patch(self, target: Any, delta: Any) -> Any:
        self.patches += 1
        return super().patch(target, delta)


class TestHistoryRecords:
    """Tests for create_history / restore / restore_with_rewind."""

    def test_diff_history_is_smaller_than_full_history(self) -> None:
        records: list[list[int]] = []
        history: list[Any] = []
        state = deterministic_transition(None)
        records.append(state)
        for _ in range(200):
            nxt = deterministic_transition(state)
            records.append(nxt)
            history.append(create_history(nxt, state))
            state = nxt

        assert records.pop() == state
        assert len(json.dumps(history)) < len(json.dumps(records))

        # Rewind all the way back
        future: list[Any] = []
        while records and history:
            old = records.pop()
            restored, reverse_delta = restore_with_rewind(state, history.pop())
            future.append(reverse_delta)
            assert restored == old
            state = restored

        # Fast forward all the way forward
        state = deterministic_transition(None)
        while future:
            restored_future = restore(state, future.pop())
            expected_future = deterministic_transition(state)
            assert restored_future == expected_future
            state = expected_future

    def test_history_record_turns_next_into_prev(self) -> None:
        prev = {"a": 1, "b": [1, 2]}
        nxt = {"a": 2, "b": [1, 2, 3], "c": "new"}

        assert restore(nxt, create_history(nxt, prev)) == prev

    def test_restore_does_not_mutate_input(self) -> None:
        current = {"a": {"deep": [1, 2]}, "b": 1}
        before = copy.deepcopy(current)

        restored = restore(current, create_history(current, {"a": {"deep": [1]}, "b": 2}))

        assert current == before
        assert restored == {"a": {"deep": [1]}, "b": 2}

    def test_rewind_delta_steps_back_exactly(self) -> None:
        current = {"x": 1, "items": ["a"]}
        target = {"x": 2, "items": ["a", "b"], "extra": None}

        restored, reverse_delta = restore_with_rewind(current, create_history(current, target))

        assert restored == target
        assert restore(restored, reverse_delta) == current

    def test_unchanged_state_gives_empty_delta(self) -> None:
        delta = create_history({"a": 1}, {"a": 1})

        assert isinstance(delta, JsonPatchDelta)
        assert delta.is_empty
        assert restore({"a": 1}, delta) == {"a": 1}


class TestIterateHistory:
    """Tests for the lazy history walk."""

    def _build(self, moments: int) -> tuple[list[int], list[Any], list[list[int]]]:
        records: list[list[int]] = []
        history: list[Any] = []
        state = deterministic_transition(None)
        records.append(state)
        for _ in range(moments):
            nxt = deterministic_transition(state)
            records.append(nxt)
            history.insert(0, create_history(nxt, state))
            state = nxt
        return state, history, records

    def test_history_list_can_be_iterated(self) -> None:
        state, history, records = self._build(100)
        assert records.pop() == state

        for restored in iterate_history(state, history):
            assert restored == records.pop()
        assert records == []

    def test_walk_is_restartable(self) -> None:
        state, history, _ = self._build(5)
        walk = iterate_history(state, history)

        assert list(walk) == list(walk)
        assert len(walk) == 5

    def test_none_start_gives_empty_walk(self) -> None:
        _, history, _ = self._build(3)
        walk = iterate_history(None, history)

        assert list(walk) == []
        assert len(walk) == 0

    def test_stopping_early_does_not_apply_remaining_deltas(self) -> None:
        state, history, _ = self._build(50)
        strategy = CountingStrategy()

        first_two = list(islice(iterate_history(state, history, strategy=strategy), 2))

        assert first_two == [list(range(1, 51)), list(range(1, 50))]
        assert strategy.patches == 2


class TestJsonPatchStrategy:
    """Tests for the default delta strategy."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(JsonPatchStrategy(), DeltaStrategy)

    def test_reverse_swaps_directions(self) -> None:
        strategy = JsonPatchStrategy()
        delta = strategy.diff({"a": 1}, {"a": 2})

        reversed_delta = strategy.reverse(delta)

        assert reversed_delta.forward == delta.backward
        assert reversed_delta.backward == delta.forward

    def test_delta_survives_json_round_trip(self) -> None:
        left = {"a": 1, "list": [1, 2]}
        right = {"a": 2, "list": [1, 2, 3], "b": {"c": True}}
        delta = json.loads(json.dumps(create_history(left, right)))

        assert restore(left, delta) == right
        assert restore(right, JsonPatchStrategy().reverse(delta)) == left

    def test_root_replacement(self) -> None:
        assert restore(None, create_history(None, {"a": 1})) == {"a": 1}

    def test_malformed_delta_raises_history_error(self) -> None:
        with pytest.raises(HistoryError):
            restore({"a": 1}, "not a delta")

    def test_conflicting_delta_raises_history_error(self) -> None:
        delta = create_history({"a": {"b": 1}}, {"a": {"b": 2}})

        with pytest.raises(HistoryError, match="Could not apply delta"):
            restore({"x": 1}, delta)

    def test_clone_is_independent(self) -> None:
        value = {"a": [1, 2]}
        clone = JsonPatchStrategy().clone(value)
        clone["a"].append(3)

        assert value == {"a": [1, 2]}
