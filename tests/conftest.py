"""Pytest fixtures for flexbackup tests."""

from __future__ import annotations

from typing import Any

import pytest

from flexbackup import COPY, Action, Codec, CodecTree, DependencyLoader, UndoableTransition
from flexbackup.storage import InMemoryStorage

INITIAL_SLICE_STATE: dict[str, Any] = {"slice": {"a": "a", "b": "b"}}


def slice_save(slice_: dict[str, str]) -> str:
    return slice_["a"] + "," + slice_["b"]


def slice_load(stored: str | None, deps: DependencyLoader) -> dict[str, str] | None:
    if stored is None:
        return None
    a, b = stored.split(",")
    return {"a": a, "b": b}


def appending_transition(state: dict[str, Any] | None, action: Action) -> dict[str, Any]:
    """Appends one character to each field of the slice on every action."""
    if state is None:
        return INITIAL_SLICE_STATE
    return {"slice": {"a": state["slice"]["a"] + "a", "b": state["slice"]["b"] + "b"}}


def counter_transition(state: dict[str, Any] | None, action: Action) -> dict[str, Any]:
    """Counter whose "add" actions are undoable and "set" actions are not."""
    if state is None:
        return {"value": 0, "log": [], "untracked": "scratch"}
    if action.type.endswith("/add"):
        return {**state, "value": state["value"] + action.payload, "log": [*state["log"], action.payload]}
    if action.type == "counter/set":
        return {**state, "value": action.payload}
    return state


def add(amount: int) -> Action:
    return Action("counter/undoable/add", payload=amount)


class FailingStorage:
    """Storage whose every operation raises."""

    def get(self, key: str) -> str | None:
        raise OSError("storage unavailable")

    def set(self, key: str, value: str) -> None:
        raise OSError("storage unavailable")

    def remove(self, key: str) -> None:
        raise OSError("storage unavailable")


@pytest.fixture
def slice_tree() -> CodecTree:
    return CodecTree({"slice": Codec(save=slice_save, load=slice_load)})


@pytest.fixture
def slice_undoable(slice_tree: CodecTree) -> UndoableTransition:
    return UndoableTransition(appending_transition, slice_tree)


@pytest.fixture
def counter_tree() -> CodecTree:
    return CodecTree({"value": COPY, "log": COPY})


@pytest.fixture
def counter_undoable(counter_tree: CodecTree) -> UndoableTransition:
    return UndoableTransition(counter_transition, counter_tree)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()
