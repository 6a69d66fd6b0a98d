"""Tests for actions and action classification."""

from __future__ import annotations

import pytest

from flexbackup import (
    APPLY,
    REDO,
    UNDO,
    Action,
    ActionCreator,
    ActionKind,
    UndoSettings,
    classify_action,
    create_undoable_action,
    redo,
    undo,
    undoable_action_type,
)
from flexbackup.undo.actions import rewind_steps


@pytest.fixture
def settings() -> UndoSettings:
    return UndoSettings()


class TestAction:
    """Tests for Action coercion."""

    def test_from_string(self) -> None:
        assert Action.of("todo/add") == Action(type="todo/add")

    def test_from_mapping(self) -> None:
        action = Action.of({"type": "todo/add", "payload": {"text": "x"}, "undoable": 1})

        assert action.type == "todo/add"
        assert action.payload == {"text": "x"}
        assert action.undoable is True

    def test_action_is_returned_as_is(self) -> None:
        action = Action("x", payload=1)
        assert Action.of(action) is action

    @pytest.mark.parametrize("value", [None, 42, {"payload": 1}, ["type"]])
    def test_rejects_unrecognized_values(self, value: object) -> None:
        with pytest.raises(TypeError):
            Action.of(value)  # type: ignore[arg-type]


class TestActionCreators:
    """Tests for undoable action creators."""

    def test_undoable_action_type(self) -> None:
        assert undoable_action_type("editor", "insert") == "editor/undoable/insert"
        assert undoable_action_type("editor", "insert", marker="!") == "editor!insert"

    def test_creator_builds_actions(self) -> None:
        insert = create_undoable_action("editor", "insert")

        action = insert("abc")

        assert isinstance(insert, ActionCreator)
        assert action == Action("editor/undoable/insert", payload="abc")
        assert insert.match(action)
        assert insert.match("editor/undoable/insert")
        assert not insert.match("editor/insert")
        assert "editor/undoable/insert" in repr(insert)

    def test_step_helpers(self) -> None:
        assert undo() == Action(UNDO.type, payload=1)
        assert redo(3).payload == 3
        assert redo(3).type == REDO.type


class TestClassifyAction:
    """Tests for classify_action."""

    @pytest.mark.parametrize(
        "action,kind",
        [
            (UNDO, ActionKind.UNDO),
            (undo(4), ActionKind.UNDO),
            (REDO, ActionKind.REDO),
            (APPLY, ActionKind.APPLY),
            (Action("editor/undoable/insert"), ActionKind.UNDOABLE),
            (Action("/undoable/"), ActionKind.UNDOABLE),
            (Action("editor/insert", undoable=True), ActionKind.UNDOABLE),
            (Action("editor/insert"), ActionKind.OTHER),
            (Action("UndoRedo.undo.extra"), ActionKind.OTHER),
        ],
    )
    def test_default_settings(self, settings: UndoSettings, action: Action, kind: ActionKind) -> None:
        assert classify_action(action, settings) is kind

    def test_init_wins(self, settings: UndoSettings) -> None:
        assert classify_action(UNDO, settings, is_init=True) is ActionKind.INIT

    def test_custom_tags(self) -> None:
        custom = UndoSettings(undo_type="undo", redo_type="redo", apply_type="apply", moment_marker="#")

        assert classify_action(Action("undo"), custom) is ActionKind.UNDO
        assert classify_action(UNDO, custom) is ActionKind.OTHER
        assert classify_action(Action("edit#1"), custom) is ActionKind.UNDOABLE
        assert classify_action(Action("editor/undoable/insert"), custom) is ActionKind.OTHER


class TestRewindSteps:
    """Tests for rewind_steps."""

    def test_default_is_one(self) -> None:
        assert rewind_steps(UNDO) == 1
        assert rewind_steps(Action(UNDO.type, payload="3")) == 1

    def test_integer_payload(self) -> None:
        assert rewind_steps(undo(5)) == 5
        assert rewind_steps(undo(0)) == 0

    def test_bool_payload_is_not_a_count(self) -> None:
        assert rewind_steps(Action(UNDO.type, payload=True)) == 1
