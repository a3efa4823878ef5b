"""Tests for the Normal/Editing key interpretation."""

from __future__ import annotations

import pytest

from pi.chat.keybindings import ChatKeybindingsManager
from pi.chat.keys import KeyEvent
from pi.chat.mode import Mode, interpret_key


@pytest.fixture
def bindings() -> ChatKeybindingsManager:
    return ChatKeybindingsManager()


def char(c: str, event_type: str = "press") -> KeyEvent:
    return KeyEvent(key=c, text=c, event_type=event_type)  # type: ignore[arg-type]


def named(key: str, event_type: str = "press") -> KeyEvent:
    return KeyEvent(key=key, event_type=event_type)  # type: ignore[arg-type]


class TestNormalMode:
    def test_e_starts_editing(self, bindings: ChatKeybindingsManager) -> None:
        assert interpret_key(Mode.NORMAL, char("e"), bindings) == "startEditing"

    def test_q_quits(self, bindings: ChatKeybindingsManager) -> None:
        assert interpret_key(Mode.NORMAL, char("q"), bindings) == "quit"

    @pytest.mark.parametrize("key", ["x", "E", "Q", "1", " "])
    def test_other_characters_are_ignored(
        self, bindings: ChatKeybindingsManager, key: str
    ) -> None:
        assert interpret_key(Mode.NORMAL, char(key), bindings) is None

    @pytest.mark.parametrize("key", ["enter", "escape", "backspace", "left", "right", "ctrl+c"])
    def test_editing_keys_are_ignored(self, bindings: ChatKeybindingsManager, key: str) -> None:
        assert interpret_key(Mode.NORMAL, named(key), bindings) is None

    def test_normal_mode_does_not_filter_event_kind(
        self, bindings: ChatKeybindingsManager
    ) -> None:
        assert interpret_key(Mode.NORMAL, char("q", "release"), bindings) == "quit"


class TestEditingMode:
    @pytest.mark.parametrize(
        ("key", "action"),
        [
            ("escape", "stopEditing"),
            ("enter", "submit"),
            ("backspace", "deleteCharBackward"),
            ("left", "cursorLeft"),
            ("right", "cursorRight"),
        ],
    )
    def test_bound_keys(self, bindings: ChatKeybindingsManager, key: str, action: str) -> None:
        assert interpret_key(Mode.EDITING, named(key), bindings) == action

    @pytest.mark.parametrize("c", ["a", "e", "q", "É", "€", "😀", " "])
    def test_printable_keys_insert(self, bindings: ChatKeybindingsManager, c: str) -> None:
        assert interpret_key(Mode.EDITING, char(c), bindings) == "insertChar"

    @pytest.mark.parametrize("event_type", ["release", "repeat"])
    def test_only_presses_act(self, bindings: ChatKeybindingsManager, event_type: str) -> None:
        assert interpret_key(Mode.EDITING, char("a", event_type), bindings) is None
        assert interpret_key(Mode.EDITING, named("enter", event_type), bindings) is None
        assert interpret_key(Mode.EDITING, named("escape", event_type), bindings) is None

    @pytest.mark.parametrize("key", ["up", "down", "delete", "home", "tab", "ctrl+c"])
    def test_unbound_non_printable_keys_are_ignored(
        self, bindings: ChatKeybindingsManager, key: str
    ) -> None:
        assert interpret_key(Mode.EDITING, named(key), bindings) is None


class TestCustomBindings:
    def test_rebound_quit_key(self) -> None:
        bindings = ChatKeybindingsManager({"quit": ["x", "ctrl+c"]})
        assert interpret_key(Mode.NORMAL, char("q"), bindings) is None
        assert interpret_key(Mode.NORMAL, char("x"), bindings) == "quit"
        assert interpret_key(Mode.NORMAL, named("ctrl+c"), bindings) == "quit"

    def test_rebound_submit_key_takes_precedence_over_insert(self) -> None:
        bindings = ChatKeybindingsManager({"submit": "tab"})
        assert interpret_key(Mode.EDITING, named("tab"), bindings) == "submit"
        assert interpret_key(Mode.EDITING, named("enter"), bindings) is None
