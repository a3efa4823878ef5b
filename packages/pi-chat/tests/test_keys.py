"""Tests for pi.chat.keys -- raw input to key/mouse event decoding."""

from __future__ import annotations

import pytest

from pi.chat.keys import (
    KeyEvent,
    MouseEvent,
    is_key_release,
    is_key_repeat,
    parse_event,
    parse_key,
    parse_key_event,
    parse_mouse_event,
)


# ---------------------------------------------------------------------------
# Legacy input
# ---------------------------------------------------------------------------


class TestLegacySingleBytes:
    """Single bytes from a terminal without the kitty protocol."""

    @pytest.mark.parametrize(
        ("data", "key"),
        [
            ("\x1b", "escape"),
            ("\r", "enter"),
            ("\n", "enter"),
            ("\t", "tab"),
            ("\x7f", "backspace"),
            ("\x08", "backspace"),
            ("\x03", "ctrl+c"),
            ("\x01", "ctrl+a"),
            ("\x00", "ctrl+space"),
        ],
    )
    def test_control_keys(self, data: str, key: str) -> None:
        event = parse_key_event(data)
        assert event is not None
        assert event.key == key
        assert event.text is None
        assert event.event_type == "press"

    @pytest.mark.parametrize("data", ["a", "E", "q", "1", "é", "€", "日", "😀"])
    def test_printable_characters(self, data: str) -> None:
        event = parse_key_event(data)
        assert event == KeyEvent(key=data, text=data, event_type="press", raw=data)

    def test_space_produces_text(self) -> None:
        event = parse_key_event(" ")
        assert event is not None
        assert event.key == "space"
        assert event.text == " "

    def test_empty_input(self) -> None:
        assert parse_key_event("") is None
        assert parse_event("") is None

    def test_unknown_control_byte(self) -> None:
        assert parse_key_event("\x1c") is None


class TestLegacySequences:
    @pytest.mark.parametrize(
        ("data", "key"),
        [
            ("\x1b[A", "up"),
            ("\x1b[B", "down"),
            ("\x1b[C", "right"),
            ("\x1b[D", "left"),
            ("\x1bOC", "right"),
            ("\x1bOD", "left"),
            ("\x1b[H", "home"),
            ("\x1b[F", "end"),
            ("\x1b[1~", "home"),
            ("\x1b[4~", "end"),
            ("\x1b[3~", "delete"),
            ("\x1b[5~", "pageUp"),
            ("\x1b[6~", "pageDown"),
            ("\x1b[Z", "shift+tab"),
        ],
    )
    def test_navigation_keys(self, data: str, key: str) -> None:
        assert parse_key(data) == key

    @pytest.mark.parametrize(
        ("data", "key"),
        [
            ("\x1b[1;5D", "ctrl+left"),
            ("\x1b[1;2C", "shift+right"),
            ("\x1b[1;3A", "alt+up"),
            ("\x1b[3;5~", "ctrl+delete"),
            ("\x1b[1;6H", "ctrl+shift+home"),
        ],
    )
    def test_modified_navigation_keys(self, data: str, key: str) -> None:
        assert parse_key(data) == key

    @pytest.mark.parametrize(
        ("data", "key"),
        [
            ("\x1bb", "alt+b"),
            ("\x1b\r", "alt+enter"),
            ("\x1b\x7f", "alt+backspace"),
            ("\x1b\x1b", "alt+escape"),
            ("\x1b\x01", "ctrl+alt+a"),
        ],
    )
    def test_alt_prefixed(self, data: str, key: str) -> None:
        event = parse_key_event(data)
        assert event is not None
        assert event.key == key
        assert event.text is None

    def test_unknown_tilde_key(self) -> None:
        assert parse_key_event("\x1b[99;5~") is None


# ---------------------------------------------------------------------------
# Kitty keyboard protocol
# ---------------------------------------------------------------------------


class TestKittyProtocol:
    def test_plain_letter(self) -> None:
        event = parse_key_event("\x1b[97u")
        assert event == KeyEvent(key="a", text="a", event_type="press", raw="\x1b[97u")

    def test_shifted_letter_uses_shifted_key(self) -> None:
        event = parse_key_event("\x1b[97:65;2u")
        assert event is not None
        assert event.key == "shift+a"
        assert event.text == "A"

    @pytest.mark.parametrize(
        "data",
        [
            "\x1b[97:1114112u",  # past the last code point
            "\x1b[97:55296u",  # lone surrogate
            "\x1b[97:7u",  # control character
            "\x1b[97:0u",
        ],
    )
    def test_invalid_shifted_key_falls_back_to_base_key(self, data: str) -> None:
        event = parse_key_event(data)
        assert event is not None
        assert event.key == "a"
        assert event.text == "a"

    def test_shift_without_shifted_key_uppercases(self) -> None:
        event = parse_key_event("\x1b[97;2u")
        assert event is not None
        assert event.text == "A"

    def test_ctrl_letter_has_no_text(self) -> None:
        event = parse_key_event("\x1b[99;5u")
        assert event is not None
        assert event.key == "ctrl+c"
        assert event.text is None

    def test_lock_bits_are_ignored(self) -> None:
        # 1 + 64 (caps lock)
        event = parse_key_event("\x1b[97;65u")
        assert event is not None
        assert event.key == "a"

    @pytest.mark.parametrize(
        ("data", "key"),
        [
            ("\x1b[27u", "escape"),
            ("\x1b[13u", "enter"),
            ("\x1b[127u", "backspace"),
            ("\x1b[9u", "tab"),
            ("\x1b[57414u", "enter"),
        ],
    )
    def test_named_codepoints(self, data: str, key: str) -> None:
        assert parse_key(data) == key

    def test_non_ascii_codepoint(self) -> None:
        event = parse_key_event(f"\x1b[{ord('é')}u")
        assert event is not None
        assert event.text == "é"

    @pytest.mark.parametrize(
        ("data", "event_type"),
        [
            ("\x1b[97;1u", "press"),
            ("\x1b[97;1:1u", "press"),
            ("\x1b[97;1:2u", "repeat"),
            ("\x1b[97;1:3u", "release"),
            ("\x1b[13;1:3u", "release"),
            ("\x1b[1;1:3D", "release"),
            ("\x1b[1;1:2C", "repeat"),
            ("\x1b[3;1:3~", "release"),
        ],
    )
    def test_event_types(self, data: str, event_type: str) -> None:
        event = parse_key_event(data)
        assert event is not None
        assert event.event_type == event_type
        assert event.is_press is (event_type == "press")

    def test_release_of_arrow_keeps_key_name(self) -> None:
        event = parse_key_event("\x1b[1;1:3D")
        assert event is not None
        assert event.key == "left"

    def test_unprintable_codepoint(self) -> None:
        assert parse_key_event("\x1b[7u") is None


class TestReleaseRepeatDetection:
    def test_release(self) -> None:
        assert is_key_release("\x1b[97;1:3u")
        assert is_key_release("\x1b[1;1:3A")
        assert not is_key_release("\x1b[97u")
        assert not is_key_release("a")

    def test_repeat(self) -> None:
        assert is_key_repeat("\x1b[97;1:2u")
        assert is_key_repeat("\x1b[3;1:2~")
        assert not is_key_repeat("\x1b[97;1:3u")


# ---------------------------------------------------------------------------
# Mouse
# ---------------------------------------------------------------------------


class TestMouse:
    def test_sgr_press(self) -> None:
        event = parse_mouse_event("\x1b[<0;10;5M")
        assert event == MouseEvent(button=0, column=10, row=5, pressed=True, raw="\x1b[<0;10;5M")

    def test_sgr_release(self) -> None:
        event = parse_mouse_event("\x1b[<0;10;5m")
        assert event is not None
        assert event.pressed is False

    def test_parse_event_prefers_mouse(self) -> None:
        assert isinstance(parse_event("\x1b[<64;1;1M"), MouseEvent)

    def test_parse_event_falls_back_to_keys(self) -> None:
        assert isinstance(parse_event("a"), KeyEvent)

    def test_mouse_sequence_is_not_a_key(self) -> None:
        assert parse_key_event("\x1b[<0;10;5M") is None
