"""Keyboard and mouse input decoding for the chat terminal.

Turns one complete raw input sequence (as split by
:class:`pi.chat.stdin_buffer.StdinBuffer`) into a tagged event:

* :class:`KeyEvent` - a normalized key id such as ``"a"``, ``"left"`` or
  ``"ctrl+c"``, the printable text it produces, and its press / repeat /
  release kind;
* :class:`MouseEvent` - an SGR mouse report.

Handles the kitty keyboard protocol (``CSI u`` and modified functional
keys, which carry the event kind), xterm modifier sequences, and legacy
single-byte and escape-prefixed input.  Legacy input only ever reports
presses.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

KeyId = str

KeyEventType = Literal["press", "repeat", "release"]

_EVENT_TYPES: dict[int, KeyEventType] = {
    1: "press",
    2: "repeat",
    3: "release",
}


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key.

    ``text`` is the printable character the key produces, or ``None`` for
    navigation/control keys and for chords that include ctrl or alt.
    """

    key: KeyId
    text: str | None = None
    event_type: KeyEventType = "press"
    raw: str = ""

    @property
    def is_press(self) -> bool:
        return self.event_type == "press"


@dataclass(frozen=True)
class MouseEvent:
    """An SGR (``CSI < b ; x ; y M/m``) mouse report, 1-based coordinates."""

    button: int
    column: int
    row: int
    pressed: bool
    raw: str = ""


Event = KeyEvent | MouseEvent

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Caps lock and num lock bits, ignored when matching.
LOCK_MASK = 64 + 128

CODEPOINTS: dict[int, str] = {
    27: "escape",
    9: "tab",
    13: "enter",
    32: "space",
    127: "backspace",
    8: "backspace",
    57414: "enter",  # keypad enter
}

# Kitty private-use codepoints for functional keys.
_KITTY_FUNCTIONAL_CODEPOINTS: dict[int, str] = {
    57348: "insert",
    57349: "delete",
    57350: "left",
    57351: "right",
    57352: "up",
    57353: "down",
    57354: "pageUp",
    57355: "pageDown",
    57356: "home",
    57357: "end",
}

LEGACY_KEY_SEQUENCES: dict[str, KeyId] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1b[Z": "shift+tab",
}

_LETTER_KEYS: dict[str, KeyId] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

_TILDE_KEYS: dict[int, KeyId] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
    7: "home",
    8: "end",
}

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# CSI u: \x1b[<codepoint>(:<shifted>(:<base>))?(;<modifier>(:<event>))?u
_KITTY_CSI_U_RE = re.compile(
    r"^\x1b\[(\d+)(?::(\d*)(?::(\d+))?)?(?:;(\d+)(?::(\d+))?)?u$"
)

# Letter-terminated keys with modifier: \x1b[1;<modifier>(:<event>)?[ABCDHF]
_MODIFIED_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)(?::(\d+))?([ABCDHF])$")

# Tilde-terminated keys with modifier: \x1b[<number>;<modifier>(:<event>)?~
_MODIFIED_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)(?::(\d+))?~$")

_SGR_MOUSE_RE = re.compile(r"^\x1b\[<(\d+);(\d+);(\d+)([Mm])$")

_RELEASE_PATTERNS = re.compile(r"(?::3u|;[^:]*:3~|;[^:]*:3[ABCDHF])$")
_REPEAT_PATTERNS = re.compile(r"(?::2u|;[^:]*:2~|;[^:]*:2[ABCDHF])$")


def is_key_release(data: str) -> bool:
    """Check if raw data is a kitty key release report."""
    return bool(_RELEASE_PATTERNS.search(data))


def is_key_repeat(data: str) -> bool:
    """Check if raw data is a kitty key repeat report."""
    return bool(_REPEAT_PATTERNS.search(data))


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _modifier_prefix(modifier: int) -> tuple[str, bool]:
    """Return ``(prefix, suppresses_text)`` for a raw kitty/xterm modifier."""
    mod = (modifier - 1) & ~LOCK_MASK
    prefix = ""
    if mod & MODIFIERS["ctrl"]:
        prefix += "ctrl+"
    if mod & MODIFIERS["shift"]:
        prefix += "shift+"
    if mod & MODIFIERS["alt"]:
        prefix += "alt+"
    suppresses_text = bool(mod & (MODIFIERS["ctrl"] | MODIFIERS["alt"]))
    return prefix, suppresses_text


def _event_type(value: str | None) -> KeyEventType:
    if not value:
        return "press"
    return _EVENT_TYPES.get(int(value), "press")


def _printable_char(codepoint: int) -> str | None:
    """Character for *codepoint* if it is a printable scalar value."""
    if not 0 < codepoint <= 0x10FFFF:
        return None
    ch = chr(codepoint)
    # Surrogates (category Cs) are not printable
    return ch if ch.isprintable() else None


def _decode_kitty_csi_u(m: re.Match[str], data: str) -> KeyEvent | None:
    codepoint = int(m.group(1))
    shifted = int(m.group(2)) if m.group(2) else None
    modifier = int(m.group(4)) if m.group(4) else 1
    event_type = _event_type(m.group(5))
    prefix, suppresses_text = _modifier_prefix(modifier)

    named = CODEPOINTS.get(codepoint) or _KITTY_FUNCTIONAL_CODEPOINTS.get(codepoint)
    if named is not None:
        text = " " if named == "space" and not suppresses_text else None
        return KeyEvent(key=prefix + named, text=text, event_type=event_type, raw=data)

    ch = _printable_char(codepoint)
    if ch is None:
        return None

    text = None
    if not suppresses_text:
        if shifted is not None:
            text = _printable_char(shifted) or ch
        elif "shift+" in prefix:
            text = ch.upper()
        else:
            text = ch
    return KeyEvent(key=prefix + ch.lower(), text=text, event_type=event_type, raw=data)


def _decode_alt_prefixed(data: str) -> KeyEvent | None:
    ch = data[1]
    if ch == "\x1b":
        return KeyEvent(key="alt+escape", raw=data)
    if ch in ("\r", "\n"):
        return KeyEvent(key="alt+enter", raw=data)
    if ch in ("\x7f", "\x08"):
        return KeyEvent(key="alt+backspace", raw=data)
    if 1 <= ord(ch) <= 26:
        return KeyEvent(key="ctrl+alt+" + chr(ord(ch) + ord("a") - 1), raw=data)
    if ch.isprintable():
        return KeyEvent(key="alt+" + ch, raw=data)
    return None


def parse_mouse_event(data: str) -> MouseEvent | None:
    """Decode an SGR mouse report, or return ``None``."""
    m = _SGR_MOUSE_RE.match(data)
    if not m:
        return None
    return MouseEvent(
        button=int(m.group(1)),
        column=int(m.group(2)),
        row=int(m.group(3)),
        pressed=m.group(4) == "M",
        raw=data,
    )


def parse_key_event(data: str) -> KeyEvent | None:  # noqa: C901
    """Decode one raw input sequence into a :class:`KeyEvent`.

    Returns ``None`` for empty input and for sequences that do not describe
    a key (terminal replies, unknown escapes, stray control bytes).
    """
    if not data:
        return None

    # --- kitty CSI u ---
    m = _KITTY_CSI_U_RE.match(data)
    if m:
        return _decode_kitty_csi_u(m, data)

    # --- xterm / kitty modified navigation keys ---
    m = _MODIFIED_LETTER_RE.match(data)
    if m:
        prefix, _ = _modifier_prefix(int(m.group(1)))
        return KeyEvent(
            key=prefix + _LETTER_KEYS[m.group(3)],
            event_type=_event_type(m.group(2)),
            raw=data,
        )

    m = _MODIFIED_TILDE_RE.match(data)
    if m:
        name = _TILDE_KEYS.get(int(m.group(1)))
        if name is None:
            return None
        prefix, _ = _modifier_prefix(int(m.group(2)))
        return KeyEvent(key=prefix + name, event_type=_event_type(m.group(3)), raw=data)

    # --- legacy escape sequences ---
    legacy = LEGACY_KEY_SEQUENCES.get(data)
    if legacy is not None:
        return KeyEvent(key=legacy, raw=data)

    # --- simple single-byte keys ---
    if data == "\x1b":
        return KeyEvent(key="escape", raw=data)
    if data in ("\r", "\n"):
        return KeyEvent(key="enter", raw=data)
    if data == "\t":
        return KeyEvent(key="tab", raw=data)
    if data in ("\x7f", "\x08"):
        return KeyEvent(key="backspace", raw=data)
    if data == " ":
        return KeyEvent(key="space", text=" ", raw=data)
    if data == "\x00":
        return KeyEvent(key="ctrl+space", raw=data)

    # --- ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return KeyEvent(key="ctrl+" + chr(ord(data) + ord("a") - 1), raw=data)

    # --- alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        return _decode_alt_prefixed(data)

    # --- plain printable character ---
    if len(data) == 1 and data.isprintable():
        return KeyEvent(key=data, text=data, raw=data)

    return None


def parse_event(data: str) -> Event | None:
    """Decode one raw sequence into a key or mouse event."""
    return parse_mouse_event(data) or parse_key_event(data)


def parse_key(data: str) -> KeyId | None:
    """Return only the key id for *data*, or ``None``."""
    event = parse_key_event(data)
    return event.key if event is not None else None
