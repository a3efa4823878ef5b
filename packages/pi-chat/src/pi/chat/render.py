"""Frame rendering for the chat screen.

The screen is three stacked regions:

1. a bordered message list titled with the peer's name,
2. a one-line help text that depends on the mode,
3. a bordered single-line input box.

``compose_frame`` is a pure layout function returning the screen lines and
the hardware cursor position; ``FrameRenderer`` paints its result onto a
``Terminal``, rewriting only the lines that changed since the last frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from pi.chat.mode import Mode
from pi.chat.utils import scroll_start, take_columns, truncate_to_width, visible_width

if TYPE_CHECKING:
    from pi.chat.keybindings import ChatAction, ChatKeybindingsManager
    from pi.chat.terminal import Terminal

_BOLD = "\x1b[1m"
_BOLD_OFF = "\x1b[22m"
_YELLOW = "\x1b[33m"
_DEFAULT_FG = "\x1b[39m"

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_LINE = "\x1b[2K"
_CLEAR_BELOW = "\x1b[J"
_CLEAR_SCREEN = "\x1b[2J"
_MOVE_FMT = "\x1b[{};{}H"

_INPUT_HEIGHT = 3
_HELP_HEIGHT = 1

_KEY_LABELS: dict[str, str] = {
    "escape": "Esc",
    "enter": "Enter",
    "backspace": "Backspace",
    "left": "Left",
    "right": "Right",
    "space": "Space",
    "tab": "Tab",
}


@dataclass(frozen=True)
class Frame:
    """Read-only snapshot of application state handed to a renderer."""

    mode: Mode
    text: str
    cursor: int
    messages: tuple[str, ...] = ()


class Renderer(Protocol):
    def render(self, frame: Frame) -> None: ...


@dataclass(frozen=True)
class ComposedFrame:
    lines: list[str]
    # 0-based (row, column) of the hardware cursor, or None to hide it
    cursor: tuple[int, int] | None


def key_label(key: str) -> str:
    return _KEY_LABELS.get(key, key)


def _box_top(title: str, width: int) -> str:
    inner = width - 2
    title = truncate_to_width(title, inner, ellipsis="")
    return "┌" + title + "─" * (inner - visible_width(title)) + "┐"


def _box_bottom(width: int) -> str:
    return "└" + "─" * (width - 2) + "┘"


def _box_row(content: str, width: int, style: tuple[str, str] | None = None) -> str:
    inner = width - 2
    padded = truncate_to_width(content, inner, pad=True)
    if style:
        padded = style[0] + padded + style[1]
    return "│" + padded + "│"


def _help_line(mode: Mode, bindings: ChatKeybindingsManager | None, width: int) -> str:
    def first(action: ChatAction, fallback: str) -> str:
        keys = bindings.get_keys(action) if bindings else []
        return key_label(keys[0]) if keys else fallback

    if mode is Mode.NORMAL:
        parts = [
            ("Press ", False),
            (first("quit", "q"), True),
            (" to exit, ", False),
            (first("startEditing", "e"), True),
            (" to start editing.", False),
        ]
    else:
        parts = [
            ("Press ", False),
            (first("stopEditing", "Esc"), True),
            (" to stop editing, ", False),
            (first("submit", "Enter"), True),
            (" to send the message", False),
        ]

    # Truncate on the plain text, then re-apply bold to the surviving parts
    plain = truncate_to_width("".join(p for p, _ in parts), width, ellipsis="")
    out: list[str] = []
    remaining = len(plain)
    for text, bold in parts:
        if remaining <= 0:
            break
        chunk = text[:remaining]
        remaining -= len(chunk)
        out.append(_BOLD + chunk + _BOLD_OFF if bold else chunk)
    return "".join(out)


def compose_frame(
    frame: Frame,
    columns: int,
    rows: int,
    *,
    peer_name: str = "Peter",
    messages_height: int = 30,
    bindings: ChatKeybindingsManager | None = None,
) -> ComposedFrame:
    """Lay out *frame* on a ``columns`` x ``rows`` screen."""
    if columns < 4 or rows < _INPUT_HEIGHT:
        return ComposedFrame(lines=[], cursor=None)

    lines: list[str] = []

    # -- messages -----------------------------------------------------------
    list_height = min(messages_height, rows - _INPUT_HEIGHT - _HELP_HEIGHT)
    if list_height >= 2:
        lines.append(_box_top(f" Chat with: {peer_name} ", columns))
        visible_rows = list_height - 2
        numbered = [f"{i}: {m}" for i, m in enumerate(frame.messages)]
        shown = numbered[-visible_rows:] if visible_rows > 0 else []
        for item in shown:
            lines.append(_box_row(item, columns))
        for _ in range(visible_rows - len(shown)):
            lines.append(_box_row("", columns))
        lines.append(_box_bottom(columns))

    # -- help ---------------------------------------------------------------
    if rows - len(lines) > _INPUT_HEIGHT:
        lines.append(_help_line(frame.mode, bindings, columns))

    # -- input --------------------------------------------------------------
    inner = columns - 2
    start = scroll_start(frame.text, frame.cursor, inner)
    shown_text = take_columns(frame.text[start:], inner)
    style = (_YELLOW, _DEFAULT_FG) if frame.mode is Mode.EDITING else None

    input_top = len(lines)
    lines.append(_box_top(" Input ", columns))
    lines.append(_box_row(shown_text, columns, style))
    lines.append(_box_bottom(columns))

    cursor: tuple[int, int] | None = None
    if frame.mode is Mode.EDITING:
        column = 1 + visible_width(frame.text[start : frame.cursor])
        cursor = (input_top + 1, min(column, columns - 2))

    return ComposedFrame(lines=lines, cursor=cursor)


class FrameRenderer:
    """Paints frames onto a terminal with line-level diffing."""

    def __init__(
        self,
        terminal: Terminal,
        *,
        peer_name: str = "Peter",
        messages_height: int = 30,
        bindings: ChatKeybindingsManager | None = None,
    ) -> None:
        self.terminal = terminal
        self.peer_name = peer_name
        self.messages_height = messages_height
        self.bindings = bindings
        self._previous_lines: list[str] = []
        self._previous_size: tuple[int, int] | None = None

    def render(self, frame: Frame) -> None:
        columns, rows = self.terminal.columns, self.terminal.rows
        composed = compose_frame(
            frame,
            columns,
            rows,
            peer_name=self.peer_name,
            messages_height=self.messages_height,
            bindings=self.bindings,
        )

        out: list[str] = [_HIDE_CURSOR]
        full = self._previous_size != (columns, rows)
        if full:
            out.append(_CLEAR_SCREEN)

        for index, line in enumerate(composed.lines):
            if not full and index < len(self._previous_lines) and self._previous_lines[index] == line:
                continue
            out.append(_MOVE_FMT.format(index + 1, 1))
            out.append(_CLEAR_LINE)
            out.append(line)

        if len(composed.lines) < len(self._previous_lines):
            out.append(_MOVE_FMT.format(len(composed.lines) + 1, 1))
            out.append(_CLEAR_BELOW)

        if composed.cursor is not None:
            row, column = composed.cursor
            out.append(_MOVE_FMT.format(row + 1, column + 1))
            out.append(_SHOW_CURSOR)

        self.terminal.write("".join(out))
        self._previous_lines = composed.lines
        self._previous_size = (columns, rows)

    def invalidate(self) -> None:
        """Force a full redraw on the next frame."""
        self._previous_lines = []
        self._previous_size = None
