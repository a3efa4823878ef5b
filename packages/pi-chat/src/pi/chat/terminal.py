"""Terminal abstraction for the raw-mode chat session.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` that
switches the controlling terminal into raw mode on the alternate screen with
mouse capture, negotiates the kitty keyboard protocol, and reads one decoded
input event at a time.  ``terminal_session`` wraps start/stop so the
terminal is restored on every exit path.
"""

from __future__ import annotations

import codecs
import contextlib
import logging
import os
import re
import select
import sys
import termios
import tty
from collections import deque
from typing import IO, Iterator, Protocol

from pi.chat.keys import Event, parse_event
from pi.chat.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_ALT_SCREEN_ENTER = "\x1b[?1049h"
_ALT_SCREEN_LEAVE = "\x1b[?1049l"

# Normal tracking, button-event tracking, any-event tracking, SGR encoding
_MOUSE_ENABLE = "\x1b[?1000h\x1b[?1002h\x1b[?1003h\x1b[?1006h"
_MOUSE_DISABLE = "\x1b[?1006l\x1b[?1003l\x1b[?1002l\x1b[?1000l"

_KITTY_QUERY = "\x1b[?u"
# Flags 1 (disambiguate escape codes) | 2 (report event types)
_KITTY_ENABLE = "\x1b[>3u"
_KITTY_DISABLE = "\x1b[<u"

_KITTY_RESPONSE_RE = re.compile(r"^\x1b\[\?(\d+)u$")

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"

_READ_SIZE = 4096


class TerminalError(RuntimeError):
    """The terminal cannot be used (not a TTY, or input closed)."""


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def read_event(self) -> Event:
        """Block until one complete input event is available."""
        ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    @property
    def keyboard_protocol_active(self) -> bool: ...


@contextlib.contextmanager
def terminal_session(terminal: Terminal) -> Iterator[Terminal]:
    """Start *terminal* and always stop it again, even when the body raises."""
    try:
        terminal.start()
        yield terminal
    finally:
        terminal.stop()


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by ``sys.stdin``/``sys.stdout``.

    Manages raw mode via :mod:`tty` and :mod:`termios`.  Input is read with
    :func:`os.read`, decoded incrementally as UTF-8 and split into complete
    sequences by :class:`StdinBuffer`.  A lone ESC is held for at most
    *escape_timeout* seconds waiting for the rest of an escape sequence.
    """

    def __init__(
        self,
        *,
        stdin: IO[str] | None = None,
        stdout: IO[str] | None = None,
        escape_timeout: float = 0.05,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._escape_timeout = escape_timeout
        self._original_termios: list | None = None
        self._keyboard_protocol_active: bool = False
        self._stdin_buffer = StdinBuffer()
        self._pending: deque[str] = deque()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    # -- properties ---------------------------------------------------------

    @property
    def keyboard_protocol_active(self) -> bool:
        return self._keyboard_protocol_active

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Enter raw mode and the alternate screen, enable mouse capture."""
        fd = self._stdin.fileno()
        if not os.isatty(fd):
            raise TerminalError("stdin is not a terminal")

        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)
        logger.debug("Raw mode enabled on fd %d", fd)

        self.write(_ALT_SCREEN_ENTER + _MOUSE_ENABLE + _HIDE_CURSOR + _CLEAR_SCREEN)
        # The reply (if any) is picked up by read_event
        self.write(_KITTY_QUERY)

    def stop(self) -> None:
        """Restore the terminal to the state saved by :meth:`start`.

        Safe to call more than once and after a partial start.
        """
        if self._original_termios is None:
            return
        try:
            sequence = _MOUSE_DISABLE + _SHOW_CURSOR + _ALT_SCREEN_LEAVE
            if self._keyboard_protocol_active:
                sequence = _KITTY_DISABLE + sequence
                self._keyboard_protocol_active = False
            self.write(sequence)
        finally:
            original, self._original_termios = self._original_termios, None
            termios.tcsetattr(self._stdin.fileno(), termios.TCSADRAIN, original)
            self._stdin_buffer.clear()
            self._pending.clear()
            logger.debug("Terminal restored")

    # -- input --------------------------------------------------------------

    def read_event(self) -> Event:
        while True:
            while self._pending:
                data = self._pending.popleft()
                if self._handle_protocol_reply(data):
                    continue
                event = parse_event(data)
                if event is not None:
                    return event
                logger.debug("Ignoring unrecognised input %r", data)
            self._fill()

    def _fill(self) -> None:
        """Block for more input and queue every complete sequence."""
        fd = self._stdin.fileno()
        if self._stdin_buffer.pending and not self._wait_readable(fd, self._escape_timeout):
            self._pending.extend(self._stdin_buffer.flush())
            return

        raw = os.read(fd, _READ_SIZE)
        if not raw:
            raise TerminalError("stdin closed")
        text = self._decoder.decode(raw)
        self._pending.extend(self._stdin_buffer.process(text))

    @staticmethod
    def _wait_readable(fd: int, timeout: float) -> bool:
        readable, _, _ = select.select([fd], [], [], timeout)
        return bool(readable)

    def _handle_protocol_reply(self, data: str) -> bool:
        """Consume the kitty keyboard query reply and enable the protocol."""
        if not _KITTY_RESPONSE_RE.match(data):
            return False
        if not self._keyboard_protocol_active:
            self._keyboard_protocol_active = True
            self.write(_KITTY_ENABLE)
            logger.debug("Kitty keyboard protocol enabled")
        return True

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        self._stdout.write(data)
        self._stdout.flush()
