"""StdinBuffer splits raw terminal input into complete sequences.

Reads from a raw-mode terminal arrive in arbitrary chunks: one read can hold
several keys, and an escape sequence can be split across two reads.  The
buffer keeps the unfinished tail until more data arrives, or until the caller
decides the tail is complete after all (a lone ESC keypress) and flushes it.
"""

from __future__ import annotations

import re

ESC = "\x1b"
_ST = ESC + "\\"

_SGR_MOUSE_BODY_RE = re.compile(r"<\d+;\d+;\d+[Mm]")


def _is_final_byte(ch: str) -> bool:
    return "@" <= ch <= "~"


def _sequence_complete(seq: str) -> bool:
    """Whether *seq*, which starts with ESC, needs no further input."""
    if len(seq) < 2:
        return False
    kind, body = seq[1], seq[2:]

    if kind == "[":
        if body.startswith("M"):
            # X10 mouse: button, column and row bytes follow
            return len(body) >= 4
        if not body or not _is_final_byte(body[-1]):
            return False
        if body.startswith("<"):
            return _SGR_MOUSE_BODY_RE.fullmatch(body) is not None
        return True
    if kind == "]":
        return seq.endswith((_ST, "\x07"))
    if kind in "P_":
        return seq.endswith(_ST)
    if kind == "O":
        return len(body) >= 1
    # Alt/meta prefix: ESC plus one character
    return True


def split_sequences(data: str) -> tuple[list[str], str]:
    """Split *data* into complete sequences and an unfinished tail."""
    sequences: list[str] = []
    i = 0
    while i < len(data):
        if data[i] != ESC:
            sequences.append(data[i])
            i += 1
            continue
        end = i + 2
        while end <= len(data) and not _sequence_complete(data[i:end]):
            end += 1
        if end > len(data):
            return sequences, data[i:]
        sequences.append(data[i:end])
        i = end
    return sequences, ""


class StdinBuffer:
    """Accumulates decoded stdin text and hands out complete sequences."""

    def __init__(self) -> None:
        self._buffer = ""

    def process(self, data: str) -> list[str]:
        """Feed *data* and return every sequence that is now complete."""
        sequences, self._buffer = split_sequences(self._buffer + data)
        return sequences

    @property
    def pending(self) -> bool:
        """``True`` while an unfinished escape sequence is buffered."""
        return bool(self._buffer)

    def flush(self) -> list[str]:
        """Give up waiting and return the buffered tail as-is."""
        tail, self._buffer = self._buffer, ""
        return [tail] if tail else []

    def get_buffer(self) -> str:
        return self._buffer

    def clear(self) -> None:
        self._buffer = ""
