"""Append-only history of submitted messages."""

from __future__ import annotations

from typing import Iterator


class MessageHistory:
    """Ordered record of submitted lines, oldest first.

    Entries are never edited, deduplicated or removed.
    """

    def __init__(self) -> None:
        self._messages: list[str] = []

    def append(self, message: str) -> None:
        self._messages.append(str(message))

    @property
    def messages(self) -> tuple[str, ...]:
        """Read-only snapshot of all messages."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._messages))

    def __getitem__(self, index: int) -> str:
        return self._messages[index]

    def __repr__(self) -> str:
        return f"MessageHistory({self._messages!r})"
