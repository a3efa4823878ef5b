"""InputBuffer - single-line Unicode text with a character-indexed cursor.

The cursor is always a count of characters (Unicode scalar values), never a
byte offset.  The UTF-8 byte offset needed for an insertion is computed on
demand from the cursor and thrown away right after the mutation.
"""

from __future__ import annotations

_ENCODING = "utf-8"


class InputBuffer:
    """Editable line of text plus cursor."""

    def __init__(self, text: str = "") -> None:
        self._text: str = text
        self._cursor: int = len(text)

    # -- read access --------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        """Cursor position as a character index in ``[0, char_count]``."""
        return self._cursor

    @property
    def char_count(self) -> int:
        return len(self._text)

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"InputBuffer(text={self._text!r}, cursor={self._cursor})"

    # -- cursor -------------------------------------------------------------

    def clamp_cursor(self, position: int) -> int:
        return max(0, min(position, self.char_count))

    def move_left(self) -> None:
        self._cursor = self.clamp_cursor(self._cursor - 1)

    def move_right(self) -> None:
        self._cursor = self.clamp_cursor(self._cursor + 1)

    def byte_offset_for_cursor(self) -> int:
        """Return the UTF-8 byte offset of the character at the cursor.

        When the cursor sits after the last character this is the encoded
        length of the whole text.
        """
        return len(self._text[: self._cursor].encode(_ENCODING))

    # -- mutation -----------------------------------------------------------

    def insert(self, char: str) -> None:
        """Insert a single character at the cursor and step past it."""
        if len(char) != 1:
            raise ValueError(f"expected a single character, got {char!r}")

        index = self.byte_offset_for_cursor()
        encoded = self._text.encode(_ENCODING)
        self._text = (encoded[:index] + char.encode(_ENCODING) + encoded[index:]).decode(
            _ENCODING
        )
        self.move_right()

    def delete_before_cursor(self) -> None:
        """Remove the character left of the cursor; no-op at position 0."""
        if self._cursor == 0:
            return

        # Rebuild from the characters on either side instead of slicing bytes.
        before = self._text[: self._cursor - 1]
        after = self._text[self._cursor :]
        self._text = before + after
        self.move_left()

    def clear(self) -> None:
        self._text = ""
        self._cursor = 0
