"""Display-width helpers for laying out text in terminal cells.

Text is measured per grapheme cluster: combining marks ride on their base
character, and wide CJK or emoji clusters take two cells.
"""

from __future__ import annotations

import functools
import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# SGR and simple CSI sequences the renderer embeds in lines
_STRIP_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

_ZERO_WIDTH_CATEGORIES = ("Cc", "Cf", "Mn", "Me")


def grapheme_width(cluster: str) -> int:
    """Cells taken by one grapheme cluster (0, 1 or 2)."""
    if not cluster:
        return 0
    head = cluster[0]
    if unicodedata.category(head) in _ZERO_WIDTH_CATEGORIES:
        return 0
    # Emoji presentation, ZWJ sequences, flags and the pictograph planes
    if "\ufe0f" in cluster or "\u200d" in cluster or ord(head) >= 0x1F000:
        return 2
    return max(_wcwidth.wcwidth(head), 0)


@functools.lru_cache(maxsize=512)
def _measure(plain: str) -> int:
    return sum(grapheme_width(g) for g in grapheme.graphemes(plain))


def visible_width(text: str) -> int:
    """Number of terminal cells *text* occupies, escape sequences excluded."""
    plain = _STRIP_RE.sub("", text) if "\x1b" in text else text
    if plain.isascii() and plain.isprintable():
        return len(plain)
    return _measure(plain)


def take_columns(text: str, max_cols: int) -> str:
    """Longest prefix of plain *text* that fits in *max_cols* cells.

    The cut always falls on a grapheme cluster boundary.
    """
    kept: list[str] = []
    used = 0
    for cluster in grapheme.graphemes(text):
        used += grapheme_width(cluster)
        if used > max_cols:
            break
        kept.append(cluster)
    return "".join(kept)


def truncate_to_width(
    text: str,
    max_width: int,
    ellipsis: str = "...",
    pad: bool = False,
) -> str:
    """Fit plain *text* into *max_width* cells.

    Over-wide text is cut and ends in *ellipsis*, which counts towards the
    width.  With *pad* the result is filled with spaces to exactly
    *max_width*.
    """
    if max_width <= 0:
        return ""
    if visible_width(text) > max_width:
        room = max_width - visible_width(ellipsis)
        if room > 0:
            text = take_columns(text, room) + ellipsis
        else:
            text = take_columns(ellipsis, max_width)
    if pad:
        text += " " * (max_width - visible_width(text))
    return text


def scroll_start(text: str, cursor: int, width: int) -> int:
    """Pick the first character index to show so the cursor stays visible.

    *cursor* is a character index; the returned start is one too.  The
    column under the cursor must fit inside *width*, so the text between
    start and cursor may use at most ``width - 1`` columns.
    """
    if width <= 1:
        return cursor
    start = 0
    while start < cursor and visible_width(text[start:cursor]) > width - 1:
        start += 1
    return start
