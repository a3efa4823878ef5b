"""Input mode state machine.

``NORMAL`` only listens for the start-editing and quit keys.  ``EDITING``
routes key presses to the input buffer; repeat and release reports are
ignored there so terminals that send both press and release do not insert
every character twice.
"""

from __future__ import annotations

from enum import Enum

from pi.chat.keybindings import ChatAction, ChatKeybindingsManager
from pi.chat.keys import KeyEvent


class Mode(Enum):
    NORMAL = "normal"
    EDITING = "editing"


_EDITING_ACTIONS: tuple[ChatAction, ...] = (
    "stopEditing",
    "submit",
    "deleteCharBackward",
    "cursorLeft",
    "cursorRight",
)


def interpret_key(
    mode: Mode,
    event: KeyEvent,
    bindings: ChatKeybindingsManager,
) -> ChatAction | None:
    """Return the action *event* triggers in *mode*, or ``None`` to ignore it."""
    if mode is Mode.NORMAL:
        if bindings.matches(event, "startEditing"):
            return "startEditing"
        if bindings.matches(event, "quit"):
            return "quit"
        return None

    if mode is Mode.EDITING:
        if not event.is_press:
            return None
        for action in _EDITING_ACTIONS:
            if bindings.matches(event, action):
                return action
        if event.text:
            return "insertChar"
        return None

    raise AssertionError(f"unhandled mode: {mode!r}")
