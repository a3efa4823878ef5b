"""Chat application state and the synchronous event loop.

Each loop iteration renders one frame, blocks for exactly one input event
and applies it.  Only key events are interpreted; mouse reports are read
and dropped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pi.chat.buffer import InputBuffer
from pi.chat.history import MessageHistory
from pi.chat.keybindings import ChatAction, ChatKeybindingsManager
from pi.chat.keys import Event, KeyEvent
from pi.chat.mode import Mode, interpret_key
from pi.chat.render import Frame

if TYPE_CHECKING:
    from pi.chat.render import Renderer
    from pi.chat.terminal import Terminal

logger = logging.getLogger(__name__)


class ChatApp:
    """Holds the input buffer, the current mode and the message history."""

    def __init__(self, bindings: ChatKeybindingsManager | None = None) -> None:
        self.buffer = InputBuffer()
        self.mode = Mode.NORMAL
        self.history = MessageHistory()
        self.bindings = bindings or ChatKeybindingsManager()

    def frame(self) -> Frame:
        return Frame(
            mode=self.mode,
            text=self.buffer.text,
            cursor=self.buffer.cursor,
            messages=self.history.messages,
        )

    def submit(self) -> None:
        """Move the buffer text (even if empty) into the history."""
        self.history.append(self.buffer.text)
        self.buffer.clear()
        logger.debug("Submitted message #%d", len(self.history) - 1)

    def set_mode(self, mode: Mode) -> None:
        if mode is not self.mode:
            logger.debug("Mode %s -> %s", self.mode.value, mode.value)
        self.mode = mode

    def handle_event(self, event: Event) -> bool:
        """Apply one input event. Returns ``False`` when the app should quit."""
        if not isinstance(event, KeyEvent):
            return True
        action = interpret_key(self.mode, event, self.bindings)
        if action is None:
            return True
        return self.apply(action, event)

    def apply(self, action: ChatAction, event: KeyEvent) -> bool:
        if action == "quit":
            return False
        if action == "startEditing":
            self.set_mode(Mode.EDITING)
        elif action == "stopEditing":
            self.set_mode(Mode.NORMAL)
        elif action == "submit":
            self.submit()
        elif action == "deleteCharBackward":
            self.buffer.delete_before_cursor()
        elif action == "cursorLeft":
            self.buffer.move_left()
        elif action == "cursorRight":
            self.buffer.move_right()
        elif action == "insertChar":
            for char in event.text or "":
                self.buffer.insert(char)
        return True


def run_app(terminal: Terminal, app: ChatApp, renderer: Renderer) -> MessageHistory:
    """Drive *app* until the quit key is pressed in normal mode.

    Terminal and renderer failures propagate to the caller.
    """
    logger.info("Chat loop started")
    while True:
        renderer.render(app.frame())
        event = terminal.read_event()
        if not app.handle_event(event):
            break
    logger.info("Chat loop finished with %d message(s)", len(app.history))
    return app.history
