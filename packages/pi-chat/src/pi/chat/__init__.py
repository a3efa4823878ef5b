"""pi-chat: single-line chat input box for the terminal."""

from pi.chat.app import ChatApp, run_app
from pi.chat.buffer import InputBuffer
from pi.chat.history import MessageHistory
from pi.chat.keybindings import (
    DEFAULT_CHAT_KEYBINDINGS,
    ChatAction,
    ChatKeybindingsManager,
)
from pi.chat.keys import (
    Event,
    KeyEvent,
    KeyEventType,
    KeyId,
    MouseEvent,
    is_key_release,
    is_key_repeat,
    parse_event,
    parse_key,
    parse_key_event,
    parse_mouse_event,
)
from pi.chat.mode import Mode, interpret_key
from pi.chat.render import ComposedFrame, Frame, FrameRenderer, Renderer, compose_frame
from pi.chat.settings import SettingsManager
from pi.chat.stdin_buffer import StdinBuffer
from pi.chat.terminal import ProcessTerminal, Terminal, TerminalError, terminal_session
from pi.chat.utils import truncate_to_width, visible_width

__all__ = [
    # App
    "ChatApp",
    "run_app",
    # Core state
    "InputBuffer",
    "MessageHistory",
    "Mode",
    "interpret_key",
    # Keybindings
    "DEFAULT_CHAT_KEYBINDINGS",
    "ChatAction",
    "ChatKeybindingsManager",
    # Input decoding
    "Event",
    "KeyEvent",
    "KeyEventType",
    "KeyId",
    "MouseEvent",
    "StdinBuffer",
    "is_key_release",
    "is_key_repeat",
    "parse_event",
    "parse_key",
    "parse_key_event",
    "parse_mouse_event",
    # Rendering
    "ComposedFrame",
    "Frame",
    "FrameRenderer",
    "Renderer",
    "compose_frame",
    "truncate_to_width",
    "visible_width",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    "TerminalError",
    "terminal_session",
    # Settings
    "SettingsManager",
]
