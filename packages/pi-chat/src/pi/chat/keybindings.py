"""Chat keybindings manager."""

from __future__ import annotations

from typing import Literal

from pi.chat.keys import KeyEvent, KeyId

ChatAction = Literal[
    # Normal mode
    "startEditing",
    "quit",
    # Editing mode
    "stopEditing",
    "submit",
    "deleteCharBackward",
    "cursorLeft",
    "cursorRight",
    # Any printable key while editing
    "insertChar",
]

ChatKeybindingsConfig = dict[str, KeyId | list[KeyId]]

DEFAULT_CHAT_KEYBINDINGS: dict[ChatAction, KeyId | list[KeyId]] = {
    "startEditing": "e",
    "quit": "q",
    "stopEditing": "escape",
    "submit": "enter",
    "deleteCharBackward": "backspace",
    "cursorLeft": "left",
    "cursorRight": "right",
}


class ChatKeybindingsManager:
    """Maps actions to the key ids that trigger them."""

    def __init__(self, config: ChatKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[str, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: ChatKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_CHAT_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        # User overrides replace the default list for that action
        for action, keys in config.items():
            if action not in DEFAULT_CHAT_KEYBINDINGS:
                raise ValueError(f"Unknown chat action: {action!r}")
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, event: KeyEvent, action: ChatAction) -> bool:
        """Check if a key event triggers a specific action."""
        return event.key in self._action_to_keys.get(action, [])

    def get_keys(self, action: ChatAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return list(self._action_to_keys.get(action, []))

    def set_config(self, config: ChatKeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)
