"""Hierarchical chat settings loaded from JSON files.

Three-level precedence: CLI overrides > project settings > global settings,
on top of built-in defaults.  Nested dicts (``keybindings``) are merged key
by key.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".pi"
PROJECT_SETTINGS_FILE = "chat.json"
GLOBAL_SETTINGS_FILE = "settings.json"
CHAT_DIR_ENV = "PI_CHAT_DIR"

DEFAULT_PEER_NAME = "Peter"
DEFAULT_MESSAGES_HEIGHT = 30
DEFAULT_ESCAPE_TIMEOUT_MS = 50


def _settings_defaults() -> dict[str, Any]:
    """Default settings values."""
    return {
        "peerName": DEFAULT_PEER_NAME,
        "messagesHeight": DEFAULT_MESSAGES_HEIGHT,
        "escapeTimeoutMs": DEFAULT_ESCAPE_TIMEOUT_MS,
        "keybindings": {},
    }


def deep_merge_settings(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge overrides into base settings.

    For nested dicts, merge recursively. For primitives and arrays,
    override value wins completely. ``None`` overrides are skipped.
    """
    result = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge_settings(result[key], value)
        else:
            result[key] = value
    return result


def default_chat_dir() -> str:
    """Chat data directory (``~/.pi/chat`` unless ``PI_CHAT_DIR`` is set)."""
    override = os.environ.get(CHAT_DIR_ENV)
    if override:
        return override
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME, "chat")


class SettingsManager:
    """Merged view over global, project and CLI settings.

    Use factory methods (create, in_memory) instead of calling constructor directly.
    """

    def __init__(
        self,
        *,
        settings_path: str | None,
        project_settings_path: str | None,
        initial_settings: dict[str, Any],
        load_error: Exception | None = None,
    ) -> None:
        self._settings_path = settings_path
        self._project_settings_path = project_settings_path
        self._global_settings = dict(initial_settings)
        self._load_error = load_error

        project = self._load_project_settings()
        self._settings = deep_merge_settings(
            deep_merge_settings(_settings_defaults(), self._global_settings), project
        )

    # --- Factory methods ---

    @classmethod
    def create(cls, cwd: str, chat_dir: str | None = None) -> SettingsManager:
        """Create a settings manager reading the global and project files."""
        cdir = chat_dir or default_chat_dir()
        settings_path = os.path.join(cdir, GLOBAL_SETTINGS_FILE)
        project_settings_path = os.path.join(cwd, CONFIG_DIR_NAME, PROJECT_SETTINGS_FILE)

        settings, error = _load_from_file(settings_path)
        return cls(
            settings_path=settings_path,
            project_settings_path=project_settings_path,
            initial_settings=settings,
            load_error=error,
        )

    @classmethod
    def in_memory(cls, settings: dict[str, Any] | None = None) -> SettingsManager:
        """Create an in-memory settings manager for testing."""
        return cls(
            settings_path=None,
            project_settings_path=None,
            initial_settings=settings or {},
        )

    # --- Core operations ---

    def apply_overrides(self, overrides: dict[str, Any]) -> None:
        """Apply CLI-level overrides on top of merged settings."""
        self._settings = deep_merge_settings(self._settings, overrides)

    @property
    def settings(self) -> dict[str, Any]:
        """Current merged settings (read-only view)."""
        return self._settings

    @property
    def load_error(self) -> Exception | None:
        return self._load_error

    @property
    def settings_path(self) -> str | None:
        return self._settings_path

    def _load_project_settings(self) -> dict[str, Any]:
        if not self._project_settings_path:
            return {}
        settings, _ = _load_from_file(self._project_settings_path)
        return settings

    # --- Getters ---

    def get_peer_name(self) -> str:
        return str(self._settings.get("peerName") or DEFAULT_PEER_NAME)

    def get_messages_height(self) -> int:
        value = self._settings.get("messagesHeight")
        if isinstance(value, int) and value >= 0:
            return value
        return DEFAULT_MESSAGES_HEIGHT

    def get_escape_timeout(self) -> float:
        """Escape disambiguation timeout in seconds."""
        value = self._settings.get("escapeTimeoutMs")
        if isinstance(value, (int, float)) and value >= 0:
            return value / 1000.0
        return DEFAULT_ESCAPE_TIMEOUT_MS / 1000.0

    def get_keybindings(self) -> dict[str, Any]:
        value = self._settings.get("keybindings")
        return dict(value) if isinstance(value, dict) else {}


def _load_from_file(path: str) -> tuple[dict[str, Any], Exception | None]:
    """Load settings from a JSON file. Returns (settings, error)."""
    if not os.path.exists(path):
        return {}, None
    try:
        content = Path(path).read_text(encoding="utf-8")
        settings = json.loads(content)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}, e
    if not isinstance(settings, dict):
        error = ValueError(f"{path}: expected a JSON object")
        logger.warning("Ignoring settings file %s: %s", path, error)
        return {}, error
    return settings, None
