"""Configuration for ergokeys.

Paths, identifiers and the user-tunable ``ErgoKeysSettings``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

PLUGIN_ID = "ergokeys"
DEFAULT_COMMAND_KEYMAP = "ErgoKeys (QWERTY)"
DEFAULT_INSERT_KEYMAP = "$default"

# Host actions that must run in insert mode (search popups, rename dialogs...).
DEFAULT_INTERCEPTED_ACTIONS = (
    "search.everywhere",
    "find.in_path",
    "rename.file",
    "refactor.rename",
)


def get_config_dir() -> Path:
    override = os.environ.get("ERGOKEYS_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    root = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return root / "ergokeys"


CONFIG_DIR = get_config_dir()
SETTINGS_PATH = CONFIG_DIR / "settings.json"
KEYMAPS_DIR = CONFIG_DIR / "keymaps"


@dataclass
class ErgoKeysSettings:
    """Modal editing options."""

    command_mode_toggle: bool = False  # activating command mode twice returns to insert
    default_command_keymap: str = DEFAULT_COMMAND_KEYMAP
    default_insert_keymap: str = DEFAULT_INSERT_KEYMAP
    intercepted_actions: tuple[str, ...] = field(default=DEFAULT_INTERCEPTED_ACTIONS)

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> ErgoKeysSettings:
        """Build settings from a loaded settings dict, ignoring bad values."""
        result = cls()

        toggle = settings.get("command_mode_toggle")
        if isinstance(toggle, bool):
            result.command_mode_toggle = toggle

        for key in ("default_command_keymap", "default_insert_keymap"):
            value = settings.get(key)
            if isinstance(value, str) and value.strip():
                setattr(result, key, value.strip())

        actions = settings.get("intercepted_actions")
        if isinstance(actions, list) and all(isinstance(item, str) for item in actions):
            result.intercepted_actions = tuple(actions)

        return result

    def to_settings(self) -> dict[str, Any]:
        return {
            "command_mode_toggle": self.command_mode_toggle,
            "default_command_keymap": self.default_command_keymap,
            "default_insert_keymap": self.default_insert_keymap,
            "intercepted_actions": list(self.intercepted_actions),
        }
