"""Loading user-defined keymaps from JSON files.

A keymap file looks like::

    {
        "keymap": {
            "name": "ErgoKeys (Dvorak)",
            "parent": "$ergokeys",
            "actions": {
                "editor.cursor_up": ["c"],
                "editor.cursor_down": ["t"]
            }
        }
    }

The ``keymap`` wrapper is optional. A file whose parent chain reaches
``$ergokeys`` becomes another command-mode layout.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..config import KEYMAPS_DIR
from .exceptions import KeymapFileError
from .keymap import Keymap, KeymapRegistry
from .shortcuts import KeyboardShortcut

logger = logging.getLogger(__name__)


class KeymapManager:
    """Discovers keymap files and registers them with a registry."""

    def __init__(self, registry: KeymapRegistry, keymaps_dir: Path | None = None) -> None:
        self._registry = registry
        self._keymaps_dir = keymaps_dir or KEYMAPS_DIR
        self._loaded: dict[str, Path] = {}

    @property
    def keymaps_dir(self) -> Path:
        return self._keymaps_dir

    def load_all(self) -> list[Keymap]:
        """Load every ``*.json`` file in the keymaps directory.

        Returns:
            The keymaps that were registered. Broken files are logged and skipped.
        """
        if not self._keymaps_dir.is_dir():
            return []

        registered = []
        for path in sorted(self._keymaps_dir.glob("*.json")):
            keymap = self.load_keymap(path)
            if keymap is not None:
                registered.append(keymap)
        return registered

    def load_keymap(self, keymap_name: str | Path) -> Keymap | None:
        """Load and register one keymap by file name or path.

        Returns:
            The registered keymap, or None if the file was broken or clashed
            with an existing keymap.
        """
        path = self._resolve_keymap_path(str(keymap_name))
        try:
            keymap = self._load_keymap_from_file(path)
        except KeymapFileError as exc:
            logger.warning("Failed to load keymap '%s': %s", keymap_name, exc)
            return None

        if keymap.name in self._registry:
            logger.warning("Keymap %r from %s clashes with an existing keymap; skipped", keymap.name, path)
            return None

        self._registry.add(keymap)
        self._loaded[keymap.name] = path.resolve()
        logger.info("Loaded keymap %r from %s", keymap.name, path)
        return keymap

    def _resolve_keymap_path(self, keymap_name: str) -> Path:
        """Resolve a keymap name to a file path.

        Absolute and ``~`` paths are used as-is; bare names are looked up in
        the keymaps directory with a ``.json`` suffix.
        """
        if keymap_name.startswith(("~", "/")) or Path(keymap_name).is_absolute():
            return Path(keymap_name).expanduser()

        name = Path(keymap_name).stem
        return self._keymaps_dir / f"{name}.json"

    def _load_keymap_from_file(self, path: Path) -> Keymap:
        """Parse a keymap file.

        Raises:
            KeymapFileError: If the file is missing, not JSON, or malformed.
        """
        if not path.exists():
            raise KeymapFileError(f"Keymap file not found: {path}")

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise KeymapFileError(f"Failed to read keymap JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise KeymapFileError("Keymap file must contain a JSON object.")

        keymap_data = payload.get("keymap", payload)
        if not isinstance(keymap_data, dict):
            raise KeymapFileError('Keymap file "keymap" must be a JSON object.')

        name = keymap_data.get("name", path.stem)
        if not isinstance(name, str) or not name.strip():
            raise KeymapFileError('"name" must be a non-empty string.')

        parent = keymap_data.get("parent")
        if parent is not None and not isinstance(parent, str):
            raise KeymapFileError('"parent" must be a string.')

        actions = self._parse_actions(keymap_data.get("actions", {}))
        return Keymap(name.strip(), parent_name=parent, loader=lambda: actions)

    def _parse_actions(self, data: Any) -> dict[str, list[KeyboardShortcut]]:
        """Parse the ``actions`` object into shortcuts per action id.

        Raises:
            KeymapFileError: If any action or shortcut is invalid.
        """
        if not isinstance(data, dict):
            raise KeymapFileError('"actions" must be an object.')

        actions: dict[str, list[KeyboardShortcut]] = {}
        for action_id, shortcuts in data.items():
            if not action_id:
                raise KeymapFileError("Action ids must be non-empty.")
            if isinstance(shortcuts, str):
                shortcuts = [shortcuts]
            if not isinstance(shortcuts, list):
                raise KeymapFileError(f'Shortcuts for "{action_id}" must be a list of strings.')

            parsed = []
            for item in shortcuts:
                if not isinstance(item, str):
                    raise KeymapFileError(f'Shortcuts for "{action_id}" must be a list of strings.')
                try:
                    parsed.append(KeyboardShortcut.parse(item))
                except ValueError as exc:
                    raise KeymapFileError(f'Bad shortcut for "{action_id}": {exc}') from exc
            actions[action_id] = parsed

        return actions

    def get_loaded_keymaps(self) -> dict[str, Path]:
        """Names of keymaps loaded from files, with their paths."""
        return dict(self._loaded)
