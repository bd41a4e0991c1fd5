"""JSON settings store and the namespaced properties view on top of it."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ..config import PLUGIN_ID, SETTINGS_PATH
from ..core.protocols import SettingsStoreProtocol

logger = logging.getLogger(__name__)


class SettingsStore:
    """Settings kept as a single JSON object on disk."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or SETTINGS_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> dict[str, Any]:
        """Load all settings. A missing or unreadable file yields an empty dict."""
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: not a JSON object", self._path)
            return {}
        return data

    def save_all(self, settings: dict[str, Any]) -> None:
        """Write all settings, replacing the file atomically.

        Raises:
            OSError: If the directory or file cannot be written.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".settings-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(settings, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        return self.load_all().get(key, default)


class InMemorySettingsStore:
    """Settings store that never touches the disk."""

    def __init__(self, settings: dict[str, Any] | None = None) -> None:
        self.settings = dict(settings or {})

    def load_all(self) -> dict[str, Any]:
        return dict(self.settings)

    def save_all(self, settings: dict[str, Any]) -> None:
        self.settings = dict(settings)

    def get(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)


class PersistentProperties:
    """String properties stored under ``<prefix>.<key>`` in a settings store."""

    def __init__(self, store: SettingsStoreProtocol, prefix: str = PLUGIN_ID) -> None:
        self._store = store
        self._prefix = prefix

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}.{key}"

    def get(self, key: str) -> str | None:
        value = self._store.load_all().get(self._full_key(key))
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        settings = self._store.load_all()
        settings[self._full_key(key)] = value
        self._store.save_all(settings)

    def unset(self, key: str) -> None:
        settings = self._store.load_all()
        if settings.pop(self._full_key(key), None) is not None:
            self._store.save_all(settings)
