"""Protocols for the host collaborators the core talks to.

The core never depends on a concrete editor. Anything that provides these
operations can host modal editing: the in-process ``KeymapRegistry`` does,
and so does the Textual integration in ``ergokeys.ui``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .mode import CursorStyle
    from .shortcuts import KeyboardShortcut


@runtime_checkable
class KeymapProtocol(Protocol):
    """A named, host-owned table of action id -> shortcuts."""

    @property
    def name(self) -> str: ...

    @property
    def parent(self) -> KeymapProtocol | None: ...

    @property
    def is_loaded(self) -> bool: ...

    def force_load(self) -> None: ...

    def action_ids(self) -> list[str]: ...

    def shortcuts_for(self, action_id: str) -> frozenset[KeyboardShortcut]: ...

    def add_shortcut(self, action_id: str, shortcut: KeyboardShortcut) -> None: ...

    def remove_shortcut(self, action_id: str, shortcut: KeyboardShortcut) -> None: ...


class KeymapRegistryProtocol(Protocol):
    """The host's keymap registry."""

    def list_all(self) -> Iterable[KeymapProtocol]: ...

    def get_by_name(self, name: str) -> KeymapProtocol | None: ...

    def get_active(self) -> KeymapProtocol | None: ...

    def set_active(self, keymap: KeymapProtocol) -> None: ...

    def add_listener(self, listener: Callable[[KeymapProtocol | None], None]) -> None: ...


class PropertiesProtocol(Protocol):
    """Namespaced string key-value store used to remember keymap names."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class SettingsStoreProtocol(Protocol):
    """Whole-document settings persistence."""

    def load_all(self) -> dict[str, Any]: ...

    def save_all(self, settings: dict[str, Any]) -> None: ...


class EditorSurfaceProtocol(Protocol):
    """An editable surface that can show a block or line cursor."""

    def set_cursor_style(self, style: CursorStyle) -> None: ...

    def virtual_file(self) -> Path | None: ...
