"""In-process keymap model.

``Keymap`` and ``KeymapRegistry`` implement the host side of the keymap
contracts in ``protocols``. Embedding hosts with their own keymap system can
adapt to the protocols instead; the Textual UI and the tests use these.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Callable, Iterable, Mapping
from typing import Union

from .shortcuts import KeyboardShortcut

logger = logging.getLogger(__name__)

MAX_ANCESTRY_DEPTH = 64

ShortcutLike = Union[KeyboardShortcut, str]
BindingsLoader = Callable[[], Mapping[str, Iterable[ShortcutLike]]]
KeymapListener = Callable[["Keymap | None"], None]


def _coerce(shortcut: ShortcutLike) -> KeyboardShortcut:
    if isinstance(shortcut, KeyboardShortcut):
        return shortcut
    return KeyboardShortcut.parse(shortcut)


class Keymap:
    """A named action -> shortcuts table with a lazily resolved parent.

    The parent is known only by name until ``force_load()`` resolves it through
    the registry the keymap was added to. After that it is held weakly; the
    registry owns every keymap.
    """

    def __init__(
        self,
        name: str,
        parent_name: str | None = None,
        bindings: Mapping[str, Iterable[ShortcutLike]] | None = None,
        loader: BindingsLoader | None = None,
    ) -> None:
        self._name = name
        self._parent_name = parent_name
        self._parent_ref: weakref.ref[Keymap] | None = None
        self._registry_ref: weakref.ref[KeymapRegistry] | None = None
        self._bindings: dict[str, set[KeyboardShortcut]] = {}
        self._loader = loader
        self._loaded = False
        for action_id, shortcuts in (bindings or {}).items():
            for shortcut in shortcuts:
                self._bindings.setdefault(action_id, set()).add(_coerce(shortcut))

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent_name(self) -> str | None:
        return self._parent_name

    @property
    def parent(self) -> Keymap | None:
        """The resolved parent, or None before ``force_load()``."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _attach(self, registry: KeymapRegistry) -> None:
        self._registry_ref = weakref.ref(registry)

    def _ensure_bindings(self) -> None:
        if self._loader is None:
            return
        loader, self._loader = self._loader, None
        for action_id, shortcuts in loader().items():
            for shortcut in shortcuts:
                self._bindings.setdefault(action_id, set()).add(_coerce(shortcut))

    def force_load(self) -> None:
        """Materialize lazy bindings and resolve the parent link."""
        self._ensure_bindings()
        self._loaded = True
        if self._parent_name is None or self._registry_ref is None:
            return
        registry = self._registry_ref()
        parent = registry.get_by_name(self._parent_name) if registry is not None else None
        if parent is None:
            logger.warning("Keymap %r: parent %r not found", self._name, self._parent_name)
            self._parent_ref = None
            return
        self._parent_ref = weakref.ref(parent)

    def action_ids(self) -> list[str]:
        self._ensure_bindings()
        return list(self._bindings)

    def shortcuts_for(self, action_id: str) -> frozenset[KeyboardShortcut]:
        self._ensure_bindings()
        return frozenset(self._bindings.get(action_id, ()))

    def add_shortcut(self, action_id: str, shortcut: ShortcutLike) -> None:
        self._ensure_bindings()
        self._bindings.setdefault(action_id, set()).add(_coerce(shortcut))

    def remove_shortcut(self, action_id: str, shortcut: ShortcutLike) -> None:
        self._ensure_bindings()
        shortcuts = self._bindings.get(action_id)
        if not shortcuts:
            return
        shortcuts.discard(_coerce(shortcut))
        if not shortcuts:
            del self._bindings[action_id]

    def bindings(self) -> dict[str, frozenset[KeyboardShortcut]]:
        """Snapshot of the own action table."""
        self._ensure_bindings()
        return {action_id: frozenset(shortcuts) for action_id, shortcuts in self._bindings.items()}

    def _chain(self) -> Iterable[Keymap]:
        seen: set[int] = set()
        keymap: Keymap | None = self
        depth = 0
        while keymap is not None and depth < MAX_ANCESTRY_DEPTH and id(keymap) not in seen:
            seen.add(id(keymap))
            yield keymap
            keymap = keymap.parent
            depth += 1

    def find_actions(self, shortcut: ShortcutLike) -> list[str]:
        """Action ids bound to ``shortcut`` here or in an ancestor, nearest first."""
        wanted = _coerce(shortcut)
        found: list[str] = []
        for keymap in self._chain():
            for action_id in keymap.action_ids():
                if action_id not in found and wanted in keymap.shortcuts_for(action_id):
                    found.append(action_id)
        return found

    def has_prefix(self, stroke: str) -> bool:
        """True if a chord in this keymap's chain starts with ``stroke``."""
        for keymap in self._chain():
            for action_id in keymap.action_ids():
                for shortcut in keymap.shortcuts_for(action_id):
                    if shortcut.is_chord and shortcut.first == stroke:
                        return True
        return False

    def __repr__(self) -> str:
        return f"Keymap({self._name!r}, parent={self._parent_name!r})"


class KeymapRegistry:
    """The set of known keymaps plus the currently active one."""

    def __init__(self, keymaps: Iterable[Keymap] = (), active: Keymap | str | None = None) -> None:
        self._keymaps: dict[str, Keymap] = {}
        self._active: Keymap | None = None
        self._listeners: list[KeymapListener] = []
        for keymap in keymaps:
            self.add(keymap)
        if isinstance(active, str):
            self._active = self._keymaps[active]
        else:
            self._active = active

    def add(self, keymap: Keymap) -> None:
        """Register a keymap.

        Raises:
            ValueError: If a keymap with the same name is already registered.
        """
        if keymap.name in self._keymaps:
            raise ValueError(f"Keymap already registered: {keymap.name!r}")
        self._keymaps[keymap.name] = keymap
        keymap._attach(self)

    def remove(self, name: str) -> Keymap | None:
        return self._keymaps.pop(name, None)

    def list_all(self) -> list[Keymap]:
        return list(self._keymaps.values())

    def get_by_name(self, name: str) -> Keymap | None:
        return self._keymaps.get(name)

    def get_active(self) -> Keymap | None:
        return self._active

    def set_active(self, keymap: Keymap) -> None:
        """Make ``keymap`` active and notify listeners if it changed."""
        if keymap is self._active:
            return
        self._active = keymap
        logger.debug("Active keymap is now %r", keymap.name)
        for listener in list(self._listeners):
            listener(keymap)

    def add_listener(self, listener: KeymapListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: KeymapListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def __contains__(self, name: object) -> bool:
        return name in self._keymaps

    def __len__(self) -> int:
        return len(self._keymaps)
