"""Insert/command mode state machine.

The controller remembers two keymaps for the session:

- ``insert_mode_keymap``: the plain keymap the user types with. Never part of
  the ergo family. It carries the ergo-family bindings as an overlay while
  it is the insert-mode base.
- ``command_mode_keymap``: the ergo-family keymap activated in command mode.

The host calls the ``on_*`` methods from its event loop; the controller
answers with ``set_active`` calls on the registry and cursor style changes on
editor surfaces. Nothing here subscribes to events by itself.
"""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Any

from ..config import ErgoKeysSettings
from .exceptions import ConfigurationError, KeymapNotFoundError
from .keymap_graph import KeymapGraph
from .mode import CURSOR_STYLES, Mode
from .overlay import OverlayEngine

if TYPE_CHECKING:
    from .protocols import (
        EditorSurfaceProtocol,
        KeymapProtocol,
        KeymapRegistryProtocol,
        PropertiesProtocol,
    )

logger = logging.getLogger(__name__)

INSERT_MODE_KEYMAP_KEY = "insert_mode_keymap_name"
COMMAND_MODE_KEYMAP_KEY = "command_mode_keymap_name"


class ModeController:
    """Tracks the insert/command keymaps and switches between them."""

    def __init__(
        self,
        registry: KeymapRegistryProtocol,
        properties: PropertiesProtocol,
        settings: ErgoKeysSettings | None = None,
        graph: KeymapGraph | None = None,
        overlay: OverlayEngine | None = None,
    ) -> None:
        self._registry = registry
        self._properties = properties
        self.settings = settings or ErgoKeysSettings()
        self._graph = graph or KeymapGraph(registry)
        self._overlay = overlay or OverlayEngine(self._graph)
        self._insert_mode_keymap: KeymapProtocol | None = None
        self._command_mode_keymap: KeymapProtocol | None = None
        self._last_editor_ref: weakref.ref[Any] | None = None
        self._initialized = False

    # ─────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────

    @property
    def insert_mode_keymap(self) -> KeymapProtocol | None:
        return self._insert_mode_keymap

    @property
    def command_mode_keymap(self) -> KeymapProtocol | None:
        return self._command_mode_keymap

    @property
    def graph(self) -> KeymapGraph:
        return self._graph

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def last_editor_used(self) -> EditorSurfaceProtocol | None:
        if self._last_editor_ref is None:
            return None
        return self._last_editor_ref()

    @property
    def mode(self) -> Mode:
        """Current mode, derived from the host's active keymap."""
        if self.is_ergo_keys_keymap(self._registry.get_active()):
            return Mode.COMMAND
        return Mode.INSERT

    def is_ergo_keys_keymap(self, keymap: KeymapProtocol | None) -> bool:
        return self._graph.is_ergo_keys_keymap(keymap)

    # ─────────────────────────────────────────────────────────────────
    # Startup
    # ─────────────────────────────────────────────────────────────────

    def initialize(self) -> None:
        """Resolve both keymaps, persist them and layer the overlay.

        Raises:
            ConfigurationError: If no command-mode keymap can be resolved, or the
                host's active keymap is an ergo keymap and the default insert
                keymap does not exist.
        """
        # Parent links are lazy until a keymap is loaded; ancestry checks
        # below would see orphans otherwise.
        self._graph.force_load_all()

        self._insert_mode_keymap = self._resolve_insert_mode_keymap()
        self._store_property(INSERT_MODE_KEYMAP_KEY, self._insert_mode_keymap.name)

        self._command_mode_keymap = self._resolve_command_mode_keymap()
        self._store_property(COMMAND_MODE_KEYMAP_KEY, self._command_mode_keymap.name)

        self._overlay.apply_overlay(self._insert_mode_keymap)
        self._initialized = True
        logger.info(
            "Modal editing ready: insert=%r command=%r",
            self._insert_mode_keymap.name,
            self._command_mode_keymap.name,
        )

    def _lookup(self, name: str | None) -> KeymapProtocol | None:
        if name is None:
            return None
        try:
            return self._graph.by_name(name)
        except KeymapNotFoundError:
            logger.info("Remembered keymap %r no longer exists", name)
            return None

    def _resolve_insert_mode_keymap(self) -> KeymapProtocol:
        keymap = self._lookup(self._properties.get(INSERT_MODE_KEYMAP_KEY))
        if keymap is not None and self.is_ergo_keys_keymap(keymap):
            logger.warning("Remembered insert-mode keymap %r is an ergo keymap; ignoring it", keymap.name)
            keymap = None
        if keymap is not None:
            return keymap

        active = self._registry.get_active()
        if active is not None and not self.is_ergo_keys_keymap(active):
            return active

        fallback = self.settings.default_insert_keymap
        try:
            keymap = self._graph.by_name(fallback)
        except KeymapNotFoundError as exc:
            raise ConfigurationError(f"Default insert-mode keymap {fallback!r} not found") from exc
        if self.is_ergo_keys_keymap(keymap):
            raise ConfigurationError(f"Default insert-mode keymap {fallback!r} is an ergo keymap")
        return keymap

    def _resolve_command_mode_keymap(self) -> KeymapProtocol:
        keymap = self._lookup(self._properties.get(COMMAND_MODE_KEYMAP_KEY))
        if keymap is not None and not self.is_ergo_keys_keymap(keymap):
            logger.warning("Remembered command-mode keymap %r is not an ergo keymap; ignoring it", keymap.name)
            keymap = None
        if keymap is not None:
            return keymap

        fallback = self.settings.default_command_keymap
        try:
            keymap = self._graph.by_name(fallback)
        except KeymapNotFoundError as exc:
            raise ConfigurationError(f"Default command-mode keymap {fallback!r} not found") from exc
        if not self.is_ergo_keys_keymap(keymap):
            raise ConfigurationError(
                f"Default command-mode keymap {fallback!r} does not derive from {self._graph.root_name!r}"
            )
        return keymap

    # ─────────────────────────────────────────────────────────────────
    # Host events
    # ─────────────────────────────────────────────────────────────────

    def on_keymap_changed(self, keymap: KeymapProtocol | None) -> None:
        """Handle the host switching its active keymap."""
        if keymap is None:
            return
        logger.debug("Active keymap changed to %r", keymap.name)

        # Our own set_active calls land here too.
        if keymap is self._command_mode_keymap or keymap is self._insert_mode_keymap:
            return

        if self.is_ergo_keys_keymap(keymap):
            self._command_mode_keymap = keymap
            self._store_property(COMMAND_MODE_KEYMAP_KEY, keymap.name)
            return

        if self._insert_mode_keymap is not None:
            self._overlay.remove_overlay(self._insert_mode_keymap)
        self._insert_mode_keymap = keymap
        self._store_property(INSERT_MODE_KEYMAP_KEY, keymap.name)
        self._overlay.apply_overlay(keymap)
        self.activate_insert_mode(self.last_editor_used)

    def on_editor_focus_gained(self, editor: EditorSurfaceProtocol) -> None:
        self._last_editor_ref = weakref.ref(editor)
        if editor.virtual_file() is None:
            logger.debug("Focused editor has no file; staying in %s mode", self.mode.value)
            return
        self.activate_command_mode(editor)

    def on_editor_focus_lost(self, editor: EditorSurfaceProtocol) -> None:
        self.activate_insert_mode(editor)

    def on_before_intercepted_action(self, editor: EditorSurfaceProtocol | None) -> None:
        """Drop to insert mode before a host action that needs typed input."""
        self.activate_insert_mode(editor)

    # ─────────────────────────────────────────────────────────────────
    # Mode switching
    # ─────────────────────────────────────────────────────────────────

    def activate_command_mode(self, editor: EditorSurfaceProtocol | None) -> None:
        if self.settings.command_mode_toggle and self.mode is Mode.COMMAND:
            self.activate_insert_mode(editor)
            return
        logger.debug("Activating command mode")
        self._activate(Mode.COMMAND, self._command_mode_keymap, editor)

    def activate_insert_mode(self, editor: EditorSurfaceProtocol | None) -> None:
        logger.debug("Activating insert mode")
        self._activate(Mode.INSERT, self._insert_mode_keymap, editor)

    def toggle_mode(self, editor: EditorSurfaceProtocol | None) -> None:
        if self.mode is Mode.COMMAND:
            self.activate_insert_mode(editor)
        else:
            self.activate_command_mode(editor)

    def _activate(self, mode: Mode, keymap: KeymapProtocol | None, editor: EditorSurfaceProtocol | None) -> None:
        if editor is not None:
            editor.set_cursor_style(CURSOR_STYLES[mode])
        if keymap is None:
            logger.warning("Cannot enter %s mode before initialize()", mode.value)
            return
        self._registry.set_active(keymap)

    # ─────────────────────────────────────────────────────────────────
    # Persistence
    # ─────────────────────────────────────────────────────────────────

    def _store_property(self, key: str, value: str) -> None:
        try:
            self._properties.set(key, value)
        except OSError as exc:
            logger.warning("Could not persist %s=%r: %s", key, value, exc)
