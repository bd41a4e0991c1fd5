"""Textual editor hosting ergokeys modal editing."""

from __future__ import annotations

import logging
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..config import KEYMAPS_DIR
from ..core import Keymap, KeymapGraph, KeymapRegistry, Mode, ModeController, create_default_registry
from ..core.mode import CURSOR_STYLES
from ..core.protocols import SettingsStoreProtocol
from ..plugins import Plugin, discover_plugins
from ..stores import SettingsStore
from .widgets import ModalTextArea, ModeStatusBar

logger = logging.getLogger(__name__)


class ErgoKeysApp(App):
    """Editor with a file-backed area and a scratch area.

    The app plays the host: it owns the keymap registry, lets the user switch
    keymaps (F3/F4) and forwards focus and key events to plugins.
    """

    TITLE = "ergokeys"
    # Plugins register in on_mount; the first editor is focused after that.
    AUTO_FOCUS = None

    CSS = """
    ModalTextArea {
        height: 1fr;
        border: round $primary-darken-2;
    }

    ModalTextArea:focus {
        border: round $primary;
    }

    #scratch-editor {
        height: 8;
    }
    """

    BINDINGS = [
        Binding("f3", "cycle_base_keymap", "Base keymap", priority=True),
        Binding("f4", "cycle_command_keymap", "Ergo keymap", priority=True),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        file_path: Path | None = None,
        settings_store: SettingsStoreProtocol | None = None,
        keymap_registry: KeymapRegistry | None = None,
        keymaps_dir: Path | None = None,
        command_mode_toggle: bool = False,
    ) -> None:
        super().__init__()
        self.file_path = file_path
        self.settings_store = settings_store or SettingsStore()
        self.keymap_registry = keymap_registry or create_default_registry()
        self.keymaps_dir = keymaps_dir or KEYMAPS_DIR
        self.command_mode_toggle = command_mode_toggle
        self.plugins: list[Plugin] = [plugin_cls() for plugin_cls in discover_plugins()]

    def compose(self) -> ComposeResult:
        yield Header()
        if self.file_path is not None:
            text = ""
            if self.file_path.exists():
                text = self.file_path.read_text(encoding="utf-8")
            yield ModalTextArea(text, file_path=self.file_path, id="file-editor")
        yield ModalTextArea("", id="scratch-editor")
        yield ModeStatusBar(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        settings = self.settings_store.load_all()
        for plugin in self.plugins:
            for key, value in plugin.get_settings_defaults().items():
                settings.setdefault(key, value)
            plugin.on_settings_load(self, settings)
        for plugin in self.plugins:
            plugin.register(self)

        self.keymap_registry.add_listener(self._on_active_keymap_changed)
        self._update_status_bar()
        self.query(ModalTextArea).first().focus()

    def on_unmount(self) -> None:
        settings = self.settings_store.load_all()
        for plugin in self.plugins:
            plugin.on_settings_save(self, settings)
        try:
            self.settings_store.save_all(settings)
        except OSError as exc:
            logger.warning("Could not save settings: %s", exc)

    # ─────────────────────────────────────────────────────────────────
    # Plugin routing
    # ─────────────────────────────────────────────────────────────────

    def handle_editor_key(self, editor: ModalTextArea, key: str, character: str | None) -> bool:
        """Give plugins a chance to consume a key pressed in an editor."""
        for plugin in self.plugins:
            if plugin.on_key(self, editor, key, character):
                return True
        return False

    def on_modal_text_area_focus_gained(self, message: ModalTextArea.FocusGained) -> None:
        for plugin in self.plugins:
            plugin.on_editor_focus_gained(self, message.editor)

    def on_modal_text_area_focus_lost(self, message: ModalTextArea.FocusLost) -> None:
        for plugin in self.plugins:
            plugin.on_editor_focus_lost(self, message.editor)

    # ─────────────────────────────────────────────────────────────────
    # Status
    # ─────────────────────────────────────────────────────────────────

    def mode_controller(self) -> ModeController | None:
        """The controller of the first plugin that has a running one."""
        for plugin in self.plugins:
            controller = getattr(plugin, "controller", None)
            if isinstance(controller, ModeController):
                return controller
        return None

    @property
    def editing_mode(self) -> Mode:
        controller = self.mode_controller()
        if controller is not None:
            return controller.mode
        graph = KeymapGraph(self.keymap_registry)
        if graph.is_ergo_keys_keymap(self.keymap_registry.get_active()):
            return Mode.COMMAND
        return Mode.INSERT

    def _on_active_keymap_changed(self, keymap: Keymap | None) -> None:
        # Keymap switches that bypass the controller must still update the cursor
        editor = self.focused
        if isinstance(editor, ModalTextArea) and self.mode_controller() is not None:
            style = CURSOR_STYLES[self.editing_mode]
            if editor.cursor_style is not style:
                editor.set_cursor_style(style)
        self._update_status_bar()

    def _update_status_bar(self, message: str = "") -> None:
        active = self.keymap_registry.get_active()
        status = self.query_one("#status-bar", ModeStatusBar)
        status.show_state(self.editing_mode, active.name if active is not None else None, message)

    # ─────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────

    def action_save(self) -> None:
        """Write the file editor back to disk."""
        if self.file_path is None:
            self.notify("Scratch buffer has no file", severity="warning")
            return
        editor = self.query_one("#file-editor", ModalTextArea)
        try:
            self.file_path.write_text(editor.text, encoding="utf-8")
        except OSError as exc:
            self.notify(f"Save failed: {exc}", severity="error")
            return
        self._update_status_bar(f"saved {self.file_path.name}")

    def action_cycle_base_keymap(self) -> None:
        graph = KeymapGraph(self.keymap_registry)
        self._activate_next([k for k in graph.all_keymaps() if not graph.is_ergo_keys_keymap(k)])

    def action_cycle_command_keymap(self) -> None:
        graph = KeymapGraph(self.keymap_registry)
        # The root only collects shared bindings; it is not a layout.
        layouts = [k for k in graph.ergo_family_members() if k.name.casefold() != graph.root_name.casefold()]
        self._activate_next(layouts)

    def _activate_next(self, candidates: list) -> None:
        if not candidates:
            return
        active = self.keymap_registry.get_active()
        index = candidates.index(active) if active in candidates else -1
        keymap = candidates[(index + 1) % len(candidates)]
        self.keymap_registry.set_active(keymap)
        self.notify(f"Keymap: {keymap.name}")
