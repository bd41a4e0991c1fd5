"""Modal editing plugin.

Connects a ``ModeController`` to the Textual app: the app's keymap registry
notifies the controller about keymap switches, editor focus changes drive
the mode, and key presses are resolved through the active keymap.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...config import ErgoKeysSettings
from ...core import (
    ConfigurationError,
    KeyboardShortcut,
    KeymapManager,
    Mode,
    ModeController,
)
from ...core.shortcuts import normalize_stroke
from ...stores import PersistentProperties
from .. import Plugin

if TYPE_CHECKING:
    from ...core import Keymap
    from ...ui.app import ErgoKeysApp
    from ...ui.widgets import ModalTextArea

logger = logging.getLogger(__name__)

MODE_ACTIONS = {
    "ergokeys.command_mode": "activate_command_mode",
    "ergokeys.insert_mode": "activate_insert_mode",
    "ergokeys.toggle_mode": "toggle_mode",
}

EDITOR_ACTIONS = {
    "editor.cursor_up": "action_cursor_up",
    "editor.cursor_down": "action_cursor_down",
    "editor.cursor_left": "action_cursor_left",
    "editor.cursor_right": "action_cursor_right",
    "editor.cursor_word_left": "action_cursor_word_left",
    "editor.cursor_word_right": "action_cursor_word_right",
    "editor.cursor_line_start": "action_cursor_line_start",
    "editor.cursor_line_end": "action_cursor_line_end",
}

APP_ACTIONS = {
    "file.save": "action_save",
    "search.everywhere": "action_command_palette",
    "find.in_path": "action_command_palette",
}


class ModalEditingPlugin(Plugin):
    """Plugin providing insert/command modal editing.

    Features:
    - Command mode when a file editor gains focus, insert mode when it loses it
    - Key presses resolved through the active keymap
    - Ergo-family bindings layered onto the insert-mode keymap
    - Insert mode forced before search/rename style actions
    """

    name = "modal_editing"

    def __init__(self) -> None:
        self.enabled: bool = True
        self.settings = ErgoKeysSettings()
        self.controller: ModeController | None = None
        self._pending_stroke: str | None = None

    def register(self, app: "ErgoKeysApp") -> None:
        """Load user keymaps and start the mode controller."""
        registry = app.keymap_registry
        KeymapManager(registry, app.keymaps_dir).load_all()

        controller = ModeController(registry, PersistentProperties(app.settings_store), self.settings)
        try:
            controller.initialize()
        except ConfigurationError as exc:
            logger.error("Modal editing disabled: %s", exc)
            app.notify(f"Modal editing disabled: {exc}", severity="error")
            self.enabled = False
            return

        registry.add_listener(controller.on_keymap_changed)
        self.controller = controller

    # ─────────────────────────────────────────────────────────────────
    # Keys
    # ─────────────────────────────────────────────────────────────────

    def on_key(self, app: "ErgoKeysApp", editor: "ModalTextArea", key: str, character: str | None) -> bool:
        """Resolve a key press through the active keymap.

        Returns True if the key was consumed.
        """
        controller = self.controller
        if not self.enabled or controller is None:
            return False

        types_text = self._types_text(key, character)
        # Letters bound by the overlay must still type in insert mode
        if controller.mode is Mode.INSERT and types_text:
            self._pending_stroke = None
            return False

        try:
            stroke = normalize_stroke(key)
        except ValueError:
            return False

        if self._pending_stroke is not None:
            shortcut = KeyboardShortcut(self._pending_stroke, stroke)
            self._pending_stroke = None
        else:
            shortcut = KeyboardShortcut(stroke)

        active = app.keymap_registry.get_active()
        for action_id in self._find_actions(controller, active, shortcut, types_text):
            if self.run_action(app, editor, action_id):
                return True

        if shortcut.second is None and active is not None and active.has_prefix(stroke):
            self._pending_stroke = stroke
            return True
        return False

    def _types_text(self, key: str, character: str | None) -> bool:
        if character is None or len(character) != 1 or not character.isprintable():
            return False
        return not key.startswith(("ctrl+", "alt+", "meta+", "super+"))

    def _find_actions(
        self,
        controller: ModeController,
        active: "Keymap | None",
        shortcut: KeyboardShortcut,
        types_text: bool,
    ) -> list[str]:
        actions = active.find_actions(shortcut) if active is not None else []
        # Modifier shortcuts of the base keymap keep working in command mode
        if not actions and not types_text and controller.mode is Mode.COMMAND:
            base = controller.insert_mode_keymap
            if base is not None:
                actions = base.find_actions(shortcut)
        return actions

    # ─────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────

    def run_action(self, app: "ErgoKeysApp", editor: "ModalTextArea | None", action_id: str) -> bool:
        """Run a keymap action. Returns False if the action is unknown here."""
        controller = self.controller
        if controller is None:
            return False

        if action_id in self.settings.intercepted_actions:
            controller.on_before_intercepted_action(editor)

        if action_id in MODE_ACTIONS:
            getattr(controller, MODE_ACTIONS[action_id])(editor)
            return True

        if action_id in EDITOR_ACTIONS:
            if editor is None:
                return False
            getattr(editor, EDITOR_ACTIONS[action_id])()
            return True

        handler = getattr(app, APP_ACTIONS.get(action_id, ""), None)
        if handler is None:
            logger.debug("No handler for action %r", action_id)
            return False
        handler()
        return True

    # ─────────────────────────────────────────────────────────────────
    # Focus
    # ─────────────────────────────────────────────────────────────────

    def on_editor_focus_gained(self, app: "ErgoKeysApp", editor: "ModalTextArea") -> None:
        if self.enabled and self.controller is not None:
            self.controller.on_editor_focus_gained(editor)

    def on_editor_focus_lost(self, app: "ErgoKeysApp", editor: "ModalTextArea") -> None:
        if self.enabled and self.controller is not None:
            self.controller.on_editor_focus_lost(editor)

    # ─────────────────────────────────────────────────────────────────
    # Settings
    # ─────────────────────────────────────────────────────────────────

    def get_settings_defaults(self) -> dict[str, Any]:
        return ErgoKeysSettings().to_settings()

    def on_settings_load(self, app: "ErgoKeysApp", settings: dict[str, Any]) -> None:
        self.settings = ErgoKeysSettings.from_settings(settings)
        if app.command_mode_toggle:
            self.settings.command_mode_toggle = True

    def on_settings_save(self, app: "ErgoKeysApp", settings: dict[str, Any]) -> None:
        settings.update(self.settings.to_settings())
