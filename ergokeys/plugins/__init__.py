"""Plugin system for ergokeys.

The TUI itself is only an editor shell. Behaviour such as modal editing lives
in plugins that register hooks with the app.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..ui.app import ErgoKeysApp
    from ..ui.widgets import ModalTextArea


class Plugin(ABC):
    """Base class for ergokeys plugins.

    Plugins:
    - Register themselves with the app at startup
    - Can intercept key presses in editors
    - Are told when an editor gains or loses focus
    - Can persist settings
    """

    name: str = "unnamed"  # Unique plugin identifier

    @abstractmethod
    def register(self, app: "ErgoKeysApp") -> None:
        """Called when the app mounts. Set up the plugin here.

        Args:
            app: The main application instance
        """
        pass

    def on_key(self, app: "ErgoKeysApp", editor: "ModalTextArea", key: str, character: str | None) -> bool:
        """Handle a key pressed in an editor.

        Args:
            app: The main application instance
            editor: The editor that has focus
            key: Textual key name (e.g. "ctrl+s", "j", "escape")
            character: The printable character, if any

        Returns:
            True if the key was consumed, False to let it propagate
        """
        return False

    def on_editor_focus_gained(self, app: "ErgoKeysApp", editor: "ModalTextArea") -> None:
        """Called when an editor receives focus."""
        pass

    def on_editor_focus_lost(self, app: "ErgoKeysApp", editor: "ModalTextArea") -> None:
        """Called when an editor loses focus."""
        pass

    def get_settings_defaults(self) -> dict[str, Any]:
        """Return default settings for this plugin.

        Returns:
            Dictionary of setting_name -> default_value
        """
        return {}

    def on_settings_load(self, app: "ErgoKeysApp", settings: dict[str, Any]) -> None:
        """Called when settings are loaded, before ``register``.

        Args:
            app: The main application instance
            settings: The loaded settings dictionary
        """
        pass

    def on_settings_save(self, app: "ErgoKeysApp", settings: dict[str, Any]) -> None:
        """Called before settings are saved. Modify settings dict to persist plugin state.

        Args:
            app: The main application instance
            settings: The settings dictionary to be saved
        """
        pass


# Plugin registry
_plugins: list[type[Plugin]] = []


def register_plugin(plugin_cls: type[Plugin]) -> type[Plugin]:
    """Decorator to register a plugin class.

    Usage:
        @register_plugin
        class MyPlugin(Plugin):
            ...
    """
    if plugin_cls not in _plugins:
        _plugins.append(plugin_cls)
    return plugin_cls


def discover_plugins() -> list[type[Plugin]]:
    """Discover and return all registered plugin classes.

    This imports plugin modules which triggers their registration.

    Returns:
        List of plugin classes
    """
    from . import modal_editing  # noqa: F401

    return _plugins.copy()


def get_registered_plugins() -> list[type[Plugin]]:
    """Get already registered plugins without triggering discovery.

    Returns:
        List of registered plugin classes
    """
    return _plugins.copy()
