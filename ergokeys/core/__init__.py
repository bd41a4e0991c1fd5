"""Core, UI-agnostic modal editing for ergokeys."""

from .controller import COMMAND_MODE_KEYMAP_KEY, INSERT_MODE_KEYMAP_KEY, ModeController
from .defaults import create_default_keymaps, create_default_registry
from .exceptions import ConfigurationError, ErgoKeysError, KeymapFileError, KeymapNotFoundError
from .keymap import MAX_ANCESTRY_DEPTH, Keymap, KeymapRegistry
from .keymap_graph import ROOT_KEYMAP_NAME, KeymapGraph
from .keymap_manager import KeymapManager
from .mode import CursorStyle, Mode
from .overlay import OverlayEngine
from .shortcuts import KeyboardShortcut, extend_shortcuts, purge_shortcuts

__all__ = [
    "COMMAND_MODE_KEYMAP_KEY",
    "ConfigurationError",
    "CursorStyle",
    "ErgoKeysError",
    "INSERT_MODE_KEYMAP_KEY",
    "KeyboardShortcut",
    "Keymap",
    "KeymapFileError",
    "KeymapGraph",
    "KeymapManager",
    "KeymapNotFoundError",
    "KeymapRegistry",
    "MAX_ANCESTRY_DEPTH",
    "Mode",
    "ModeController",
    "OverlayEngine",
    "ROOT_KEYMAP_NAME",
    "create_default_keymaps",
    "create_default_registry",
    "extend_shortcuts",
    "purge_shortcuts",
]
