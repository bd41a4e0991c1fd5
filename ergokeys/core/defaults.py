"""Keymaps shipped with ergokeys.

``$default`` and ``Emacs`` are plain base keymaps. ``$ergokeys`` is the root
of the ergo family; the layout keymaps derive from it and put cursor
movement on the home row.
"""

from __future__ import annotations

from .keymap import Keymap, KeymapRegistry
from .keymap_graph import ROOT_KEYMAP_NAME

BASE_KEYMAP = "$default"

BASE_BINDINGS: dict[str, list[str]] = {
    "file.save": ["ctrl+s"],
    "search.everywhere": ["f1"],
    "ergokeys.command_mode": ["escape"],
}

EMACS_BINDINGS: dict[str, list[str]] = {
    "editor.cursor_left": ["ctrl+b"],
    "editor.cursor_right": ["ctrl+f"],
    "editor.cursor_line_start": ["ctrl+a"],
    "editor.cursor_line_end": ["ctrl+e"],
}

ROOT_BINDINGS: dict[str, list[str]] = {
    "ergokeys.insert_mode": ["f"],
}

QWERTY_BINDINGS: dict[str, list[str]] = {
    "editor.cursor_up": ["i"],
    "editor.cursor_down": ["k"],
    "editor.cursor_left": ["j"],
    "editor.cursor_right": ["l"],
    "editor.cursor_word_left": ["u"],
    "editor.cursor_word_right": ["o"],
    "editor.cursor_line_start": ["h"],
    "editor.cursor_line_end": ["semicolon"],
    "search.everywhere": ["n"],
}

COLEMAK_BINDINGS: dict[str, list[str]] = {
    "editor.cursor_up": ["u"],
    "editor.cursor_down": ["e"],
    "editor.cursor_left": ["n"],
    "editor.cursor_right": ["i"],
    "editor.cursor_word_left": ["l"],
    "editor.cursor_word_right": ["y"],
    "editor.cursor_line_start": ["h"],
    "editor.cursor_line_end": ["o"],
    "search.everywhere": ["k"],
}


def create_default_keymaps() -> list[Keymap]:
    return [
        Keymap(BASE_KEYMAP, bindings=BASE_BINDINGS),
        Keymap("Emacs", parent_name=BASE_KEYMAP, bindings=EMACS_BINDINGS),
        Keymap(ROOT_KEYMAP_NAME, bindings=ROOT_BINDINGS),
        Keymap("ErgoKeys (QWERTY)", parent_name=ROOT_KEYMAP_NAME, bindings=QWERTY_BINDINGS),
        Keymap("ErgoKeys (Colemak)", parent_name=ROOT_KEYMAP_NAME, bindings=COLEMAK_BINDINGS),
    ]


def create_default_registry(active_name: str = BASE_KEYMAP) -> KeymapRegistry:
    """Registry holding the shipped keymaps with ``active_name`` active."""
    return KeymapRegistry(create_default_keymaps(), active=active_name)
