"""Keymap registries used across tests."""

from __future__ import annotations

import pytest

from ergokeys.core import Keymap, KeymapRegistry


def make_scenario_registry(active: str = "Default") -> KeymapRegistry:
    """Base keymaps plus a small ergo family.

    Default:            Save -> ctrl+s
    $ergokeys:          ergokeys.insert_mode -> f
    $ergokeys/MyLayout: Save -> ctrl+shift+s
    ErgoKeys (QWERTY):  editor.cursor_left -> j
    """
    registry = KeymapRegistry(
        [
            Keymap("Default", bindings={"Save": ["ctrl+s"]}),
            Keymap("Emacs", parent_name="Default", bindings={"Save": ["ctrl+x ctrl+s"]}),
            Keymap("$ergokeys", bindings={"ergokeys.insert_mode": ["f"]}),
            Keymap("$ergokeys/MyLayout", parent_name="$ergokeys", bindings={"Save": ["ctrl+shift+s"]}),
            Keymap("ErgoKeys (QWERTY)", parent_name="$ergokeys", bindings={"editor.cursor_left": ["j"]}),
        ],
        active=active,
    )
    for keymap in registry.list_all():
        keymap.force_load()
    return registry


@pytest.fixture
def registry() -> KeymapRegistry:
    return make_scenario_registry()
