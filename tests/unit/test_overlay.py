"""Tests for layering ergo-family bindings onto a base keymap."""

from __future__ import annotations

from ergokeys.core import KeyboardShortcut, Keymap, KeymapGraph, OverlayEngine


def _engine(registry) -> OverlayEngine:
    return OverlayEngine(KeymapGraph(registry))


class TestOverlay:
    def test_save_scenario(self, registry):
        default = registry.get_by_name("Default")
        engine = _engine(registry)

        engine.apply_overlay(default)
        assert default.shortcuts_for("Save") == {
            KeyboardShortcut("ctrl+s"),
            KeyboardShortcut("ctrl+shift+s"),
        }

        engine.remove_overlay(default)
        assert default.shortcuts_for("Save") == {KeyboardShortcut("ctrl+s")}

    def test_apply_is_idempotent(self, registry):
        default = registry.get_by_name("Default")
        engine = _engine(registry)

        engine.apply_overlay(default)
        once = default.bindings()
        added = engine.apply_overlay(default)

        assert added == 0
        assert default.bindings() == once

    def test_remove_restores_exact_bindings(self, registry):
        emacs = registry.get_by_name("Emacs")
        before = emacs.bindings()
        engine = _engine(registry)

        engine.apply_overlay(emacs)
        engine.apply_overlay(emacs)
        engine.remove_overlay(emacs)

        assert emacs.bindings() == before

    def test_union_of_all_ergo_keymaps(self, registry):
        registry.add(Keymap("ErgoKeys (Colemak)", parent_name="$ergokeys", bindings={"editor.cursor_left": ["n"]}))
        registry.get_by_name("ErgoKeys (Colemak)").force_load()
        default = registry.get_by_name("Default")

        _engine(registry).apply_overlay(default)

        assert default.shortcuts_for("editor.cursor_left") == {KeyboardShortcut("j"), KeyboardShortcut("n")}
        assert default.shortcuts_for("ergokeys.insert_mode") == {KeyboardShortcut("f")}

    def test_ergo_keymaps_are_left_alone(self, registry):
        layout = registry.get_by_name("$ergokeys/MyLayout")
        before = layout.bindings()
        engine = _engine(registry)

        engine.apply_overlay(registry.get_by_name("Default"))
        engine.remove_overlay(registry.get_by_name("Default"))

        assert layout.bindings() == before

    def test_remove_without_apply_keeps_unrelated_bindings(self, registry):
        default = registry.get_by_name("Default")

        removed = _engine(registry).remove_overlay(default)

        assert removed == 0
        assert default.shortcuts_for("Save") == {KeyboardShortcut("ctrl+s")}

    def test_remove_keeps_bindings_the_target_already_had(self, registry):
        default = registry.get_by_name("Default")
        default.add_shortcut("editor.cursor_left", "j")
        before = default.bindings()
        engine = _engine(registry)

        engine.apply_overlay(default)
        assert ("editor.cursor_left", KeyboardShortcut("j")) not in engine.added_bindings(default)
        engine.remove_overlay(default)

        assert default.bindings() == before

    def test_fully_overlapping_target_is_restored(self, registry):
        default = registry.get_by_name("Default")
        for action_id, shortcut in [
            ("Save", "ctrl+shift+s"),
            ("editor.cursor_left", "j"),
            ("ergokeys.insert_mode", "f"),
        ]:
            default.add_shortcut(action_id, shortcut)
        before = default.bindings()
        engine = _engine(registry)

        assert engine.apply_overlay(default) == 0
        assert engine.remove_overlay(default) == 0

        assert default.bindings() == before

    def test_added_bindings_are_forgotten_after_remove(self, registry):
        default = registry.get_by_name("Default")
        engine = _engine(registry)

        engine.apply_overlay(default)
        assert ("Save", KeyboardShortcut("ctrl+shift+s")) in engine.added_bindings(default)

        engine.remove_overlay(default)
        assert engine.added_bindings(default) == frozenset()
