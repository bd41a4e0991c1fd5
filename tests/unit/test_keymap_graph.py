"""Tests for ergo-family classification and registry queries."""

from __future__ import annotations

import pytest

from ergokeys.core import Keymap, KeymapGraph, KeymapNotFoundError, KeymapRegistry


def _names(keymaps) -> set[str]:
    return {keymap.name for keymap in keymaps}


class TestAncestry:
    def test_root_itself_is_ergo(self, registry):
        graph = KeymapGraph(registry)
        assert graph.is_ergo_keys_keymap(registry.get_by_name("$ergokeys"))

    def test_child_of_root_is_ergo(self, registry):
        graph = KeymapGraph(registry)
        assert graph.is_ergo_keys_keymap(registry.get_by_name("$ergokeys/MyLayout"))

    def test_root_name_is_case_insensitive(self):
        registry = KeymapRegistry([Keymap("$ErgoKeys"), Keymap("Mine", parent_name="$ErgoKeys")])
        graph = KeymapGraph(registry)
        graph.force_load_all()

        assert graph.is_ergo_keys_keymap(registry.get_by_name("Mine"))

    def test_plain_keymap_without_parent_is_not_ergo(self, registry):
        graph = KeymapGraph(registry)
        assert not graph.is_ergo_keys_keymap(registry.get_by_name("Default"))

    def test_plain_keymap_with_plain_parent_is_not_ergo(self, registry):
        graph = KeymapGraph(registry)
        assert not graph.is_ergo_keys_keymap(registry.get_by_name("Emacs"))

    def test_none_is_not_ergo(self, registry):
        assert not KeymapGraph(registry).is_ergo_keys_keymap(None)

    def test_unloaded_parent_chain_is_loaded_on_demand(self):
        registry = KeymapRegistry(
            [
                Keymap("$ergokeys"),
                Keymap("Base", parent_name="$ergokeys"),
                Keymap("Layout", parent_name="Base"),
            ]
        )
        graph = KeymapGraph(registry)
        layout = registry.get_by_name("Layout")

        assert graph.is_ergo_keys_keymap(layout)
        assert layout.is_loaded
        assert registry.get_by_name("Base").is_loaded

    def test_ancestry_contains_other_roots(self, registry):
        graph = KeymapGraph(registry)
        assert graph.ancestry_contains(registry.get_by_name("Emacs"), "default")
        assert not graph.ancestry_contains(registry.get_by_name("Emacs"), "$ergokeys")

    def test_cyclic_chain_terminates(self, caplog):
        registry = KeymapRegistry([Keymap("a", parent_name="b"), Keymap("b", parent_name="a")])
        graph = KeymapGraph(registry)
        graph.force_load_all()

        assert not graph.is_ergo_keys_keymap(registry.get_by_name("a"))
        assert "cyclic or too deep" in caplog.text

    def test_cycle_above_the_root_still_finds_root(self):
        registry = KeymapRegistry(
            [Keymap("$ergokeys", parent_name="x"), Keymap("x", parent_name="$ergokeys")]
        )
        graph = KeymapGraph(registry)
        graph.force_load_all()

        assert graph.is_ergo_keys_keymap(registry.get_by_name("x"))

    def test_depth_cap(self):
        keymaps = [Keymap("k0", parent_name="$ergokeys"), Keymap("$ergokeys")]
        keymaps += [Keymap(f"k{i}", parent_name=f"k{i - 1}") for i in range(1, 10)]
        registry = KeymapRegistry(keymaps)
        graph = KeymapGraph(registry, max_depth=5)
        graph.force_load_all()

        assert graph.is_ergo_keys_keymap(registry.get_by_name("k3"))
        assert not graph.is_ergo_keys_keymap(registry.get_by_name("k9"))


class TestQueries:
    def test_by_name(self, registry):
        graph = KeymapGraph(registry)
        assert graph.by_name("Default") is registry.get_by_name("Default")

    def test_by_name_missing(self, registry):
        with pytest.raises(KeymapNotFoundError) as excinfo:
            KeymapGraph(registry).by_name("Vim")
        assert excinfo.value.name == "Vim"

    def test_ergo_family_members(self, registry):
        members = KeymapGraph(registry).ergo_family_members()
        assert _names(members) == {"$ergokeys", "$ergokeys/MyLayout", "ErgoKeys (QWERTY)"}

    def test_queries_see_later_additions(self, registry):
        graph = KeymapGraph(registry)
        before = graph.ergo_family_members()

        registry.add(Keymap("ErgoKeys (Dvorak)", parent_name="$ergokeys"))

        assert len(graph.ergo_family_members()) == len(before) + 1
