"""Tests for the KeymapManager."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ergokeys.core import KeyboardShortcut, KeymapGraph, KeymapManager, create_default_registry


def _write_keymap(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def default_registry():
    return create_default_registry()


class TestKeymapManager:
    """Test the KeymapManager class."""

    def test_load_all_with_missing_directory(self, tmp_path: Path, default_registry):
        """Should do nothing when the keymaps directory does not exist."""
        manager = KeymapManager(default_registry, tmp_path / "nope")

        assert manager.load_all() == []
        assert manager.get_loaded_keymaps() == {}

    def test_load_keymap_from_file(self, tmp_path: Path, default_registry):
        """Should register a keymap from a nested JSON file."""
        keymap_file = _write_keymap(
            tmp_path / "dvorak.json",
            {
                "keymap": {
                    "name": "ErgoKeys (Dvorak)",
                    "parent": "$ergokeys",
                    "actions": {
                        "editor.cursor_up": ["c"],
                        "editor.cursor_down": "t",
                    },
                }
            },
        )
        manager = KeymapManager(default_registry, tmp_path)

        keymap = manager.load_keymap(keymap_file)

        assert keymap is not None
        assert default_registry.get_by_name("ErgoKeys (Dvorak)") is keymap
        assert keymap.parent_name == "$ergokeys"
        assert keymap.shortcuts_for("editor.cursor_down") == {KeyboardShortcut("t")}
        assert manager.get_loaded_keymaps() == {"ErgoKeys (Dvorak)": keymap_file.resolve()}

    def test_loaded_keymap_joins_the_ergo_family(self, tmp_path: Path, default_registry):
        """A file keymap deriving from the root is an ergo keymap once loaded."""
        _write_keymap(tmp_path / "dvorak.json", {"name": "ErgoKeys (Dvorak)", "parent": "$ergokeys", "actions": {}})
        KeymapManager(default_registry, tmp_path).load_all()
        graph = KeymapGraph(default_registry)

        graph.force_load_all()

        assert graph.is_ergo_keys_keymap(graph.by_name("ErgoKeys (Dvorak)"))

    def test_flat_format_and_name_from_file_stem(self, tmp_path: Path, default_registry):
        """The "keymap" wrapper and the name are optional."""
        _write_keymap(tmp_path / "vim-ish.json", {"parent": "$default", "actions": {"file.save": ["ctrl+w"]}})
        manager = KeymapManager(default_registry, tmp_path)

        keymap = manager.load_keymap("vim-ish")

        assert keymap is not None
        assert keymap.name == "vim-ish"
        assert keymap.shortcuts_for("file.save") == {KeyboardShortcut("ctrl+w")}

    def test_bindings_are_loaded_lazily(self, tmp_path: Path, default_registry):
        """Bindings are parsed up front but only materialized on first use."""
        _write_keymap(tmp_path / "lazy.json", {"actions": {"file.save": ["ctrl+w"]}})

        keymap = KeymapManager(default_registry, tmp_path).load_keymap("lazy")

        assert keymap is not None
        assert not keymap.is_loaded
        keymap.force_load()
        assert keymap.is_loaded
        assert keymap.action_ids() == ["file.save"]

    def test_load_all_in_name_order(self, tmp_path: Path, default_registry):
        """Every JSON file in the directory is registered."""
        _write_keymap(tmp_path / "b.json", {"actions": {}})
        _write_keymap(tmp_path / "a.json", {"actions": {}})
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
        manager = KeymapManager(default_registry, tmp_path)

        loaded = manager.load_all()

        assert [k.name for k in loaded] == ["a", "b"]

    def test_load_keymap_with_invalid_json(self, tmp_path: Path, default_registry, caplog):
        """Should handle invalid JSON gracefully."""
        (tmp_path / "invalid.json").write_text("not valid json", encoding="utf-8")
        manager = KeymapManager(default_registry, tmp_path)

        assert manager.load_keymap("invalid") is None

        assert "Failed to load keymap" in caplog.text
        assert "invalid" not in default_registry

    def test_load_keymap_with_missing_file(self, tmp_path: Path, default_registry, caplog):
        """Should handle missing file gracefully."""
        manager = KeymapManager(default_registry, tmp_path)

        assert manager.load_keymap(tmp_path / "nonexistent.json") is None

        assert "Keymap file not found" in caplog.text

    @pytest.mark.parametrize(
        "data, message",
        [
            ([1, 2], "must contain a JSON object"),
            ({"keymap": []}, '"keymap" must be a JSON object'),
            ({"name": ""}, '"name" must be a non-empty string'),
            ({"parent": 3}, '"parent" must be a string'),
            ({"actions": []}, '"actions" must be an object'),
            ({"actions": {"file.save": 5}}, "must be a list of strings"),
            ({"actions": {"file.save": ["hyper+s"]}}, 'Bad shortcut for "file.save"'),
            ({"actions": {"file.save": ["a b c"]}}, 'Bad shortcut for "file.save"'),
        ],
    )
    def test_malformed_files_are_skipped(self, tmp_path: Path, default_registry, caplog, data, message):
        """Malformed keymap files are logged and not registered."""
        _write_keymap(tmp_path / "broken.json", data)
        manager = KeymapManager(default_registry, tmp_path)
        count = len(default_registry)

        assert manager.load_all() == []

        assert message in caplog.text
        assert len(default_registry) == count

    def test_name_clash_is_skipped(self, tmp_path: Path, default_registry, caplog):
        """A file may not replace a built-in keymap."""
        _write_keymap(tmp_path / "clash.json", {"name": "$default", "actions": {"file.save": ["ctrl+w"]}})
        manager = KeymapManager(default_registry, tmp_path)

        assert manager.load_keymap("clash") is None

        assert "clashes with an existing keymap" in caplog.text
        assert KeyboardShortcut("ctrl+w") not in default_registry.get_by_name("$default").shortcuts_for("file.save")

    def test_resolve_keymap_path(self, tmp_path: Path, default_registry):
        """Bare names resolve inside the keymaps directory; paths are kept."""
        manager = KeymapManager(default_registry, tmp_path)

        assert manager._resolve_keymap_path("colemak") == tmp_path / "colemak.json"
        assert manager._resolve_keymap_path("colemak.json") == tmp_path / "colemak.json"
        assert manager._resolve_keymap_path(str(tmp_path / "x.json")) == tmp_path / "x.json"
        assert manager._resolve_keymap_path("~/x.json") == Path("~/x.json").expanduser()
