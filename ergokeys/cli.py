#!/usr/bin/env python3
"""ergokeys - modal editing with layered keymaps."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import KEYMAPS_DIR
from .core import (
    COMMAND_MODE_KEYMAP_KEY,
    INSERT_MODE_KEYMAP_KEY,
    KeymapGraph,
    KeymapManager,
    KeymapRegistry,
    create_default_registry,
)
from .logger import configure_logging
from .stores import PersistentProperties, SettingsStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ergokeys",
        description="Modal (insert/command) editing driven by layered keymaps",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--toggle",
        action="store_true",
        help="Activating command mode while in command mode returns to insert mode",
    )
    parser.add_argument(
        "--settings",
        metavar="PATH",
        type=Path,
        help="Settings file to use instead of the default one",
    )
    parser.add_argument(
        "--keymaps-dir",
        metavar="DIR",
        type=Path,
        help=f"Directory with user keymap files (default: {KEYMAPS_DIR})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    edit_parser = subparsers.add_parser("edit", help="Open the editor (default)")
    edit_parser.add_argument("file", nargs="?", type=Path, help="File to edit")

    subparsers.add_parser("keymaps", help="List known keymaps")
    subparsers.add_parser("state", help="Show the remembered insert/command keymaps")
    subparsers.add_parser("reset", help="Forget the remembered insert/command keymaps")

    return parser


def _load_registry(keymaps_dir: Path | None) -> KeymapRegistry:
    registry = create_default_registry()
    KeymapManager(registry, keymaps_dir).load_all()
    KeymapGraph(registry).force_load_all()
    return registry


def cmd_keymaps(args: argparse.Namespace) -> int:
    registry = _load_registry(args.keymaps_dir)
    graph = KeymapGraph(registry)
    for keymap in sorted(graph.all_keymaps(), key=lambda k: k.name.casefold()):
        family = "ergo" if graph.is_ergo_keys_keymap(keymap) else "base"
        parent = keymap.parent_name or "-"
        print(f"{keymap.name:<24} {family:<5} parent={parent}")
    return 0


def cmd_state(args: argparse.Namespace) -> int:
    properties = PersistentProperties(SettingsStore(args.settings))
    print(f"insert:  {properties.get(INSERT_MODE_KEYMAP_KEY) or '(not set)'}")
    print(f"command: {properties.get(COMMAND_MODE_KEYMAP_KEY) or '(not set)'}")
    return 0


def cmd_reset(args: argparse.Namespace) -> int:
    properties = PersistentProperties(SettingsStore(args.settings))
    try:
        properties.unset(INSERT_MODE_KEYMAP_KEY)
        properties.unset(COMMAND_MODE_KEYMAP_KEY)
    except OSError as exc:
        print(f"Error: could not update settings: {exc}", file=sys.stderr)
        return 1
    print("Remembered keymaps cleared.")
    return 0


def cmd_edit(args: argparse.Namespace) -> int:
    from .ui import ErgoKeysApp

    configure_logging(debug=args.debug, textual=True)
    app = ErgoKeysApp(
        file_path=getattr(args, "file", None),
        settings_store=SettingsStore(args.settings),
        keymaps_dir=args.keymaps_dir,
        command_mode_toggle=args.toggle,
    )
    app.run()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in (None, "edit"):
        return cmd_edit(args)

    configure_logging(debug=args.debug)
    commands = {
        "keymaps": cmd_keymaps,
        "state": cmd_state,
        "reset": cmd_reset,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
