"""Layering ergo-family shortcuts onto a base keymap and taking them off again."""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING

from .shortcuts import KeyboardShortcut, extend_shortcuts, purge_shortcuts

if TYPE_CHECKING:
    from .keymap_graph import KeymapGraph
    from .protocols import KeymapProtocol

logger = logging.getLogger(__name__)

Binding = tuple[str, KeyboardShortcut]


def _binding_pairs(keymap: KeymapProtocol) -> set[Binding]:
    return {
        (action_id, shortcut)
        for action_id in keymap.action_ids()
        for shortcut in keymap.shortcuts_for(action_id)
    }


class OverlayEngine:
    """Applies the union of all ergo-family bindings to a target keymap.

    Bindings from different ergo keymaps never conflict here: if two of them
    bind the same action to different shortcuts, the target gets both.

    The engine remembers which bindings it added to each target, so removing
    the overlay leaves bindings the target already had untouched.
    """

    def __init__(self, graph: KeymapGraph) -> None:
        self._graph = graph
        self._added: weakref.WeakKeyDictionary[KeymapProtocol, set[Binding]] = weakref.WeakKeyDictionary()

    def added_bindings(self, target: KeymapProtocol) -> frozenset[Binding]:
        """Bindings this engine added to ``target`` and has not removed yet."""
        return frozenset(self._added.get(target, ()))

    def apply_overlay(self, target: KeymapProtocol) -> int:
        """Extend ``target`` with every ergo-family keymap's bindings. Idempotent."""
        before = _binding_pairs(target)
        added = 0
        for keymap in self._graph.ergo_family_members():
            if keymap is target:
                continue
            added += extend_shortcuts(target, keymap)
        self._added.setdefault(target, set()).update(_binding_pairs(target) - before)
        logger.info("Applied command-mode overlay to %r (%d new bindings)", target.name, added)
        return added

    def remove_overlay(self, target: KeymapProtocol) -> int:
        """Take the overlay off ``target``.

        Only bindings recorded by ``apply_overlay`` are removed. A target this
        engine never overlaid gets every ergo-family binding purged instead.
        """
        recorded = self._added.pop(target, None)
        removed = 0
        if recorded is None:
            for keymap in self._graph.ergo_family_members():
                if keymap is target:
                    continue
                removed += purge_shortcuts(target, keymap)
        else:
            for action_id, shortcut in recorded:
                if shortcut in target.shortcuts_for(action_id):
                    target.remove_shortcut(action_id, shortcut)
                    removed += 1
        logger.info("Removed command-mode overlay from %r (%d bindings)", target.name, removed)
        return removed
