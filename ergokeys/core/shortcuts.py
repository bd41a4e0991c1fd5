"""Keyboard shortcuts and the binding-level set algebra behind overlays.

A keymap maps an action id to a *set* of shortcuts. ``extend_shortcuts``
copies every (action, shortcut) pair of one keymap into another and
``purge_shortcuts`` takes them out again, so the two undo each other as long
as nothing else touched the same pairs in between.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .protocols import KeymapProtocol

logger = logging.getLogger(__name__)

MODIFIER_ORDER = ("ctrl", "alt", "shift", "meta", "super")
MODIFIER_ALIASES = {
    "control": "ctrl",
    "ctl": "ctrl",
    "option": "alt",
    "opt": "alt",
    "cmd": "meta",
    "command": "meta",
    "win": "super",
}


def normalize_stroke(stroke: str) -> str:
    """Normalize a single key stroke like ``"Shift+Ctrl+S"`` to ``"ctrl+shift+s"``.

    Single-character keys keep their case when no modifier is present, so
    ``"J"`` and ``"j"`` stay different strokes.

    Raises:
        ValueError: If the stroke is empty or has an empty part.
    """
    text = stroke.strip()
    if not text:
        raise ValueError("Empty key stroke")
    # A bare "+" is a key, not a separator.
    if text == "+":
        return text

    if text.endswith("++"):
        # "ctrl++" binds the plus key
        head = text[:-2]
        parts = (head.split("+") if head else []) + ["+"]
    else:
        parts = text.split("+")
    if any(not part.strip() for part in parts):
        raise ValueError(f"Malformed key stroke: {stroke!r}")

    *modifiers, key = (part.strip() for part in parts)
    mods = set()
    for mod in modifiers:
        mod = mod.lower()
        mod = MODIFIER_ALIASES.get(mod, mod)
        if mod not in MODIFIER_ORDER:
            raise ValueError(f"Unknown modifier {mod!r} in {stroke!r}")
        mods.add(mod)

    if mods or len(key) > 1:
        key = key.lower()
    ordered = [mod for mod in MODIFIER_ORDER if mod in mods]
    return "+".join([*ordered, key])


@dataclass(frozen=True)
class KeyboardShortcut:
    """One key stroke, or a two-stroke chord like ``ctrl+k ctrl+c``."""

    first: str
    second: str | None = None

    @classmethod
    def parse(cls, text: str) -> KeyboardShortcut:
        """Parse ``"ctrl+s"`` or ``"ctrl+k ctrl+c"`` into a shortcut."""
        strokes = text.split()
        if not strokes:
            raise ValueError("Empty shortcut")
        if len(strokes) > 2:
            raise ValueError(f"Shortcuts have at most two strokes: {text!r}")
        first = normalize_stroke(strokes[0])
        second = normalize_stroke(strokes[1]) if len(strokes) == 2 else None
        return cls(first, second)

    @property
    def is_chord(self) -> bool:
        return self.second is not None

    def __str__(self) -> str:
        if self.second is None:
            return self.first
        return f"{self.first} {self.second}"


def extend_shortcuts(dst: KeymapProtocol, src: KeymapProtocol) -> int:
    """Ensure every binding of ``src`` also exists in ``dst``.

    Returns:
        Number of bindings that were not already present in ``dst``.
    """
    added = 0
    for action_id in src.action_ids():
        existing = dst.shortcuts_for(action_id)
        for shortcut in src.shortcuts_for(action_id):
            if shortcut in existing:
                continue
            dst.add_shortcut(action_id, shortcut)
            added += 1
    logger.debug("extend %s <- %s: %d binding(s) added", dst.name, src.name, added)
    return added


def purge_shortcuts(dst: KeymapProtocol, src: KeymapProtocol) -> int:
    """Remove every binding of ``src`` from ``dst``. Missing bindings are skipped.

    Returns:
        Number of bindings actually removed from ``dst``.
    """
    removed = 0
    for action_id in src.action_ids():
        existing = dst.shortcuts_for(action_id)
        for shortcut in src.shortcuts_for(action_id):
            if shortcut not in existing:
                continue
            dst.remove_shortcut(action_id, shortcut)
            removed += 1
    logger.debug("purge %s -= %s: %d binding(s) removed", dst.name, src.name, removed)
    return removed
