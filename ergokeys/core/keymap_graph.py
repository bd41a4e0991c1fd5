"""Read-only queries over the host's keymap registry.

Nothing here is cached: every call asks the registry again, since the host
may add or remove keymaps at any time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import KeymapNotFoundError
from .keymap import MAX_ANCESTRY_DEPTH

if TYPE_CHECKING:
    from .protocols import KeymapProtocol, KeymapRegistryProtocol

logger = logging.getLogger(__name__)

ROOT_KEYMAP_NAME = "$ergokeys"


class KeymapGraph:
    """Parent-chain view of a keymap registry."""

    def __init__(
        self,
        registry: KeymapRegistryProtocol,
        root_name: str = ROOT_KEYMAP_NAME,
        max_depth: int = MAX_ANCESTRY_DEPTH,
    ) -> None:
        self._registry = registry
        self._root_name = root_name
        self._max_depth = max_depth

    @property
    def root_name(self) -> str:
        return self._root_name

    def all_keymaps(self) -> list[KeymapProtocol]:
        return list(self._registry.list_all())

    def by_name(self, name: str) -> KeymapProtocol:
        """Look up a keymap by exact name.

        Raises:
            KeymapNotFoundError: If no keymap has that name.
        """
        keymap = self._registry.get_by_name(name)
        if keymap is None:
            raise KeymapNotFoundError(name)
        return keymap

    def force_load_all(self) -> None:
        """Materialize every keymap so parent links are resolved before any walk."""
        for keymap in self.all_keymaps():
            keymap.force_load()

    def ancestry_contains(self, keymap: KeymapProtocol | None, root_name: str) -> bool:
        """Walk ``keymap`` and its parents looking for ``root_name`` (case-insensitive).

        Keymaps the host registered after the last ``force_load_all()`` are
        loaded on the way, so their parent links are known.

        A chain that revisits a keymap or exceeds the depth cap is a broken
        configuration: it is logged and treated as not containing the root.
        """
        wanted = root_name.casefold()
        seen: set[int] = set()
        depth = 0
        node = keymap
        while node is not None:
            if id(node) in seen or depth >= self._max_depth:
                logger.error(
                    "Keymap %r has a cyclic or too deep parent chain; ignoring it",
                    keymap.name if keymap is not None else None,
                )
                return False
            if node.name.casefold() == wanted:
                return True
            if not node.is_loaded:
                node.force_load()
            seen.add(id(node))
            depth += 1
            node = node.parent
        return False

    def is_ergo_keys_keymap(self, keymap: KeymapProtocol | None) -> bool:
        return self.ancestry_contains(keymap, self._root_name)

    def ergo_family_members(self) -> list[KeymapProtocol]:
        members = []
        for keymap in self.all_keymaps():
            if self.is_ergo_keys_keymap(keymap):
                members.append(keymap)
            else:
                logger.debug("Keymap %r is not part of the %s family", keymap.name, self._root_name)
        return members
