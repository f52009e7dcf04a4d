"""Hierarchical selection of tree entries.

Selecting a directory implicitly selects everything beneath it, including
children that only appear after the directory is scanned later on.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from treerm.tree.dirtree import SEPARATOR

if TYPE_CHECKING:
    from treerm.tree.dirtree import DirTree
    from treerm.tree.models import Node

logger = logging.getLogger(__name__)


class SelectionSet:
    """Explicitly selected entries, identified by full path.

    When bound to a tree, toggled paths are resolved first and stored in
    their canonical full-path form, so ``a/b`` and ``./a/b`` name the same
    entry.

    Args:
        tree: Tree used to resolve toggled paths. Optional.
    """

    def __init__(self, tree: DirTree | None = None) -> None:
        self._tree = tree
        self._paths: set[str] = set()

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionSet):
            return NotImplemented
        return self._paths == other._paths

    __hash__ = None  # type: ignore[assignment]

    def paths(self) -> list[str]:
        """Selected paths, ancestors before descendants."""
        return sorted(self._paths, key=lambda p: (p.count(SEPARATOR), p))

    def path_set(self) -> frozenset[str]:
        return frozenset(self._paths)

    def toggle(self, path: str) -> bool:
        """Select an unselected path, or deselect a selected one.

        Args:
            path: Path to toggle.

        Returns:
            True if the path is selected after the call.

        Raises:
            NodeNotFoundError: If the set is bound to a tree and the path
                does not resolve.
        """
        key = self._canonical(path)
        if key in self._paths:
            self._paths.remove(key)
            logger.debug("Deselected %s", key)
            return False
        self._paths.add(key)
        logger.debug("Selected %s", key)
        return True

    def is_effectively_selected(self, node: Node) -> bool:
        """Check whether a node or any of its ancestors is selected."""
        return any(n.full_path in self._paths for n in node.iter_ancestors(include_self=True))

    def clear(self) -> None:
        self._paths.clear()

    def discard(self, path: str) -> None:
        self._paths.discard(path)

    def discard_subtree(self, path: str) -> int:
        """Drop a path and every selected path beneath it.

        Called after a removal so the set never points at deleted entries.

        Args:
            path: Full path of the removed entry.

        Returns:
            Number of paths dropped.
        """
        prefix = path + SEPARATOR
        stale = {p for p in self._paths if p == path or p.startswith(prefix)}
        self._paths -= stale
        return len(stale)

    def _canonical(self, path: str) -> str:
        if self._tree is None:
            return path
        return self._tree.require(path).full_path
