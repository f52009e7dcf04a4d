"""Lazily expanded in-memory mirror of a directory hierarchy.

The tree starts as a single unscanned root directory. Directories are
read one level at a time when the user expands them, entries are removed
from disk and from the tree together, and the whole structure can be
flattened into the navigation and rendering sequences.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from treerm.filesystem.models import NodeKind
from treerm.filesystem.operator import FilesystemOperator
from treerm.tree.errors import NodeNotFoundError, TreeIOError, UnsupportedOperationError
from treerm.tree.models import EnrichedRow, Node

if TYPE_CHECKING:
    from treerm.tree.selection import SelectionSet

logger = logging.getLogger(__name__)

SEPARATOR = "/"


class DirTree:
    """Owns the root node and every operation on the hierarchy.

    Args:
        root_path: Path the tree is rooted at, conventionally ".".
        operator: Filesystem collaborator. Defaults to a live operator.
    """

    def __init__(self, root_path: str = ".", operator: FilesystemOperator | None = None) -> None:
        self._root = Node(root_path, NodeKind.DIRECTORY)
        self._operator = operator if operator is not None else FilesystemOperator()

    @property
    def root(self) -> Node:
        return self._root

    @property
    def operator(self) -> FilesystemOperator:
        return self._operator

    def lookup(self, path: str) -> Node | None:
        """Resolve a "/"-joined path to a node.

        The path may be prefixed with the root name (``./a/b`` for a tree
        rooted at ".") or be relative to the root (``a/b``). "." and the
        root name always resolve to the root, scanned or not. For a root named
        ``x`` with a child also named ``x``, ``"x"`` is the root and the child
        must be written ``x/x``.

        Args:
            path: Path to resolve.

        Returns:
            The node, or None if any segment is missing among the current
            children (including descendants of unscanned directories).
        """
        root_name = self._root.name
        if path in (".", root_name):
            return self._root

        prefix = root_name + SEPARATOR
        if path.startswith(prefix):
            path = path[len(prefix) :]
        elif path.startswith("./"):
            path = path[2:]

        node = self._root
        for name in path.split(SEPARATOR):
            if not name:
                continue
            child = node.child(name)
            if child is None:
                return None
            node = child
        return node

    def require(self, path: str) -> Node:
        """Resolve a path, raising if it does not exist.

        Raises:
            NodeNotFoundError: If the path does not resolve.
        """
        node = self.lookup(path)
        if node is None:
            raise NodeNotFoundError(path)
        return node

    def scan(self, node: Node) -> int:
        """Populate a directory node with its immediate entries.

        Scanning is idempotent: already scanned directories and
        non-directories are left untouched.

        Args:
            node: Node to scan.

        Returns:
            Number of children added.

        Raises:
            TreeIOError: If the directory cannot be read. The node is left
                unscanned and childless.
        """
        if not node.is_dir or node.scanned:
            return 0

        path = node.full_path
        try:
            entries = self._operator.read_directory(path)
        except OSError as e:
            logger.warning("Cannot scan directory %s: %s", path, e)
            raise TreeIOError(path, e) from e

        node.set_children([Node(entry.name, entry.kind) for entry in entries])
        logger.debug("Scanned %s: %d entries", path, len(entries))
        return len(entries)

    def scan_path(self, path: str) -> int:
        """Resolve a path and scan it. See :meth:`scan`."""
        return self.scan(self.require(path))

    def remove(self, path: str) -> Node | None:
        """Delete an entry from disk, then detach it from the tree.

        The root cannot remove itself; removing it is a no-op. The node is
        only detached once the filesystem delete succeeded, so the model
        never drifts from the disk. For the same reason a dry-run operator
        leaves the node in place.

        Args:
            path: Path of the entry to remove.

        Returns:
            The removed node (still attached in dry-run mode), or None when
            ``path`` is the root.

        Raises:
            NodeNotFoundError: If the path does not resolve.
            UnsupportedOperationError: If the node is a symlink.
            TreeIOError: If the filesystem delete fails.
        """
        node = self.require(path)
        parent = node.parent
        if parent is None:
            logger.debug("Ignoring removal of root %s", path)
            return None

        full_path = node.full_path
        if node.kind == NodeKind.SYMLINK:
            msg = f"Removing symlinks is not supported: {full_path}"
            raise UnsupportedOperationError(full_path, msg)

        try:
            if node.kind == NodeKind.DIRECTORY:
                self._operator.delete_directory(full_path)
            else:
                self._operator.delete_file(full_path)
        except OSError as e:
            logger.warning("Failed to remove %s: %s", full_path, e)
            raise TreeIOError(full_path, e) from e

        if self._operator.dry_run:
            return node
        return parent.detach_child(node.name)

    def flatten_paths(self) -> list[str]:
        """Full path of every node, root first, in pre-order."""
        return [node.full_path for node in self._root.walk()]

    def flatten_enriched(self, selection: SelectionSet | None = None) -> list[EnrichedRow]:
        """Pre-order rows annotated for rendering.

        Row ``i`` describes the same node as ``flatten_paths()[i]``.
        Selection is inherited top-down during the traversal.

        Args:
            selection: Explicitly selected paths. None means nothing selected.

        Returns:
            One EnrichedRow per node.
        """
        selected = selection.path_set() if selection is not None else frozenset()
        rows: list[EnrichedRow] = []
        self._enrich(
            self._root, self._root.name, selected, rows, depth=0, is_last=False, inherited=False
        )
        return rows

    def _enrich(
        self,
        node: Node,
        path: str,
        selected: frozenset[str],
        rows: list[EnrichedRow],
        *,
        depth: int,
        is_last: bool,
        inherited: bool,
    ) -> None:
        is_selected = inherited or path in selected
        rows.append(
            EnrichedRow(
                name=node.name,
                kind=node.kind,
                depth=depth,
                is_last_sibling=is_last,
                is_selected=is_selected,
            )
        )

        children = node.children
        for i, child in enumerate(children):
            self._enrich(
                child,
                path + SEPARATOR + child.name,
                selected,
                rows,
                depth=depth + 1,
                is_last=i == len(children) - 1,
                inherited=is_selected,
            )
