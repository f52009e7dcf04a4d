"""Tree domain models for the interactive file browser.

This module defines the node type mirroring one filesystem entry and
the enriched row produced when the tree is flattened for rendering.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from dataclasses import dataclass

from treerm.filesystem.models import NodeKind


@dataclass(frozen=True, slots=True)
class EnrichedRow:
    """One flattened tree row annotated for rendering.

    Attributes:
        name: Node name.
        kind: Node kind, used to pick the type glyph.
        depth: Number of ancestors (0 for the root).
        is_last_sibling: True if the node is the final child of its parent.
            Always False for the root.
        is_selected: True if the node is effectively selected.
    """

    name: str
    kind: NodeKind
    depth: int
    is_last_sibling: bool
    is_selected: bool


class Node:
    """A single entry in the in-memory filesystem mirror.

    A node owns its children. The parent link is a weak reference so the
    forward structure (root to leaves) is the only thing keeping nodes
    alive.

    Attributes:
        name: Single path segment (the root carries the caller's root path).
        kind: Entry type.
        scanned: Whether the directory entries have been read.
    """

    __slots__ = ("name", "kind", "scanned", "_children", "_by_name", "_parent", "__weakref__")

    def __init__(self, name: str, kind: NodeKind) -> None:
        if not name:
            msg = "Node name cannot be empty"
            raise ValueError(msg)
        self.name = name
        self.kind = kind
        self.scanned = False
        self._children: list[Node] = []
        self._by_name: dict[str, Node] = {}
        self._parent: weakref.ref[Node] | None = None

    def __repr__(self) -> str:
        return f"Node(name={self.name!r}, kind={self.kind.value}, children={len(self._children)})"

    @property
    def parent(self) -> Node | None:
        """Parent node, or None for the root (or a detached node)."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def children(self) -> tuple[Node, ...]:
        """Children in filesystem enumeration order."""
        return tuple(self._children)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_dir(self) -> bool:
        return self.kind == NodeKind.DIRECTORY

    @property
    def full_path(self) -> str:
        """Path from the root, joined with "/".

        The root's full path is its own name.
        """
        parts = [node.name for node in self.iter_ancestors(include_self=True)]
        return "/".join(reversed(parts))

    @property
    def depth(self) -> int:
        """Number of ancestors."""
        return sum(1 for _ in self.iter_ancestors())

    def iter_ancestors(self, *, include_self: bool = False) -> Iterator[Node]:
        """Walk parent links up to the root.

        Args:
            include_self: Yield this node first.

        Yields:
            Nodes from the nearest ancestor to the root.
        """
        node = self if include_self else self.parent
        while node is not None:
            yield node
            node = node.parent

    def child(self, name: str) -> Node | None:
        """Return the direct child called ``name``, if any."""
        return self._by_name.get(name)

    def set_children(self, children: list[Node]) -> None:
        """Replace the children in one step and mark the node scanned.

        The whole list is attached at once so a partially loaded
        directory is never observable.

        Args:
            children: New children, in display order.
        """
        for child in children:
            child._parent = weakref.ref(self)
        self._children = list(children)
        self._by_name = {child.name: child for child in children}
        self.scanned = True

    def detach_child(self, name: str) -> Node | None:
        """Remove the child called ``name`` and clear its parent link.

        Args:
            name: Child name.

        Returns:
            The detached node, or None if no child has that name.
        """
        node = self._by_name.pop(name, None)
        if node is None:
            return None
        self._children = [c for c in self._children if c.name != name]
        node._parent = None
        return node

    def walk(self) -> Iterator[Node]:
        """Pre-order traversal of this subtree (self first)."""
        yield self
        for child in self._children:
            yield from child.walk()
