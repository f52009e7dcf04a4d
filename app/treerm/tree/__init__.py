"""In-memory directory tree module.

This module provides the lazily expanded tree model, hierarchical
selection, cursor handling, and the flattening used for navigation
and rendering.
"""

from treerm.filesystem.models import DirEntry, NodeKind
from treerm.tree.cursor import Cursor
from treerm.tree.dirtree import DirTree
from treerm.tree.errors import (
    NodeNotFoundError,
    TreeError,
    TreeIOError,
    UnsupportedOperationError,
)
from treerm.tree.models import EnrichedRow, Node
from treerm.tree.selection import SelectionSet

__all__ = [
    "Cursor",
    "DirEntry",
    "DirTree",
    "EnrichedRow",
    "Node",
    "NodeKind",
    "NodeNotFoundError",
    "SelectionSet",
    "TreeError",
    "TreeIOError",
    "UnsupportedOperationError",
]
