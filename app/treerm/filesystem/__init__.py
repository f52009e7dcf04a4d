"""Filesystem access module.

This module provides directory reading and deletion operations used by
the tree, together with protected path management.
"""

from treerm.filesystem.models import DirEntry, NodeKind
from treerm.filesystem.operator import FilesystemOperator
from treerm.filesystem.protected import (
    DEFAULT_PROTECTED_PATTERNS,
    contains_protected_path,
    is_protected_path,
)

__all__ = [
    "DEFAULT_PROTECTED_PATTERNS",
    "DirEntry",
    "FilesystemOperator",
    "NodeKind",
    "contains_protected_path",
    "is_protected_path",
]
