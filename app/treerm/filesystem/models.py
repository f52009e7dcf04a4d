"""Filesystem domain models for directory reading.

This module defines the entry kinds the browser distinguishes and the
raw entry type returned when a directory is read.
"""

from dataclasses import dataclass
from enum import Enum


class NodeKind(str, Enum):
    """Type of filesystem entry.

    Attributes:
        FILE: Regular file (or anything that is neither a directory nor a link).
        DIRECTORY: Directory that can be scanned for children.
        SYMLINK: Symbolic link. Never followed, never removed.
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


@dataclass(frozen=True, slots=True)
class DirEntry:
    """A single entry returned by reading a directory.

    Attributes:
        name: Entry name (one path segment, no separators).
        kind: Classified entry type.
    """

    name: str
    kind: NodeKind

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.name or "/" in self.name:
            msg = f"Entry name must be a single path segment, got {self.name!r}"
            raise ValueError(msg)
