"""Exceptions raised by tree operations.

All errors derive from TreeError so callers can catch the whole family
and keep the browser running.
"""


class TreeError(Exception):
    """Base exception for tree and selection errors."""


class NodeNotFoundError(TreeError):
    """Raised when a path does not resolve to a node in the tree.

    Attributes:
        path: The path that failed to resolve.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Path not found: {path}")
        self.path = path


class TreeIOError(TreeError):
    """Raised when reading or deleting a filesystem entry fails.

    Attributes:
        path: Path of the entry being read or deleted.
        reason: The originating OSError.
    """

    def __init__(self, path: str, reason: OSError) -> None:
        detail = reason.strerror or str(reason)
        super().__init__(f"{path}: {detail}")
        self.path = path
        self.reason = reason


class UnsupportedOperationError(TreeError):
    """Raised for operations the tree deliberately does not implement.

    Attributes:
        path: Path the operation was attempted on.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path
