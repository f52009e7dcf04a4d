"""Action models for browser operations.

This module defines the user actions the browser understands and the
result reported back after each one is applied.
"""

from dataclasses import dataclass
from enum import Enum


class Action(Enum):
    """User action applied to the browser between two renders.

    Attributes:
        MOVE_UP: Move the cursor to the previous row (wraps).
        MOVE_DOWN: Move the cursor to the next row (wraps).
        EXPAND: Scan the directory under the cursor.
        TOGGLE: Toggle selection of the entry under the cursor.
        REMOVE: Remove the entry under the cursor.
        REMOVE_SELECTED: Remove every selected entry.
        EXIT: Leave the browser.
    """

    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    EXPAND = "expand"
    TOGGLE = "toggle"
    REMOVE = "remove"
    REMOVE_SELECTED = "remove_selected"
    EXIT = "exit"

    @property
    def is_destructive(self) -> bool:
        """Check if this action deletes filesystem entries."""
        return self in (Action.REMOVE, Action.REMOVE_SELECTED)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of applying a browser action.

    Attributes:
        action: The action that was applied.
        success: Whether the action completed successfully.
        path: Path the action targeted, if any.
        message: Optional success message or additional information.
        error: Optional error message if the action failed.
    """

    action: Action
    success: bool
    path: str | None = None
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success
