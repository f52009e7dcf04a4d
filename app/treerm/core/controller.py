"""Browser controller.

Ties the tree, the selection and the cursor together and applies one
user action at a time. Every tree failure is turned into a failed
ActionResult so the front end can show it and keep running.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from treerm.core.actions import Action, ActionResult
from treerm.core.config import TreermConfig
from treerm.filesystem.operator import FilesystemOperator
from treerm.tree.cursor import Cursor
from treerm.tree.dirtree import SEPARATOR, DirTree
from treerm.tree.errors import NodeNotFoundError, TreeError
from treerm.tree.models import EnrichedRow
from treerm.tree.selection import SelectionSet

logger = logging.getLogger(__name__)


class Browser:
    """State of one interactive browsing session.

    Attributes:
        tree: The directory tree being browsed.
        selection: Explicitly selected paths.
        cursor: Index of the hovered row.
        status: Result of the last applied action, shown in the status line.
        exit_requested: Set once the EXIT action has been applied.
    """

    def __init__(
        self,
        tree: DirTree,
        selection: SelectionSet | None = None,
        cursor: Cursor | None = None,
    ) -> None:
        self.tree = tree
        self.selection = selection if selection is not None else SelectionSet(tree)
        self.cursor = cursor if cursor is not None else Cursor()
        self.status: ActionResult | None = None
        self.exit_requested = False

        self._handlers: dict[Action, Callable[[], ActionResult]] = {
            Action.MOVE_UP: self.move_up,
            Action.MOVE_DOWN: self.move_down,
            Action.EXPAND: self.expand,
            Action.TOGGLE: self.toggle_select,
            Action.REMOVE: self.remove_hovered,
            Action.REMOVE_SELECTED: self.remove_selected,
            Action.EXIT: self.request_exit,
        }

    @classmethod
    def from_config(cls, root: str | Path, config: TreermConfig) -> Browser:
        """Create a browser rooted at ``root`` using configured settings."""
        operator = FilesystemOperator(
            dry_run=config.dry_run,
            protected_patterns=config.protected_patterns,
        )
        return cls(DirTree(str(root), operator))

    @property
    def dry_run(self) -> bool:
        return self.tree.operator.dry_run

    def rows(self) -> list[EnrichedRow]:
        """Current enriched rows, derived fresh from the tree."""
        return self.tree.flatten_enriched(self.selection)

    def paths(self) -> list[str]:
        """Current navigation paths, derived fresh from the tree."""
        return self.tree.flatten_paths()

    @property
    def hovered_path(self) -> str:
        """Full path of the row under the cursor.

        The cursor is clamped first, so this never indexes out of range.
        The root is always present, so the sequence is never empty.
        """
        paths = self.paths()
        return paths[self.cursor.clamp(len(paths))]

    def dispatch(self, action: Action) -> ActionResult:
        """Apply a single action and remember its result.

        Args:
            action: The action to apply.

        Returns:
            Result of the action. Also stored in ``status``.
        """
        result = self._handlers[action]()
        self.cursor.clamp(len(self.paths()))
        if action not in (Action.MOVE_UP, Action.MOVE_DOWN):
            self.status = result
        if result.failed:
            logger.warning("%s failed: %s", action.value, result.error)
        return result

    def move_up(self) -> ActionResult:
        index = self.cursor.move_up(len(self.paths()))
        return ActionResult(action=Action.MOVE_UP, success=True, path=self.paths()[index])

    def move_down(self) -> ActionResult:
        index = self.cursor.move_down(len(self.paths()))
        return ActionResult(action=Action.MOVE_DOWN, success=True, path=self.paths()[index])

    def expand(self) -> ActionResult:
        """Scan the directory under the cursor."""
        path = self.hovered_path
        try:
            node = self.tree.require(path)
            if not node.is_dir:
                return ActionResult(
                    action=Action.EXPAND, success=False, path=path, error="Not a directory"
                )
            if node.scanned:
                return ActionResult(
                    action=Action.EXPAND, success=True, path=path, message="Already expanded"
                )
            count = self.tree.scan(node)
        except TreeError as e:
            return ActionResult(action=Action.EXPAND, success=False, path=path, error=str(e))

        return ActionResult(
            action=Action.EXPAND,
            success=True,
            path=path,
            message=f"Expanded {path} ({count} entries)",
        )

    def toggle_select(self) -> ActionResult:
        """Toggle selection of the entry under the cursor."""
        path = self.hovered_path
        try:
            selected = self.selection.toggle(path)
        except NodeNotFoundError as e:
            return ActionResult(action=Action.TOGGLE, success=False, path=path, error=str(e))

        message = f"Selected {path}" if selected else f"Deselected {path}"
        return ActionResult(action=Action.TOGGLE, success=True, path=path, message=message)

    def remove_hovered(self) -> ActionResult:
        """Remove the entry under the cursor."""
        path = self.hovered_path
        error = self._remove(path)
        if error is not None:
            return ActionResult(action=Action.REMOVE, success=False, path=path, error=error)

        verb = "Would remove" if self.dry_run else "Removed"
        return ActionResult(action=Action.REMOVE, success=True, path=path, message=f"{verb} {path}")

    def remove_selected(self) -> ActionResult:
        """Remove every selected entry.

        Entries are removed top-most first. Entries beneath an entry that
        was already removed are skipped. Entries that fail stay selected;
        when everything succeeds the selection ends up empty.
        """
        if len(self.selection) == 0:
            return ActionResult(
                action=Action.REMOVE_SELECTED, success=True, message="Nothing selected"
            )

        removed: list[str] = []
        failures: list[str] = []
        for path in self.selection.paths():
            if any(path == r or path.startswith(r + SEPARATOR) for r in removed):
                continue
            if self.tree.lookup(path) is None:
                logger.debug("Dropping stale selection %s", path)
                self.selection.discard(path)
                continue
            error = self._remove(path)
            if error is None:
                removed.append(path)
            else:
                failures.append(error)

        if not failures and not self.dry_run:
            self.selection.clear()

        verb = "Would remove" if self.dry_run else "Removed"
        message = f"{verb} {len(removed)} selected entries"
        if failures:
            return ActionResult(
                action=Action.REMOVE_SELECTED,
                success=False,
                message=message,
                error=f"{len(failures)} failed: {failures[0]}",
            )
        return ActionResult(action=Action.REMOVE_SELECTED, success=True, message=message)

    def request_exit(self) -> ActionResult:
        self.exit_requested = True
        return ActionResult(action=Action.EXIT, success=True)

    def _remove(self, path: str) -> str | None:
        """Remove one path and prune the selection.

        Returns:
            None on success, otherwise an error message.
        """
        try:
            node = self.tree.remove(path)
        except TreeError as e:
            return str(e)

        if node is None:
            return "Cannot remove the root directory"

        if not self.dry_run:
            self.selection.discard_subtree(path)
        return None
