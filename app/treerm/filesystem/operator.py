"""Filesystem operator for the browser tree.

Reads directory entries and deletes files or directory trees, with
dry-run support and protected path rejection. Errors are raised as
OSError so the tree can wrap them with the failing path.
"""

import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from treerm.filesystem.models import DirEntry, NodeKind
from treerm.filesystem.protected import (
    DEFAULT_PROTECTED_PATTERNS,
    contains_protected_path,
    is_protected_path,
)

logger = logging.getLogger(__name__)


class FilesystemOperator:
    """Reads and deletes filesystem entries on behalf of the tree.

    Attributes:
        _dry_run: If True, report deletions without modifying the filesystem.
        _protected_patterns: Glob patterns that may never be deleted.
    """

    def __init__(
        self,
        dry_run: bool = False,
        protected_patterns: Iterable[str] = DEFAULT_PROTECTED_PATTERNS,
    ) -> None:
        """Initialize the FilesystemOperator.

        Args:
            dry_run: If True, log what would be deleted without deleting.
            protected_patterns: Glob patterns refused by the delete methods.
        """
        self._dry_run = dry_run
        self._protected_patterns = tuple(protected_patterns)

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def read_directory(self, path: str) -> list[DirEntry]:
        """List the immediate entries of a directory.

        Entries keep the order the OS enumerates them in. Symlinks are
        classified before directories so they are never followed.

        Args:
            path: Directory to read.

        Returns:
            One DirEntry per entry.

        Raises:
            OSError: If the directory cannot be read.
        """
        entries: list[DirEntry] = []
        with os.scandir(path) as it:
            for entry in it:
                entries.append(DirEntry(name=entry.name, kind=self._get_kind(entry)))
        logger.debug("Read %d entries from %s", len(entries), path)
        return entries

    def delete_file(self, path: str) -> None:
        """Delete a single file.

        Args:
            path: File to delete.

        Raises:
            OSError: If the path is protected or the unlink fails.
        """
        self._check_protected(path)
        if self._dry_run:
            logger.info("Dry-run: would delete file %s", path)
            return
        Path(path).unlink()
        logger.info("Deleted file %s", path)

    def delete_directory(self, path: str) -> None:
        """Delete a directory and everything beneath it.

        Args:
            path: Directory to delete.

        Raises:
            OSError: If the path is protected or the removal fails.
        """
        self._check_protected(path)
        if contains_protected_path(path, self._protected_patterns):
            logger.warning("Refusing to delete %s: it contains a protected path", path)
            raise PermissionError(f"Directory contains a protected path: {path}")
        if self._dry_run:
            logger.info("Dry-run: would delete directory %s", path)
            return
        if Path(path).is_symlink():
            msg = f"Refusing to delete symlink as a directory: {path}"
            raise NotADirectoryError(msg)
        shutil.rmtree(path)
        logger.info("Deleted directory %s", path)

    def _check_protected(self, path: str) -> None:
        if is_protected_path(path, self._protected_patterns):
            logger.warning("Refusing to delete protected path %s", path)
            raise PermissionError(f"Protected path cannot be deleted: {path}")

    @staticmethod
    def _get_kind(entry: os.DirEntry[str]) -> NodeKind:
        """Classify a directory entry without following symlinks.

        Args:
            entry: Entry from os.scandir.

        Returns:
            NodeKind classification.
        """
        try:
            if entry.is_symlink():
                return NodeKind.SYMLINK
            if entry.is_dir(follow_symlinks=False):
                return NodeKind.DIRECTORY
        except OSError:
            logger.warning("Cannot determine type of: %s", entry.path)
        return NodeKind.FILE
