"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from treerm.filesystem.models import DirEntry, NodeKind
from treerm.filesystem.operator import FilesystemOperator


class FakeOperator(FilesystemOperator):
    """In-memory filesystem operator with a fixed enumeration order.

    Directory listings are keyed by the full path the tree asks for.
    Deletions are recorded instead of performed.
    """

    def __init__(self, listings: dict[str, list[DirEntry]], dry_run: bool = False) -> None:
        super().__init__(dry_run=dry_run, protected_patterns=())
        self.listings = listings
        self.reads: list[str] = []
        self.deleted: list[str] = []
        self.fail_delete: dict[str, OSError] = {}

    def read_directory(self, path: str) -> list[DirEntry]:
        self.reads.append(path)
        if path not in self.listings:
            raise PermissionError(13, "Permission denied", path)
        return list(self.listings[path])

    def delete_file(self, path: str) -> None:
        self._record_delete(path)

    def delete_directory(self, path: str) -> None:
        self._record_delete(path)

    def _record_delete(self, path: str) -> None:
        if path in self.fail_delete:
            raise self.fail_delete[path]
        self.deleted.append(path)


def d(name: str) -> DirEntry:
    """Directory entry shorthand."""
    return DirEntry(name=name, kind=NodeKind.DIRECTORY)


def f(name: str) -> DirEntry:
    """File entry shorthand."""
    return DirEntry(name=name, kind=NodeKind.FILE)


def link(name: str) -> DirEntry:
    """Symlink entry shorthand."""
    return DirEntry(name=name, kind=NodeKind.SYMLINK)


@pytest.fixture
def sample_listings() -> dict[str, list[DirEntry]]:
    """Listings for a small hierarchy rooted at ".".

    .
    ├─ a/
    │  ├─ c/
    │  │  └─ e.txt
    │  └─ d.txt
    ├─ b.txt
    └─ l -> somewhere
    """
    return {
        ".": [d("a"), f("b.txt"), link("l")],
        "./a": [d("c"), f("d.txt")],
        "./a/c": [f("e.txt")],
    }


@pytest.fixture
def fake_operator(sample_listings: dict[str, list[DirEntry]]) -> FakeOperator:
    """Fake operator over the sample hierarchy."""
    return FakeOperator(sample_listings)


@pytest.fixture
def make_files(tmp_path: Path) -> Callable[[list[str]], Path]:
    """Create files and directories under tmp_path.

    Entries ending in "/" are created as directories, everything else as
    files with some content.
    """

    def _make(entries: list[str]) -> Path:
        for entry in entries:
            target = tmp_path / entry
            if entry.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text("content")
        return tmp_path

    return _make
