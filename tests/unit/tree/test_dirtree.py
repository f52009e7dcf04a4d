"""Unit tests for DirTree.

Tests path lookup, lazy scanning, removal with model/disk consistency,
and both flattening orders.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from conftest import FakeOperator, d, f
from treerm.filesystem.models import NodeKind
from treerm.filesystem.operator import FilesystemOperator
from treerm.tree.dirtree import DirTree
from treerm.tree.errors import NodeNotFoundError, TreeIOError, UnsupportedOperationError
from treerm.tree.selection import SelectionSet


def _scanned_tree(operator: FakeOperator) -> DirTree:
    """Tree with ".", "./a" and "./a/c" scanned."""
    tree = DirTree(".", operator)
    tree.scan(tree.root)
    tree.scan_path("./a")
    tree.scan_path("./a/c")
    return tree


class TestLookup:
    """Tests for DirTree.lookup."""

    def test_dot_resolves_to_unscanned_root(self, fake_operator: FakeOperator) -> None:
        """"." always resolves to the root, even before any scan."""
        tree = DirTree(".", fake_operator)
        assert tree.lookup(".") is tree.root

    def test_root_name_resolves_to_root(self, fake_operator: FakeOperator) -> None:
        """The root's own name resolves to the root."""
        tree = DirTree("/srv/data", fake_operator)
        assert tree.lookup("/srv/data") is tree.root
        assert tree.lookup(".") is tree.root

    def test_lookup_full_paths(self, fake_operator: FakeOperator) -> None:
        """lookup(full_path(n)) is n for every node."""
        tree = _scanned_tree(fake_operator)

        for node in tree.root.walk():
            assert tree.lookup(node.full_path) is node

    def test_root_name_shadows_same_named_child(self) -> None:
        """A bare root name is the root; a same-named child needs the prefix."""
        tree = DirTree("x", FakeOperator({"x": [d("x")]}))
        tree.scan(tree.root)
        child = tree.root.child("x")

        assert child is not None
        assert tree.lookup("x") is tree.root
        assert tree.lookup("x/x") is child
        assert tree.lookup(child.full_path) is child

    def test_lookup_relative_paths(self, fake_operator: FakeOperator) -> None:
        """Paths without the root prefix are resolved from the root."""
        tree = _scanned_tree(fake_operator)

        assert tree.lookup("a/c/e.txt") is tree.lookup("./a/c/e.txt")

    def test_unscanned_descendants_unresolvable(self, fake_operator: FakeOperator) -> None:
        """Children of an unscanned directory cannot be found yet."""
        tree = DirTree(".", fake_operator)
        tree.scan(tree.root)

        assert tree.lookup("./a") is not None
        assert tree.lookup("./a/c") is None

    def test_missing_segment_returns_none(self, fake_operator: FakeOperator) -> None:
        """Any missing segment makes the lookup fail."""
        tree = _scanned_tree(fake_operator)

        assert tree.lookup("./nope") is None
        assert tree.lookup("./a/nope/e.txt") is None

    def test_require_raises_not_found(self, fake_operator: FakeOperator) -> None:
        """require raises NodeNotFoundError for unknown paths."""
        tree = DirTree(".", fake_operator)

        with pytest.raises(NodeNotFoundError) as exc_info:
            tree.require("./a")
        assert exc_info.value.path == "./a"


class TestScan:
    """Tests for DirTree.scan."""

    def test_scan_adds_children_in_enumeration_order(self, fake_operator: FakeOperator) -> None:
        """Children keep the order the filesystem returned them in."""
        tree = DirTree(".", fake_operator)

        added = tree.scan(tree.root)

        assert added == 3
        assert [c.name for c in tree.root.children] == ["a", "b.txt", "l"]
        assert [c.kind for c in tree.root.children] == [
            NodeKind.DIRECTORY,
            NodeKind.FILE,
            NodeKind.SYMLINK,
        ]
        assert all(c.parent is tree.root for c in tree.root.children)

    def test_scan_is_idempotent(self, fake_operator: FakeOperator) -> None:
        """Scanning twice neither duplicates children nor re-reads the disk."""
        tree = DirTree(".", fake_operator)

        tree.scan(tree.root)
        second = tree.scan(tree.root)

        assert second == 0
        assert len(tree.root.children) == 3
        assert fake_operator.reads == ["."]

    def test_scan_ignores_files(self, fake_operator: FakeOperator) -> None:
        """Scanning a file is a no-op."""
        tree = DirTree(".", fake_operator)
        tree.scan(tree.root)

        assert tree.scan_path("./b.txt") == 0
        assert fake_operator.reads == ["."]

    def test_scan_empty_directory(self) -> None:
        """An empty directory becomes scanned with no children."""
        tree = DirTree(".", FakeOperator({".": []}))

        assert tree.scan(tree.root) == 0
        assert tree.root.scanned is True
        assert tree.root.children == ()

    def test_scan_failure_raises_and_leaves_node_unscanned(self) -> None:
        """A read failure surfaces as TreeIOError with the reason attached."""
        tree = DirTree(".", FakeOperator({}))

        with pytest.raises(TreeIOError) as exc_info:
            tree.scan(tree.root)

        assert exc_info.value.path == "."
        assert isinstance(exc_info.value.reason, PermissionError)
        assert tree.root.scanned is False
        assert tree.root.children == ()

    def test_scan_real_directory(self, make_files: Callable[[list[str]], Path]) -> None:
        """Scanning a real directory classifies entries."""
        root = make_files(["sub/", "file.txt"])
        (root / "link").symlink_to(root / "sub")
        tree = DirTree(str(root))

        tree.scan(tree.root)

        kinds = {c.name: c.kind for c in tree.root.children}
        assert kinds == {
            "sub": NodeKind.DIRECTORY,
            "file.txt": NodeKind.FILE,
            "link": NodeKind.SYMLINK,
        }


class TestRemove:
    """Tests for DirTree.remove."""

    def test_remove_directory_detaches_subtree(self, fake_operator: FakeOperator) -> None:
        """Removing a directory detaches it and its descendants."""
        tree = _scanned_tree(fake_operator)

        removed = tree.remove("./a")

        assert removed is not None
        assert removed.name == "a"
        assert fake_operator.deleted == ["./a"]
        assert tree.lookup("./a") is None
        assert tree.lookup("./a/c") is None
        assert all(
            p != "./a" and not p.startswith("./a/") for p in tree.flatten_paths()
        )

    def test_remove_file(self, fake_operator: FakeOperator) -> None:
        """Removing a file deletes only that entry."""
        tree = _scanned_tree(fake_operator)

        tree.remove("./a/d.txt")

        assert fake_operator.deleted == ["./a/d.txt"]
        assert [c.name for c in tree.lookup("./a").children] == ["c"]  # type: ignore[union-attr]

    def test_remove_root_is_noop(self, fake_operator: FakeOperator) -> None:
        """The root cannot remove itself."""
        tree = _scanned_tree(fake_operator)
        before = tree.flatten_paths()

        assert tree.remove(".") is None
        assert fake_operator.deleted == []
        assert tree.flatten_paths() == before

    def test_remove_symlink_unsupported(self, fake_operator: FakeOperator) -> None:
        """Symlink removal fails explicitly and changes nothing."""
        tree = _scanned_tree(fake_operator)

        with pytest.raises(UnsupportedOperationError):
            tree.remove("./l")

        assert tree.lookup("./l") is not None
        assert fake_operator.deleted == []

    def test_remove_unknown_path(self, fake_operator: FakeOperator) -> None:
        """Unknown paths raise NodeNotFoundError."""
        tree = _scanned_tree(fake_operator)

        with pytest.raises(NodeNotFoundError):
            tree.remove("./missing")

    def test_failed_delete_keeps_node(self, fake_operator: FakeOperator) -> None:
        """The node stays in the tree when the filesystem delete fails."""
        tree = _scanned_tree(fake_operator)
        fake_operator.fail_delete["./b.txt"] = PermissionError(13, "Permission denied")

        with pytest.raises(TreeIOError) as exc_info:
            tree.remove("./b.txt")

        assert "Permission denied" in str(exc_info.value)
        assert tree.lookup("./b.txt") is not None

    def test_dry_run_keeps_node(self, sample_listings: dict) -> None:
        """In dry-run mode nothing is detached."""
        operator = FakeOperator(sample_listings, dry_run=True)
        tree = _scanned_tree(operator)

        node = tree.remove("./a")

        assert node is tree.lookup("./a")
        assert node is not None and node.parent is tree.root

    def test_remove_real_directory(self, make_files: Callable[[list[str]], Path]) -> None:
        """Removing a real directory deletes the subtree on disk."""
        root = make_files(["a/c", "b"])
        tree = DirTree(str(root), FilesystemOperator(protected_patterns=()))
        tree.scan(tree.root)
        tree.scan_path("a")

        tree.remove("a")

        assert not (root / "a").exists()
        assert (root / "b").exists()
        assert tree.lookup("a") is None
        assert tree.lookup("a/c") is None


class TestFlatten:
    """Tests for flatten_paths and flatten_enriched."""

    def test_unscanned_root_flattens_to_itself(self, fake_operator: FakeOperator) -> None:
        """A fresh tree has exactly one row."""
        tree = DirTree(".", fake_operator)

        assert tree.flatten_paths() == ["."]
        rows = tree.flatten_enriched()
        assert len(rows) == 1
        assert rows[0].depth == 0
        assert rows[0].is_last_sibling is False

    def test_pre_order_paths(self, fake_operator: FakeOperator) -> None:
        """Paths come root first, then each child's subtree in order."""
        tree = _scanned_tree(fake_operator)

        assert tree.flatten_paths() == [
            ".",
            "./a",
            "./a/c",
            "./a/c/e.txt",
            "./a/d.txt",
            "./b.txt",
            "./l",
        ]

    def test_rows_parallel_paths(self, fake_operator: FakeOperator) -> None:
        """Row i and path i describe the same node."""
        tree = _scanned_tree(fake_operator)
        selection = SelectionSet(tree)
        selection.toggle("./a/c")

        paths = tree.flatten_paths()
        rows = tree.flatten_enriched(selection)

        assert len(paths) == len(rows)
        for path, row in zip(paths, rows, strict=True):
            node = tree.lookup(path)
            assert node is not None
            assert row.name == node.name
            assert row.kind == node.kind
            assert row.depth == node.depth

    def test_exactly_one_last_sibling_per_group(self, fake_operator: FakeOperator) -> None:
        """Only the final child of each sibling group is flagged last."""
        tree = _scanned_tree(fake_operator)
        paths = tree.flatten_paths()
        rows = tree.flatten_enriched()

        for node in tree.root.walk():
            if not node.children:
                continue
            flags = [rows[paths.index(c.full_path)].is_last_sibling for c in node.children]
            assert flags.count(True) == 1
            assert flags[-1] is True

    def test_selected_directory_selects_descendants(self, fake_operator: FakeOperator) -> None:
        """Every descendant of a selected directory is effectively selected."""
        tree = _scanned_tree(fake_operator)
        selection = SelectionSet(tree)
        selection.toggle("./a")

        rows = tree.flatten_enriched(selection)
        selected = {
            path: row.is_selected for path, row in zip(tree.flatten_paths(), rows, strict=True)
        }

        assert selected == {
            ".": False,
            "./a": True,
            "./a/c": True,
            "./a/c/e.txt": True,
            "./a/d.txt": True,
            "./b.txt": False,
            "./l": False,
        }

    def test_top_down_matches_bottom_up(self, fake_operator: FakeOperator) -> None:
        """Traversal selection flags agree with the ancestor-walk predicate."""
        tree = _scanned_tree(fake_operator)
        selection = SelectionSet(tree)
        selection.toggle("./a/c")
        selection.toggle("./b.txt")

        for path, row in zip(tree.flatten_paths(), tree.flatten_enriched(selection), strict=True):
            node = tree.lookup(path)
            assert node is not None
            assert row.is_selected == selection.is_effectively_selected(node)


class TestScenarios:
    """End-to-end scenarios on the tree."""

    def test_scan_root_with_dir_and_file(self) -> None:
        """Root with "a" (dir) and "b" (file) flattens as expected."""
        tree = DirTree(".", FakeOperator({".": [d("a"), f("b")]}))
        tree.scan(tree.root)

        assert tree.flatten_paths() == [".", "./a", "./b"]
        rows = tree.flatten_enriched(SelectionSet(tree))
        assert (rows[1].depth, rows[1].is_last_sibling, rows[1].is_selected) == (1, False, False)
        assert (rows[2].depth, rows[2].is_last_sibling, rows[2].is_selected) == (1, True, False)

    def test_selection_inherited_by_later_scan(self) -> None:
        """Children scanned after selecting their parent are selected too."""
        tree = DirTree(".", FakeOperator({".": [d("a"), f("b")], "./a": [f("c")]}))
        tree.scan(tree.root)
        selection = SelectionSet(tree)
        selection.toggle("./a")

        tree.scan_path("./a")

        child = tree.lookup("./a/c")
        assert child is not None
        assert "./a/c" not in selection
        assert selection.is_effectively_selected(child) is True

    def test_remove_directory_on_disk(
        self,
        make_files: Callable[[list[str]], Path],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """remove("./a") deletes the subtree and both paths stop resolving."""
        root = make_files(["a/c", "b"])
        monkeypatch.chdir(root)
        tree = DirTree(".", FilesystemOperator(protected_patterns=()))
        tree.scan(tree.root)
        tree.scan_path("./a")

        tree.remove("./a")

        assert not (root / "a").exists()
        assert tree.lookup("./a") is None
        assert tree.lookup("./a/c") is None


class TestProtectedRemoval:
    """Removal through the tree honors protected descendants."""

    def test_ancestor_of_protected_stays(self, make_files: Callable[[list[str]], Path]) -> None:
        """Removing an ancestor of a protected path fails and keeps the node."""
        root = make_files(["home/.ssh/id_rsa"])
        secret = root / "home" / ".ssh"
        operator = FilesystemOperator(protected_patterns=[str(secret), f"{secret}/*"])
        tree = DirTree(str(root), operator)
        tree.scan(tree.root)

        with pytest.raises(TreeIOError, match="protected"):
            tree.remove("home")

        assert (secret / "id_rsa").exists()
        assert tree.lookup("home") is not None
