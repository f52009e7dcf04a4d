"""Show command implementation.

Prints a directory tree non-interactively, expanded to a fixed depth.
"""

from pathlib import Path
from typing import Annotated

import typer

from treerm.cli.render import render_row
from treerm.cli.types import load_cli_config
from treerm.filesystem.operator import FilesystemOperator
from treerm.tree.dirtree import DirTree
from treerm.tree.errors import TreeIOError
from treerm.tree.models import Node
from treerm.utils.formatting import console, print_error, print_warning


def expand_to_depth(tree: DirTree, depth: int) -> list[TreeIOError]:
    """Scan every directory of the tree down to ``depth`` levels.

    Directories that cannot be read are left unscanned.

    Args:
        tree: Tree to expand.
        depth: Number of levels to read below the root. 0 reads nothing.

    Returns:
        Errors for directories that could not be read.
    """
    errors: list[TreeIOError] = []
    level: list[Node] = [tree.root]
    for _ in range(depth):
        next_level: list[Node] = []
        for node in level:
            try:
                tree.scan(node)
            except TreeIOError as e:
                errors.append(e)
                continue
            next_level.extend(child for child in node.children if child.is_dir)
        level = next_level
    return errors


def show(
    ctx: typer.Context,
    root: Annotated[
        Path,
        typer.Argument(help="Directory to show."),
    ] = Path("."),
    depth: Annotated[
        int,
        typer.Option("--depth", "-d", min=0, help="Number of levels to expand."),
    ] = 1,
) -> None:
    """Print the directory tree of ROOT."""
    config = load_cli_config(ctx)

    if not root.is_dir():
        print_error(f"Not a directory: {root}")
        raise typer.Exit(code=1)

    operator = FilesystemOperator(protected_patterns=config.protected_patterns)
    tree = DirTree(str(root), operator)
    errors = expand_to_depth(tree, depth)

    for row in tree.flatten_enriched():
        console.print(render_row(row))

    for error in errors:
        print_warning(f"Cannot read {error}")

    if errors and not tree.root.scanned:
        raise typer.Exit(code=1)
