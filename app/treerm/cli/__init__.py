"""CLI package for treerm.

This package contains the Typer application and all subcommands.
"""

from treerm.cli.main import app

__all__ = ["app"]
