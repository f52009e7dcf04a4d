"""CLI commands for treerm.

This package contains all subcommand implementations.
"""

from treerm.cli.commands import browse, config, show

__all__ = ["browse", "config", "show"]
