"""Shared utilities for CLI commands.

This module provides helpers used across multiple CLI command modules
to avoid code duplication.
"""

from pathlib import Path

import typer

from treerm.core.config import ConfigError, TreermConfig, load_config_or_default
from treerm.utils.formatting import print_error


def get_config_path(ctx: typer.Context) -> Path | None:
    """Config file path given to the main callback, if any."""
    root_ctx = ctx.find_root()
    obj = root_ctx.obj if isinstance(root_ctx.obj, dict) else {}
    return obj.get("config_path")


def load_cli_config(ctx: typer.Context) -> TreermConfig:
    """Load configuration for a command, exiting with code 1 if it is invalid.

    Args:
        ctx: Typer context of the running command.

    Returns:
        Loaded configuration, or defaults when no config file exists.
    """
    try:
        return load_config_or_default(get_config_path(ctx))
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
