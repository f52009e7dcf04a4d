"""Config commands.

Show the effective configuration and write a default config file.
"""

from typing import Annotated

import typer
from rich.table import Table

from treerm.cli.types import get_config_path, load_cli_config
from treerm.core.config import ConfigError, get_default_config, save_config
from treerm.core.paths import get_config_path as get_default_config_path
from treerm.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Inspect and initialize the configuration file.",
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    config = load_cli_config(ctx)
    path = get_config_path(ctx) or get_default_config_path()

    table = Table(
        title="Configuration",
        show_header=True,
        header_style="title",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value")

    table.add_row("dry_run", str(config.dry_run))
    table.add_row("confirm_remove_all", str(config.confirm_remove_all))
    table.add_row("protected_patterns", "\n".join(config.protected_patterns) or "-")

    console.print(table)
    source = str(path) if path.exists() else f"{path} (not found, using defaults)"
    console.print(f"[muted]Source: {source}[/muted]")


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = get_config_path(ctx) or get_default_config_path()

    if path.exists() and not force:
        print_info(f"Config already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=0)

    try:
        written = save_config(get_default_config(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {written}")
