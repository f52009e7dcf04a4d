"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from treerm import __version__
from treerm.cli.commands import browse, config, show
from treerm.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="treerm",
    help="Interactive file remover.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"treerm version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich when verbose output is on."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the config file (default: ~/.config/treerm/config.toml).",
        ),
    ] = None,
) -> None:
    """treerm - Interactive file remover.

    Browse a directory, mark files and directories, and delete them.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path
    configure_logging(verbose)


# Register commands
app.command(name="browse")(browse.browse)
app.command(name="show")(show.show)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
