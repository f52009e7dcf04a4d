"""Browse command implementation.

Runs the interactive file remover on a directory.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.live import Live

from treerm.cli.keys import key_to_action, read_key
from treerm.cli.render import render_browser
from treerm.cli.types import load_cli_config
from treerm.core.actions import Action, ActionResult
from treerm.core.controller import Browser
from treerm.utils.formatting import console, print_error, print_info


def run_browser(
    browser: Browser,
    *,
    screen: Console,
    read: Callable[[], str] = read_key,
    confirm_remove_all: bool = True,
) -> None:
    """Run the render / read key / apply loop until the user exits.

    Args:
        browser: Browser state to drive.
        screen: Console to draw on.
        read: Blocking key reader returning decoded key names.
        confirm_remove_all: Ask before removing all selected entries.
    """

    def draw(prompt: str | None = None) -> None:
        live.update(render_browser(browser, screen.size.height, prompt), refresh=True)

    with Live(
        render_browser(browser, screen.size.height),
        console=screen,
        screen=True,
        auto_refresh=False,
        transient=True,
    ) as live:
        while not browser.exit_requested:
            action = key_to_action(read())
            if action is None:
                continue

            if action is Action.REMOVE_SELECTED and confirm_remove_all and len(browser.selection):
                draw(f"Remove {len(browser.selection)} selected entries? [y/N]")
                if read() not in ("y", "Y"):
                    browser.status = ActionResult(
                        action=Action.REMOVE_SELECTED, success=True, message="Cancelled"
                    )
                    draw()
                    continue

            browser.dispatch(action)
            draw()


def browse(
    ctx: typer.Context,
    root: Annotated[
        Path,
        typer.Argument(help="Directory to browse."),
    ] = Path("."),
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted without deleting."),
    ] = False,
) -> None:
    """Browse a directory, select entries, and remove them."""
    config = load_cli_config(ctx)
    if dry_run:
        config = config.model_copy(update={"dry_run": True})

    if not root.is_dir():
        print_error(f"Not a directory: {root}")
        raise typer.Exit(code=1)

    browser = Browser.from_config(str(root), config)
    result = browser.expand()
    if result.failed:
        print_error(f"Cannot read {root}: {result.error}")
        raise typer.Exit(code=1)

    run_browser(browser, screen=console, confirm_remove_all=config.confirm_remove_all)
    print_info("Bye.")
