"""Rich rendering of the browser state.

Turns enriched tree rows into styled lines with tree connector guides,
type glyphs and selection highlighting, and wraps them in the bordered
browser panel.
"""

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from treerm.core.actions import Action
from treerm.core.controller import Browser
from treerm.filesystem.models import NodeKind
from treerm.tree.models import EnrichedRow
from treerm.utils.formatting import printable

TYPE_GLYPHS: dict[NodeKind, str] = {
    NodeKind.DIRECTORY: "\U0001f4c1",  # File folder
    NodeKind.FILE: "\U0001f4c4",  # Page facing up
    NodeKind.SYMLINK: "\U0001f517",  # Link
}

HIGHLIGHT_SYMBOL = "▶ "
TITLE = " Interactive file remover "

# (label, key, action) triples for the help bar
HELP_KEYS: tuple[tuple[str, str, Action], ...] = (
    ("Move", "<Up/Down>", Action.MOVE_DOWN),
    ("Open dir", "<Enter>", Action.EXPAND),
    ("Select", "<Space>", Action.TOGGLE),
    ("Remove", "<r>", Action.REMOVE),
    ("Remove all", "<Shift+R>", Action.REMOVE_SELECTED),
    ("Quit", "<q>", Action.EXIT),
)


def row_prefix(row: EnrichedRow) -> str:
    """Tree connector guides for a row: one "│ " per ancestor, then the branch."""
    branch = "└─" if row.is_last_sibling else "├─"
    return "│ " * row.depth + branch


def render_row(row: EnrichedRow, *, hovered: bool = False) -> Text:
    """Render a single tree row.

    Args:
        row: Enriched row to render.
        hovered: Whether the cursor is on this row.

    Returns:
        Styled Rich Text line.
    """
    text = Text(no_wrap=True, overflow="ellipsis")
    text.append(HIGHLIGHT_SYMBOL if hovered else " " * len(HIGHLIGHT_SYMBOL), style="tree.cursor")
    text.append(row_prefix(row), style="tree.guide")
    text.append(f" {TYPE_GLYPHS[row.kind]} ")
    name_style = "tree.selected" if row.is_selected else f"tree.{row.kind.value}"
    text.append(printable(row.name), style=name_style)
    if hovered:
        text.stylize("tree.cursor", len(HIGHLIGHT_SYMBOL))
    return text


def visible_window(total: int, cursor: int, height: int) -> range:
    """Compute which rows fit on screen while keeping the cursor visible.

    Args:
        total: Number of rows.
        cursor: Hovered row index.
        height: Number of rows that fit.

    Returns:
        Range of row indices to draw.
    """
    if height <= 0 or total <= height:
        return range(total)
    start = min(max(cursor - height // 2, 0), total - height)
    return range(start, start + height)


def render_rows(rows: list[EnrichedRow], cursor: int, height: int | None = None) -> list[Text]:
    """Render the rows that fit in ``height`` lines around the cursor."""
    window = visible_window(len(rows), cursor, height if height is not None else len(rows))
    return [render_row(rows[i], hovered=i == cursor) for i in window]


def render_status(browser: Browser, prompt: str | None = None) -> Text:
    """Status line: a pending prompt, else the last action's outcome."""
    if prompt is not None:
        return Text(printable(prompt), style="warning")

    status = browser.status
    if status is None:
        line = Text(f"{len(browser.selection)} selected", style="muted")
    elif status.failed:
        line = Text(f"Error: {printable(status.error or '')}", style="status.error")
    else:
        line = Text(printable(status.message or ""), style="status.ok")

    if browser.dry_run:
        line.append("  [dry-run]", style="warning")
    return line


def render_help() -> Text:
    """Key binding help shown in the panel border."""
    text = Text()
    for label, key, action in HELP_KEYS:
        text.append(f" {label}: ")
        text.append(key, style="key.danger" if action.is_destructive else "key")
    text.append(" ")
    return text


def render_browser(
    browser: Browser,
    height: int | None = None,
    prompt: str | None = None,
) -> RenderableType:
    """Render the whole browser panel.

    Args:
        browser: Browser state to draw.
        height: Terminal height. Rows are windowed to fit when given.
        prompt: Optional confirmation prompt replacing the status line.

    Returns:
        Rich renderable for the browser screen.
    """
    rows = browser.rows()
    cursor = browser.cursor.clamp(len(rows))
    # Two border lines, a blank line and the status line
    row_height = max(height - 4, 1) if height is not None else None

    lines = render_rows(rows, cursor, row_height)
    body = Group(*lines, Text(""), render_status(browser, prompt))
    return Panel(
        body,
        title=Text(TITLE, style="title"),
        subtitle=render_help(),
        border_style="border",
        height=height,
    )
