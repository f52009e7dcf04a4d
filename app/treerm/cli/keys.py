"""Raw keyboard input and key-to-action mapping."""

import os
import select
import sys

try:
    import termios
    import tty

    _HAS_TERMIOS = True
except ImportError:
    _HAS_TERMIOS = False

from treerm.core.actions import Action

# Escape sequences sent by arrow keys
_ESCAPE_SEQUENCES: dict[str, str] = {
    "[A": "up",
    "[B": "down",
    "OA": "up",
    "OB": "down",
}

# Single control characters
_CONTROL_KEYS: dict[str, str] = {
    "\r": "enter",
    "\n": "enter",
    " ": "space",
    "\x03": "ctrl+c",
    "\x12": "ctrl+r",
    "\x1b": "escape",
}

KEYMAP: dict[str, Action] = {
    "up": Action.MOVE_UP,
    "k": Action.MOVE_UP,
    "down": Action.MOVE_DOWN,
    "j": Action.MOVE_DOWN,
    "enter": Action.EXPAND,
    "space": Action.TOGGLE,
    "r": Action.REMOVE,
    "R": Action.REMOVE_SELECTED,
    "ctrl+r": Action.REMOVE_SELECTED,
    "q": Action.EXIT,
    "ctrl+c": Action.EXIT,
}


def decode_key(data: str) -> str:
    """Translate the raw characters of one key press into a key name.

    Args:
        data: Characters read for a single key press.

    Returns:
        Key name such as "up", "enter" or "q". Unknown sequences are
        returned unchanged.
    """
    if data.startswith("\x1b") and len(data) > 1:
        return _ESCAPE_SEQUENCES.get(data[1:3], data)
    return _CONTROL_KEYS.get(data, data)


def key_to_action(key: str) -> Action | None:
    """Map a key name to a browser action, or None if unbound."""
    return KEYMAP.get(key)


def read_key() -> str:
    """Read a single keypress without requiring Enter.

    Falls back to input() if the terminal doesn't support raw mode.

    Returns:
        Decoded key name.
    """
    if not _HAS_TERMIOS:
        return decode_key(input("> ")[:1] or "\n")
    try:
        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            data = os.read(fd, 1).decode(errors="replace")
            if data == "\x1b":
                # Arrow keys arrive as a burst; a lone escape does not
                ready, _, _ = select.select([fd], [], [], 0.05)
                if ready:
                    data += os.read(fd, 2).decode(errors="replace")
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
        return decode_key(data)
    except (termios.error, OSError):
        return decode_key(input("> ")[:1] or "\n")
