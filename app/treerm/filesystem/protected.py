"""Protected filesystem paths that should never be deleted.

Defines the default glob patterns for entries the browser refuses to
remove, whatever the user selects.
"""

import fnmatch
import os
from collections.abc import Iterable
from pathlib import Path

# Protected filesystem path patterns (glob-style).
# Patterns starting with ~ are expanded to the user's home directory
# before matching. Patterns starting with / are matched as-is.
DEFAULT_PROTECTED_PATTERNS: tuple[str, ...] = (
    # SSH and security
    "~/.ssh",
    "~/.ssh/*",
    "~/.gnupg",
    "~/.gnupg/*",
    # treerm itself
    "~/.config/treerm",
    "~/.config/treerm/*",
)


def expand_pattern(pattern: str) -> str:
    """Expand a leading ``~`` to the user's home directory."""
    if pattern.startswith("~"):
        return str(Path.home()) + pattern[1:]
    return pattern


def is_protected_path(path: str, patterns: Iterable[str] = DEFAULT_PROTECTED_PATTERNS) -> bool:
    """Check if a filesystem path is protected and must not be deleted.

    Relative paths are made absolute against the current directory before
    comparison, so ``./.ssh`` run from the home directory is caught.

    Args:
        path: Filesystem path to check.
        patterns: Glob patterns, ``~`` expanded before matching.

    Returns:
        True if the path matches any protected pattern, False otherwise.
    """
    absolute = os.path.abspath(path)

    for pattern in patterns:
        if fnmatch.fnmatch(absolute, expand_pattern(pattern)):
            return True

    return False


def contains_protected_path(
    path: str, patterns: Iterable[str] = DEFAULT_PROTECTED_PATTERNS
) -> bool:
    """Check if a directory could hold a protected path beneath it.

    Used before recursive deletes: removing ``~`` would take ``~/.ssh``
    with it even though ``~`` itself matches no pattern. A pattern counts
    when it is deeper than ``path`` and its leading components match the
    components of ``path``.

    Args:
        path: Directory about to be deleted recursively.
        patterns: Glob patterns, ``~`` expanded before matching.

    Returns:
        True if some pattern may match an entry below ``path``.
    """
    target = Path(os.path.abspath(path)).parts

    for pattern in patterns:
        parts = Path(expand_pattern(pattern)).parts
        if len(parts) > len(target) and all(
            fnmatch.fnmatch(name, part) for name, part in zip(target, parts, strict=False)
        ):
            return True

    return False
