"""treerm - Interactive file remover.

Browse a directory tree in the terminal, select files and directories,
and delete them without scanning the whole tree upfront.
"""

__version__ = "0.1.0"
