"""Cursor over the flattened tree rows."""


class Cursor:
    """Index into the flattened tree that wraps around and never goes stale.

    Every method takes the current number of rows, since scans and
    removals change it between two key presses.

    Attributes:
        index: Current row index.
    """

    def __init__(self, index: int = 0) -> None:
        self.index = max(index, 0)

    def __repr__(self) -> str:
        return f"Cursor(index={self.index})"

    def move_down(self, length: int) -> int:
        """Move to the next row, wrapping to the first one."""
        if length <= 0:
            self.index = 0
        else:
            self.index = (self.clamp(length) + 1) % length
        return self.index

    def move_up(self, length: int) -> int:
        """Move to the previous row, wrapping to the last one."""
        if length <= 0:
            self.index = 0
        else:
            self.index = (self.clamp(length) - 1) % length
        return self.index

    def clamp(self, length: int) -> int:
        """Pull the index back into ``[0, length)``.

        An empty sequence clamps to 0.
        """
        if length <= 0:
            self.index = 0
        elif self.index >= length:
            self.index = length - 1
        elif self.index < 0:
            self.index = 0
        return self.index
