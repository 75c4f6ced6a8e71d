"""Incremental search over the document lines."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .model import TextModel


class Direction(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class SearchNavigator:
    """Finds occurrences of a query and jumps the cursor to them.

    A hit moves the cursor with ``TextModel.jump_to`` so the match line
    becomes the top of the screen, like a page jump.
    """

    def __init__(self, model: TextModel):
        self.model = model
        self.query = ""
        self.match_found = False
        self.match_column = 0
        self.match_row = 0

    @property
    def match(self) -> Optional[tuple[int, int]]:
        """``(column, row)`` of the current match, if any."""
        if not self.match_found:
            return None
        return (self.match_column, self.match_row)

    def _hit(self, row: int, column: int) -> tuple[int, int]:
        self.match_found = True
        self.match_row = row
        self.match_column = column
        self.model.jump_to(row, column)
        return (column, row)

    def find_first(self, query: str) -> Optional[tuple[int, int]]:
        """Scan from the first line for ``query``; the first line containing it wins."""
        self.query = query
        self.match_found = False
        if not query:
            return None
        for row, line in enumerate(self.model.buffer):
            column = line.find(query)
            if column >= 0:
                return self._hit(row, column)
        return None

    def find_next(self, direction: Direction) -> Optional[tuple[int, int]]:
        """Find the next occurrence after (or before) the current match.

        Wraps around the ends of the document. When the only occurrence is
        the current match, the search comes back to it.
        """
        if not self.query:
            return None
        if not self.match_found:
            return self.find_first(self.query)

        lines = self.model.buffer
        count = len(lines)
        row = min(self.match_row, count - 1)
        line = lines[row]

        if direction == Direction.FORWARD:
            column = line.find(self.query, self.match_column + 1)
            if column >= 0:
                return self._hit(row, column)
            # Every other line once, then the start of the match line again
            for step in range(1, count + 1):
                r = (row + step) % count
                column = lines[r].find(self.query)
                if column >= 0:
                    return self._hit(r, column)
        else:
            column = line.rfind(self.query, 0, self.match_column + len(self.query) - 1)
            if column >= 0:
                return self._hit(row, column)
            for step in range(1, count + 1):
                r = (row - step) % count
                column = lines[r].rfind(self.query)
                if column >= 0:
                    return self._hit(r, column)

        self.match_found = False
        return None
