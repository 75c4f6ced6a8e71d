"""Document model: the content buffer plus edit operations on it."""

from __future__ import annotations

from typing import Iterable, Optional

from .buffer import ContentBuffer
from .cursor import Action, Cursor
from .width import next_boundary, prev_boundary


def _is_insertable(ch: str) -> bool:
    return ch.isprintable() or ch == '\t'


class TextModel:
    """Text being edited and the cursor over it.

    Every edit operation mutates the buffer, updates the cursor position
    and wrap counter, then lets the cursor engine settle the scroll window.
    An operation either applies fully or, at a buffer boundary, does
    nothing; ``content_changed`` is only set when the text changed.
    """

    def __init__(self, cursor: Cursor, lines: Optional[Iterable[str]] = None):
        self.cursor = cursor
        self.buffer = ContentBuffer(lines)
        self.content_changed = False

    @property
    def lines(self) -> list[str]:
        return self.buffer.lines

    def set_lines(self, lines: Iterable[str]) -> None:
        """Replace the whole document and move to its start."""
        self.buffer = ContentBuffer(lines)
        self.cursor.reset()
        self.cursor.resync(self.buffer)
        self.content_changed = False

    def _settle(self, action: Action) -> None:
        self.cursor.move_cursor(action, self.buffer)
        self.cursor.scroll(action, self.buffer)

    # Navigation

    def move(self, action: Action) -> None:
        """Apply a navigation event (arrows, paging, Home/End)."""
        self._settle(action)

    def jump_to(self, row: int, column: int) -> None:
        self.cursor.jump_to(row, column, self.buffer)
        self.cursor.scroll(Action.FIND, self.buffer)

    # Editing

    def insert_text(self, text: str) -> bool:
        """Insert text at the cursor; control characters other than tab are dropped."""
        text = ''.join(ch for ch in text if _is_insertable(ch))
        if not text:
            return False
        cursor = self.cursor
        line = self.buffer[cursor.row]
        self.buffer.replace(cursor.row, line[:cursor.column] + text + line[cursor.column:])
        cursor.set_column(cursor.column + len(text))
        self.content_changed = True
        self._settle(Action.INSERT)
        return True

    def delete_char(self) -> bool:
        """Delete the character under the cursor, or join the next line."""
        cursor = self.cursor
        line = self.buffer[cursor.row]
        if cursor.column < len(line):
            end = next_boundary(line, cursor.column, cursor.measure)
            self.buffer.replace(cursor.row, line[:cursor.column] + line[end:])
        elif cursor.row < self.buffer.last_index:
            following = self.buffer.remove(cursor.row + 1)
            self.buffer.replace(cursor.row, line + following)
        else:
            return False
        cursor.set_column(cursor.column)
        self.content_changed = True
        self._settle(Action.DELETE)
        return True

    def backspace(self) -> bool:
        """Delete the character before the cursor, or join onto the previous line."""
        cursor = self.cursor
        line = self.buffer[cursor.row]
        if cursor.column > 0:
            start = prev_boundary(line, cursor.column, cursor.measure)
            self.buffer.replace(cursor.row, line[:start] + line[cursor.column:])
            cursor.set_column(start)
        elif cursor.row > 0:
            previous = self.buffer[cursor.row - 1]
            self.buffer.replace(cursor.row - 1, previous + line)
            self.buffer.remove(cursor.row)
            cursor.join_previous_line(self.buffer, len(previous))
        else:
            return False
        self.content_changed = True
        self._settle(Action.BACKSPACE)
        return True

    def split_line(self) -> bool:
        """Break the line at the cursor and move to the start of the new line."""
        cursor = self.cursor
        line = self.buffer[cursor.row]
        self.buffer.replace(cursor.row, line[:cursor.column])
        self.buffer.insert(cursor.row + 1, line[cursor.column:])
        cursor.enter_next_line(self.buffer)
        self.content_changed = True
        self._settle(Action.ENTER)
        return True
