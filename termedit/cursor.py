"""Cursor position and scroll window over wrapped lines.

Every event is handled in two passes: ``move_cursor`` updates the logical
position and ``cursor_wrap``, then ``scroll`` reacts to the new position
using the scroll window that was in place before the move.

Wrap counters are absolute. ``cursor_wrap`` is the number of extra
physical rows taken by the lines above the cursor and ``hidden_wrap`` the
same for the lines above ``scroll_top``; their difference is what the
visible part of the screen above the cursor adds to the row count.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Sequence

from .constants import EditorConstants
from .viewport import PageLayout, compute_viewport, cursor_extent, layout_page, wrap_between
from .width import WidthFunc, codepoint_width, display_width, next_boundary, prev_boundary, wrap_count

logger = logging.getLogger(__name__)


class Action(Enum):
    """Events the cursor engine reacts to."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    DELETE = "delete"
    BACKSPACE = "backspace"
    ENTER = "enter"
    INSERT = "insert"
    FIND = "find"


class Cursor:
    """Logical cursor plus the scroll window that keeps it on screen.

    ``rows`` is the number of text rows (the status line excluded) and
    ``columns`` the terminal width. Positions are ``column`` (codepoint
    offset in the line) and ``row`` (line index).
    """

    def __init__(self, rows: int, columns: int, measure: WidthFunc = codepoint_width):
        self.rows = max(rows, 1)
        self.columns = max(columns, 1)
        self.measure = measure
        self.row = 0
        self.column = 0
        self.column_cache = 0  # Column to return to on vertical moves
        self.scroll_top = 0
        self.cursor_wrap = 0
        self.hidden_wrap = 0
        self.hidden_wrap_cooldown = 0
        # Filled in from the last page layout
        self.page_wrap = 0
        self.used_rows = 0

    def __repr__(self) -> str:
        return (f"Cursor(column={self.column}, row={self.row}, top={self.scroll_top}, "
                f"cw={self.cursor_wrap}, hw={self.hidden_wrap})")

    # --- helpers -------------------------------------------------------

    def _wrap(self, line: str) -> int:
        return wrap_count(line, self.columns, self.measure)

    def _wrap_between(self, lines: Sequence[str], start: int, end: int) -> int:
        return wrap_between(lines, start, end, self.columns, self.measure)

    def _snap(self, line: str, column: int) -> int:
        """Clamp ``column`` into ``line`` and off any combining mark."""
        column = max(0, min(column, len(line)))
        while 0 < column < len(line) and self.measure(line[column]) == 0:
            column -= 1
        return column

    def set_column(self, column: int) -> None:
        """Place the cursor on a column and remember it for vertical moves."""
        self.column = column
        self.column_cache = column

    def display_column(self, lines: Sequence[str]) -> int:
        """Rendered width of the line prefix before the cursor."""
        return display_width(lines[self.row][:self.column], self.measure)

    def physical_row(self, lines: Sequence[str]) -> int:
        """Screen row (0-based) the cursor is drawn on."""
        return (self.row - self.scroll_top + self.cursor_wrap - self.hidden_wrap
                + self.display_column(lines) // self.columns)

    def physical_column(self, lines: Sequence[str]) -> int:
        return self.display_column(lines) % self.columns

    def _cursor_bottom(self, lines: Sequence[str]) -> int:
        """Screen row of the last physical row the cursor line (or cursor) uses."""
        extent = cursor_extent(lines[self.row], self.column, self.columns, self.measure)
        return (self.row - self.scroll_top + self.cursor_wrap - self.hidden_wrap + extent)

    def record_page(self, layout: PageLayout) -> None:
        """Remember the layout of the page last drawn."""
        self.page_wrap = layout.page_wrap
        self.used_rows = layout.used_rows

    # --- pass 1: cursor move ------------------------------------------

    def _move_vertical(self, lines: Sequence[str], target: int) -> None:
        target = max(0, min(target, len(lines) - 1))
        self.cursor_wrap += self._wrap_between(lines, self.row, target)
        self.row = target

    def move_cursor(self, action: Action, lines: Sequence[str]) -> None:
        """Update ``(column, row)`` and ``cursor_wrap`` for a navigation event.

        Edit events are applied to the buffer (and the cursor) by the text
        model beforehand; for them this only re-clamps the column.
        """
        if len(lines) == 0:
            return
        line = lines[self.row]

        if action == Action.UP:
            self._move_vertical(lines, self.row - 1)
        elif action == Action.DOWN:
            self._move_vertical(lines, self.row + 1)
        elif action == Action.LEFT:
            if self.column > 0:
                self.set_column(prev_boundary(line, self.column, self.measure))
            elif self.row > 0:
                self._move_vertical(lines, self.row - 1)
                self.set_column(len(lines[self.row]))
        elif action == Action.RIGHT:
            if self.column < len(line):
                self.set_column(next_boundary(line, self.column, self.measure))
            elif self.row < len(lines) - 1:
                self._move_vertical(lines, self.row + 1)
                self.set_column(0)
        elif action == Action.HOME:
            self.set_column(0)
        elif action == Action.END:
            self.set_column(len(line))
        elif action == Action.PAGE_DOWN:
            self._move_vertical(lines, self._page_down_target(lines))
        elif action == Action.PAGE_UP:
            self._move_vertical(lines, self._page_up_target(lines))

        self.column = self._snap(lines[self.row], self.column_cache)

    def _page_down_target(self, lines: Sequence[str]) -> int:
        layout = layout_page(lines, self.scroll_top, self.rows, self.columns, self.measure)
        self.record_page(layout)
        last = len(lines) - 1
        # One line of overlap unless the page already shows the last line
        k = 1 if layout.at_end else EditorConstants.PAGE_SCROLL_OFFSET
        target = self.scroll_top + layout.used_rows - layout.page_wrap - k
        return max(min(self.scroll_top + 1, last), min(target, last))

    def _page_up_target(self, lines: Sequence[str]) -> int:
        if self.scroll_top == 0:
            return 0
        if self.scroll_top >= len(lines) - 1:
            return self.scroll_top - 1
        return self.scroll_top + EditorConstants.PAGE_SCROLL_OFFSET - 1

    def jump_to(self, row: int, column: int, lines: Sequence[str]) -> None:
        """Move directly to a position (search hits); pair with ``scroll(Action.FIND)``."""
        if len(lines) == 0:
            return
        self._move_vertical(lines, row)
        self.set_column(self._snap(lines[self.row], column))

    # --- hooks used by edit operations ----------------------------------

    def enter_next_line(self, lines: Sequence[str]) -> None:
        """The current line was split; continue at the start of the next one."""
        self.cursor_wrap += self._wrap(lines[self.row])
        self.row += 1
        self.set_column(0)

    def join_previous_line(self, lines: Sequence[str], join_column: int) -> None:
        """The current line was appended to the previous one at ``join_column``."""
        self.row -= 1
        # The joined line's prefix is exactly the previous line before the join
        self.cursor_wrap -= self._wrap(lines[self.row][:join_column])
        self.set_column(join_column)
        if self.scroll_top > self.row:
            # The top line was merged into the line above it
            self.scroll_top = self.row
            self.hidden_wrap = self.cursor_wrap
            self.hidden_wrap_cooldown = 0

    # --- pass 2: scroll -----------------------------------------------

    def scroll(self, action: Action, lines: Sequence[str]) -> None:
        """Bring the scroll window in line with the new cursor position."""
        if len(lines) == 0:
            return
        if action == Action.PAGE_DOWN:
            self._jump_scroll(lines)
        elif action == Action.PAGE_UP:
            self._page_up_scroll(lines)
        elif action == Action.FIND:
            self._jump_scroll(lines)
        else:
            self.handle_arrow_up_scroll(lines)
        self.handle_arrow_down_scroll(lines)

    def handle_arrow_up_scroll(self, lines: Sequence[str]) -> None:
        if self.row < self.scroll_top:
            self.hidden_wrap += self._wrap_between(lines, self.scroll_top, self.row)
            self.scroll_top = self.row
            self.hidden_wrap_cooldown = 0

    def handle_arrow_down_scroll(self, lines: Sequence[str]) -> None:
        overflow = self._cursor_bottom(lines) - (self.rows - 1)
        if overflow <= 0:
            if self.hidden_wrap_cooldown > 0:
                self.hidden_wrap_cooldown -= 1
            return
        freed = 0
        while freed < overflow and self.scroll_top < self.row:
            wrap = self._wrap(lines[self.scroll_top])
            self.hidden_wrap += wrap
            self.scroll_top += 1
            freed += wrap + 1
        self.hidden_wrap_cooldown = max(freed - overflow, 0)
        logger.debug("Scrolled down to %d (freed %d rows for %d)",
                     self.scroll_top, freed, overflow)

    def _jump_scroll(self, lines: Sequence[str]) -> None:
        """Put the cursor line at the top of the screen."""
        self.hidden_wrap += self._wrap_between(lines, self.scroll_top, self.row)
        self.scroll_top = self.row
        self.hidden_wrap_cooldown = 0

    def _page_up_scroll(self, lines: Sequence[str]) -> None:
        if self.row < self.scroll_top:
            self._jump_scroll(lines)
        span = self._cursor_bottom(lines) + 1
        while self.scroll_top > 0:
            wrap = self._wrap(lines[self.scroll_top - 1])
            if span + wrap + 1 > self.rows:
                break
            self.scroll_top -= 1
            self.hidden_wrap -= wrap
            span += wrap + 1
        self.hidden_wrap_cooldown = 0

    # --- resynchronization ------------------------------------------

    def resync(self, lines: Sequence[str], rows: Optional[int] = None,
               columns: Optional[int] = None) -> None:
        """Recompute all counters from scratch (after a resize or a new buffer)."""
        if rows is not None:
            self.rows = max(rows, 1)
        if columns is not None:
            self.columns = max(columns, 1)
        if len(lines) == 0:
            return
        self.row = max(0, min(self.row, len(lines) - 1))
        self.column = self._snap(lines[self.row], self.column)
        self.scroll_top = max(0, min(self.scroll_top, self.row))
        viewport = compute_viewport(lines, self.scroll_top, self.row, self.column,
                                    self.columns, self.measure)
        self.cursor_wrap = viewport.cursor_wrap
        self.hidden_wrap = viewport.hidden_wrap
        self.hidden_wrap_cooldown = 0
        self.handle_arrow_down_scroll(lines)

    def save_position(self) -> tuple[int, ...]:
        return (self.row, self.column, self.column_cache, self.scroll_top,
                self.cursor_wrap, self.hidden_wrap)

    def restore_position(self, position: tuple[int, ...]) -> None:
        """Go back to a saved position; the buffer must not have changed since."""
        (self.row, self.column, self.column_cache, self.scroll_top,
         self.cursor_wrap, self.hidden_wrap) = position
        self.hidden_wrap_cooldown = 0

    def reset(self) -> None:
        """Back to the start of the document."""
        self.row = 0
        self.set_column(0)
        self.scroll_top = 0
        self.cursor_wrap = 0
        self.hidden_wrap = 0
        self.hidden_wrap_cooldown = 0
