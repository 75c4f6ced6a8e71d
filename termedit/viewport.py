"""Pure wrap arithmetic over a buffer.

The cursor engine keeps its wrap counters incrementally; everything here
recomputes the same quantities from scratch. The compositor lays pages out
with these functions and the tests use them to check the engine's counters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .width import WidthFunc, codepoint_width, display_width, wrap_count


def wrap_between(lines: Sequence[str], start: int, end: int, columns: int,
                 measure: WidthFunc = codepoint_width) -> int:
    """Signed sum of wrap counts of lines between two rows.

    Positive when ``end > start`` (sum over ``[start, end)``), negative when
    moving backwards (minus the sum over ``[end, start)``).
    """
    if end >= start:
        return sum(wrap_count(lines[i], columns, measure) for i in range(start, end))
    return -sum(wrap_count(lines[i], columns, measure) for i in range(end, start))


def cursor_extent(line: str, column: int, columns: int,
                  measure: WidthFunc = codepoint_width) -> int:
    """Rows below the first row of ``line`` that the line or cursor reach.

    Normally the wrap count of the line; one more when the cursor sits just
    past a line that exactly fills the last row.
    """
    col_row = display_width(line[:column], measure) // columns
    return max(wrap_count(line, columns, measure), col_row)


@dataclass(frozen=True)
class PageLayout:
    """How many lines fit on a page starting at a given top row."""
    top: int
    drawn_lines: int  # Lines drawn completely
    used_rows: int  # Physical rows those lines occupy
    page_wrap: int  # Extra rows from wrapping of the drawn lines
    overflow: bool  # A line did not fit and the page was truncated
    at_end: bool  # The last line of the buffer is on the page


def layout_page(lines: Sequence[str], top: int, rows: int, columns: int,
                measure: WidthFunc = codepoint_width) -> PageLayout:
    """Lay lines out from ``top`` into ``rows`` physical rows."""
    used = 0
    page_wrap = 0
    drawn = 0
    overflow = False
    for index in range(top, len(lines)):
        wrap = wrap_count(lines[index], columns, measure)
        if used + wrap + 1 > rows:
            overflow = used < rows
            break
        used += wrap + 1
        page_wrap += wrap
        drawn += 1
        if used >= rows:
            break
    return PageLayout(top=top, drawn_lines=drawn, used_rows=used,
                      page_wrap=page_wrap, overflow=overflow,
                      at_end=top + drawn >= len(lines))


@dataclass(frozen=True)
class Viewport:
    """Snapshot of the scroll window around the cursor."""
    scroll_top: int
    cursor_row: int
    cursor_wrap: int  # Wrap rows of lines [0, cursor_row)
    hidden_wrap: int  # Wrap rows of lines [0, scroll_top)
    column_row: int  # Row offset of the cursor inside its own line

    @property
    def physical_row(self) -> int:
        """Screen row (0-based) the cursor is drawn on."""
        return (self.cursor_row - self.scroll_top + self.cursor_wrap
                - self.hidden_wrap + self.column_row)


def compute_viewport(lines: Sequence[str], scroll_top: int, cursor_row: int,
                     column: int, columns: int,
                     measure: WidthFunc = codepoint_width) -> Viewport:
    """Recompute every wrap counter from the buffer contents."""
    line = lines[cursor_row]
    return Viewport(
        scroll_top=scroll_top,
        cursor_row=cursor_row,
        cursor_wrap=wrap_between(lines, 0, cursor_row, columns, measure),
        hidden_wrap=wrap_between(lines, 0, scroll_top, columns, measure),
        column_row=display_width(line[:column], measure) // columns,
    )
