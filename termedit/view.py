"""Screen composition: what one frame of the editor looks like."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .constants import EditorConstants
from .cursor import Cursor
from .viewport import layout_page
from .width import WidthFunc, codepoint_width


def printable(text: str) -> str:
    """Replace control characters with placeholders of the same width (1)."""
    if text.isprintable():
        return text
    out = []
    for ch in text:
        if ch == '\t':
            out.append(' ')
        elif unicodedata.category(ch) == 'Cc':
            out.append(EditorConstants.CONTROL_GLYPH)
        else:
            out.append(ch)
    return ''.join(out)


def fit_width(text: str, width: int, measure: WidthFunc = codepoint_width) -> str:
    """Truncate or right-pad ``text`` to exactly ``width`` terminal columns."""
    out = []
    used = 0
    for ch in text:
        w = measure(ch)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return ''.join(out) + ' ' * (width - used)


@dataclass
class Frame:
    """One screen's worth of output.

    ``lines`` holds one entry per drawn line: a buffer line (which may
    wrap over several rows), the filler glyph or the overflow glyph.
    The cursor position is 1-based.
    """
    lines: list[str] = field(default_factory=list)
    status: str = ""
    cursor_row: int = 1
    cursor_col: int = 1
    used_rows: int = 0
    page_wrap: int = 0


class ScreenCompositor:
    """Builds frames from the buffer and cursor and serializes them."""

    def __init__(self, measure: WidthFunc = codepoint_width):
        self.measure = measure

    def diagnostics(self, cursor: Cursor) -> str:
        return (f"R: {cursor.used_rows} cY: {cursor.row} oY: {cursor.scroll_top} "
                f"pw: {cursor.page_wrap} cw: {cursor.cursor_wrap} "
                f"hw: {cursor.hidden_wrap} cd: {cursor.hidden_wrap_cooldown}")

    def compose(self, lines: Sequence[str], cursor: Cursor,
                message: Optional[str] = None, cursor_on_status: bool = False) -> Frame:
        """Lay out the page at the cursor's scroll top.

        Rows past the end of the buffer get the filler glyph. When a line
        does not fit in the rows left, the rest of the page is filled with
        the overflow glyph instead of drawing a partial line.
        """
        rows, columns = cursor.rows, cursor.columns
        layout = layout_page(lines, cursor.scroll_top, rows, columns, self.measure)
        cursor.record_page(layout)

        frame = Frame(used_rows=layout.used_rows, page_wrap=layout.page_wrap)
        for index in range(layout.top, layout.top + layout.drawn_lines):
            frame.lines.append(printable(lines[index]))
        remaining = rows - layout.used_rows
        if layout.overflow:
            frame.lines.extend([EditorConstants.OVERFLOW_GLYPH] * remaining)
        elif layout.at_end:
            frame.lines.extend([EditorConstants.FILLER_GLYPH] * remaining)

        status = message if message is not None else self.diagnostics(cursor)
        frame.status = fit_width(printable(status), columns, self.measure)

        if cursor_on_status:
            status_width = sum(self.measure(ch) for ch in printable(status))
            frame.cursor_row = rows + 1
            frame.cursor_col = min(status_width, columns - 1) + 1
        else:
            frame.cursor_row = min(max(cursor.physical_row(lines), 0), rows - 1) + 1
            frame.cursor_col = cursor.physical_column(lines) + 1
        return frame

    def serialize(self, frame: Frame, term) -> str:
        """Render ``frame`` as terminal output using ``term``'s capabilities."""
        parts = [term.home]
        for line in frame.lines:
            parts.append(line + term.clear_eol + '\r\n')
        parts.append(term.reverse + frame.status + term.normal)
        parts.append(term.move_yx(frame.cursor_row - 1, frame.cursor_col - 1))
        return ''.join(parts)
