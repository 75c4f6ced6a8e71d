"""Display width of codepoints and lines.

All column arithmetic in the editor goes through this module so that wide
(East Asian) and zero-width (combining) codepoints are measured the same way
by the cursor engine and by the screen compositor.
"""

from __future__ import annotations

import functools
from typing import Callable

from wcwidth import wcwidth

# A width-measurement capability: codepoint -> rendered columns
WidthFunc = Callable[[str], int]


@functools.lru_cache(maxsize=4096)
def codepoint_width(ch: str) -> int:
    """Return the number of terminal columns ``ch`` occupies.

    Control codepoints (for which wcwidth reports -1) are shown as a
    one-column placeholder by the compositor, so they measure 1.
    """
    w = wcwidth(ch)
    if w < 0:
        return 1
    return w


def display_width(text: str, measure: WidthFunc = codepoint_width) -> int:
    """Sum of the rendered widths of every codepoint in ``text``."""
    return sum(measure(ch) for ch in text)


def wrap_count(line: str, columns: int, measure: WidthFunc = codepoint_width) -> int:
    """Number of additional physical rows ``line`` needs beyond its first."""
    if columns <= 0:
        return 0
    return max(display_width(line, measure) - 1, 0) // columns


def next_boundary(line: str, index: int, measure: WidthFunc = codepoint_width) -> int:
    """Index just past the character starting at ``index``.

    A character is one codepoint followed by any zero-width codepoints
    (combining marks), so the pair is stepped over as a single unit.
    """
    if index >= len(line):
        return len(line)
    index += 1
    while index < len(line) and measure(line[index]) == 0:
        index += 1
    return index


def prev_boundary(line: str, index: int, measure: WidthFunc = codepoint_width) -> int:
    """Index where the character ending at ``index`` starts."""
    if index <= 0:
        return 0
    index = min(index, len(line)) - 1
    while index > 0 and measure(line[index]) == 0:
        index -= 1
    return index
