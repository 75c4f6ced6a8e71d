"""Ordered sequence of text lines edited by the editor."""

from typing import Iterable, Iterator, Optional


class ContentBuffer:
    """Lines of a document.

    At least one line always exists; an empty document is a single empty
    line. Lines are only added or removed through ``insert``/``remove`` so
    the invariant can be kept here.
    """

    def __init__(self, lines: Optional[Iterable[str]] = None):
        self._lines: list[str] = list(lines) if lines is not None else []
        if not self._lines:
            self._lines.append("")

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, index: int) -> str:
        return self._lines[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __eq__(self, other):
        if isinstance(other, ContentBuffer):
            return self._lines == other._lines
        if isinstance(other, list):
            return self._lines == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"ContentBuffer({self._lines!r})"

    @property
    def lines(self) -> list[str]:
        """A copy of the lines."""
        return list(self._lines)

    @property
    def last_index(self) -> int:
        return len(self._lines) - 1

    def replace(self, index: int, text: str) -> None:
        self._lines[index] = text

    def insert(self, index: int, text: str) -> None:
        self._lines.insert(index, text)

    def remove(self, index: int) -> str:
        """Remove and return line ``index``; the last remaining line is emptied instead."""
        if len(self._lines) == 1:
            removed = self._lines[0]
            self._lines[0] = ""
            return removed
        return self._lines.pop(index)
