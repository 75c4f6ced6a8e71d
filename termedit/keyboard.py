"""Keyboard input decoding from raw terminal bytes.

The decoder pulls bytes from a terminal one at a time and returns exactly
one logical key per call. Escape sequences for the cursor keys are
recognized; unknown sequences degrade to the raw byte instead of failing.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

from .constants import EditorConstants

logger = logging.getLogger(__name__)

ESC = 0x1B

# Reads one byte, waiting at most ``timeout`` seconds (None blocks).
# Returns None on timeout or end of input.
ByteReader = Callable[[Optional[float]], Optional[int]]


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"  # Printable text
    CTRL = "ctrl"  # Control code (Ctrl-<letter>)
    SPECIAL = "special"  # Named key (arrows, paging, enter, ...)
    NONE = "none"  # No key: end of input, timeout or read error


@dataclass
class KeyEvent:
    """Represents a decoded keyboard event."""
    key_type: KeyType
    value: str  # Text for REGULAR, letter for CTRL, key name for SPECIAL
    raw: bytes = b""  # Bytes consumed for this key
    code: Optional[int] = None  # The byte value for single-byte keys

    @property
    def is_none(self) -> bool:
        return self.key_type == KeyType.NONE


def no_key(raw: bytes = b"") -> KeyEvent:
    return KeyEvent(key_type=KeyType.NONE, value="", raw=raw)


# ESC [ <letter>  and  ESC O <letter>
_CSI_FINAL = {
    ord('A'): 'up',
    ord('B'): 'down',
    ord('C'): 'right',
    ord('D'): 'left',
    ord('F'): 'end',
    ord('H'): 'home',
}

# ESC [ <digit> ~
_CSI_TILDE = {
    ord('1'): 'home',
    ord('2'): 'insert',
    ord('3'): 'delete',
    ord('4'): 'end',
    ord('5'): 'page_up',
    ord('6'): 'page_down',
    ord('7'): 'home',
    ord('8'): 'end',
}

# ESC [ <digit> ; <modifier> <letter>
_CSI_MODIFIED = {
    ord('A'): 'page_up',
    ord('B'): 'page_down',
    ord('C'): 'end',
    ord('D'): 'home',
    ord('F'): 'end',
    ord('H'): 'home',
}


def classify_byte(byte: int, raw: Optional[bytes] = None) -> KeyEvent:
    """Map a single byte below 0x80 to a key event.

    Every byte keeps its value in ``code``; CR/LF become enter and
    DEL/BS become backspace, other control codes become Ctrl-<letter>.
    """
    raw = bytes([byte]) if raw is None else raw
    if byte in (10, 13):
        return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=raw, code=byte)
    if byte in (8, 127):
        return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=raw, code=byte)
    if byte == ESC:
        return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=raw, code=byte)
    if 1 <= byte <= 26:
        return KeyEvent(key_type=KeyType.CTRL, value=chr(ord('a') + byte - 1), raw=raw, code=byte)
    if byte < 32:
        # Ctrl-@, Ctrl-\, Ctrl-], Ctrl-^, Ctrl-_
        return KeyEvent(key_type=KeyType.CTRL, value=chr(byte + 64), raw=raw, code=byte)
    return KeyEvent(key_type=KeyType.REGULAR, value=chr(byte), raw=raw, code=byte)


def _utf8_length(lead: int) -> int:
    if 0xC0 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF7:
        return 4
    return 1


class KeyDecoder:
    """Turns a byte stream into key events, one key per ``read_key`` call."""

    def __init__(self, read_byte: ByteReader,
                 escape_timeout: float = EditorConstants.ESCAPE_SEQUENCE_TIMEOUT):
        self._read_byte = read_byte
        self.escape_timeout = escape_timeout
        self._pending: Optional[int] = None  # Byte read past the end of the last key

    def read_key(self) -> KeyEvent:
        """Block until one key is available and return it.

        Never raises: a failed read is logged and reported as a NONE event
        so the caller can decide whether to retry or stop.
        """
        try:
            return self._read_key()
        except OSError as e:
            logger.error("Error reading input: %s", e)
            return no_key()

    def _read_key(self) -> KeyEvent:
        if self._pending is not None:
            first, self._pending = self._pending, None
        else:
            first = self._read_byte(None)
        # NUL bytes are padding in the read buffer
        while first == 0:
            first = self._read_byte(None)
        if first is None:
            return no_key()
        if first == ESC:
            return self._read_escape()
        if first < 0x80:
            return classify_byte(first)
        return self._read_utf8(first, b"")

    def _next(self, raw: bytearray) -> Optional[int]:
        byte = self._read_byte(self.escape_timeout)
        if byte is not None:
            raw.append(byte)
        return byte

    def _verbatim(self, byte: int, raw: bytearray) -> KeyEvent:
        """Pass an unrecognized byte of a sequence through as its own key."""
        if byte >= 0x80:
            return self._read_utf8(byte, bytes(raw[:-1]))
        return classify_byte(byte, bytes(raw))

    def _read_escape(self) -> KeyEvent:
        raw = bytearray([ESC])
        second = self._next(raw)
        if second is None:
            # Lone ESC
            return classify_byte(ESC)

        if second == ord('['):
            third = self._next(raw)
            if third is None:
                return self._verbatim(second, raw)
            if third in _CSI_FINAL:
                return self._special(_CSI_FINAL[third], raw)
            if third in _CSI_TILDE:
                fourth = self._next(raw)
                if fourth is None:
                    return self._verbatim(third, raw)
                if fourth == ord('~'):
                    return self._special(_CSI_TILDE[third], raw)
                if fourth == ord(';'):
                    self._next(raw)  # Modifier is read and discarded
                    final = self._next(raw)
                    if final is None:
                        return self._verbatim(fourth, raw)
                    if final in _CSI_MODIFIED:
                        return self._special(_CSI_MODIFIED[final], raw)
                    return self._verbatim(final, raw)
                return self._verbatim(fourth, raw)
            return self._verbatim(third, raw)

        if second == ord('O'):
            third = self._next(raw)
            if third is None:
                return self._verbatim(second, raw)
            if third in _CSI_FINAL:
                return self._special(_CSI_FINAL[third], raw)
            return self._verbatim(third, raw)

        # Alt-<key> and anything else: the byte after ESC
        return self._verbatim(second, raw)

    @staticmethod
    def _special(name: str, raw: bytearray) -> KeyEvent:
        return KeyEvent(key_type=KeyType.SPECIAL, value=name, raw=bytes(raw))

    def _read_utf8(self, lead: int, prefix: bytes) -> KeyEvent:
        """Accumulate a multi-byte UTF-8 sequence into one text payload."""
        data = bytearray([lead])
        needed = _utf8_length(lead) - 1
        while needed > 0:
            byte = self._read_byte(self.escape_timeout)
            if byte is None:
                break
            if byte == 0:
                continue
            if not 0x80 <= byte <= 0xBF:
                # Truncated sequence: the byte starts the next key
                self._pending = byte
                break
            data.append(byte)
            needed -= 1
        text = bytes(data).decode('utf-8', errors='replace')
        text = ''.join(ch for ch in text if ch.isprintable() and ch != '\ufffd')
        raw = prefix + bytes(data)
        if not text:
            if self._pending is not None:
                return self._read_key()
            return no_key(raw)
        return KeyEvent(key_type=KeyType.REGULAR, value=text, raw=raw)


def decode_bytes(data: Iterable[int]) -> KeyEvent:
    """Decode the first key contained in ``data`` (e.g. one read buffer)."""
    it = iter(data)

    def read_byte(timeout: Optional[float]) -> Optional[int]:
        del timeout  # Unused: the buffer is already complete
        return next(it, None)

    return KeyDecoder(read_byte).read_key()
