"""Terminal drivers: raw mode, window size and byte-level I/O.

Two implementations share one interface. ``PosixTerminal`` uses Blessed's
raw mode (termios) and a self-pipe for SIGWINCH; ``WindowsTerminal``
switches the console to VT input/output through the console-mode API.
``create_terminal`` picks one for the running platform.
"""

import io
import logging
import os
import signal
import sys
import time
from abc import ABC, abstractmethod
from contextlib import ExitStack, contextmanager
from typing import Iterator, Optional

import blessed

from .constants import EditorConstants
from .errors import TerminalSetupError
from .width import codepoint_width

_IS_WINDOWS = os.name == "nt"

if not _IS_WINDOWS:
    import select
    import termios

logger = logging.getLogger(__name__)


class TerminalDriver(ABC):
    """What the editor needs from a terminal."""

    term: blessed.Terminal

    @abstractmethod
    def enable_raw_mode(self) -> None:
        """Switch to raw mode and the alternate screen.

        Raises TerminalSetupError when there is no terminal to drive.
        """

    @abstractmethod
    def disable_raw_mode(self) -> None:
        """Undo ``enable_raw_mode``; safe to call more than once."""

    @abstractmethod
    def read_byte(self, timeout: Optional[float] = None) -> Optional[int]:
        """Next input byte, or None on timeout, end of input or a resize."""

    @abstractmethod
    def consume_resize(self) -> bool:
        """True once after the window size changed."""

    @property
    @abstractmethod
    def at_eof(self) -> bool:
        """Input has been closed."""

    def window_size(self) -> tuple[int, int]:
        """Return ``(rows, columns)`` of the whole window."""
        rows, columns = self.term.height, self.term.width
        if not rows or not columns:
            raise TerminalSetupError("Cannot determine the terminal size")
        return rows, columns

    def measure_codepoint_width(self, ch: str) -> int:
        return codepoint_width(ch)

    def write_frame(self, data: str) -> None:
        stream = self.term.stream
        stream.write(data)
        stream.flush()

    @contextmanager
    def raw_mode(self) -> Iterator["TerminalDriver"]:
        """Raw mode for the duration of the block, restored on every exit path."""
        self.enable_raw_mode()
        try:
            yield self
        finally:
            self.disable_raw_mode()


class PosixTerminal(TerminalDriver):
    """Terminal driver for POSIX systems."""

    def __init__(self, term: Optional[blessed.Terminal] = None, fd: Optional[int] = None):
        self.term = term or blessed.Terminal()
        self._fd = fd
        self._stack: Optional[ExitStack] = None
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None
        self._original_winch_handler = None
        self._resize_pending = False
        self._eof = False

    @property
    def at_eof(self) -> bool:
        return self._eof

    @property
    def fd(self) -> int:
        """Input file descriptor, stdin unless one was given."""
        if self._fd is None:
            try:
                self._fd = sys.stdin.fileno()
            except (AttributeError, ValueError, io.UnsupportedOperation) as e:
                raise TerminalSetupError(f"stdin has no file descriptor: {e}") from e
        return self._fd

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal (SIGWINCH)."""
        if self._resize_pipe_w is not None:
            # Write to pipe to wake up select()
            os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def enable_raw_mode(self) -> None:
        if not os.isatty(self.fd):
            raise TerminalSetupError("stdin is not a terminal")
        if not self.term.is_a_tty:
            raise TerminalSetupError("stdout is not a terminal")
        stack = ExitStack()
        try:
            stack.enter_context(self.term.raw())
            stack.enter_context(self.term.fullscreen())
        except (termios.error, OSError) as e:
            stack.close()
            logger.error("Cannot enter raw mode: %s", e)
            raise TerminalSetupError(f"Cannot enter raw mode: {e}") from e
        self._stack = stack
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        self._original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)

    def disable_raw_mode(self) -> None:
        if self._stack is None:
            return
        signal.signal(signal.SIGWINCH, self._original_winch_handler)
        for fd in (self._resize_pipe_r, self._resize_pipe_w):
            if fd is not None:
                os.close(fd)
        self._resize_pipe_r = self._resize_pipe_w = None
        try:
            self.write_frame(self.term.clear + self.term.home)
        except OSError as e:
            logger.warning("Could not clear the screen on exit: %s", e)
        stack, self._stack = self._stack, None
        stack.close()

    def read_byte(self, timeout: Optional[float] = None) -> Optional[int]:
        # Wait for input on stdin or the resize pipe
        fds = [self.fd]
        if self._resize_pipe_r is not None:
            fds.append(self._resize_pipe_r)
        ready, _, _ = select.select(fds, [], [], timeout)
        if self._resize_pipe_r is not None and self._resize_pipe_r in ready:
            os.read(self._resize_pipe_r, 1024)
            self._resize_pending = True
            if self.fd not in ready:
                return None
        if not ready:
            return None
        data = os.read(self.fd, 1)
        if not data:
            self._eof = True
            return None
        return data[0]

    def consume_resize(self) -> bool:
        pending, self._resize_pending = self._resize_pending, False
        return pending


class WindowsTerminal(TerminalDriver):
    """Terminal driver for the Windows console (VT sequences enabled)."""

    STD_INPUT_HANDLE = -10
    STD_OUTPUT_HANDLE = -11
    ENABLE_PROCESSED_INPUT = 0x0001
    ENABLE_LINE_INPUT = 0x0002
    ENABLE_ECHO_INPUT = 0x0004
    ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004
    ENABLE_VIRTUAL_TERMINAL_INPUT = 0x0200
    POLL_INTERVAL = 0.01

    def __init__(self, term: Optional[blessed.Terminal] = None):
        self.term = term or blessed.Terminal()
        self._kernel32 = None
        self._stdin_handle = None
        self._stdout_handle = None
        self._old_in_mode = None
        self._old_out_mode = None
        self._pending = bytearray()
        self._last_size: Optional[tuple[int, int]] = None
        self._resize_pending = False

    @property
    def at_eof(self) -> bool:
        return False

    def enable_raw_mode(self) -> None:
        import ctypes
        from ctypes import wintypes

        kernel32 = ctypes.windll.kernel32
        self._stdin_handle = kernel32.GetStdHandle(self.STD_INPUT_HANDLE)
        self._stdout_handle = kernel32.GetStdHandle(self.STD_OUTPUT_HANDLE)

        # Save original console modes
        old_out = wintypes.DWORD()
        old_in = wintypes.DWORD()
        if not kernel32.GetConsoleMode(self._stdout_handle, ctypes.byref(old_out)):
            raise TerminalSetupError("stdout is not a console")
        if not kernel32.GetConsoleMode(self._stdin_handle, ctypes.byref(old_in)):
            raise TerminalSetupError("stdin is not a console")

        new_out = old_out.value | self.ENABLE_VIRTUAL_TERMINAL_PROCESSING
        new_in = (old_in.value | self.ENABLE_VIRTUAL_TERMINAL_INPUT) & ~(
            self.ENABLE_ECHO_INPUT | self.ENABLE_LINE_INPUT | self.ENABLE_PROCESSED_INPUT
        )
        if not kernel32.SetConsoleMode(self._stdout_handle, new_out):
            raise TerminalSetupError("Console does not support VT output")
        if not kernel32.SetConsoleMode(self._stdin_handle, new_in):
            kernel32.SetConsoleMode(self._stdout_handle, old_out)
            raise TerminalSetupError("Console does not support VT input")

        self._kernel32 = kernel32
        self._old_in_mode = old_in
        self._old_out_mode = old_out
        self._last_size = self.window_size()
        self.write_frame(self.term.enter_fullscreen)

    def disable_raw_mode(self) -> None:
        if self._kernel32 is None:
            return
        self.write_frame(self.term.clear + self.term.home + self.term.exit_fullscreen)
        self._kernel32.SetConsoleMode(self._stdout_handle, self._old_out_mode)
        self._kernel32.SetConsoleMode(self._stdin_handle, self._old_in_mode)
        self._kernel32 = None

    def _check_resize(self) -> bool:
        size = self.window_size()
        if size != self._last_size:
            self._last_size = size
            self._resize_pending = True
            return True
        return False

    def read_byte(self, timeout: Optional[float] = None) -> Optional[int]:
        import msvcrt

        if self._pending:
            return self._pending.pop(0)
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if msvcrt.kbhit():
                ch = msvcrt.getwch()
                if '\ud800' <= ch <= '\udbff':
                    # High surrogate: the low half follows
                    ch = (ch + msvcrt.getwch()).encode('utf-16', 'surrogatepass').decode('utf-16')
                self._pending.extend(ch.encode('utf-8', errors='replace'))
                return self._pending.pop(0)
            if self._check_resize():
                return None
            if deadline is not None and time.monotonic() >= deadline:
                return None
            time.sleep(self.POLL_INTERVAL)

    def consume_resize(self) -> bool:
        pending, self._resize_pending = self._resize_pending, False
        return pending


def create_terminal(term: Optional[blessed.Terminal] = None) -> TerminalDriver:
    """Return the driver for this platform."""
    if _IS_WINDOWS:
        return WindowsTerminal(term)
    return PosixTerminal(term)
