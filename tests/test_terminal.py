"""Tests for the terminal drivers."""

import io
import os
import sys
from unittest.mock import Mock

import pytest

from termedit.errors import TerminalSetupError
from termedit.terminal import PosixTerminal, TerminalDriver, create_terminal

posix_only = pytest.mark.skipif(os.name == "nt", reason="POSIX terminal driver")


class RecordingDriver(TerminalDriver):
    def __init__(self):
        self.term = Mock()
        self.calls = []

    def enable_raw_mode(self):
        self.calls.append('enable')

    def disable_raw_mode(self):
        self.calls.append('disable')

    def read_byte(self, timeout=None):
        return None

    def consume_resize(self):
        return False

    @property
    def at_eof(self):
        return True


def test_raw_mode_is_released_on_exception():
    driver = RecordingDriver()
    with pytest.raises(ValueError):
        with driver.raw_mode():
            assert driver.calls == ['enable']
            raise ValueError("fail")
    assert driver.calls == ['enable', 'disable']


def test_window_size_from_blessed():
    driver = RecordingDriver()
    driver.term.height = 24
    driver.term.width = 80
    assert driver.window_size() == (24, 80)


def test_unknown_window_size_is_fatal():
    driver = RecordingDriver()
    driver.term.height = 0
    driver.term.width = 80
    with pytest.raises(TerminalSetupError):
        driver.window_size()


def test_write_frame_flushes():
    driver = RecordingDriver()
    driver.write_frame("xyz")
    driver.term.stream.write.assert_called_once_with("xyz")
    driver.term.stream.flush.assert_called_once()


def test_measure_codepoint_width():
    driver = RecordingDriver()
    assert driver.measure_codepoint_width('a') == 1
    assert driver.measure_codepoint_width('世') == 2


@posix_only
def test_posix_read_byte_from_pipe():
    r, w = os.pipe()
    try:
        os.write(w, b"ab")
        terminal = PosixTerminal(term=Mock(), fd=r)
        assert terminal.read_byte(0) == ord('a')
        assert terminal.read_byte(0) == ord('b')
        # Nothing ready within the timeout
        assert terminal.read_byte(0) is None
        assert not terminal.at_eof
        os.close(w)
        w = None
        assert terminal.read_byte(0) is None
        assert terminal.at_eof
    finally:
        os.close(r)
        if w is not None:
            os.close(w)


@posix_only
def test_posix_raw_mode_requires_a_terminal():
    r, w = os.pipe()
    try:
        terminal = PosixTerminal(term=Mock(), fd=r)
        with pytest.raises(TerminalSetupError):
            terminal.enable_raw_mode()
        # Nothing to undo
        terminal.disable_raw_mode()
    finally:
        os.close(r)
        os.close(w)


@posix_only
def test_posix_resize_wakes_reader():
    r, w = os.pipe()
    try:
        terminal = PosixTerminal(term=Mock(), fd=r)
        terminal._resize_pipe_r, terminal._resize_pipe_w = os.pipe()
        try:
            terminal._handle_resize(None, None)
            assert terminal.read_byte(None) is None
            assert terminal.consume_resize()
            assert not terminal.consume_resize()
        finally:
            os.close(terminal._resize_pipe_r)
            os.close(terminal._resize_pipe_w)
    finally:
        os.close(r)
        os.close(w)


@posix_only
def test_create_terminal_picks_posix_driver():
    assert isinstance(create_terminal(Mock()), PosixTerminal)


@posix_only
def test_posix_driver_does_not_touch_stdin_until_used(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    terminal = PosixTerminal(term=Mock())
    with pytest.raises(TerminalSetupError):
        terminal.enable_raw_mode()


@posix_only
def test_posix_driver_without_stdin_is_a_setup_error(monkeypatch):
    monkeypatch.setattr(sys, "stdin", None)
    terminal = PosixTerminal(term=Mock())
    with pytest.raises(TerminalSetupError):
        terminal.read_byte(0)
