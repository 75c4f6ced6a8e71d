"""Test keyboard input decoding."""

import logging

import pytest

from termedit.constants import EditorConstants
from termedit.keyboard import KeyDecoder, KeyType, classify_byte, decode_bytes


class MockInput:
    """Byte source that records the timeouts it was asked to wait."""

    def __init__(self, data=b""):
        self._queue = list(data)
        self.timeouts = []

    def add(self, data):
        self._queue.extend(data)

    def read_byte(self, timeout=None):
        self.timeouts.append(timeout)
        if self._queue:
            return self._queue.pop(0)
        return None


@pytest.mark.parametrize("data,name", [
    (b'\x1b[A', 'up'),
    (b'\x1b[B', 'down'),
    (b'\x1b[C', 'right'),
    (b'\x1b[D', 'left'),
    (b'\x1b[H', 'home'),
    (b'\x1b[F', 'end'),
    (b'\x1bOA', 'up'),
    (b'\x1bOH', 'home'),
    (b'\x1bOF', 'end'),
])
def test_arrow_and_home_end_sequences(data, name):
    event = decode_bytes(data)
    assert event.key_type == KeyType.SPECIAL
    assert event.value == name
    assert event.raw == data


@pytest.mark.parametrize("digit,name", [
    ('1', 'home'),
    ('3', 'delete'),
    ('4', 'end'),
    ('5', 'page_up'),
    ('6', 'page_down'),
    ('7', 'home'),
    ('8', 'end'),
])
def test_tilde_sequences(digit, name):
    event = decode_bytes(f'\x1b[{digit}~'.encode())
    assert event.key_type == KeyType.SPECIAL
    assert event.value == name


@pytest.mark.parametrize("data,name", [
    (b'\x1b[1;5A', 'page_up'),
    (b'\x1b[1;5B', 'page_down'),
    (b'\x1b[1;2C', 'end'),
    (b'\x1b[1;5F', 'end'),
    (b'\x1b[1;3D', 'home'),
    (b'\x1b[1;5H', 'home'),
])
def test_modified_sequences_ignore_modifier(data, name):
    """Only the final letter of a modified sequence selects the key."""
    event = decode_bytes(data)
    assert event.key_type == KeyType.SPECIAL
    assert event.value == name
    assert event.raw == data


def test_lone_escape():
    event = decode_bytes(b'\x1b')
    assert event.key_type == KeyType.SPECIAL
    assert event.value == 'escape'
    assert event.raw == b'\x1b'


def test_unknown_sequence_byte_passes_through():
    event = decode_bytes(b'\x1b[Z')
    assert event.key_type == KeyType.REGULAR
    assert event.value == 'Z'
    assert event.raw == b'\x1b[Z'

    event = decode_bytes(b'\x1b[9~')
    assert event.key_type == KeyType.REGULAR
    assert event.value == '9'


def test_truncated_sequence_passes_through():
    event = decode_bytes(b'\x1b[')
    assert event.key_type == KeyType.REGULAR
    assert event.value == '['


def test_alt_letter_is_the_letter():
    event = decode_bytes(b'\x1bx')
    assert event.key_type == KeyType.REGULAR
    assert event.value == 'x'
    assert event.raw == b'\x1bx'


def test_enter_and_backspace_bytes():
    for byte in (b'\r', b'\n'):
        event = decode_bytes(byte)
        assert event.key_type == KeyType.SPECIAL
        assert event.value == 'enter'
        assert event.code == byte[0]
    for byte in (b'\x7f', b'\x08'):
        event = decode_bytes(byte)
        assert event.key_type == KeyType.SPECIAL
        assert event.value == 'backspace'
        assert event.code == byte[0]


def test_control_letters():
    event = decode_bytes(b'\x11')
    assert event.key_type == KeyType.CTRL
    assert event.value == 'q'
    assert event.code == 17

    assert decode_bytes(b'\x13').value == 's'
    assert decode_bytes(b'\x06').value == 'f'
    assert decode_bytes(b'\x01').value == 'a'


def test_plain_bytes_keep_their_code():
    event = decode_bytes(b'a')
    assert event.key_type == KeyType.REGULAR
    assert event.value == 'a'
    assert event.code == 97
    assert classify_byte(ord(' ')).value == ' '


@pytest.mark.parametrize("text", ['é', '世', '😀'])
def test_multibyte_utf8_is_one_key(text):
    data = text.encode('utf-8')
    event = decode_bytes(data)
    assert event.key_type == KeyType.REGULAR
    assert event.value == text
    assert event.raw == data


def test_nul_padding_is_skipped():
    event = decode_bytes(b'\x00\x00a')
    assert event.value == 'a'


def test_empty_input_is_no_key():
    event = decode_bytes(b'')
    assert event.key_type == KeyType.NONE
    assert event.is_none


def test_keys_are_decoded_one_per_call():
    source = MockInput(b'\x1b[Aab')
    decoder = KeyDecoder(source.read_byte)
    assert decoder.read_key().value == 'up'
    assert decoder.read_key().value == 'a'
    assert decoder.read_key().value == 'b'
    assert decoder.read_key().is_none


def test_only_first_byte_blocks():
    """Bytes after ESC are awaited with the escape timeout."""
    source = MockInput(b'\x1b[A')
    decoder = KeyDecoder(source.read_byte)
    decoder.read_key()
    assert source.timeouts[0] is None
    assert source.timeouts[1:] == [EditorConstants.ESCAPE_SEQUENCE_TIMEOUT] * 2


def test_read_error_reports_no_key(caplog):
    def failing_read(timeout=None):
        raise OSError("device gone")

    decoder = KeyDecoder(failing_read)
    with caplog.at_level(logging.ERROR):
        event = decoder.read_key()
    assert event.is_none
    assert "device gone" in caplog.text


def test_truncated_utf8_does_not_swallow_next_key():
    event = decode_bytes(b'\xc3a')
    assert event.key_type == KeyType.REGULAR
    assert event.value == 'a'
    assert '\ufffd' not in event.value


def test_truncated_utf8_keeps_following_keys_in_order():
    source = MockInput(b'\xe4\xb8\x1b[Ab')
    decoder = KeyDecoder(source.read_byte)
    assert decoder.read_key().value == 'up'
    assert decoder.read_key().value == 'b'
    assert decoder.read_key().is_none


def test_stray_continuation_byte_is_dropped():
    source = MockInput(b'\x80x')
    decoder = KeyDecoder(source.read_byte)
    event = decoder.read_key()
    assert event.is_none
    assert decoder.read_key().value == 'x'
