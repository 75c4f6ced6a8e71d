"""Tests for inserting text."""

from termedit.cursor import Action, Cursor
from termedit.model import TextModel


def make_model(lines, rows=5, columns=10):
    return TextModel(Cursor(rows, columns), lines)


def test_insert_at_cursor():
    m = make_model(["hllo"])
    m.move(Action.RIGHT)
    assert m.insert_text("e")
    assert m.buffer == ["hello"]
    assert m.cursor.column == 2
    assert m.content_changed


def test_insert_multiple_codepoints():
    m = make_model([""])
    m.insert_text("世界")
    assert m.buffer == ["世界"]
    assert m.cursor.column == 2
    assert m.cursor.physical_column(m.buffer) == 4


def test_control_characters_are_not_inserted():
    m = make_model(["ab"])
    assert not m.insert_text("\x01")
    assert not m.content_changed
    m.insert_text("x\x02y")
    assert m.buffer == ["xyab"]


def test_tab_is_inserted():
    m = make_model([""])
    m.insert_text("\t")
    assert m.buffer == ["\t"]


def test_insert_past_width_wraps_cursor():
    m = make_model(["0" * 9])
    m.move(Action.END)
    m.insert_text("ab")
    assert m.cursor.column == 11
    assert m.cursor.cursor_wrap == 0
    assert m.cursor.physical_row(m.buffer) == 1
    assert m.cursor.physical_column(m.buffer) == 1


def test_insert_keeps_column_cache():
    m = make_model(["", "abcdef"])
    m.insert_text("abc")
    m.move(Action.DOWN)
    assert m.cursor.column == 3


def test_set_lines_resets_cursor():
    m = make_model(["a", "b", "c"])
    m.move(Action.DOWN)
    m.insert_text("x")
    m.set_lines(["new"])
    assert m.buffer == ["new"]
    assert (m.cursor.row, m.cursor.column, m.cursor.scroll_top) == (0, 0, 0)
    assert not m.content_changed
