"""Tests for PageUp/PageDown over long documents."""

from termedit.cursor import Action, Cursor
from termedit.model import TextModel
from termedit.viewport import compute_viewport


def make_model(lines, rows=5, columns=10):
    return TextModel(Cursor(rows, columns), lines)


def assert_counters(m):
    c = m.cursor
    expected = compute_viewport(m.buffer, c.scroll_top, c.row, c.column, c.columns)
    assert (c.cursor_wrap, c.hidden_wrap) == (expected.cursor_wrap, expected.hidden_wrap)


def test_page_down_keeps_overlap():
    m = make_model([str(i) for i in range(20)])
    m.move(Action.PAGE_DOWN)
    # Five lines on screen: the cursor lands two lines above the page end
    assert m.cursor.row == 3
    assert m.cursor.scroll_top == 3

    m.move(Action.PAGE_DOWN)
    assert m.cursor.row == 6
    assert m.cursor.scroll_top == 6
    assert_counters(m)


def test_page_up_walks_top_back():
    m = make_model([str(i) for i in range(20)])
    m.move(Action.PAGE_DOWN)
    m.move(Action.PAGE_DOWN)

    m.move(Action.PAGE_UP)
    assert m.cursor.row == 7
    assert m.cursor.scroll_top == 3
    assert m.cursor.physical_row(m.buffer) == 4
    assert_counters(m)


def test_page_up_at_top_goes_to_first_line():
    m = make_model([str(i) for i in range(20)])
    m.move(Action.DOWN)
    m.move(Action.DOWN)
    m.move(Action.PAGE_UP)
    assert m.cursor.row == 0
    assert m.cursor.scroll_top == 0


def test_page_down_reaches_last_line():
    m = make_model([str(i) for i in range(20)])
    for _ in range(10):
        m.move(Action.PAGE_DOWN)
        assert_counters(m)
    assert m.cursor.row == 19
    assert m.cursor.scroll_top == 19

    # At the very end the cursor steps back one line
    m.move(Action.PAGE_UP)
    assert m.cursor.row == 18
    assert m.cursor.scroll_top == 14
    assert_counters(m)


def test_page_down_counts_wrapped_rows():
    m = make_model(["0" * 25] + ["x"] * 10)
    m.move(Action.PAGE_DOWN)
    assert m.cursor.row == 1
    assert m.cursor.scroll_top == 1
    assert m.cursor.cursor_wrap == 2
    assert m.cursor.hidden_wrap == 2
    assert_counters(m)


def test_page_moves_keep_column():
    m = make_model(["abcdef"] * 20)
    for _ in range(4):
        m.move(Action.RIGHT)
    m.move(Action.PAGE_DOWN)
    assert m.cursor.column == 4
    m.move(Action.PAGE_UP)
    assert m.cursor.column == 4


def test_paging_single_line_document():
    m = make_model(["only"])
    m.move(Action.PAGE_DOWN)
    assert (m.cursor.row, m.cursor.scroll_top) == (0, 0)
    m.move(Action.PAGE_UP)
    assert (m.cursor.row, m.cursor.scroll_top) == (0, 0)
