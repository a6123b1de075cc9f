"""Test cursor movement, editing and scrolling in the viewport controller."""

import pytest

from slessing.document import Document
from slessing.errors import OutOfBoundsError
from slessing.viewport import ViewportController


def create_viewport(lines, rows=24, cols=80, cursor=(0, 0)):
    viewport = ViewportController(Document(lines), rows=rows, cols=cols)
    viewport.set_cursor(*cursor)
    return viewport


def assert_invariants(viewport):
    doc = viewport.document
    cursor = viewport.cursor
    assert doc.line_count() >= 1
    assert 0 <= cursor.line < doc.line_count()
    assert 0 <= cursor.column <= doc.line_length(cursor.line)
    row, col = viewport.screen_cursor
    assert 0 <= row < viewport.rows
    assert 0 <= col < viewport.cols


# --- edit scenarios ---

def test_insert_at_end_of_line():
    viewport = create_viewport(["abc"], cursor=(0, 3))
    viewport.insert_character("d")
    assert viewport.document.lines == ["abcd"]
    assert (viewport.cursor.line, viewport.cursor.column) == (0, 4)


def test_join_with_previous():
    viewport = create_viewport(["ab", "cd"], cursor=(1, 0))
    assert viewport.join_with_previous() is True
    assert viewport.document.lines == ["abcd"]
    assert (viewport.cursor.line, viewport.cursor.column) == (0, 2)


def test_join_on_first_line_is_noop():
    viewport = create_viewport(["ab", "cd"], cursor=(0, 0))
    assert viewport.join_with_previous() is False
    assert viewport.document.lines == ["ab", "cd"]


def test_split_line():
    viewport = create_viewport(["hello"], cursor=(0, 2))
    viewport.split_line()
    assert viewport.document.lines == ["he", "llo"]
    assert (viewport.cursor.line, viewport.cursor.column) == (1, 0)


@pytest.mark.parametrize("lines,cursor", [
    (["hello"], (0, 2)),
    (["hello"], (0, 0)),
    (["hello"], (0, 5)),
    (["one", "two words", ""], (1, 3)),
])
def test_split_then_join_restores(lines, cursor):
    viewport = create_viewport(lines, cursor=cursor)
    viewport.split_line()
    viewport.join_with_previous()
    assert viewport.document.lines == lines
    assert (viewport.cursor.line, viewport.cursor.column) == cursor


def test_delete_character_before():
    viewport = create_viewport(["abc"], cursor=(0, 2))
    assert viewport.delete_character_before() is True
    assert viewport.document.lines == ["ac"]
    assert viewport.cursor.column == 1


def test_delete_character_before_at_column_zero_is_noop():
    viewport = create_viewport(["abc"], cursor=(0, 0))
    assert viewport.delete_character_before() is False
    assert viewport.document.lines == ["abc"]


def test_backspace_joins_at_line_start():
    viewport = create_viewport(["ab", "cd"], cursor=(1, 0))
    assert viewport.backspace() is True
    assert viewport.document.lines == ["abcd"]


def test_backspace_on_empty_document_keeps_one_line():
    viewport = create_viewport([""])
    assert viewport.backspace() is False
    assert viewport.document.lines == [""]
    assert_invariants(viewport)


def test_set_cursor_out_of_bounds():
    viewport = create_viewport(["abc"])
    with pytest.raises(OutOfBoundsError):
        viewport.set_cursor(0, 4)
    with pytest.raises(OutOfBoundsError):
        viewport.set_cursor(1, 0)


def test_edit_with_corrupt_cursor_raises():
    viewport = create_viewport(["abc"], cursor=(0, 3))
    viewport.document.replace_all(["a"])
    with pytest.raises(OutOfBoundsError):
        viewport.insert_character("x")


# --- movement ---

def test_vertical_moves_clamp_column():
    viewport = create_viewport(["long line", "ab", "another long one"], cursor=(0, 8))
    viewport.move_down()
    assert (viewport.cursor.line, viewport.cursor.column) == (1, 2)
    viewport.move_down()
    assert (viewport.cursor.line, viewport.cursor.column) == (2, 2)


def test_vertical_moves_stop_at_document_edges():
    viewport = create_viewport(["a", "b"])
    viewport.move_up()
    assert viewport.cursor.line == 0
    viewport.move_down()
    viewport.move_down()
    assert viewport.cursor.line == 1


def test_horizontal_moves_do_not_wrap():
    viewport = create_viewport(["ab", "cd"], cursor=(1, 0))
    viewport.move_left()
    assert (viewport.cursor.line, viewport.cursor.column) == (1, 0)
    viewport.move_line_end()
    viewport.move_right()
    assert (viewport.cursor.line, viewport.cursor.column) == (1, 2)


def test_word_right():
    viewport = create_viewport(["hello world test"])
    viewport.word_right()
    assert viewport.cursor.column == 5
    viewport.word_right()
    assert viewport.cursor.column == 11
    viewport.word_right()
    assert viewport.cursor.column == 16
    viewport.word_right()
    assert (viewport.cursor.line, viewport.cursor.column) == (0, 16)


def test_word_left():
    viewport = create_viewport(["hello world test"], cursor=(0, 16))
    viewport.word_left()
    assert viewport.cursor.column == 11
    viewport.word_left()
    assert viewport.cursor.column == 5
    viewport.word_left()
    assert viewport.cursor.column == 0
    viewport.word_left()
    assert viewport.cursor.column == 0


def test_word_jumps_never_leave_the_line():
    viewport = create_viewport(["first", "second"], cursor=(1, 0))
    viewport.word_left()
    assert (viewport.cursor.line, viewport.cursor.column) == (1, 0)
    viewport.set_cursor(0, 5)
    viewport.word_right()
    assert (viewport.cursor.line, viewport.cursor.column) == (0, 5)


def test_word_jumps_treat_only_space_as_boundary():
    viewport = create_viewport(["foo.bar\tbaz qux"])
    viewport.word_right()
    assert viewport.cursor.column == 11


def test_home_and_end():
    viewport = create_viewport(["hello"], cursor=(0, 2))
    viewport.move_line_end()
    assert viewport.cursor.column == 5
    viewport.move_line_start()
    assert viewport.cursor.column == 0


def test_goto_line_clamps():
    viewport = create_viewport(["a", "bb", "ccc"], rows=2)
    viewport.goto_line(99)
    assert viewport.cursor.line == 2
    viewport.goto_line(-5)
    assert viewport.cursor.line == 0
    assert_invariants(viewport)


# --- scrolling ---

def test_move_down_scrolls_past_bottom_row():
    lines = [f"line {i}" for i in range(10)]
    viewport = create_viewport(lines, rows=3)
    for _ in range(5):
        viewport.move_down()
        assert_invariants(viewport)
    assert viewport.cursor.line == 5
    assert viewport.row_offset == 3
    assert viewport.screen_cursor == (2, 0)


def test_move_up_scrolls_back():
    lines = [f"line {i}" for i in range(10)]
    viewport = create_viewport(lines, rows=3, cursor=(9, 0))
    assert viewport.row_offset == 7
    for _ in range(9):
        viewport.move_up()
        assert_invariants(viewport)
    assert viewport.row_offset == 0


def test_horizontal_scroll_follows_cursor():
    viewport = create_viewport(["x" * 30], cols=10)
    viewport.move_line_end()
    assert viewport.col_offset == 21
    assert viewport.screen_cursor == (0, 9)
    viewport.move_line_start()
    assert viewport.col_offset == 0


def test_typing_past_right_edge_scrolls():
    viewport = create_viewport([""], cols=5)
    for ch in "abcdefgh":
        viewport.insert_character(ch)
        assert_invariants(viewport)
    assert viewport.col_offset == 4
    assert viewport.visible_lines() == [(0, "efgh")]


def test_page_down_and_up():
    lines = [str(i) for i in range(50)]
    viewport = create_viewport(lines, rows=10)
    viewport.page_down()
    assert viewport.cursor.line == 10
    assert viewport.row_offset == 10
    assert_invariants(viewport)
    viewport.page_up()
    assert viewport.cursor.line == 0
    assert viewport.row_offset == 0


def test_page_down_near_end_stays_in_document():
    lines = [str(i) for i in range(15)]
    viewport = create_viewport(lines, rows=10)
    viewport.page_down()
    viewport.page_down()
    assert viewport.cursor.line == 14
    assert_invariants(viewport)


def test_resize_keeps_cursor_visible():
    lines = [str(i) for i in range(30)]
    viewport = create_viewport(lines, rows=20, cursor=(19, 0))
    viewport.resize(5, 80)
    assert_invariants(viewport)
    assert viewport.screen_cursor[0] == 4


def test_reset_returns_to_origin():
    lines = [str(i) for i in range(30)]
    viewport = create_viewport(lines, rows=5, cursor=(25, 1))
    viewport.reset(["new"])
    assert viewport.document.lines == ["new"]
    assert (viewport.row_offset, viewport.col_offset) == (0, 0)
    assert (viewport.cursor.line, viewport.cursor.column) == (0, 0)


def test_visible_lines_window():
    lines = [f"line {i}" for i in range(10)]
    viewport = create_viewport(lines, rows=3, cursor=(4, 0))
    assert [i for i, _ in viewport.visible_lines()] == [2, 3, 4]


def test_cursor_property_is_a_copy():
    viewport = create_viewport(["abc"])
    viewport.cursor.column = 3
    assert viewport.cursor.column == 0
