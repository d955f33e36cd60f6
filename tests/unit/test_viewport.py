"""Tests for Viewport navigation."""

import pytest

from jsonlogviewer.viewport import Viewport


@pytest.fixture
def viewport():
    """A 100 line file shown 10 rows at a time."""
    return Viewport(100, 10)


def assert_consistent(vp):
    """Check the cursor/offset invariant."""
    if vp.total_lines < 1:
        assert vp.cursor == 1
        assert vp.offset == 1
        return
    assert 1 <= vp.cursor <= vp.total_lines
    assert vp.offset <= vp.cursor <= vp.offset + vp.height - 1
    assert 1 <= vp.offset <= max(1, vp.total_lines - vp.height + 1)


def test_new(viewport):
    """Test the initial state."""
    assert viewport.total_lines == 100
    assert viewport.height == 10
    assert viewport.cursor == 1
    assert viewport.offset == 1


def test_new_empty():
    """Test a viewport over no lines."""
    vp = Viewport(0, 10)
    assert vp.cursor == 1
    assert vp.offset == 1


@pytest.mark.parametrize("height", [0, -5])
def test_height_floored_to_one(height):
    """Test that a non-positive height becomes a single row."""
    vp = Viewport(100, height)
    assert vp.height == 1


@pytest.mark.parametrize(
    "cursor, offset, expected_cursor, expected_offset",
    [
        (5, 1, 5, 1),
        (0, 1, 1, 1),
        (150, 1, 100, 91),
        (5, -5, 5, 1),
        (20, 1, 20, 11),
        (20, 50, 20, 20),
        (100, 100, 100, 91),
    ],
)
def test_clamp(viewport, cursor, offset, expected_cursor, expected_offset):
    """Test that placement is clamped into a consistent state."""
    viewport.set_position(cursor, offset)

    assert viewport.cursor == expected_cursor
    assert viewport.offset == expected_offset


def test_down_clamps_at_end(viewport):
    """Test moving far past the last line."""
    viewport.down(150)

    assert viewport.cursor == 100
    assert viewport.offset == 91


def test_down_up(viewport):
    """Test relative cursor movement."""
    viewport.down(5)
    assert viewport.cursor == 6
    assert viewport.offset == 1

    viewport.down(10)
    assert viewport.cursor == 16
    assert viewport.offset == 7

    viewport.up(5)
    assert viewport.cursor == 11
    assert viewport.offset == 7

    viewport.up(100)
    assert viewport.cursor == 1
    assert viewport.offset == 1


@pytest.mark.parametrize("n", [0, -3])
def test_down_up_ignore_non_positive(viewport, n):
    """Test that zero or negative counts do nothing."""
    viewport.goto(50)

    viewport.down(n)
    assert viewport.cursor == 50
    viewport.up(n)
    assert viewport.cursor == 50


def test_page_down_up(viewport):
    """Test whole screen movement."""
    viewport.set_position(5, 1)

    viewport.page_down()
    assert viewport.cursor == 11
    assert viewport.offset == 11

    viewport.page_up()
    assert viewport.cursor == 10
    assert viewport.offset == 1


def test_page_down_at_end_is_idempotent(viewport):
    """Test that paging past the end settles on the last screen."""
    for _ in range(15):
        viewport.page_down()

    assert viewport.offset == 91
    assert viewport.cursor == 100
    assert_consistent(viewport)

    viewport.page_down()
    assert viewport.offset == 91
    assert viewport.cursor == 100


def test_page_up_at_start(viewport):
    """Test paging up from the top."""
    viewport.page_up()

    assert viewport.offset == 1
    assert viewport.cursor == 10


def test_page_up_short_file():
    """Test that page up never places the cursor past the last line."""
    vp = Viewport(5, 10)
    vp.page_up()

    assert vp.cursor == 5
    assert vp.offset == 1


def test_half_page_down_up(viewport):
    """Test half screen movement."""
    viewport.set_position(5, 1)

    viewport.half_page_down()
    assert viewport.cursor == 10
    assert viewport.offset == 6

    viewport.half_page_up()
    assert viewport.cursor == 5
    assert viewport.offset == 1


def test_half_page_single_row():
    """Test that half a page is at least one line."""
    vp = Viewport(100, 1)
    vp.half_page_down()

    assert vp.cursor == 2
    assert vp.offset == 2


def test_scroll_down_up(viewport):
    """Test scrolling the view without moving the cursor."""
    viewport.set_position(5, 1)

    viewport.scroll_down(3)
    assert viewport.cursor == 5
    assert viewport.offset == 4

    viewport.scroll_up(2)
    assert viewport.cursor == 5
    assert viewport.offset == 2


def test_scroll_down_keeps_cursor_visible(viewport):
    """Test that scrolling cannot push the cursor out of view."""
    viewport.set_position(5, 1)

    viewport.scroll_down(10)

    assert viewport.cursor == 5
    assert viewport.offset == 5


def test_scroll_up_keeps_cursor_visible(viewport):
    """Test that scrolling up pulls the view back to the cursor."""
    viewport.set_position(50, 41)

    viewport.scroll_up(20)

    assert viewport.cursor == 50
    assert viewport.offset == 41


def test_goto(viewport):
    """Test absolute movement."""
    viewport.goto(50)
    assert viewport.cursor == 50
    assert viewport.is_visible(50)

    viewport.goto_top()
    assert viewport.cursor == 1
    assert viewport.offset == 1

    viewport.goto_bottom()
    assert viewport.cursor == 100
    assert viewport.offset == 91


@pytest.mark.parametrize("line, expected", [(0, 1), (-10, 1), (101, 100), (1000, 100)])
def test_goto_out_of_range(viewport, line, expected):
    """Test that goto clamps instead of failing."""
    viewport.goto(line)
    assert viewport.cursor == expected


def test_goto_line_top_middle_bottom(viewport):
    """Test H, M and L."""
    viewport.set_position(20, 20)

    viewport.goto_line_top()
    assert viewport.cursor == 20

    viewport.goto_line_middle()
    assert viewport.cursor == 25

    viewport.goto_line_bottom()
    assert viewport.cursor == 29
    assert viewport.offset == 20


def test_goto_line_bottom_short_file():
    """Test that L stops at the last line of a short file."""
    vp = Viewport(5, 10)

    vp.goto_line_bottom()
    assert vp.cursor == 5

    vp.goto_line_middle()
    assert vp.cursor == 5


@pytest.mark.parametrize(
    "percent, expected",
    [
        (0, 1),
        (-50, 1),
        (1, 1),
        (10, 10),
        (50, 50),
        (99, 99),
        (100, 100),
        (200, 100),
    ],
)
def test_jump_to_percent(viewport, percent, expected):
    """Test percentage jumps and their bounds."""
    viewport.jump_to_percent(percent)
    assert viewport.cursor == expected


def test_jump_to_percent_small_file():
    """Test that small percentages of a short file still land on line 1."""
    vp = Viewport(7, 10)

    vp.jump_to_percent(10)
    assert vp.cursor == 1

    vp.jump_to_percent(100)
    assert vp.cursor == 7


def test_jump_to_percent_monotonic():
    """Test that a higher percentage never lands on an earlier line."""
    vp = Viewport(337, 10)
    previous = 0
    for percent in range(1, 101):
        vp.jump_to_percent(percent)
        assert vp.cursor >= previous
        previous = vp.cursor
    assert previous == 337


def test_click_at(viewport):
    """Test selecting a row of the visible window."""
    viewport.set_position(10, 10)

    viewport.click_at(0)
    assert viewport.cursor == 10

    viewport.click_at(5)
    assert viewport.cursor == 15

    viewport.click_at(9)
    assert viewport.cursor == 19

    viewport.click_at(100)
    assert viewport.cursor == 19

    viewport.click_at(-3)
    assert viewport.cursor == 10


def test_click_below_last_line():
    """Test clicking empty rows under a short file."""
    vp = Viewport(3, 10)
    vp.click_at(8)

    assert vp.cursor == 3


def test_visible_range(viewport):
    """Test the inclusive visible range."""
    viewport.set_position(20, 20)
    assert viewport.visible_range() == (20, 29)

    viewport.goto_bottom()
    assert viewport.visible_range() == (91, 100)


def test_visible_range_short_file():
    """Test the visible range when the file is shorter than the view."""
    vp = Viewport(5, 10)
    assert vp.visible_range() == (1, 5)


def test_is_visible(viewport):
    """Test visibility of lines around the window."""
    viewport.set_position(20, 20)

    assert viewport.is_visible(20)
    assert viewport.is_visible(25)
    assert viewport.is_visible(29)
    assert not viewport.is_visible(19)
    assert not viewport.is_visible(30)


def test_cursor_relative(viewport):
    """Test the cursor row within the window."""
    viewport.set_position(25, 20)
    assert viewport.cursor_relative() == 5


def test_set_height(viewport):
    """Test that resizing keeps the cursor visible."""
    viewport.goto(50)

    viewport.set_height(20)
    assert viewport.height == 20
    assert viewport.is_visible(viewport.cursor)

    viewport.set_height(3)
    assert viewport.height == 3
    assert viewport.is_visible(viewport.cursor)
    assert_consistent(viewport)

    viewport.set_height(0)
    assert viewport.height == 1
    assert viewport.offset == viewport.cursor


def test_set_total_lines(viewport):
    """Test that shrinking the file clamps the cursor."""
    viewport.goto(90)

    viewport.set_total_lines(50)
    assert viewport.total_lines == 50
    assert viewport.cursor == 50
    assert viewport.offset == 41


def test_set_total_lines_from_empty():
    """Test that lines becoming available starts at the top."""
    vp = Viewport(0, 10)
    vp.down(5)
    assert vp.cursor == 1

    vp.set_total_lines(100)
    vp.down(5)
    assert vp.cursor == 6


@pytest.mark.parametrize(
    "command",
    [
        lambda vp: vp.down(5),
        lambda vp: vp.up(5),
        lambda vp: vp.page_down(),
        lambda vp: vp.page_up(),
        lambda vp: vp.half_page_down(),
        lambda vp: vp.half_page_up(),
        lambda vp: vp.scroll_down(3),
        lambda vp: vp.scroll_up(3),
        lambda vp: vp.goto(10),
        lambda vp: vp.goto_bottom(),
        lambda vp: vp.goto_line_middle(),
        lambda vp: vp.goto_line_bottom(),
        lambda vp: vp.jump_to_percent(50),
        lambda vp: vp.click_at(4),
    ],
)
def test_commands_on_empty_viewport(command):
    """Test that navigation over no lines stays pinned to line 1."""
    vp = Viewport(0, 10)
    command(vp)

    assert vp.cursor == 1
    assert vp.offset == 1


@pytest.mark.parametrize("n", [0, 1, 5, 1000])
def test_idempotent_at_bottom(viewport, n):
    """Test that moving down from the last line stays there."""
    viewport.goto_bottom()
    viewport.down(n)

    assert viewport.cursor == 100
    assert viewport.offset == 91


@pytest.mark.parametrize("n", [0, 1, 5, 1000])
def test_idempotent_at_top(viewport, n):
    """Test that moving up from the first line stays there."""
    viewport.goto_top()
    viewport.up(n)

    assert viewport.cursor == 1
    assert viewport.offset == 1


def test_invariant_holds_through_mixed_commands():
    """Test the invariant across a long sequence of mixed commands."""
    vp = Viewport(1000, 37)
    commands = [
        lambda: vp.down(13),
        vp.page_down,
        vp.half_page_down,
        lambda: vp.scroll_down(7),
        vp.goto_line_bottom,
        vp.page_up,
        lambda: vp.up(40),
        vp.half_page_up,
        lambda: vp.scroll_up(11),
        vp.goto_line_middle,
        lambda: vp.click_at(30),
        lambda: vp.jump_to_percent(73),
        lambda: vp.set_height(5),
        lambda: vp.set_total_lines(600),
        lambda: vp.set_height(80),
    ]
    for _ in range(20):
        for command in commands:
            command()
            assert_consistent(vp)


def test_navigation_sequence():
    """Test a typical session over a 1000 line file."""
    vp = Viewport(1000, 20)

    vp.down(5)
    assert vp.cursor == 6
    vp.up(2)
    assert vp.cursor == 4
    vp.goto(100)
    assert vp.cursor == 100
    vp.down()
    assert vp.cursor == 101
    vp.up()
    assert vp.cursor == 100
    vp.half_page_down()
    assert vp.cursor == 110
    vp.half_page_up()
    assert vp.cursor == 100
    vp.goto_bottom()
    assert vp.cursor == 1000
    assert vp.offset == 981
    vp.goto_top()
    assert vp.cursor == 1
    assert vp.offset == 1


def test_state(viewport):
    """Test the state summary string."""
    viewport.set_position(25, 20)

    assert viewport.state() == "cursor=25 offset=20 visible=[20,29] total=100 height=10"
    assert repr(viewport) == f"Viewport({viewport.state()})"
