"""Viewport and cursor navigation with vim-style motions."""

from typing import Tuple


class Viewport:
    """
    A scrollable window over a sequence of lines, with a cursor.

    Tracks the total line count, the number of visible rows, the selected
    line (cursor) and the first visible line (offset). Line numbers are
    1-based. Every mutator ends by clamping, so the cursor is always inside
    [1, total_lines] and inside the visible window. Invalid input is clamped
    to the nearest valid state rather than rejected.
    """

    def __init__(self, total_lines: int, height: int):
        """
        Initialize a Viewport with the first line selected.

        Args:
            total_lines: Number of navigable lines
            height: Number of visible rows (floored to 1)
        """
        self._total_lines = total_lines
        self._height = max(1, height)
        self._cursor = 1
        self._offset = 1
        self._clamp()

    @property
    def total_lines(self) -> int:
        return self._total_lines

    @property
    def height(self) -> int:
        return self._height

    @property
    def cursor(self) -> int:
        """The selected line."""
        return self._cursor

    @property
    def offset(self) -> int:
        """The first visible line."""
        return self._offset

    def set_height(self, height: int):
        """Update the number of visible rows."""
        self._height = max(1, height)
        self._clamp()

    def set_total_lines(self, total_lines: int):
        """Update the total line count, e.g. after a reload."""
        self._total_lines = total_lines
        self._clamp()

    def set_position(self, cursor: int, offset: int):
        """Place cursor and offset directly, then clamp them."""
        self._cursor = cursor
        self._offset = offset
        self._clamp()

    def _clamp(self):
        """Restore the cursor/offset invariant."""
        if self._total_lines < 1:
            self._cursor = 1
            self._offset = 1
            return

        self._cursor = min(max(self._cursor, 1), self._total_lines)

        # Scroll so the cursor is visible
        if self._cursor < self._offset:
            self._offset = self._cursor
        if self._cursor >= self._offset + self._height:
            self._offset = max(1, self._cursor - self._height + 1)

        max_offset = max(1, self._total_lines - self._height + 1)
        self._offset = min(max(self._offset, 1), max_offset)

    def cursor_relative(self) -> int:
        """0-based row of the cursor within the visible window."""
        return self._cursor - self._offset

    def visible_range(self) -> Tuple[int, int]:
        """First and last visible line, inclusive."""
        end = min(self._offset + self._height - 1, self._total_lines)
        return self._offset, end

    def is_visible(self, line: int) -> bool:
        start, end = self.visible_range()
        return start <= line <= end

    def down(self, n: int = 1):
        """Move the cursor down n lines."""
        if n < 1:
            return
        self._cursor += n
        self._clamp()

    def up(self, n: int = 1):
        """Move the cursor up n lines."""
        if n < 1:
            return
        self._cursor -= n
        self._clamp()

    def page_down(self):
        """Move down one screen, cursor to the first line of the new view."""
        self._offset += self._height
        self._cursor = self._offset
        self._clamp()

    def page_up(self):
        """Move up one screen, cursor to the last line of the new view."""
        self._offset = max(1, self._offset - self._height)
        self._cursor = min(self._offset + self._height - 1, self._total_lines)
        self._clamp()

    def half_page_down(self):
        half = max(1, self._height // 2)
        self._offset += half
        self._cursor += half
        self._clamp()

    def half_page_up(self):
        half = max(1, self._height // 2)
        self._offset -= half
        self._cursor -= half
        self._clamp()

    def scroll_down(self, n: int = 1):
        """Scroll the view down n lines without moving the cursor."""
        if n < 1:
            return
        self._offset += n
        self._clamp()

    def scroll_up(self, n: int = 1):
        """Scroll the view up n lines without moving the cursor."""
        if n < 1:
            return
        self._offset -= n
        self._clamp()

    def goto(self, line: int):
        """Move the cursor to an absolute line."""
        self._cursor = line
        self._clamp()

    def goto_top(self):
        self.goto(1)

    def goto_bottom(self):
        self.goto(self._total_lines)

    def goto_line_top(self):
        """Cursor to the first visible line (H)."""
        self._cursor = self._offset
        self._clamp()

    def goto_line_middle(self):
        """Cursor to the middle visible line (M)."""
        self._cursor = min(self._offset + self._height // 2, self._total_lines)
        self._clamp()

    def goto_line_bottom(self):
        """Cursor to the last visible line (L)."""
        self._cursor = min(self._offset + self._height - 1, self._total_lines)
        self._clamp()

    def jump_to_percent(self, percent: int):
        """
        Jump to the line at a percentage of the file.

        Args:
            percent: Clamped to [1, 100]; 100 is always the last line
        """
        percent = min(max(percent, 1), 100)
        line = max(1, self._total_lines * percent // 100)
        self.goto(min(line, self._total_lines))

    def click_at(self, relative_row: int):
        """Select the line at a 0-based row of the visible window."""
        relative_row = min(max(relative_row, 0), self._height - 1)
        self._cursor = self._offset + relative_row
        self._clamp()

    def state(self) -> str:
        """Summary of the navigation state, for status lines and debugging."""
        start, end = self.visible_range()
        return (
            f"cursor={self._cursor} offset={self._offset} visible=[{start},{end}] "
            f"total={self._total_lines} height={self._height}"
        )

    def __repr__(self) -> str:
        return f"Viewport({self.state()})"
