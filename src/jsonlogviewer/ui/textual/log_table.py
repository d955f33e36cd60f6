import logging
from typing import Callable, Optional

from rich.cells import set_cell_size
from rich.segment import Segment
from rich.style import Style
from textual import events
from textual.binding import Binding
from textual.message import Message
from textual.strip import Strip
from textual.widget import Widget

from ...errors import InvalidLineError
from ...line_index import LineIndex
from ...parser import LogEntry, level_color, parse, shorten_level, truncate
from ...viewport import Viewport

logger = logging.getLogger(__name__)

ROW_WIDTH = 6
TIME_WIDTH = 20
LEVEL_WIDTH = 6
MSG_WIDTH = 40
TABLE_WIDTH = ROW_WIDTH + 1 + TIME_WIDTH + 1 + LEVEL_WIDTH + 1 + MSG_WIDTH

HEADER_STYLE = Style(bold=True, color="#FFFFFF", bgcolor="#3B3B3B")
SELECTED_STYLE = Style(color="#FFFFFF", bgcolor="#5C5C5C")
NORMAL_STYLE = Style(color="#E0E0E0")

# Rows scrolled per mouse wheel notch
WHEEL_LINES = 3

DIGITS = "0123456789"

# Control characters would break the fixed-width layout
CONTROL_CHARS = {code: " " for code in range(32)}


def format_header() -> str:
    return (
        f"{'Row':>{ROW_WIDTH}} {set_cell_size('Time', TIME_WIDTH)} "
        f"{set_cell_size('Lvl', LEVEL_WIDTH)} Message"
    )


def format_row(entry: LogEntry) -> str:
    """Lay out one log entry as a fixed-width table row."""
    return (
        f"{entry.row:>{ROW_WIDTH}} "
        f"{set_cell_size(truncate(entry.time.translate(CONTROL_CHARS), TIME_WIDTH), TIME_WIDTH)} "
        f"{set_cell_size(shorten_level(entry.level), LEVEL_WIDTH)} "
        f"{truncate(entry.msg.translate(CONTROL_CHARS), MSG_WIDTH)}"
    )


class LogTable(Widget, can_focus=True):
    """A table of log records with a cursor, one row per line of the index."""

    class CursorMoved(Message):
        """Posted when the cursor or the visible window changes."""

        def __init__(self, cursor: int, offset: int, state: str) -> None:
            super().__init__()
            self.cursor = cursor
            self.offset = offset
            self.state = state

    class Navigated(Message):
        """Posted after every navigation command, moved or not."""

    DEFAULT_CSS = f"""
    LogTable {{
        width: {TABLE_WIDTH};
        height: 1fr;
        padding: 0;
        margin: 0;
    }}
    """

    BINDINGS = [
        Binding("up,k", "cursor_up", "Up", show=False),
        Binding("down,j", "cursor_down", "Down", show=False),
        Binding("pageup,ctrl+b", "page_up", "Page Up", show=False),
        Binding("pagedown,ctrl+f", "page_down", "Page Down", show=False),
        Binding("home", "goto_top", "First line", show=False),
        Binding("end", "goto_bottom", "Last line", show=False),
        Binding("g", "g_prefix", "First line (gg)", show=False),
        Binding("G", "goto_line_or_bottom", "Last line / {n}G", show=False),
        Binding("ctrl+e", "scroll_down", "Scroll down", show=False),
        Binding("ctrl+y", "scroll_up", "Scroll up", show=False),
        Binding("ctrl+d", "half_page_down", "Half page down", show=False),
        Binding("ctrl+u", "half_page_up", "Half page up", show=False),
        Binding("H", "goto_line_top", "Top of view", show=False),
        Binding("M", "goto_line_middle", "Middle of view", show=False),
        Binding("L", "goto_line_bottom", "Bottom of view", show=False),
        Binding("percent_sign", "jump_to_percent", "{n}% of file", show=False, key_display="%"),
    ]

    def __init__(self, index: LineIndex, **kwargs):
        super().__init__(**kwargs)
        self.index = index
        # Height is corrected on the first resize
        self.viewport = Viewport(index.line_count, 20)
        self._pending_count = ""
        self._g_pending = False

    def load(self, index: LineIndex):
        """Switch to another index, keeping the viewport in step with it."""
        self.index = index
        before = (self.viewport.cursor, self.viewport.offset)
        self.viewport.set_total_lines(index.line_count)
        self._moved(before)

    @property
    def pending_count(self) -> str:
        """Digits typed ahead of a motion, e.g. "42" before G."""
        return self._pending_count

    def on_resize(self, event: events.Resize) -> None:
        before = (self.viewport.cursor, self.viewport.offset)
        # First row is the column header
        self.viewport.set_height(max(1, event.size.height - 1))
        logger.debug(f"LogTable resized to {event.size}: {self.viewport.state()}")
        self._moved(before, force=True)

    def on_key(self, event: events.Key) -> None:
        if event.character is not None and len(event.character) == 1 and event.character in DIGITS:
            self._pending_count += event.character
            self._g_pending = False
            event.stop()
            event.prevent_default()

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        self._motion(lambda: self.viewport.scroll_down(WHEEL_LINES))
        event.stop()

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        self._motion(lambda: self.viewport.scroll_up(WHEEL_LINES))
        event.stop()

    def on_click(self, event: events.Click) -> None:
        row = event.y - 1
        if row >= 0:
            self._motion(lambda: self.viewport.click_at(row))

    def _take_count(self) -> Optional[int]:
        count = int(self._pending_count) if self._pending_count else None
        self._pending_count = ""
        return count

    def _motion(self, move: Callable[[], None]) -> None:
        """Run a navigation command, dropping any half-typed prefix."""
        self._pending_count = ""
        self._g_pending = False
        before = (self.viewport.cursor, self.viewport.offset)
        move()
        self._moved(before)
        self.post_message(self.Navigated())

    def _moved(self, before, force: bool = False) -> None:
        after = (self.viewport.cursor, self.viewport.offset)
        if force or after != before:
            self.refresh()
            self.post_message(self.CursorMoved(after[0], after[1], self.viewport.state()))

    def action_cursor_up(self) -> None:
        count = self._take_count() or 1
        self._motion(lambda: self.viewport.up(count))

    def action_cursor_down(self) -> None:
        count = self._take_count() or 1
        self._motion(lambda: self.viewport.down(count))

    def action_page_up(self) -> None:
        self._motion(self.viewport.page_up)

    def action_page_down(self) -> None:
        self._motion(self.viewport.page_down)

    def action_half_page_up(self) -> None:
        self._motion(self.viewport.half_page_up)

    def action_half_page_down(self) -> None:
        self._motion(self.viewport.half_page_down)

    def action_scroll_up(self) -> None:
        self._motion(lambda: self.viewport.scroll_up(1))

    def action_scroll_down(self) -> None:
        self._motion(lambda: self.viewport.scroll_down(1))

    def action_goto_top(self) -> None:
        self._motion(self.viewport.goto_top)

    def action_goto_bottom(self) -> None:
        self._motion(self.viewport.goto_bottom)

    def action_g_prefix(self) -> None:
        """First g waits for a second one; gg goes to the top, {n}gg to line n."""
        if not self._g_pending:
            self._g_pending = True
            return
        line = self._take_count()
        if line:
            self._motion(lambda: self.viewport.goto(line))
        else:
            self._motion(self.viewport.goto_top)

    def action_goto_line_or_bottom(self) -> None:
        line = self._take_count()
        if line:
            self._motion(lambda: self.viewport.goto(line))
        else:
            self._motion(self.viewport.goto_bottom)

    def action_goto_line_top(self) -> None:
        self._motion(self.viewport.goto_line_top)

    def action_goto_line_middle(self) -> None:
        self._motion(self.viewport.goto_line_middle)

    def action_goto_line_bottom(self) -> None:
        self._motion(self.viewport.goto_line_bottom)

    def action_jump_to_percent(self) -> None:
        percent = self._take_count()
        if percent is None:
            self._g_pending = False
            return
        self._motion(lambda: self.viewport.jump_to_percent(percent))

    def render_line(self, y: int) -> Strip:
        """Render the header (y == 0) or one log row."""
        width = self.size.width
        if y == 0:
            return self._row_strip(format_header(), HEADER_STYLE, width)

        line_no = self.viewport.offset + y - 1
        _, last = self.viewport.visible_range()
        if line_no > last:
            return Strip.blank(width)

        try:
            raw = self.index.get_line(line_no)
        except InvalidLineError as e:
            logger.debug(f"Skipping row: {e}")
            return Strip.blank(width)

        try:
            entry = parse(raw, line_no)
        except ValueError:
            # Blank line, keep the row number visible
            entry = LogEntry(row=line_no, time="", level="", msg="", raw=raw)

        if line_no == self.viewport.cursor:
            style = SELECTED_STYLE
        else:
            color = level_color(entry.level)
            style = NORMAL_STYLE + Style(color=color) if color else NORMAL_STYLE

        return self._row_strip(format_row(entry), style, width)

    @staticmethod
    def _row_strip(text: str, style: Style, width: int) -> Strip:
        return Strip([Segment(text, style)]).adjust_cell_length(width, style)
