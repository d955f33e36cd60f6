import logging

from rich.table import Table
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import ModalScreen
from textual.widgets import Static

from ... import __version__
from ...line_index import LineIndex
from .detail_pane import DetailPane
from .log_table import TABLE_WIDTH, LogTable

logger = logging.getLogger(__name__)

# Seconds ctrl+w resize mode stays active after the last resize key
RESIZE_TIMEOUT = 2.0
# Narrowest either pane may become
MIN_PANE_WIDTH = 40

HELP_ROWS = [
    ("↑ / k", "up ({n}k moves n lines)"),
    ("↓ / j", "down ({n}j moves n lines)"),
    ("pgup / ctrl+b", "page up"),
    ("pgdn / ctrl+f", "page down"),
    ("ctrl+u / ctrl+d", "half page up / down"),
    ("ctrl+y / ctrl+e", "scroll view up / down"),
    ("home / gg", "first line"),
    ("end / G", "last line"),
    ("{n}G / {n}gg", "go to line n"),
    ("{n}%", "go to n percent of the file"),
    ("H / M / L", "top / middle / bottom of view"),
    ("h / l", "scroll detail up / down"),
    ("ctrl+w then < / >", "resize panes"),
    ("F1 / ?", "toggle help"),
    ("q / Esc", "quit"),
]


class HelpScreen(ModalScreen):
    """Key binding reference."""

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }

    HelpScreen > Static {
        width: auto;
        height: auto;
        padding: 1 2;
        border: round $accent;
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("escape,q,f1,question_mark", "app.pop_screen", "Close help"),
    ]

    def compose(self) -> ComposeResult:
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        for keys, description in HELP_ROWS:
            table.add_row(keys, description)
        yield Static(table)


class ConfirmQuitScreen(ModalScreen[bool]):
    """Asks before quitting; y confirms, any other key cancels."""

    DEFAULT_CSS = """
    ConfirmQuitScreen {
        align: center middle;
    }

    ConfirmQuitScreen > Static {
        width: auto;
        height: auto;
        padding: 0 2;
        border: round $warning;
        background: $surface;
        text-style: bold;
    }
    """

    BINDINGS = [
        Binding("y,Y", "answer(True)", "Yes"),
        Binding("n,N,escape,q", "answer(False)", "No"),
    ]

    def compose(self) -> ComposeResult:
        yield Static("Quit? (y/n)")

    def action_answer(self, quit: bool) -> None:
        self.dismiss(quit)

    def on_key(self, event: events.Key) -> None:
        if event.key in ("y", "Y", "n", "N", "escape", "q"):
            return
        event.stop()
        event.prevent_default()
        self.dismiss(False)


class JsonLogViewerApp(App):
    """Two-pane viewer: a table of records and the selected record expanded."""

    TITLE = "JSON Log Viewer"

    CSS = """
    #title {
        height: 1;
    }

    #panes {
        height: 1fr;
    }

    #status {
        height: 1;
        color: #808080;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape", "confirm_quit", "Quit", show=False),
        Binding("f1,question_mark", "toggle_help", "Help", key_display="F1"),
        Binding("h", "scroll_detail(-1)", "Scroll detail up", show=False),
        Binding("l", "scroll_detail(1)", "Scroll detail down", show=False),
        Binding("ctrl+w", "resize_mode", "Resize panes", show=False),
        Binding("less_than_sign", "resize_table(-1)", "Shrink table", show=False),
        Binding("greater_than_sign", "resize_table(1)", "Grow table", show=False),
    ]

    def __init__(self, index: LineIndex, version: str = __version__):
        super().__init__()
        self.index = index
        self.version = version
        self.table_width = TABLE_WIDTH
        self.resize_mode = False
        self._resize_timer = None

    def compose(self) -> ComposeResult:
        yield Static(id="title")
        with Horizontal(id="panes"):
            yield LogTable(self.index, id="table")
            yield DetailPane(id="detail")
        yield Static(id="status")

    def on_mount(self) -> None:
        logger.info(f"Viewer started on {self.index.name} ({self.index.line_count:,} lines)")
        table = self.query_one(LogTable)
        table.focus()
        self._update(table.viewport.cursor, table.viewport.state())

    def on_log_table_cursor_moved(self, event: LogTable.CursorMoved) -> None:
        """Handle CursorMoved events from the LogTable."""
        self._update(event.cursor, event.state)

    def on_log_table_navigated(self, event: LogTable.Navigated) -> None:
        """Any table motion ends pane resize mode."""
        if self.resize_mode:
            self._end_resize_mode()

    def _update(self, cursor: int, state: str) -> None:
        title = Text.assemble(
            (self.TITLE, "bold #00FF00"),
            (f" {self.index.line_count} lines | Line {cursor} ", "#808080"),
        )
        self.query_one("#title", Static).update(title)
        self.query_one("#status", Static).update(
            Text(f" F1: Help | q: Quit | {state} | v{self.version}")
        )
        self.query_one(DetailPane).show_line(self.index, cursor)

    def action_toggle_help(self) -> None:
        if isinstance(self.screen, HelpScreen):
            self.pop_screen()
        else:
            self.push_screen(HelpScreen())

    def action_confirm_quit(self) -> None:
        def check_quit(quit: bool) -> None:
            if quit:
                self.exit()

        self.push_screen(ConfirmQuitScreen(), check_quit)

    def action_scroll_detail(self, lines: int) -> None:
        self._end_resize_mode()
        self.query_one(DetailPane).scroll_detail(lines)

    def action_resize_mode(self) -> None:
        self.resize_mode = True
        self._restart_resize_timer()

    def action_resize_table(self, delta: int) -> None:
        if not self.resize_mode:
            return
        width = self.table_width + delta
        if MIN_PANE_WIDTH <= width <= self.size.width - MIN_PANE_WIDTH:
            self.table_width = width
            self.query_one(LogTable).styles.width = width
        self._restart_resize_timer()

    def _restart_resize_timer(self) -> None:
        if self._resize_timer is not None:
            self._resize_timer.stop()
        self._resize_timer = self.set_timer(RESIZE_TIMEOUT, self._resize_timed_out)

    def _end_resize_mode(self) -> None:
        self.resize_mode = False
        if self._resize_timer is not None:
            self._resize_timer.stop()
            self._resize_timer = None

    def _resize_timed_out(self) -> None:
        self.resize_mode = False
        self._resize_timer = None
