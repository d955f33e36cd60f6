import logging

from rich.syntax import Syntax
from rich.text import Text
from textual.containers import VerticalScroll
from textual.widgets import Static

from ...errors import InvalidLineError
from ...line_index import LineIndex
from ...parser import format_pretty

logger = logging.getLogger(__name__)


class DetailPane(VerticalScroll, can_focus=False):
    """Expanded view of the selected record."""

    DEFAULT_CSS = """
    DetailPane {
        width: 1fr;
        height: 1fr;
        border-left: solid $panel;
        scrollbar-size-horizontal: 0;
    }

    DetailPane > Static {
        width: 100%;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.text = ""
        self.line_no = None

    def compose(self):
        yield Static("No selection")

    def show_line(self, index: LineIndex, line_no: int):
        """
        Display a line of the index, pretty-printed if it is JSON.

        Lines that are not JSON are shown as they are; a failed lookup shows
        the error instead.
        """
        if line_no == self.line_no:
            return
        self.line_no = line_no

        try:
            raw = index.get_line(line_no)
        except InvalidLineError as e:
            logger.debug(f"No detail for line {line_no}: {e}")
            self.text = f"Error: {e}"
            renderable = Text(self.text)
        else:
            try:
                self.text = format_pretty(raw)
                renderable = Syntax(self.text, "json", background_color="default", word_wrap=True)
            except ValueError:
                self.text = raw.decode("utf-8", errors="replace")
                renderable = Text(self.text)

        self.query_one(Static).update(renderable)
        self.scroll_home(animate=False)

    def scroll_detail(self, lines: int):
        """Scroll the record up (negative) or down (positive)."""
        self.scroll_relative(y=lines, animate=False)
