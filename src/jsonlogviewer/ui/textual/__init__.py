"""Textual user interface for jsonlogviewer."""

from .app import ConfirmQuitScreen, HelpScreen, JsonLogViewerApp
from .detail_pane import DetailPane
from .log_table import LogTable

__all__ = ["JsonLogViewerApp", "LogTable", "DetailPane", "HelpScreen", "ConfirmQuitScreen"]
