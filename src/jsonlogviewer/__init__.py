"""jsonlogviewer - Navigate large JSON log files in the terminal."""

import logging
import sys
import time
from pathlib import Path
from typing import Optional

import platformdirs

from .errors import CloseError, EmptyInputError, InvalidLineError, JsonLogViewerError, OpenError
from .line_index import LineIndex, scan_lines
from .viewport import Viewport

__version__ = "0.1.0"
__all__ = [
    "LineIndex",
    "Viewport",
    "scan_lines",
    "JsonLogViewerError",
    "OpenError",
    "EmptyInputError",
    "InvalidLineError",
    "CloseError",
    "configure_logging",
    "LOG_DIR",
]

LOG_DIR = Path(platformdirs.user_log_dir("jsonlogviewer"))
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: bool = False, log_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Configure logging for jsonlogviewer.

    Logging is silent unless debug is set. In debug mode records go to a
    timestamped file in log_dir (LOG_DIR by default), or to stderr if that
    directory cannot be created.

    Returns:
        Path of the log file, or None when not logging to a file
    """
    logger = logging.getLogger("jsonlogviewer")
    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()
    logger.propagate = False

    if not debug:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.WARNING)
        return None

    logger.setLevel(logging.DEBUG)
    log_dir = Path(log_dir) if log_dir is not None else LOG_DIR
    log_path = log_dir / f"jsonlogviewer-{time.strftime('%Y%m%d-%H%M%S')}.log"

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        handler = logging.StreamHandler(sys.stderr)
        log_path = None

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return log_path
