"""Command line entry point.

Usage:

    jsonlogviewer [--debug] [--log-dir DIR] [file]
    journalctl -o json | jsonlogviewer
"""

import argparse
import logging
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List, Optional

from . import __version__, configure_logging
from .errors import CloseError, EmptyInputError, JsonLogViewerError, OpenError
from .line_index import LineIndex

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Application configuration, built from the command line."""

    file_path: Optional[Path] = None
    debug: bool = False
    log_dir: Optional[Path] = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonlogviewer",
        description="Terminal viewer for large JSON log files.",
        epilog="Reads standard input when no file is given.",
    )
    parser.add_argument("file", nargs="?", type=Path, help="log file to view")
    parser.add_argument("--debug", action="store_true", help="write debug logs to a file")
    parser.add_argument("--log-dir", type=Path, help="directory for debug logs")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> Config:
    args = build_parser().parse_args(argv)
    return Config(file_path=args.file, debug=args.debug, log_dir=args.log_dir)


def stdin_is_empty(stream) -> bool:
    """True when nothing is piped in, i.e. stdin is an interactive terminal."""
    try:
        return os.isatty(stream.fileno())
    except (AttributeError, OSError, ValueError):
        return True


def open_source(config: Config, stdin: Optional[BinaryIO] = None) -> LineIndex:
    """
    Open the log named by config, or stdin when no file is given.

    Files are memory-mapped; if mapping fails they are read into memory.

    Raises:
        OpenError: no usable input
        EmptyInputError: the input is empty
    """
    if config.file_path is None:
        stdin = stdin if stdin is not None else sys.stdin.buffer
        if stdin_is_empty(stdin):
            raise OpenError("no input provided: specify a file or pipe data via stdin")
        return LineIndex.open_reader(stdin, "stdin")

    path = config.file_path
    if not path.exists():
        raise OpenError(f"file not found: {path}")
    if path.is_dir():
        raise OpenError(f"path is a directory: {path}")

    try:
        return LineIndex.open(path)
    except (OpenError, EmptyInputError) as e:
        # Pseudo-files such as /proc entries report size 0 but have content
        logger.info(f"Memory mapping failed ({e}), reading {path} into memory")
        return LineIndex.open_file(path)


def reattach_terminal():
    """Point stdin back at the controlling terminal once a pipe has been drained."""
    if os.name != "posix":
        return
    try:
        fd = os.open("/dev/tty", os.O_RDONLY)
    except OSError as e:
        logger.warning(f"No terminal to read keys from: {e}")
        return
    try:
        os.dup2(fd, sys.stdin.fileno())
    finally:
        os.close(fd)


def close_index(index: LineIndex):
    """Close the index; failures are logged and do not block shutdown."""
    try:
        index.close()
    except CloseError as e:
        logger.error(f"Failed to close index: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    config = parse_args(argv)
    log_path = configure_logging(config.debug, config.log_dir)
    logger.info(f"jsonlogviewer {__version__} starting")
    if log_path is not None:
        logger.debug(f"Logging to {log_path}")

    start_time = time.time()
    try:
        index = open_source(config)
    except JsonLogViewerError as e:
        logger.error(f"Failed to open source: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info(f"Index loaded: {index.line_count:,} lines from {index.name} in {time.time() - start_time:.3f}s")
    if config.file_path is None:
        reattach_terminal()

    # Imported late so non-interactive use does not pay for textual
    from .ui.textual import JsonLogViewerApp

    try:
        app = JsonLogViewerApp(index, version=__version__)
        app.run()
    except Exception as e:
        logger.exception(f"Program error: {e}")
        print(f"Error running program: {e}", file=sys.stderr)
        return 1
    finally:
        close_index(index)

    if app.return_code:
        logger.error(f"Viewer exited with status {app.return_code}")
        return 1

    logger.info("jsonlogviewer exiting normally")
    return 0
