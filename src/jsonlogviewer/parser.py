"""Field extraction and pretty-printing for JSON log records."""

import json
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from wcwidth import wcwidth

# Field names tried in order, first non-empty value wins
TIME_FIELDS = ("time", "Time", "timestamp", "Timestamp", "ts")
LEVEL_FIELDS = ("level", "Level", "severity", "Severity")
MSG_FIELDS = ("msg", "Msg", "message", "Message")

MAX_MSG_LEN = 100

LEVEL_COLORS = {
    "DEBUG": "#808080",
    "TRACE": "#808080",
    "INFO": "#00FF00",
    "WARN": "#FFFF00",
    "WARNING": "#FFFF00",
    "ERROR": "#FF0000",
    "FATAL": "#FF00FF",
    "PANIC": "#FF00FF",
}

SHORT_LEVELS = {
    "DEBUG": "DBG",
    "INFO": "INF",
    "WARN": "WRN",
    "WARNING": "WRN",
    "ERROR": "ERR",
    "FATAL": "FTL",
    "PANIC": "PNC",
    "TRACE": "TRC",
}


@dataclass
class LogEntry:
    """A log record with the fields shown in the table."""

    row: int
    time: str
    level: str
    msg: str
    raw: bytes


def _load_object(raw: bytes) -> Optional[dict]:
    """Decode raw as a JSON object, None if it is anything else."""
    try:
        value = json.loads(raw)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def _to_text(value: Any) -> str:
    """Render a JSON value the way it reads in the record."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _first_field(record: dict, names: Sequence[str]) -> str:
    for name in names:
        text = _to_text(record.get(name))
        if text:
            return text
    return ""


def parse(raw: bytes, row: int) -> LogEntry:
    """
    Extract the table columns from a raw log line.

    Lines that are not JSON objects are accepted and give empty fields.

    Args:
        raw: Line content without line ending
        row: 1-based line number for display

    Raises:
        ValueError: if raw is empty
    """
    if not raw:
        raise ValueError("empty line")

    entry = LogEntry(row=row, time="", level="", msg="", raw=raw)
    record = _load_object(raw)
    if record is None:
        return entry

    entry.time = _first_field(record, TIME_FIELDS)
    entry.level = _first_field(record, LEVEL_FIELDS)
    entry.msg = _first_field(record, MSG_FIELDS)

    if len(entry.msg) > MAX_MSG_LEN:
        entry.msg = entry.msg[: MAX_MSG_LEN - 3] + "..."

    return entry


def format_pretty(raw: bytes) -> str:
    """
    Pretty-print a JSON record with 2-space indentation.

    Key order and non-ASCII text are preserved.

    Raises:
        ValueError: if raw is empty or not valid JSON
    """
    if not raw:
        raise ValueError("empty input")
    try:
        value = json.loads(raw)
    except ValueError as e:
        raise ValueError(f"invalid JSON: {e}") from e
    return json.dumps(value, indent=2, ensure_ascii=False)


def extract_field(raw: bytes, path: str) -> str:
    """
    Extract a field by dotted path, e.g. "user.name" or "items.0.id".

    Returns an empty string when the path does not resolve.
    """
    try:
        value = json.loads(raw)
    except ValueError:
        return ""

    for key in path.split("."):
        if isinstance(value, dict):
            if key not in value:
                return ""
            value = value[key]
        elif isinstance(value, list) and key.isdigit():
            index = int(key)
            if index >= len(value):
                return ""
            value = value[index]
        else:
            return ""

    return _to_text(value)


def level_color(level: str) -> str:
    """Hex colour for a log level, empty for unknown levels."""
    return LEVEL_COLORS.get(level.upper(), "")


def shorten_level(level: str) -> str:
    """Three-letter abbreviation of a log level."""
    short = SHORT_LEVELS.get(level.upper())
    if short is not None:
        return short
    return level[:3]


def truncate(text: str, width: int) -> str:
    """
    Cut text to fit in width terminal cells.

    Truncated text ends with "..." when there is room for it.
    """
    if width <= 0:
        return ""

    cells = [max(0, wcwidth(ch)) for ch in text]
    if sum(cells) <= width:
        return text

    limit = width - 3 if width > 3 else width
    used = 0
    end = 0
    for end, cell in enumerate(cells):
        if used + cell > limit:
            break
        used += cell
    else:
        end = len(text)

    return text[:end] + ("..." if width > 3 else "")
