"""Exceptions raised by jsonlogviewer."""


class JsonLogViewerError(Exception):
    """Base class for all jsonlogviewer errors."""


class OpenError(JsonLogViewerError, OSError):
    """The source could not be opened or mapped."""


class EmptyInputError(JsonLogViewerError, ValueError):
    """The source contained no bytes."""

    def __init__(self, name: str):
        super().__init__(f"{name}: file is empty")
        self.name = name


class InvalidLineError(JsonLogViewerError, IndexError):
    """A line number outside [1, line_count] was requested."""

    def __init__(self, line_no: int, line_count: int):
        super().__init__(f"Line {line_no} out of range [1, {line_count}]")
        self.line_no = line_no
        self.line_count = line_count


class CloseError(JsonLogViewerError, OSError):
    """Releasing the index's resources failed."""
