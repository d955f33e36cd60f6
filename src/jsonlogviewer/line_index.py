"""Line offset indexing for O(1) access to any line of a log."""

import logging
import time
from array import array
from pathlib import Path
from typing import BinaryIO, Iterator, Tuple, Union

from .errors import CloseError, EmptyInputError, InvalidLineError
from .source import ByteSource, FileSource, MmapSource, StreamSource

logger = logging.getLogger(__name__)

NEWLINE = 0x0A
CARRIAGE_RETURN = 0x0D


class LineIndex:
    """
    Indexes the start of every line in a byte sequence.

    Stores:
    - data: the whole source content, read-only, owned by the index
    - offsets: byte offset of each line start (uint64, 8 bytes per line)

    Line numbers are 1-based throughout.
    """

    def __init__(self, source: ByteSource):
        """
        Build the index from a byte source.

        The source is closed again if indexing fails, so no partially built
        index is ever exposed.

        Raises:
            OpenError: the source could not be read
            EmptyInputError: the source has no content
        """
        self._source = source
        self._offsets = array("Q")
        self._closed = False

        try:
            self._data = source.read()
            self._size = len(self._data)
            if self._size == 0:
                raise EmptyInputError(source.name)
            self._build_offsets()
        except Exception:
            try:
                source.close()
            except CloseError as e:
                logger.error(f"Failed to release {source.name} after indexing failed: {e}")
            raise

    @classmethod
    def open(cls, path: Union[Path, str]) -> "LineIndex":
        """Memory-map the file at path and index it."""
        return cls(MmapSource(path))

    @classmethod
    def open_file(cls, path: Union[Path, str]) -> "LineIndex":
        """Read the file at path into memory and index it."""
        return cls(FileSource(path))

    @classmethod
    def open_reader(cls, stream: BinaryIO, name: str) -> "LineIndex":
        """Drain a stream into memory and index it."""
        return cls(StreamSource(stream, name))

    def _build_offsets(self):
        """Record the start of every line in one forward scan."""
        start_time = time.time()
        data = self._data
        size = self._size
        offsets = self._offsets

        offsets.append(0)
        pos = data.find(b"\n")
        # A newline on the last byte does not start another line
        while pos != -1 and pos + 1 < size:
            offsets.append(pos + 1)
            pos = data.find(b"\n", pos + 1)

        logger.debug(
            f"Indexed {len(offsets):,} lines from {self.name} ({size:,} bytes) in {time.time() - start_time:.3f}s"
        )

    @property
    def name(self) -> str:
        """Name of the source, typically the file path."""
        return self._source.name

    @property
    def line_count(self) -> int:
        """Total number of indexed lines."""
        return len(self._offsets)

    def get_line(self, line_no: int) -> bytes:
        """
        Get the raw bytes of a line, without its line ending.

        Args:
            line_no: 1-based line number

        Raises:
            InvalidLineError: if line_no is outside [1, line_count]
        """
        count = len(self._offsets)
        if line_no < 1 or line_no > count:
            raise InvalidLineError(line_no, count)

        data = self._data
        start = self._offsets[line_no - 1]
        end = self._offsets[line_no] if line_no < count else self._size

        if end > start and data[end - 1] == NEWLINE:
            end -= 1
        if end > start and data[end - 1] == CARRIAGE_RETURN:
            end -= 1

        return data[start:end]

    def get_line_string(self, line_no: int) -> str:
        """Get a line decoded as UTF-8, undecodable bytes replaced."""
        return self.get_line(line_no).decode("utf-8", errors="replace")

    def close(self):
        """
        Release the indexed data and its backing resources.

        Safe to call more than once. Lookups after close are not supported.

        Raises:
            CloseError: if the source failed to release its resources
        """
        if self._closed:
            return
        self._closed = True
        self._data = None
        self._source.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._offsets)

    def __iter__(self) -> Iterator[str]:
        """Iterate over all lines as strings."""
        for line_no in range(1, len(self) + 1):
            yield self.get_line_string(line_no)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"LineIndex(name={self.name!r}, lines={self.line_count})"


def scan_lines(stream: BinaryIO) -> Iterator[Tuple[int, bytes]]:
    """
    Iterate over the lines of a binary stream without building an index.

    Yields:
        (line_no, line) pairs, 1-based, line endings trimmed like get_line
    """
    for line_no, line in enumerate(stream, start=1):
        if line.endswith(b"\n"):
            line = line[:-1]
        if line.endswith(b"\r"):
            line = line[:-1]
        yield line_no, line
