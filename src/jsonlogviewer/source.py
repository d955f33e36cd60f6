"""Byte sources a LineIndex can be built from.

Each source produces one immutable byte sequence via ``read()`` and owns
whatever backs it until ``close()``.
"""

import logging
import mmap
import os
import stat
from pathlib import Path
from typing import BinaryIO, Union

from .errors import CloseError, OpenError

logger = logging.getLogger(__name__)

Buffer = Union[bytes, mmap.mmap]


class ByteSource:
    """Something that can produce the whole content of a log as bytes."""

    def __init__(self, name: str):
        self.name = name

    def read(self) -> Buffer:
        """Return the complete, read-only content of the source."""
        raise NotImplementedError

    def close(self):
        """Release the buffer and any underlying handle."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class MmapSource(ByteSource):
    """A regular file mapped read-only into memory."""

    def __init__(self, path: Union[Path, str]):
        super().__init__(str(path))
        self.path = Path(path)
        self._file = None
        self._mmap = None

    def read(self) -> Buffer:
        if self._mmap is not None:
            return self._mmap

        try:
            self._file = open(self.path, "rb")
        except OSError as e:
            raise OpenError(f"failed to open {self.name}: {e}") from e

        try:
            st = os.fstat(self._file.fileno())
            if not stat.S_ISREG(st.st_mode):
                raise OpenError(f"failed to mmap {self.name}: not a regular file")
            if st.st_size == 0:
                # mmap refuses zero-length files; the index reports the empty input
                self._release()
                return b""
            self._mmap = mmap.mmap(self._file.fileno(), 0, access=mmap.ACCESS_READ)
        except OpenError:
            self._release()
            raise
        except (OSError, ValueError) as e:
            self._release()
            raise OpenError(f"failed to mmap {self.name}: {e}") from e

        logger.debug(f"Mapped {st.st_size:,} bytes from {self.name}")
        return self._mmap

    def _release(self):
        if self._mmap is not None:
            self._mmap.close()
            self._mmap = None
        if self._file is not None:
            self._file.close()
            self._file = None

    def close(self):
        try:
            self._release()
        except (OSError, BufferError) as e:
            self._mmap = None
            self._file = None
            raise CloseError(f"failed to unmap {self.name}: {e}") from e


class FileSource(ByteSource):
    """A file read completely into memory, for files that cannot be mapped."""

    def __init__(self, path: Union[Path, str]):
        super().__init__(str(path))
        self.path = Path(path)
        self._data = None

    def read(self) -> Buffer:
        if self._data is None:
            try:
                with open(self.path, "rb") as f:
                    self._data = f.read()
            except OSError as e:
                raise OpenError(f"failed to open file {self.name}: {e}") from e
        return self._data

    def close(self):
        self._data = None


class StreamSource(ByteSource):
    """A non-seekable stream (e.g. stdin) drained into an owned buffer.

    The stream itself belongs to the caller and is left open.
    """

    def __init__(self, stream: BinaryIO, name: str):
        super().__init__(name)
        self._stream = stream
        self._data = None

    def read(self) -> Buffer:
        if self._data is None:
            try:
                data = self._stream.read()
            except OSError as e:
                raise OpenError(f"failed to read data from {self.name}: {e}") from e
            if isinstance(data, str):
                data = data.encode("utf-8")
            self._data = bytes(data)
        return self._data

    def close(self):
        self._data = None
        self._stream = None
