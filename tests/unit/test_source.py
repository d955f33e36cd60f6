"""Tests for byte sources."""

import io
import mmap
import tempfile
from pathlib import Path

import pytest

from jsonlogviewer.errors import CloseError, OpenError
from jsonlogviewer.source import ByteSource, FileSource, MmapSource, StreamSource


@pytest.fixture
def temp_file():
    """Create a temporary log file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "test.log"
        path.write_bytes(b"line1\nline2\n")
        yield path


def test_byte_source_is_abstract():
    """Test that the base class cannot produce data."""
    source = ByteSource("base")
    with pytest.raises(NotImplementedError):
        source.read()
    source.close()


def test_mmap_source(temp_file):
    """Test mapping a regular file."""
    with MmapSource(temp_file) as source:
        data = source.read()
        assert isinstance(data, mmap.mmap)
        assert data[:] == b"line1\nline2\n"
        assert source.name == str(temp_file)
        # Reading again returns the same mapping
        assert source.read() is data


def test_mmap_source_is_read_only(temp_file):
    """Test that the mapping cannot be written through."""
    with MmapSource(temp_file) as source:
        data = source.read()
        with pytest.raises(TypeError):
            data[0] = 0x41


def test_mmap_source_empty_file(temp_file):
    """Test that an empty file produces no bytes instead of failing."""
    temp_file.write_bytes(b"")
    source = MmapSource(temp_file)

    assert source.read() == b""
    assert source._file is None
    source.close()


def test_mmap_source_missing(temp_file):
    """Test that a missing file raises OpenError."""
    source = MmapSource(temp_file.with_name("missing.log"))
    with pytest.raises(OpenError, match="failed to open"):
        source.read()


def test_mmap_source_close_failure(temp_file, monkeypatch):
    """Test that a failed unmap is reported as CloseError."""
    source = MmapSource(temp_file)
    data = source.read()
    handle = source._file

    def broken_release():
        raise BufferError("cannot close exported pointers exist")

    monkeypatch.setattr(source, "_release", broken_release)
    with pytest.raises(CloseError, match="failed to unmap"):
        source.close()
    assert source._mmap is None

    data.close()
    handle.close()


def test_file_source(temp_file):
    """Test reading a file into memory."""
    source = FileSource(temp_file)

    assert source.read() == b"line1\nline2\n"
    assert isinstance(source.read(), bytes)

    source.close()
    assert source._data is None


def test_file_source_missing(temp_file):
    """Test that a missing file raises OpenError."""
    with pytest.raises(OpenError, match="failed to open file"):
        FileSource(temp_file.with_name("missing.log")).read()


def test_stream_source():
    """Test draining a stream."""
    stream = io.BytesIO(b"a\nb\n")
    source = StreamSource(stream, "stdin")

    assert source.read() == b"a\nb\n"
    assert source.name == "stdin"

    source.close()
    assert not stream.closed


def test_stream_source_read_failure():
    """Test that read errors are reported as OpenError."""

    class BrokenStream:
        def read(self):
            raise OSError("broken pipe")

    with pytest.raises(OpenError, match="failed to read data from stdin"):
        StreamSource(BrokenStream(), "stdin").read()
