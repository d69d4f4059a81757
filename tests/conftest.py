import io
import zipfile

import pytest


@pytest.fixture
def hello_zip():
    """Two deflated entries written by the standard library, no comment."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("a.txt", b"hello")
        zf.writestr("b.txt", b"goodbye, " * 50)
    return buf.getvalue()


@pytest.fixture
def dest(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def archive_file(tmp_path):
    """Write archive bytes to disk and return the path."""

    def write(data, name="archive.zip"):
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return write


class CountingReader(io.BytesIO):
    """BytesIO that counts the central directory signatures handed out."""

    def __init__(self, data):
        super().__init__(data)
        self.central_reads = 0

    def read(self, size=-1):
        data = super().read(size)
        if data == b"PK\x01\x02":
            self.central_reads += 1
        return data


@pytest.fixture
def counting_reader():
    return CountingReader
