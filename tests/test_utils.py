import io
from datetime import datetime
from pathlib import Path

import pytest

from zipseek.errors import (
    ErrorKind,
    ZipCompressionError,
    ZipDecodeError,
    ZipError,
    ZipUnsafePathError,
)
from zipseek.utils import (
    decode_name,
    dos_datetime_to_timestamp,
    read_exact,
    read_uint16,
    read_uint32,
    read_uint64,
    safe_extract_path,
    skip_bytes,
)


def test_little_endian_readers():
    f = io.BytesIO(b"\x01\x02" + b"\x01\x02\x03\x04" + b"\x01\x00\x00\x00\x00\x00\x00\x80")
    assert read_uint16(f) == 0x0201
    assert read_uint32(f) == 0x04030201
    assert read_uint64(f) == 0x8000000000000001


def test_short_read_is_decode_error():
    with pytest.raises(ZipDecodeError):
        read_exact(io.BytesIO(b"abc"), 4)
    with pytest.raises(ZipDecodeError):
        read_uint16(io.BytesIO(b"\x01"))


def test_negative_sizes_are_rejected():
    with pytest.raises(ZipDecodeError):
        read_exact(io.BytesIO(b"abc"), -1)
    with pytest.raises(ZipDecodeError):
        skip_bytes(io.BytesIO(b"abc"), -1)


def test_skip_bytes():
    f = io.BytesIO(b"abcdef")
    assert skip_bytes(f, 4) == 4
    assert f.read() == b"ef"


def test_decode_name():
    assert decode_name("café.txt".encode("utf-8")) == "café.txt"
    assert decode_name(b"\xfe.txt") == "\ufffd.txt"


def test_dos_datetime():
    assert dos_datetime_to_timestamp(0x5A61, 0x6000) == datetime(2025, 3, 1, 12, 0, 0)
    assert dos_datetime_to_timestamp(0, 0) == datetime(1980, 1, 1, 0, 0, 0)


@pytest.mark.parametrize(
    "name, parts",
    [
        ("a.txt", ("a.txt",)),
        ("docs/readme.md", ("docs", "readme.md")),
        ("./docs//readme.md", ("docs", "readme.md")),
        ("win\\style\\path.txt", ("win", "style", "path.txt")),
    ],
)
def test_safe_extract_path(tmp_path, name, parts):
    assert safe_extract_path(tmp_path, name) == tmp_path.joinpath(*parts)


@pytest.mark.parametrize("name", ["../up.txt", "a/../../up.txt", "/etc/passwd", "", "./", "dir/.."])
def test_unsafe_extract_path(name):
    with pytest.raises(ZipUnsafePathError):
        safe_extract_path(Path("out"), name)


def test_error_kinds():
    assert issubclass(ZipCompressionError, ZipDecodeError)
    assert ZipCompressionError("bad").kind is ErrorKind.DECODE
    assert ZipUnsafePathError("x").kind is ErrorKind.UNSAFE_PATH
    assert isinstance(ZipUnsafePathError("x"), ZipError)
