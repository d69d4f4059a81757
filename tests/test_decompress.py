import io

import pytest

from zipseek.decompress import decompress_to
from zipseek.errors import ZipCompressionError, ZipDecodeError

from tests.builders import deflate


class RecordingSink(io.BytesIO):
    def __init__(self):
        super().__init__()
        self.writes = []

    def write(self, data):
        self.writes.append(len(data))
        return super().write(data)


def test_inflates_exactly_the_compressed_range():
    data = b"The quick brown fox jumps over the lazy dog. " * 500
    compressed = deflate(data)
    f = io.BytesIO(b"HEAD" + compressed + b"TAIL")
    f.seek(4)
    sink = io.BytesIO()

    assert decompress_to(f, len(compressed), sink) == len(data)
    assert sink.getvalue() == data
    assert f.read() == b"TAIL"


def test_output_is_written_in_bounded_pieces():
    data = bytes(range(256)) * 200
    compressed = deflate(data)
    sink = RecordingSink()

    decompress_to(io.BytesIO(compressed), len(compressed), sink, chunk_size=1000)
    assert sink.getvalue() == data
    assert len(sink.writes) > 1
    assert max(sink.writes) <= 1000


def test_empty_entry():
    compressed = deflate(b"")
    sink = io.BytesIO()
    assert decompress_to(io.BytesIO(compressed), len(compressed), sink) == 0
    assert sink.getvalue() == b""


def test_truncated_input_is_decode_error():
    compressed = deflate(b"hello world" * 10)
    with pytest.raises(ZipDecodeError):
        decompress_to(io.BytesIO(compressed[:-2]), len(compressed), io.BytesIO())


def test_corrupted_stream_is_compression_error():
    garbage = b"\xff" * 32
    with pytest.raises(ZipCompressionError):
        decompress_to(io.BytesIO(garbage), len(garbage), io.BytesIO())


def test_chunk_size_must_be_positive():
    with pytest.raises(ValueError):
        decompress_to(io.BytesIO(b""), 0, io.BytesIO(), chunk_size=0)


def test_stream_cut_short_is_compression_error():
    data = bytes(i * 7 % 251 for i in range(12000))
    compressed = deflate(data)
    half = len(compressed) // 2
    sink = io.BytesIO()
    with pytest.raises(ZipCompressionError):
        decompress_to(io.BytesIO(compressed), half, sink)
