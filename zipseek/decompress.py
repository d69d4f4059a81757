"""
Copyright 2025 DNAi inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

"""
Raw DEFLATE decompression of one entry's data into a writable sink.
"""

import zlib
from typing import BinaryIO

from .constants import CHUNK_SIZE
from .errors import ZipCompressionError
from .utils import read_exact


def _drain(decompressor, data: bytes, sink: BinaryIO, chunk_size: int) -> int:
    written = 0
    while True:
        out = decompressor.decompress(data, chunk_size)
        if out:
            sink.write(out)
            written += len(out)
        data = decompressor.unconsumed_tail
        # A full buffer may leave output pending even with no input left.
        if not data and len(out) < chunk_size:
            return written


def decompress_to(
    f: BinaryIO, compressed_size: int, sink: BinaryIO, chunk_size: int = CHUNK_SIZE
) -> int:
    """Inflate exactly 'compressed_size' bytes read from 'f' into 'sink'.

    Input is read and output is written in pieces of at most 'chunk_size'
    bytes, so neither side is held in memory as a whole.

    Args:
        f: Archive positioned at the first byte of the compressed data.
        compressed_size: Number of compressed bytes belonging to the entry.
        sink: Writable binary file-like object receiving the inflated data.
        chunk_size: Read and write granularity.

    Returns:
        Number of decompressed bytes written.

    Raises:
        ZipDecodeError: If the archive ends before 'compressed_size' bytes.
        ZipCompressionError: If the DEFLATE stream is corrupted or does not
            end within 'compressed_size' bytes.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
    remaining = compressed_size
    written = 0
    try:
        while remaining > 0:
            block = read_exact(f, min(chunk_size, remaining))
            remaining -= len(block)
            written += _drain(decompressor, block, sink, chunk_size)
        tail = decompressor.flush()
    except zlib.error as e:
        raise ZipCompressionError(f"Deflate decompression failed: {e}") from e
    if not decompressor.eof:
        raise ZipCompressionError(
            f"Deflate stream does not end within {compressed_size} compressed bytes"
        )

    if tail:
        sink.write(tail)
        written += len(tail)
    return written
