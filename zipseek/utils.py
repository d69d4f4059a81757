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
Utility functions for zipseek.

This module provides the little-endian readers used by every record decoder,
DOS date/time conversion, and the destination path check used on extraction.
"""

import io
import struct
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from .errors import ZipDecodeError, ZipUnsafePathError


def read_exact(f: BinaryIO, size: int) -> bytes:
    """Read exactly 'size' bytes from file, raising ZipDecodeError on short read.

    Args:
        f: Binary file-like object to read from.
        size: Number of bytes to read.

    Returns:
        Exactly 'size' bytes of data.

    Raises:
        ZipDecodeError: If fewer than 'size' bytes could be read or size is invalid.
    """
    if size < 0:
        raise ZipDecodeError(f"Invalid read size: {size} (must be non-negative)")

    data = f.read(size)
    if len(data) != size:
        raise ZipDecodeError(
            f"Unexpected end of file: expected {size} bytes, got {len(data)}"
        )
    return data


def read_uint16(f: BinaryIO) -> int:
    """Read a little-endian 16-bit unsigned integer from file."""
    return struct.unpack("<H", read_exact(f, 2))[0]


def read_uint32(f: BinaryIO) -> int:
    """Read a little-endian 32-bit unsigned integer from file."""
    return struct.unpack("<I", read_exact(f, 4))[0]


def read_uint64(f: BinaryIO) -> int:
    """Read a little-endian 64-bit unsigned integer from file."""
    return struct.unpack("<Q", read_exact(f, 8))[0]


def skip_bytes(f: BinaryIO, size: int) -> int:
    """Move the cursor forward by 'size' bytes without reading them.

    Returns:
        The new absolute position.
    """
    if size < 0:
        raise ZipDecodeError(f"Invalid skip size: {size} (must be non-negative)")
    return f.seek(size, io.SEEK_CUR)


def decode_name(raw: bytes) -> str:
    """Decode a file name, replacing invalid UTF-8 sequences instead of failing."""
    return raw.decode("utf-8", errors="replace")


def dos_datetime_to_timestamp(dos_date: int, dos_time: int) -> datetime:
    """Convert DOS date and time to Python datetime.

    DOS date format (16 bits):
        Bits 0-4: Day (1-31)
        Bits 5-8: Month (1-12)
        Bits 9-15: Year - 1980

    DOS time format (16 bits):
        Bits 0-4: Second / 2
        Bits 5-10: Minute (0-59)
        Bits 11-15: Hour (0-23)

    Invalid combinations map to 1980-01-01 00:00:00.
    """
    day = dos_date & 0x1F
    month = (dos_date >> 5) & 0x0F
    year = ((dos_date >> 9) & 0x7F) + 1980

    second = (dos_time & 0x1F) * 2
    minute = (dos_time >> 5) & 0x3F
    hour = (dos_time >> 11) & 0x1F

    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return datetime(1980, 1, 1, 0, 0, 0)


def safe_extract_path(destination: Path, name: str) -> Path:
    """Join an entry name onto the destination directory.

    Backslashes are treated as separators and leading ``./`` is dropped.

    Raises:
        ZipUnsafePathError: If the name is empty, absolute, or contains a ``..`` component.
    """
    normalized = name.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]

    posix = PurePosixPath(normalized)
    if posix.is_absolute():
        raise ZipUnsafePathError(f"Absolute entry name is not allowed: {name!r}")

    parts = []
    for part in posix.parts:
        if part in ("", "."):
            continue
        if part == "..":
            raise ZipUnsafePathError(f"Path traversal in entry name: {name!r}")
        parts.append(part)

    if not parts:
        raise ZipUnsafePathError(f"Entry name has no file component: {name!r}")

    return Path(destination).joinpath(*parts)
