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
ZIP structure definitions and parsing functions.

This module defines dataclasses for the five records the extractor walks
through: local file headers, central directory headers, the end of central
directory record, and the two ZIP64 records that extend it.

Every ``parse_*`` function expects the file to be positioned immediately
after the record's 4-byte signature; the caller reads the signature with
:func:`read_signature` and dispatches on it.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Optional

from .constants import (
    CENTRAL_DIR_HEADER,
    END_OF_CENTRAL_DIR,
    LOCAL_FILE_HEADER,
    SENTINEL_16,
    SENTINEL_32,
    SIGNATURE_SIZE,
    ZIP64_END_OF_CENTRAL_DIR,
    ZIP64_END_OF_CENTRAL_DIR_LOCATOR,
    ZIP64_LOCATOR_BODY_SIZE,
)
from .errors import ZipDecodeError
from .extra import OverridableField, resolve_extra_fields
from .utils import (
    decode_name,
    dos_datetime_to_timestamp,
    read_exact,
    read_uint16,
    read_uint32,
    read_uint64,
    skip_bytes,
)


class Signature(enum.IntEnum):
    """Record signatures, as read little-endian from the archive."""

    LOCAL_FILE_HEADER = LOCAL_FILE_HEADER
    CENTRAL_DIRECTORY_HEADER = CENTRAL_DIR_HEADER
    END_OF_CENTRAL_DIRECTORY = END_OF_CENTRAL_DIR
    ZIP64_END_OF_CENTRAL_DIRECTORY = ZIP64_END_OF_CENTRAL_DIR
    ZIP64_END_OF_CENTRAL_DIRECTORY_LOCATOR = ZIP64_END_OF_CENTRAL_DIR_LOCATOR

    @classmethod
    def lookup(cls, value: int) -> Optional["Signature"]:
        """Return the member for 'value', or None for an unknown signature."""
        try:
            return cls(value)
        except ValueError:
            return None


def read_signature(f: BinaryIO) -> int:
    """Read the 4-byte record signature at the current position."""
    return read_uint32(f)


@dataclass
class LocalFileHeader:
    """Local file header structure.

    This header appears before each file's compressed data in the ZIP archive.
    Only the two sizes can be overridden from a ZIP64 extra block here.
    """

    version: int
    flags: int
    compression_method: int
    mod_time: int
    mod_date: int
    crc32: int
    compressed_size: OverridableField
    uncompressed_size: OverridableField
    filename_len: int
    extra_len: int
    filename: str

    @property
    def date_time(self) -> datetime:
        """Get modification date/time as datetime object."""
        return dos_datetime_to_timestamp(self.mod_date, self.mod_time)

    def skip_compressed(self, f: BinaryIO) -> int:
        """Seek past the entry's compressed data; returns the new position."""
        return skip_bytes(f, self.compressed_size.value)

    def load_compressed(self, f: BinaryIO) -> bytes:
        """Read the entry's compressed data in one piece."""
        return read_exact(f, self.compressed_size.value)


@dataclass
class CentralDirectoryHeader:
    """Central directory header structure.

    This header appears in the central directory and contains information
    about a file entry, including a pointer to the local file header.
    """

    version_made_by: int
    version: int
    flags: int
    compression_method: int
    mod_time: int
    mod_date: int
    crc32: int
    compressed_size: OverridableField
    uncompressed_size: OverridableField
    filename_len: int
    extra_len: int
    comment_len: int
    disk_start: OverridableField
    internal_attrs: int
    external_attrs: int
    local_header_offset: OverridableField
    filename: str

    @property
    def date_time(self) -> datetime:
        """Get modification date/time as datetime object."""
        return dos_datetime_to_timestamp(self.mod_date, self.mod_time)


@dataclass
class EndOfCentralDirectory:
    """End of Central Directory record.

    ``offset_in_file`` is the absolute position of the record's signature;
    the ZIP64 locator, when present, sits immediately before it.
    """

    disk_num: int
    cd_disk: int
    cd_records_on_disk: int
    cd_records_total: int
    cd_size: int
    cd_offset: int
    comment_len: int
    comment: bytes
    offset_in_file: int

    def is_zip64(self) -> bool:
        """True if any count or offset holds its placeholder value."""
        return (
            self.cd_disk == SENTINEL_16
            or self.cd_records_on_disk == SENTINEL_16
            or self.cd_records_total == SENTINEL_16
            or self.cd_size == SENTINEL_32
            or self.cd_offset == SENTINEL_32
        )

    def zip64_locator_offset(self) -> int:
        """Absolute position of the ZIP64 locator's signature."""
        offset = self.offset_in_file - ZIP64_LOCATOR_BODY_SIZE - SIGNATURE_SIZE
        if offset < 0:
            raise ZipDecodeError(
                f"No room for a ZIP64 locator before the EOCD at {self.offset_in_file}"
            )
        return offset


@dataclass
class Zip64EndOfCentralDirectory:
    """ZIP64 End of Central Directory record.

    This record is used when ZIP64 extensions are needed (large files,
    many entries, etc.).
    """

    size: int
    version_made_by: int
    version_needed: int
    disk_num: int
    cd_disk: int
    cd_records_on_disk: int
    cd_records_total: int
    cd_size: int
    cd_offset: int


@dataclass
class Zip64Locator:
    """ZIP64 End of Central Directory Locator.

    This record points to the ZIP64 End of Central Directory record.
    """

    disk_num: int
    zip64_eocd_offset: int
    total_disks: int


def parse_local_file_header(f: BinaryIO) -> LocalFileHeader:
    """Parse a local file header whose signature has just been read.

    Raises:
        ZipDecodeError: If the header is truncated or its extra area is malformed.
    """
    version = read_uint16(f)
    flags = read_uint16(f)
    compression_method = read_uint16(f)
    mod_time = read_uint16(f)
    mod_date = read_uint16(f)
    crc32 = read_uint32(f)
    compressed_size = OverridableField.u32(read_uint32(f))
    uncompressed_size = OverridableField.u32(read_uint32(f))
    filename_len = read_uint16(f)
    extra_len = read_uint16(f)

    filename = decode_name(read_exact(f, filename_len))
    resolve_extra_fields(f, extra_len, (uncompressed_size, compressed_size))

    return LocalFileHeader(
        version=version,
        flags=flags,
        compression_method=compression_method,
        mod_time=mod_time,
        mod_date=mod_date,
        crc32=crc32,
        compressed_size=compressed_size,
        uncompressed_size=uncompressed_size,
        filename_len=filename_len,
        extra_len=extra_len,
        filename=filename,
    )


def parse_central_directory_header(f: BinaryIO) -> CentralDirectoryHeader:
    """Parse a central directory header whose signature has just been read.

    The file comment is skipped, leaving the file at the next record.

    Raises:
        ZipDecodeError: If the header is truncated or its extra area is malformed.
    """
    version_made_by = read_uint16(f)
    version = read_uint16(f)
    flags = read_uint16(f)
    compression_method = read_uint16(f)
    mod_time = read_uint16(f)
    mod_date = read_uint16(f)
    crc32 = read_uint32(f)
    compressed_size = OverridableField.u32(read_uint32(f))
    uncompressed_size = OverridableField.u32(read_uint32(f))
    filename_len = read_uint16(f)
    extra_len = read_uint16(f)
    comment_len = read_uint16(f)
    disk_start = OverridableField.u16(read_uint16(f))
    internal_attrs = read_uint16(f)
    external_attrs = read_uint32(f)
    local_header_offset = OverridableField.u32(read_uint32(f))

    filename = decode_name(read_exact(f, filename_len))
    resolve_extra_fields(
        f,
        extra_len,
        (uncompressed_size, compressed_size, local_header_offset, disk_start),
    )
    skip_bytes(f, comment_len)

    return CentralDirectoryHeader(
        version_made_by=version_made_by,
        version=version,
        flags=flags,
        compression_method=compression_method,
        mod_time=mod_time,
        mod_date=mod_date,
        crc32=crc32,
        compressed_size=compressed_size,
        uncompressed_size=uncompressed_size,
        filename_len=filename_len,
        extra_len=extra_len,
        comment_len=comment_len,
        disk_start=disk_start,
        internal_attrs=internal_attrs,
        external_attrs=external_attrs,
        local_header_offset=local_header_offset,
        filename=filename,
    )


def parse_eocd(f: BinaryIO) -> EndOfCentralDirectory:
    """Parse an End of Central Directory record whose signature has just been read."""
    offset_in_file = f.tell() - SIGNATURE_SIZE
    disk_num = read_uint16(f)
    cd_disk = read_uint16(f)
    cd_records_on_disk = read_uint16(f)
    cd_records_total = read_uint16(f)
    cd_size = read_uint32(f)
    cd_offset = read_uint32(f)
    comment_len = read_uint16(f)
    comment = read_exact(f, comment_len)

    return EndOfCentralDirectory(
        disk_num=disk_num,
        cd_disk=cd_disk,
        cd_records_on_disk=cd_records_on_disk,
        cd_records_total=cd_records_total,
        cd_size=cd_size,
        cd_offset=cd_offset,
        comment_len=comment_len,
        comment=comment,
        offset_in_file=offset_in_file,
    )


def parse_zip64_eocd(f: BinaryIO) -> Zip64EndOfCentralDirectory:
    """Parse a ZIP64 End of Central Directory record whose signature has just been read.

    The extensible data sector that may follow the fixed fields is not read.
    """
    return Zip64EndOfCentralDirectory(
        size=read_uint64(f),
        version_made_by=read_uint16(f),
        version_needed=read_uint16(f),
        disk_num=read_uint32(f),
        cd_disk=read_uint32(f),
        cd_records_on_disk=read_uint64(f),
        cd_records_total=read_uint64(f),
        cd_size=read_uint64(f),
        cd_offset=read_uint64(f),
    )


def parse_zip64_locator(f: BinaryIO) -> Zip64Locator:
    """Parse a ZIP64 locator whose signature has just been read."""
    return Zip64Locator(
        disk_num=read_uint32(f),
        zip64_eocd_offset=read_uint64(f),
        total_disks=read_uint32(f),
    )
