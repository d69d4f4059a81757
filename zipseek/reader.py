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
Single-entry extraction by walking the archive's record chain.

The walk starts at the end of central directory record, hops through the
ZIP64 locator and record when the classic trailer overflows, scans the
central directory for the requested name and finally reads that entry's
local header and data. No other entry's data is read.
"""

import enum
import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional

from .constants import (
    CHUNK_SIZE,
    COMP_DEFLATE,
    END_OF_CENTRAL_DIR_SIZE,
    FLAG_DATA_DESCRIPTOR,
    FLAG_ENCRYPTED,
)
from .decompress import decompress_to
from .errors import (
    ZipDecodeError,
    ZipEntryNotFound,
    ZipError,
    ZipIoError,
    ZipNameMismatch,
    ZipProtocolError,
    ZipUnsupportedFeature,
)
from .structures import (
    CentralDirectoryHeader,
    LocalFileHeader,
    Signature,
    parse_central_directory_header,
    parse_eocd,
    parse_local_file_header,
    parse_zip64_eocd,
    parse_zip64_locator,
    read_signature,
)
from .utils import safe_extract_path

logger = logging.getLogger(__name__)


class NavigatorState(enum.Enum):
    """Position in the record chain, named by the record expected next."""

    EOCD = Signature.END_OF_CENTRAL_DIRECTORY
    ZIP64_LOCATOR = Signature.ZIP64_END_OF_CENTRAL_DIRECTORY_LOCATOR
    ZIP64_EOCD = Signature.ZIP64_END_OF_CENTRAL_DIRECTORY
    CENTRAL_DIRECTORY = Signature.CENTRAL_DIRECTORY_HEADER
    LOCAL_HEADER = Signature.LOCAL_FILE_HEADER

    @property
    def expected_signature(self) -> Signature:
        return self.value


def locate_eocd(f: BinaryIO) -> int:
    """Seek to the end of central directory record and return its offset.

    The record is assumed to be the last 22 bytes of the archive. Archives
    with a trailing comment are not supported: the bytes found there will
    not carry the EOCD signature and the walk fails with a protocol error.
    """
    # TODO: scan backward over the last 64 KiB + 22 bytes for archives with a comment.
    size = f.seek(0, io.SEEK_END)
    if size < END_OF_CENTRAL_DIR_SIZE:
        raise ZipDecodeError(
            f"Archive of {size} bytes is too small for an end of central directory record"
        )
    return f.seek(-END_OF_CENTRAL_DIR_SIZE, io.SEEK_END)


class UnZip:
    """Extract single entries from a ZIP or ZIP64 archive into a directory.

    Example:
        with UnZip("archive.zip", "out") as z:
            path = z.extract("docs/readme.txt")
    """

    def __init__(
        self,
        archive: str | Path | BinaryIO,
        destination: str | Path,
        chunk_size: int = CHUNK_SIZE,
    ):
        """Bind an archive to a destination directory.

        Args:
            archive: Path to the ZIP file, or a seekable binary file-like object.
                A path is opened here and closed by :meth:`close`; a file
                object stays owned by the caller.
            destination: Directory extracted entries are written under.
            chunk_size: Read and write granularity of the decompressor.

        Raises:
            ZipIoError: If the archive path cannot be opened.
        """
        if hasattr(archive, "__fspath__"):
            archive = str(archive)

        logger.info("UnZip %s -> %s", archive, destination)
        if isinstance(archive, str):
            try:
                self._file = open(archive, "rb")
            except OSError as e:
                logger.error("Cannot open %s: %s", archive, e)
                raise ZipIoError(f"Cannot open archive {archive}: {e}") from e
            self._should_close = True
        else:
            for method in ("read", "seek", "tell"):
                if not hasattr(archive, method):
                    raise TypeError(f"File-like object must have a {method}() method")
            self._file = archive
            self._should_close = False

        self.destination = Path(destination)
        self.chunk_size = chunk_size
        self._closed = False

    def extract(self, name: str) -> Path:
        """Extract the entry called 'name' and return the written path.

        Raises:
            ZipEntryNotFound: If no central directory entry has that name.
            ZipNameMismatch: If the local header found for it names another entry.
            ZipProtocolError: If an unknown or out-of-place signature is met.
            ZipDecodeError: If a record is truncated or malformed.
            ZipUnsupportedFeature: If the entry is encrypted or not deflated.
            ZipUnsafePathError: If the name would escape the destination.
            ZipIoError: On any OS-level read, seek or write failure.
        """
        if self._closed:
            raise ZipIoError("Archive is closed")

        logger.info("UnZip.extract <- %s", name)
        try:
            path = self._walk(name)
        except ZipError as e:
            logger.error("%s", e)
            raise
        except OSError as e:
            logger.error("%s", e)
            raise ZipIoError(f"I/O error while extracting {name!r}: {e}") from e
        logger.info("UnZip.extract -> %s", path)
        return path

    def _walk(self, name: str) -> Path:
        f = self._file
        state = NavigatorState.EOCD
        remaining = 0
        matched: Optional[CentralDirectoryHeader] = None

        locate_eocd(f)
        while True:
            position = f.tell()
            value = read_signature(f)
            signature = Signature.lookup(value)
            if signature is None:
                raise ZipProtocolError(
                    f"Unexpected signature 0x{value:08X} at offset {position}"
                )
            if signature is not state.expected_signature:
                raise ZipProtocolError(
                    f"Expected {state.expected_signature.name} at offset {position}, "
                    f"found {signature.name}"
                )
            logger.debug("%s at offset %d", signature.name, position)

            if state is NavigatorState.EOCD:
                eocd = parse_eocd(f)
                if eocd.is_zip64():
                    f.seek(eocd.zip64_locator_offset())
                    state = NavigatorState.ZIP64_LOCATOR
                    continue
                remaining = eocd.cd_records_total
                cd_offset = eocd.cd_offset

            elif state is NavigatorState.ZIP64_LOCATOR:
                locator = parse_zip64_locator(f)
                f.seek(locator.zip64_eocd_offset)
                state = NavigatorState.ZIP64_EOCD
                continue

            elif state is NavigatorState.ZIP64_EOCD:
                zip64_eocd = parse_zip64_eocd(f)
                remaining = zip64_eocd.cd_records_total
                cd_offset = zip64_eocd.cd_offset

            elif state is NavigatorState.CENTRAL_DIRECTORY:
                header = parse_central_directory_header(f)
                remaining -= 1
                if header.filename == name:
                    matched = header
                    f.seek(header.local_header_offset.value)
                    state = NavigatorState.LOCAL_HEADER
                elif remaining == 0:
                    raise ZipEntryNotFound(f"{name!r} is not found in the archive")
                continue

            else:
                local_header = parse_local_file_header(f)
                if local_header.filename != name:
                    raise ZipNameMismatch(
                        f"Local header at offset {position} names "
                        f"{local_header.filename!r}, expected {name!r}"
                    )
                return self._write_entry(name, local_header, matched)

            # Both trailer flavours end here, ready for the directory scan.
            logger.debug("%d central directory entries at offset %d", remaining, cd_offset)
            if remaining == 0:
                raise ZipEntryNotFound(f"{name!r} is not found in an empty archive")
            f.seek(cd_offset)
            state = NavigatorState.CENTRAL_DIRECTORY

    def _write_entry(
        self,
        name: str,
        local_header: LocalFileHeader,
        central_header: Optional[CentralDirectoryHeader],
    ) -> Path:
        if local_header.flags & FLAG_ENCRYPTED:
            raise ZipUnsupportedFeature(f"Entry {name!r} is encrypted (encryption not supported)")
        if local_header.compression_method != COMP_DEFLATE:
            raise ZipUnsupportedFeature(
                f"Entry {name!r} uses compression method "
                f"{local_header.compression_method}, only deflate is supported"
            )

        compressed_size = local_header.compressed_size.value
        if (
            local_header.flags & FLAG_DATA_DESCRIPTOR
            and compressed_size == 0
            and central_header is not None
        ):
            # Sizes follow the data; the directory already has them.
            compressed_size = central_header.compressed_size.value

        target = safe_extract_path(self.destination, name)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as sink:
            written = decompress_to(self._file, compressed_size, sink, self.chunk_size)
        logger.debug("Inflated %d bytes into %d bytes", compressed_size, written)
        return target

    def close(self) -> None:
        """Close the archive file if this object opened it."""
        if self._closed:
            return

        if self._should_close and self._file:
            self._file.close()
        self._file = None
        self._closed = True

    def __enter__(self) -> "UnZip":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
