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
Exception classes raised while navigating and extracting a ZIP archive.

Every exception derives from :class:`ZipError` and carries a ``kind`` so
callers can branch on the category of failure without matching on classes,
e.g. treat :attr:`ErrorKind.NOT_FOUND` as a normal negative result while
aborting on :attr:`ErrorKind.PROTOCOL`.
"""

import enum


class ErrorKind(enum.Enum):
    """Category of an extraction failure."""

    IO = "io"
    DECODE = "decode"
    PROTOCOL = "protocol"
    NOT_FOUND = "not_found"
    NAME_MISMATCH = "name_mismatch"
    UNSUPPORTED = "unsupported"
    UNSAFE_PATH = "unsafe_path"


class ZipError(Exception):
    """Base exception class for all ZIP-related errors."""

    kind: ErrorKind = ErrorKind.DECODE


class ZipIoError(ZipError):
    """Raised when reading, seeking or writing fails at the OS level.

    The underlying :class:`OSError` is chained as ``__cause__``.
    """

    kind = ErrorKind.IO


class ZipDecodeError(ZipError):
    """Raised when a record cannot be decoded.

    This exception is raised when:
    - The archive ends in the middle of a record
    - An extra-field area declares more bytes than its record allows
    - A ZIP64 override block is shorter than the overrides it must carry
    """

    kind = ErrorKind.DECODE


class ZipCompressionError(ZipDecodeError):
    """Raised when the DEFLATE stream of an entry is corrupted."""


class ZipProtocolError(ZipError):
    """Raised when the navigator reads a signature it cannot accept.

    Either the value is not one of the five known record signatures, or
    it is a known record in a place the traversal does not expect it.
    """

    kind = ErrorKind.PROTOCOL


class ZipEntryNotFound(ZipError):
    """Raised when the central directory holds no entry with the requested name."""

    kind = ErrorKind.NOT_FOUND


class ZipNameMismatch(ZipError):
    """Raised when a local file header names a different entry than the
    central directory record that pointed to it."""

    kind = ErrorKind.NAME_MISMATCH


class ZipUnsupportedFeature(ZipError):
    """Raised when encountering an unsupported ZIP feature.

    This exception is raised when:
    - Compression method is not deflate
    - The entry is encrypted
    """

    kind = ErrorKind.UNSUPPORTED


class ZipUnsafePathError(ZipError):
    """Raised when an entry name would be written outside the destination."""

    kind = ErrorKind.UNSAFE_PATH
