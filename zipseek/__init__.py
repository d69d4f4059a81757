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
ZIPSEEK - pull one entry out of a ZIP or ZIP64 archive.

The archive is never read sequentially: the extractor seeks from the end of
central directory record to the central directory, finds the requested name
and inflates only that entry's data.
"""

from .errors import (
    ErrorKind,
    ZipCompressionError,
    ZipDecodeError,
    ZipEntryNotFound,
    ZipError,
    ZipIoError,
    ZipNameMismatch,
    ZipProtocolError,
    ZipUnsafePathError,
    ZipUnsupportedFeature,
)
from .reader import UnZip

__all__ = [
    "UnZip",
    "ErrorKind",
    "ZipError",
    "ZipIoError",
    "ZipDecodeError",
    "ZipCompressionError",
    "ZipProtocolError",
    "ZipEntryNotFound",
    "ZipNameMismatch",
    "ZipUnsupportedFeature",
    "ZipUnsafePathError",
]

__version__ = "0.1.0"
