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
Extra field walking and ZIP64 overrides.

A classic header stores sizes and offsets in 32-bit (or 16-bit) slots. When a
value does not fit, the slot holds an all-ones placeholder and the real value
follows in the ZIP64 extra block (tag 0x0001). The block lists only the
overridden values, always in the order: uncompressed size, compressed size,
local header offset, disk start number.

Both header decoders describe their overridable slots as
:class:`OverridableField` objects and hand them to
:func:`resolve_extra_fields`, so the two code paths cannot drift apart.
"""

from dataclasses import dataclass
from typing import BinaryIO, Optional, Sequence

from .constants import (
    EXTRA_FIELD_HEADER_SIZE,
    SENTINEL_16,
    SENTINEL_32,
    ZIP64_EXTRA_FIELD_TAG,
)
from .errors import ZipDecodeError
from .utils import read_uint16, read_uint32, read_uint64, skip_bytes


@dataclass
class OverridableField:
    """A fixed-width header field that a ZIP64 extra block may replace.

    ``provisional`` is the value stored in the classic slot. ``override`` is
    filled in by the resolver only when ``provisional`` equals ``sentinel``.
    """

    provisional: int
    sentinel: int = SENTINEL_32
    width: int = 8
    override: Optional[int] = None

    @classmethod
    def u32(cls, provisional: int) -> "OverridableField":
        """A 32-bit size or offset slot, overridden by a 64-bit value."""
        return cls(provisional, SENTINEL_32, 8)

    @classmethod
    def u16(cls, provisional: int) -> "OverridableField":
        """A 16-bit disk number slot, overridden by a 32-bit value."""
        return cls(provisional, SENTINEL_16, 4)

    @property
    def is_placeholder(self) -> bool:
        return self.provisional == self.sentinel

    @property
    def value(self) -> int:
        if self.override is not None:
            return self.override
        return self.provisional


@dataclass
class ExtraFieldHeader:
    """(id, size) pair introducing one extra field block."""

    id: int
    size: int


def parse_extra_field_header(f: BinaryIO) -> ExtraFieldHeader:
    tag = read_uint16(f)
    size = read_uint16(f)
    return ExtraFieldHeader(id=tag, size=size)


def _read_overrides(
    f: BinaryIO, header: ExtraFieldHeader, overrides: Sequence[OverridableField]
) -> None:
    consumed = 0
    for field in overrides:
        if not field.is_placeholder:
            continue
        consumed += field.width
        if consumed > header.size:
            raise ZipDecodeError(
                f"ZIP64 extra block too short: {header.size} bytes, "
                f"needs at least {consumed}"
            )
        if field.width == 8:
            field.override = read_uint64(f)
        else:
            field.override = read_uint32(f)

    # Writers may pad the block or include values we did not ask for.
    if consumed < header.size:
        skip_bytes(f, header.size - consumed)


def resolve_extra_fields(
    f: BinaryIO, extra_len: int, overrides: Sequence[OverridableField] = ()
) -> int:
    """Walk an extra field area and apply ZIP64 overrides.

    Args:
        f: Archive positioned at the first byte of the extra field area.
        extra_len: Size of the area as declared by the enclosing header.
        overrides: The header's overridable slots, in ZIP64 order.

    Returns:
        Number of extra blocks walked.

    Raises:
        ZipDecodeError: If a block runs past the declared area, or the
            ZIP64 block cannot hold the overrides the placeholders demand.
    """
    remaining = extra_len
    blocks = 0
    while remaining > 0:
        if remaining < EXTRA_FIELD_HEADER_SIZE:
            raise ZipDecodeError(
                f"Extra field area ends with {remaining} stray bytes"
            )
        header = parse_extra_field_header(f)
        remaining -= EXTRA_FIELD_HEADER_SIZE + header.size
        if remaining < 0:
            raise ZipDecodeError(
                f"Extra field 0x{header.id:04X} of {header.size} bytes overruns "
                f"the {extra_len}-byte extra area"
            )
        if header.id == ZIP64_EXTRA_FIELD_TAG:
            _read_overrides(f, header, overrides)
        else:
            skip_bytes(f, header.size)
        blocks += 1
    return blocks
