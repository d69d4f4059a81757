"""Byte-exact archive assembly for tests that need records zipfile will not write."""

import struct
import zlib
from dataclasses import dataclass
from typing import Optional, Sequence

from zipseek.constants import (
    CENTRAL_DIR_HEADER,
    END_OF_CENTRAL_DIR,
    LOCAL_FILE_HEADER,
    ZIP64_END_OF_CENTRAL_DIR,
    ZIP64_END_OF_CENTRAL_DIR_LOCATOR,
)

EOCD_FIELDS = ("cd_disk", "cd_records_on_disk", "cd_records_total", "cd_size", "cd_offset")


def deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(9, zlib.DEFLATED, -zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


def zip64_extra(*values: int, disk: Optional[int] = None) -> bytes:
    body = b"".join(struct.pack("<Q", v) for v in values)
    if disk is not None:
        body += struct.pack("<I", disk)
    return struct.pack("<HH", 0x0001, len(body)) + body


@dataclass
class Entry:
    name: str
    data: bytes
    method: int = 8
    flags: int = 0
    # Name written into the local header when it should disagree with the directory.
    local_name: Optional[str] = None
    local_extra: bytes = b""
    cd_extra: bytes = b""
    comment: bytes = b""


def build_archive(
    entries: Sequence[Entry],
    zip64: bool = False,
    zip64_entries: bool = False,
    eocd_sentinels: Sequence[str] = EOCD_FIELDS,
    comment: bytes = b"",
) -> bytes:
    """Assemble an archive.

    zip64: write the ZIP64 record and locator; the classic EOCD holds the
        sentinels named in 'eocd_sentinels' and zeros everywhere else, so a
        reader that trusts the classic values cannot find anything.
    zip64_entries: store every size and offset through ZIP64 extra fields.
    """
    out = bytearray()
    central = bytearray()

    for entry in entries:
        payload = deflate(entry.data) if entry.method == 8 else entry.data
        crc = zlib.crc32(entry.data) & 0xFFFFFFFF
        offset = len(out)
        local_name = (entry.local_name or entry.name).encode("utf-8")
        name = entry.name.encode("utf-8")
        descriptor = entry.flags & 0x0008

        if zip64_entries:
            local_sizes = (0xFFFFFFFF, 0xFFFFFFFF)
            local_extra = zip64_extra(len(entry.data), len(payload)) + entry.local_extra
        elif descriptor:
            local_sizes = (0, 0)
            local_extra = entry.local_extra
        else:
            local_sizes = (len(payload), len(entry.data))
            local_extra = entry.local_extra

        out += struct.pack(
            "<IHHHHHIIIHH",
            LOCAL_FILE_HEADER,
            45 if zip64_entries else 20,
            entry.flags,
            entry.method,
            0x6000,
            0x5A61,
            0 if descriptor else crc,
            *local_sizes,
            len(local_name),
            len(local_extra),
        )
        out += local_name + local_extra + payload
        if descriptor:
            out += struct.pack("<IIII", 0x08074B50, crc, len(payload), len(entry.data))

        if zip64_entries:
            cd_fields = (0xFFFFFFFF, 0xFFFFFFFF, 0xFFFFFFFF)
            cd_extra = zip64_extra(len(entry.data), len(payload), offset) + entry.cd_extra
        else:
            cd_fields = (len(payload), len(entry.data), offset)
            cd_extra = entry.cd_extra

        central += struct.pack(
            "<IHHHHHHIIIHHHHHII",
            CENTRAL_DIR_HEADER,
            0x031E,
            45 if zip64_entries else 20,
            entry.flags,
            entry.method,
            0x6000,
            0x5A61,
            crc,
            cd_fields[0],
            cd_fields[1],
            len(name),
            len(cd_extra),
            len(entry.comment),
            0,
            0,
            0o100644 << 16,
            cd_fields[2],
        )
        central += name + cd_extra + entry.comment

    cd_offset = len(out)
    out += central
    count = len(entries)

    if zip64:
        zip64_eocd_offset = len(out)
        out += struct.pack(
            "<IQHHIIQQQQ",
            ZIP64_END_OF_CENTRAL_DIR,
            44,
            45,
            45,
            0,
            0,
            count,
            count,
            len(central),
            cd_offset,
        )
        out += struct.pack("<IIQI", ZIP64_END_OF_CENTRAL_DIR_LOCATOR, 0, zip64_eocd_offset, 1)
        values = {name: 0 for name in EOCD_FIELDS}
        for name in eocd_sentinels:
            values[name] = 0xFFFFFFFF if name in ("cd_size", "cd_offset") else 0xFFFF
    else:
        values = {
            "cd_disk": 0,
            "cd_records_on_disk": count,
            "cd_records_total": count,
            "cd_size": len(central),
            "cd_offset": cd_offset,
        }

    out += struct.pack(
        "<IHHHHIIH",
        END_OF_CENTRAL_DIR,
        0,
        values["cd_disk"],
        values["cd_records_on_disk"],
        values["cd_records_total"],
        values["cd_size"],
        values["cd_offset"],
        len(comment),
    )
    out += comment
    return bytes(out)
