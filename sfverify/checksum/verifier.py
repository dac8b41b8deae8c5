"""
Per-record checksum verification.

Files are streamed through a reusable read buffer into a CRC32
accumulator. Each call allocates its own buffer, so concurrent calls
never share one.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from sfverify.checksum.polynomial import Polynomial
from sfverify.errors import FileAccessError

if TYPE_CHECKING:
    from sfverify.manifest.record import ChecksumRecord

DEFAULT_BUFFER_SIZE = 4096


def compute_crc32(
    path: Path | str,
    polynomial: Polynomial | str,
    buffer_size: int | None = None,
) -> int:
    """
    Compute the CRC32 of a file.

    Args:
        path: File to read.
        polynomial: Polynomial or its name.
        buffer_size: Read buffer size in bytes.

    Returns:
        Unsigned 32-bit checksum.

    Raises:
        FileAccessError: If the file cannot be opened or read.
    """
    poly = Polynomial.parse(polynomial)
    size = buffer_size or DEFAULT_BUFFER_SIZE
    acc = poly.new_accumulator()
    buf = bytearray(size)

    try:
        with open(path, "rb", buffering=0) as f:
            while True:
                n = f.readinto(buf)
                if not n:
                    break
                # Full reads hand over the buffer itself; only the short tail is sliced
                acc.update(buf if n == size else buf[:n])
    except OSError as e:
        raise FileAccessError.from_os_error(str(path), e) from e

    return acc.crcValue


def verify(
    record: ChecksumRecord,
    polynomial: Polynomial | str,
    buffer_size: int | None = None,
) -> tuple[bool, int]:
    """
    Recompute a record's checksum and compare it with the recorded value.

    Args:
        record: Record to verify.
        polynomial: Polynomial or its name.
        buffer_size: Read buffer size in bytes.

    Returns:
        Tuple of (matched, computed checksum).

    Raises:
        FileAccessError: If the file cannot be opened or read. This is
            never reported as a mismatch.
    """
    computed = compute_crc32(record.path, polynomial, buffer_size)
    return computed == record.expected, computed


def exists(record: ChecksumRecord) -> bool:
    """Whether the record's file is present. Only stats the path."""
    try:
        os.stat(record.path)
    except OSError:
        return False
    return True
