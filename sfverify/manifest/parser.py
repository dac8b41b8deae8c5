"""
SFV manifest parsing and discovery.

Format, one record per line:

    ; comment
    <filename> <hex crc32>

Only the first space separates the fields of a record line.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from sfverify.errors import (
    InvalidChecksumError,
    MalformedLineError,
    ManifestNotFoundError,
)
from sfverify.manifest.record import ChecksumRecord, Manifest

logger = logging.getLogger(__name__)

MANIFEST_EXTENSION = ".sfv"
COMMENT_PREFIX = ";"

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def parse_checksum(token: str, line_number: int | None = None) -> int:
    """
    Parse a hexadecimal checksum token into an unsigned 32-bit integer.

    Raises:
        InvalidChecksumError: If the token is not hex or exceeds 32 bits.
    """
    # int(x, 16) also accepts "0x", "_" and signs, which a manifest must not carry
    if not token or not set(token) <= _HEX_DIGITS:
        raise InvalidChecksumError(token, line_number)
    value = int(token, 16)
    if value >= 2**32:
        raise InvalidChecksumError(token, line_number)
    return value


def parse_line(directory: str, line: str, line_number: int | None = None) -> ChecksumRecord:
    """
    Parse a single record line.

    Args:
        directory: Directory filenames are resolved against.
        line: Trimmed, non-blank, non-comment line.
        line_number: 1-based line number for diagnostics.

    Returns:
        The parsed ChecksumRecord.

    Raises:
        MalformedLineError: If the line has no filename/checksum split.
        InvalidChecksumError: If the checksum token is invalid.
    """
    parts = line.split(" ", 1)
    if len(parts) != 2:
        raise MalformedLineError(line, line_number)

    filename = parts[0].strip()
    token = parts[1].strip()
    if not filename or not token:
        raise MalformedLineError(line, line_number)

    return ChecksumRecord.resolve(directory, filename, parse_checksum(token, line_number))


def parse_lines(directory: str, lines: Iterable[str]) -> list[ChecksumRecord]:
    """
    Parse manifest lines into records, in file order.

    Blank lines and ';' comments are skipped. The first bad line aborts
    the whole parse; no partial list is returned.
    """
    records = []
    for line_number, raw in enumerate(lines, 1):
        line = raw.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        records.append(parse_line(directory, line, line_number))
    return records


def parse_manifest(text: str, path: str) -> Manifest:
    """Parse manifest text as if it had been read from path."""
    records = parse_lines(os.path.dirname(path), text.splitlines())
    return Manifest(path=path, records=tuple(records))


def read_manifest(path: Path | str) -> Manifest:
    """
    Read and parse a manifest file.

    An empty or comment-only file parses to an empty Manifest;
    callers that need records check ``Manifest.is_empty``.

    Raises:
        ManifestNotFoundError: If the file does not exist.
        MalformedLineError: On a line without two fields.
        InvalidChecksumError: On a bad checksum token.
        OSError: On any other read failure.
    """
    manifest_path = os.fspath(path)
    try:
        with open(manifest_path, "r", encoding="utf-8", errors="surrogateescape") as f:
            records = parse_lines(os.path.dirname(manifest_path), f)
    except FileNotFoundError as e:
        raise ManifestNotFoundError(
            manifest_path, f"manifest not found: {manifest_path}"
        ) from e

    logger.debug("Parsed %d checksums from %s", len(records), manifest_path)
    return Manifest(path=manifest_path, records=tuple(records))


def find_manifest(directory: Path | str) -> Manifest:
    """
    Find and read the first SFV manifest in a directory.

    Entries are scanned in name order and the first regular file with a
    ``.sfv`` extension is parsed.

    Raises:
        ManifestNotFoundError: If the directory holds no manifest.
    """
    dir_path = os.fspath(directory)
    try:
        names = sorted(os.listdir(dir_path))
    except FileNotFoundError as e:
        raise ManifestNotFoundError(dir_path, f"directory not found: {dir_path}") from e

    for name in names:
        candidate = os.path.join(dir_path, name)
        if os.path.splitext(name)[1].lower() == MANIFEST_EXTENSION and os.path.isfile(candidate):
            logger.debug("Found manifest %s", candidate)
            return read_manifest(candidate)

    raise ManifestNotFoundError(dir_path)


def load_manifest(path: Path | str) -> Manifest:
    """Read a manifest file, or find one if path is a directory."""
    if os.path.isdir(path):
        return find_manifest(path)
    return read_manifest(path)
