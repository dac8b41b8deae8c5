"""Manifest system: checksum records, parsing, and discovery."""

from sfverify.manifest.record import ChecksumRecord, Manifest
from sfverify.manifest.parser import (
    MANIFEST_EXTENSION,
    find_manifest,
    load_manifest,
    parse_line,
    parse_lines,
    parse_manifest,
    read_manifest,
)

__all__ = [
    "ChecksumRecord",
    "Manifest",
    "MANIFEST_EXTENSION",
    "find_manifest",
    "load_manifest",
    "parse_line",
    "parse_lines",
    "parse_manifest",
    "read_manifest",
]
