"""
Checksum record and manifest models.

A manifest is read once and never mutated. Records are shared
read-only between worker threads.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from pydantic import BaseModel, ConfigDict, Field

from sfverify.errors import ChecksumMismatchError, EmptyManifestError

if TYPE_CHECKING:
    from sfverify.checksum.polynomial import Polynomial

logger = logging.getLogger(__name__)


class ChecksumRecord(BaseModel):
    """One filename/checksum pair from a manifest."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(description="Filename as written in the manifest")
    path: str = Field(description="Filename resolved against the manifest directory")
    expected: int = Field(ge=0, lt=2**32, description="Recorded CRC32")

    @property
    def expected_hex(self) -> str:
        """Recorded checksum as eight lowercase hex digits."""
        return f"{self.expected:08x}"

    @classmethod
    def resolve(cls, directory: str, filename: str, expected: int) -> ChecksumRecord:
        """
        Create a record, resolving filename against the manifest directory.

        Absolute filenames are kept as they are.
        """
        return cls(
            filename=filename,
            path=os.path.join(directory, filename),
            expected=expected,
        )

    def verify(self, polynomial: Polynomial, buffer_size: int | None = None) -> tuple[bool, int]:
        """Recompute this record's checksum. See sfverify.checksum.verifier.verify."""
        from sfverify.checksum.verifier import verify

        return verify(self, polynomial, buffer_size)

    def exists(self) -> bool:
        """Whether the file is present, without reading it."""
        from sfverify.checksum.verifier import exists

        return exists(self)


class Manifest(BaseModel):
    """Ordered checksum records read from a single SFV file."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Path the manifest was read from")
    records: tuple[ChecksumRecord, ...] = Field(default=())

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[ChecksumRecord]:  # type: ignore[override]
        return iter(self.records)

    @property
    def directory(self) -> str:
        """Directory record filenames are resolved against."""
        return os.path.dirname(self.path)

    @property
    def name(self) -> str:
        return Path(self.path).name

    @property
    def is_empty(self) -> bool:
        return not self.records

    def verify_all(self, polynomial: Polynomial, buffer_size: int | None = None) -> bool:
        """
        Sequentially verify every record, stopping at the first failure.

        Args:
            polynomial: CRC32 polynomial to use.
            buffer_size: Read buffer size in bytes.

        Returns:
            True if all records match, False at the first mismatch.

        Raises:
            EmptyManifestError: If the manifest holds no records.
            FileAccessError: If a file cannot be opened or read.
        """
        if self.is_empty:
            raise EmptyManifestError(self.path)
        for record in self.records:
            matched, _ = record.verify(polynomial, buffer_size)
            if not matched:
                logger.debug("First mismatch in %s: %s", self.path, record.filename)
                return False
        return True

    def check_all(self, polynomial: Polynomial, buffer_size: int | None = None) -> None:
        """
        Like verify_all, but raise ChecksumMismatchError for the first mismatch.
        """
        if self.is_empty:
            raise EmptyManifestError(self.path)
        for record in self.records:
            matched, computed = record.verify(polynomial, buffer_size)
            if not matched:
                raise ChecksumMismatchError(record.filename, record.expected, computed)

    def missing_records(self) -> list[ChecksumRecord]:
        """Records whose files are absent."""
        return [r for r in self.records if not r.exists()]

    def all_exist(self) -> bool:
        """Whether every listed file is present."""
        return all(r.exists() for r in self.records)
