"""
Verification outcomes.

Each record produces exactly one Outcome: a match, a mismatch, or an
access error. The status enum keeps the three cases explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sfverify.errors import ChecksumMismatchError, FileAccessError, RecordError
from sfverify.manifest.record import ChecksumRecord


class OutcomeStatus(str, Enum):
    """Result class of a single record verification."""

    MATCH = "match"
    MISMATCH = "mismatch"
    ACCESS_ERROR = "access_error"


@dataclass(frozen=True)
class Outcome:
    """Per-record verification result."""

    record: ChecksumRecord
    status: OutcomeStatus
    computed: int = 0
    file_error: FileAccessError | None = None

    @classmethod
    def match(cls, record: ChecksumRecord, computed: int) -> Outcome:
        return cls(record=record, status=OutcomeStatus.MATCH, computed=computed)

    @classmethod
    def mismatch(cls, record: ChecksumRecord, computed: int) -> Outcome:
        return cls(record=record, status=OutcomeStatus.MISMATCH, computed=computed)

    @classmethod
    def access_error(cls, record: ChecksumRecord, error: FileAccessError) -> Outcome:
        return cls(record=record, status=OutcomeStatus.ACCESS_ERROR, file_error=error)

    @property
    def matched(self) -> bool:
        return self.status is OutcomeStatus.MATCH

    @property
    def error(self) -> RecordError | None:
        """
        The failure as an exception, or None on a match.

        Mismatches are rendered as ChecksumMismatchError so callers can
        treat every failure uniformly.
        """
        if self.status is OutcomeStatus.ACCESS_ERROR:
            return self.file_error
        if self.status is OutcomeStatus.MISMATCH:
            return ChecksumMismatchError(
                self.record.filename, self.record.expected, self.computed
            )
        return None

    def describe(self) -> str | None:
        """One-line report for a failed outcome, None on a match."""
        if self.status is OutcomeStatus.MISMATCH:
            return str(self.error)
        if self.status is OutcomeStatus.ACCESS_ERROR:
            return f"error: {self.file_error}"
        return None
