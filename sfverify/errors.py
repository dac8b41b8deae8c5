"""
Error taxonomy.

Manifest-level errors are fatal to a run. Per-record errors are
collected and reported without stopping the remaining work.
"""

from __future__ import annotations


class SFVError(Exception):
    """Base class for all sfverify errors."""

    pass


class ConfigError(SFVError):
    """Invalid run configuration."""

    pass


class UnsupportedPolynomialError(ConfigError):
    """Polynomial name is not one of the supported CRC32 variants."""

    def __init__(self, name: str):
        super().__init__(f"unsupported polynomial {name}")
        self.name = name


class ManifestError(SFVError):
    """Manifest could not be located, read or parsed."""

    pass


class ManifestNotFoundError(ManifestError):
    """Manifest path does not exist or a directory scan found none."""

    def __init__(self, path: str, message: str | None = None):
        super().__init__(message or f"no sfv found in {path}")
        self.path = path


NoManifestFoundError = ManifestNotFoundError


class MalformedLineError(ManifestError):
    """A record line did not split into a filename and a checksum."""

    def __init__(self, line: str, line_number: int | None = None):
        where = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"could not parse checksum{where}: {line!r}")
        self.line = line
        self.line_number = line_number


class InvalidChecksumError(ManifestError):
    """Checksum token is not a 32-bit hexadecimal value."""

    def __init__(self, token: str, line_number: int | None = None):
        where = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"invalid checksum{where}: {token!r}")
        self.token = token
        self.line_number = line_number


class EmptyManifestError(ManifestError):
    """Manifest parsed but holds no records."""

    def __init__(self, path: str):
        super().__init__(f"no checksums found in {path}")
        self.path = path


class RecordError(SFVError):
    """Failure tied to a single checksum record."""

    pass


class FileAccessError(RecordError):
    """Target file could not be opened or read."""

    def __init__(self, path: str, reason: str):
        super().__init__(reason)
        self.path = path
        self.reason = reason

    @classmethod
    def from_os_error(cls, path: str, error: OSError) -> FileAccessError:
        reason = error.strerror or str(error)
        return cls(path, f"{path}: {reason}")


class ChecksumMismatchError(RecordError):
    """File was read but its checksum differs from the recorded one."""

    def __init__(self, filename: str, expected: int, computed: int):
        super().__init__(
            f"corruption: expected {expected:08x} but computed {computed:08x} for {filename}"
        )
        self.filename = filename
        self.expected = expected
        self.computed = computed
