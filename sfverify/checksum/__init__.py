"""CRC32 polynomials and per-file verification."""

from sfverify.checksum.polynomial import DEFAULT_POLYNOMIAL, Polynomial
from sfverify.checksum.verifier import compute_crc32, exists, verify

__all__ = [
    "DEFAULT_POLYNOMIAL",
    "Polynomial",
    "compute_crc32",
    "exists",
    "verify",
]
