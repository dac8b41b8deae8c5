"""
CRC32 polynomial selection.

Each variant is reflected, starts from 0xFFFFFFFF and is inverted on
output, so they differ only in the generator polynomial.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

import crcmod

from sfverify.errors import UnsupportedPolynomialError

# Generator polynomials in normal form, including the x^32 term as crcmod expects.
_GENERATORS = {
    "crc32c": 0x11EDC6F41,
    "ieee": 0x104C11DB7,
    "koopman": 0x1741B8CD7,
}

_ALIASES = {
    "castagnoli": "crc32c",
    "koop": "koopman",
}


class Polynomial(str, Enum):
    """Supported CRC32 generator polynomials."""

    CRC32C = "crc32c"
    IEEE = "ieee"
    KOOPMAN = "koopman"

    @property
    def generator(self) -> int:
        """Generator polynomial in normal form."""
        return _GENERATORS[self.value]

    @classmethod
    def parse(cls, name: str) -> Polynomial:
        """
        Resolve a polynomial from its command-line name.

        Args:
            name: Name such as "crc32c", "ieee", "koopman" or "koop".

        Returns:
            Matching Polynomial.

        Raises:
            UnsupportedPolynomialError: If the name is not recognised.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedPolynomialError(name) from None

    def new_accumulator(self) -> crcmod.Crc:
        """Create a fresh incremental CRC accumulator for this polynomial."""
        return _template(self.generator).new()

    def checksum(self, data: bytes) -> int:
        """Checksum a complete byte string."""
        acc = self.new_accumulator()
        acc.update(data)
        return acc.crcValue


@lru_cache(maxsize=None)
def _template(generator: int) -> crcmod.Crc:
    # Building the lookup table is the expensive part; new() reuses it.
    return crcmod.Crc(generator, initCrc=0, rev=True, xorOut=0xFFFFFFFF)


DEFAULT_POLYNOMIAL = Polynomial.CRC32C
