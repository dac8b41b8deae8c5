"""
sfverify: Parallel CRC32 verification of SFV manifests.

Parses a manifest, re-checksums every listed file over a worker pool,
and reports corrupt or unreadable files.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
