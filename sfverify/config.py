"""
Run configuration.

A single VerifyConfig is built before verification starts and threaded
through the pipeline. Nothing in it changes while a run is in progress.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sfverify.checksum.polynomial import DEFAULT_POLYNOMIAL, Polynomial
from sfverify.checksum.verifier import DEFAULT_BUFFER_SIZE
from sfverify.errors import ConfigError

CONFIG_KEYS = ("poly", "jobs", "mem")


def default_workers() -> int:
    """Number of available processing units, at least one."""
    return os.cpu_count() or 1


def default_memory_kib() -> int:
    """Default read-buffer budget in KiB: four per processing unit."""
    return default_workers() * 4


@dataclass(frozen=True)
class VerifyConfig:
    """Configuration for a verification run."""

    polynomial: Polynomial = DEFAULT_POLYNOMIAL
    workers: int = field(default_factory=default_workers)

    # Per-worker read buffer in bytes
    buffer_size: int = DEFAULT_BUFFER_SIZE

    def __post_init__(self) -> None:
        """Validate values."""
        object.__setattr__(self, "polynomial", Polynomial.parse(self.polynomial))
        if self.workers < 1:
            raise ConfigError(f"workers must be >= 1, got {self.workers}")
        if self.buffer_size < 1:
            raise ConfigError(f"buffer_size must be >= 1, got {self.buffer_size}")

    @classmethod
    def from_memory_budget(
        cls,
        memory_kib: int,
        workers: int | None = None,
        polynomial: Polynomial | str = DEFAULT_POLYNOMIAL,
    ) -> VerifyConfig:
        """
        Build a config whose buffers split a memory budget across workers.

        Args:
            memory_kib: Total buffer memory in KiB.
            workers: Worker count. Defaults to the CPU count.
            polynomial: Polynomial or its name.

        Returns:
            VerifyConfig with buffer_size = memory_kib * 1024 // workers.
        """
        if workers is None:
            workers = default_workers()
        if workers < 1:
            raise ConfigError(f"workers must be >= 1, got {workers}")
        if memory_kib < 1:
            raise ConfigError(f"memory budget must be >= 1 KiB, got {memory_kib}")
        buffer_size = max(1, memory_kib * 1024 // workers)
        return cls(polynomial=polynomial, workers=workers, buffer_size=buffer_size)


def load_config_file(path: Path | str) -> dict[str, Any]:
    """
    Load option defaults from a YAML file.

    Recognised keys are ``poly``, ``jobs`` and ``mem``.

    Args:
        path: Path to a YAML mapping.

    Returns:
        Dict holding only the keys present in the file.

    Raises:
        ConfigError: If the file is unreadable, not a mapping, or has unknown keys.
    """
    config_path = Path(path)
    try:
        with config_path.open() as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config {config_path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"error parsing config {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config {config_path} must be a mapping")

    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigError(f"unknown config keys in {config_path}: {', '.join(unknown)}")

    for key in ("jobs", "mem"):
        if key in data and (not isinstance(data[key], int) or isinstance(data[key], bool)):
            raise ConfigError(f"config key '{key}' must be an integer")

    return data
