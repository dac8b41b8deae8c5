"""
sfverify CLI.

A tiny, io-bound tool for verifying SFV manifests.
"""

from __future__ import annotations

import logging
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from sfverify import __version__
from sfverify.checksum.polynomial import DEFAULT_POLYNOMIAL, Polynomial
from sfverify.config import (
    VerifyConfig,
    default_memory_kib,
    default_workers,
    load_config_file,
)
from sfverify.errors import EmptyManifestError, RecordError, SFVError
from sfverify.manifest.parser import load_manifest
from sfverify.manifest.record import Manifest
from sfverify.pipelines.aggregate import Aggregator
from sfverify.pipelines.outcome import Outcome
from sfverify.pipelines.runner import VerificationPipeline

logger = logging.getLogger(__name__)


class ConsoleSink:
    """Prints failures to the console, with an optional live progress bar."""

    def __init__(self, console: Console, progress: Progress | None = None, total: int = 0):
        self.console = console
        self.progress = progress
        self.task_id = progress.add_task("verifying", total=total) if progress else None

    def advance(self) -> None:
        if self.progress is not None:
            self.progress.advance(self.task_id)

    def report(self, outcome: Outcome, message: str) -> None:
        self.console.print(message, markup=False, highlight=False, soft_wrap=True)


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def build_config(
    file_values: dict[str, Any],
    poly: str | None,
    jobs: int | None,
    mem: int | None,
) -> VerifyConfig:
    """
    Merge command-line options over config-file values over defaults.

    Raises:
        UnsupportedPolynomialError: On an unknown polynomial name.
        ConfigError: On a non-positive worker count or memory budget.
    """
    poly_name = poly if poly is not None else file_values.get("poly", DEFAULT_POLYNOMIAL.value)
    workers = jobs if jobs is not None else file_values.get("jobs", default_workers())
    memory = mem if mem is not None else file_values.get("mem", default_memory_kib())

    polynomial = Polynomial.parse(poly_name)
    return VerifyConfig.from_memory_budget(memory, workers=workers, polynomial=polynomial)


def run_parallel(manifest: Manifest, config: VerifyConfig, console: Console, show_progress: bool) -> int:
    """Verify every record over the worker pool and report all failures."""
    pipeline = VerificationPipeline(records=manifest.records, config=config)

    if not show_progress:
        summary = Aggregator(sink=ConsoleSink(console)).consume(pipeline)
        return summary.exit_code

    progress = Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    )
    with progress:
        sink = ConsoleSink(console, progress, total=len(manifest))
        summary = Aggregator(sink=sink).consume(pipeline)
    return summary.exit_code


def run_sequential(manifest: Manifest, config: VerifyConfig, console: Console) -> int:
    """Verify records one by one, stopping at the first failure."""
    try:
        manifest.check_all(config.polynomial, config.buffer_size)
    except RecordError as e:
        console.print(str(e), markup=False, highlight=False, soft_wrap=True)
        return 1
    return 0


def run_exists(manifest: Manifest, console: Console) -> int:
    """Check that every listed file is present."""
    missing = manifest.missing_records()
    for record in missing:
        console.print(f"missing: {record.path}", markup=False, highlight=False, soft_wrap=True)
    return 1 if missing else 0


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.argument("manifest_path", metavar="MANIFEST")
@click.option(
    "--poly", "-p",
    default=None,
    help="CRC base polynomial: crc32c (Castagnoli), ieee, or koopman [default: crc32c]",
)
@click.option("--jobs", "-j", type=int, default=None, help="Number of parallel workers [default: CPU count]")
@click.option("--mem", type=int, default=None, help="KiB of memory to use as file buffers [default: CPU count * 4]")
@click.option("--config", "-c", "config_path", type=click.Path(), help="YAML file with poly/jobs/mem defaults")
@click.option("--sequential", is_flag=True, help="Verify one file at a time and stop at the first failure")
@click.option("--exists-only", is_flag=True, help="Only check that listed files exist")
@click.option("--progress/--no-progress", default=True, help="Show a progress bar")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(
    manifest_path: str,
    poly: str | None,
    jobs: int | None,
    mem: int | None,
    config_path: str | None,
    sequential: bool,
    exists_only: bool,
    progress: bool,
    verbose: bool,
) -> None:
    """Verify the files listed in an SFV MANIFEST (a file or a directory holding one)."""
    configure_logging(verbose)
    console = Console(highlight=False)

    try:
        file_values = load_config_file(config_path) if config_path else {}
        config = build_config(file_values, poly, jobs, mem)
        manifest = load_manifest(manifest_path)
        if manifest.is_empty:
            raise EmptyManifestError(manifest.path)
    except SFVError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    except OSError as e:
        click.echo(f"Error: {manifest_path}: {e.strerror or e}", err=True)
        raise SystemExit(1)

    logger.debug("Verifying %d files from %s", len(manifest), manifest.path)

    if exists_only:
        exit_code = run_exists(manifest, console)
    elif sequential:
        exit_code = run_sequential(manifest, config, console)
    else:
        exit_code = run_parallel(manifest, config, console, show_progress=progress)

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
