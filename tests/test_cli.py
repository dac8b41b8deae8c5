"""Tests for the command-line interface."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from sfverify import __version__
from sfverify.checksum import Polynomial
from sfverify.cli import build_config, main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def good_set(tmp_path: Path) -> Path:
    """A directory with two files and a matching CRC32C manifest."""
    lines = ["; test set"]
    for name, data in [("a.txt", b"alpha\n"), ("b.txt", b"bravo\n")]:
        (tmp_path / name).write_bytes(data)
        lines.append(f"{name} {Polynomial.CRC32C.checksum(data):08X}")
    manifest = tmp_path / "set.sfv"
    manifest.write_text("\n".join(lines) + "\n")
    return manifest


class TestMain:
    """Tests for the verify command."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_all_good(self, runner, good_set):
        result = runner.invoke(main, [str(good_set), "--no-progress"])
        assert result.exit_code == 0
        assert "corruption" not in result.output
        assert "error" not in result.output

    def test_all_good_with_progress(self, runner, good_set):
        result = runner.invoke(main, [str(good_set), "-j", "2"])
        assert result.exit_code == 0
        assert "corruption" not in result.output

    def test_directory_argument(self, runner, good_set):
        result = runner.invoke(main, [str(good_set.parent), "--no-progress"])
        assert result.exit_code == 0

    def test_corruption_reported(self, runner, good_set):
        (good_set.parent / "a.txt").write_bytes(b"ALPHA\n")
        result = runner.invoke(main, [str(good_set), "--no-progress"])
        assert result.exit_code == 1
        assert "corruption: expected" in result.output
        assert "for a.txt" in result.output

    def test_missing_file_reported(self, runner, tmp_path):
        data = b"present\n"
        (tmp_path / "a.txt").write_bytes(data)
        manifest = tmp_path / "set.sfv"
        manifest.write_text(
            f"a.txt {Polynomial.IEEE.checksum(data):08X}\nb.txt DEADBEEF\n"
        )

        result = runner.invoke(main, [str(manifest), "--poly", "ieee", "--no-progress"])

        assert result.exit_code == 1
        output_lines = [line for line in result.output.splitlines() if line.strip()]
        assert len(output_lines) == 1
        assert output_lines[0].startswith("error: ")
        assert "b.txt" in output_lines[0]

    def test_wrong_polynomial_fails(self, runner, good_set):
        result = runner.invoke(main, [str(good_set), "-p", "koopman", "--no-progress"])
        assert result.exit_code == 1
        assert result.output.count("corruption") == 2

    def test_unknown_polynomial(self, runner, good_set):
        result = runner.invoke(main, [str(good_set), "--poly", "md5"])
        assert result.exit_code == 1
        assert "unsupported polynomial md5" in result.output

    def test_missing_manifest(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "nope.sfv")])
        assert result.exit_code == 1
        assert "manifest not found" in result.output

    def test_empty_manifest(self, runner, tmp_path):
        manifest = tmp_path / "empty.sfv"
        manifest.write_text("; nothing\n\n")
        result = runner.invoke(main, [str(manifest)])
        assert result.exit_code == 1
        assert "no checksums found" in result.output

    def test_invalid_checksum(self, runner, tmp_path):
        manifest = tmp_path / "bad.sfv"
        manifest.write_text("c.txt ZZZZ\n")
        result = runner.invoke(main, [str(manifest)])
        assert result.exit_code == 1
        assert "invalid checksum" in result.output

    def test_invalid_jobs(self, runner, good_set):
        result = runner.invoke(main, [str(good_set), "-j", "0"])
        assert result.exit_code == 1
        assert "workers must be >= 1" in result.output

    def test_sequential(self, runner, good_set):
        result = runner.invoke(main, [str(good_set), "--sequential"])
        assert result.exit_code == 0

    def test_sequential_stops_at_first(self, runner, good_set):
        (good_set.parent / "a.txt").write_bytes(b"changed")
        (good_set.parent / "b.txt").write_bytes(b"changed too")
        result = runner.invoke(main, [str(good_set), "--sequential"])
        assert result.exit_code == 1
        assert result.output.count("corruption") == 1

    def test_exists_only(self, runner, good_set):
        (good_set.parent / "a.txt").write_bytes(b"contents no longer matter")
        result = runner.invoke(main, [str(good_set), "--exists-only"])
        assert result.exit_code == 0

        (good_set.parent / "a.txt").unlink()
        result = runner.invoke(main, [str(good_set), "--exists-only"])
        assert result.exit_code == 1
        assert "missing:" in result.output

    def test_config_file(self, runner, good_set, tmp_path):
        config = tmp_path / "opts.yaml"
        config.write_text("poly: ieee\njobs: 2\n")
        result = runner.invoke(main, [str(good_set), "-c", str(config), "--no-progress"])
        # Manifest was written with crc32c, so ieee from the file must mismatch
        assert result.exit_code == 1

        result = runner.invoke(
            main, [str(good_set), "-c", str(config), "-p", "crc32c", "--no-progress"]
        )
        assert result.exit_code == 0


class TestBuildConfig:
    """Tests for option precedence."""

    def test_cli_overrides_file(self):
        config = build_config({"poly": "ieee", "jobs": 8, "mem": 64}, "koop", 2, None)
        assert config.polynomial is Polynomial.KOOPMAN
        assert config.workers == 2
        assert config.buffer_size == 64 * 1024 // 2

    def test_file_overrides_defaults(self):
        config = build_config({"poly": "ieee", "jobs": 4, "mem": 16}, None, None, None)
        assert config.polynomial is Polynomial.IEEE
        assert config.buffer_size == 4096

    def test_defaults(self):
        config = build_config({}, None, None, None)
        assert config.polynomial is Polynomial.CRC32C
