"""Tests for the command-line interface."""

import logging
import os
import time

import pytest
from click.testing import CliRunner

from zip_backup.cli import cli
from zip_backup.config.config_manager import ConfigManager
from zip_backup.core.archive import ArchiveWriter
from zip_backup.errors import ArchiveWriteError


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_LOCATIONS", [])
    yield
    # CliRunner closes the stream the console handler was bound to
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source(tmp_path):
    root = tmp_path / "data"
    (root / "sub").mkdir(parents=True)
    (root / "sub" / "a.txt").write_text("a")
    return root


@pytest.fixture
def target(tmp_path):
    d = tmp_path / "target"
    d.mkdir()
    return d


# ---------------------------------------------------------------------------
# Usage errors
# ---------------------------------------------------------------------------

class TestUsage:
    def test_missing_mode_flag(self, runner, source, target):
        result = runner.invoke(cli, [str(source), str(target)])
        assert result.exit_code == 1
        assert "Must specify exactly one of --full or --incremental" in result.output
        assert not (target / "backups").exists()

    def test_conflicting_mode_flags(self, runner, source, target):
        result = runner.invoke(cli, [str(source), str(target), "--full", "--incremental"])
        assert result.exit_code == 1
        assert not (target / "backups").exists()

    def test_one_argument(self, runner, source):
        result = runner.invoke(cli, [str(source), "--full"])
        assert result.exit_code == 1
        assert "Usage" in result.output

    def test_three_arguments(self, runner, source, target, tmp_path):
        result = runner.invoke(cli, [str(source), str(target), str(tmp_path), "--full"])
        assert result.exit_code == 1

    def test_unknown_option(self, runner, source, target):
        result = runner.invoke(cli, [str(source), str(target), "--full", "--differential"])
        assert result.exit_code == 1

    def test_bad_log_level(self, runner, source, target):
        result = runner.invoke(cli, [str(source), str(target), "--full", "--log-level", "LOUD"])
        assert result.exit_code == 1

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "--incremental" in result.output


# ---------------------------------------------------------------------------
# Preconditions and configuration
# ---------------------------------------------------------------------------

class TestPreconditions:
    def test_missing_source(self, runner, tmp_path, target):
        result = runner.invoke(cli, [str(tmp_path / "missing"), str(target), "--full"])
        assert result.exit_code == 1
        assert "does not exist or is not a directory" in result.output
        assert list(target.iterdir()) == []

    def test_missing_target(self, runner, source, tmp_path):
        result = runner.invoke(cli, [str(source), str(tmp_path / "missing"), "--incremental"])
        assert result.exit_code == 1
        assert not (tmp_path / "missing").exists()

    def test_missing_config_file(self, runner, source, target, tmp_path):
        result = runner.invoke(cli, [str(source), str(target), "--full",
                                     "--config", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_invalid_config_file(self, runner, source, target, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("archive:\n  password_bytes: 4\n")
        result = runner.invoke(cli, [str(source), str(target), "--full", "-c", str(config)])
        assert result.exit_code == 1
        assert "password_bytes" in result.output


# ---------------------------------------------------------------------------
# Runs
# ---------------------------------------------------------------------------

class TestRuns:
    def test_full_backup(self, runner, source, target):
        result = runner.invoke(cli, [str(source), str(target), "--full"])

        assert result.exit_code == 0, result.output
        archives = list((target / "backups").glob("full*.zip"))
        passwords = list((target / "passwords").glob("pass*.txt"))
        assert len(archives) == 1
        assert len(passwords) == 1
        assert archives[0].name[len("full"):] == passwords[0].name[len("pass"):-len(".txt")] + ".zip"
        assert "Backup completed" in result.output

    def test_incremental_after_full_with_no_changes(self, runner, source, target, monkeypatch):
        from zip_backup.core import walker as walker_module
        monkeypatch.setattr(walker_module, "_created_ms", lambda file_stat: 0)
        an_hour_ago = time.time() - 3600
        os.utime(source / "sub" / "a.txt", (an_hour_ago, an_hour_ago))

        assert runner.invoke(cli, [str(source), str(target), "--full"]).exit_code == 0
        result = runner.invoke(cli, [str(source), str(target), "--incremental"])

        assert result.exit_code == 0, result.output
        assert "no archive written" in result.output
        assert list((target / "backups").glob("incr*.zip")) == []

    def test_config_directory_names(self, runner, source, target, tmp_path):
        config = tmp_path / "zip-backup.yaml"
        config.write_text("archive:\n  backups_dir: zips\n  passwords_dir: keys\n")
        result = runner.invoke(cli, [str(source), str(target), "--full", "-c", str(config)])

        assert result.exit_code == 0, result.output
        assert len(list((target / "zips").glob("full*.zip"))) == 1
        assert len(list((target / "keys").glob("pass*.txt"))) == 1

    def test_log_file(self, runner, source, target, tmp_path):
        log_file = tmp_path / "run.log"
        result = runner.invoke(cli, [str(source), str(target), "--full",
                                     "--log-file", str(log_file)])
        assert result.exit_code == 0, result.output
        assert "zip_backup" in log_file.read_text()

    def test_archive_failure_exit_code(self, runner, source, target, monkeypatch):
        def fail(self, source_path, arcname):
            raise ArchiveWriteError("device full")

        monkeypatch.setattr(ArchiveWriter, "add_file", fail)
        result = runner.invoke(cli, [str(source), str(target), "--full"])

        assert result.exit_code == 2
        assert "device full" in result.output
        assert list((target / "backups").iterdir()) == []

    def test_config_source_logged(self, runner, source, target, tmp_path):
        config = tmp_path / "zip-backup.yaml"
        config.write_text("archive:\n  compression_level: 9\n")
        log_file = tmp_path / "run.log"
        result = runner.invoke(cli, [str(source), str(target), "--full", "-c", str(config),
                                     "--log-file", str(log_file)])

        assert result.exit_code == 0, result.output
        assert f"Using configuration from {config}" in log_file.read_text()

    def test_defaults_logged_without_config(self, runner, source, target, tmp_path):
        log_file = tmp_path / "run.log"
        result = runner.invoke(cli, [str(source), str(target), "--full",
                                     "--log-file", str(log_file)])

        assert result.exit_code == 0, result.output
        assert "using defaults" in log_file.read_text()
