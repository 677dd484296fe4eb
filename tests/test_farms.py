"""Tests for the farms command."""

import logging

import pytest

from plotfarm.cli import farms
from plotfarm.cli.dispatcher import create_subcommand_parser
from plotfarm.cli.farms import execute_farms


@pytest.fixture(autouse=True)
def no_logger_setup(monkeypatch):
    """Keep create_logger from replacing the pytest log handlers."""
    monkeypatch.setattr(farms, "create_logger", lambda **kwargs: None)
    monkeypatch.setenv("COLUMNS", "200")


def _write_config(path, body):
    path.write_text(body)
    return create_subcommand_parser().parse_args(["-c", str(path), "farms"])


class TestExecuteFarms:
    """Tests for execute_farms function."""

    def test_existing_and_missing_directories(self, tmp_path, capsys):
        """Test rows for present and missing farm directories."""
        farm = tmp_path / "farm"
        farm.mkdir()
        args = _write_config(
            tmp_path / "config.toml",
            f"""
server_addresses = []

[[storage_entries]]
directory = "{farm}"
allocated_space = "1Ki"

[[storage_entries]]
directory = "{tmp_path / 'gone'}"
""",
        )

        assert execute_farms(args) == 0

        out = capsys.readouterr().out
        assert "1.00 KiB" in out
        assert "missing" in out
        assert "unbounded" in out

    def test_allocation_larger_than_filesystem_warns(self, tmp_path, caplog):
        """Test warning when an allocation exceeds the disk."""
        farm = tmp_path / "farm"
        farm.mkdir()
        args = _write_config(
            tmp_path / "config.toml",
            f"""
server_addresses = []

[[storage_entries]]
directory = "{farm}"
allocated_space = "15EiB"
""",
        )

        with caplog.at_level(logging.WARNING):
            assert execute_farms(args) == 0
        assert "exceeds filesystem size" in caplog.text

    def test_no_farms(self, tmp_path, capsys):
        """Test exit code when no farms are configured."""
        args = _write_config(
            tmp_path / "config.toml", "server_addresses = []\nstorage_entries = []\n"
        )
        assert execute_farms(args) == 1
        assert "No disk farms configured" in capsys.readouterr().out

    def test_invalid_config(self, tmp_path, caplog):
        """Test exit code for an invalid configuration."""
        args = _write_config(
            tmp_path / "config.toml",
            """
server_addresses = []

[[storage_entries]]
directory = "/tmp/plot"

[[storage_entries]]
directory = "/tmp/plot"
""",
        )
        with caplog.at_level(logging.ERROR):
            assert execute_farms(args) == 1
        assert "Disk farms must be unique" in caplog.text
