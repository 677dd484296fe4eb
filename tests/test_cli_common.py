"""Tests for CLI common utilities."""

import argparse

import pytest

from plotfarm.cli import common
from plotfarm.cli.common import (
    add_verbosity_args,
    find_config_file,
    get_log_level,
    load_config_from_args,
)
from plotfarm.config import ConfigError, DuplicateServerError


class TestAddVerbosityArgs:
    """Tests for add_verbosity_args function."""

    def test_adds_all_flags(self):
        """Test that all verbosity flags are added."""
        parser = argparse.ArgumentParser()
        add_verbosity_args(parser)
        args = parser.parse_args(["--quiet", "--debug"])
        assert args.quiet is True
        assert args.debug is True
        assert args.verbose is False


class TestGetLogLevel:
    """Tests for get_log_level function."""

    @pytest.mark.parametrize(
        ("flags", "expected"),
        [
            ({}, "INFO"),
            ({"verbose": True}, "DEBUG"),
            ({"quiet": True}, "WARNING"),
            ({"debug": True, "quiet": True}, "DEBUG"),
        ],
    )
    def test_levels(self, flags, expected):
        """Test mapping flags to log levels."""
        assert get_log_level(argparse.Namespace(**flags)) == expected


class TestFindConfigFile:
    """Tests for find_config_file function."""

    def test_explicit_path_exists(self, config_file):
        """Test finding explicitly specified config file."""
        assert find_config_file(str(config_file)) == config_file

    def test_explicit_path_not_exists(self, tmp_path):
        """Test error when explicit path doesn't exist."""
        with pytest.raises(ConfigError, match="not found"):
            find_config_file(str(tmp_path / "nonexistent.toml"))

    def test_search_paths_in_order(self, tmp_path, config_file):
        """Test that the first existing search path wins."""
        missing = tmp_path / "missing.toml"
        assert find_config_file(None, [missing, config_file]) == config_file

    def test_nothing_found(self, tmp_path):
        """Test returning None when no config exists."""
        assert find_config_file(None, [tmp_path / "missing.toml"]) is None


class TestLoadConfigFromArgs:
    """Tests for load_config_from_args function."""

    def test_loads_explicit_config(self, config_file):
        """Test loading the config named by --config."""
        path, config = load_config_from_args(argparse.Namespace(config=str(config_file)))
        assert path == config_file
        assert len(config.storage_entries) == 2

    def test_no_config_found(self, tmp_path, monkeypatch):
        """Test error when no config file is found."""
        monkeypatch.setattr(common, "CONFIG_PATHS", [tmp_path / "missing.toml"])
        with pytest.raises(ConfigError, match="No configuration file found"):
            load_config_from_args(argparse.Namespace(config=None))

    def test_validation_errors_propagate(self, tmp_config_dir):
        """Test that validation errors reach the caller."""
        path = tmp_config_dir / "dup.toml"
        path.write_text('server_addresses = ["a:1", "a:1"]\nstorage_entries = []\n')
        with pytest.raises(DuplicateServerError):
            load_config_from_args(argparse.Namespace(config=str(path)))
