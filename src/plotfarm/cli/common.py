"""Shared CLI utilities and argument parsers."""

import argparse
from pathlib import Path
from typing import Optional, Sequence

from ..config import Config, ConfigError, load_config

# Config file search paths in priority order
CONFIG_PATHS = [
    Path.home() / ".config" / "plotfarm" / "config.toml",
    Path("/etc/plotfarm/config.toml"),
]


def add_verbosity_args(parser: argparse.ArgumentParser) -> None:
    """Add verbosity-related arguments to a parser."""
    group = parser.add_argument_group("Output options")
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    group.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )
    group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )


def get_log_level(args: argparse.Namespace) -> str:
    """Determine log level from parsed arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Log level string (DEBUG, INFO, WARNING, ERROR)
    """
    if getattr(args, "debug", False):
        return "DEBUG"
    elif getattr(args, "quiet", False):
        return "WARNING"
    elif getattr(args, "verbose", False):
        return "DEBUG"
    else:
        return "INFO"


def find_config_file(
    explicit_path: Optional[str] = None,
    search_paths: Optional[Sequence[Path]] = None,
) -> Optional[Path]:
    """Find configuration file.

    Args:
        explicit_path: Explicitly specified config path (highest priority)
        search_paths: Locations to try otherwise (defaults to CONFIG_PATHS)

    Returns:
        Path to config file, or None if not found
    """
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            return path
        raise ConfigError(f"Config file not found: {explicit_path}")

    for path in CONFIG_PATHS if search_paths is None else search_paths:
        if path.exists():
            return path

    return None


def load_config_from_args(args: argparse.Namespace) -> tuple[Path, Config]:
    """Locate and load the configuration named by --config or the search paths.

    Raises:
        ConfigError: If no config file is found or the config is invalid
        OSError: If the config file cannot be read
    """
    config_path = find_config_file(getattr(args, "config", None))
    if config_path is None:
        searched = ", ".join(str(p) for p in CONFIG_PATHS)
        raise ConfigError(
            f"No configuration file found (searched: {searched}). "
            "Create one with: plotfarm config init"
        )
    return config_path, load_config(config_path)
