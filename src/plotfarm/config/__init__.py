"""Configuration system for plotfarm.

This module provides TOML-based configuration loading, validation,
serialization and schema definitions for disk farms and plot servers.
"""

from .loader import (
    ConfigError,
    ConfigSyntaxError,
    DuplicateServerError,
    DuplicateStorageDirectoryError,
    dump_config,
    load_config,
    parse_config,
    resolve_storage_entries,
    save_config,
)
from .schema import Config, RawStorageEntry, StorageEntry

__all__ = [
    "Config",
    "RawStorageEntry",
    "StorageEntry",
    "parse_config",
    "load_config",
    "dump_config",
    "save_config",
    "resolve_storage_entries",
    "ConfigError",
    "ConfigSyntaxError",
    "DuplicateServerError",
    "DuplicateStorageDirectoryError",
]
