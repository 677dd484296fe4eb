"""TOML configuration loading, validation and serialization.

The loader works on text: file access goes through injectable reader and
writer callables so callers decide where configuration comes from.
"""

import hashlib
import logging
import tempfile
import tomllib
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from filelock import FileLock

from .schema import Config, RawStorageEntry, StorageEntry

logger = logging.getLogger(__name__)

STORAGE_ENTRIES_KEY = "storage_entries"
SERVER_ADDRESSES_KEY = "server_addresses"
DIRECTORY_KEY = "directory"
ALLOCATED_SPACE_KEY = "allocated_space"


class ConfigError(Exception):
    """Configuration loading or validation error."""

    pass


class ConfigSyntaxError(ConfigError):
    """The document is not valid TOML or does not match the schema."""

    pass


class DuplicateServerError(ConfigError):
    """The same server address is listed more than once."""

    def __init__(self, address: str):
        super().__init__(f"Plot servers must be unique: {address!r} is listed twice")
        self.address = address


class DuplicateStorageDirectoryError(ConfigError):
    """Two storage entries point at the same directory."""

    def __init__(self, directory: str):
        super().__init__(
            f"Disk farms must be unique: directory {directory!r} is listed twice"
        )
        self.directory = directory


def _require_str(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise ConfigSyntaxError(
            f"{where} must be a string, got {type(value).__name__}"
        )
    return value


def _parse_storage_entry(data: Any, index: int) -> RawStorageEntry:
    """Parse one [[storage_entries]] table."""
    where = f"{STORAGE_ENTRIES_KEY}[{index}]"
    if not isinstance(data, dict):
        raise ConfigSyntaxError(f"{where} must be a table")
    if DIRECTORY_KEY not in data:
        raise ConfigSyntaxError(f"{where} missing required '{DIRECTORY_KEY}' field")

    for key in data:
        if key not in (DIRECTORY_KEY, ALLOCATED_SPACE_KEY):
            logger.debug("Ignoring unknown key %s.%s", where, key)

    directory = _require_str(data[DIRECTORY_KEY], f"{where}.{DIRECTORY_KEY}")
    allocated_space = data.get(ALLOCATED_SPACE_KEY)
    if allocated_space is not None:
        allocated_space = _require_str(
            allocated_space, f"{where}.{ALLOCATED_SPACE_KEY}"
        )

    return RawStorageEntry(directory=directory, allocated_space=allocated_space)


def _parse_server_addresses(data: Any) -> tuple[str, ...]:
    """Parse the server_addresses array."""
    if not isinstance(data, list):
        raise ConfigSyntaxError(f"'{SERVER_ADDRESSES_KEY}' must be an array")
    return tuple(
        _require_str(address, f"{SERVER_ADDRESSES_KEY}[{i}]")
        for i, address in enumerate(data)
    )


def _find_duplicate(items: Iterable[str]) -> Optional[str]:
    """Return the first value that occurs a second time, if any."""
    seen = set()
    for item in items:
        if item in seen:
            return item
        seen.add(item)
    return None


def _validate_config(config: Config) -> None:
    """Enforce uniqueness, checking servers before directories."""
    duplicate = _find_duplicate(config.server_addresses)
    if duplicate is not None:
        raise DuplicateServerError(duplicate)

    duplicate = _find_duplicate(e.directory for e in config.storage_entries)
    if duplicate is not None:
        raise DuplicateStorageDirectoryError(duplicate)


def parse_config(raw_text: str) -> Config:
    """Parse and validate configuration from TOML text.

    Capacity strings are kept as written; use resolve_storage_entries()
    to turn them into byte counts.

    Args:
        raw_text: TOML document

    Returns:
        Validated Config object

    Raises:
        ConfigSyntaxError: If the TOML is invalid or does not match the schema
        DuplicateServerError: If a server address is repeated
        DuplicateStorageDirectoryError: If a storage directory is repeated
    """
    try:
        data = tomllib.loads(raw_text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigSyntaxError(f"Invalid TOML syntax: {e}") from e

    for key in (STORAGE_ENTRIES_KEY, SERVER_ADDRESSES_KEY):
        if key not in data:
            raise ConfigSyntaxError(f"Missing required '{key}' field")
    for key in data:
        if key not in (STORAGE_ENTRIES_KEY, SERVER_ADDRESSES_KEY):
            logger.debug("Ignoring unknown top-level key %s", key)

    entries_data = data[STORAGE_ENTRIES_KEY]
    if not isinstance(entries_data, list):
        raise ConfigSyntaxError(f"'{STORAGE_ENTRIES_KEY}' must be an array of tables")

    config = Config(
        storage_entries=tuple(
            _parse_storage_entry(entry, i) for i, entry in enumerate(entries_data)
        ),
        server_addresses=_parse_server_addresses(data[SERVER_ADDRESSES_KEY]),
    )
    _validate_config(config)

    logger.debug(
        "Parsed %d storage entries and %d server addresses",
        len(config.storage_entries),
        len(config.server_addresses),
    )
    return config


def resolve_storage_entries(config: Config) -> list[StorageEntry]:
    """Resolve all capacity strings of a configuration.

    Raises:
        ParseError: For the first entry whose capacity cannot be parsed;
            its ``directory`` attribute names that entry
    """
    return config.resolve()


_TOML_ESCAPES = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
    '"': '\\"',
    "\\": "\\\\",
}


def _toml_string(value: str) -> str:
    """Quote a value as a TOML basic string."""
    out = []
    for char in value:
        if char in _TOML_ESCAPES:
            out.append(_TOML_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\u{ord(char):04X}")
        else:
            out.append(char)
    return '"' + "".join(out) + '"'


def dump_config(config: Config) -> str:
    """Serialize a configuration to TOML text.

    Bare keys must precede tables in TOML, so server_addresses is written
    before the [[storage_entries]] tables.
    """
    servers = ", ".join(_toml_string(a) for a in config.server_addresses)
    lines = [f"{SERVER_ADDRESSES_KEY} = [{servers}]"]

    if not config.storage_entries:
        lines.append(f"{STORAGE_ENTRIES_KEY} = []")

    for entry in config.storage_entries:
        lines.append("")
        lines.append(f"[[{STORAGE_ENTRIES_KEY}]]")
        lines.append(f"{DIRECTORY_KEY} = {_toml_string(entry.directory)}")
        if entry.allocated_space is not None:
            lines.append(
                f"{ALLOCATED_SPACE_KEY} = {_toml_string(entry.allocated_space)}"
            )

    return "\n".join(lines) + "\n"


def read_config_text(path: Path | str) -> str:
    """Read a configuration file as UTF-8 text."""
    return Path(path).read_text(encoding="utf-8")


def _lock_path(path: Path) -> Path:
    """Lock file for a config path, kept out of the config directory."""
    digest = hashlib.sha256(str(path.resolve()).encode("utf-8")).hexdigest()[:16]
    return Path(tempfile.gettempdir()) / f"plotfarm-{digest}.lock"


def write_config_text(path: Path | str, text: str, overwrite: bool = True) -> None:
    """Write configuration text while holding a lock for the path.

    Raises:
        FileExistsError: If overwrite is False and the file already exists
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with FileLock(_lock_path(path)):
        if not overwrite and path.exists():
            raise FileExistsError(f"Refusing to overwrite {path}")
        path.write_text(text, encoding="utf-8")


def load_config(
    path: Path | str,
    read_text: Callable[[Path | str], str] = read_config_text,
) -> Config:
    """Load and validate configuration from a file.

    Args:
        path: Path to configuration file
        read_text: Reader returning the file content; OSError propagates

    Returns:
        Validated Config object

    Raises:
        ConfigError: If config is invalid
        OSError: If the reader fails
    """
    logger.debug("Loading configuration from %s", path)
    return parse_config(read_text(path))


def save_config(
    config: Config,
    path: Path | str,
    write_text: Callable[[Path | str, str], None] = write_config_text,
) -> None:
    """Serialize a configuration and write it through write_text."""
    logger.debug("Writing configuration to %s", path)
    write_text(path, dump_config(config))


def generate_example_config() -> str:
    """Generate example configuration file content."""
    return """# plotfarm configuration
# Remote plot servers ("host:port"), each listed once
server_addresses = ["localhost:12345"]

# Disk farm limited to 1500 GB of plots
[[storage_entries]]
directory = "/tmp/plot"
allocated_space = "1500G"

# Disk farm without a limit uses all available space
[[storage_entries]]
directory = "/tmp/plot1"
# allocated_space = "2TiB"
"""
