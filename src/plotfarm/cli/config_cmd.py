"""Config command: Configuration management."""

import argparse
import json
import logging

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..__logger__ import create_logger
from ..capacity import ParseError, humanize_capacity
from ..config import ConfigError, resolve_storage_entries
from ..config.loader import generate_example_config, write_config_text
from .common import get_log_level, load_config_from_args

logger = logging.getLogger(__name__)


def execute_config(args: argparse.Namespace) -> int:
    """Execute the config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(level=log_level)

    action = getattr(args, "config_action", None)

    if action == "validate":
        return _validate_config(args)
    elif action == "init":
        return _init_config(args)
    elif action == "show":
        return _show_config(args)
    else:
        print("Usage: plotfarm config <validate|init|show>")
        return 1


def _validate_config(args: argparse.Namespace) -> int:
    """Validate configuration file, including every capacity string."""
    try:
        config_path, config = load_config_from_args(args)
        print(f"Validating: {config_path}")
        entries = resolve_storage_entries(config)
    except (ConfigError, ParseError) as e:
        logger.error("Configuration error: %s", e)
        return 1
    except OSError as e:
        logger.error("Cannot read config file: %s", e)
        return 1

    bounded = config.get_bounded_entries()
    print("")
    print("Configuration is valid.")
    print(f"  Disk farms: {len(entries)}")
    print(f"  Bounded:    {len(bounded)}")
    print(f"  Servers:    {len(config.server_addresses)}")
    return 0


def _init_config(args: argparse.Namespace) -> int:
    """Generate example configuration."""
    content = generate_example_config()

    output = getattr(args, "output", None)
    if output:
        try:
            write_config_text(
                output, content, overwrite=getattr(args, "force", False)
            )
            print(f"Example configuration written to: {output}")
        except FileExistsError:
            logger.error("Refusing to overwrite %s (use --force)", output)
            return 1
        except OSError as e:
            logger.error("Error writing file: %s", e)
            return 1
    else:
        print(content, end="")

    return 0


def _show_config(args: argparse.Namespace) -> int:
    """Print resolved disk farms and plot servers."""
    try:
        _, config = load_config_from_args(args)
        entries = resolve_storage_entries(config)
    except (ConfigError, ParseError) as e:
        logger.error("Configuration error: %s", e)
        return 1
    except OSError as e:
        logger.error("Cannot read config file: %s", e)
        return 1

    if getattr(args, "json", False):
        data = {
            "storage_entries": [
                {
                    "directory": e.directory,
                    "allocated_space_bytes": e.allocated_space_bytes,
                }
                for e in entries
            ],
            "server_addresses": list(config.server_addresses),
        }
        print(json.dumps(data, indent=2))
        return 0

    table = Table(title="Disk farms")
    table.add_column("Directory")
    table.add_column("Allocated", justify="right")
    table.add_column("Bytes", justify="right")
    for raw, entry in zip(config.storage_entries, entries):
        if entry.allocated_space_bytes is None:
            table.add_row(Text(entry.directory), "unbounded", "-")
        else:
            human = humanize_capacity(entry.allocated_space_bytes)
            table.add_row(
                Text(entry.directory),
                Text(f"{raw.allocated_space} ({human})"),
                str(entry.allocated_space_bytes),
            )

    console = Console()
    console.print(table)
    console.print("Plot servers:")
    for address in config.server_addresses:
        console.print(f"  {address}", markup=False, highlight=False)
    return 0
