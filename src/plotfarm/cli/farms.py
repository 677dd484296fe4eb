"""Farms command: Show disk farms alongside the filesystems holding them."""

import argparse
import logging
import shutil
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..__logger__ import create_logger
from ..capacity import ParseError, humanize_capacity
from ..config import ConfigError, resolve_storage_entries
from .common import get_log_level, load_config_from_args

logger = logging.getLogger(__name__)


def execute_farms(args: argparse.Namespace) -> int:
    """Execute the farms command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(level=log_level)

    try:
        config_path, config = load_config_from_args(args)
        entries = resolve_storage_entries(config)
    except (ConfigError, ParseError) as e:
        logger.error("Configuration error: %s", e)
        return 1
    except OSError as e:
        logger.error("Cannot read config file: %s", e)
        return 1

    if not entries:
        print("No disk farms configured")
        return 1

    table = Table(title=f"Disk farms ({config_path})")
    table.add_column("Directory")
    table.add_column("Allocated", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Free", justify="right")

    for entry in entries:
        allocated = (
            "unbounded"
            if entry.allocated_space_bytes is None
            else humanize_capacity(entry.allocated_space_bytes)
        )

        directory = Path(entry.directory)
        if not directory.is_dir():
            table.add_row(Text(entry.directory), allocated, "missing", "-")
            continue

        try:
            usage = shutil.disk_usage(directory)
        except OSError as e:
            logger.warning("Cannot stat %s: %s", directory, e)
            table.add_row(Text(entry.directory), allocated, "error", "-")
            continue

        if (
            entry.allocated_space_bytes is not None
            and entry.allocated_space_bytes > usage.total
        ):
            logger.warning(
                "Allocation for %s (%s) exceeds filesystem size (%s)",
                entry.directory,
                allocated,
                humanize_capacity(usage.total),
            )

        table.add_row(
            Text(entry.directory),
            allocated,
            humanize_capacity(usage.total),
            humanize_capacity(usage.free),
        )

    Console().print(table)
    return 0
