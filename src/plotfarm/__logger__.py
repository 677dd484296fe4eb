# pyright: standard

"""plotfarm: plotfarm/__logger__.py
A common logger for displaying through rich.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Initialize basic console and handler
cons = Console(stderr=True)
rich_handler = RichHandler(console=cons, show_path=False)
# Standalone package logger; modules log via logging.getLogger(__name__),
# which propagates to the root handler installed by create_logger()
logger = logging.Logger("plotfarm", logging.INFO)


def create_logger(level: str = "INFO") -> None:
    """Helper function to setup logging at the requested level."""
    # pylint: disable=global-statement
    global cons, rich_handler

    cons = Console(stderr=True)
    rich_handler = RichHandler(console=cons, show_path=False)

    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(level)
    logger.addHandler(rich_handler)

    logging.basicConfig(
        format="%(message)s",
        datefmt="%H:%M:%S",
        level=level,
        handlers=[rich_handler],
        force=True,
    )
