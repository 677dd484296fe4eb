"""Command line interface for plotfarm."""

from .dispatcher import main

__all__ = ["main"]
