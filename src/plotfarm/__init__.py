"""plotfarm: disk farm and plot server configuration."""

__version__ = "0.1.0"
