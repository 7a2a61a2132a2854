"""CLI command groups."""

__all__ = ["config", "shared", "shell"]

from . import config, shared, shell
