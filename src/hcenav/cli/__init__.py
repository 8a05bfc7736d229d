"""CLI module."""

from hcenav.cli.main import cli

__all__ = ["cli"]
