"""CLI utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from hcenav.config.loader import WORKSPACE_CONFIG_NAME, load_config
from hcenav.config.models import HceNavConfig
from hcenav.core.errors import ConfigError
from hcenav.core.logging import configure_logging
from hcenav.resolve.locations import ConcreteLocation

WORKSPACE_MARKERS = (".git", "cabal.project", "stack.yaml", WORKSPACE_CONFIG_NAME)
CLI_DEFAULT_LOG_LEVEL = "WARNING"


def find_workspace_root(start_path: Path) -> Path:
    """Find the workspace root enclosing ``start_path``.

    Walks up the directory tree looking for a VCS directory, a cabal or stack
    project file, or an hcenav config. Falls back to the starting directory.
    """
    start = start_path.resolve()
    if not start.is_dir():
        start = start.parent

    current = start
    while True:
        if any((current / marker).exists() for marker in WORKSPACE_MARKERS):
            return current
        if current == current.parent:
            return start
        current = current.parent


def load_cli_config(ctx: click.Context, workspace_root: Path) -> HceNavConfig:
    """Load config for a command, applying global CLI overrides.

    Raises:
        click.ClickException: If the configuration is invalid
    """
    obj: dict[str, Any] = ctx.obj or {}
    overrides: dict[str, Any] = {}
    if obj.get("host"):
        overrides["server"] = {"host": obj["host"]}
    try:
        config = load_config(workspace_root, config_path=obj.get("config_path"), **overrides)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if obj.get("verbose"):
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    elif "level" not in logging_config.model_fields_set:
        # Lookup misses are INFO; a plain query prints only problems
        logging_config = logging_config.model_copy(update={"level": CLI_DEFAULT_LOG_LEVEL})
    configure_logging(config=logging_config)
    return config


def format_location(location: ConcreteLocation) -> str:
    """``path:line:column``, 1-based like compiler diagnostics."""
    return f"{location.path}:{location.start_line + 1}:{location.start_column + 1}"
