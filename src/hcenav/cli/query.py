"""hcenav hover / definition / references commands."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markdown import Markdown

from hcenav.cli.utils import find_workspace_root, format_location, load_cli_config
from hcenav.config.models import HceNavConfig
from hcenav.resolve.engine import Navigator
from hcenav.resolve.position import Feature, Position

_FILE = click.argument(
    "file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
_LINE = click.argument("line", type=click.IntRange(min=1))
_COLUMN = click.argument("column", type=click.IntRange(min=1))
_WORKSPACE = click.option(
    "--workspace",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root to discover packages in (default: detected from FILE)",
)
_JSON = click.option("--json", "as_json", is_flag=True, help="Output as JSON")


async def _query(
    config: HceNavConfig,
    workspace_root: Path,
    feature: Feature,
    path: Path,
    position: Position,
) -> Any:
    text = path.read_text(encoding="utf-8", errors="replace")
    async with Navigator.from_config(config, roots=[workspace_root]) as navigator:
        # A one-shot query has no earlier request to warm the cache
        await navigator.open_document(path)
        if feature is Feature.HOVER:
            return await navigator.hover(path, text, position)
        if feature is Feature.DEFINITION:
            return await navigator.definition(path, text, position)
        return await navigator.references(path, text, position)


def _run(
    ctx: click.Context,
    feature: Feature,
    file: Path,
    line: int,
    column: int,
    workspace: Path | None,
) -> Any:
    path = file.resolve()
    workspace_root = workspace.resolve() if workspace else find_workspace_root(path)
    config = load_cli_config(ctx, workspace_root)
    # LINE and COLUMN are 1-based on the command line
    position = Position(line - 1, column - 1)
    return asyncio.run(_query(config, workspace_root, feature, path, position))


@click.command()
@_FILE
@_LINE
@_COLUMN
@_WORKSPACE
@_JSON
@click.pass_context
def hover_command(
    ctx: click.Context,
    file: Path,
    line: int,
    column: int,
    workspace: Path | None,
    as_json: bool,
) -> None:
    """Show the type of the identifier at FILE:LINE:COLUMN."""
    info = _run(ctx, Feature.HOVER, file, line, column, workspace)
    if as_json:
        click.echo(json.dumps(info.to_dict() if info else None))
        return
    if info is None:
        click.echo("No hover information.")
        return
    Console().print(Markdown(info.to_markdown()))


@click.command()
@_FILE
@_LINE
@_COLUMN
@_WORKSPACE
@_JSON
@click.pass_context
def definition_command(
    ctx: click.Context,
    file: Path,
    line: int,
    column: int,
    workspace: Path | None,
    as_json: bool,
) -> None:
    """Print where the identifier at FILE:LINE:COLUMN is defined."""
    location = _run(ctx, Feature.DEFINITION, file, line, column, workspace)
    if as_json:
        click.echo(json.dumps(location.to_dict() if location else None))
        return
    if location is None:
        click.echo("No definition found.")
        return
    click.echo(format_location(location))


@click.command()
@_FILE
@_LINE
@_COLUMN
@_WORKSPACE
@_JSON
@click.pass_context
def references_command(
    ctx: click.Context,
    file: Path,
    line: int,
    column: int,
    workspace: Path | None,
    as_json: bool,
) -> None:
    """List references to the identifier at FILE:LINE:COLUMN in all packages."""
    locations = _run(ctx, Feature.REFERENCES, file, line, column, workspace)
    if as_json:
        click.echo(
            json.dumps([loc.to_dict() for loc in locations] if locations is not None else None)
        )
        return
    if locations is None:
        click.echo("No references found.")
        return
    for location in locations:
        click.echo(format_location(location))
    click.echo(f"{len(locations)} reference(s)")
