"""hcenav CLI - navigate Haskell code through a haskell-code-server index."""

from pathlib import Path

import click

from hcenav import __version__
from hcenav.cli.packages import packages_command
from hcenav.cli.query import definition_command, hover_command, references_command
from hcenav.cli.utils import CLI_DEFAULT_LOG_LEVEL
from hcenav.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="hcenav")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--host", default=None, help="haskell-code-server URL (overrides config)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of <workspace>/.hcenav.yaml",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, host: str | None, config_path: Path | None) -> None:
    """hcenav - hover, go to definition and find references for Haskell code."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["host"] = host
    ctx.obj["config_path"] = config_path
    configure_logging(level="DEBUG" if verbose else CLI_DEFAULT_LOG_LEVEL)


cli.add_command(hover_command, name="hover")
cli.add_command(definition_command, name="definition")
cli.add_command(references_command, name="references")
cli.add_command(packages_command, name="packages")


if __name__ == "__main__":
    cli()
