"""hcenav packages command - list packages found in a workspace."""

import json
from pathlib import Path

import click

from hcenav.cli.utils import load_cli_config
from hcenav.resolve.packages import PackageRegistry


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def packages_command(ctx: click.Context, root: Path, as_json: bool) -> None:
    """List Haskell packages discovered under ROOT.

    Only these packages can be navigated into.
    """
    workspace_root = root.resolve()
    config = load_cli_config(ctx, workspace_root)
    registry = PackageRegistry(manifest_suffix=config.index.manifest_suffix)
    packages = registry.refresh([workspace_root])

    if as_json:
        click.echo(
            json.dumps(
                [
                    {"package_id": p.key, "package_folder": str(p.package_folder)}
                    for p in packages
                ]
            )
        )
        return

    if not packages:
        click.echo(f"No packages found under {workspace_root}")
        return
    for package in packages:
        click.echo(f"{package.key}\t{package.package_folder}")
