"""Projects command for CLI."""

from __future__ import annotations

import json

import typer
from rich.console import Console

from mediaregistry.cli.formatting import _projects_table
from mediaregistry.cli.main import app, exit_with_error, load_config_context
from mediaregistry.core.exceptions import MediaRegistryError


@app.command()
def projects(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Rescan every drive even if nothing changed.",
    ),
    no_drive_check: bool = typer.Option(
        False,
        "--no-drive-check",
        help="Scan devices even if their drive root is not mounted (diagnostics).",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON instead of a table.",
    ),
) -> None:
    """List projects on all configured storage devices."""
    from mediaregistry.adapters.storage import LocalDirectoryProvider
    from mediaregistry.config import save_config
    from mediaregistry.core.services import ProjectRegistry

    config, path = load_config_context(ctx)
    registry = ProjectRegistry(
        LocalDirectoryProvider(), check_drive_roots=not no_drive_check
    )

    try:
        listing = registry.get_projects(config, force=force)
    except MediaRegistryError as e:
        exit_with_error(e)

    # Persist the refreshed registry cache
    save_config(path, config)

    if as_json:
        typer.echo(json.dumps(listing.as_dict(), indent=2))
        return

    if not listing.master and not listing.backup:
        typer.echo("No storage devices are currently available.")
        return

    console = Console(force_terminal=True)
    console.print(_projects_table(listing))
