"""Drive listing and cache maintenance commands for CLI."""

from __future__ import annotations

import typer
from rich.console import Console

from mediaregistry.cli.formatting import _drives_table
from mediaregistry.cli.main import app, load_config_context


cache_app = typer.Typer(
    help="Inspect or reset the project registry cache.",
    no_args_is_help=True,
)
app.add_typer(cache_app, name="cache")


@app.command()
def drives() -> None:
    """List mounted drives with capacity."""
    from mediaregistry.adapters.storage import LocalDirectoryProvider

    found = LocalDirectoryProvider().list_drives()
    if not found:
        typer.echo("No drives found.")
        return

    console = Console(force_terminal=True)
    console.print(_drives_table(found))


@cache_app.command()
def clear(ctx: typer.Context) -> None:
    """Forget cached scans so the next 'projects' call rescans every drive."""
    from mediaregistry.adapters.storage import LocalDirectoryProvider
    from mediaregistry.config import save_config
    from mediaregistry.core.services import ProjectRegistry

    config, path = load_config_context(ctx)
    ProjectRegistry(LocalDirectoryProvider()).clear_cache(config)
    save_config(path, config)
    typer.echo("Registry cache cleared.")
