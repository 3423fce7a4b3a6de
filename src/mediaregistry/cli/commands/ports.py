"""Port allocation commands for CLI."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from mediaregistry.cli.main import app, exit_with_error, load_config_context
from mediaregistry.core.exceptions import MediaRegistryError


ports_app = typer.Typer(
    help="Allocate and list per-project database ports.",
    no_args_is_help=True,
)
app.add_typer(ports_app, name="ports")


@ports_app.command()
def allocate(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Project name."),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Allocate a new port even if the project already has one.",
    ),
) -> None:
    """Print the port for a project, allocating one if needed."""
    from mediaregistry.adapters.network import PsutilPortProbe
    from mediaregistry.config import save_config
    from mediaregistry.core.port_allocation import PortAllocator

    config, path = load_config_context(ctx)
    allocator = PortAllocator(PsutilPortProbe())

    try:
        port = allocator.allocate_for_config(config, name, force=force)
    except MediaRegistryError as e:
        exit_with_error(e)

    save_config(path, config)
    typer.echo(str(port))


@ports_app.command(name="list")
def list_ports(ctx: typer.Context) -> None:
    """List allocated ports ordered by port number."""
    from mediaregistry.core.config_access import PORT_REGISTRY_PATH, ConfigAccessor
    from mediaregistry.core.port_allocation import PortAllocator

    config, _path = load_config_context(ctx)
    registry = ConfigAccessor(config).get_or(PORT_REGISTRY_PATH, {})

    if not registry:
        typer.echo("No ports allocated yet.")
        return

    try:
        allocations = PortAllocator.list_allocations(registry)
    except MediaRegistryError as e:
        exit_with_error(e)

    table = Table()
    table.add_column("Project")
    table.add_column("Port", justify="right")
    for project, port in allocations:
        table.add_row(project, str(port))

    console = Console(force_terminal=True)
    console.print(table)
