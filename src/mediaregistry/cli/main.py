"""CLI commands for mediaregistry."""

from __future__ import annotations

from pathlib import Path
from typing import Any, NoReturn

import typer

from mediaregistry.core.exceptions import MediaRegistryError


app = typer.Typer(
    name="mediaregistry",
    help="Project discovery and port allocation for media storage drives.",
    no_args_is_help=True,
)


@app.callback()
def configure(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.json. Defaults to the nearest .mediaregistry/config.json.",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Minimum log level: DEBUG, INFO, SUCCESS, WARNING or ERROR.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Write logs to stderr as JSON lines.",
    ),
) -> None:
    """Configure logging and the configuration file location."""
    from mediaregistry.logging_config import setup_logging

    try:
        setup_logging(log_level, json_output=json_logs)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    ctx.obj = {"config_path": config}


def resolve_config_path(ctx: typer.Context) -> Path:
    """Return the --config path, or the discovered default."""
    from mediaregistry.config import find_config_path

    explicit = (ctx.obj or {}).get("config_path")
    return Path(explicit) if explicit else find_config_path()


def load_config_context(ctx: typer.Context) -> tuple[dict[str, Any], Path]:
    """Load the configuration for CLI commands.

    Returns:
        Tuple of (configuration dict, path it was loaded from).

    Raises:
        typer.Exit: If the file is missing or invalid.
    """
    from mediaregistry.config import load_config

    path = resolve_config_path(ctx)
    if not path.exists():
        typer.echo("No configuration found. Run 'mediaregistry init' to get started.")
        raise typer.Exit(1)

    try:
        return load_config(path), path
    except MediaRegistryError as e:
        exit_with_error(e)


def exit_with_error(error: MediaRegistryError) -> NoReturn:
    """Print an error and its recovery hint to stderr, then exit 1."""
    typer.echo(f"Error: {error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)
    raise typer.Exit(1) from None


@app.command()
def init(
    ctx: typer.Context,
    directory: str | None = typer.Argument(
        None,
        help="Directory to initialize. Defaults to current directory.",
    ),
    overwrite: bool = typer.Option(
        False,
        "--overwrite",
        help="Replace an existing configuration file.",
    ),
) -> None:
    """Create a .mediaregistry/config.json skeleton."""
    from mediaregistry.config import (
        CONFIG_DIR_NAME,
        CONFIG_FILE_NAME,
        default_config,
        save_config,
    )

    explicit = (ctx.obj or {}).get("config_path")
    if explicit:
        path = Path(explicit)
    else:
        target = Path(directory) if directory else Path.cwd()
        path = target.resolve() / CONFIG_DIR_NAME / CONFIG_FILE_NAME

    if path.exists() and not overwrite:
        typer.echo(f"Configuration already exists: {path}")
        typer.echo("Use --overwrite to replace it.")
        raise typer.Exit(1)

    save_config(path, default_config())
    typer.echo(f"Created {path}")
    typer.echo("Fill in DriveLetter and SerialNumber for each storage device.")


def main() -> None:
    """Entry point for the CLI."""
    app()
