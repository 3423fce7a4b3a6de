"""CLI for mediaregistry."""

# Import commands to register them with the app
# These imports have side effects (registering commands with @app.command())
from mediaregistry.cli.commands import drives as _drives_module  # noqa: F401
from mediaregistry.cli.commands import ports as _ports_module  # noqa: F401
from mediaregistry.cli.commands import projects as _projects_module  # noqa: F401
from mediaregistry.cli.main import app, main


__all__ = ["app", "main"]
