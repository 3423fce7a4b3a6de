"""Logging setup and the structured log call used across mediaregistry.

Library modules only emit records; handlers are installed by setup_logging(),
which the CLI calls once at startup.
"""

from __future__ import annotations

import logging
import sys
from typing import Final

from pythonjsonlogger.json import JsonFormatter
from rich.console import Console
from rich.logging import RichHandler


ROOT_LOGGER_NAME: Final = "mediaregistry"

# Between INFO (20) and WARNING (30)
SUCCESS: Final = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_LEVELS: Final = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "SUCCESS": SUCCESS,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the mediaregistry namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def level_from_name(name: str) -> int:
    """Map a level name (case-insensitive) to its numeric value.

    Raises:
        ValueError: If the name is not one of the supported levels.
    """
    try:
        return _LEVELS[name.upper()]
    except KeyError:
        raise ValueError(
            f"Unknown log level '{name}'. Choose from: {', '.join(_LEVELS)}"
        ) from None


def log(
    logger: logging.Logger,
    level: int,
    context: str,
    message: str,
    error: BaseException | None = None,
) -> None:
    """Emit a structured record.

    Args:
        logger: Logger to emit on.
        level: Numeric level (logging.INFO, SUCCESS, ...).
        context: Component emitting the record, e.g. "DriveScanner".
        message: Human-readable message.
        error: Optional exception. Its type and text are always attached as
            fields; the traceback (exc_info) only at ERROR and above.
    """
    extra: dict[str, object] = {"context": context}
    if error is not None:
        extra["error_type"] = type(error).__name__
        extra["error"] = str(error)
    logger.log(
        level,
        message,
        extra=extra,
        exc_info=(
            (type(error), error, error.__traceback__)
            if error is not None and level >= logging.ERROR
            else None
        ),
    )


def setup_logging(level: str = "INFO", json_output: bool = False) -> logging.Logger:
    """Configure the mediaregistry logger.

    Logs go to stderr so command output on stdout stays machine-readable.

    Args:
        level: Minimum level name to emit.
        json_output: Emit one JSON object per record instead of Rich output.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level_from_name(level))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler: logging.Handler
    if json_output:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            JsonFormatter(
                "%(asctime)s %(levelname)s %(name)s %(context)s %(message)s",
                rename_fields={
                    "levelname": "level",
                    "asctime": "timestamp",
                    "name": "logger",
                },
                json_ensure_ascii=False,
            )
        )
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("[%(context)s] %(message)s"))

    handler.addFilter(_ContextDefaultFilter())
    logger.addHandler(handler)
    return logger


class _ContextDefaultFilter(logging.Filter):
    """Give records logged without log() an empty context field."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = "-"
        return True
