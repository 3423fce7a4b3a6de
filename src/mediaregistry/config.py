"""Configuration file utilities for mediaregistry.

The registry itself never persists anything; the configuration object is
owned by the caller. These helpers are what the CLI, as that caller, uses to
find, read and write its JSON configuration file.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from mediaregistry.core.exceptions import ConfigFileError


CONFIG_DIR_NAME = ".mediaregistry"
CONFIG_FILE_NAME = "config.json"


def find_config_path(start: Path | None = None) -> Path:
    """Find the configuration file by walking up from start directory.

    Looks for .mediaregistry/config.json in start and each parent.

    Args:
        start: Directory to start searching from. If None, uses current directory.

    Returns:
        Path to the first configuration file found, or the path where one
        would be created in start if none exists.

    Example:
        >>> from mediaregistry.config import find_config_path
        >>> path = find_config_path()
        >>> path.name
        'config.json'
    """
    if start is None:
        start = Path.cwd()

    current = start.resolve()
    for parent in [current, *current.parents]:
        candidate = parent / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate

    return current / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def default_config() -> dict[str, Any]:
    """Return an empty configuration skeleton with one example group."""
    return {
        "Storage": {
            "1": {
                "Master": {
                    "Label": "Master",
                    "DriveLetter": "",
                    "SerialNumber": "",
                },
                "Backup": {},
            }
        },
        "Projects": {
            "Registry": {
                "Master": {},
                "Backup": {},
                "LastScanned": None,
                "ProjectDirs": {},
            },
            "PortRegistry": {},
        },
    }


def load_config(path: Path) -> dict[str, Any]:
    """Read a JSON configuration file.

    Raises:
        ConfigFileError: If the file is missing, unreadable, or not a JSON object.
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigFileError(
            f"Configuration file not found: {path}", config_path=path, cause=e
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigFileError(
            f"Configuration file is not valid JSON: {path} (line {e.lineno})",
            config_path=path,
            cause=e,
        ) from e
    except OSError as e:
        raise ConfigFileError(
            f"Cannot read configuration file: {path}", config_path=path, cause=e
        ) from e

    if not isinstance(data, dict):
        raise ConfigFileError(
            f"Configuration file must contain a JSON object: {path}",
            config_path=path,
        )
    return data


def save_config(path: Path, data: dict[str, Any]) -> None:
    """Write a configuration file atomically.

    The data is written to a temporary file in the same directory and then
    moved over the target, so a crash never leaves a truncated file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
