"""Domain exceptions for mediaregistry.

All library errors inherit from MediaRegistryError, allowing callers to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path


class MediaRegistryError(Exception):
    """Base class for all mediaregistry exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class ConfigurationError(MediaRegistryError):
    """Raised for invalid or missing storage-group definitions.

    Attributes:
        group_id: The storage group the problem was found in, if known.
    """

    def __init__(self, message: str, group_id: str | None = None) -> None:
        self.group_id = group_id
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Point at the offending storage group."""
        if self.group_id is not None:
            return f"Check the definition of storage group '{self.group_id}'"
        return "Check the Storage section of the configuration"


class DuplicateSerialError(ConfigurationError):
    """Raised when one serial number is both Master and Backup in a group.

    Attributes:
        serial_number: The serial number assigned to both roles.
    """

    def __init__(self, group_id: str, serial_number: str) -> None:
        self.serial_number = serial_number
        super().__init__(
            f"Storage group '{group_id}': serial number '{serial_number}' "
            "is assigned as both Master and Backup",
            group_id=group_id,
        )

    @property
    def recovery_hint(self) -> str:
        """Suggest removing one of the assignments."""
        return (
            f"Remove '{self.serial_number}' from either the Master or the "
            f"Backup devices of group '{self.group_id}'"
        )


class DuplicateLabelError(ConfigurationError):
    """Raised when two devices in the same role share a label.

    Attributes:
        label: The duplicated device label.
        role: The role ("Master" or "Backup") both devices hold.
    """

    def __init__(self, label: str, role: str, group_id: str | None = None) -> None:
        self.label = label
        self.role = role
        super().__init__(
            f"Device label '{label}' is used by more than one {role} device",
            group_id=group_id,
        )

    @property
    def recovery_hint(self) -> str:
        """Suggest relabelling."""
        return f"Give each {self.role} device a unique Label"


class StorageError(MediaRegistryError):
    """Base class for storage device errors.

    These are transient: a drive was ejected, a directory is unreadable.
    The registry logs them and carries on with the remaining devices.

    Attributes:
        source: The path that caused the error.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        source: str,
        cause: Exception | None = None,
    ) -> None:
        self.source = source
        self.cause = cause
        super().__init__(message)


class StorageNotFoundError(StorageError):
    """Raised when a path does not exist on the device."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the drive is mounted."""
        return f"Verify the drive is connected and the path exists: {self.source}"


class StorageAccessError(StorageError):
    """Raised when a path exists but cannot be read (permissions, I/O)."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking permissions."""
        return f"Check read permissions on {self.source}"


class DirectoryCreateError(StorageError):
    """Raised when a directory cannot be created on a device."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the drive is writable."""
        return f"Check that the drive is writable: {self.source}"


class PortCapacityError(MediaRegistryError):
    """Raised when every port in the allocation range is taken.

    Attributes:
        start: First port of the exhausted range.
        end: Last port of the exhausted range (inclusive).
        project: The project the allocation was requested for.
    """

    def __init__(self, start: int, end: int, project: str) -> None:
        self.start = start
        self.end = end
        self.project = project
        super().__init__(
            f"No free port for project '{project}' in range {start}-{end}"
        )

    @property
    def recovery_hint(self) -> str:
        """Suggest freeing ports."""
        return (
            f"Stop services listening in {self.start}-{self.end} or remove "
            "unused entries from Projects.PortRegistry"
        )


class ConfigFileError(MediaRegistryError):
    """Raised when the configuration file cannot be loaded.

    Attributes:
        config_path: Path to the configuration file.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        config_path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.config_path = config_path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking or regenerating the file."""
        return (
            f"Check {self.config_path} for JSON syntax errors, or run "
            "'mediaregistry init' to create a fresh one"
        )
