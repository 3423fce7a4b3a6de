"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from datetime import datetime

    from mediaregistry.core.models import DirectoryEntry, DriveInfo, ListenerInfo


class EntryKind(StrEnum):
    """Which children list_children() returns."""

    DIRECTORY = "directory"
    FILE = "file"
    ANY = "any"


@runtime_checkable
class StorageDirectoryPort(Protocol):
    """Directory access on local and removable drives."""

    def exists(self, path: str) -> bool:
        """Return True if path exists."""
        ...

    def list_children(
        self,
        path: str,
        pattern: str | None = None,
        kind: EntryKind = EntryKind.DIRECTORY,
    ) -> list[DirectoryEntry]:
        """List immediate children of a directory.

        Args:
            path: Directory to enumerate.
            pattern: Optional glob pattern matched against child names.
            kind: Restrict results to directories, files, or both.

        Returns:
            Children sorted by name.

        Raises:
            StorageNotFoundError: If path does not exist.
            StorageAccessError: If path cannot be read.
        """
        ...

    def last_modified(self, path: str) -> datetime:
        """Return the timezone-aware last-write time of path.

        Raises:
            StorageNotFoundError: If path does not exist.
            StorageAccessError: If path cannot be read.
        """
        ...

    def create_directory(self, path: str) -> DirectoryEntry:
        """Create a directory (and missing parents).

        Raises:
            DirectoryCreateError: If the directory cannot be created.
        """
        ...

    def combine_path(self, *parts: str) -> str:
        """Join path parts using the provider's separator rules."""
        ...

    def list_drives(self) -> list[DriveInfo]:
        """Enumerate mounted drives."""
        ...


@runtime_checkable
class PortProbePort(Protocol):
    """Read-only view of the OS socket table."""

    def list_listeners_on_port(self, port: int) -> list[ListenerInfo]:
        """Return sockets currently listening on a local TCP port."""
        ...
