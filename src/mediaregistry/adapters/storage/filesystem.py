"""Filesystem adapter for local and removable drives."""

from __future__ import annotations

import fnmatch
import os
from datetime import UTC, datetime
from pathlib import Path

import psutil

from mediaregistry.core.exceptions import (
    DirectoryCreateError,
    StorageAccessError,
    StorageNotFoundError,
)
from mediaregistry.core.models import DirectoryEntry, DriveInfo
from mediaregistry.core.ports import EntryKind


class LocalDirectoryProvider:
    """Storage adapter backed by the local filesystem.

    Implements StorageDirectoryPort with pathlib; drive enumeration uses
    psutil so it works the same on Windows drive letters and POSIX mounts.
    """

    def exists(self, path: str) -> bool:
        """Return True if path exists. Unreadable paths count as missing."""
        try:
            return Path(path).exists()
        except OSError:
            return False

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
        base = Path(path)
        try:
            children = list(base.iterdir())
        except FileNotFoundError as e:
            raise StorageNotFoundError(
                f"Directory not found: {path}", source=path, cause=e
            ) from e
        except OSError as e:
            raise StorageAccessError(
                f"Cannot read directory: {path}", source=path, cause=e
            ) from e

        entries = []
        for child in children:
            if pattern and not fnmatch.fnmatch(child.name, pattern):
                continue
            try:
                is_dir = child.is_dir()
            except OSError:
                continue
            if kind is EntryKind.DIRECTORY and not is_dir:
                continue
            if kind is EntryKind.FILE and is_dir:
                continue
            entries.append(DirectoryEntry(name=child.name, path=str(child), is_dir=is_dir))

        return sorted(entries, key=lambda e: e.name)

    def last_modified(self, path: str) -> datetime:
        """Return the UTC last-write time of path.

        Raises:
            StorageNotFoundError: If path does not exist.
            StorageAccessError: If path cannot be stat'ed.
        """
        try:
            stat = Path(path).stat()
        except FileNotFoundError as e:
            raise StorageNotFoundError(
                f"Path not found: {path}", source=path, cause=e
            ) from e
        except OSError as e:
            raise StorageAccessError(
                f"Cannot stat path: {path}", source=path, cause=e
            ) from e
        return datetime.fromtimestamp(stat.st_mtime, tz=UTC)

    def create_directory(self, path: str) -> DirectoryEntry:
        """Create a directory and any missing parents.

        Raises:
            DirectoryCreateError: If the directory cannot be created.
        """
        target = Path(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateError(
                f"Cannot create directory: {path}", source=path, cause=e
            ) from e
        return DirectoryEntry(name=target.name, path=str(target), is_dir=True)

    def combine_path(self, *parts: str) -> str:
        """Join path parts with the platform separator.

        A bare drive such as "E:" is anchored at its root, so the result is
        "E:\\Projects" rather than the drive-relative "E:Projects".
        """
        first, *rest = parts
        drive, tail = os.path.splitdrive(first)
        if drive and not tail:
            first = drive + os.path.sep
        return os.path.join(first, *rest)

    def list_drives(self) -> list[DriveInfo]:
        """Enumerate mounted partitions with capacity where readable."""
        drives = []
        for part in psutil.disk_partitions(all=False):
            total: int | None = None
            free: int | None = None
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except OSError:
                # Empty card readers and ejected media report no usage
                pass
            else:
                total, free = usage.total, usage.free
            drives.append(
                DriveInfo(
                    mount_path=part.mountpoint,
                    device=part.device,
                    file_system=part.fstype,
                    total_bytes=total,
                    free_bytes=free,
                )
            )
        return sorted(drives, key=lambda d: d.mount_path)
