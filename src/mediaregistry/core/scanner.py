"""Drive Scanner: builds project records for one device."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mediaregistry.core.exceptions import StorageError
from mediaregistry.core.models import (
    GLOBAL_DIR_NAME,
    PROJECTS_DIR_NAME,
    DeviceTarget,
    ProjectRecord,
    ScanResult,
)
from mediaregistry.core.ports import EntryKind
from mediaregistry.logging_config import SUCCESS, get_logger, log


if TYPE_CHECKING:
    from datetime import datetime

    from mediaregistry.core.ports import StorageDirectoryPort


logger = get_logger(__name__)
_CONTEXT = "DriveScanner"


class DriveScanner:
    """Walks a device's Projects directory and produces ProjectRecords.

    Every failure on the device is logged and turned into an empty result,
    so one unreachable drive never aborts a registry build.
    """

    def __init__(self, storage: StorageDirectoryPort) -> None:
        self._storage = storage

    def projects_dir(self, target: DeviceTarget) -> str:
        """Return the Projects directory path for a device."""
        return self._storage.combine_path(target.device.drive, PROJECTS_DIR_NAME)

    def scan(self, target: DeviceTarget) -> ScanResult:
        """Scan one device in one role.

        Creates the Projects directory if it is missing. Each immediate
        subdirectory other than _GLOBAL_ becomes a record. If none remain,
        a single placeholder record is returned.

        Args:
            target: The device, its group, role and backup id.

        Returns:
            ScanResult with the records and the directory's modification
            time. The time is None if the directory could not be created,
            listed or stat'ed.
        """
        projects_dir = self.projects_dir(target)
        device = target.device
        log(
            logger,
            logging.DEBUG,
            _CONTEXT,
            f"Scanning {target.role} '{device.label}' ({projects_dir})",
        )

        if not self._storage.exists(projects_dir):
            try:
                self._storage.create_directory(projects_dir)
            except StorageError as e:
                log(
                    logger,
                    logging.WARNING,
                    _CONTEXT,
                    f"Could not create {projects_dir} on '{device.label}'",
                    e,
                )
                return ScanResult(target=target, projects=())
            log(
                logger,
                SUCCESS,
                _CONTEXT,
                f"Created {projects_dir} on '{device.label}'",
            )

        try:
            children = self._storage.list_children(
                projects_dir, kind=EntryKind.DIRECTORY
            )
        except StorageError as e:
            log(
                logger,
                logging.WARNING,
                _CONTEXT,
                f"Could not enumerate {projects_dir} on '{device.label}'",
                e,
            )
            return ScanResult(target=target, projects=())

        candidates = sorted(
            (c for c in children if c.name != GLOBAL_DIR_NAME),
            key=lambda c: c.name,
        )
        if candidates:
            projects = tuple(
                ProjectRecord.for_target(target, name=c.name, path=c.path)
                for c in candidates
            )
        else:
            projects = (ProjectRecord.placeholder(target),)

        modified = self._read_modified(projects_dir, device.label)
        log(
            logger,
            logging.INFO,
            _CONTEXT,
            f"Found {len(candidates)} project(s) on {target.role} '{device.label}'",
        )
        return ScanResult(target=target, projects=projects, modified=modified)

    def _read_modified(self, projects_dir: str, label: str) -> datetime | None:
        try:
            return self._storage.last_modified(projects_dir)
        except StorageError as e:
            log(
                logger,
                logging.WARNING,
                _CONTEXT,
                f"Could not read modification time of {projects_dir} on '{label}'",
                e,
            )
            return None
