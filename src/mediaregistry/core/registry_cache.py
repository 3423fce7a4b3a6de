"""Registry cache and the staleness decision.

The cache keeps the last scan of every device label plus a fingerprint map
(ProjectDirs) of Projects-directory modification times keyed by serial
number. The fingerprint map alone decides whether cached records can be
reused: a device is stale when it has no fingerprint, when its cache entry
is missing, or when the live modification time differs from the stored one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from mediaregistry.core.exceptions import StorageError
from mediaregistry.core.models import (
    PROJECTS_DIR_NAME,
    DeviceTarget,
    DriveRole,
    ProjectListing,
    RegistryCacheEntry,
    ScanResult,
)
from mediaregistry.logging_config import get_logger, log


if TYPE_CHECKING:
    from mediaregistry.core.ports import StorageDirectoryPort


logger = get_logger(__name__)
_CONTEXT = "RegistryCache"


@dataclass(slots=True)
class RegistryCache:
    """Mutable, caller-owned cache of scanned projects.

    Attributes:
        master: Cache entries for Master devices keyed by label.
        backup: Cache entries for Backup devices keyed by label.
        last_scanned: When the last rescan finished, None if never.
        project_dirs: Fingerprints keyed by "<serial>_Projects".
    """

    master: dict[str, RegistryCacheEntry] = field(default_factory=dict)
    backup: dict[str, RegistryCacheEntry] = field(default_factory=dict)
    last_scanned: datetime | None = None
    project_dirs: dict[str, datetime] = field(default_factory=dict)

    def entries(self, role: DriveRole) -> dict[str, RegistryCacheEntry]:
        """Return the label map for a role."""
        return self.master if role is DriveRole.MASTER else self.backup

    def get(self, role: DriveRole, label: str) -> RegistryCacheEntry | None:
        """Return the cached entry for a device label, or None."""
        return self.entries(role).get(label)

    def merge(self, scan: ScanResult) -> RegistryCacheEntry:
        """Fold a scan into the cache.

        Replaces the device's entry. The fingerprint is replaced with the
        scan's modification time, or dropped when the scan has none, so a
        failed scan is retried on the next lookup.

        Returns:
            The entry now stored for the device.
        """
        target = scan.target
        entry = RegistryCacheEntry.from_scan(target, scan.projects)
        self.entries(target.role)[target.device.label] = entry
        if scan.modified is not None:
            self.project_dirs[scan.fingerprint_key] = scan.modified
        else:
            self.project_dirs.pop(scan.fingerprint_key, None)
        return entry

    def reset_entries(self) -> None:
        """Drop all cached entries but keep fingerprints."""
        self.master.clear()
        self.backup.clear()

    def clear(self) -> None:
        """Forget everything; the next lookup is a first scan."""
        self.reset_entries()
        self.project_dirs.clear()
        self.last_scanned = None

    def listing(self, targets: Iterable[DeviceTarget]) -> ProjectListing:
        """Reshape cached entries for targets into role -> label -> records.

        Targets without a cached entry are omitted.
        """
        result = ProjectListing()
        for target in targets:
            entry = self.get(target.role, target.device.label)
            if entry is not None:
                result.for_role(target.role)[entry.label] = list(entry.projects)
        return result


@dataclass(frozen=True, slots=True)
class StaleDevice:
    """A device whose cached records cannot be reused, and why."""

    target: DeviceTarget
    reason: str


def check_device(
    cache: RegistryCache,
    target: DeviceTarget,
    storage: StorageDirectoryPort,
) -> StaleDevice | None:
    """Decide whether a single device must be rescanned.

    Returns:
        A StaleDevice describing the reason, or None if the cache is fresh.
    """
    device = target.device
    cached_time = cache.project_dirs.get(device.fingerprint_key)
    if cached_time is None:
        return StaleDevice(target, "not scanned before")

    if cache.get(target.role, device.label) is None:
        return StaleDevice(target, "no cached entry")

    projects_dir = storage.combine_path(device.drive, PROJECTS_DIR_NAME)
    try:
        live_time = storage.last_modified(projects_dir)
    except StorageError as e:
        log(
            logger,
            logging.DEBUG,
            _CONTEXT,
            f"Cannot read modification time of {projects_dir}",
            e,
        )
        return StaleDevice(target, "modification time unavailable")

    # Earlier times count too: a clock reset or corrupted value is a change.
    if live_time != cached_time:
        return StaleDevice(
            target,
            f"modified {live_time.isoformat()} (cached {cached_time.isoformat()})",
        )
    return None


def find_stale_devices(
    cache: RegistryCache,
    targets: Iterable[DeviceTarget],
    storage: StorageDirectoryPort,
) -> list[StaleDevice]:
    """Run check_device() for every target and collect the stale ones."""
    stale = []
    for target in targets:
        result = check_device(cache, target, storage)
        if result is not None:
            log(
                logger,
                logging.DEBUG,
                _CONTEXT,
                f"{target.role} '{target.device.label}' is stale: {result.reason}",
            )
            stale.append(result)
    return stale
