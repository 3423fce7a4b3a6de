"""Core domain services for mediaregistry."""

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from mediaregistry.core.codec import (
    check_unique_labels,
    registry_cache_from_value,
    registry_cache_to_mapping,
    storage_groups_from_config,
)
from mediaregistry.core.config_access import REGISTRY_PATH, ConfigAccessor
from mediaregistry.core.exceptions import StorageError
from mediaregistry.core.models import DeviceTarget, ProjectListing, StorageGroup
from mediaregistry.core.ports import StorageDirectoryPort
from mediaregistry.core.registry_cache import RegistryCache, find_stale_devices
from mediaregistry.core.scanner import DriveScanner
from mediaregistry.logging_config import get_logger, log


logger = get_logger(__name__)
_CONTEXT = "ProjectRegistry"


class ProjectRegistry:
    """Orchestrates project discovery across storage groups with caching.

    Not thread-safe: the cache is a plain object owned by the caller, who
    must serialize calls that share it.
    """

    def __init__(
        self,
        storage: StorageDirectoryPort,
        scanner: DriveScanner | None = None,
        *,
        check_drive_roots: bool = True,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Create a registry service.

        Args:
            storage: Directory provider used for existence and mtime checks.
            scanner: Drive scanner; defaults to one over the same storage.
            check_drive_roots: Skip devices whose drive root is not mounted.
                Disable for tests and diagnostics.
            clock: Returns the current time; used for LastScanned.
        """
        self._storage = storage
        self._scanner = scanner if scanner is not None else DriveScanner(storage)
        self._check_drive_roots = check_drive_roots
        self._clock = clock if clock is not None else (lambda: datetime.now(UTC))

    def refresh(
        self,
        groups: Sequence[StorageGroup],
        cache: RegistryCache,
        *,
        force: bool = False,
    ) -> ProjectListing:
        """Return projects for every configured device, rescanning if stale.

        If any device's Projects directory changed since the last scan, or a
        device was never scanned, every available device is rescanned and
        the cache is updated in place. Otherwise cached records are returned
        without touching the scanner.

        Args:
            groups: Validated storage groups.
            cache: Cache to read and update.
            force: Rescan regardless of fingerprints.

        Returns:
            ProjectListing keyed by role and device label. Unmounted devices
            are omitted when drive-root checks are enabled.

        Raises:
            DuplicateLabelError: If two devices in one role share a label.
        """
        check_unique_labels(groups)
        targets = self._available_targets(groups)

        if force:
            reason = "forced rescan"
        else:
            stale = find_stale_devices(cache, targets, self._storage)
            if not stale:
                log(
                    logger,
                    logging.DEBUG,
                    _CONTEXT,
                    f"Registry cache is current for {len(targets)} device(s)",
                )
                return cache.listing(targets)
            reason = ", ".join(
                f"'{s.target.device.label}' {s.reason}" for s in stale
            )

        log(
            logger,
            logging.INFO,
            _CONTEXT,
            f"Registry cache invalidated ({reason}); rescanning "
            f"{len(targets)} device(s)",
        )
        cache.reset_entries()
        for target in targets:
            cache.merge(self._scanner.scan(target))
        cache.last_scanned = self._clock()
        return cache.listing(targets)

    def get_projects(self, config: Any, *, force: bool = False) -> ProjectListing:
        """Refresh using a caller-owned configuration object.

        Reads storage groups from Storage and the cache from
        Projects.Registry, then writes the updated cache back to
        Projects.Registry in its persisted form.

        Raises:
            ConfigurationError: If storage groups are missing or invalid.
        """
        accessor = ConfigAccessor(config)
        groups = storage_groups_from_config(accessor)
        raw, _found = accessor.get(REGISTRY_PATH)
        cache = registry_cache_from_value(raw)

        listing = self.refresh(groups, cache, force=force)

        if not isinstance(raw, RegistryCache):
            accessor.set(REGISTRY_PATH, registry_cache_to_mapping(cache))
        return listing

    def clear_cache(self, config: Any) -> None:
        """Reset Projects.Registry so the next call performs a full scan."""
        accessor = ConfigAccessor(config)
        raw, _found = accessor.get(REGISTRY_PATH)
        if isinstance(raw, RegistryCache):
            raw.clear()
        else:
            accessor.set(REGISTRY_PATH, registry_cache_to_mapping(RegistryCache()))
        log(logger, logging.INFO, _CONTEXT, "Registry cache cleared")

    def _available_targets(self, groups: Sequence[StorageGroup]) -> list[DeviceTarget]:
        targets = []
        for group in groups:
            for target in group.targets():
                if self._check_drive_roots and not self._drive_mounted(target):
                    log(
                        logger,
                        logging.WARNING,
                        _CONTEXT,
                        f"Skipping {target.role} '{target.device.label}' in group "
                        f"'{group.group_id}': drive {target.device.drive} "
                        "is not mounted",
                    )
                    continue
                targets.append(target)
        return targets

    def _drive_mounted(self, target: DeviceTarget) -> bool:
        try:
            return self._storage.exists(target.device.drive)
        except StorageError as e:
            log(
                logger,
                logging.DEBUG,
                _CONTEXT,
                f"Drive check failed for {target.device.drive}",
                e,
            )
            return False
