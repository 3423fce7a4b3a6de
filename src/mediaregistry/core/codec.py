"""Conversion between persisted configuration values and domain models.

Persisted registry data comes back in whatever shape the caller stored it:
plain dicts (JSON), objects with attributes, or, for cache entries, a bare
list of project records. Everything is normalized here, once, so scanning
and invalidation only ever see the canonical dataclasses.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from mediaregistry.core.config_access import STORAGE_PATH, ConfigAccessor
from mediaregistry.core.exceptions import ConfigurationError, DuplicateLabelError
from mediaregistry.core.models import (
    DriveRole,
    ProjectRecord,
    RegistryCacheEntry,
    StorageDevice,
    StorageGroup,
)
from mediaregistry.core.registry_cache import RegistryCache


_MISSING = object()


def _field(value: Any, *names: str, default: Any = None) -> Any:
    """Read the first present field from a mapping or attribute object."""
    for name in names:
        if isinstance(value, Mapping):
            found = value.get(name, _MISSING)
        else:
            found = getattr(value, name, _MISSING)
        if found is not _MISSING and found is not None:
            return found
    return default


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _items(value: Any) -> list[tuple[str, Any]]:
    """Key/value pairs of a mapping, attribute object, or list (1-based ids)."""
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [(str(k), v) for k, v in value.items()]
    if _is_list(value):
        return [(str(i), v) for i, v in enumerate(value, 1)]
    attrs = getattr(value, "__dict__", {})
    return [(str(k), v) for k, v in attrs.items() if not k.startswith("_")]


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_role(value: Any, default: DriveRole) -> DriveRole:
    """Parse "Master"/"Backup" case-insensitively, falling back to default."""
    if isinstance(value, DriveRole):
        return value
    for role in DriveRole:
        if str(value).strip().lower() == role.value.lower():
            return role
    return default


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a persisted timestamp.

    Accepts datetime objects, ISO-8601 strings and POSIX epoch numbers.
    Naive values are taken as UTC. Unparseable values yield None, which
    makes the owning device stale.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        return None
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp as ISO-8601."""
    return value.isoformat()


# Storage groups


def device_from_value(value: Any, group_id: str, role: str) -> StorageDevice:
    """Build a StorageDevice from a configured device descriptor.

    Raises:
        ConfigurationError: If the descriptor has no drive or serial number.
    """
    where = f"{role} device of storage group '{group_id}'"
    if value is None:
        raise ConfigurationError(f"Missing {where}", group_id=group_id)

    drive = str(_field(value, "DriveLetter", "Drive", "Path", default=""))
    serial = str(_field(value, "SerialNumber", default=""))
    if not drive:
        raise ConfigurationError(f"{where} has no DriveLetter", group_id=group_id)
    if not serial:
        raise ConfigurationError(f"{where} has no SerialNumber", group_id=group_id)

    return StorageDevice(
        label=str(_field(value, "Label", default="") or drive),
        drive=drive,
        serial_number=serial,
        file_system=str(_field(value, "FileSystem", default="")),
        free_space_gb=_optional_float(_field(value, "FreeSpaceGB", "FreeSpace")),
        total_space_gb=_optional_float(_field(value, "TotalSpaceGB", "TotalSpace")),
        health_status=str(_field(value, "HealthStatus", "Health", default="")),
    )


def storage_groups_from_config(accessor: ConfigAccessor) -> list[StorageGroup]:
    """Read and validate every storage group in the configuration.

    Raises:
        ConfigurationError: If no groups are configured, a group has no
            Master, or a device descriptor is incomplete.
        DuplicateSerialError: If a serial is both Master and Backup.
        DuplicateLabelError: If two devices in one role share a label.
    """
    raw, found = accessor.get(STORAGE_PATH)
    groups_raw = _items(raw) if found else []
    if not groups_raw:
        raise ConfigurationError("No storage groups configured under 'Storage'")

    groups = []
    for group_id, group_value in groups_raw:
        master_value = _field(group_value, "Master")
        if master_value is None:
            raise ConfigurationError(
                f"Storage group '{group_id}' has no Master device",
                group_id=group_id,
            )
        master = device_from_value(master_value, group_id, str(DriveRole.MASTER))
        backups = {
            backup_id: device_from_value(v, group_id, str(DriveRole.BACKUP))
            for backup_id, v in _items(_field(group_value, "Backup"))
        }
        groups.append(StorageGroup(group_id=group_id, master=master, backups=backups))

    check_unique_labels(groups)
    return groups


def check_unique_labels(groups: Sequence[StorageGroup]) -> None:
    """Ensure no two devices in the same role share a label.

    Raises:
        DuplicateLabelError: On the first duplicate found.
    """
    seen: dict[DriveRole, set[str]] = {role: set() for role in DriveRole}
    for group in groups:
        for target in group.targets():
            labels = seen[target.role]
            if target.device.label in labels:
                raise DuplicateLabelError(
                    target.device.label, str(target.role), group_id=group.group_id
                )
            labels.add(target.device.label)


# Registry cache


def project_record_from_value(
    value: Any, entry: RegistryCacheEntry
) -> ProjectRecord:
    """Build a ProjectRecord, filling missing fields from its cache entry."""
    return ProjectRecord(
        name=str(_field(value, "Name", default="")),
        path=str(_field(value, "Path", default="")),
        drive=str(_field(value, "Drive", default=entry.drive)),
        label=str(_field(value, "Label", default=entry.label)),
        serial_number=str(_field(value, "SerialNumber", default=entry.serial_number)),
        storage_group=str(_field(value, "StorageGroup", default=entry.storage_group)),
        drive_type=parse_role(_field(value, "DriveType"), entry.drive_type),
        backup_id=str(_field(value, "BackupId", default=entry.backup_id)),
    )


def cache_entry_from_value(
    label: str, value: Any, role: DriveRole
) -> RegistryCacheEntry:
    """Normalize one persisted cache entry.

    The value may be a mapping with a "Projects" list, an object with the
    same attributes, or a bare list of project records. For a bare list
    the entry fields are taken from the first record.
    """
    if isinstance(value, RegistryCacheEntry):
        return value

    if _is_list(value):
        first = value[0] if value else {}
        shell = _entry_shell(label, first, role)
        projects_raw: Any = value
    else:
        shell = _entry_shell(label, value, role)
        projects_raw = _field(value, "Projects", default=[])
        if not _is_list(projects_raw):
            projects_raw = [projects_raw]

    projects = tuple(project_record_from_value(p, shell) for p in projects_raw)
    return RegistryCacheEntry(
        drive=shell.drive,
        label=shell.label,
        drive_type=shell.drive_type,
        projects=projects,
        backup_id=shell.backup_id,
        serial_number=shell.serial_number,
        storage_group=shell.storage_group,
        file_system=shell.file_system,
        free_space_gb=shell.free_space_gb,
        total_space_gb=shell.total_space_gb,
        health_status=shell.health_status,
    )


def _entry_shell(label: str, value: Any, role: DriveRole) -> RegistryCacheEntry:
    return RegistryCacheEntry(
        drive=str(_field(value, "Drive", "DriveLetter", default="")),
        label=str(_field(value, "Label", default=label)),
        drive_type=parse_role(_field(value, "DriveType"), role),
        backup_id=str(_field(value, "BackupId", default="")),
        serial_number=str(_field(value, "SerialNumber", default="")),
        storage_group=str(_field(value, "StorageGroup", default="")),
        file_system=str(_field(value, "FileSystem", default="")),
        free_space_gb=_optional_float(_field(value, "FreeSpaceGB")),
        total_space_gb=_optional_float(_field(value, "TotalSpaceGB")),
        health_status=str(_field(value, "HealthStatus", default="")),
    )


def registry_cache_from_value(value: Any) -> RegistryCache:
    """Load a RegistryCache from its persisted form.

    None or an empty value yields an empty cache. A RegistryCache instance
    is returned unchanged so callers can keep the live object in their
    configuration.
    """
    if isinstance(value, RegistryCache):
        return value
    if value is None:
        return RegistryCache()

    cache = RegistryCache(last_scanned=parse_timestamp(_field(value, "LastScanned")))
    for role in DriveRole:
        for label, entry_value in _items(_field(value, role.value)):
            cache.entries(role)[label] = cache_entry_from_value(label, entry_value, role)

    for key, stamp in _items(_field(value, "ProjectDirs")):
        parsed = parse_timestamp(stamp)
        if parsed is not None:
            cache.project_dirs[key] = parsed
    return cache


def registry_cache_to_mapping(cache: RegistryCache) -> dict[str, Any]:
    """Serialize a RegistryCache to JSON-compatible dicts."""
    return {
        "Master": {label: e.to_dict() for label, e in cache.master.items()},
        "Backup": {label: e.to_dict() for label, e in cache.backup.items()},
        "LastScanned": (
            format_timestamp(cache.last_scanned) if cache.last_scanned else None
        ),
        "ProjectDirs": {
            key: format_timestamp(stamp) for key, stamp in cache.project_dirs.items()
        },
    }
