"""Core domain models for mediaregistry.

These models are pure Python dataclasses with no I/O dependencies.
They represent storage devices, the project records found on them, and
the bookkeeping needed to decide when a device must be rescanned.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from mediaregistry.core.exceptions import ConfigurationError, DuplicateSerialError


PROJECTS_DIR_NAME = "Projects"
GLOBAL_DIR_NAME = "_GLOBAL_"
FINGERPRINT_SUFFIX = "_Projects"


def fingerprint_key(serial_number: str) -> str:
    """Return the ProjectDirs key for a device serial number."""
    return f"{serial_number}{FINGERPRINT_SUFFIX}"


class DriveRole(StrEnum):
    """Role a storage device plays within its storage group."""

    MASTER = "Master"
    BACKUP = "Backup"


@dataclass(frozen=True, slots=True)
class StorageDevice:
    """A physical drive as described in the configuration.

    Attributes:
        label: Human-readable device name. Used as the key in result maps.
        drive: Drive root or mount path (e.g. "E:\\" or "/media/usb0").
        serial_number: Stable hardware identity, used as the cache key.
        file_system: File system name reported for the drive.
        free_space_gb: Free space telemetry, if known.
        total_space_gb: Total capacity telemetry, if known.
        health_status: Health telemetry string, if known.
    """

    label: str
    drive: str
    serial_number: str
    file_system: str = ""
    free_space_gb: float | None = None
    total_space_gb: float | None = None
    health_status: str = ""

    def __post_init__(self) -> None:
        """Validate the fields the registry depends on."""
        if not self.drive:
            raise ConfigurationError(f"Device '{self.label}' has no drive path")
        if not self.serial_number:
            raise ConfigurationError(f"Device '{self.label}' has no serial number")

    @property
    def fingerprint_key(self) -> str:
        """Key of this device's Projects directory in the fingerprint map."""
        return fingerprint_key(self.serial_number)


@dataclass(frozen=True, slots=True)
class DeviceTarget:
    """One device in one role of one storage group; the unit of scanning."""

    group_id: str
    role: DriveRole
    device: StorageDevice
    backup_id: str = ""


@dataclass(frozen=True, slots=True)
class StorageGroup:
    """A Master device and its Backup devices.

    Attributes:
        group_id: Identifier of the group (e.g. "1").
        master: The primary working device.
        backups: Backup devices keyed by backup id.

    Raises:
        DuplicateSerialError: If a serial number is both Master and Backup.
    """

    group_id: str
    master: StorageDevice
    backups: Mapping[str, StorageDevice] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Reject a serial number that holds both roles."""
        for backup in self.backups.values():
            if backup.serial_number == self.master.serial_number:
                raise DuplicateSerialError(self.group_id, backup.serial_number)

    def targets(self) -> Iterator[DeviceTarget]:
        """Yield the Master target followed by each Backup target."""
        yield DeviceTarget(self.group_id, DriveRole.MASTER, self.master)
        for backup_id, device in self.backups.items():
            yield DeviceTarget(self.group_id, DriveRole.BACKUP, device, backup_id)


@dataclass(frozen=True, slots=True)
class ProjectRecord:
    """A project folder found on a device.

    A record with an empty name and path is a placeholder: the device was
    scanned and holds no projects. A device that was never scanned has no
    records at all.
    """

    name: str
    path: str
    drive: str
    label: str
    serial_number: str
    storage_group: str
    drive_type: DriveRole
    backup_id: str = ""

    @classmethod
    def placeholder(cls, target: DeviceTarget) -> ProjectRecord:
        """Build the 'scanned, nothing found' record for a device."""
        return cls.for_target(target, name="", path="")

    @classmethod
    def for_target(cls, target: DeviceTarget, name: str, path: str) -> ProjectRecord:
        """Build a record copying device, group and role fields from target."""
        return cls(
            name=name,
            path=path,
            drive=target.device.drive,
            label=target.device.label,
            serial_number=target.device.serial_number,
            storage_group=target.group_id,
            drive_type=target.role,
            backup_id=target.backup_id,
        )

    @property
    def is_placeholder(self) -> bool:
        """True if this record only marks an empty, scanned device."""
        return not self.name and not self.path

    def to_dict(self) -> dict[str, str]:
        """Serialize using the persisted PascalCase keys."""
        return {
            "Name": self.name,
            "Path": self.path,
            "Drive": self.drive,
            "Label": self.label,
            "SerialNumber": self.serial_number,
            "StorageGroup": self.storage_group,
            "DriveType": str(self.drive_type),
            "BackupId": self.backup_id,
        }


@dataclass(frozen=True, slots=True)
class RegistryCacheEntry:
    """Cached scan result for one device label.

    The project tuple is replaced wholesale on every rescan.
    """

    drive: str
    label: str
    drive_type: DriveRole
    projects: tuple[ProjectRecord, ...] = ()
    backup_id: str = ""
    serial_number: str = ""
    storage_group: str = ""
    file_system: str = ""
    free_space_gb: float | None = None
    total_space_gb: float | None = None
    health_status: str = ""

    @classmethod
    def from_scan(
        cls, target: DeviceTarget, projects: tuple[ProjectRecord, ...]
    ) -> RegistryCacheEntry:
        """Build an entry for target holding freshly scanned projects."""
        device = target.device
        return cls(
            drive=device.drive,
            label=device.label,
            drive_type=target.role,
            projects=projects,
            backup_id=target.backup_id,
            serial_number=device.serial_number,
            storage_group=target.group_id,
            file_system=device.file_system,
            free_space_gb=device.free_space_gb,
            total_space_gb=device.total_space_gb,
            health_status=device.health_status,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the persisted PascalCase keys."""
        return {
            "Drive": self.drive,
            "Label": self.label,
            "DriveType": str(self.drive_type),
            "BackupId": self.backup_id,
            "SerialNumber": self.serial_number,
            "StorageGroup": self.storage_group,
            "FileSystem": self.file_system,
            "FreeSpaceGB": self.free_space_gb,
            "TotalSpaceGB": self.total_space_gb,
            "HealthStatus": self.health_status,
            "Projects": [p.to_dict() for p in self.projects],
        }


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Output of one Drive Scanner run.

    Attributes:
        target: The device that was scanned.
        projects: Records found; a single placeholder if the directory was
            empty, or empty if the directory could not be read.
        modified: Last-modified time of the Projects directory after the
            scan, or None if it could not be read.
    """

    target: DeviceTarget
    projects: tuple[ProjectRecord, ...]
    modified: datetime | None = None

    @property
    def fingerprint_key(self) -> str:
        """Fingerprint map key for the scanned device."""
        return self.target.device.fingerprint_key


@dataclass(frozen=True, slots=True)
class ProjectListing:
    """Projects per role and device label, as returned to callers."""

    master: dict[str, list[ProjectRecord]] = field(default_factory=dict)
    backup: dict[str, list[ProjectRecord]] = field(default_factory=dict)

    def for_role(self, role: DriveRole) -> dict[str, list[ProjectRecord]]:
        """Return the label map for a role."""
        return self.master if role is DriveRole.MASTER else self.backup

    def find(self, name: str) -> list[ProjectRecord]:
        """Return every record of the named project across all devices."""
        return [
            record
            for by_label in (self.master, self.backup)
            for records in by_label.values()
            for record in records
            if record.name == name
        ]

    def as_dict(self) -> dict[str, dict[str, list[dict[str, str]]]]:
        """Serialize to {"Master": {label: [...]}, "Backup": {label: [...]}}."""
        return {
            str(DriveRole.MASTER): {
                label: [r.to_dict() for r in records]
                for label, records in self.master.items()
            },
            str(DriveRole.BACKUP): {
                label: [r.to_dict() for r in records]
                for label, records in self.backup.items()
            },
        }


@dataclass(frozen=True, slots=True)
class PortRange:
    """Inclusive TCP port range used for allocation."""

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate range bounds."""
        if not 0 < self.start <= self.end <= 65535:
            raise ValueError(f"Invalid port range {self.start}-{self.end}")

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))

    def __contains__(self, port: object) -> bool:
        return isinstance(port, int) and self.start <= port <= self.end

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


DEFAULT_PORT_RANGE = PortRange(3310, 3399)
RESERVED_PORTS = frozenset({3306, 3307})


@dataclass(frozen=True, slots=True)
class ListenerInfo:
    """A socket the OS reports as listening on a local port."""

    port: int
    address: str = ""
    pid: int | None = None
    status: str = "LISTEN"


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """A child returned by the directory provider."""

    name: str
    path: str
    is_dir: bool = True


@dataclass(frozen=True, slots=True)
class DriveInfo:
    """A mounted drive reported by the operating system.

    Attributes:
        mount_path: Drive root or mount point.
        device: OS device name (e.g. "/dev/sdb1" or "E:\\").
        file_system: File system type.
        total_bytes: Capacity in bytes, if it could be read.
        free_bytes: Free space in bytes, if it could be read.
    """

    mount_path: str
    device: str = ""
    file_system: str = ""
    total_bytes: int | None = None
    free_bytes: int | None = None
