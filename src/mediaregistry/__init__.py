"""mediaregistry - Project discovery and port allocation for media drives.

This library finds media-editing projects on master and backup storage
drives, caches the result until a drive's Projects directory changes, and
hands out a unique database port per project.

Example:
    >>> from mediaregistry import LocalDirectoryProvider, ProjectRegistry
    >>> config = {
    ...     "Storage": {
    ...         "1": {
    ...             "Master": {
    ...                 "Label": "Studio",
    ...                 "DriveLetter": "E:\\\\",
    ...                 "SerialNumber": "WD-1234",
    ...             },
    ...         },
    ...     },
    ... }
    >>> registry = ProjectRegistry(LocalDirectoryProvider())
    >>> listing = registry.get_projects(config)  # Rescans only if changed
"""

from mediaregistry.adapters.network import PsutilPortProbe
from mediaregistry.adapters.storage import LocalDirectoryProvider
from mediaregistry.config import find_config_path, load_config, save_config
from mediaregistry.core.config_access import ConfigAccessor
from mediaregistry.core.exceptions import (
    ConfigFileError,
    ConfigurationError,
    DirectoryCreateError,
    DuplicateLabelError,
    DuplicateSerialError,
    MediaRegistryError,
    PortCapacityError,
    StorageAccessError,
    StorageError,
    StorageNotFoundError,
)
from mediaregistry.core.models import (
    DEFAULT_PORT_RANGE,
    RESERVED_PORTS,
    DeviceTarget,
    DriveRole,
    PortRange,
    ProjectListing,
    ProjectRecord,
    RegistryCacheEntry,
    ScanResult,
    StorageDevice,
    StorageGroup,
)
from mediaregistry.core.port_allocation import PortAllocator
from mediaregistry.core.ports import PortProbePort, StorageDirectoryPort
from mediaregistry.core.registry_cache import RegistryCache
from mediaregistry.core.scanner import DriveScanner
from mediaregistry.core.services import ProjectRegistry


__version__ = "0.1.0"

__all__ = [
    "DEFAULT_PORT_RANGE",
    "RESERVED_PORTS",
    "ConfigAccessor",
    "ConfigFileError",
    "ConfigurationError",
    "DeviceTarget",
    "DirectoryCreateError",
    "DriveRole",
    "DriveScanner",
    "DuplicateLabelError",
    "DuplicateSerialError",
    "LocalDirectoryProvider",
    "MediaRegistryError",
    "PortAllocator",
    "PortCapacityError",
    "PortProbePort",
    "PortRange",
    "ProjectListing",
    "ProjectRecord",
    "ProjectRegistry",
    "PsutilPortProbe",
    "RegistryCache",
    "RegistryCacheEntry",
    "ScanResult",
    "StorageAccessError",
    "StorageDevice",
    "StorageDirectoryPort",
    "StorageError",
    "StorageGroup",
    "StorageNotFoundError",
    "__version__",
    "find_config_path",
    "load_config",
    "save_config",
]
