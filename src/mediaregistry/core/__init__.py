"""Core domain module for mediaregistry.

This module contains the domain models, port definitions, and the scanning,
caching and port-allocation logic. It depends only on the ports, never on
concrete adapters, and can be tested in isolation.
"""

from mediaregistry.core.models import (
    DriveRole,
    ProjectListing,
    ProjectRecord,
    RegistryCacheEntry,
    StorageDevice,
    StorageGroup,
)
from mediaregistry.core.ports import PortProbePort, StorageDirectoryPort
from mediaregistry.core.registry_cache import RegistryCache


__all__ = [
    "DriveRole",
    "PortProbePort",
    "ProjectListing",
    "ProjectRecord",
    "RegistryCache",
    "RegistryCacheEntry",
    "StorageDevice",
    "StorageDirectoryPort",
    "StorageGroup",
]
