"""Error handling patterns with recovery hints.

This example demonstrates how to handle common errors and use
the recovery_hint property to provide actionable guidance.
"""

from mediaregistry import (
    ConfigurationError,
    DuplicateSerialError,
    LocalDirectoryProvider,
    MediaRegistryError,
    PortAllocator,
    PortCapacityError,
    ProjectListing,
    ProjectRegistry,
    PsutilPortProbe,
)


registry = ProjectRegistry(LocalDirectoryProvider())


# Pattern 1: Handle invalid storage configuration
def list_projects(config: dict) -> ProjectListing | None:
    """List projects, reporting configuration mistakes."""
    try:
        return registry.get_projects(config)
    except DuplicateSerialError as e:
        # Same physical drive configured as Master and Backup
        print(f"Drive {e.serial_number} is configured twice in group {e.group_id}.")
        return None
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 2: Handle a full port range
def port_for(config: dict, project: str) -> int | None:
    """Allocate a port, returning None when the range is exhausted."""
    allocator = PortAllocator(PsutilPortProbe())
    try:
        return allocator.allocate_for_config(config, project)
    except PortCapacityError as e:
        print(f"No free port in {e.start}-{e.end}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 3: Catch-all with the base exception
def safe_refresh(config: dict) -> bool:
    """Rescan all drives, handling any library error."""
    try:
        registry.get_projects(config, force=True)
        return True
    except MediaRegistryError as e:
        print(f"Error: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        return False


if __name__ == "__main__":
    bad_config = {"Storage": {"1": {"Backup": {}}}}
    list_projects(bad_config)

    full_config = {
        "Projects": {"PortRegistry": {f"p{port}": port for port in range(3310, 3400)}}
    }
    port_for(full_config, "Late")
