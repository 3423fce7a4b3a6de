"""Basic project discovery example.

This example shows the simplest usage pattern: describe your storage
devices in a config dict, create a registry, and list projects. The
registry caches scans in the same dict and only rescans when a drive's
Projects folder changes.
"""

from mediaregistry import LocalDirectoryProvider, ProjectRegistry


# Storage groups: one Master plus any number of Backups
config = {
    "Storage": {
        "1": {
            "Master": {
                "Label": "Studio",
                "DriveLetter": "/Volumes/Studio",
                "SerialNumber": "WD-1234",
            },
            "Backup": {
                "1": {
                    "Label": "Vault",
                    "DriveLetter": "/Volumes/Vault",
                    "SerialNumber": "SG-5678",
                },
            },
        },
    },
}

registry = ProjectRegistry(LocalDirectoryProvider())

# First call scans every mounted drive and stores the result in
# config["Projects"]["Registry"]
listing = registry.get_projects(config)
for label, records in listing.master.items():
    print(label, [r.name for r in records if not r.is_placeholder])

# Nothing changed on disk, so this is served from the cache
listing = registry.get_projects(config)

# Find a project on every drive that holds a copy
for record in listing.find("Wedding"):
    print(f"{record.drive_type}: {record.path}")

# Force a rescan, e.g. after copying files into an existing project folder
listing = registry.get_projects(config, force=True)
