"""Shared formatting helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

from mediaregistry.core.formatting import format_size, role_to_color
from mediaregistry.core.models import DriveRole


if TYPE_CHECKING:
    from mediaregistry.core.models import DriveInfo, ProjectListing


def _format_role_with_color(role: DriveRole) -> Text:
    """Format a drive role with color coding.

    Returns:
        Rich Text object: "Master" in green, "Backup" in cyan.
    """
    color = role_to_color(str(role))
    return Text(str(role), style=color) if color else Text(str(role))


def _projects_table(listing: ProjectListing) -> Table:
    """Build a table with one row per project record."""
    table = Table()
    table.add_column("Role")
    table.add_column("Device")
    table.add_column("Group")
    table.add_column("Backup")
    table.add_column("Project", no_wrap=True)
    table.add_column("Path", overflow="fold")

    for role in DriveRole:
        for label, records in sorted(listing.for_role(role).items()):
            if not records:
                table.add_row(
                    _format_role_with_color(role),
                    label,
                    "",
                    "",
                    Text("unreadable", style="red"),
                    "",
                )
                continue
            for record in records:
                name = (
                    Text("(no projects)", style="dim")
                    if record.is_placeholder
                    else Text(record.name)
                )
                table.add_row(
                    _format_role_with_color(role),
                    label,
                    record.storage_group,
                    record.backup_id,
                    name,
                    record.path,
                )
    return table


def _drives_table(drives: list[DriveInfo]) -> Table:
    """Build a table of mounted drives."""
    table = Table()
    table.add_column("Mount")
    table.add_column("Device")
    table.add_column("File system")
    table.add_column("Size", justify="right")
    table.add_column("Free", justify="right")

    for drive in drives:
        table.add_row(
            drive.mount_path,
            drive.device,
            drive.file_system,
            format_size(drive.total_bytes),
            format_size(drive.free_bytes),
        )
    return table
