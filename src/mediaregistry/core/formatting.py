"""Formatting utilities for domain logic."""


def role_to_color(role: str) -> str:
    """Map a drive role to a color name.

    Args:
        role: Role string ("Master" or "Backup")

    Returns:
        Color name string:
        - "Master" -> "green"
        - "Backup" -> "cyan"
        - invalid -> empty string
    """
    color_map = {
        "Master": "green",
        "Backup": "cyan",
    }
    return color_map.get(role, "")


def format_size(size_bytes: int | None) -> str:
    """Format size in bytes to human-readable format."""
    if size_bytes is None:
        return "unknown"
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"
