"""Storage directory adapters."""

from mediaregistry.adapters.storage.filesystem import LocalDirectoryProvider


__all__ = ["LocalDirectoryProvider"]
