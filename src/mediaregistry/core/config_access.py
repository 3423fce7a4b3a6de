"""Uniform access to caller-owned configuration objects.

Callers hand the registry either nested dicts (e.g. parsed JSON) or objects
with attributes. ConfigAccessor hides the difference so the rest of the
core never branches on the representation.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any


REGISTRY_PATH = ("Projects", "Registry")
PORT_REGISTRY_PATH = ("Projects", "PortRegistry")
STORAGE_PATH = ("Storage",)


class ConfigAccessor:
    """Path-based get/set over dicts and attribute objects.

    Example:
        >>> config = {"Projects": {"PortRegistry": {"Alpha": 3310}}}
        >>> accessor = ConfigAccessor(config)
        >>> accessor.get(("Projects", "PortRegistry", "Alpha"))
        (3310, True)
        >>> accessor.get(("Projects", "Missing"))
        (None, False)
    """

    def __init__(self, root: Any) -> None:
        if root is None:
            raise ValueError("Configuration root cannot be None")
        self._root = root

    @property
    def root(self) -> Any:
        """The wrapped configuration object."""
        return self._root

    def get(self, path: Sequence[str]) -> tuple[Any, bool]:
        """Look up a nested value.

        Returns:
            Tuple of (value, found). value is None when not found.
        """
        node = self._root
        for key in path:
            found, node = _child(node, key)
            if not found:
                return None, False
        return node, True

    def get_or(self, path: Sequence[str], default: Any = None) -> Any:
        """Look up a nested value, returning default when absent or None."""
        value, found = self.get(path)
        return value if found and value is not None else default

    def set(self, path: Sequence[str], value: Any) -> None:
        """Assign a nested value, creating missing intermediate dicts."""
        if not path:
            raise ValueError("Path cannot be empty")
        node = self._root
        for key in path[:-1]:
            found, child = _child(node, key)
            if not found or child is None:
                child = {}
                _assign(node, key, child)
            node = child
        _assign(node, path[-1], value)


def _child(node: Any, key: str) -> tuple[bool, Any]:
    if isinstance(node, Mapping):
        if key in node:
            return True, node[key]
        return False, None
    if node is not None and not isinstance(node, (str, bytes, Sequence)):
        if hasattr(node, key):
            return True, getattr(node, key)
    return False, None


def _assign(node: Any, key: str, value: Any) -> None:
    if isinstance(node, MutableMapping):
        node[key] = value
    else:
        setattr(node, key, value)
