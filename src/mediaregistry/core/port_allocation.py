"""Port Allocation Registry: one database port per project.

Ports are chosen by scanning a fixed range from the bottom, skipping ports
already held by other projects, reserved ports, and ports the OS reports as
listening. The probe is best-effort: a consumer may still lose a race for
the port between the check and its own bind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, MutableMapping
from typing import TYPE_CHECKING, Any

from mediaregistry.core.config_access import PORT_REGISTRY_PATH, ConfigAccessor
from mediaregistry.core.exceptions import ConfigurationError, PortCapacityError
from mediaregistry.core.models import DEFAULT_PORT_RANGE, RESERVED_PORTS, PortRange
from mediaregistry.logging_config import SUCCESS, get_logger, log


if TYPE_CHECKING:
    from mediaregistry.core.ports import PortProbePort


logger = get_logger(__name__)
_CONTEXT = "PortAllocator"


def _as_port(project: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"PortRegistry entry for '{project}' is not a port number: {value!r}"
        ) from None


class PortAllocator:
    """Hands out the lowest free port in a range and records it per project.

    Example:
        >>> registry: dict[str, int] = {}
        >>> allocator = PortAllocator(probe)
        >>> allocator.allocate("Beta", registry)
        3310
        >>> registry
        {'Beta': 3310}
    """

    def __init__(
        self,
        probe: PortProbePort,
        port_range: PortRange = DEFAULT_PORT_RANGE,
        reserved_ports: Iterable[int] = RESERVED_PORTS,
    ) -> None:
        self._probe = probe
        self._range = port_range
        self._reserved = frozenset(reserved_ports)

    @property
    def port_range(self) -> PortRange:
        """The range ports are allocated from."""
        return self._range

    @property
    def reserved_ports(self) -> frozenset[int]:
        """Ports that are never allocated."""
        return self._reserved

    def allocate(
        self,
        project_name: str,
        registry: MutableMapping[str, Any],
        *,
        force: bool = False,
    ) -> int:
        """Return the port for a project, allocating one if needed.

        Without force an existing entry is returned as-is, without probing.
        Otherwise the lowest port in range that is neither recorded in the
        registry, reserved, nor listening at OS level is chosen and written
        to registry[project_name].

        Args:
            project_name: Project to allocate for.
            registry: Project name to port map; updated in place.
            force: Reallocate even if the project already has a port.

        Returns:
            The allocated port.

        Raises:
            ValueError: If project_name is empty.
            PortCapacityError: If no port in the range is free.
            ConfigurationError: If a registry value is not a number.
        """
        if not project_name:
            raise ValueError("Project name cannot be empty")

        if not force and project_name in registry:
            return _as_port(project_name, registry[project_name])

        taken = {_as_port(name, port) for name, port in registry.items()}
        taken |= self._reserved

        for candidate in self._range:
            if candidate in taken:
                continue
            if self._is_listening(candidate):
                log(
                    logger,
                    logging.DEBUG,
                    _CONTEXT,
                    f"Port {candidate} is in use by another process; skipping",
                )
                continue
            previous = registry.get(project_name)
            registry[project_name] = candidate
            log(
                logger,
                SUCCESS,
                _CONTEXT,
                f"Allocated port {candidate} to '{project_name}'"
                + (f" (was {previous})" if previous is not None else ""),
            )
            return candidate

        error = PortCapacityError(self._range.start, self._range.end, project_name)
        log(logger, logging.ERROR, _CONTEXT, str(error))
        raise error

    def allocate_for_config(
        self, config: Any, project_name: str, *, force: bool = False
    ) -> int:
        """Allocate using Projects.PortRegistry of a caller-owned config.

        The port map is created if the configuration has none.
        """
        accessor = ConfigAccessor(config)
        registry, found = accessor.get(PORT_REGISTRY_PATH)
        if not found or registry is None:
            registry = {}
            accessor.set(PORT_REGISTRY_PATH, registry)
        elif not isinstance(registry, MutableMapping):
            raise ConfigurationError("Projects.PortRegistry must be a mapping")
        return self.allocate(project_name, registry, force=force)

    @staticmethod
    def list_allocations(registry: Mapping[str, Any]) -> list[tuple[str, int]]:
        """Return (project, port) pairs ordered by port, then name.

        Raises:
            ConfigurationError: If registry is not a mapping or holds a
                non-numeric port.
        """
        if not isinstance(registry, Mapping):
            raise ConfigurationError("Projects.PortRegistry must be a mapping")
        pairs = [(name, _as_port(name, port)) for name, port in registry.items()]
        return sorted(pairs, key=lambda pair: (pair[1], pair[0]))

    def _is_listening(self, port: int) -> bool:
        return bool(self._probe.list_listeners_on_port(port))
