"""OS port probe backed by psutil."""

from __future__ import annotations

import logging

import psutil

from mediaregistry.core.models import ListenerInfo
from mediaregistry.logging_config import get_logger, log


logger = get_logger(__name__)
_CONTEXT = "PortProbe"


class PsutilPortProbe:
    """Implements PortProbePort by reading the system socket table.

    On platforms where listing other processes' sockets needs elevated
    rights (macOS), an AccessDenied is logged and the port is reported as
    free; the allocation is best-effort either way.
    """

    def list_listeners_on_port(self, port: int) -> list[ListenerInfo]:
        """Return sockets listening on a local TCP port."""
        try:
            connections = psutil.net_connections(kind="inet")
        except (psutil.AccessDenied, OSError) as e:
            log(
                logger,
                logging.WARNING,
                _CONTEXT,
                f"Cannot read socket table to check port {port}",
                e,
            )
            return []

        return [
            ListenerInfo(
                port=conn.laddr.port,
                address=conn.laddr.ip,
                pid=conn.pid,
                status=conn.status,
            )
            for conn in connections
            if conn.laddr
            and conn.laddr.port == port
            and conn.status == psutil.CONN_LISTEN
        ]
