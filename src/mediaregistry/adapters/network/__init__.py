"""Network adapters."""

from mediaregistry.adapters.network.psutil_probe import PsutilPortProbe


__all__ = ["PsutilPortProbe"]
