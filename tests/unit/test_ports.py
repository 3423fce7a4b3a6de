"""Unit tests for port interfaces."""

import pytest

from mediaregistry.core.ports import PortProbePort, StorageDirectoryPort


@pytest.mark.core
@pytest.mark.tra("Port.StorageDirectoryPort")
@pytest.mark.tier(0)
@pytest.mark.parametrize(
    "method",
    ["exists", "list_children", "last_modified", "create_directory", "combine_path", "list_drives"],
)
def test_storage_directory_port_methods(method: str) -> None:
    """StorageDirectoryPort declares the directory operations."""
    assert hasattr(StorageDirectoryPort, method)


@pytest.mark.core
@pytest.mark.tra("Port.PortProbePort")
@pytest.mark.tier(0)
def test_port_probe_port_has_listener_query() -> None:
    """PortProbePort declares list_listeners_on_port."""
    assert hasattr(PortProbePort, "list_listeners_on_port")


@pytest.mark.core
@pytest.mark.tra("Port.StorageDirectoryPort")
@pytest.mark.tier(0)
def test_fake_storage_satisfies_port(storage) -> None:
    """The in-memory test double is a valid StorageDirectoryPort."""
    assert isinstance(storage, StorageDirectoryPort)


@pytest.mark.core
@pytest.mark.tra("Port.PortProbePort")
@pytest.mark.tier(0)
def test_fake_probe_satisfies_port(probe) -> None:
    """The fake probe is a valid PortProbePort."""
    assert isinstance(probe, PortProbePort)
