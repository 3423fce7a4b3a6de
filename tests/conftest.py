"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
shared in-memory adapters for the test suite.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest

from mediaregistry.core.exceptions import (
    DirectoryCreateError,
    StorageAccessError,
    StorageNotFoundError,
)
from mediaregistry.core.models import DirectoryEntry, DriveInfo, ListenerInfo
from mediaregistry.core.ports import EntryKind
from mediaregistry.core.scanner import DriveScanner


BASE_TIME = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, ports, and services")
    config.addinivalue_line("markers", "storage: Directory provider adapters")
    config.addinivalue_line("markers", "network: Port probe adapters")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line(
        "markers", "tra: Test Responsibility Anchor (TRA) - namespace.Anchor format"
    )
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo handlers and levels installed by CLI invocations."""
    yield
    pkg_logger = logging.getLogger("mediaregistry")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.setLevel(logging.NOTSET)


def _parent(path: str) -> str:
    return path.rsplit("/", 1)[0] if "/" in path else ""


class FakeDirectoryProvider:
    """In-memory StorageDirectoryPort.

    Directories are plain strings joined with "/". Each directory has a
    modification time that changes whenever a child is added or removed.
    Paths in `unreadable` can be neither listed nor stat'ed. Paths in
    `unlistable` can be stat'ed but not listed, like a directory without
    read permission.
    """

    def __init__(self) -> None:
        self.mtimes: dict[str, datetime] = {}
        self.unreadable: set[str] = set()
        self.unlistable: set[str] = set()
        self.read_only: set[str] = set()
        self.list_calls: list[str] = []
        self._clock = BASE_TIME

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def add_drive(self, root: str) -> None:
        self.mtimes.setdefault(root, self._tick())

    def add_dir(self, path: str) -> None:
        parent = _parent(path)
        if parent and parent not in self.mtimes:
            self.add_dir(parent)
        if path not in self.mtimes:
            self.mtimes[path] = self._tick()
            if parent:
                self.mtimes[parent] = self._tick()

    def remove_dir(self, path: str) -> None:
        for key in [k for k in self.mtimes if k == path or k.startswith(f"{path}/")]:
            del self.mtimes[key]
        parent = _parent(path)
        if parent in self.mtimes:
            self.mtimes[parent] = self._tick()

    def touch(self, path: str, delta: timedelta = timedelta(seconds=1)) -> None:
        self.mtimes[path] = self.mtimes[path] + delta

    # StorageDirectoryPort

    def exists(self, path: str) -> bool:
        return path in self.mtimes

    def list_children(
        self,
        path: str,
        pattern: str | None = None,
        kind: EntryKind = EntryKind.DIRECTORY,
    ) -> list[DirectoryEntry]:
        self.list_calls.append(path)
        if path in self.unreadable or path in self.unlistable:
            raise StorageAccessError(f"Cannot read directory: {path}", source=path)
        if path not in self.mtimes:
            raise StorageNotFoundError(f"Directory not found: {path}", source=path)
        prefix = f"{path}/"
        names = sorted(
            key[len(prefix):]
            for key in self.mtimes
            if key.startswith(prefix) and "/" not in key[len(prefix):]
        )
        return [DirectoryEntry(name=n, path=f"{prefix}{n}") for n in names]

    def last_modified(self, path: str) -> datetime:
        if path in self.unreadable:
            raise StorageAccessError(f"Cannot stat path: {path}", source=path)
        if path not in self.mtimes:
            raise StorageNotFoundError(f"Path not found: {path}", source=path)
        return self.mtimes[path]

    def create_directory(self, path: str) -> DirectoryEntry:
        parent = _parent(path)
        if parent in self.read_only or parent not in self.mtimes:
            raise DirectoryCreateError(f"Cannot create directory: {path}", source=path)
        self.add_dir(path)
        return DirectoryEntry(name=path.rsplit("/", 1)[1], path=path)

    def combine_path(self, *parts: str) -> str:
        return "/".join(p.rstrip("/") for p in parts)

    def list_drives(self) -> list[DriveInfo]:
        return [DriveInfo(mount_path=p) for p in self.mtimes if "/" not in p]


class CountingScanner(DriveScanner):
    """DriveScanner that records every scan call."""

    def __init__(self, storage: FakeDirectoryProvider) -> None:
        super().__init__(storage)
        self.calls: list[str] = []

    def scan(self, target):  # type: ignore[no-untyped-def]
        self.calls.append(target.device.label)
        return super().scan(target)


class FakePortProbe:
    """PortProbePort reporting a fixed set of busy ports."""

    def __init__(self, busy: set[int] | None = None) -> None:
        self.busy = set(busy or ())
        self.probed: list[int] = []

    def list_listeners_on_port(self, port: int) -> list[ListenerInfo]:
        self.probed.append(port)
        if port in self.busy:
            return [ListenerInfo(port=port, address="127.0.0.1", pid=4242)]
        return []


@pytest.fixture
def storage() -> FakeDirectoryProvider:
    """Empty in-memory directory provider."""
    return FakeDirectoryProvider()


@pytest.fixture
def probe() -> FakePortProbe:
    """Port probe with no busy ports."""
    return FakePortProbe()


@pytest.fixture
def two_drive_config(storage: FakeDirectoryProvider) -> dict:
    """Group "1": Master M1 with Projects/{Alpha,_GLOBAL_}, Backup B1 with Projects/{Archive}."""
    storage.add_drive("M:")
    storage.add_dir("M:/Projects/Alpha")
    storage.add_dir("M:/Projects/_GLOBAL_")
    storage.add_drive("B:")
    storage.add_dir("B:/Projects/Archive")
    return {
        "Storage": {
            "1": {
                "Master": {"Label": "LabelM", "DriveLetter": "M:", "SerialNumber": "M1"},
                "Backup": {
                    "1": {"Label": "LabelB", "DriveLetter": "B:", "SerialNumber": "B1"},
                },
            }
        },
        "Projects": {"Registry": {}, "PortRegistry": {}},
    }


@pytest.fixture
def counting_scanner(storage: FakeDirectoryProvider) -> CountingScanner:
    """DriveScanner over the fake storage that counts scan calls."""
    return CountingScanner(storage)
