"""Unit tests for LocalDirectoryProvider adapter."""

import ntpath
import os
from collections import namedtuple
from datetime import datetime
from pathlib import Path

import pytest

from mediaregistry.core.exceptions import (
    DirectoryCreateError,
    StorageNotFoundError,
)
from mediaregistry.core.ports import EntryKind, StorageDirectoryPort


@pytest.mark.storage
class TestListChildren:
    """Tests for list_children()."""

    def test_lists_directories_sorted(self, tmp_path: Path) -> None:
        """Only directories are returned by default, sorted by name."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        (tmp_path / "Zeta").mkdir()
        (tmp_path / "Alpha").mkdir()
        (tmp_path / "notes.txt").write_text("x")

        entries = LocalDirectoryProvider().list_children(str(tmp_path))

        assert [e.name for e in entries] == ["Alpha", "Zeta"]
        assert entries[0].path == str(tmp_path / "Alpha")
        assert all(e.is_dir for e in entries)

    def test_files_and_pattern_filter(self, tmp_path: Path) -> None:
        """kind and pattern narrow the result."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        (tmp_path / "a.kdbx").write_text("x")
        (tmp_path / "b.txt").write_text("x")
        (tmp_path / "c.kdbx").mkdir()

        entries = LocalDirectoryProvider().list_children(
            str(tmp_path), pattern="*.kdbx", kind=EntryKind.FILE
        )

        assert [e.name for e in entries] == ["a.kdbx"]

    def test_any_kind_returns_both(self, tmp_path: Path) -> None:
        """EntryKind.ANY returns files and directories."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        (tmp_path / "dir").mkdir()
        (tmp_path / "file").write_text("x")

        entries = LocalDirectoryProvider().list_children(str(tmp_path), kind=EntryKind.ANY)

        assert {e.name for e in entries} == {"dir", "file"}

    def test_missing_directory_raises_not_found(self, tmp_path: Path) -> None:
        """A missing directory raises StorageNotFoundError."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        missing = str(tmp_path / "nope")
        with pytest.raises(StorageNotFoundError) as exc_info:
            LocalDirectoryProvider().list_children(missing)

        assert exc_info.value.source == missing


@pytest.mark.storage
class TestDirectoryOperations:
    """Tests for exists(), last_modified() and create_directory()."""

    def test_exists(self, tmp_path: Path) -> None:
        """exists() reflects the filesystem."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        provider = LocalDirectoryProvider()

        assert provider.exists(str(tmp_path))
        assert not provider.exists(str(tmp_path / "missing"))

    def test_last_modified_is_aware_and_tracks_mtime(self, tmp_path: Path) -> None:
        """last_modified() returns the directory's mtime in UTC."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        target = tmp_path / "Projects"
        target.mkdir()
        os.utime(target, (1_700_000_000, 1_700_000_000))

        stamp = LocalDirectoryProvider().last_modified(str(target))

        assert isinstance(stamp, datetime)
        assert stamp.tzinfo is not None
        assert stamp.timestamp() == 1_700_000_000

    def test_adding_child_changes_last_modified(self, tmp_path: Path) -> None:
        """Creating a project folder changes the parent's mtime."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        target = tmp_path / "Projects"
        target.mkdir()
        os.utime(target, (1_600_000_000, 1_600_000_000))
        provider = LocalDirectoryProvider()
        before = provider.last_modified(str(target))

        (target / "Alpha").mkdir()

        assert provider.last_modified(str(target)) != before

    def test_last_modified_missing_raises(self, tmp_path: Path) -> None:
        """A missing path raises StorageNotFoundError."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        with pytest.raises(StorageNotFoundError):
            LocalDirectoryProvider().last_modified(str(tmp_path / "missing"))

    def test_create_directory_creates_parents(self, tmp_path: Path) -> None:
        """create_directory() makes missing parents too."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        target = tmp_path / "drive" / "Projects"

        entry = LocalDirectoryProvider().create_directory(str(target))

        assert target.is_dir()
        assert entry.name == "Projects"

    def test_create_directory_failure_raises(self, tmp_path: Path) -> None:
        """A file in the way raises DirectoryCreateError."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        blocker = tmp_path / "Projects"
        blocker.write_text("not a directory")

        with pytest.raises(DirectoryCreateError):
            LocalDirectoryProvider().create_directory(str(blocker / "Alpha"))

    def test_combine_path(self, tmp_path: Path) -> None:
        """combine_path() joins with the platform separator."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        joined = LocalDirectoryProvider().combine_path(str(tmp_path), "Projects")

        assert joined == os.path.join(str(tmp_path), "Projects")

    @pytest.mark.parametrize(
        ("root", "expected"),
        [
            ("E:", "E:\\Projects"),
            ("E:\\", "E:\\Projects"),
            ("\\\\nas\\media", "\\\\nas\\media\\Projects"),
        ],
    )
    def test_combine_path_anchors_windows_drive(
        self, monkeypatch: pytest.MonkeyPatch, root: str, expected: str
    ) -> None:
        """A bare drive letter joins at the drive root, not drive-relative."""
        from mediaregistry.adapters.storage import LocalDirectoryProvider

        provider = LocalDirectoryProvider()
        with monkeypatch.context() as m:
            m.setattr(os, "path", ntpath)
            joined = provider.combine_path(root, "Projects")

        assert joined == expected


@pytest.mark.storage
class TestListDrives:
    """Tests for list_drives()."""

    def test_reports_partitions_with_usage(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Partitions are reported with capacity; unreadable ones without."""
        import psutil

        from mediaregistry.adapters.storage import LocalDirectoryProvider

        Part = namedtuple("Part", "device mountpoint fstype opts")
        Usage = namedtuple("Usage", "total used free percent")

        def fake_usage(path: str) -> Usage:
            if path == "/media/empty":
                raise OSError("no medium")
            return Usage(1000, 400, 600, 40.0)

        monkeypatch.setattr(
            psutil,
            "disk_partitions",
            lambda all=False: [
                Part("/dev/sdb1", "/media/usb", "exfat", "rw"),
                Part("/dev/sr0", "/media/empty", "iso9660", "ro"),
            ],
        )
        monkeypatch.setattr(psutil, "disk_usage", fake_usage)

        drives = LocalDirectoryProvider().list_drives()

        assert [d.mount_path for d in drives] == ["/media/empty", "/media/usb"]
        assert drives[0].total_bytes is None
        assert drives[1].free_bytes == 600
        assert drives[1].file_system == "exfat"


@pytest.mark.storage
def test_provider_satisfies_port() -> None:
    """LocalDirectoryProvider implements StorageDirectoryPort."""
    from mediaregistry.adapters.storage import LocalDirectoryProvider

    assert isinstance(LocalDirectoryProvider(), StorageDirectoryPort)
