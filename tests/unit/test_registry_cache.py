"""Unit tests for RegistryCache and the staleness decision."""

from datetime import timedelta

import pytest

from mediaregistry.core.models import (
    DeviceTarget,
    DriveRole,
    ProjectRecord,
    ScanResult,
    StorageDevice,
)
from mediaregistry.core.registry_cache import (
    RegistryCache,
    check_device,
    find_stale_devices,
)
from mediaregistry.core.scanner import DriveScanner


def _target(label: str = "Studio", drive: str = "M:", serial: str = "SER1") -> DeviceTarget:
    return DeviceTarget(
        group_id="1",
        role=DriveRole.MASTER,
        device=StorageDevice(label=label, drive=drive, serial_number=serial),
    )


@pytest.fixture
def scanned(storage):
    """A cache holding one fresh scan of M: and the target it belongs to."""
    storage.add_drive("M:")
    storage.add_dir("M:/Projects/Alpha")
    target = _target()
    cache = RegistryCache()
    cache.merge(DriveScanner(storage).scan(target))
    return cache, target


@pytest.mark.core
@pytest.mark.tra("Domain.RegistryCache")
@pytest.mark.tier(0)
class TestRegistryCache:
    """Tests for get/merge/clear."""

    def test_merge_stores_entry_and_fingerprint(self, scanned, storage) -> None:
        """merge() stores the entry under its label and the mtime under serial."""
        cache, target = scanned

        entry = cache.get(DriveRole.MASTER, "Studio")
        assert entry is not None
        assert [p.name for p in entry.projects] == ["Alpha"]
        assert cache.project_dirs["SER1_Projects"] == storage.mtimes["M:/Projects"]

    def test_merge_replaces_previous_projects(self, scanned) -> None:
        """A second merge replaces the project list wholesale."""
        cache, target = scanned
        record = ProjectRecord.for_target(target, name="Beta", path="M:/Projects/Beta")

        cache.merge(ScanResult(target=target, projects=(record,)))

        entry = cache.get(DriveRole.MASTER, "Studio")
        assert entry is not None
        assert entry.projects == (record,)

    def test_merge_without_modified_drops_fingerprint(self, scanned, storage) -> None:
        """A failed scan forgets the fingerprint so the device is rescanned."""
        cache, target = scanned

        cache.merge(ScanResult(target=target, projects=()))

        assert "SER1_Projects" not in cache.project_dirs
        stale = check_device(cache, target, storage)
        assert stale is not None
        assert stale.reason == "not scanned before"

    def test_reset_entries_keeps_fingerprints(self, scanned) -> None:
        """reset_entries() drops entries only."""
        cache, _ = scanned

        cache.reset_entries()

        assert cache.master == {}
        assert "SER1_Projects" in cache.project_dirs

    def test_clear_forgets_everything(self, scanned) -> None:
        """clear() empties entries, fingerprints and LastScanned."""
        cache, _ = scanned

        cache.clear()

        assert cache.master == {}
        assert cache.backup == {}
        assert cache.project_dirs == {}
        assert cache.last_scanned is None

    def test_listing_omits_targets_without_entries(self, scanned) -> None:
        """listing() only includes targets that have a cached entry."""
        cache, target = scanned
        other = _target(label="Other", drive="O:", serial="SER2")

        listing = cache.listing([target, other])

        assert list(listing.master) == ["Studio"]
        assert listing.backup == {}


@pytest.mark.core
@pytest.mark.tra("Domain.Staleness")
@pytest.mark.tier(0)
class TestStaleness:
    """Tests for check_device() and find_stale_devices()."""

    def test_fresh_when_mtime_unchanged(self, scanned, storage) -> None:
        """Identical live and cached mtimes mean the cache is reusable."""
        cache, target = scanned

        assert check_device(cache, target, storage) is None

    def test_stale_when_never_scanned(self, storage) -> None:
        """A missing fingerprint is a first scan."""
        storage.add_drive("M:")
        stale = check_device(RegistryCache(), _target(), storage)

        assert stale is not None
        assert stale.reason == "not scanned before"

    def test_stale_when_mtime_is_later(self, scanned, storage) -> None:
        """A newer live mtime invalidates the device."""
        cache, target = scanned
        storage.touch("M:/Projects", timedelta(milliseconds=1))

        assert check_device(cache, target, storage) is not None

    def test_stale_when_mtime_is_earlier(self, scanned, storage) -> None:
        """An older live mtime counts as a change too."""
        cache, target = scanned
        storage.touch("M:/Projects", -timedelta(days=3))

        assert check_device(cache, target, storage) is not None

    def test_stale_when_entry_missing(self, scanned, storage) -> None:
        """A fingerprint without an entry cannot serve records."""
        cache, target = scanned
        cache.reset_entries()

        stale = check_device(cache, target, storage)

        assert stale is not None
        assert stale.reason == "no cached entry"

    def test_stale_when_projects_dir_vanished(self, scanned, storage) -> None:
        """An unreadable mtime makes the device stale rather than raising."""
        cache, target = scanned
        storage.remove_dir("M:/Projects")

        stale = check_device(cache, target, storage)

        assert stale is not None
        assert stale.reason == "modification time unavailable"

    def test_find_stale_devices_collects_only_stale(self, scanned, storage) -> None:
        """find_stale_devices() returns just the devices needing a rescan."""
        cache, target = scanned
        storage.add_drive("O:")
        other = _target(label="Other", drive="O:", serial="SER2")

        stale = find_stale_devices(cache, [target, other], storage)

        assert [s.target for s in stale] == [other]
