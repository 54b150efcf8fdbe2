from datetime import datetime, timedelta, timezone

from wiserheat_lib.store import SnapshotStore
from wiserheat_lib.types import DomainSnapshot, Room

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_read_is_none_before_first_publish() -> None:
    assert SnapshotStore().read() is None


def test_publish_replaces_and_stamps_versions() -> None:
    store = SnapshotStore()
    first = DomainSnapshot(rooms=(Room(id=1, name="Hall"),), fetched_at=T0)
    second = DomainSnapshot(rooms=(Room(id=1, name="Lounge"),), fetched_at=T0 + timedelta(seconds=1))

    published_first = store.publish(first)
    held_first = store.read()
    published_second = store.publish(second)

    assert published_first is held_first
    assert held_first.version == 1
    assert store.read().version == 2
    assert published_second is store.read()
    # The earlier snapshot is still intact for readers holding it.
    assert held_first.rooms[0].name == "Hall"
    assert store.read().rooms[0].name == "Lounge"
    assert first.version == 0


def test_older_snapshot_is_refused() -> None:
    store = SnapshotStore()
    store.publish(DomainSnapshot(fetched_at=T0 + timedelta(seconds=5)))
    held = store.read()

    assert store.publish(DomainSnapshot(fetched_at=T0)) is None
    assert store.read() is held


def test_equal_timestamps_are_accepted() -> None:
    store = SnapshotStore()
    store.publish(DomainSnapshot(fetched_at=T0))

    assert store.publish(DomainSnapshot(fetched_at=T0)) is not None
    assert store.read().version == 2
