from wiserheat_lib import lookup
from wiserheat_lib.types import (
    Device,
    DomainSnapshot,
    Room,
    RoomStat,
    Schedule,
    SmartPlug,
    SmartValve,
)


def _snapshot() -> DomainSnapshot:
    return DomainSnapshot(
        devices=(
            Device(id=0, serial_number="HUB0001"),
            Device(id=5, serial_number="AB12"),
            Device(id=11, serial_number="TRV11"),
            Device(id=20, serial_number="PLUG20"),
            Device(id=30, serial_number="ORPHAN"),
        ),
        rooms=(
            Room(id=7, name="Lounge", room_stat_id=5, smart_valve_ids=(11, 99), schedule_id=3),
            Room(id=8, name="Kitchen", smart_valve_ids=()),
        ),
        room_stats=(RoomStat(id=5, measured_temperature=195),),
        smart_valves=(SmartValve(id=11),),
        smart_plugs=(SmartPlug(id=20, name="Lamp", schedule_id=4),),
        schedules=(Schedule(id=3),),
    )


def test_room_by_name_is_case_insensitive_exact_match() -> None:
    snapshot = _snapshot()

    assert lookup.get_room(snapshot, "lounge").id == 7
    assert lookup.get_room(snapshot, "LOUNGE").id == 7
    assert lookup.get_room(snapshot, "Loun") is None
    assert lookup.get_room(snapshot, None) is None


def test_room_stat_by_serial_is_case_insensitive() -> None:
    snapshot = _snapshot()

    assert lookup.get_device_id_for_serial(snapshot, "AB12") == 5
    assert lookup.get_room_stat_by_serial(snapshot, "AB12").id == 5
    assert lookup.get_room_stat_by_serial(snapshot, "ab12").id == 5


def test_serial_resolving_to_device_without_record_is_a_miss() -> None:
    snapshot = _snapshot()

    assert lookup.get_device_id_for_serial(snapshot, "ORPHAN") == 30
    assert lookup.get_room_stat_by_serial(snapshot, "ORPHAN") is None
    assert lookup.get_smart_valve_by_serial(snapshot, "ab12") is None
    assert lookup.get_room_stat_by_serial(snapshot, "missing") is None


def test_valve_and_plug_by_serial() -> None:
    snapshot = _snapshot()

    assert lookup.get_smart_valve_by_serial(snapshot, "trv11").id == 11
    assert lookup.get_smart_plug_by_serial(snapshot, "Plug20").name == "Lamp"
    assert lookup.get_device_by_serial(snapshot, "hub0001").id == 0


def test_room_for_device_id_scans_roomstat_and_valves() -> None:
    snapshot = _snapshot()

    assert lookup.get_room_for_device_id(snapshot, 5).id == 7
    assert lookup.get_room_for_device_id(snapshot, 11).id == 7
    assert lookup.get_room_for_device_id(snapshot, 20) is None


def test_dangling_references_are_misses() -> None:
    snapshot = _snapshot()
    lounge = lookup.get_room(snapshot, "Lounge")

    # Valve 99 is assigned to the room but absent from the valve collection.
    assert lookup.get_smart_valve(snapshot, 99) is None
    assert lookup.get_room_for_device_id(snapshot, 99) is lounge
    assert lookup.get_schedule(snapshot, 4) is None
    assert lookup.get_room_stat(snapshot, lookup.get_room(snapshot, "Kitchen").room_stat_id) is None


def test_first_match_wins_on_duplicates() -> None:
    snapshot = DomainSnapshot(
        devices=(Device(id=1, serial_number="DUP"), Device(id=2, serial_number="dup")),
        rooms=(Room(id=1, name="Hall"), Room(id=2, name="hall")),
    )

    assert lookup.get_device_id_for_serial(snapshot, "DUP") == 1
    assert lookup.get_room(snapshot, "HALL").id == 1


def test_absent_snapshot_returns_not_found() -> None:
    assert lookup.get_room(None, "Lounge") is None
    assert lookup.get_room_stat(None, 5) is None
    assert lookup.get_room_stat_by_serial(None, "AB12") is None
    assert lookup.get_device(None, 0) is None
    assert lookup.get_schedule(None, 3) is None
    assert lookup.get_room_for_device_id(None, 5) is None
    assert lookup.rooms(None) == ()
    assert lookup.get_system(None) is None
