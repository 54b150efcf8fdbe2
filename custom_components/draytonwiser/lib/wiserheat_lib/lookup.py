"""
wiserheat_lib/lookup.py

Read-only queries over a domain snapshot.

Every function accepts ``None`` for "no snapshot yet" and answers with None or
an empty tuple instead of raising. No I/O, no state changes.

Ids and serial numbers are expected to be unique within a snapshot. When the
hub reports duplicates the first record in collection order wins. Dangling
references (a room pointing at a valve that is gone) are ordinary misses.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, TypeVar

from .types import (
    Device,
    DomainSnapshot,
    HeatingChannel,
    HotWater,
    Room,
    RoomStat,
    Schedule,
    SmartPlug,
    SmartValve,
    System,
)


class _HasId(Protocol):
    id: int


T = TypeVar("T", bound=_HasId)


def _by_id(records: Iterable[T], record_id: Optional[int]) -> Optional[T]:
    if record_id is None:
        return None
    for record in records:
        if record.id == record_id:
            return record
    return None


def _fold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if isinstance(value, str) else None


# -------------------------
# Collections
# -------------------------

def rooms(snapshot: Optional[DomainSnapshot]) -> tuple[Room, ...]:
    return snapshot.rooms if snapshot is not None else ()


def room_stats(snapshot: Optional[DomainSnapshot]) -> tuple[RoomStat, ...]:
    return snapshot.room_stats if snapshot is not None else ()


def smart_valves(snapshot: Optional[DomainSnapshot]) -> tuple[SmartValve, ...]:
    return snapshot.smart_valves if snapshot is not None else ()


def smart_plugs(snapshot: Optional[DomainSnapshot]) -> tuple[SmartPlug, ...]:
    return snapshot.smart_plugs if snapshot is not None else ()


def devices(snapshot: Optional[DomainSnapshot]) -> tuple[Device, ...]:
    return snapshot.devices if snapshot is not None else ()


def hot_water(snapshot: Optional[DomainSnapshot]) -> tuple[HotWater, ...]:
    return snapshot.hot_water if snapshot is not None else ()


def heating_channels(snapshot: Optional[DomainSnapshot]) -> tuple[HeatingChannel, ...]:
    return snapshot.heating_channels if snapshot is not None else ()


def schedules(snapshot: Optional[DomainSnapshot]) -> tuple[Schedule, ...]:
    return snapshot.schedules if snapshot is not None else ()


def get_system(snapshot: Optional[DomainSnapshot]) -> Optional[System]:
    return snapshot.system if snapshot is not None else None


# -------------------------
# Single records
# -------------------------

def get_room(snapshot: Optional[DomainSnapshot], name: Optional[str]) -> Optional[Room]:
    """Return the room whose name matches ``name`` ignoring case."""
    wanted = _fold(name)
    if wanted is None:
        return None
    for room in rooms(snapshot):
        if _fold(room.name) == wanted:
            return room
    return None


def get_room_by_id(snapshot: Optional[DomainSnapshot], room_id: Optional[int]) -> Optional[Room]:
    return _by_id(rooms(snapshot), room_id)


def get_room_stat(snapshot: Optional[DomainSnapshot], room_stat_id: Optional[int]) -> Optional[RoomStat]:
    return _by_id(room_stats(snapshot), room_stat_id)


def get_smart_valve(snapshot: Optional[DomainSnapshot], valve_id: Optional[int]) -> Optional[SmartValve]:
    return _by_id(smart_valves(snapshot), valve_id)


def get_smart_plug(snapshot: Optional[DomainSnapshot], plug_id: Optional[int]) -> Optional[SmartPlug]:
    return _by_id(smart_plugs(snapshot), plug_id)


def get_device(snapshot: Optional[DomainSnapshot], device_id: Optional[int]) -> Optional[Device]:
    return _by_id(devices(snapshot), device_id)


def get_schedule(snapshot: Optional[DomainSnapshot], schedule_id: Optional[int]) -> Optional[Schedule]:
    return _by_id(schedules(snapshot), schedule_id)


def get_hot_water(snapshot: Optional[DomainSnapshot], hot_water_id: Optional[int]) -> Optional[HotWater]:
    return _by_id(hot_water(snapshot), hot_water_id)


def get_heating_channel(
    snapshot: Optional[DomainSnapshot], channel_id: Optional[int]
) -> Optional[HeatingChannel]:
    return _by_id(heating_channels(snapshot), channel_id)


# -------------------------
# Serial-number resolution
# -------------------------

def get_device_id_for_serial(snapshot: Optional[DomainSnapshot], serial_number: Optional[str]) -> Optional[int]:
    """Return the id of the device whose serial number matches, ignoring case."""
    wanted = _fold(serial_number)
    if wanted is None:
        return None
    for device in devices(snapshot):
        if _fold(device.serial_number) == wanted:
            return device.id
    return None


def get_device_by_serial(snapshot: Optional[DomainSnapshot], serial_number: Optional[str]) -> Optional[Device]:
    return get_device(snapshot, get_device_id_for_serial(snapshot, serial_number))


def get_room_stat_by_serial(snapshot: Optional[DomainSnapshot], serial_number: Optional[str]) -> Optional[RoomStat]:
    return get_room_stat(snapshot, get_device_id_for_serial(snapshot, serial_number))


def get_smart_valve_by_serial(
    snapshot: Optional[DomainSnapshot], serial_number: Optional[str]
) -> Optional[SmartValve]:
    return get_smart_valve(snapshot, get_device_id_for_serial(snapshot, serial_number))


def get_smart_plug_by_serial(snapshot: Optional[DomainSnapshot], serial_number: Optional[str]) -> Optional[SmartPlug]:
    return get_smart_plug(snapshot, get_device_id_for_serial(snapshot, serial_number))


def get_room_for_device_id(snapshot: Optional[DomainSnapshot], device_id: Optional[int]) -> Optional[Room]:
    """Return the room whose room-stat or one of whose valves is ``device_id``."""
    if device_id is None:
        return None
    for room in rooms(snapshot):
        if room.room_stat_id == device_id:
            return room
        if device_id in room.smart_valve_ids:
            return room
    return None
