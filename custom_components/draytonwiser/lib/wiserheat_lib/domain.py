"""
wiserheat_lib/domain.py

Turn hub response bodies into immutable domain records.

Rules:
- A snapshot is built completely before anyone sees it; nothing here mutates
  a record after construction.
- Structural problems (invalid JSON, non-object body, a collection that is not
  a list, a record without an integer id) raise WiserParseError.
- Field-level type mismatches degrade to None; the typed view is lenient and
  the untouched JSON object stays available through ``raw``.
"""

from __future__ import annotations

import json
from datetime import datetime
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, TypeVar

from .errors import WiserParseError
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
    Station,
    System,
)

R = TypeVar("R")


def _load_object(text: str | None, what: str) -> Mapping[str, Any]:
    if text is None:
        raise WiserParseError(f"{what} body is empty")
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise WiserParseError(f"{what} body is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise WiserParseError(f"{what} body is not a JSON object")
    return data


def _int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _int_tuple(value: Any) -> tuple[int, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in (_int(v) for v in value) if item is not None)


def _frozen(record: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(record))


def _record_id(record: Mapping[str, Any], collection: str) -> int:
    record_id = _int(record.get("id"))
    if record_id is None:
        raise WiserParseError(f"{collection} record has no integer id: {record.get('id')!r}")
    return record_id


def _collection(
    data: Mapping[str, Any],
    key: str,
    build: Callable[[Mapping[str, Any]], R],
) -> tuple[R, ...]:
    items = data.get(key)
    if items is None:
        return ()
    if not isinstance(items, list):
        raise WiserParseError(f"{key} is not a list")
    records: list[R] = []
    for item in items:
        if not isinstance(item, dict):
            raise WiserParseError(f"{key} entry is not an object")
        records.append(build(item))
    return tuple(records)


def _device(record: Mapping[str, Any]) -> Device:
    reception = record.get("ReceptionOfController")
    if not isinstance(reception, dict):
        reception = {}
    rssi = _int(record.get("Rssi"))
    if rssi is None:
        rssi = _int(reception.get("Rssi"))
    lqi = _int(record.get("Lqi"))
    if lqi is None:
        lqi = _int(reception.get("Lqi"))
    return Device(
        id=_record_id(record, "Device"),
        serial_number=_str(record.get("SerialNumber")),
        product_type=_str(record.get("ProductType")),
        product_identifier=_str(record.get("ProductIdentifier")),
        manufacturer=_str(record.get("Manufacturer")),
        model_identifier=_str(record.get("ModelIdentifier")),
        firmware_version=_str(record.get("ActiveFirmwareVersion")),
        rssi=rssi,
        lqi=lqi,
        signal_strength=_str(record.get("DisplayedSignalStrength")),
        battery_voltage=_int(record.get("BatteryVoltage")),
        battery_level=_str(record.get("BatteryLevel")),
        lock_enabled=_bool(record.get("DeviceLockEnabled")),
        raw=_frozen(record),
    )


def _room(record: Mapping[str, Any]) -> Room:
    return Room(
        id=_record_id(record, "Room"),
        name=_str(record.get("Name")),
        room_stat_id=_int(record.get("RoomStatId")),
        smart_valve_ids=_int_tuple(record.get("SmartValveIds")),
        schedule_id=_int(record.get("ScheduleId")),
        current_setpoint=_int(record.get("CurrentSetPoint")),
        override_setpoint=_int(record.get("OverrideSetpoint")),
        calculated_temperature=_int(record.get("CalculatedTemperature")),
        mode=_str(record.get("Mode")),
        window_detection_active=_bool(record.get("WindowDetectionActive")),
        percentage_demand=_int(record.get("PercentageDemand")),
        override_type=_str(record.get("OverrideType")),
        override_timeout=_int(record.get("OverrideTimeoutUnixTime")),
        raw=_frozen(record),
    )


def _room_stat(record: Mapping[str, Any]) -> RoomStat:
    return RoomStat(
        id=_record_id(record, "RoomStat"),
        measured_temperature=_int(record.get("MeasuredTemperature")),
        measured_humidity=_int(record.get("MeasuredHumidity")),
        setpoint=_int(record.get("SetPoint")),
        raw=_frozen(record),
    )


def _smart_valve(record: Mapping[str, Any]) -> SmartValve:
    return SmartValve(
        id=_record_id(record, "SmartValve"),
        setpoint=_int(record.get("SetPoint")),
        measured_temperature=_int(record.get("MeasuredTemperature")),
        percentage_demand=_int(record.get("PercentageDemand")),
        window_state=_str(record.get("WindowState")),
        raw=_frozen(record),
    )


def _smart_plug(record: Mapping[str, Any]) -> SmartPlug:
    return SmartPlug(
        id=_record_id(record, "SmartPlug"),
        schedule_id=_int(record.get("ScheduleId")),
        name=_str(record.get("Name")),
        mode=_str(record.get("Mode")),
        manual_state=_str(record.get("ManualState")),
        output_state=_str(record.get("OutputState")),
        control_source=_str(record.get("ControlSource")),
        scheduled_state=_str(record.get("ScheduledState")),
        target_state=_str(record.get("TargetState")),
        override_state=_str(record.get("OverrideState")),
        away_action=_str(record.get("AwayAction")),
        debounce_count=_int(record.get("DebounceCount")),
        raw=_frozen(record),
    )


def _hot_water(record: Mapping[str, Any]) -> HotWater:
    return HotWater(
        id=_record_id(record, "HotWater"),
        mode=_str(record.get("Mode")),
        water_heating_state=_str(record.get("WaterHeatingState")),
        relay_state=_str(record.get("HotWaterRelayState")),
        override_type=_str(record.get("OverrideType")),
        override_timeout=_int(record.get("OverrideTimeoutUnixTime")),
        raw=_frozen(record),
    )


def _heating_channel(record: Mapping[str, Any]) -> HeatingChannel:
    return HeatingChannel(
        id=_record_id(record, "HeatingChannel"),
        name=_str(record.get("Name")),
        room_ids=_int_tuple(record.get("RoomIds")),
        percentage_demand=_int(record.get("PercentageDemand")),
        relay_state=_str(record.get("HeatingRelayState")),
        raw=_frozen(record),
    )


def _schedule(record: Mapping[str, Any]) -> Schedule:
    return Schedule(id=_record_id(record, "Schedule"), raw=_frozen(record))


def _system(data: Mapping[str, Any]) -> Optional[System]:
    record = data.get("System")
    if record is None:
        return None
    if not isinstance(record, dict):
        raise WiserParseError("System is not an object")
    return System(
        eco_mode_enabled=_bool(record.get("EcoModeEnabled")),
        away_mode_setpoint_limit=_int(record.get("AwayModeSetPointLimit")),
        override_type=_str(record.get("OverrideType")),
        raw=_frozen(record),
    )


def parse_domain(text: str | None, fetched_at: datetime) -> DomainSnapshot:
    """Parse a domain body into an unpublished snapshot (version 0)."""
    data = _load_object(text, "Domain")
    return DomainSnapshot(
        devices=_collection(data, "Device", _device),
        rooms=_collection(data, "Room", _room),
        room_stats=_collection(data, "RoomStat", _room_stat),
        smart_valves=_collection(data, "SmartValve", _smart_valve),
        smart_plugs=_collection(data, "SmartPlug", _smart_plug),
        hot_water=_collection(data, "HotWater", _hot_water),
        heating_channels=_collection(data, "HeatingChannel", _heating_channel),
        schedules=_collection(data, "Schedule", _schedule),
        system=_system(data),
        fetched_at=fetched_at,
    )


def parse_station(text: str | None) -> Station:
    """Parse a station body into the hub identity."""
    data = _load_object(text, "Station")
    return Station(
        mac_address=_str(data.get("MacAddress")),
        hostname=_str(data.get("MdnsHostname")),
        connection_status=_str(data.get("ConnectionStatus")),
        raw=_frozen(data),
    )
