"""Public types for the Wiser heat hub client."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

# Hub value reported for a temperature sensor that has dropped off the network.
OFFLINE_TEMPERATURE = -32768

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def to_celsius(value: Optional[int]) -> Optional[float]:
    """Convert a hub temperature (tenths of a degree) to degrees Celsius."""
    if value is None or value == OFFLINE_TEMPERATURE:
        return None
    return value / 10.0


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """
    Immutable client configuration.

    Provided once at construction time and treated as read-only thereafter.
    """

    host: str
    secret: str
    refresh_interval_s: float = 60.0
    request_timeout_s: float = 10.0
    connection_limit: int = 3
    away_setpoint_c: float = 10.0
    plug_output_settle_s: float = 5.0
    hot_water_boost_setpoint: int = 1100
    logger_name: Optional[str] = None


class ConnectivityState(str, Enum):
    """Bridge connectivity derived from the last transport outcome."""

    ONLINE = "online"
    OFFLINE_COMMUNICATION_ERROR = "offline_communication_error"
    OFFLINE_CONFIGURATION_ERROR = "offline_configuration_error"


@dataclass(frozen=True, slots=True)
class ConnectivityStatus:
    """Connectivity state plus an optional detail message for offline states."""

    state: ConnectivityState
    detail: Optional[str] = None

    @property
    def online(self) -> bool:
        return self.state is ConnectivityState.ONLINE


@dataclass(frozen=True, slots=True)
class TransportOutcome:
    """
    Result of one HTTP exchange with the hub.

    Exactly one of ``status`` or ``error`` is normally set. A timeout sets
    ``timed_out`` and carries the timeout exception in ``error``.
    """

    method: str
    path: str
    status: Optional[int] = None
    text: Optional[str] = None
    error: Optional[BaseException] = None
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.status == 200


@dataclass(frozen=True, slots=True)
class Device:
    """Immutable device record (any paired node, including the hub itself)."""

    id: int
    serial_number: Optional[str] = None
    product_type: Optional[str] = None
    product_identifier: Optional[str] = None
    manufacturer: Optional[str] = None
    model_identifier: Optional[str] = None
    firmware_version: Optional[str] = None
    rssi: Optional[int] = None
    lqi: Optional[int] = None
    signal_strength: Optional[str] = None
    battery_voltage: Optional[int] = None
    battery_level: Optional[str] = None
    lock_enabled: Optional[bool] = None
    raw: Mapping[str, Any] = field(default=_EMPTY, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class Room:
    """Immutable room record."""

    id: int
    name: Optional[str] = None
    room_stat_id: Optional[int] = None
    smart_valve_ids: tuple[int, ...] = ()
    schedule_id: Optional[int] = None
    current_setpoint: Optional[int] = None
    override_setpoint: Optional[int] = None
    calculated_temperature: Optional[int] = None
    mode: Optional[str] = None
    window_detection_active: Optional[bool] = None
    percentage_demand: Optional[int] = None
    override_type: Optional[str] = None
    override_timeout: Optional[int] = None
    raw: Mapping[str, Any] = field(default=_EMPTY, repr=False, compare=False)

    @property
    def boosted(self) -> bool:
        """True while a timed override (boost) is active; a plain setpoint override has no timeout."""
        return bool(self.override_timeout) and self.override_type not in (None, "None")


@dataclass(frozen=True, slots=True)
class RoomStat:
    """Immutable room thermostat record."""

    id: int
    measured_temperature: Optional[int] = None
    measured_humidity: Optional[int] = None
    setpoint: Optional[int] = None
    raw: Mapping[str, Any] = field(default=_EMPTY, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class SmartValve:
    """Immutable radiator valve record."""

    id: int
    setpoint: Optional[int] = None
    measured_temperature: Optional[int] = None
    percentage_demand: Optional[int] = None
    window_state: Optional[str] = None
    raw: Mapping[str, Any] = field(default=_EMPTY, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class SmartPlug:
    """Immutable smart plug record."""

    id: int
    schedule_id: Optional[int] = None
    name: Optional[str] = None
    mode: Optional[str] = None
    manual_state: Optional[str] = None
    output_state: Optional[str] = None
    control_source: Optional[str] = None
    scheduled_state: Optional[str] = None
    target_state: Optional[str] = None
    override_state: Optional[str] = None
    away_action: Optional[str] = None
    debounce_count: Optional[int] = None
    raw: Mapping[str, Any] = field(default=_EMPTY, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class HotWater:
    """Immutable hot-water zone record."""

    id: int
    mode: Optional[str] = None
    water_heating_state: Optional[str] = None
    relay_state: Optional[str] = None
    override_type: Optional[str] = None
    override_timeout: Optional[int] = None
    raw: Mapping[str, Any] = field(default=_EMPTY, repr=False, compare=False)

    @property
    def boosted(self) -> bool:
        return bool(self.override_timeout) and self.override_type not in (None, "None")


@dataclass(frozen=True, slots=True)
class HeatingChannel:
    """Immutable heating channel record."""

    id: int
    name: Optional[str] = None
    room_ids: tuple[int, ...] = ()
    percentage_demand: Optional[int] = None
    relay_state: Optional[str] = None
    raw: Mapping[str, Any] = field(default=_EMPTY, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class Schedule:
    """Schedule id plus its opaque rule body."""

    id: int
    raw: Mapping[str, Any] = field(default=_EMPTY, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class System:
    """Immutable system settings record."""

    eco_mode_enabled: Optional[bool] = None
    away_mode_setpoint_limit: Optional[int] = None
    override_type: Optional[str] = None
    raw: Mapping[str, Any] = field(default=_EMPTY, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class Station:
    """Hub identity as reported by the station endpoint."""

    mac_address: Optional[str] = None
    hostname: Optional[str] = None
    connection_status: Optional[str] = None
    raw: Mapping[str, Any] = field(default=_EMPTY, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class DomainSnapshot:
    """
    Immutable, atomic snapshot of the hub's domain state.

    A snapshot is replaced wholesale on every successful refresh. Consumers
    should hold a reference for as long as they need a consistent view and
    never mutate it.
    """

    devices: tuple[Device, ...] = ()
    rooms: tuple[Room, ...] = ()
    room_stats: tuple[RoomStat, ...] = ()
    smart_valves: tuple[SmartValve, ...] = ()
    smart_plugs: tuple[SmartPlug, ...] = ()
    hot_water: tuple[HotWater, ...] = ()
    heating_channels: tuple[HeatingChannel, ...] = ()
    schedules: tuple[Schedule, ...] = ()
    system: Optional[System] = None
    fetched_at: Optional[datetime] = None
    version: int = 0
