"""
wiserheat_lib/commands.py

Write operations against the heat hub.

Every operation is a two-phase protocol:
1. send one or two PATCH requests with a fixed payload template, in order;
2. refresh the snapshot according to the operation's RefreshPolicy.

The PATCH response body is never read back; the following refresh is what
makes the new state visible. Operations return None. A target that cannot be
resolved against the current snapshot is a silent no-op (no request is sent),
and a failed request is reported to the connectivity tracker, not retried.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from . import lookup
from .const import (
    AWAY_HOT_WATER_SETPOINT,
    DEVICE_ENDPOINT,
    HOT_WATER_ID,
    HOTWATER_ENDPOINT,
    OVERRIDE_TYPE_AWAY,
    OVERRIDE_TYPE_NONE,
    ROOMS_ENDPOINT,
    SCHEDULES_ENDPOINT,
    SMARTPLUG_ENDPOINT,
    SYSTEM_ENDPOINT,
)
from .scheduler import RefreshScheduler
from .store import SnapshotStore
from .transport import HubTransport
from .types import ClientConfig, Room, TransportOutcome

ScheduleBody = Union[str, Mapping[str, Any]]
PatchRequest = tuple[str, Any]


@dataclass(frozen=True, slots=True)
class RefreshPolicy:
    """How long to let the hub settle before re-reading state after a write."""

    delay_s: float = 0.0

    @property
    def immediate(self) -> bool:
        return self.delay_s <= 0


IMMEDIATE = RefreshPolicy()


# -------------------------
# Payload templates
# -------------------------

def to_hub_units(celsius: float) -> int:
    """Convert degrees Celsius to the hub's tenths of a degree."""
    return int(round(celsius * 10))


def mode_payload(manual: bool) -> dict[str, Any]:
    return {"Mode": "Manual" if manual else "Auto"}


def override_clear_payload() -> dict[str, Any]:
    return {
        "RequestOverride": {
            "Type": "None",
            "Originator": "App",
            "DurationMinutes": 0,
            "SetPoint": 0,
        }
    }


def manual_setpoint_payload(setpoint: int) -> dict[str, Any]:
    return {"RequestOverride": {"Type": "Manual", "SetPoint": setpoint}}


def boost_payload(setpoint: int, duration_minutes: int) -> dict[str, Any]:
    return {
        "RequestOverride": {
            "Type": "Manual",
            "Originator": "App",
            "DurationMinutes": duration_minutes,
            "SetPoint": setpoint,
        }
    }


def away_override_payload(away: bool, setpoint: int) -> dict[str, Any]:
    return {
        "Type": OVERRIDE_TYPE_AWAY if away else OVERRIDE_TYPE_NONE,
        "setPoint": setpoint if away else 0,
    }


def bare_bool(value: bool) -> str:
    return "true" if value else "false"


class CommandDispatcher:
    """Build and send mutating requests, then force a refresh."""

    def __init__(
        self,
        transport: HubTransport,
        store: SnapshotStore,
        scheduler: RefreshScheduler,
        config: ClientConfig,
        *,
        on_outcome: Optional[Callable[[TransportOutcome], None]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._transport = transport
        self._store = store
        self._scheduler = scheduler
        self._config = config
        self._on_outcome = on_outcome
        self._log = logger or logging.getLogger(__name__)
        self.plug_output_policy = RefreshPolicy(config.plug_output_settle_s)

    async def async_execute(self, path: str, body: Any) -> TransportOutcome:
        """Send one PATCH and report its outcome."""
        outcome = await self._transport.async_patch(path, body)
        if self._on_outcome is not None:
            self._on_outcome(outcome)
        if not outcome.ok:
            self._log.debug("PATCH %s was not accepted: status=%s error=%s", path, outcome.status, outcome.error)
        return outcome

    async def _async_write(self, requests: Sequence[PatchRequest], policy: RefreshPolicy = IMMEDIATE) -> None:
        for path, body in requests:
            await self.async_execute(path, body)
        if policy.immediate:
            await self._scheduler.async_trigger_once()
        else:
            self._scheduler.schedule_refresh(policy.delay_s)

    def _resolve_room(self, room_name: str) -> Optional[Room]:
        room = lookup.get_room(self._store.read(), room_name)
        if room is None:
            self._log.debug("Room %r not found; command skipped", room_name)
        return room

    # -------------------------
    # Rooms
    # -------------------------

    async def async_set_room_setpoint(self, room_name: str, setpoint: float) -> None:
        room = self._resolve_room(room_name)
        if room is None:
            return
        await self._async_write(
            [(f"{ROOMS_ENDPOINT}{room.id}", manual_setpoint_payload(to_hub_units(setpoint)))]
        )

    async def async_set_room_manual_mode(self, room_name: str, manual: bool) -> None:
        """Switch a room between Manual and Auto and drop any active override."""
        room = self._resolve_room(room_name)
        if room is None:
            return
        path = f"{ROOMS_ENDPOINT}{room.id}"
        # A mode change alone leaves an active override in place.
        await self._async_write([(path, mode_payload(manual)), (path, override_clear_payload())])

    async def async_set_room_window_detection(self, room_name: str, active: bool) -> None:
        room = self._resolve_room(room_name)
        if room is None:
            return
        await self._async_write([(f"{ROOMS_ENDPOINT}{room.id}/WindowDetectionActive", bare_bool(active))])

    async def async_set_room_boost(self, room_name: str, setpoint: float, duration_minutes: int) -> None:
        room = self._resolve_room(room_name)
        if room is None:
            return
        await self._async_write(
            [(f"{ROOMS_ENDPOINT}{room.id}", boost_payload(to_hub_units(setpoint), int(duration_minutes)))]
        )

    async def async_cancel_room_boost(self, room_name: str) -> None:
        room = self._resolve_room(room_name)
        if room is None:
            return
        await self._async_write([(f"{ROOMS_ENDPOINT}{room.id}", override_clear_payload())])

    async def async_set_room_schedule(self, room_name: str, schedule: ScheduleBody) -> None:
        room = self._resolve_room(room_name)
        if room is None:
            return
        if room.schedule_id is None:
            self._log.debug("Room %r has no schedule; command skipped", room_name)
            return
        await self._async_write([(f"{SCHEDULES_ENDPOINT}{room.schedule_id}", schedule)])

    # -------------------------
    # Hot water
    # -------------------------

    async def async_set_hot_water_manual_mode(self, manual: bool) -> None:
        path = f"{HOTWATER_ENDPOINT}{HOT_WATER_ID}"
        await self._async_write([(path, mode_payload(manual)), (path, override_clear_payload())])

    async def async_set_hot_water_setpoint(self, setpoint: float) -> None:
        await self._async_write(
            [(f"{HOTWATER_ENDPOINT}{HOT_WATER_ID}", manual_setpoint_payload(to_hub_units(setpoint)))]
        )

    async def async_set_hot_water_boost(self, duration_minutes: int) -> None:
        payload = boost_payload(self._config.hot_water_boost_setpoint, int(duration_minutes))
        await self._async_write([(f"{HOTWATER_ENDPOINT}{HOT_WATER_ID}", payload)])

    async def async_cancel_hot_water_boost(self) -> None:
        await self._async_write([(f"{HOTWATER_ENDPOINT}{HOT_WATER_ID}", override_clear_payload())])

    # -------------------------
    # System
    # -------------------------

    async def async_set_away_mode(self, away: bool) -> None:
        """Apply or clear away mode on the heating system and the hot-water zone."""
        await self._async_write(
            [
                (
                    f"{SYSTEM_ENDPOINT}/RequestOverride",
                    away_override_payload(away, to_hub_units(self._config.away_setpoint_c)),
                ),
                (
                    f"{HOTWATER_ENDPOINT}{HOT_WATER_ID}/RequestOverride",
                    away_override_payload(away, AWAY_HOT_WATER_SETPOINT),
                ),
            ]
        )

    async def async_set_eco_mode(self, enabled: bool) -> None:
        await self._async_write([(SYSTEM_ENDPOINT, {"EcoModeEnabled": bool(enabled)})])

    async def async_set_device_locked(self, device_id: int, locked: bool) -> None:
        device = lookup.get_device(self._store.read(), device_id)
        if device is None:
            self._log.debug("Device %s not found; lock command skipped", device_id)
            return
        await self._async_write([(f"{DEVICE_ENDPOINT}{device.id}/DeviceLockEnabled", bare_bool(locked))])

    # -------------------------
    # Smart plugs
    # -------------------------

    async def async_set_smart_plug_schedule(self, plug_id: int, schedule: ScheduleBody) -> None:
        plug = lookup.get_smart_plug(self._store.read(), plug_id)
        if plug is None or plug.schedule_id is None:
            self._log.debug("Smart plug %s or its schedule not found; command skipped", plug_id)
            return
        await self._async_write([(f"{SCHEDULES_ENDPOINT}{plug.schedule_id}", schedule)])

    async def async_set_smart_plug_manual_mode(self, plug_id: int, manual: bool) -> None:
        plug = lookup.get_smart_plug(self._store.read(), plug_id)
        if plug is None:
            self._log.debug("Smart plug %s not found; command skipped", plug_id)
            return
        await self._async_write([(f"{SMARTPLUG_ENDPOINT}{plug.id}", mode_payload(manual))])

    async def async_set_smart_plug_output(self, plug_id: int, on: bool) -> None:
        """Switch a plug relay; the hub applies it asynchronously, so re-read after a settle delay."""
        plug = lookup.get_smart_plug(self._store.read(), plug_id)
        if plug is None:
            self._log.debug("Smart plug %s not found; command skipped", plug_id)
            return
        await self._async_write(
            [(f"{SMARTPLUG_ENDPOINT}{plug.id}", {"RequestOutput": "On" if on else "Off"})],
            self.plug_output_policy,
        )

    async def async_set_smart_plug_away_action(self, plug_id: int, off_when_away: bool) -> None:
        plug = lookup.get_smart_plug(self._store.read(), plug_id)
        if plug is None:
            self._log.debug("Smart plug %s not found; command skipped", plug_id)
            return
        await self._async_write(
            [(f"{SMARTPLUG_ENDPOINT}{plug.id}", {"AwayAction": "Off" if off_when_away else "NoChange"})]
        )
