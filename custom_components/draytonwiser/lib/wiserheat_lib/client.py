"""
Stable client facade for the Wiser heat hub.

This wires the transport, snapshot store, refresh scheduler, listener registry
and command dispatcher together and is the only surface consumers use. It
avoids any host-platform concepts.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from . import lookup
from .commands import CommandDispatcher, ScheduleBody
from .connectivity import describe
from .const import DOMAIN_ENDPOINT, STATION_ENDPOINT
from .domain import parse_station
from .errors import WiserAuthError, WiserConnectionError, WiserTimeoutError
from .listeners import Listener, ListenerRegistry
from .scheduler import RefreshScheduler
from .store import SnapshotStore
from .transport import HubTransport
from .types import (
    ClientConfig,
    ConnectivityState,
    ConnectivityStatus,
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
    TransportOutcome,
)

__all__ = ["WiserClient"]


class WiserClient:
    """
    Client for one heat hub.

    One client owns one snapshot. Reads never perform I/O; writes are sent to
    the hub and followed by a forced refresh.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Optional[HubTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if logger is None:
            logger = logging.getLogger(config.logger_name or __name__)
        self._log = logger
        self._config = config
        self._transport = transport or HubTransport(config, logger=logger)
        self._store = SnapshotStore(logger=logger)
        self._listeners = ListenerRegistry(name="refresh", logger=logger)
        self._connectivity_listeners = ListenerRegistry(name="connectivity", logger=logger)
        self._connectivity: Optional[ConnectivityStatus] = None
        self._scheduler = RefreshScheduler(
            self._async_fetch_domain,
            self._store,
            self._listeners,
            on_outcome=self._apply_outcome,
            logger=logger,
        )
        self._commands = CommandDispatcher(
            self._transport,
            self._store,
            self._scheduler,
            config,
            on_outcome=self._apply_outcome,
            logger=logger,
        )

    # -------------------------
    # Lifecycle
    # -------------------------

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    async def async_start(self, interval: Optional[float] = None) -> None:
        """Start periodic refreshes (the first cycle runs immediately)."""
        self._scheduler.start(interval if interval is not None else self._config.refresh_interval_s)

    async def async_stop(self) -> None:
        """Stop refreshing and release the HTTP session."""
        await self._scheduler.async_stop()
        await self._transport.async_close()

    async def async_refresh(self) -> bool:
        """Run one refresh cycle now; return True if a new snapshot was published."""
        return await self._scheduler.async_trigger_once()

    async def _async_fetch_domain(self) -> TransportOutcome:
        return await self._transport.async_get(DOMAIN_ENDPOINT)

    async def async_get_station(self) -> Station:
        """
        Fetch the hub identity.

        Unlike the refresh and command paths this raises, so callers such as a
        setup flow can tell a wrong secret from an unreachable hub.
        """
        outcome = await self._transport.async_get(STATION_ENDPOINT)
        self._apply_outcome(outcome)
        if outcome.ok:
            return parse_station(outcome.text)
        status = describe(outcome)
        if status.state is ConnectivityState.OFFLINE_CONFIGURATION_ERROR:
            raise WiserAuthError(status.detail or "Invalid authorization token")
        if outcome.timed_out:
            raise WiserTimeoutError(status.detail or "Timed out")
        raise WiserConnectionError(status.detail or "Request failed", status=outcome.status)

    # -------------------------
    # Snapshot and listeners
    # -------------------------

    @property
    def snapshot(self) -> Optional[DomainSnapshot]:
        """Return the latest published snapshot."""
        return self._store.read()

    def read(self) -> Optional[DomainSnapshot]:
        return self._store.read()

    def register(self, listener: Listener) -> bool:
        return self._listeners.register(listener)

    def unregister(self, listener: Listener) -> bool:
        return self._listeners.unregister(listener)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for refresh notifications and return an unsubscribe callable."""
        self._listeners.register(listener)
        return lambda: self._listeners.unregister(listener)

    @property
    def connectivity(self) -> Optional[ConnectivityStatus]:
        """Connectivity from the last transport outcome, or None before any request."""
        return self._connectivity

    def subscribe_connectivity(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` whenever the connectivity status changes."""
        self._connectivity_listeners.register(listener)
        return lambda: self._connectivity_listeners.unregister(listener)

    def _apply_outcome(self, outcome: TransportOutcome) -> None:
        status = describe(outcome)
        previous = self._connectivity
        if status == previous:
            return
        self._connectivity = status
        if status.online:
            if previous is not None:
                self._log.info("Heat hub connection restored")
        else:
            self._log.warning("Heat hub offline (%s): %s", status.state.value, status.detail)
        self._connectivity_listeners.notify_all()

    # -------------------------
    # Lookups against the current snapshot
    # -------------------------

    def get_rooms(self) -> tuple[Room, ...]:
        return lookup.rooms(self.snapshot)

    def get_room_stats(self) -> tuple[RoomStat, ...]:
        return lookup.room_stats(self.snapshot)

    def get_smart_valves(self) -> tuple[SmartValve, ...]:
        return lookup.smart_valves(self.snapshot)

    def get_smart_plugs(self) -> tuple[SmartPlug, ...]:
        return lookup.smart_plugs(self.snapshot)

    def get_devices(self) -> tuple[Device, ...]:
        return lookup.devices(self.snapshot)

    def get_hot_water(self) -> tuple[HotWater, ...]:
        return lookup.hot_water(self.snapshot)

    def get_heating_channels(self) -> tuple[HeatingChannel, ...]:
        return lookup.heating_channels(self.snapshot)

    def get_system(self) -> Optional[System]:
        return lookup.get_system(self.snapshot)

    def get_room(self, name: str) -> Optional[Room]:
        return lookup.get_room(self.snapshot, name)

    def get_room_stat(self, room_stat_id: int) -> Optional[RoomStat]:
        return lookup.get_room_stat(self.snapshot, room_stat_id)

    def get_room_stat_by_serial(self, serial_number: str) -> Optional[RoomStat]:
        return lookup.get_room_stat_by_serial(self.snapshot, serial_number)

    def get_smart_valve(self, valve_id: int) -> Optional[SmartValve]:
        return lookup.get_smart_valve(self.snapshot, valve_id)

    def get_smart_valve_by_serial(self, serial_number: str) -> Optional[SmartValve]:
        return lookup.get_smart_valve_by_serial(self.snapshot, serial_number)

    def get_smart_plug(self, plug_id: int) -> Optional[SmartPlug]:
        return lookup.get_smart_plug(self.snapshot, plug_id)

    def get_smart_plug_by_serial(self, serial_number: str) -> Optional[SmartPlug]:
        return lookup.get_smart_plug_by_serial(self.snapshot, serial_number)

    def get_device(self, device_id: int) -> Optional[Device]:
        return lookup.get_device(self.snapshot, device_id)

    def get_schedule(self, schedule_id: int) -> Optional[Schedule]:
        return lookup.get_schedule(self.snapshot, schedule_id)

    def get_room_for_device_id(self, device_id: int) -> Optional[Room]:
        return lookup.get_room_for_device_id(self.snapshot, device_id)

    # -------------------------
    # Commands
    # -------------------------

    async def async_set_room_setpoint(self, room_name: str, setpoint: float) -> None:
        await self._commands.async_set_room_setpoint(room_name, setpoint)

    async def async_set_room_manual_mode(self, room_name: str, manual: bool) -> None:
        await self._commands.async_set_room_manual_mode(room_name, manual)

    async def async_set_room_window_detection(self, room_name: str, active: bool) -> None:
        await self._commands.async_set_room_window_detection(room_name, active)

    async def async_set_room_boost(self, room_name: str, setpoint: float, duration_minutes: int) -> None:
        await self._commands.async_set_room_boost(room_name, setpoint, duration_minutes)

    async def async_cancel_room_boost(self, room_name: str) -> None:
        await self._commands.async_cancel_room_boost(room_name)

    async def async_set_room_schedule(self, room_name: str, schedule: ScheduleBody) -> None:
        await self._commands.async_set_room_schedule(room_name, schedule)

    async def async_set_hot_water_manual_mode(self, manual: bool) -> None:
        await self._commands.async_set_hot_water_manual_mode(manual)

    async def async_set_hot_water_setpoint(self, setpoint: float) -> None:
        await self._commands.async_set_hot_water_setpoint(setpoint)

    async def async_set_hot_water_boost(self, duration_minutes: int) -> None:
        await self._commands.async_set_hot_water_boost(duration_minutes)

    async def async_cancel_hot_water_boost(self) -> None:
        await self._commands.async_cancel_hot_water_boost()

    async def async_set_away_mode(self, away: bool) -> None:
        await self._commands.async_set_away_mode(away)

    async def async_set_eco_mode(self, enabled: bool) -> None:
        await self._commands.async_set_eco_mode(enabled)

    async def async_set_device_locked(self, device_id: int, locked: bool) -> None:
        await self._commands.async_set_device_locked(device_id, locked)

    async def async_set_smart_plug_schedule(self, plug_id: int, schedule: ScheduleBody) -> None:
        await self._commands.async_set_smart_plug_schedule(plug_id, schedule)

    async def async_set_smart_plug_manual_mode(self, plug_id: int, manual: bool) -> None:
        await self._commands.async_set_smart_plug_manual_mode(plug_id, manual)

    async def async_set_smart_plug_output(self, plug_id: int, on: bool) -> None:
        await self._commands.async_set_smart_plug_output(plug_id, on)

    async def async_set_smart_plug_away_action(self, plug_id: int, off_when_away: bool) -> None:
        await self._commands.async_set_smart_plug_away_action(plug_id, off_when_away)
