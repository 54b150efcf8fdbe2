"""Hub wrapper for the Wiser client lifecycle."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any

from wiserheat_lib import (
    ClientConfig,
    ConnectivityState,
    ConnectivityStatus,
    DomainSnapshot,
    Station,
    WiserClient,
)

from homeassistant.core import HomeAssistant

from .const import DEFAULT_AWAY_SETPOINT, DEFAULT_BOOST_DURATION, DEFAULT_REFRESH_INTERVAL

_LOGGER = logging.getLogger(__name__)


class WiserHub:
    """Manage a single Wiser client instance."""

    def __init__(
        self,
        hass: HomeAssistant,
        host: str,
        secret: str,
        *,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        away_setpoint: float = DEFAULT_AWAY_SETPOINT,
        boost_duration: int = DEFAULT_BOOST_DURATION,
    ) -> None:
        """Initialize the hub wrapper."""
        self._hass = hass
        self._boost_duration = int(boost_duration)
        self._station: Station | None = None
        self._client = WiserClient(
            ClientConfig(
                host=host,
                secret=secret,
                refresh_interval_s=float(refresh_interval),
                away_setpoint_c=float(away_setpoint),
            ),
            logger=_LOGGER,
        )

    @property
    def client(self) -> WiserClient:
        """Return the underlying client."""
        return self._client

    @property
    def station(self) -> Station | None:
        """Return the hub identity fetched during connect."""
        return self._station

    @property
    def connectivity(self) -> ConnectivityStatus | None:
        return self._client.connectivity

    @property
    def is_online(self) -> bool:
        status = self._client.connectivity
        return status is not None and status.online

    @property
    def auth_failed(self) -> bool:
        status = self._client.connectivity
        return status is not None and status.state is ConnectivityState.OFFLINE_CONFIGURATION_ERROR

    async def async_connect(self) -> bool:
        """
        Identify the hub and fetch the first snapshot.

        Raises the library's auth/connection errors from the station request;
        returns False when the station answered but no snapshot could be built.
        """
        self._station = await self._client.async_get_station()
        return await self._client.async_refresh()

    async def async_start(self) -> None:
        await self._client.async_start()

    async def async_disconnect(self) -> None:
        """Stop refreshing and close the HTTP session."""
        await self._client.async_stop()

    def get_snapshot(self) -> DomainSnapshot | None:
        """Return the latest client snapshot."""
        return self._client.snapshot

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Subscribe to snapshot refreshes."""
        return self._client.subscribe(callback)

    def subscribe_connectivity(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Subscribe to connectivity changes."""
        return self._client.subscribe_connectivity(callback)

    async def async_refresh(self) -> bool:
        return await self._client.async_refresh()

    # -------------------------
    # Commands
    # -------------------------

    async def async_set_room_setpoint(self, room_name: str, setpoint: float) -> None:
        _LOGGER.debug("Setting %s setpoint to %.1f", room_name, setpoint)
        await self._client.async_set_room_setpoint(room_name, setpoint)

    async def async_set_room_manual_mode(self, room_name: str, manual: bool) -> None:
        await self._client.async_set_room_manual_mode(room_name, manual)

    async def async_set_room_boost(self, room_name: str, setpoint: float, duration: int | None = None) -> None:
        minutes = self._boost_duration if duration is None else int(duration)
        _LOGGER.debug("Boosting %s to %.1f for %s minutes", room_name, setpoint, minutes)
        await self._client.async_set_room_boost(room_name, setpoint, minutes)

    async def async_cancel_room_boost(self, room_name: str) -> None:
        await self._client.async_cancel_room_boost(room_name)

    async def async_set_room_window_detection(self, room_name: str, active: bool) -> None:
        await self._client.async_set_room_window_detection(room_name, active)

    async def async_set_hot_water_manual_mode(self, manual: bool) -> None:
        await self._client.async_set_hot_water_manual_mode(manual)

    async def async_set_hot_water_boost(self, duration: int | None = None) -> None:
        await self._client.async_set_hot_water_boost(self._boost_duration if duration is None else int(duration))

    async def async_cancel_hot_water_boost(self) -> None:
        await self._client.async_cancel_hot_water_boost()

    async def async_set_away_mode(self, away: bool) -> None:
        await self._client.async_set_away_mode(away)

    async def async_set_eco_mode(self, enabled: bool) -> None:
        await self._client.async_set_eco_mode(enabled)

    async def async_set_device_locked(self, device_id: int, locked: bool) -> None:
        await self._client.async_set_device_locked(device_id, locked)

    async def async_set_smart_plug_output(self, plug_id: int, on: bool) -> None:
        await self._client.async_set_smart_plug_output(plug_id, on)

    async def async_set_smart_plug_manual_mode(self, plug_id: int, manual: bool) -> None:
        await self._client.async_set_smart_plug_manual_mode(plug_id, manual)

    async def async_set_smart_plug_away_action(self, plug_id: int, off_when_away: bool) -> None:
        await self._client.async_set_smart_plug_away_action(plug_id, off_when_away)

    def diagnostics(self) -> dict[str, Any]:
        """Return scheduler state for diagnostics."""
        scheduler = self._client.scheduler
        return {
            "running": scheduler.running,
            "cycles": scheduler.cycles,
            "last_refresh_success": scheduler.last_refresh_success,
        }
