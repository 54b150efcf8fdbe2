"""Data update coordinator for the Drayton Wiser integration."""

from __future__ import annotations

from collections.abc import Callable
import logging

from wiserheat_lib import DomainSnapshot

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .const import DOMAIN
from .hub import WiserHub

_LOGGER = logging.getLogger(__name__)


class WiserDataUpdateCoordinator(DataUpdateCoordinator[DomainSnapshot | None]):
    """Push snapshots published by the hub client into Home Assistant."""

    def __init__(self, hass: HomeAssistant, hub: WiserHub, entry: ConfigEntry) -> None:
        """Initialize the coordinator."""
        super().__init__(hass, _LOGGER, name=DOMAIN, config_entry=entry)
        self._hub = hub
        self._unsubscribe: list[Callable[[], None]] = []
        self._reauth_started = False

    async def async_start(self) -> None:
        """Subscribe to hub refreshes and seed snapshot data."""
        self._clear_subscriptions()
        self._unsubscribe.append(self._hub.subscribe(self._handle_refresh))
        self._unsubscribe.append(self._hub.subscribe_connectivity(self._handle_connectivity))
        self.async_set_updated_data(self._hub.get_snapshot())

    async def async_stop(self) -> None:
        """Stop coordinating updates."""
        self._clear_subscriptions()

    async def _async_update_data(self) -> DomainSnapshot | None:
        """Run one refresh cycle when Home Assistant asks for one."""
        if not await self._hub.async_refresh():
            status = self._hub.connectivity
            raise UpdateFailed(status.detail if status is not None else "Refresh failed")
        return self._hub.get_snapshot()

    def _clear_subscriptions(self) -> None:
        while self._unsubscribe:
            self._unsubscribe.pop()()

    def _handle_refresh(self) -> None:
        self.hass.loop.call_soon_threadsafe(self._process_refresh)

    def _handle_connectivity(self) -> None:
        self.hass.loop.call_soon_threadsafe(self._process_connectivity)

    @callback
    def _process_refresh(self) -> None:
        self.async_set_updated_data(self._hub.get_snapshot())

    @callback
    def _process_connectivity(self) -> None:
        status = self._hub.connectivity
        if status is None:
            return
        if status.online:
            self._reauth_started = False
            return
        self.async_set_update_error(UpdateFailed(status.detail or status.state.value))
        if self._hub.auth_failed and not self._reauth_started and self.config_entry is not None:
            _LOGGER.warning("Heat hub rejected the secret; starting reauthentication")
            self._reauth_started = True
            self.config_entry.async_start_reauth(self.hass)
