"""Set up the Drayton Wiser integration."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LIB_PATH = Path(__file__).resolve().parent / "lib"
if _LIB_PATH.exists() and str(_LIB_PATH) not in sys.path:
    sys.path.insert(0, str(_LIB_PATH))

from wiserheat_lib import WiserAuthError, WiserConnectionError

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady

from .const import (
    CONF_AWAY_SETPOINT,
    CONF_BOOST_DURATION,
    CONF_REFRESH_INTERVAL,
    CONF_SECRET,
    DATA_COORDINATOR,
    DATA_HUB,
    DEFAULT_AWAY_SETPOINT,
    DEFAULT_BOOST_DURATION,
    DEFAULT_REFRESH_INTERVAL,
    DOMAIN,
)
from .coordinator import WiserDataUpdateCoordinator
from .hub import WiserHub

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.CLIMATE,
    Platform.SENSOR,
    Platform.SWITCH,
]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Drayton Wiser from a config entry."""
    host = entry.data[CONF_HOST]
    hub = WiserHub(
        hass,
        host,
        entry.data[CONF_SECRET],
        refresh_interval=entry.options.get(CONF_REFRESH_INTERVAL, DEFAULT_REFRESH_INTERVAL),
        away_setpoint=entry.options.get(CONF_AWAY_SETPOINT, DEFAULT_AWAY_SETPOINT),
        boost_duration=entry.options.get(CONF_BOOST_DURATION, DEFAULT_BOOST_DURATION),
    )
    try:
        fetched = await hub.async_connect()
    except WiserAuthError as err:
        await hub.async_disconnect()
        raise ConfigEntryAuthFailed("The heat hub rejected the secret") from err
    except WiserConnectionError as err:
        _LOGGER.debug("Failed to reach heat hub at %s: %s", host, err)
        await hub.async_disconnect()
        raise ConfigEntryNotReady(f"Heat hub at {host} is not reachable") from err
    if not fetched:
        await hub.async_disconnect()
        raise ConfigEntryNotReady("Could not read the heat hub domain")

    coordinator = WiserDataUpdateCoordinator(hass, hub, entry)
    await coordinator.async_start()
    await hub.async_start()
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        DATA_HUB: hub,
        DATA_COORDINATOR: coordinator,
    }
    entry.async_on_unload(entry.add_update_listener(_async_options_updated))
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a Drayton Wiser config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    if data is not None:
        coordinator: WiserDataUpdateCoordinator | None = data.get(DATA_COORDINATOR)
        hub: WiserHub | None = data.get(DATA_HUB)
        if coordinator is not None:
            await coordinator.async_stop()
        if hub is not None:
            await hub.async_disconnect()
    return unload_ok


async def _async_options_updated(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Rebuild the client with the new options."""
    await hass.config_entries.async_reload(entry.entry_id)
