"""Climate entities for Wiser rooms."""

from __future__ import annotations

import logging
from typing import Any

from wiserheat_lib import Room, to_celsius

from homeassistant.components.climate import (
    PRESET_BOOST,
    PRESET_NONE,
    ClimateEntity,
    ClimateEntityFeature,
    HVACAction,
    HVACMode,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import ATTR_TEMPERATURE, UnitOfTemperature
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import WiserDataUpdateCoordinator
from .entity import WiserEntity, build_unique_id, room_device_info, unique_base
from .hub import WiserHub

_LOGGER = logging.getLogger(__name__)

# Boost raises the room this far above its current target.
BOOST_DELTA_C = 2.0
MIN_TEMP_C = 5.0
MAX_TEMP_C = 30.0


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up Wiser room thermostats from a config entry."""
    data = hass.data[DOMAIN][entry.entry_id]
    hub: WiserHub = data[DATA_HUB]
    coordinator: WiserDataUpdateCoordinator = data[DATA_COORDINATOR]
    known_room_ids: set[int] = set()

    def _async_add_rooms() -> None:
        entities: list[WiserRoomClimate] = []
        for room in hub.client.get_rooms():
            if room.id in known_room_ids:
                continue
            known_room_ids.add(room.id)
            entities.append(WiserRoomClimate(coordinator, hub, entry, room))
        if entities:
            _LOGGER.debug("Adding %s room climate entities", len(entities))
            async_add_entities(entities)

    _async_add_rooms()
    entry.async_on_unload(coordinator.async_add_listener(_async_add_rooms))


class WiserRoomClimate(WiserEntity, ClimateEntity):
    """A Wiser room as a thermostat."""

    _attr_name = None
    _attr_hvac_modes = [HVACMode.AUTO, HVACMode.HEAT]
    _attr_preset_modes = [PRESET_NONE, PRESET_BOOST]
    _attr_supported_features = (
        ClimateEntityFeature.TARGET_TEMPERATURE | ClimateEntityFeature.PRESET_MODE
    )
    _attr_temperature_unit = UnitOfTemperature.CELSIUS
    _attr_target_temperature_step = 0.5
    _attr_min_temp = MIN_TEMP_C
    _attr_max_temp = MAX_TEMP_C

    def __init__(
        self,
        coordinator: WiserDataUpdateCoordinator,
        hub: WiserHub,
        entry: ConfigEntry,
        room: Room,
    ) -> None:
        """Initialize the room entity."""
        super().__init__(coordinator, hub, entry)
        self._room_id = room.id
        self._room_name = room.name or f"Room {room.id}"
        self._attr_unique_id = build_unique_id(unique_base(hub, entry), "room", room.id)
        self._attr_device_info = room_device_info(hub, entry, room.id, room.name)

    @property
    def _room(self) -> Room | None:
        return next((r for r in self._hub.client.get_rooms() if r.id == self._room_id), None)

    @property
    def available(self) -> bool:
        return super().available and self._room is not None

    @property
    def current_temperature(self) -> float | None:
        room = self._room
        return to_celsius(room.calculated_temperature) if room is not None else None

    @property
    def current_humidity(self) -> float | None:
        room = self._room
        if room is None:
            return None
        stat = self._hub.client.get_room_stat(room.room_stat_id) if room.room_stat_id is not None else None
        return stat.measured_humidity if stat is not None else None

    @property
    def target_temperature(self) -> float | None:
        room = self._room
        return to_celsius(room.current_setpoint) if room is not None else None

    @property
    def hvac_mode(self) -> HVACMode | None:
        room = self._room
        if room is None or room.mode is None:
            return None
        return HVACMode.HEAT if room.mode == "Manual" else HVACMode.AUTO

    @property
    def hvac_action(self) -> HVACAction | None:
        room = self._room
        if room is None or room.percentage_demand is None:
            return None
        return HVACAction.HEATING if room.percentage_demand > 0 else HVACAction.IDLE

    @property
    def preset_mode(self) -> str | None:
        room = self._room
        if room is None:
            return None
        return PRESET_BOOST if room.boosted else PRESET_NONE

    async def async_set_temperature(self, **kwargs: Any) -> None:
        """Set a manual override setpoint."""
        temperature = kwargs.get(ATTR_TEMPERATURE)
        if temperature is None:
            return
        await self._hub.async_set_room_setpoint(self._current_name(), float(temperature))

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        """Switch between the schedule (auto) and manual control (heat)."""
        await self._hub.async_set_room_manual_mode(self._current_name(), hvac_mode == HVACMode.HEAT)

    async def async_set_preset_mode(self, preset_mode: str) -> None:
        """Start or cancel a boost."""
        if preset_mode == PRESET_BOOST:
            target = self.target_temperature or MIN_TEMP_C
            setpoint = min(MAX_TEMP_C, target + BOOST_DELTA_C)
            await self._hub.async_set_room_boost(self._current_name(), setpoint)
            return
        await self._hub.async_cancel_room_boost(self._current_name())

    def _current_name(self) -> str:
        room = self._room
        if room is not None and room.name:
            self._room_name = room.name
        return self._room_name
