"""Switches for Wiser system settings, hot water, rooms, devices and smart plugs."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
import logging
from typing import Any

from wiserheat_lib import Device, HotWater, Room, SmartPlug, System

from homeassistant.components.switch import SwitchEntity, SwitchEntityDescription
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import WiserDataUpdateCoordinator
from .entity import WiserEntity, build_unique_id, hub_device_info, room_device_info, unique_base
from .hub import WiserHub

_LOGGER = logging.getLogger(__name__)

# System settings have no id on the hub; they share this key.
SYSTEM_KEY = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class WiserSwitchDescription(SwitchEntityDescription):
    """Describe a switch bound to one kind of hub record."""

    records_fn: Callable[[WiserHub], Iterable[Any]]
    record_fn: Callable[[WiserHub, int], Any]
    is_on_fn: Callable[[Any], bool | None]
    set_fn: Callable[[WiserHub, Any, bool], Awaitable[None]]
    label_fn: Callable[[Any], str | None] = lambda record: None
    per_room: bool = False


def _system(hub: WiserHub) -> tuple[System, ...]:
    system = hub.client.get_system()
    return (system,) if system is not None else ()


def _first_hot_water(hub: WiserHub) -> tuple[HotWater, ...]:
    return hub.client.get_hot_water()[:1]


def _room_by_id(hub: WiserHub, room_id: int) -> Room | None:
    return next((room for room in hub.client.get_rooms() if room.id == room_id), None)


def _record_key(record: Any) -> int:
    return getattr(record, "id", SYSTEM_KEY)


SWITCHES: tuple[WiserSwitchDescription, ...] = (
    WiserSwitchDescription(
        key="away_mode",
        translation_key="away_mode",
        records_fn=_system,
        record_fn=lambda hub, _key: hub.client.get_system(),
        is_on_fn=lambda system: (system.override_type == "Away") if system.override_type is not None else None,
        set_fn=lambda hub, _system, on: hub.async_set_away_mode(on),
    ),
    WiserSwitchDescription(
        key="eco_mode",
        translation_key="eco_mode",
        records_fn=_system,
        record_fn=lambda hub, _key: hub.client.get_system(),
        is_on_fn=lambda system: system.eco_mode_enabled,
        set_fn=lambda hub, _system, on: hub.async_set_eco_mode(on),
    ),
    WiserSwitchDescription(
        key="hot_water_manual",
        translation_key="hot_water_manual",
        records_fn=_first_hot_water,
        record_fn=lambda hub, key: next((hw for hw in hub.client.get_hot_water() if hw.id == key), None),
        is_on_fn=lambda hot_water: (hot_water.mode == "Manual") if hot_water.mode is not None else None,
        set_fn=lambda hub, _hot_water, on: hub.async_set_hot_water_manual_mode(on),
    ),
    WiserSwitchDescription(
        key="hot_water_boost",
        translation_key="hot_water_boost",
        records_fn=_first_hot_water,
        record_fn=lambda hub, key: next((hw for hw in hub.client.get_hot_water() if hw.id == key), None),
        is_on_fn=lambda hot_water: hot_water.boosted,
        set_fn=lambda hub, _hot_water, on: (
            hub.async_set_hot_water_boost() if on else hub.async_cancel_hot_water_boost()
        ),
    ),
    WiserSwitchDescription(
        key="window_detection",
        translation_key="window_detection",
        entity_category=EntityCategory.CONFIG,
        per_room=True,
        records_fn=lambda hub: hub.client.get_rooms(),
        record_fn=_room_by_id,
        is_on_fn=lambda room: room.window_detection_active,
        set_fn=lambda hub, room, on: hub.async_set_room_window_detection(room.name, on),
        label_fn=lambda room: room.name,
    ),
    WiserSwitchDescription(
        key="device_lock",
        translation_key="device_lock",
        entity_category=EntityCategory.CONFIG,
        records_fn=lambda hub: [d for d in hub.client.get_devices() if d.lock_enabled is not None],
        record_fn=lambda hub, key: hub.client.get_device(key),
        is_on_fn=lambda device: device.lock_enabled,
        set_fn=lambda hub, device, on: hub.async_set_device_locked(device.id, on),
        label_fn=lambda device: device.serial_number,
    ),
    WiserSwitchDescription(
        key="plug_output",
        translation_key="plug_output",
        records_fn=lambda hub: hub.client.get_smart_plugs(),
        record_fn=lambda hub, key: hub.client.get_smart_plug(key),
        is_on_fn=lambda plug: (plug.output_state == "On") if plug.output_state is not None else None,
        set_fn=lambda hub, plug, on: hub.async_set_smart_plug_output(plug.id, on),
        label_fn=lambda plug: plug.name,
    ),
    WiserSwitchDescription(
        key="plug_manual_mode",
        translation_key="plug_manual_mode",
        entity_category=EntityCategory.CONFIG,
        records_fn=lambda hub: hub.client.get_smart_plugs(),
        record_fn=lambda hub, key: hub.client.get_smart_plug(key),
        is_on_fn=lambda plug: (plug.mode == "Manual") if plug.mode is not None else None,
        set_fn=lambda hub, plug, on: hub.async_set_smart_plug_manual_mode(plug.id, on),
        label_fn=lambda plug: plug.name,
    ),
    WiserSwitchDescription(
        key="plug_away_action",
        translation_key="plug_away_action",
        entity_category=EntityCategory.CONFIG,
        records_fn=lambda hub: hub.client.get_smart_plugs(),
        record_fn=lambda hub, key: hub.client.get_smart_plug(key),
        is_on_fn=lambda plug: (plug.away_action == "Off") if plug.away_action is not None else None,
        set_fn=lambda hub, plug, on: hub.async_set_smart_plug_away_action(plug.id, on),
        label_fn=lambda plug: plug.name,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up Wiser switches from a config entry."""
    data = hass.data[DOMAIN][entry.entry_id]
    hub: WiserHub = data[DATA_HUB]
    coordinator: WiserDataUpdateCoordinator = data[DATA_COORDINATOR]
    known: set[tuple[str, int]] = set()

    def _async_add_switches() -> None:
        if coordinator.data is None:
            _LOGGER.debug("Switches skipped because snapshot is unavailable")
            return
        entities: list[WiserSwitch] = []
        for description in SWITCHES:
            for record in description.records_fn(hub):
                key = _record_key(record)
                if (description.key, key) in known:
                    continue
                known.add((description.key, key))
                entities.append(WiserSwitch(coordinator, hub, entry, description, record))
        if entities:
            async_add_entities(entities)

    _async_add_switches()
    entry.async_on_unload(coordinator.async_add_listener(_async_add_switches))


class WiserSwitch(WiserEntity, SwitchEntity):
    """A boolean hub setting."""

    entity_description: WiserSwitchDescription

    def __init__(
        self,
        coordinator: WiserDataUpdateCoordinator,
        hub: WiserHub,
        entry: ConfigEntry,
        description: WiserSwitchDescription,
        record: System | HotWater | Room | Device | SmartPlug,
    ) -> None:
        """Initialize the switch."""
        super().__init__(coordinator, hub, entry)
        self.entity_description = description
        self._key = _record_key(record)
        label = description.label_fn(record) or str(self._key)
        self._attr_translation_placeholders = {"name": label}
        self._attr_unique_id = build_unique_id(unique_base(hub, entry), description.key, self._key)
        if description.per_room:
            self._attr_device_info = room_device_info(hub, entry, self._key, label)
        else:
            self._attr_device_info = hub_device_info(hub, entry)
        self._missing_logged = False

    def _record(self) -> Any:
        record = self.entity_description.record_fn(self._hub, self._key)
        if record is None and not self._missing_logged:
            self._missing_logged = True
            _LOGGER.debug("%s %s missing from snapshot", self.entity_description.key, self._key)
        return record

    @property
    def available(self) -> bool:
        return super().available and self._record() is not None

    @property
    def is_on(self) -> bool | None:
        record = self._record()
        return self.entity_description.is_on_fn(record) if record is not None else None

    async def async_turn_on(self, **kwargs: Any) -> None:
        await self._async_set(True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        await self._async_set(False)

    async def _async_set(self, state: bool) -> None:
        record = self._record()
        if record is None:
            return
        await self.entity_description.set_fn(self._hub, record, state)
