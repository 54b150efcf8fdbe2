"""Sensors for the Drayton Wiser integration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from wiserheat_lib import Device, RoomStat, to_celsius

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import (
    PERCENTAGE,
    SIGNAL_STRENGTH_DECIBELS_MILLIWATT,
    EntityCategory,
    UnitOfElectricPotential,
    UnitOfTemperature,
)
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import WiserDataUpdateCoordinator
from .entity import WiserEntity, build_unique_id, hub_device_info, unique_base
from .hub import WiserHub


@dataclass(frozen=True, slots=True, kw_only=True)
class WiserRoomStatSensorDescription(SensorEntityDescription):
    """Describe a sensor read from a room thermostat."""

    value_fn: Callable[[RoomStat], Any]


@dataclass(frozen=True, slots=True, kw_only=True)
class WiserDeviceSensorDescription(SensorEntityDescription):
    """Describe a sensor read from a paired device."""

    value_fn: Callable[[Device], Any]
    exists_fn: Callable[[Device], bool] = lambda device: True


ROOM_STAT_SENSORS: tuple[WiserRoomStatSensorDescription, ...] = (
    WiserRoomStatSensorDescription(
        key="temperature",
        translation_key="room_temperature",
        device_class=SensorDeviceClass.TEMPERATURE,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfTemperature.CELSIUS,
        value_fn=lambda stat: to_celsius(stat.measured_temperature),
    ),
    WiserRoomStatSensorDescription(
        key="humidity",
        translation_key="room_humidity",
        device_class=SensorDeviceClass.HUMIDITY,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=PERCENTAGE,
        value_fn=lambda stat: stat.measured_humidity,
    ),
)

DEVICE_SENSORS: tuple[WiserDeviceSensorDescription, ...] = (
    WiserDeviceSensorDescription(
        key="rssi",
        translation_key="signal_rssi",
        device_class=SensorDeviceClass.SIGNAL_STRENGTH,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=SIGNAL_STRENGTH_DECIBELS_MILLIWATT,
        entity_category=EntityCategory.DIAGNOSTIC,
        entity_registry_enabled_default=False,
        value_fn=lambda device: device.rssi,
    ),
    WiserDeviceSensorDescription(
        key="signal",
        translation_key="signal_strength",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda device: device.signal_strength,
    ),
    WiserDeviceSensorDescription(
        key="battery_voltage",
        translation_key="battery_voltage",
        device_class=SensorDeviceClass.VOLTAGE,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfElectricPotential.VOLT,
        entity_category=EntityCategory.DIAGNOSTIC,
        # Reported in tenths of a volt.
        value_fn=lambda device: device.battery_voltage / 10 if device.battery_voltage is not None else None,
        exists_fn=lambda device: device.battery_voltage is not None,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up Wiser sensors from a config entry."""
    data = hass.data[DOMAIN][entry.entry_id]
    hub: WiserHub = data[DATA_HUB]
    coordinator: WiserDataUpdateCoordinator = data[DATA_COORDINATOR]
    known: set[tuple[str, int]] = set()

    def _async_add_sensors() -> None:
        entities: list[SensorEntity] = []
        for stat in hub.client.get_room_stats():
            for description in ROOM_STAT_SENSORS:
                if ("stat:" + description.key, stat.id) in known:
                    continue
                known.add(("stat:" + description.key, stat.id))
                entities.append(WiserRoomStatSensor(coordinator, hub, entry, stat.id, description))
        for device in hub.client.get_devices():
            for description in DEVICE_SENSORS:
                if ("device:" + description.key, device.id) in known or not description.exists_fn(device):
                    continue
                known.add(("device:" + description.key, device.id))
                entities.append(WiserDeviceSensor(coordinator, hub, entry, device, description))
        if entities:
            async_add_entities(entities)

    async_add_entities([WiserConnectivitySensor(coordinator, hub, entry)])
    _async_add_sensors()
    entry.async_on_unload(coordinator.async_add_listener(_async_add_sensors))


class WiserRoomStatSensor(WiserEntity, SensorEntity):
    """Temperature or humidity measured by a room thermostat."""

    entity_description: WiserRoomStatSensorDescription

    def __init__(
        self,
        coordinator: WiserDataUpdateCoordinator,
        hub: WiserHub,
        entry: ConfigEntry,
        room_stat_id: int,
        description: WiserRoomStatSensorDescription,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, hub, entry)
        self.entity_description = description
        self._room_stat_id = room_stat_id
        room = hub.client.get_room_for_device_id(room_stat_id)
        self._attr_translation_placeholders = {"room": (room.name if room and room.name else f"Room stat {room_stat_id}")}
        self._attr_unique_id = build_unique_id(unique_base(hub, entry), f"roomstat_{description.key}", room_stat_id)
        self._attr_device_info = hub_device_info(hub, entry)

    @property
    def available(self) -> bool:
        return super().available and self._hub.client.get_room_stat(self._room_stat_id) is not None

    @property
    def native_value(self) -> Any:
        stat = self._hub.client.get_room_stat(self._room_stat_id)
        return self.entity_description.value_fn(stat) if stat is not None else None


class WiserDeviceSensor(WiserEntity, SensorEntity):
    """Radio and battery diagnostics for a paired device."""

    entity_description: WiserDeviceSensorDescription

    def __init__(
        self,
        coordinator: WiserDataUpdateCoordinator,
        hub: WiserHub,
        entry: ConfigEntry,
        device: Device,
        description: WiserDeviceSensorDescription,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, hub, entry)
        self.entity_description = description
        self._device_id = device.id
        label = device.serial_number or f"{device.product_type or 'Device'} {device.id}"
        self._attr_translation_placeholders = {"device": label}
        self._attr_unique_id = build_unique_id(unique_base(hub, entry), f"device_{description.key}", device.id)
        self._attr_device_info = hub_device_info(hub, entry)

    @property
    def available(self) -> bool:
        return super().available and self._hub.client.get_device(self._device_id) is not None

    @property
    def native_value(self) -> Any:
        device = self._hub.client.get_device(self._device_id)
        return self.entity_description.value_fn(device) if device is not None else None


class WiserConnectivitySensor(WiserEntity, SensorEntity):
    """Hub connectivity as reported by the last request."""

    _attr_translation_key = "hub_status"
    _attr_device_class = SensorDeviceClass.ENUM
    _attr_entity_category = EntityCategory.DIAGNOSTIC
    _attr_options = ["online", "offline_communication_error", "offline_configuration_error"]

    def __init__(self, coordinator: WiserDataUpdateCoordinator, hub: WiserHub, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, hub, entry)
        self._attr_unique_id = build_unique_id(unique_base(hub, entry), "hub", "status")
        self._attr_device_info = hub_device_info(hub, entry)

    @property
    def available(self) -> bool:
        return True

    @property
    def native_value(self) -> str | None:
        status = self._hub.connectivity
        return status.state.value if status is not None else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        status = self._hub.connectivity
        return {"detail": status.detail if status is not None else None}
