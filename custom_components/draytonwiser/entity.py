"""Shared entity helpers for the Drayton Wiser integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST
from homeassistant.helpers.device_registry import (
    CONNECTION_NETWORK_MAC,
    DeviceInfo,
    format_mac,
)
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, MANUFACTURER
from .coordinator import WiserDataUpdateCoordinator
from .hub import WiserHub


def unique_base(hub: WiserHub, entry: ConfigEntry) -> str:
    """Return the stable unique ID base for this config entry."""
    station = hub.station
    if station is not None and station.mac_address:
        return format_mac(station.mac_address)
    if entry.unique_id:
        return entry.unique_id
    return entry.data[CONF_HOST]


def build_unique_id(base: str, kind: str, key: int | str) -> str:
    """Build a stable unique ID in <mac>:<kind>:<key> format."""
    return f"{base}:{kind}:{key}"


def hub_device_info(hub: WiserHub, entry: ConfigEntry) -> DeviceInfo:
    """Build device info for the heat hub itself."""
    station = hub.station
    mac = station.mac_address if station is not None else None
    hub_device = None
    snapshot = hub.get_snapshot()
    if snapshot is not None:
        hub_device = next((d for d in snapshot.devices if d.id == 0), None)
    return DeviceInfo(
        connections={(CONNECTION_NETWORK_MAC, format_mac(mac))} if mac else set(),
        identifiers={(DOMAIN, unique_base(hub, entry))},
        name=(station.hostname if station is not None and station.hostname else entry.title),
        manufacturer=MANUFACTURER,
        model=hub_device.model_identifier if hub_device is not None else None,
        sw_version=hub_device.firmware_version if hub_device is not None else None,
    )


def room_device_info(hub: WiserHub, entry: ConfigEntry, room_id: int, name: str | None) -> DeviceInfo:
    """Group a room's entities under one device linked to the hub."""
    base = unique_base(hub, entry)
    return DeviceInfo(
        identifiers={(DOMAIN, build_unique_id(base, "room", room_id))},
        name=name or f"Room {room_id}",
        manufacturer=MANUFACTURER,
        suggested_area=name,
        via_device=(DOMAIN, base),
    )


class WiserEntity(CoordinatorEntity[WiserDataUpdateCoordinator]):
    """Base class for entities backed by the hub snapshot."""

    _attr_has_entity_name = True

    def __init__(self, coordinator: WiserDataUpdateCoordinator, hub: WiserHub, entry: ConfigEntry) -> None:
        super().__init__(coordinator)
        self._hub = hub
        self._entry = entry

    @property
    def available(self) -> bool:
        """Entities are unavailable while the hub is offline or has no snapshot."""
        return self._hub.is_online and self.coordinator.data is not None
