"""Diagnostics support for Drayton Wiser."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from datetime import date, datetime
import enum
from types import MappingProxyType
from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST
from homeassistant.core import HomeAssistant

from .const import CONF_SECRET, DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import WiserDataUpdateCoordinator
from .hub import WiserHub

TO_REDACT = {
    CONF_SECRET,
    CONF_HOST,
    "mac_address",
    "MacAddress",
    "serial_number",
    "SerialNumber",
    "hostname",
    "MdnsHostname",
}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    data = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    hub: WiserHub | None = data.get(DATA_HUB) if data else None
    coordinator: WiserDataUpdateCoordinator | None = (
        data.get(DATA_COORDINATOR) if data else None
    )
    snapshot = coordinator.data if coordinator is not None else None

    return {
        "entry": async_redact_data(
            {"data": dict(entry.data), "options": dict(entry.options)}, TO_REDACT
        ),
        "connectivity": _to_jsonable(hub.connectivity if hub is not None else None),
        "scheduler": hub.diagnostics() if hub is not None else None,
        "station": async_redact_data(
            _to_jsonable(hub.station) or {}, TO_REDACT
        ) if hub is not None else None,
        "snapshot_available": snapshot is not None,
        "snapshot_meta": _to_jsonable(
            {
                "version": getattr(snapshot, "version", None),
                "fetched_at": getattr(snapshot, "fetched_at", None),
            }
        ),
        "snapshot": async_redact_data(_to_jsonable(snapshot) or {}, TO_REDACT),
    }


def _to_jsonable(value: Any) -> Any:
    """Normalize snapshots to JSON-safe types."""
    if value is None:
        return None
    if is_dataclass(value):
        return {
            field.name: _to_jsonable(getattr(value, field.name))
            for field in fields(value)
        }
    if isinstance(value, MappingProxyType):
        return {str(key): _to_jsonable(val) for key, val in dict(value).items()}
    if isinstance(value, Mapping):
        return {str(key): _to_jsonable(val) for key, val in value.items()}
    if isinstance(value, list | tuple):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
