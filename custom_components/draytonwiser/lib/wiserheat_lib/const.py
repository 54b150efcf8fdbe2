"""Hub endpoint paths and fixed protocol values."""

DOMAIN_ENDPOINT = "domain"
STATION_ENDPOINT = "station"
ROOMS_ENDPOINT = "rooms/"
HOTWATER_ENDPOINT = "hotwater/"
SYSTEM_ENDPOINT = "system"
DEVICE_ENDPOINT = "devices/"
SMARTPLUG_ENDPOINT = "smartplug/"
SCHEDULES_ENDPOINT = "schedules/"

# The hub exposes a single hot-water zone under this id.
HOT_WATER_ID = 2

# System/hot-water override types used by away mode.
OVERRIDE_TYPE_AWAY = 2
OVERRIDE_TYPE_NONE = 0

# Hot-water setpoint (tenths of a degree) that keeps the cylinder off while away.
AWAY_HOT_WATER_SETPOINT = -200
