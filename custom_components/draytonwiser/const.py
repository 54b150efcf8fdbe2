"""Constants for draytonwiser."""

DOMAIN = "draytonwiser"
MANUFACTURER = "Drayton"

CONF_SECRET = "secret"
CONF_REFRESH_INTERVAL = "refresh_interval"
CONF_AWAY_SETPOINT = "away_setpoint"
CONF_BOOST_DURATION = "boost_duration"

DEFAULT_REFRESH_INTERVAL = 60
DEFAULT_AWAY_SETPOINT = 10.0
DEFAULT_BOOST_DURATION = 30

MIN_REFRESH_INTERVAL = 10
MAX_REFRESH_INTERVAL = 3600

DATA_HUB = "hub"
DATA_COORDINATOR = "coordinator"
