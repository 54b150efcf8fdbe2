"""Asyncio client for the Drayton Wiser heat hub."""

from .client import WiserClient
from .commands import IMMEDIATE, CommandDispatcher, RefreshPolicy
from .connectivity import classify, describe
from .errors import (
    WiserAuthError,
    WiserConnectionError,
    WiserError,
    WiserParseError,
    WiserTimeoutError,
)
from .listeners import ListenerRegistry
from .scheduler import RefreshScheduler
from .store import SnapshotStore
from .transport import HubTransport
from .types import (
    OFFLINE_TEMPERATURE,
    ClientConfig,
    ConnectivityState,
    ConnectivityStatus,
    Device,
    DomainSnapshot,
    HeatingChannel,
    HotWater,
    Room,
    RoomStat,
    Schedule,
    SmartPlug,
    SmartValve,
    Station,
    System,
    TransportOutcome,
    to_celsius,
)

__all__ = [
    "IMMEDIATE",
    "OFFLINE_TEMPERATURE",
    "ClientConfig",
    "CommandDispatcher",
    "ConnectivityState",
    "ConnectivityStatus",
    "Device",
    "DomainSnapshot",
    "HeatingChannel",
    "HotWater",
    "HubTransport",
    "ListenerRegistry",
    "RefreshPolicy",
    "RefreshScheduler",
    "Room",
    "RoomStat",
    "Schedule",
    "SmartPlug",
    "SmartValve",
    "SnapshotStore",
    "Station",
    "System",
    "TransportOutcome",
    "WiserAuthError",
    "WiserClient",
    "WiserConnectionError",
    "WiserError",
    "WiserParseError",
    "WiserTimeoutError",
    "classify",
    "describe",
    "to_celsius",
]
