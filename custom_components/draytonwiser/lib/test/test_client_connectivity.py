import asyncio
import json
from typing import Any, Optional

import pytest

from wiserheat_lib import (
    ClientConfig,
    ConnectivityState,
    TransportOutcome,
    WiserAuthError,
    WiserClient,
    WiserConnectionError,
    WiserTimeoutError,
)

STATION = {"MacAddress": "D0:C5:D3:00:11:22", "MdnsHostname": "WiserHeat001122", "ConnectionStatus": "Connected"}


class _ScriptedTransport:
    def __init__(self) -> None:
        self.responses: list[TransportOutcome] = []
        self.paths: list[str] = []

    def queue(self, status: Optional[int] = 200, text: str = "{}", *, timed_out: bool = False) -> None:
        error: Optional[BaseException] = asyncio.TimeoutError() if timed_out else None
        self.responses.append(
            TransportOutcome(method="GET", path="", status=status, text=text, error=error, timed_out=timed_out)
        )

    async def async_get(self, path: str) -> TransportOutcome:
        self.paths.append(path)
        return self.responses.pop(0)

    async def async_patch(self, path: str, body: Any) -> TransportOutcome:
        return TransportOutcome(method="PATCH", path=path, status=200, text="")

    async def async_close(self) -> None:
        return None


def _client() -> tuple[WiserClient, _ScriptedTransport]:
    transport = _ScriptedTransport()
    return WiserClient(ClientConfig(host="hub.local", secret="s3cret"), transport=transport), transport


@pytest.mark.asyncio
async def test_station_is_parsed_on_success() -> None:
    client, transport = _client()
    transport.queue(text=json.dumps(STATION))

    station = await client.async_get_station()

    assert transport.paths == ["station"]
    assert station.mac_address == "D0:C5:D3:00:11:22"
    assert station.hostname == "WiserHeat001122"
    assert client.connectivity is not None and client.connectivity.online


@pytest.mark.asyncio
async def test_station_401_raises_auth_error() -> None:
    client, transport = _client()
    transport.queue(status=401, text="")

    with pytest.raises(WiserAuthError):
        await client.async_get_station()

    assert client.connectivity is not None
    assert client.connectivity.state is ConnectivityState.OFFLINE_CONFIGURATION_ERROR
    assert client.connectivity.detail == "Invalid authorization token"


@pytest.mark.asyncio
async def test_station_timeout_raises_timeout_error() -> None:
    client, transport = _client()
    transport.queue(status=None, text="", timed_out=True)

    with pytest.raises(WiserTimeoutError):
        await client.async_get_station()


@pytest.mark.asyncio
async def test_station_server_error_raises_connection_error_with_status() -> None:
    client, transport = _client()
    transport.queue(status=500, text="")

    with pytest.raises(WiserConnectionError) as exc_info:
        await client.async_get_station()

    assert exc_info.value.status == 500
    assert not isinstance(exc_info.value, WiserTimeoutError)


@pytest.mark.asyncio
async def test_connectivity_listeners_fire_only_on_change() -> None:
    client, transport = _client()
    seen: list[ConnectivityState] = []
    client.subscribe_connectivity(lambda: seen.append(client.connectivity.state))

    transport.queue(text="{}")
    transport.queue(text="{}")
    transport.queue(status=503, text="")
    transport.queue(status=503, text="")
    transport.queue(text="{}")
    for _ in range(5):
        await client.async_refresh()

    assert seen == [
        ConnectivityState.ONLINE,
        ConnectivityState.OFFLINE_COMMUNICATION_ERROR,
        ConnectivityState.ONLINE,
    ]


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_snapshot() -> None:
    client, transport = _client()
    transport.queue(text=json.dumps({"Room": [{"id": 1, "Name": "Kitchen"}]}))
    transport.queue(status=503, text="")

    assert await client.async_refresh() is True
    before = client.snapshot
    assert await client.async_refresh() is False

    assert client.snapshot is before
    assert client.get_room("kitchen") is not None


@pytest.mark.asyncio
async def test_unsubscribe_stops_refresh_notifications() -> None:
    client, transport = _client()
    calls: list[int] = []
    unsubscribe = client.subscribe(lambda: calls.append(1))

    transport.queue(text="{}")
    await client.async_refresh()
    unsubscribe()
    transport.queue(text="{}")
    await client.async_refresh()

    assert calls == [1]
