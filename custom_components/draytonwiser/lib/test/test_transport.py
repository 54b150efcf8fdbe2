import asyncio
from typing import Any, Optional

import aiohttp
import pytest

from wiserheat_lib.client import WiserClient
from wiserheat_lib.transport import SECRET_HEADER, HubTransport
from wiserheat_lib.types import ClientConfig


class _FakeResponse:
    def __init__(self, status: int, body: str | bytes, charset: Optional[str] = "utf-8") -> None:
        self.status = status
        self.charset = charset
        self._body = body.encode() if isinstance(body, str) else body

    async def read(self) -> bytes:
        return self._body

    async def __aenter__(self) -> "_FakeResponse":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None


class _FakeSession:
    def __init__(self, status: int = 200, text: str | bytes = "{}", raise_exc: Optional[BaseException] = None) -> None:
        self.status = status
        self.text = text
        self.raise_exc = raise_exc
        self.calls: list[dict[str, Any]] = []
        self.closed = False
        self.close_calls = 0

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.raise_exc is not None:
            raise self.raise_exc
        return _FakeResponse(self.status, self.text)

    async def close(self) -> None:
        self.close_calls += 1
        self.closed = True


def _config(**overrides: Any) -> ClientConfig:
    return ClientConfig(host="192.168.1.20", secret="s3cret", **overrides)


@pytest.mark.asyncio
async def test_get_sends_secret_header_to_hub_url() -> None:
    session = _FakeSession(text='{"Room": []}')
    transport = HubTransport(_config(), session=session)

    outcome = await transport.async_get("domain")

    assert outcome.ok
    assert outcome.text == '{"Room": []}'
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://192.168.1.20/domain"
    assert call["headers"][SECRET_HEADER] == "s3cret"
    assert call["data"] is None


@pytest.mark.asyncio
async def test_patch_encodes_objects_as_json_and_sends_strings_verbatim() -> None:
    session = _FakeSession()
    transport = HubTransport(_config(), session=session)

    await transport.async_patch("rooms/7", {"Mode": "Manual"})
    await transport.async_patch("devices/5/DeviceLockEnabled", "true")

    assert session.calls[0]["data"] == '{"Mode":"Manual"}'
    assert session.calls[0]["headers"]["Content-Type"] == "application/json"
    assert session.calls[1]["data"] == "true"
    assert session.calls[1]["url"] == "http://192.168.1.20/devices/5/DeviceLockEnabled"


@pytest.mark.asyncio
async def test_non_200_status_is_returned_not_raised() -> None:
    transport = HubTransport(_config(), session=_FakeSession(status=401, text=""))

    outcome = await transport.async_get("domain")

    assert outcome.status == 401
    assert not outcome.ok
    assert outcome.error is None


@pytest.mark.asyncio
async def test_timeout_becomes_timed_out_outcome() -> None:
    transport = HubTransport(_config(), session=_FakeSession(raise_exc=asyncio.TimeoutError()))

    outcome = await transport.async_get("domain")

    assert outcome.timed_out
    assert outcome.status is None
    assert isinstance(outcome.error, asyncio.TimeoutError)


@pytest.mark.asyncio
async def test_client_error_becomes_error_outcome() -> None:
    exc = aiohttp.ClientConnectionError("connection refused")
    transport = HubTransport(_config(), session=_FakeSession(raise_exc=exc))

    outcome = await transport.async_patch("system", {"EcoModeEnabled": True})

    assert outcome.error is exc
    assert not outcome.timed_out
    assert outcome.method == "PATCH"


@pytest.mark.asyncio
async def test_host_with_trailing_slash_is_normalised() -> None:
    session = _FakeSession()
    transport = HubTransport(ClientConfig(host=" hub.local/ ", secret="x"), session=session)

    await transport.async_get("/station")

    assert transport.base_url == "http://hub.local"
    assert session.calls[0]["url"] == "http://hub.local/station"


@pytest.mark.asyncio
async def test_close_leaves_borrowed_session_open() -> None:
    session = _FakeSession()
    transport = HubTransport(_config(), session=session)

    await transport.async_close()

    assert session.close_calls == 0


@pytest.mark.asyncio
async def test_concurrent_requests_are_capped_by_connection_limit() -> None:
    in_flight = 0
    peak = 0
    release = asyncio.Event()

    class _SlowResponse(_FakeResponse):
        async def read(self) -> bytes:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await release.wait()
            in_flight -= 1
            return b"{}"

    class _SlowSession(_FakeSession):
        def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
            self.calls.append({"method": method, "url": url, **kwargs})
            return _SlowResponse(200, "{}")

    transport = HubTransport(_config(connection_limit=2), session=_SlowSession())
    tasks = [asyncio.create_task(transport.async_get("domain")) for _ in range(5)]
    for _ in range(10):
        await asyncio.sleep(0)
    assert peak == 2
    release.set()
    outcomes = await asyncio.gather(*tasks)

    assert all(o.ok for o in outcomes)
    assert peak == 2


@pytest.mark.asyncio
async def test_body_that_is_not_valid_utf8_yields_no_text() -> None:
    transport = HubTransport(_config(), session=_FakeSession(text=b'{"Room":[{"id":1,"Name":"\xff"}]}'))

    outcome = await transport.async_get("domain")

    assert outcome.status == 200
    assert outcome.text is None
    assert outcome.error is None


@pytest.mark.asyncio
async def test_undecodable_domain_body_is_a_failed_cycle_and_refresh_keeps_running() -> None:
    class _BodiesSession(_FakeSession):
        def __init__(self, *bodies: bytes) -> None:
            super().__init__()
            self.bodies = list(bodies)

        def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
            self.calls.append({"method": method, "url": url, **kwargs})
            body = self.bodies.pop(0) if len(self.bodies) > 1 else self.bodies[0]
            return _FakeResponse(200, body)

    session = _BodiesSession(b'{"Room":[{"id":1,"Name":"\xff"}]}', b'{"Room":[{"id":1,"Name":"Hall"}]}')
    config = _config()
    client = WiserClient(config, transport=HubTransport(config, session=session))

    client.scheduler.start(0.02)
    await asyncio.sleep(0.1)
    await client.async_stop()

    assert len(session.calls) >= 2
    assert client.get_room("hall") is not None
    assert client.scheduler.cycles >= 1
