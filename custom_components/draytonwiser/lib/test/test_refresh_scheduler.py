import asyncio
import json
from datetime import datetime, timedelta, timezone

import pytest

from wiserheat_lib.listeners import ListenerRegistry
from wiserheat_lib.scheduler import RefreshScheduler
from wiserheat_lib.store import SnapshotStore
from wiserheat_lib.types import TransportOutcome

BODY = json.dumps({"Room": [{"id": 7, "Name": "Lounge"}]})


def _ok(text: str = BODY) -> TransportOutcome:
    return TransportOutcome(method="GET", path="domain", status=200, text=text)


class _ScriptedFetch:
    def __init__(self, *outcomes: TransportOutcome) -> None:
        self._outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self) -> TransportOutcome:
        self.calls += 1
        if self._outcomes:
            return self._outcomes.pop(0)
        return _ok()


class _Clock:
    def __init__(self) -> None:
        self._now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


def _scheduler(fetch, *, outcomes=None):
    store = SnapshotStore()
    registry = ListenerRegistry()
    sink = outcomes.append if outcomes is not None else None
    return RefreshScheduler(fetch, store, registry, on_outcome=sink, now=_Clock()), store, registry


@pytest.mark.asyncio
async def test_successful_cycle_publishes_and_notifies_once() -> None:
    scheduler, store, registry = _scheduler(_ScriptedFetch())
    calls = []
    registry.register(lambda: calls.append(store.read()))

    assert await scheduler.async_trigger_once() is True

    assert store.read() is not None
    assert store.read().rooms[0].name == "Lounge"
    assert calls == [store.read()]
    assert scheduler.cycles == 1
    assert scheduler.last_refresh_success is True


@pytest.mark.asyncio
async def test_failed_cycles_keep_previous_snapshot_and_skip_notify() -> None:
    outcomes: list[TransportOutcome] = []
    fetch = _ScriptedFetch(
        _ok(),
        TransportOutcome(method="GET", path="domain", status=500, text="error"),
        TransportOutcome(method="GET", path="domain", error=asyncio.TimeoutError(), timed_out=True),
        _ok("{not json"),
        _ok(),
    )
    scheduler, store, registry = _scheduler(fetch, outcomes=outcomes)
    notified = []
    registry.register(lambda: notified.append(1))

    results = [await scheduler.async_trigger_once() for _ in range(5)]

    assert results == [True, False, False, False, True]
    assert len(notified) == 2
    assert store.read().version == 2
    assert [outcome.status for outcome in outcomes] == [200, 500, None, 200, 200]
    assert scheduler.last_refresh_success is True


@pytest.mark.asyncio
async def test_parse_failure_does_not_clear_store() -> None:
    scheduler, store, _ = _scheduler(_ScriptedFetch(_ok(), _ok("[]")))

    await scheduler.async_trigger_once()
    held = store.read()
    assert await scheduler.async_trigger_once() is False

    assert store.read() is held
    assert scheduler.last_refresh_success is False


@pytest.mark.asyncio
async def test_fetch_timestamps_never_decrease() -> None:
    scheduler, store, registry = _scheduler(_ScriptedFetch())
    seen = []
    registry.register(lambda: seen.append(store.read()))

    await asyncio.gather(*(scheduler.async_trigger_once() for _ in range(5)))

    stamps = [snapshot.fetched_at for snapshot in seen]
    assert len(stamps) == 5
    assert stamps == sorted(stamps)
    assert [snapshot.version for snapshot in seen] == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_overlapping_triggers_are_serialized() -> None:
    active = 0
    peak = 0

    async def _fetch() -> TransportOutcome:
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return _ok()

    scheduler, _, _ = _scheduler(_fetch)

    await asyncio.gather(*(scheduler.async_trigger_once() for _ in range(3)))

    assert peak == 1


@pytest.mark.asyncio
async def test_periodic_refresh_runs_immediately_and_repeats() -> None:
    fetch = _ScriptedFetch()
    scheduler, store, registry = _scheduler(fetch)
    notified = []
    registry.register(lambda: notified.append(1))

    scheduler.start(0.02)
    await asyncio.sleep(0.07)
    await scheduler.async_stop()
    calls_at_stop = fetch.calls
    await asyncio.sleep(0.05)

    assert calls_at_stop >= 2
    assert fetch.calls == calls_at_stop
    assert len(notified) == scheduler.cycles
    assert scheduler.running is False


@pytest.mark.asyncio
async def test_start_rejects_non_positive_interval() -> None:
    scheduler, _, _ = _scheduler(_ScriptedFetch())

    with pytest.raises(ValueError):
        scheduler.start(0)


@pytest.mark.asyncio
async def test_in_flight_fetch_is_discarded_after_stop() -> None:
    gate = asyncio.Event()
    outcomes: list[TransportOutcome] = []

    async def _fetch() -> TransportOutcome:
        await gate.wait()
        return _ok()

    scheduler, store, registry = _scheduler(_fetch, outcomes=outcomes)
    notified = []
    registry.register(lambda: notified.append(1))

    task = asyncio.create_task(scheduler.async_trigger_once())
    await asyncio.sleep(0)
    await scheduler.async_stop()
    gate.set()

    assert await task is False
    assert store.read() is None
    assert notified == []
    assert outcomes == []


@pytest.mark.asyncio
async def test_delayed_refresh_waits_for_settle_delay() -> None:
    fetch = _ScriptedFetch()
    scheduler, store, _ = _scheduler(fetch)

    scheduler.schedule_refresh(0.05)
    await asyncio.sleep(0.01)
    assert fetch.calls == 0

    await asyncio.sleep(0.08)
    assert fetch.calls == 1
    assert store.read() is not None


@pytest.mark.asyncio
async def test_stop_cancels_pending_delayed_refresh() -> None:
    fetch = _ScriptedFetch()
    scheduler, store, _ = _scheduler(fetch)

    scheduler.schedule_refresh(0.05)
    await scheduler.async_stop()
    await asyncio.sleep(0.08)

    assert fetch.calls == 0
    assert store.read() is None
    assert await scheduler.async_trigger_once() is False


@pytest.mark.asyncio
async def test_scheduler_restarts_after_stop() -> None:
    fetch = _ScriptedFetch()
    scheduler, store, _ = _scheduler(fetch)

    scheduler.start(10)
    await asyncio.sleep(0.01)
    await scheduler.async_stop()
    scheduler.start(10)
    await asyncio.sleep(0.01)

    assert scheduler.running is True
    assert store.read().version == 2
    await scheduler.async_stop()


@pytest.mark.asyncio
async def test_periodic_refresh_survives_an_unexpected_fetch_error() -> None:
    calls = 0

    async def _fetch() -> TransportOutcome:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("boom")
        return _ok()

    scheduler, store, _registry = _scheduler(_fetch)

    scheduler.start(0.02)
    await asyncio.sleep(0.07)
    assert scheduler.running is True
    await scheduler.async_stop()

    assert calls >= 2
    assert store.read() is not None
