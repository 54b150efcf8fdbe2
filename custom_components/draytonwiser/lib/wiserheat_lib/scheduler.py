"""
wiserheat_lib/scheduler.py

Periodic and on-demand refresh of the domain snapshot.

A refresh cycle is fetch -> parse -> publish -> notify, run as one phase under
an asyncio lock so overlapping triggers queue up instead of racing. Failures
end the cycle early and leave the published snapshot untouched; the next
periodic tick is the retry.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
import time
from typing import Awaitable, Callable, Optional

from .domain import parse_domain
from .errors import WiserParseError
from .listeners import ListenerRegistry
from .store import SnapshotStore
from .types import TransportOutcome

Fetch = Callable[[], Awaitable[TransportOutcome]]
OutcomeSink = Callable[[TransportOutcome], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RefreshScheduler:
    """Drive refresh cycles for one snapshot store."""

    def __init__(
        self,
        fetch: Fetch,
        store: SnapshotStore,
        registry: ListenerRegistry,
        *,
        on_outcome: Optional[OutcomeSink] = None,
        now: Callable[[], datetime] = _utcnow,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._fetch = fetch
        self._store = store
        self._registry = registry
        self._on_outcome = on_outcome
        self._now = now
        self._log = logger or logging.getLogger(__name__)
        self._cycle_lock = asyncio.Lock()
        self._generation = 0
        self._closed = False
        self._stop_event = asyncio.Event()
        self._periodic_task: Optional[asyncio.Task[None]] = None
        self._delayed_tasks: set[asyncio.Task[None]] = set()
        self._cycles = 0
        self._last_refresh_success: Optional[bool] = None

    @property
    def running(self) -> bool:
        return self._periodic_task is not None and not self._periodic_task.done()

    @property
    def cycles(self) -> int:
        """Number of successful refresh cycles."""
        return self._cycles

    @property
    def last_refresh_success(self) -> Optional[bool]:
        return self._last_refresh_success

    def start(self, interval: float) -> None:
        """Run a cycle now and then every ``interval`` seconds until stopped."""
        if self.running:
            return
        if interval <= 0:
            raise ValueError("refresh interval must be positive")
        self._generation += 1
        self._closed = False
        self._stop_event = asyncio.Event()
        self._periodic_task = asyncio.get_running_loop().create_task(
            self._async_run_periodic(interval, self._generation, self._stop_event),
            name="wiserheat-refresh",
        )

    async def async_trigger_once(self) -> bool:
        """Run one cycle immediately; return True if a snapshot was published."""
        return await self._async_cycle(self._generation)

    def schedule_refresh(self, delay: float) -> None:
        """Run one cycle after ``delay`` seconds without touching the periodic cadence."""
        if self._closed:
            return
        task = asyncio.get_running_loop().create_task(
            self._async_run_delayed(delay, self._generation, self._stop_event),
            name="wiserheat-settle-refresh",
        )
        self._delayed_tasks.add(task)
        task.add_done_callback(self._delayed_tasks.discard)

    async def async_stop(self) -> None:
        """
        Stop periodic and delayed refreshes.

        Waiting tasks wake and exit. A cycle whose fetch is already in flight is
        allowed to finish, but its result is discarded.
        """
        self._closed = True
        self._generation += 1
        self._stop_event.set()
        tasks = list(self._delayed_tasks)
        if self._periodic_task is not None:
            tasks.append(self._periodic_task)
            self._periodic_task = None
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._delayed_tasks.clear()

    async def _async_run_periodic(
        self, interval: float, generation: int, stop_event: asyncio.Event
    ) -> None:
        while generation == self._generation:
            self._log.debug("Refreshing domain")
            try:
                await self._async_cycle(generation)
            except Exception:  # noqa: BLE001
                self._last_refresh_success = False
                self._log.exception("Domain refresh cycle failed")
            if await _async_wait_stopped(stop_event, interval):
                return

    async def _async_run_delayed(
        self, delay: float, generation: int, stop_event: asyncio.Event
    ) -> None:
        if await _async_wait_stopped(stop_event, delay):
            return
        try:
            await self._async_cycle(generation)
        except Exception:  # noqa: BLE001
            self._last_refresh_success = False
            self._log.exception("Delayed domain refresh failed")

    async def _async_cycle(self, generation: int) -> bool:
        if self._closed or generation != self._generation:
            return False
        async with self._cycle_lock:
            if generation != self._generation:
                return False
            start = time.monotonic()
            outcome = await self._fetch()
            if generation != self._generation:
                self._log.debug("Discarding domain fetch completed after stop")
                return False
            if self._on_outcome is not None:
                self._on_outcome(outcome)
            if not outcome.ok:
                self._last_refresh_success = False
                self._log.debug(
                    "Domain refresh failed: status=%s error=%s",
                    outcome.status,
                    outcome.error,
                )
                return False
            try:
                snapshot = parse_domain(outcome.text, self._now())
            except WiserParseError as err:
                self._last_refresh_success = False
                self._log.warning("Could not parse domain body: %s", err)
                return False
            published = self._store.publish(snapshot)
            if published is None:
                return False
            self._cycles += 1
            self._last_refresh_success = True
            notified = self._registry.notify_all()
            self._log.debug(
                "Published domain snapshot v%s in %.2fs (%s listeners)",
                published.version,
                time.monotonic() - start,
                notified,
            )
            return True


async def _async_wait_stopped(stop_event: asyncio.Event, delay: float) -> bool:
    """Sleep for ``delay`` seconds; return True early if the stop event fires."""
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=max(0.0, delay))
    except asyncio.TimeoutError:
        return False
    return True
