"""
wiserheat_lib/store.py

Holder for the latest published domain snapshot.

Principles:
- Replace, never mutate: publish swaps one reference to a fully built snapshot.
- Reads are a single attribute load and never wait on a publish.
- Publishes are serialized so versions and fetch timestamps only move forward.
"""

from __future__ import annotations

from dataclasses import replace
import logging
import threading
from typing import Optional

from .types import DomainSnapshot


class SnapshotStore:
    """Single source of truth for the hub's domain state."""

    def __init__(self, *, logger: Optional[logging.Logger] = None) -> None:
        self._log = logger or logging.getLogger(__name__)
        self._snapshot: Optional[DomainSnapshot] = None
        self._publish_lock = threading.Lock()

    def read(self) -> Optional[DomainSnapshot]:
        """Return the latest snapshot, or None if nothing was ever published."""
        return self._snapshot

    def publish(self, snapshot: DomainSnapshot) -> Optional[DomainSnapshot]:
        """
        Atomically replace the held snapshot and return the stored value.

        The stored copy is stamped with the next version number. A snapshot
        fetched before the one already held is refused and None is returned.
        """
        with self._publish_lock:
            current = self._snapshot
            if (
                current is not None
                and current.fetched_at is not None
                and snapshot.fetched_at is not None
                and snapshot.fetched_at < current.fetched_at
            ):
                self._log.debug(
                    "Dropping snapshot fetched at %s; held snapshot is newer (%s)",
                    snapshot.fetched_at,
                    current.fetched_at,
                )
                return None
            version = current.version + 1 if current is not None else 1
            published = replace(snapshot, version=version)
            self._snapshot = published
            return published

    def clear(self) -> None:
        """Forget the held snapshot (client teardown only)."""
        with self._publish_lock:
            self._snapshot = None
