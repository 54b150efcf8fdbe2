"""Registry of zero-argument callbacks fired once per successful refresh."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

Listener = Callable[[], None]


class ListenerRegistry:
    """
    Ordered set of listeners.

    Register, unregister and the copy taken for a broadcast are mutually
    exclusive. Listeners themselves run outside the lock, so a slow listener
    delays the broadcast but never blocks registration or a snapshot publish.
    """

    def __init__(self, *, name: str = "refresh", logger: Optional[logging.Logger] = None) -> None:
        self._name = name
        self._log = logger or logging.getLogger(__name__)
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()
        self._error_types: set[type] = set()

    def register(self, listener: Listener) -> bool:
        """Add ``listener`` unless already present; return True if it was added."""
        with self._lock:
            if listener in self._listeners:
                return False
            self._listeners.append(listener)
            return True

    def unregister(self, listener: Listener) -> bool:
        """Remove ``listener`` if present; return True if it was removed."""
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                return False
            return True

    def notify_all(self) -> int:
        """Call every registered listener in registration order; return the count called."""
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception as exc:  # noqa: BLE001
                # Log the first failure of each type with a traceback, then stay quiet.
                if type(exc) not in self._error_types:
                    self._error_types.add(type(exc))
                    self._log.warning("%s listener %r raised", self._name, listener, exc_info=True)
                else:
                    self._log.debug("%s listener %r raised: %s", self._name, listener, exc)
        return len(listeners)

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def __contains__(self, listener: object) -> bool:
        with self._lock:
            return listener in self._listeners
