"""Map transport outcomes to bridge connectivity."""

from __future__ import annotations

from .types import ConnectivityState, ConnectivityStatus, TransportOutcome

HTTP_OK = 200
HTTP_UNAUTHORIZED = 401


def classify(outcome: TransportOutcome) -> ConnectivityState:
    """
    Return the connectivity state implied by one transport outcome.

    HTTP 200 is online, HTTP 401 is a configuration error (the shared secret is
    wrong and retrying will not help), and everything else, including timeouts
    and network failures, is a communication error.
    """
    if outcome.status == HTTP_OK:
        return ConnectivityState.ONLINE
    if outcome.status == HTTP_UNAUTHORIZED:
        return ConnectivityState.OFFLINE_CONFIGURATION_ERROR
    return ConnectivityState.OFFLINE_COMMUNICATION_ERROR


def describe(outcome: TransportOutcome) -> ConnectivityStatus:
    """Pair the classified state with a detail message for offline states."""
    state = classify(outcome)
    if state is ConnectivityState.ONLINE:
        return ConnectivityStatus(state)
    if state is ConnectivityState.OFFLINE_CONFIGURATION_ERROR:
        return ConnectivityStatus(state, "Invalid authorization token")
    if outcome.timed_out:
        return ConnectivityStatus(state, "Heat hub did not respond in time")
    if outcome.status is not None:
        return ConnectivityStatus(state, f"Heat hub returned HTTP {outcome.status}")
    if outcome.error is not None:
        return ConnectivityStatus(state, str(outcome.error) or type(outcome.error).__name__)
    return ConnectivityStatus(state, "Heat hub request failed")
