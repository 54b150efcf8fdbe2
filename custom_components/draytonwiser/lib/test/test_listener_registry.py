import logging

from wiserheat_lib.listeners import ListenerRegistry


def test_duplicate_registration_is_a_no_op() -> None:
    registry = ListenerRegistry()
    calls = []

    def _listener() -> None:
        calls.append(1)

    assert registry.register(_listener) is True
    assert registry.register(_listener) is False
    assert len(registry) == 1

    registry.notify_all()
    assert calls == [1]


def test_unregister_reports_whether_removed() -> None:
    registry = ListenerRegistry()

    def _listener() -> None:
        pass

    assert registry.unregister(_listener) is False
    registry.register(_listener)
    assert _listener in registry
    assert registry.unregister(_listener) is True
    assert _listener not in registry
    assert registry.notify_all() == 0


def test_notify_runs_in_registration_order() -> None:
    registry = ListenerRegistry()
    order = []
    registry.register(lambda: order.append("a"))
    registry.register(lambda: order.append("b"))
    registry.register(lambda: order.append("c"))

    assert registry.notify_all() == 3
    assert order == ["a", "b", "c"]


def test_listener_exception_does_not_stop_broadcast(caplog) -> None:
    registry = ListenerRegistry()
    seen = []

    def _bad() -> None:
        raise RuntimeError("boom")

    registry.register(_bad)
    registry.register(lambda: seen.append("after"))

    with caplog.at_level(logging.WARNING):
        registry.notify_all()
        registry.notify_all()

    assert seen == ["after", "after"]
    assert sum("raised" in record.getMessage() for record in caplog.records) == 1


def test_listener_may_unregister_itself_during_broadcast() -> None:
    registry = ListenerRegistry()
    calls = []

    def _once() -> None:
        calls.append("once")
        registry.unregister(_once)

    registry.register(_once)
    registry.notify_all()
    registry.notify_all()

    assert calls == ["once"]
    assert len(registry) == 0
