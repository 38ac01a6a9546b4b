import pytest

from core.events.domain_events import domain_events
from core.events.signal import Signal
from core.exceptions import HardCapExceeded


@pytest.fixture
def changed():
    seen: list[str] = []
    domain_events.allocation_changed.connect(seen.append)
    try:
        yield seen
    finally:
        domain_events.allocation_changed.disconnect(seen.append)


def test_domain_event_signal_connect_emit_disconnect():
    seen: list[str] = []

    def _handler(resource_id: str) -> None:
        seen.append(resource_id)

    domain_events.allocation_changed.connect(_handler)
    domain_events.allocation_changed.emit("r-1")
    domain_events.allocation_changed.disconnect(_handler)
    domain_events.allocation_changed.emit("r-2")

    assert seen == ["r-1"]


def test_signal_emit_prunes_dead_weak_callbacks():
    signal: Signal[str] = Signal("test")
    seen: list[str] = []

    class _DeadProxyCallback:
        def __init__(self) -> None:
            self.calls = 0

        def __call__(self, _payload: str) -> None:
            self.calls += 1
            raise ReferenceError("weakly-referenced object no longer exists")

    dead = _DeadProxyCallback()

    def _ok(payload: str) -> None:
        seen.append(payload)

    signal.connect(dead)
    signal.connect(_ok)

    signal.emit("r-1")
    signal.emit("r-2")

    assert dead.calls == 1
    assert seen == ["r-1", "r-2"]


def test_signal_emit_keeps_subscriber_errors_visible():
    signal: Signal[str] = Signal("test")

    def _boom(_payload: str) -> None:
        raise RuntimeError("boom")

    signal.connect(_boom)

    with pytest.raises(RuntimeError, match="boom"):
        signal.emit("x")


def test_allocation_writes_emit_change_events(services, book, changed):
    svc = services["allocation_service"]
    allocation = book("SOFT", 20).allocation
    svc.update_allocation(allocation.id, allocation_percentage=25)
    svc.remove_allocation(allocation.id)

    assert changed == ["res-1", "res-1", "res-1"]


def test_rejected_booking_emits_nothing(book, changed):
    book("HARD", 95)
    with pytest.raises(HardCapExceeded):
        book("HARD", 95)

    assert changed == ["res-1"]


def test_policy_change_emits_workspace_id(services):
    seen: list[str] = []
    domain_events.policy_changed.connect(seen.append)
    try:
        services["policy_resolver"].upsert_policy("ws-9", warning=60)
    finally:
        domain_events.policy_changed.disconnect(seen.append)

    assert seen == ["ws-9"]
