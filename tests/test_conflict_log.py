from __future__ import annotations

from datetime import date

import pytest

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError
from core.domain import severity_for
from core.models import ConflictClassification, ConflictSeverity
from core.services.allocation.conflicts import ALLOCATION_REMOVED_NOTE, LOAD_RELIEVED_NOTE


@pytest.fixture
def recorded():
    seen: list[str] = []
    domain_events.conflict_recorded.connect(seen.append)
    try:
        yield seen
    finally:
        domain_events.conflict_recorded.disconnect(seen.append)


@pytest.fixture
def changed():
    seen: list[str] = []
    domain_events.conflict_changed.connect(seen.append)
    try:
        yield seen
    finally:
        domain_events.conflict_changed.disconnect(seen.append)


def test_bookings_below_justification_leave_no_conflict(services, book):
    book("HARD", 50)
    book("SOFT", 40)

    assert services["conflict_service"].list_conflicts() == []


def test_justified_overbooking_is_recorded(services, book, recorded):
    book("HARD", 50)
    book("SOFT", 40)
    allocation = book("HARD", 30, justification="Critical project requirement").allocation

    conflicts = services["conflict_service"].list_conflicts(workspace_id="ws-1")
    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert conflict.allocation_id == allocation.id
    assert conflict.resource_id == "res-1"
    assert conflict.total_load == 120.0
    assert conflict.classification == ConflictClassification.REQUIRES_APPROVAL
    assert conflict.severity == ConflictSeverity.MEDIUM
    assert conflict.resolved is False
    assert (conflict.window_start, conflict.window_end) == (date(2026, 3, 2), date(2026, 3, 13))
    assert recorded == [conflict.id]


def test_rejected_booking_records_nothing(services, book):
    book("HARD", 100, justification="launch")
    with pytest.raises(BusinessRuleError):
        book("SOFT", 60, justification="launch")

    conflicts = services["conflict_service"].list_conflicts()
    assert [c.total_load for c in conflicts] == [100.0]


@pytest.mark.parametrize(
    "total, severity",
    [
        (100.0, ConflictSeverity.LOW),
        (110.0, ConflictSeverity.LOW),
        (125.0, ConflictSeverity.MEDIUM),
        (150.0, ConflictSeverity.HIGH),
        (180.0, ConflictSeverity.CRITICAL),
    ],
)
def test_severity_bands(total, severity):
    assert severity_for(total) == severity


def test_resolve_and_reopen_conflict(services, book):
    book("SOFT", 105, justification="quarter close")
    svc = services["conflict_service"]
    conflict = svc.list_conflicts()[0]

    resolved = svc.resolve_conflict(conflict.id, note="  moved QA to next sprint ")
    assert resolved.resolved is True
    assert resolved.resolved_at is not None
    assert resolved.resolution_note == "moved QA to next sprint"
    assert svc.list_conflicts(resolved=False) == []
    assert [c.id for c in svc.list_conflicts(resolved=True)] == [conflict.id]

    with pytest.raises(BusinessRuleError) as excinfo:
        svc.resolve_conflict(conflict.id)
    assert excinfo.value.code == "CONFLICT_ALREADY_RESOLVED"

    reopened = svc.reopen_conflict(conflict.id)
    assert reopened.resolved is False
    assert reopened.resolution_note is None
    assert svc.list_conflicts(resolved=False)[0].id == conflict.id

    with pytest.raises(BusinessRuleError) as excinfo:
        svc.reopen_conflict(conflict.id)
    assert excinfo.value.code == "CONFLICT_NOT_RESOLVED"


def test_unknown_conflict_raises_not_found(services):
    with pytest.raises(NotFoundError) as excinfo:
        services["conflict_service"].resolve_conflict("missing")
    assert excinfo.value.code == "CONFLICT_NOT_FOUND"


def test_list_conflicts_filters_by_window_and_resource(services, book):
    book("SOFT", 100, justification="a", start_date=date(2026, 1, 5), end_date=date(2026, 1, 9))
    book("SOFT", 100, justification="b", start_date=date(2026, 2, 2), end_date=date(2026, 2, 6))
    book("SOFT", 100, justification="c", resource_id="res-2")
    svc = services["conflict_service"]

    january = svc.list_conflicts(window_start=date(2026, 1, 1), window_end=date(2026, 1, 31))
    assert [c.window_start for c in january] == [date(2026, 1, 5)]

    edge = svc.list_conflicts(window_start=date(2026, 1, 9), window_end=date(2026, 2, 2))
    assert len(edge) == 2

    assert [c.resource_id for c in svc.list_conflicts(resource_id="res-2")] == ["res-2"]
    assert [c.window_start for c in svc.list_conflicts(resource_id="res-1")] == [
        date(2026, 1, 5),
        date(2026, 2, 2),
    ]


def test_resolve_and_reopen_emit_conflict_changed(services, book, recorded, changed):
    book("SOFT", 105, justification="quarter close")
    svc = services["conflict_service"]
    conflict = svc.list_conflicts()[0]
    assert recorded == [conflict.id]

    svc.resolve_conflict(conflict.id)
    svc.reopen_conflict(conflict.id)

    assert recorded == [conflict.id]
    assert changed == [conflict.id, conflict.id]


def test_repeated_updates_keep_one_open_conflict_per_allocation(services, book, recorded, changed):
    book("HARD", 50)
    allocation = book("SOFT", 60, justification="integration freeze").allocation
    allocation_service = services["allocation_service"]

    for pct in (61, 62, 63):
        allocation_service.update_allocation(allocation.id, allocation_percentage=pct)

    svc = services["conflict_service"]
    open_conflicts = svc.list_conflicts(resolved=False)
    assert len(open_conflicts) == 1
    conflict = open_conflicts[0]
    assert conflict.allocation_id == allocation.id
    assert conflict.total_load == 113.0
    assert conflict.severity == ConflictSeverity.MEDIUM
    assert recorded == [conflict.id]
    assert changed == [conflict.id] * 3
    assert len(svc.list_conflicts()) == 1


def test_removing_allocation_closes_its_open_conflict(services, book, changed):
    book("HARD", 50)
    allocation = book("SOFT", 60, justification="integration freeze").allocation
    svc = services["conflict_service"]
    conflict = svc.list_conflicts()[0]

    assert services["allocation_service"].remove_allocation(allocation.id) == {"deleted": True}

    assert svc.list_conflicts(resolved=False) == []
    closed = svc.list_conflicts(resolved=True)
    assert [c.id for c in closed] == [conflict.id]
    assert closed[0].resolution_note == ALLOCATION_REMOVED_NOTE
    assert closed[0].resolved_at is not None
    assert changed == [conflict.id]


def test_update_below_the_band_closes_the_conflict(services, book, changed):
    book("HARD", 50)
    allocation = book("SOFT", 60, justification="integration freeze").allocation
    svc = services["conflict_service"]
    conflict = svc.list_conflicts()[0]

    result = services["allocation_service"].update_allocation(allocation.id, allocation_percentage=40)

    assert result.preview.classification == ConflictClassification.WARNING
    assert svc.list_conflicts(resolved=False) == []
    assert svc.list_conflicts(resolved=True)[0].resolution_note == LOAD_RELIEVED_NOTE
    assert changed == [conflict.id]

    # landing back in the band opens a fresh conflict
    services["allocation_service"].update_allocation(allocation.id, allocation_percentage=70)
    reopened = svc.list_conflicts(resolved=False)
    assert len(reopened) == 1
    assert reopened[0].id != conflict.id
    assert reopened[0].total_load == 120.0
