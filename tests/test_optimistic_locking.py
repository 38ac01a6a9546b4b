from __future__ import annotations

import pytest
from sqlalchemy import update

from core.exceptions import ConcurrencyError
from infra.db.models import ResourceAllocationORM


def test_allocation_update_rejects_stale_expected_version(services, book):
    svc = services["allocation_service"]
    allocation = book("SOFT", 30).allocation

    updated = svc.update_allocation(allocation.id, allocation_percentage=35)

    assert updated.allocation.version == 2
    with pytest.raises(ConcurrencyError) as excinfo:
        svc.update_allocation(allocation.id, allocation_percentage=40, expected_version=1)
    assert excinfo.value.code == "STALE_WRITE"
    assert svc.get_allocation(allocation.id).allocation_percentage == 35.0


def test_allocation_update_accepts_current_expected_version(services, book):
    svc = services["allocation_service"]
    allocation = book("SOFT", 30).allocation

    result = svc.update_allocation(allocation.id, allocation_percentage=40, expected_version=1)

    assert result.allocation.version == 2


def test_store_update_detects_concurrent_writer(services, session, book):
    svc = services["allocation_service"]
    allocation = book("SOFT", 30).allocation

    # another writer bumps the row between our read and our write
    session.execute(
        update(ResourceAllocationORM)
        .where(ResourceAllocationORM.id == allocation.id)
        .values(version=ResourceAllocationORM.version + 1)
    )
    session.commit()

    with pytest.raises(ConcurrencyError) as excinfo:
        svc._store.update(allocation, expected_version=allocation.version)
    assert excinfo.value.code == "STALE_WRITE"


def test_store_update_of_deleted_row_is_rejected(services, book):
    svc = services["allocation_service"]
    allocation = book("SOFT", 30).allocation
    svc.remove_allocation(allocation.id)

    with pytest.raises(ConcurrencyError):
        svc._store.update(allocation, expected_version=2)
