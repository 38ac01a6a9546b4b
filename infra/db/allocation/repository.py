from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.interfaces import AllocationStore
from core.domain.enums import LOAD_BEARING_TYPES
from core.models import ResourceAllocation
from infra.db.allocation.mapper import (
    allocation_from_orm,
    allocation_to_orm,
    allocation_update_values,
)
from infra.db.models import ResourceAllocationORM, ResourceBookingLockORM
from infra.db.optimistic import update_with_version_check


class SqlAlchemyAllocationStore(AllocationStore):
    def __init__(self, session: Session):
        self.session = session

    def add(self, allocation: ResourceAllocation) -> None:
        self.session.add(allocation_to_orm(allocation))
        self.session.flush()

    def update(self, allocation: ResourceAllocation, *, expected_version: int) -> int:
        return update_with_version_check(
            self.session,
            ResourceAllocationORM,
            allocation.id,
            expected_version,
            allocation_update_values(allocation),
            not_found_message="Resource allocation not found.",
            stale_message="Resource allocation was updated by another user.",
            not_found_code="ALLOCATION_NOT_FOUND",
            extra_criteria=(ResourceAllocationORM.deleted_at.is_(None),),
        )

    def get(self, allocation_id: str, *, include_deleted: bool = False) -> Optional[ResourceAllocation]:
        stmt = select(ResourceAllocationORM).where(ResourceAllocationORM.id == allocation_id)
        if not include_deleted:
            stmt = stmt.where(ResourceAllocationORM.deleted_at.is_(None))
        obj = self.session.execute(stmt).scalar_one_or_none()
        return allocation_from_orm(obj) if obj else None

    def list_overlapping(
        self,
        resource_id: str,
        window_start: date,
        window_end: date,
        *,
        exclude_allocation_id: str | None = None,
    ) -> List[ResourceAllocation]:
        stmt = (
            select(ResourceAllocationORM)
            .where(
                ResourceAllocationORM.resource_id == resource_id,
                ResourceAllocationORM.deleted_at.is_(None),
                ResourceAllocationORM.type.in_(sorted(LOAD_BEARING_TYPES)),
                ResourceAllocationORM.start_date <= window_end,
                ResourceAllocationORM.end_date >= window_start,
            )
            .execution_options(populate_existing=True)
        )
        if exclude_allocation_id is not None:
            stmt = stmt.where(ResourceAllocationORM.id != exclude_allocation_id)
        rows = self.session.execute(stmt).scalars().all()
        return [allocation_from_orm(row) for row in rows]

    def list_by_resource(self, resource_id: str) -> List[ResourceAllocation]:
        stmt = (
            select(ResourceAllocationORM)
            .where(
                ResourceAllocationORM.resource_id == resource_id,
                ResourceAllocationORM.deleted_at.is_(None),
            )
            .order_by(ResourceAllocationORM.start_date, ResourceAllocationORM.created_at)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [allocation_from_orm(row) for row in rows]

    def list_by_project(self, project_id: str) -> List[ResourceAllocation]:
        stmt = (
            select(ResourceAllocationORM)
            .where(
                ResourceAllocationORM.project_id == project_id,
                ResourceAllocationORM.deleted_at.is_(None),
            )
            .order_by(ResourceAllocationORM.start_date, ResourceAllocationORM.created_at)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [allocation_from_orm(row) for row in rows]

    def soft_delete(self, allocation_id: str, deleted_at: datetime) -> bool:
        stmt = (
            update(ResourceAllocationORM)
            .where(
                ResourceAllocationORM.id == allocation_id,
                ResourceAllocationORM.deleted_at.is_(None),
            )
            .values(
                deleted_at=deleted_at,
                updated_at=deleted_at,
                version=ResourceAllocationORM.version + 1,
            )
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def lock_resource(self, resource_id: str) -> None:
        # SQLite ignores FOR UPDATE; an UPDATE takes its RESERVED lock (a row lock elsewhere).
        now = datetime.now(timezone.utc)
        touch = (
            update(ResourceBookingLockORM)
            .where(ResourceBookingLockORM.resource_id == resource_id)
            .values(locked_at=now)
        )
        if self.session.execute(touch).rowcount == 1:
            return
        self.session.add(ResourceBookingLockORM(resource_id=resource_id, created_at=now, locked_at=now))
        try:
            self.session.flush()
        except IntegrityError:
            # another writer created the row first; the section has not written yet
            self.session.rollback()
            self.session.execute(touch)


__all__ = ["SqlAlchemyAllocationStore"]
