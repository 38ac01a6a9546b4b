from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from core.interfaces import ConflictRepository
from core.models import ResourceConflict
from infra.db.conflict.mapper import conflict_from_orm, conflict_to_orm
from infra.db.models import ResourceConflictORM


class SqlAlchemyConflictRepository(ConflictRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, conflict: ResourceConflict) -> None:
        self.session.add(conflict_to_orm(conflict))

    def update(self, conflict: ResourceConflict) -> None:
        obj = self.session.get(ResourceConflictORM, conflict.id)
        if obj is None:
            raise NotFoundError("Conflict not found.", code="CONFLICT_NOT_FOUND")
        obj.window_start = conflict.window_start
        obj.window_end = conflict.window_end
        obj.total_load = conflict.total_load
        obj.classification = conflict.classification
        obj.severity = conflict.severity
        obj.resolved = conflict.resolved
        obj.resolved_at = conflict.resolved_at
        obj.resolved_by = conflict.resolved_by
        obj.resolution_note = conflict.resolution_note

    def get(self, conflict_id: str) -> Optional[ResourceConflict]:
        obj = self.session.get(ResourceConflictORM, conflict_id)
        return conflict_from_orm(obj) if obj else None

    def find_open_for_allocation(self, allocation_id: str) -> Optional[ResourceConflict]:
        stmt = (
            select(ResourceConflictORM)
            .where(
                ResourceConflictORM.allocation_id == allocation_id,
                ResourceConflictORM.resolved.is_(False),
            )
            .order_by(ResourceConflictORM.created_at.desc())
            .limit(1)
        )
        obj = self.session.execute(stmt).scalar_one_or_none()
        return conflict_from_orm(obj) if obj else None

    def list(
        self,
        *,
        workspace_id: str | None = None,
        resource_id: str | None = None,
        resolved: bool | None = None,
        window_start: date | None = None,
        window_end: date | None = None,
    ) -> List[ResourceConflict]:
        stmt = select(ResourceConflictORM)
        if workspace_id is not None:
            stmt = stmt.where(ResourceConflictORM.workspace_id == workspace_id)
        if resource_id is not None:
            stmt = stmt.where(ResourceConflictORM.resource_id == resource_id)
        if resolved is not None:
            stmt = stmt.where(ResourceConflictORM.resolved == resolved)
        if window_end is not None:
            stmt = stmt.where(ResourceConflictORM.window_start <= window_end)
        if window_start is not None:
            stmt = stmt.where(ResourceConflictORM.window_end >= window_start)
        stmt = stmt.order_by(ResourceConflictORM.window_start, ResourceConflictORM.total_load.desc())
        rows = self.session.execute(stmt).scalars().all()
        return [conflict_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyConflictRepository"]
