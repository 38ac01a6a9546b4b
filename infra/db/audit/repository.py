from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.interfaces import AuditLogRepository
from core.models import AuditLogEntry
from infra.db.audit.mapper import audit_from_orm, audit_to_orm
from infra.db.models import AuditLogORM


class SqlAlchemyAuditLogRepository(AuditLogRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, entry: AuditLogEntry) -> None:
        self.session.add(audit_to_orm(entry))

    def list_recent(
        self,
        limit: int = 200,
        *,
        workspace_id: str | None = None,
        resource_id: str | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> List[AuditLogEntry]:
        filters = (
            (AuditLogORM.workspace_id, workspace_id),
            (AuditLogORM.resource_id, resource_id),
            (AuditLogORM.entity_type, entity_type),
            (AuditLogORM.entity_id, entity_id),
        )
        stmt = select(AuditLogORM)
        for column, value in filters:
            if value is not None:
                stmt = stmt.where(column == value)
        stmt = stmt.order_by(AuditLogORM.occurred_at.desc()).limit(max(1, int(limit)))
        rows = self.session.execute(stmt).scalars().all()
        return [audit_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyAuditLogRepository"]
