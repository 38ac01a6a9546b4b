from __future__ import annotations

from typing import Any, List

from sqlalchemy.orm import Session

from core.interfaces import AuditLogRepository
from core.models import AuditLogEntry
from core.services.auth.session import UserSessionContext


class AuditService:
    def __init__(
        self,
        session: Session,
        audit_repo: AuditLogRepository,
        user_session: UserSessionContext | None = None,
    ):
        self._session = session
        self._audit_repo = audit_repo
        self._user_session = user_session

    def record(
        self,
        *,
        action: str,
        entity_type: str,
        entity_id: str,
        workspace_id: str | None = None,
        resource_id: str | None = None,
        details: dict[str, Any] | None = None,
        commit: bool = False,
    ) -> AuditLogEntry:
        principal = self._user_session.principal if self._user_session else None
        entry = AuditLogEntry.create(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_user_id=principal.user_id if principal else None,
            actor_username=principal.username if principal else None,
            workspace_id=workspace_id,
            resource_id=resource_id,
            details=details or {},
        )
        self._audit_repo.add(entry)
        if commit:
            self._session.commit()
        return entry

    def list_recent(
        self,
        limit: int = 200,
        *,
        workspace_id: str | None = None,
        resource_id: str | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> List[AuditLogEntry]:
        return self._audit_repo.list_recent(
            limit=limit,
            workspace_id=workspace_id,
            resource_id=resource_id,
            entity_type=entity_type,
            entity_id=entity_id,
        )

    def allocation_history(self, allocation_id: str, limit: int = 200) -> List[AuditLogEntry]:
        """Create/update/remove entries of one allocation, newest first."""
        return self.list_recent(limit, entity_type="resource_allocation", entity_id=allocation_id)

    def resource_history(self, resource_id: str, limit: int = 200) -> List[AuditLogEntry]:
        """Every audited booking and conflict change touching a resource, newest first."""
        return self.list_recent(limit, resource_id=resource_id)


__all__ = ["AuditService"]
