from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError
from core.interfaces import ConflictRepository
from core.models import ConflictClassification, ResourceAllocation, ResourceConflict
from core.services.allocation.models import BookingPreview
from core.services.audit.helpers import record_audit
from core.services.auth.authorization import CONFLICT_MANAGE, require_permission
from core.services.auth.session import UserSessionContext

logger = logging.getLogger(__name__)

# Tiers at which an accepted booking leaves an overbooked window behind.
OVERBOOKED_TIERS = frozenset(
    {
        ConflictClassification.REQUIRES_JUSTIFICATION,
        ConflictClassification.REQUIRES_APPROVAL,
    }
)

LOAD_RELIEVED_NOTE = "Load dropped below the overbooked band."
ALLOCATION_REMOVED_NOTE = "Allocation removed."


def conflict_for_booking(
    allocation: ResourceAllocation,
    preview: BookingPreview,
) -> ResourceConflict | None:
    if preview.skipped or preview.classification not in OVERBOOKED_TIERS:
        return None
    return ResourceConflict.create(
        organization_id=allocation.organization_id,
        workspace_id=allocation.workspace_id,
        resource_id=allocation.resource_id,
        allocation_id=allocation.id,
        window_start=allocation.start_date,
        window_end=allocation.end_date,
        total_load=preview.projected_total,
        classification=preview.classification,
    )


def _close(conflict: ResourceConflict, *, resolved_by: str | None, note: str | None) -> None:
    conflict.resolved = True
    conflict.resolved_at = datetime.now(timezone.utc)
    conflict.resolved_by = resolved_by
    conflict.resolution_note = (note or "").strip() or None


def sync_booking_conflict(
    conflict_repo: ConflictRepository,
    allocation: ResourceAllocation,
    preview: BookingPreview,
    *,
    resolved_by: str | None = None,
) -> tuple[ResourceConflict | None, bool]:
    """
    Keep at most one open conflict per allocation.

    Returns ``(conflict, created)``: a fresh row when the booking newly lands in the
    overbooked band, the open row refreshed in place when it stays there, or the open
    row closed when it leaves. ``(None, False)`` when nothing changed.
    """
    current = conflict_repo.find_open_for_allocation(allocation.id)
    fresh = conflict_for_booking(allocation, preview)
    if fresh is None:
        if current is None:
            return None, False
        _close(current, resolved_by=resolved_by, note=LOAD_RELIEVED_NOTE)
        conflict_repo.update(current)
        return current, False
    if current is None:
        conflict_repo.add(fresh)
        return fresh, True

    current.window_start = fresh.window_start
    current.window_end = fresh.window_end
    current.total_load = fresh.total_load
    current.classification = fresh.classification
    current.severity = fresh.severity
    conflict_repo.update(current)
    return current, False


def close_allocation_conflicts(
    conflict_repo: ConflictRepository,
    allocation_id: str,
    *,
    resolved_by: str | None = None,
) -> ResourceConflict | None:
    current = conflict_repo.find_open_for_allocation(allocation_id)
    if current is None:
        return None
    _close(current, resolved_by=resolved_by, note=ALLOCATION_REMOVED_NOTE)
    conflict_repo.update(current)
    return current

class ConflictLogService:
    def __init__(
        self,
        session: Session,
        conflict_repo: ConflictRepository,
        user_session: UserSessionContext | None = None,
        audit_service=None,
    ):
        self._session = session
        self._conflict_repo = conflict_repo
        self._user_session = user_session
        self._audit_service = audit_service

    def list_conflicts(
        self,
        *,
        workspace_id: str | None = None,
        resource_id: str | None = None,
        resolved: bool | None = None,
        window_start: date | None = None,
        window_end: date | None = None,
    ) -> List[ResourceConflict]:
        return self._conflict_repo.list(
            workspace_id=workspace_id,
            resource_id=resource_id,
            resolved=resolved,
            window_start=window_start,
            window_end=window_end,
        )

    def resolve_conflict(self, conflict_id: str, note: str | None = None) -> ResourceConflict:
        require_permission(self._user_session, CONFLICT_MANAGE, operation_label="resolve conflict")
        conflict = self._get(conflict_id)
        if conflict.resolved:
            raise BusinessRuleError("Conflict is already resolved.", code="CONFLICT_ALREADY_RESOLVED")

        _close(
            conflict,
            resolved_by=self._user_session.user_id if self._user_session else None,
            note=note,
        )
        self._save(conflict, action="conflict.resolve")
        return conflict

    def reopen_conflict(self, conflict_id: str) -> ResourceConflict:
        require_permission(self._user_session, CONFLICT_MANAGE, operation_label="reopen conflict")
        conflict = self._get(conflict_id)
        if not conflict.resolved:
            raise BusinessRuleError("Conflict is not resolved.", code="CONFLICT_NOT_RESOLVED")

        conflict.resolved = False
        conflict.resolved_at = None
        conflict.resolved_by = None
        conflict.resolution_note = None
        self._save(conflict, action="conflict.reopen")
        return conflict

    def _get(self, conflict_id: str) -> ResourceConflict:
        conflict = self._conflict_repo.get(conflict_id)
        if conflict is None:
            raise NotFoundError("Conflict not found.", code="CONFLICT_NOT_FOUND")
        return conflict

    def _save(self, conflict: ResourceConflict, *, action: str) -> None:
        try:
            self._conflict_repo.update(conflict)
            self._session.commit()
            record_audit(
                self,
                action=action,
                entity_type="resource_conflict",
                entity_id=conflict.id,
                workspace_id=conflict.workspace_id,
                resource_id=conflict.resource_id,
                details={
                    "severity": conflict.severity.value,
                    "total_load": conflict.total_load,
                    "resolved": conflict.resolved,
                },
            )
        except Exception:
            self._session.rollback()
            raise
        logger.info("Conflict %s %s", conflict.id, "resolved" if conflict.resolved else "reopened")
        domain_events.conflict_changed.emit(conflict.id)


__all__ = [
    "ConflictLogService",
    "conflict_for_booking",
    "sync_booking_conflict",
    "close_allocation_conflicts",
    "OVERBOOKED_TIERS",
]
