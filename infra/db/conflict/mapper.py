from __future__ import annotations

from core.models import ResourceConflict
from infra.db.models import ResourceConflictORM


def conflict_to_orm(conflict: ResourceConflict) -> ResourceConflictORM:
    return ResourceConflictORM(
        id=conflict.id,
        organization_id=conflict.organization_id,
        workspace_id=conflict.workspace_id,
        resource_id=conflict.resource_id,
        allocation_id=conflict.allocation_id,
        window_start=conflict.window_start,
        window_end=conflict.window_end,
        total_load=conflict.total_load,
        classification=conflict.classification,
        severity=conflict.severity,
        resolved=conflict.resolved,
        resolved_at=conflict.resolved_at,
        resolved_by=conflict.resolved_by,
        resolution_note=conflict.resolution_note,
        created_at=conflict.created_at,
    )


def conflict_from_orm(obj: ResourceConflictORM) -> ResourceConflict:
    return ResourceConflict(
        id=obj.id,
        organization_id=obj.organization_id,
        workspace_id=obj.workspace_id,
        resource_id=obj.resource_id,
        allocation_id=obj.allocation_id,
        window_start=obj.window_start,
        window_end=obj.window_end,
        total_load=obj.total_load,
        classification=obj.classification,
        severity=obj.severity,
        resolved=obj.resolved,
        resolved_at=obj.resolved_at,
        resolved_by=obj.resolved_by,
        resolution_note=obj.resolution_note,
        created_at=obj.created_at,
    )


__all__ = ["conflict_to_orm", "conflict_from_orm"]
