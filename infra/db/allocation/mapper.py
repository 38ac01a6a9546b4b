from __future__ import annotations

from core.models import ResourceAllocation
from infra.db.models import ResourceAllocationORM


def allocation_to_orm(allocation: ResourceAllocation) -> ResourceAllocationORM:
    return ResourceAllocationORM(
        id=allocation.id,
        organization_id=allocation.organization_id,
        workspace_id=allocation.workspace_id,
        resource_id=allocation.resource_id,
        project_id=allocation.project_id,
        type=allocation.type,
        booking_source=allocation.booking_source,
        allocation_percentage=allocation.allocation_percentage,
        units_type=allocation.units_type,
        hours_per_week=allocation.hours_per_week,
        start_date=allocation.start_date,
        end_date=allocation.end_date,
        justification=allocation.justification,
        created_by=allocation.created_by,
        created_at=allocation.created_at,
        updated_at=allocation.updated_at,
        deleted_at=allocation.deleted_at,
        version=allocation.version,
    )


def allocation_from_orm(obj: ResourceAllocationORM) -> ResourceAllocation:
    return ResourceAllocation(
        id=obj.id,
        organization_id=obj.organization_id,
        workspace_id=obj.workspace_id,
        resource_id=obj.resource_id,
        project_id=obj.project_id,
        type=obj.type,
        booking_source=obj.booking_source,
        allocation_percentage=obj.allocation_percentage,
        units_type=obj.units_type,
        hours_per_week=obj.hours_per_week,
        start_date=obj.start_date,
        end_date=obj.end_date,
        justification=obj.justification,
        created_by=obj.created_by,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
        deleted_at=obj.deleted_at,
        version=obj.version,
    )


def allocation_update_values(allocation: ResourceAllocation) -> dict:
    return {
        "project_id": allocation.project_id,
        "type": allocation.type,
        "booking_source": allocation.booking_source,
        "allocation_percentage": allocation.allocation_percentage,
        "units_type": allocation.units_type,
        "hours_per_week": allocation.hours_per_week,
        "start_date": allocation.start_date,
        "end_date": allocation.end_date,
        "justification": allocation.justification,
        "updated_at": allocation.updated_at,
    }


__all__ = ["allocation_to_orm", "allocation_from_orm", "allocation_update_values"]
