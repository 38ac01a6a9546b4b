from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import Optional

from core.domain.enums import AllocationType, BookingSource, UnitsType
from core.domain.identifiers import generate_id


@dataclass(frozen=True)
class ResourceAllocation:
    id: str
    organization_id: str
    workspace_id: str
    resource_id: str
    project_id: str
    allocation_percentage: float
    start_date: date
    end_date: date
    type: AllocationType = AllocationType.SOFT
    booking_source: BookingSource = BookingSource.MANUAL
    justification: Optional[str] = None
    units_type: UnitsType = UnitsType.PERCENT
    hours_per_week: Optional[float] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    version: int = 1

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def overlaps(self, window_start: date, window_end: date) -> bool:
        return self.start_date <= window_end and self.end_date >= window_start

    def soft_deleted(self) -> "ResourceAllocation":
        now = datetime.now(timezone.utc)
        return replace(self, deleted_at=now, updated_at=now)

    @staticmethod
    def create(
        organization_id: str,
        workspace_id: str,
        resource_id: str,
        project_id: str,
        allocation_percentage: float,
        start_date: date,
        end_date: date,
        type: AllocationType = AllocationType.SOFT,
        booking_source: BookingSource = BookingSource.MANUAL,
        justification: Optional[str] = None,
        units_type: UnitsType = UnitsType.PERCENT,
        hours_per_week: Optional[float] = None,
        created_by: Optional[str] = None,
    ) -> "ResourceAllocation":
        now = datetime.now(timezone.utc)
        return ResourceAllocation(
            id=generate_id(),
            organization_id=organization_id,
            workspace_id=workspace_id,
            resource_id=resource_id,
            project_id=project_id,
            allocation_percentage=allocation_percentage,
            start_date=start_date,
            end_date=end_date,
            type=type,
            booking_source=booking_source,
            justification=justification,
            units_type=units_type,
            hours_per_week=hours_per_week,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )


__all__ = ["ResourceAllocation"]
