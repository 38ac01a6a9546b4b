from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from core.domain.enums import ConflictClassification, ConflictSeverity
from core.domain.identifiers import generate_id


def severity_for(total_load: float) -> ConflictSeverity:
    if total_load <= 110:
        return ConflictSeverity.LOW
    if total_load <= 125:
        return ConflictSeverity.MEDIUM
    if total_load <= 150:
        return ConflictSeverity.HIGH
    return ConflictSeverity.CRITICAL


@dataclass
class ResourceConflict:
    """
    An overbooked window left behind by an accepted, justified booking.
    Kept for follow-up by resource managers; never consulted at admission time.
    """
    id: str
    organization_id: str
    workspace_id: str
    resource_id: str
    allocation_id: str
    window_start: date
    window_end: date
    total_load: float
    classification: ConflictClassification
    severity: ConflictSeverity
    resolved: bool = False
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    resolution_note: Optional[str] = None
    created_at: Optional[datetime] = None

    @staticmethod
    def create(
        organization_id: str,
        workspace_id: str,
        resource_id: str,
        allocation_id: str,
        window_start: date,
        window_end: date,
        total_load: float,
        classification: ConflictClassification,
    ) -> "ResourceConflict":
        return ResourceConflict(
            id=generate_id(),
            organization_id=organization_id,
            workspace_id=workspace_id,
            resource_id=resource_id,
            allocation_id=allocation_id,
            window_start=window_start,
            window_end=window_end,
            total_load=total_load,
            classification=classification,
            severity=severity_for(total_load),
            created_at=datetime.now(timezone.utc),
        )


__all__ = ["ResourceConflict", "severity_for"]
