from __future__ import annotations

from typing import Any


def record_audit(
    owner: object,
    *,
    action: str,
    entity_type: str,
    entity_id: str,
    workspace_id: str | None = None,
    resource_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    audit_service = getattr(owner, "_audit_service", None)
    if audit_service is None:
        return
    audit_service.record(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        workspace_id=workspace_id,
        resource_id=resource_id,
        details=details or {},
        commit=True,
    )


def allocation_audit_details(allocation: Any) -> dict[str, Any]:
    # justification text may carry personal data; only its presence is recorded
    return {
        "project_id": allocation.project_id,
        "type": allocation.type.value,
        "booking_source": allocation.booking_source.value,
        "allocation_percentage": allocation.allocation_percentage,
        "start_date": allocation.start_date.isoformat(),
        "end_date": allocation.end_date.isoformat(),
        "has_justification": bool((allocation.justification or "").strip()),
        "version": allocation.version,
    }


__all__ = ["record_audit", "allocation_audit_details"]
