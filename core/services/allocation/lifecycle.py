from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Iterator, Mapping

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import ConcurrencyError, NotFoundError, ValidationError
from core.interfaces import AllocationStore, ConflictRepository
from core.models import AllocationType, BookingSource, ResourceAllocation, ResourceConflict, UnitsType
from core.services.allocation.conflicts import close_allocation_conflicts, sync_booking_conflict
from core.services.allocation.guard import BookingGuard
from core.services.allocation.locking import ResourceLockManager
from core.services.allocation.models import BookingPreview, BookingRequest, BookingResult
from core.services.allocation.validation import (
    as_allocation_type,
    as_booking_source,
    as_units_type,
)
from core.services.audit.helpers import allocation_audit_details, record_audit
from core.services.auth.authorization import ALLOCATION_MANAGE, require_permission

logger = logging.getLogger(__name__)


class AllocationLifecycleMixin:
    _session: Session
    _store: AllocationStore
    _guard: BookingGuard
    _locks: ResourceLockManager
    _conflict_repo: ConflictRepository | None

    def _require_manage(self, operation_label: str) -> None:
        require_permission(self._user_session, ALLOCATION_MANAGE, operation_label=operation_label)

    def _resolve_organization(self, organization_id: str | None) -> str:
        resolved = organization_id or self._tenant_id()
        return self._require_id(resolved, field="organization_id")

    def _load_for_write(self, allocation_id: str) -> ResourceAllocation:
        allocation = self._store.get(allocation_id)
        if not self._visible(allocation):
            raise NotFoundError("Resource allocation not found.", code="ALLOCATION_NOT_FOUND")
        return allocation

    @contextmanager
    def _booking_section(self, resource_id: str, booking_type: AllocationType) -> Iterator[None]:
        """
        Serialize check + write per resource. GHOST bookings carry no load, so
        they neither wait for nor block real bookings.
        """
        if booking_type == AllocationType.GHOST:
            yield
            return
        with self._locks.hold(resource_id):
            self._store.lock_resource(resource_id)
            yield

    def _persist_booking(
        self,
        allocation: ResourceAllocation,
        request: BookingRequest,
        *,
        existing: ResourceAllocation | None = None,
    ) -> tuple[ResourceAllocation, BookingPreview]:
        try:
            with self._booking_section(allocation.resource_id, allocation.type):
                preview = self._guard.validate(
                    request,
                    exclude_allocation_id=existing.id if existing is not None else None,
                )
                if existing is None:
                    self._store.add(allocation)
                else:
                    new_version = self._store.update(allocation, expected_version=existing.version)
                    allocation = replace(allocation, version=new_version)
                conflict, created = (
                    sync_booking_conflict(
                        self._conflict_repo, allocation, preview, resolved_by=self._acting_user_id()
                    )
                    if self._conflict_repo is not None
                    else (None, False)
                )
                self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        if conflict is not None:
            self._announce_conflict(conflict, created=created)
        return allocation, preview

    def _acting_user_id(self) -> str | None:
        return self._user_session.user_id if self._user_session else None

    def _announce_conflict(self, conflict: ResourceConflict, *, created: bool) -> None:
        if created:
            logger.warning(
                "Overbooking conflict %s recorded for resource %s: %.1f%% (%s)",
                conflict.id,
                conflict.resource_id,
                conflict.total_load,
                conflict.severity.value,
            )
            domain_events.conflict_recorded.emit(conflict.id)
            return
        if conflict.resolved:
            logger.info("Conflict %s closed: %s", conflict.id, conflict.resolution_note)
        else:
            logger.info(
                "Conflict %s now at %.1f%% (%s)",
                conflict.id,
                conflict.total_load,
                conflict.severity.value,
            )
        domain_events.conflict_changed.emit(conflict.id)

    def create_allocation(
        self,
        resource_id: str,
        project_id: str,
        allocation_percentage: float | None,
        start_date: Any,
        end_date: Any,
        type: AllocationType | str = AllocationType.SOFT,
        booking_source: BookingSource | str = BookingSource.MANUAL,
        justification: str | None = None,
        *,
        workspace_id: str,
        organization_id: str | None = None,
        units_type: UnitsType | str = UnitsType.PERCENT,
        hours_per_day: float | None = None,
        hours_per_week: float | None = None,
    ) -> BookingResult:
        self._require_manage("create allocation")
        resource_id = self._require_id(resource_id, field="resource_id")
        project_id = self._require_id(project_id, field="project_id")
        workspace_id = self._require_id(workspace_id, field="workspace_id")
        organization_id = self._resolve_organization(organization_id)
        alloc_type = as_allocation_type(type)
        source = as_booking_source(booking_source)
        units = as_units_type(units_type)
        pct, weekly = self._resolve_units(units, allocation_percentage, hours_per_day, hours_per_week)
        start, end = self._validate_dates(start_date, end_date)
        self._ensure_references(resource_id, project_id)

        allocation = ResourceAllocation.create(
            organization_id=organization_id,
            workspace_id=workspace_id,
            resource_id=resource_id,
            project_id=project_id,
            allocation_percentage=pct,
            start_date=start,
            end_date=end,
            type=alloc_type,
            booking_source=source,
            justification=(justification or "").strip() or None,
            units_type=units,
            hours_per_week=weekly,
            created_by=self._acting_user_id(),
        )
        request = _request_for(allocation)
        allocation, preview = self._persist_booking(allocation, request)

        record_audit(
            self,
            action="allocation.create",
            entity_type="resource_allocation",
            entity_id=allocation.id,
            workspace_id=allocation.workspace_id,
            resource_id=allocation.resource_id,
            details={
                **allocation_audit_details(allocation),
                "classification": preview.classification.value,
                "projected_total": preview.projected_total,
            },
        )
        logger.info(
            "Created allocation %s: resource=%s %s %.1f%% %s..%s (%s)",
            allocation.id,
            allocation.resource_id,
            allocation.type.value,
            allocation.allocation_percentage,
            allocation.start_date,
            allocation.end_date,
            preview.classification.value,
        )
        domain_events.allocation_changed.emit(allocation.resource_id)
        return BookingResult(allocation=allocation, preview=preview)

    def update_allocation(
        self,
        allocation_id: str,
        *,
        resource_id: str | None = None,
        project_id: str | None = None,
        allocation_percentage: float | None = None,
        start_date: Any = None,
        end_date: Any = None,
        type: AllocationType | str | None = None,
        booking_source: BookingSource | str | None = None,
        justification: str | None = None,
        units_type: UnitsType | str | None = None,
        hours_per_day: float | None = None,
        hours_per_week: float | None = None,
        expected_version: int | None = None,
    ) -> BookingResult:
        """
        Apply a partial change. Omitted (None) fields keep their stored value;
        pass ``justification=""`` to clear a stored justification.
        """
        self._require_manage("update allocation")
        existing = self._load_for_write(allocation_id)
        if expected_version is not None and int(expected_version) != existing.version:
            raise ConcurrencyError("Resource allocation was updated by another user.", code="STALE_WRITE")
        if resource_id is not None and resource_id != existing.resource_id:
            raise ValidationError(
                "An allocation cannot be moved to another resource; remove it and book again.",
                code="ALLOCATION_RESOURCE_IMMUTABLE",
            )

        if project_id is not None:
            project_id = self._require_id(project_id, field="project_id")
            self._ensure_references(existing.resource_id, project_id)

        if units_type is not None:
            units = as_units_type(units_type)
        elif allocation_percentage is not None:
            units = UnitsType.PERCENT
        elif hours_per_day is not None or hours_per_week is not None:
            units = UnitsType.HOURS
        else:
            units = existing.units_type

        if (
            allocation_percentage is not None
            or hours_per_day is not None
            or hours_per_week is not None
            or units != existing.units_type
        ):
            pct, weekly = self._resolve_units(units, allocation_percentage, hours_per_day, hours_per_week)
        else:
            pct, weekly = existing.allocation_percentage, existing.hours_per_week

        start, end = self._validate_dates(
            start_date if start_date is not None else existing.start_date,
            end_date if end_date is not None else existing.end_date,
        )

        updated = replace(
            existing,
            project_id=project_id or existing.project_id,
            allocation_percentage=pct,
            hours_per_week=weekly,
            units_type=units,
            start_date=start,
            end_date=end,
            type=as_allocation_type(type) if type is not None else existing.type,
            booking_source=(
                as_booking_source(booking_source) if booking_source is not None else existing.booking_source
            ),
            justification=(
                (justification.strip() or None) if justification is not None else existing.justification
            ),
            updated_at=datetime.now(timezone.utc),
        )
        request = _request_for(updated)
        updated, preview = self._persist_booking(updated, request, existing=existing)

        record_audit(
            self,
            action="allocation.update",
            entity_type="resource_allocation",
            entity_id=updated.id,
            workspace_id=updated.workspace_id,
            resource_id=updated.resource_id,
            details={
                **allocation_audit_details(updated),
                "previous_percentage": existing.allocation_percentage,
                "classification": preview.classification.value,
                "projected_total": preview.projected_total,
            },
        )
        logger.info(
            "Updated allocation %s (v%s): %.1f%% %s..%s (%s)",
            updated.id,
            updated.version,
            updated.allocation_percentage,
            updated.start_date,
            updated.end_date,
            preview.classification.value,
        )
        domain_events.allocation_changed.emit(updated.resource_id)
        return BookingResult(allocation=updated, preview=preview)

    def create(self, dto: Mapping[str, Any]) -> BookingResult:
        """Mapping form of create_allocation, for callers holding a request payload."""
        return self.create_allocation(**_known_fields(dto, _CREATE_FIELDS))

    def update(self, allocation_id: str, dto: Mapping[str, Any]) -> BookingResult:
        return self.update_allocation(allocation_id, **_known_fields(dto, _UPDATE_FIELDS))

    def remove_allocation(self, allocation_id: str) -> dict[str, bool]:
        self._require_manage("remove allocation")
        try:
            existing = self._load_for_write(allocation_id)
        except NotFoundError:
            return {"deleted": False}

        deleted = existing.soft_deleted()
        try:
            removed = self._store.soft_delete(existing.id, deleted.deleted_at)
            closed = (
                close_allocation_conflicts(
                    self._conflict_repo, existing.id, resolved_by=self._acting_user_id()
                )
                if removed and self._conflict_repo is not None
                else None
            )
            self._session.commit()
            if removed:
                record_audit(
                    self,
                    action="allocation.remove",
                    entity_type="resource_allocation",
                    entity_id=existing.id,
                    workspace_id=existing.workspace_id,
                    resource_id=existing.resource_id,
                    details=allocation_audit_details(existing),
                )
        except Exception:
            self._session.rollback()
            raise

        if removed:
            logger.info("Removed allocation %s for resource %s", existing.id, existing.resource_id)
            domain_events.allocation_changed.emit(existing.resource_id)
        if closed is not None:
            self._announce_conflict(closed, created=False)
        return {"deleted": removed}


_CREATE_FIELDS = frozenset(
    {
        "resource_id",
        "project_id",
        "allocation_percentage",
        "start_date",
        "end_date",
        "type",
        "booking_source",
        "justification",
        "workspace_id",
        "organization_id",
        "units_type",
        "hours_per_day",
        "hours_per_week",
    }
)
_UPDATE_FIELDS = (_CREATE_FIELDS - {"workspace_id", "organization_id"}) | {"expected_version"}


def _known_fields(dto: Mapping[str, Any], allowed: frozenset[str]) -> dict[str, Any]:
    unknown = sorted(set(dto) - allowed)
    if unknown:
        raise ValidationError(
            f"Unknown allocation field(s): {', '.join(unknown)}.",
            code="ALLOCATION_FIELD_UNKNOWN",
        )
    return dict(dto)


def _request_for(allocation: ResourceAllocation) -> BookingRequest:
    return BookingRequest(
        workspace_id=allocation.workspace_id,
        resource_id=allocation.resource_id,
        type=allocation.type,
        allocation_percentage=allocation.allocation_percentage,
        start_date=allocation.start_date,
        end_date=allocation.end_date,
        justification=allocation.justification,
    )


__all__ = ["AllocationLifecycleMixin"]
