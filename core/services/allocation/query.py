from __future__ import annotations

from typing import Any, List

from core.exceptions import NotFoundError
from core.interfaces import AllocationStore
from core.models import DEFAULT_THRESHOLDS, ResourceAllocation
from core.services.allocation.aggregator import OverlapAggregator
from core.services.allocation.classifier import classify
from core.services.allocation.models import ConflictReport
from core.services.allocation.policy import PolicyResolver
from core.services.allocation.validation import as_requested_percentage
from core.services.auth.session import UserSessionContext


class AllocationQueryMixin:
    _store: AllocationStore
    _aggregator: OverlapAggregator
    _policy_resolver: PolicyResolver
    _user_session: UserSessionContext | None

    def _tenant_id(self) -> str | None:
        principal = self._user_session.principal if self._user_session else None
        return principal.organization_id if principal is not None else None

    def _visible(self, allocation: ResourceAllocation | None) -> bool:
        if allocation is None:
            return False
        tenant_id = self._tenant_id()
        return not tenant_id or allocation.organization_id == tenant_id

    def get_allocation(self, allocation_id: str) -> ResourceAllocation:
        allocation = self._store.get(allocation_id)
        if not self._visible(allocation):
            raise NotFoundError("Resource allocation not found.", code="ALLOCATION_NOT_FOUND")
        return allocation

    def list_by_resource(self, resource_id: str) -> List[ResourceAllocation]:
        return [a for a in self._store.list_by_resource(resource_id) if self._visible(a)]

    def list_by_project(self, project_id: str) -> List[ResourceAllocation]:
        return [a for a in self._store.list_by_project(project_id) if self._visible(a)]

    def detect_conflicts(
        self,
        resource_id: str,
        start_date: Any,
        end_date: Any,
        allocation_percentage: float = 0.0,
        *,
        workspace_id: str | None = None,
    ) -> ConflictReport:
        """
        Point-in-time preview of a resource's load over a window.

        Takes no lock and writes nothing, so the answer may be stale by the time a
        booking is attempted. ``classification`` describes the load already booked;
        the requested percentage only feeds the ``projected_*`` fields.
        """
        start, end = self._validate_dates(start_date, end_date)
        requested = as_requested_percentage(allocation_percentage)
        thresholds = (
            self._policy_resolver.resolve(workspace_id)
            if workspace_id is not None
            else DEFAULT_THRESHOLDS
        )
        load = self._aggregator.compute_load(resource_id, start, end)
        current = classify(load.hard_load, load.soft_load, thresholds)

        projected = classify(load.hard_load, load.soft_load + requested, thresholds)
        return ConflictReport(
            hard_load=load.hard_load,
            soft_load=load.soft_load,
            classification=current.classification,
            requested_percentage=requested,
            projected_total=projected.total_load,
            projected_classification=projected.classification,
        )


__all__ = ["AllocationQueryMixin"]
