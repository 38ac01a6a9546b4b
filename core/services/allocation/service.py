from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import AllocationStore, ConflictRepository, ProjectRegistry, ResourceDirectory
from core.services.allocation.aggregator import OverlapAggregator
from core.services.allocation.guard import BookingGuard
from core.services.allocation.lifecycle import AllocationLifecycleMixin
from core.services.allocation.locking import ResourceLockManager, default_lock_manager
from core.services.allocation.policy import PolicyResolver
from core.services.allocation.query import AllocationQueryMixin
from core.services.allocation.validation import AllocationValidationMixin
from core.services.audit.service import AuditService
from core.services.auth.session import UserSessionContext


class AllocationService(AllocationLifecycleMixin, AllocationQueryMixin, AllocationValidationMixin):
    """Allocation service orchestrator: every write goes through the BookingGuard."""

    def __init__(
        self,
        session: Session,
        allocation_store: AllocationStore,
        policy_resolver: PolicyResolver,
        aggregator: OverlapAggregator | None = None,
        guard: BookingGuard | None = None,
        conflict_repo: ConflictRepository | None = None,
        lock_manager: ResourceLockManager | None = None,
        user_session: UserSessionContext | None = None,
        audit_service: AuditService | None = None,
        resource_directory: ResourceDirectory | None = None,
        project_registry: ProjectRegistry | None = None,
    ):
        self._session: Session = session
        self._store: AllocationStore = allocation_store
        self._policy_resolver: PolicyResolver = policy_resolver
        self._aggregator: OverlapAggregator = aggregator or OverlapAggregator(allocation_store)
        self._guard: BookingGuard = guard or BookingGuard(policy_resolver, self._aggregator)
        self._conflict_repo: ConflictRepository | None = conflict_repo
        self._locks: ResourceLockManager = lock_manager or default_lock_manager()
        self._user_session: UserSessionContext | None = user_session
        self._audit_service: AuditService | None = audit_service
        self._resource_directory: ResourceDirectory | None = resource_directory
        self._project_registry: ProjectRegistry | None = project_registry


__all__ = ["AllocationService"]
