from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.interfaces import ProjectRegistry, ResourceDirectory
from core.services.allocation import (
    AllocationService,
    BookingGuard,
    ConflictLogService,
    OverlapAggregator,
    PolicyResolver,
    ResourceLockManager,
    default_lock_manager,
)
from core.services.audit import AuditService
from core.services.auth.session import UserSessionContext
from infra.db.repositories import (
    SqlAlchemyAllocationStore,
    SqlAlchemyAuditLogRepository,
    SqlAlchemyConflictRepository,
    SqlAlchemyPolicyRepository,
)


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    user_session: UserSessionContext
    audit_service: AuditService
    policy_resolver: PolicyResolver
    booking_guard: BookingGuard
    allocation_service: AllocationService
    conflict_service: ConflictLogService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "user_session": self.user_session,
            "audit_service": self.audit_service,
            "policy_resolver": self.policy_resolver,
            "booking_guard": self.booking_guard,
            "allocation_service": self.allocation_service,
            "conflict_service": self.conflict_service,
        }


def build_service_graph(
    session: Session,
    *,
    user_session: UserSessionContext | None = None,
    lock_manager: ResourceLockManager | None = None,
    resource_directory: ResourceDirectory | None = None,
    project_registry: ProjectRegistry | None = None,
) -> ServiceGraph:
    user_session = user_session or UserSessionContext()
    allocation_store = SqlAlchemyAllocationStore(session)
    policy_repo = SqlAlchemyPolicyRepository(session)
    conflict_repo = SqlAlchemyConflictRepository(session)
    audit_repo = SqlAlchemyAuditLogRepository(session)

    audit_service = AuditService(
        session=session,
        audit_repo=audit_repo,
        user_session=user_session,
    )
    policy_resolver = PolicyResolver(
        session,
        policy_repo,
        user_session=user_session,
        audit_service=audit_service,
    )
    aggregator = OverlapAggregator(allocation_store)
    booking_guard = BookingGuard(policy_resolver, aggregator)
    allocation_service = AllocationService(
        session,
        allocation_store,
        policy_resolver,
        aggregator=aggregator,
        guard=booking_guard,
        conflict_repo=conflict_repo,
        lock_manager=lock_manager or default_lock_manager(),
        user_session=user_session,
        audit_service=audit_service,
        resource_directory=resource_directory,
        project_registry=project_registry,
    )
    conflict_service = ConflictLogService(
        session,
        conflict_repo,
        user_session=user_session,
        audit_service=audit_service,
    )
    return ServiceGraph(
        session=session,
        user_session=user_session,
        audit_service=audit_service,
        policy_resolver=policy_resolver,
        booking_guard=booking_guard,
        allocation_service=allocation_service,
        conflict_service=conflict_service,
    )


__all__ = ["ServiceGraph", "build_service_graph"]
