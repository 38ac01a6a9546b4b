# infra/db/repositories.py
from infra.db.allocation.repository import SqlAlchemyAllocationStore
from infra.db.audit.repository import SqlAlchemyAuditLogRepository
from infra.db.conflict.repository import SqlAlchemyConflictRepository
from infra.db.policy.repository import SqlAlchemyPolicyRepository

__all__ = [
    "SqlAlchemyAllocationStore",
    "SqlAlchemyAuditLogRepository",
    "SqlAlchemyConflictRepository",
    "SqlAlchemyPolicyRepository",
]
