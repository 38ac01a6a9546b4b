from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from core.interfaces import PolicyRepository
from core.models import ResourcePolicy
from infra.db.models import ResourcePolicyORM
from infra.db.policy.mapper import policy_from_orm, policy_values


class SqlAlchemyPolicyRepository(PolicyRepository):
    def __init__(self, session: Session):
        self.session = session

    def get(self, workspace_id: str) -> Optional[ResourcePolicy]:
        obj = self.session.get(ResourcePolicyORM, workspace_id)
        return policy_from_orm(obj) if obj else None

    def upsert(self, policy: ResourcePolicy) -> ResourcePolicy:
        obj = self.session.get(ResourcePolicyORM, policy.workspace_id)
        values = policy_values(policy)
        if obj is None:
            obj = ResourcePolicyORM(workspace_id=policy.workspace_id, version=1, **values)
            self.session.add(obj)
        else:
            for key, value in values.items():
                setattr(obj, key, value)
            obj.version = (obj.version or 0) + 1
        self.session.flush()
        return policy_from_orm(obj)


__all__ = ["SqlAlchemyPolicyRepository"]
