from infra.db.policy.mapper import policy_from_orm
from infra.db.policy.repository import SqlAlchemyPolicyRepository

__all__ = ["policy_from_orm", "SqlAlchemyPolicyRepository"]
