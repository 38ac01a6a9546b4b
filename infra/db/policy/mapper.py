from __future__ import annotations

from core.models import ResourcePolicy, Thresholds
from infra.db.models import ResourcePolicyORM


def policy_from_orm(obj: ResourcePolicyORM) -> ResourcePolicy:
    return ResourcePolicy(
        workspace_id=obj.workspace_id,
        thresholds=Thresholds(
            warning=obj.warning_threshold,
            justification=obj.justification_threshold,
            approval=obj.approval_threshold,
            max_allocation=obj.max_allocation,
        ),
        updated_at=obj.updated_at,
        version=obj.version,
    )


def policy_values(policy: ResourcePolicy) -> dict:
    return {
        "warning_threshold": policy.thresholds.warning,
        "justification_threshold": policy.thresholds.justification,
        "approval_threshold": policy.thresholds.approval,
        "max_allocation": policy.thresholds.max_allocation,
        "updated_at": policy.updated_at,
    }


__all__ = ["policy_from_orm", "policy_values"]
