from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import PolicyMisconfigured, ValidationError
from core.interfaces import PolicyRepository
from core.models import DEFAULT_THRESHOLDS, ResourcePolicy, Thresholds, clean_id
from core.services.audit.helpers import record_audit
from core.services.auth.authorization import POLICY_MANAGE, require_permission
from core.services.auth.session import UserSessionContext

logger = logging.getLogger(__name__)


def _threshold_value(value: Any, *, field: str) -> float:
    if isinstance(value, bool):
        raise PolicyMisconfigured(f"{field} threshold must be a number, got {value!r}.")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise PolicyMisconfigured(f"{field} threshold must be a number, got {value!r}.") from None
    if not math.isfinite(number):
        raise PolicyMisconfigured(f"{field} threshold must be a finite number.")
    return number


class PolicyResolver:
    """
    Per-workspace capacity thresholds.
    Reads never write: a workspace without a stored row gets the system defaults.
    """

    def __init__(
        self,
        session: Session,
        policy_repo: PolicyRepository,
        user_session: UserSessionContext | None = None,
        audit_service=None,
    ):
        self._session: Session = session
        self._policy_repo: PolicyRepository = policy_repo
        self._user_session = user_session
        self._audit_service = audit_service

    def resolve(self, workspace_id: str) -> Thresholds:
        policy = self._policy_repo.get(workspace_id)
        if policy is None:
            return DEFAULT_THRESHOLDS
        return policy.thresholds

    def get_policy(self, workspace_id: str) -> ResourcePolicy:
        policy = self._policy_repo.get(workspace_id)
        return policy if policy is not None else ResourcePolicy.default_for(workspace_id)

    def upsert_policy(
        self,
        workspace_id: str,
        *,
        warning: float | None = None,
        justification: float | None = None,
        approval: float | None = None,
        max_allocation: float | None = None,
    ) -> ResourcePolicy:
        require_permission(
            self._user_session,
            POLICY_MANAGE,
            operation_label="update resource policy",
        )
        workspace_id = clean_id(workspace_id)
        if workspace_id is None:
            raise ValidationError("workspace_id is required.", code="WORKSPACE_ID_REQUIRED")

        current = self.get_policy(workspace_id)
        changes = {
            key: _threshold_value(value, field=key)
            for key, value in (
                ("warning", warning),
                ("justification", justification),
                ("approval", approval),
                ("max_allocation", max_allocation),
            )
            if value is not None
        }
        thresholds = replace(current.thresholds, **changes)
        try:
            thresholds.validate()
        except PolicyMisconfigured:
            logger.warning(
                "Rejected policy for workspace %s: %s", workspace_id, thresholds.as_dict()
            )
            raise

        policy = ResourcePolicy(
            workspace_id=workspace_id,
            thresholds=thresholds,
            updated_at=datetime.now(timezone.utc),
            version=current.version + 1,
        )
        try:
            saved = self._policy_repo.upsert(policy)
            self._session.commit()
            record_audit(
                self,
                action="policy.upsert",
                entity_type="resource_policy",
                entity_id=workspace_id,
                workspace_id=workspace_id,
                details={
                    "previous": current.thresholds.as_dict(),
                    "thresholds": thresholds.as_dict(),
                },
            )
        except Exception:
            self._session.rollback()
            raise

        logger.info("Policy for workspace %s set to %s", workspace_id, thresholds.as_dict())
        domain_events.policy_changed.emit(workspace_id)
        return saved


__all__ = ["PolicyResolver"]
