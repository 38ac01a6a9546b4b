from core.services.auth.authorization import (
    ALLOCATION_MANAGE,
    CONFLICT_MANAGE,
    POLICY_MANAGE,
    require_permission,
)
from core.services.auth.session import UserSessionContext, UserSessionPrincipal

__all__ = [
    "UserSessionPrincipal",
    "UserSessionContext",
    "require_permission",
    "ALLOCATION_MANAGE",
    "POLICY_MANAGE",
    "CONFLICT_MANAGE",
]
