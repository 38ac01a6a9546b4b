from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet


@dataclass(frozen=True)
class UserSessionPrincipal:
    user_id: str
    username: str
    organization_id: str | None = None
    role_names: FrozenSet[str] = field(default_factory=frozenset)
    permissions: FrozenSet[str] = field(default_factory=frozenset)


class UserSessionContext:
    """
    The caller identity handed over by the platform's auth layer.
    An empty context (no principal) means a trusted internal caller.
    """

    def __init__(self, principal: UserSessionPrincipal | None = None):
        self._principal: UserSessionPrincipal | None = principal

    @property
    def principal(self) -> UserSessionPrincipal | None:
        return self._principal

    def set_principal(self, principal: UserSessionPrincipal) -> None:
        self._principal = principal

    def clear(self) -> None:
        self._principal = None

    def is_authenticated(self) -> bool:
        return self._principal is not None

    def has_permission(self, permission_code: str) -> bool:
        if self._principal is None:
            return True
        return permission_code in self._principal.permissions

    @property
    def user_id(self) -> str | None:
        return self._principal.user_id if self._principal is not None else None


__all__ = ["UserSessionPrincipal", "UserSessionContext"]
