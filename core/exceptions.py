# core/exceptions.py
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str,*, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when data is invalid or violates constraints."""


class NotFoundError(DomainError):
    """Raised when an entity is not found."""


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., permission denied)."""


class ConcurrencyError(DomainError):
    """Raised when optimistic locking detects a stale update or a resource lock times out."""


class PolicyMisconfigured(ValidationError):
    """Raised when a workspace policy would break the threshold ordering."""

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message, code=code or "POLICY_MISCONFIGURED")


class PolicyViolation(BusinessRuleError):
    """
    A booking was refused by the admission pipeline.
    Carries the numbers the caller needs to shrink or justify the request.
    """

    def __init__(
        self,
        message: str,
        *,
        hard_load: float,
        soft_load: float,
        projected_total: float,
        threshold: float,
        code: str | None = None,
    ):
        super().__init__(message, code=code)
        self.hard_load = hard_load
        self.soft_load = soft_load
        self.current_load = hard_load + soft_load
        self.projected_total = projected_total
        self.threshold = threshold

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": str(self),
            "hard_load": self.hard_load,
            "soft_load": self.soft_load,
            "current_load": self.current_load,
            "projected_total": self.projected_total,
            "threshold": self.threshold,
        }


class HardCapExceeded(PolicyViolation):
    def __init__(self, message: str, **context: Any):
        super().__init__(message, code="HARD_CAP_EXCEEDED", **context)


class JustificationRequired(PolicyViolation):
    def __init__(self, message: str, **context: Any):
        super().__init__(message, code="JUSTIFICATION_REQUIRED", **context)
