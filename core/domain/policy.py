from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.exceptions import PolicyMisconfigured


@dataclass(frozen=True)
class Thresholds:
    """Capacity thresholds, all in percent of a resource's capacity."""

    warning: float = 80.0
    justification: float = 100.0
    approval: float = 120.0
    max_allocation: float = 150.0

    def validate(self) -> "Thresholds":
        ordered = (self.warning, self.justification, self.approval, self.max_allocation)
        if any(value is None for value in ordered):
            raise PolicyMisconfigured("All four thresholds are required.")
        if not all(math.isfinite(value) for value in ordered):
            raise PolicyMisconfigured("Thresholds must be finite numbers.")
        if self.warning <= 0:
            raise PolicyMisconfigured("warning threshold must be greater than 0.")
        if not (self.warning <= self.justification <= self.approval <= self.max_allocation):
            raise PolicyMisconfigured(
                "Thresholds must satisfy warning <= justification <= approval <= max_allocation "
                f"(got {self.warning:g} / {self.justification:g} / "
                f"{self.approval:g} / {self.max_allocation:g})."
            )
        return self

    def as_dict(self) -> dict[str, float]:
        return {
            "warning": self.warning,
            "justification": self.justification,
            "approval": self.approval,
            "max_allocation": self.max_allocation,
        }


DEFAULT_THRESHOLDS = Thresholds()


@dataclass(frozen=True)
class ResourcePolicy:
    workspace_id: str
    thresholds: Thresholds = DEFAULT_THRESHOLDS
    updated_at: Optional[datetime] = None
    version: int = 1
    is_default: bool = False

    @staticmethod
    def default_for(workspace_id: str) -> "ResourcePolicy":
        return ResourcePolicy(
            workspace_id=workspace_id,
            thresholds=DEFAULT_THRESHOLDS,
            version=0,
            is_default=True,
        )


__all__ = ["Thresholds", "DEFAULT_THRESHOLDS", "ResourcePolicy"]
