from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from core.models import AllocationType, ConflictClassification, ResourceAllocation


@dataclass(frozen=True)
class LoadSnapshot:
    hard_load: float = 0.0
    soft_load: float = 0.0

    @property
    def total(self) -> float:
        return self.hard_load + self.soft_load


@dataclass(frozen=True)
class Classification:
    classification: ConflictClassification
    total_load: float


@dataclass(frozen=True)
class BookingRequest:
    workspace_id: str
    resource_id: str
    type: AllocationType
    allocation_percentage: float
    start_date: date
    end_date: date
    justification: Optional[str] = None

    @property
    def has_justification(self) -> bool:
        return bool((self.justification or "").strip())


@dataclass(frozen=True)
class BookingPreview:
    classification: ConflictClassification
    projected_total: float
    hard_load: float = 0.0
    soft_load: float = 0.0
    projected_hard: float = 0.0
    projected_soft: float = 0.0
    skipped: bool = False  # GHOST bookings bypass load checks


@dataclass(frozen=True)
class BookingResult:
    allocation: ResourceAllocation
    preview: BookingPreview


@dataclass(frozen=True)
class ConflictReport:
    hard_load: float
    soft_load: float
    classification: ConflictClassification
    requested_percentage: float = 0.0
    projected_total: float = 0.0
    projected_classification: ConflictClassification = ConflictClassification.NONE

    @property
    def total_load(self) -> float:
        return self.hard_load + self.soft_load

    def as_dict(self) -> dict[str, Any]:
        return {
            "hard_load": self.hard_load,
            "soft_load": self.soft_load,
            "classification": self.classification.value,
        }


__all__ = [
    "LoadSnapshot",
    "Classification",
    "BookingRequest",
    "BookingPreview",
    "BookingResult",
    "ConflictReport",
]
