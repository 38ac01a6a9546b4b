from __future__ import annotations

from enum import Enum


class AllocationType(str, Enum):
    HARD = "HARD"
    SOFT = "SOFT"
    GHOST = "GHOST"


class BookingSource(str, Enum):
    MANUAL = "MANUAL"
    AI = "AI"
    IMPORTED = "IMPORTED"


class UnitsType(str, Enum):
    PERCENT = "PERCENT"
    HOURS = "HOURS"


class ConflictClassification(str, Enum):
    NONE = "NONE"
    WARNING = "WARNING"
    REQUIRES_JUSTIFICATION = "REQUIRES_JUSTIFICATION"
    REQUIRES_APPROVAL = "REQUIRES_APPROVAL"
    OVER_CAP = "OVER_CAP"


class ConflictSeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


# Load-carrying types; GHOST never takes part in load math.
LOAD_BEARING_TYPES = frozenset({AllocationType.HARD, AllocationType.SOFT})


__all__ = [
    "AllocationType",
    "BookingSource",
    "UnitsType",
    "ConflictClassification",
    "ConflictSeverity",
    "LOAD_BEARING_TYPES",
]
