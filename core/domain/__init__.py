from core.domain.allocation import ResourceAllocation
from core.domain.audit import AuditLogEntry
from core.domain.conflict import ResourceConflict, severity_for
from core.domain.enums import (
    LOAD_BEARING_TYPES,
    AllocationType,
    BookingSource,
    ConflictClassification,
    ConflictSeverity,
    UnitsType,
)
from core.domain.identifiers import clean_id, generate_id
from core.domain.policy import DEFAULT_THRESHOLDS, ResourcePolicy, Thresholds

__all__ = [
    "generate_id",
    "clean_id",
    "AllocationType",
    "BookingSource",
    "UnitsType",
    "ConflictClassification",
    "ConflictSeverity",
    "LOAD_BEARING_TYPES",
    "ResourceAllocation",
    "ResourcePolicy",
    "Thresholds",
    "DEFAULT_THRESHOLDS",
    "ResourceConflict",
    "severity_for",
    "AuditLogEntry",
]
