# core/models.py
from core.domain import (
    DEFAULT_THRESHOLDS,
    AllocationType,
    AuditLogEntry,
    BookingSource,
    ConflictClassification,
    ConflictSeverity,
    ResourceAllocation,
    ResourceConflict,
    ResourcePolicy,
    Thresholds,
    UnitsType,
    clean_id,
    generate_id,
)

__all__ = [
    "generate_id",
    "clean_id",
    "AllocationType",
    "BookingSource",
    "UnitsType",
    "ConflictClassification",
    "ConflictSeverity",
    "ResourceAllocation",
    "ResourcePolicy",
    "Thresholds",
    "DEFAULT_THRESHOLDS",
    "ResourceConflict",
    "AuditLogEntry",
]
