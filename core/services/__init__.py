from .allocation import (
    AllocationService,
    BookingGuard,
    ConflictClassifier,
    ConflictLogService,
    OverlapAggregator,
    PolicyResolver,
)
from .audit import AuditService

__all__ = [
    "AllocationService",
    "BookingGuard",
    "ConflictClassifier",
    "ConflictLogService",
    "OverlapAggregator",
    "PolicyResolver",
    "AuditService",
]
