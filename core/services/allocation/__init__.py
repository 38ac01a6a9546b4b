from .aggregator import OverlapAggregator
from .classifier import ConflictClassifier, classify
from .conflicts import ConflictLogService
from .guard import BookingGuard
from .locking import ResourceLockManager, default_lock_manager
from .models import (
    BookingPreview,
    BookingRequest,
    BookingResult,
    Classification,
    ConflictReport,
    LoadSnapshot,
)
from .policy import PolicyResolver
from .service import AllocationService

__all__ = [
    "AllocationService",
    "BookingGuard",
    "ConflictClassifier",
    "ConflictLogService",
    "OverlapAggregator",
    "PolicyResolver",
    "ResourceLockManager",
    "default_lock_manager",
    "classify",
    "BookingPreview",
    "BookingRequest",
    "BookingResult",
    "Classification",
    "ConflictReport",
    "LoadSnapshot",
]
