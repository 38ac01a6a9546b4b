# core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional

from core.models import AuditLogEntry, ResourceAllocation, ResourceConflict, ResourcePolicy


class AllocationStore(ABC):
    @abstractmethod
    def add(self, allocation: ResourceAllocation) -> None: ...

    @abstractmethod
    def update(self, allocation: ResourceAllocation, *, expected_version: int) -> int:
        """Persist changed fields; return the new version or raise ConcurrencyError."""

    @abstractmethod
    def get(self, allocation_id: str, *, include_deleted: bool = False) -> Optional[ResourceAllocation]: ...

    @abstractmethod
    def list_overlapping(
        self,
        resource_id: str,
        window_start: date,
        window_end: date,
        *,
        exclude_allocation_id: str | None = None,
    ) -> List[ResourceAllocation]:
        """Non-deleted, non-GHOST rows of the resource intersecting the inclusive window."""

    @abstractmethod
    def list_by_resource(self, resource_id: str) -> List[ResourceAllocation]: ...

    @abstractmethod
    def list_by_project(self, project_id: str) -> List[ResourceAllocation]: ...

    @abstractmethod
    def soft_delete(self, allocation_id: str, deleted_at: datetime) -> bool: ...

    @abstractmethod
    def lock_resource(self, resource_id: str) -> None:
        """Take a transaction-scoped lock serializing bookings of one resource."""


class PolicyRepository(ABC):
    @abstractmethod
    def get(self, workspace_id: str) -> Optional[ResourcePolicy]: ...

    @abstractmethod
    def upsert(self, policy: ResourcePolicy) -> ResourcePolicy: ...


class ConflictRepository(ABC):
    @abstractmethod
    def add(self, conflict: ResourceConflict) -> None: ...

    @abstractmethod
    def update(self, conflict: ResourceConflict) -> None: ...

    @abstractmethod
    def get(self, conflict_id: str) -> Optional[ResourceConflict]: ...

    @abstractmethod
    def find_open_for_allocation(self, allocation_id: str) -> Optional[ResourceConflict]: ...

    @abstractmethod
    def list(
        self,
        *,
        workspace_id: str | None = None,
        resource_id: str | None = None,
        resolved: bool | None = None,
        window_start: date | None = None,
        window_end: date | None = None,
    ) -> List[ResourceConflict]: ...


class AuditLogRepository(ABC):
    @abstractmethod
    def add(self, entry: AuditLogEntry) -> None: ...

    @abstractmethod
    def list_recent(
        self,
        limit: int = 200,
        *,
        workspace_id: str | None = None,
        resource_id: str | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> List[AuditLogEntry]: ...


class ResourceDirectory(ABC):
    """Owned by the resource directory; only existence is consulted here."""

    @abstractmethod
    def exists(self, resource_id: str) -> bool: ...


class ProjectRegistry(ABC):
    @abstractmethod
    def exists(self, project_id: str) -> bool: ...


__all__ = [
    "AllocationStore",
    "PolicyRepository",
    "ConflictRepository",
    "AuditLogRepository",
    "ResourceDirectory",
    "ProjectRegistry",
]
