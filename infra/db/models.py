# infra/db/models.py
from __future__ import annotations
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SAEnum,
    Float,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from infra.db.base import Base
from core.models import (
    AllocationType,
    BookingSource,
    ConflictClassification,
    ConflictSeverity,
    UnitsType,
)


class ResourceAllocationORM(Base):
    __tablename__ = "resource_allocations"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    # resource / project / workspace rows live in their own directories
    organization_id: Mapped[str] = mapped_column(String, nullable=False)
    workspace_id: Mapped[str] = mapped_column(String, nullable=False)
    resource_id: Mapped[str] = mapped_column(String, nullable=False)
    project_id: Mapped[str] = mapped_column(String, nullable=False)

    type: Mapped[AllocationType] = mapped_column(
        SAEnum(AllocationType), default=AllocationType.SOFT, nullable=False
    )
    booking_source: Mapped[BookingSource] = mapped_column(
        SAEnum(BookingSource), default=BookingSource.MANUAL, nullable=False
    )
    allocation_percentage: Mapped[float] = mapped_column(Float, nullable=False)
    units_type: Mapped[UnitsType] = mapped_column(
        SAEnum(UnitsType), default=UnitsType.PERCENT, nullable=False
    )
    hours_per_week: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    justification: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

Index(
    "idx_allocations_resource_range",
    ResourceAllocationORM.resource_id,
    ResourceAllocationORM.start_date,
    ResourceAllocationORM.end_date,
)
Index("idx_allocations_project", ResourceAllocationORM.project_id)
Index("idx_allocations_workspace", ResourceAllocationORM.workspace_id)


class ResourcePolicyORM(Base):
    __tablename__ = "resource_policies"

    workspace_id: Mapped[str] = mapped_column(String, primary_key=True)
    warning_threshold: Mapped[float] = mapped_column(Float, nullable=False, default=80.0)
    justification_threshold: Mapped[float] = mapped_column(Float, nullable=False, default=100.0)
    approval_threshold: Mapped[float] = mapped_column(Float, nullable=False, default=120.0)
    max_allocation: Mapped[float] = mapped_column(Float, nullable=False, default=150.0)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class ResourceBookingLockORM(Base):
    """One row per booked resource; updated (and so write-locked) while a booking is validated."""
    __tablename__ = "resource_booking_locks"

    resource_id: Mapped[str] = mapped_column(String, primary_key=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    locked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class ResourceConflictORM(Base):
    __tablename__ = "resource_conflicts"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    organization_id: Mapped[str] = mapped_column(String, nullable=False)
    workspace_id: Mapped[str] = mapped_column(String, nullable=False)
    resource_id: Mapped[str] = mapped_column(String, nullable=False)
    allocation_id: Mapped[str] = mapped_column(String, nullable=False)
    window_start: Mapped[date] = mapped_column(Date, nullable=False)
    window_end: Mapped[date] = mapped_column(Date, nullable=False)
    total_load: Mapped[float] = mapped_column(Float, nullable=False)
    classification: Mapped[ConflictClassification] = mapped_column(
        SAEnum(ConflictClassification), nullable=False
    )
    severity: Mapped[ConflictSeverity] = mapped_column(SAEnum(ConflictSeverity), nullable=False)
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    resolution_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

Index("idx_conflicts_resource_window", ResourceConflictORM.resource_id, ResourceConflictORM.window_start)
Index("idx_conflicts_workspace_resolved", ResourceConflictORM.workspace_id, ResourceConflictORM.resolved)


class AuditLogORM(Base):
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    actor_user_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    actor_username: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False)
    workspace_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    resource_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    details_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")

Index("idx_audit_logs_occurred_at", AuditLogORM.occurred_at)
Index("idx_audit_logs_workspace", AuditLogORM.workspace_id)
Index("idx_audit_logs_entity", AuditLogORM.entity_type, AuditLogORM.entity_id)
