from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any

from core.exceptions import NotFoundError, ValidationError
from core.interfaces import ProjectRegistry, ResourceDirectory
from core.models import AllocationType, BookingSource, UnitsType, clean_id

# 40h week / 8h day == 100% of a resource's capacity
FULL_TIME_HOURS_PER_WEEK = 40.0
FULL_TIME_HOURS_PER_DAY = 8.0
WORKING_DAYS_PER_WEEK = 5


def _as_enum(enum_type, value: Any, *, field: str, code: str):
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(item.value for item in enum_type)
        raise ValidationError(
            f"Unknown {field} {value!r}. Expected one of: {allowed}.",
            code=code,
        ) from None


def as_allocation_type(value: Any) -> AllocationType:
    return _as_enum(AllocationType, value, field="allocation type", code="ALLOCATION_TYPE_INVALID")


def as_booking_source(value: Any) -> BookingSource:
    return _as_enum(BookingSource, value, field="booking source", code="BOOKING_SOURCE_INVALID")


def as_units_type(value: Any) -> UnitsType:
    return _as_enum(UnitsType, value, field="units type", code="UNITS_TYPE_INVALID")


def as_date(value: Any, *, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD).", code="ALLOCATION_DATES_INVALID")


def _positive_number(value: Any, *, field: str) -> float:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a positive number.", code="ALLOCATION_PERCENTAGE_INVALID")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"{field} must be a positive number.", code="ALLOCATION_PERCENTAGE_INVALID"
        ) from None
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"{field} must be greater than 0.", code="ALLOCATION_PERCENTAGE_INVALID")
    return number


def as_requested_percentage(value: Any) -> float:
    """Preview percentage: omitted means 0, otherwise a finite number >= 0."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    if isinstance(value, bool):
        raise ValidationError("allocation_percentage must be a number.", code="ALLOCATION_PERCENTAGE_INVALID")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(
            "allocation_percentage must be a number.", code="ALLOCATION_PERCENTAGE_INVALID"
        ) from None
    if not math.isfinite(number) or number < 0:
        raise ValidationError(
            "allocation_percentage must be 0 or greater.", code="ALLOCATION_PERCENTAGE_INVALID"
        )
    return number


class AllocationValidationMixin:
    _resource_directory: ResourceDirectory | None
    _project_registry: ProjectRegistry | None

    def _validate_dates(self, start_date: Any, end_date: Any) -> tuple[date, date]:
        start = as_date(start_date, field="start_date")
        end = as_date(end_date, field="end_date")
        if start > end:
            raise ValidationError(
                f"start_date ({start}) cannot be after end_date ({end}).",
                code="ALLOCATION_DATES_INVALID",
            )
        return start, end

    def _resolve_units(
        self,
        units_type: UnitsType,
        allocation_percentage: Any = None,
        hours_per_day: Any = None,
        hours_per_week: Any = None,
    ) -> tuple[float, float | None]:
        """Return (allocation_percentage, hours_per_week) for the requested unit."""
        if units_type == UnitsType.PERCENT:
            if allocation_percentage is None:
                raise ValidationError(
                    "allocation_percentage is required when units_type is PERCENT.",
                    code="ALLOCATION_PERCENTAGE_INVALID",
                )
            return _positive_number(allocation_percentage, field="allocation_percentage"), None

        if hours_per_week is not None:
            weekly = _positive_number(hours_per_week, field="hours_per_week")
            return weekly / FULL_TIME_HOURS_PER_WEEK * 100.0, weekly
        if hours_per_day is not None:
            daily = _positive_number(hours_per_day, field="hours_per_day")
            return daily / FULL_TIME_HOURS_PER_DAY * 100.0, daily * WORKING_DAYS_PER_WEEK
        raise ValidationError(
            "hours_per_day or hours_per_week is required when units_type is HOURS.",
            code="ALLOCATION_PERCENTAGE_INVALID",
        )

    def _require_id(self, value: Any, *, field: str) -> str:
        text = clean_id(value)
        if text is None:
            raise ValidationError(f"{field} is required.", code=f"{field.upper()}_REQUIRED")
        return text

    def _ensure_references(self, resource_id: str, project_id: str | None = None) -> None:
        if self._resource_directory is not None and not self._resource_directory.exists(resource_id):
            raise NotFoundError("Resource not found.", code="RESOURCE_NOT_FOUND")
        if (
            project_id is not None
            and self._project_registry is not None
            and not self._project_registry.exists(project_id)
        ):
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")


__all__ = [
    "AllocationValidationMixin",
    "as_allocation_type",
    "as_booking_source",
    "as_units_type",
    "as_date",
    "as_requested_percentage",
    "FULL_TIME_HOURS_PER_WEEK",
    "FULL_TIME_HOURS_PER_DAY",
]
