from __future__ import annotations

from datetime import date

from core.exceptions import ValidationError
from core.interfaces import AllocationStore
from core.models import AllocationType
from core.services.allocation.models import LoadSnapshot


class OverlapAggregator:
    """
    Sums the booked load of one resource over an inclusive date window.

    A row counts when it is not soft-deleted, is not GHOST, and satisfies
    ``row.start_date <= window_end and row.end_date >= window_start``. The store
    applies those filters in SQL; they are re-checked here so a store that
    returns extra rows cannot inflate or deflate the total.
    """

    def __init__(self, allocation_store: AllocationStore):
        self._store = allocation_store

    def compute_load(
        self,
        resource_id: str,
        window_start: date,
        window_end: date,
        exclude_allocation_id: str | None = None,
    ) -> LoadSnapshot:
        if window_start > window_end:
            raise ValidationError(
                "window_start must be on or before window_end.",
                code="ALLOCATION_DATES_INVALID",
            )

        rows = self._store.list_overlapping(
            resource_id,
            window_start,
            window_end,
            exclude_allocation_id=exclude_allocation_id,
        )

        hard = 0.0
        soft = 0.0
        for row in rows:
            if row.is_deleted or row.id == exclude_allocation_id:
                continue
            if row.resource_id != resource_id or not row.overlaps(window_start, window_end):
                continue
            if row.type == AllocationType.HARD:
                hard += float(row.allocation_percentage)
            elif row.type == AllocationType.SOFT:
                soft += float(row.allocation_percentage)
            # GHOST: never counted
        return LoadSnapshot(hard_load=hard, soft_load=soft)


__all__ = ["OverlapAggregator"]
