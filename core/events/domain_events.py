"""Change notifications for allocation views, heat maps and caches."""
from __future__ import annotations

from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.allocation_changed: Signal[str] = Signal("allocation_changed")  # resource_id
        self.policy_changed: Signal[str] = Signal("policy_changed")  # workspace_id
        self.conflict_recorded: Signal[str] = Signal("conflict_recorded")  # conflict_id
        self.conflict_changed: Signal[str] = Signal("conflict_changed")  # conflict_id


# SINGLE global instance
domain_events = DomainEvents()
