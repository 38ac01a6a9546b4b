from __future__ import annotations

import logging
from contextlib import contextmanager
from threading import Lock
from typing import Iterator

from core.exceptions import ConcurrencyError

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT_SECONDS = 10.0


class _LockEntry:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = Lock()
        self.holders = 0


class ResourceLockManager:
    """
    Per-resource mutual exclusion for the check-then-write section of a booking.

    One lock per resource id, created on demand and dropped once no thread holds
    or waits for it. Bookings of different resources never wait on each other.
    Cross-process exclusion comes from the store's row lock taken inside the
    same section.
    """

    def __init__(self, timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._timeout = float(timeout)
        self._registry_lock = Lock()
        self._entries: dict[str, _LockEntry] = {}

    @property
    def timeout(self) -> float:
        return self._timeout

    def active_count(self) -> int:
        with self._registry_lock:
            return len(self._entries)

    def _checkout(self, resource_id: str) -> _LockEntry:
        with self._registry_lock:
            entry = self._entries.get(resource_id)
            if entry is None:
                entry = _LockEntry()
                self._entries[resource_id] = entry
            entry.holders += 1
            return entry

    def _checkin(self, resource_id: str, entry: _LockEntry) -> None:
        with self._registry_lock:
            entry.holders -= 1
            if entry.holders == 0 and self._entries.get(resource_id) is entry:
                del self._entries[resource_id]

    @contextmanager
    def hold(self, resource_id: str) -> Iterator[None]:
        entry = self._checkout(resource_id)
        try:
            if not entry.lock.acquire(timeout=self._timeout):
                logger.warning(
                    "Timed out after %.1fs waiting for booking lock on resource %s",
                    self._timeout,
                    resource_id,
                )
                raise ConcurrencyError(
                    "Another booking for this resource is in progress. Please retry.",
                    code="RESOURCE_LOCK_TIMEOUT",
                )
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            self._checkin(resource_id, entry)


_default_manager: ResourceLockManager | None = None
_default_manager_guard = Lock()


def default_lock_manager(timeout: float | None = None) -> ResourceLockManager:
    """Process-wide manager shared by every service graph in this process."""
    global _default_manager
    with _default_manager_guard:
        if _default_manager is None:
            _default_manager = ResourceLockManager(
                timeout if timeout is not None else DEFAULT_LOCK_TIMEOUT_SECONDS
            )
        return _default_manager


__all__ = ["ResourceLockManager", "default_lock_manager", "DEFAULT_LOCK_TIMEOUT_SECONDS"]
