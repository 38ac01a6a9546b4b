from __future__ import annotations

from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from core.exceptions import ConcurrencyError, NotFoundError


def update_with_version_check(
    session: Session,
    orm_type: type[Any],
    row_id: str,
    expected_version: int,
    values: dict[str, Any],
    *,
    not_found_message: str,
    stale_message: str,
    not_found_code: str | None = None,
    extra_criteria: tuple[Any, ...] = (),
) -> int:
    """
    Compare-and-set update keyed on ``version``; returns the new version.
    ``extra_criteria`` narrows the match further (e.g. not soft-deleted); a row
    that exists but fails them is reported as stale, not missing.
    """
    next_version = int(expected_version) + 1
    stmt = (
        update(orm_type)
        .where(orm_type.id == row_id, orm_type.version == expected_version, *extra_criteria)
        .values(**values, version=next_version)
    )
    result = session.execute(stmt)
    if result.rowcount == 1:
        return next_version

    if session.get(orm_type, row_id) is None:
        raise NotFoundError(not_found_message, code=not_found_code)
    raise ConcurrencyError(stale_message, code="STALE_WRITE")
