from __future__ import annotations

from typing import Any
from uuid import uuid4


def generate_id() -> str:
    return str(uuid4())


def clean_id(value: Any) -> str | None:
    """Trimmed identifier text, or None when blank. Ids come from external directories."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = ["generate_id", "clean_id"]
