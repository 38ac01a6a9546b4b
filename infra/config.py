# infra/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from core.services.allocation.locking import DEFAULT_LOCK_TIMEOUT_SECONDS
from infra.path import default_db_path, default_log_dir


@dataclass(frozen=True)
class EngineSettings:
    db_url: str
    log_dir: Path
    log_level: int = logging.INFO
    lock_timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS
    sql_echo: bool = False


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be greater than 0, got {raw!r}")
    return value


def _env_bool(name: str) -> bool:
    return _env(name).lower() in {"1", "true", "yes", "on"}


def _log_level(raw: str) -> int:
    if not raw:
        return logging.INFO
    level = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        raise ValueError(f"PM_LOG_LEVEL must be a logging level name, got {raw!r}")
    return level


def load_settings() -> EngineSettings:
    db_url = _env("PM_DB_URL") or f"sqlite:///{default_db_path().as_posix()}"
    log_dir = Path(_env("PM_LOG_DIR")).expanduser() if _env("PM_LOG_DIR") else default_log_dir()
    return EngineSettings(
        db_url=db_url,
        log_dir=log_dir,
        log_level=_log_level(_env("PM_LOG_LEVEL")),
        lock_timeout_seconds=_env_float("PM_RESOURCE_LOCK_TIMEOUT", DEFAULT_LOCK_TIMEOUT_SECONDS),
        sql_echo=_env_bool("PM_SQL_ECHO"),
    )


__all__ = ["EngineSettings", "load_settings"]
