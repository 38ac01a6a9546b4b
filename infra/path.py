# infra/path.py
from __future__ import annotations
import os
import sys
from pathlib import Path

APP_NAME = "ResourceAllocationEngine"
COMPANY_NAME = "TECHASH"


def user_data_dir() -> Path:
    """
    Per-user data directory for the engine's SQLite file and logs.

    Windows: %APPDATA%\\TECHASH\\ResourceAllocationEngine
    macOS:   ~/Library/Application Support/TECHASH/ResourceAllocationEngine
    Linux:   $XDG_DATA_HOME/TECHASH/ResourceAllocationEngine
    """
    override = (os.getenv("PM_DATA_DIR") or "").strip()
    if override:
        path = Path(override).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return path
    try:
        if sys.platform.startswith("win"):
            base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
        elif sys.platform == "darwin":
            base = Path.home() / "Library" / "Application Support"
        else:
            base = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))

        path = base / COMPANY_NAME / APP_NAME
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError:
        # Last-resort fallback: use home directory
        fallback = Path.home() / f".{APP_NAME}"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def default_db_path() -> Path:
    return user_data_dir() / "allocations.db"


def default_log_dir() -> Path:
    return user_data_dir() / "logs"
