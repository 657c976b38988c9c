"""Location of the catalog store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATA_DIR_ENV: Final[str] = "CATALOGSYNC_DATA_DIR"
DEFAULT_DB_FILENAME: Final[str] = "catalogsync.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def catalog_data_dir() -> Path:
    """``CATALOGSYNC_DATA_DIR`` if set, else ``catalogsync`` under the XDG data home."""

    configured = os.getenv(DATA_DIR_ENV, "").strip()
    if configured:
        return Path(configured).expanduser().resolve()
    xdg_home = os.getenv("XDG_DATA_HOME", "").strip()
    base = Path(xdg_home) if xdg_home else Path.home() / ".local" / "share"
    return (base / "catalogsync").expanduser().resolve()


def get_database_config() -> DatabaseConfig:
    """Prefer ``DATABASE_URI``; otherwise use a SQLite file in the catalog data directory."""

    override = os.getenv(DATABASE_URI_ENV, "").strip()
    if override:
        return DatabaseConfig(uri=override)
    data_dir = catalog_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{data_dir / DEFAULT_DB_FILENAME}")
