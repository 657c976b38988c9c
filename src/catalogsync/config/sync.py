"""Synchronization and query defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_int_env

DEFAULT_SYNC_INTERVAL_SECONDS = 3600
DEFAULT_PAGE_SIZE = 5


@dataclass(frozen=True, slots=True)
class SyncConfig:
    sync_interval_seconds: int = DEFAULT_SYNC_INTERVAL_SECONDS
    default_page_size: int = DEFAULT_PAGE_SIZE


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        sync_interval_seconds=optional_int_env(
            "CATALOG_SYNC_INTERVAL_SECONDS", DEFAULT_SYNC_INTERVAL_SECONDS
        ),
        default_page_size=optional_int_env("DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE),
    )
