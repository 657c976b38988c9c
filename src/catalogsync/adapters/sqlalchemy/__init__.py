"""SQLAlchemy adapter package for catalogsync."""

from __future__ import annotations

from .mappings import catalog_record_table, create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyCatalogRecordRepository
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    ensure_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCatalogRecordRepository",
    "SqlAlchemyCatalogUnitOfWork",
    "StartupError",
    "catalog_record_table",
    "create_all_tables",
    "ensure_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
