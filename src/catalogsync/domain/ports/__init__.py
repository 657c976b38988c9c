"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import CatalogFetchResult, CatalogItemFetcher, RawItem
from .persistence import CatalogRecordRepository
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    CatalogUnitOfWorkFactory,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogFetchResult",
    "CatalogItemFetcher",
    "CatalogRecordRepository",
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "CatalogUnitOfWorkFactory",
    "RawItem",
    "RepositoryCollection",
    "UnitOfWork",
]
