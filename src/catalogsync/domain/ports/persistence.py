"""Ports for persisting and reading catalog records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import datetime

    from catalogsync.domain.model import (
        CatalogRecord,
        InventorySnapshot,
        QueryFilter,
        ReportFilter,
    )


@runtime_checkable
class CatalogRecordRepository(Protocol):
    """Persistence contract for catalog records keyed by ``sku``."""

    def exists(self, sku: str) -> bool: ...

    def upsert(self, record: CatalogRecord) -> None:
        """Insert the record or replace every mutable column of the row with its ``sku``."""
        ...

    def get(self, sku: str, *, include_deleted: bool = False) -> CatalogRecord | None: ...

    def soft_delete(self, sku: str, *, at: datetime) -> bool:
        """Mark a live row as deleted; return ``False`` when no live row matched."""
        ...

    def find_page(
        self, query: QueryFilter, *, offset: int, limit: int
    ) -> tuple[list[CatalogRecord], int]: ...

    def count_all(self) -> int: ...

    def count_deleted(self) -> int: ...

    def count_active(self, report: ReportFilter) -> int: ...

    def iter_inventory(self, *, category: str | None = None) -> Iterator[InventorySnapshot]: ...
