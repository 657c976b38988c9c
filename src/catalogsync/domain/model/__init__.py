"""Domain model for the product catalog."""

from __future__ import annotations

from .catalog import REPLACEABLE_FIELDS, CatalogRecord
from .queries import (
    CatalogPage,
    InventoryHealthRow,
    InventorySnapshot,
    ProductMetrics,
    QueryFilter,
    ReportFilter,
)

__all__ = [
    "REPLACEABLE_FIELDS",
    "CatalogPage",
    "CatalogRecord",
    "InventoryHealthRow",
    "InventorySnapshot",
    "ProductMetrics",
    "QueryFilter",
    "ReportFilter",
]
