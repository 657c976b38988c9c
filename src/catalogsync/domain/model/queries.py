"""Transient filter and result shapes for catalog queries and reports."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal

    from .catalog import CatalogRecord


@dataclass(frozen=True, slots=True)
class QueryFilter:
    """Optional equality/range predicates plus a pagination cursor."""

    category: str | None = None
    brand: str | None = None
    model: str | None = None
    color: str | None = None
    currency: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    page: int = 1
    limit: int | None = None
    include_deleted: bool = False

    def equality_predicates(self) -> dict[str, str]:
        candidates = {
            "category": self.category,
            "brand": self.brand,
            "model": self.model,
            "color": self.color,
            "currency": self.currency,
        }
        return {name: value for name, value in candidates.items() if value}


@dataclass(frozen=True, slots=True)
class ReportFilter:
    """Filters for the metrics report.

    The date range is only honoured when both bounds are present; a partial pair
    is treated as no date filter.
    """

    min_price: Decimal | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @property
    def date_range(self) -> tuple[datetime, datetime] | None:
        if self.start_date is None or self.end_date is None:
            return None
        return self.start_date, self.end_date


@dataclass(slots=True)
class CatalogPage:
    items: list[CatalogRecord] = field(default_factory=list["CatalogRecord"])
    total: int = 0
    page: int = 1
    limit: int = 1

    @property
    def total_pages(self) -> int:
        if self.total <= 0:
            return 0
        return math.ceil(self.total / self.limit)

    @classmethod
    def empty(cls, *, page: int, limit: int) -> CatalogPage:
        return cls(items=[], total=0, page=page, limit=limit)


@dataclass(frozen=True, slots=True)
class ProductMetrics:
    total_records: int
    deleted_percentage: float
    active_filtered_percentage: float


@dataclass(frozen=True, slots=True)
class InventoryHealthRow:
    category: str
    active_count: int
    total_stock_value: Decimal
    average_stock: int
    average_age_days: float


@dataclass(frozen=True, slots=True)
class InventorySnapshot:
    """Projection of one live record used by the inventory health report."""

    category: str
    price: Decimal
    stock_quantity: int
    source_created_at: datetime
