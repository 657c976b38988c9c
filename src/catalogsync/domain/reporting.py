"""Aggregate reports over the catalog store."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.errors import QueryStorageFault
from catalogsync.domain.model import InventoryHealthRow, ProductMetrics, ReportFilter

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from catalogsync.domain.model import InventorySnapshot
    from catalogsync.domain.ports.unit_of_work import CatalogUnitOfWorkFactory

log = getLogger(__name__)

_HUNDRED = Decimal(100)
_CENTS = Decimal("0.01")
_SECONDS_PER_DAY = 86_400


def _utcnow() -> datetime:
    return datetime.now(UTC)


def percentage(count: int, total: int) -> float:
    """``100 * count / total`` rounded half-up to two decimals; 0 when ``total`` is 0."""

    if total <= 0:
        return 0.0
    value = (_HUNDRED * count / total).quantize(_CENTS, rounding=ROUND_HALF_UP)
    return float(value)


def _round_half_up_int(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def catalog_metrics(
    report: ReportFilter | None = None,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory,
) -> ProductMetrics:
    """Return the share of deleted records and of live records matching ``report``."""

    active_report = report or ReportFilter()
    try:
        with unit_of_work_factory() as uow:
            records = uow.repositories.records
            total = records.count_all()
            if total == 0:
                return ProductMetrics(
                    total_records=0, deleted_percentage=0.0, active_filtered_percentage=0.0
                )
            deleted = records.count_deleted()
            active = records.count_active(active_report)
    except Exception as exc:  # noqa: BLE001
        log.error("%s", QueryStorageFault(f"Error computing product metrics: {exc}"), exc_info=exc)
        return ProductMetrics(
            total_records=0, deleted_percentage=0.0, active_filtered_percentage=0.0
        )

    return ProductMetrics(
        total_records=total,
        deleted_percentage=percentage(deleted, total),
        active_filtered_percentage=percentage(active, total),
    )


@dataclass(slots=True)
class _CategoryAccumulator:
    count: int = 0
    stock_value: Decimal = Decimal(0)
    stock_total: int = 0
    age_seconds: float = 0.0

    def add(self, snapshot: InventorySnapshot, *, now: datetime) -> None:
        self.count += 1
        self.stock_value += Decimal(snapshot.price) * snapshot.stock_quantity
        self.stock_total += snapshot.stock_quantity
        self.age_seconds += (now - snapshot.source_created_at).total_seconds()

    def to_row(self, category: str) -> InventoryHealthRow:
        return InventoryHealthRow(
            category=category,
            active_count=self.count,
            total_stock_value=self.stock_value,
            average_stock=_round_half_up_int(Decimal(self.stock_total) / self.count),
            average_age_days=self.age_seconds / self.count / _SECONDS_PER_DAY,
        )


def summarize_inventory(
    snapshots: Iterable[InventorySnapshot], *, now: datetime
) -> list[InventoryHealthRow]:
    """Group live snapshots by category, ordered by stock value (ties by category)."""

    groups: defaultdict[str, _CategoryAccumulator] = defaultdict(_CategoryAccumulator)
    for snapshot in snapshots:
        groups[snapshot.category].add(snapshot, now=now)
    rows = [accumulator.to_row(category) for category, accumulator in groups.items()]
    rows.sort(key=lambda row: (-row.total_stock_value, row.category))
    return rows


def inventory_health(
    category: str | None = None,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory,
    clock: Callable[[], datetime] = _utcnow,
) -> list[InventoryHealthRow]:
    """Per-category stock summary of live records, optionally for one category."""

    now = clock()
    try:
        with unit_of_work_factory() as uow:
            return summarize_inventory(
                uow.repositories.records.iter_inventory(category=category), now=now
            )
    except Exception as exc:  # noqa: BLE001
        log.error("%s", QueryStorageFault(f"Error computing inventory health: {exc}"), exc_info=exc)
        return []
