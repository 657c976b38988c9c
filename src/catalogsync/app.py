"""Application orchestration entry points."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.adapters.contentful import ContentfulFetcher, parse_catalog_record
from catalogsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork, ensure_started
from catalogsync.config import get_sync_config
from catalogsync.domain import catalog_query, reporting
from catalogsync.domain.data_integration import SyncOutcome, run_sync_cycle
from catalogsync.domain.reconciliation import Reconciler
from catalogsync.domain.scheduling import SyncScheduler

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogsync.domain.model import (
        CatalogPage,
        CatalogRecord,
        InventoryHealthRow,
        ProductMetrics,
        QueryFilter,
        ReportFilter,
    )
    from catalogsync.domain.ports.fetching import CatalogItemFetcher, RawItem
    from catalogsync.domain.ports.unit_of_work import CatalogUnitOfWorkFactory

    Normalizer = Callable[[RawItem], CatalogRecord]


log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def sync_catalog(
    *,
    source: CatalogItemFetcher | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    normalizer: Normalizer | None = None,
) -> SyncOutcome:
    """Run one catalog sync cycle using the configured adapters."""

    ensure_started()
    effective_source = source or ContentfulFetcher()
    effective_uow = unit_of_work_factory or SqlAlchemyCatalogUnitOfWork
    log.info("Starting catalog sync")

    return run_sync_cycle(
        fetcher=effective_source,
        reconciler=Reconciler(effective_uow),
        normalizer=normalizer or parse_catalog_record,
    )


def build_catalog_scheduler(
    *,
    source: CatalogItemFetcher | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    interval_seconds: float | None = None,
) -> SyncScheduler:
    """Create a scheduler that runs ``sync_catalog`` with shared adapters."""

    ensure_started()
    effective_source = source or ContentfulFetcher()
    interval = (
        interval_seconds
        if interval_seconds is not None
        else get_sync_config().sync_interval_seconds
    )

    def cycle() -> SyncOutcome:
        return sync_catalog(source=effective_source, unit_of_work_factory=unit_of_work_factory)

    return SyncScheduler(cycle, interval_seconds=interval)


def list_catalog_records(
    query: QueryFilter | None = None,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    default_page_size: int | None = None,
) -> CatalogPage:
    ensure_started()
    return catalog_query.query_catalog(
        query,
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyCatalogUnitOfWork,
        default_page_size=default_page_size or get_sync_config().default_page_size,
    )


def delete_catalog_record(
    sku: str,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    clock: Callable[[], datetime] = _utcnow,
) -> datetime:
    """Soft-delete a record by ``sku``; raises ``RecordNotFound`` when no live row exists."""

    ensure_started()
    return catalog_query.delete_catalog_record(
        sku,
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyCatalogUnitOfWork,
        clock=clock,
    )


def product_metrics(
    report: ReportFilter | None = None,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
) -> ProductMetrics:
    ensure_started()
    return reporting.catalog_metrics(
        report, unit_of_work_factory=unit_of_work_factory or SqlAlchemyCatalogUnitOfWork
    )


def inventory_health_report(
    category: str | None = None,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    clock: Callable[[], datetime] = _utcnow,
) -> list[InventoryHealthRow]:
    ensure_started()
    return reporting.inventory_health(
        category,
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyCatalogUnitOfWork,
        clock=clock,
    )
