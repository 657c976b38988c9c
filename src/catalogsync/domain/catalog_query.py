"""Filtered, paginated reads of the catalog and the explicit delete operation."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.config.sync import DEFAULT_PAGE_SIZE
from catalogsync.domain.errors import QueryStorageFault, RecordNotFound
from catalogsync.domain.model import CatalogPage, QueryFilter

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogsync.domain.ports.unit_of_work import CatalogUnitOfWorkFactory

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def resolve_pagination(query: QueryFilter, *, default_page_size: int) -> tuple[int, int]:
    """Return ``(page, limit)``, replacing values below 1 with the defaults."""

    page = query.page if query.page is not None and query.page >= 1 else 1
    limit = query.limit if query.limit is not None and query.limit >= 1 else default_page_size
    return page, limit


def query_catalog(
    query: QueryFilter | None = None,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory,
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> CatalogPage:
    """Return one page of records matching ``query`` plus the total match count.

    A storage failure degrades to an empty page with the requested cursor.
    """

    active_query = query or QueryFilter()
    page, limit = resolve_pagination(active_query, default_page_size=default_page_size)
    offset = (page - 1) * limit

    try:
        with unit_of_work_factory() as uow:
            items, total = uow.repositories.records.find_page(
                active_query, offset=offset, limit=limit
            )
    except Exception as exc:  # noqa: BLE001
        fault = QueryStorageFault(f"Error retrieving products: {exc}")
        log.error("%s", fault, exc_info=exc)
        return CatalogPage.empty(page=page, limit=limit)

    return CatalogPage(items=items, total=total, page=page, limit=limit)


def delete_catalog_record(
    sku: str,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory,
    clock: Callable[[], datetime] = _utcnow,
) -> datetime:
    """Soft-delete the live record with ``sku`` and return the deletion timestamp.

    Raises ``RecordNotFound`` when no live record carries that ``sku``.
    """

    deleted_at = clock()
    with unit_of_work_factory() as uow:
        if not uow.repositories.records.soft_delete(sku, at=deleted_at):
            raise RecordNotFound(sku)
        uow.commit()
    log.info("Product SKU %s deleted", sku)
    return deleted_at
