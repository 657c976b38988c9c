"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import ColumnElement, func, select, update
from sqlalchemy.dialects import postgresql, sqlite

from catalogsync.adapters.sqlalchemy.mappings import catalog_record_table
from catalogsync.domain.model import (
    REPLACEABLE_FIELDS,
    CatalogRecord,
    InventorySnapshot,
    QueryFilter,
    ReportFilter,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from datetime import datetime

    from sqlalchemy import CursorResult
    from sqlalchemy.orm import Session

_columns = catalog_record_table.c


def _insert_for(session: Session) -> Callable[..., Any]:
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise NotImplementedError(f"Upsert is not supported for the {dialect!r} dialect")


def _live_only() -> ColumnElement[bool]:
    return _columns.soft_deleted_at.is_(None)


def query_conditions(query: QueryFilter) -> list[ColumnElement[bool]]:
    """Build the ANDed predicate list for a catalog query."""

    conditions: list[ColumnElement[bool]] = []
    if not query.include_deleted:
        conditions.append(_live_only())
    for name, value in query.equality_predicates().items():
        conditions.append(_columns[name] == value)
    if query.min_price is not None:
        conditions.append(_columns.price >= query.min_price)
    if query.max_price is not None:
        conditions.append(_columns.price <= query.max_price)
    return conditions


def report_conditions(report: ReportFilter) -> list[ColumnElement[bool]]:
    """Predicates for the live, filtered part of the metrics report."""

    conditions: list[ColumnElement[bool]] = [_live_only()]
    if report.min_price is not None:
        conditions.append(_columns.price >= report.min_price)
    date_range = report.date_range
    if date_range is not None:
        start, end = date_range
        conditions.append(_columns.source_created_at.between(start, end))
    return conditions


class SqlAlchemyCatalogRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def exists(self, sku: str) -> bool:
        stmt = select(_columns.sku).where(_columns.sku == sku).limit(1)
        return self.session.execute(stmt).scalar_one_or_none() is not None

    def upsert(self, record: CatalogRecord) -> None:
        values = {
            "sku": record.sku,
            "identity_key": record.identity_key,
            "soft_deleted_at": record.soft_deleted_at,
            **record.replaceable_values(),
        }
        insert_stmt = _insert_for(self.session)(catalog_record_table).values(**values)
        stmt = insert_stmt.on_conflict_do_update(
            index_elements=[_columns.sku],
            set_={name: insert_stmt.excluded[name] for name in REPLACEABLE_FIELDS},
        )
        self.session.execute(stmt)

    def get(self, sku: str, *, include_deleted: bool = False) -> CatalogRecord | None:
        stmt = select(CatalogRecord).where(_columns.sku == sku)
        if not include_deleted:
            stmt = stmt.where(_live_only())
        stmt = stmt.execution_options(populate_existing=True)
        return self.session.execute(stmt).scalar_one_or_none()

    def soft_delete(self, sku: str, *, at: datetime) -> bool:
        stmt = (
            update(catalog_record_table)
            .where(_columns.sku == sku)
            .where(_live_only())
            .values(soft_deleted_at=at)
        )
        result = cast("CursorResult[Any]", self.session.execute(stmt))
        return result.rowcount > 0

    def find_page(
        self, query: QueryFilter, *, offset: int, limit: int
    ) -> tuple[list[CatalogRecord], int]:
        conditions = query_conditions(query)
        count_stmt = select(func.count()).select_from(catalog_record_table).where(*conditions)
        total = self.session.execute(count_stmt).scalar_one()

        # sku is the primary key, so ordering by it is total and stable across pages.
        stmt = (
            select(CatalogRecord)
            .where(*conditions)
            .order_by(_columns.sku)
            .offset(offset)
            .limit(limit)
        )
        items = list(self.session.execute(stmt).scalars())
        return items, int(total)

    def count_all(self) -> int:
        stmt = select(func.count()).select_from(catalog_record_table)
        return int(self.session.execute(stmt).scalar_one())

    def count_deleted(self) -> int:
        stmt = (
            select(func.count())
            .select_from(catalog_record_table)
            .where(_columns.soft_deleted_at.is_not(None))
        )
        return int(self.session.execute(stmt).scalar_one())

    def count_active(self, report: ReportFilter) -> int:
        stmt = (
            select(func.count())
            .select_from(catalog_record_table)
            .where(*report_conditions(report))
        )
        return int(self.session.execute(stmt).scalar_one())

    def iter_inventory(self, *, category: str | None = None) -> Iterator[InventorySnapshot]:
        stmt = (
            select(
                _columns.category,
                _columns.price,
                _columns.stock_quantity,
                _columns.source_created_at,
            )
            .where(_live_only())
            .order_by(_columns.category, _columns.sku)
        )
        if category is not None:
            stmt = stmt.where(_columns.category == category)
        for row in self.session.execute(stmt):
            yield InventorySnapshot(
                category=row.category,
                price=row.price,
                stock_quantity=row.stock_quantity,
                source_created_at=row.source_created_at,
            )


if TYPE_CHECKING:
    from catalogsync.domain.ports.persistence import CatalogRecordRepository

    _session_stub = cast("Session", object())
    _repo_check: CatalogRecordRepository = SqlAlchemyCatalogRecordRepository(_session_stub)
