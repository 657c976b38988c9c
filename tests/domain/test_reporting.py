from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from catalogsync.domain.model import ProductMetrics, ReportFilter
from catalogsync.domain.reporting import catalog_metrics, inventory_health, percentage
from tests.helpers.catalog_items import (
    FakeCatalogRecordRepository,
    FakeCatalogUnitOfWork,
    failing_unit_of_work,
    make_record,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork

NOW = datetime(2024, 6, 1, 0, 0, tzinfo=UTC)
DELETED_AT = datetime(2024, 5, 20, tzinfo=UTC)


def _factory(repository: FakeCatalogRecordRepository) -> Callable[[], FakeCatalogUnitOfWork]:
    return lambda: FakeCatalogUnitOfWork(repository)


def _days_ago(days: int) -> datetime:
    return NOW - timedelta(days=days)


class _CountingRepository(FakeCatalogRecordRepository):
    def __init__(self) -> None:
        super().__init__()
        self.deleted_calls = 0

    def count_deleted(self) -> int:
        self.deleted_calls += 1
        return super().count_deleted()


def test_metrics_for_empty_catalog_short_circuit() -> None:
    repository = _CountingRepository()

    metrics = catalog_metrics(unit_of_work_factory=_factory(repository))

    assert metrics == ProductMetrics(
        total_records=0, deleted_percentage=0.0, active_filtered_percentage=0.0
    )
    assert repository.deleted_calls == 0


def test_metrics_report_ten_percent_deleted(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        for index in range(100):
            uow.repositories.records.upsert(
                make_record(
                    f"SKU-{index:03d}", deleted_at=DELETED_AT if index % 10 == 0 else None
                )
            )
        uow.commit()

    metrics = catalog_metrics(unit_of_work_factory=sqlite_unit_of_work)

    assert metrics.total_records == 100
    assert metrics.deleted_percentage == 10.0
    assert metrics.active_filtered_percentage == 90.0


def test_metrics_apply_price_and_date_filters() -> None:
    repository = FakeCatalogRecordRepository(
        [
            make_record("A", price="5.00", created_at=datetime(2024, 1, 5, tzinfo=UTC)),
            make_record("B", price="50.00", created_at=datetime(2024, 1, 20, tzinfo=UTC)),
            make_record("C", price="60.00", created_at=datetime(2024, 3, 1, tzinfo=UTC)),
        ]
    )
    report = ReportFilter(
        min_price=Decimal(10),
        start_date=datetime(2024, 1, 1, tzinfo=UTC),
        end_date=datetime(2024, 1, 31, tzinfo=UTC),
    )

    metrics = catalog_metrics(report, unit_of_work_factory=_factory(repository))

    assert metrics.total_records == 3
    assert metrics.deleted_percentage == 0.0
    assert metrics.active_filtered_percentage == 33.33


def test_metrics_ignore_partial_date_range() -> None:
    repository = FakeCatalogRecordRepository(
        [make_record("A", created_at=datetime(2020, 1, 1, tzinfo=UTC)), make_record("B")]
    )

    metrics = catalog_metrics(
        ReportFilter(start_date=datetime(2024, 1, 1, tzinfo=UTC)),
        unit_of_work_factory=_factory(repository),
    )

    assert metrics.active_filtered_percentage == 100.0


@pytest.mark.parametrize(
    ("count", "total", "expected"),
    [(1, 3, 33.33), (2, 3, 66.67), (1, 8, 12.5), (1, 200, 0.5), (0, 0, 0.0)],
)
def test_percentage_rounds_half_up(count: int, total: int, expected: float) -> None:
    assert percentage(count, total) == expected


def test_metrics_degrade_on_storage_fault() -> None:
    metrics = catalog_metrics(unit_of_work_factory=failing_unit_of_work)

    assert metrics.total_records == 0
    assert metrics.deleted_percentage == 0.0


def test_inventory_health_orders_by_stock_value() -> None:
    repository = FakeCatalogRecordRepository(
        [
            make_record("A1", category="A", price="10.00", stock=5, created_at=_days_ago(10)),
            make_record("A2", category="A", price="10.00", stock=5, created_at=_days_ago(20)),
            make_record("B1", category="B", price="5.00", stock=40, created_at=_days_ago(4)),
            make_record("C1", category="C", price="1.00", stock=3, created_at=NOW),
            make_record("C2", category="C", price="1000.00", stock=9, deleted_at=DELETED_AT),
        ]
    )

    rows = inventory_health(unit_of_work_factory=_factory(repository), clock=lambda: NOW)

    assert [row.category for row in rows] == ["B", "A", "C"]
    b_row, a_row, c_row = rows
    assert b_row.total_stock_value == Decimal("200.00")
    assert a_row.total_stock_value == Decimal("100.00")
    assert a_row.active_count == 2
    assert a_row.average_stock == 5
    assert a_row.average_age_days == pytest.approx(15.0)
    assert c_row.active_count == 1
    assert c_row.average_age_days == pytest.approx(0.0)


def test_inventory_health_breaks_ties_by_category() -> None:
    repository = FakeCatalogRecordRepository(
        [
            make_record("Z1", category="Zeta", price="2.00", stock=5),
            make_record("A1", category="Alpha", price="5.00", stock=2),
        ]
    )

    rows = inventory_health(unit_of_work_factory=_factory(repository), clock=lambda: NOW)

    assert [row.category for row in rows] == ["Alpha", "Zeta"]


def test_inventory_health_rounds_average_stock_half_up() -> None:
    repository = FakeCatalogRecordRepository(
        [
            make_record("A1", category="A", stock=2),
            make_record("A2", category="A", stock=3),
        ]
    )

    rows = inventory_health("A", unit_of_work_factory=_factory(repository), clock=lambda: NOW)

    assert rows[0].average_stock == 3


def test_inventory_health_for_unknown_category_is_empty(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.records.upsert(make_record("A1", category="Audio"))
        uow.commit()

    rows = inventory_health(
        "Nonexistent", unit_of_work_factory=sqlite_unit_of_work, clock=lambda: NOW
    )

    assert rows == []


def test_inventory_health_over_sqlite_store(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        records = uow.repositories.records
        records.upsert(make_record("A1", category="Audio", price="19.99", stock=3))
        records.upsert(make_record("V1", category="Video", price="5.00", stock=1))
        uow.commit()

    rows = inventory_health(unit_of_work_factory=sqlite_unit_of_work, clock=lambda: NOW)

    assert [row.category for row in rows] == ["Audio", "Video"]
    assert rows[0].total_stock_value == Decimal("59.97")


def test_inventory_health_degrades_on_storage_fault() -> None:
    assert inventory_health(unit_of_work_factory=failing_unit_of_work, clock=lambda: NOW) == []
