from __future__ import annotations

from typing import TYPE_CHECKING

from catalogsync.adapters.contentful import parse_catalog_record
from catalogsync.domain.data_integration import (
    FailedItem,
    ReconciledItem,
    SyncOutcome,
    run_sync_cycle,
)
from catalogsync.domain.errors import (
    SourceConfigFault,
    SourceTransportFault,
    UnexpectedFault,
)
from catalogsync.domain.model import QueryFilter
from catalogsync.domain.reconciliation import Reconciler, ReconcileStatus
from tests.helpers.catalog_items import (
    FakeCatalogRecordRepository,
    FakeCatalogSource,
    FakeCatalogUnitOfWork,
    failing_unit_of_work,
    make_raw_item,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork


def _fake_reconciler(repository: FakeCatalogRecordRepository) -> Reconciler:
    return Reconciler(lambda: FakeCatalogUnitOfWork(repository))


def test_cycle_reconciles_every_item() -> None:
    repository = FakeCatalogRecordRepository()
    source = FakeCatalogSource([make_raw_item("SKU-1"), make_raw_item("SKU-2")])

    outcome = run_sync_cycle(
        fetcher=source,
        reconciler=_fake_reconciler(repository),
        normalizer=parse_catalog_record,
    )

    assert isinstance(outcome, SyncOutcome)
    assert outcome.completed
    assert outcome.fetched == 2
    assert outcome.inserted == 2
    assert outcome.updated == 0
    assert outcome.failed == 0
    assert outcome.finished_at is not None
    assert set(repository.rows) == {"SKU-1", "SKU-2"}
    assert source.calls == 1


def test_second_cycle_reports_updates() -> None:
    repository = FakeCatalogRecordRepository()
    source = FakeCatalogSource([make_raw_item("SKU-1")])
    reconciler = _fake_reconciler(repository)

    run_sync_cycle(fetcher=source, reconciler=reconciler, normalizer=parse_catalog_record)
    outcome = run_sync_cycle(
        fetcher=source, reconciler=reconciler, normalizer=parse_catalog_record
    )

    assert outcome.inserted == 0
    assert outcome.updated == 1
    assert outcome.results == (ReconciledItem(sku="SKU-1", status=ReconcileStatus.UPDATED),)


def test_malformed_item_does_not_stop_the_cycle(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    source = FakeCatalogSource(
        [
            make_raw_item("SKU-1"),
            make_raw_item("SKU-2", entry_id="broken", omit=("sku",)),
            make_raw_item("SKU-3"),
        ]
    )

    outcome = run_sync_cycle(
        fetcher=source,
        reconciler=Reconciler(sqlite_unit_of_work),
        normalizer=parse_catalog_record,
    )

    assert outcome.fetched == 3
    assert outcome.reconciled == 2
    assert outcome.failed == 1
    failure = outcome.failures[0]
    assert failure.identity_key == "broken"
    assert "sku" in failure.reason
    with sqlite_unit_of_work() as uow:
        page, total = uow.repositories.records.find_page(QueryFilter(), offset=0, limit=10)
    assert total == 2
    assert [record.sku for record in page] == ["SKU-1", "SKU-3"]


def test_non_object_item_is_a_per_item_failure(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    source = FakeCatalogSource(
        [make_raw_item("SKU-1"), None, make_raw_item("SKU-3")]  # type: ignore[list-item]
    )

    outcome = run_sync_cycle(
        fetcher=source,
        reconciler=Reconciler(sqlite_unit_of_work),
        normalizer=parse_catalog_record,
    )

    assert outcome.fault is None
    assert outcome.fetched == 3
    assert outcome.reconciled == 2
    assert outcome.failed == 1
    assert "expected an object" in outcome.failures[0].reason
    with sqlite_unit_of_work() as uow:
        page, total = uow.repositories.records.find_page(QueryFilter(), offset=0, limit=10)
    assert total == 2
    assert [record.sku for record in page] == ["SKU-1", "SKU-3"]


def test_not_found_source_is_a_configuration_fault(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    source = FakeCatalogSource(error=SourceConfigFault("HTTP 404 NotFound", status_code=404))

    outcome = run_sync_cycle(
        fetcher=source,
        reconciler=Reconciler(sqlite_unit_of_work),
        normalizer=parse_catalog_record,
    )

    assert isinstance(outcome.fault, SourceConfigFault)
    assert outcome.fault.kind == "configuration"
    assert outcome.completed is False
    assert outcome.fetched == 0
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.records.count_all() == 0


def test_transport_fault_is_captured() -> None:
    source = FakeCatalogSource(error=SourceTransportFault("connection reset"))

    outcome = run_sync_cycle(
        fetcher=source,
        reconciler=_fake_reconciler(FakeCatalogRecordRepository()),
        normalizer=parse_catalog_record,
    )

    assert isinstance(outcome.fault, SourceTransportFault)
    assert outcome.fault.kind == "transient"


def test_unexpected_errors_are_wrapped() -> None:
    source = FakeCatalogSource(error=KeyError("items"))

    outcome = run_sync_cycle(
        fetcher=source,
        reconciler=_fake_reconciler(FakeCatalogRecordRepository()),
        normalizer=parse_catalog_record,
    )

    assert isinstance(outcome.fault, UnexpectedFault)
    assert isinstance(outcome.fault.__cause__, KeyError)


def test_storage_faults_are_recorded_per_item() -> None:
    source = FakeCatalogSource([make_raw_item("SKU-1"), make_raw_item("SKU-2")])

    outcome = run_sync_cycle(
        fetcher=source,
        reconciler=Reconciler(failing_unit_of_work),
        normalizer=parse_catalog_record,
    )

    assert outcome.completed
    assert outcome.failed == 2
    assert all(isinstance(result, FailedItem) for result in outcome.results)
    assert [failure.sku for failure in outcome.failures] == ["SKU-1", "SKU-2"]


def test_normalizer_crash_is_recorded_as_failure() -> None:
    def exploding_normalizer(_: object) -> None:
        raise TypeError("unexpected shape")

    outcome = run_sync_cycle(
        fetcher=FakeCatalogSource([make_raw_item("SKU-1")]),
        reconciler=_fake_reconciler(FakeCatalogRecordRepository()),
        normalizer=exploding_normalizer,  # type: ignore[arg-type]
    )

    assert outcome.completed
    assert outcome.failed == 1
    assert "unexpected shape" in outcome.failures[0].reason
