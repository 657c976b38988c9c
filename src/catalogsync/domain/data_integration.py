"""Application services for ingesting the product catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import reduce
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.errors import (
    CycleFault,
    MalformedItem,
    ReconcileError,
    SourceConfigFault,
    SourceTransportFault,
    UnexpectedFault,
)
from catalogsync.domain.reconciliation import ReconcileStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogsync.domain.model import CatalogRecord
    from catalogsync.domain.ports.fetching import CatalogItemFetcher, RawItem
    from catalogsync.domain.reconciliation import Reconciler

    Normalizer = Callable[[RawItem], CatalogRecord]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReconciledItem:
    sku: str
    status: ReconcileStatus


@dataclass(frozen=True, slots=True)
class FailedItem:
    reason: str
    sku: str | None = None
    identity_key: str | None = None


type ItemResult = ReconciledItem | FailedItem


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class SyncOutcome:
    """Outcome of one sync cycle. Not persisted; logged at the boundary."""

    fetched: int = 0
    results: tuple[ItemResult, ...] = ()
    fault: CycleFault | None = None
    started_at: datetime = field(default_factory=_utcnow)
    finished_at: datetime | None = None

    @property
    def inserted(self) -> int:
        return self._count(ReconcileStatus.INSERTED)

    @property
    def updated(self) -> int:
        return self._count(ReconcileStatus.UPDATED)

    @property
    def reconciled(self) -> int:
        return sum(1 for result in self.results if isinstance(result, ReconciledItem))

    @property
    def failures(self) -> list[FailedItem]:
        return [result for result in self.results if isinstance(result, FailedItem)]

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def completed(self) -> bool:
        return self.fault is None

    def _count(self, status: ReconcileStatus) -> int:
        return sum(
            1
            for result in self.results
            if isinstance(result, ReconciledItem) and result.status is status
        )


def reconcile_item(raw: RawItem, *, normalizer: Normalizer, reconciler: Reconciler) -> ItemResult:
    """Normalize and reconcile one raw item, folding any failure into a ``FailedItem``."""

    try:
        record = normalizer(raw)
    except MalformedItem as exc:
        return FailedItem(reason=str(exc), identity_key=exc.identity_key)
    except Exception as exc:  # noqa: BLE001
        log.exception("Unexpected error normalizing item")
        return FailedItem(reason=f"Unexpected normalization error: {exc!r}")

    try:
        status = reconciler.reconcile(record)
    except ReconcileError as exc:
        return FailedItem(reason=str(exc), sku=exc.sku, identity_key=record.identity_key)
    return ReconciledItem(sku=record.sku, status=status)


def _accumulate(results: tuple[ItemResult, ...], result: ItemResult) -> tuple[ItemResult, ...]:
    if isinstance(result, FailedItem):
        log.warning(
            "Skipping item (sku=%s, id=%s): %s", result.sku, result.identity_key, result.reason
        )
    return (*results, result)


def run_sync_cycle(
    *,
    fetcher: CatalogItemFetcher,
    reconciler: Reconciler,
    normalizer: Normalizer,
) -> SyncOutcome:
    """Fetch the catalog and reconcile every item, returning a cycle summary.

    Never raises for source or storage problems: per-item failures are recorded in
    the outcome's results and cycle-level faults in ``SyncOutcome.fault``.
    """

    outcome = SyncOutcome()
    log.info("Running catalog sync cycle")
    try:
        fetched = fetcher()
        items = list(fetched.items)
        outcome.fetched = len(items)
        outcome.results = reduce(
            _accumulate,
            (
                reconcile_item(raw, normalizer=normalizer, reconciler=reconciler)
                for raw in items
            ),
            (),
        )
    except SourceConfigFault as fault:
        log.error(
            "Content source not found or rejected the request; check space, environment "
            "and access token: %s",
            fault,
        )
        outcome.fault = fault
    except SourceTransportFault as fault:
        log.error("Transient error fetching catalog, retrying next cycle: %s", fault)
        outcome.fault = fault
    except Exception as exc:  # noqa: BLE001
        log.exception("Unexpected error during catalog sync")
        fault = UnexpectedFault(f"Unexpected error during catalog sync: {exc!r}")
        fault.__cause__ = exc
        outcome.fault = fault

    outcome.finished_at = _utcnow()
    log.info(
        f"Finished catalog sync: fetched={outcome.fetched}, inserted={outcome.inserted}, "
        f"updated={outcome.updated}, failed={outcome.failed}, "
        f"fault={outcome.fault.kind if outcome.fault else None}"
    )
    return outcome
