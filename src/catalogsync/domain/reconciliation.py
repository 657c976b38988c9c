"""Upsert normalized records into the store, one durable write per record."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.errors import ReconcileError

if TYPE_CHECKING:
    from catalogsync.domain.model import CatalogRecord
    from catalogsync.domain.ports.unit_of_work import CatalogUnitOfWorkFactory

log = getLogger(__name__)


class ReconcileStatus(StrEnum):
    INSERTED = "inserted"
    UPDATED = "updated"


@dataclass(slots=True)
class Reconciler:
    """Insert-or-replace catalog records keyed by ``sku``.

    Each call runs in its own unit of work so a failing record never rolls back
    its siblings. The replace is wholesale (last write wins); the soft-deletion
    timestamp and the identity key of an existing row are left untouched.
    """

    unit_of_work_factory: CatalogUnitOfWorkFactory

    def reconcile(self, record: CatalogRecord) -> ReconcileStatus:
        try:
            with self.unit_of_work_factory() as uow:
                records = uow.repositories.records
                existed = records.exists(record.sku)
                records.upsert(record)
                uow.commit()
        except Exception as exc:  # noqa: BLE001
            raise ReconcileError(
                f"Could not reconcile sku {record.sku}: {exc}", sku=record.sku
            ) from exc

        status = ReconcileStatus.UPDATED if existed else ReconcileStatus.INSERTED
        log.debug("Product SKU %s %s", record.sku, status)
        return status
