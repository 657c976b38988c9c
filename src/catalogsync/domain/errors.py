"""Error taxonomy for sync, query and reporting.

Per-item faults (``MalformedItem``, ``ReconcileError``) are recorded and the cycle
continues. Per-cycle faults (``SourceConfigFault``, ``SourceTransportFault``,
``UnexpectedFault``) end the current cycle only; the scheduler keeps running.
"""

from __future__ import annotations


class CatalogSyncError(RuntimeError):
    """Base class for catalog sync errors."""


class MalformedItem(CatalogSyncError):
    """A source item lacks required fields or carries invalid values."""

    def __init__(self, message: str, *, identity_key: str | None = None) -> None:
        super().__init__(message)
        self.identity_key = identity_key


class ReconcileError(CatalogSyncError):
    """Storage write failure while reconciling a single record."""

    def __init__(self, message: str, *, sku: str) -> None:
        super().__init__(message)
        self.sku = sku


class CycleFault(CatalogSyncError):
    """A fault that aborts the current sync cycle."""

    kind: str = "unexpected"


class SourceConfigFault(CycleFault):
    """The source answered not-found/permanently; its coordinates are probably wrong."""

    kind = "configuration"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SourceTransportFault(CycleFault):
    """Any other network-level failure talking to the source."""

    kind = "transient"


class UnexpectedFault(CycleFault):
    """Anything uncategorised that happened during a cycle."""

    kind = "unexpected"


class QueryStorageFault(CatalogSyncError):
    """Read failure while running a catalog query."""


class RecordNotFound(CatalogSyncError):
    """No live record exists for the requested sku."""

    def __init__(self, sku: str) -> None:
        super().__init__(f'Product with SKU "{sku}" not found.')
        self.sku = sku
