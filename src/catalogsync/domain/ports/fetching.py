"""Ports for fetching raw catalog items from the external content source."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

type RawItem = Mapping[str, Any]


@dataclass(slots=True)
class CatalogFetchResult:
    """Raw items returned by one read of the content source."""

    items: list[RawItem] = field(default_factory=list[RawItem])
    total: int | None = None
    pages: int = 1


@runtime_checkable
class CatalogItemFetcher(Protocol):
    """Callable port performing a (paginated) read from the content source.

    Implementations raise ``SourceConfigFault`` for not-found/permanent answers and
    ``SourceTransportFault`` for any other network-level failure.
    """

    def __call__(self) -> CatalogFetchResult: ...


__all__ = ["CatalogFetchResult", "CatalogItemFetcher", "RawItem"]
