"""HTTP client for the content delivery API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

import httpx

from catalogsync.adapters.http_resilience import ResilientClient
from catalogsync.config.contentful import ContentSourceConfig, get_content_source_config
from catalogsync.domain.errors import SourceConfigFault, SourceTransportFault
from catalogsync.domain.ports.fetching import CatalogFetchResult, CatalogItemFetcher

from .schema import EntriesResponse, ErrorResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogsync.config.http_resilience import ResilienceConfig
    from catalogsync.domain.ports.fetching import RawItem

log = getLogger(__name__)

# Answers that will not change until the space/environment/token are fixed.
PERMANENT_STATUS_CODES: Final[frozenset[int]] = frozenset({401, 403, 404})


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class ContentfulAPIError(RuntimeError):
    """Raised when the content source answers with an unexpected payload."""


def _describe_error(response: httpx.Response) -> str:
    try:
        payload: Any = response.json()
        error = ErrorResponse.model_validate(payload)
    except ValueError:
        return f"HTTP {response.status_code}"
    return f"HTTP {response.status_code} {error.sys.id}: {error.message}".rstrip(": ")


@dataclass(slots=True)
class ContentfulFetcher:
    config: ContentSourceConfig = field(default_factory=get_content_source_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self) -> CatalogFetchResult:
        return asyncio.run(self._fetch_items_async())

    async def _fetch_items_async(self) -> CatalogFetchResult:
        items: list[RawItem] = []
        total: int | None = None
        pages = 0
        skip = 0

        async with self.client_factory(self.config.resilience) as client:
            while True:
                page = await self._request_entries(client=client, skip=skip)
                pages += 1
                items.extend(page.items)
                total = page.total
                skip += len(page.items)

                if not page.items or total is None or skip >= total:
                    break
                if self.config.max_pages is not None and pages >= self.config.max_pages:
                    log.info("Stopping after %s pages (%s of %s items)", pages, skip, total)
                    break

        log.debug("Fetched %s items in %s pages", len(items), pages)
        return CatalogFetchResult(items=items, total=total, pages=pages)

    async def _request_entries(self, *, client: ResilientClient, skip: int) -> EntriesResponse:
        params: dict[str, str | int] = {
            "content_type": self.config.content_type,
            "skip": skip,
            "limit": self.config.page_size,
        }
        headers = {"Authorization": f"Bearer {self.config.access_token}"}
        path = self.config.entries_path

        try:
            response = await client.get(path, params=httpx.QueryParams(params), headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            detail = _describe_error(exc.response)
            if status in PERMANENT_STATUS_CODES:
                raise SourceConfigFault(
                    f"Content source rejected {path}: {detail}", status_code=status
                ) from exc
            raise SourceTransportFault(f"Content source error for {path}: {detail}") from exc
        except httpx.HTTPError as exc:
            raise SourceTransportFault(f"Could not reach content source: {exc!r}") from exc

        payload = response.json()
        if not isinstance(payload, dict) or "items" not in payload:
            raise ContentfulAPIError("Unexpected content source payload")

        return EntriesResponse.model_validate(payload)


if TYPE_CHECKING:
    _fetcher_check: CatalogItemFetcher = ContentfulFetcher()
