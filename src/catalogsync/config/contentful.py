"""Content source (Contentful delivery API) configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import NO_RETRIES, RateLimit, ResilienceConfig

CONTENTFUL_BASE_URL = "https://cdn.contentful.com"
CONTENTFUL_TIMEOUT_SECONDS = 30.0
DEFAULT_CONTENT_TYPE = "product"
DEFAULT_ENTRIES_PAGE_SIZE = 100


@dataclass(frozen=True)
class ContentSourceConfig:
    """Holds the coordinates and credentials of the external content source."""

    space_id: str
    environment: str
    access_token: str
    resilience: ResilienceConfig
    content_type: str = DEFAULT_CONTENT_TYPE
    page_size: int = DEFAULT_ENTRIES_PAGE_SIZE
    max_pages: int | None = None

    @property
    def entries_path(self) -> str:
        return f"/spaces/{self.space_id}/environments/{self.environment}/entries"


def default_resilience_config(base_url: str = CONTENTFUL_BASE_URL) -> ResilienceConfig:
    # Retries stay off: a failed fetch is retried by the next scheduled cycle.
    return ResilienceConfig(
        base_url=base_url,
        timeout_seconds=CONTENTFUL_TIMEOUT_SECONDS,
        retry=NO_RETRIES,
        ratelimit=RateLimit(max_calls=50, per_seconds=1.0),
        default_headers={"Content-Type": "application/json"},
    )


def get_content_source_config(
    *,
    resilience: ResilienceConfig | None = None,
) -> ContentSourceConfig:
    values = require_env_vars(("CATALOG_SPACE_ID", "CATALOG_ENVIRONMENT", "CATALOG_ACCESS_TOKEN"))
    base_url = os.getenv("CATALOG_BASE_URL") or CONTENTFUL_BASE_URL
    content_type = os.getenv("CATALOG_CONTENT_TYPE") or DEFAULT_CONTENT_TYPE
    return ContentSourceConfig(
        space_id=values["CATALOG_SPACE_ID"],
        environment=values["CATALOG_ENVIRONMENT"],
        access_token=values["CATALOG_ACCESS_TOKEN"],
        content_type=content_type,
        resilience=resilience or default_resilience_config(base_url.rstrip("/")),
    )
