"""Public interface for the content delivery API adapter."""

from __future__ import annotations

from .client import ContentfulAPIError, ContentfulFetcher
from .schema import EntriesResponse, FieldsPayload, ItemPayload, SysPayload
from .translator import build_residual_metadata, parse_catalog_record

__all__ = [
    "ContentfulAPIError",
    "ContentfulFetcher",
    "EntriesResponse",
    "FieldsPayload",
    "ItemPayload",
    "SysPayload",
    "build_residual_metadata",
    "parse_catalog_record",
]
