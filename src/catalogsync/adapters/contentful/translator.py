"""Normalize raw content-source items into catalog records."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final, cast

from pydantic import ValidationError

from catalogsync.domain.errors import MalformedItem
from catalogsync.domain.model import CatalogRecord

from .schema import FieldsPayload, ItemPayload

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogsync.domain.ports.fetching import RawItem

log = getLogger(__name__)

CONSUMED_SYS_KEYS: Final[frozenset[str]] = frozenset({"id", "createdAt", "updatedAt"})
MAPPED_FIELD_KEYS: Final[frozenset[str]] = frozenset(FieldsPayload.model_fields)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime | None, fallback: datetime) -> datetime:
    if value is None:
        return fallback
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _peek_identity_key(raw: RawItem) -> str | None:
    sys_section = raw.get("sys")
    if isinstance(sys_section, Mapping):
        value = cast(Mapping[str, object], sys_section).get("id")
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _describe_validation_error(exc: ValidationError) -> str:
    problems: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        problems.append(f"{location} ({error['type']})")
    return "Invalid catalog item: " + ", ".join(problems)


def build_residual_metadata(raw: RawItem) -> dict[str, Any]:
    """Keep everything the record columns do not capture.

    ``sys_remaining`` is the identity section minus id/createdAt/updatedAt and
    ``metadata`` is the top-level companion object. Business fields the record
    does not map are kept under ``fields_remaining`` when present.
    """

    sys_section = cast(Mapping[str, Any], raw.get("sys") or {})
    fields_section = cast(Mapping[str, Any], raw.get("fields") or {})
    residual: dict[str, Any] = {
        "metadata": raw.get("metadata"),
        "sys_remaining": {
            key: value for key, value in sys_section.items() if key not in CONSUMED_SYS_KEYS
        },
    }
    unmapped = {
        key: value for key, value in fields_section.items() if key not in MAPPED_FIELD_KEYS
    }
    if unmapped:
        residual["fields_remaining"] = unmapped
    return residual


def parse_catalog_record(
    raw: object,
    *,
    clock: Callable[[], datetime] = _utcnow,
) -> CatalogRecord:
    """Map one raw source item onto a ``CatalogRecord`` draft.

    Raises ``MalformedItem`` when the item is not an object, when the external id,
    ``sku``, ``name`` or ``price`` is missing, or when a value violates the record
    invariants.
    """

    if not isinstance(raw, Mapping):
        raise MalformedItem(f"Invalid catalog item: expected an object, got {type(raw).__name__}")
    item = cast("RawItem", raw)
    identity_key = _peek_identity_key(item)
    try:
        payload = ItemPayload.model_validate(item)
    except ValidationError as exc:
        raise MalformedItem(_describe_validation_error(exc), identity_key=identity_key) from None

    fields = payload.fields_
    now = clock()
    try:
        return CatalogRecord(
            identity_key=payload.sys.id,
            sku=fields.sku,
            name=fields.name,
            brand=fields.brand,
            model=fields.model,
            category=fields.category,
            color=fields.color,
            price=fields.price,
            currency=fields.currency.upper(),
            stock_quantity=fields.stock,
            source_created_at=_as_utc(payload.sys.created_at, now),
            source_updated_at=_as_utc(payload.sys.updated_at, now),
            residual_metadata=build_residual_metadata(item),
        )
    except ValueError as exc:
        log.debug("Rejected item %s: %s", identity_key, exc)
        raise MalformedItem(str(exc), identity_key=identity_key) from exc
