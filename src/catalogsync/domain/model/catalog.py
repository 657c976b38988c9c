"""Catalog record: the durable entity reconciled from the content source."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, ClassVar, Final

# Columns replaced wholesale on every upsert. Sync never rewrites
# ``identity_key`` or ``soft_deleted_at``.
REPLACEABLE_FIELDS: Final[tuple[str, ...]] = (
    "name",
    "brand",
    "model",
    "category",
    "color",
    "price",
    "currency",
    "stock_quantity",
    "source_created_at",
    "source_updated_at",
    "residual_metadata",
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class CatalogRecord:
    """One product of the catalog, keyed by ``sku`` and identified upstream by ``identity_key``."""

    identity_key: str
    sku: str
    name: str
    price: Decimal
    brand: str = ""
    model: str = ""
    category: str = ""
    color: str | None = None
    currency: str = ""
    stock_quantity: int = 0
    source_created_at: datetime = field(default_factory=_utcnow)
    source_updated_at: datetime = field(default_factory=_utcnow)
    soft_deleted_at: datetime | None = None
    residual_metadata: dict[str, Any] = field(default_factory=dict[str, Any])

    CURRENCY_LENGTH: ClassVar[int] = 3
    # Prices are stored as NUMERIC(10, 2).
    PRICE_STEP: ClassVar[Decimal] = Decimal("0.01")

    def __post_init__(self) -> None:
        if not self.sku:
            raise ValueError("Catalog record requires a sku")
        if not self.identity_key:
            raise ValueError("Catalog record requires an identity key")
        if not isinstance(self.price, Decimal):
            self.price = Decimal(str(self.price))
        if not self.price.is_finite():
            raise ValueError(f"Price must be a finite number, got {self.price}")
        if self.price < 0:
            raise ValueError(f"Price must be non-negative, got {self.price}")
        self.price = self.price.quantize(self.PRICE_STEP, rounding=ROUND_HALF_UP)
        if self.stock_quantity < 0:
            raise ValueError(f"Stock quantity must be non-negative, got {self.stock_quantity}")
        if self.currency and len(self.currency) != self.CURRENCY_LENGTH:
            raise ValueError(f"Currency must be a 3-letter code, got {self.currency!r}")

    @property
    def is_deleted(self) -> bool:
        return self.soft_deleted_at is not None

    def mark_deleted(self, at: datetime | None = None) -> None:
        """Soft-delete the record; an existing deletion timestamp is kept."""

        if self.soft_deleted_at is None:
            self.soft_deleted_at = at or _utcnow()

    def replaceable_values(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in REPLACEABLE_FIELDS}

    def stock_value(self) -> Decimal:
        return self.price * self.stock_quantity

    def __repr__(self) -> str:
        state = "deleted" if self.is_deleted else "active"
        return f"CatalogRecord(sku={self.sku!r}, identity_key={self.identity_key!r}, {state})"
