"""SQLAlchemy mapping metadata for the catalog domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Dialect,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.dialects.postgresql import JSONB

from catalogsync.domain.model import CatalogRecord

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


ResidualMetadataType = JSON().with_variant(JSONB(), "postgresql")

mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

catalog_record_table = Table(
    "catalog_record",
    mapper_registry.metadata,
    Column("sku", String(50), primary_key=True),
    Column("identity_key", String(255), nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("brand", String, nullable=False, default=""),
    Column("model", String, nullable=False, default=""),
    Column("category", String, nullable=False, default=""),
    Column("color", String, nullable=True),
    Column("price", Numeric(10, 2), nullable=False),
    Column("currency", String(3), nullable=False, default=""),
    Column("stock_quantity", Integer, nullable=False, default=0),
    Column("source_created_at", UTCDateTime(), nullable=False),
    Column("source_updated_at", UTCDateTime(), nullable=False),
    Column("soft_deleted_at", UTCDateTime(), nullable=True),
    Column("residual_metadata", ResidualMetadataType, nullable=False, default=dict),
    CheckConstraint("price >= 0", name="price_non_negative"),
    CheckConstraint("stock_quantity >= 0", name="stock_non_negative"),
    Index("ix_catalog_record_category", "category"),
    Index("ix_catalog_record_soft_deleted_at", "soft_deleted_at"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(CatalogRecord, catalog_record_table)
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
