"""Pydantic models describing the content delivery API payloads."""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime  # noqa: TC003
from decimal import Decimal  # noqa: TC003
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_LOCALE_KEY = re.compile(r"^[a-z]{2,3}(-[A-Za-z0-9]{2,4})?$")


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _unwrap_locale(value: object) -> object:
    """Return the first localized value of a ``{"en-US": value}`` map, else ``value``."""

    if isinstance(value, Mapping) and value:
        mapping_value = cast(Mapping[str, object], value)
        if all(isinstance(key, str) and _LOCALE_KEY.match(key) for key in mapping_value):
            return next(iter(mapping_value.values()))
    return value


class ContentfulBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EntriesResponse(ContentfulBaseModel):
    items: list[Any]
    total: int | None = None
    skip: int = 0
    limit: int | None = None


class ErrorSys(ContentfulBaseModel):
    id: str


class ErrorResponse(ContentfulBaseModel):
    sys: ErrorSys
    message: str = ""
    request_id: str | None = Field(default=None, alias="requestId")


class SysPayload(ContentfulBaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    _normalize_id = field_validator("id", mode="before")(_blank_to_none)


class FieldsPayload(ContentfulBaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    sku: str
    name: str
    price: Decimal
    brand: str = ""
    model: str = ""
    category: str = ""
    color: str | None = None
    currency: str = ""
    stock: int = 0

    @model_validator(mode="before")
    @classmethod
    def _unwrap_localized_fields(cls, value: object) -> object:
        if isinstance(value, Mapping):
            mapping_value = cast(Mapping[str, object], value)
            return {
                key: _unwrap_locale(item) if key in cls.model_fields else item
                for key, item in mapping_value.items()
            }
        return value

    @field_validator("sku", "name", "color", mode="before")
    @classmethod
    def _strip_text(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("brand", "model", "category", "currency", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("stock", mode="before")
    @classmethod
    def _none_to_zero(cls, value: object) -> object:
        return 0 if value is None else value


class ItemPayload(ContentfulBaseModel):
    sys: SysPayload
    fields_: FieldsPayload = Field(alias="fields")
    metadata: dict[str, Any] | None = None
