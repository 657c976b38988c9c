from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from catalogsync.domain.model import (
    REPLACEABLE_FIELDS,
    CatalogPage,
    CatalogRecord,
    QueryFilter,
    ReportFilter,
)
from tests.helpers.catalog_items import make_record


def test_record_coerces_price_to_decimal() -> None:
    record = CatalogRecord(
        identity_key="entry-1", sku="SKU-1", name="Widget", price=3  # type: ignore[arg-type]
    )

    assert record.price == Decimal(3)
    assert isinstance(record.price, Decimal)
    assert record.stock_value() == Decimal(0)


@pytest.mark.parametrize(
    ("price", "stored"),
    [
        (Decimal("2.345"), Decimal("2.35")),
        (Decimal("2.344"), Decimal("2.34")),
        ("0.005", Decimal("0.01")),
        (7, Decimal("7.00")),
    ],
)
def test_record_rounds_price_half_up_to_cents(price: object, stored: Decimal) -> None:
    record = make_record(price=price)  # type: ignore[arg-type]

    assert record.price == stored
    assert record.price.as_tuple().exponent == -2


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"sku": ""}, "sku"),
        ({"identity_key": ""}, "identity key"),
        ({"price": Decimal("-0.01")}, "Price"),
        ({"price": Decimal("NaN")}, "finite"),
        ({"stock_quantity": -1}, "Stock quantity"),
        ({"currency": "EURO"}, "Currency"),
    ],
)
def test_record_rejects_invalid_values(overrides: dict[str, object], message: str) -> None:
    values: dict[str, object] = {
        "identity_key": "entry-1",
        "sku": "SKU-1",
        "name": "Widget",
        "price": Decimal(1),
    }
    values.update(overrides)

    with pytest.raises(ValueError, match=message):
        CatalogRecord(**values)  # type: ignore[arg-type]


def test_mark_deleted_keeps_first_timestamp() -> None:
    record = make_record()
    first = datetime(2024, 1, 1, tzinfo=UTC)

    record.mark_deleted(first)
    record.mark_deleted(datetime(2024, 2, 1, tzinfo=UTC))

    assert record.is_deleted
    assert record.soft_deleted_at == first


def test_replaceable_values_exclude_identity_and_deletion() -> None:
    values = make_record(stock=4, price="2.50").replaceable_values()

    assert set(values) == set(REPLACEABLE_FIELDS)
    assert "identity_key" not in values
    assert "soft_deleted_at" not in values
    assert values["stock_quantity"] == 4


def test_query_filter_equality_predicates_skip_empty_values() -> None:
    query = QueryFilter(category="Audio", brand="", color=None, currency="USD")

    assert query.equality_predicates() == {"category": "Audio", "currency": "USD"}


def test_report_filter_needs_both_dates_for_a_range() -> None:
    start = datetime(2024, 1, 1, tzinfo=UTC)
    end = datetime(2024, 1, 31, tzinfo=UTC)

    assert ReportFilter(start_date=start).date_range is None
    assert ReportFilter(end_date=end).date_range is None
    assert ReportFilter(start_date=start, end_date=end).date_range == (start, end)


@pytest.mark.parametrize(
    ("total", "limit", "pages"), [(0, 5, 0), (5, 5, 1), (6, 5, 2), (12, 5, 3)]
)
def test_catalog_page_total_pages(total: int, limit: int, pages: int) -> None:
    assert CatalogPage(total=total, limit=limit).total_pages == pages
