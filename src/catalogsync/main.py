#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from datetime import UTC, datetime, time
from decimal import Decimal, InvalidOperation
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from catalogsync import app
from catalogsync.config import configure_logging
from catalogsync.domain.errors import RecordNotFound
from catalogsync.domain.model import QueryFilter, ReportFilter

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from catalogsync.domain.data_integration import SyncOutcome
    from catalogsync.domain.model import CatalogPage, CatalogRecord
    from catalogsync.domain.scheduling import SyncScheduler

EXIT_FATAL = 1
EXIT_USAGE = 2
EXIT_NOT_FOUND = 3

_scheduler: SyncScheduler | None = None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalogsync", description="Synchronise and query the product catalog"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sync", help="Run a single sync cycle")

    schedule = subparsers.add_parser("schedule", help="Sync now and then periodically")
    schedule.add_argument(
        "--interval",
        type=float,
        help="Seconds between cycles (default: CATALOG_SYNC_INTERVAL_SECONDS or 3600)",
    )

    products = subparsers.add_parser("products", help="List live products")
    for name in ("category", "brand", "model", "color", "currency"):
        products.add_argument(f"--{name}", help=f"Only products with this {name}")
    products.add_argument("--min-price", type=str, help="Inclusive lower price bound")
    products.add_argument("--max-price", type=str, help="Inclusive upper price bound")
    products.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    products.add_argument("--limit", type=int, help="Page size (default: DEFAULT_PAGE_SIZE or 5)")

    delete = subparsers.add_parser("delete", help="Soft-delete a product by SKU")
    delete.add_argument("sku")

    metrics = subparsers.add_parser("metrics", help="Deleted and filtered-active percentages")
    metrics.add_argument("--min-price", type=str, help="Minimum price of active products")
    metrics.add_argument(
        "--start", type=str, help="ISO-8601 date or timestamp; requires --end"
    )
    metrics.add_argument(
        "--end", type=str, help="ISO-8601 date or timestamp (a date covers the whole day)"
    )

    inventory = subparsers.add_parser("inventory-health", help="Per-category stock summary")
    inventory.add_argument("--category", help="Restrict the report to one category")

    return parser


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    return _build_parser().parse_args(list(argv))


def _parse_iso_datetime(value: str, *, end_of_day: bool = False) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if end_of_day and "T" not in normalized and " " not in normalized:
        dt = datetime.combine(dt.date(), time.max)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_price(value: str | None, *, label: str) -> Decimal | None:
    if value is None:
        return None
    try:
        price = Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid {label}: {value}") from exc
    if not price.is_finite() or price < 0:
        raise ValueError(f"Invalid {label}: {value}")
    return price


def _build_query(args: argparse.Namespace) -> QueryFilter:
    min_price = _parse_price(args.min_price, label="minimum price")
    max_price = _parse_price(args.max_price, label="maximum price")
    if min_price is not None and max_price is not None and min_price > max_price:
        raise ValueError("Minimum price must not exceed maximum price")
    return QueryFilter(
        category=args.category,
        brand=args.brand,
        model=args.model,
        color=args.color,
        currency=args.currency,
        min_price=min_price,
        max_price=max_price,
        page=args.page,
        limit=args.limit,
    )


def _build_report(args: argparse.Namespace) -> ReportFilter:
    if bool(args.start) != bool(args.end):
        raise ValueError("Both --start and --end are required for a date range")
    start = _parse_iso_datetime(args.start) if args.start else None
    end = _parse_iso_datetime(args.end, end_of_day=True) if args.end else None
    if start is not None and end is not None and start > end:
        raise ValueError("Start date must not be after end date")
    return ReportFilter(
        min_price=_parse_price(args.min_price, label="minimum price"),
        start_date=start,
        end_date=end,
    )


def _json_default(value: object) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _emit(payload: object) -> None:
    print(json.dumps(payload, default=_json_default, indent=2))


def _record_payload(record: CatalogRecord) -> dict[str, Any]:
    return {
        "sku": record.sku,
        "name": record.name,
        "brand": record.brand,
        "model": record.model,
        "category": record.category,
        "color": record.color,
        "price": record.price,
        "currency": record.currency,
        "stock": record.stock_quantity,
        "created_at": record.source_created_at,
        "updated_at": record.source_updated_at,
    }


def _page_payload(page: CatalogPage) -> dict[str, Any]:
    return {
        "data": [_record_payload(record) for record in page.items],
        "total": page.total,
        "page": page.page,
        "limit": page.limit,
        "totalPages": page.total_pages,
    }


def _outcome_payload(outcome: SyncOutcome) -> dict[str, Any]:
    return {
        "fetched": outcome.fetched,
        "inserted": outcome.inserted,
        "updated": outcome.updated,
        "failed": outcome.failed,
        "failures": [asdict(failure) for failure in outcome.failures],
        "fault": outcome.fault.kind if outcome.fault else None,
        "message": str(outcome.fault) if outcome.fault else None,
    }


def _run(args: argparse.Namespace) -> int:
    global _scheduler  # noqa: PLW0603

    match args.command:
        case "sync":
            outcome = app.sync_catalog()
            _emit(_outcome_payload(outcome))
            return 0 if outcome.completed else EXIT_FATAL
        case "schedule":
            _scheduler = app.build_catalog_scheduler(interval_seconds=args.interval)
            _scheduler.run_forever()
            return 0
        case "products":
            _emit(_page_payload(app.list_catalog_records(_build_query(args))))
            return 0
        case "delete":
            try:
                deleted_at = app.delete_catalog_record(args.sku)
            except RecordNotFound as exc:
                print(f"Error: {exc}", file=sys.stderr)
                return EXIT_NOT_FOUND
            _emit({"sku": args.sku, "deleted_at": deleted_at})
            return 0
        case "metrics":
            metrics = app.product_metrics(_build_report(args))
            _emit(
                {
                    "total": metrics.total_records,
                    "deletedPercentage": metrics.deleted_percentage,
                    "activeFilteredPercentage": metrics.active_filtered_percentage,
                }
            )
            return 0
        case "inventory-health":
            rows = app.inventory_health_report(args.category)
            _emit([asdict(row) for row in rows])
            return 0
        case _:
            raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)

    try:
        configure_logging()
        exit_code = _run(parsed_args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_USAGE)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FATAL)

    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    if _scheduler is not None:
        print("\nStopping scheduler after the current cycle (Ctrl+C)")
        _scheduler.stop()
        return
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
