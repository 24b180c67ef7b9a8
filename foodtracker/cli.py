"""CLI entry point for the purchase tracker."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date

from dotenv import load_dotenv

from .config import TrackerConfig, load_config
from .controller import SORT_KEYS, FilterSpec, TrackerController, with_changes
from .db import FlatMirror, PurchaseDB
from .errors import (
    InvalidPurchaseDate,
    StoreInitError,
    UnsupportedCurrency,
    UnsupportedUnit,
)
from .models import RecordFields
from .pricing import SUPPORTED_UNITS, CurrencyConverter, PricingCalculator, format_currency


def _iso_date(value: str) -> str:
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid date {value!r}, expected YYYY-MM-DD"
        ) from None


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="foodtracker",
        description="Track food purchases and compare unit prices across stores",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a TOML configuration file",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # list
    list_parser = sub.add_parser("list", help="List purchases")
    list_parser.add_argument("--product", default="", help="Product name contains")
    list_parser.add_argument("--store", default="", help="Store name contains")
    list_parser.add_argument("--unit", default="", choices=("",) + SUPPORTED_UNITS)
    list_parser.add_argument("--sort", default=None, choices=SORT_KEYS)
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # add
    add_parser = sub.add_parser("add", help="Record a purchase")
    add_parser.add_argument("product", help="Product name")
    add_parser.add_argument("store", help="Store name")
    add_parser.add_argument("quantity", type=float)
    add_parser.add_argument("unit", help=f"One of {', '.join(SUPPORTED_UNITS)}")
    add_parser.add_argument("price", type=float, help="Total price paid")
    add_parser.add_argument("currency", help="Currency code, e.g. DKK")
    add_parser.add_argument(
        "--date",
        type=_iso_date,
        default=None,
        dest="purchase_date",
        help="ISO date YYYY-MM-DD (default: today)",
    )
    add_parser.add_argument("--notes", default="")

    # edit
    edit_parser = sub.add_parser("edit", help="Change fields of a purchase")
    edit_parser.add_argument("id", type=int)
    edit_parser.add_argument("--product", default=None)
    edit_parser.add_argument("--store", default=None)
    edit_parser.add_argument("--quantity", type=float, default=None)
    edit_parser.add_argument("--unit", default=None)
    edit_parser.add_argument("--price", type=float, default=None)
    edit_parser.add_argument("--currency", default=None)
    edit_parser.add_argument("--date", type=_iso_date, default=None, dest="purchase_date")
    edit_parser.add_argument("--notes", default=None)

    # delete
    delete_parser = sub.add_parser("delete", help="Delete a purchase")
    delete_parser.add_argument("id", type=int)

    # compare
    compare_parser = sub.add_parser("compare", help="Compare prices of one product")
    compare_parser.add_argument("name", help="Product name (case-insensitive)")
    compare_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # values
    values_parser = sub.add_parser("values", help="Distinct values of a field")
    values_parser.add_argument("field", help="e.g. product_name, store_name, unit")

    # total
    sub.add_parser("total", help="Total spent in the anchor currency")

    # seed-status
    sub.add_parser("seed-status", help="Show where the purchase data was loaded from")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    load_dotenv()
    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        code = asyncio.run(_run(config, args))
    except StoreInitError as e:
        print(f"Cannot open storage: {e}", file=sys.stderr)
        sys.exit(1)
    if code:
        sys.exit(code)


def build_controller(config: TrackerConfig) -> TrackerController:
    """Wire storage tiers and pricing from configuration."""
    db = PurchaseDB(config.database.path)
    mirror = (
        FlatMirror(config.mirror.path, records_key=config.mirror.key)
        if config.mirror.enabled
        else None
    )
    converter = CurrencyConverter(config.currency.rates, anchor=config.currency.anchor)
    return TrackerController(db, mirror, PricingCalculator(converter))


async def _run(config: TrackerConfig, args) -> int:
    controller = build_controller(config)
    try:
        await controller.load_all()

        match args.command:
            case "list":
                return _cmd_list(controller, config, args)
            case "add":
                return await _cmd_add(controller, args)
            case "edit":
                return await _cmd_edit(controller, args)
            case "delete":
                return await _cmd_delete(controller, args)
            case "compare":
                return _cmd_compare(controller, args)
            case "values":
                return _cmd_values(controller, args)
            case "total":
                total = controller.total_spent()
                print(format_currency(total, controller.calculator.anchor))
                return 0
            case "seed-status":
                print(controller.state.load_state.value)
                return 0
    finally:
        controller.close()
    return 1


def _cmd_list(controller: TrackerController, config: TrackerConfig, args) -> int:
    spec = FilterSpec(product=args.product, store=args.store, unit=args.unit)
    items = controller.list_filtered(spec, args.sort or config.display.default_sort)

    if args.json:
        data = [
            {**r.to_dict(), "unitPrice": controller.calculator.describe(r)}
            for r in items
        ]
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return 0

    if not items:
        print("No purchases found.")
        return 0
    for r in items:
        print(
            f"{r.id!s:>4}  {r.purchase_date}  {r.product_name:<20} {r.store_name:<15} "
            f"{r.quantity:g} {r.unit:<5} {format_currency(r.price, r.currency):>12}  "
            f"{controller.calculator.describe(r)}"
        )
    return 0


def _print_failure(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


async def _cmd_add(controller: TrackerController, args) -> int:
    values = RecordFields(
        product_name=args.product,
        store_name=args.store,
        quantity=args.quantity,
        unit=args.unit,
        price=args.price,
        currency=args.currency,
        purchase_date=args.purchase_date or date.today().isoformat(),
        notes=args.notes,
    )
    try:
        result = await controller.create(values)
    except (UnsupportedUnit, UnsupportedCurrency, InvalidPurchaseDate) as e:
        return _print_failure(str(e))

    if not result.ok:
        return _print_failure(result.error)
    print(f"Added purchase {result.record.id}")
    return 0


async def _cmd_edit(controller: TrackerController, args) -> int:
    current = controller.get(args.id)
    if current is None:
        return _print_failure(f"No purchase with id {args.id}")

    changes = {
        "product_name": args.product,
        "store_name": args.store,
        "quantity": args.quantity,
        "unit": args.unit,
        "price": args.price,
        "currency": args.currency,
        "purchase_date": args.purchase_date,
        "notes": args.notes,
    }
    values = with_changes(current, **{k: v for k, v in changes.items() if v is not None})
    try:
        result = await controller.update(args.id, values)
    except (UnsupportedUnit, UnsupportedCurrency, InvalidPurchaseDate) as e:
        return _print_failure(str(e))

    if not result.ok:
        return _print_failure(result.error)
    print(f"Updated purchase {args.id}")
    return 0


async def _cmd_delete(controller: TrackerController, args) -> int:
    result = await controller.delete(args.id)
    if not result.ok:
        return _print_failure(result.error)
    print(f"Deleted purchase {args.id}")
    return 0


def _cmd_compare(controller: TrackerController, args) -> int:
    rows = controller.compare_by_product_name(args.name)

    if args.json:
        data = [
            {
                "id": row.record.id,
                "storeName": row.record.store_name,
                "purchaseDate": row.record.purchase_date,
                "price": row.record.price,
                "currency": row.record.currency,
                "standardizedPrice": row.standardized_price,
                "per": f"{row.currency}/{row.base_unit}",
            }
            for row in rows
        ]
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return 0

    if not rows:
        print(f"No purchases of {args.name!r}.")
        return 0
    print(f"{args.name}:")
    for row in rows:
        r = row.record
        print(
            f"  {r.store_name:<15} {r.purchase_date}  "
            f"{format_currency(r.price, r.currency):>12}  "
            f"{row.standardized_price:.2f} {row.currency}/{row.base_unit}"
        )
    return 0


def _cmd_values(controller: TrackerController, args) -> int:
    try:
        values = controller.unique_values_of(args.field)
    except ValueError as e:
        return _print_failure(str(e))
    for v in values:
        print(v)
    return 0
