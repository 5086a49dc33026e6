from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime
from typing import List, Tuple

from cart_demo.app import CartApp
from cart_demo.catalog import product_label
from cart_demo.config import CartConfig


def parse_action(raw: str) -> Tuple[str, str, int]:
    """`p1` adds one, `p1+3` / `p1-2` change quantity, `-p1` removes."""
    if raw.startswith("-"):
        return "remove", raw[1:], 0
    for sign in ("+", "-"):
        if sign in raw:
            product_id, amount = raw.split(sign, 1)
            return "change", product_id, int(sign + amount)
    return "add", raw, 0


def replay(app: CartApp, actions: List[str]) -> None:
    for raw in actions:
        kind, product_id, delta = parse_action(raw)
        if kind == "add":
            result = app.add_to_cart(product_id)
        elif kind == "change":
            result = app.change_quantity(product_id, delta)
        else:
            result = app.remove_from_cart(product_id)
        if not result.ok:
            print(f"! {raw}: {result.message}")


async def run_promotions(app: CartApp, seconds: float) -> None:
    handle = app.start_promotions(lambda p: print(f"* promotion: {product_label(p)}"))
    try:
        await asyncio.sleep(seconds)
    finally:
        handle.stop()


def print_summary(app: CartApp) -> None:
    summary = app.summary()
    pricing = summary.pricing

    print("\n=== PRODUCTS ===")
    for p in app.list_products():
        print(f"{p.id}: {product_label(p)} (stock={p.stock})")

    print("\n=== CART ===")
    print(f"items: {summary.item_count}")
    for entry in app.ledger.entries():
        print(f"  {entry.product_id} x{entry.quantity}")
    print(f"subtotal: {pricing.subtotal:.0f}원")
    for d in pricing.discounts:
        print(f"  {d.label} -{d.percentage}%")
    print(f"total: {pricing.final_amount:.0f}원 (saved {pricing.discount_rate * 100:.1f}%)")

    if summary.points is not None:
        print(f"points: {summary.points.total}p ({', '.join(summary.points.details)})")
    for warning in summary.stock_warnings:
        print(f"stock: {warning}")


def main() -> None:
    cfg = CartConfig.from_env()

    p = argparse.ArgumentParser(description="Replay cart actions and print pricing, points and stock.")
    p.add_argument("actions", nargs="*", help="p1 (add one), p1+3 / p1-2 (change quantity), -p1 (remove)")
    p.add_argument("--date", type=str, default=None, help="Price as of this ISO date (e.g. 2024-06-04 is a Tuesday)")
    p.add_argument("--promotions", type=float, default=0.0, help="Run the promotion timers for this many seconds")
    p.add_argument("--lightning-interval", type=float, default=cfg.lightning_interval)
    p.add_argument("--suggestion-interval", type=float, default=cfg.suggestion_interval)
    p.add_argument("--seed", type=int, default=cfg.seed)
    p.add_argument("--snapshot", type=str, default=cfg.snapshot_path, help="Directory for the cart snapshot")
    p.add_argument("--debug", action="store_true", default=cfg.debug)
    args = p.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO, format="%(message)s")

    cfg.lightning_interval = args.lightning_interval
    cfg.suggestion_interval = args.suggestion_interval
    cfg.seed = args.seed
    cfg.snapshot_path = args.snapshot
    cfg.debug = args.debug

    clock = datetime.now
    if args.date:
        as_of = datetime.fromisoformat(args.date)
        clock = lambda: as_of

    app = CartApp(config=cfg, clock=clock)
    app.init_catalog()
    app.restore()

    replay(app, args.actions)
    if args.promotions > 0:
        asyncio.run(run_promotions(app, args.promotions))
    app.close()

    print_summary(app)


if __name__ == "__main__":
    main()
