"""Randomized sales that run in the background of a cart session.

Two independent promotions:

- lightning: after a random 0..10s delay, every 30s pick a random product that
  is in stock and not yet on lightning sale, and cut its price to 80% of the
  original price.
- suggestion: after a random 0..20s delay, every 60s, if the cart is not empty
  and the user has picked a product, take the first product in catalog order
  that is not the last picked one, is in stock and is not yet on suggestion
  sale, and cut its current price by 5%.

A tick with nothing eligible does nothing. Sales never expire within a session.

Each promotion runs as one asyncio task that covers both the initial delay and
the recurring interval, so cancelling that task is enough to stop it.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional

from cart_demo import constants
from cart_demo.catalog import apply_promotion
from cart_demo.models import Product, PromotionKind
from cart_demo.store import Store

logger = logging.getLogger(__name__)

OnTick = Callable[[Product], None]


def sale_alert(product: Product, kind: PromotionKind) -> str:
    template = constants.LIGHTNING_ALERT if kind is PromotionKind.LIGHTNING else constants.SUGGESTION_ALERT
    return template.format(name=product.name)


def lightning_candidates(products: List[Product]) -> List[Product]:
    return [p for p in products if p.stock > 0 and not p.on_lightning_sale]


def find_suggestion_product(products: List[Product], last_selected: Optional[str]) -> Optional[Product]:
    for p in products:
        if p.id != last_selected and p.stock > 0 and not p.on_suggestion_sale:
            return p
    return None


def run_lightning_sale(store: Store, rng: random.Random) -> Optional[Product]:
    candidates = lightning_candidates(store.list_products())
    if not candidates:
        logger.debug("[promo=lightning] skipped: no eligible product")
        return None

    product = rng.choice(candidates)
    if not apply_promotion(product, PromotionKind.LIGHTNING):
        return None
    store.log(f"[promo=lightning] applied: {product.id} price={product.current_price} (original={product.original_price})")
    store.log(f"[promo=lightning] {sale_alert(product, PromotionKind.LIGHTNING)}")
    return product


def run_suggestion_sale(store: Store) -> Optional[Product]:
    if not store.cart:
        logger.debug("[promo=suggestion] skipped: cart is empty")
        return None
    if store.last_selected is None:
        logger.debug("[promo=suggestion] skipped: no product selected yet")
        return None

    product = find_suggestion_product(store.list_products(), store.last_selected)
    if not product:
        logger.debug("[promo=suggestion] skipped: no eligible product")
        return None

    if not apply_promotion(product, PromotionKind.SUGGESTION):
        return None
    store.log(f"[promo=suggestion] applied: {product.id} price={product.current_price} (original={product.original_price})")
    store.log(f"[promo=suggestion] {sale_alert(product, PromotionKind.SUGGESTION)}")
    return product


class RepeatingTask:
    """Calls `callback` after `delay` seconds, then every `interval` seconds until stopped."""

    def __init__(self, name: str, callback: Callable[[], None], interval: float, delay: float = 0.0):
        if interval <= 0:
            raise ValueError("interval must be > 0")
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.name = name
        self.callback = callback
        self.interval = interval
        self.delay = delay
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        logger.debug("%s: first tick in %.2fs, then every %.2fs", self.name, self.delay, self.interval)
        await asyncio.sleep(self.delay)
        while True:
            self.ticks += 1
            try:
                self.callback()
            except Exception:
                logger.exception("%s: tick %d failed", self.name, self.ticks)
            await asyncio.sleep(self.interval)


class PromotionHandle:
    def __init__(self, tasks: List[RepeatingTask]):
        self.tasks = tasks

    @property
    def running(self) -> bool:
        return any(t.running for t in self.tasks)

    def stop(self) -> None:
        for t in self.tasks:
            t.stop()


@dataclass(slots=True)
class PromotionTimings:
    lightning_interval: float = constants.LIGHTNING_INTERVAL
    lightning_max_delay: float = constants.LIGHTNING_MAX_DELAY
    suggestion_interval: float = constants.SUGGESTION_INTERVAL
    suggestion_max_delay: float = constants.SUGGESTION_MAX_DELAY


class PromotionScheduler:
    def __init__(self, store: Store, timings: Optional[PromotionTimings] = None, rng: Optional[random.Random] = None):
        self.store = store
        self.timings = timings or PromotionTimings()
        self.rng = rng or random.Random()

    def lightning_tick(self, on_tick: Optional[OnTick] = None) -> Optional[Product]:
        product = run_lightning_sale(self.store, self.rng)
        if product and on_tick:
            on_tick(product)
        return product

    def suggestion_tick(self, on_tick: Optional[OnTick] = None) -> Optional[Product]:
        product = run_suggestion_sale(self.store)
        if product and on_tick:
            on_tick(product)
        return product

    def start(self, on_tick: Optional[OnTick] = None) -> PromotionHandle:
        """Must be called from inside a running event loop."""
        t = self.timings
        tasks = [
            RepeatingTask(
                "promo-lightning",
                lambda: self.lightning_tick(on_tick),
                interval=t.lightning_interval,
                delay=self.rng.uniform(0, t.lightning_max_delay),
            ),
            RepeatingTask(
                "promo-suggestion",
                lambda: self.suggestion_tick(on_tick),
                interval=t.suggestion_interval,
                delay=self.rng.uniform(0, t.suggestion_max_delay),
            ),
        ]
        for task in tasks:
            task.start()
        return PromotionHandle(tasks)
