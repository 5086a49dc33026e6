from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from cart_demo import catalog
from cart_demo.config import CartConfig
from cart_demo.errors import CartError, NotFoundError
from cart_demo.models import CartResult, PointsBreakdown, PricingResult, Product
from cart_demo.persistence import SnapshotStore, clear_snapshot, load_snapshot, save_snapshot
from cart_demo.points import compute_points
from cart_demo.pricing import price_cart
from cart_demo.promotions import OnTick, PromotionHandle, PromotionScheduler
from cart_demo.services import CartLedger
from cart_demo.store import Store


@dataclass(slots=True)
class CartSummary:
    item_count: int
    pricing: PricingResult
    points: Optional[PointsBreakdown]
    stock_warnings: List[str] = field(default_factory=list)
    low_total_stock: bool = False


class CartApp:
    """
    What the presentation layer talks to.

    Mutations return a CartResult instead of raising; pricing and points are
    recomputed from the store on every call.
    """

    def __init__(
        self,
        store: Optional[Store] = None,
        config: Optional[CartConfig] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store or Store()
        self.config = config or CartConfig()
        self.clock = clock
        self.ledger = CartLedger(self.store)
        self.scheduler = PromotionScheduler(
            self.store,
            timings=self.config.timings(),
            rng=random.Random(self.config.seed),
        )
        self.snapshots = SnapshotStore(self.config.snapshot_path) if self.config.snapshot_path else None
        self._promotions: Optional[PromotionHandle] = None

    def init_catalog(self) -> List[Product]:
        return catalog.init_catalog(self.store)

    def list_products(self) -> List[Product]:
        return catalog.list_products(self.store)

    def get_product(self, product_id: str) -> Optional[Product]:
        return catalog.get_product(self.store, product_id)

    def _failed(self, product_id: str, action: str, error: CartError) -> CartResult:
        self.store.log(f"[cart] {action} rejected: {product_id}: {error}")
        return CartResult(ok=False, product_id=product_id, error=error)

    def add_to_cart(self, product_id: str) -> CartResult:
        try:
            quantity = self.ledger.add_item(product_id)
        except CartError as e:
            return self._failed(product_id, "add", e)
        self.store.last_selected = product_id
        self._autosave()
        return CartResult(ok=True, product_id=product_id, quantity=quantity)

    def change_quantity(self, product_id: str, delta: int) -> CartResult:
        previous = self.store.cart.get(product_id)
        previous_quantity = previous.quantity if previous else 0
        try:
            quantity = self.ledger.change_quantity(product_id, delta)
        except CartError as e:
            return self._failed(product_id, "change", e)
        self._autosave()
        if quantity == 0:
            return CartResult(ok=True, product_id=product_id, removed=True, restored_quantity=previous_quantity)
        return CartResult(ok=True, product_id=product_id, quantity=quantity)

    def remove_from_cart(self, product_id: str) -> CartResult:
        if self.store.get_product(product_id) is None:
            return self._failed(product_id, "remove", NotFoundError(product_id))
        restored = self.ledger.remove_item(product_id)
        if restored:
            self._autosave()
        return CartResult(ok=True, product_id=product_id, removed=restored > 0, restored_quantity=restored)

    def clear_cart(self) -> int:
        restored = self.ledger.clear()
        self._autosave()
        return restored

    def price_cart(self) -> PricingResult:
        return price_cart(self.ledger.entries(), self.store.products, self.clock())

    def compute_points(self, pricing: Optional[PricingResult] = None) -> PointsBreakdown:
        pricing = pricing or self.price_cart()
        return compute_points(
            pricing.final_amount,
            self.ledger.entries(),
            self.store.products,
            pricing.total_quantity,
            pricing.priced_at or self.clock(),
        )

    def summary(self) -> CartSummary:
        pricing = self.price_cart()
        products = self.store.list_products()
        return CartSummary(
            item_count=pricing.total_quantity,
            pricing=pricing,
            points=None if self.ledger.is_empty() else self.compute_points(pricing),
            stock_warnings=catalog.stock_warnings(products),
            low_total_stock=catalog.is_low_total_stock(products),
        )

    def get_last_interacted_product(self) -> Optional[str]:
        return self.store.last_selected

    def set_last_interacted_product(self, product_id: Optional[str]) -> None:
        if product_id is not None and self.store.get_product(product_id) is None:
            self.store.log(f"[cart] selection ignored: unknown product {product_id}")
            return
        self.store.last_selected = product_id

    def start_promotions(self, on_tick: Optional[OnTick] = None) -> PromotionHandle:
        """Needs a running event loop. Stops any promotions this app started earlier."""
        self.stop_promotions()

        def _tick(product: Product) -> None:
            self._autosave()
            if on_tick:
                on_tick(product)

        self._promotions = self.scheduler.start(_tick)
        return self._promotions

    def stop_promotions(self) -> None:
        if self._promotions is not None:
            self._promotions.stop()
            self._promotions = None

    def save(self) -> bool:
        if not self.snapshots:
            return False
        return save_snapshot(self.store, self.snapshots, version=self.config.snapshot_version)

    def restore(self) -> bool:
        if not self.snapshots:
            return False
        return load_snapshot(self.store, self.snapshots, version=self.config.snapshot_version)

    def reset(self) -> List[Product]:
        self.stop_promotions()
        if self.snapshots:
            clear_snapshot(self.snapshots)
        return self.init_catalog()

    def close(self) -> None:
        self.stop_promotions()
        self._autosave()

    def _autosave(self) -> None:
        if self.snapshots:
            self.save()
