from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from cart_demo import constants
from cart_demo.models import Product, PromotionKind
from cart_demo.store import Store


def init_catalog(store: Store) -> List[Product]:
    """Seed the five demo products, replacing whatever the store held."""
    store.products.clear()
    store.cart.clear()
    store.last_selected = None
    for product_id, name, price, stock in constants.CATALOG:
        store.add_product(product_id, name, price=price, stock=stock)
    return store.list_products()


def list_products(store: Store) -> List[Product]:
    return store.list_products()


def get_product(store: Store, product_id: Optional[str]) -> Optional[Product]:
    return store.get_product(product_id)


def _round_price(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def apply_promotion(product: Product, kind: PromotionKind) -> bool:
    """
    The single place where promotions write to a product.

    Lightning takes 20% off the original price; suggestion takes 5% off the
    current price, so it compounds with an earlier lightning sale. Both flags
    stay set for the rest of the session. Returns False (and changes nothing)
    if the product already carries this promotion.
    """
    if kind is PromotionKind.LIGHTNING:
        if product.on_lightning_sale:
            return False
        price = _round_price(Decimal(product.original_price) * (1 - constants.LIGHTNING_RATE))
        product.current_price = min(price, product.current_price)
        product.on_lightning_sale = True
        return True

    if kind is PromotionKind.SUGGESTION:
        if product.on_suggestion_sale:
            return False
        product.current_price = _round_price(Decimal(product.current_price) * (1 - constants.SUGGESTION_RATE))
        product.on_suggestion_sale = True
        return True

    raise ValueError(f"Unknown promotion kind: {kind}")


def total_stock(products: Iterable[Product]) -> int:
    return sum(p.stock for p in products)


def is_low_total_stock(products: Iterable[Product]) -> bool:
    return total_stock(products) < constants.TOTAL_STOCK_WARNING


def stock_warnings(products: Iterable[Product]) -> List[str]:
    warnings = []
    for p in products:
        if p.stock >= constants.LOW_STOCK_WARNING:
            continue
        if p.stock > 0:
            warnings.append(constants.STOCK_WARNING.format(name=p.name, remaining=p.stock))
        else:
            warnings.append(constants.OUT_OF_STOCK_WARNING.format(name=p.name))
    return warnings


def product_label(product: Product) -> str:
    """Text shown for a product in the selector."""
    if product.stock == 0:
        tags = [
            tag
            for flag, tag in (
                (product.on_lightning_sale, constants.LIGHTNING_TAG),
                (product.on_suggestion_sale, constants.SUGGESTION_TAG),
            )
            if flag
        ]
        suffix = f" {' '.join(tags)}" if tags else ""
        return f"{product.name} - {product.current_price}원 ({constants.OUT_OF_STOCK}){suffix}"

    price_change = f"{product.original_price}원 → {product.current_price}원"
    if product.on_lightning_sale and product.on_suggestion_sale:
        return f"⚡💝{product.name} - {price_change} ({constants.SUPER_SALE_LABEL})"
    if product.on_lightning_sale:
        return f"⚡{product.name} - {price_change} ({constants.LIGHTNING_LABEL})"
    if product.on_suggestion_sale:
        return f"💝{product.name} - {price_change} ({constants.SUGGESTION_LABEL})"
    return f"{product.name} - {product.current_price}원"
