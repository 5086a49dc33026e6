"""Cart pricing.

Pure functions over a snapshot of cart entries and products. Promotional
prices are already baked into `Product.current_price` by the scheduler; this
module only reports them.

Rules, in order:
1. subtotal at current prices
2. 30+ units in the cart: 25% off everything, per-item rates are skipped
3. otherwise each line with 10+ units gets its product's bulk rate
4. on Tuesday a further 10% off the running amount
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional, Tuple

from cart_demo import constants
from cart_demo.models import CartEntry, DiscountDescriptor, DiscountKind, PricingResult, Product

_HUNDRED = Decimal(100)


def _percent(rate: Decimal) -> Decimal:
    return (rate * _HUNDRED).quantize(Decimal("1"))


def is_tuesday(now: datetime) -> bool:
    return now.isoweekday() == constants.TUESDAY


def item_discount_rate(product_id: str, quantity: int) -> Decimal:
    if quantity < constants.ITEM_BULK_MIN:
        return Decimal("0")
    return constants.ITEM_BULK_RATES.get(product_id, Decimal("0"))


def _lines(entries: Iterable[CartEntry], products: Mapping[str, Product]) -> List[Tuple[CartEntry, Product]]:
    # entries whose product vanished from the catalog are not priced
    return [(e, products[e.product_id]) for e in entries if e.product_id in products]


def apply_cart_bulk(total_quantity: int, subtotal: Decimal) -> Tuple[Decimal, Optional[DiscountDescriptor]]:
    if total_quantity < constants.CART_BULK_MIN:
        return subtotal, None
    descriptor = DiscountDescriptor(
        kind=DiscountKind.CART_BULK,
        label=constants.CART_BULK_MESSAGE,
        percentage=_percent(constants.CART_BULK_RATE),
    )
    return subtotal * (1 - constants.CART_BULK_RATE), descriptor


def apply_item_bulk(lines: List[Tuple[CartEntry, Product]]) -> Tuple[Decimal, List[DiscountDescriptor]]:
    amount = Decimal("0")
    descriptors: List[DiscountDescriptor] = []
    for entry, product in lines:
        line_total = Decimal(product.current_price * entry.quantity)
        rate = item_discount_rate(product.id, entry.quantity)
        amount += line_total * (1 - rate)
        if rate > 0:
            descriptors.append(
                DiscountDescriptor(
                    kind=DiscountKind.ITEM_BULK,
                    label=constants.ITEM_BULK_MESSAGE.format(name=product.name),
                    percentage=_percent(rate),
                )
            )
    return amount, descriptors


def apply_tuesday(amount: Decimal, now: datetime) -> Tuple[Decimal, Optional[DiscountDescriptor]]:
    if not is_tuesday(now) or amount <= 0:
        return amount, None
    descriptor = DiscountDescriptor(
        kind=DiscountKind.TUESDAY,
        label=constants.TUESDAY_MESSAGE,
        percentage=_percent(constants.TUESDAY_RATE),
    )
    return amount * (1 - constants.TUESDAY_RATE), descriptor


def promotion_descriptors(lines: List[Tuple[CartEntry, Product]]) -> List[DiscountDescriptor]:
    """Informational only: the price cut is already in `current_price`."""
    descriptors = []
    for _, product in lines:
        if product.on_lightning_sale:
            descriptors.append(
                DiscountDescriptor(
                    kind=DiscountKind.LIGHTNING,
                    label=f"⚡{product.name}",
                    percentage=_percent(constants.LIGHTNING_RATE),
                )
            )
        if product.on_suggestion_sale:
            descriptors.append(
                DiscountDescriptor(
                    kind=DiscountKind.SUGGESTION,
                    label=f"💝{product.name}",
                    percentage=_percent(constants.SUGGESTION_RATE),
                )
            )
    return descriptors


def price_cart(entries: Iterable[CartEntry], products: Mapping[str, Product], now: datetime) -> PricingResult:
    lines = _lines(entries, products)
    if not lines:
        return PricingResult(subtotal=Decimal("0"), final_amount=Decimal("0"), total_quantity=0, priced_at=now)

    subtotal = Decimal(sum(p.current_price * e.quantity for e, p in lines))
    total_quantity = sum(e.quantity for e, _ in lines)
    discounts: List[DiscountDescriptor] = []

    amount, bulk = apply_cart_bulk(total_quantity, subtotal)
    if bulk:
        discounts.append(bulk)
    else:
        amount, item_discounts = apply_item_bulk(lines)
        discounts.extend(item_discounts)

    amount, tuesday = apply_tuesday(amount, now)
    if tuesday:
        discounts.append(tuesday)

    discounts.extend(promotion_descriptors(lines))

    return PricingResult(
        subtotal=subtotal,
        final_amount=amount,
        total_quantity=total_quantity,
        discounts=discounts,
        priced_at=now,
    )
