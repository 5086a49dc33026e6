from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Mapping, Set, Tuple

from cart_demo import constants
from cart_demo.models import CartEntry, PointsBreakdown, Product
from cart_demo.pricing import is_tuesday


def base_points(final_amount: Decimal) -> int:
    if final_amount <= 0:
        return 0
    return int(Decimal(final_amount) // constants.BASE_POINTS_DIVISOR)


def combo_bonus(product_ids: Set[str]) -> Tuple[int, List[str]]:
    points = 0
    details = []
    if {constants.KEYBOARD, constants.MOUSE} <= product_ids:
        points += constants.COMBO_BONUS
        details.append(constants.POINTS_COMBO)
        if constants.MONITOR_ARM in product_ids:
            points += constants.FULL_SET_BONUS
            details.append(constants.POINTS_FULL_SET)
    return points, details


def quantity_bonus(total_quantity: int) -> Tuple[int, List[str]]:
    for minimum, bonus in constants.QUANTITY_BONUS_TIERS:
        if total_quantity >= minimum:
            return bonus, [constants.POINTS_QUANTITY[minimum]]
    return 0, []


def compute_points(
    final_amount: Decimal,
    entries: Iterable[CartEntry],
    products: Mapping[str, Product],
    total_quantity: int,
    now: datetime,
) -> PointsBreakdown:
    product_ids = {e.product_id for e in entries if e.product_id in products}
    if not product_ids:
        return PointsBreakdown()

    result = PointsBreakdown(base=base_points(final_amount))
    if result.base > 0:
        result.details.append(constants.POINTS_BASE.format(points=result.base))
        if is_tuesday(now):
            result.tuesday_bonus = result.base * (constants.TUESDAY_POINTS_MULTIPLIER - 1)
            result.details.append(constants.POINTS_TUESDAY)

    result.combo_bonus, details = combo_bonus(product_ids)
    result.details.extend(details)

    result.quantity_bonus, details = quantity_bonus(total_quantity)
    result.details.extend(details)
    return result
