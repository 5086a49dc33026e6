from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from cart_demo.errors import CartError


class PromotionKind(str, Enum):
    LIGHTNING = "lightning"
    SUGGESTION = "suggestion"


class DiscountKind(str, Enum):
    ITEM_BULK = "item-bulk"
    CART_BULK = "cart-bulk"
    TUESDAY = "tuesday"
    LIGHTNING = "lightning"
    SUGGESTION = "suggestion"


@dataclass(slots=True)
class Product:
    """
    Catalog row shared by the ledger and the promotion scheduler.

    `current_price` only ever goes down (promotions are applied in place);
    `original_price` is fixed when the catalog is seeded.
    """

    id: str
    name: str
    current_price: int
    original_price: int
    stock: int
    on_lightning_sale: bool = False
    on_suggestion_sale: bool = False


@dataclass(slots=True)
class CartEntry:
    product_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class DiscountDescriptor:
    kind: DiscountKind
    label: str
    percentage: Decimal


@dataclass(slots=True)
class PricingResult:
    subtotal: Decimal
    final_amount: Decimal
    total_quantity: int
    discounts: List[DiscountDescriptor] = field(default_factory=list)
    priced_at: Optional[datetime] = None

    @property
    def saved_amount(self) -> Decimal:
        return self.subtotal - self.final_amount

    @property
    def discount_rate(self) -> Decimal:
        """Effective combined rate; compounded, not the sum of descriptor percentages."""
        if self.subtotal <= 0:
            return Decimal("0")
        return (self.subtotal - self.final_amount) / self.subtotal

    def kinds(self) -> List[DiscountKind]:
        return [d.kind for d in self.discounts]


@dataclass(slots=True)
class PointsBreakdown:
    base: int = 0
    tuesday_bonus: int = 0
    combo_bonus: int = 0
    quantity_bonus: int = 0
    details: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.base + self.tuesday_bonus + self.combo_bonus + self.quantity_bonus


@dataclass(slots=True)
class CartResult:
    """
    Outcome of a cart mutation as seen by the presentation layer.
    Failures carry the error instead of raising it.
    """

    ok: bool
    product_id: str
    quantity: int = 0
    removed: bool = False
    restored_quantity: int = 0
    error: Optional[CartError] = None

    @property
    def message(self) -> str:
        return str(self.error) if self.error else ""
