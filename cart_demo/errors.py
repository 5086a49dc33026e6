from __future__ import annotations

from typing import Optional

from cart_demo import constants


class CartError(Exception):
    pass


class StockError(CartError):
    def __init__(self, product_id: str, requested: int = 1, available: int = 0):
        super().__init__(constants.STOCK_SHORTAGE)
        self.product_id = product_id
        self.requested = requested
        self.available = available


class NotFoundError(CartError):
    def __init__(self, product_id: Optional[str]):
        super().__init__(constants.PRODUCT_NOT_FOUND)
        self.product_id = product_id


class PersistenceError(CartError):
    pass
