from __future__ import annotations

import logging
from typing import Dict, List, Optional

from cart_demo.models import CartEntry, Product

logger = logging.getLogger(__name__)


class Store:
    """
    In-memory state for one cart session.

    Holds:
    - the product table (catalog order, mutated by the ledger and by promotions)
    - cart entries keyed by product id (insertion order)
    - the product the user last interacted with
    - a list of audit lines (for the demo and for tests)

    Nothing here is global: the application shell builds one Store and passes it
    to the ledger, the engines and the scheduler.
    """

    def __init__(self) -> None:
        self.products: Dict[str, Product] = {}
        self.cart: Dict[str, CartEntry] = {}
        self.last_selected: Optional[str] = None

        self.logs: List[str] = []

    def log(self, message: str) -> None:
        self.logs.append(message)
        logger.info(message)

    # Seed helpers (used by the catalog, tests and the CLI)
    def add_product(self, product_id: str, name: str, price: int, stock: int) -> Product:
        product = Product(id=product_id, name=name, current_price=price, original_price=price, stock=stock)
        self.products[product_id] = product
        return product

    def list_products(self) -> List[Product]:
        return list(self.products.values())

    def get_product(self, product_id: Optional[str]) -> Optional[Product]:
        if product_id is None:
            return None
        return self.products.get(product_id)
