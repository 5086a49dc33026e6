from __future__ import annotations

from typing import List, Optional

from cart_demo.errors import NotFoundError, StockError
from cart_demo.models import CartEntry, Product
from cart_demo.store import Store


class CartLedger:
    """
    Cart entries plus the stock they hold.

    Every unit in the cart has been taken out of `Product.stock`, so for each
    product `stock + quantity in cart` stays equal to the seeded stock.
    All checks happen before any write: a rejected call changes nothing.
    """

    def __init__(self, store: Store):
        self.store = store

    def _product(self, product_id: Optional[str]) -> Product:
        product = self.store.get_product(product_id)
        if not product:
            raise NotFoundError(product_id)
        return product

    def add_item(self, product_id: str) -> int:
        product = self._product(product_id)
        if product.stock <= 0:
            raise StockError(product_id, requested=1, available=product.stock)

        entry = self.store.cart.get(product_id)
        if entry is None:
            entry = CartEntry(product_id=product_id, quantity=0)
            self.store.cart[product_id] = entry
        entry.quantity += 1
        product.stock -= 1
        self.store.log(f"[cart] added: {product_id} qty={entry.quantity} (stock={product.stock})")
        return entry.quantity

    def change_quantity(self, product_id: str, delta: int) -> int:
        """Returns the new quantity; 0 means the entry was removed."""
        product = self._product(product_id)
        entry = self.store.cart.get(product_id)
        if entry is None:
            raise NotFoundError(product_id)
        if delta == 0:
            return entry.quantity

        new_quantity = entry.quantity + delta
        if new_quantity <= 0:
            self.remove_item(product_id)
            return 0
        if delta > product.stock:
            raise StockError(product_id, requested=delta, available=product.stock)

        entry.quantity = new_quantity
        product.stock -= delta
        self.store.log(f"[cart] quantity changed: {product_id} delta={delta:+d} qty={new_quantity} (stock={product.stock})")
        return new_quantity

    def remove_item(self, product_id: str) -> int:
        """Returns how many units went back to stock (0 if the product was not in the cart)."""
        entry = self.store.cart.get(product_id)
        if entry is None:
            return 0
        product = self.store.get_product(product_id)
        del self.store.cart[product_id]
        if product:
            product.stock += entry.quantity
            self.store.log(f"[cart] removed: {product_id} restored={entry.quantity} (stock={product.stock})")
        return entry.quantity

    def clear(self) -> int:
        restored = 0
        for product_id in list(self.store.cart):
            restored += self.remove_item(product_id)
        return restored

    def is_empty(self) -> bool:
        return not self.store.cart

    def total_quantity(self) -> int:
        return sum(e.quantity for e in self.store.cart.values())

    def entries(self) -> List[CartEntry]:
        return list(self.store.cart.values())
