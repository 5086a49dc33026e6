"""Best-effort snapshot of a cart session.

The snapshot is one JSON document per key in a directory (a small file-backed
key-value store):

    {"version": 1, "timestamp": 1700000000.0,
     "state": {"products": [...], "cart": [...], "last_selected": "p1"}}

Saving and loading never raise: failures are logged as warnings and the
caller keeps its in-memory state.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from cart_demo import constants
from cart_demo.errors import PersistenceError
from cart_demo.models import CartEntry, Product
from cart_demo.store import Store

logger = logging.getLogger(__name__)

DEFAULT_KEY = "cart-store"


class SnapshotStore:
    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"cannot read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp = path.with_suffix(".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            raise PersistenceError(f"cannot write {path}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"cannot remove {self.path_for(key)}: {e}") from e


def dump_state(store: Store) -> Dict[str, Any]:
    return {
        "products": [
            {
                "id": p.id,
                "name": p.name,
                "current_price": p.current_price,
                "original_price": p.original_price,
                "stock": p.stock,
                "on_lightning_sale": p.on_lightning_sale,
                "on_suggestion_sale": p.on_suggestion_sale,
            }
            for p in store.list_products()
        ],
        "cart": [{"product_id": e.product_id, "quantity": e.quantity} for e in store.cart.values()],
        "last_selected": store.last_selected,
    }


def _int(row: Dict[str, Any], name: str, minimum: int = 0) -> int:
    value = row.get(name)
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        raise PersistenceError(f"bad {name!r}: {value!r}")
    return value


def _flag(row: Dict[str, Any], name: str) -> bool:
    value = row.get(name, False)
    if not isinstance(value, bool):
        raise PersistenceError(f"bad {name!r}: {value!r}")
    return value


def _rows(state: Dict[str, Any], name: str) -> List[Any]:
    rows = state.get(name)
    if rows is None:
        return []
    if not isinstance(rows, list):
        raise PersistenceError(f"{name!r} is not a list")
    return rows


def parse_state(state: Any, store: Store) -> Tuple[List[Product], List[CartEntry], Optional[str]]:
    """
    Validate a snapshot against the seeded catalog without touching the store.

    Every restored product must account for its whole seeded stock: what is
    left on the shelf plus what sits in the cart.
    """
    if not isinstance(state, dict):
        raise PersistenceError("state is not an object")

    products: List[Product] = []
    for row in _rows(state, "products"):
        if not isinstance(row, dict) or not isinstance(row.get("id"), str) or row["id"] not in store.products:
            continue
        seeded = store.products[row["id"]]
        current = _int(row, "current_price")
        if current > seeded.original_price:
            raise PersistenceError(f"price above original for {seeded.id}")
        products.append(
            Product(
                id=seeded.id,
                name=seeded.name,
                current_price=current,
                original_price=seeded.original_price,
                stock=_int(row, "stock"),
                on_lightning_sale=_flag(row, "on_lightning_sale"),
                on_suggestion_sale=_flag(row, "on_suggestion_sale"),
            )
        )

    known = {p.id for p in products}
    cart: List[CartEntry] = []
    for row in _rows(state, "cart"):
        if not isinstance(row, dict) or not isinstance(row.get("product_id"), str) or row["product_id"] not in known:
            continue
        if any(e.product_id == row["product_id"] for e in cart):
            raise PersistenceError(f"duplicate cart entry for {row['product_id']}")
        cart.append(CartEntry(product_id=row["product_id"], quantity=_int(row, "quantity", minimum=1)))

    seeded_stock = {product_id: stock for product_id, _, _, stock in constants.CATALOG}
    in_cart = {e.product_id: e.quantity for e in cart}
    for p in products:
        expected = seeded_stock.get(p.id)
        if expected is not None and p.stock + in_cart.get(p.id, 0) != expected:
            raise PersistenceError(
                f"stock mismatch for {p.id}: stock={p.stock} in cart={in_cart.get(p.id, 0)} seeded={expected}"
            )

    last_selected = state.get("last_selected")
    if not isinstance(last_selected, str) or last_selected not in store.products:
        last_selected = None
    return products, cart, last_selected


def save_snapshot(
    store: Store,
    kv: SnapshotStore,
    key: str = DEFAULT_KEY,
    version: int = constants.SNAPSHOT_VERSION,
) -> bool:
    try:
        payload = json.dumps(
            {"version": version, "timestamp": time.time(), "state": dump_state(store)},
            ensure_ascii=False,
        )
        kv.set(key, payload)
    except (PersistenceError, TypeError, ValueError) as e:
        logger.warning("Failed to save snapshot (%s): %s", key, e)
        return False
    store.log(f"[snapshot] saved: {key} version={version}")
    return True


def load_snapshot(
    store: Store,
    kv: SnapshotStore,
    key: str = DEFAULT_KEY,
    version: int = constants.SNAPSHOT_VERSION,
) -> bool:
    """
    Restore products, cart and last selection into an already seeded store.
    Returns False and leaves the store untouched on any problem.
    """
    try:
        raw = kv.get(key)
        if raw is None:
            return False
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise PersistenceError(f"corrupt snapshot: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError("snapshot is not an object")

        if data.get("version") != version:
            logger.warning("Version mismatch for %s (found %r, want %r). Clearing snapshot.", key, data.get("version"), version)
            kv.remove(key)
            return False

        products, cart, last_selected = parse_state(data.get("state"), store)
    except PersistenceError as e:
        logger.warning("Failed to load snapshot (%s): %s", key, e)
        return False

    for p in products:
        store.products[p.id] = p
    store.cart = {e.product_id: e for e in cart}
    store.last_selected = last_selected
    store.log(f"[snapshot] restored: {key} products={len(products)} entries={len(cart)}")
    return True


def clear_snapshot(kv: SnapshotStore, key: str = DEFAULT_KEY) -> None:
    try:
        kv.remove(key)
    except PersistenceError as e:
        logger.warning("Failed to clear snapshot (%s): %s", key, e)
