"""Tests for the cart ledger (entries and the stock they hold)."""
import random

import pytest

from cart_demo import constants
from cart_demo.errors import NotFoundError, StockError

INITIAL_STOCK = {row[0]: row[3] for row in constants.CATALOG}


def _cart_logs(store) -> list[str]:
    return [line for line in store.logs if line.startswith("[cart]")]


def _assert_stock_conserved(store):
    for product_id, initial in INITIAL_STOCK.items():
        entry = store.cart.get(product_id)
        in_cart = entry.quantity if entry else 0
        assert store.products[product_id].stock + in_cart == initial


def test_add_creates_entry_and_takes_stock(store, ledger):
    assert ledger.add_item("p1") == 1
    assert ledger.add_item("p1") == 2

    assert store.products["p1"].stock == 48
    assert [(e.product_id, e.quantity) for e in ledger.entries()] == [("p1", 2)]
    assert any("added: p1 qty=2 (stock=48)" in l for l in _cart_logs(store))


def test_add_out_of_stock_leaves_state_unchanged(store, ledger):
    with pytest.raises(StockError) as exc:
        ledger.add_item("p4")

    assert exc.value.product_id == "p4"
    assert str(exc.value) == constants.STOCK_SHORTAGE
    assert store.products["p4"].stock == 0
    assert ledger.is_empty()


def test_add_unknown_product(ledger):
    with pytest.raises(NotFoundError):
        ledger.add_item("nope")
    assert ledger.is_empty()


def test_change_quantity_limited_by_stock(store, ledger):
    ledger.add_item("p5")
    assert ledger.change_quantity("p5", 9) == 10
    assert store.products["p5"].stock == 0

    with pytest.raises(StockError):
        ledger.change_quantity("p5", 1)

    assert store.cart["p5"].quantity == 10
    assert store.products["p5"].stock == 0


def test_change_quantity_to_zero_removes_entry(store, ledger):
    ledger.add_item("p2")
    ledger.add_item("p2")

    assert ledger.change_quantity("p2", -5) == 0

    assert "p2" not in store.cart
    assert store.products["p2"].stock == 30


def test_change_quantity_decrement_restores_one(store, ledger):
    for _ in range(3):
        ledger.add_item("p3")

    assert ledger.change_quantity("p3", -1) == 2
    assert store.products["p3"].stock == 18


def test_change_quantity_zero_delta_is_noop(store, ledger):
    ledger.add_item("p1")
    assert ledger.change_quantity("p1", 0) == 1
    assert store.products["p1"].stock == 49


def test_change_quantity_requires_entry(ledger):
    with pytest.raises(NotFoundError):
        ledger.change_quantity("p1", 1)


def test_remove_restores_full_quantity(store, ledger):
    for _ in range(4):
        ledger.add_item("p1")

    assert ledger.remove_item("p1") == 4
    assert store.products["p1"].stock == 50
    assert ledger.is_empty()


def test_remove_absent_is_noop(store, ledger):
    assert ledger.remove_item("p1") == 0
    assert ledger.remove_item("nope") == 0
    assert store.products["p1"].stock == 50


def test_entries_keep_insertion_order(ledger):
    ledger.add_item("p3")
    ledger.add_item("p1")
    ledger.add_item("p3")

    assert [e.product_id for e in ledger.entries()] == ["p3", "p1"]
    assert ledger.total_quantity() == 3


def test_clear_returns_everything_to_stock(store, ledger):
    ledger.add_item("p1")
    ledger.add_item("p2")
    ledger.change_quantity("p2", 4)

    assert ledger.clear() == 6
    assert ledger.is_empty()
    _assert_stock_conserved(store)


def test_stock_conserved_over_random_operations(store, ledger):
    rng = random.Random(42)
    ids = list(INITIAL_STOCK) + ["nope"]

    for _ in range(500):
        product_id = rng.choice(ids)
        op = rng.randrange(3)
        try:
            if op == 0:
                ledger.add_item(product_id)
            elif op == 1:
                ledger.change_quantity(product_id, rng.randint(-4, 6))
            else:
                ledger.remove_item(product_id)
        except (StockError, NotFoundError):
            pass
        _assert_stock_conserved(store)
        assert all(e.quantity >= 1 for e in ledger.entries())
        assert all(p.stock >= 0 for p in store.list_products())
