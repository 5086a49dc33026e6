"""Tests for the demo catalog and product display helpers."""
from cart_demo.catalog import (
    apply_promotion,
    get_product,
    init_catalog,
    is_low_total_stock,
    list_products,
    product_label,
    stock_warnings,
    total_stock,
)
from cart_demo.models import PromotionKind


def test_seeded_catalog(store):
    products = list_products(store)

    assert [p.id for p in products] == ["p1", "p2", "p3", "p4", "p5"]
    assert [(p.current_price, p.stock) for p in products] == [
        (10000, 50),
        (20000, 30),
        (30000, 20),
        (15000, 0),
        (25000, 10),
    ]
    assert all(p.current_price == p.original_price for p in products)
    assert get_product(store, "p3").name == "거북목 탈출 모니터암"
    assert get_product(store, "zz") is None


def test_init_catalog_resets_session(store, ledger):
    ledger.add_item("p1")
    apply_promotion(store.products["p1"], PromotionKind.LIGHTNING)
    store.last_selected = "p1"

    init_catalog(store)

    assert store.cart == {}
    assert store.last_selected is None
    assert store.products["p1"].current_price == 10000
    assert store.products["p1"].stock == 50


def test_stock_warnings(store):
    store.products["p5"].stock = 3
    store.products["p3"].stock = 4

    assert stock_warnings(list_products(store)) == [
        "에러 방지 노트북 파우치: 품절",
        "코딩할 때 듣는 Lo-Fi 스피커: 재고 부족 (3개 남음)",
    ]


def test_total_stock(store):
    assert total_stock(list_products(store)) == 110
    assert is_low_total_stock(list_products(store)) is False

    store.products["p1"].stock = 0
    store.products["p2"].stock = 0
    assert is_low_total_stock(list_products(store)) is True


def test_product_labels(store):
    p1, p2, p3, p4, _ = list_products(store)
    apply_promotion(p1, PromotionKind.LIGHTNING)
    apply_promotion(p2, PromotionKind.SUGGESTION)
    apply_promotion(p3, PromotionKind.LIGHTNING)
    apply_promotion(p3, PromotionKind.SUGGESTION)
    apply_promotion(p4, PromotionKind.LIGHTNING)

    assert product_label(p1) == "⚡버그 없애는 키보드 - 10000원 → 8000원 (20% SALE!)"
    assert product_label(p2) == "💝생산성 폭발 마우스 - 20000원 → 19000원 (5% 추천할인!)"
    assert product_label(p3) == "⚡💝거북목 탈출 모니터암 - 30000원 → 22800원 (25% SUPER SALE!)"
    assert product_label(p4) == "에러 방지 노트북 파우치 - 12000원 (품절) ⚡SALE"


def test_plain_label(store):
    assert product_label(store.products["p5"]) == "코딩할 때 듣는 Lo-Fi 스피커 - 25000원"
