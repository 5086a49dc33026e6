from __future__ import annotations

from decimal import Decimal

KEYBOARD = "p1"
MOUSE = "p2"
MONITOR_ARM = "p3"
LAPTOP_POUCH = "p4"
SPEAKER = "p5"

# (id, name, price, initial stock), in display order
CATALOG = (
    (KEYBOARD, "버그 없애는 키보드", 10000, 50),
    (MOUSE, "생산성 폭발 마우스", 20000, 30),
    (MONITOR_ARM, "거북목 탈출 모니터암", 30000, 20),
    (LAPTOP_POUCH, "에러 방지 노트북 파우치", 15000, 0),
    (SPEAKER, "코딩할 때 듣는 Lo-Fi 스피커", 25000, 10),
)

# Per-item bulk rates, applied to a line with quantity >= ITEM_BULK_MIN
ITEM_BULK_RATES = {
    KEYBOARD: Decimal("0.10"),
    MOUSE: Decimal("0.15"),
    MONITOR_ARM: Decimal("0.20"),
    LAPTOP_POUCH: Decimal("0.05"),
    SPEAKER: Decimal("0.25"),
}

CART_BULK_RATE = Decimal("0.25")
TUESDAY_RATE = Decimal("0.10")
LIGHTNING_RATE = Decimal("0.20")
SUGGESTION_RATE = Decimal("0.05")

ITEM_BULK_MIN = 10
CART_BULK_MIN = 30
LOW_STOCK_WARNING = 4
TOTAL_STOCK_WARNING = 50

# ISO weekday (Monday=1)
TUESDAY = 2

BASE_POINTS_DIVISOR = 1000
TUESDAY_POINTS_MULTIPLIER = 2
COMBO_BONUS = 50
FULL_SET_BONUS = 100
# (min total quantity, bonus), highest tier first
QUANTITY_BONUS_TIERS = ((30, 100), (20, 50), (10, 20))

# seconds
LIGHTNING_INTERVAL = 30.0
LIGHTNING_MAX_DELAY = 10.0
SUGGESTION_INTERVAL = 60.0
SUGGESTION_MAX_DELAY = 20.0

SNAPSHOT_VERSION = 1

STOCK_SHORTAGE = "재고가 부족합니다."
PRODUCT_NOT_FOUND = "상품을 찾을 수 없습니다."
OUT_OF_STOCK = "품절"
STOCK_WARNING = "{name}: 재고 부족 ({remaining}개 남음)"
OUT_OF_STOCK_WARNING = "{name}: 품절"

LIGHTNING_ALERT = "⚡번개세일! {name}이(가) 20% 할인 중입니다!"
SUGGESTION_ALERT = "💝 {name}은(는) 어떠세요? 지금 구매하시면 5% 추가 할인!"

LIGHTNING_TAG = "⚡SALE"
SUGGESTION_TAG = "💝추천"
SUPER_SALE_LABEL = "25% SUPER SALE!"
LIGHTNING_LABEL = "20% SALE!"
SUGGESTION_LABEL = "5% 추천할인!"

CART_BULK_MESSAGE = "🎉 대량구매 할인 (30개 이상)"
TUESDAY_MESSAGE = "🌟 화요일 추가 할인"
ITEM_BULK_MESSAGE = "{name} (10개↑)"

POINTS_BASE = "기본: {points}p"
POINTS_TUESDAY = "화요일 2배"
POINTS_COMBO = "키보드+마우스 세트 +50p"
POINTS_FULL_SET = "풀세트 구매 +100p"
POINTS_QUANTITY = {
    30: "대량구매(30개+) +100p",
    20: "대량구매(20개+) +50p",
    10: "대량구매(10개+) +20p",
}
