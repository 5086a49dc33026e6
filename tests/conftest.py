"""Pytest fixtures for the cart demo (in-memory store seeded with the demo catalog)."""

from datetime import datetime

import pytest

from cart_demo.app import CartApp
from cart_demo.catalog import init_catalog
from cart_demo.config import CartConfig
from cart_demo.services import CartLedger
from cart_demo.store import Store

MONDAY = datetime(2024, 6, 3, 12, 0)
TUESDAY = datetime(2024, 6, 4, 12, 0)


@pytest.fixture
def store() -> Store:
    store = Store()
    init_catalog(store)
    return store


@pytest.fixture
def ledger(store) -> CartLedger:
    return CartLedger(store)


@pytest.fixture
def monday() -> datetime:
    return MONDAY


@pytest.fixture
def tuesday() -> datetime:
    return TUESDAY


@pytest.fixture
def app(store) -> CartApp:
    return CartApp(store=store, config=CartConfig(seed=7), clock=lambda: MONDAY)
