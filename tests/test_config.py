import pytest

from cart_demo.config import CartConfig


def test_defaults():
    cfg = CartConfig.from_env({})

    assert cfg.lightning_interval == 30.0
    assert cfg.suggestion_interval == 60.0
    assert cfg.snapshot_path is None
    assert cfg.snapshot_version == 1
    assert cfg.debug is False
    assert cfg.seed is None


def test_reads_environment():
    cfg = CartConfig.from_env(
        {
            "CART_DEMO_DEBUG": "yes",
            "CART_DEMO_SNAPSHOT": "/tmp/cart",
            "CART_DEMO_SNAPSHOT_VERSION": "3",
            "CART_DEMO_LIGHTNING_INTERVAL": "0.5",
            "CART_DEMO_SUGGESTION_INTERVAL": "2",
            "CART_DEMO_SEED": "42",
        }
    )

    assert cfg.debug is True
    assert cfg.snapshot_path == "/tmp/cart"
    assert cfg.snapshot_version == 3
    assert cfg.lightning_interval == 0.5
    assert cfg.suggestion_interval == 2.0
    assert cfg.seed == 42


@pytest.mark.parametrize(
    "name, value",
    [
        ("CART_DEMO_LIGHTNING_INTERVAL", "0"),
        ("CART_DEMO_SUGGESTION_INTERVAL", "soon"),
        ("CART_DEMO_SEED", "x"),
    ],
)
def test_invalid_values_fail_fast(name, value):
    with pytest.raises(ValueError):
        CartConfig.from_env({name: value})
