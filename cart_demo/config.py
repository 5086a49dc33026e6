from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from cart_demo import constants
from cart_demo.promotions import PromotionTimings

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class CartConfig:
    """Runtime settings for a cart session."""

    lightning_interval: float = constants.LIGHTNING_INTERVAL
    lightning_max_delay: float = constants.LIGHTNING_MAX_DELAY
    suggestion_interval: float = constants.SUGGESTION_INTERVAL
    suggestion_max_delay: float = constants.SUGGESTION_MAX_DELAY
    # directory holding snapshots; None disables persistence
    snapshot_path: Optional[str] = None
    snapshot_version: int = constants.SNAPSHOT_VERSION
    # development-only diagnostics
    debug: bool = False
    # seeds the promotion RNG; None = nondeterministic
    seed: Optional[int] = None

    def timings(self) -> PromotionTimings:
        return PromotionTimings(
            lightning_interval=self.lightning_interval,
            lightning_max_delay=self.lightning_max_delay,
            suggestion_interval=self.suggestion_interval,
            suggestion_max_delay=self.suggestion_max_delay,
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CartConfig":
        env = os.environ if environ is None else environ
        cfg = cls()
        cfg.debug = env.get("CART_DEMO_DEBUG", "").strip().lower() in _TRUE
        cfg.snapshot_path = env.get("CART_DEMO_SNAPSHOT") or None
        if "CART_DEMO_SNAPSHOT_VERSION" in env:
            cfg.snapshot_version = int(env["CART_DEMO_SNAPSHOT_VERSION"])
        if "CART_DEMO_LIGHTNING_INTERVAL" in env:
            cfg.lightning_interval = _positive(env["CART_DEMO_LIGHTNING_INTERVAL"], "CART_DEMO_LIGHTNING_INTERVAL")
        if "CART_DEMO_SUGGESTION_INTERVAL" in env:
            cfg.suggestion_interval = _positive(env["CART_DEMO_SUGGESTION_INTERVAL"], "CART_DEMO_SUGGESTION_INTERVAL")
        if env.get("CART_DEMO_SEED"):
            cfg.seed = int(env["CART_DEMO_SEED"])
        return cfg


def _positive(raw: str, name: str) -> float:
    value = float(raw)
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {raw!r}")
    return value
