#!/usr/bin/env python3
"""
Dashboard Engine — recompute every derived value from the raw inputs
=====================================================================

The host calls DashboardEngine.snapshot(x0, y0, r, usdt_in) on each input
change. Everything is recomputed from that tuple; the only state is a set of
single-slot caches keyed by the inputs each value depends on:

  k           ← (x0, y0)
  curve       ← (k, x0)        base samples, before overlays
  comparison  ← (x0, y0)       HODL vs LP series

Overlays, trade quote and stats are cheap and recomputed every call.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

from amm_cli.central_config import config
from amm_cli.classify import active_flow_step, classify_il, classify_slippage
from amm_math import Pool, Position, compute_il, compute_k, get_position
from curve_sampler import CurvePoint, annotate_curve, curve_bounds, generate_curve_data
from il_compare import ComparisonPoint, generate_compare_data
from trade_simulator import TradeQuote, simulate_trade


# ── Stats Bar ────────────────────────────────────────────────────────────


def analyze_pool(x0: float, y0: float, price_multiplier: float) -> Dict[str, Any]:
    """
    Stats for a pool moved to price_multiplier.
    Returns a flat dict suitable for table rendering.
    """
    pos = get_position(x0, y0, price_multiplier)
    il = compute_il(price_multiplier)
    total = pos.x + pos.y

    return {
        "x0": x0,
        "y0": y0,
        "k": compute_k(x0, y0),
        "price_multiplier": price_multiplier,
        "initial_price": y0 / x0,
        "price": pos.price,
        "x": pos.x,
        "y": pos.y,
        # Pool ratio — share of each token in raw units
        "ratio_x_pct": round(pos.x / total * 100, 1),
        "ratio_y_pct": round(pos.y / total * 100, 1),
        # Impermanent loss (fraction and percent)
        "il": il,
        "il_pct": round(il * 100, 3),
        "il_severity": classify_il(il),
        "generated_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    }


# ── Snapshot ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DashboardSnapshot:
    pool: Pool
    price_multiplier: float
    usdt_in: float
    position: Position
    price: float
    il: float
    il_severity: str
    ratio_x_pct: float
    ratio_y_pct: float
    flow_step: int
    curve: Tuple[CurvePoint, ...]
    quote: Optional[TradeQuote]
    slippage_band: Optional[str]
    compare: Tuple[ComparisonPoint, ...]


class _Memo:
    """Single-slot cache: keeps the value for the most recent key only."""

    def __init__(self):
        self._key: Optional[Hashable] = None
        self._value: Any = None
        self._filled = False
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        if self._filled and self._key == key:
            self.hits += 1
            return self._value
        self.misses += 1
        self._value = compute()
        self._key = key
        self._filled = True
        return self._value

    def clear(self) -> None:
        self._key = None
        self._value = None
        self._filled = False


class DashboardEngine:
    """
    Pure recomputation of the dashboard from (x0, y0, r, usdt_in).

    Same inputs always give an equal snapshot; caches only avoid resampling
    the curve and the comparison series when reserves did not change.
    """

    def __init__(self, curve_steps: int = config.policy.CURVE_STEPS):
        self.curve_steps = curve_steps
        self._k = _Memo()
        self._curve = _Memo()
        self._compare = _Memo()

    def cache_stats(self) -> Dict[str, Dict[str, int]]:
        return {
            name: {"hits": memo.hits, "misses": memo.misses}
            for name, memo in (
                ("k", self._k),
                ("curve", self._curve),
                ("compare", self._compare),
            )
        }

    def clear_cache(self) -> None:
        for memo in (self._k, self._curve, self._compare):
            memo.clear()

    def base_curve(self, x0: float, y0: float) -> List[CurvePoint]:
        k = self._k.get((x0, y0), lambda: compute_k(x0, y0))
        x_min, x_max = curve_bounds(x0)
        return self._curve.get(
            (k, x0, self.curve_steps),
            lambda: generate_curve_data(k, x_min, x_max, self.curve_steps),
        )

    def compare_series(self, x0: float, y0: float) -> List[ComparisonPoint]:
        return self._compare.get((x0, y0), lambda: generate_compare_data(x0, y0))

    def snapshot(
        self, x0: float, y0: float, price_multiplier: float, usdt_in: float = 0.0
    ) -> DashboardSnapshot:
        k = self._k.get((x0, y0), lambda: compute_k(x0, y0))
        pos = get_position(x0, y0, price_multiplier)
        il = compute_il(price_multiplier)
        total = pos.x + pos.y

        # Trade runs against the projected position, not the initial reserves
        quote = simulate_trade(pos.x, pos.y, usdt_in, k)
        curve = annotate_curve(self.base_curve(x0, y0), pos, quote)

        return DashboardSnapshot(
            pool=Pool(x0=x0, y0=y0),
            price_multiplier=price_multiplier,
            usdt_in=usdt_in,
            position=pos,
            price=pos.price,
            il=il,
            il_severity=classify_il(il),
            ratio_x_pct=pos.x / total * 100,
            ratio_y_pct=pos.y / total * 100,
            flow_step=active_flow_step(k, usdt_in, price_multiplier),
            curve=tuple(curve),
            quote=quote,
            slippage_band=classify_slippage(quote.price_impact) if quote else None,
            compare=tuple(self.compare_series(x0, y0)),
        )
