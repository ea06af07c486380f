#!/usr/bin/env python3
"""
HODL vs LP — value comparison across price multipliers
======================================================

For a pool deposited at (x0, y0) with p0 = y0 / x0, compare two strategies
as the price of X moves to p0 · r:

  HODL value = x0 · p0 · r + y0                  (keep the original tokens)
  LP value   = (x0 / √r) · p0 · r + y0 · √r       (hold the pool's reserves)

Both are normalised to % of the deposit value x0 · p0 + y0, so the gap
diff = LP% − HODL% is the impermanent loss in percentage points (always ≤ 0).

Ref: https://pintail.medium.com/uniswap-a-good-deal-for-liquidity-providers-104c0b6816f2

The grid is fixed (201 values of r over [0.1, 10]) and independent of the
live multiplier or trade; it only changes when x0 / y0 change.
"""

import math
from dataclasses import dataclass
from typing import List

from amm_cli.central_config import config

_POLICY = config.policy


@dataclass(frozen=True)
class ComparisonPoint:
    r: float
    hodl: float
    lp: float
    diff: float


def compare_grid() -> List[float]:
    """r = 0.1 + (i / 200) · 9.9 for i = 0 … 200."""
    lo, hi, n = _POLICY.COMPARE_R_MIN, _POLICY.COMPARE_R_MAX, _POLICY.COMPARE_INTERVALS
    return [lo + (i / n) * (hi - lo) for i in range(n + 1)]


def generate_compare_data(x0: float, y0: float) -> List[ComparisonPoint]:
    """HODL% / LP% / diff for each r on the fixed grid (rounded to 2 dp)."""
    decimals = _POLICY.COMPARE_DECIMALS
    p0 = y0 / x0
    initial_total = x0 * p0 + y0

    data = []
    for r in compare_grid():
        sqrt_r = math.sqrt(r)
        hodl_value = x0 * p0 * r + y0
        lp_value = (x0 / sqrt_r) * p0 * r + y0 * sqrt_r

        hodl_pct = hodl_value / initial_total * 100
        lp_pct = lp_value / initial_total * 100

        data.append(
            ComparisonPoint(
                r=round(r, decimals),
                hodl=round(hodl_pct, decimals),
                lp=round(lp_pct, decimals),
                diff=round(lp_pct - hodl_pct, decimals),
            )
        )
    return data
