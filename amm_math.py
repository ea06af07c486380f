#!/usr/bin/env python3
"""
Constant Product Math Engine
============================

Implements the x · y = k formulas behind the AMM dashboard.
Every function is pure: same inputs, same outputs, no hidden state.

FORMULA SOURCES:
────────────────
1. Uniswap V2 Core Whitepaper
   https://uniswap.org/whitepaper.pdf
   - §2.1  Constant product market maker: x · y = k
   - Spot price of token X in units of Y: p = y / x

2. Impermanent Loss — Original AMM Math
   https://pintail.medium.com/uniswap-a-good-deal-for-liquidity-providers-104c0b6816f2
   IL = 2·√(r) / (1 + r) − 1,  where r = P_current / P_initial

3. Position under a price move (derived from 1.)
   Starting at (x0, y0) with p0 = y0 / x0, a move to p0·r that keeps k gives:
     x = x0 / √r,   y = y0 · √r

Domain contract:
  Reserves and multipliers must be strictly positive. Callers clamp inputs
  (reserves to a minimum of 1) before calling; nothing here validates, so a
  violation propagates inf/nan instead of raising.
"""

import math
from dataclasses import dataclass


# ── Pool & Position Data ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Pool:
    """
    Initial reserves of a two-token pool at multiplier 1.

      - x0 → token X reserve (e.g. ETH)
      - y0 → token Y reserve (e.g. USDT)
    """

    x0: float
    y0: float

    @property
    def k(self) -> float:
        return compute_k(self.x0, self.y0)

    @property
    def initial_price(self) -> float:
        return compute_price(self.x0, self.y0)


@dataclass(frozen=True)
class Position:
    """A point (x, y) on the curve x · y = k. A new one per price move."""

    x: float
    y: float

    @property
    def price(self) -> float:
        return compute_price(self.x, self.y)

    @property
    def product(self) -> float:
        return self.x * self.y


# ── Constant Product Core ────────────────────────────────────────────────


def compute_k(x0: float, y0: float) -> float:
    """Constant product invariant k = x · y (Whitepaper §2.1)."""
    return x0 * y0


def compute_price(x: float, y: float) -> float:
    """
    Spot price of X in units of Y: p = y / x.

    x == 0 is degenerate: returns inf (nan when y is also 0) the way a
    floating-point display expects, rather than raising.
    """
    if x == 0:
        return math.nan if y == 0 else math.copysign(math.inf, y)
    return y / x


def get_position(x0: float, y0: float, price_multiplier: float) -> Position:
    """
    Reserves after the price of X moves by a factor r, keeping k.

    Formula:
        x = x0 / √r,  y = y0 · √r
        → x · y = x0 · y0  and  y / x = (y0 / x0) · r

    r must be > 0. r == 0 gives (inf, 0), the limit of the formula;
    r < 0 gives nan reserves.
    """
    if price_multiplier < 0:
        return Position(x=math.nan, y=math.nan)
    if price_multiplier == 0:
        return Position(x=math.inf, y=0.0)
    sqrt_r = math.sqrt(price_multiplier)
    return Position(x=x0 / sqrt_r, y=y0 * sqrt_r)


def compute_il(price_ratio: float) -> float:
    """
    Impermanent Loss of a full-range LP position vs. holding.

    Formula (Pintail, 2019):
        IL = 2·√(r) / (1 + r) − 1

    Returns a fraction (−0.2 = 20% below HODL). IL(1) = 0 and IL(r) < 0 for
    every other r > 0. r == 0 gives −1; r < 0 gives nan (caller error).
    """
    if price_ratio < 0:
        return math.nan
    return (2 * math.sqrt(price_ratio)) / (1 + price_ratio) - 1
