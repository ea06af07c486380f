#!/usr/bin/env python3
"""
Trade Simulator — one-sided USDT → ETH swap on x · y = k
=========================================================

Quotes a swap against the current reserves without touching them.

FORMULAS (Uniswap V2 Whitepaper §2.1, no fee):
──────────────────────────────────────────────
  usdt'          = usdt + Δusdt
  eth'           = k / usdt'
  eth received   = eth − eth'
  spot (before)  = usdt / eth
  spot (after)   = usdt' / eth'
  exec price     = Δusdt / eth received          (average, = secant slope)
  price impact % = (exec − spot) / spot × 100

Degenerate trades return None instead of a malformed quote:
  - Δusdt ≤ 0           → no trade
  - eth received ≤ 0    → pool would be drained (unreachable for k > 0)

The post-trade product is checked against k; a mismatch beyond 0.01 is
reported through TradeQuote.k_match and never raised.
"""

from dataclasses import dataclass
from typing import Optional

from amm_cli.central_config import config
from amm_math import Position


@dataclass(frozen=True)
class TradeQuote:
    """
    Full result of a simulated swap.

      - before / after  → (eth, usdt) reserves around the trade
      - eth_received    → output paid to the trader
      - spot_before/after, exec_price → USDT per ETH
      - price_impact    → percent, (exec − spot) / spot × 100
      - new_k, k_match  → invariant check for display
    """

    before: Position
    after: Position
    eth_received: float
    spot_before: float
    spot_after: float
    exec_price: float
    price_impact: float
    new_k: float
    k_match: bool


def simulate_trade(
    eth_reserve: float, usdt_reserve: float, usdt_in: float, k: float
) -> Optional[TradeQuote]:
    """
    Quote a swap of usdt_in USDT for ETH.

    Args:
        eth_reserve: Current ETH (token X) reserve.
        usdt_reserve: Current USDT (token Y) reserve.
        usdt_in: Amount of USDT sent in; negatives count as 0.
        k: Pool invariant the post-trade product is checked against.

    Returns:
        TradeQuote, or None for a zero/degenerate trade.
    """
    safe_in = max(0.0, usdt_in)
    if safe_in <= 0:
        return None

    new_usdt_reserve = usdt_reserve + safe_in
    new_eth_reserve = k / new_usdt_reserve
    eth_received = eth_reserve - new_eth_reserve
    if eth_received <= 0:
        return None

    spot_before = usdt_reserve / eth_reserve
    spot_after = new_usdt_reserve / new_eth_reserve
    exec_price = safe_in / eth_received
    price_impact = (
        (exec_price - spot_before) / spot_before * 100 if spot_before > 0 else 0.0
    )

    new_k = new_eth_reserve * new_usdt_reserve
    k_match = abs(new_k - k) < config.policy.K_MATCH_TOLERANCE

    return TradeQuote(
        before=Position(x=eth_reserve, y=usdt_reserve),
        after=Position(x=new_eth_reserve, y=new_usdt_reserve),
        eth_received=eth_received,
        spot_before=spot_before,
        spot_after=spot_after,
        exec_price=exec_price,
        price_impact=price_impact,
        new_k=new_k,
        k_match=k_match,
    )
