"""
Classification — IL severity, slippage bands, AMM flow steps
=============================================================

Maps raw engine numbers to the discrete labels the dashboard colours by:
  - IL severity      (severe / mild / none)
  - Slippage band    (high / moderate / low)
  - AMM flow step    (1…5, which stage of the pool lifecycle is active)

Thresholds are literal policy values from central_config; they carry no
economic derivation and are kept as-is.
"""

from typing import Tuple

from amm_cli.central_config import config

_POLICY = config.policy

# ── Flow Steps ──────────────────────────────────────────────────────────

# (id, title, description, icon)
FLOW_STEPS: Tuple[Tuple[int, str, str, str], ...] = (
    (1, "Inject Liquidity", "LP deposits equal-value ETH + USDT into the pool", "💧"),
    (2, "Establish k", "Constant product k = x × y is locked", "🔒"),
    (3, "User Initiates Trade", "Trader sends USDT to swap for ETH", "🔄"),
    (4, "Reserves Rebalance", "Pool adjusts: ETH decreases, USDT increases", "⚖️"),
    (5, "Price Updates", "New price = y'/x', slippage reflected", "📈"),
)


def classify_il(il: float) -> str:
    """
    Severity band of an impermanent loss fraction.

    Returns:
        "severe" when il < −0.01, "mild" when −0.01 ≤ il < 0, else "none".
    """
    if il < _POLICY.IL_SEVERE_BELOW:
        return "severe"
    if il < _POLICY.IL_MILD_BELOW:
        return "mild"
    return "none"


def classify_slippage(price_impact_pct: float) -> str:
    """
    Slippage band of a trade's price impact (percent).

    Returns:
        "high" above 5%, "moderate" above 1%, else "low".
    """
    if price_impact_pct > _POLICY.SLIPPAGE_HIGH_ABOVE:
        return "high"
    if price_impact_pct > _POLICY.SLIPPAGE_MODERATE_ABOVE:
        return "moderate"
    return "low"


def active_flow_step(k: float, usdt_in: float, price_multiplier: float) -> int:
    """
    Which AMM flow step is active for the current inputs.

    0 means no pool (k ≤ 0). Step 1 (Inject Liquidity) is always done
    once a pool exists, so the lowest active step is 2.
    """
    if not k or k <= 0:
        return 0
    if usdt_in > 0 and price_multiplier != 1:
        return 5
    if usdt_in > 0:
        return 4
    if price_multiplier != 1:
        return 3
    return 2


def flow_step_status(step_id: int, active: int) -> str:
    """"done", "current" or "pending" for a step relative to the active one."""
    if step_id < active:
        return "done"
    if step_id == active:
        return "current"
    return "pending"
