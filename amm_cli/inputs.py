"""
Input Clamping — raw widget/CLI values to engine-safe values
=============================================================

The engine never validates its inputs. This module is the caller-side
contract: reserves are clamped to a minimum of 1, trade amounts to ≥ 0, and
the price multiplier comes from a log10 slider bounded to 0.1x … 10x.
"""

import math

from amm_cli.central_config import config

_POLICY = config.policy


def clamp_reserve(value: float) -> float:
    """Reserve input: minimum 1 (also maps nan to the minimum)."""
    if value != value:
        return _POLICY.MIN_RESERVE
    return max(_POLICY.MIN_RESERVE, float(value))


def clamp_amount(value: float) -> float:
    """Trade input amount: never negative."""
    if value != value:
        return 0.0
    return max(0.0, float(value))


def _clamp_slider(position: float) -> float:
    return max(_POLICY.SLIDER_MIN, min(_POLICY.SLIDER_MAX, position))


def slider_to_multiplier(position: float) -> float:
    """
    Log-scale slider position → price multiplier.

    Formula: r = 10^s,  s ∈ [−1, 1]  →  r ∈ [0.1, 10]
    """
    return 10 ** _clamp_slider(float(position))


def multiplier_to_slider(price_multiplier: float) -> float:
    """Inverse of slider_to_multiplier; r ≤ 0 maps to the left end."""
    if price_multiplier <= 0:
        return _POLICY.SLIDER_MIN
    return _clamp_slider(math.log10(price_multiplier))


def snap_slider(position: float) -> float:
    """Snap a slider position to the 0.005 step grid."""
    step = _POLICY.SLIDER_STEP
    return _clamp_slider(round(round(position / step) * step, 3))
