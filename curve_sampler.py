#!/usr/bin/env python3
"""
Curve Sampler — y = k / x samples with trade overlays
======================================================

Two pure passes:
  1. generate_curve_data() samples the hyperbola over [x_min, x_max].
  2. annotate_curve() overlays lines on those samples:
       - secant   : before → after of a trade (slope = average execution price)
       - tangent0 : at the current position (slope = −y/x, spot price before)
       - tangent1 : at the post-trade position (spot price after)

Overlay fields are sparse: a point outside an overlay's span has None for
that field, never 0. Values are rounded to 2 decimals for display.

Derivative of the curve (gives the tangent slope):
    y = k / x  →  dy/dx = −k / x² = −y / x
"""

import math
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from amm_cli.central_config import config
from amm_math import Position

_POLICY = config.policy


@dataclass(frozen=True)
class CurvePoint:
    """One curve sample, optionally annotated with overlay values."""

    x: float
    y: float
    secant: Optional[float] = None
    tangent0: Optional[float] = None
    tangent1: Optional[float] = None


# ── Sampling ─────────────────────────────────────────────────────────────


def curve_bounds(x0: float) -> Tuple[float, float]:
    """Plot window for a pool: [0.1·x0, 3.5·x0]."""
    return x0 * _POLICY.CURVE_X_MIN_FACTOR, x0 * _POLICY.CURVE_X_MAX_FACTOR


def generate_curve_data(
    k: float, x_min: float, x_max: float, steps: int = _POLICY.CURVE_STEPS
) -> List[CurvePoint]:
    """
    Sample y = k / x at steps + 1 evenly spaced x values.

    x = x_min + i · (x_max − x_min) / steps,  i = 0 … steps
    Samples whose rounded x is ≤ 0 are skipped (the curve is undefined there).
    """
    decimals = _POLICY.CURVE_DECIMALS
    step_size = (x_max - x_min) / steps
    data = []
    for i in range(steps + 1):
        x = x_min + i * step_size
        x_shown = round(x, decimals)
        # x in (0, 0.005) rounds to 0.0
        if x_shown <= 0:
            continue
        data.append(CurvePoint(x=x_shown, y=round(k / x, decimals)))
    return data


# ── Overlays ─────────────────────────────────────────────────────────────


def _tangent_at(pos: Position, x: float) -> Optional[float]:
    """Tangent line value at x, or None outside the ±60% window or if ≤ 0."""
    span = pos.x * _POLICY.TANGENT_WINDOW
    if not (pos.x - span <= x <= pos.x + span):
        return None
    slope = -(pos.y / pos.x)
    tan_y = pos.y + slope * (x - pos.x)
    if tan_y <= 0:
        return None
    return round(tan_y, _POLICY.CURVE_DECIMALS)


def _secant_at(before: Position, after: Position, x: float) -> Optional[float]:
    """Secant (before ↔ after) value at x, or None outside the trade's x-span."""
    lo = min(before.x, after.x)
    hi = max(before.x, after.x)
    if not (lo <= x <= hi) or math.isclose(before.x, after.x):
        return None
    t = (x - after.x) / (before.x - after.x)
    sec_y = after.y + t * (before.y - after.y)
    if sec_y <= 0:
        return None
    return round(sec_y, _POLICY.CURVE_DECIMALS)


def annotate_curve(
    curve: Sequence[CurvePoint], position: Position, quote=None
) -> List[CurvePoint]:
    """
    Return a new curve with secant/tangent overlays filled in.

    Args:
        curve: Samples from generate_curve_data() (left untouched).
        position: Current pool position; tangent0 is drawn here.
        quote: Optional TradeQuote. Adds the secant between quote.before and
               quote.after, and tangent1 at quote.after.
    """
    after = quote.after if quote is not None else None
    before = quote.before if quote is not None else None

    annotated = []
    for pt in curve:
        annotated.append(
            replace(
                pt,
                secant=_secant_at(before, after, pt.x) if quote is not None else None,
                tangent0=_tangent_at(position, pt.x),
                tangent1=_tangent_at(after, pt.x) if after is not None else None,
            )
        )
    return annotated
