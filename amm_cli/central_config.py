"""
Project Configuration — Engine policy, version, constants
==========================================================

Fixed policy parameters of the constant product engine.
These are not user-facing flags: CLI defaults are read from here and the
engine honours them as literals.
"""

import re
from dataclasses import dataclass
from importlib.metadata import version, PackageNotFoundError
from pathlib import Path

# Version — single source of truth is pyproject.toml
try:
    PROJECT_VERSION = version("amm-cli")
except PackageNotFoundError:
    # Dev / CI: package not installed — read pyproject.toml directly
    _toml = Path(__file__).resolve().parent.parent / "pyproject.toml"
    _m = (
        re.search(r'version\s*=\s*"([^"]+)"', _toml.read_text())
        if _toml.exists()
        else None
    )
    PROJECT_VERSION = _m.group(1) if _m else "0.0.0-dev"
PROJECT_NAME = "AMM CLI"


@dataclass(frozen=True)
class EnginePolicy:
    """Constant product engine policy parameters."""

    # Default pool (token X = ETH, token Y = USDT)
    DEFAULT_X0: float = 1000.0
    DEFAULT_Y0: float = 1000.0
    MIN_RESERVE: float = 1.0

    # Curve sampling: y = k / x over [0.1·x0, 3.5·x0]
    CURVE_STEPS: int = 300
    CURVE_STEPS_MIN: int = 200
    CURVE_STEPS_MAX: int = 300
    CURVE_X_MIN_FACTOR: float = 0.1
    CURVE_X_MAX_FACTOR: float = 3.5
    CURVE_DECIMALS: int = 2

    # Tangent overlay window: ±60% of the position's x
    TANGENT_WINDOW: float = 0.6

    # IL severity bands (fraction, not percent)
    IL_SEVERE_BELOW: float = -0.01
    IL_MILD_BELOW: float = 0.0

    # Slippage bands (percent)
    SLIPPAGE_HIGH_ABOVE: float = 5.0
    SLIPPAGE_MODERATE_ABOVE: float = 1.0

    # Trade invariant check: |x'·y' − k| < tolerance
    K_MATCH_TOLERANCE: float = 0.01

    # Price history
    HISTORY_CAPACITY: int = 50
    HISTORY_DECIMALS: int = 3

    # HODL vs LP comparison grid: 201 samples over [0.1, 10]
    COMPARE_R_MIN: float = 0.1
    COMPARE_R_MAX: float = 10.0
    COMPARE_INTERVALS: int = 200
    COMPARE_DECIMALS: int = 2

    # Price multiplier slider: log10 scale, 0.1x … 10x
    SLIDER_MIN: float = -1.0
    SLIDER_MAX: float = 1.0
    SLIDER_STEP: float = 0.005


# Unified configuration
class EngineConfig:
    """Unified configuration for the engine and CLI."""

    policy = EnginePolicy()


# Global instance
config = EngineConfig()
