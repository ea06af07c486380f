#!/usr/bin/env python3
"""
AMM CLI -- Constant Product Pool Explorer
=========================================

Projects an x · y = k pool under price moves and trades.

Usage:
  python run.py pool    --x0 1000 --y0 1000 --multiplier 4     Stats: price, ratio, IL
  python run.py pool    --slider 0.5                           Multiplier from log10 slider
  python run.py trade   --usdt-in 100                          USDT → ETH swap quote
  python run.py curve   --usdt-in 100 --every 15               Curve + secant/tangent overlays
  python run.py compare --every 20                             HODL vs LP series
  python run.py history 1.0001 1.0002 1.05                     Deduplicated multiplier history
  python run.py info                                           System overview

Sources:
  Uniswap V2 Whitepaper : https://uniswap.org/whitepaper.pdf
  Impermanent Loss      : https://pintail.medium.com/uniswap-a-good-deal-for-liquidity-providers-104c0b6816f2
"""

import sys
import argparse
from pathlib import Path

# ── Imports ───────────────────────────────────────────────────────────────

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from amm_cli.central_config import PROJECT_VERSION, PROJECT_NAME, config
from amm_cli.commands import (
    cmd_info,
    cmd_pool,
    cmd_trade,
    cmd_curve,
    cmd_compare,
    cmd_history,
)
from amm_cli.inputs import slider_to_multiplier, snap_slider

_POLICY = config.policy


# ── CLI Parser ────────────────────────────────────────────────────────────


def _add_reserves(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--x0",
        type=float,
        default=_POLICY.DEFAULT_X0,
        help=f"Token X (ETH) initial reserve, min 1 (default: {_POLICY.DEFAULT_X0:g})",
    )
    p.add_argument(
        "--y0",
        type=float,
        default=_POLICY.DEFAULT_Y0,
        help=f"Token Y (USDT) initial reserve, min 1 (default: {_POLICY.DEFAULT_Y0:g})",
    )


def _add_multiplier(p: argparse.ArgumentParser) -> None:
    group = p.add_mutually_exclusive_group()
    group.add_argument(
        "--multiplier",
        type=float,
        default=None,
        help="Price multiplier r for token X (default: 1)",
    )
    group.add_argument(
        "--slider",
        type=float,
        default=None,
        help="Log10 slider position in [-1, 1] → r = 10^s",
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="amm-cli",
        description=f"{PROJECT_NAME} v{PROJECT_VERSION} — Constant Product Pool Explorer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py pool    --x0 1000 --y0 1000 --multiplier 4   r=4 → (500, 2000), IL −20%
  python run.py trade   --x0 1000 --y0 1000 --usdt-in 100    ~10% price impact
  python run.py curve   --usdt-in 250 --every 15             Curve table with overlays
  python run.py compare --x0 5 --y0 10000                    HODL vs LP for a 2000 USDT/ETH pool
  python run.py history 1.0001 1.0002 1.05                   2 rows: 1.000x, 1.050x

Concepts:
  k           = x · y, constant across trades (no fees)
  Spot price  = y / x
  Exec price  = Δy / Δx (average over the trade)
  IL          = 2·√r / (1 + r) − 1, LP value vs. holding the deposit
""",
    )
    parser.add_argument(
        "--version", action="version", version=f"{PROJECT_NAME} v{PROJECT_VERSION}"
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    pool_p = sub.add_parser("pool", help="Pool stats at a price multiplier")
    _add_reserves(pool_p)
    _add_multiplier(pool_p)

    trade_p = sub.add_parser("trade", help="Simulate a USDT → ETH swap")
    _add_reserves(trade_p)
    _add_multiplier(trade_p)
    trade_p.add_argument(
        "--usdt-in", type=float, default=0.0, help="USDT sent into the pool (default: 0)"
    )

    curve_p = sub.add_parser("curve", help="Sample the x · y = k curve with overlays")
    _add_reserves(curve_p)
    _add_multiplier(curve_p)
    curve_p.add_argument(
        "--usdt-in", type=float, default=0.0, help="USDT trade to overlay (default: 0)"
    )
    curve_p.add_argument(
        "--steps",
        type=int,
        default=_POLICY.CURVE_STEPS,
        help=(
            f"Curve intervals, {_POLICY.CURVE_STEPS_MIN}-{_POLICY.CURVE_STEPS_MAX} "
            f"(default: {_POLICY.CURVE_STEPS})"
        ),
    )
    curve_p.add_argument(
        "--every", type=int, default=10, help="Print every Nth sample (default: 10)"
    )

    compare_p = sub.add_parser("compare", help="HODL vs LP value over r ∈ [0.1, 10]")
    _add_reserves(compare_p)
    compare_p.add_argument(
        "--every", type=int, default=20, help="Print every Nth sample (default: 20)"
    )

    history_p = sub.add_parser("history", help="Record a stream of multipliers")
    _add_reserves(history_p)
    history_p.add_argument(
        "multipliers", type=float, nargs="*", help="Price multiplier samples, in order"
    )

    sub.add_parser("info", help="System & policy info")

    return parser


def _resolve_multiplier(args: argparse.Namespace) -> float:
    if getattr(args, "slider", None) is not None:
        return slider_to_multiplier(snap_slider(args.slider))
    if getattr(args, "multiplier", None) is not None:
        return args.multiplier
    return 1.0


# ── Main ──────────────────────────────────────────────────────────────────


def main(argv=None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "info":
        cmd_info()
        return 0

    if args.command == "pool":
        ok = cmd_pool(args.x0, args.y0, _resolve_multiplier(args))
        return 0 if ok else 1

    if args.command == "trade":
        ok = cmd_trade(args.x0, args.y0, _resolve_multiplier(args), args.usdt_in)
        return 0 if ok else 1

    if args.command == "curve":
        ok = cmd_curve(
            args.x0,
            args.y0,
            _resolve_multiplier(args),
            usdt_in=args.usdt_in,
            steps=args.steps,
            every=args.every,
        )
        return 0 if ok else 1

    if args.command == "compare":
        ok = cmd_compare(args.x0, args.y0, every=args.every)
        return 0 if ok else 1

    if args.command == "history":
        ok = cmd_history(args.x0, args.y0, args.multipliers)
        return 0 if ok else 1

    parser.print_help()
    return 0


def cli() -> None:
    """Console-script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n❌ Cancelled.")
        sys.exit(130)


if __name__ == "__main__":
    cli()
