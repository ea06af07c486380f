"""
AMM CLI — Command Implementations
==================================

All CLI command handlers live here, keeping run.py as a thin
argparse dispatcher.  Each public function corresponds to a
subcommand (info, pool, trade, curve, compare, history) and
returns True on success, False on rejected input.

Inputs are clamped here (reserves ≥ 1, trade amount ≥ 0) before
anything reaches the engine, which never validates on its own.
"""

from __future__ import annotations

from typing import Iterable

from amm_cli.central_config import PROJECT_NAME, PROJECT_VERSION, config
from amm_cli.classify import FLOW_STEPS, active_flow_step, flow_step_status
from amm_cli.inputs import clamp_amount, clamp_reserve, multiplier_to_slider

_POLICY = config.policy

_IL_ICONS = {"severe": "🔴", "mild": "🟡", "none": "🟢"}
_SLIPPAGE_ICONS = {"high": "⚠️", "moderate": "⚡", "low": "✅"}
_STEP_MARKS = {"done": "✓", "current": "▶", "pending": "·"}


# ── Helpers ──────────────────────────────────────────────────────────────


def _valid_multiplier(price_multiplier: float) -> bool:
    if not price_multiplier > 0:
        print("❌ Price multiplier must be greater than 0.")
        return False
    return True


def _fmt(val: float | None, decimals: int = 2) -> str:
    """Fixed decimals, or '-' for an empty overlay cell."""
    if val is None:
        return "-"
    return f"{val:.{decimals}f}"


def _print_flow(k: float, usdt_in: float, price_multiplier: float) -> None:
    active = active_flow_step(k, usdt_in, price_multiplier)
    print("\n🧭 AMM Full Flow")
    for step_id, title, desc, icon in FLOW_STEPS:
        mark = _STEP_MARKS[flow_step_status(step_id, active)]
        print(f"   {mark} {icon} {step_id}. {title:<22s} {desc}")


# ── Commands ─────────────────────────────────────────────────────────────


def cmd_info() -> None:
    """Display system and architecture information."""
    print(f"\n📊 {PROJECT_NAME} v{PROJECT_VERSION}")
    print("=" * 55)
    print("🔗 Model      : Constant product AMM, x · y = k (no fees)")
    print("🔄 Trade      : USDT → ETH one-sided swap")
    print("📉 IL         : 2·√r / (1 + r) − 1")
    print()
    print("📁 Files:")
    print("   run.py              — CLI entry point")
    print("   amm_math.py         — k, price, position, impermanent loss")
    print("   curve_sampler.py    — y = k/x samples + secant/tangent overlays")
    print("   trade_simulator.py  — swap quote, slippage, k check")
    print("   il_compare.py       — HODL vs LP series")
    print("   price_history.py    — deduplicated multiplier history")
    print("   dashboard.py        — cached recomputation of all of the above")
    print("   amm_cli/            — config, classification, input clamping")
    print()
    print("⚙️  Policy:")
    print(f"   Curve samples       : {_POLICY.CURVE_STEPS}")
    print(f"   IL bands            : severe < {_POLICY.IL_SEVERE_BELOW}, mild < {_POLICY.IL_MILD_BELOW}")
    print(f"   Slippage bands      : high > {_POLICY.SLIPPAGE_HIGH_ABOVE}%, moderate > {_POLICY.SLIPPAGE_MODERATE_ABOVE}%")
    print(f"   History capacity    : {_POLICY.HISTORY_CAPACITY}")
    print(f"   k-match tolerance   : {_POLICY.K_MATCH_TOLERANCE}")
    print()
    print("🔗 Quick Start:")
    print("   python run.py pool    --x0 1000 --y0 1000 --multiplier 4")
    print("   python run.py trade   --usdt-in 100")
    print("   python run.py compare --every 20")
    print("   python run.py history 1.0001 1.0002 1.05")
    print()
    print("📚 References:")
    print("   Uniswap V2 Whitepaper : https://uniswap.org/whitepaper.pdf")
    print("   Impermanent Loss      : https://pintail.medium.com/uniswap-a-good-deal-for-liquidity-providers-104c0b6816f2")


def cmd_pool(x0: float, y0: float, price_multiplier: float) -> bool:
    """Stats bar: price, reserves, pool ratio, impermanent loss."""
    from dashboard import analyze_pool

    if not _valid_multiplier(price_multiplier):
        return False
    x0, y0 = clamp_reserve(x0), clamp_reserve(y0)
    d = analyze_pool(x0, y0, price_multiplier)

    print(f"\n📊 Pool Analysis — {price_multiplier:.3f}x")
    print("=" * 55)
    print(f"  💧 Reserves (t0) : X {x0:,.2f} · Y {y0:,.2f}")
    print(f"  🔒 k             : {d['k']:,.2f}")
    print(f"  🎚️  Slider        : {multiplier_to_slider(price_multiplier):+.3f} (log10)")
    print(f"  📈 Price (Y/X)   : {d['price']:.4f}  (initial {d['initial_price']:.4f})")
    print(f"  ⚖️  Reserve X     : {d['x']:,.4f}")
    print(f"  ⚖️  Reserve Y     : {d['y']:,.4f}")
    print(f"  🥧 Pool Ratio    : {d['ratio_x_pct']:.1f}% / {d['ratio_y_pct']:.1f}%")
    print(
        f"  {_IL_ICONS[d['il_severity']]} Impermanent Loss : "
        f"{d['il_pct']:.3f}% ({d['il_severity']})"
    )
    _print_flow(d["k"], 0.0, price_multiplier)
    return True


def cmd_trade(
    x0: float, y0: float, price_multiplier: float, usdt_in: float
) -> bool:
    """Trade dashboard for a USDT → ETH swap at the projected position."""
    from amm_math import compute_k, get_position
    from trade_simulator import simulate_trade
    from amm_cli.classify import classify_slippage

    if not _valid_multiplier(price_multiplier):
        return False
    x0, y0 = clamp_reserve(x0), clamp_reserve(y0)
    usdt_in = clamp_amount(usdt_in)

    k = compute_k(x0, y0)
    pos = get_position(x0, y0, price_multiplier)
    quote = simulate_trade(pos.x, pos.y, usdt_in, k)

    print("\n🔄 Trade Simulator — USDT → ETH")
    print("=" * 55)
    print(f"  💵 Spend USDT    : {usdt_in:,.2f}")

    if quote is None:
        print(f"  ETH Reserve      : {pos.x:.4f}")
        print(f"  USDT Reserve     : {pos.y:.2f}")
        print(f"  Spot Price       : {pos.price:.4f} USDT / ETH")
        print("\n  💡 No trade — enter a positive USDT amount.")
        _print_flow(k, usdt_in, price_multiplier)
        return True

    band = classify_slippage(quote.price_impact)
    print(
        f"  {_SLIPPAGE_ICONS[band]} Slippage     : +{quote.price_impact:.3f}% ({band})"
        "   (Exec Price − Spot) / Spot"
    )
    print(f"  ETH Reserve (after)   : {quote.after.x:.4f} ETH")
    print(f"  USDT Reserve (after)  : {quote.after.y:.2f} USDT")
    print(f"  ETH Received          : {quote.eth_received:.6f} ETH")
    print(f"  Spot Price (before)   : {quote.spot_before:.4f} USDT / ETH")
    print(f"  Spot Price (after)    : {quote.spot_after:.4f} USDT / ETH")
    print(f"  Execution Price (avg) : {quote.exec_price:.4f} USDT / ETH")
    check = f"✓ k = {k:.2f}" if quote.k_match else f"✗ expected {k:.2f}"
    print(f"  Verify: new x × y     : {quote.new_k:.2f}  {check}")
    _print_flow(k, usdt_in, price_multiplier)
    return True


def cmd_curve(
    x0: float,
    y0: float,
    price_multiplier: float,
    usdt_in: float = 0.0,
    steps: int = _POLICY.CURVE_STEPS,
    every: int = 10,
) -> bool:
    """Print sampled x · y = k curve with secant/tangent overlay columns."""
    from amm_math import compute_k, get_position
    from curve_sampler import annotate_curve, curve_bounds, generate_curve_data
    from trade_simulator import simulate_trade

    if not _valid_multiplier(price_multiplier):
        return False
    if not _POLICY.CURVE_STEPS_MIN <= steps <= _POLICY.CURVE_STEPS_MAX:
        print(
            f"❌ --steps must be between {_POLICY.CURVE_STEPS_MIN} "
            f"and {_POLICY.CURVE_STEPS_MAX}."
        )
        return False
    x0, y0 = clamp_reserve(x0), clamp_reserve(y0)
    usdt_in = clamp_amount(usdt_in)
    every = max(1, every)

    k = compute_k(x0, y0)
    pos = get_position(x0, y0, price_multiplier)
    quote = simulate_trade(pos.x, pos.y, usdt_in, k)
    curve = annotate_curve(
        generate_curve_data(k, *curve_bounds(x0), steps), pos, quote
    )

    print(f"\n📈 x · y = k Curve — k = {k:,.2f} ({len(curve)} samples)")
    print(f"  Before (P₀)  : ({pos.x:.1f}, {pos.y:.1f})  P₀ = {pos.price:.4f}")
    if quote:
        print(f"  After  (P₁)  : ({quote.after.x:.1f}, {quote.after.y:.1f})  P₁ = {quote.spot_after:.4f}")
        print(f"  P_avg        : Δy/Δx = {quote.exec_price:.4f}")
    print()

    hdr = f"  {'ETH (x)':>10s} {'USDT (y)':>12s} {'Secant':>10s} {'Tan P₀':>10s} {'Tan P₁':>10s}"
    print(hdr)
    print(f"  {'-' * (len(hdr) - 2)}")
    for i, pt in enumerate(curve):
        if i % every and i != len(curve) - 1:
            continue
        print(
            f"  {pt.x:>10.2f} {pt.y:>12.2f} {_fmt(pt.secant):>10s} "
            f"{_fmt(pt.tangent0):>10s} {_fmt(pt.tangent1):>10s}"
        )
    return True


def cmd_compare(x0: float, y0: float, every: int = 20) -> bool:
    """HODL vs LP value table over the fixed price multiplier grid."""
    from il_compare import generate_compare_data

    x0, y0 = clamp_reserve(x0), clamp_reserve(y0)
    every = max(1, every)
    data = generate_compare_data(x0, y0)

    print(f"\n⚖️  HODL vs LP — reserves X {x0:,.2f} · Y {y0:,.2f}")
    print("  Value as % of initial deposit")
    print("=" * 55)
    hdr = f"  {'r':>6s} {'HODL %':>10s} {'LP %':>10s} {'IL (pp)':>10s}"
    print(hdr)
    print(f"  {'-' * (len(hdr) - 2)}")
    for i, pt in enumerate(data):
        if i % every and i != len(data) - 1:
            continue
        print(f"  {pt.r:>5.2f}x {pt.hodl:>10.2f} {pt.lp:>10.2f} {pt.diff:>10.2f}")
    return True


def cmd_history(x0: float, y0: float, multipliers: Iterable[float]) -> bool:
    """Replay a stream of multiplier samples through the price history."""
    from price_history import PriceHistory

    samples = list(multipliers)
    if not samples:
        print("❌ Provide at least one price multiplier sample.")
        return False
    if any(not m > 0 for m in samples):
        print("❌ Price multipliers must be greater than 0.")
        return False
    x0, y0 = clamp_reserve(x0), clamp_reserve(y0)

    history = PriceHistory()
    created = history.record_many(samples, x0, y0)
    records = history.records

    print(f"\n🕘 Price History — {len(created)} recorded / {len(samples)} samples")
    print("=" * 70)
    hdr = f"  {'#':>3s} {'Multiplier':>11s} {'Price (Y/X)':>12s} {'Reserve X':>12s} {'Reserve Y':>12s} {'IL %':>9s}"
    print(hdr)
    print(f"  {'-' * (len(hdr) - 2)}")
    for i, r in enumerate(records):
        print(
            f"  {len(records) - i:>3d} {r.multiplier:>10.3f}x {r.price:>12.4f} "
            f"{r.x:>12.2f} {r.y:>12.2f} {r.il * 100:>8.3f}% {_IL_ICONS[r.classification]}"
        )
    if len(created) > len(records):
        print(f"\n  💡 {len(created) - len(records)} oldest rows evicted (capacity {history.capacity}).")
    return True
