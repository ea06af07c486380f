"""
Test Suite — Constant Product Formula Validation
=================================================

Tests every engine formula against known inputs:
  - amm_math.py         (k, price, position projection, IL)
  - curve_sampler.py    (curve samples, secant/tangent overlays)
  - trade_simulator.py  (swap quote, slippage, k check)
  - il_compare.py       (HODL vs LP series)
  - price_history.py    (rounding dedup, capacity)

Formula Sources:
  - Uniswap V2 Whitepaper §2.1 — x · y = k
  - Pintail (2019) — Impermanent Loss

Run:  python -m pytest tests/test_math.py -v
"""

import math
import pytest

from amm_math import Pool, Position, compute_il, compute_k, compute_price, get_position
from curve_sampler import CurvePoint, annotate_curve, curve_bounds, generate_curve_data
from il_compare import compare_grid, generate_compare_data
from price_history import PriceHistory
from trade_simulator import simulate_trade


# ── Helpers ──────────────────────────────────────────────────────────────

def expected_il(r: float) -> float:
    """Reference impermanent loss: IL = 2√r/(1+r) - 1 (Pintail formula)."""
    return 2 * math.sqrt(r) / (1 + r) - 1


# ── Pool Invariant (Whitepaper §2.1) ─────────────────────────────────────

class TestPoolModel:
    @pytest.mark.parametrize("x0,y0", [(1, 1), (1000, 1000), (5, 10000), (123.4, 0.5)])
    def test_k_is_product(self, x0, y0):
        assert compute_k(x0, y0) == x0 * y0

    def test_known_k(self):
        assert compute_k(1000, 1000) == 1_000_000

    def test_price_is_y_over_x(self):
        assert compute_price(500, 2000) == 4.0
        assert compute_price(5, 10000) == 2000.0

    def test_price_zero_x_is_inf_not_error(self):
        assert math.isinf(compute_price(0, 1000))
        assert math.isnan(compute_price(0, 0))

    def test_pool_dataclass(self):
        pool = Pool(x0=1000, y0=4000)
        assert pool.k == 4_000_000
        assert pool.initial_price == 4.0


# ── Position Projection ─────────────────────────────────────────────────

class TestPosition:
    """x = x0/√r, y = y0·√r"""

    def test_known_position(self):
        pos = get_position(1000, 1000, 4)
        assert pos == Position(x=500.0, y=2000.0)
        assert pos.price == 4.0

    def test_multiplier_one_is_initial(self):
        pos = get_position(1000, 3000, 1)
        assert pos.x == pytest.approx(1000)
        assert pos.y == pytest.approx(3000)

    @pytest.mark.parametrize("r", [0.1, 0.5, 0.999, 1.0, 1.5, 2.0, 7.3, 10.0])
    @pytest.mark.parametrize("x0,y0", [(1000, 1000), (5, 10000), (1, 1)])
    def test_invariant_preserved(self, x0, y0, r):
        pos = get_position(x0, y0, r)
        assert abs(pos.x * pos.y - x0 * y0) < 1e-6 * x0 * y0

    @pytest.mark.parametrize("r", [0.25, 1.0, 3.0, 9.0])
    def test_price_scales_with_multiplier(self, r):
        pos = get_position(5, 10000, r)
        assert pos.price == pytest.approx(2000 * r)

    def test_position_is_immutable(self):
        pos = get_position(1000, 1000, 2)
        with pytest.raises(Exception):
            pos.x = 1.0

    def test_zero_multiplier_is_limit_not_error(self):
        pos = get_position(1000, 1000, 0)
        assert pos.x == math.inf
        assert pos.y == 0.0
        assert pos.price == 0.0

    def test_negative_multiplier_is_nan(self):
        pos = get_position(1000, 1000, -4)
        assert math.isnan(pos.x)
        assert math.isnan(pos.y)


# ── Impermanent Loss (Pintail 2019) ─────────────────────────────────────

class TestImpermanentLoss:
    """IL = 2√r / (1+r) - 1"""

    @pytest.mark.parametrize("ratio,expected", [
        (1.0, 0.0),
        (1.5, -0.020204),
        (2.0, -0.057191),
        (0.5, -0.057191),
        (4.0, -0.2),
        (0.25, -0.2),
    ])
    def test_known_il_values(self, ratio, expected):
        assert compute_il(ratio) == pytest.approx(expected, abs=1e-5)

    def test_no_move_no_loss(self):
        assert compute_il(1) == 0

    @pytest.mark.parametrize("ratio", [0.01, 0.1, 0.9, 0.999, 1.001, 1.1, 5.0, 100.0])
    def test_strictly_negative_away_from_one(self, ratio):
        assert compute_il(ratio) < 0

    def test_matches_reference(self):
        for r in (0.2, 0.7, 1.3, 3.3, 8.0):
            assert compute_il(r) == pytest.approx(expected_il(r))

    def test_il_increases_with_divergence(self):
        assert abs(compute_il(2)) < abs(compute_il(3)) < abs(compute_il(5))

    def test_negative_ratio_is_nan(self):
        assert math.isnan(compute_il(-1))


# ── Curve Sampling ──────────────────────────────────────────────────────

class TestCurveSampler:
    def test_sample_count_inclusive(self):
        data = generate_curve_data(1_000_000, 100, 3500, 300)
        assert len(data) == 301
        assert data[0].x == 100.0
        assert data[-1].x == 3500.0

    def test_default_steps(self):
        assert len(generate_curve_data(1_000_000, 100, 3500)) == 301

    def test_skips_non_positive_x(self):
        data = generate_curve_data(100, -50, 50, 100)
        assert len(data) == 50
        assert all(pt.x > 0 for pt in data)
        assert data[0].x == 1.0

    def test_skips_x_that_rounds_to_zero(self):
        data = generate_curve_data(1.0, 0.001, 1.0, 1)
        assert len(data) == 1
        assert data[0].x == 1.0
        assert all(pt.x > 0 for pt in generate_curve_data(1.0, 0.004, 3.0, 300))

    def test_y_is_k_over_x(self):
        k = 1_000_000
        for pt in generate_curve_data(k, 100, 400, 300):
            assert pt.y == pytest.approx(k / pt.x, abs=0.005)

    def test_values_rounded_to_cents(self):
        for pt in generate_curve_data(777_777, 33.3, 1111.1, 250):
            assert round(pt.x, 2) == pt.x
            assert round(pt.y, 2) == pt.y

    def test_restartable(self):
        a = generate_curve_data(1_000_000, 100, 3500, 200)
        b = generate_curve_data(1_000_000, 100, 3500, 200)
        assert a == b

    def test_y_decreasing(self):
        data = generate_curve_data(1_000_000, 100, 3500, 300)
        assert all(data[i].y >= data[i + 1].y for i in range(len(data) - 1))

    def test_bounds(self):
        assert curve_bounds(1000) == pytest.approx((100.0, 3500.0))

    def test_no_overlays_by_default(self):
        pt = generate_curve_data(1_000_000, 100, 200, 10)[0]
        assert pt.secant is None and pt.tangent0 is None and pt.tangent1 is None


class TestCurveOverlays:
    @pytest.fixture
    def curve(self):
        # Integer x grid: 100, 101, …, 3500
        return generate_curve_data(1_000_000, 100, 3500, 3400)

    @pytest.fixture
    def quote(self):
        return simulate_trade(1000, 1000, 100, 1_000_000)

    def _at(self, data, x):
        return next(pt for pt in data if pt.x == x)

    def test_tangent0_window_and_value(self, curve):
        data = annotate_curve(curve, Position(1000, 1000))
        # slope −1 → y = 2000 − x inside [400, 1600]
        assert self._at(data, 1500).tangent0 == 500.0
        assert self._at(data, 401).tangent0 == 1599.0
        assert self._at(data, 1599).tangent0 == 401.0
        assert self._at(data, 399).tangent0 is None
        assert self._at(data, 1601).tangent0 is None

    def test_no_trade_no_secant(self, curve):
        data = annotate_curve(curve, Position(1000, 1000))
        assert all(pt.secant is None and pt.tangent1 is None for pt in data)

    def test_secant_only_within_trade_span(self, curve, quote):
        data = annotate_curve(curve, quote.before, quote)
        assert self._at(data, 950).secant is not None
        assert self._at(data, 1000).secant == 1000.0
        assert self._at(data, 909).secant is None
        assert self._at(data, 1001).secant is None

    def test_secant_interpolates(self, curve, quote):
        data = annotate_curve(curve, quote.before, quote)
        after, before = quote.after, quote.before
        t = (950 - after.x) / (before.x - after.x)
        expected = after.y + t * (before.y - after.y)
        assert self._at(data, 950).secant == pytest.approx(expected, abs=0.005)

    def test_secant_above_curve(self, curve, quote):
        """Chord of a convex curve lies above it — the slippage area."""
        data = annotate_curve(curve, quote.before, quote)
        for pt in data:
            if pt.secant is not None:
                assert pt.secant >= pt.y - 0.01

    def test_tangent1_at_after_position(self, curve, quote):
        data = annotate_curve(curve, quote.before, quote)
        after = quote.after
        assert self._at(data, 910).tangent1 == pytest.approx(
            after.y - (after.y / after.x) * (910 - after.x), abs=0.005
        )
        lo = after.x * 0.4
        assert all(pt.tangent1 is None for pt in data if pt.x < lo)

    def test_overlays_only_positive(self, curve, quote):
        data = annotate_curve(curve, quote.before, quote)
        for pt in data:
            for val in (pt.secant, pt.tangent0, pt.tangent1):
                assert val is None or val > 0

    def test_base_curve_untouched(self, curve, quote):
        before = list(curve)
        annotate_curve(curve, quote.before, quote)
        assert curve == before
        assert all(isinstance(pt, CurvePoint) for pt in curve)


# ── Trade Simulation ────────────────────────────────────────────────────

class TestTradeSimulator:
    def test_known_trade(self):
        q = simulate_trade(1000, 1000, 100, 1_000_000)
        assert q.after.y == 1100
        assert q.after.x == pytest.approx(909.0909, abs=1e-4)
        assert q.eth_received == pytest.approx(90.9091, abs=1e-4)
        assert q.spot_before == 1.0
        assert q.exec_price == pytest.approx(1.1, abs=1e-4)
        assert q.price_impact == pytest.approx(10.0, abs=1e-4)
        assert q.spot_after == pytest.approx(1.21, abs=1e-4)

    def test_zero_input_no_quote(self):
        assert simulate_trade(1000, 1000, 0, 1_000_000) is None

    def test_negative_input_no_quote(self):
        assert simulate_trade(1000, 1000, -50, 1_000_000) is None

    @pytest.mark.parametrize("usdt_in", [0.01, 1, 100, 5000, 1e6])
    def test_k_preserved(self, usdt_in):
        q = simulate_trade(1000, 1000, usdt_in, 1_000_000)
        assert q.eth_received > 0
        assert abs(q.after.x * q.after.y - 1_000_000) < 0.01
        assert q.k_match is True

    def test_k_match_checked_against_given_k(self):
        q = simulate_trade(1000, 1000, 100, 999_000)
        assert q.new_k == pytest.approx(999_000)
        assert q.k_match is True

    def test_k_drift_flagged_not_raised(self):
        # At 1e30 one ulp is far above the 0.01 tolerance
        k = 1e30
        q = simulate_trade(1e15, 1e15, 1e14, k)
        assert q is not None
        assert q.k_match == (abs(q.new_k - k) < 0.01)

    def test_drained_pool_no_quote(self):
        # k too large for the reserves: eth' ≥ eth
        assert simulate_trade(1000, 1000, 100, 2_000_000) is None

    def test_impact_grows_with_size(self):
        impacts = [simulate_trade(1000, 1000, a, 1_000_000).price_impact for a in (10, 100, 500)]
        assert impacts[0] < impacts[1] < impacts[2]

    def test_exec_between_spot_before_and_after(self):
        q = simulate_trade(500, 2000, 250, 1_000_000)
        assert q.spot_before < q.exec_price < q.spot_after

    def test_before_position_recorded(self):
        q = simulate_trade(500, 2000, 250, 1_000_000)
        assert q.before == Position(500, 2000)


# ── HODL vs LP ──────────────────────────────────────────────────────────

class TestCompareSeries:
    def test_grid(self):
        grid = compare_grid()
        assert len(grid) == 201
        assert grid[0] == pytest.approx(0.1)
        assert grid[-1] == pytest.approx(10.0)

    def test_series_length_and_ends(self):
        data = generate_compare_data(1000, 1000)
        assert len(data) == 201
        assert data[0].r == 0.1
        assert data[-1].r == 10.0

    def test_known_first_point(self):
        pt = generate_compare_data(1000, 1000)[0]
        assert pt.hodl == 55.0
        assert pt.lp == pytest.approx(31.62, abs=0.01)
        assert pt.diff == pytest.approx(-23.38, abs=0.01)

    def test_lp_never_beats_hodl(self):
        assert all(pt.diff <= 0 for pt in generate_compare_data(1000, 1000))

    def test_diff_is_il_of_hodl(self):
        data = generate_compare_data(1000, 1000)
        for r, pt in zip(compare_grid(), data):
            assert pt.diff == pytest.approx(pt.hodl * compute_il(r), abs=0.02)

    def test_normalised_series_independent_of_pool_size(self):
        small = generate_compare_data(1000, 1000)
        large = generate_compare_data(5, 10000)
        for a, b in zip(small, large):
            assert a.r == b.r
            assert a.hodl == pytest.approx(b.hodl, abs=0.011)
            assert a.lp == pytest.approx(b.lp, abs=0.011)


# ── Price History ───────────────────────────────────────────────────────

class TestPriceHistory:
    def test_dedup_sub_precision_jitter(self):
        h = PriceHistory()
        h.record_many([1.0001, 1.0002, 1.05], 1000, 1000)
        assert len(h) == 2
        assert [r.multiplier for r in h.records] == [1.05, 1.0]

    def test_compares_to_last_recorded_only(self):
        h = PriceHistory()
        h.record_many([1.0, 1.1, 1.0], 1000, 1000)
        assert [r.multiplier for r in h.records] == [1.0, 1.1, 1.0]

    def test_suppressed_sample_returns_none(self):
        h = PriceHistory()
        assert h.record(2.0, 1000, 1000) is not None
        assert h.record(2.0004, 1000, 1000) is None

    def test_capacity_evicts_oldest(self):
        h = PriceHistory()
        h.record_many([1 + i * 0.01 for i in range(1, 61)], 1000, 1000)
        recs = h.records
        assert len(recs) == 50
        assert recs[0].id == 60
        assert recs[-1].id == 11
        assert [r.id for r in recs] == list(range(60, 10, -1))

    def test_record_fields(self):
        h = PriceHistory()
        rec = h.record(4.0, 1000, 1000)
        assert rec.id == 1
        assert rec.x == pytest.approx(500)
        assert rec.y == pytest.approx(2000)
        assert rec.price == pytest.approx(4.0)
        assert rec.il == pytest.approx(-0.2)
        assert rec.classification == "severe"

    @pytest.mark.parametrize("r,band", [(1.0, "none"), (1.05, "mild"), (2.0, "severe"), (0.5, "severe")])
    def test_classification(self, r, band):
        assert PriceHistory().record(r, 1000, 1000).classification == band

    def test_clear_keeps_ids_monotonic(self):
        h = PriceHistory()
        h.record_many([1.5, 2.0], 1000, 1000)
        h.clear()
        assert len(h) == 0
        assert h.last_rounded is None
        rec = h.record(2.0, 1000, 1000)
        assert rec is not None
        assert rec.id == 3

    def test_multiplier_rounding_to_zero_is_recorded(self):
        h = PriceHistory()
        rec = h.record(0.0004, 1000, 1000)
        assert rec.multiplier == 0.0
        assert rec.x == math.inf
        assert rec.y == 0.0
        assert rec.il == -1.0
        assert rec.classification == "severe"
        assert h.record(0.0001, 1000, 1000) is None

    def test_records_snapshot_is_immutable(self):
        h = PriceHistory()
        h.record(1.5, 1000, 1000)
        assert isinstance(h.records, tuple)
