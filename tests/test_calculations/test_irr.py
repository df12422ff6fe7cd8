"""Tests for the IRR solver."""

import numpy as np
import numpy_financial as npf
import pytest

from syndication.calculations.irr import (
    SolverConfig,
    calculate_irr,
    find_irr_roots,
    irr_or_none,
    npv,
)
from syndication.errors import UndefinedMetricError


class TestNPV:
    """Tests for net present value."""

    def test_zero_at_irr(self):
        assert abs(npv(0.10, [-100, 110])) < 1e-9

    def test_dated_flows(self):
        """(year, amount) pairs discount by the given year."""
        assert abs(npv(0.10, [(0, -100), (2, 121)])) < 1e-9


class TestCalculateIRR:
    """Tests for calculate_irr."""

    def test_two_flow_doubling(self):
        """Invest 100, receive 200 in year 5: IRR = 2^(1/5) - 1 = 14.87%."""
        irr = calculate_irr([-100, 0, 0, 0, 0, 200])
        assert abs(irr - (2 ** 0.2 - 1)) < 1e-6
        assert abs(irr - 0.148698) < 1e-5

    def test_dated_pairs(self):
        irr = calculate_irr([(0, -100), (5, 200)])
        assert abs(irr - 0.148698) < 1e-5

    @pytest.mark.parametrize("flows", [
        [-1_000_000, 50_000, 60_000, 70_000, 80_000, 1_400_000],
        [-500, 100, 100, 100, 100, 100],
        [-250_000, 0, 0, 400_000],
        [-100, 40, 40, 40],
    ])
    def test_matches_numpy_financial(self, flows):
        """Conventional streams agree with numpy_financial.irr."""
        assert abs(calculate_irr(flows) - npf.irr(flows)) < 1e-6

    def test_negative_irr(self):
        """A loss still has an IRR."""
        assert abs(calculate_irr([-100, 50]) - (-0.5)) < 1e-6

    def test_multiple_roots_picks_smallest_positive(self):
        """-100, +230, -132 has roots at 10% and 20%."""
        roots = find_irr_roots([-100, 230, -132])
        assert len(roots) == 2
        assert abs(calculate_irr([-100, 230, -132]) - 0.10) < 1e-6

    def test_all_positive_is_undefined(self):
        with pytest.raises(UndefinedMetricError):
            calculate_irr([100, 50, 50])

    def test_all_negative_is_undefined(self):
        with pytest.raises(UndefinedMetricError):
            calculate_irr([-100, -50])

    def test_no_root_within_bounds(self):
        """A root above the upper bound is reported as undefined."""
        with pytest.raises(UndefinedMetricError):
            calculate_irr([-1, 100], SolverConfig(upper_bound=5.0))

    def test_random_streams_match_numpy_financial(self):
        """Random conventional streams agree with numpy_financial.irr."""
        rng = np.random.default_rng(42)
        for _ in range(25):
            years = int(rng.integers(2, 12))
            flows = [-float(rng.uniform(100_000, 1_000_000))]
            flows += list(rng.uniform(0, 300_000, size=years))
            assert abs(calculate_irr(flows) - npf.irr(flows)) < 1e-5


class TestIrrOrNone:
    """Undefined IRR is None, never 0."""

    def test_none_for_same_sign(self):
        assert irr_or_none([100, 100]) is None

    def test_value_when_defined(self):
        assert abs(irr_or_none([-100, 110]) - 0.10) < 1e-6


class TestSolverTolerance:
    """Each bracket is solved to the configured rate tolerance."""

    def test_default_tolerance_is_tight(self):
        irr = calculate_irr([-1_000_000, 0, 0, 0, 0, 2_000_000])
        assert abs(irr - (2 ** 0.2 - 1)) < 1e-9

    def test_loose_tolerance_still_within_bound(self):
        config = SolverConfig(tolerance=1e-4)
        irr = calculate_irr([-100, 0, 0, 0, 0, 200], config)
        assert abs(irr - (2 ** 0.2 - 1)) < 1e-4
