"""
Unit Tests - Confidence Intervals
"""
import math

import pytest
import polars as pl

from fashion_analytics.analytics.intervals import (
    critical_value,
    discount_confidence_intervals,
    group_confidence_intervals,
    intervals_overlap,
    intervals_to_frame,
    normal_interval,
)
from fashion_analytics.exceptions import InsufficientDataError

Z_975 = 1.959964


def _group_with_moments(label: str, n: int, mean: float, sd: float) -> pl.DataFrame:
    """n values alternating around mean with sample standard deviation sd"""
    offset = sd * math.sqrt((n - 1) / n)
    values = [mean + offset if i % 2 == 0 else mean - offset for i in range(n)]
    return pl.DataFrame({"discount_applied": [label] * n, "line_total": values})


class TestNormalInterval:
    """Tests for interval construction"""

    def test_critical_value(self):
        """Test the 97.5th standard normal percentile"""
        assert critical_value(0.95) == pytest.approx(Z_975, abs=1e-6)

    def test_midpoint_and_width(self):
        """Test interval is centred on the mean with the normal half width"""
        interval = normal_interval("Yes", n=64, mean=12.5, sd=4.0)

        assert interval.midpoint == pytest.approx(interval.mean)
        assert interval.width == pytest.approx(2 * Z_975 * 4.0 / 8, rel=1e-6)

    @pytest.mark.parametrize("n, sd", [(1, 3.0), (0, 1.0), (10, None), (10, float("nan"))])
    def test_insufficient_data(self, n, sd):
        """Test groups too small or without spread"""
        with pytest.raises(InsufficientDataError):
            normal_interval("No", n=n, mean=1.0, sd=sd)

    def test_invalid_confidence(self):
        """Test confidence level outside (0, 1)"""
        with pytest.raises(ValueError):
            critical_value(1.5)


class TestDiscountIntervals:
    """Tests for intervals by discount status"""

    def test_discount_scenario(self):
        """Test discounted and full-price groups with known moments"""
        df = pl.concat([
            _group_with_moments("Yes", 100, 50.0, 20.0),
            _group_with_moments("No", 100, 114.0, 90.0),
        ])

        intervals = {i.group_key: i for i in discount_confidence_intervals(df)}

        assert intervals["Yes"].n == 100
        assert intervals["Yes"].sd == pytest.approx(20.0)
        assert intervals["Yes"].lower_bound == pytest.approx(46.08, abs=0.01)
        assert intervals["Yes"].upper_bound == pytest.approx(53.92, abs=0.01)
        assert intervals["No"].lower_bound == pytest.approx(96.36, abs=0.01)
        assert intervals["No"].upper_bound == pytest.approx(131.64, abs=0.01)
        assert not intervals_overlap(intervals["Yes"], intervals["No"])

    def test_groups_sorted_and_nulls_excluded(self):
        """Test ascending group order and null exclusion from n"""
        df = pl.DataFrame({
            "discount_applied": ["Yes", "No", "Yes", "No", "Yes"],
            "line_total": [10.0, 20.0, 14.0, 24.0, None],
        })

        intervals = discount_confidence_intervals(df)

        assert [i.group_key for i in intervals] == ["No", "Yes"]
        assert intervals[1].n == 2
        assert intervals[1].mean == pytest.approx(12.0)

    def test_single_observation_group(self):
        """Test a group with one row fails the estimate"""
        df = pl.DataFrame({
            "discount_applied": ["Yes", "No", "No"],
            "line_total": [10.0, 20.0, 22.0],
        })

        with pytest.raises(InsufficientDataError):
            discount_confidence_intervals(df)

    def test_overlapping_intervals(self):
        """Test overlap detection"""
        a = normal_interval("a", n=10, mean=10.0, sd=5.0)
        b = normal_interval("b", n=10, mean=12.0, sd=5.0)

        assert intervals_overlap(a, b)

    def test_to_frame(self):
        """Test tabulated interval output"""
        df = pl.DataFrame({"segment": ["x", "x", "y", "y"], "line_total": [1.0, 3.0, 2.0, 6.0]})
        intervals = group_confidence_intervals(df, "segment", confidence=0.9)

        table = intervals_to_frame(intervals)

        assert table.columns[:6] == ["group_key", "n", "mean", "sd", "lower_bound", "upper_bound"]
        assert table["confidence"].to_list() == [0.9, 0.9]
        assert table["standard_error"].to_list() == pytest.approx([i.standard_error for i in intervals])
