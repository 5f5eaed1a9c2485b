"""Tests for interpolation and reciprocal-bearing helpers."""

import pytest

from driftcast.services.drift.interpolation import linear_interpolate, reciprocal_bearing


class TestLinearInterpolate:
    def test_midpoint(self):
        assert linear_interpolate(5, 0, 10, 0, 100) == pytest.approx(50)

    def test_bounds(self):
        assert linear_interpolate(0, 0, 10, 20, 40) == pytest.approx(20)
        assert linear_interpolate(10, 0, 10, 20, 40) == pytest.approx(40)

    def test_decreasing_target(self):
        assert linear_interpolate(7.5, 5, 10, 950, 900) == pytest.approx(925)

    def test_zero_span_returns_lower_target(self):
        assert linear_interpolate(3, 5, 5, 12, 99) == 12


class TestReciprocalBearing:
    def test_reciprocal(self):
        assert reciprocal_bearing(270) == 90
        assert reciprocal_bearing(90) == 270
        assert reciprocal_bearing(180) == 0
