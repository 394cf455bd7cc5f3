"""
Tests for the least-squares trend regressor.
"""
import numpy as np
import pytest

from forecast_engine.regression import TrendRegressor
from forecast_engine.results import TrendDirection


class TestTrendRegressor:

    def test_known_linear_series(self, linear_values):
        """q[i] = 10 + 2i is recovered exactly."""
        regressor = TrendRegressor()
        fit = regressor.fit(np.array(linear_values))
        trend = regressor.assess(fit)

        assert fit.slope == pytest.approx(2.0)
        assert fit.intercept == pytest.approx(10.0)
        assert trend.confidence_percent == pytest.approx(100.0)
        assert trend.direction == TrendDirection.UP

    def test_forecast_extends_line(self, linear_values):
        forecast = TrendRegressor().forecast(np.array(linear_values), 3)
        assert forecast == pytest.approx([50.0, 52.0, 54.0])

    def test_constant_series_is_stable(self):
        regressor = TrendRegressor()
        trend = regressor.assess(regressor.fit(np.full(10, 100.0)))
        assert trend.direction == TrendDirection.STABLE
        assert trend.slope == pytest.approx(0.0)
        assert trend.confidence_percent == 0.0

    def test_non_integer_constant_series(self):
        regressor = TrendRegressor()
        fit = regressor.fit(np.full(30, 33.3))
        assert fit.slope == 0.0
        assert fit.ss_tot == 0.0
        trend = regressor.assess(fit)
        assert trend.direction == TrendDirection.STABLE
        assert trend.confidence_percent == 0.0

    def test_downward_series(self):
        regressor = TrendRegressor()
        trend = regressor.assess(regressor.fit(np.array([100.0, 90.0, 80.0, 70.0])))
        assert trend.direction == TrendDirection.DOWN
        assert trend.slope == pytest.approx(-10.0)

    def test_small_slope_is_stable(self):
        """|slope| under 1% of the mean counts as stable."""
        values = np.array([100.0, 100.5, 100.0, 100.5, 100.4])
        regressor = TrendRegressor()
        trend = regressor.assess(regressor.fit(values))
        assert trend.direction == TrendDirection.STABLE

    def test_forecast_floored_at_zero(self):
        forecast = TrendRegressor().forecast(np.array([30.0, 20.0, 10.0]), 3)
        assert forecast == pytest.approx([0.0, 0.0, 0.0])
