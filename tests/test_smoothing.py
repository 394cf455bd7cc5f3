"""
Tests for Holt-Winters and simple exponential smoothing.
"""
import numpy as np
import pytest

from forecast_engine.smoothing import HOLT_WINTERS, SIMPLE, ExponentialSmoother


class TestRegimeSelection:

    def test_needs_two_seasons(self):
        smoother = ExponentialSmoother()
        assert smoother.uses_triple(23) is False
        assert smoother.uses_triple(24) is True
        assert smoother.uses_triple(14, season_length=7) is True

    def test_default_constants(self):
        smoother = ExponentialSmoother()
        assert (smoother.alpha, smoother.beta, smoother.gamma) == (0.3, 0.1, 0.1)


class TestSimpleSmoothing:

    def test_flat_forecast_at_final_level(self):
        """level: 10 -> 13 -> 18.1, repeated for every period."""
        forecast = ExponentialSmoother().forecast(np.array([10.0, 20.0, 30.0]), 4)
        assert forecast == pytest.approx([18.1] * 4)

    def test_alpha_override(self):
        fit = ExponentialSmoother(alpha=0.5).fit(np.array([10.0, 20.0, 30.0]))
        assert fit.method == SIMPLE
        assert fit.level[-1] == pytest.approx(22.5)


class TestHoltWinters:

    @pytest.fixture
    def values(self):
        return np.array([10.0, 20.0, 30.0, 40.0, 12.0, 22.0, 32.0, 42.0])

    def test_initialization(self, values):
        fit = ExponentialSmoother().fit(values, season_length=4)
        assert fit.method == HOLT_WINTERS
        assert fit.level[0] == 10.0
        assert fit.trend[0] == pytest.approx(0.5)

    def test_first_steps(self, values):
        """level[1] = 0.3 * 20 / 0.8 + 0.7 * (10 + 0.5)."""
        fit = ExponentialSmoother().fit(values, season_length=4)
        assert fit.level[1] == pytest.approx(14.85)
        assert fit.trend[1] == pytest.approx(0.935)
        assert fit.seasonal[1] == pytest.approx(0.1 * 20.0 / 14.85 + 0.9 * 0.8)

    def test_seasonal_written_by_absolute_index(self, values):
        """Phase slot 0 keeps its initial index; position 4 gets the update."""
        fit = ExponentialSmoother().fit(values, season_length=4)
        assert fit.seasonal[0] == pytest.approx(0.4)
        assert fit.seasonal[4] == pytest.approx(0.1 * 12.0 / fit.level[4] + 0.9 * 0.4)

    def test_forecast_reads_phase_slots(self, values):
        smoother = ExponentialSmoother()
        fit = smoother.fit(values, season_length=4)
        forecast = smoother.predict(fit, 2)
        assert forecast[0] == pytest.approx((fit.level[-1] + fit.trend[-1]) * fit.seasonal[0])
        assert forecast[1] == pytest.approx((fit.level[-1] + 2 * fit.trend[-1]) * fit.seasonal[1])

    def test_flat_series(self):
        forecast = ExponentialSmoother().forecast(np.full(30, 100.0), 6)
        assert forecast == pytest.approx([100.0] * 6)

    def test_zero_series_stays_finite(self):
        """Zero first-season mean and zero levels never produce NaN."""
        forecast = ExponentialSmoother().forecast(np.zeros(24), 6)
        assert np.all(np.isfinite(forecast))
        assert np.all(forecast == 0)

    def test_forecast_never_negative(self):
        values = np.concatenate([np.linspace(100, 50, 12), np.linspace(40, 0, 12)])
        forecast = ExponentialSmoother().forecast(values, 12)
        assert np.all(forecast >= 0)
