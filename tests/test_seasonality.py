"""
Tests for autocorrelation-based seasonality detection.
"""
import numpy as np

from forecast_engine.seasonality import SeasonalityDetector, detect_seasonality


class TestSeasonalityDetector:

    def test_short_series_not_scanned(self):
        """Fewer than 24 points is never seasonal."""
        result = detect_seasonality(np.arange(23, dtype=float))
        assert result.detected is False
        assert result.period is None
        assert result.strength is None

    def test_constant_series(self):
        """Zero variance short-circuits without dividing by zero."""
        result = detect_seasonality(np.full(30, 100.0))
        assert result.detected is False
        assert result.period is None

    def test_non_integer_constant_series(self):
        """A flat level of 33.3 is constant even though np.var leaves rounding residue."""
        result = detect_seasonality(np.full(30, 33.3))
        assert result.detected is False
        assert result.period is None
        assert result.strength == 0.0

    def test_sine_wave_recovers_period(self, seasonal_values):
        """A 12-period cycle over 36 points is detected within one lag."""
        result = detect_seasonality(np.array(seasonal_values))
        assert result.detected is True
        assert abs(result.period - 12) <= 1
        assert 0.3 < result.strength <= 1.0

    def test_strength_reported_below_threshold(self, seasonal_values):
        """A cycle that misses the threshold still reports its strength."""
        result = SeasonalityDetector(threshold=1.5).detect(np.array(seasonal_values))
        assert result.detected is False
        assert result.period is None
        assert 0.3 < result.strength <= 1.0

    def test_autocorrelation_formula(self):
        values = np.array([1.0, 3.0, 1.0, 3.0])
        mean, variance = values.mean(), values.var()
        # centered = [-1, 1, -1, 1]; lag 2 overlap gives (1 + 1) / (2 * 1)
        assert SeasonalityDetector.autocorrelation(values, 2, mean, variance) == 1.0

    def test_first_maximum_wins(self):
        """A cycle of 7 also correlates at 14; the earlier lag is reported."""
        pattern = [0.0, 0.0, 0.0, 7.0, 0.0, 0.0, 0.0]
        values = np.array(pattern * 6)
        result = detect_seasonality(values)
        assert result.detected is True
        assert result.period == 7
