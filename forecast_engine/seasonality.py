"""
Seasonality detection module
Scans a demand series for a dominant periodic cycle using autocorrelation
"""

import logging
from typing import Optional

import numpy as np

from forecast_engine.config import (
    SEASONALITY_MIN_OBSERVATIONS, SEASONALITY_MIN_LAG,
    SEASONALITY_MAX_LAG, SEASONALITY_THRESHOLD
)
from forecast_engine.results import Seasonality

logger = logging.getLogger(__name__)


class SeasonalityDetector:
    """
    Finds the lag with the highest autocorrelation and reports it as the
    seasonal period when it clears the threshold
    """

    def __init__(
        self,
        min_observations: Optional[int] = None,
        min_lag: Optional[int] = None,
        max_lag: Optional[int] = None,
        threshold: Optional[float] = None
    ):
        self.min_observations = min_observations or SEASONALITY_MIN_OBSERVATIONS
        self.min_lag = min_lag or SEASONALITY_MIN_LAG
        self.max_lag = max_lag or SEASONALITY_MAX_LAG
        self.threshold = SEASONALITY_THRESHOLD if threshold is None else threshold

    @staticmethod
    def autocorrelation(values: np.ndarray, lag: int, mean: float, variance: float) -> float:
        """
        Lag autocorrelation normalized by the overlap length

        corr(L) = sum((q[i] - mean) * (q[i+L] - mean)) / ((n - L) * variance)
        """
        n = len(values)
        centered = values - mean
        return float(np.sum(centered[:n - lag] * centered[lag:]) / ((n - lag) * variance))

    def detect(self, values: np.ndarray) -> Seasonality:
        """
        Detect a seasonal cycle

        Args:
            values: Demand quantities in period order

        Returns:
            Seasonality: Detected period and strength
        """
        values = np.asarray(values, dtype=float)
        n = len(values)

        if n < self.min_observations:
            logger.debug("Series too short for seasonality scan (%d < %d)", n, self.min_observations)
            return Seasonality(detected=False)

        # Constant series: np.var leaves rounding residue for non-integer levels
        if np.ptp(values) == 0:
            return Seasonality(detected=False, strength=0.0)

        mean = float(np.mean(values))
        variance = float(np.var(values))

        best_lag = None
        best_corr = -np.inf
        for lag in range(self.min_lag, min(self.max_lag, n // 2) + 1):
            corr = self.autocorrelation(values, lag, mean, variance)
            if corr > best_corr:
                best_lag, best_corr = lag, corr

        if best_lag is None:
            return Seasonality(detected=False)

        strength = float(np.clip(best_corr, 0.0, 1.0))
        if best_corr > self.threshold:
            logger.debug("Seasonal cycle of %d periods (corr=%.3f)", best_lag, best_corr)
            return Seasonality(detected=True, period=best_lag, strength=strength)

        return Seasonality(detected=False, strength=strength)


def detect_seasonality(values: np.ndarray) -> Seasonality:
    """Convenience function using the configured thresholds"""
    return SeasonalityDetector().detect(values)
