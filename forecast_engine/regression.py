"""
Linear trend module
Ordinary least squares of quantity on the period index
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from forecast_engine.config import TREND_STABLE_RATIO
from forecast_engine.results import TrendAssessment, TrendDirection
from forecast_engine.utils import non_negative

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegressionFit:
    """Least-squares line and goodness of fit"""
    slope: float
    intercept: float
    mean: float
    r_squared: float
    ss_tot: float
    n: int


class TrendRegressor:
    """
    Fits a straight line through the series and judges its direction
    """

    def __init__(self, stable_ratio: Optional[float] = None):
        self.stable_ratio = TREND_STABLE_RATIO if stable_ratio is None else stable_ratio

    @staticmethod
    def fit(values: np.ndarray) -> RegressionFit:
        """
        Fit y = slope * x + intercept over x = 0..n-1

        Args:
            values: Demand quantities in period order

        Returns:
            RegressionFit: Coefficients and R-squared
        """
        y = np.asarray(values, dtype=float)
        n = len(y)
        x = np.arange(n, dtype=float)

        x_mean = x.mean()
        y_mean = y.mean()
        # Constant series: exact zero deviations, mean drift would leak into slope
        deviations = y - y_mean if n and np.ptp(y) > 0 else np.zeros(n)

        sxx = np.sum((x - x_mean) ** 2)
        slope = float(np.sum((x - x_mean) * deviations) / sxx) if sxx > 0 else 0.0
        intercept = float(y_mean - slope * x_mean)

        # R-squared
        fitted = slope * x + intercept
        ss_res = np.sum((y - fitted) ** 2)
        ss_tot = float(np.sum(deviations ** 2))
        r_squared = float(1 - (ss_res / ss_tot)) if ss_tot > 0 else 0.0

        return RegressionFit(slope, intercept, float(y_mean), r_squared, ss_tot, n)

    @staticmethod
    def predict(fit: RegressionFit, periods: int) -> np.ndarray:
        """Extend the line over indices n..n+periods-1, floored at zero"""
        future_x = fit.n + np.arange(periods, dtype=float)
        return non_negative(fit.slope * future_x + fit.intercept)

    def forecast(self, values: np.ndarray, periods: int) -> np.ndarray:
        return self.predict(self.fit(values), periods)

    def assess(self, fit: RegressionFit) -> TrendAssessment:
        """
        Trend direction and confidence from a fitted line

        Args:
            fit: Result of fit()

        Returns:
            TrendAssessment: Direction, slope and R-squared as a percentage
        """
        if fit.ss_tot == 0:
            return TrendAssessment(TrendDirection.STABLE, fit.slope, 0.0)

        if abs(fit.slope) < self.stable_ratio * fit.mean:
            direction = TrendDirection.STABLE
        elif fit.slope > 0:
            direction = TrendDirection.UP
        else:
            direction = TrendDirection.DOWN

        confidence = float(np.clip(fit.r_squared * 100, 0, 100))

        logger.debug("Trend %s (slope=%.4f, confidence=%.1f%%)", direction.value, fit.slope, confidence)

        return TrendAssessment(direction, fit.slope, confidence)
