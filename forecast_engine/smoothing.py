"""
Exponential smoothing module
Holt-Winters triple smoothing with a simple exponential smoothing fallback

Smoothing constants are fixed (0.3 / 0.1 / 0.1 by default) and never fitted
to the data, so the same history always yields the same forecast.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from forecast_engine.config import (
    SMOOTHING_ALPHA, SMOOTHING_BETA, SMOOTHING_GAMMA, DEFAULT_SEASON_LENGTH
)
from forecast_engine.utils import non_negative

logger = logging.getLogger(__name__)

HOLT_WINTERS = "holt_winters"
SIMPLE = "simple"


@dataclass
class SmoothingFit:
    """
    Fitted smoothing components

    Attributes:
        method: HOLT_WINTERS or SIMPLE
        season_length: Season length used for the seasonal indices
        level: Level at every observation
        trend: Trend at every observation (zeros for SIMPLE)
        seasonal: Seasonal indices by absolute position (empty for SIMPLE)
    """
    method: str
    season_length: int
    level: np.ndarray
    trend: np.ndarray
    seasonal: np.ndarray

    @property
    def n(self) -> int:
        return len(self.level)


class ExponentialSmoother:
    """
    Level + trend + seasonal smoother with a level-only fallback
    """

    def __init__(
        self,
        alpha: Optional[float] = None,
        beta: Optional[float] = None,
        gamma: Optional[float] = None,
        default_season_length: Optional[int] = None
    ):
        """
        Initialize the smoother

        Args:
            alpha: Level smoothing constant (default: from config)
            beta: Trend smoothing constant (default: from config)
            gamma: Seasonal smoothing constant (default: from config)
            default_season_length: Season length when none is detected
        """
        self.alpha = SMOOTHING_ALPHA if alpha is None else alpha
        self.beta = SMOOTHING_BETA if beta is None else beta
        self.gamma = SMOOTHING_GAMMA if gamma is None else gamma
        self.default_season_length = default_season_length or DEFAULT_SEASON_LENGTH

    def resolve_season_length(self, season_length: Optional[int]) -> int:
        return season_length or self.default_season_length

    def uses_triple(self, n: int, season_length: Optional[int] = None) -> bool:
        """Triple smoothing needs at least two full seasons of data"""
        return n >= 2 * self.resolve_season_length(season_length)

    def fit(self, values: np.ndarray, season_length: Optional[int] = None) -> SmoothingFit:
        """
        Fit smoothing components to a series

        Args:
            values: Demand quantities in period order
            season_length: Detected seasonal period (None for default)

        Returns:
            SmoothingFit: Component vectors
        """
        values = np.asarray(values, dtype=float)
        season_length = self.resolve_season_length(season_length)

        if self.uses_triple(len(values), season_length):
            return self._fit_triple(values, season_length)
        return self._fit_simple(values, season_length)

    def _fit_triple(self, q: np.ndarray, season_length: int) -> SmoothingFit:
        n = len(q)
        alpha, beta, gamma = self.alpha, self.beta, self.gamma

        level = np.zeros(n)
        trend = np.zeros(n)
        seasonal = np.ones(n)

        level[0] = q[0]
        trend[0] = (q[season_length] - q[0]) / season_length

        first_season_mean = np.mean(q[:season_length])
        if first_season_mean != 0:
            seasonal[:season_length] = q[:season_length] / first_season_mean

        for i in range(1, n):
            s = i % season_length

            deseasonalized = q[i] / seasonal[s] if seasonal[s] != 0 else q[i]
            level[i] = alpha * deseasonalized + (1 - alpha) * (level[i - 1] + trend[i - 1])
            trend[i] = beta * (level[i] - level[i - 1]) + (1 - beta) * trend[i - 1]

            # Written by absolute index, read by phase
            ratio = q[i] / level[i] if level[i] != 0 else seasonal[s]
            seasonal[i] = gamma * ratio + (1 - gamma) * seasonal[s]

        logger.debug("Holt-Winters fit: level=%.3f trend=%.3f season=%d",
                     level[-1], trend[-1], season_length)

        return SmoothingFit(HOLT_WINTERS, season_length, level, trend, seasonal)

    def _fit_simple(self, q: np.ndarray, season_length: int) -> SmoothingFit:
        n = len(q)
        level = np.zeros(n)
        level[0] = q[0]
        for i in range(1, n):
            level[i] = self.alpha * q[i] + (1 - self.alpha) * level[i - 1]

        return SmoothingFit(SIMPLE, season_length, level, np.zeros(n), np.array([]))

    @staticmethod
    def predict(fit: SmoothingFit, periods: int) -> np.ndarray:
        """
        Project fitted components forward

        Args:
            fit: Result of fit()
            periods: Number of future periods

        Returns:
            np.ndarray: Forecast floored at zero
        """
        steps = np.arange(periods)

        if fit.method == SIMPLE:
            return non_negative(np.full(periods, fit.level[-1]))

        n = fit.n
        indices = fit.seasonal[(n + steps) % fit.season_length]
        forecast = (fit.level[-1] + (steps + 1) * fit.trend[-1]) * indices
        return non_negative(forecast)

    def forecast(self, values: np.ndarray, periods: int, season_length: Optional[int] = None) -> np.ndarray:
        """Fit and project in one call"""
        return self.predict(self.fit(values, season_length), periods)
