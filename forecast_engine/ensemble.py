"""
Ensemble module
Blends the exponential and linear forecasts into forecast points with bounds
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from forecast_engine.config import (
    SEASONAL_WEIGHTS, NON_SEASONAL_WEIGHTS,
    LOWER_BOUND_FACTOR, UPPER_BOUND_FACTOR
)
from forecast_engine.results import ForecastMethod, ForecastPoint, Period
from forecast_engine.utils import round_half_up


class EnsembleBlender:
    """
    Weighted combination of two forecasts

    Seasonal series lean on the exponential smoother; others weigh both
    methods equally.
    """

    def __init__(
        self,
        seasonal_weights: Optional[Tuple[float, float]] = None,
        non_seasonal_weights: Optional[Tuple[float, float]] = None,
        lower_factor: Optional[float] = None,
        upper_factor: Optional[float] = None
    ):
        self.seasonal_weights = seasonal_weights or SEASONAL_WEIGHTS
        self.non_seasonal_weights = non_seasonal_weights or NON_SEASONAL_WEIGHTS
        self.lower_factor = LOWER_BOUND_FACTOR if lower_factor is None else lower_factor
        self.upper_factor = UPPER_BOUND_FACTOR if upper_factor is None else upper_factor

    def weights(self, seasonal: bool) -> Tuple[float, float]:
        """(exponential, linear) weights"""
        return self.seasonal_weights if seasonal else self.non_seasonal_weights

    def blend_values(self, exponential: np.ndarray, linear: np.ndarray, seasonal: bool) -> np.ndarray:
        """
        Blend two forecast vectors

        Args:
            exponential: Smoother forecast
            linear: Regression forecast
            seasonal: Whether seasonality was detected

        Returns:
            np.ndarray: Blended forecast floored at zero
        """
        w_exp, w_lin = self.weights(seasonal)
        blended = w_exp * np.asarray(exponential, dtype=float) + w_lin * np.asarray(linear, dtype=float)
        return np.maximum(blended, 0.0)

    def blend(
        self,
        exponential: np.ndarray,
        linear: np.ndarray,
        periods: Sequence[Period],
        seasonal: bool
    ) -> List[ForecastPoint]:
        """
        Build ensemble forecast points

        Prediction and both bounds go through the same rounding, so
        lower <= predicted <= upper always holds.

        Args:
            exponential: Smoother forecast
            linear: Regression forecast
            periods: Labels for the future periods
            seasonal: Whether seasonality was detected

        Returns:
            list: One ForecastPoint per period
        """
        blended = self.blend_values(exponential, linear, seasonal)

        points = []
        for period, prediction in zip(periods, blended):
            points.append(ForecastPoint(
                period=period,
                predicted_quantity=max(0, round_half_up(prediction)),
                lower_bound=max(0, round_half_up(self.lower_factor * prediction)),
                upper_bound=max(0, round_half_up(self.upper_factor * prediction)),
                method=ForecastMethod.ENSEMBLE,
            ))

        return points
