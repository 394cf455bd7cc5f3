"""
Backtest module
Holds out the most recent history, re-forecasts it, and scores the result
"""

import logging
from typing import Optional

import numpy as np

from forecast_engine.config import HOLDOUT_FRACTION
from forecast_engine.results import AccuracyReport
from forecast_engine.smoothing import ExponentialSmoother
from forecast_engine.utils import calculate_metrics

logger = logging.getLogger(__name__)


class AccuracyEvaluator:
    """
    Scores the exponential smoother against held-out history
    """

    def __init__(self, smoother: Optional[ExponentialSmoother] = None, holdout_fraction: Optional[float] = None):
        self.smoother = smoother or ExponentialSmoother()
        self.holdout_fraction = HOLDOUT_FRACTION if holdout_fraction is None else holdout_fraction

    def holdout_size(self, n: int) -> int:
        return int(np.floor(self.holdout_fraction * n))

    def evaluate(self, values: np.ndarray, season_length: Optional[int] = None) -> AccuracyReport:
        """
        Backtest the smoother on a series

        A holdout of zero (short series) yields an all-zero report.

        Args:
            values: Demand quantities in period order
            season_length: Seasonal period detected on the full series

        Returns:
            AccuracyReport: MAE, RMSE, MAPE and the holdout size
        """
        values = np.asarray(values, dtype=float)
        holdout = self.holdout_size(len(values))

        if holdout == 0:
            logger.debug("Holdout is empty for %d observations, reporting zero error", len(values))
            return AccuracyReport(mae=0.0, rmse=0.0, mape=0.0, holdout_size=0)

        train = values[:-holdout]
        actual = values[-holdout:]
        predicted = self.smoother.forecast(train, holdout, season_length)

        metrics = calculate_metrics(actual, predicted)

        logger.debug("Backtest on %d held-out periods: MAE=%.2f RMSE=%.2f MAPE=%.1f%%",
                     holdout, metrics['MAE'], metrics['RMSE'], metrics['MAPE'])

        return AccuracyReport(
            mae=metrics['MAE'],
            rmse=metrics['RMSE'],
            mape=metrics['MAPE'],
            holdout_size=holdout,
        )
