"""
Main forecasting orchestrator
Combines series preparation, seasonality detection, both forecasting
methods, backtesting, and stock recommendation
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np
from joblib import Parallel, delayed

from forecast_engine.config import (
    DEFAULT_FORECAST_PERIODS, MAX_FORECAST_PERIODS, BATCH_N_JOBS
)
from forecast_engine.data_loader import History, SeriesPreparer
from forecast_engine.ensemble import EnsembleBlender
from forecast_engine.evaluation import AccuracyEvaluator
from forecast_engine.exceptions import InvalidForecastRequestError
from forecast_engine.regression import TrendRegressor
from forecast_engine.results import ForecastAnalysis, RankedRecommendation, TrendDirection
from forecast_engine.seasonality import SeasonalityDetector
from forecast_engine.smoothing import ExponentialSmoother
from forecast_engine.stock import StockRecommender
from forecast_engine.utils import format_number

logger = logging.getLogger(__name__)


class ForecastOrchestrator:
    """
    Main orchestrator for the forecast engine
    Runs every component for one product, or for a batch of products
    """

    def __init__(
        self,
        preparer: Optional[SeriesPreparer] = None,
        detector: Optional[SeasonalityDetector] = None,
        smoother: Optional[ExponentialSmoother] = None,
        regressor: Optional[TrendRegressor] = None,
        blender: Optional[EnsembleBlender] = None,
        evaluator: Optional[AccuracyEvaluator] = None,
        recommender: Optional[StockRecommender] = None,
        n_jobs: Optional[int] = None
    ):
        """
        Initialize the orchestrator (every component defaults to config values)

        Args:
            n_jobs: joblib workers for batch ranking (1 = sequential)
        """
        self.preparer = preparer or SeriesPreparer()
        self.detector = detector or SeasonalityDetector()
        self.smoother = smoother or ExponentialSmoother()
        self.regressor = regressor or TrendRegressor()
        self.blender = blender or EnsembleBlender()
        self.evaluator = evaluator or AccuracyEvaluator(smoother=self.smoother)
        self.recommender = recommender or StockRecommender()
        self.n_jobs = n_jobs or BATCH_N_JOBS

    @staticmethod
    def _validate_periods(periods) -> int:
        if isinstance(periods, bool) or not isinstance(periods, (int, np.integer)):
            raise InvalidForecastRequestError(f"periods must be an integer, got {periods!r}")
        if not 1 <= periods <= MAX_FORECAST_PERIODS:
            raise InvalidForecastRequestError(
                f"periods must be between 1 and {MAX_FORECAST_PERIODS}, got {periods}"
            )
        return int(periods)

    def forecast(
        self,
        product_id: Any,
        history: History,
        periods: int = DEFAULT_FORECAST_PERIODS
    ) -> ForecastAnalysis:
        """
        Generate a forecast and stock recommendation for one product

        Args:
            product_id: Caller's product identifier (echoed in the result)
            history: Demand history (see SeriesPreparer.to_observations)
            periods: Number of future periods to forecast

        Returns:
            ForecastAnalysis: Forecast, accuracy, seasonality, trend, and stock figures

        Raises:
            InsufficientDataError: Fewer than 3 observations
            InvalidForecastRequestError: periods out of range
        """
        periods = self._validate_periods(periods)

        # Step 1: Sort and validate history
        state = self.preparer.prepare(history)
        values = state.values

        logger.info("Generating %d-period forecast for product %s from %d observations",
                    periods, product_id, state.n)

        # Step 2: Seasonality
        seasonality = self.detector.detect(values)
        season_length = seasonality.period if seasonality.detected else None
        state.seasonal_period = season_length

        # Step 3: Exponential smoothing
        smoothing_fit = self.smoother.fit(values, season_length)
        state.level, state.trend, state.seasonal = smoothing_fit.level, smoothing_fit.trend, smoothing_fit.seasonal
        exponential = self.smoother.predict(smoothing_fit, periods)

        # Step 4: Linear trend
        regression_fit = self.regressor.fit(values)
        state.slope, state.intercept = regression_fit.slope, regression_fit.intercept
        linear = self.regressor.predict(regression_fit, periods)
        trend = self.regressor.assess(regression_fit)

        # Step 5: Ensemble
        future = self.preparer.future_periods(state, periods)
        forecast = self.blender.blend(exponential, linear, future, seasonality.detected)

        # Step 6: Backtest
        accuracy = self.evaluator.evaluate(values, season_length)

        # Step 7: Stock figures
        recommendation = self.recommender.recommend(forecast, trend, seasonality, accuracy, state.n)

        logger.info("Product %s: trend %s, reorder point %d, target stock %d",
                    product_id, trend.direction.value,
                    recommendation.reorder_point, recommendation.target_stock_level)

        return ForecastAnalysis(
            forecast=forecast,
            accuracy=accuracy,
            seasonality=seasonality,
            trend=trend,
            recommendation=recommendation,
            history_periods=state.n,
            product_id=product_id,
        )

    @staticmethod
    def _unpack_product(position: int, product):
        if isinstance(product, Mapping):
            product_id = product.get('id', product.get('product_id', position))
            history = product['history']
        else:
            product_id = getattr(product, 'id', getattr(product, 'product_id', position))
            history = product.history
        return product_id, history

    def _forecast_product(
        self,
        position: int,
        product,
        periods: int
    ) -> Tuple[Any, Optional[RankedRecommendation], int, Optional[str]]:
        """
        Forecast one batch item without logging its outcome

        Runs inside joblib workers, whose log records never reach the caller,
        so the outcome travels back as (product_id, recommendation,
        observation count, error message) and rank_recommendations logs it.
        """
        product_id = position
        count = 0
        try:
            product_id, history = self._unpack_product(position, product)
            observations = self.preparer.to_observations(history)
            count = len(observations)
            if count < self.preparer.min_observations:
                return product_id, None, count, None
            analysis = self.forecast(product_id, observations, periods)
        except Exception as e:
            return product_id, None, count, str(e) or type(e).__name__

        return product_id, RankedRecommendation(product_id=product_id, analysis=analysis), count, None

    def rank_recommendations(
        self,
        products: Iterable,
        periods: int = DEFAULT_FORECAST_PERIODS
    ) -> List[RankedRecommendation]:
        """
        Forecast every product and rank them by urgency

        Urgency is the target stock level of upward-trending products and 0
        for everything else. Ties keep input order. A product that fails is
        logged and left out; the batch itself never fails.

        Args:
            products: Mappings or objects with an id and a history
            periods: Number of future periods per product

        Returns:
            list: RankedRecommendation objects, most urgent first
        """
        products = list(products)

        if not products:
            return []

        logger.info("Ranking %d products", len(products))

        results = Parallel(n_jobs=self.n_jobs)(
            delayed(self._forecast_product)(position, product, periods)
            for position, product in enumerate(products)
        )

        ranked = []
        for product_id, recommendation, count, error in results:
            if error is not None:
                logger.warning("Forecast failed for product %s, skipping: %s", product_id, error)
            elif recommendation is None:
                logger.info("Skipping product %s: only %d observations", product_id, count)
            else:
                ranked.append(recommendation)

        # Stable sort; reverse=True keeps ties in input order
        ranked = sorted(ranked, key=lambda item: item.urgency, reverse=True)

        logger.info("Ranked %d of %d products", len(ranked), len(products))

        return ranked


def summarize_rankings(ranked: List[RankedRecommendation]) -> dict:
    """
    Calculate summary statistics for a batch ranking

    Args:
        ranked: Output of rank_recommendations()

    Returns:
        dict: Summary statistics
    """
    summary = {
        'total_products': len(ranked),
        'upward_trending': sum(
            1 for item in ranked if item.analysis.trend.direction == TrendDirection.UP
        ),
        'total_target_stock': int(sum(item.analysis.recommendation.target_stock_level for item in ranked)),
        'total_reorder_point': int(sum(item.analysis.recommendation.reorder_point for item in ranked)),
        'top_product': ranked[0].product_id if ranked else None,
    }

    logger.info("Batch summary: %d products, %d trending up, %s units of target stock",
                summary['total_products'], summary['upward_trending'],
                format_number(summary['total_target_stock']))

    return summary


# Convenience functions for quick forecasting
def forecast_demand(
    history: History,
    periods: int = DEFAULT_FORECAST_PERIODS,
    product_id: Any = None
) -> ForecastAnalysis:
    """
    Convenience function for a single forecast

    Args:
        history: Demand history
        periods: Number of future periods
        product_id: Optional identifier echoed in the result

    Returns:
        ForecastAnalysis: Forecast results
    """
    return ForecastOrchestrator().forecast(product_id, history, periods)


def rank_recommendations(
    products: Iterable,
    periods: int = DEFAULT_FORECAST_PERIODS,
    n_jobs: Optional[int] = None
) -> List[RankedRecommendation]:
    """
    Convenience function for batch ranking

    Args:
        products: Mappings or objects with an id and a history
        periods: Number of future periods per product
        n_jobs: joblib workers (default: from config)

    Returns:
        list: Ranked recommendations
    """
    return ForecastOrchestrator(n_jobs=n_jobs).rank_recommendations(products, periods)
