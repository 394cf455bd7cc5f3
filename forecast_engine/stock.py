"""
Stock recommendation module
Derives safety stock, reorder point, and target stock level from a forecast

    safety_stock  = round(z * std(pred))          z = 1.65 (~95% service level)
    reorder_point = round(mean(pred) + safety_stock)
    target_stock  = round(1.5 * max(pred) + safety_stock)
"""

import logging
from typing import Optional, Sequence

import numpy as np

from forecast_engine.config import (
    SERVICE_LEVEL_Z, TARGET_STOCK_MULTIPLIER, RATIONALE_TEMPLATE,
    NO_SEASONALITY_LABEL, SEASONALITY_LABEL_TEMPLATE
)
from forecast_engine.results import (
    AccuracyReport, ForecastPoint, Seasonality, StockRecommendation, TrendAssessment
)
from forecast_engine.utils import round_half_up

logger = logging.getLogger(__name__)


class StockRecommender:
    """
    Turns the ensemble forecast into inventory control parameters
    """

    def __init__(
        self,
        service_level_z: Optional[float] = None,
        target_multiplier: Optional[float] = None,
        rationale_template: Optional[str] = None
    ):
        """
        Initialize the recommender

        Args:
            service_level_z: Safety stock z-score (default: from config)
            target_multiplier: Multiple of peak demand to stock up to
            rationale_template: str.format template for the rationale
        """
        self.service_level_z = SERVICE_LEVEL_Z if service_level_z is None else service_level_z
        self.target_multiplier = TARGET_STOCK_MULTIPLIER if target_multiplier is None else target_multiplier
        self.rationale_template = rationale_template or RATIONALE_TEMPLATE

    def recommend(
        self,
        forecast: Sequence[ForecastPoint],
        trend: TrendAssessment,
        seasonality: Seasonality,
        accuracy: AccuracyReport,
        history_periods: int
    ) -> StockRecommendation:
        """
        Calculate stock figures for one product

        Args:
            forecast: Ensemble forecast points
            trend: Trend verdict (for the rationale)
            seasonality: Detected seasonality (for the rationale)
            accuracy: Backtest report (for the rationale)
            history_periods: Number of historical periods used

        Returns:
            StockRecommendation: Stock figures with rationale
        """
        predictions = np.array([point.predicted_quantity for point in forecast], dtype=float)
        if len(predictions) == 0:
            predictions = np.zeros(1)

        average_demand = float(np.mean(predictions))
        max_demand = float(np.max(predictions))
        std_dev = float(np.sqrt(np.mean((predictions - average_demand) ** 2)))

        safety_stock = max(0, round_half_up(self.service_level_z * std_dev))
        reorder_point = max(0, round_half_up(average_demand + safety_stock))
        target_stock_level = max(0, round_half_up(self.target_multiplier * max_demand + safety_stock))

        details = {
            'history_periods': history_periods,
            'trend_direction': trend.direction.value,
            'trend_confidence': trend.confidence_percent,
            'seasonal_period': seasonality.period if seasonality.detected else None,
            'average_demand': average_demand,
            'max_demand': max_demand,
            'demand_std': std_dev,
            'mape': accuracy.mape,
        }

        logger.debug("Stock figures: safety=%d reorder=%d target=%d",
                     safety_stock, reorder_point, target_stock_level)

        return StockRecommendation(
            target_stock_level=target_stock_level,
            reorder_point=reorder_point,
            safety_stock=safety_stock,
            rationale=self.render_rationale(details),
            details=details,
        )

    def render_rationale(self, details: dict) -> str:
        """Fill the rationale template from the recommendation details"""
        if details['seasonal_period'] is None:
            seasonality = NO_SEASONALITY_LABEL
        else:
            seasonality = SEASONALITY_LABEL_TEMPLATE.format(period=details['seasonal_period'])

        return self.rationale_template.format(seasonality=seasonality, **details)


def suggest_order_quantity(recommendation: StockRecommendation, current_stock: float) -> int:
    """
    Units to order given the stock on hand

    Orders up to the target level once stock is at or below the reorder point.

    Args:
        recommendation: Stock figures for the product
        current_stock: Units currently on hand

    Returns:
        int: Order quantity (0 when above the reorder point)
    """
    if current_stock > recommendation.reorder_point:
        return 0
    return max(0, round_half_up(recommendation.target_stock_level - max(current_stock, 0)))
