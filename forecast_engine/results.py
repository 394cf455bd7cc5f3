"""
Data structures exchanged with callers of the forecast engine

Every structure here is created once per forecast call and never shared
between calls.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import numpy as np
import pandas as pd

Period = Union[pd.Timestamp, int, None]


class ForecastMethod(str, Enum):
    """Method that produced a forecast point"""
    EXPONENTIAL = "exponential"
    LINEAR = "linear"
    ENSEMBLE = "ensemble"


class TrendDirection(str, Enum):
    """Direction of the fitted demand trend"""
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


def _period_to_json(period: Period):
    if isinstance(period, pd.Timestamp):
        return period.isoformat()
    return period


@dataclass(frozen=True)
class Observation:
    """One historical demand observation"""
    period: Period
    quantity: float
    value: Optional[float] = None


@dataclass(frozen=True)
class ForecastPoint:
    """Forecast for a single future period"""
    period: Period
    predicted_quantity: int
    lower_bound: int
    upper_bound: int
    method: ForecastMethod = ForecastMethod.ENSEMBLE

    def to_dict(self) -> dict:
        return {
            "period": _period_to_json(self.period),
            "predicted_quantity": self.predicted_quantity,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "method": self.method.value,
        }


@dataclass(frozen=True)
class Seasonality:
    """
    Seasonal cycle detected in a series

    Attributes:
        detected: Whether a cycle passed the correlation threshold
        period: Cycle length in periods (only when detected)
        strength: Best autocorrelation found, clipped to [0, 1]
    """
    detected: bool
    period: Optional[int] = None
    strength: Optional[float] = None

    def to_dict(self) -> dict:
        return {"detected": self.detected, "period": self.period, "strength": self.strength}


@dataclass(frozen=True)
class TrendAssessment:
    """Trend verdict derived from the least-squares line"""
    direction: TrendDirection
    slope: float
    confidence_percent: float

    def to_dict(self) -> dict:
        return {
            "direction": self.direction.value,
            "slope": self.slope,
            "confidence_percent": self.confidence_percent,
        }


@dataclass(frozen=True)
class AccuracyReport:
    """Backtest error metrics (MAPE in percent)"""
    mae: float
    rmse: float
    mape: float
    holdout_size: int = 0

    def to_dict(self) -> dict:
        return {
            "mae": self.mae,
            "rmse": self.rmse,
            "mape": self.mape,
            "holdout_size": self.holdout_size,
        }


@dataclass(frozen=True)
class StockRecommendation:
    """
    Inventory control parameters for one product

    Attributes:
        target_stock_level: Level to replenish up to
        reorder_point: Stock level that triggers a replenishment order
        safety_stock: Buffer for demand variability
        rationale: Human-readable explanation
        details: Raw figures the rationale was rendered from
    """
    target_stock_level: int
    reorder_point: int
    safety_stock: int
    rationale: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "target_stock_level": self.target_stock_level,
            "reorder_point": self.reorder_point,
            "safety_stock": self.safety_stock,
            "rationale": self.rationale,
            "details": dict(self.details),
        }


@dataclass
class SeriesState:
    """
    Working state for a single forecast call

    Holds the sorted quantities plus every intermediate the components
    produce along the way. Discarded when the call returns.
    """
    values: np.ndarray
    periods: List[Period]
    seasonal_period: Optional[int] = None
    level: Optional[np.ndarray] = None
    trend: Optional[np.ndarray] = None
    seasonal: Optional[np.ndarray] = None
    slope: Optional[float] = None
    intercept: Optional[float] = None

    @property
    def n(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class ForecastAnalysis:
    """Complete forecast-and-recommendation result for one product"""
    forecast: List[ForecastPoint]
    accuracy: AccuracyReport
    seasonality: Seasonality
    trend: TrendAssessment
    recommendation: StockRecommendation
    history_periods: int
    product_id: Optional[Any] = None

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "history_periods": self.history_periods,
            "forecast": [point.to_dict() for point in self.forecast],
            "accuracy": self.accuracy.to_dict(),
            "seasonality": self.seasonality.to_dict(),
            "trend": self.trend.to_dict(),
            "recommendation": self.recommendation.to_dict(),
        }

    def to_frame(self) -> pd.DataFrame:
        """
        Forecast points as a DataFrame

        Returns:
            pd.DataFrame: One row per future period
        """
        columns = ['period', 'predicted_quantity', 'lower_bound', 'upper_bound', 'method']
        rows = [point.to_dict() for point in self.forecast]
        df = pd.DataFrame(rows, columns=columns)
        if self.forecast and isinstance(self.forecast[0].period, pd.Timestamp):
            df['period'] = [point.period for point in self.forecast]
        return df


@dataclass(frozen=True)
class RankedRecommendation:
    """A product's analysis as placed in a batch ranking"""
    product_id: Any
    analysis: ForecastAnalysis

    @property
    def urgency(self) -> int:
        """Target stock level for upward-trending products, otherwise 0"""
        if self.analysis.trend.direction == TrendDirection.UP:
            return self.analysis.recommendation.target_stock_level
        return 0

    def to_dict(self) -> dict:
        return {"id": self.product_id, "urgency": self.urgency, "analysis": self.analysis.to_dict()}
