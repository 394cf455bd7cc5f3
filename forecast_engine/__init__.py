"""
Demand Forecast Engine

This package provides modular components for product demand forecasting:
- Series preparation and cadence detection
- Seasonality detection
- Exponential smoothing and linear trend forecasts
- Ensemble blending and backtesting
- Stock recommendations and batch ranking
"""

from forecast_engine.exceptions import (
    ForecastError, InsufficientDataError,
    InvalidObservationError, InvalidForecastRequestError
)
from forecast_engine.forecaster import (
    ForecastOrchestrator, forecast_demand, rank_recommendations, summarize_rankings
)
from forecast_engine.results import (
    AccuracyReport, ForecastAnalysis, ForecastMethod, ForecastPoint, Observation,
    RankedRecommendation, Seasonality, StockRecommendation, TrendAssessment, TrendDirection
)

__version__ = "1.0.0"

__all__ = [
    "ForecastOrchestrator",
    "forecast_demand",
    "rank_recommendations",
    "summarize_rankings",
    "ForecastError",
    "InsufficientDataError",
    "InvalidObservationError",
    "InvalidForecastRequestError",
    "AccuracyReport",
    "ForecastAnalysis",
    "ForecastMethod",
    "ForecastPoint",
    "Observation",
    "RankedRecommendation",
    "Seasonality",
    "StockRecommendation",
    "TrendAssessment",
    "TrendDirection",
]
