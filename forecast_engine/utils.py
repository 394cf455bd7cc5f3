"""
Utility functions for the forecast engine
Includes metrics calculation, rounding, and number formatting helpers
"""

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for positives

    Monotone, so it preserves lower <= predicted <= upper orderings.
    """
    return int(np.floor(value + 0.5))


def non_negative(values: np.ndarray) -> np.ndarray:
    """Floor every element at zero"""
    return np.maximum(np.asarray(values, dtype=float), 0.0)


def calculate_mape(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate Mean Absolute Percentage Error

    Terms with a zero actual are skipped rather than divided by.

    Args:
        y_true: Actual values
        y_pred: Predicted values

    Returns:
        float: MAPE percentage (0 when every actual is zero)
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    mask = y_true != 0
    if not np.any(mask):
        return 0.0
    return float(100 * np.mean(np.abs(y_true[mask] - y_pred[mask]) / np.abs(y_true[mask])))


def calculate_metrics(y_true: np.ndarray, y_pred: np.ndarray) -> dict:
    """
    Calculate backtest error metrics

    Args:
        y_true: Actual values
        y_pred: Predicted values

    Returns:
        dict: MAE, RMSE and MAPE (all zero for an empty comparison)
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    if len(y_true) == 0:
        return {'MAE': 0.0, 'RMSE': 0.0, 'MAPE': 0.0}

    metrics = {}
    metrics['MAE'] = float(mean_absolute_error(y_true, y_pred))
    metrics['RMSE'] = float(np.sqrt(mean_squared_error(y_true, y_pred)))
    metrics['MAPE'] = calculate_mape(y_true, y_pred)

    return metrics


def format_number(value: float, decimals: int = 0) -> str:
    """
    Format large numbers with thousands separators

    Args:
        value: Numeric value
        decimals: Number of decimal places

    Returns:
        str: Formatted number string
    """
    if decimals == 0:
        return f"{value:,.0f}"
    else:
        return f"{value:,.{decimals}f}"
