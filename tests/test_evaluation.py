"""
Tests for backtesting and error metrics.
"""
import math

import numpy as np
import pytest

from forecast_engine.evaluation import AccuracyEvaluator
from forecast_engine.utils import calculate_mape, calculate_metrics, round_half_up


class TestMetrics:

    def test_mape_skips_zero_actuals(self):
        assert calculate_mape(np.array([0.0, 10.0]), np.array([5.0, 5.0])) == pytest.approx(50.0)

    def test_mape_all_zero_actuals(self):
        assert calculate_mape(np.array([0.0, 0.0]), np.array([1.0, 2.0])) == 0.0

    def test_metrics(self):
        metrics = calculate_metrics(np.array([10.0, 20.0]), np.array([12.0, 16.0]))
        assert metrics['MAE'] == pytest.approx(3.0)
        assert metrics['RMSE'] == pytest.approx(math.sqrt(10.0))
        assert metrics['MAPE'] == pytest.approx(20.0)

    def test_empty_comparison(self):
        assert calculate_metrics(np.array([]), np.array([])) == {'MAE': 0.0, 'RMSE': 0.0, 'MAPE': 0.0}

    def test_round_half_up(self):
        assert [round_half_up(v) for v in (0.5, 1.5, 2.5, 2.49)] == [1, 2, 3, 2]


class TestAccuracyEvaluator:

    def test_holdout_size(self):
        evaluator = AccuracyEvaluator()
        assert evaluator.holdout_size(10) == 2
        assert evaluator.holdout_size(4) == 0

    def test_backtest_against_flat_forecast(self):
        """Train on eight 10s (simple smoothing), compare against [20, 0]."""
        values = np.array([10.0] * 8 + [20.0, 0.0])
        report = AccuracyEvaluator().evaluate(values)
        assert report.holdout_size == 2
        assert report.mae == pytest.approx(10.0)
        assert report.rmse == pytest.approx(10.0)
        assert report.mape == pytest.approx(50.0)

    def test_zero_actual_in_holdout_is_finite(self):
        values = np.array([5.0, 0.0] * 15)
        report = AccuracyEvaluator().evaluate(values)
        assert all(math.isfinite(v) for v in (report.mae, report.rmse, report.mape))

    def test_empty_holdout_reports_zero(self):
        """Series under five points have nothing to hold out."""
        report = AccuracyEvaluator().evaluate(np.array([1.0, 2.0, 3.0]))
        assert (report.mae, report.rmse, report.mape, report.holdout_size) == (0.0, 0.0, 0.0, 0)

    def test_flat_series_has_no_error(self):
        report = AccuracyEvaluator().evaluate(np.full(30, 100.0))
        assert report.holdout_size == 6
        assert report.mae == pytest.approx(0.0)
        assert report.mape == pytest.approx(0.0)
