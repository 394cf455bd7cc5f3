"""
Series preparation module
Turns raw (period, quantity) history into a sorted, validated demand series
and works out the cadence used to label future periods
"""

import logging
import math
from collections.abc import Mapping
from typing import Iterable, List, Optional, Union

import numpy as np
import pandas as pd
from pandas.tseries.frequencies import to_offset

from forecast_engine.config import MIN_OBSERVATIONS
from forecast_engine.exceptions import InsufficientDataError, InvalidObservationError
from forecast_engine.results import Observation, Period, SeriesState

logger = logging.getLogger(__name__)

History = Union[pd.DataFrame, pd.Series, Iterable]


class SeriesPreparer:
    """
    Handles validation, sorting, and cadence detection for demand history
    """

    def __init__(self, min_observations: Optional[int] = None):
        """
        Initialize the SeriesPreparer

        Args:
            min_observations: Minimum history length (default: from config)
        """
        self.min_observations = min_observations or MIN_OBSERVATIONS

    def to_observations(self, history: History) -> List[Observation]:
        """
        Normalize any supported history shape into observations

        Accepts a DataFrame with 'period' and 'quantity' columns, a Series
        indexed by period, or an iterable of Observation objects, mappings,
        or (period, quantity[, value]) tuples.

        Args:
            history: Raw demand history

        Returns:
            list: Observations in input order
        """
        if history is None:
            raise InvalidObservationError("History must not be None")

        if isinstance(history, pd.DataFrame):
            if 'quantity' not in history.columns:
                raise InvalidObservationError("History DataFrame needs a 'quantity' column")
            records = history.to_dict('records')
        elif isinstance(history, pd.Series):
            dated = isinstance(history.index, (pd.DatetimeIndex, pd.PeriodIndex))
            records = [
                {'period': period if dated else None, 'quantity': quantity}
                for period, quantity in history.items()
            ]
        else:
            records = list(history)

        return [self._to_observation(position, record) for position, record in enumerate(records)]

    def _to_observation(self, position: int, record) -> Observation:
        if isinstance(record, Observation):
            period, quantity, value = record.period, record.quantity, record.value
        elif isinstance(record, Mapping):
            period = record.get('period')
            quantity = record.get('quantity', record.get('q'))
            value = record.get('value')
        elif isinstance(record, (tuple, list)) and len(record) in (2, 3):
            period, quantity = record[0], record[1]
            value = record[2] if len(record) == 3 else None
        else:
            raise InvalidObservationError(f"Unsupported history record at position {position}: {record!r}")

        return Observation(
            period=self._coerce_period(position, period),
            quantity=self._coerce_quantity(position, quantity),
            value=value,
        )

    @staticmethod
    def _coerce_period(position: int, period) -> Period:
        if period is None:
            return None
        if not pd.api.types.is_scalar(period):
            raise InvalidObservationError(
                f"Observation {position} has an unsupported period {period!r}"
            )
        if not isinstance(period, str) and pd.isna(period):
            return None
        if isinstance(period, (bool, int, float, np.number)):
            # Bare numbers would be read as nanosecond timestamps; index labels come from undated histories
            raise InvalidObservationError(
                f"Observation {position} has a numeric period {period!r}; use dates or omit periods"
            )
        if isinstance(period, pd.Period):
            return period.to_timestamp()
        try:
            return pd.Timestamp(period)
        except (TypeError, ValueError) as e:
            raise InvalidObservationError(
                f"Observation {position} has an unparseable period {period!r}"
            ) from e

    @staticmethod
    def _coerce_quantity(position: int, quantity) -> float:
        try:
            numeric = float(pd.to_numeric(quantity, errors='coerce')) if quantity is not None else np.nan
        except (TypeError, ValueError) as e:
            raise InvalidObservationError(
                f"Observation {position} has a non-numeric quantity {quantity!r}"
            ) from e
        if not math.isfinite(numeric):
            raise InvalidObservationError(
                f"Observation {position} has a non-numeric quantity {quantity!r}"
            )
        if numeric < 0:
            logger.warning("Observation %d has negative quantity %s, clamping to 0", position, numeric)
            numeric = 0.0
        return numeric

    def sort_observations(self, observations: List[Observation]) -> List[Observation]:
        """
        Stable sort by period (duplicates keep their input order)

        Undated histories are returned in input order.
        """
        dated = [obs.period is not None for obs in observations]
        if not any(dated):
            return list(observations)
        if not all(dated):
            raise InvalidObservationError("History mixes dated and undated observations")
        try:
            return sorted(observations, key=lambda obs: obs.period)
        except TypeError as e:
            raise InvalidObservationError(f"History periods are not mutually comparable: {e}") from e

    def prepare(self, history: History) -> SeriesState:
        """
        Complete pipeline: normalize, validate length, and sort

        Args:
            history: Raw demand history

        Returns:
            SeriesState: Working state seeded with the sorted quantities

        Raises:
            InsufficientDataError: Fewer than the minimum observations
        """
        observations = self.to_observations(history)

        if len(observations) < self.min_observations:
            raise InsufficientDataError(len(observations), self.min_observations)

        observations = self.sort_observations(observations)

        values = np.array([obs.quantity for obs in observations], dtype=float)
        periods = [obs.period for obs in observations]

        logger.debug("Prepared series of %d observations (first=%s, last=%s)",
                     len(values), periods[0], periods[-1])

        return SeriesState(values=values, periods=periods)

    @staticmethod
    def infer_step(periods: List[Period]):
        """
        Work out one period of the series cadence

        Args:
            periods: Sorted observation periods

        Returns:
            A pandas offset or Timedelta, or None for undated series
        """
        if not periods or periods[-1] is None:
            return None

        index = pd.DatetimeIndex(periods).unique()

        if len(index) >= 3:
            try:
                freq = pd.infer_freq(index)
            except (TypeError, ValueError):
                freq = None
            if freq:
                return to_offset(freq)

        if len(index) >= 2:
            median_gap = pd.Series(index).diff().dropna().median()
            gap_days = median_gap / pd.Timedelta(days=1)
            if 28 <= gap_days <= 31:
                return pd.DateOffset(months=1)
            if 89 <= gap_days <= 92:
                return pd.DateOffset(months=3)
            if 365 <= gap_days <= 366:
                return pd.DateOffset(years=1)
            return median_gap

        # Single distinct period: assume monthly cadence
        return pd.DateOffset(months=1)

    def future_periods(self, state: SeriesState, count: int) -> List[Period]:
        """
        Label the next `count` periods after the last observation

        Args:
            state: Prepared series state
            count: Number of future periods

        Returns:
            list: Timestamps, or integer step indices for undated series
        """
        step = self.infer_step(state.periods)
        if step is None:
            return [state.n + k for k in range(count)]

        last = state.periods[-1]
        return [last + step * (k + 1) for k in range(count)]


# Convenience function for quick preparation
def prepare_series(history: History) -> SeriesState:
    """
    Convenience function to prepare a history in one call

    Returns:
        SeriesState: Sorted and validated series
    """
    return SeriesPreparer().prepare(history)
