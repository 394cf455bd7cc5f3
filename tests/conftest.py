"""
Common fixtures for the forecast engine tests.
"""
import math

import pandas as pd
import pytest


def monthly_history(quantities, start="2023-01-01"):
    """Wrap quantities in month-start dated observations."""
    periods = pd.date_range(start=start, periods=len(quantities), freq="MS")
    return [{"period": period, "quantity": quantity} for period, quantity in zip(periods, quantities)]


@pytest.fixture
def flat_history():
    """30 identical monthly observations of 100."""
    return monthly_history([100.0] * 30)


@pytest.fixture
def linear_values():
    """q[i] = 10 + 2i for i = 0..19."""
    return [10.0 + 2.0 * i for i in range(20)]


@pytest.fixture
def linear_history(linear_values):
    return monthly_history(linear_values)


@pytest.fixture
def seasonal_values():
    """Gentle upward trend plus a 12-period sine wave, 36 points."""
    return [50.0 + 0.5 * i + 20.0 * math.sin(2 * math.pi * i / 12) for i in range(36)]


@pytest.fixture
def seasonal_history(seasonal_values):
    return monthly_history(seasonal_values)


@pytest.fixture
def upward_history():
    """Steadily growing demand."""
    return monthly_history([10.0 + 5.0 * i for i in range(12)])


@pytest.fixture
def stable_history():
    """Constant demand."""
    return monthly_history([50.0] * 12)


@pytest.fixture
def make_history():
    """Factory for month-start dated histories."""
    return monthly_history
