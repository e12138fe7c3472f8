"""
Shared test fixtures for the performance statistics test suite.

Provides consistent test data across all test modules:
- Monthly asset returns with a market-correlation structure
- Market and risk-free return series
- Small hand-checkable return and price series
"""

import pytest
import numpy as np
import pandas as pd


@pytest.fixture
def sample_market():
    """Monthly market returns for 10 years.

    Returns:
        np.ndarray: 120 market returns, mean ~0.8%, SD ~4.5%
    """
    np.random.seed(42)
    return np.random.normal(0.008, 0.045, 120)


@pytest.fixture
def sample_returns(sample_market):
    """Monthly asset returns correlated with the market (beta ~1.2).

    Returns:
        np.ndarray: 120 asset returns
    """
    np.random.seed(7)
    noise = np.random.normal(0.001, 0.02, len(sample_market))
    return 1.2 * sample_market + noise


@pytest.fixture
def sample_risk_free():
    """Monthly risk-free returns (~2% a year with small drift).

    Returns:
        np.ndarray: 120 risk-free returns
    """
    return np.linspace(0.0015, 0.0020, 120)


@pytest.fixture
def sample_returns_series(sample_returns):
    """Asset returns as a pandas Series with a monthly DatetimeIndex."""
    dates = pd.date_range('2014-01-31', periods=len(sample_returns), freq='ME')
    return pd.Series(sample_returns, index=dates, name='asset')


@pytest.fixture
def streak_returns():
    """Short series with two losing streaks: periods 1-2 and period 4."""
    return [0.01, -0.02, -0.01, 0.03, -0.05]


@pytest.fixture
def small_returns():
    """Four returns with two below and two above zero."""
    return [-0.02, 0.01, 0.03, -0.04]
