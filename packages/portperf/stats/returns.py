"""
Return Construction Module

Holding-period and sub-period returns from a price series with optional
cash flows (dividends, coupons), plus splitting a periodic return series
into calendar-year rows.

Cash-flow alignment:
- same length as prices: cf[i] is received at prices[i]; cf[0] is ignored
- shorter than prices: cf[0] goes with prices[1], cf[1] with prices[2], ...
  and periods past the end of cf have no cash flow
- longer than prices: rejected
"""

from typing import Optional

import numpy as np
import pandas as pd
import structlog

from ..exceptions import DivisionByZeroError, InvalidParameterError, LengthMismatchError
from .validation import ArrayLike, as_array, check_frequency, require_length

logger = structlog.get_logger(__name__)


def _prices_and_flows(prices: ArrayLike, cash_flows: Optional[ArrayLike]):
    """Validate prices and return (prices, per-period cash flows of length N)."""
    p = as_array(prices, "prices")
    require_length(p, 2, "price returns")

    periods = len(p) - 1
    if cash_flows is None:
        return p, np.zeros(periods)

    cf = as_array(cash_flows, "cash_flows")
    if len(cf) > len(p):
        raise LengthMismatchError("cash_flows", len(cf), "prices", len(p))

    if len(cf) == len(p):
        # Drop the period-0 flow
        return p, cf[1:]

    flows = np.zeros(periods)
    flows[:len(cf)] = cf
    return p, flows


def sub_period_returns(prices: ArrayLike, cash_flows: Optional[ArrayLike] = None) -> np.ndarray:
    """Return for each period: (P_t + CF_t) / P_{t-1} - 1.

    Args:
        prices: Prices at each period boundary (N + 1 values)
        cash_flows: Optional cash flows, aligned as described in the module docs

    Returns:
        Array of N periodic returns

    Raises:
        InsufficientDataError: If fewer than 2 prices
        LengthMismatchError: If there are more cash flows than prices
        DivisionByZeroError: If any beginning-of-period price is zero
    """
    p, flows = _prices_and_flows(prices, cash_flows)

    if np.any(p[:-1] == 0):
        logger.warning("sub_period_returns: zero beginning price", zero_count=int((p[:-1] == 0).sum()))
        raise DivisionByZeroError("Beginning-of-period price")

    return (p[1:] + flows) / p[:-1] - 1


def log_sub_period_returns(prices: ArrayLike, cash_flows: Optional[ArrayLike] = None) -> np.ndarray:
    """Continuously compounded period returns: ln(1 + sub-period return)."""
    return np.log1p(sub_period_returns(prices, cash_flows))


def hpr_with_reinvestment(prices: ArrayLike, cash_flows: Optional[ArrayLike] = None) -> float:
    """Holding-period return assuming cash flows are reinvested each period.

    Compounds the sub-period returns: prod(1 + r_t) - 1.
    """
    returns = sub_period_returns(prices, cash_flows)
    return float(np.prod(1 + returns) - 1)


def holding_period_return(prices: ArrayLike, cash_flows: Optional[ArrayLike] = None) -> float:
    """Holding-period return without reinvestment.

    HPR = (P_end + sum of cash flows) / P_begin - 1

    A period-0 cash flow (cash_flows as long as prices) is excluded.

    Raises:
        InsufficientDataError: If fewer than 2 prices
        LengthMismatchError: If there are more cash flows than prices
        DivisionByZeroError: If the beginning price is zero
    """
    p, flows = _prices_and_flows(prices, cash_flows)

    if p[0] == 0:
        raise DivisionByZeroError("Beginning price")

    return float((p[-1] + np.sum(flows)) / p[0] - 1)


def split_to_years(returns: ArrayLike, frequency: int) -> pd.DataFrame:
    """Arrange periodic returns into one row per year.

    Assumes the first return is the first period of a year. The final row is
    padded with zeros when the series does not fill a whole year.

    Args:
        returns: Periodic returns
        frequency: Periods per year (12 = monthly, 52 = weekly, ...)

    Returns:
        DataFrame with one row per year and columns 1..frequency

    Raises:
        InsufficientDataError: If returns is empty
        InvalidParameterError: If frequency is not a positive whole number
    """
    arr = as_array(returns)
    require_length(arr, 1, "split_to_years")
    freq = check_frequency(frequency)
    if freq != int(freq):
        raise InvalidParameterError("frequency", frequency, "a whole number of periods per year")
    freq = int(freq)

    remainder = len(arr) % freq
    if remainder:
        arr = np.concatenate([arr, np.zeros(freq - remainder)])

    years = len(arr) // freq
    frame = pd.DataFrame(
        arr.reshape(years, freq),
        index=pd.RangeIndex(1, years + 1, name="year"),
        columns=pd.RangeIndex(1, freq + 1, name="period"),
    )

    logger.debug(
        "split_to_years: returns split",
        num_years=years,
        frequency=freq,
        padded_periods=(freq - remainder) if remainder else 0,
    )

    return frame


def annual_returns(returns: ArrayLike, frequency: int) -> pd.Series:
    """Compounded return of each year row produced by split_to_years."""
    frame = split_to_years(returns, frequency)
    return (1 + frame).prod(axis=1) - 1
