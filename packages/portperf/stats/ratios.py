"""
Performance Ratios Module

Risk-adjusted performance measures composed from the moment, drawdown and
regression building blocks: betas, Sharpe, Treynor, Jensen's alpha, M^2,
tracking error, information ratio, Sortino, Omega, Calmar, Ulcer index and
the Fama return decomposition.

Annualization conventions used throughout:
- compounded return: (prod(1 + r))^(frequency / N) - 1
- mean return: mean * frequency (ratio numerators; only Calmar compounds)
- variance: variance * frequency
- standard deviation: SD * sqrt(frequency)
With frequency = 1 every measure is reported per period.
"""

from typing import Optional, Union

import numpy as np
import pandas as pd
import structlog

from ..config import DEFAULT_FREQUENCY
from ..exceptions import (
    DivisionByZeroError,
    InsufficientDataError,
    InvalidParameterError,
    LengthMismatchError,
)
from .drawdowns import drawdowns, max_drawdown
from .moments import (
    covariance_population,
    lower_partial_moment,
    std_dev_population,
    std_dev_sample,
    upper_partial_moment,
    variance_population,
    variance_sample,
)
from .validation import (
    ArrayLike,
    as_array,
    check_frequency,
    require_length,
    require_same_length,
)

logger = structlog.get_logger(__name__)

RiskFree = Union[None, float, ArrayLike]


def _risk_free(risk_free: RiskFree, n: int) -> np.ndarray:
    """Expand a risk-free input to one rate per period.

    None means zero; a scalar or single-element sequence is repeated.
    """
    if risk_free is None:
        return np.zeros(n)
    if np.isscalar(risk_free):
        risk_free = [risk_free]

    rf = as_array(risk_free, "risk_free")
    if len(rf) == 1:
        return np.full(n, rf[0])
    if len(rf) != n:
        raise LengthMismatchError("risk_free", len(rf), "asset", n)
    return rf


def _paired(asset: ArrayLike, market: ArrayLike, market_name: str = "market"):
    a = as_array(asset, "asset")
    m = as_array(market, market_name)
    require_same_length(a, m, "asset", market_name)
    return a, m


# ---------------------------------------------------------------------------
# Annualization
# ---------------------------------------------------------------------------

def annualized_return(returns: ArrayLike, frequency: float = DEFAULT_FREQUENCY) -> float:
    """Geometric annualized return: (prod(1 + r))^(frequency / N) - 1.

    Raises:
        InsufficientDataError: If returns is empty
        InvalidParameterError: If frequency <= 0 or the series loses more
            than 100% (the growth factor is not positive)
    """
    arr = as_array(returns)
    require_length(arr, 1, "annualized_return")
    freq = check_frequency(frequency)

    growth = float(np.prod(1 + arr))
    if growth <= 0:
        raise InvalidParameterError("returns", f"cumulative growth {growth}", "positive to annualize")

    return growth ** (freq / len(arr)) - 1


def annualized_variance(
    returns: ArrayLike,
    frequency: float = DEFAULT_FREQUENCY,
    sample: bool = True,
) -> float:
    """Variance scaled linearly by frequency."""
    freq = check_frequency(frequency)
    variance = variance_sample(returns) if sample else variance_population(returns)
    return variance * freq


def annualized_std_dev(
    returns: ArrayLike,
    frequency: float = DEFAULT_FREQUENCY,
    sample: bool = True,
) -> float:
    """Standard deviation scaled by sqrt(frequency)."""
    freq = check_frequency(frequency)
    sd = std_dev_sample(returns) if sample else std_dev_population(returns)
    return sd * np.sqrt(freq)


# ---------------------------------------------------------------------------
# Systematic risk
# ---------------------------------------------------------------------------

def beta(asset: ArrayLike, market: ArrayLike) -> float:
    """Beta (systematic risk): cov(asset, market) / var(market).

    Raises:
        LengthMismatchError: If the series differ in length
        DivisionByZeroError: If market variance is exactly zero
    """
    a, m = _paired(asset, market)
    market_var = variance_population(m)
    if market_var == 0:
        logger.warning("beta: zero market variance", n=len(m))
        raise DivisionByZeroError("Market variance")
    return covariance_population(a, m) / market_var


def adjusted_beta(asset: ArrayLike, market: ArrayLike) -> float:
    """Blume-adjusted beta, shrunk toward 1.0: 2/3 * beta + 1/3."""
    return beta(asset, market) * 2.0 / 3.0 + 1.0 / 3.0


def _conditional_beta(asset: ArrayLike, market: ArrayLike, up: bool) -> float:
    a, m = _paired(asset, market)
    mask = m > 0 if up else m < 0
    if not mask.any():
        name = "bull_beta (up-market periods)" if up else "bear_beta (down-market periods)"
        raise InsufficientDataError(name, 1, 0)
    return beta(a[mask], m[mask])


def bull_beta(asset: ArrayLike, market: ArrayLike) -> float:
    """Beta estimated only over periods where the market return is positive."""
    return _conditional_beta(asset, market, up=True)


def bear_beta(asset: ArrayLike, market: ArrayLike) -> float:
    """Beta estimated only over periods where the market return is negative."""
    return _conditional_beta(asset, market, up=False)


def beta_timing_ratio(asset: ArrayLike, market: ArrayLike) -> float:
    """Bull beta / bear beta; above 1 suggests successful market timing."""
    bear = bear_beta(asset, market)
    if bear == 0:
        raise DivisionByZeroError("Bear beta")
    return bull_beta(asset, market) / bear


def market_risk(asset: ArrayLike, market: ArrayLike, frequency: float = DEFAULT_FREQUENCY) -> float:
    """Systematic variance: beta^2 * var(market) * frequency."""
    freq = check_frequency(frequency)
    _, m = _paired(asset, market)
    return beta(asset, market) ** 2 * variance_population(m) * freq


def unique_risk(asset: ArrayLike, market: ArrayLike, frequency: float = DEFAULT_FREQUENCY) -> float:
    """Diversifiable variance: var(asset) * frequency - market risk."""
    freq = check_frequency(frequency)
    a, _ = _paired(asset, market)
    return variance_population(a) * freq - market_risk(asset, market, freq)


# ---------------------------------------------------------------------------
# Risk-adjusted return
# ---------------------------------------------------------------------------

def sharpe_ratio(
    asset: ArrayLike,
    risk_free: RiskFree = None,
    frequency: float = DEFAULT_FREQUENCY,
) -> float:
    """Sharpe ratio: annualized mean excess return / annualized volatility.

    Numerator is mean(asset - rf) * frequency, denominator the sample SD of
    the asset * sqrt(frequency).

    Raises:
        InsufficientDataError: If fewer than 2 returns
        DivisionByZeroError: If the asset SD is zero
    """
    a = as_array(asset, "asset")
    freq = check_frequency(frequency)
    rf = _risk_free(risk_free, len(a))

    sd = std_dev_sample(a)
    if sd == 0:
        raise DivisionByZeroError("Asset standard deviation")

    return float(np.mean(a - rf)) * freq / (sd * np.sqrt(freq))


def treynor_index(
    asset: ArrayLike,
    risk_free: RiskFree = None,
    *,
    asset_beta: Optional[float] = None,
    market: Optional[ArrayLike] = None,
    frequency: float = DEFAULT_FREQUENCY,
) -> float:
    """Treynor index: mean excess return * frequency / beta.

    Pass either a precomputed asset_beta or the market returns to estimate it.

    Raises:
        InvalidParameterError: If neither asset_beta nor market is given
        DivisionByZeroError: If beta is zero
    """
    a = as_array(asset, "asset")
    require_length(a, 1, "treynor_index")
    freq = check_frequency(frequency)
    rf = _risk_free(risk_free, len(a))

    if asset_beta is None:
        if market is None:
            raise InvalidParameterError("asset_beta", None, "given when market returns are omitted")
        asset_beta = beta(a, market)

    if asset_beta == 0:
        raise DivisionByZeroError("Beta")

    return float(np.mean(a - rf)) * freq / asset_beta


def jensens_alpha(
    asset: ArrayLike,
    market: ArrayLike,
    risk_free: RiskFree = None,
    frequency: float = DEFAULT_FREQUENCY,
) -> float:
    """Jensen's alpha: (mean excess asset - beta * mean excess market) * frequency."""
    a, m = _paired(asset, market)
    freq = check_frequency(frequency)
    rf = _risk_free(risk_free, len(a))

    b = beta(a, m)
    return (float(np.mean(a - rf)) - b * float(np.mean(m - rf))) * freq


def m_squared(
    asset: ArrayLike,
    market: ArrayLike,
    risk_free: RiskFree = None,
    frequency: float = DEFAULT_FREQUENCY,
) -> float:
    """Modigliani & Modigliani risk-adjusted return.

    The asset levered (or de-levered) with the risk-free asset to the market's
    volatility: (sd_m / sd_a) * (mean_a - mean_rf) + mean_rf, means scaled by
    frequency. Sample SDs.
    """
    a, m = _paired(asset, market)
    freq = check_frequency(frequency)
    rf = _risk_free(risk_free, len(a))

    sd_a = std_dev_sample(a)
    if sd_a == 0:
        raise DivisionByZeroError("Asset standard deviation")
    sd_m = std_dev_sample(m)

    rf_mean = float(np.mean(rf))
    return ((sd_m / sd_a) * (float(np.mean(a)) - rf_mean) + rf_mean) * freq


def tracking_error(
    asset: ArrayLike,
    benchmark: ArrayLike,
    frequency: float = DEFAULT_FREQUENCY,
) -> float:
    """Sample SD of active returns (asset - benchmark) * sqrt(frequency)."""
    a, b = _paired(asset, benchmark, "benchmark")
    freq = check_frequency(frequency)
    return std_dev_sample(a - b) * np.sqrt(freq)


def information_ratio(
    asset: ArrayLike,
    benchmark: ArrayLike,
    frequency: float = DEFAULT_FREQUENCY,
) -> float:
    """Mean active return * frequency / tracking error.

    Raises:
        DivisionByZeroError: If the tracking error is zero
    """
    a, b = _paired(asset, benchmark, "benchmark")
    freq = check_frequency(frequency)

    te = tracking_error(a, b, freq)
    if te == 0:
        raise DivisionByZeroError("Tracking error")
    return float(np.mean(a - b)) * freq / te


def sortino_ratio(
    returns: ArrayLike,
    target: float = 0.0,
    frequency: float = DEFAULT_FREQUENCY,
) -> float:
    """Sortino ratio: (mean - target) * frequency / downside deviation.

    Downside deviation is sqrt(LPM of degree 2 about the target) scaled by
    sqrt(frequency). target is a per-period return.

    Raises:
        DivisionByZeroError: If no return falls below the target
    """
    arr = as_array(returns)
    freq = check_frequency(frequency)

    downside = np.sqrt(lower_partial_moment(arr, target, 2.0)) * np.sqrt(freq)
    if downside == 0:
        raise DivisionByZeroError("Downside deviation")
    return (float(np.mean(arr)) - target) * freq / downside


def omega_ratio(returns: ArrayLike, target: float = 0.0) -> float:
    """Omega ratio: UPM(1) / LPM(1) about a per-period target."""
    arr = as_array(returns)
    lpm = lower_partial_moment(arr, target, 1.0)
    if lpm == 0:
        raise DivisionByZeroError("Lower partial moment")
    return upper_partial_moment(arr, target, 1.0) / lpm


# ---------------------------------------------------------------------------
# Drawdown based
# ---------------------------------------------------------------------------

def calmar_ratio(returns: ArrayLike, frequency: float = DEFAULT_FREQUENCY) -> float:
    """Geometric annualized return / |maximum drawdown|.

    Raises:
        DivisionByZeroError: If the series never draws down
    """
    mdd = max_drawdown(returns)
    if mdd == 0:
        raise DivisionByZeroError("Maximum drawdown")
    return annualized_return(returns, frequency) / abs(mdd)


def ulcer_index(returns: ArrayLike) -> float:
    """Root mean square of the per-period drawdowns (index[1..N])."""
    arr = as_array(returns)
    require_length(arr, 1, "ulcer_index")
    dd = drawdowns(arr)[1:]
    return float(np.sqrt(np.mean(dd ** 2)))


# ---------------------------------------------------------------------------
# Fama decomposition
# ---------------------------------------------------------------------------

def fama_decomposition(
    asset: ArrayLike,
    market: ArrayLike,
    risk_free: RiskFree = None,
    target_beta: Optional[float] = None,
    frequency: float = DEFAULT_FREQUENCY,
) -> pd.Series:
    """Fama (1972) decomposition of the asset's excess return.

    With R = mean return * frequency and beta the asset beta:
        total_risk_premium = R_a - R_f
        risk               = beta * (R_m - R_f)
        selectivity        = total_risk_premium - risk   (Jensen's alpha)
        diversification    = (sd_a / sd_m - beta) * (R_m - R_f)
        net_selectivity    = selectivity - diversification
    and, when target_beta is given,
        investors_risk     = target_beta * (R_m - R_f)
        managers_risk      = (beta - target_beta) * (R_m - R_f)

    Returns:
        Series indexed by component label, in the order above

    Raises:
        LengthMismatchError: If the series differ in length
        DivisionByZeroError: If market variance is zero
    """
    a, m = _paired(asset, market)
    freq = check_frequency(frequency)
    rf = _risk_free(risk_free, len(a))

    b = beta(a, m)
    rf_mean = float(np.mean(rf)) * freq
    asset_premium = float(np.mean(a)) * freq - rf_mean
    market_premium = float(np.mean(m)) * freq - rf_mean

    risk = b * market_premium
    selectivity = asset_premium - risk
    diversification = (std_dev_population(a) / std_dev_population(m) - b) * market_premium

    components = {
        "total_risk_premium": asset_premium,
        "risk": risk,
        "selectivity": selectivity,
        "diversification": diversification,
        "net_selectivity": selectivity - diversification,
    }

    if target_beta is not None:
        components["investors_risk"] = target_beta * market_premium
        components["managers_risk"] = (b - target_beta) * market_premium

    logger.debug(
        "fama_decomposition: decomposed",
        n=len(a),
        beta=b,
        target_beta=target_beta,
        total_risk_premium=asset_premium,
    )

    return pd.Series(components, name="fama_decomposition", dtype=float)
