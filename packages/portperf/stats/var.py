"""
Value-at-Risk Module

Single-series VaR estimators expressed as a return quantile:
- parametric (normal) VaR
- Cornish-Fisher modified parametric VaR
- historical simulation VaR with exclusive-percentile interpolation

Results are returns, not loss amounts: a 95% VaR of -0.07 means a 5% chance
of losing 7% or more in one period.
"""

import math

import numpy as np
import structlog

from ..config import DEFAULT_CONFIDENCE
from ..exceptions import OutOfRangeError
from .distribution import inverse_normal_cdf
from .moments import kurtosis_population_excess, skewness_population, std_dev_population
from .validation import ArrayLike, as_array, check_confidence, require_length

logger = structlog.get_logger(__name__)


def parametric_var(returns: ArrayLike, confidence: float = DEFAULT_CONFIDENCE) -> float:
    """Parametric Value-at-Risk assuming normally distributed returns.

    VaR = mean + z * sigma

    where z = inverse_normal_cdf(1 - confidence) (negative for confidence
    above 0.5) and sigma is the population standard deviation.

    Args:
        returns: Periodic returns
        confidence: Confidence level (e.g., 0.95 for 95% VaR)

    Returns:
        VaR as a periodic return

    Raises:
        InvalidParameterError: If confidence is outside (0, 1)
        InsufficientDataError: If returns is empty
    """
    alpha = check_confidence(confidence)
    arr = as_array(returns)
    require_length(arr, 1, "parametric_var")

    z_score = inverse_normal_cdf(alpha, 0.0, 1.0)

    var = float(np.mean(arr)) + z_score * std_dev_population(arr)

    logger.debug(
        "parametric_var: computed",
        n=len(arr),
        confidence=confidence,
        z_score=z_score,
        var=var,
    )

    return var


def cornish_fisher_quantile(z: float, skew: float, kurt_excess: float) -> float:
    """Adjust a standard normal quantile for skewness and excess kurtosis."""
    return (
        z
        + (z ** 2 - 1) / 6 * skew
        + (z ** 3 - 3 * z) / 24 * kurt_excess
        - (2 * z ** 3 - 5 * z) / 36 * skew ** 2
    )


def modified_parametric_var(returns: ArrayLike, confidence: float = DEFAULT_CONFIDENCE) -> float:
    """Parametric VaR with a Cornish-Fisher correction.

    The normal quantile z is replaced by

        z + (z^2 - 1)/6 * S + (z^3 - 3z)/24 * K - (2z^3 - 5z)/36 * S^2

    where S is population skewness and K population excess kurtosis, then
    VaR = mean + z_adj * sigma_pop.

    Raises:
        InvalidParameterError: If confidence is outside (0, 1)
        DivisionByZeroError: If the series has zero dispersion
    """
    alpha = check_confidence(confidence)
    arr = as_array(returns)
    require_length(arr, 1, "modified_parametric_var")

    z_score = inverse_normal_cdf(alpha, 0.0, 1.0)
    skew = skewness_population(arr)
    kurt_excess = kurtosis_population_excess(arr)
    z_adj = cornish_fisher_quantile(z_score, skew, kurt_excess)

    var = float(np.mean(arr)) + z_adj * std_dev_population(arr)

    logger.debug(
        "modified_parametric_var: computed",
        n=len(arr),
        confidence=confidence,
        skew=skew,
        kurt_excess=kurt_excess,
        z_adjusted=z_adj,
        var=var,
    )

    return var


def historical_simulation_var(returns: ArrayLike, confidence: float = DEFAULT_CONFIDENCE) -> float:
    """Historical-simulation VaR (exclusive percentile of the returns).

    With returns sorted ascending and alpha = 1 - confidence, the 0-indexed
    target rank is r = alpha * (N + 1) - 1. The result interpolates linearly
    between the order statistics at floor(r) and floor(r) + 1, matching the
    spreadsheet PERCENTILE.EXC convention.

    Raises:
        InvalidParameterError: If confidence is outside (0, 1)
        OutOfRangeError: If r falls outside [0, N-1] (too few observations
            in the tail for this confidence)
    """
    alpha = check_confidence(confidence)
    arr = as_array(returns)
    require_length(arr, 1, "historical_simulation_var")

    ordered = np.sort(arr)
    n = len(ordered)
    position = alpha * (n + 1) - 1

    if position < 0 or position > n - 1:
        logger.warning(
            "historical_simulation_var: rank outside data",
            n=n,
            confidence=confidence,
            position=position,
        )
        raise OutOfRangeError(position, n)

    lower = int(math.floor(position))
    if lower == n - 1:
        return float(ordered[lower])

    weight = position - lower
    return float(ordered[lower] + (ordered[lower + 1] - ordered[lower]) * weight)
