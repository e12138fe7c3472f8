"""
Moment Statistics Module

Population and sample moments of return series: variance, covariance,
standard deviation, skewness, kurtosis, partial moments and semi-variance.
Pure functions over 1-D numeric sequences; every sample estimator is derived
from its population counterpart by the usual small-sample rescale.
"""

from typing import Optional

import numpy as np
import structlog

from ..exceptions import (
    DegenerateSampleError,
    DivisionByZeroError,
    InsufficientDataError,
    InvalidParameterError,
)
from .validation import (
    ArrayLike,
    as_array,
    check_frequency,
    require_length,
    require_same_length,
)

logger = structlog.get_logger(__name__)


def _deviations(arr: np.ndarray) -> np.ndarray:
    """Deviations from the mean; exactly zero when every value is identical."""
    if np.ptp(arr) == 0:
        return np.zeros(len(arr))
    return arr - np.mean(arr)


def mean(data: ArrayLike) -> float:
    """Arithmetic mean of a series.

    Raises:
        InsufficientDataError: If the series is empty
    """
    arr = as_array(data)
    require_length(arr, 1, "mean")
    return float(np.mean(arr))


def variance_population(data: ArrayLike) -> float:
    """Population variance: sum of squared deviations divided by N.

    Args:
        data: Return series

    Returns:
        Variance as a decimal

    Raises:
        InsufficientDataError: If the series is empty
    """
    arr = as_array(data)
    require_length(arr, 1, "variance_population")
    deviations = _deviations(arr)
    return float(np.sum(deviations ** 2) / len(arr))


def variance_sample(data: ArrayLike) -> float:
    """Sample variance, rescaled from the population variance by N/(N-1).

    Raises:
        InsufficientDataError: If fewer than 2 observations
    """
    arr = as_array(data)
    require_length(arr, 2, "variance_sample")
    n = len(arr)
    return variance_population(arr) * n / (n - 1)


def covariance_population(x: ArrayLike, y: ArrayLike) -> float:
    """Population covariance: mean cross-product of deviations from each mean.

    Args:
        x: First return series
        y: Second return series, same length as x

    Returns:
        Covariance as a decimal

    Raises:
        LengthMismatchError: If x and y differ in length
        InsufficientDataError: If the series are empty
    """
    a = as_array(x, "x")
    b = as_array(y, "y")
    require_same_length(a, b, "x", "y")
    require_length(a, 1, "covariance_population")

    cross = _deviations(a) * _deviations(b)
    return float(np.sum(cross) / len(a))


def covariance_sample(x: ArrayLike, y: ArrayLike) -> float:
    """Sample covariance, population covariance scaled by N/(N-1)."""
    a = as_array(x, "x")
    b = as_array(y, "y")
    require_same_length(a, b, "x", "y")
    require_length(a, 2, "covariance_sample")
    n = len(a)
    return covariance_population(a, b) * n / (n - 1)


def std_dev_population(data: ArrayLike) -> float:
    return float(np.sqrt(variance_population(data)))


def std_dev_sample(data: ArrayLike) -> float:
    return float(np.sqrt(variance_sample(data)))


def _standardized(arr: np.ndarray, sd: float, statistic: str) -> np.ndarray:
    if sd == 0:
        logger.warning(f"{statistic}: zero standard deviation", n=len(arr))
        raise DivisionByZeroError("Standard deviation")
    return _deviations(arr) / sd


def skewness_population(data: ArrayLike) -> float:
    """Population skewness: mean of cubed z-scores (population SD).

    See https://www.itl.nist.gov/div898/handbook/eda/section3/eda35b.htm

    Raises:
        InsufficientDataError: If the series is empty
        DivisionByZeroError: If every observation is identical
    """
    arr = as_array(data)
    require_length(arr, 1, "skewness_population")
    z = _standardized(arr, std_dev_population(arr), "skewness_population")
    return float(np.sum(z ** 3) / len(arr))


def skewness_sample(data: ArrayLike) -> float:
    """Sample skewness: population skewness * sqrt(N(N-1)) / (N-2).

    Matches the spreadsheet SKEW function.

    Raises:
        DegenerateSampleError: If N <= 2
    """
    arr = as_array(data)
    n = len(arr)
    if n <= 2:
        raise DegenerateSampleError("skewness_sample", 3, n)
    return skewness_population(arr) * np.sqrt(n * (n - 1)) / (n - 2)


def kurtosis_population(data: ArrayLike) -> float:
    """Population kurtosis: mean of z-scores to the fourth power."""
    arr = as_array(data)
    require_length(arr, 1, "kurtosis_population")
    z = _standardized(arr, std_dev_population(arr), "kurtosis_population")
    return float(np.sum(z ** 4) / len(arr))


def kurtosis_population_excess(data: ArrayLike) -> float:
    return kurtosis_population(data) - 3.0


def kurtosis_sample(data: ArrayLike) -> float:
    """Sample kurtosis (not excess).

    Sum of fourth-power z-scores, standardized with the sample SD, scaled by
    N(N+1) / ((N-1)(N-2)(N-3)).

    Raises:
        DegenerateSampleError: If N <= 3
    """
    arr = as_array(data)
    n = len(arr)
    if n <= 3:
        raise DegenerateSampleError("kurtosis_sample", 4, n)
    z = _standardized(arr, std_dev_sample(arr), "kurtosis_sample")
    return float(np.sum(z ** 4) * (n * (n + 1) / ((n - 1) * (n - 2) * (n - 3))))


def kurtosis_sample_excess(data: ArrayLike) -> float:
    """Unbiased excess kurtosis; same result as the spreadsheet KURT function.

    Raises:
        DegenerateSampleError: If N <= 3
    """
    arr = as_array(data)
    n = len(arr)
    if n <= 3:
        raise DegenerateSampleError("kurtosis_sample_excess", 4, n)
    return kurtosis_sample(arr) - 3 * (n - 1) ** 2 / ((n - 2) * (n - 3))


def _partial_moment(
    arr: np.ndarray,
    target: Optional[float],
    degree: float,
    frequency: float,
    statistic: str,
    upper: bool,
) -> float:
    require_length(arr, 1, statistic)
    if degree < 0:
        raise InvalidParameterError("degree", degree, ">= 0")
    frequency = check_frequency(frequency)

    tgt = float(np.mean(arr)) if target is None else float(target)
    if upper:
        shortfall = arr[arr > tgt] - tgt
    else:
        shortfall = tgt - arr[arr < tgt]

    # Normalized by the full sample size, not the count beyond the target
    return float(np.sum(shortfall ** degree) / len(arr)) * frequency


def lower_partial_moment(
    data: ArrayLike,
    target: Optional[float] = None,
    degree: float = 2.0,
    frequency: float = 1,
) -> float:
    """Lower partial moment of a return series.

    LPM = sum over x < target of (target - x)^degree, divided by N (the full
    series length), multiplied by frequency.

    Args:
        data: Return series
        target: Target return; defaults to the series mean
        degree: Moment order (2 = downside variance), must be >= 0
        frequency: Periods per year for linear annualization (1 = none)

    Raises:
        InvalidParameterError: If degree < 0 or frequency <= 0
        InsufficientDataError: If the series is empty
    """
    arr = as_array(data)
    return _partial_moment(arr, target, degree, frequency, "lower_partial_moment", upper=False)


def upper_partial_moment(
    data: ArrayLike,
    target: Optional[float] = None,
    degree: float = 2.0,
    frequency: float = 1,
) -> float:
    """Upper partial moment; mirror of lower_partial_moment above the target."""
    arr = as_array(data)
    return _partial_moment(arr, target, degree, frequency, "upper_partial_moment", upper=True)


def semi_variance_population(data: ArrayLike, target: Optional[float] = None) -> float:
    """Population variance of the observations strictly below the target.

    Unlike the partial moments, this is computed on the filtered subset with
    its own count and its own mean.

    Args:
        data: Return series
        target: Threshold; defaults to the series mean

    Raises:
        InsufficientDataError: If no observation lies below the target
    """
    arr = as_array(data)
    require_length(arr, 1, "semi_variance_population")
    tgt = float(np.mean(arr)) if target is None else float(target)

    below = arr[arr < tgt]
    if len(below) == 0:
        raise InsufficientDataError("semi_variance_population (observations below target)", 1, 0)

    return variance_population(below)


def semi_deviation_population(data: ArrayLike, target: Optional[float] = None) -> float:
    return float(np.sqrt(semi_variance_population(data, target)))


def array_diff(a: ArrayLike, b: ArrayLike) -> np.ndarray:
    """Element-wise arithmetic difference a[i] - b[i]."""
    x = as_array(a, "a")
    y = as_array(b, "b")
    require_same_length(x, y, "a", "b")
    return x - y


def array_diff_geometric(a: ArrayLike, b: ArrayLike) -> np.ndarray:
    """Element-wise geometric difference (1 + a[i]) / (1 + b[i]) - 1."""
    x = as_array(a, "a")
    y = as_array(b, "b")
    require_same_length(x, y, "a", "b")
    if np.any(1 + y == 0):
        raise DivisionByZeroError("Benchmark growth factor (1 + b)")
    return (1 + x) / (1 + y) - 1
