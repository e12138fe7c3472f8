"""
Distribution Approximation Module

Inverse standard-normal CDF (Wichura's AS241 rational approximation) and the
Jarque-Bera normality test built on the population moments.

Reference:
    Wichura, M.J. (1988). "Algorithm AS241: The Percentage Points of the
    Normal Distribution". Applied Statistics 37(3): 477-484.
"""

import math
from typing import NamedTuple

import structlog
from scipy import stats

from ..exceptions import DegenerateSampleError, InvalidParameterError
from .moments import kurtosis_population_excess, skewness_population
from .validation import ArrayLike, as_array

logger = structlog.get_logger(__name__)


def _polevl(x: float, coefficients: tuple) -> float:
    """Horner evaluation, highest-order coefficient first."""
    acc = 0.0
    for c in coefficients:
        acc = acc * x + c
    return acc


# Central region, |p - 0.5| <= 0.425, polynomials in r = 0.180625 - q^2
_CENTRAL_NUM = (
    2.5090809287301226727e+3, 3.3430575583588128105e+4,
    6.7265770927008700853e+4, 4.5921953931549871457e+4,
    1.3731693765509461125e+4, 1.9715909503065514427e+3,
    1.3314166789178437745e+2, 3.3871328727963666080e+0,
)
_CENTRAL_DEN = (
    5.2264952788528545610e+3, 2.8729085735721942674e+4,
    3.9307895800092710610e+4, 2.1213794301586595867e+4,
    5.3941960214247511077e+3, 6.8718700749205790830e+2,
    4.2313330701600911252e+1, 1.0,
)

# Intermediate tail, sqrt(-ln(min(p, 1-p))) <= 5, polynomials in y - 1.6
_NEAR_TAIL_NUM = (
    7.74545014278341407640e-4, 2.27238449892691845833e-2,
    2.41780725177450611770e-1, 1.27045825245236838258e+0,
    3.64784832476320460504e+0, 5.76949722146069140550e+0,
    4.63033784615654529590e+0, 1.42343711074968357734e+0,
)
_NEAR_TAIL_DEN = (
    1.05075007164441684324e-9, 5.47593808499534494600e-4,
    1.51986665636164571966e-2, 1.48103976427480074590e-1,
    6.89767334985100004550e-1, 1.67638483018380384940e+0,
    2.05319162663775882187e+0, 1.0,
)

# Far tail, polynomials in y - 5
_FAR_TAIL_NUM = (
    2.01033439929228813265e-7, 2.71155556874348757815e-5,
    1.24266094738807843860e-3, 2.65321895265761230930e-2,
    2.96560571828504891230e-1, 1.78482653991729133580e+0,
    5.46378491116411436990e+0, 6.65790464350110377720e+0,
)
_FAR_TAIL_DEN = (
    2.04426310338993978564e-15, 1.42151175831644588870e-7,
    1.84631831751005468180e-5, 7.86869131145613259100e-4,
    1.48753612908506148525e-2, 1.36929880922735805310e-1,
    5.99832206555887937690e-1, 1.0,
)

CENTRAL_SPLIT = 0.425
TAIL_SPLIT = 5.0


def inverse_normal_cdf(p: float, mu: float = 0.0, sigma: float = 1.0) -> float:
    """Quantile function of the normal distribution N(mu, sigma^2).

    Returns x such that P(X <= x) = p, accurate to double precision
    (about 1e-16 relative) over the full open interval.

    Args:
        p: Probability, strictly between 0 and 1
        mu: Mean of the distribution
        sigma: Standard deviation, must be non-negative; 0 returns mu

    Raises:
        InvalidParameterError: If p is outside (0, 1) or sigma < 0
    """
    if not 0 < p < 1:
        raise InvalidParameterError("p", p, "between 0 and 1 (exclusive)")
    if not sigma >= 0:
        raise InvalidParameterError("sigma", sigma, "non-negative")

    q = p - 0.5
    if abs(q) <= CENTRAL_SPLIT:
        r = 0.180625 - q * q
        x = q * _polevl(r, _CENTRAL_NUM) / _polevl(r, _CENTRAL_DEN)
        return mu + x * sigma

    y = math.sqrt(-math.log(p if q <= 0 else 1.0 - p))
    if y <= TAIL_SPLIT:
        y -= 1.6
        x = _polevl(y, _NEAR_TAIL_NUM) / _polevl(y, _NEAR_TAIL_DEN)
    else:
        y -= TAIL_SPLIT
        x = _polevl(y, _FAR_TAIL_NUM) / _polevl(y, _FAR_TAIL_DEN)

    if q < 0:
        x = -x

    return mu + x * sigma


class JarqueBeraResult(NamedTuple):
    statistic: float
    p_value: float


def jarque_bera(returns: ArrayLike) -> float:
    """Jarque-Bera normality statistic.

    JB = N/6 * (S^2 + K^2 / 4)

    with S the population skewness and K the population excess kurtosis.

    Raises:
        DegenerateSampleError: If N <= 2
    """
    arr = as_array(returns)
    n = len(arr)
    if n <= 2:
        raise DegenerateSampleError("jarque_bera", 3, n)

    skew = skewness_population(arr)
    kurt_excess = kurtosis_population_excess(arr)
    return n / 6 * (skew ** 2 + kurt_excess ** 2 / 4)


def jarque_bera_test(returns: ArrayLike) -> JarqueBeraResult:
    """Jarque-Bera statistic with its asymptotic chi-squared(2) p-value."""
    statistic = jarque_bera(returns)
    p_value = float(stats.chi2.sf(statistic, df=2))

    logger.debug(
        "jarque_bera_test: normality tested",
        statistic=statistic,
        p_value=p_value,
    )

    return JarqueBeraResult(statistic=statistic, p_value=p_value)
