"""
Unit tests for moments.py - Moment Statistics Module

Tests cover:
- Population/sample variance, covariance and standard deviation
- Skewness and kurtosis (population, sample, excess) against scipy
- Lower/upper partial moments (full-N normalization)
- Semi-variance (subset normalization)
- Element-wise arithmetic and geometric differences
- Input validation
"""

import pytest
import numpy as np
import pandas as pd
from numpy.testing import assert_allclose
from scipy import stats

from portperf.exceptions import (
    DegenerateSampleError,
    DivisionByZeroError,
    InsufficientDataError,
    InvalidParameterError,
    LengthMismatchError,
)
from portperf.stats.moments import (
    mean,
    variance_population,
    variance_sample,
    covariance_population,
    covariance_sample,
    std_dev_population,
    std_dev_sample,
    skewness_population,
    skewness_sample,
    kurtosis_population,
    kurtosis_population_excess,
    kurtosis_sample,
    kurtosis_sample_excess,
    lower_partial_moment,
    upper_partial_moment,
    semi_variance_population,
    semi_deviation_population,
    array_diff,
    array_diff_geometric,
)


class TestVariance:
    """Tests for variance and standard deviation functions."""

    def test_population_matches_numpy(self, sample_returns):
        """Population variance divides by N."""
        assert_allclose(variance_population(sample_returns), np.var(sample_returns), rtol=1e-12)

    def test_sample_matches_numpy(self, sample_returns):
        """Sample variance divides by N - 1."""
        assert_allclose(variance_sample(sample_returns), np.var(sample_returns, ddof=1), rtol=1e-12)

    def test_sample_is_rescaled_population(self, sample_returns):
        """variance_sample = variance_population * N / (N - 1)."""
        n = len(sample_returns)
        expected = variance_population(sample_returns) * n / (n - 1)

        assert_allclose(variance_sample(sample_returns), expected, rtol=1e-14)

    def test_std_devs_are_square_roots(self, sample_returns):
        """Standard deviations are the square roots of the variances."""
        assert_allclose(std_dev_population(sample_returns) ** 2, variance_population(sample_returns), rtol=1e-12)
        assert_allclose(std_dev_sample(sample_returns) ** 2, variance_sample(sample_returns), rtol=1e-12)

    def test_single_observation(self):
        """Population variance of one value is zero; sample variance is undefined."""
        assert variance_population([0.05]) == 0.0

        with pytest.raises(InsufficientDataError, match="at least 2"):
            variance_sample([0.05])

    def test_constant_series_is_exactly_zero(self):
        """Identical values have zero dispersion even when the mean rounds."""
        assert variance_population([0.1] * 3) == 0.0
        assert variance_sample([0.1] * 3) == 0.0
        assert std_dev_sample([0.1] * 3) == 0.0
        assert covariance_population([0.1] * 3, [0.01, 0.02, 0.03]) == 0.0

    def test_empty_raises(self):
        """Empty input should raise InsufficientDataError (a ValueError)."""
        with pytest.raises(InsufficientDataError):
            variance_population([])

        with pytest.raises(ValueError):
            mean([])

    def test_accepts_pandas_series(self, sample_returns_series):
        """pandas Series are accepted like any other sequence."""
        assert_allclose(
            variance_population(sample_returns_series),
            variance_population(sample_returns_series.values),
            rtol=1e-15,
        )


class TestCovariance:
    """Tests for covariance functions."""

    def test_population_matches_numpy(self, sample_returns, sample_market):
        """Population covariance divides by N."""
        expected = np.cov(sample_returns, sample_market, ddof=0)[0, 1]

        assert_allclose(covariance_population(sample_returns, sample_market), expected, rtol=1e-12)

    def test_sample_matches_numpy(self, sample_returns, sample_market):
        """Sample covariance divides by N - 1."""
        expected = np.cov(sample_returns, sample_market, ddof=1)[0, 1]

        assert_allclose(covariance_sample(sample_returns, sample_market), expected, rtol=1e-12)

    def test_covariance_with_self_is_variance(self, sample_returns):
        """cov(x, x) = var(x)."""
        assert_allclose(
            covariance_population(sample_returns, sample_returns),
            variance_population(sample_returns),
            rtol=1e-12,
        )

    def test_length_mismatch_raises(self):
        """Series of different lengths should raise LengthMismatchError."""
        with pytest.raises(LengthMismatchError, match="doesn't match"):
            covariance_population([0.01, 0.02, 0.03], [0.01, 0.02])

        with pytest.raises(ValueError):
            covariance_sample([0.01, 0.02, 0.03], [0.01, 0.02])


class TestSkewness:
    """Tests for skewness functions."""

    def test_population_matches_scipy(self, sample_returns):
        """Population skewness equals scipy's biased estimator."""
        expected = stats.skew(sample_returns, bias=True)

        assert_allclose(skewness_population(sample_returns), expected, rtol=1e-10)

    def test_sample_matches_scipy(self, sample_returns):
        """Sample skewness equals scipy's bias-corrected estimator (spreadsheet SKEW)."""
        expected = stats.skew(sample_returns, bias=False)

        assert_allclose(skewness_sample(sample_returns), expected, rtol=1e-10)

    def test_symmetric_data_has_zero_skew(self):
        """Symmetric data should have zero skewness."""
        assert_allclose(skewness_population([-0.02, -0.01, 0.0, 0.01, 0.02]), 0.0, atol=1e-12)

    def test_sample_degenerate_raises(self):
        """Sample skewness needs N > 2."""
        with pytest.raises(DegenerateSampleError):
            skewness_sample([0.01, 0.02])

    def test_degenerate_is_insufficient_data(self):
        """DegenerateSampleError is a kind of InsufficientDataError."""
        with pytest.raises(InsufficientDataError):
            skewness_sample([0.01, 0.02])

    def test_constant_series_raises(self):
        """Zero dispersion should raise DivisionByZeroError."""
        with pytest.raises(DivisionByZeroError):
            skewness_population([0.01, 0.01, 0.01])

        with pytest.raises(ZeroDivisionError):
            skewness_sample([0.01, 0.01, 0.01])

    def test_constant_series_with_rounded_mean_raises(self):
        """[0.1] * 3 is constant although its float mean is not exactly 0.1."""
        with pytest.raises(DivisionByZeroError):
            skewness_population([0.1] * 3)

        with pytest.raises(DivisionByZeroError):
            kurtosis_population([0.1] * 3)


class TestKurtosis:
    """Tests for kurtosis functions."""

    def test_population_matches_scipy(self, sample_returns):
        """Population kurtosis equals scipy's biased Pearson kurtosis."""
        expected = stats.kurtosis(sample_returns, fisher=False, bias=True)

        assert_allclose(kurtosis_population(sample_returns), expected, rtol=1e-10)

    def test_population_excess(self, sample_returns):
        """Excess kurtosis is kurtosis minus 3."""
        expected = stats.kurtosis(sample_returns, fisher=True, bias=True)

        assert_allclose(kurtosis_population_excess(sample_returns), expected, rtol=1e-10)

    def test_sample_excess_matches_scipy(self, sample_returns):
        """Sample excess kurtosis equals scipy's unbiased estimator (spreadsheet KURT)."""
        expected = stats.kurtosis(sample_returns, fisher=True, bias=False)

        assert_allclose(kurtosis_sample_excess(sample_returns), expected, rtol=1e-10)

    def test_sample_excess_known_value(self):
        """Small integer sample against the unbiased (KURT-style) estimator."""
        data = [1, 2, 3, 4, 5, 6, 7, 8, 10]
        expected = stats.kurtosis(data, fisher=True, bias=False)

        assert_allclose(kurtosis_sample_excess(data), expected, rtol=1e-12)

    def test_sample_and_excess_relationship(self, sample_returns):
        """Sample kurtosis and its excess form differ by 3(N-1)^2/((N-2)(N-3))."""
        n = len(sample_returns)
        adjustment = 3 * (n - 1) ** 2 / ((n - 2) * (n - 3))

        assert_allclose(
            kurtosis_sample(sample_returns) - kurtosis_sample_excess(sample_returns),
            adjustment,
            rtol=1e-12,
        )

    def test_sample_degenerate_raises(self):
        """Sample kurtosis needs N > 3."""
        with pytest.raises(DegenerateSampleError):
            kurtosis_sample([0.01, 0.02, 0.03])

        with pytest.raises(DegenerateSampleError):
            kurtosis_sample_excess([0.01, 0.02, 0.03])


class TestPartialMoments:
    """Tests for lower/upper partial moments."""

    def test_lower_partial_moment_full_n(self, small_returns):
        """LPM divides by the full N, not by the number of shortfalls."""
        # (0.02^2 + 0.04^2) / 4
        assert_allclose(lower_partial_moment(small_returns, 0.0, 2), 0.0005, rtol=1e-12)

    def test_upper_partial_moment_full_n(self, small_returns):
        """UPM divides by the full N."""
        # (0.01^2 + 0.03^2) / 4
        assert_allclose(upper_partial_moment(small_returns, 0.0, 2), 0.00025, rtol=1e-12)

    def test_default_target_is_mean(self, small_returns):
        """Omitted target uses the series mean (-0.005)."""
        # ((0.015)^2 + (0.035)^2) / 4
        assert_allclose(lower_partial_moment(small_returns), 0.0003625, rtol=1e-12)

    def test_degree_zero_counts_shortfalls(self, small_returns):
        """Degree 0 gives the fraction of observations below target."""
        assert_allclose(lower_partial_moment(small_returns, 0.0, 0), 0.5, rtol=1e-12)

    def test_frequency_scales_linearly(self, small_returns):
        """Frequency annualizes by simple multiplication."""
        assert_allclose(
            lower_partial_moment(small_returns, 0.0, 2, frequency=12),
            12 * lower_partial_moment(small_returns, 0.0, 2),
            rtol=1e-12,
        )

    def test_negative_degree_raises(self, small_returns):
        """Degree must be >= 0."""
        with pytest.raises(InvalidParameterError, match="degree"):
            lower_partial_moment(small_returns, 0.0, -1)

        with pytest.raises(InvalidParameterError, match="degree"):
            upper_partial_moment(small_returns, 0.0, -0.5)

    def test_nothing_below_target_is_zero(self):
        """No shortfall gives an LPM of zero."""
        assert lower_partial_moment([0.01, 0.02], 0.0, 2) == 0.0


class TestSemiVariance:
    """Tests for semi-variance and semi-deviation."""

    def test_semi_variance_uses_subset_count(self, small_returns):
        """Semi-variance is the population variance of the sub-target subset."""
        # Subset [-0.02, -0.04], mean -0.03
        assert_allclose(semi_variance_population(small_returns, 0.0), 0.0001, rtol=1e-10)

    def test_semi_variance_differs_from_lpm(self, small_returns):
        """The two downside measures normalize differently."""
        assert semi_variance_population(small_returns, 0.0) != pytest.approx(
            lower_partial_moment(small_returns, 0.0, 2)
        )

    def test_semi_deviation_is_root(self, small_returns):
        """Semi-deviation is the square root of semi-variance."""
        assert_allclose(semi_deviation_population(small_returns, 0.0), 0.01, rtol=1e-10)

    def test_empty_subset_raises(self):
        """No observation below target should raise InsufficientDataError."""
        with pytest.raises(InsufficientDataError, match="below target"):
            semi_variance_population([0.01, 0.02, 0.03], 0.0)


class TestArrayDiff:
    """Tests for element-wise differences."""

    def test_arithmetic(self):
        """a - b element-wise."""
        assert_allclose(array_diff([0.05, 0.02], [0.03, 0.04]), [0.02, -0.02], atol=1e-15)

    def test_geometric(self):
        """(1 + a) / (1 + b) - 1 element-wise."""
        result = array_diff_geometric([0.10, 0.0], [0.10, 0.25])

        assert_allclose(result, [0.0, -0.2], atol=1e-15)

    def test_length_mismatch_raises(self):
        """Unequal lengths should raise LengthMismatchError."""
        with pytest.raises(LengthMismatchError):
            array_diff([0.01], [0.01, 0.02])

        with pytest.raises(LengthMismatchError):
            array_diff_geometric([0.01], [0.01, 0.02])


class TestInputValidation:
    """Tests for shared input checks."""

    def test_nan_rejected(self):
        """NaN values are not valid returns."""
        with pytest.raises(InvalidParameterError, match="finite"):
            variance_population([0.01, np.nan, 0.02])

    def test_inf_rejected(self):
        """Infinite values are not valid returns."""
        with pytest.raises(InvalidParameterError):
            mean([0.01, np.inf])

    def test_two_dimensional_rejected(self):
        """Only 1-D sequences are accepted."""
        with pytest.raises(InvalidParameterError, match="one-dimensional"):
            mean([[0.01, 0.02], [0.03, 0.04]])

    def test_input_not_mutated(self):
        """Functions never modify the caller's data."""
        data = pd.Series([0.03, -0.01, 0.02])
        before = data.copy()

        skewness_population(data)

        pd.testing.assert_series_equal(data, before)
