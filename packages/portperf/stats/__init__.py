"""
Performance Statistics Engine

Performance and risk statistics for single return and price series.
Pure computation modules operating on 1-D sequences and numpy arrays.

Modules:
- moments: Variance, covariance, skewness, kurtosis, partial moments
- drawdowns: Total-return index, drawdowns, losing streaks, peaks/troughs
- distribution: Inverse normal CDF (AS241) and Jarque-Bera test
- var: Parametric, Cornish-Fisher and historical-simulation VaR
- ratios: Betas, Sharpe, Treynor, alpha, Calmar, Ulcer, Fama decomposition
- returns: Holding-period and sub-period returns from prices and cash flows
"""

# Moments module
from .moments import (
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

# Drawdowns module
from .drawdowns import (
    total_return_index,
    drawdowns,
    max_drawdown,
    continuous_drawdowns,
    average_drawdown,
    peaks,
    troughs,
    max_drawdown_duration,
)

# Distribution module
from .distribution import (
    inverse_normal_cdf,
    jarque_bera,
    jarque_bera_test,
    JarqueBeraResult,
)

# VaR module
from .var import (
    parametric_var,
    modified_parametric_var,
    historical_simulation_var,
    cornish_fisher_quantile,
)

# Ratios module
from .ratios import (
    annualized_return,
    annualized_variance,
    annualized_std_dev,
    beta,
    adjusted_beta,
    bull_beta,
    bear_beta,
    beta_timing_ratio,
    market_risk,
    unique_risk,
    sharpe_ratio,
    treynor_index,
    jensens_alpha,
    m_squared,
    tracking_error,
    information_ratio,
    sortino_ratio,
    omega_ratio,
    calmar_ratio,
    ulcer_index,
    fama_decomposition,
)

# Returns module
from .returns import (
    holding_period_return,
    hpr_with_reinvestment,
    sub_period_returns,
    log_sub_period_returns,
    split_to_years,
    annual_returns,
)

__all__ = [
    # Moments
    'mean',
    'variance_population',
    'variance_sample',
    'covariance_population',
    'covariance_sample',
    'std_dev_population',
    'std_dev_sample',
    'skewness_population',
    'skewness_sample',
    'kurtosis_population',
    'kurtosis_population_excess',
    'kurtosis_sample',
    'kurtosis_sample_excess',
    'lower_partial_moment',
    'upper_partial_moment',
    'semi_variance_population',
    'semi_deviation_population',
    'array_diff',
    'array_diff_geometric',
    # Drawdowns
    'total_return_index',
    'drawdowns',
    'max_drawdown',
    'continuous_drawdowns',
    'average_drawdown',
    'peaks',
    'troughs',
    'max_drawdown_duration',
    # Distribution
    'inverse_normal_cdf',
    'jarque_bera',
    'jarque_bera_test',
    'JarqueBeraResult',
    # VaR
    'parametric_var',
    'modified_parametric_var',
    'historical_simulation_var',
    'cornish_fisher_quantile',
    # Ratios
    'annualized_return',
    'annualized_variance',
    'annualized_std_dev',
    'beta',
    'adjusted_beta',
    'bull_beta',
    'bear_beta',
    'beta_timing_ratio',
    'market_risk',
    'unique_risk',
    'sharpe_ratio',
    'treynor_index',
    'jensens_alpha',
    'm_squared',
    'tracking_error',
    'information_ratio',
    'sortino_ratio',
    'omega_ratio',
    'calmar_ratio',
    'ulcer_index',
    'fama_decomposition',
    # Returns
    'holding_period_return',
    'hpr_with_reinvestment',
    'sub_period_returns',
    'log_sub_period_returns',
    'split_to_years',
    'annual_returns',
]
