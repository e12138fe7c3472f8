"""
Return Path Analytics Module

Builds a cumulative total-return index from periodic returns and derives
drawdowns, losing streaks, local peaks/troughs and drawdown duration.
All scans are single pass over the index.
"""

import math
from typing import List, Optional

import numpy as np
import structlog

from ..exceptions import InvalidParameterError
from .validation import ArrayLike, as_array, require_length

logger = structlog.get_logger(__name__)


def total_return_index(returns: ArrayLike, start_value: float = 1.0) -> np.ndarray:
    """Cumulative value of start_value compounded by each period's return.

    index[0] = start_value
    index[i] = index[i-1] * (1 + returns[i-1])

    Args:
        returns: Periodic (not annualized) returns
        start_value: Value of the index before the first period

    Returns:
        Array of length len(returns) + 1
    """
    arr = as_array(returns)

    index = np.empty(len(arr) + 1)
    index[0] = start_value
    for i, r in enumerate(arr, start=1):
        index[i] = index[i - 1] * (1 + r)

    return index


def drawdowns(returns: ArrayLike) -> np.ndarray:
    """Drawdown from the running peak at every point of the total-return index.

    entry[i] = index[i] / max(index[0..i]) - 1, clamped to <= 0, with
    entry[0] = 0. The running maximum is tracked incrementally.

    Returns:
        Array of length len(returns) + 1, every entry <= 0
    """
    index = total_return_index(returns, 1.0)

    result = np.zeros(len(index))
    running_max = index[0]
    for i in range(1, len(index)):
        running_max = max(running_max, index[i])
        dd = index[i] / running_max - 1
        # Rounding can leave a tiny positive value at a new high
        result[i] = min(dd, 0.0)

    return result


def max_drawdown(returns: ArrayLike) -> float:
    """Largest peak-to-trough decline, as a non-positive decimal."""
    return float(np.min(drawdowns(returns)))


def continuous_drawdowns(returns: ArrayLike) -> np.ndarray:
    """Compounded loss of every uninterrupted run of negative returns.

    Example:
        [0.01, -0.02, -0.01, 0.03, -0.05] -> [-0.0298, -0.05]

    Returns:
        One entry per losing run, in chronological order (may be empty)
    """
    arr = as_array(returns)
    n = len(arr)

    runs: List[float] = []
    i = 0
    while i < n:
        product = 0.0
        while i < n and arr[i] < 0:
            product = (1 + product) * (1 + arr[i]) - 1
            i += 1

        if product < 0:
            runs.append(product)

        # Step past the non-negative return that closed the run
        i += 1

    return np.array(runs, dtype=float)


def average_drawdown(returns: ArrayLike, count: Optional[float] = None) -> float:
    """Mean of the `count` deepest continuous drawdowns.

    Args:
        returns: Periodic returns
        count: How many of the most negative runs to average. Truncated toward
            zero; must be >= 1 after truncation. Defaults to all runs and is
            capped at the number of runs.

    Returns:
        Average drawdown (<= 0); 0.0 when the series has no losing runs

    Raises:
        InvalidParameterError: If count truncates to less than 1
    """
    runs = np.sort(continuous_drawdowns(returns))

    if count is None:
        take = len(runs)
    else:
        if not math.isfinite(count) or math.trunc(count) < 1:
            raise InvalidParameterError("count", count, "a positive integer")
        take = min(math.trunc(count), len(runs))

    logger.debug("average_drawdown: runs selected", num_runs=len(runs), taken=take)

    if take == 0:
        return 0.0

    return float(np.mean(runs[:take]))


def _local_extrema(index: np.ndarray, is_peak: bool) -> np.ndarray:
    """Mark local maxima/minima of index[1..N], zero elsewhere."""
    values = index[1:]
    n = len(values)

    def beats(a: float, b: float) -> bool:
        return a > b if is_peak else a < b

    result = np.zeros(n)
    if n == 1:
        # Only neighbour available is the starting value
        if beats(values[0], index[0]):
            result[0] = values[0]
        return result

    for i in range(n):
        if i == 0:
            hit = beats(values[i], values[i + 1])
        elif i == n - 1:
            hit = beats(values[i], values[i - 1])
        else:
            hit = beats(values[i], values[i - 1]) and beats(values[i], values[i + 1])
        if hit:
            result[i] = values[i]

    return result


def peaks(returns: ArrayLike) -> np.ndarray:
    """Index value at each local maximum of the total-return index, else 0.

    One entry per period (index[0] is excluded). Interior points must be
    strictly above both neighbours; the first point is compared with its
    successor only and the last with its predecessor only.
    """
    arr = as_array(returns)
    require_length(arr, 1, "peaks")
    return _local_extrema(total_return_index(arr), is_peak=True)


def troughs(returns: ArrayLike) -> np.ndarray:
    """Index value at each local minimum of the total-return index, else 0.

    Same boundary rules as peaks().
    """
    arr = as_array(returns)
    require_length(arr, 1, "troughs")
    return _local_extrema(total_return_index(arr), is_peak=False)


def max_drawdown_duration(returns: ArrayLike) -> int:
    """Longest stretch, in periods, between consecutive new all-time highs.

    The starting value index[0] is the first high. A drawdown that has not
    recovered by the end of the series does not count.

    Returns:
        Number of periods; 0 when fewer than two highs occur
    """
    index = total_return_index(returns)

    longest = 0
    last_high_at = 0
    high = index[0]
    for i in range(1, len(index)):
        if index[i] > high:
            longest = max(longest, i - last_high_at)
            last_high_at = i
            high = index[i]

    return longest
