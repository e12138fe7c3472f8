"""
Input Validation

Converts caller-supplied sequences (lists, tuples, numpy arrays, pandas
Series) into clean float arrays and checks shared argument constraints.
"""

import math
from typing import Sequence, Union

import numpy as np
import pandas as pd
import structlog

from ..exceptions import (
    InsufficientDataError,
    InvalidParameterError,
    LengthMismatchError,
)

logger = structlog.get_logger(__name__)

ArrayLike = Union[Sequence[float], np.ndarray, pd.Series]


def as_array(values: ArrayLike, name: str = "returns") -> np.ndarray:
    """Convert a 1-D numeric sequence to a float64 array.

    A copy is always made, so callers' data is never mutated.

    Raises:
        InvalidParameterError: If the input is not 1-D or holds NaN/Inf
    """
    if isinstance(values, pd.Series):
        values = values.to_numpy()

    arr = np.array(values, dtype=float)

    if arr.ndim != 1:
        raise InvalidParameterError(name, f"array of shape {arr.shape}", "one-dimensional")

    if not np.isfinite(arr).all():
        bad = int((~np.isfinite(arr)).sum())
        logger.warning("as_array: non-finite values in input", name=name, count=bad)
        raise InvalidParameterError(name, f"{bad} non-finite values", "finite")

    return arr


def require_length(arr: np.ndarray, minimum: int, statistic: str) -> None:
    if len(arr) < minimum:
        raise InsufficientDataError(statistic, minimum, len(arr))


def require_same_length(a: np.ndarray, b: np.ndarray, name_a: str, name_b: str) -> None:
    if len(a) != len(b):
        raise LengthMismatchError(name_a, len(a), name_b, len(b))


def check_confidence(confidence: float) -> float:
    """Return alpha = 1 - confidence after checking 0 < confidence < 1."""
    if not 0 < confidence < 1:
        raise InvalidParameterError("confidence", confidence, "between 0 and 1 (exclusive)")
    return 1.0 - confidence


def check_frequency(frequency: float) -> float:
    if not math.isfinite(frequency) or frequency <= 0:
        raise InvalidParameterError("frequency", frequency, "a positive number of periods per year")
    return float(frequency)
