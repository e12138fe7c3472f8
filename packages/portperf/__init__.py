"""portperf: portfolio performance and risk statistics."""

from .config import Settings, get_settings
from .exceptions import (
    StatisticsError,
    LengthMismatchError,
    InsufficientDataError,
    DegenerateSampleError,
    InvalidParameterError,
    DivisionByZeroError,
    OutOfRangeError,
)
from .logging_config import configure_logging

__version__ = "0.1.0"

__all__ = [
    'Settings',
    'get_settings',
    'configure_logging',
    'StatisticsError',
    'LengthMismatchError',
    'InsufficientDataError',
    'DegenerateSampleError',
    'InvalidParameterError',
    'DivisionByZeroError',
    'OutOfRangeError',
]
