"""
Statistics Errors

Error kinds raised by the numerical core. Every class also derives from the
matching builtin so callers that only know ``ValueError`` or
``ZeroDivisionError`` keep working.
"""


class StatisticsError(Exception):
    """Base class for all errors raised by portperf."""


class LengthMismatchError(StatisticsError, ValueError):
    def __init__(self, name_a: str, len_a: int, name_b: str, len_b: int) -> None:
        message = f"Length of {name_a} ({len_a}) doesn't match length of {name_b} ({len_b})"
        super().__init__(message)

        self.lengths = (len_a, len_b)


class InsufficientDataError(StatisticsError, ValueError):
    def __init__(self, statistic: str, required: int, got: int) -> None:
        message = f"{statistic} needs at least {required} observations, got {got}"
        super().__init__(message)

        self.statistic = statistic
        self.required = required
        self.got = got


class DegenerateSampleError(InsufficientDataError):
    """The sample is too small for an unbiased higher-moment estimator."""


class InvalidParameterError(StatisticsError, ValueError):
    def __init__(self, name: str, value, constraint: str) -> None:
        message = f"{name} must be {constraint}, got {value}"
        super().__init__(message)

        self.name = name
        self.value = value


class DivisionByZeroError(StatisticsError, ZeroDivisionError):
    def __init__(self, quantity: str) -> None:
        message = f"{quantity} is zero"
        super().__init__(message)

        self.quantity = quantity


class OutOfRangeError(StatisticsError, ValueError):
    def __init__(self, position: float, size: int) -> None:
        message = (
            f"Order statistic position {position:.4f} is outside [0, {size - 1}]; "
            "not enough tail data for the requested confidence"
        )
        super().__init__(message)

        self.position = position
        self.size = size
