"""
Exception hierarchy for pygaussbayes.

All exceptions inherit from PyGaussBayesError to allow catching any
library-specific error. Module-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""

from typing import Any, Hashable


class PyGaussBayesError(Exception):
    """Base exception for all pygaussbayes errors."""
    pass


class ValidationError(PyGaussBayesError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when block shapes don't match the variable dimensions they
    are declared against, or when two blocks disagree on a row count.
    """
    pass


class NumericalError(PyGaussBayesError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class IndeterminateSystemError(NumericalError):
    """
    A triangular solve produced a non-finite solution.

    Raised when a conditional's R block has a zero pivot, so the value of
    its frontal variable is not determined by the system.

    Attributes:
        key: Frontal variable whose solution is indeterminate
    """

    def __init__(self, message: str, key: Hashable | None = None):
        super().__init__(message)
        self.key = key


class MissingVariableError(PyGaussBayesError, LookupError):
    """
    A solve step needs a variable value that is not available.

    Raised when a conditional looks up a parent (or frontal) variable in
    the accumulating VectorValues and the variable is absent. During
    back-substitution this means the Bayes net is not topologically
    ordered, or the caller did not supply a value for a variable the net
    depends on but does not define.

    Attributes:
        key: The variable that was looked up
        available: Keys that were present at lookup time
    """

    def __init__(
        self,
        message: str,
        key: Hashable | None = None,
        available: tuple[Any, ...] = (),
    ):
        super().__init__(message)
        self.key = key
        self.available = available
