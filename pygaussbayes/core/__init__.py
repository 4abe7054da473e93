"""
Core infrastructure for pygaussbayes.

This module provides shared abstractions and utilities used by the linear
subpackage (vector values, noise models, conditionals, Bayes nets).

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing and tolerance tiers
"""

from pygaussbayes.core.result import Result
from pygaussbayes.core.exceptions import (
    PyGaussBayesError,
    ValidationError,
    DimensionError,
    NumericalError,
    IndeterminateSystemError,
    MissingVariableError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyGaussBayesError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "IndeterminateSystemError",
    "MissingVariableError",
]
