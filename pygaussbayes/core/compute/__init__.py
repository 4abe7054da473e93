"""
Shared compute infrastructure for pygaussbayes.

IMPORTANT: This is NOT where the solvers live. Those go in
pygaussbayes.linear. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Tolerance tiers for numerical comparison
"""

from pygaussbayes.core.compute.timing import Timer, timed
from pygaussbayes.core.compute.tolerances import (
    ToleranceTier,
    DEFAULT_TOL,
    select_tolerance,
)

__all__ = [
    # Timing
    "Timer",
    "timed",
    # Tolerances
    "ToleranceTier",
    "DEFAULT_TOL",
    "select_tolerance",
]
