"""
Tolerance tiers for numerical comparison.

Defines the precision expectations used by equals() on VectorValues,
noise models, conditionals and Bayes nets, and by the test suite:
- EXACT: structural comparisons (copies, conversions)
- SOLVE: results of one triangular pass in double precision
- ILL_CONDITIONED: solves through R blocks with a large diagonal spread
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Default absolute tolerance for equals(); element-wise |a - b| <= tol
DEFAULT_TOL = 1e-9

EXACT = ToleranceTier(
    rtol=0.0,
    atol=0.0,
    name='exact',
    description='Bit-identical: copies and pure conversions',
)

SOLVE = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='solve',
    description='One triangular pass in double precision',
)

ILL_CONDITIONED = ToleranceTier(
    rtol=1e-6,
    atol=1e-8,
    name='ill_conditioned',
    description='Triangular pass through R with diagonal spread > 1e4',
)

# Diagonal spread of R above which SOLVE is too strict
CONDITION_THRESHOLD = 1e4


def select_tolerance(diagonal_spread: float) -> ToleranceTier:
    """Select the tolerance tier for a net whose R diagonals span `diagonal_spread`."""
    if diagonal_spread > CONDITION_THRESHOLD:
        return ILL_CONDITIONED
    return SOLVE
