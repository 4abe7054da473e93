"""
pygaussbayes: square-root information solvers for Gaussian Bayes nets.

Solves the upper triangular systems produced by sparse elimination of a
Gaussian factor graph, as used by state-estimation and sensor-fusion
back-ends.

Submodules:
    linear: Vector values, noise models, conditionals, Bayes nets,
            factor graphs and the solve() entry point
    core: Exceptions, validation, result envelope, timing, tolerances
"""

__version__ = "0.1.0"

from pygaussbayes import linear
from pygaussbayes.linear import (
    VectorValues,
    GaussianConditional,
    GaussianBayesNet,
    GaussianFactorGraph,
    solve,
)

__all__ = [
    "__version__",
    "linear",
    "VectorValues",
    "GaussianConditional",
    "GaussianBayesNet",
    "GaussianFactorGraph",
    "solve",
]
