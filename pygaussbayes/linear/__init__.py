"""
Linear Gaussian inference on eliminated factor graphs.

This module provides the chordal Gaussian Bayes net produced by sparse
elimination, and the pieces it is made of and converts to.

Public API:
    solve(bayes_net, ...) -> BayesNetSolution

Building blocks:
    VectorValues: key -> vector block map used by every solver
    Diagonal, Isotropic, Unit: diagonal noise models
    GaussianConditional: one eliminated variable block
    GaussianBayesNet: ordered conditionals; optimize, back_substitute,
        back_substitute_transpose, log_determinant, ...
    JacobianFactor, GaussianFactorGraph: the least-squares view a net
        converts to for gradient, error and dense Jacobian

Example:
    >>> from pygaussbayes.linear import GaussianBayesNet, GaussianConditional, solve
    >>> bn = GaussianBayesNet([
    ...     GaussianConditional.from_arrays('x1', [[1.0]], [3.0], parents={'x2': [[1.0]]}),
    ...     GaussianConditional.from_arrays('x2', [[2.0]], [4.0]),
    ... ])
    >>> result = solve(bn)
    >>> print(result.summary())
"""

from pygaussbayes.linear.vector_values import VectorValues
from pygaussbayes.linear.noise_model import Diagonal, Isotropic, Unit
from pygaussbayes.linear.conditional import GaussianConditional
from pygaussbayes.linear.factor import JacobianFactor
from pygaussbayes.linear.factor_graph import GaussianFactorGraph
from pygaussbayes.linear.bayes_net import GaussianBayesNet
from pygaussbayes.linear.solution import BayesNetSolution, SolveParams
from pygaussbayes.linear.solvers import solve

__all__ = [
    "solve",
    "VectorValues",
    "Diagonal",
    "Isotropic",
    "Unit",
    "GaussianConditional",
    "JacobianFactor",
    "GaussianFactorGraph",
    "GaussianBayesNet",
    "BayesNetSolution",
    "SolveParams",
]
