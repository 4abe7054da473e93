"""
Solver dispatch for Gaussian Bayes nets.

This module provides the solve() function (public API) and method selection.
"""

from typing import Literal
import warnings
import numpy as np

from pygaussbayes.core.compute.timing import Timer
from pygaussbayes.core.compute.tolerances import select_tolerance
from pygaussbayes.core.exceptions import ValidationError
from pygaussbayes.core.result import Result
from pygaussbayes.linear.bayes_net import GaussianBayesNet
from pygaussbayes.linear.solution import BayesNetSolution, SolveParams
from pygaussbayes.linear.vector_values import VectorValues


# Type alias for method selection
MethodChoice = Literal['back_substitution', 'gradient_search']


def solve(
    bayes_net: GaussianBayesNet,
    *,
    method: MethodChoice = 'back_substitution',
    missing: VectorValues | None = None,
) -> BayesNetSolution:
    """
    Solve the triangular system represented by a Gaussian Bayes net.

    This is the primary public API. It runs the requested solve, then
    evaluates the objective and log-determinant and wraps everything with
    timing in a BayesNetSolution.

    Args:
        bayes_net: The net to solve
        method: Solve method:
            - 'back_substitution': exact solution via optimize()
            - 'gradient_search': steepest-descent (Cauchy) point via
              optimize_gradient_search()
        missing: Values for variables the net depends on but does not
            define. Only valid with 'back_substitution'.

    Returns:
        BayesNetSolution with values, error, log-determinant and summary

    Raises:
        ValidationError: If bayes_net is not a GaussianBayesNet
        ValueError: If method is unknown, or missing is given for
            'gradient_search'
        MissingVariableError: If the net is not topologically ordered

    Example:
        >>> bn = GaussianBayesNet([
        ...     GaussianConditional.from_arrays('x1', [[1.0]], [3.0], parents={'x2': [[1.0]]}),
        ...     GaussianConditional.from_arrays('x2', [[2.0]], [4.0]),
        ... ])
        >>> solve(bn)['x1']
        array([1.])
    """
    if not isinstance(bayes_net, GaussianBayesNet):
        raise ValidationError(
            f"bayes_net: expected GaussianBayesNet, got {type(bayes_net).__name__}"
        )
    if method not in ('back_substitution', 'gradient_search'):
        raise ValueError(
            f"Unknown method: {method!r}. Use 'back_substitution' or 'gradient_search'"
        )
    if missing is not None and method != 'back_substitution':
        raise ValueError(f"missing values are only used by 'back_substitution', not {method!r}")

    timer = Timer()
    timer.start()
    solve_warnings: list[str] = []

    with timer.section(method):
        if method == 'back_substitution':
            values = bayes_net.optimize(missing)
        else:
            values = bayes_net.optimize_gradient_search()

    with timer.section('log_determinant'):
        # Non-positive diagonals are reported below, not by numpy
        with np.errstate(divide='ignore', invalid='ignore'):
            log_det = bayes_net.log_determinant()

    with timer.section('error'):
        error = bayes_net.error(values)

    timer.stop()

    if not np.isfinite(log_det):
        message = (
            f"log-determinant is {log_det}: some R diagonal is not strictly positive"
        )
        warnings.warn(message, RuntimeWarning, stacklevel=2)
        solve_warnings.append(message)

    spread = _diagonal_spread(bayes_net)
    info = {
        'n_conditionals': len(bayes_net),
        'dim': int(sum(bayes_net.dims().values())),
        'diagonal_spread': spread,
        'tolerance': select_tolerance(spread).name,
    }

    result = Result(
        params=SolveParams(values=values, log_determinant=log_det, error=error),
        info=info,
        timing=timer.result(),
        method=method,
        warnings=tuple(solve_warnings),
    )
    return BayesNetSolution(_result=result, _bayes_net=bayes_net)


def _diagonal_spread(bayes_net: GaussianBayesNet) -> float:
    """Ratio of largest to smallest |whitened R diagonal| across the net."""
    diagonals = []
    for conditional in bayes_net:
        diag = conditional.diagonal()
        if conditional.model is not None:
            conditional.model.whiten_in_place(diag)
        diagonals.append(np.abs(diag))
    if not diagonals:
        return 1.0
    stacked = np.concatenate(diagonals)
    smallest = float(stacked.min())
    if smallest == 0.0:
        return float('inf')
    return float(stacked.max()) / smallest
