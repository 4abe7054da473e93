"""
Gaussian factor graph: a sum of whitened linear least-squares factors.

Objective:
    f(x) = sum_k 0.5 * || A_k x - b_k ||^2     (A_k, b_k whitened)

The Bayes net delegates gradient, error, steepest-descent and dense
Jacobian assembly here after converting its conditionals with
from_bayes_net().
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Sequence, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pygaussbayes.core.exceptions import DimensionError, ValidationError
from pygaussbayes.linear.factor import JacobianFactor
from pygaussbayes.linear.vector_values import VectorValues

if TYPE_CHECKING:
    from pygaussbayes.linear.bayes_net import GaussianBayesNet


class GaussianFactorGraph:
    """Ordered collection of JacobianFactors."""

    def __init__(self, factors: Iterable[JacobianFactor] = ()):
        self._factors = tuple(factors)
        # A variable must have the same dimension in every factor it touches
        dims: dict[Hashable, int] = {}
        for i, factor in enumerate(self._factors):
            for key, dim in factor.dims().items():
                if dims.setdefault(key, dim) != dim:
                    raise DimensionError(
                        f"factor {i}: variable {key!r} has dim {dim}, "
                        f"but an earlier factor uses dim {dims[key]}"
                    )
        self._dims = dims

    @classmethod
    def from_bayes_net(cls, bayes_net: GaussianBayesNet) -> GaussianFactorGraph:
        """One factor per conditional, in the net's order."""
        return cls(JacobianFactor.from_conditional(c) for c in bayes_net)

    # === Structure ===

    def __len__(self) -> int:
        return len(self._factors)

    def __iter__(self):
        return iter(self._factors)

    def __getitem__(self, index: int) -> JacobianFactor:
        return self._factors[index]

    def keys(self) -> list[Hashable]:
        """Variables in order of first appearance."""
        return list(self._dims)

    def dims(self) -> dict[Hashable, int]:
        return dict(self._dims)

    # === Objective ===

    def error(self, x: VectorValues) -> float:
        """Total 0.5 * squared whitened residual."""
        return float(sum(factor.error(x) for factor in self._factors))

    def gradient(self, x0: VectorValues) -> VectorValues:
        """
        Gradient A' (A x0 - b) of the objective at x0.

        Returns:
            VectorValues with an entry for every variable in the graph
        """
        g = VectorValues({key: np.zeros(dim) for key, dim in self._dims.items()})
        for factor in self._factors:
            for key, contribution in factor.gradient_contribution(x0).items():
                g[key] = g[key] + contribution
        return g

    def gradient_at_zero(self) -> VectorValues:
        """Gradient at x = 0, i.e. -A' b."""
        return self.gradient(self._zero())

    def multiply(self, x: VectorValues) -> list[NDArray[np.floating[Any]]]:
        """Whitened A x, one residual block per factor."""
        return [factor.multiply(x) for factor in self._factors]

    def optimize_gradient_search(self) -> VectorValues:
        """
        Minimizer of the objective along the steepest-descent direction from 0.

        With g the gradient at zero, the optimal step along g is
        -|g|^2 / |A g|^2 and the returned point is step * g (the Cauchy
        point). A zero gradient means 0 is already optimal along every
        direction; zeros are returned.
        """
        grad = self.gradient_at_zero()
        gradient_sq_norm = grad.dot(grad)
        if gradient_sq_norm == 0.0:
            return self._zero()

        Rg = self.multiply(grad)
        Rg_sq_norm = float(sum(block @ block for block in Rg))
        step = -gradient_sq_norm / Rg_sq_norm
        return grad.scale(step)

    def _zero(self) -> VectorValues:
        return VectorValues({key: np.zeros(dim) for key, dim in self._dims.items()})

    # === Dense assembly ===

    def jacobian(
        self,
        ordering: Sequence[Hashable] | None = None,
    ) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        """
        Dense whitened Jacobian and right-hand side.

        Rows are stacked in factor order; columns follow `ordering`
        (default: order of first appearance).

        Args:
            ordering: Every variable of the graph, each exactly once

        Returns:
            (A, b) with A of shape (total rows, total variable dim)

        Raises:
            ValidationError: If `ordering` is not a permutation of keys()
        """
        if ordering is None:
            ordering = self.keys()
        ordering = list(ordering)
        if len(set(ordering)) != len(ordering) or set(ordering) != set(self._dims):
            raise ValidationError(
                f"ordering: expected a permutation of {self.keys()}, got {ordering}"
            )

        offsets: dict[Hashable, int] = {}
        n_cols = 0
        for key in ordering:
            offsets[key] = n_cols
            n_cols += self._dims[key]
        n_rows = sum(factor.rows for factor in self._factors)

        A = np.zeros((n_rows, n_cols))
        b = np.zeros(n_rows)
        row = 0
        for factor in self._factors:
            blocks, rhs = factor.whitened_system()
            for key, block in zip(factor.keys, blocks):
                col = offsets[key]
                A[row:row + factor.rows, col:col + block.shape[1]] = block
            b[row:row + factor.rows] = rhs
            row += factor.rows
        return A, b
