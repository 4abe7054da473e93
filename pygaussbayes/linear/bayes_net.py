"""
Chordal Gaussian Bayes net: the result of eliminating a factor graph.

A GaussianBayesNet is an ordered sequence of GaussianConditionals in
elimination order. Conditional i only has parents among conditionals
j > i, so stacking the whitened rows of every conditional in this order
gives an upper triangular system A x = b (the square-root information
matrix and its rhs).

Solvers:
    optimize             back-substitution, last-eliminated first
    back_substitute      same traversal against a supplied rhs
    back_substitute_transpose
                         solve A' gy = gx, first-eliminated first
    log_determinant      sum of log whitened diagonals of every R

gradient, gradient_at_zero, error, optimize_gradient_search and matrix
are evaluated on the equivalent GaussianFactorGraph.

The net is never modified after construction, so one net can be shared
by concurrent callers as long as each call works on its own VectorValues.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Iterator, Sequence, overload
import numpy as np
from numpy.typing import NDArray

from pygaussbayes.core.compute.tolerances import DEFAULT_TOL
from pygaussbayes.core.exceptions import DimensionError, ValidationError
from pygaussbayes.linear.conditional import GaussianConditional
from pygaussbayes.linear.factor_graph import GaussianFactorGraph
from pygaussbayes.linear.vector_values import VectorValues


class GaussianBayesNet:
    """
    Immutable, ordered sequence of Gaussian conditionals.

    Args:
        conditionals: In elimination order (first eliminated first)

    Raises:
        ValidationError: If a variable is frontal in more than one conditional
        DimensionError: If a parent block's width disagrees with the
                        dimension of that variable elsewhere in the net

    Parents are expected to be frontal in a later conditional, or to be
    supplied externally via optimize(missing). This is not checked here;
    a violation surfaces as MissingVariableError when solving.
    """

    def __init__(self, conditionals: Iterable[GaussianConditional] = ()):
        self._conditionals = tuple(conditionals)
        seen: dict[Hashable, int] = {}
        for i, conditional in enumerate(self._conditionals):
            for key in conditional.frontals:
                if key in seen:
                    raise ValidationError(
                        f"conditionals: variable {key!r} is frontal in both "
                        f"conditional {seen[key]} and conditional {i}"
                    )
                seen[key] = i

        dims = self.dims()
        for i, conditional in enumerate(self._conditionals):
            for key, S in conditional.parent_blocks():
                width = S.shape[1]
                if dims.setdefault(key, width) != width:
                    raise DimensionError(
                        f"conditionals: parent {key!r} of conditional {i} has a "
                        f"block of width {width}, but {key!r} has dimension {dims[key]}"
                    )

    # === Sequence protocol ===

    def __len__(self) -> int:
        return len(self._conditionals)

    def __iter__(self) -> Iterator[GaussianConditional]:
        return iter(self._conditionals)

    def __reversed__(self) -> Iterator[GaussianConditional]:
        return reversed(self._conditionals)

    @overload
    def __getitem__(self, index: int) -> GaussianConditional: ...
    @overload
    def __getitem__(self, index: slice) -> GaussianBayesNet: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return GaussianBayesNet(self._conditionals[index])
        return self._conditionals[index]

    def __repr__(self) -> str:
        return f"GaussianBayesNet(n_conditionals={len(self)}, ordering={self.ordering()})"

    def ordering(self) -> list[Hashable]:
        """Frontal variables in elimination order."""
        return [key for conditional in self._conditionals for key in conditional.frontals]

    def keys(self) -> list[Hashable]:
        """All variables, frontal or parent, in order of first appearance."""
        seen: dict[Hashable, None] = {}
        for conditional in self._conditionals:
            for key in conditional.keys:
                seen.setdefault(key, None)
        return list(seen)

    def dims(self) -> dict[Hashable, int]:
        """Dimension of every frontal variable."""
        dims: dict[Hashable, int] = {}
        for conditional in self._conditionals:
            dims.update(conditional.frontal_dims)
        return dims

    # === Back-substitution ===

    def optimize(self, missing: VectorValues | None = None) -> VectorValues:
        """
        Solve A x = b by back-substitution.

        Conditionals are solved from last-eliminated to first, each one
        reading its parents from the values solved so far.

        Args:
            missing: Values for variables the net depends on but does not
                     define. Passed through to the result unchanged.

        Returns:
            One entry per frontal variable plus every entry of `missing`

        Raises:
            MissingVariableError: If a parent is neither solved yet nor in
                                  `missing` (net not topologically ordered)
        """
        soln = VectorValues() if missing is None else missing.copy()
        for conditional in reversed(self._conditionals):
            # (R_i x_i + S_i x_parents) ./ s_i = d_i ./ s_i
            soln.update(conditional.solve(soln))
        return soln

    def back_substitute(self, rhs: VectorValues) -> VectorValues:
        """
        Solve A x = rhs for an arbitrary whitened right-hand side.

        Same traversal as optimize(), but each conditional solves against
        `rhs` instead of its own d. The result starts empty; `rhs` is only
        read.

        Raises:
            MissingVariableError: If `rhs` lacks a frontal variable
        """
        result = VectorValues()
        for conditional in reversed(self._conditionals):
            result.update(conditional.solve_other_rhs(result, rhs))
        return result

    def back_substitute_transpose(self, gx: VectorValues) -> VectorValues:
        """
        Solve A' gy = gx.

        A' is lower triangular, so block columns are eliminated from the
        first-eliminated conditional onward, each updating its parents'
        entries in a private working copy of `gx`.

        Variables in the net but absent from `gx` are skipped, not treated
        as zero, and do not appear in the result.
        """
        gy = gx.copy()
        for conditional in self._conditionals:
            conditional.solve_transpose_in_place(gy)
        return gy

    # === Determinant ===

    def log_determinant(self) -> float:
        """
        log |det A|, the sum of log whitened R diagonals.

        Diagonals are assumed strictly positive. Zero or negative entries
        are not checked and give -inf or nan.
        """
        log_det = 0.0
        for conditional in self._conditionals:
            diag = conditional.diagonal()
            if conditional.model is not None:
                conditional.model.whiten_in_place(diag)
            log_det += float(np.sum(np.log(diag)))
        return log_det

    def determinant(self) -> float:
        return float(np.exp(self.log_determinant()))

    # === Factor graph view ===

    def to_factor_graph(self) -> GaussianFactorGraph:
        return GaussianFactorGraph.from_bayes_net(self)

    def gradient(self, x0: VectorValues) -> VectorValues:
        """Gradient of 0.5 |A x - b|^2 at x0."""
        return self.to_factor_graph().gradient(x0)

    def gradient_at_zero(self) -> VectorValues:
        return self.to_factor_graph().gradient_at_zero()

    def error(self, x: VectorValues) -> float:
        """0.5 |A x - b|^2."""
        return self.to_factor_graph().error(x)

    def optimize_gradient_search(self) -> VectorValues:
        """Cauchy point: the minimizer along the steepest-descent direction from 0."""
        return self.to_factor_graph().optimize_gradient_search()

    def matrix(
        self,
        ordering: Sequence[Hashable] | None = None,
    ) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        """
        Dense whitened (A, b).

        With the default ordering (elimination order, then any external
        parents) A is upper triangular.
        """
        if ordering is None:
            frontal = self.ordering()
            defined = set(frontal)
            external = [key for key in self.keys() if key not in defined]
            ordering = frontal + external
        return self.to_factor_graph().jacobian(ordering)

    # === Comparison ===

    def equals(self, other: GaussianBayesNet, tol: float = DEFAULT_TOL) -> bool:
        """Same length and conditionals pairwise equal, in sequence."""
        if not isinstance(other, GaussianBayesNet) or len(self) != len(other):
            return False
        return all(mine.equals(theirs, tol) for mine, theirs in zip(self, other))
