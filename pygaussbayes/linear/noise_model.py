"""
Diagonal Gaussian noise models.

A noise model turns a residual in measurement units into a whitened
residual with unit covariance: whiten(v) = v / sigmas. Conditionals and
Jacobian factors carry an optional model; with no model the rows are
already whitened.

Only diagonal models exist here. Constrained (zero-sigma) rows are not
supported, so every sigma must be strictly positive and finite.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pygaussbayes.core.compute.tolerances import DEFAULT_TOL
from pygaussbayes.core.exceptions import ValidationError
from pygaussbayes.core.validation import (
    check_array,
    check_1d,
    check_finite,
    check_positive,
    check_block_rows,
)


class Diagonal:
    """
    Independent per-row noise with standard deviations `sigmas`.

    Also constructed via from_sigmas / from_variances / from_precisions.

    Raises:
        ValidationError: If sigmas are not a 1D array of strictly positive,
                         finite values
    """

    def __init__(self, sigmas: ArrayLike):
        arr = check_array(sigmas, 'sigmas')
        check_1d(arr, 'sigmas')
        check_finite(arr, 'sigmas')
        check_positive(arr, 'sigmas')
        arr.setflags(write=False)
        self._sigmas = arr

    @classmethod
    def from_sigmas(cls, sigmas: ArrayLike) -> Diagonal:
        return cls(sigmas)

    @classmethod
    def from_variances(cls, variances: ArrayLike) -> Diagonal:
        arr = check_array(variances, 'variances')
        check_1d(arr, 'variances')
        check_finite(arr, 'variances')
        check_positive(arr, 'variances')
        return cls(np.sqrt(arr))

    @classmethod
    def from_precisions(cls, precisions: ArrayLike) -> Diagonal:
        arr = check_array(precisions, 'precisions')
        check_1d(arr, 'precisions')
        check_finite(arr, 'precisions')
        check_positive(arr, 'precisions')
        return cls(1.0 / np.sqrt(arr))

    # === Properties ===

    @property
    def dim(self) -> int:
        return self._sigmas.shape[0]

    @property
    def sigmas(self) -> NDArray[np.floating[Any]]:
        return self._sigmas

    @property
    def variances(self) -> NDArray[np.floating[Any]]:
        return self._sigmas ** 2

    @property
    def precisions(self) -> NDArray[np.floating[Any]]:
        return 1.0 / self.variances

    # === Whitening ===

    def whiten(self, v: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """Return v ./ sigmas."""
        check_block_rows(v, self.dim, 'whiten: vector')
        return v / self._sigmas

    def whiten_in_place(self, v: NDArray[np.floating[Any]]) -> None:
        """Divide v by sigmas in place."""
        check_block_rows(v, self.dim, 'whiten_in_place: vector')
        v /= self._sigmas

    def unwhiten(self, v: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """Return v .* sigmas."""
        check_block_rows(v, self.dim, 'unwhiten: vector')
        return v * self._sigmas

    def whiten_matrix(self, A: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """Scale row i of A by 1 / sigmas[i]."""
        check_block_rows(A, self.dim, 'whiten_matrix: matrix')
        return A / self._sigmas[:, np.newaxis]

    def equals(self, other: Diagonal, tol: float = DEFAULT_TOL) -> bool:
        if not isinstance(other, Diagonal) or other.dim != self.dim:
            return False
        return bool(np.all(np.abs(self._sigmas - other._sigmas) <= tol))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sigmas={self._sigmas.tolist()})"


class Isotropic(Diagonal):
    """Diagonal model with one shared sigma."""

    @classmethod
    def from_sigma(cls, dim: int, sigma: float) -> Isotropic:
        if dim < 1:
            raise ValidationError(f"dim: must be >= 1, got {dim}")
        arr = np.full(dim, float(sigma))
        check_finite(arr, 'sigma')
        check_positive(arr, 'sigma')
        return cls(arr)

    @property
    def sigma(self) -> float:
        return float(self._sigmas[0])


class Unit(Isotropic):
    """Isotropic model with sigma = 1; whitening is the identity."""

    @classmethod
    def create(cls, dim: int) -> Unit:
        if dim < 1:
            raise ValidationError(f"dim: must be >= 1, got {dim}")
        return cls(np.ones(dim))
