"""
Linear Gaussian conditional.

A GaussianConditional is one step of a square-root information
factorization. It relates its frontal variables x_F to its parents x_P by

    (R x_F + S x_P - d) ./ sigmas = 0

where R is square upper triangular over the stacked frontal dimensions,
S = [S_1 ... S_k] stacks one coupling block per parent, and sigmas come
from the optional noise model (all ones when there is no model).

Conditionals are immutable. They are built once, by elimination or
directly from blocks, and only read by the solvers.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Mapping, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.linalg import solve_triangular

from pygaussbayes.core.compute.tolerances import DEFAULT_TOL
from pygaussbayes.core.exceptions import IndeterminateSystemError, ValidationError
from pygaussbayes.core.validation import (
    check_array,
    check_1d,
    check_2d,
    check_finite,
    check_square,
    check_upper_triangular,
    check_block_rows,
)
from pygaussbayes.linear.noise_model import Diagonal
from pygaussbayes.linear.vector_values import VectorValues


def _frozen(arr: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    arr.setflags(write=False)
    return arr


def _as_pairs(
    parents: Mapping[Hashable, ArrayLike] | Iterable[tuple[Hashable, ArrayLike]] | None,
) -> list[tuple[Hashable, ArrayLike]]:
    if parents is None:
        return []
    if isinstance(parents, Mapping):
        return list(parents.items())
    return list(parents)


class GaussianConditional:
    """
    Conditional density p(x_F | x_P) in square-root information form.

    Args:
        frontals: (key, dim) pairs, in the column order of R
        R: Upper triangular block over the stacked frontal dims
        parents: (key, S_block) pairs or a {key: S_block} mapping; every
                 block has the same number of rows as R
        d: Right-hand side, one entry per row of R
        model: Optional diagonal noise model over the rows

    Raises:
        DimensionError: If block shapes are inconsistent
        ValidationError: If R is not upper triangular, blocks are not
                         finite, or a key appears twice
    """

    def __init__(
        self,
        frontals: Sequence[tuple[Hashable, int]],
        R: ArrayLike,
        parents: Mapping[Hashable, ArrayLike] | Iterable[tuple[Hashable, ArrayLike]] | None = None,
        d: ArrayLike | None = None,
        model: Diagonal | None = None,
    ):
        if not frontals:
            raise ValidationError("frontals: a conditional needs at least one frontal variable")

        R_arr = check_array(R, 'R')
        check_square(R_arr, 'R')
        check_finite(R_arr, 'R')
        check_upper_triangular(R_arr, 'R')
        n = R_arr.shape[0]

        frontal_keys = [key for key, _ in frontals]
        frontal_dims = [int(dim) for _, dim in frontals]
        if sum(frontal_dims) != n:
            raise ValidationError(
                f"frontals: dims {frontal_dims} sum to {sum(frontal_dims)}, "
                f"but R is {n}x{n}"
            )

        parent_keys: list[Hashable] = []
        S_blocks: list[NDArray[np.floating[Any]]] = []
        for key, block in _as_pairs(parents):
            S = check_array(block, f"S[{key!r}]")
            if S.ndim == 1:
                S = S.reshape(n, -1)
            check_2d(S, f"S[{key!r}]")
            check_block_rows(S, n, f"S[{key!r}]")
            check_finite(S, f"S[{key!r}]")
            parent_keys.append(key)
            S_blocks.append(_frozen(S))

        all_keys = frontal_keys + parent_keys
        if len(set(all_keys)) != len(all_keys):
            raise ValidationError(f"keys: duplicate variable in {all_keys}")

        d_arr = np.zeros(n) if d is None else np.atleast_1d(check_array(d, 'd'))
        check_1d(d_arr, 'd')
        check_block_rows(d_arr, n, 'd')
        check_finite(d_arr, 'd')

        if model is not None and model.dim != n:
            raise ValidationError(f"model: expected dim {n}, got {model.dim}")

        self._frontal_keys = tuple(frontal_keys)
        self._frontal_dims = tuple(frontal_dims)
        self._R = _frozen(R_arr)
        self._parent_keys = tuple(parent_keys)
        self._S = tuple(S_blocks)
        self._d = _frozen(d_arr)
        self._model = model

    @classmethod
    def from_arrays(
        cls,
        key: Hashable,
        R: ArrayLike,
        d: ArrayLike,
        parents: Mapping[Hashable, ArrayLike] | Iterable[tuple[Hashable, ArrayLike]] | None = None,
        model: Diagonal | None = None,
    ) -> GaussianConditional:
        """Build a conditional with a single frontal variable."""
        R_arr = np.atleast_2d(check_array(R, 'R'))
        return cls([(key, R_arr.shape[0])], R_arr, parents=parents, d=d, model=model)

    # === Structure ===

    @property
    def frontals(self) -> tuple[Hashable, ...]:
        return self._frontal_keys

    @property
    def parents(self) -> tuple[Hashable, ...]:
        return self._parent_keys

    @property
    def keys(self) -> tuple[Hashable, ...]:
        """Frontal keys followed by parent keys."""
        return self._frontal_keys + self._parent_keys

    @property
    def frontal_dims(self) -> dict[Hashable, int]:
        return dict(zip(self._frontal_keys, self._frontal_dims))

    @property
    def dim(self) -> int:
        """Number of rows (= stacked frontal dimension)."""
        return self._R.shape[0]

    @property
    def R(self) -> NDArray[np.floating[Any]]:
        return self._R

    @property
    def d(self) -> NDArray[np.floating[Any]]:
        return self._d

    @property
    def model(self) -> Diagonal | None:
        return self._model

    def S(self, key: Hashable) -> NDArray[np.floating[Any]]:
        """Coupling block for parent `key`."""
        try:
            return self._S[self._parent_keys.index(key)]
        except ValueError:
            raise KeyError(
                f"{key!r} is not a parent of this conditional. Parents: {list(self._parent_keys)}"
            ) from None

    def parent_blocks(self) -> list[tuple[Hashable, NDArray[np.floating[Any]]]]:
        return list(zip(self._parent_keys, self._S))

    def frontal_blocks(self) -> list[tuple[Hashable, NDArray[np.floating[Any]]]]:
        """Columns of R split per frontal variable."""
        blocks = []
        offset = 0
        for key, dim in zip(self._frontal_keys, self._frontal_dims):
            blocks.append((key, self._R[:, offset:offset + dim]))
            offset += dim
        return blocks

    def diagonal(self) -> NDArray[np.floating[Any]]:
        """Diagonal of R (a fresh, writable copy)."""
        return np.diag(self._R).copy()

    # === Solves ===

    def _S_times(self, x: VectorValues) -> NDArray[np.floating[Any]]:
        if not self._S:
            return np.zeros(self.dim)
        return np.hstack(self._S) @ x.vector(self._parent_keys)

    def _upper_solve(self, rhs: NDArray[np.floating[Any]], trans: str = 'N') -> NDArray[np.floating[Any]]:
        key = self._frontal_keys[0]
        message = (
            f"Indeterminate solution for variable {key!r}: "
            f"R diagonal {np.diag(self._R).tolist()} has a zero pivot"
        )
        try:
            soln = solve_triangular(self._R, rhs, trans=trans, lower=False, check_finite=False)
        except np.linalg.LinAlgError as e:
            raise IndeterminateSystemError(message, key=key) from e
        if not np.all(np.isfinite(soln)):
            raise IndeterminateSystemError(message, key=key)
        return soln

    def _split(self, stacked: NDArray[np.floating[Any]]) -> VectorValues:
        result = VectorValues()
        offset = 0
        for key, dim in zip(self._frontal_keys, self._frontal_dims):
            result[key] = stacked[offset:offset + dim]
            offset += dim
        return result

    def solve(self, x: VectorValues) -> VectorValues:
        """
        Solve for the frontal variables given parent values.

        x_F = R^{-1} (d - S x_P). Whitening scales both sides of each row
        equally, so the model does not enter.

        Args:
            x: Must contain every parent

        Returns:
            VectorValues holding only the frontal variables

        Raises:
            MissingVariableError: If a parent is absent from `x`
            IndeterminateSystemError: If R has a zero pivot
        """
        rhs = self._d - self._S_times(x)
        return self._split(self._upper_solve(rhs))

    def solve_other_rhs(self, parents: VectorValues, rhs: VectorValues) -> VectorValues:
        """
        Solve the whitened rows against a supplied right-hand side.

        Solves (R x_F + S x_P) ./ sigmas = rhs_F, i.e.
        x_F = R^{-1} (sigmas .* rhs_F - S x_P).

        Args:
            parents: Must contain every parent
            rhs: Must contain every frontal variable

        Raises:
            MissingVariableError: If a parent or frontal rhs entry is absent
        """
        target = rhs.vector(self._frontal_keys)
        if self._model is not None:
            target = self._model.unwhiten(target)
        return self._split(self._upper_solve(target - self._S_times(parents)))

    def solve_transpose_in_place(self, gy: VectorValues) -> None:
        """
        One block column of the transposed solve, applied to `gy` in place.

        With whitened rows A = diag(1/sigmas) [R S], solves the frontal
        block of A' gy = gx and eliminates its contribution from the
        parents:

            z      = R^{-T} gy_F
            gy_j  -= S_j' z        for each parent j present in gy
            gy_F   = sigmas .* z

        Entries absent from `gy` are skipped, not zero-filled: a parent
        without an entry is not updated, and if any frontal variable has
        no entry the whole step is a no-op. Nothing is ever inserted.
        """
        if not all(key in gy for key in self._frontal_keys):
            return
        z = self._upper_solve(gy.vector(self._frontal_keys), trans='T')
        for key, S in zip(self._parent_keys, self._S):
            if key in gy:
                gy[key] = gy[key] - S.T @ z
        if self._model is not None:
            z = self._model.unwhiten(z)
        gy.update(self._split(z))

    # === Comparison ===

    def equals(self, other: GaussianConditional, tol: float = DEFAULT_TOL) -> bool:
        """Same keys, dims and model, blocks equal within `tol`."""
        if not isinstance(other, GaussianConditional):
            return False
        if self.keys != other.keys or self._frontal_dims != other._frontal_dims:
            return False
        if (self._model is None) != (other._model is None):
            return False
        if self._model is not None and not self._model.equals(other._model, tol):
            return False
        pairs = [(self._R, other._R), (self._d, other._d)] + list(zip(self._S, other._S))
        for mine, theirs in pairs:
            if mine.shape != theirs.shape or not np.all(np.abs(mine - theirs) <= tol):
                return False
        return True

    def __repr__(self) -> str:
        parents = f" | {list(self._parent_keys)}" if self._parent_keys else ""
        return f"GaussianConditional(p({list(self._frontal_keys)}{parents}), dim={self.dim})"
