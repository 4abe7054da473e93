"""
Linear (Jacobian) factor.

A JacobianFactor is the least-squares term

    0.5 * || (sum_j A_j x_j - b) ./ sigmas ||^2

over the variables j it touches. A GaussianConditional carries exactly
the same data, so from_conditional() is a pure conversion between the
two views: nothing is shared with, or inherited from, the conditional.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Sequence, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pygaussbayes.core.exceptions import ValidationError
from pygaussbayes.core.validation import (
    check_array,
    check_1d,
    check_2d,
    check_finite,
    check_block_rows,
)
from pygaussbayes.linear.noise_model import Diagonal
from pygaussbayes.linear.vector_values import VectorValues

if TYPE_CHECKING:
    from pygaussbayes.linear.conditional import GaussianConditional


class JacobianFactor:
    """
    Whitened linear least-squares factor.

    Args:
        terms: (key, A_j) pairs; every block has len(b) rows
        b: Right-hand side
        model: Optional diagonal noise model over the rows
    """

    def __init__(
        self,
        terms: Iterable[tuple[Hashable, ArrayLike]],
        b: ArrayLike,
        model: Diagonal | None = None,
    ):
        b_arr = np.atleast_1d(check_array(b, 'b'))
        check_1d(b_arr, 'b')
        check_finite(b_arr, 'b')
        m = b_arr.shape[0]

        keys: list[Hashable] = []
        blocks: list[NDArray[np.floating[Any]]] = []
        for key, block in terms:
            A = check_array(block, f"A[{key!r}]")
            check_2d(A, f"A[{key!r}]")
            check_block_rows(A, m, f"A[{key!r}]")
            check_finite(A, f"A[{key!r}]")
            keys.append(key)
            blocks.append(A)
        if len(set(keys)) != len(keys):
            raise ValidationError(f"terms: duplicate variable in {keys}")
        if model is not None and model.dim != m:
            raise ValidationError(f"model: expected dim {m}, got {model.dim}")

        self._keys = tuple(keys)
        self._A = tuple(blocks)
        self._b = b_arr
        self._model = model

    @classmethod
    def from_conditional(cls, conditional: GaussianConditional) -> JacobianFactor:
        """
        Reinterpret a conditional as a factor over its frontals and parents.

        Key order (frontals, then parents), blocks, rhs and noise model
        carry over unchanged.
        """
        terms = conditional.frontal_blocks() + conditional.parent_blocks()
        return cls(terms, conditional.d, model=conditional.model)

    # === Structure ===

    @property
    def keys(self) -> tuple[Hashable, ...]:
        return self._keys

    @property
    def rows(self) -> int:
        return self._b.shape[0]

    @property
    def b(self) -> NDArray[np.floating[Any]]:
        return self._b

    @property
    def model(self) -> Diagonal | None:
        return self._model

    def A(self, key: Hashable) -> NDArray[np.floating[Any]]:
        return self._A[self._keys.index(key)]

    def dims(self) -> dict[Hashable, int]:
        return {key: A.shape[1] for key, A in zip(self._keys, self._A)}

    def whitened_system(self) -> tuple[list[NDArray[np.floating[Any]]], NDArray[np.floating[Any]]]:
        """Blocks and rhs with the noise model applied to each row."""
        if self._model is None:
            return list(self._A), self._b
        return [self._model.whiten_matrix(A) for A in self._A], self._model.whiten(self._b)

    # === Evaluation ===

    def multiply(self, x: VectorValues) -> NDArray[np.floating[Any]]:
        """Whitened A x (no rhs)."""
        blocks, _ = self.whitened_system()
        result = np.zeros(self.rows)
        for key, A in zip(self._keys, blocks):
            result += A @ x[key]
        return result

    def whitened_error(self, x: VectorValues) -> NDArray[np.floating[Any]]:
        """(A x - b) ./ sigmas."""
        _, b = self.whitened_system()
        return self.multiply(x) - b

    def error(self, x: VectorValues) -> float:
        e = self.whitened_error(x)
        return 0.5 * float(e @ e)

    def transpose_multiply(self, e: NDArray[np.floating[Any]]) -> VectorValues:
        """Whitened A' e, one block per key."""
        blocks, _ = self.whitened_system()
        return VectorValues({key: A.T @ e for key, A in zip(self._keys, blocks)})

    def gradient_contribution(self, x: VectorValues) -> VectorValues:
        """A_w' (A_w x - b_w)."""
        return self.transpose_multiply(self.whitened_error(x))

    def __repr__(self) -> str:
        return f"JacobianFactor(keys={list(self._keys)}, rows={self.rows})"
