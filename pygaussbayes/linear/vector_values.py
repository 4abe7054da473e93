"""
VectorValues: a mapping from variable key to a vector block.

This is the currency of every solver in the package. It is used as:
    - an externally supplied partial assignment (optimize(missing))
    - the accumulating solution during back-substitution
    - an arbitrary right-hand side (back_substitute(rhs))
    - gradient and transpose-solve inputs and outputs

Keys are any hashable variable identifier. Blocks are 1D float64 arrays.
Iteration follows insertion order.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Iterator, Mapping
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pygaussbayes.core.compute.tolerances import DEFAULT_TOL
from pygaussbayes.core.exceptions import MissingVariableError, ValidationError
from pygaussbayes.core.validation import check_array, check_1d


class VectorValues:
    """
    Mutable key -> vector block map.

    Each solver call builds and owns its own instance; nothing in the
    package shares a VectorValues across calls.

    Example:
        >>> x = VectorValues({'x1': [1.0], 'x2': [2.0, 3.0]})
        >>> x['x2']
        array([2., 3.])
        >>> x.vector(['x2', 'x1'])
        array([2., 3., 1.])
    """

    def __init__(self, values: Mapping[Hashable, ArrayLike] | None = None):
        self._values: dict[Hashable, NDArray[np.floating[Any]]] = {}
        if values is not None:
            for key, value in values.items():
                self[key] = value

    @classmethod
    def zero(cls, like: VectorValues) -> VectorValues:
        """Zero-valued VectorValues with the same keys and dims as `like`."""
        return cls({key: np.zeros_like(value) for key, value in like.items()})

    # === Mapping protocol ===

    def __getitem__(self, key: Hashable) -> NDArray[np.floating[Any]]:
        try:
            return self._values[key]
        except KeyError:
            available = tuple(self._values)
            raise MissingVariableError(
                f"VectorValues has no entry for variable {key!r}. "
                f"Available: {list(available)}",
                key=key,
                available=available,
            ) from None

    def __setitem__(self, key: Hashable, value: ArrayLike) -> None:
        arr = check_array(value, f"value for {key!r}")
        if arr.ndim == 0:
            arr = arr.reshape(1)
        check_1d(arr, f"value for {key!r}")
        self._values[key] = arr

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        body = ", ".join(f"{key!r}: {value.tolist()}" for key, value in self._values.items())
        return f"VectorValues({{{body}}})"

    def keys(self) -> list[Hashable]:
        return list(self._values)

    def items(self) -> Iterable[tuple[Hashable, NDArray[np.floating[Any]]]]:
        return self._values.items()

    # === Insertion ===

    def insert(self, key: Hashable, value: ArrayLike) -> None:
        """
        Add a new entry.

        Raises:
            ValidationError: If `key` is already present
        """
        if key in self._values:
            raise ValidationError(
                f"VectorValues already has an entry for variable {key!r}; "
                f"use update() or item assignment to overwrite"
            )
        self[key] = value

    def update(self, other: VectorValues | Mapping[Hashable, ArrayLike]) -> None:
        """Merge `other` into this map, overwriting existing entries."""
        for key, value in other.items():
            self[key] = value

    def copy(self) -> VectorValues:
        """Copy with independent arrays."""
        result = VectorValues()
        result._values = {key: value.copy() for key, value in self._values.items()}
        return result

    # === Block access ===

    def vector(self, keys: Iterable[Hashable]) -> NDArray[np.floating[Any]]:
        """
        Concatenate the blocks for `keys`, in the given order.

        Raises:
            MissingVariableError: If any key is absent
        """
        blocks = [self[key] for key in keys]
        if not blocks:
            return np.zeros(0)
        return np.concatenate(blocks)

    def dims(self) -> dict[Hashable, int]:
        """Block length for each key."""
        return {key: value.shape[0] for key, value in self._values.items()}

    # === Linear algebra ===

    def _check_same_structure(self, other: VectorValues, op: str) -> None:
        if set(self._values) != set(other._values):
            only_self = [k for k in self._values if k not in other._values]
            only_other = [k for k in other._values if k not in self._values]
            raise ValidationError(
                f"{op}: VectorValues have different keys "
                f"(only in left: {only_self}, only in right: {only_other})"
            )

    def dot(self, other: VectorValues) -> float:
        """Inner product over all blocks."""
        self._check_same_structure(other, 'dot')
        return float(sum(value @ other._values[key] for key, value in self._values.items()))

    def norm(self) -> float:
        """Euclidean norm of the stacked vector."""
        return float(np.sqrt(self.dot(self)))

    def scale(self, alpha: float) -> VectorValues:
        """New VectorValues with every block multiplied by `alpha`."""
        return VectorValues({key: alpha * value for key, value in self._values.items()})

    def __add__(self, other: VectorValues) -> VectorValues:
        self._check_same_structure(other, 'add')
        return VectorValues({key: value + other._values[key] for key, value in self._values.items()})

    def __sub__(self, other: VectorValues) -> VectorValues:
        self._check_same_structure(other, 'subtract')
        return VectorValues({key: value - other._values[key] for key, value in self._values.items()})

    def __neg__(self) -> VectorValues:
        return self.scale(-1.0)

    # === Comparison ===

    def equals(self, other: VectorValues, tol: float = DEFAULT_TOL) -> bool:
        """True if both have the same keys and every block agrees within `tol`."""
        if set(self._values) != set(other._values):
            return False
        for key, value in self._values.items():
            theirs = other._values[key]
            if value.shape != theirs.shape:
                return False
            if not np.all(np.abs(value - theirs) <= tol):
                return False
        return True
