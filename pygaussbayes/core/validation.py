"""
Input validation utilities for pygaussbayes.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - No default handling of edge cases
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pygaussbayes.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with float64 dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    # Blocks are combined with each other, so keep one precision throughout
    return result.astype(np.float64, copy=True)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_square(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a 2D array is square.

    Args:
        array: 2D array to check
        name: Parameter name for error messages

    Raises:
        DimensionError: If array is not square
    """
    check_2d(array, name)
    rows, cols = array.shape
    if rows != cols:
        raise DimensionError(f"{name}: expected square matrix, got shape {array.shape}")


def check_upper_triangular(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a square matrix has no entries below the diagonal.

    Exact zeros are required: the solvers only ever read the upper
    triangle, so anything stored below it would be silently ignored.

    Raises:
        ValidationError: If any strictly-lower entry is nonzero
    """
    lower = np.tril(array, k=-1)
    if np.any(lower != 0):
        rows, cols = np.nonzero(lower)
        positions = list(zip(rows.tolist(), cols.tolist()))
        raise ValidationError(
            f"{name}: expected upper triangular matrix, "
            f"nonzero entries below diagonal at {positions[:5]}"
        )


def check_positive(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify all entries are strictly positive.

    Raises:
        ValidationError: If any entry is <= 0
    """
    bad = np.where(array <= 0)[0]
    if len(bad) > 0:
        raise ValidationError(
            f"{name}: entries {bad.tolist()} are not strictly positive "
            f"(values {array[bad].tolist()})"
        )


def check_block_rows(
    block: NDArray[np.floating[Any]],
    rows: int,
    name: str,
) -> None:
    """
    Verify a coefficient block has the expected number of rows.

    Raises:
        DimensionError: If block.shape[0] != rows
    """
    if block.shape[0] != rows:
        raise DimensionError(
            f"{name}: expected {rows} rows, got shape {block.shape}"
        )
