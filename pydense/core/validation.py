"""
Input validation utilities for PyDense.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes and
      integer -> float64 promotion for kernel compatibility)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import operator
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

from pydense.core.exceptions import (
    DimensionError,
    DimensionMismatchError,
    IndexOutOfBoundsError,
    SizeOverflowError,
    ValidationError,
)


# Largest element count a numpy buffer can address
MAX_BUFFER_LENGTH: int = int(np.iinfo(np.intp).max)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.inexact[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).
    Integer data is promoted to float64; floating and complex data keep
    their dtype.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating or complex dtype

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

    # Reject non-numeric dtypes (strings, bytes, datetime, bool, etc.)
    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    # BLAS kernels only exist for floating and complex types
    if not np.issubdtype(result.dtype, np.inexact):
        result = result.astype(np.float64)

    return result


def check_dtype(dtype: DTypeLike, name: str) -> np.dtype:
    """
    Resolve a dtype specifier to a floating or complex numpy dtype.

    Integer dtypes are promoted to float64.

    Raises:
        ValidationError: If dtype is not numeric
    """
    try:
        resolved = np.dtype(dtype)
    except TypeError as e:
        raise ValidationError(f"{name}: cannot interpret dtype {dtype!r}: {e}") from e

    if not np.issubdtype(resolved, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {resolved}, expected numeric dtype"
        )
    if not np.issubdtype(resolved, np.inexact):
        return np.dtype(np.float64)
    return resolved


def check_ndim(array: NDArray[Any], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Args:
        array: Array to check
        ndim: Required number of dimensions
        name: Parameter name for error messages

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[Any], name: str) -> None:
    """
    Verify array is 1-dimensional.

    Raises:
        DimensionError: If array is not 1D
    """
    check_ndim(array, 1, name)


def check_2d(array: NDArray[Any], name: str) -> None:
    """
    Verify array is 2-dimensional.

    Raises:
        DimensionError: If array is not 2D
    """
    check_ndim(array, 2, name)


def check_count(value: Any, name: str) -> int:
    """
    Verify value is a non-negative integer count.

    Accepts Python ints and numpy integers; rejects bools and floats.

    Args:
        value: Candidate count
        name: Parameter name for error messages

    Returns:
        The count as a Python int

    Raises:
        ValidationError: If value is not an integer or is negative
    """
    if isinstance(value, (bool, np.bool_)):
        raise ValidationError(f"{name}: expected integer count, got bool {value!r}")
    try:
        count = operator.index(value)
    except TypeError as e:
        raise ValidationError(
            f"{name}: expected integer count, got {type(value).__name__} {value!r}"
        ) from e
    if count < 0:
        raise ValidationError(f"{name}: must be non-negative, got {count}")
    return count


def check_buffer_size(rows: int, cols: int, dtype: np.dtype, name: str) -> int:
    """
    Verify a rows x cols buffer of dtype is representable.

    Args:
        rows: Row count (already validated non-negative)
        cols: Column count (already validated non-negative)
        dtype: Element dtype
        name: Parameter name for error messages

    Returns:
        The element count rows * cols

    Raises:
        SizeOverflowError: If the element count or byte size exceeds
            what a numpy buffer can address
    """
    length = rows * cols
    if length > MAX_BUFFER_LENGTH:
        raise SizeOverflowError(
            f"{name}: {rows} x {cols} = {length} elements exceeds "
            f"maximum buffer length {MAX_BUFFER_LENGTH}",
            requested=length,
            limit=MAX_BUFFER_LENGTH,
        )
    n_bytes = length * dtype.itemsize
    if n_bytes > MAX_BUFFER_LENGTH:
        raise SizeOverflowError(
            f"{name}: {length} elements of {dtype} need {n_bytes} bytes, "
            f"exceeds addressable size {MAX_BUFFER_LENGTH}",
            requested=n_bytes,
            limit=MAX_BUFFER_LENGTH,
        )
    return length


def check_index(index: Any, bound: int, axis: str) -> int:
    """
    Verify 0 <= index < bound.

    Negative indices are out of bounds; there is no wrap-around.

    Args:
        index: Candidate index
        bound: Exclusive upper bound (the extent of the axis)
        axis: 'row' or 'column', for error messages

    Returns:
        The index as a Python int

    Raises:
        IndexOutOfBoundsError: If index is outside [0, bound)
        TypeError: If index is not an integer
    """
    if isinstance(index, (bool, np.bool_)):
        raise TypeError(f"{axis} index must be an integer, got bool")
    i = operator.index(index)
    if i < 0 or i >= bound:
        raise IndexOutOfBoundsError(
            f"{axis} index {i} out of bounds for extent {bound}",
            index=i,
            bound=bound,
            axis=axis,
        )
    return i


def check_conformable(
    expected: int,
    actual: int,
    operation: str,
    detail: str,
) -> None:
    """
    Verify one operand extent matches what the operation requires.

    Args:
        expected: Extent required by the other operand
        actual: Extent supplied
        operation: Kernel or operator name, for error messages
        detail: What is being compared, e.g. "matrix columns vs vector length"

    Raises:
        DimensionMismatchError: If the extents differ
    """
    if expected != actual:
        raise DimensionMismatchError(
            f"{operation}: {detail} mismatch (expected {expected}, got {actual})",
            operation=operation,
            expected=expected,
            actual=actual,
        )
