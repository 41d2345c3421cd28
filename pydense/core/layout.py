"""
Storage layout reasoning.

Turns the metadata a Matrix exposes (rows, cols, leading dimension,
order) into a strided 2-D numpy view over its flat buffer. Kernels work
on these views; no element is copied here.

For a RowMajor matrix element (i, j) lives at ``i * lead_dim + j``;
for ColumnMajor at ``j * lead_dim + i``.
"""

from typing import Any

import numpy as np
from numpy.lib.stride_tricks import as_strided
from numpy.typing import NDArray

from pydense.core.attributes import Order, Transpose
from pydense.core.exceptions import DimensionError
from pydense.core.protocols import Matrix


def required_length(rows: int, cols: int, lead_dim: int, order: Order) -> int:
    """
    Minimum buffer length that can hold rows x cols elements.

    The last row (RowMajor) or column (ColumnMajor) need not be padded
    out to ``lead_dim``.
    """
    if rows == 0 or cols == 0:
        return 0
    if order is Order.RowMajor:
        return (rows - 1) * lead_dim + cols
    return (cols - 1) * lead_dim + rows


def check_layout(
    rows: int,
    cols: int,
    lead_dim: int,
    order: Order,
    length: int,
    name: str,
) -> None:
    """
    Verify layout metadata describes a valid region of a buffer.

    Raises:
        DimensionError: If lead_dim is smaller than the contiguous extent
            or the buffer is too short for the declared shape
    """
    minor = cols if order is Order.RowMajor else rows
    if lead_dim < minor:
        raise DimensionError(
            f"{name}: leading dimension {lead_dim} too small for "
            f"{rows} x {cols} {order.name} storage (need >= {minor})"
        )
    needed = required_length(rows, cols, lead_dim, order)
    if length < needed:
        raise DimensionError(
            f"{name}: buffer holds {length} elements, "
            f"{rows} x {cols} {order.name} storage with lead_dim={lead_dim} "
            f"needs {needed}"
        )


def matrix_view(matrix: Matrix, writable: bool = False) -> NDArray[Any]:
    """
    Strided (rows, cols) view of a Matrix's buffer.

    The view ignores ``matrix.transpose()``; it shows the matrix as
    stored. Use ``op_shape`` for the extents after the tag is applied.

    Args:
        matrix: Any Matrix implementation
        writable: Build the view over ``as_mut_array()`` instead of
            ``as_array()``

    Returns:
        2-D numpy array sharing memory with the matrix

    Raises:
        DimensionError: If the buffer is not 1-D or the metadata does not
            fit it
    """
    buffer = matrix.as_mut_array() if writable else matrix.as_array()
    rows, cols = matrix.rows(), matrix.cols()
    if buffer.ndim != 1:
        raise DimensionError(
            f"{type(matrix).__name__}: buffer must be flat (1-D), got {buffer.ndim}D "
            f"with shape {buffer.shape}"
        )
    lead_dim, order = matrix.lead_dim(), matrix.order()
    check_layout(rows, cols, lead_dim, order, buffer.size, type(matrix).__name__)

    itemsize = buffer.strides[0]
    if order is Order.RowMajor:
        strides = (lead_dim * itemsize, itemsize)
    else:
        strides = (itemsize, lead_dim * itemsize)
    if rows == 0 or cols == 0:
        return np.empty((rows, cols), dtype=buffer.dtype)
    return as_strided(buffer, shape=(rows, cols), strides=strides, writeable=writable)


def op_shape(rows: int, cols: int, trans: Transpose) -> tuple[int, int]:
    """Shape of op(A) for a stored rows x cols matrix A."""
    if trans.swaps_dims:
        return cols, rows
    return rows, cols
