"""
Operator dispatch.

Maps the operator surface onto fully parameterised kernel calls:

    A * x          ->  gemv(op, one, A, x, zero, y)    y freshly allocated
    x * (y ^ T)    ->  ger(one, x, y, M)               M = zeros(n, m)
    x * (y ^ H)    ->  gerc(one, x, y, M)              M = zeros(n, m)

Shapes are checked here, before any kernel runs, so a failure never
leaves a partially written result. Operands are only read.
"""

from typing import Any

import numpy as np

from pydense.core.attributes import Transpose
from pydense.core.layout import op_shape
from pydense.core.protocols import KernelBackend, Matrix
from pydense.core.scalar import scalar_identity
from pydense.core.validation import check_conformable, check_dtype
from pydense.kernels.select import BackendChoice, get_kernel
from pydense.matrix.dense import Mat
from pydense.ops.markers import Trans
from pydense.vector.dense import DenseVector, as_vector


def multiply(
    matrix: Matrix,
    vector: Any,
    *,
    backend: 'BackendChoice | KernelBackend | None' = None,
) -> DenseVector:
    """
    Matrix-vector product y = op(A) x.

    op is taken from ``matrix.transpose()``: a plain Mat is used as is,
    ``A.T`` and ``A.H`` select the transposed kernel variants.

    Args:
        matrix: Any Matrix implementation
        vector: A Vector implementation or 1-D array-like
        backend: Kernel to run on; None uses the process default

    Returns:
        New DenseVector of length op(A).rows

    Raises:
        TypeError: If matrix does not implement Matrix
        DimensionMismatchError: If op(A).cols != len(vector)
        ValidationError: If vector is not numeric
    """
    if not isinstance(matrix, Matrix):
        raise TypeError(
            f"multiply: left operand must implement Matrix, got {type(matrix).__name__}"
        )
    x = as_vector(vector, 'vector')

    tag = matrix.transpose()
    m, n = op_shape(matrix.rows(), matrix.cols(), tag)
    check_conformable(n, len(x), 'multiply', 'matrix columns vs vector length')

    dtype = check_dtype(
        np.result_type(matrix.as_array().dtype, x.as_array().dtype), 'dtype'
    )
    identity = scalar_identity(dtype)
    kernel = get_kernel(backend)

    result = DenseVector.zeros(m, dtype=dtype)
    kernel.gemv(tag, identity.one, matrix, x, identity.zero, result)
    return result


def outer(
    x: Any,
    marked: Trans,
    *,
    backend: 'BackendChoice | KernelBackend | None' = None,
) -> Mat:
    """
    Outer product M = x yᵀ (marker tag Trans) or x yᴴ (ConjTrans).

    The result starts filled with zero and the kernel accumulates into
    it with scale one.

    Args:
        x: Left vector (Vector implementation or 1-D array-like), length n
        marked: Trans marker wrapping y, length m
        backend: Kernel to run on; None uses the process default

    Returns:
        New n x m Mat

    Raises:
        TypeError: If marked is not a Trans marker
        ValidationError: If an operand is not numeric
        SizeOverflowError: If n * m cannot be allocated
    """
    if not isinstance(marked, Trans):
        raise TypeError(
            f"outer: right operand must be a transpose marker such as y ^ T, "
            f"got {type(marked).__name__}"
        )
    xv = as_vector(x, 'x')
    yv = as_vector(marked.vector, 'y')

    dtype = check_dtype(
        np.result_type(xv.as_array().dtype, yv.as_array().dtype), 'dtype'
    )
    identity = scalar_identity(dtype)
    kernel = get_kernel(backend)

    result = Mat.fill(identity.zero, len(xv), len(yv), dtype=dtype)
    if marked.tag is Transpose.Trans:
        kernel.ger(identity.one, xv, yv, result)
    else:
        kernel.gerc(identity.one, xv, yv, result)
    return result

