"""
CPU kernels via BLAS (through SciPy).

Reference implementation of the KernelBackend protocol. SciPy exposes
Fortran BLAS, which is column-major, so row-major operands are handed
over as their transpose:

    RowMajor A (m x n, lead_dim ld)  ==  ColumnMajor Aᵀ (n x m, lead_dim ld)

and the transpose code is flipped accordingly. Conjugate-transpose of a
row-major matrix has no single column-major equivalent; it is computed
with the identity ``Aᴴx = conj(Aᵀ conj(x))``.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import get_blas_funcs

from pydense.core.attributes import Order, Transpose
from pydense.core.exceptions import ValidationError
from pydense.core.layout import matrix_view, op_shape
from pydense.core.protocols import Matrix, Vector
from pydense.core.validation import check_conformable


class CPUBlasKernel:
    """
    CPU kernel backed by BLAS level-2 routines (gemv, ger, geru, gerc).

    Implements the KernelBackend protocol. Stateless; one instance can
    be shared by any number of callers.
    """

    @property
    def name(self) -> str:
        return 'cpu_blas'

    def gemv(
        self,
        trans: Transpose,
        alpha: Any,
        a: Matrix,
        x: Vector,
        beta: Any,
        y: Vector,
    ) -> None:
        """
        y <- alpha * op(a) @ x + beta * y

        Raises:
            DimensionMismatchError: If x or y does not fit op(a)
            DimensionError: If a's layout metadata does not fit its buffer
            ValidationError: If the result cannot be stored in y's dtype
        """
        stored = matrix_view(a)
        xv = x.as_array()
        yv = y.as_mut_array()

        m, n = op_shape(a.rows(), a.cols(), trans)
        check_conformable(n, xv.shape[0], 'gemv', 'op(A) columns vs x length')
        check_conformable(m, yv.shape[0], 'gemv', 'op(A) rows vs y length')

        if m == 0:
            return
        if n == 0:
            _scale_in_place(yv, beta)
            return

        gemv, = get_blas_funcs(('gemv',), (stored, xv, yv))
        dtype = gemv.dtype
        _check_writable_as(dtype, yv.dtype, 'gemv')
        if trans is Transpose.ConjTrans and not np.issubdtype(dtype, np.complexfloating):
            trans = Transpose.Trans

        A = np.asarray(stored, dtype=dtype)
        x_in = np.array(xv, dtype=dtype)
        # beta == 0 overwrites y, NaN included
        y_in = np.zeros(yv.shape, dtype=dtype) if beta == 0 else np.array(yv, dtype=dtype)

        if a.order() is Order.RowMajor:
            fortran = A.T
            if trans is Transpose.ConjTrans:
                out = np.conj(gemv(
                    np.conj(alpha), fortran, np.conj(x_in),
                    beta=np.conj(beta), y=np.conj(y_in), trans=0,
                ))
            elif trans is Transpose.Trans:
                out = gemv(alpha, fortran, x_in, beta=beta, y=y_in, trans=0)
            else:
                out = gemv(alpha, fortran, x_in, beta=beta, y=y_in, trans=1)
        else:
            out = gemv(alpha, A, x_in, beta=beta, y=y_in, trans=trans.blas_code)

        yv[...] = out

    def ger(self, alpha: Any, x: Vector, y: Vector, a: Matrix) -> None:
        """a <- alpha * x yᵀ + a"""
        self._rank_one('ger', alpha, x, y, a, conjugate=False)

    def gerc(self, alpha: Any, x: Vector, y: Vector, a: Matrix) -> None:
        """a <- alpha * x yᴴ + a"""
        self._rank_one('gerc', alpha, x, y, a, conjugate=True)

    def _rank_one(
        self,
        operation: str,
        alpha: Any,
        x: Vector,
        y: Vector,
        a: Matrix,
        conjugate: bool,
    ) -> None:
        target = matrix_view(a, writable=True)
        xv = x.as_array()
        yv = y.as_array()

        check_conformable(a.rows(), xv.shape[0], operation, 'A rows vs x length')
        check_conformable(a.cols(), yv.shape[0], operation, 'A columns vs y length')

        if target.size == 0:
            return

        is_complex = any(np.iscomplexobj(v) for v in (target, xv, yv))
        row_major = a.order() is Order.RowMajor
        if not is_complex:
            routine = 'ger'
        elif conjugate and not row_major:
            routine = 'gerc'
        else:
            routine = 'geru'

        rank_one, = get_blas_funcs((routine,), (target, xv, yv))
        dtype = rank_one.dtype
        _check_writable_as(dtype, target.dtype, operation)

        current = np.asarray(target, dtype=dtype)
        x_in = np.array(xv, dtype=dtype)
        y_in = np.array(yv, dtype=dtype)

        if row_major:
            # Aᵀ += alpha * y xᵀ, or alpha * conj(y) xᵀ for the conjugate update
            if conjugate and is_complex:
                y_in = np.conj(y_in)
            out = rank_one(alpha, y_in, x_in, a=current.T)
            target[...] = out.T
        else:
            out = rank_one(alpha, x_in, y_in, a=current)
            target[...] = out


def _scale_in_place(values: NDArray[Any], beta: Any) -> None:
    """y <- beta * y, with beta == 0 clearing y as BLAS does."""
    if beta == 0:
        values[...] = 0
    else:
        values *= beta


def _check_writable_as(kernel_dtype: np.dtype, target_dtype: np.dtype, operation: str) -> None:
    if not np.can_cast(kernel_dtype, target_dtype, casting='same_kind'):
        raise ValidationError(
            f"{operation}: result of type {kernel_dtype} cannot be stored in "
            f"{target_dtype} output without losing information"
        )
