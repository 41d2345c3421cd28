"""
GPU kernels using PyTorch.

Performance path for large operands, validated against the CPU BLAS
reference. Supports CUDA (Linux/Windows) and MPS (macOS Apple Silicon).

Operands are read through the same strided views as the CPU kernel,
transferred to the device, and results are copied back into the output
buffer. Level-2 operations are memory-bound, so this only pays off when
the transfer is amortised; the default backend stays on the CPU.
"""

import warnings
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pydense.core.attributes import Transpose
from pydense.core.exceptions import NumericalError, ValidationError
from pydense.core.layout import matrix_view, op_shape
from pydense.core.protocols import Matrix, Vector
from pydense.core.validation import check_conformable


class GPUTorchKernel:
    """
    GPU kernel using torch.mv / torch.outer.

    FP32 by default for performance on consumer GPUs. Double-precision
    operands are computed in FP32 unless use_fp64=True; a warning is
    issued the first time that happens.
    """

    def __init__(self, use_fp64: bool = False, device: str = 'cuda'):
        """
        Initialize GPU kernel.

        Args:
            use_fp64: If True, compute double-precision operands in FP64
                (slow on consumer GPUs).
            device: GPU device ('cuda', 'cuda:0', 'mps')

        Raises:
            RuntimeError: If the device is unavailable, or FP64 is
                requested on MPS
            ValueError: If the device string is not a GPU device
        """
        import torch

        if device.startswith('cuda'):
            if not torch.cuda.is_available():
                raise RuntimeError(
                    "CUDA not available. Install PyTorch with CUDA support, "
                    "or use backend='cpu'."
                )
        elif device == 'mps':
            if not (hasattr(torch.backends, 'mps') and torch.backends.mps.is_available()):
                raise RuntimeError(
                    "MPS not available. Requires macOS with Apple Silicon "
                    "and PyTorch with MPS support."
                )
            if use_fp64:
                raise RuntimeError(
                    "MPS does not support float64. Use use_fp64=False "
                    "or use backend='cpu' for double precision."
                )
        else:
            raise ValueError(
                f"Unknown GPU device: {device!r}. Use 'cuda' or 'mps'."
            )

        self.device = torch.device(device)
        self.use_fp64 = use_fp64
        self._warned_downcast = False

    @property
    def name(self) -> str:
        precision = "fp64" if self.use_fp64 else "fp32"
        return f'gpu_torch_{precision}'

    def gemv(
        self,
        trans: Transpose,
        alpha: Any,
        a: Matrix,
        x: Vector,
        beta: Any,
        y: Vector,
    ) -> None:
        """y <- alpha * op(a) @ x + beta * y"""
        import torch

        stored = matrix_view(a)
        xv = x.as_array()
        yv = y.as_mut_array()

        m, n = op_shape(a.rows(), a.cols(), trans)
        check_conformable(n, xv.shape[0], 'gemv', 'op(A) columns vs x length')
        check_conformable(m, yv.shape[0], 'gemv', 'op(A) rows vs y length')
        if m == 0:
            return

        dtype = self._compute_dtype(stored, xv, yv)
        _check_writable_as(dtype, yv.dtype, 'gemv')

        A = self._to_device(stored, dtype)
        if trans is Transpose.Trans:
            A = A.T
        elif trans is Transpose.ConjTrans:
            A = A.conj().T

        result = torch.mv(A, self._to_device(xv, dtype)) * _scalar(alpha)
        if beta != 0:
            result = result + self._to_device(yv, dtype) * _scalar(beta)

        self._store(result, yv, (stored, xv, yv), 'gemv')

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
        import torch

        target = matrix_view(a, writable=True)
        xv = x.as_array()
        yv = y.as_array()

        check_conformable(a.rows(), xv.shape[0], operation, 'A rows vs x length')
        check_conformable(a.cols(), yv.shape[0], operation, 'A columns vs y length')
        if target.size == 0:
            return

        dtype = self._compute_dtype(target, xv, yv)
        _check_writable_as(dtype, target.dtype, operation)

        y_dev = self._to_device(yv, dtype)
        if conjugate:
            y_dev = y_dev.conj()
        update = torch.outer(self._to_device(xv, dtype), y_dev) * _scalar(alpha)
        result = self._to_device(target, dtype) + update

        self._store(result, target, (target, xv, yv), operation)

    def _compute_dtype(self, *arrays: NDArray[Any]) -> np.dtype:
        """Device dtype for a set of operands, honouring use_fp64."""
        dtype = np.result_type(*arrays)
        if not np.issubdtype(dtype, np.inexact):
            dtype = np.dtype(np.float64)
        is_complex = np.issubdtype(dtype, np.complexfloating)
        if dtype.itemsize > (8 if is_complex else 4) and not self.use_fp64:
            if not self._warned_downcast:
                warnings.warn(
                    f"{self.name}: {dtype} operands are computed in single precision; "
                    f"pass use_fp64=True or use backend='cpu' for double precision"
                )
                self._warned_downcast = True
            return np.dtype(np.complex64 if is_complex else np.float32)
        return dtype

    def _to_device(self, array: NDArray[Any], dtype: np.dtype) -> Any:
        import torch
        host = np.ascontiguousarray(array, dtype=dtype)
        return torch.from_numpy(host).to(self.device)

    def _store(
        self,
        result: Any,
        out: NDArray[Any],
        inputs: tuple[NDArray[Any], ...],
        operation: str,
    ) -> None:
        host = result.cpu().numpy()
        if not np.all(np.isfinite(host)) and all(np.all(np.isfinite(v)) for v in inputs):
            raise NumericalError(
                f"{operation}: {self.name} produced non-finite values from finite "
                f"inputs (overflow in {host.dtype}); use backend='cpu'"
            )
        out[...] = host


def _scalar(value: Any) -> Any:
    """Python scalar for torch arithmetic."""
    return np.asarray(value).item()


def _check_writable_as(kernel_dtype: np.dtype, target_dtype: np.dtype, operation: str) -> None:
    if np.issubdtype(kernel_dtype, np.complexfloating) and not np.issubdtype(
        target_dtype, np.complexfloating
    ):
        raise ValidationError(
            f"{operation}: result of type {kernel_dtype} cannot be stored in "
            f"{target_dtype} output without losing information"
        )
