"""
Numeric kernels.

Available kernels:
    CPUBlasKernel: BLAS level-2 through SciPy (reference)
    GPUTorchKernel: PyTorch on CUDA/MPS (import from pydense.kernels.gpu)
"""

from pydense.kernels.cpu import CPUBlasKernel
from pydense.kernels.select import (
    BackendChoice,
    get_kernel,
    get_default_backend,
    set_default_backend,
)

__all__ = [
    "CPUBlasKernel",
    "BackendChoice",
    "get_kernel",
    "get_default_backend",
    "set_default_backend",
]
