"""
Kernel selection.

Operators cannot take keyword arguments, so ``A * x`` uses the process
default backend. It starts from the PYDENSE_BACKEND environment variable
('auto' when unset) and can be changed with set_default_backend().
The named functions (multiply, outer) accept ``backend=`` per call.
"""

import os
from functools import lru_cache
from typing import Literal

from pydense.core.compute.device import select_device
from pydense.core.protocols import KernelBackend
from pydense.kernels.cpu import CPUBlasKernel


# Type alias for backend selection
BackendChoice = Literal['auto', 'cpu', 'gpu', 'cpu_blas', 'gpu_torch']

BACKEND_CHOICES = frozenset({'auto', 'cpu', 'gpu', 'cpu_blas', 'gpu_torch'})

ENV_BACKEND = 'PYDENSE_BACKEND'

_CPU_KERNEL = CPUBlasKernel()
_default_backend: str = os.environ.get(ENV_BACKEND, 'auto')


def get_default_backend() -> str:
    """Backend used when no backend is passed explicitly."""
    return _default_backend


def set_default_backend(choice: BackendChoice) -> None:
    """
    Change the process-wide default backend.

    Raises:
        ValueError: If choice is not a known backend name
    """
    global _default_backend
    _check_choice(choice)
    _default_backend = choice


def get_kernel(choice: 'BackendChoice | KernelBackend | None' = None) -> KernelBackend:
    """
    Select and instantiate the appropriate kernel.

    Args:
        choice: Backend name, a KernelBackend instance (returned as is),
            or None for the process default:
            - 'auto': CPU BLAS. Level-2 operations are memory-bound and
              host/device transfer would dominate.
            - 'cpu', 'cpu_blas': BLAS through SciPy
            - 'gpu', 'gpu_torch': PyTorch on the best available GPU

    Returns:
        Kernel ready to execute gemv/ger/gerc

    Raises:
        ValueError: If unknown backend specified
        RuntimeError: If GPU requested but unavailable
    """
    if choice is None:
        choice = _default_backend

    if not isinstance(choice, str):
        if isinstance(choice, KernelBackend):
            return choice
        raise ValueError(f"Unknown backend: {choice!r}")

    _check_choice(choice)

    if choice in ('auto', 'cpu', 'cpu_blas'):
        return _CPU_KERNEL

    return _gpu_kernel()


@lru_cache(maxsize=1)
def _gpu_kernel() -> KernelBackend:
    from pydense.kernels.gpu import GPUTorchKernel

    device = select_device('gpu')
    return GPUTorchKernel(device=device.torch_device)


def _check_choice(choice: str) -> None:
    if choice not in BACKEND_CHOICES:
        raise ValueError(
            f"Unknown backend: {choice!r}. "
            f"Expected one of {sorted(BACKEND_CHOICES)}"
        )
