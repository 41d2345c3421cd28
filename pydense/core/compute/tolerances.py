"""
Tolerance tiers for numerical validation.

Defines precision expectations for different kernel paths:
- CPU BLAS, double precision (reference)
- CPU BLAS, single precision
- GPU FP64: same as CPU double
- GPU FP32: relaxed for single-precision arithmetic

Used by the test suite to compare kernel output against the
elementwise definition of each operation.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


CPU_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-14,
    name='cpu_fp64',
    description='CPU BLAS double precision',
)

CPU_FP32 = ToleranceTier(
    rtol=1e-5,
    atol=1e-6,
    name='cpu_fp32',
    description='CPU BLAS single precision',
)

GPU_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-14,
    name='gpu_fp64',
    description='GPU double precision, matches CPU reference',
)

GPU_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='gpu_fp32',
    description='GPU single precision',
)


def select_tolerance(kernel_name: str, dtype: np.dtype | type = np.float64) -> ToleranceTier:
    """Select the tolerance tier for a kernel and element dtype."""
    single = np.dtype(dtype) in (np.dtype(np.float32), np.dtype(np.complex64))
    if kernel_name.startswith('gpu'):
        if 'fp64' in kernel_name and not single:
            return GPU_FP64
        return GPU_FP32
    if single:
        return CPU_FP32
    return CPU_FP64
