"""
GPU kernel tests.

GPUTorchKernel is validated against CPUBlasKernel using the tolerance
tier for its precision. Skipped when no CUDA or MPS device is present.
"""

import warnings

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pydense import DenseVector, Mat, multiply, outer, trans
from pydense.core.attributes import Order, Transpose
from pydense.core.compute.device import detect_gpu
from pydense.core.compute.tolerances import select_tolerance
from pydense.core.exceptions import NumericalError, ValidationError
from pydense.kernels.cpu import CPUBlasKernel


GPU = detect_gpu()

pytestmark = pytest.mark.skipif(GPU is None, reason="No GPU available")


@pytest.fixture
def gpu_kernel():
    from pydense.kernels.gpu import GPUTorchKernel
    return GPUTorchKernel(device=GPU.torch_device)


@pytest.fixture
def gpu_kernel_fp64():
    if not GPU.supports_fp64:
        pytest.skip("Device has no float64 support")
    from pydense.kernels.gpu import GPUTorchKernel
    return GPUTorchKernel(use_fp64=True, device=GPU.torch_device)


class TestGPUKernel:

    def test_name(self, gpu_kernel):
        assert gpu_kernel.name == 'gpu_torch_fp32'

    @pytest.mark.parametrize("op", list(Transpose))
    @pytest.mark.parametrize("order", list(Order))
    def test_gemv_matches_cpu(self, gpu_kernel, strided_matrix, rng, op, order):
        data = rng.standard_normal((40, 30)).astype(np.float32)
        A = strided_matrix(data, order=order, lead_dim=48)
        n = 40 if op is not Transpose.NoTrans else 30
        m = 70 - n
        x = DenseVector(rng.standard_normal(n).astype(np.float32))
        y0 = rng.standard_normal(m).astype(np.float32)

        y_cpu, y_gpu = DenseVector(y0), DenseVector(y0)
        CPUBlasKernel().gemv(op, 2.0, A, x, 0.5, y_cpu)
        gpu_kernel.gemv(op, 2.0, A, x, 0.5, y_gpu)

        tol = select_tolerance(gpu_kernel.name, np.float32)
        assert_allclose(y_gpu.to_numpy(), y_cpu.to_numpy(), rtol=tol.rtol, atol=tol.atol)

    @pytest.mark.parametrize("conjugate", [False, True])
    def test_rank_one_matches_cpu(self, gpu_kernel, rng, conjugate):
        x = rng.standard_normal(20).astype(np.complex64)
        y = (rng.standard_normal(15) + 1j * rng.standard_normal(15)).astype(np.complex64)
        start = np.ones((20, 15), dtype=np.complex64)

        A_cpu, A_gpu = Mat.from_array(start), Mat.from_array(start)
        name = 'gerc' if conjugate else 'ger'
        getattr(CPUBlasKernel(), name)(1.0, DenseVector(x), DenseVector(y), A_cpu)
        getattr(gpu_kernel, name)(1.0, DenseVector(x), DenseVector(y), A_gpu)

        tol = select_tolerance(gpu_kernel.name, np.complex64)
        assert_allclose(A_gpu.to_numpy(), A_cpu.to_numpy(), rtol=tol.rtol, atol=tol.atol)

    def test_operator_surface(self, gpu_kernel):
        A = Mat.from_rows([[2, -2], [2, -4]], dtype=np.float32)
        x = DenseVector([2, 1], dtype=np.float32)
        assert multiply(A, x, backend=gpu_kernel) == [2.0, 0.0]

        M = outer([2.0, 1.0], trans([3.0, 6.0]), backend=gpu_kernel)
        assert M == Mat.from_rows([[6.0, 12.0], [3.0, 6.0]])

    def test_fp64_downcast_warns_once(self, gpu_kernel):
        A = Mat.from_rows([[1.0]])
        x = DenseVector([1.0])
        with pytest.warns(UserWarning, match="single precision"):
            multiply(A, x, backend=gpu_kernel)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            multiply(A, x, backend=gpu_kernel)

    def test_overflow_raises(self, gpu_kernel):
        A = Mat.from_rows([[1e30]])
        x = DenseVector([1e30])
        with pytest.warns(UserWarning):
            with pytest.raises(NumericalError, match="non-finite"):
                multiply(A, x, backend=gpu_kernel)

    def test_complex_into_real_rejected(self, gpu_kernel):
        with pytest.raises(ValidationError):
            gpu_kernel.gemv(Transpose.NoTrans, 1.0, Mat.from_rows([[1j]]),
                            DenseVector([1.0]), 0.0, DenseVector.zeros(1))


class TestGPUKernelFP64:

    def test_gemv_matches_cpu(self, gpu_kernel_fp64, rng):
        data = rng.standard_normal((25, 10))
        x = rng.standard_normal(10)
        y = multiply(Mat.from_array(data), x, backend=gpu_kernel_fp64)

        tol = select_tolerance(gpu_kernel_fp64.name)
        assert_allclose(y.to_numpy(), data @ x, rtol=tol.rtol, atol=tol.atol)
