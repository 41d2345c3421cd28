"""
Tests for matrix-vector dispatch (A * x).

Validates:
    - The reference scenario A = [[2,-2],[2,-4]], x = [2,1] -> [2, 0]
    - (A x)[i] == sum_j A[i][j] x[j] for rectangular shapes
    - Kernel is called as gemv(NoTrans, one, A, x, zero, y)
    - Dimension mismatch fails before the kernel runs
    - Operands are never mutated
    - Transposed views and third-party storage layouts
"""

import numpy as np
import pytest

from pydense import DenseVector, H, Mat, T, multiply
from pydense.core.attributes import Order, Transpose
from pydense.core.compute.tolerances import CPU_FP32, CPU_FP64
from pydense.core.exceptions import DimensionMismatchError, ValidationError


# ═══════════════════════════════════════════════════════════════════════
# Reference scenario
# ═══════════════════════════════════════════════════════════════════════


class TestScenario:

    def test_operator(self):
        A = Mat.from_rows([[2, -2], [2, -4]])
        x = DenseVector([2, 1])
        assert A * x == [2.0, 0.0]

    def test_matmul_operator(self):
        A = Mat.from_rows([[2, -2], [2, -4]])
        assert A @ DenseVector([2, 1]) == [2.0, 0.0]

    def test_plain_sequence_operand(self):
        A = Mat.from_rows([[2, -2], [2, -4]])
        assert A * [2, 1] == [2.0, 0.0]
        assert A * np.array([2.0, 1.0]) == [2.0, 0.0]

    def test_single_precision(self):
        A = Mat.from_rows([[2, -2], [2, -4]], dtype=np.float32)
        y = A * DenseVector([2, 1], dtype=np.float32)
        assert y.dtype == np.float32
        assert y == [2.0, 0.0]


# ═══════════════════════════════════════════════════════════════════════
# Elementwise definition
# ═══════════════════════════════════════════════════════════════════════


class TestDefinition:

    @pytest.mark.parametrize("shape", [(1, 1), (3, 5), (5, 3), (8, 8)])
    def test_matches_row_sums(self, rng, shape):
        m, n = shape
        data = rng.standard_normal(shape)
        x = rng.standard_normal(n)
        y = Mat.from_array(data) * x

        assert len(y) == m
        expected = [sum(data[i, j] * x[j] for j in range(n)) for i in range(m)]
        np.testing.assert_allclose(
            y.to_numpy(), expected, rtol=CPU_FP64.rtol, atol=CPU_FP64.atol
        )

    def test_float32_tolerance(self, rng):
        data = rng.standard_normal((6, 4)).astype(np.float32)
        x = rng.standard_normal(4).astype(np.float32)
        y = Mat.from_array(data) * DenseVector(x)
        np.testing.assert_allclose(
            y.to_numpy(), data.astype(np.float64) @ x, rtol=CPU_FP32.rtol, atol=CPU_FP32.atol
        )

    def test_complex(self, complex_operands):
        A, x, _ = complex_operands
        y = Mat.from_array(A) * x
        assert y.dtype == np.complex128
        np.testing.assert_allclose(y.to_numpy(), A @ x)

    def test_real_matrix_complex_vector(self, rng):
        data = rng.standard_normal((3, 2))
        x = np.array([1 + 1j, 2 - 1j])
        y = Mat.from_array(data) * x
        np.testing.assert_allclose(y.to_numpy(), data @ x)

    def test_empty_columns_give_zero_vector(self):
        y = Mat(3, 0) * np.zeros(0)
        assert y == [0.0, 0.0, 0.0]

    def test_empty_rows_give_empty_vector(self):
        y = Mat(0, 2) * [1.0, 2.0]
        assert len(y) == 0


# ═══════════════════════════════════════════════════════════════════════
# Dispatch contract
# ═══════════════════════════════════════════════════════════════════════


class TestDispatch:

    def test_kernel_call(self, recording_kernel):
        A = Mat.from_rows([[1, 2], [3, 4]])
        multiply(A, [1, 1], backend=recording_kernel)

        assert len(recording_kernel.calls) == 1
        name, trans, alpha, beta = recording_kernel.calls[0]
        assert name == 'gemv'
        assert trans is Transpose.NoTrans
        assert alpha == 1 and np.asarray(alpha).dtype == np.float64
        assert beta == 0 and np.asarray(beta).dtype == np.float64

    def test_dimension_mismatch_before_kernel(self, recording_kernel):
        A = Mat(2, 3)
        with pytest.raises(DimensionMismatchError) as exc_info:
            multiply(A, [1.0, 2.0], backend=recording_kernel)
        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2
        assert recording_kernel.calls == []

    def test_operator_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError, match="matrix columns vs vector length"):
            Mat(2, 2) * DenseVector([1.0, 2.0, 3.0])

    def test_operands_unchanged(self, rng):
        A = Mat.from_array(rng.standard_normal((3, 3)))
        x = DenseVector(rng.standard_normal(3))
        A_before, x_before = A.copy(), x.copy()
        A * x
        assert A == A_before
        assert x == x_before

    def test_result_is_fresh(self):
        A = Mat.from_rows([[1.0]])
        x = DenseVector([2.0])
        y = A * x
        y[0] = 0.0
        assert A * x == [2.0]

    def test_non_matrix_left_operand(self):
        with pytest.raises(TypeError, match="must implement Matrix"):
            multiply(np.eye(2), [1, 2])

    def test_non_numeric_vector(self):
        with pytest.raises(ValidationError):
            Mat(2, 2) * ["a", "b"]

    def test_matrix_times_matrix_unsupported(self):
        with pytest.raises(TypeError):
            Mat(2, 2) * Mat(2, 2)

    @pytest.mark.parametrize("marker", [T, H])
    def test_matrix_times_marked_vector_unsupported(self, marker):
        with pytest.raises(TypeError):
            Mat(2, 2) * (DenseVector([1.0, 2.0]) ^ marker)

    def test_tagged_matrix_times_marked_vector_unsupported(self):
        with pytest.raises(TypeError):
            Mat(2, 2).T * ([1.0, 2.0] ^ T)


# ═══════════════════════════════════════════════════════════════════════
# Transposed views and foreign layouts
# ═══════════════════════════════════════════════════════════════════════


class TestTaggedAndStrided:

    def test_transpose_view(self, rng, recording_kernel):
        data = rng.standard_normal((4, 3))
        x = rng.standard_normal(4)
        y = multiply(Mat.from_array(data).T, x, backend=recording_kernel)

        assert recording_kernel.calls[0][1] is Transpose.Trans
        assert len(y) == 3
        np.testing.assert_allclose(y.to_numpy(), data.T @ x)

    def test_transpose_view_operator(self):
        A = Mat.from_rows([[1, 2, 3], [4, 5, 6]])
        assert A.T * [1, 1] == [5.0, 7.0, 9.0]

    def test_transpose_view_dimension_check(self):
        with pytest.raises(DimensionMismatchError):
            Mat(4, 3).T * np.ones(3)

    def test_conjugate_transpose_view(self, complex_operands):
        A, _, y = complex_operands
        result = Mat.from_array(A).H * y
        np.testing.assert_allclose(result.to_numpy(), A.conj().T @ y)

    def test_conjugate_transpose_of_real_is_transpose(self, rng):
        data = rng.standard_normal((3, 2))
        x = rng.standard_normal(3)
        np.testing.assert_allclose((Mat.from_array(data).H * x).to_numpy(), data.T @ x)

    @pytest.mark.parametrize("order", list(Order))
    @pytest.mark.parametrize("lead_dim", [None, 7])
    def test_foreign_storage(self, strided_matrix, rng, order, lead_dim):
        data = rng.standard_normal((5, 3))
        x = rng.standard_normal(3)
        A = strided_matrix(data, order=order, lead_dim=lead_dim)
        before = A.as_array().copy()

        y = multiply(A, x)

        np.testing.assert_allclose(y.to_numpy(), data @ x)
        np.testing.assert_array_equal(A.as_array(), before)
