"""
pytest configuration and shared fixtures.
"""

import numpy as np
import pytest

from pydense.core.attributes import Order
from pydense.core.protocols import Matrix
from pydense.kernels.cpu import CPUBlasKernel


class StridedMatrix(Matrix):
    """
    Minimal third-party Matrix: a flat buffer plus explicit layout.

    Lets tests drive the kernels with column-major storage and padded
    leading dimensions, which Mat never produces.
    """

    def __init__(self, array, order=Order.RowMajor, lead_dim=None):
        array = np.asarray(array)
        self._rows, self._cols = array.shape
        self._order = order
        minor = self._cols if order is Order.RowMajor else self._rows
        self._ld = minor if lead_dim is None else lead_dim
        major = self._rows if order is Order.RowMajor else self._cols
        buffer = np.full(major * self._ld, np.nan, dtype=array.dtype)
        if order is Order.RowMajor:
            grid = buffer.reshape(major, self._ld)
            grid[:, :self._cols] = array
        else:
            grid = buffer.reshape(major, self._ld)
            grid[:, :self._rows] = array.T
        self._buffer = buffer

    def rows(self):
        return self._rows

    def cols(self):
        return self._cols

    def lead_dim(self):
        return self._ld

    def order(self):
        return self._order

    def as_array(self):
        view = self._buffer.view()
        view.flags.writeable = False
        return view

    def as_mut_array(self):
        return self._buffer.view()

    def logical(self):
        """Logical (rows, cols) contents as a fresh array."""
        grid = self._buffer.reshape(-1, self._ld)
        if self._order is Order.RowMajor:
            return grid[:, :self._cols].copy()
        return grid[:, :self._rows].T.copy()


class RecordingKernel:
    """KernelBackend that records calls and delegates to CPU BLAS."""

    def __init__(self):
        self.calls = []
        self._inner = CPUBlasKernel()

    @property
    def name(self):
        return 'recording'

    def gemv(self, trans, alpha, a, x, beta, y):
        self.calls.append(('gemv', trans, alpha, beta))
        self._inner.gemv(trans, alpha, a, x, beta, y)

    def ger(self, alpha, x, y, a):
        self.calls.append(('ger', alpha))
        self._inner.ger(alpha, x, y, a)

    def gerc(self, alpha, x, y, a):
        self.calls.append(('gerc', alpha))
        self._inner.gerc(alpha, x, y, a)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def strided_matrix():
    """Factory for StridedMatrix instances."""
    return StridedMatrix


@pytest.fixture
def recording_kernel():
    """Kernel that records every call it receives."""
    return RecordingKernel()


@pytest.fixture
def complex_operands(rng):
    """Random complex matrix (4 x 3) and vectors of length 3 and 4."""
    A = rng.standard_normal((4, 3)) + 1j * rng.standard_normal((4, 3))
    x = rng.standard_normal(3) + 1j * rng.standard_normal(3)
    y = rng.standard_normal(4) + 1j * rng.standard_normal(4)
    return A, x, y
