"""
PyDense: dense linear algebra through ordinary operators.

Matrix and vector arithmetic is written with ``*`` and dispatched to
BLAS level-2 kernels (gemv, ger, gerc) with the right transpose tag,
scaling and layout metadata.

Example:
    >>> from pydense import Mat, DenseVector, T
    >>> A = Mat.from_rows([[2, -2], [2, -4]])
    >>> x = DenseVector([2, 1])
    >>> A * x
    DenseVector([2.0, 0.0], dtype=float64)
    >>> x * (x ^ T)
    Mat(rows=2, cols=2, dtype=float64, data=[[4.0, 2.0], [2.0, 1.0]])

Submodules:
    core: Tags, capabilities, scalar identities, validation, layout
    matrix: Dense row-major matrix storage
    vector: Dense vector storage
    kernels: CPU (BLAS via SciPy) and GPU (PyTorch) kernels
    ops: Transpose markers and operator dispatch
"""

__version__ = "0.1.0"

from pydense.core.attributes import Order, Transpose
from pydense.core.protocols import Matrix, BandMatrix, Vector, KernelBackend
from pydense.core.scalar import ScalarIdentity, scalar_identity
from pydense.core.exceptions import (
    PyDenseError,
    ValidationError,
    DimensionError,
    DimensionMismatchError,
    IndexOutOfBoundsError,
    SizeOverflowError,
    NumericalError,
)
from pydense.matrix import Mat, TaggedMatrix
from pydense.vector import DenseVector, as_vector
from pydense.kernels import get_kernel, get_default_backend, set_default_backend
from pydense.ops import Marker, T, H, Trans, trans, conj_trans, multiply, outer

__all__ = [
    "__version__",
    # Tags
    "Order",
    "Transpose",
    # Capabilities
    "Matrix",
    "BandMatrix",
    "Vector",
    "KernelBackend",
    # Scalars
    "ScalarIdentity",
    "scalar_identity",
    # Storage
    "Mat",
    "TaggedMatrix",
    "DenseVector",
    "as_vector",
    # Operators
    "Marker",
    "T",
    "H",
    "Trans",
    "trans",
    "conj_trans",
    "multiply",
    "outer",
    # Kernels
    "get_kernel",
    "get_default_backend",
    "set_default_backend",
    # Exceptions
    "PyDenseError",
    "ValidationError",
    "DimensionError",
    "DimensionMismatchError",
    "IndexOutOfBoundsError",
    "SizeOverflowError",
    "NumericalError",
]
