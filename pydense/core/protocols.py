"""
Core protocols for PyDense.

These define the capabilities any storage layout must provide to take
part in the algebra, and the contract of the numeric kernels the
dispatch layer calls into.

We use Protocol (structural typing) so that third-party storage can be
checked with isinstance(). Implementers inherit from the protocol
explicitly to pick up the default methods (leading dimension, order,
transpose); a type that only conforms structurally must define them
itself.

Design Principles:
    - Minimal contracts: dimensions, layout metadata, raw element access
    - Defaults supplied once here, overridable per type
    - Storage invariants are enforced at construction, not at use
"""

from typing import Any, Protocol, runtime_checkable

from numpy.typing import NDArray

from pydense.core.attributes import Order, Transpose


@runtime_checkable
class Matrix(Protocol):
    """
    Capability of any 2-D storage usable by the kernels.

    ``as_array()`` and ``as_mut_array()`` expose the flat backing buffer
    starting at the first element. Together with ``rows()``, ``cols()``,
    ``lead_dim()`` and ``order()`` they must describe at least
    rows x cols elements; implementations must guarantee this when they
    are constructed.
    """

    def rows(self) -> int:
        """Number of stored rows."""
        ...

    def cols(self) -> int:
        """Number of stored columns."""
        ...

    def lead_dim(self) -> int:
        """
        Stride (in elements) between consecutive rows (RowMajor) or
        columns (ColumnMajor) of the buffer.

        Defaults to the unpadded stride of the declared order.
        """
        if self.order() is Order.ColumnMajor:
            return self.rows()
        return self.cols()

    def order(self) -> Order:
        """Physical layout of the buffer."""
        return Order.RowMajor

    def transpose(self) -> Transpose:
        """Operation kernels apply to this operand."""
        return Transpose.NoTrans

    def as_array(self) -> NDArray[Any]:
        """Read-only flat view of the buffer."""
        ...

    def as_mut_array(self) -> NDArray[Any]:
        """Writable flat view of the buffer."""
        ...


@runtime_checkable
class BandMatrix(Matrix, Protocol):
    """
    Banded storage: only the diagonals within the band are stored.

    No kernel in this package consumes band storage yet; the protocol
    fixes the metadata a banded implementation must expose.
    """

    def sub_diagonals(self) -> int:
        """Number of diagonals below the main diagonal."""
        ...

    def sup_diagonals(self) -> int:
        """Number of diagonals above the main diagonal."""
        ...


@runtime_checkable
class Vector(Protocol):
    """
    Capability of any 1-D storage usable by the kernels.

    A vector has no transpose of its own; transpose intent is expressed
    by wrapping it in a marker at the call site.
    """

    def __len__(self) -> int:
        ...

    def as_array(self) -> NDArray[Any]:
        """Read-only 1-D view of the elements."""
        ...

    def as_mut_array(self) -> NDArray[Any]:
        """Writable 1-D view of the elements."""
        ...


@runtime_checkable
class KernelBackend(Protocol):
    """
    Protocol for numeric kernels.

    Kernels read operands through the Matrix/Vector capabilities and
    write results through ``as_mut_array()`` of the output operand.
    They accumulate: ``ger``/``gerc`` add into ``a``; ``gemv`` scales
    the existing ``y`` by ``beta``.
    """

    @property
    def name(self) -> str:
        """
        Kernel identifier.

        Convention: '{device}_{library}'
        Examples: 'cpu_blas', 'gpu_torch_fp32'
        """
        ...

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
        ...

    def ger(self, alpha: Any, x: Vector, y: Vector, a: Matrix) -> None:
        """a <- alpha * x y^T + a"""
        ...

    def gerc(self, alpha: Any, x: Vector, y: Vector, a: Matrix) -> None:
        """a <- alpha * x y^H + a"""
        ...


__all__ = [
    'Matrix',
    'BandMatrix',
    'Vector',
    'KernelBackend',
]
