"""
Dense owned matrix storage.

Mat owns a single contiguous row-major buffer of exactly rows * cols
elements. Row i occupies ``[i * cols, i * cols + cols)`` of the buffer.
New storage is zero-filled, so no element is ever read before it has a
defined value.

TaggedMatrix is a non-owning view of any Matrix that overrides its
transpose tag; it is how ``A.T * x`` and ``A.H * x`` reach the
transposed kernel variants without copying.
"""

from __future__ import annotations

from typing import Any, Iterator

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

from pydense.core.attributes import Order, Transpose
from pydense.core.exceptions import DimensionError, ValidationError
from pydense.core.layout import matrix_view
from pydense.core.protocols import Matrix
from pydense.core.validation import (
    check_2d,
    check_array,
    check_buffer_size,
    check_count,
    check_dtype,
    check_index,
)


class _MatrixOperators:
    """Operator sugar shared by Mat and TaggedMatrix."""

    def __mul__(self, other: Any):
        from pydense.ops.markers import Trans
        if isinstance(other, (Matrix, Trans)) or np.isscalar(other):
            return NotImplemented
        from pydense.ops.dispatch import multiply
        return multiply(self, other)

    __matmul__ = __mul__

    @property
    def T(self) -> TaggedMatrix:
        """Transposed view sharing this matrix's storage."""
        return TaggedMatrix(self, Transpose.Trans)

    @property
    def H(self) -> TaggedMatrix:
        """Conjugate-transposed view sharing this matrix's storage."""
        return TaggedMatrix(self, Transpose.ConjTrans)


class Mat(_MatrixOperators, Matrix):
    """
    Owned, row-major dense matrix.

    Invariant: ``rows * cols == len(buffer)`` at all times.

    Construction:
        Mat(3, 4)                          # zero-filled float64
        Mat(3, 4, dtype=np.complex128)     # zero-filled complex
        Mat.fill(1.0, 3, 4)                # every cell set to 1.0
        Mat.from_rows([[2, -2], [2, -4]])  # literal rows
        Mat.from_array(ndarray)            # copy of a 2-D array

    Integer dtypes are promoted to float64 because the kernels only
    exist for floating and complex element types.
    """

    def __init__(self, rows: int, cols: int, dtype: DTypeLike = np.float64):
        """
        Allocate a zero-filled rows x cols matrix.

        Args:
            rows: Number of rows (non-negative)
            cols: Number of columns (non-negative)
            dtype: Element dtype

        Raises:
            ValidationError: If a count is negative or not an integer
            SizeOverflowError: If rows * cols cannot be addressed
        """
        n_rows = check_count(rows, 'rows')
        n_cols = check_count(cols, 'cols')
        resolved = check_dtype(dtype, 'dtype')
        length = check_buffer_size(n_rows, n_cols, resolved, 'Mat')

        self._data: NDArray[Any] = np.zeros(length, dtype=resolved)
        self._rows = n_rows
        self._cols = n_cols

    @classmethod
    def _from_buffer(cls, data: NDArray[Any], rows: int, cols: int) -> Mat:
        """Adopt an existing flat buffer without copying."""
        if data.size != rows * cols:
            raise DimensionError(
                f"Mat: buffer holds {data.size} elements, expected {rows} x {cols} = {rows * cols}"
            )
        mat = cls.__new__(cls)
        mat._data = data
        mat._rows = rows
        mat._cols = cols
        return mat

    # === Factory Methods ===

    @classmethod
    def fill(
        cls,
        value: Any,
        rows: int,
        cols: int,
        dtype: DTypeLike | None = None,
    ) -> Mat:
        """
        Build a rows x cols matrix with every cell set to value.

        Args:
            value: Fill value
            rows: Number of rows
            cols: Number of columns
            dtype: Element dtype; inferred from value when None
        """
        if dtype is None:
            dtype = check_array(value, 'value').dtype
        mat = cls(rows, cols, dtype=dtype)
        _check_assignable(value, mat._data.dtype, 'value')
        mat._data.fill(value)
        return mat

    @classmethod
    def from_array(cls, array: ArrayLike, dtype: DTypeLike | None = None) -> Mat:
        """
        Build a matrix holding a copy of a 2-D array-like.

        Raises:
            ValidationError: If array is not numeric
            DimensionError: If array is not 2-D
        """
        arr = check_array(array, 'array')
        if arr.ndim == 1 and arr.size == 0:
            arr = arr.reshape(0, 0)
        check_2d(arr, 'array')
        if dtype is not None:
            target = check_dtype(dtype, 'dtype')
            _check_assignable(arr, target, 'array')
            arr = arr.astype(target)
        rows, cols = arr.shape
        check_buffer_size(rows, cols, arr.dtype, 'Mat')
        data = np.array(arr, dtype=arr.dtype, order='C', copy=True).reshape(-1)
        return cls._from_buffer(data, rows, cols)

    @classmethod
    def from_rows(cls, rows: ArrayLike, dtype: DTypeLike | None = None) -> Mat:
        """
        Build a matrix from a sequence of equal-length rows.

        Example:
            >>> A = Mat.from_rows([[2, -2],
            ...                    [2, -4]])
        """
        return cls.from_array(rows, dtype=dtype)

    # === Matrix capability ===

    def rows(self) -> int:
        return self._rows

    def cols(self) -> int:
        return self._cols

    def lead_dim(self) -> int:
        return self._cols

    def order(self) -> Order:
        return Order.RowMajor

    def as_array(self) -> NDArray[Any]:
        view = self._data.view()
        view.flags.writeable = False
        return view

    def as_mut_array(self) -> NDArray[Any]:
        return self._data.view()

    # === Properties ===

    @property
    def shape(self) -> tuple[int, int]:
        return self._rows, self._cols

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def size(self) -> int:
        return self._data.size

    # === Row and cell access ===

    def row(self, i: int) -> NDArray[Any]:
        """
        Read-only view of row i.

        Raises:
            IndexOutOfBoundsError: If i < 0 or i >= rows
        """
        view = self._row_slice(i)
        view.flags.writeable = False
        return view

    def row_mut(self, i: int) -> NDArray[Any]:
        """
        Writable view of row i; writes go straight to the matrix.

        Raises:
            IndexOutOfBoundsError: If i < 0 or i >= rows
        """
        return self._row_slice(i)

    def _row_slice(self, i: int) -> NDArray[Any]:
        idx = check_index(i, self._rows, 'row')
        start = idx * self._cols
        return self._data[start:start + self._cols]

    def _cell_offset(self, key: tuple[Any, Any]) -> int:
        if len(key) != 2:
            raise TypeError(f"Mat indices must be i or (i, j), got {len(key)} indices")
        i = check_index(key[0], self._rows, 'row')
        j = check_index(key[1], self._cols, 'column')
        return i * self._cols + j

    def __getitem__(self, key: Any) -> Any:
        """
        ``A[i]`` is a writable row view (so ``A[i][j] = v`` works);
        ``A[i, j]`` is the cell value.
        """
        if isinstance(key, tuple):
            return self._data[self._cell_offset(key)]
        return self.row_mut(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        """``A[i, j] = v`` sets a cell; ``A[i] = values`` overwrites a row."""
        _check_assignable(value, self._data.dtype, 'value')
        if isinstance(key, tuple):
            self._data[self._cell_offset(key)] = value
            return
        target = self.row_mut(key)
        values = np.asarray(value)
        if values.ndim > 1 or (values.ndim == 1 and values.shape[0] != self._cols):
            raise DimensionError(
                f"row assignment: expected {self._cols} values, got shape {values.shape}"
            )
        target[...] = values

    def __iter__(self) -> Iterator[NDArray[Any]]:
        for i in range(self._rows):
            yield self.row(i)

    # === Value semantics ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mat):
            return NotImplemented
        return (
            self._rows == other._rows
            and self._cols == other._cols
            and bool(np.array_equal(self._data, other._data))
        )

    def copy(self) -> Mat:
        """Deep copy; the clone never shares the buffer."""
        return Mat._from_buffer(self._data.copy(), self._rows, self._cols)

    def __copy__(self) -> Mat:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Mat:
        clone = self.copy()
        memo[id(self)] = clone
        return clone

    # === Conversion ===

    def to_numpy(self) -> NDArray[Any]:
        """2-D copy of the contents."""
        return self._data.reshape(self._rows, self._cols).copy()

    def __array__(self, dtype: DTypeLike | None = None, copy: bool | None = None) -> NDArray[Any]:
        result = self.to_numpy()
        if dtype is not None:
            result = result.astype(dtype)
        return result

    def __repr__(self) -> str:
        return (
            f"Mat(rows={self._rows}, cols={self._cols}, dtype={self._data.dtype}, "
            f"data={self.to_numpy().tolist()!r})"
        )


class TaggedMatrix(_MatrixOperators, Matrix):
    """
    Non-owning view of a Matrix with a transpose tag applied.

    Shares the base's storage and layout metadata; only ``transpose()``
    differs. Tagging a tagged view composes the tags, so ``A.T.T`` is
    used as ``A``.
    """

    def __init__(self, base: Matrix, tag: Transpose):
        if not isinstance(base, Matrix):
            raise TypeError(
                f"TaggedMatrix: base must implement Matrix, got {type(base).__name__}"
            )
        if not isinstance(tag, Transpose):
            raise ValidationError(f"tag: expected Transpose, got {tag!r}")
        self._base = base
        self._tag = base.transpose().compose(tag)

    @property
    def base(self) -> Matrix:
        return self._base

    def rows(self) -> int:
        return self._base.rows()

    def cols(self) -> int:
        return self._base.cols()

    def lead_dim(self) -> int:
        return self._base.lead_dim()

    def order(self) -> Order:
        return self._base.order()

    def transpose(self) -> Transpose:
        return self._tag

    def as_array(self) -> NDArray[Any]:
        return self._base.as_array()

    def as_mut_array(self) -> NDArray[Any]:
        return self._base.as_mut_array()

    @property
    def shape(self) -> tuple[int, int]:
        if self._tag.swaps_dims:
            return self.cols(), self.rows()
        return self.rows(), self.cols()

    def to_numpy(self) -> NDArray[Any]:
        """2-D copy of op(base)."""
        stored = matrix_view(self._base)
        if self._tag is Transpose.Trans:
            return stored.T.copy()
        if self._tag is Transpose.ConjTrans:
            return stored.conj().T.copy()
        return stored.copy()

    def __array__(self, dtype: DTypeLike | None = None, copy: bool | None = None) -> NDArray[Any]:
        result = self.to_numpy()
        if dtype is not None:
            result = result.astype(dtype)
        return result

    def __repr__(self) -> str:
        return f"TaggedMatrix({self._base!r}, {self._tag.name})"


def _check_assignable(value: Any, dtype: np.dtype, name: str) -> None:
    """Refuse writes that would silently drop an imaginary part."""
    if np.iscomplexobj(value) and not np.issubdtype(dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: cannot store complex data in {dtype} matrix without losing "
            f"the imaginary part"
        )
