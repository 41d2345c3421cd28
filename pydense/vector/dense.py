"""
Dense owned vector storage.

DenseVector owns a contiguous 1-D buffer. It is what ``A * x`` returns
and the usual left operand of an outer product. Any array-like can
stand in for a vector operand; ``as_vector`` adapts it.
"""

from __future__ import annotations

from typing import Any, Iterator

import numpy as np
from numpy.typing import ArrayLike, DTypeLike, NDArray

from pydense.core.exceptions import ValidationError
from pydense.core.protocols import Vector
from pydense.core.validation import (
    check_1d,
    check_array,
    check_buffer_size,
    check_count,
    check_dtype,
    check_index,
)


class DenseVector(Vector):
    """
    Owned 1-D vector.

    Construction:
        DenseVector([2, 1])                       # copy of values, float64
        DenseVector.zeros(3, dtype=np.complex128) # zero-filled

    Transpose intent is expressed at the call site, not stored:
        x * (y ^ T)     # outer product x yᵀ
        x * (y ^ H)     # outer product x yᴴ
    """

    def __init__(self, values: ArrayLike, dtype: DTypeLike | None = None):
        arr = check_array(values, 'values')
        check_1d(arr, 'values')
        if dtype is not None:
            target = check_dtype(dtype, 'dtype')
            _check_assignable(arr, target)
            arr = arr.astype(target)
        self._data: NDArray[Any] = np.array(arr, copy=True)

    @classmethod
    def zeros(cls, length: int, dtype: DTypeLike = np.float64) -> DenseVector:
        """Zero-filled vector of the given length."""
        n = check_count(length, 'length')
        resolved = check_dtype(dtype, 'dtype')
        check_buffer_size(n, 1, resolved, 'DenseVector')
        return cls._from_buffer(np.zeros(n, dtype=resolved))

    @classmethod
    def _from_buffer(cls, data: NDArray[Any]) -> DenseVector:
        vec = cls.__new__(cls)
        vec._data = data
        return vec

    # === Vector capability ===

    def __len__(self) -> int:
        return self._data.shape[0]

    def as_array(self) -> NDArray[Any]:
        view = self._data.view()
        view.flags.writeable = False
        return view

    def as_mut_array(self) -> NDArray[Any]:
        return self._data.view()

    # === Element access ===

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def __getitem__(self, i: int) -> Any:
        return self._data[check_index(i, len(self), 'element')]

    def __setitem__(self, i: int, value: Any) -> None:
        _check_assignable(value, self._data.dtype)
        self._data[check_index(i, len(self), 'element')] = value

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data.tolist())

    # === Value semantics ===

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DenseVector):
            return bool(np.array_equal(self._data, other._data))
        if isinstance(other, (list, tuple, np.ndarray)):
            return bool(np.array_equal(self._data, np.asarray(other)))
        return NotImplemented

    __hash__ = None

    def copy(self) -> DenseVector:
        return DenseVector._from_buffer(self._data.copy())

    # === Operators ===

    def __mul__(self, other: Any):
        from pydense.ops.markers import Trans
        if not isinstance(other, Trans):
            return NotImplemented
        from pydense.ops.dispatch import outer
        return outer(self, other)

    def __xor__(self, other: Any):
        from pydense.ops.markers import Marker
        if not isinstance(other, Marker):
            return NotImplemented
        return other.wrap(self)

    # === Conversion ===

    def to_numpy(self) -> NDArray[Any]:
        return self._data.copy()

    def __array__(self, dtype: DTypeLike | None = None, copy: bool | None = None) -> NDArray[Any]:
        result = self._data.copy()
        if dtype is not None:
            result = result.astype(dtype)
        return result

    def __repr__(self) -> str:
        return f"DenseVector({self._data.tolist()!r}, dtype={self._data.dtype})"


def as_vector(obj: Any, name: str = 'vector') -> Vector:
    """
    Adapt an operand to the Vector capability.

    Vector implementations are returned unchanged; any other array-like
    is validated and copied into a DenseVector.

    Raises:
        ValidationError: If obj is not numeric
        DimensionError: If obj is not 1-D
    """
    if isinstance(obj, Vector):
        return obj
    arr = check_array(obj, name)
    check_1d(arr, name)
    return DenseVector._from_buffer(np.array(arr, copy=True))


def _check_assignable(value: Any, dtype: np.dtype) -> None:
    if np.iscomplexobj(value) and not np.issubdtype(dtype, np.complexfloating):
        raise ValidationError(
            f"value: cannot store complex data in {dtype} vector without "
            f"losing the imaginary part"
        )
