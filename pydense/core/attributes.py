"""
Storage and operation attribute tags.

Order describes how a matrix's backing buffer is laid out; Transpose
describes what a kernel should do to an operand before using it. Both
are closed, immutable value types.
"""

from enum import Enum

from pydense.core.exceptions import ValidationError


class Order(Enum):
    """Physical layout of a matrix's backing storage."""
    RowMajor = 'row_major'
    ColumnMajor = 'column_major'


class Transpose(Enum):
    """Logical operation applied to an operand by a kernel."""
    NoTrans = 'no_trans'
    Trans = 'trans'
    ConjTrans = 'conj_trans'

    @property
    def blas_code(self) -> int:
        """The integer BLAS uses for this tag (0 = N, 1 = T, 2 = C)."""
        return _BLAS_CODES[self]

    @property
    def swaps_dims(self) -> bool:
        """True if the tag exchanges row and column extents."""
        return self is not Transpose.NoTrans

    def compose(self, other: 'Transpose') -> 'Transpose':
        """
        Tag equivalent to applying ``self`` and then ``other``.

        Raises:
            ValidationError: If the combination is an elementwise
                conjugate without transpose, which no single tag expresses.
        """
        if self is Transpose.NoTrans:
            return other
        if other is Transpose.NoTrans:
            return self
        if self is other:
            return Transpose.NoTrans
        raise ValidationError(
            f"cannot compose {self.name} with {other.name}: "
            f"result is a plain conjugate, which has no transpose tag"
        )


_BLAS_CODES = {
    Transpose.NoTrans: 0,
    Transpose.Trans: 1,
    Transpose.ConjTrans: 2,
}


__all__ = [
    'Order',
    'Transpose',
]
