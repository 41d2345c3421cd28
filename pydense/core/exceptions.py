"""
Exception hierarchy for PyDense.

All exceptions inherit from PyDenseError to allow catching any
library-specific error. Shape and index failures additionally inherit
from the matching builtin so generic handlers keep working.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Failures are raised before any result buffer is written
"""


class PyDenseError(Exception):
    """Base exception for all PyDense errors."""
    pass


class ValidationError(PyDenseError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when storage metadata (leading dimension, buffer length) cannot
    describe the declared shape.
    """
    pass


class DimensionMismatchError(DimensionError):
    """
    Operand shapes are incompatible for the requested operation.

    Raised by the dispatch layer before any kernel is invoked, e.g. when
    a matrix's column count differs from the vector's length.

    Attributes:
        operation: Name of the operation ('gemv', 'ger', ...)
        expected: The extent the operation required
        actual: The extent that was supplied
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        expected: int | tuple[int, ...] | None = None,
        actual: int | tuple[int, ...] | None = None
    ):
        super().__init__(message)
        self.operation = operation
        self.expected = expected
        self.actual = actual


class IndexOutOfBoundsError(ValidationError, IndexError):
    """
    Row or column access outside the declared extents.

    Negative indices are rejected as well; there is no wrap-around.

    Attributes:
        index: The offending index
        bound: The exclusive upper bound that was violated
        axis: 'row' or 'column'
    """

    def __init__(
        self,
        message: str,
        index: int | None = None,
        bound: int | None = None,
        axis: str | None = None
    ):
        super().__init__(message)
        self.index = index
        self.bound = bound
        self.axis = axis


class SizeOverflowError(ValidationError, OverflowError):
    """
    Requested allocation exceeds the representable buffer length.

    Attributes:
        requested: Number of elements (or bytes) requested
        limit: Largest representable value
    """

    def __init__(
        self,
        message: str,
        requested: int | None = None,
        limit: int | None = None
    ):
        super().__init__(message)
        self.requested = requested
        self.limit = limit


class NumericalError(PyDenseError):
    """
    Numerical computation failed.

    Raised when a kernel produces non-finite output from finite inputs,
    typically an overflow in reduced precision.
    """
    pass
