"""
Core infrastructure for PyDense.

This module provides the shared abstractions every storage type and
kernel builds on.

Key components:
    attributes: Order and Transpose tags
    protocols: Matrix, BandMatrix, Vector, KernelBackend protocols
    scalar: Additive/multiplicative identities per dtype
    exceptions: Exception hierarchy
    validation: Input validators
    layout: Layout metadata -> strided views
    compute: Device detection and tolerance tiers
"""

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

__all__ = [
    # Tags
    "Order",
    "Transpose",
    # Protocols
    "Matrix",
    "BandMatrix",
    "Vector",
    "KernelBackend",
    # Scalars
    "ScalarIdentity",
    "scalar_identity",
    # Exceptions
    "PyDenseError",
    "ValidationError",
    "DimensionError",
    "DimensionMismatchError",
    "IndexOutOfBoundsError",
    "SizeOverflowError",
    "NumericalError",
]
