"""
Transpose markers for vector operands.

A vector carries no transpose of its own. The caller states intent at
the call site by wrapping a vector reference:

    x * (y ^ T)      # x yᵀ, routed to ger
    x * (y ^ H)      # x yᴴ, routed to gerc
    x * trans(y)     # same as y ^ T

The wrapper is transient and non-owning: it holds the operand by
reference and exists only to be consumed by an operator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydense.core.attributes import Transpose
from pydense.core.exceptions import ValidationError


class Marker(Enum):
    """Right-hand side of ``vector ^ marker``."""
    T = Transpose.Trans
    H = Transpose.ConjTrans

    # numpy must not broadcast ``ndarray ^ Marker.T`` elementwise
    __array_ufunc__ = None

    def wrap(self, vector: Any) -> Trans:
        return Trans(vector, self.value)

    def __rxor__(self, vector: Any) -> Trans:
        return self.wrap(vector)


T = Marker.T
H = Marker.H


@dataclass(frozen=True, eq=False)
class Trans:
    """
    Transpose-tagged vector reference.

    Attributes:
        vector: The wrapped operand (not copied)
        tag: Transpose.Trans or Transpose.ConjTrans
    """
    vector: Any
    tag: Transpose

    # let ``ndarray * Trans(...)`` reach __rmul__
    __array_ufunc__ = None

    def __post_init__(self) -> None:
        if self.tag not in (Transpose.Trans, Transpose.ConjTrans):
            raise ValidationError(
                f"tag: vector marker must be Trans or ConjTrans, got {self.tag!r}"
            )

    def __len__(self) -> int:
        return len(self.vector)

    def __rmul__(self, left: Any):
        from pydense.core.protocols import Matrix
        if isinstance(left, Matrix):
            return NotImplemented
        from pydense.ops.dispatch import outer
        return outer(left, self)

    def __repr__(self) -> str:
        return f"Trans({self.vector!r}, {self.tag.name})"


def trans(vector: Any) -> Trans:
    """Mark a vector for use as yᵀ."""
    return Trans(vector, Transpose.Trans)


def conj_trans(vector: Any) -> Trans:
    """Mark a vector for use as yᴴ."""
    return Trans(vector, Transpose.ConjTrans)
