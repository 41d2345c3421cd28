"""
Operator surface.

Public API:
    multiply(A, x) -> DenseVector        also written A * x
    outer(x, y ^ T) -> Mat               also written x * (y ^ T)
    outer(x, y ^ H) -> Mat               conjugate variant
"""

from pydense.ops.markers import Marker, T, H, Trans, trans, conj_trans
from pydense.ops.dispatch import multiply, outer

__all__ = [
    "Marker",
    "T",
    "H",
    "Trans",
    "trans",
    "conj_trans",
    "multiply",
    "outer",
]
