"""
Matrix storage.

Available types:
    Mat: Owned, zero-initialised, row-major dense matrix
    TaggedMatrix: Non-owning transposed / conjugate-transposed view
"""

from pydense.matrix.dense import Mat, TaggedMatrix

__all__ = [
    "Mat",
    "TaggedMatrix",
]
