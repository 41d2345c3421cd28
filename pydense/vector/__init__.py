"""
Vector storage.

Available types:
    DenseVector: Owned 1-D vector
    as_vector: Adapt any 1-D array-like to the Vector capability
"""

from pydense.vector.dense import DenseVector, as_vector

__all__ = [
    "DenseVector",
    "as_vector",
]
