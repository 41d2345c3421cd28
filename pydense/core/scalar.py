"""
Scalar identity provider.

Every kernel call needs the additive and multiplicative identity of the
element type: gemv is invoked as ``y = one * op(A) x + zero * y`` and the
outer-product result starts filled with zero.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import numpy as np
from numpy.typing import DTypeLike

from pydense.core.exceptions import ValidationError


@dataclass(frozen=True)
class ScalarIdentity:
    """
    Identities for one numeric dtype.

    Attributes:
        dtype: The numpy dtype the identities belong to
        zero: Additive identity as a numpy scalar of ``dtype``
        one: Multiplicative identity as a numpy scalar of ``dtype``
    """
    dtype: np.dtype
    zero: Any
    one: Any


def scalar_identity(dtype: DTypeLike) -> ScalarIdentity:
    """
    Get the zero/one pair for a dtype.

    Args:
        dtype: Any numpy dtype specifier

    Returns:
        ScalarIdentity for the dtype

    Raises:
        ValidationError: If dtype is not numeric (bool, str, object, ...)
    """
    try:
        resolved = np.dtype(dtype)
    except TypeError as e:
        raise ValidationError(f"dtype: cannot interpret {dtype!r}: {e}") from e
    return _identity_for(resolved)


@lru_cache(maxsize=None)
def _identity_for(dtype: np.dtype) -> ScalarIdentity:
    if not np.issubdtype(dtype, np.number):
        raise ValidationError(
            f"dtype: {dtype} has no numeric identities, expected numeric dtype"
        )
    scalar_type = dtype.type
    return ScalarIdentity(dtype=dtype, zero=scalar_type(0), one=scalar_type(1))
