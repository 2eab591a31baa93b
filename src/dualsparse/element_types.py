"""
Classification of the element types a Matrix may hold.

Admitted types are the real arithmetic ones (numpy integer and floating
dtypes, Python ``int`` and ``float``) and complex numbers whose parts are
real arithmetic (numpy complex dtypes, Python ``complex``).
"""

import numpy as np

from .errors import UnsupportedElementTypeError


def is_real_or_complex(dtype_like) -> bool:
    """Return True if ``dtype_like`` names an admissible element type."""
    try:
        dtype = np.dtype(dtype_like)
    except TypeError:
        return False
    if dtype == np.bool_:
        return False
    return (np.issubdtype(dtype, np.integer)
            or np.issubdtype(dtype, np.floating)
            or np.issubdtype(dtype, np.complexfloating))


def is_complex(dtype: np.dtype) -> bool:
    return np.issubdtype(dtype, np.complexfloating)


def resolve_dtype(dtype_like) -> np.dtype:
    """Return the numpy dtype for ``dtype_like``.

    Raises:
        UnsupportedElementTypeError: if the type is not real arithmetic or complex.
    """
    if not is_real_or_complex(dtype_like):
        raise UnsupportedElementTypeError(dtype_like)
    return np.dtype(dtype_like)


def magnitude_dtype(dtype: np.dtype) -> np.dtype:
    """Real dtype of ``|x|`` for elements of ``dtype`` (float64 for complex128)."""
    return np.abs(np.zeros(0, dtype=dtype)).dtype


def magnitude(x):
    """``|x|`` for reals, ``sqrt(re**2 + im**2)`` for complex values."""
    return np.abs(x)


def zero(dtype: np.dtype):
    """Additive identity of ``dtype``."""
    return dtype.type(0)
