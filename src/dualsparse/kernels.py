"""
Read-only numerical kernels: matrix-vector product and matrix norms.

Every kernel comes in an expanded and a packed variant, and the packed ones
are further split by storage order. All variants of a given operation
produce the same result for the same logical matrix.
"""

import numpy as np

from .constants import StorageOrder, NormType, NORM_ALIASES
from .element_types import magnitude, magnitude_dtype
from .errors import DimensionMismatchError, InvalidNormTypeError
from .storage import ExpandedStorage, PackedStorage


def resolve_norm_type(kind) -> NormType:
    """Accept a NormType or one of its aliases ('one', 'inf', 'fro', ...)."""
    if isinstance(kind, NormType):
        return kind
    if isinstance(kind, str) and kind.lower() in NORM_ALIASES:
        return NORM_ALIASES[kind.lower()]
    raise InvalidNormTypeError(kind, sorted(NORM_ALIASES.keys()))


# ************************************
# matrix-vector product
# ************************************

def matvec(matrix, vector) -> np.ndarray:
    """Compute ``matrix @ vector`` for a dense vector of length ``matrix.cols``.

    Args:
        matrix: Matrix in either state
        vector: 1-D array-like

    Returns:
        Dense vector of length ``matrix.rows`` with dtype
        ``numpy.result_type(matrix.dtype, vector.dtype)``.
    """
    vec = np.asarray(vector)
    if vec.ndim != 1 or vec.shape[0] != matrix.cols:
        raise DimensionMismatchError("matrix-vector product", f"vector of length {matrix.cols}", f"array of shape {vec.shape}")

    result_dtype = np.result_type(matrix.dtype, vec.dtype)
    storage = matrix.storage
    if isinstance(storage, ExpandedStorage):
        return _matvec_expanded(storage, matrix.rows, vec, result_dtype)
    if matrix.order is StorageOrder.ROW_MAJOR:
        return _matvec_packed_rows(storage, matrix.rows, vec, result_dtype)
    return _matvec_packed_cols(storage, matrix.rows, vec, result_dtype)


def _matvec_expanded(storage: ExpandedStorage, n_rows: int, vec: np.ndarray, dtype) -> np.ndarray:
    result = np.zeros(n_rows, dtype=dtype)
    for (i, j), a in storage.entries.items():
        result[i] += a * vec[j]
    return result


def _matvec_packed_rows(storage: PackedStorage, n_rows: int, vec: np.ndarray, dtype) -> np.ndarray:
    # CSR: y[i] += values[k] * v[outer[k]] for k in stripe i
    result = np.zeros(n_rows, dtype=dtype)
    np.add.at(result, storage.stripe_ids(), storage.values * vec[storage.outer])
    return result


def _matvec_packed_cols(storage: PackedStorage, n_rows: int, vec: np.ndarray, dtype) -> np.ndarray:
    # CSC: linear combination of the columns, y[outer[k]] += values[k] * v[j]
    result = np.zeros(n_rows, dtype=dtype)
    np.add.at(result, storage.outer, storage.values * vec[storage.stripe_ids()])
    return result


def matmat(matrix, other) -> np.ndarray:
    """Product with a matrix that has exactly one column, lowered to matvec.

    Both operands must share the same storage order.
    """
    if other.cols != 1:
        raise DimensionMismatchError("matrix-matrix product", "right operand with exactly one column", f"{other.cols} columns")
    if other.order is not matrix.order:
        raise DimensionMismatchError("matrix-matrix product", f"storage order '{matrix.order.value}'", f"'{other.order.value}'")

    column = np.array([other.get(i, 0) for i in range(other.rows)], dtype=other.dtype)
    return matvec(matrix, column)


# ************************************
# norms
# ************************************

def norm(matrix, kind=NormType.FROBENIUS):
    """Compute the One, Infinity or Frobenius norm of ``matrix``.

    One is the largest absolute column sum, Infinity the largest absolute row
    sum. The result has the real magnitude type of the matrix dtype, so
    complex matrices return a real value. Empty matrices yield zero.
    """
    kind = resolve_norm_type(kind)
    real_dtype = magnitude_dtype(matrix.dtype)

    if kind is NormType.FROBENIUS:
        return _frobenius(matrix.stored_values())

    # One sums along columns (index j), Infinity along rows (index i)
    axis = 1 if kind is NormType.ONE else 0
    axis_size = matrix.cols if axis == 1 else matrix.rows
    row_major = matrix.order is StorageOrder.ROW_MAJOR
    # the major axis is 0 for row-major and 1 for column-major
    sums_over_major = (axis == 0) == row_major

    storage = matrix.storage
    if isinstance(storage, ExpandedStorage):
        if sums_over_major:
            best = _max_stripe_sum_expanded(storage, matrix.ordering)
        else:
            best = _max_scattered_sum_expanded(storage, axis, axis_size, real_dtype)
    else:
        if sums_over_major:
            best = _max_stripe_sum_packed(storage, real_dtype)
        else:
            best = _max_scattered_sum_packed(storage, axis_size, real_dtype)
    return real_dtype.type(best)


def _frobenius(values: np.ndarray):
    return np.sqrt(np.sum(magnitude(values) ** 2))


def _max_scattered_sum_expanded(storage: ExpandedStorage, axis: int, size: int, real_dtype) -> float:
    # one accumulator per minor index, filled in any traversal order
    sums = np.zeros(size, dtype=real_dtype)
    for coords, a in storage.entries.items():
        sums[coords[axis]] += magnitude(a)
    return sums.max() if size > 0 else 0


def _max_stripe_sum_expanded(storage: ExpandedStorage, ordering) -> float:
    best = 0
    for _, stripe in ordering.stripes(storage.entries):
        total = sum(magnitude(a) for _, a in stripe)
        if total > best:
            best = total
    return best


def _max_scattered_sum_packed(storage: PackedStorage, size: int, real_dtype) -> float:
    sums = np.zeros(size, dtype=real_dtype)
    np.add.at(sums, storage.outer, magnitude(storage.values))
    return sums.max() if size > 0 else 0


def _max_stripe_sum_packed(storage: PackedStorage, real_dtype) -> float:
    best = 0
    mags = magnitude(storage.values)
    for m in range(storage.n_stripes):
        total = mags[storage.stripe(m)].sum(dtype=real_dtype)
        if total > best:
            best = total
    return best
