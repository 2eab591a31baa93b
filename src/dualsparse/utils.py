import math
import numpy as np
import pandas as pd
import scipy.sparse as sp

from .config import SparseConfig
from .constants import StorageOrder
from .element_types import is_complex


def generate_random_vector(matrix, config: SparseConfig = SparseConfig()) -> np.ndarray:
    """
    Draw a dense vector suitable for ``matrix @ vector``.

    Args:
        matrix: Matrix whose column count sets the vector length
        config: SparseConfig holding the distribution bounds and the seed

    Returns:
        Vector of length ``matrix.cols`` with the matrix dtype, uniformly
        distributed in [config.random_low, config.random_high). Complex
        dtypes get independent real and imaginary parts; integer dtypes
        draw from the integers in [floor(low), ceil(high)].
    """
    config.validate()
    rng = np.random.default_rng(config.seed)
    n = matrix.cols

    if np.issubdtype(matrix.dtype, np.integer):
        low, high = math.floor(config.random_low), math.ceil(config.random_high)
        return rng.integers(low, high, size=n, endpoint=True).astype(matrix.dtype)
    if is_complex(matrix.dtype):
        re = rng.uniform(config.random_low, config.random_high, size=n)
        im = rng.uniform(config.random_low, config.random_high, size=n)
        return (re + 1j * im).astype(matrix.dtype)
    return rng.uniform(config.random_low, config.random_high, size=n).astype(matrix.dtype)


def format_matrix(matrix, config: SparseConfig = SparseConfig()) -> str:
    """Render a matrix for printing.

    Expanded matrices are shown as a dense grid (zeros included), packed ones
    as their inner / outer / values arrays. Matrices with more than
    ``config.print_max_dim`` rows or columns are not rendered.
    """
    rows, cols = matrix.shape
    if rows > config.print_max_dim or cols > config.print_max_dim:
        return f"Matrix too large to print ({rows} x {cols}, limit is {config.print_max_dim})"

    if not matrix.is_packed():
        if rows == 0 or cols == 0:
            return f"Empty matrix ({rows} x {cols})"
        return pd.DataFrame(matrix.to_dense()).to_string()

    storage = matrix.storage
    label = "row" if matrix.order is StorageOrder.ROW_MAJOR else "column"
    lines = [
        f"Packed {label}-major matrix ({rows} x {cols}, nnz={storage.nnz})",
        f"inner:  {storage.inner.tolist()}",
        f"outer:  {storage.outer.tolist()}",
        f"values: {storage.values.tolist()}",
    ]
    return "\n".join(lines)


def to_scipy(matrix):
    """Convert to a scipy.sparse csr_matrix (row-major) or csc_matrix (column-major).

    A packed matrix hands over its arrays directly since they already follow
    scipy's (data, indices, indptr) layout.
    """
    row_major = matrix.order is StorageOrder.ROW_MAJOR
    if matrix.is_packed():
        storage = matrix.storage
        layout = (storage.values.copy(), storage.outer.copy(), storage.inner.copy())
        if row_major:
            return sp.csr_matrix(layout, shape=matrix.shape)
        return sp.csc_matrix(layout, shape=matrix.shape)

    items = [(coords, v) for coords, v in matrix.items() if coords[0] < matrix.rows and coords[1] < matrix.cols]
    rows = np.array([c[0] for c, _ in items], dtype=np.intp)
    cols = np.array([c[1] for c, _ in items], dtype=np.intp)
    values = np.array([v for _, v in items], dtype=matrix.dtype)
    coo = sp.coo_matrix((values, (rows, cols)), shape=matrix.shape)
    return coo.tocsr() if row_major else coo.tocsc()


def to_frame(matrix) -> pd.DataFrame:
    """Stored entries as a (row, col, value) DataFrame, in storage order."""
    items = matrix.items()
    return pd.DataFrame({
        'row': np.array([c[0] for c, _ in items], dtype=np.int64),
        'col': np.array([c[1] for c, _ in items], dtype=np.int64),
        'value': np.array([v for _, v in items], dtype=matrix.dtype),
    })
