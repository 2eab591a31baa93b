"""
Sparse matrices with a dictionary-of-keys state for mutation and a packed CSR/CSC state for fast read-only kernels.

Provides matrix-vector products, One / Infinity / Frobenius norms and Matrix Market ingestion.
"""

__version__ = "0.1.0"

from .constants import StorageOrder, MatrixState, NormType
from .sparse_matrix import Matrix, EntryHandle
from .matrix_market import read_matrix_market
from .utils import generate_random_vector, format_matrix, to_scipy, to_frame
from .element_types import is_real_or_complex
from .config import SparseConfig
from .errors import (
    SparseConfigError,
    SparseRuntimeError,
    IndexOutOfRangeError,
    StructurallyImmutableError,
    DimensionMismatchError,
    MatrixMarketIOError,
    MatrixMarketParseError,
)

__all__ = [
    "Matrix",
    "EntryHandle",
    "StorageOrder",
    "MatrixState",
    "NormType",
    "read_matrix_market",
    "generate_random_vector",
    "format_matrix",
    "to_scipy",
    "to_frame",
    "is_real_or_complex",
    "SparseConfig",
    "SparseConfigError",
    "SparseRuntimeError",
    "IndexOutOfRangeError",
    "StructurallyImmutableError",
    "DimensionMismatchError",
    "MatrixMarketIOError",
    "MatrixMarketParseError",
]
