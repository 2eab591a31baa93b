import operator
import numpy as np
from typing import Any, Optional, Union

from .config import SparseConfig
from .constants import MatrixState, NormType, StorageOrder
from .element_types import resolve_dtype, zero
from .errors import IndexOutOfRangeError, NegativeDimensionError, StructurallyImmutableError
from .kernels import matmat, matvec, norm
from .storage import CoordinateOrder, ExpandedStorage, PackedStorage, resolve_order
from .utils import format_matrix, to_frame, to_scipy


def _split_key(key) -> tuple[int, int]:
    if isinstance(key, tuple) and len(key) == 2:
        i, j = key
    else:
        raise KeyError("Matrix indices must be a tuple of length 2")
    return operator.index(i), operator.index(j)


class EntryHandle:
    """Mutable handle onto one stored entry of a Matrix.

    The handle stays valid until the next structural change of its matrix
    (insertion, resize, compress or uncompress). Do not keep it across those.
    """

    __slots__ = ('_matrix', '_coords', '_position')

    def __init__(self, matrix: 'Matrix', coords: tuple[int, int], position: Optional[int] = None):
        self._matrix = matrix
        self._coords = coords
        # index into the packed values array, None while expanded
        self._position = position

    @property
    def value(self):
        storage = self._matrix.storage
        if self._position is None:
            return storage.entries[self._coords]
        return storage.values[self._position]

    @value.setter
    def value(self, v) -> None:
        v = self._matrix.dtype.type(v)
        storage = self._matrix.storage
        if self._position is None:
            storage.entries[self._coords] = v
        else:
            storage.values[self._position] = v

    def set(self, v) -> None:
        self.value = v

    def add(self, v) -> None:
        self.value = self.value + v

    def __repr__(self) -> str:
        return f"EntryHandle({self._coords}: {self.value})"


class Matrix:
    """
    Sparse matrix with an expanded (dictionary-of-keys) and a packed (CSR/CSC) state.

    The expanded state supports insertion and implicit growth; the packed
    state stores three arrays (inner offsets, outer indices, values) and only
    allows modification of entries that are already stored. The logical
    matrix is the same in both states: absent entries read as zero.
    """

    def __init__(self, rows: int = 0, cols: int = 0, dtype=float,
                 order: Union[StorageOrder, str] = StorageOrder.ROW_MAJOR):
        """
        Initialize an empty expanded matrix

        Args:
            rows: Number of rows
            cols: Number of columns
            dtype: Element type, any real arithmetic or complex numeric type
            order: Storage order, row-major (CSR when packed) or column-major (CSC when packed)
        """
        rows, cols = operator.index(rows), operator.index(cols)
        if rows < 0 or cols < 0:
            raise NegativeDimensionError(rows, cols)
        self._rows = rows
        self._cols = cols
        self._dtype = resolve_dtype(dtype)
        self._ordering = CoordinateOrder(resolve_order(order))
        self._storage: Union[ExpandedStorage, PackedStorage] = ExpandedStorage()

    @classmethod
    def from_dense(cls, array, order: Union[StorageOrder, str] = StorageOrder.ROW_MAJOR, dtype=None) -> 'Matrix':
        """Build an expanded matrix holding the non-zero entries of a 2-D array."""
        array = np.asarray(array)
        if array.ndim != 2:
            raise ValueError(f"from_dense expects a 2-D array, got {array.ndim} dimensions")
        result = cls(array.shape[0], array.shape[1], dtype=dtype if dtype is not None else array.dtype, order=order)
        for i, j in zip(*np.nonzero(array)):
            result[int(i), int(j)] = array[i, j]
        return result

    # ************************************
    # properties
    # ************************************

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def order(self) -> StorageOrder:
        return self._ordering.order

    @property
    def ordering(self) -> CoordinateOrder:
        return self._ordering

    @property
    def storage(self) -> Union[ExpandedStorage, PackedStorage]:
        """Current payload. Read-only use only; mutate through the accessors."""
        return self._storage

    @property
    def state(self) -> MatrixState:
        if isinstance(self._storage, PackedStorage):
            return MatrixState.PACKED
        return MatrixState.EXPANDED

    def is_packed(self) -> bool:
        return isinstance(self._storage, PackedStorage)

    @property
    def nnz(self) -> int:
        """Number of stored entries (stored zeros included)."""
        return self._storage.nnz

    # ************************************
    # accessors
    # ************************************

    def get(self, i: int, j: int):
        """Get the logical value at position (i, j).

        Returns:
            The stored value, or zero of the matrix dtype if nothing is stored.

        Raises:
            IndexOutOfRangeError: if (i, j) lies outside the matrix.
        """
        i, j = operator.index(i), operator.index(j)
        if not (0 <= i < self._rows and 0 <= j < self._cols):
            raise IndexOutOfRangeError(i, j, self._rows, self._cols)
        if isinstance(self._storage, PackedStorage):
            k = self._storage.find(*self._ordering.major_minor(i, j))
            return self._storage.values[k] if k is not None else zero(self._dtype)
        return self._storage.entries.get((i, j), zero(self._dtype))

    def set_or_insert(self, i: int, j: int) -> EntryHandle:
        """Return a mutable handle to the entry at (i, j).

        While expanded, a missing entry is inserted as zero and the matrix
        grows to hold (i, j) if needed. While packed, only stored entries can
        be reached.

        Raises:
            StructurallyImmutableError: packed and (i, j) is not stored.
            IndexOutOfRangeError: negative index.
        """
        i, j = operator.index(i), operator.index(j)
        if i < 0 or j < 0:
            raise IndexOutOfRangeError(i, j, self._rows, self._cols)

        if isinstance(self._storage, PackedStorage):
            if i >= self._rows or j >= self._cols:
                raise StructurallyImmutableError(i, j, self._rows, self._cols)
            k = self._storage.find(*self._ordering.major_minor(i, j))
            if k is None:
                raise StructurallyImmutableError(i, j, self._rows, self._cols)
            return EntryHandle(self, (i, j), k)

        if i >= self._rows or j >= self._cols:
            self.resize(max(self._rows, i + 1), max(self._cols, j + 1))
        self._storage.entries.setdefault((i, j), zero(self._dtype))
        return EntryHandle(self, (i, j))

    def add_at(self, i: int, j: int, v) -> None:
        """Add a value to the element at position (i, j)."""
        self.set_or_insert(i, j).add(v)

    def __getitem__(self, key):
        return self.get(*_split_key(key))

    def __setitem__(self, key, value) -> None:
        self.set_or_insert(*_split_key(key)).set(value)

    def __contains__(self, key) -> bool:
        """Checks if an entry is stored at position (i, j)."""
        if not (isinstance(key, tuple) and len(key) == 2):
            return False
        try:
            i, j = operator.index(key[0]), operator.index(key[1])
        except TypeError:
            return False
        if not (0 <= i < self._rows and 0 <= j < self._cols):
            return False
        if isinstance(self._storage, PackedStorage):
            return self._storage.find(*self._ordering.major_minor(i, j)) is not None
        return (i, j) in self._storage.entries

    def __len__(self) -> int:
        return self.nnz

    def __iter__(self):
        """Iterate over the stored positions in storage order."""
        return iter(coords for coords, _ in self.items())

    def items(self) -> list[tuple[tuple[int, int], Any]]:
        """Returns the stored ((i, j), value) pairs in storage order."""
        if isinstance(self._storage, ExpandedStorage):
            return self._ordering.sorted_items(self._storage.entries)
        result = []
        for m in range(self._storage.n_stripes):
            for k in range(int(self._storage.inner[m]), int(self._storage.inner[m + 1])):
                result.append((self._ordering.coords(m, int(self._storage.outer[k])), self._storage.values[k]))
        return result

    def stored_values(self) -> np.ndarray:
        """Stored values as an array, in no particular order while expanded."""
        if isinstance(self._storage, PackedStorage):
            return self._storage.values
        return np.fromiter(self._storage.entries.values(), dtype=self._dtype, count=len(self._storage.entries))

    # ************************************
    # structure
    # ************************************

    def resize(self, rows: int, cols: int) -> None:
        """Change the dimensions of an expanded matrix. No-op while packed.

        Stored entries are not purged when shrinking; shrinking below a stored
        coordinate leaves that entry out of bounds until the next compress,
        which drops it.
        """
        rows, cols = operator.index(rows), operator.index(cols)
        if rows < 0 or cols < 0:
            raise NegativeDimensionError(rows, cols)
        if isinstance(self._storage, PackedStorage):
            return
        self._rows = rows
        self._cols = cols

    def compress(self) -> None:
        """Pack the expanded entries into inner / outer / values arrays."""
        if isinstance(self._storage, PackedStorage):
            return

        n_major = self._ordering.major_size(self._rows, self._cols)
        n_minor = self._ordering.minor_size(self._rows, self._cols)
        # sorted by (major, minor), so entries arrive grouped by stripe
        packed = [(self._ordering.key(coords), v) for coords, v in self._ordering.sorted_items(self._storage.entries)]
        packed = [((m, n), v) for (m, n), v in packed if m < n_major and n < n_minor]

        inner = np.zeros(n_major + 1, dtype=np.intp)
        outer = np.empty(len(packed), dtype=np.intp)
        values = np.empty(len(packed), dtype=self._dtype)

        k = 0
        for m in range(n_major):
            inner[m] = k
            while k < len(packed) and packed[k][0][0] == m:
                outer[k] = packed[k][0][1]
                values[k] = packed[k][1]
                k += 1
        inner[n_major] = k

        self._storage = PackedStorage(inner=inner, outer=outer, values=values)

    def uncompress(self) -> None:
        """Rebuild the dictionary-of-keys form from the packed arrays."""
        if isinstance(self._storage, ExpandedStorage):
            return

        packed = self._storage
        entries = {}
        for m in range(packed.n_stripes):
            for k in range(int(packed.inner[m]), int(packed.inner[m + 1])):
                entries[self._ordering.coords(m, int(packed.outer[k]))] = packed.values[k]

        self._storage = ExpandedStorage(entries=entries)

    # ************************************
    # kernels
    # ************************************

    def multiply(self, other) -> np.ndarray:
        """Multiply by a dense vector, or by a Matrix with exactly one column."""
        if isinstance(other, Matrix):
            return matmat(self, other)
        return matvec(self, other)

    def __matmul__(self, other) -> np.ndarray:
        return self.multiply(other)

    def norm(self, kind: Union[NormType, str] = NormType.FROBENIUS):
        """Compute the ONE, INFINITY or FROBENIUS norm."""
        return norm(self, kind)

    # ************************************
    # conversions and utilities
    # ************************************

    def to_dense(self) -> np.ndarray:
        result = np.zeros(self.shape, dtype=self._dtype)
        for (i, j), v in self.items():
            if i < self._rows and j < self._cols:
                result[i, j] = v
        return result

    def to_scipy(self):
        return to_scipy(self)

    def to_frame(self):
        return to_frame(self)

    def equals(self, other: 'Matrix', tol: float = 0.0) -> bool:
        """Same shape and same logical values, regardless of state or storage order."""
        if not isinstance(other, Matrix) or self.shape != other.shape:
            return False
        if tol == 0.0:
            return bool(np.array_equal(self.to_dense(), other.to_dense()))
        return bool(np.allclose(self.to_dense(), other.to_dense(), rtol=tol, atol=tol))

    def copy(self) -> 'Matrix':
        """Returns a copy of the matrix, in the same state."""
        result = Matrix(self._rows, self._cols, dtype=self._dtype, order=self.order)
        if isinstance(self._storage, PackedStorage):
            result._storage = PackedStorage(inner=self._storage.inner.copy(),
                                            outer=self._storage.outer.copy(),
                                            values=self._storage.values.copy())
        else:
            result._storage = ExpandedStorage(entries=self._storage.entries.copy())
        return result

    def read(self, path: str, config: SparseConfig = SparseConfig()) -> 'Matrix':
        """Read a Matrix Market file into this (expanded) matrix."""
        from .matrix_market import read_matrix_market
        return read_matrix_market(path, matrix=self, config=config)

    def print(self, config: SparseConfig = SparseConfig()) -> None:
        print(format_matrix(self, config))

    def __repr__(self) -> str:
        """String representation of the matrix."""
        header = f"Matrix(shape={self.shape}, dtype={self._dtype}, order={self.order.value}, state={self.state.value}"
        if self.nnz == 0:
            return header + ", {})"
        items_str = ", ".join(f"{k}: {v}" for k, v in self.items())
        return f"{header}, {{{items_str}}})"
