import numpy as np
from itertools import groupby
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from .constants import StorageOrder
from .errors import InvalidStorageOrderError


def resolve_order(order) -> StorageOrder:
    """Accept a StorageOrder or its string value ('row' / 'column')."""
    if isinstance(order, StorageOrder):
        return order
    try:
        return StorageOrder(order)
    except ValueError:
        raise InvalidStorageOrderError(order, [o.value for o in StorageOrder]) from None


class CoordinateOrder:
    """Lexicographic order over (row, col) keys, primary axis chosen by the storage order.

    Row-major compares rows first then columns, column-major compares columns
    first then rows. Walking a set of keys in this order visits the major axis
    monotonically, which is what packing relies on.
    """

    def __init__(self, order: StorageOrder):
        self.order = resolve_order(order)
        self.row_major = self.order is StorageOrder.ROW_MAJOR

    def key(self, coords: tuple[int, int]) -> tuple[int, int]:
        """Sort key for ``coords``: (major, minor)."""
        i, j = coords
        return (i, j) if self.row_major else (j, i)

    def major_minor(self, i: int, j: int) -> tuple[int, int]:
        return (i, j) if self.row_major else (j, i)

    def coords(self, major: int, minor: int) -> tuple[int, int]:
        """Inverse of major_minor."""
        return (major, minor) if self.row_major else (minor, major)

    def major_size(self, rows: int, cols: int) -> int:
        return rows if self.row_major else cols

    def minor_size(self, rows: int, cols: int) -> int:
        return cols if self.row_major else rows

    def sorted_items(self, entries: dict) -> list[tuple[tuple[int, int], Any]]:
        """Entries of ``entries`` as ((i, j), value) pairs in this order."""
        return sorted(entries.items(), key=lambda item: self.key(item[0]))

    def stripes(self, entries: dict) -> Iterator[tuple[int, list]]:
        """Yield (major, [((i, j), value), ...]) for every non-empty stripe, in order."""
        for major, group in groupby(self.sorted_items(entries), key=lambda item: self.key(item[0])[0]):
            yield major, list(group)

    def __eq__(self, other) -> bool:
        return isinstance(other, CoordinateOrder) and self.order is other.order

    def __repr__(self) -> str:
        return f"CoordinateOrder({self.order.value})"


@dataclass
class ExpandedStorage:
    """Dictionary-of-keys payload: (i, j) -> value."""
    entries: dict[tuple[int, int], Any] = field(default_factory=dict)

    @property
    def nnz(self) -> int:
        return len(self.entries)


@dataclass
class PackedStorage:
    """Compressed payload (CSR for row-major, CSC for column-major).

    ``inner`` holds ``major + 1`` offsets delimiting the stripes of ``outer``
    and ``values``; ``outer`` holds the minor-axis index of every stored entry.
    """
    inner: np.ndarray
    outer: np.ndarray
    values: np.ndarray

    @property
    def nnz(self) -> int:
        return len(self.values)

    @property
    def n_stripes(self) -> int:
        return len(self.inner) - 1

    def stripe(self, major: int) -> slice:
        return slice(int(self.inner[major]), int(self.inner[major + 1]))

    def find(self, major: int, minor: int) -> Optional[int]:
        """Position of (major, minor) in ``values``, or None if it is not stored.

        Binary search over the stripe of ``outer``, which is strictly increasing.
        """
        start = int(self.inner[major])
        end = int(self.inner[major + 1])
        k = start + int(np.searchsorted(self.outer[start:end], minor))
        if k < end and self.outer[k] == minor:
            return k
        return None

    def stripe_ids(self) -> np.ndarray:
        """Major index of every stored entry, aligned with ``outer``."""
        return np.repeat(np.arange(self.n_stripes, dtype=np.intp), np.diff(self.inner))
