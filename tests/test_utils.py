import os
import numpy as np

from dualsparse import Matrix, StorageOrder


S1_ENTRIES = {
    (0, 0): 1.0,
    (0, 2): 3.0,
    (1, 0): 4.0,
    (1, 1): 5.0,
    (2, 1): 8.0,
    (2, 2): 6.0,
    (3, 1): 1.0,
    (4, 0): 2.0,
}


def build_s1_matrix(order: StorageOrder = StorageOrder.ROW_MAJOR) -> Matrix:
    """The 5x3 example matrix, grown implicitly from an empty one."""
    m = Matrix(0, 0, dtype=np.float64, order=order)
    for (i, j), v in S1_ENTRIES.items():
        m[i, j] = v
    return m


def random_matrix(rows: int, cols: int, density: float, order: StorageOrder, seed: int, dtype=np.float64) -> Matrix:
    rng = np.random.default_rng(seed)
    dense = rng.uniform(-5, 5, size=(rows, cols))
    if np.issubdtype(np.dtype(dtype), np.complexfloating):
        dense = dense + 1j * rng.uniform(-5, 5, size=(rows, cols))
    dense[rng.random((rows, cols)) > density] = 0
    return Matrix.from_dense(dense.astype(dtype), order=order)


def assert_packed_shape(matrix: Matrix) -> None:
    """Check the inner / outer / values layout of a packed matrix."""
    assert matrix.is_packed()
    storage = matrix.storage
    n_major = matrix.rows if matrix.order is StorageOrder.ROW_MAJOR else matrix.cols
    n_minor = matrix.cols if matrix.order is StorageOrder.ROW_MAJOR else matrix.rows

    assert len(storage.inner) == n_major + 1
    assert storage.inner[0] == 0
    assert np.all(np.diff(storage.inner) >= 0)
    assert storage.inner[-1] == len(storage.outer) == len(storage.values)
    for m in range(n_major):
        stripe = storage.outer[storage.inner[m]:storage.inner[m + 1]]
        assert np.all(np.diff(stripe) > 0), f"stripe {m} is not strictly increasing: {stripe}"
        assert np.all((stripe >= 0) & (stripe < n_minor))


def write_mtx(directory, name: str, text: str) -> str:
    fp = os.path.join(str(directory), name)
    with open(fp, 'w') as f:
        f.write(text)
    return fp
