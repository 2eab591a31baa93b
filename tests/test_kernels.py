import os
import sys
import math
import pytest
import numpy as np
import scipy.sparse as sp
from scipy.sparse.linalg import norm as sparse_norm

# Add the src directory to Python path to import local dualsparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from dualsparse import Matrix, StorageOrder, NormType, DimensionMismatchError
from dualsparse.errors import InvalidNormTypeError
from test_utils import build_s1_matrix, random_matrix


ORDERS = [StorageOrder.ROW_MAJOR, StorageOrder.COLUMN_MAJOR]
NORMS = [NormType.ONE, NormType.INFINITY, NormType.FROBENIUS]


@pytest.fixture(params=ORDERS, ids=['row', 'column'])
def order(request) -> StorageOrder:
    return request.param


def test_s1_product(order):
    m = build_s1_matrix(order)
    expected = [10.0, 14.0, 34.0, 2.0, 2.0]
    assert np.allclose(m @ [1, 2, 3], expected)
    m.compress()
    assert np.allclose(m @ np.array([1.0, 2.0, 3.0]), expected)
    assert np.allclose(m.multiply([1, 2, 3]), expected)


def test_s1_norms(order):
    m = build_s1_matrix(order)
    dense = m.to_dense()
    for packed in (False, True):
        if packed:
            m.compress()
        # largest column sum is column 1 (5 + 8 + 1), largest row sum is row 2 (8 + 6)
        assert m.norm(NormType.ONE) == pytest.approx(14.0)
        assert m.norm(NormType.INFINITY) == pytest.approx(14.0)
        assert m.norm(NormType.FROBENIUS) == pytest.approx(math.sqrt(156.0))
        assert m.norm('one') == pytest.approx(np.linalg.norm(dense, 1))
        assert m.norm('inf') == pytest.approx(np.linalg.norm(dense, np.inf))
        assert m.norm('fro') == pytest.approx(np.linalg.norm(dense, 'fro'))


def test_one_and_infinity_differ():
    m = Matrix(2, 3)
    m[0, 0] = 1
    m[0, 1] = -2
    m[0, 2] = 3
    m[1, 2] = 4
    for order in ORDERS:
        for packed in (False, True):
            a = Matrix.from_dense(m.to_dense(), order=order)
            if packed:
                a.compress()
            assert a.norm(NormType.ONE) == pytest.approx(7.0)
            assert a.norm(NormType.INFINITY) == pytest.approx(6.0)


def test_product_is_representation_invariant(order):
    rng = np.random.default_rng(3)
    for seed in range(6):
        m = random_matrix(13, 8, 0.3, order, seed)
        v = rng.normal(size=8)
        expanded = m @ v
        m.compress()
        packed = m @ v
        assert np.allclose(expanded, packed)
        assert np.allclose(packed, m.to_scipy() @ v)


def test_norms_are_representation_invariant(order):
    for seed in range(6):
        m = random_matrix(10, 12, 0.35, order, seed)
        before = {kind: m.norm(kind) for kind in NORMS}
        m.compress()
        for kind in NORMS:
            assert m.norm(kind) == pytest.approx(before[kind])
        dense = m.to_dense()
        assert before[NormType.ONE] == pytest.approx(np.abs(dense).sum(axis=0).max())
        assert before[NormType.INFINITY] == pytest.approx(np.abs(dense).sum(axis=1).max())


def test_orders_agree():
    for seed in range(4):
        row = random_matrix(9, 7, 0.3, StorageOrder.ROW_MAJOR, seed)
        col = Matrix.from_dense(row.to_dense(), order=StorageOrder.COLUMN_MAJOR)
        v = np.arange(7, dtype=float)
        row.compress()
        col.compress()
        assert np.allclose(row @ v, col @ v)
        for kind in NORMS:
            assert row.norm(kind) == pytest.approx(col.norm(kind))


def test_complex_diagonal_product():
    a = Matrix(3, 3, dtype=complex)
    a[0, 0] = 1 + 2j
    a[1, 1] = 3 + 4j
    a[2, 2] = 5 + 6j
    v = Matrix(3, 1, dtype=complex)
    v[0, 0] = 1 + 1j
    v[1, 0] = 2 + 2j
    v[2, 0] = 3 + 3j

    expected = np.array([-1 + 3j, -2 + 14j, -3 + 33j])
    assert np.allclose(a @ v, expected)
    assert np.allclose(a @ np.array([1 + 1j, 2 + 2j, 3 + 3j]), expected)
    a.compress()
    v.compress()
    assert np.allclose(a @ v, expected)


def test_complex_norms_are_real():
    a = Matrix(2, 2, dtype=np.complex128)
    a[0, 0] = 3 + 4j
    a[1, 0] = 1j
    a[1, 1] = 6 + 8j
    for packed in (False, True):
        if packed:
            a.compress()
        one = a.norm(NormType.ONE)
        assert np.isrealobj(one)
        assert one == pytest.approx(10.0)
        assert a.norm(NormType.INFINITY) == pytest.approx(11.0)
        assert a.norm(NormType.FROBENIUS) == pytest.approx(math.sqrt(25 + 1 + 100))


def test_empty_norms(order):
    m = Matrix(0, 0, order=order)
    for kind in NORMS:
        assert m.norm(kind) == 0
    m = Matrix(3, 4, order=order)
    m.compress()
    for kind in NORMS:
        assert m.norm(kind) == 0


def test_invalid_norm():
    with pytest.raises(InvalidNormTypeError):
        Matrix(2, 2).norm('two')


def test_product_dimension_mismatch(order):
    m = build_s1_matrix(order)
    with pytest.raises(DimensionMismatchError):
        m @ [1, 2]
    with pytest.raises(DimensionMismatchError):
        m @ np.ones((3, 1))
    m.compress()
    with pytest.raises(DimensionMismatchError):
        m @ [1, 2, 3, 4]


def test_one_column_matrix_product(order):
    m = build_s1_matrix(order)
    b = Matrix(3, 1, order=order)
    b[0, 0] = 1
    b[2, 0] = 3
    # b[1, 0] is an implicit zero and must not shift the others
    expected = m.to_dense() @ np.array([1.0, 0.0, 3.0])
    assert np.allclose(m @ b, expected)
    m.compress()
    b.compress()
    assert np.allclose(m.multiply(b), expected)


def test_matrix_product_errors():
    m = build_s1_matrix(StorageOrder.ROW_MAJOR)
    with pytest.raises(DimensionMismatchError):
        m @ Matrix(3, 2)
    with pytest.raises(DimensionMismatchError):
        m @ Matrix(3, 1, order=StorageOrder.COLUMN_MAJOR)
    with pytest.raises(DimensionMismatchError):
        m @ Matrix(4, 1)


def test_result_dtype():
    m = Matrix(2, 2, dtype=np.int64)
    m[0, 0] = 2
    m[1, 1] = 3
    assert (m @ np.array([1, 1])).dtype == np.int64
    assert (m @ np.array([0.5, 0.5])).dtype == np.float64
    m.compress()
    assert np.array_equal(m @ np.array([1, 1]), [2, 3])


def test_scipy_reference_on_larger_matrix(order):
    m = random_matrix(60, 45, 0.05, order, seed=21)
    v = np.linspace(-1, 1, 45)
    reference = sp.csr_matrix(m.to_dense())
    assert np.allclose(m @ v, reference @ v)
    m.compress()
    assert np.allclose(m @ v, reference @ v)
    assert m.norm(NormType.ONE) == pytest.approx(sparse_norm(reference, 1))
    assert m.norm(NormType.INFINITY) == pytest.approx(sparse_norm(reference, np.inf))
    assert m.norm(NormType.FROBENIUS) == pytest.approx(sparse_norm(reference, 'fro'))
