import os
import sys
import pytest
import numpy as np
import pandas as pd
import scipy.sparse as sp

# Add the src directory to Python path to import local dualsparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from dualsparse import (Matrix, StorageOrder, SparseConfig, generate_random_vector,
                        format_matrix, is_real_or_complex)
from dualsparse.errors import InvalidSparseConfigError
from dualsparse.element_types import magnitude_dtype, resolve_dtype
from test_utils import build_s1_matrix, S1_ENTRIES


def test_element_type_predicate():
    for t in [int, float, complex, np.int8, np.uint16, np.float32, np.complex64, 'float64']:
        assert is_real_or_complex(t), t
    for t in [bool, np.bool_, str, object, 'not a type']:
        assert not is_real_or_complex(t), t
    assert magnitude_dtype(np.dtype(np.complex128)) == np.float64
    assert magnitude_dtype(np.dtype(np.complex64)) == np.float32
    assert magnitude_dtype(np.dtype(np.int32)) == np.int32
    assert resolve_dtype(complex) == np.complex128


def test_random_vector():
    m = Matrix(4, 6)
    v = generate_random_vector(m, SparseConfig(seed=1))
    assert v.shape == (6,)
    assert v.dtype == np.float64
    assert np.all((v >= 0) & (v < 1))
    assert np.array_equal(v, generate_random_vector(m, SparseConfig(seed=1)))

    v = generate_random_vector(m, SparseConfig(seed=2, random_low=-3, random_high=-2))
    assert np.all((v >= -3) & (v < -2))


def test_random_vector_dtypes():
    c = generate_random_vector(Matrix(2, 5, dtype=complex), SparseConfig(seed=0))
    assert c.dtype == np.complex128
    assert np.all(c.imag != 0)
    i = generate_random_vector(Matrix(2, 50, dtype=np.int32), SparseConfig(seed=0, random_low=0, random_high=3))
    assert i.dtype == np.int32
    assert set(i.tolist()) <= {0, 1, 2, 3}
    assert generate_random_vector(Matrix(3, 0)).shape == (0,)


def test_config_validation():
    SparseConfig().validate()
    with pytest.raises(InvalidSparseConfigError):
        SparseConfig(print_max_dim=-1).validate()
    with pytest.raises(InvalidSparseConfigError):
        SparseConfig(random_low=1.0, random_high=1.0).validate()
    with pytest.raises(ValueError):
        generate_random_vector(Matrix(1, 1), SparseConfig(seed=-5))


def test_format_expanded_grid():
    text = format_matrix(build_s1_matrix())
    lines = text.splitlines()
    # header line plus one line per row, zeros included
    assert len(lines) == 6
    assert lines[3].split() == ['2', '0.0', '8.0', '6.0']


def test_format_packed_arrays():
    m = build_s1_matrix(StorageOrder.COLUMN_MAJOR)
    m.compress()
    text = format_matrix(m)
    assert "column-major" in text
    assert "inner:  [0, 3, 6, 8]" in text
    assert "outer:  [0, 1, 4, 1, 2, 3, 0, 2]" in text


def test_format_declines_large_matrices(capsys):
    m = Matrix(21, 3)
    assert "too large" in format_matrix(m)
    assert "too large" not in format_matrix(m, SparseConfig(print_max_dim=30))
    Matrix(3, 25).print()
    assert "too large" in capsys.readouterr().out
    build_s1_matrix().print()
    assert "8.0" in capsys.readouterr().out


def test_to_scipy():
    for order, kind in [(StorageOrder.ROW_MAJOR, sp.csr_matrix), (StorageOrder.COLUMN_MAJOR, sp.csc_matrix)]:
        m = build_s1_matrix(order)
        expanded = m.to_scipy()
        assert isinstance(expanded, kind)
        m.compress()
        packed = m.to_scipy()
        assert isinstance(packed, kind)
        assert np.array_equal(packed.toarray(), m.to_dense())
        assert np.array_equal(expanded.toarray(), m.to_dense())
        assert np.array_equal(packed.indptr, m.storage.inner)


def test_to_frame():
    m = build_s1_matrix(StorageOrder.COLUMN_MAJOR)
    df = m.to_frame()
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ['row', 'col', 'value']
    assert len(df) == len(S1_ENTRIES)
    # column-major order: sorted by column, then row
    assert df['col'].is_monotonic_increasing
    assert df.iloc[0].tolist() == [0, 0, 1.0]
    m.compress()
    assert m.to_frame().equals(df)
