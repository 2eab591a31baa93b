import os
import time
from dataclasses import dataclass
from typing import Iterator, Optional, TextIO, Union

from .config import SparseConfig
from .constants import MATRIX_MARKET_BANNER, MATRIX_MARKET_COMMENT, MatrixMarketField, StorageOrder
from .element_types import is_complex
from .errors import MatrixMarketIOError, MatrixMarketParseError
from .sparse_matrix import Matrix


SUPPORTED_FIELDS = [MatrixMarketField.REAL, MatrixMarketField.DOUBLE, MatrixMarketField.INTEGER, MatrixMarketField.COMPLEX]


@dataclass(frozen=True)
class MatrixMarketHeader:
    """Qualifiers of the %%MatrixMarket banner line."""
    object: str = "matrix"
    format: str = "coordinate"
    field: str = MatrixMarketField.REAL
    symmetry: str = "general"


def parse_banner(path: str, line: str) -> MatrixMarketHeader:
    """Parse the banner line, e.g. ``%%MatrixMarket matrix coordinate real general``.

    Missing qualifiers default to ``matrix coordinate real general``. Only
    general coordinate matrices with real, integer or complex values are
    accepted.
    """
    if not line.startswith(MATRIX_MARKET_BANNER):
        raise MatrixMarketParseError(path, 1, f"first line must start with '{MATRIX_MARKET_BANNER}'")

    qualifiers = [q.lower() for q in line[len(MATRIX_MARKET_BANNER):].split()]
    if len(qualifiers) > 4:
        raise MatrixMarketParseError(path, 1, f"too many banner qualifiers: {qualifiers}")
    defaults = MatrixMarketHeader()
    header = MatrixMarketHeader(*(qualifiers + [defaults.object, defaults.format, defaults.field, defaults.symmetry][len(qualifiers):]))

    if header.object != "matrix":
        raise MatrixMarketParseError(path, 1, f"unsupported object '{header.object}'")
    if header.format != "coordinate":
        raise MatrixMarketParseError(path, 1, f"only coordinate format is supported, got '{header.format}'")
    if header.field not in SUPPORTED_FIELDS:
        raise MatrixMarketParseError(path, 1, f"unsupported field '{header.field}'. Must be one of: {SUPPORTED_FIELDS}")
    if header.symmetry != "general":
        raise MatrixMarketParseError(path, 1, f"only general symmetry is supported, got '{header.symmetry}'")
    return header


def _data_lines(f: TextIO) -> Iterator[tuple[int, str]]:
    # line numbers start at 2, the banner is line 1
    for line_number, line in enumerate(f, start=2):
        stripped = line.strip()
        if not stripped or stripped.startswith(MATRIX_MARKET_COMMENT):
            continue
        yield line_number, stripped


def _parse_size(path: str, line_number: int, line: str) -> tuple[int, int, int]:
    parts = line.split()
    if len(parts) != 3:
        raise MatrixMarketParseError(path, line_number, f"expected 'rows cols nnz', got {line!r}")
    try:
        rows, cols, nnz = (int(p) for p in parts)
    except ValueError:
        raise MatrixMarketParseError(path, line_number, f"dimensions must be integers, got {line!r}") from None
    if rows < 0 or cols < 0 or nnz < 0:
        raise MatrixMarketParseError(path, line_number, f"dimensions must be non-negative, got {line!r}")
    return rows, cols, nnz


def _parse_entry(path: str, line_number: int, line: str, header: MatrixMarketHeader, rows: int, cols: int):
    parts = line.split()
    n_expected = 4 if header.field == MatrixMarketField.COMPLEX else 3
    if len(parts) != n_expected:
        raise MatrixMarketParseError(path, line_number, f"expected {n_expected} fields, got {line!r}")
    try:
        i, j = int(parts[0]), int(parts[1])
        if header.field == MatrixMarketField.COMPLEX:
            value = complex(float(parts[2]), float(parts[3]))
        elif header.field == MatrixMarketField.INTEGER:
            value = int(parts[2])
        else:
            value = float(parts[2])
    except ValueError:
        raise MatrixMarketParseError(path, line_number, f"malformed entry {line!r}") from None

    # 1-based in the file
    if not (1 <= i <= rows and 1 <= j <= cols):
        raise MatrixMarketParseError(path, line_number, f"entry ({i}, {j}) outside the declared shape ({rows}, {cols})")
    return i - 1, j - 1, value


def read_matrix_market(path: Union[str, os.PathLike], matrix: Optional[Matrix] = None, dtype=float,
                       order: Union[StorageOrder, str] = StorageOrder.ROW_MAJOR,
                       config: SparseConfig = SparseConfig()) -> Matrix:
    """
    Read a coordinate Matrix Market file into an expanded matrix.

    Args:
        path: File to read
        matrix: Matrix to fill. If None a new one is created from dtype and order
        dtype: Element type of the new matrix (ignored when matrix is given)
        order: Storage order of the new matrix (ignored when matrix is given)
        config: SparseConfig; progress is printed when config.verbose is set

    Returns:
        The filled matrix. It is resized to the declared shape and every
        triplet is written through the mutable accessor, so a packed matrix
        only accepts entries it already stores. On failure, entries read
        before the bad line stay in the matrix.
    """
    path = os.fspath(path)
    if matrix is None:
        matrix = Matrix(0, 0, dtype=dtype, order=order)

    st = time.time()
    if config.verbose:
        print(f"Reading Matrix Market file {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            header = parse_banner(path, f.readline())
            if header.field == MatrixMarketField.COMPLEX and not is_complex(matrix.dtype):
                raise MatrixMarketParseError(path, 1, f"complex-valued file cannot be read into a matrix of dtype {matrix.dtype}")

            lines = _data_lines(f)
            size_line = next(lines, None)
            if size_line is None:
                raise MatrixMarketParseError(path, 0, "missing size line")
            rows, cols, nnz = _parse_size(path, *size_line)
            matrix.resize(rows, cols)

            for count in range(nnz):
                entry_line = next(lines, None)
                if entry_line is None:
                    raise MatrixMarketParseError(path, 0, f"expected {nnz} entries, found {count}")
                i, j, value = _parse_entry(path, *entry_line, header, rows, cols)
                matrix[i, j] = value
    except UnicodeDecodeError as e:
        raise MatrixMarketParseError(path, 0, f"file is not valid text: {e.reason}") from e
    except OSError as e:
        raise MatrixMarketIOError(path, e.strerror or str(e)) from e

    if config.verbose:
        print(f"  {rows} x {cols}, {nnz} entries")
        print(f"  took: {time.time() - st} seconds")
    return matrix
