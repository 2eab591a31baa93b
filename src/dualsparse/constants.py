from enum import Enum


MATRIX_MARKET_BANNER = "%%MatrixMarket"
MATRIX_MARKET_COMMENT = "%"
PRINT_MAX_DIM = 20


class StorageOrder(Enum):
    ROW_MAJOR = "row"
    COLUMN_MAJOR = "column"


class MatrixState(Enum):
    EXPANDED = "expanded"
    PACKED = "packed"


class NormType(Enum):
    ONE = "one"
    INFINITY = "infinity"
    FROBENIUS = "frobenius"


NORM_ALIASES = {
    "1": NormType.ONE,
    "one": NormType.ONE,
    "inf": NormType.INFINITY,
    "infinity": NormType.INFINITY,
    "fro": NormType.FROBENIUS,
    "frobenius": NormType.FROBENIUS,
}


class MatrixMarketField:
    REAL = "real"
    DOUBLE = "double"
    INTEGER = "integer"
    COMPLEX = "complex"
