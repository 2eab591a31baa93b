
class SparseConfigError(ValueError):
    """Base class for sparse matrix configuration errors."""
    pass

class SparseRuntimeError(ValueError):
    """Base class for sparse matrix runtime errors."""
    pass



class UnsupportedElementTypeError(SparseConfigError):
    """Raised when the element type is neither real arithmetic nor complex-of-real."""

    def __init__(self, dtype):
        self.dtype = dtype
        message = f"Unsupported element type '{dtype}'. Must be an integer, floating or complex numeric type"
        super().__init__(message)


class InvalidStorageOrderError(SparseConfigError):
    """Raised when an unknown storage order is provided."""

    def __init__(self, order, valid_orders: list):
        self.order = order
        self.valid_orders = valid_orders
        message = f"Invalid storage order '{order}'. Must be one of: {valid_orders}"
        super().__init__(message)


class InvalidNormTypeError(SparseConfigError):
    """Raised when an unknown norm kind is requested."""

    def __init__(self, kind, valid_kinds: list = None):
        self.kind = kind
        self.valid_kinds = valid_kinds
        if valid_kinds is None:
            message = f"Invalid norm type '{kind}'. "
        else:
            message = f"Invalid norm type '{kind}'. Must be one of: {valid_kinds}"
        super().__init__(message)


class NegativeDimensionError(SparseConfigError):
    """Raised when a matrix is constructed or resized with a negative dimension."""

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        message = f"Matrix dimensions must be non-negative, got ({rows}, {cols})"
        super().__init__(message)


class InvalidSparseConfigError(SparseConfigError):
    """Raised when a SparseConfig field holds an invalid value."""

    def __init__(self, field_name: str, value, reason: str):
        self.field_name = field_name
        self.value = value
        message = f"Invalid value {value!r} for '{field_name}': {reason}"
        super().__init__(message)


class IndexOutOfRangeError(SparseRuntimeError, IndexError):
    """Raised when a read-only access falls outside the matrix bounds."""

    def __init__(self, i: int, j: int, rows: int, cols: int):
        self.i = i
        self.j = j
        self.rows = rows
        self.cols = cols
        message = f"Index ({i}, {j}) out of range for matrix of shape ({rows}, {cols})"
        super().__init__(message)


class StructurallyImmutableError(SparseRuntimeError):
    """Raised when a mutating access would change the structure of a packed matrix."""

    def __init__(self, i: int, j: int, rows: int, cols: int):
        self.i = i
        self.j = j
        self.rows = rows
        self.cols = cols
        if i >= rows or j >= cols:
            reason = f"({i}, {j}) is outside the matrix shape ({rows}, {cols})"
        else:
            reason = f"no entry is stored at ({i}, {j})"
        message = f"Matrix is packed, cannot add new elements: {reason}. Call uncompress() first"
        super().__init__(message)


class DimensionMismatchError(SparseRuntimeError):
    """Raised when the operands of a product have incompatible shapes or storage orders."""

    def __init__(self, operation: str, expected, got):
        self.operation = operation
        self.expected = expected
        self.got = got
        message = f"Dimension mismatch in {operation}: expected {expected}, got {got}"
        super().__init__(message)


class MatrixMarketIOError(SparseRuntimeError):
    """Raised when a Matrix Market file cannot be opened or read."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Cannot read Matrix Market file '{path}'{f': {reason}' if reason else ''}"
        super().__init__(message)


class MatrixMarketParseError(SparseRuntimeError):
    """Raised when a Matrix Market file is malformed or uses an unsupported variant."""

    def __init__(self, path: str, line_number: int, reason: str):
        self.path = path
        self.line_number = line_number
        self.reason = reason

        location = f"line {line_number}" if line_number else "end of file"
        message = f"Malformed Matrix Market file '{path}' at {location}: {reason}"
        super().__init__(message)
