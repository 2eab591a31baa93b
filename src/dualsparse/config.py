from typing import Optional
from dataclasses import dataclass

from .constants import PRINT_MAX_DIM
from .errors import InvalidSparseConfigError


@dataclass
class SparseConfig:
    """
    Configuration for the collaborators around the sparse matrix.

    This class defines the parameters used when printing matrices, drawing
    random vectors for products and reading Matrix Market files.
    """

    print_max_dim: int = PRINT_MAX_DIM
    """Largest number of rows or columns that print() will render. Larger matrices are declined."""

    random_low: float = 0.0
    """Lower bound (inclusive) of the uniform distribution used by generate_random_vector."""

    random_high: float = 1.0
    """Upper bound (exclusive) of the uniform distribution used by generate_random_vector."""

    seed: Optional[int] = None
    """Seed for the random generator. If None, fresh entropy is drawn on every call."""

    verbose: bool = False
    """Whether the Matrix Market reader reports progress and timing."""

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.print_max_dim < 0:
            raise InvalidSparseConfigError('print_max_dim', self.print_max_dim, "must be non-negative")
        if self.random_low >= self.random_high:
            raise InvalidSparseConfigError('random_high', self.random_high, f"must be greater than random_low ({self.random_low})")
        if self.seed is not None and self.seed < 0:
            raise InvalidSparseConfigError('seed', self.seed, "must be None or non-negative")
