"""
Square height grid used by the diamond-square generator.

The grid has ``2**edge_size + 1`` cells per side and is stored as a flat
array addressed as ``values[x + size * y]``.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

import numpy as np

from ..errors import GenerationError

# Returned by get_height() for coordinates outside the grid.
MISSING = None


@dataclass
class HeightField:
    """Flat height grid of side ``2**edge_size + 1``."""

    edge_size: int
    values: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self):
        if self.values is None:
            self.values = np.zeros(self.size * self.size, dtype=np.float64)
        elif self.values.shape != (self.size * self.size,):
            raise ValueError(
                f"values must have {self.size * self.size} entries, got {self.values.shape}"
            )

    @property
    def size(self) -> int:
        return 2**self.edge_size + 1

    @property
    def max_index(self) -> int:
        return self.size - 1

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x <= self.max_index and 0 <= y <= self.max_index

    def get_height(self, x: int, y: int) -> Optional[float]:
        """Return the height at (x, y), or MISSING when outside the grid."""
        if x < 0 or x > self.max_index or y < 0 or y > self.max_index:
            return MISSING
        return float(self.values[x + self.size * y])

    def set_height(self, x: int, y: int, value: float) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) outside height field of size {self.size}")
        self.values[x + self.size * y] = value

    def as_array(self) -> np.ndarray:
        """Return a (size, size) view indexed [y, x]."""
        return self.values.reshape(self.size, self.size)

    def copy(self) -> "HeightField":
        return HeightField(self.edge_size, self.values.copy())


def average(samples: Iterable[Optional[float]]) -> float:
    """
    Arithmetic mean of the samples that are not MISSING.

    Raises:
        GenerationError: If every sample is MISSING
    """
    valid = [sample for sample in samples if sample is not MISSING]
    if not valid:
        raise GenerationError("Cannot average: every neighbor sample is missing")
    return sum(valid) / len(valid)
